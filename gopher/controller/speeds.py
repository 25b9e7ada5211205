#!/usr/bin/env python3
"""
speeds.py - Named cursor speeds, cycled with a command button.

CURSOR_SPEED syntax: comma separated entries, either NAME=value or a bare value.
Bare values are named by their position among the unnamed entries ("1", "2", ...).
Values outside (0.0001, 1.0] are dropped.
"""

CUR_SPEED_MIN = 0.0001
CUR_SPEED_MAX = 1.0

DEFAULT_SPEEDS = (
    ("ULTRALOW", 0.005),
    ("LOW", 0.015),
    ("MED", 0.025),
    # speeds ascend: HIGH is 0.04, not 0.004
    ("HIGH", 0.04),
)


def parse_cursor_speeds(value: str, log=None) -> list[tuple[str, float]]:
    speeds = []
    position = 1
    for entry in (value or "").split(","):
        entry = entry.strip()
        if not entry:
            continue
        if "=" in entry:
            name, raw = [p.strip() for p in entry.split("=", 1)]
        else:
            name, raw = str(position), entry
            position += 1

        try:
            speed = float(raw)
        except ValueError:
            speed = 0.0

        if CUR_SPEED_MIN < speed <= CUR_SPEED_MAX:
            speeds.append((name, speed))
        elif log:
            log.warning(f"[SPEED] Ignoring cursor speed '{entry}' (allowed: {CUR_SPEED_MIN} < speed <= {CUR_SPEED_MAX})")
    return speeds


class SpeedTable:
    def __init__(self, entries=None):
        self.entries: list[tuple[str, float]] = list(entries or DEFAULT_SPEEDS)
        self.index = 0

    @classmethod
    def from_string(cls, value: str, log=None) -> "SpeedTable":
        return cls(parse_cursor_speeds(value, log))

    @property
    def name(self) -> str:
        return self.entries[self.index][0]

    @property
    def speed(self) -> float:
        return self.entries[self.index][1]

    @property
    def names(self) -> list[str]:
        return [name for name, _ in self.entries]

    def advance(self) -> float:
        self.index = (self.index + 1) % len(self.entries)
        return self.speed

    def __len__(self) -> int:
        return len(self.entries)
