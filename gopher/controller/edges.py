#!/usr/bin/env python3
"""
edges.py - Per-button edge detection, tick over tick.

    UP -> JUST_DOWN (one tick) -> DOWN (n ticks) -> JUST_UP (one tick) -> UP

A button held longer than long_press_ms additionally reports held_long.
All buttons are registered up front; observing an unknown button is an error.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, NamedTuple

LONG_PRESS_MS = 200


class EdgePhase(Enum):
    UP = "up"
    JUST_DOWN = "just_down"
    DOWN = "down"
    JUST_UP = "just_up"


class EdgeResult(NamedTuple):
    is_down: bool = False
    is_up: bool = False
    is_held_long: bool = False


@dataclass
class ButtonEdgeState:
    was_down_last_tick: bool = False
    down_tick_count: int = 0
    just_pressed: bool = False
    just_released: bool = False
    held_long: bool = False

    @property
    def phase(self) -> EdgePhase:
        if self.just_pressed:
            return EdgePhase.JUST_DOWN
        if self.just_released:
            return EdgePhase.JUST_UP
        if self.was_down_last_tick:
            return EdgePhase.DOWN
        return EdgePhase.UP

    def result(self) -> EdgeResult:
        return EdgeResult(self.just_pressed, self.just_released, self.held_long)


class ButtonEdgeTracker:
    def __init__(self, buttons: Iterable[int], tick_interval_ms: int,
                 long_press_ms: int = LONG_PRESS_MS):
        self.tick_interval_ms = tick_interval_ms
        self.long_press_ms = long_press_ms
        self._states: dict[int, ButtonEdgeState] = {}
        self._observed: dict[int, EdgeResult] = {}
        for button in buttons:
            self.register(button)

    def register(self, button: int):
        if button and button not in self._states:
            self._states[button] = ButtonEdgeState()

    def __contains__(self, button) -> bool:
        return button in self._states

    @property
    def buttons(self) -> list[int]:
        return list(self._states)

    def state(self, button: int) -> ButtonEdgeState:
        return self._states[button]

    def begin_tick(self):
        """Start a new tick; every button may be observed once again."""
        self._observed.clear()

    def observe(self, button: int, is_down: bool) -> EdgeResult:
        """
        Advance the button's state for this tick. A second call for the same
        button within one tick returns the first result unchanged.
        """
        cached = self._observed.get(button)
        if cached is not None:
            return cached

        st = self._states[button]
        st.just_pressed = False
        st.just_released = False

        if is_down and not st.was_down_last_tick:
            st.just_pressed = True
            st.down_tick_count = 0
            st.held_long = False

        if is_down:
            st.down_tick_count += 1
            if st.down_tick_count * self.tick_interval_ms > self.long_press_ms:
                st.held_long = True
        elif st.was_down_last_tick:
            st.just_released = True
            st.held_long = False
            st.down_tick_count = 0

        st.was_down_last_tick = is_down

        result = st.result()
        self._observed[button] = result
        return result

    def reset(self, button: int):
        self._states[button] = ButtonEdgeState()
        self._observed.pop(button, None)

    def reset_all(self, *, keep: Iterable[int] = ()):
        keep = set(keep)
        for button in self.buttons:
            if button not in keep:
                self.reset(button)
