#!/usr/bin/env python3
"""
snapshot.py - One controller read per tick, in XInput units.
Sticks are signed 16-bit per axis, triggers 0..255, buttons an XInput bitmask.
"""

from dataclasses import dataclass
from enum import IntFlag

AXIS_MIN = -32768
AXIS_MAX = 32767
TRIGGER_MAX = 255

# XINPUT_GAMEPAD_TRIGGER_THRESHOLD
TRIGGER_DEAD_ZONE = 30


class Button(IntFlag):
    NONE = 0
    DPAD_UP = 0x0001
    DPAD_DOWN = 0x0002
    DPAD_LEFT = 0x0004
    DPAD_RIGHT = 0x0008
    START = 0x0010
    BACK = 0x0020
    LEFT_THUMB = 0x0040
    RIGHT_THUMB = 0x0080
    LEFT_SHOULDER = 0x0100
    RIGHT_SHOULDER = 0x0200
    A = 0x1000
    B = 0x2000
    X = 0x4000
    Y = 0x8000


def sanitize_axis(value) -> int:
    """
    Wireless controllers occasionally report values outside the 16-bit range
    while centered. Those are treated as zero.
    """
    value = int(value)
    if value > AXIS_MAX or value < AXIS_MIN:
        return 0
    return value


@dataclass(frozen=True)
class ControllerSnapshot:
    buttons: int = 0
    left_stick: tuple[int, int] = (0, 0)
    right_stick: tuple[int, int] = (0, 0)
    left_trigger: int = 0
    right_trigger: int = 0

    def is_pressed(self, mask: int) -> bool:
        """True when every bit of mask is down. Mask 0 is never pressed."""
        return mask != 0 and (self.buttons & mask) == mask
