#!/usr/bin/env python3
"""
motion.py - Analog stick → per-tick displacement.

The stick vector is normalized past its deadzone, optionally raised to an
acceleration exponent, and divided by the tick rate so that the cursor speed
does not depend on the polling frequency.
"""

import math
from dataclasses import dataclass

from gopher.controller.snapshot import AXIS_MAX, sanitize_axis

FPS = 150
ACCEL_EPSILON = 0.0001


def motion_multiplier(x, y, deadzone: float, accel: float = 0.0,
                      ticks_per_second: int = FPS) -> float:
    span = AXIS_MAX - deadzone
    if span <= 0:
        return 0.0

    x = sanitize_axis(x)
    y = sanitize_axis(y)

    lengthsq = float(x * x + y * y)
    if lengthsq <= float(deadzone) * float(deadzone):
        return 0.0

    mult = (math.sqrt(lengthsq) - deadzone) / span
    if accel > ACCEL_EPSILON:
        mult = mult ** accel
    return mult / ticks_per_second


def axis_multiplier(value, deadzone: float, accel: float = 0.0,
                    ticks_per_second: int = FPS) -> float:
    """Single-axis form of motion_multiplier (used per wheel axis)."""
    return motion_multiplier(value, 0, deadzone, accel, ticks_per_second)


def motion_delta(x, y, deadzone: float, speed: float, accel: float = 0.0,
                 ticks_per_second: int = FPS) -> tuple[float, float]:
    """Return (dx, dy) for one tick. Zero inside the deadzone."""
    mult = speed * motion_multiplier(x, y, deadzone, accel, ticks_per_second)
    if mult == 0.0:
        return 0.0, 0.0
    return sanitize_axis(x) * mult, sanitize_axis(y) * mult


@dataclass
class MotionAccumulator:
    """Carries the fractional cursor remainder between ticks."""
    x_rest: float = 0.0
    y_rest: float = 0.0

    def advance(self, cursor: tuple[int, int], dx: float, dy: float) -> tuple[int, int]:
        """
        Apply (dx, dy) in stick space to the cursor position.
        Stick Y points up, screen Y points down.
        """
        x = cursor[0] + self.x_rest + dx
        y = cursor[1] + self.y_rest - dy

        ix, iy = int(x), int(y)
        self.x_rest = x - ix
        self.y_rest = y - iy
        return ix, iy
