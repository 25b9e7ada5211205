#!/usr/bin/env python3
"""
gamecontroller.py
Reads an XInput-style gamepad through pygame and reports ControllerSnapshots
in XInput units. Also drives the rumble motors.
"""

import pygame

from gopher.controller.snapshot import AXIS_MAX, TRIGGER_MAX, Button, ControllerSnapshot

# pygame (SDL) joystick layout of an Xbox controller
BUTTON_INDEX_MAP = {
    0: Button.A,
    1: Button.B,
    2: Button.X,
    3: Button.Y,
    4: Button.LEFT_SHOULDER,
    5: Button.RIGHT_SHOULDER,
    6: Button.BACK,
    7: Button.START,
    8: Button.LEFT_THUMB,
    9: Button.RIGHT_THUMB,
}

AXIS_LEFT_X = 0
AXIS_LEFT_Y = 1
AXIS_RIGHT_X = 2
AXIS_RIGHT_Y = 3
AXIS_LEFT_TRIGGER = 4
AXIS_RIGHT_TRIGGER = 5

VIBRATION_MAX = 65535


def _stick(value: float) -> int:
    return int(round(max(-1.0, min(1.0, value)) * AXIS_MAX))


def _trigger(value: float) -> int:
    # SDL reports triggers in [-1, 1] with -1 at rest
    return int(round((max(-1.0, min(1.0, value)) + 1.0) / 2.0 * TRIGGER_MAX))


class GameController:
    def __init__(self, guid: str = None, index: int = None, log=None):
        """
        Create a controller instance by GUID or index.
        GUID preferred (stable across reboots).
        """
        self.log = log
        pygame.init()
        pygame.joystick.init()

        if guid is not None:
            # Try to find joystick with matching GUID
            for i in range(pygame.joystick.get_count()):
                js = pygame.joystick.Joystick(i)
                if js.get_guid() == guid:
                    self.joystick = js
                    self.joystick.init()
                    break
            else:
                raise ValueError(f"No joystick with GUID {guid}")
        elif index is not None:
            if index >= pygame.joystick.get_count():
                raise ValueError(f"No joystick at index {index}")
            self.joystick = pygame.joystick.Joystick(index)
            self.joystick.init()
        else:
            raise ValueError("Must provide either GUID or index")

        self._num_axes = self.joystick.get_numaxes()
        self._num_buttons = self.joystick.get_numbuttons()
        self._num_hats = self.joystick.get_numhats()

    @staticmethod
    def list_devices():
        """
        Return list of all connected devices with (index, guid, name).
        """
        pygame.init()
        pygame.joystick.quit()
        pygame.joystick.init()
        devices = []
        for i in range(pygame.joystick.get_count()):
            js = pygame.joystick.Joystick(i)
            devices.append((i, js.get_guid(), js.get_name()))
        return devices

    def get_guid(self) -> str:
        return self.joystick.get_guid()

    def get_name(self) -> str:
        return self.joystick.get_name()

    def _axis(self, axis: int, rest: float = 0.0) -> float:
        if axis >= self._num_axes:
            return rest
        return self.joystick.get_axis(axis)

    def read_snapshot(self) -> ControllerSnapshot:
        """Non-blocking read of the current state."""
        pygame.event.pump()

        buttons = 0
        for idx, button in BUTTON_INDEX_MAP.items():
            if idx < self._num_buttons and self.joystick.get_button(idx):
                buttons |= button

        if self._num_hats:
            hx, hy = self.joystick.get_hat(0)
            if hy > 0:
                buttons |= Button.DPAD_UP
            elif hy < 0:
                buttons |= Button.DPAD_DOWN
            if hx < 0:
                buttons |= Button.DPAD_LEFT
            elif hx > 0:
                buttons |= Button.DPAD_RIGHT

        # SDL Y axes point down, XInput Y axes point up
        return ControllerSnapshot(
            buttons=int(buttons),
            left_stick=(_stick(self._axis(AXIS_LEFT_X)), -_stick(self._axis(AXIS_LEFT_Y))),
            right_stick=(_stick(self._axis(AXIS_RIGHT_X)), -_stick(self._axis(AXIS_RIGHT_Y))),
            left_trigger=_trigger(self._axis(AXIS_LEFT_TRIGGER, -1.0)),
            right_trigger=_trigger(self._axis(AXIS_RIGHT_TRIGGER, -1.0)),
        )

    def set_vibration(self, left: int, right: int):
        """Motor speeds 0..65535. Runs until changed; (0, 0) stops."""
        if left <= 0 and right <= 0:
            self.joystick.stop_rumble()
            return
        ok = self.joystick.rumble(
            min(left, VIBRATION_MAX) / VIBRATION_MAX,
            min(right, VIBRATION_MAX) / VIBRATION_MAX,
            0,
        )
        if not ok and self.log:
            self.log.debug("[CONTROLLER] Rumble not supported by this device")
