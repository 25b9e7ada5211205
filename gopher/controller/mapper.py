#!/usr/bin/env python3
"""
mapper.py - Turns button and trigger edges into key / mouse events.
Every code pressed here is recorded in a PressedKeySet so that it can be
released en masse when mapping is disabled.
"""

from gopher.controller.mousecontroller import (
    MOUSEEVENTF_LEFTDOWN, MOUSEEVENTF_LEFTUP,
    MOUSEEVENTF_MIDDLEDOWN, MOUSEEVENTF_MIDDLEUP,
    MOUSEEVENTF_RIGHTDOWN, MOUSEEVENTF_RIGHTUP,
)
from gopher.controller.pressedkeys import VK_LBUTTON, VK_MBUTTON, VK_RBUTTON, PressedKeySet
from gopher.controller.snapshot import TRIGGER_DEAD_ZONE

# mouse VK code -> (down event, up event, name)
MOUSE_BUTTONS = {
    VK_LBUTTON: (MOUSEEVENTF_LEFTDOWN, MOUSEEVENTF_LEFTUP, "LEFT"),
    VK_RBUTTON: (MOUSEEVENTF_RIGHTDOWN, MOUSEEVENTF_RIGHTUP, "RIGHT"),
    VK_MBUTTON: (MOUSEEVENTF_MIDDLEDOWN, MOUSEEVENTF_MIDDLEUP, "MIDDLE"),
}


class InputMapper:
    def __init__(self, log, keymapper, mousecontroller, edges,
                 pressed: PressedKeySet = None, *,
                 trigger_dead_zone: int = TRIGGER_DEAD_ZONE, log_buttons: bool = False):
        self.log = log
        self.keymapper = keymapper
        self.mousecontroller = mousecontroller
        self.edges = edges
        self.pressed = pressed if pressed is not None else PressedKeySet()
        self.trigger_dead_zone = trigger_dead_zone
        self.log_buttons = log_buttons

        # trigger state of the previous tick
        self.left_trigger_down = False
        self.right_trigger_down = False

    # ---------------------------------------------------------------
    # Keys
    # ---------------------------------------------------------------
    def map_keyboard(self, button: int, keys, snapshot):
        if not keys:
            return
        edge = self.edges.observe(button, snapshot.is_pressed(button))
        if edge.is_down:
            self._press_keys(keys, f"0x{button:04X}")
        if edge.is_up:
            self._release_keys(keys, f"0x{button:04X}")

    def _press_keys(self, keys, source: str):
        if self.log_buttons:
            self.log.info(f"[KEY] {source} DOWN " + " ".join(f"0x{vk:02X}" for vk in keys))
        self.keymapper.key_down(keys)
        for vk in keys:
            self.pressed.add(vk)

    def _release_keys(self, keys, source: str):
        if self.log_buttons:
            self.log.info(f"[KEY] {source} UP " + " ".join(f"0x{vk:02X}" for vk in keys))
        self.keymapper.key_up(keys)
        for vk in keys:
            self.pressed.discard(vk)

    # ---------------------------------------------------------------
    # Mouse buttons
    # ---------------------------------------------------------------
    def map_mouse_click(self, button: int, vk: int, snapshot):
        down_event, up_event, name = MOUSE_BUTTONS[vk]
        edge = self.edges.observe(button, snapshot.is_pressed(button))
        if edge.is_down:
            if self.log_buttons:
                self.log.info(f"[BUTTON] Mouse {name} DOWN")
            self.mousecontroller.mouse_event(down_event)
            self.pressed.add(vk)
        if edge.is_up:
            if self.log_buttons:
                self.log.info(f"[BUTTON] Mouse {name} UP")
            self.mousecontroller.mouse_event(up_event)
            self.pressed.discard(vk)

    # ---------------------------------------------------------------
    # Triggers (analog, no long press)
    # ---------------------------------------------------------------
    def handle_triggers(self, snapshot, left_keys, right_keys):
        left_down = snapshot.left_trigger > self.trigger_dead_zone
        right_down = snapshot.right_trigger > self.trigger_dead_zone

        if left_down != self.left_trigger_down:
            self.left_trigger_down = left_down
            self._trigger_edge(left_down, left_keys, "TRIGGER_LEFT")

        if right_down != self.right_trigger_down:
            self.right_trigger_down = right_down
            self._trigger_edge(right_down, right_keys, "TRIGGER_RIGHT")

    def _trigger_edge(self, down: bool, keys, source: str):
        if not keys:
            return
        if down:
            self._press_keys(keys, source)
        else:
            self._release_keys(keys, source)

    # ---------------------------------------------------------------
    # Forced release
    # ---------------------------------------------------------------
    def release_all(self) -> list[int]:
        """
        Release everything we hold. Mouse buttons get their own up event,
        all keyboard codes go out in a single key_up batch.
        """
        drained = self.pressed.drain()
        keyboard = []
        for vk in drained:
            if vk in MOUSE_BUTTONS:
                self.mousecontroller.mouse_event(MOUSE_BUTTONS[vk][1])
            else:
                keyboard.append(vk)

        if keyboard:
            self.keymapper.key_up(keyboard)

        self.left_trigger_down = False
        self.right_trigger_down = False

        if drained:
            self.log.info(
                f"[DISABLE] Released {len(drained)} held input(s): "
                + " ".join(f"0x{vk:02X}" for vk in drained)
            )
        return drained
