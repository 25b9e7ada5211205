#!/usr/bin/env python3
"""
loop.py - The per-tick driver.

Each tick reads one controller snapshot and dispatches, in this order:
disable toggle, vibration toggle, cursor movement, scrolling, mouse buttons,
window hide, on-screen keyboard, speed change, triggers, keyboard bindings.

Vibration pulses do not sleep. A pulse opens a stall window instead; the tick
that started it stops dispatching and every tick inside the window is dropped
(inputs are not queued). The motors are stopped when the window closes.
"""

import math
import time

from gopher.controller.edges import ButtonEdgeTracker
from gopher.controller.mapper import InputMapper
from gopher.controller.motion import FPS, MotionAccumulator, axis_multiplier, motion_delta
from gopher.controller.mousecontroller import MOUSEEVENTF_HWHEEL, MOUSEEVENTF_WHEEL
from gopher.controller.pressedkeys import VK_LBUTTON, VK_MBUTTON, VK_RBUTTON, PressedKeySet
from gopher.controller.snapshot import sanitize_axis

SLEEP_AMOUNT_MS = 1000 // FPS

# (duration ms, intensity)
DISABLE_PULSE = (400, 10000)
ENABLE_PULSE = (400, 65000)
SPEED_CHANGE_PULSE = (450, 65000)
VIBRATION_TOGGLE_STALL_MS = 1000

OSK_MISSING_MSG = "Please start the On-screen keyboard first"


class GopherLoop:
    def __init__(self, log, cfg, controller, keymapper, mousecontroller, window,
                 *, clock=time.monotonic, sleep=time.sleep):
        self.log = log
        self.cfg = cfg
        self.controller = controller
        self.keymapper = keymapper
        self.mousecontroller = mousecontroller
        self.window = window
        self._clock = clock
        self._sleep = sleep

        self.tick_interval_ms = SLEEP_AMOUNT_MS
        self.edges = ButtonEdgeTracker(cfg.tracked_buttons, self.tick_interval_ms)
        self.pressed = PressedKeySet()
        self.mapper = InputMapper(
            log, keymapper, mousecontroller, self.edges, self.pressed,
            trigger_dead_zone=cfg.trigger_dead_zone,
            log_buttons=cfg.debug_inputs or cfg.log_buttons,
        )
        self.motion = MotionAccumulator()
        self.speeds = cfg.speeds

        self.disabled = False
        self.vibration_disabled = False

        # stall window (VibratingUntil)
        self.stall_until = None
        self._vibrating = False

    # ---------------------------------------------------------------
    # Driver
    # ---------------------------------------------------------------
    def run(self):
        self.log.info(
            f"[LOOP] Running at {FPS} ticks/s, speed {self.speeds.speed} ({self.speeds.name})"
        )
        while True:
            self._sleep(self.tick_interval_ms / 1000.0)
            self.tick()

    def tick(self):
        now = self._clock()
        if self._stalled(now):
            return

        snapshot = self.controller.read_snapshot()
        self.edges.begin_tick()

        if self._handle_disable_button(snapshot, now):
            return
        if self.disabled:
            return

        if self._handle_vibration_button(snapshot, now):
            return

        self._handle_mouse_movement(snapshot)
        self._handle_scrolling(snapshot)

        cfg = self.cfg
        for button, vk in ((cfg.mouse_left, VK_LBUTTON),
                           (cfg.mouse_right, VK_RBUTTON),
                           (cfg.mouse_middle, VK_MBUTTON)):
            if button:
                self.mapper.map_mouse_click(button, vk, snapshot)

        if cfg.hide and self._pressed(cfg.hide, snapshot):
            self.window.toggle_visibility()

        if cfg.osk and self._pressed(cfg.osk, snapshot):
            if not self.window.toggle_on_screen_keyboard():
                self.log.info(OSK_MISSING_MSG)

        if self._handle_speed_button(snapshot, now):
            return

        self.mapper.handle_triggers(snapshot, cfg.trigger_left, cfg.trigger_right)
        for kb in cfg.key_bindings:
            if kb.keys:
                self.mapper.map_keyboard(kb.button, kb.keys, snapshot)

    def _pressed(self, button: int, snapshot) -> bool:
        return self.edges.observe(button, snapshot.is_pressed(button)).is_down

    # ---------------------------------------------------------------
    # Vibration / stall window
    # ---------------------------------------------------------------
    def _stalled(self, now: float) -> bool:
        if self.stall_until is None:
            return False
        if now < self.stall_until:
            return True
        self.stall_until = None
        if self._vibrating:
            self._vibrating = False
            self.controller.set_vibration(0, 0)
        return False

    def _stall(self, now: float, duration_ms: int):
        self.stall_until = now + duration_ms / 1000.0

    def pulse_vibrate(self, now: float, duration_ms: int, left: int, right: int) -> bool:
        """Start a pulse. Returns False (and does nothing) when vibration is off."""
        if self.vibration_disabled:
            return False
        self.controller.set_vibration(left, right)
        self._vibrating = True
        self._stall(now, duration_ms)
        return True

    # ---------------------------------------------------------------
    # Commands
    # ---------------------------------------------------------------
    def _handle_disable_button(self, snapshot, now: float) -> bool:
        button = self.cfg.disable
        if not button or not self._pressed(button, snapshot):
            return False

        self.disabled = not self.disabled
        if self.disabled:
            self.mapper.release_all()
            self.edges.reset_all(keep=(button,))
            self.log.info("[DISABLE] Mapping disabled")
            duration, intensity = DISABLE_PULSE
        else:
            self.log.info("[DISABLE] Mapping enabled")
            duration, intensity = ENABLE_PULSE
        return self.pulse_vibrate(now, duration, intensity, intensity)

    def _handle_vibration_button(self, snapshot, now: float) -> bool:
        button = self.cfg.disable_vibration
        if not button or not self._pressed(button, snapshot):
            return False

        self.vibration_disabled = not self.vibration_disabled
        self.log.info(f"[VIBRATION] Vibration {'Disabled' if self.vibration_disabled else 'Enabled'}")
        self._stall(now, VIBRATION_TOGGLE_STALL_MS)
        return True

    def _handle_speed_button(self, snapshot, now: float) -> bool:
        button = self.cfg.speed_change
        if not button or not self._pressed(button, snapshot):
            return False

        speed = self.speeds.advance()
        self.log.info(f"[SPEED] Setting speed to {speed:f} ({self.speeds.name})...")
        duration, intensity = SPEED_CHANGE_PULSE
        return self.pulse_vibrate(now, duration, intensity, intensity)

    # ---------------------------------------------------------------
    # Sticks
    # ---------------------------------------------------------------
    def _cursor_stick(self, snapshot):
        return snapshot.right_stick if self.cfg.swap_thumbsticks else snapshot.left_stick

    def _scroll_stick(self, snapshot):
        return snapshot.left_stick if self.cfg.swap_thumbsticks else snapshot.right_stick

    def _handle_mouse_movement(self, snapshot):
        tx, ty = self._cursor_stick(snapshot)
        dx, dy = motion_delta(tx, ty, self.cfg.dead_zone, self.speeds.speed,
                              self.cfg.acceleration_factor, FPS)

        cursor = self.mousecontroller.cursor_position()
        x, y = self.motion.advance(cursor, dx, dy)
        if (x, y) != tuple(cursor):
            self.mousecontroller.set_cursor_position(x, y)

        if self.cfg.log_axes and (dx or dy):
            self.log.info(f"[AXIS] cursor stick=({tx},{ty}) d=({dx:.2f},{-dy:.2f}) -> ({x},{y})")

    def _handle_scrolling(self, snapshot):
        tx, ty = self._scroll_stick(snapshot)
        tx, ty = sanitize_axis(tx), sanitize_axis(ty)

        dz = self.cfg.scroll_dead_zone
        if math.hypot(tx, ty) <= dz:
            return

        speed = self.cfg.scroll_speed
        horizontal = int(tx * axis_multiplier(tx, dz, 0.0, FPS) * speed)
        vertical = int(ty * axis_multiplier(ty, dz, 0.0, FPS) * speed)

        if horizontal:
            self.mousecontroller.mouse_event(MOUSEEVENTF_HWHEEL, horizontal)
        if vertical:
            self.mousecontroller.mouse_event(MOUSEEVENTF_WHEEL, vertical)

        if self.cfg.log_axes:
            self.log.info(f"[AXIS] scroll stick=({tx},{ty}) wheel=({horizontal},{vertical})")
