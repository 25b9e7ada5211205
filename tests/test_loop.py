import logging

import pytest

from gopher.controller.bindings import GopherConfig
from gopher.controller.loop import OSK_MISSING_MSG, GopherLoop
from gopher.controller.mousecontroller import (
    MOUSEEVENTF_HWHEEL, MOUSEEVENTF_LEFTDOWN, MOUSEEVENTF_LEFTUP, MOUSEEVENTF_WHEEL,
)
from gopher.controller.pressedkeys import VK_LBUTTON
from gopher.controller.snapshot import Button, ControllerSnapshot
from gopher.controller.speeds import SpeedTable

DISABLE = Button.START | Button.BACK


@pytest.fixture
def make_loop(log, controller, keymapper, mouse, window, clock):
    def _make(cfg=None):
        return GopherLoop(log, cfg or GopherConfig(), controller, keymapper, mouse, window, clock=clock)
    return _make


def press(controller, buttons=0, **kwargs):
    controller.snapshot = ControllerSnapshot(buttons=int(buttons), **kwargs)


def test_cursor_follows_left_stick(make_loop, controller, mouse):
    loop = make_loop()
    press(controller, left_stick=(32767, 0))
    loop.tick()
    # ULTRALOW: 32767 / 150 * 0.005 ≈ 1.09 px
    assert mouse.position == (501, 500)


def test_cursor_ignores_deadzone(make_loop, controller, mouse):
    loop = make_loop()
    press(controller, left_stick=(3000, 4000))
    loop.tick()
    assert mouse.moves == []


def test_right_stick_scrolls(make_loop, controller, mouse):
    loop = make_loop()
    press(controller, right_stick=(0, 32767))
    loop.tick()
    # 32767 / 150 * 0.1 = 21.8
    assert mouse.events == [(MOUSEEVENTF_WHEEL, 21)]
    assert mouse.moves == []

    mouse.events.clear()
    press(controller, right_stick=(-32767, 0))
    loop.tick()
    assert mouse.events == [(MOUSEEVENTF_HWHEEL, -21)]


def test_swapped_thumbsticks(make_loop, controller, mouse):
    loop = make_loop(GopherConfig(swap_thumbsticks=True))
    press(controller, left_stick=(0, -32767), right_stick=(0, 32767))
    loop.tick()
    # right stick moves the cursor up, left stick scrolls down
    assert mouse.position == (500, 498)
    assert mouse.events == [(MOUSEEVENTF_WHEEL, -21)]


def test_disable_releases_everything_held(make_loop, controller, keymapper, mouse, clock):
    loop = make_loop()
    held = Button.A | Button.DPAD_UP | Button.DPAD_DOWN
    press(controller, held)
    loop.tick()
    assert list(loop.pressed) == [VK_LBUTTON, 0x26, 0x28]
    keymapper.calls.clear()
    mouse.events.clear()

    clock.now = 0.01
    press(controller, held | DISABLE)
    loop.tick()

    assert loop.disabled
    assert keymapper.calls == [("up", [0x26, 0x28])]
    assert mouse.events == [(MOUSEEVENTF_LEFTUP, 0)]
    assert len(loop.pressed) == 0
    assert controller.vibrations == [(10000, 10000)]


def test_pulse_drops_ticks_then_stops_motors(make_loop, controller, clock):
    loop = make_loop()
    press(controller, DISABLE)
    loop.tick()
    reads = controller.reads

    clock.now = 0.2
    loop.tick()
    assert controller.reads == reads

    clock.now = 0.5
    loop.tick()
    assert controller.reads == reads + 1
    assert controller.vibrations == [(10000, 10000), (0, 0)]


def test_disabled_ignores_mapping_until_reenabled(make_loop, controller, keymapper, mouse, clock):
    loop = make_loop()
    press(controller, DISABLE)
    loop.tick()

    clock.now = 1.0
    press(controller, Button.B | Button.A, left_stick=(32767, 0))
    loop.tick()
    assert keymapper.calls == []
    assert mouse.events == []
    assert mouse.moves == []

    clock.now = 2.0
    press(controller, DISABLE)
    loop.tick()
    assert not loop.disabled
    assert controller.vibrations[-1] == (65000, 65000)

    clock.now = 3.0
    press(controller, Button.B)
    loop.tick()
    assert keymapper.calls == [("down", [0x0D])]


def test_held_button_pressed_again_after_reenable(make_loop, controller, keymapper, clock):
    loop = make_loop()
    press(controller, Button.B)
    loop.tick()
    clock.now = 1.0
    press(controller, Button.B | DISABLE)
    loop.tick()
    assert keymapper.calls == [("down", [0x0D]), ("up", [0x0D])]

    clock.now = 2.0
    press(controller, Button.B)
    loop.tick()
    clock.now = 3.0
    press(controller, Button.B | DISABLE)
    loop.tick()
    clock.now = 4.0
    press(controller, Button.B)
    loop.tick()
    assert keymapper.calls[-1] == ("down", [0x0D])
    assert list(loop.pressed) == [0x0D]


def test_vibration_off_makes_pulses_noops(make_loop, controller, clock):
    loop = make_loop(GopherConfig(disable_vibration=int(Button.Y)))
    press(controller, Button.Y)
    loop.tick()
    assert loop.vibration_disabled
    assert controller.vibrations == []

    # debounce window
    clock.now = 0.5
    reads = controller.reads
    loop.tick()
    assert controller.reads == reads

    clock.now = 1.5
    press(controller, DISABLE)
    loop.tick()
    assert loop.disabled
    assert controller.vibrations == []
    assert loop.stall_until is None


def test_speed_change_cycles_and_pulses(make_loop, controller, clock, caplog):
    cfg = GopherConfig(speeds=SpeedTable([("SLOW", 0.01), ("FAST", 0.5)]))
    loop = make_loop(cfg)

    with caplog.at_level(logging.INFO, logger="gopher.test"):
        press(controller, Button.RIGHT_THUMB)
        loop.tick()
    assert loop.speeds.name == "FAST"
    assert controller.vibrations == [(65000, 65000)]
    assert "FAST" in caplog.text

    clock.now = 1.0
    press(controller)
    loop.tick()
    clock.now = 2.0
    press(controller, Button.RIGHT_THUMB)
    loop.tick()
    assert loop.speeds.name == "SLOW"


def test_hide_and_osk_buttons(make_loop, controller, window, clock, caplog):
    loop = make_loop(GopherConfig(hide=int(Button.Y), osk=int(Button.BACK)))
    press(controller, Button.Y)
    loop.tick()
    assert window.hidden

    press(controller, Button.BACK)
    loop.tick()
    assert window.osk_toggles == 1

    window.osk_running = False
    press(controller)
    loop.tick()
    with caplog.at_level(logging.INFO, logger="gopher.test"):
        press(controller, Button.BACK)
        loop.tick()
    assert OSK_MISSING_MSG in caplog.text
    assert window.hidden


def test_mouse_and_keyboard_on_same_button(make_loop, controller, keymapper, mouse):
    from gopher.controller.bindings import KeyBinding

    cfg = GopherConfig()
    cfg.key_bindings = [KeyBinding(Button.A, (0x10,))]
    loop = make_loop(cfg)

    press(controller, Button.A)
    loop.tick()
    assert mouse.events == [(MOUSEEVENTF_LEFTDOWN, 0)]
    assert keymapper.calls == [("down", [0x10])]

    press(controller)
    loop.tick()
    assert mouse.events[-1] == (MOUSEEVENTF_LEFTUP, 0)
    assert keymapper.calls[-1] == ("up", [0x10])


def test_unusable_dead_zone_does_not_break_tick(make_loop, controller, mouse):
    loop = make_loop(GopherConfig(dead_zone=32767, scroll_dead_zone=40000, acceleration_factor=1.5))
    press(controller, left_stick=(32767, 32767), right_stick=(32767, 32767))
    loop.tick()
    assert mouse.moves == []
    assert mouse.events == []


def test_disable_releases_held_trigger_and_reenable_presses_it(make_loop, controller, keymapper, clock):
    loop = make_loop()
    press(controller, left_trigger=255)
    loop.tick()
    assert keymapper.calls == [("down", [0x20])]

    clock.now = 1.0
    press(controller, DISABLE, left_trigger=255)
    loop.tick()
    assert keymapper.calls == [("down", [0x20]), ("up", [0x20])]
    assert len(loop.pressed) == 0

    # trigger stays held through the disabled window
    clock.now = 2.0
    press(controller, left_trigger=255)
    loop.tick()
    clock.now = 3.0
    press(controller, DISABLE, left_trigger=255)
    loop.tick()
    assert not loop.disabled
    assert keymapper.calls[-1] == ("up", [0x20])

    clock.now = 4.0
    press(controller, left_trigger=255)
    loop.tick()
    assert keymapper.calls[-1] == ("down", [0x20])
    assert list(loop.pressed) == [0x20]


def test_scroll_gate_is_inclusive_at_deadzone(make_loop, controller, mouse, caplog):
    loop = make_loop(GopherConfig(log_axes=True))

    with caplog.at_level(logging.INFO, logger="gopher.test"):
        # magnitude exactly 5000
        press(controller, right_stick=(3000, 4000))
        loop.tick()
    assert "[AXIS] scroll" not in caplog.text
    assert mouse.events == []

    caplog.clear()
    with caplog.at_level(logging.INFO, logger="gopher.test"):
        # past the gate, but each axis is still inside its own deadzone
        press(controller, right_stick=(3000, 4001))
        loop.tick()
    assert "[AXIS] scroll stick=(3000,4001) wheel=(0,0)" in caplog.text
    assert mouse.events == []


def test_axis_log_is_plain_ascii(make_loop, controller, caplog):
    loop = make_loop(GopherConfig(log_axes=True))
    with caplog.at_level(logging.INFO, logger="gopher.test"):
        press(controller, left_stick=(32767, 0))
        loop.tick()
    assert "-> (501,500)" in caplog.text
    assert caplog.text.isascii()
