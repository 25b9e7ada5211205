import logging

import pytest

from gopher.controller.snapshot import ControllerSnapshot


class FakeKeyMapper:
    def __init__(self):
        self.calls = []

    def key_down(self, codes):
        self.calls.append(("down", list(codes)))

    def key_up(self, codes):
        self.calls.append(("up", list(codes)))


class FakeMouse:
    def __init__(self, position=(500, 500)):
        self.position = position
        self.events = []
        self.moves = []

    def mouse_event(self, kind, data=0):
        self.events.append((kind, data))

    def cursor_position(self):
        return self.position

    def set_cursor_position(self, x, y):
        self.position = (x, y)
        self.moves.append((x, y))


class FakeController:
    def __init__(self):
        self.snapshot = ControllerSnapshot()
        self.reads = 0
        self.vibrations = []

    def read_snapshot(self):
        self.reads += 1
        return self.snapshot

    def set_vibration(self, left, right):
        self.vibrations.append((left, right))


class FakeWindow:
    def __init__(self, osk_running=True):
        self.hidden = False
        self.osk_running = osk_running
        self.osk_toggles = 0

    def set_visibility(self, hidden):
        self.hidden = hidden

    def toggle_visibility(self):
        self.hidden = not self.hidden

    def toggle_on_screen_keyboard(self):
        if not self.osk_running:
            return False
        self.osk_toggles += 1
        return True


class FakeClock:
    def __init__(self, now=0.0):
        self.now = now

    def __call__(self):
        return self.now


@pytest.fixture
def log():
    return logging.getLogger("gopher.test")


@pytest.fixture
def keymapper():
    return FakeKeyMapper()


@pytest.fixture
def mouse():
    return FakeMouse()


@pytest.fixture
def controller():
    return FakeController()


@pytest.fixture
def window():
    return FakeWindow()


@pytest.fixture
def clock():
    return FakeClock()
