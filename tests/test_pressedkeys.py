from gopher.controller.pressedkeys import VK_LBUTTON, PressedKeySet


def test_membership_follows_press_and_release():
    pressed = PressedKeySet()
    pressed.add(0x26)
    pressed.add(VK_LBUTTON)
    assert 0x26 in pressed
    assert VK_LBUTTON in pressed

    assert pressed.discard(0x26)
    assert 0x26 not in pressed
    assert len(pressed) == 1


def test_discard_unknown_code():
    pressed = PressedKeySet()
    assert not pressed.discard(0x41)


def test_same_code_held_twice_needs_two_releases():
    pressed = PressedKeySet()
    pressed.add(0x10)
    pressed.add(0x10)
    pressed.discard(0x10)
    assert 0x10 in pressed
    pressed.discard(0x10)
    assert 0x10 not in pressed


def test_drain_keeps_insertion_order_and_empties():
    pressed = PressedKeySet()
    for code in (0x28, VK_LBUTTON, 0x26):
        pressed.add(code)
    assert pressed.drain() == [0x28, VK_LBUTTON, 0x26]
    assert len(pressed) == 0
    assert pressed.drain() == []
