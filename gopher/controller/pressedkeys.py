#!/usr/bin/env python3
"""
pressedkeys.py - Codes (keys and mouse buttons) currently held down by us.
Insertion order is kept so that a forced release is deterministic.
"""

# Virtual-key codes used for mouse buttons, shared with keyboard codes
VK_LBUTTON = 0x01
VK_RBUTTON = 0x02
VK_MBUTTON = 0x04

MOUSE_CODES = (VK_LBUTTON, VK_RBUTTON, VK_MBUTTON)


class PressedKeySet:
    def __init__(self):
        self._codes: list[int] = []

    def add(self, code: int):
        self._codes.append(code)

    def discard(self, code: int) -> bool:
        """Remove one occurrence of code. Returns False if it was not held."""
        try:
            self._codes.remove(code)
        except ValueError:
            return False
        return True

    def drain(self) -> list[int]:
        codes, self._codes = self._codes, []
        return codes

    def __contains__(self, code) -> bool:
        return code in self._codes

    def __iter__(self):
        return iter(list(self._codes))

    def __len__(self) -> int:
        return len(self._codes)

    def __repr__(self) -> str:
        return "PressedKeySet([" + ", ".join(f"0x{c:02X}" for c in self._codes) + "])"
