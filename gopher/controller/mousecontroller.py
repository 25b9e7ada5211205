#!/usr/bin/env python3
"""
mousecontroller.py
Mouse buttons, wheels and cursor position.
Windows: SendInput + win32api. Elsewhere: pyautogui.
"""

import ctypes
import ctypes.wintypes as wt
import platform

IS_WINDOWS = platform.system().lower() == "windows"

if IS_WINDOWS:
    import win32api

# --- Constants for input ---
MOUSEEVENTF_MOVE = 0x0001
MOUSEEVENTF_LEFTDOWN   = 0x0002
MOUSEEVENTF_LEFTUP     = 0x0004
MOUSEEVENTF_RIGHTDOWN  = 0x0008
MOUSEEVENTF_RIGHTUP    = 0x0010
MOUSEEVENTF_MIDDLEDOWN = 0x0020
MOUSEEVENTF_MIDDLEUP   = 0x0040
MOUSEEVENTF_XDOWN      = 0x0080
MOUSEEVENTF_XUP        = 0x0100
MOUSEEVENTF_WHEEL      = 0x0800
MOUSEEVENTF_HWHEEL     = 0x01000

WHEEL_DELTA = 120

# mouseData is only meaningful for these
_DATA_EVENTS = (MOUSEEVENTF_WHEEL, MOUSEEVENTF_HWHEEL, MOUSEEVENTF_XDOWN, MOUSEEVENTF_XUP)

INPUT_MOUSE = 0
DWORD = wt.DWORD
LONG = wt.LONG
ULONG_PTR = ctypes.POINTER(ctypes.c_ulong)


# --- Structs ---
class MOUSEINPUT(ctypes.Structure):
    _fields_ = (("dx", LONG),
                ("dy", LONG),
                ("mouseData", DWORD),
                ("dwFlags", DWORD),
                ("time", DWORD),
                ("dwExtraInfo", ULONG_PTR))


class INPUT(ctypes.Structure):
    class _INPUT(ctypes.Union):
        _fields_ = [("mi", MOUSEINPUT)]
    _anonymous_ = ("_input",)
    _fields_ = [("type", DWORD),
                ("_input", _INPUT)]


# pyautogui button names for the fallback backend
_BUTTON_EVENTS = {
    MOUSEEVENTF_LEFTDOWN: ("left", True),
    MOUSEEVENTF_LEFTUP: ("left", False),
    MOUSEEVENTF_RIGHTDOWN: ("right", True),
    MOUSEEVENTF_RIGHTUP: ("right", False),
    MOUSEEVENTF_MIDDLEDOWN: ("middle", True),
    MOUSEEVENTF_MIDDLEUP: ("middle", False),
}


# --- Mouse Controller ---
class MouseController:
    def __init__(self, log=None, *, use_sendinput: bool = IS_WINDOWS):
        self.log = log
        self.use_sendinput = use_sendinput
        self._user32 = None
        # pyautogui scrolls in whole clicks; keep the partial wheel delta
        self._wheel_rest = {MOUSEEVENTF_WHEEL: 0, MOUSEEVENTF_HWHEEL: 0}
        if use_sendinput:
            self._user32 = ctypes.windll.user32
            try:
                self._user32.SetProcessDPIAware()
            except OSError:
                pass

    # --- Cursor position ---
    def cursor_position(self) -> tuple[int, int]:
        if self.use_sendinput:
            x, y = win32api.GetCursorPos()
            return int(x), int(y)
        import pyautogui
        x, y = pyautogui.position()
        return int(x), int(y)

    def set_cursor_position(self, x: int, y: int):
        """Absolute move to desktop pixel coords."""
        if self.use_sendinput:
            win32api.SetCursorPos((int(x), int(y)))
        else:
            import pyautogui
            pyautogui.moveTo(int(x), int(y), _pause=False)

    # --- Buttons and wheels ---
    def mouse_event(self, kind: int, data: int = 0):
        """Send one mouse event (MOUSEEVENTF_* flag), data for wheel/X events."""
        if kind not in _DATA_EVENTS:
            data = 0
        if self.use_sendinput:
            self._send_input(kind, data)
        else:
            self._send_pyautogui(kind, data)
        if self.log:
            self.log.debug(f"[MOUSE] event=0x{kind:04X} data={data}")

    def _send_input(self, kind: int, data: int):
        inp = INPUT()
        inp.type = INPUT_MOUSE
        # mouseData is a DWORD; negative wheel deltas wrap like in C
        inp.mi = MOUSEINPUT(0, 0, int(data) & 0xFFFFFFFF, kind, 0, None)
        self._user32.SendInput(1, ctypes.byref(inp), ctypes.sizeof(inp))

    def _send_pyautogui(self, kind: int, data: int):
        import pyautogui

        if kind in _BUTTON_EVENTS:
            button, down = _BUTTON_EVENTS[kind]
            if down:
                pyautogui.mouseDown(button=button, _pause=False)
            else:
                pyautogui.mouseUp(button=button, _pause=False)
        elif kind in self._wheel_rest:
            total = self._wheel_rest[kind] + int(data)
            clicks = int(total / WHEEL_DELTA)
            self._wheel_rest[kind] = total - clicks * WHEEL_DELTA
            if clicks == 0:
                return
            if kind == MOUSEEVENTF_WHEEL:
                pyautogui.scroll(clicks, _pause=False)
            else:
                pyautogui.hscroll(clicks, _pause=False)
        elif self.log:
            self.log.warning(f"[MOUSE] Unsupported mouse event 0x{kind:04X}")
