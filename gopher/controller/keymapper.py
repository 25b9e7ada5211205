#!/usr/bin/env python3
"""
keymapper.py - Send keyboard events using Windows SendInput
Codes are Windows virtual-key codes. A whole list of codes is sent as one
SendInput batch. Off Windows, pyautogui is used instead.
"""

import ctypes
import ctypes.wintypes as wt
import platform

IS_WINDOWS = platform.system().lower() == "windows"

# --- constants ---
INPUT_KEYBOARD = 1
KEYEVENTF_KEYUP = 0x0002

# pick correct ULONG_PTR
if ctypes.sizeof(ctypes.c_void_p) == 8:
    ULONG_PTR = ctypes.c_ulonglong
else:
    ULONG_PTR = ctypes.c_ulong


class KEYBDINPUT(ctypes.Structure):
    _fields_ = [
        ("wVk", wt.WORD),
        ("wScan", wt.WORD),
        ("dwFlags", wt.DWORD),
        ("time", wt.DWORD),
        ("dwExtraInfo", ULONG_PTR),
    ]


class MOUSEINPUT(ctypes.Structure):
    _fields_ = [
        ("dx", wt.LONG),
        ("dy", wt.LONG),
        ("mouseData", wt.DWORD),
        ("dwFlags", wt.DWORD),
        ("time", wt.DWORD),
        ("dwExtraInfo", ULONG_PTR),
    ]


class HARDWAREINPUT(ctypes.Structure):
    _fields_ = [
        ("uMsg", wt.DWORD),
        ("wParamL", wt.WORD),
        ("wParamH", wt.WORD),
    ]


class _INPUTUNION(ctypes.Union):
    _fields_ = [
        ("mi", MOUSEINPUT),
        ("ki", KEYBDINPUT),
        ("hi", HARDWAREINPUT),
    ]


class INPUT(ctypes.Structure):
    _anonymous_ = ("u",)
    _fields_ = [
        ("type", wt.DWORD),
        ("u", _INPUTUNION),
    ]


# --- Key names ---
VK_NAMES = {
    "CTRL": 0x11,
    "CONTROL": 0x11,
    "ALT": 0x12,
    "SHIFT": 0x10,
    "WIN": 0x5B,   # Left Windows key
    "LWIN": 0x5B,
    "RWIN": 0x5C,
    "APPS": 0x5D,

    "ENTER": 0x0D,
    "RETURN": 0x0D,
    "ESC": 0x1B,
    "ESCAPE": 0x1B,
    "SPACE": 0x20,
    "TAB": 0x09,
    "BACKSPACE": 0x08,
    "BKSP": 0x08,
    "DEL": 0x2E,
    "DELETE": 0x2E,
    "INS": 0x2D,
    "INSERT": 0x2D,
    "HOME": 0x24,
    "END": 0x23,
    "PGUP": 0x21,
    "PAGEUP": 0x21,
    "PGDN": 0x22,
    "PAGEDOWN": 0x22,
    "LEFT": 0x25,
    "RIGHT": 0x27,
    "UP": 0x26,
    "DOWN": 0x28,

    "BROWSER_BACK": 0xA6,
    "BROWSER_FORWARD": 0xA7,
    "BROWSER_REFRESH": 0xA8,
    "VOLUME_MUTE": 0xAD,
    "VOLUME_DOWN": 0xAE,
    "VOLUME_UP": 0xAF,
    "MEDIA_NEXT": 0xB0,
    "MEDIA_PREV": 0xB1,
    "MEDIA_PLAY_PAUSE": 0xB3,
}

# VK code -> pyautogui key name (fallback backend)
_PYAUTOGUI_NAMES = {
    0x08: "backspace", 0x09: "tab", 0x0D: "enter", 0x10: "shift", 0x11: "ctrl",
    0x12: "alt", 0x1B: "esc", 0x20: "space", 0x21: "pageup", 0x22: "pagedown",
    0x23: "end", 0x24: "home", 0x25: "left", 0x26: "up", 0x27: "right",
    0x28: "down", 0x2D: "insert", 0x2E: "delete", 0x5B: "winleft",
    0x5C: "winright", 0x5D: "apps", 0xA6: "browserback", 0xA7: "browserforward",
    0xA8: "browserrefresh", 0xAD: "volumemute", 0xAE: "volumedown",
    0xAF: "volumeup", 0xB0: "nexttrack", 0xB1: "prevtrack", 0xB3: "playpause",
}


def vk_from_str(key: str) -> int:
    """
    Map a string like 'A', 'D1', 'F1', 'Ctrl', '0x0D' or '13' to a virtual-key code.
    Returns 0 when the key is unknown.
    """
    k = key.strip().upper()
    if not k:
        return 0

    # numeric codes: 0x.. or decimal
    if k.startswith("0X"):
        try:
            return int(k, 16)
        except ValueError:
            return 0
    if k.isdigit():
        return int(k)

    # single letters A–Z
    if len(k) == 1 and "A" <= k <= "Z":
        return ord(k)

    # digit keys are spelled D0–D9, bare numbers are VK codes
    if len(k) == 2 and k[0] == "D" and k[1].isdigit():
        return ord(k[1])

    # function keys F1–F24
    if k.startswith("F") and k[1:].isdigit():
        n = int(k[1:])
        if 1 <= n <= 24:
            return 0x70 + (n - 1)

    return VK_NAMES.get(k, 0)


def parse_key_codes(tokens, log=None, option: str = "") -> tuple[int, ...]:
    """Resolve config tokens to VK codes, dropping unknown and zero entries."""
    codes = []
    for token in tokens:
        vk = vk_from_str(token)
        if vk == 0:
            if log and token.strip() not in ("0", "0x0", "0x00", "0x0000"):
                log.warning(f"[KEYMAPPER] Unknown key '{token}' in {option or 'binding'}, ignored")
            continue
        codes.append(vk)
    return tuple(codes)


def _pyautogui_name(vk: int) -> str | None:
    if vk in _PYAUTOGUI_NAMES:
        return _PYAUTOGUI_NAMES[vk]
    if 0x41 <= vk <= 0x5A or 0x30 <= vk <= 0x39:
        return chr(vk).lower()
    if 0x70 <= vk <= 0x87:
        return f"f{vk - 0x70 + 1}"
    return None


# --- Main class ---
class KeyMapper:
    def __init__(self, log=None, *, use_sendinput: bool = IS_WINDOWS):
        self.log = log
        self.use_sendinput = use_sendinput
        self._user32 = ctypes.WinDLL("user32", use_last_error=True) if use_sendinput else None

    def key_down(self, codes):
        """Press all codes in order (one batch)."""
        self._send(list(codes), down=True)

    def key_up(self, codes):
        """Release all codes in order (one batch)."""
        self._send(list(codes), down=False)

    def _send(self, codes: list[int], down: bool):
        if not codes:
            return
        if self.use_sendinput:
            self._send_input(codes, down)
        else:
            self._send_pyautogui(codes, down)

        if self.log:
            self.log.debug(
                f"[KEYMAPPER] {'DOWN' if down else 'UP'} "
                + " ".join(f"vk=0x{vk:02X}" for vk in codes)
            )

    def _send_input(self, codes: list[int], down: bool):
        flags = 0 if down else KEYEVENTF_KEYUP
        inputs = (INPUT * len(codes))()
        for i, vk in enumerate(codes):
            inputs[i].type = INPUT_KEYBOARD
            inputs[i].ki = KEYBDINPUT(wVk=vk, wScan=0, dwFlags=flags, time=0, dwExtraInfo=0)
        n = self._user32.SendInput(len(codes), inputs, ctypes.sizeof(INPUT))
        if n != len(codes):
            err = ctypes.get_last_error()
            if self.log:
                self.log.error(f"[KEYMAPPER] SendInput sent {n}/{len(codes)}, err={err}")

    def _send_pyautogui(self, codes: list[int], down: bool):
        import pyautogui

        for vk in codes:
            name = _pyautogui_name(vk)
            if name is None:
                if self.log:
                    self.log.warning(f"[KEYMAPPER] No key name for vk=0x{vk:02X}")
                continue
            if down:
                pyautogui.keyDown(name)
            else:
                pyautogui.keyUp(name)
