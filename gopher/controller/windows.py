#!/usr/bin/env python3
"""
windows.py - Console window visibility and the On-Screen Keyboard toggle.
Windows only; elsewhere the calls are logged and ignored.
"""

import platform

IS_WINDOWS = platform.system().lower() == "windows"

if IS_WINDOWS:
    import win32con
    import win32console
    import win32gui

OSK_TITLE = "On-Screen Keyboard"


class WindowControl:
    def __init__(self, log, hidden: bool = False):
        self.log = log
        self.hidden = hidden

    def set_visibility(self, hidden: bool):
        self.hidden = hidden
        if not IS_WINDOWS:
            self.log.debug("[WINDOW] Visibility toggle is only supported on Windows")
            return
        hwnd = win32console.GetConsoleWindow()
        if hwnd:
            win32gui.ShowWindow(hwnd, win32con.SW_HIDE if hidden else win32con.SW_SHOW)

    def toggle_visibility(self):
        self.set_visibility(not self.hidden)
        self.log.info(f"[WINDOW] Window {'hidden' if self.hidden else 'unhidden'}")

    @staticmethod
    def find_window(title: str):
        if not IS_WINDOWS:
            return None
        hwnd = win32gui.FindWindow(None, title)
        return hwnd if hwnd else None

    def toggle_on_screen_keyboard(self) -> bool:
        """Restore the OSK if minimized, minimize it otherwise. False if not running."""
        hwnd = self.find_window(OSK_TITLE)
        if hwnd is None:
            return False
        if win32gui.IsIconic(hwnd):
            win32gui.ShowWindow(hwnd, win32con.SW_RESTORE)
            self.log.debug("[WINDOW] On-Screen Keyboard restored")
        else:
            win32gui.ShowWindow(hwnd, win32con.SW_MINIMIZE)
            self.log.debug("[WINDOW] On-Screen Keyboard minimized")
        return True
