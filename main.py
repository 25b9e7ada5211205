#!/usr/bin/env python3
"""
main.py - Entry point for Gopher (gamepad -> mouse & keyboard)
"""

import argparse
import ctypes
import platform
import sys
import time

from gopher.controller.bindings import GopherConfig
from gopher.controller.gamecontroller import GameController
from gopher.controller.keymapper import KeyMapper
from gopher.controller.loop import GopherLoop
from gopher.controller.mousecontroller import MouseController
from gopher.controller.windows import WindowControl
from gopher.file.inireader import IniReader
from gopher.logger.logger import setup_logger

DEFAULT_CONFIG_FILE = "config.ini"
CONTROLLER_RESCAN_S = 1.0


def check_single_instance(mutex_name="GopherMutex"):
    """Ensure only one instance of this program runs."""
    if platform.system().lower() != "windows":
        return
    kernel32 = ctypes.windll.kernel32
    kernel32.CreateMutexW.restype = ctypes.c_void_p
    kernel32.CreateMutexW(None, False, mutex_name)

    # ERROR_ALREADY_EXISTS = 183
    last_error = kernel32.GetLastError()
    if last_error == 183:
        print("Another instance is already running.")
        sys.exit(1)


# ----------------------------------------------------------------------
# Controller selection
# ----------------------------------------------------------------------
def list_controllers(log):
    devices = GameController.list_devices()
    if not devices:
        log.info("[DEVICE] No controllers connected.")
    for idx, guid, name in devices:
        log.info(f"[DEVICE] Joystick {idx}: {name} (GUID={guid})")


def wait_for_controller(log, index: int, guid: str = None) -> GameController:
    """
    Block until a controller is available.
    A GUID (stable across reboots) wins over the index.
    """
    announced = False
    while True:
        devices = GameController.list_devices()
        if guid is not None:
            found = any(dev_guid == guid for _, dev_guid, _ in devices)
        else:
            found = index < len(devices)
        if found:
            controller = GameController(guid=guid, index=index, log=log)
            log.info(f"[DEVICE] Using joystick {controller.get_name()} (GUID={controller.get_guid()})")
            return controller
        if not announced:
            log.info("[DEVICE] Please connect an Xbox controller...")
            announced = True
        time.sleep(CONTROLLER_RESCAN_S)


# ----------------------------------------------------------------------
# Main runner
# ----------------------------------------------------------------------
def load_config(log, cfgfile: str) -> GopherConfig:
    cfg = IniReader(cfgfile)
    if not cfg.exists:
        log.warning(f"[CONFIG] {cfgfile} not found, using built-in defaults")
    else:
        log.info(f"[CONFIG] Loading {cfgfile}")
    return GopherConfig.from_ini(cfg, log)


def run_main(log, args):
    gopher_cfg = load_config(log, args.config)

    window = WindowControl(log, hidden=args.hidden)
    window.set_visibility(window.hidden)

    controller = wait_for_controller(log, args.index, args.guid)
    keymapper = KeyMapper(log)
    mouse = MouseController(log)

    loop = GopherLoop(log, gopher_cfg, controller, keymapper, mouse, window)
    loop.run()


def main():
    parser = argparse.ArgumentParser(description="Gopher - use a gamepad as mouse and keyboard")
    parser.add_argument(
        "--config",
        "-c",
        type=str,
        default=DEFAULT_CONFIG_FILE,
        help=f"INI config file (default: {DEFAULT_CONFIG_FILE})",
    )
    parser.add_argument("--index", "-i", type=int, default=0, help="Controller index (default: 0)")
    parser.add_argument("--guid", "-g", type=str, default=None, help="Controller GUID, see --list (overrides --index)")
    parser.add_argument("--list", "-l", action="store_true", help="List connected controllers and exit")
    parser.add_argument("--hidden", action="store_true", help="Start with the console window hidden")
    parser.add_argument("--log-file", default="gopher.log", help="Log file, overwritten each run")
    args = parser.parse_args()

    log = setup_logger("gopher", logfile=args.log_file)

    if args.list:
        list_controllers(log)
        return

    check_single_instance()
    log.info("Starting Gopher")
    try:
        run_main(log, args)
    except KeyboardInterrupt:
        log.info("Shutdown requested")


if __name__ == "__main__":
    main()
