from dataclasses import dataclass, field

from gopher.controller.keymapper import VK_NAMES, parse_key_codes
from gopher.controller.snapshot import AXIS_MAX, TRIGGER_DEAD_ZONE, Button
from gopher.controller.speeds import SpeedTable

DEFAULT_DEAD_ZONE = 6000
DEFAULT_SCROLL_DEAD_ZONE = 5000
DEFAULT_SCROLL_SPEED = 0.1
MIN_SCROLL_SPEED = 0.00001

# Keyboard-mapped buttons, in dispatch order
GAMEPAD_BUTTONS = (
    ("GAMEPAD_DPAD_UP", Button.DPAD_UP),
    ("GAMEPAD_DPAD_DOWN", Button.DPAD_DOWN),
    ("GAMEPAD_DPAD_LEFT", Button.DPAD_LEFT),
    ("GAMEPAD_DPAD_RIGHT", Button.DPAD_RIGHT),
    ("GAMEPAD_START", Button.START),
    ("GAMEPAD_BACK", Button.BACK),
    ("GAMEPAD_LEFT_THUMB", Button.LEFT_THUMB),
    ("GAMEPAD_RIGHT_THUMB", Button.RIGHT_THUMB),
    ("GAMEPAD_LEFT_SHOULDER", Button.LEFT_SHOULDER),
    ("GAMEPAD_RIGHT_SHOULDER", Button.RIGHT_SHOULDER),
    ("GAMEPAD_A", Button.A),
    ("GAMEPAD_B", Button.B),
    ("GAMEPAD_X", Button.X),
    ("GAMEPAD_Y", Button.Y),
)

DEFAULT_KEYS = {
    Button.DPAD_UP: (VK_NAMES["UP"],),
    Button.DPAD_DOWN: (VK_NAMES["DOWN"],),
    Button.DPAD_LEFT: (VK_NAMES["LEFT"],),
    Button.DPAD_RIGHT: (VK_NAMES["RIGHT"],),
    Button.LEFT_SHOULDER: (VK_NAMES["BROWSER_BACK"],),
    Button.RIGHT_SHOULDER: (VK_NAMES["BROWSER_FORWARD"],),
    Button.B: (VK_NAMES["ENTER"],),
}

DEFAULT_TRIGGER_LEFT = (VK_NAMES["SPACE"],)
DEFAULT_TRIGGER_RIGHT = (VK_NAMES["BACKSPACE"],)


# ---------------------------------------------------------------
# Button masks
# ---------------------------------------------------------------
def parse_button_mask(value: str) -> int:
    """
    '0x1030', '48', 'A', 'START+BACK' → XInput button mask.
    Raises ValueError for unknown names.
    """
    value = value.strip()
    if not value:
        return 0
    try:
        return int(value, 0)
    except ValueError:
        pass

    mask = 0
    for part in value.split("+"):
        name = part.strip().upper()
        if name.startswith("GAMEPAD_"):
            name = name[len("GAMEPAD_"):]
        if name not in Button.__members__:
            raise ValueError(f"Unknown button '{part.strip()}'")
        mask |= Button[name]
    return int(mask)


def button_name(mask: int) -> str:
    if not mask:
        return "-"
    names = [b.name for b in Button if b and (mask & b) == b]
    return "+".join(names) if names else f"0x{mask:04X}"


@dataclass
class KeyBinding:
    button: Button
    keys: tuple[int, ...]


# ---------------------------------------------------------------
# Config
# ---------------------------------------------------------------
@dataclass
class GopherConfig:
    # Commands (button masks, 0 = unbound)
    mouse_left: int = int(Button.A)
    mouse_right: int = int(Button.X)
    mouse_middle: int = int(Button.LEFT_THUMB)
    hide: int = 0
    disable: int = int(Button.START | Button.BACK)
    disable_vibration: int = 0
    speed_change: int = int(Button.RIGHT_THUMB)
    osk: int = 0

    # Controller bindings
    key_bindings: list[KeyBinding] = field(
        default_factory=lambda: [KeyBinding(b, DEFAULT_KEYS.get(b, ())) for _, b in GAMEPAD_BUTTONS]
    )
    trigger_left: tuple[int, ...] = DEFAULT_TRIGGER_LEFT
    trigger_right: tuple[int, ...] = DEFAULT_TRIGGER_RIGHT

    # Advanced
    acceleration_factor: float = 0.0
    dead_zone: int = DEFAULT_DEAD_ZONE
    scroll_dead_zone: int = DEFAULT_SCROLL_DEAD_ZONE
    scroll_speed: float = DEFAULT_SCROLL_SPEED
    trigger_dead_zone: int = TRIGGER_DEAD_ZONE
    speeds: SpeedTable = field(default_factory=SpeedTable)
    swap_thumbsticks: bool = False

    # Debug
    debug_inputs: bool = False
    log_buttons: bool = False
    log_axes: bool = False

    @property
    def command_buttons(self) -> list[int]:
        return [b for b in (self.mouse_left, self.mouse_right, self.mouse_middle, self.hide,
                            self.disable, self.disable_vibration, self.speed_change, self.osk) if b]

    @property
    def tracked_buttons(self) -> list[int]:
        """Every button mask the loop can observe."""
        buttons = self.command_buttons + [kb.button for kb in self.key_bindings if kb.keys]
        return list(dict.fromkeys(int(b) for b in buttons))

    @classmethod
    def from_ini(cls, cfg, log=None):
        obj = cls()

        def warn(msg):
            if log:
                log.warning(msg)

        # --- Command buttons ---
        for option, attr in (
            ("CONFIG_MOUSE_LEFT", "mouse_left"),
            ("CONFIG_MOUSE_RIGHT", "mouse_right"),
            ("CONFIG_MOUSE_MIDDLE", "mouse_middle"),
            ("CONFIG_HIDE", "hide"),
            ("CONFIG_DISABLE", "disable"),
            ("CONFIG_DISABLE_VIBRATION", "disable_vibration"),
            ("CONFIG_SPEED_CHANGE", "speed_change"),
            ("CONFIG_OSK", "osk"),
        ):
            if not cfg.defined(option):
                continue
            raw = cfg.get_str(option)
            try:
                setattr(obj, attr, parse_button_mask(raw))
            except ValueError:
                warn(f"[CONFIG] Invalid {option} = '{raw}', using default {button_name(getattr(obj, attr))}")

        # --- Controller bindings ---
        for kb, (option, _) in zip(obj.key_bindings, GAMEPAD_BUTTONS):
            if cfg.defined(option):
                kb.keys = parse_key_codes(cfg.get_list(option), log, option)
        if cfg.defined("GAMEPAD_TRIGGER_LEFT"):
            obj.trigger_left = parse_key_codes(cfg.get_list("GAMEPAD_TRIGGER_LEFT"), log, "GAMEPAD_TRIGGER_LEFT")
        if cfg.defined("GAMEPAD_TRIGGER_RIGHT"):
            obj.trigger_right = parse_key_codes(cfg.get_list("GAMEPAD_TRIGGER_RIGHT"), log, "GAMEPAD_TRIGGER_RIGHT")

        # --- Advanced ---
        obj.acceleration_factor = cfg.get_float("ACCELERATION_FACTOR", 0.0)

        obj.dead_zone = _dead_zone(cfg, "DEAD_ZONE", DEFAULT_DEAD_ZONE, warn)
        obj.scroll_dead_zone = _dead_zone(cfg, "SCROLL_DEAD_ZONE", DEFAULT_SCROLL_DEAD_ZONE, warn)

        obj.scroll_speed = cfg.get_float("SCROLL_SPEED", 0.0)
        if obj.scroll_speed < MIN_SCROLL_SPEED:
            obj.scroll_speed = DEFAULT_SCROLL_SPEED

        obj.trigger_dead_zone = cfg.get_int("TRIGGER_DEAD_ZONE", TRIGGER_DEAD_ZONE)

        obj.speeds = SpeedTable.from_string(cfg.get_str("CURSOR_SPEED"), log)
        obj.swap_thumbsticks = cfg.get_int("SWAP_THUMBSTICKS", 0) != 0

        obj.debug_inputs = cfg.get_bool("DEBUG_INPUTS")
        obj.log_buttons = cfg.get_bool("LOG_BUTTONS")
        obj.log_axes = cfg.get_bool("LOG_AXES")

        for option in ("ACCELERATION_FACTOR", "DEAD_ZONE", "SCROLL_DEAD_ZONE", "SCROLL_SPEED",
                       "TRIGGER_DEAD_ZONE", "SWAP_THUMBSTICKS"):
            raw = cfg.get_str(option)
            if raw and not _is_number(raw):
                warn(f"[CONFIG] Invalid {option} = '{raw}', using default")

        if log:
            obj.log_summary(log)
        return obj

    def log_summary(self, log):
        log.info(
            f"[BINDINGS] Mouse left={button_name(self.mouse_left)} right={button_name(self.mouse_right)} "
            f"middle={button_name(self.mouse_middle)}"
        )
        log.info(
            f"[BINDINGS] Disable={button_name(self.disable)} vibration={button_name(self.disable_vibration)} "
            f"speed={button_name(self.speed_change)} hide={button_name(self.hide)} osk={button_name(self.osk)}"
        )
        for kb in self.key_bindings:
            if kb.keys:
                log.info(f"[BINDING] {kb.button.name} -> " + " ".join(f"0x{vk:02X}" for vk in kb.keys))
        log.info(
            f"[CONFIG] dead_zone={self.dead_zone} scroll_dead_zone={self.scroll_dead_zone} "
            f"scroll_speed={self.scroll_speed} accel={self.acceleration_factor} "
            f"swap_thumbsticks={self.swap_thumbsticks}"
        )
        log.info("[CONFIG] Cursor speeds: " + ", ".join(f"{n}={s}" for n, s in self.speeds.entries))


def _dead_zone(cfg, option: str, default: int, warn) -> int:
    """0 or unset means default. Anything outside (0, AXIS_MAX) warns and falls back."""
    value = cfg.get_int(option, 0)
    if value == 0:
        return default
    if not 0 < value < AXIS_MAX:
        warn(f"[CONFIG] {option} = {value} out of range, using default {default}")
        return default
    return value


def _is_number(raw: str) -> bool:
    try:
        float(raw)
        return True
    except ValueError:
        try:
            int(raw, 0)
            return True
        except ValueError:
            return False
