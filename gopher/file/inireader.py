import configparser
import re
from pathlib import Path

DEFAULT_SECTION = "gopher"


class IniReader:
    """
    Flat KEY = value config reader.
    Files without a section header are read into an implicit [gopher] section.
    """

    def __init__(self, path=None, *, text: str | None = None, section: str = DEFAULT_SECTION):
        self.section = section
        self.cfg = configparser.ConfigParser(
            inline_comment_prefixes=(";", "#"),
            strict=False,
            interpolation=None,
        )
        self.cfg.optionxform = str  # preserve case
        self.exists = True

        if text is None:
            if path is None or not Path(path).is_file():
                self.exists = False
                text = ""
            else:
                text = Path(path).read_text(encoding="utf-8")
        self.cfg.read_string(f"[{section}]\n{text}")

    def _clean(self, val: str) -> str:
        if val is None:
            return ""
        # cut at first ; or #
        for sep in (";", "#"):
            if sep in val:
                val = val.split(sep, 1)[0]
        return val.strip()

    def defined(self, option: str) -> bool:
        """True when the key is present, even with an empty value."""
        return self.cfg.has_option(self.section, option)

    def get_str(self, option: str, fallback: str = "") -> str:
        if self.cfg.has_option(self.section, option):
            raw = self.cfg.get(self.section, option, fallback=fallback)
            return self._clean(raw)
        return fallback

    def get_int(self, option: str, fallback: int = 0) -> int:
        try:
            return int(self.get_str(option, str(fallback)), 0)
        except ValueError:
            return fallback

    def get_float(self, option: str, fallback: float = 0.0) -> float:
        try:
            return float(self.get_str(option, str(fallback)))
        except ValueError:
            return fallback

    def get_bool(self, option: str, fallback: bool = False) -> bool:
        val = self.get_str(option, str(fallback))
        return val.lower() in ("1", "yes", "true", "on")

    def get_list(self, option: str) -> list[str]:
        if not self.cfg.has_option(self.section, option):
            return []
        raw = self._clean(self.cfg.get(self.section, option, fallback=""))

        # Handle line continuations like "\" in INI
        joined = raw.replace("\\\n", " ").replace("\\", " ")

        # Values may be separated by whitespace, commas or "+"
        tokens = re.split(r"[\s,+]+", joined)

        return [t.strip() for t in tokens if t.strip()]
