from gopher.file.inireader import IniReader


def test_sectionless_file_with_comments(tmp_path):
    path = tmp_path / "config.ini"
    path.write_text(
        "; comment line\n"
        "CONFIG_DISABLE = START+BACK ; inline\n"
        "DEAD_ZONE = 0x1770\n"
        "SCROLL_SPEED = 0.2 # another\n"
        "SWAP_THUMBSTICKS = yes\n",
        encoding="utf-8",
    )
    cfg = IniReader(path)
    assert cfg.exists
    assert cfg.get_str("CONFIG_DISABLE") == "START+BACK"
    assert cfg.get_int("DEAD_ZONE") == 6000
    assert cfg.get_float("SCROLL_SPEED") == 0.2
    assert cfg.get_bool("SWAP_THUMBSTICKS")


def test_case_is_preserved():
    cfg = IniReader(text="Cursor_Speed = 1\n")
    assert cfg.defined("Cursor_Speed")
    assert not cfg.defined("CURSOR_SPEED")


def test_missing_file_reads_as_empty(tmp_path):
    cfg = IniReader(tmp_path / "nope.ini")
    assert not cfg.exists
    assert cfg.get_int("DEAD_ZONE", 5) == 5


def test_invalid_numbers_fall_back():
    cfg = IniReader(text="DEAD_ZONE = lots\nSCROLL_SPEED = fast\n")
    assert cfg.get_int("DEAD_ZONE", 6000) == 6000
    assert cfg.get_float("SCROLL_SPEED", 0.1) == 0.1


def test_get_list_splits_on_space_comma_and_plus():
    cfg = IniReader(text="GAMEPAD_A = CTRL C\nGAMEPAD_B = 0x11, 0x56\nGAMEPAD_X = Ctrl+Shift+Esc\n")
    assert cfg.get_list("GAMEPAD_A") == ["CTRL", "C"]
    assert cfg.get_list("GAMEPAD_B") == ["0x11", "0x56"]
    assert cfg.get_list("GAMEPAD_X") == ["Ctrl", "Shift", "Esc"]
    assert cfg.get_list("GAMEPAD_Y") == []


def test_empty_value_is_defined_and_blank():
    cfg = IniReader(text="CONFIG_HIDE =\n")
    assert cfg.defined("CONFIG_HIDE")
    assert cfg.get_str("CONFIG_HIDE") == ""
    assert cfg.get_list("CONFIG_HIDE") == []
    assert not cfg.defined("CONFIG_OSK")
