"""Tests for Lua parity constants."""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from bar_autoreplace.parity import (
    KEY_U, KEY_J, COMMAND_LOOKAHEAD, CMD_STOP, CMD_WAIT, CMD_MOVE, CMD_UNLOAD_UNITS,
    ECHO_TAG, ECHO_UNTAG, ECHO_REPLACED,
)
from bar_autoreplace.config import TrackerConfig


def test_hotkeys():
    """Must match Lua: key == 117 (Ctrl-U), key == 106 (Ctrl-J)."""
    assert KEY_U == 117
    assert KEY_J == 106


def test_default_bindings_use_parity_keys():
    config = TrackerConfig()
    assert config.tag_key.keycode == KEY_U
    assert config.untag_key.keycode == KEY_J


def test_command_lookahead():
    """Must match Lua: GetUnitCommands(unitID, 20)."""
    assert COMMAND_LOOKAHEAD == 20


def test_command_ids_match_engine():
    """Spring CMD table values."""
    assert CMD_STOP == 0
    assert CMD_WAIT == 5
    assert CMD_MOVE == 10
    assert CMD_UNLOAD_UNITS == 80


def test_echo_messages():
    assert ECHO_TAG.format(prefix="AutoReplace", name="armpeep") == "AutoReplace: armpeep"
    assert ECHO_UNTAG.format(prefix="AutoReplace", name="armpeep") == "AutoReplace unset: armpeep"
    assert ECHO_REPLACED.format(name="armpeep") == "replaced armpeep"
