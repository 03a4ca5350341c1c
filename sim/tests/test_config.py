"""Tests for hotkey bindings and tracker config loading."""

import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from bar_autoreplace.config import (
    KeyBinding, TrackerConfig, config_from_dict, load_config,
)
from bar_autoreplace.models import KeyMods


def test_parse_ctrl_u():
    assert KeyBinding.parse("ctrl+u") == KeyBinding(keycode=117, ctrl=True)


def test_parse_is_case_insensitive():
    assert KeyBinding.parse("Ctrl+Shift+J") == KeyBinding(keycode=106, ctrl=True, shift=True)


def test_parse_sdl_keycode():
    assert KeyBinding.parse("alt+sdlkey:282") == KeyBinding(keycode=282, alt=True)


@pytest.mark.parametrize("text", ["", "ctrl+", "hyper+u", "ctrl+f12", "ctrl+sdlkey:x"])
def test_parse_rejects_bad_bindings(text):
    with pytest.raises(ValueError):
        KeyBinding.parse(text)


def test_binding_requires_exact_modifiers():
    kb = KeyBinding.parse("ctrl+u")
    assert kb.matches(117, KeyMods(ctrl=True))
    assert not kb.matches(117, KeyMods(ctrl=True, shift=True))
    assert not kb.matches(117, KeyMods())
    assert not kb.matches(106, KeyMods(ctrl=True))
    assert not kb.matches(117, KeyMods(ctrl=True, alt=True))


def test_binding_ignores_meta_unless_named():
    kb = KeyBinding.parse("ctrl+u")
    assert kb.matches(117, KeyMods(ctrl=True, meta=True))
    meta_kb = KeyBinding.parse("ctrl+meta+u")
    assert meta_kb.matches(117, KeyMods(ctrl=True, meta=True))
    assert not meta_kb.matches(117, KeyMods(ctrl=True))


def test_default_config():
    config = TrackerConfig()
    assert config.command_lookahead == 20
    assert config.strategies == ["adopt_sibling"]
    assert config.tag_key == KeyBinding(117, ctrl=True)
    assert config.untag_key == KeyBinding(106, ctrl=True)


def test_bad_lookahead_rejected():
    with pytest.raises(ValueError):
        TrackerConfig(command_lookahead=0)


def test_config_from_dict_ignores_unknown_keys():
    config = config_from_dict({"command_lookahead": "5", "colour": "red"})
    assert config.command_lookahead == 5


def test_load_config(tmp_path):
    path = tmp_path / "autoreplace.yaml"
    path.write_text(
        "tag_binding: alt+u\n"
        "strategies: [adopt_sibling, factory_build]\n"
    )
    config = load_config(str(path))
    assert config.tag_key == KeyBinding(117, alt=True)
    assert config.strategies == ["adopt_sibling", "factory_build"]
    assert config.untag_binding == "ctrl+j"


def test_load_empty_config(tmp_path):
    path = tmp_path / "empty.yaml"
    path.write_text("")
    assert load_config(str(path)).command_lookahead == 20


def test_load_config_must_be_mapping(tmp_path):
    path = tmp_path / "list.yaml"
    path.write_text("- ctrl+u\n")
    with pytest.raises(ValueError):
        load_config(str(path))


def test_shipped_default_config_loads():
    path = Path(__file__).parent.parent / "data" / "config" / "default.yaml"
    config = load_config(str(path))
    assert config == TrackerConfig()
