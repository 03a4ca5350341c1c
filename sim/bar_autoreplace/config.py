"""
BAR Unit AutoReplace - Configuration
======================================
Tracker settings and hotkey bindings, loadable from YAML.
"""

from dataclasses import dataclass, field
from typing import List, Optional

import yaml

from bar_autoreplace.models import KeyMods
from bar_autoreplace import parity


# ---------------------------------------------------------------------------
# Key bindings
# ---------------------------------------------------------------------------

_MODIFIERS = ("ctrl", "shift", "alt", "meta")


@dataclass(frozen=True)
class KeyBinding:
    keycode: int
    ctrl: bool = False
    shift: bool = False
    alt: bool = False
    meta: bool = False

    @classmethod
    def parse(cls, text: str) -> "KeyBinding":
        """Parse 'ctrl+u' style bindings. Keys are single characters or 'sdlkey:<n>'."""
        parts = [p.strip().lower() for p in text.split("+") if p.strip()]
        if not parts:
            raise ValueError(f"Empty key binding: {text!r}")

        *mods, key = parts
        flags = {}
        for mod in mods:
            if mod not in _MODIFIERS:
                raise ValueError(f"Unknown modifier '{mod}' in binding {text!r}")
            flags[mod] = True

        if key.startswith("sdlkey:"):
            try:
                keycode = int(key[len("sdlkey:"):])
            except ValueError:
                raise ValueError(f"Bad keycode in binding {text!r}")
        elif len(key) == 1:
            keycode = ord(key)
        else:
            raise ValueError(f"Unknown key '{key}' in binding {text!r}")
        return cls(keycode=keycode, **flags)

    def matches(self, key: int, mods: KeyMods) -> bool:
        # ctrl, shift and alt must match exactly: ctrl+shift+u is not ctrl+u.
        # meta is only checked when the binding names it.
        return (key == self.keycode
                and mods.ctrl == self.ctrl
                and mods.shift == self.shift
                and mods.alt == self.alt
                and (mods.meta or not self.meta))


# ---------------------------------------------------------------------------
# Tracker config
# ---------------------------------------------------------------------------

@dataclass
class TrackerConfig:
    command_lookahead: int = parity.COMMAND_LOOKAHEAD
    tag_binding: str = parity.TAG_BINDING
    untag_binding: str = parity.UNTAG_BINDING
    strategies: List[str] = field(default_factory=lambda: ["adopt_sibling"])
    echo_prefix: str = parity.ECHO_PREFIX

    def __post_init__(self):
        if self.command_lookahead < 1:
            raise ValueError(f"command_lookahead must be positive, got {self.command_lookahead}")
        self.tag_key = KeyBinding.parse(self.tag_binding)
        self.untag_key = KeyBinding.parse(self.untag_binding)


def config_from_dict(data: Optional[dict]) -> TrackerConfig:
    data = data or {}
    if not isinstance(data, dict):
        raise ValueError(f"Config must be a mapping, got {data!r}")
    kwargs = {k: data[k] for k in data if k in TrackerConfig.__dataclass_fields__}
    if "strategies" in kwargs:
        if not isinstance(kwargs["strategies"], list):
            raise ValueError(f"strategies must be a list, got {kwargs['strategies']!r}")
        kwargs["strategies"] = [str(s) for s in kwargs["strategies"]]
    if "command_lookahead" in kwargs:
        try:
            kwargs["command_lookahead"] = int(kwargs["command_lookahead"])
        except (TypeError, ValueError):
            raise ValueError(f"command_lookahead must be an integer, "
                             f"got {kwargs['command_lookahead']!r}")
    for key in ("tag_binding", "untag_binding", "echo_prefix"):
        if key in kwargs and not isinstance(kwargs[key], str):
            raise ValueError(f"{key} must be a string, got {kwargs[key]!r}")
    return TrackerConfig(**kwargs)


def config_to_dict(config: TrackerConfig) -> dict:
    return {
        "command_lookahead": config.command_lookahead,
        "tag_binding": config.tag_binding,
        "untag_binding": config.untag_binding,
        "strategies": list(config.strategies),
        "echo_prefix": config.echo_prefix,
    }


def load_config(filepath: str) -> TrackerConfig:
    with open(filepath, "r") as f:
        data = yaml.safe_load(f)
    if data is not None and not isinstance(data, dict):
        raise ValueError(f"Config must be a mapping: {filepath}")
    return config_from_dict(data)
