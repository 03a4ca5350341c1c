"""
BAR Unit AutoReplace - I/O
============================
Load and save replay scenarios from YAML files.

Scenario layout:

    name: Spotter screen
    team: 0
    config: {strategies: [adopt_sibling]}
    unit_defs:
      - {id: 1, name: armpeep}
      - {id: 2, name: armap, factory: true, build_options: [armpeep]}
    units:
      - {id: 100, def: armpeep, position: [0, 0, 0],
         commands: [{cmd: PATROL, params: [50, 0, 50]}]}
    events:
      - select: [100]
      - key: ctrl+u
      - destroy: 100
"""

import json
from dataclasses import asdict
from pathlib import Path
from typing import Any, Dict, List

import yaml

from bar_autoreplace.config import config_from_dict, config_to_dict
from bar_autoreplace.models import CMD, Order, UnitDef, QUEUED, REPLACE
from bar_autoreplace.replay import (
    EVENT_KINDS, ReplayResult, Scenario, ScenarioEvent, UnitSpec,
)


def load_scenario(filepath: str) -> Scenario:
    path = Path(filepath)
    if not path.exists():
        raise FileNotFoundError(f"Scenario not found: {filepath}")
    with open(path, "r") as f:
        data = yaml.safe_load(f)
    if not isinstance(data, dict):
        raise ValueError(f"Scenario must be a mapping: {filepath}")
    data.setdefault("name", path.stem)
    return parse_scenario(data)


def parse_scenario(data: Dict[str, Any]) -> Scenario:
    scenario = Scenario(
        name=str(data.get("name", "Untitled")),
        description=data.get("description", ""),
        team=_int(data.get("team", 0), "team"),
        config=config_from_dict(data.get("config")),
    )
    scenario.unit_defs = _parse_unit_defs(_as_list(data.get("unit_defs"), "unit_defs"))

    for item in _as_list(data.get("units"), "units"):
        scenario.units.append(UnitSpec(
            unit_id=_int(_require(item, "id", "unit"), "unit id"),
            unit_def=_require(item, "def", "unit"),
            team=item.get("team"),
            position=_parse_position(item.get("position", (0, 0, 0))),
            commands=parse_orders(item.get("commands", [])),
        ))

    for item in _as_list(data.get("events"), "events"):
        scenario.events.append(_parse_event(item))
    return scenario


def save_scenario(scenario: Scenario, filepath: str):
    data = {
        "name": scenario.name,
        "description": scenario.description,
        "team": scenario.team,
        "config": config_to_dict(scenario.config),
    }
    by_id = {d.def_id: d.name for d in scenario.unit_defs}
    data["unit_defs"] = [
        {
            "id": d.def_id,
            "name": d.name,
            "human_name": d.human_name,
            "factory": d.is_factory,
            "transport": d.is_transport,
            "build_options": [by_id.get(b, b) for b in d.build_options],
        }
        for d in scenario.unit_defs
    ]
    data["units"] = []
    for spec in scenario.units:
        entry = {
            "id": spec.unit_id,
            "def": spec.unit_def,
            "position": list(spec.position),
            "commands": serialize_orders(spec.commands),
        }
        if spec.team is not None:
            entry["team"] = spec.team
        data["units"].append(entry)
    data["events"] = [_serialize_event(e) for e in scenario.events]

    with open(filepath, "w") as f:
        yaml.dump(data, f, default_flow_style=False, sort_keys=False)


def export_result_json(result: ReplayResult, filepath: str):
    """Export a replay result as JSON."""
    data = result_to_dict(result)
    with open(filepath, "w") as f:
        json.dump(data, f, indent=2)


def result_to_dict(result: ReplayResult) -> dict:
    return {
        "scenario": result.scenario_name,
        "events_applied": result.events_applied,
        "event_log": result.event_log,
        "issued": [
            {
                "seq": entry.seq,
                "unit": entry.unit_id,
                "order": str(entry.order),
                "cmd_id": entry.order.cmd_id,
                "params": list(entry.order.params),
                "options": asdict(entry.order.options),
            }
            for entry in result.issued
        ],
        "echoes": result.echoes,
        "tables": _json_keys(result.tables),
    }


def _json_keys(value):
    # JSON object keys must be strings; unit ids are ints
    if isinstance(value, dict):
        return {str(k): _json_keys(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_json_keys(v) for v in value]
    return value


# ---------------------------------------------------------------------------
# Orders
# ---------------------------------------------------------------------------

def parse_cmd(value) -> int:
    if isinstance(value, bool):
        raise ValueError(f"Bad command: {value!r}")
    if isinstance(value, int):
        return value
    name = str(value).upper()
    if name.startswith("BUILD:"):
        return -int(name[len("BUILD:"):])
    try:
        return int(CMD[name])
    except KeyError:
        raise ValueError(f"Unknown command: {value!r}. Choose from: {[c.name for c in CMD]}")


def parse_order(item) -> Order:
    """An order is a command name ('STOP') or {cmd, params, queued}."""
    if isinstance(item, (str, int)):
        return Order.make(parse_cmd(item), (), QUEUED)
    if not isinstance(item, dict):
        raise ValueError(f"Bad order: {item!r}")
    options = QUEUED if item.get("queued", True) else REPLACE
    params = _as_list(item.get("params"), "order params")
    return Order.make(parse_cmd(_require(item, "cmd", "order")), _floats(params, "order params"), options)


def parse_orders(items) -> List[Order]:
    return [parse_order(item) for item in _as_list(items, "orders")]


def serialize_orders(orders: List[Order]) -> List[dict]:
    out = []
    for o in orders:
        kind = o.kind
        entry = {"cmd": kind.name if kind is not None else o.cmd_id}
        if o.params:
            entry["params"] = list(o.params)
        if not o.options.shift:
            entry["queued"] = False
        out.append(entry)
    return out


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _require(item, key: str, what: str):
    if not isinstance(item, dict) or key not in item:
        raise ValueError(f"{what} entry missing '{key}': {item!r}")
    return item[key]


def _as_list(value, what: str) -> list:
    # an absent or empty section reads as null in YAML
    if value is None:
        return []
    if not isinstance(value, list):
        raise ValueError(f"{what} must be a list, got {value!r}")
    return value


def _int(value, what: str = "value") -> int:
    if isinstance(value, bool):
        raise ValueError(f"{what} must be an integer, got {value!r}")
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValueError(f"{what} must be an integer, got {value!r}")


def _floats(values, what: str) -> List[float]:
    try:
        return [float(v) for v in values]
    except (TypeError, ValueError):
        raise ValueError(f"{what} must be numbers, got {values!r}")


def _parse_position(value):
    if not isinstance(value, (list, tuple)) or len(value) != 3:
        raise ValueError(f"Position must be [x, y, z], got {value!r}")
    return tuple(_floats(value, "position"))


def _parse_unit_defs(items) -> List[UnitDef]:
    defs = []
    for item in items:
        defs.append(UnitDef(
            def_id=_int(_require(item, "id", "unit_def"), "unit_def id"),
            name=str(_require(item, "name", "unit_def")),
            human_name=item.get("human_name", ""),
            is_factory=bool(item.get("factory", False)),
            is_transport=bool(item.get("transport", False)),
        ))

    # build options may name defs declared later in the list
    by_name = {d.name: d.def_id for d in defs}
    for udef, item in zip(defs, items):
        for opt in _as_list(item.get("build_options"), f"build_options of {udef.name}"):
            if isinstance(opt, int):
                udef.build_options.append(opt)
            elif isinstance(opt, str) and opt in by_name:
                udef.build_options.append(by_name[opt])
            else:
                raise ValueError(f"Unknown build option '{opt}' for {udef.name}")
    return defs


def _unit_list(value) -> List[int]:
    if isinstance(value, int) and not isinstance(value, bool):
        return [value]
    if not isinstance(value, list):
        raise ValueError(f"Expected a unit id or a list of unit ids, got {value!r}")
    return [_int(v, "unit id") for v in value]


def _parse_event(item) -> ScenarioEvent:
    if not isinstance(item, dict) or len(item) != 1:
        raise ValueError(f"Event must be a single-key mapping: {item!r}")
    kind, value = next(iter(item.items()))
    if kind not in EVENT_KINDS:
        raise ValueError(f"Unknown event kind: {kind}. Choose from: {list(EVENT_KINDS)}")

    if kind in ("select", "tag", "untag"):
        return ScenarioEvent(kind, {"units": _unit_list(value)})
    if kind == "key":
        return ScenarioEvent(kind, {"binding": str(value)})
    if kind == "team":
        return ScenarioEvent(kind, {"team": _int(value)})
    if kind == "destroy":
        if isinstance(value, int):
            return ScenarioEvent(kind, {"unit": value})
        args = {"unit": _int(_require(value, "unit", kind))}
        if value.get("attacker") is not None:
            args["attacker"] = _int(value["attacker"])
        return ScenarioEvent(kind, args)

    if not isinstance(value, dict):
        raise ValueError(f"'{kind}' event needs a mapping, got {value!r}")

    if kind == "spawn":
        args = {
            "unit": _int(_require(value, "id", kind)),
            "unit_def": _require(value, "def", kind),
            "orders": parse_orders(value.get("commands", [])),
        }
        if "team" in value:
            args["team"] = _int(value["team"])
        if "position" in value:
            args["position"] = _parse_position(value["position"])
        return ScenarioEvent(kind, args)
    if kind == "build":
        args = {
            "unit": _int(_require(value, "unit", kind)),
            "unit_def": _require(value, "def", kind),
            "factory": _int(_require(value, "factory", kind)),
            "rally": parse_orders(value.get("rally", [])),
        }
        if "position" in value:
            args["position"] = _parse_position(value["position"])
        return ScenarioEvent(kind, args)
    if kind == "queue":
        return ScenarioEvent(kind, {
            "unit_def": _require(value, "def", kind),
            "factory": _int(value.get("factory", -1)),
            "orders": parse_orders(value.get("orders", [])),
        })
    if kind == "load":
        return ScenarioEvent(kind, {
            "unit": _int(_require(value, "unit", kind)),
            "transport": _int(_require(value, "transport", kind)),
        })
    if kind == "unload":
        args = {"unit": _int(_require(value, "unit", kind))}
        if "position" in value:
            args["position"] = _parse_position(value["position"])
        return ScenarioEvent(kind, args)
    if kind == "commands":
        return ScenarioEvent(kind, {
            "unit": _int(_require(value, "unit", kind)),
            "orders": parse_orders(value.get("orders", [])),
        })
    # move
    return ScenarioEvent(kind, {
        "unit": _int(_require(value, "unit", kind)),
        "position": _parse_position(_require(value, "position", kind)),
    })


_YAML_KEYS = {"unit_def": "def"}


def _serialize_event(event: ScenarioEvent) -> dict:
    kind, args = event.kind, event.args
    if kind in ("select", "tag", "untag"):
        return {kind: list(args["units"])}
    if kind == "key":
        return {kind: args["binding"]}
    if kind == "team":
        return {kind: args["team"]}
    if kind == "destroy" and "attacker" not in args:
        return {kind: args["unit"]}

    out = {}
    for key, val in args.items():
        if key == "unit" and kind == "spawn":
            key = "id"
        elif key == "orders" and kind == "spawn":
            key = "commands"
        else:
            key = _YAML_KEYS.get(key, key)
        if isinstance(val, tuple):
            val = list(val)
        if isinstance(val, list) and val and isinstance(val[0], Order):
            val = serialize_orders(val)
        out[key] = val
    return {kind: out}
