"""
BAR Unit AutoReplace - Scenario Replay
========================================
Drives a ReplacementTracker against the simulated engine by replaying a
scripted sequence of engine events (key presses, deaths, factory output,
transport pickups and drop-offs).
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from bar_autoreplace.config import KeyBinding, TrackerConfig
from bar_autoreplace.models import KeyMods, Order, PendingFactoryOrder, UnitDef
from bar_autoreplace.simhost import IssuedOrder, SimulatedHost
from bar_autoreplace.tracker import ReplacementTracker


EVENT_KINDS = (
    "spawn", "select", "key", "tag", "untag", "destroy", "build", "queue",
    "load", "unload", "commands", "move", "team",
)


# ---------------------------------------------------------------------------
# Scenario definitions
# ---------------------------------------------------------------------------

@dataclass
class UnitSpec:
    unit_id: int
    unit_def: Any                  # def name or def id
    team: Optional[int] = None     # None = scenario team
    position: Tuple[float, float, float] = (0.0, 0.0, 0.0)
    commands: List[Order] = field(default_factory=list)


@dataclass
class ScenarioEvent:
    kind: str
    args: Dict[str, Any] = field(default_factory=dict)

    def describe(self) -> str:
        parts = []
        for key, val in self.args.items():
            if isinstance(val, list) and val and isinstance(val[0], Order):
                val = "[" + ", ".join(str(o) for o in val) + "]"
            parts.append(f"{key}={val}")
        return f"{self.kind} " + " ".join(parts)


@dataclass
class Scenario:
    name: str
    description: str = ""
    team: int = 0
    unit_defs: List[UnitDef] = field(default_factory=list)
    units: List[UnitSpec] = field(default_factory=list)
    events: List[ScenarioEvent] = field(default_factory=list)
    config: TrackerConfig = field(default_factory=TrackerConfig)


@dataclass
class ReplayResult:
    scenario_name: str = ""
    events_applied: int = 0
    event_log: List[str] = field(default_factory=list)
    issued: List[IssuedOrder] = field(default_factory=list)
    echoes: List[str] = field(default_factory=list)
    tables: Dict[str, Any] = field(default_factory=dict)


# ---------------------------------------------------------------------------
# Runner
# ---------------------------------------------------------------------------

class ScenarioRunner:
    def __init__(self, scenario: Scenario, config: Optional[TrackerConfig] = None):
        self.scenario = scenario
        self.config = config or scenario.config
        self.reset()

    def reset(self):
        sc = self.scenario
        self.host = SimulatedHost()
        for udef in sc.unit_defs:
            self.host.add_def(udef)
        for spec in sc.units:
            self.host.spawn_unit(
                spec.unit_id,
                self._def_id(spec.unit_def),
                team=sc.team if spec.team is None else spec.team,
                position=spec.position,
                commands=spec.commands,
            )
        self.tracker = ReplacementTracker(self.host, sc.team, self.config)
        self.cursor = 0
        self.event_log: List[str] = []

    @property
    def done(self) -> bool:
        return self.cursor >= len(self.scenario.events)

    def step(self) -> Optional[ScenarioEvent]:
        if self.done:
            return None
        event = self.scenario.events[self.cursor]
        handler = getattr(self, f"_apply_{event.kind}", None)
        if handler is None:
            raise ValueError(f"Unknown event kind: {event.kind}")
        handler(**event.args)
        self.cursor += 1
        self.event_log.append(event.describe())
        return event

    def run(self) -> ReplayResult:
        while not self.done:
            self.step()
        return self.result()

    def result(self) -> ReplayResult:
        return ReplayResult(
            scenario_name=self.scenario.name,
            events_applied=self.cursor,
            event_log=list(self.event_log),
            issued=list(self.host.order_log),
            echoes=list(self.host.echoes),
            tables=self.tracker.snapshot(),
        )

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _def_id(self, ref) -> int:
        if isinstance(ref, int):
            if ref not in self.host.unit_defs:
                raise ValueError(f"Unknown unit def id: {ref}")
            return ref
        udef = self.host.def_by_name(str(ref))
        if udef is None:
            raise ValueError(f"Unknown unit def: {ref}")
        return udef.def_id

    def _unit(self, unit_id: int):
        unit = self.host.units.get(unit_id)
        if unit is None:
            raise ValueError(f"Event refers to unknown unit {unit_id}")
        return unit

    # ------------------------------------------------------------------
    # Event handlers
    # ------------------------------------------------------------------

    def _apply_spawn(self, unit: int, unit_def, team=None, position=(0.0, 0.0, 0.0), orders=()):
        self.host.spawn_unit(
            unit, self._def_id(unit_def),
            team=self.tracker.team_id if team is None else team,
            position=position, commands=orders,
        )

    def _apply_select(self, units: List[int]):
        self.host.select(units)

    def _apply_key(self, binding: str):
        kb = KeyBinding.parse(binding)
        mods = KeyMods(ctrl=kb.ctrl, shift=kb.shift, alt=kb.alt, meta=kb.meta)
        self.tracker.key_press(kb.keycode, mods)

    def _apply_tag(self, units: List[int]):
        self.tracker.tag(units)

    def _apply_untag(self, units: List[int]):
        self.tracker.untag(units)

    def _apply_destroy(self, unit: int, attacker: Optional[int] = None):
        u = self._unit(unit)
        self.tracker.unit_destroyed(unit, u.def_id, u.team, attacker_id=attacker)
        self.host.remove_unit(unit)

    def _apply_build(self, unit: int, unit_def, factory: int, rally=(), position=None):
        fac = self._unit(factory)
        def_id = self._def_id(unit_def)
        self.host.spawn_unit(
            unit, def_id, team=fac.team,
            position=position if position is not None else fac.position,
            commands=rally,
        )
        self.tracker.unit_from_factory(unit, def_id, fac.team, factory, fac.def_id)

    def _apply_queue(self, unit_def, orders=(), factory: int = -1):
        self.tracker.queue_pending(PendingFactoryOrder(
            unit_def_id=self._def_id(unit_def),
            factory_id=factory,
            orders=list(orders),
        ))

    def _apply_load(self, unit: int, transport: int):
        u = self._unit(unit)
        t = self._unit(transport)
        self.host.load_unit(unit, transport)
        self.tracker.unit_loaded(unit, u.def_id, u.team, transport, t.team)

    def _apply_unload(self, unit: int, position=None):
        u = self._unit(unit)
        transport_id = u.transport_id
        t = self.host.units.get(transport_id) if transport_id is not None else None
        if position is None and t is not None:
            position = t.position
        self.host.unload_unit(unit, position)
        self.tracker.unit_unloaded(
            unit, u.def_id, u.team,
            transport_id if transport_id is not None else -1,
            t.team if t is not None else u.team,
        )

    def _apply_commands(self, unit: int, orders=()):
        self.host.set_commands(unit, orders)

    def _apply_move(self, unit: int, position):
        self.host.set_position(unit, position)

    def _apply_team(self, team: int):
        self.tracker.team_changed(team)


def replay(scenario: Scenario, config: Optional[TrackerConfig] = None) -> ReplayResult:
    return ScenarioRunner(scenario, config).run()
