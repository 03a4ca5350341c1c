"""
BAR Unit AutoReplace - Simulated Engine
=========================================
In-memory stand-in for the Spring engine. Keeps just enough world state
(unit defs, units, order queues, selection) for the tracker's queries and
records every order and echo so runs can be inspected afterwards.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

from bar_autoreplace.host import HostAPI, Position
from bar_autoreplace.models import CMD, Order, OrderOptions, UnitDef


@dataclass
class SimUnit:
    unit_id: int
    def_id: int
    team: int = 0
    position: Position = (0.0, 0.0, 0.0)
    commands: List[Order] = field(default_factory=list)
    transport_id: Optional[int] = None


@dataclass
class IssuedOrder:
    seq: int
    unit_id: int
    order: Order

    def __str__(self) -> str:
        flag = " [queued]" if self.order.options.shift else ""
        return f"#{self.seq:<4} unit {self.unit_id:<6} {self.order}{flag}"


class SimulatedHost(HostAPI):
    def __init__(self, selection: Optional[List[int]] = None):
        self.unit_defs: Dict[int, UnitDef] = {}
        self.units: Dict[int, SimUnit] = {}
        self.selection: List[int] = list(selection or [])
        self.order_log: List[IssuedOrder] = []
        self.echoes: List[str] = []
        self.build_queues: Dict[int, List[int]] = {}   # factory id -> unit def ids

    # ------------------------------------------------------------------
    # World setup
    # ------------------------------------------------------------------

    def add_def(self, udef: UnitDef) -> UnitDef:
        self.unit_defs[udef.def_id] = udef
        return udef

    def def_by_name(self, name: str) -> Optional[UnitDef]:
        for udef in self.unit_defs.values():
            if udef.name == name:
                return udef
        return None

    def spawn_unit(self, unit_id: int, def_id: int, team: int = 0,
                   position: Position = (0.0, 0.0, 0.0),
                   commands: Optional[Sequence[Order]] = None) -> SimUnit:
        if unit_id in self.units:
            raise ValueError(f"Unit {unit_id} already exists")
        if def_id not in self.unit_defs:
            raise ValueError(f"Unknown unit def {def_id}")
        unit = SimUnit(
            unit_id=unit_id,
            def_id=def_id,
            team=team,
            position=tuple(float(c) for c in position),
            commands=list(commands or []),
        )
        self.units[unit_id] = unit
        return unit

    def remove_unit(self, unit_id: int):
        self.units.pop(unit_id, None)
        self.build_queues.pop(unit_id, None)
        if unit_id in self.selection:
            self.selection.remove(unit_id)

    def set_commands(self, unit_id: int, commands: Sequence[Order]):
        self._unit(unit_id).commands = list(commands)

    def set_position(self, unit_id: int, position: Position):
        self._unit(unit_id).position = tuple(float(c) for c in position)

    def select(self, unit_ids: Sequence[int]):
        self.selection = [uid for uid in unit_ids if uid in self.units]

    def load_unit(self, unit_id: int, transport_id: int):
        self._unit(transport_id)
        self._unit(unit_id).transport_id = transport_id

    def unload_unit(self, unit_id: int, position: Optional[Position] = None):
        unit = self._unit(unit_id)
        unit.transport_id = None
        if position is not None:
            unit.position = tuple(float(c) for c in position)

    def _unit(self, unit_id: int) -> SimUnit:
        unit = self.units.get(unit_id)
        if unit is None:
            raise ValueError(f"Unknown unit {unit_id}")
        return unit

    # ------------------------------------------------------------------
    # HostAPI
    # ------------------------------------------------------------------

    def get_team_units(self, team_id: int) -> List[int]:
        return [uid for uid, u in self.units.items() if u.team == team_id]

    def get_selected_units(self) -> List[int]:
        return list(self.selection)

    def get_unit_def_id(self, unit_id: int) -> Optional[int]:
        unit = self.units.get(unit_id)
        return unit.def_id if unit else None

    def get_unit_def(self, def_id: int) -> Optional[UnitDef]:
        return self.unit_defs.get(def_id)

    def get_unit_commands(self, unit_id: int, count: int) -> List[Order]:
        unit = self.units.get(unit_id)
        if unit is None:
            return []
        return list(unit.commands[:count])

    def get_unit_position(self, unit_id: int) -> Optional[Position]:
        unit = self.units.get(unit_id)
        if unit is None:
            return None
        # a carried unit is wherever its transport is
        if unit.transport_id is not None and unit.transport_id in self.units:
            return self.units[unit.transport_id].position
        return unit.position

    def give_order(self, unit_id: int, cmd_id: int, params: Sequence[float],
                   options: OrderOptions) -> None:
        order = Order.make(cmd_id, params, options)
        self.order_log.append(IssuedOrder(len(self.order_log) + 1, unit_id, order))

        unit = self.units.get(unit_id)
        if unit is None:
            return
        if order.is_build:
            self.build_queues.setdefault(unit_id, []).append(-order.cmd_id)
        elif order.cmd_id == CMD.STOP:
            unit.commands = []
        elif options.shift:
            unit.commands.append(order)
        else:
            unit.commands = [order]

    def echo(self, message: str) -> None:
        self.echoes.append(message)

    # ------------------------------------------------------------------
    # Inspection
    # ------------------------------------------------------------------

    def orders_for(self, unit_id: int) -> List[Order]:
        return [entry.order for entry in self.order_log if entry.unit_id == unit_id]
