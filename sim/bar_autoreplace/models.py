"""
BAR Unit AutoReplace - Data Models
====================================
Orders, unit definitions and the tracker's table records.
"""

from dataclasses import dataclass, field, replace
from enum import IntEnum
from typing import List, Optional, Tuple


# ---------------------------------------------------------------------------
# Engine commands
# ---------------------------------------------------------------------------

class CMD(IntEnum):
    """Spring command ids (Sim/Units/CommandAI/Command.h)."""
    STOP = 0
    WAIT = 5
    MOVE = 10
    PATROL = 15
    FIGHT = 16
    ATTACK = 20
    GUARD = 25
    LOAD_UNITS = 75
    UNLOAD_UNITS = 80
    UNLOAD_UNIT = 81


def cmd_name(cmd_id: int) -> str:
    if cmd_id < 0:
        return f"BUILD({-cmd_id})"
    try:
        return CMD(cmd_id).name
    except ValueError:
        return str(cmd_id)


@dataclass(frozen=True)
class OrderOptions:
    shift: bool = False    # queue after existing orders instead of replacing
    ctrl: bool = False
    alt: bool = False
    right: bool = False


QUEUED = OrderOptions(shift=True)
REPLACE = OrderOptions()


@dataclass(frozen=True)
class Order:
    cmd_id: int
    params: Tuple[float, ...] = ()
    # options never take part in equality: two orders are the same order
    # when kind and parameters match
    options: OrderOptions = field(default=REPLACE, compare=False)

    @property
    def kind(self) -> Optional[CMD]:
        try:
            return CMD(self.cmd_id)
        except ValueError:
            return None

    @property
    def is_build(self) -> bool:
        return self.cmd_id < 0

    def queued(self) -> "Order":
        return replace(self, options=QUEUED)

    @classmethod
    def make(cls, cmd_id: int, params=(), options: OrderOptions = REPLACE) -> "Order":
        return cls(int(cmd_id), tuple(float(p) for p in params), options)

    @classmethod
    def move(cls, x: float, y: float, z: float, options: OrderOptions = QUEUED) -> "Order":
        return cls.make(CMD.MOVE, (x, y, z), options)

    @classmethod
    def stop(cls) -> "Order":
        return cls(int(CMD.STOP))

    @classmethod
    def build(cls, unit_def_id: int) -> "Order":
        return cls(-int(unit_def_id))

    def __str__(self) -> str:
        if not self.params:
            return cmd_name(self.cmd_id)
        args = ", ".join(f"{p:g}" for p in self.params)
        return f"{cmd_name(self.cmd_id)}({args})"


# ---------------------------------------------------------------------------
# Unit definitions
# ---------------------------------------------------------------------------

@dataclass
class UnitDef:
    def_id: int
    name: str
    human_name: str = ""
    is_factory: bool = False
    is_transport: bool = False
    build_options: List[int] = field(default_factory=list)

    def can_build(self, unit_def_id: int) -> bool:
        return unit_def_id in self.build_options


# ---------------------------------------------------------------------------
# Tracker tables
# ---------------------------------------------------------------------------

@dataclass
class TrackedUnit:
    """A unit marked for replacement, holding the orders its successor gets."""
    orders: List[Order] = field(default_factory=list)
    # Rally orders the factory gave a freshly built replacement. Only set
    # between factory completion and the first transport pickup.
    factory_orders: Optional[List[Order]] = None


@dataclass
class PendingFactoryOrder:
    unit_def_id: int
    factory_id: int
    orders: List[Order] = field(default_factory=list)


@dataclass
class TransportOrderCache:
    orders: List[Order] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Input
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class KeyMods:
    ctrl: bool = False
    shift: bool = False
    alt: bool = False
    meta: bool = False
