"""
BAR Unit AutoReplace - Engine Interface
=========================================
The calls the tracker makes into the hosting engine (Spring.* in the widget).
"""

from abc import ABC, abstractmethod
from typing import Iterable, List, Optional, Sequence, Tuple

from bar_autoreplace.models import Order, OrderOptions, UnitDef, QUEUED


Position = Tuple[float, float, float]


class HostAPI(ABC):
    """Engine collaborator. Lookups for unknown units return None or empty."""

    @abstractmethod
    def get_team_units(self, team_id: int) -> List[int]:
        ...

    @abstractmethod
    def get_selected_units(self) -> List[int]:
        ...

    @abstractmethod
    def get_unit_def_id(self, unit_id: int) -> Optional[int]:
        ...

    @abstractmethod
    def get_unit_def(self, def_id: int) -> Optional[UnitDef]:
        ...

    @abstractmethod
    def get_unit_commands(self, unit_id: int, count: int) -> List[Order]:
        ...

    @abstractmethod
    def get_unit_position(self, unit_id: int) -> Optional[Position]:
        ...

    @abstractmethod
    def give_order(self, unit_id: int, cmd_id: int, params: Sequence[float],
                   options: OrderOptions) -> None:
        ...

    @abstractmethod
    def echo(self, message: str) -> None:
        ...

    # ------------------------------------------------------------------
    # Helpers built on the primitives
    # ------------------------------------------------------------------

    def give_order_obj(self, unit_id: int, order: Order) -> None:
        self.give_order(unit_id, order.cmd_id, order.params, order.options)

    def give_orders(self, unit_id: int, orders: Iterable[Order]) -> None:
        """Queue each order behind the unit's existing ones."""
        for order in orders:
            self.give_order(unit_id, order.cmd_id, order.params, QUEUED)

    def unit_def_for(self, unit_id: int) -> Optional[UnitDef]:
        def_id = self.get_unit_def_id(unit_id)
        if def_id is None:
            return None
        return self.get_unit_def(def_id)
