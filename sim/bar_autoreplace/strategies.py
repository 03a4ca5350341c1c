"""
BAR Unit AutoReplace - Replacement Strategies
===============================================
What happens to a tracked unit's orders when the unit dies.

The tracker tries each configured strategy in order and stops at the first
that succeeds:

    adopt_sibling   hand the orders to an idle unit of the same type
    factory_build   queue a new unit at a capable factory; the orders are
                    applied when it rolls out (see ReplacementTracker.unit_from_factory)
"""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Dict, List, Optional, Type

from bar_autoreplace.models import Order, PendingFactoryOrder, TrackedUnit
from bar_autoreplace import parity

if TYPE_CHECKING:
    from bar_autoreplace.tracker import ReplacementTracker


class ReplacementStrategy(ABC):
    name: str = ""

    @abstractmethod
    def replace(self, tracker: "ReplacementTracker", unit_id: int,
                unit_def_id: int, tracked: TrackedUnit) -> bool:
        """Propagate `tracked` for a destroyed unit. Returns True if handled."""


class AdoptSiblingStrategy(ReplacementStrategy):
    name = "adopt_sibling"

    def find_sibling(self, tracker: "ReplacementTracker", unit_def_id: int) -> Optional[int]:
        host = tracker.host
        for other_id in host.get_team_units(tracker.team_id):
            if other_id in tracker.tracked:
                continue
            if host.get_unit_def_id(other_id) == unit_def_id:
                return other_id
        return None

    def replace(self, tracker, unit_id, unit_def_id, tracked):
        sibling_id = self.find_sibling(tracker, unit_def_id)
        if sibling_id is None:
            return False

        tracker.tracked[sibling_id] = TrackedUnit(orders=list(tracked.orders))
        udef = tracker.host.get_unit_def(unit_def_id)
        name = udef.name if udef else str(unit_def_id)
        tracker.host.echo(parity.ECHO_REPLACED.format(name=name))
        tracker.host.give_orders(sibling_id, tracked.orders)
        return True


class FactoryBuildStrategy(ReplacementStrategy):
    name = "factory_build"

    def factories_for(self, tracker: "ReplacementTracker", unit_def_id: int) -> List[int]:
        host = tracker.host
        factories = []
        for other_id in host.get_team_units(tracker.team_id):
            udef = host.unit_def_for(other_id)
            if udef and udef.is_factory and udef.can_build(unit_def_id):
                factories.append(other_id)
        return factories

    def replace(self, tracker, unit_id, unit_def_id, tracked):
        factories = self.factories_for(tracker, unit_def_id)
        if not factories:
            return False

        # last capable factory found gets the job
        factory_id = factories[-1]
        tracker.host.give_order_obj(factory_id, Order.build(unit_def_id))
        tracker.queue_pending(PendingFactoryOrder(
            unit_def_id=unit_def_id,
            factory_id=factory_id,
            orders=list(tracked.orders),
        ))
        return True


STRATEGIES: Dict[str, Type[ReplacementStrategy]] = {
    AdoptSiblingStrategy.name: AdoptSiblingStrategy,
    FactoryBuildStrategy.name: FactoryBuildStrategy,
}


def make_strategies(names: List[str]) -> List[ReplacementStrategy]:
    strategies = []
    for name in names:
        if name not in STRATEGIES:
            raise ValueError(f"Unknown strategy: {name}. Choose from: {list(STRATEGIES.keys())}")
        strategies.append(STRATEGIES[name]())
    return strategies
