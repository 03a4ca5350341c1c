"""
BAR Unit AutoReplace - Replacement Order Tracker
==================================================
Reacts to engine callbacks so that tagged units are replaced when destroyed
and the replacement picks up the original unit's orders.

Tables (all keyed by unit id unless noted):
    tracked          units tagged for replacement and the orders to hand on
    pending          unit def id -> FIFO of replacements queued at factories
    transport_cache  orders to restore when a unit leaves a transport

Assumed host event ordering:
    - callbacks arrive one at a time and each handler runs to completion
    - UnitFromFactory fires before any UnitLoaded for the new unit
    - a unit destroyed while embarked gets no UnitUnloaded
A repeated UnitLoaded for the same unit does not re-route the transport, and
repeated UnitDestroyed / UnitUnloaded events are no-ops.
"""

from collections import deque
from typing import Deque, Dict, Iterable, List, Optional

from bar_autoreplace.config import TrackerConfig
from bar_autoreplace.host import HostAPI
from bar_autoreplace.models import (
    CMD, KeyMods, Order, PendingFactoryOrder, TrackedUnit, TransportOrderCache,
    QUEUED,
)
from bar_autoreplace.orders import filter_post_disembark, find_last_move
from bar_autoreplace.strategies import make_strategies
from bar_autoreplace import parity


class ReplacementTracker:
    def __init__(self, host: HostAPI, team_id: int, config: Optional[TrackerConfig] = None):
        self.host = host
        self.team_id = team_id
        self.config = config or TrackerConfig()
        self.strategies = make_strategies(self.config.strategies)

        self.tracked: Dict[int, TrackedUnit] = {}
        self.pending: Dict[int, Deque[PendingFactoryOrder]] = {}
        self.transport_cache: Dict[int, TransportOrderCache] = {}
        self.closed = False

    def _accepts(self, unit_team: int) -> bool:
        return not self.closed and unit_team == self.team_id

    # ------------------------------------------------------------------
    # Session lifecycle
    # ------------------------------------------------------------------

    def team_changed(self, team_id: int):
        """Follow the player to a new team. Units of the old team are forgotten."""
        self.team_id = team_id
        self._clear()

    def shutdown(self):
        self._clear()
        self.closed = True

    def _clear(self):
        self.tracked.clear()
        self.pending.clear()
        self.transport_cache.clear()

    # ------------------------------------------------------------------
    # Tag / untag
    # ------------------------------------------------------------------

    def tag(self, unit_ids: Iterable[int]) -> List[int]:
        """Mark units for replacement with their current orders. Factories are skipped."""
        if self.closed:
            return []
        host = self.host
        tagged = []
        for unit_id in unit_ids:
            udef = host.unit_def_for(unit_id)
            if udef is None or udef.is_factory:
                continue
            host.echo(parity.ECHO_TAG.format(prefix=self.config.echo_prefix, name=udef.name))

            orders = list(host.get_unit_commands(unit_id, self.config.command_lookahead))
            # the replacement first walks to where the original was tagged
            position = host.get_unit_position(unit_id)
            if position is not None:
                orders.insert(0, Order.move(*position))

            self.tracked[unit_id] = TrackedUnit(orders=orders)
            tagged.append(unit_id)
        return tagged

    def untag(self, unit_ids: Iterable[int]) -> List[int]:
        host = self.host
        untagged = []
        for unit_id in unit_ids:
            if unit_id not in self.tracked:
                continue
            udef = host.unit_def_for(unit_id)
            name = udef.name if udef else str(unit_id)
            host.echo(parity.ECHO_UNTAG.format(prefix=self.config.echo_prefix, name=name))
            del self.tracked[unit_id]
            untagged.append(unit_id)
        return untagged

    def key_press(self, key: int, mods: KeyMods, is_repeat: bool = False) -> bool:
        if self.closed:
            return False
        if self.config.tag_key.matches(key, mods):
            self.tag(self.host.get_selected_units())
            return True
        if self.config.untag_key.matches(key, mods):
            self.untag(self.host.get_selected_units())
            return True
        return False

    # ------------------------------------------------------------------
    # Pending factory orders
    # ------------------------------------------------------------------

    def queue_pending(self, entry: PendingFactoryOrder):
        self.pending.setdefault(entry.unit_def_id, deque()).append(entry)

    def take_pending(self, unit_def_id: int) -> Optional[PendingFactoryOrder]:
        queue = self.pending.get(unit_def_id)
        if not queue:
            return None
        entry = queue.popleft()
        if not queue:
            del self.pending[unit_def_id]
        return entry

    # ------------------------------------------------------------------
    # Engine callbacks
    # ------------------------------------------------------------------

    def unit_destroyed(self, unit_id: int, unit_def_id: int, unit_team: int,
                       attacker_id: Optional[int] = None,
                       attacker_def_id: Optional[int] = None,
                       attacker_team: Optional[int] = None):
        if not self._accepts(unit_team):
            return

        self.transport_cache.pop(unit_id, None)

        tracked = self.tracked.get(unit_id)
        if tracked is not None:
            for strategy in self.strategies:
                if strategy.replace(self, unit_id, unit_def_id, tracked):
                    break

        self.tracked.pop(unit_id, None)

    def unit_from_factory(self, unit_id: int, unit_def_id: int, unit_team: int,
                          factory_id: int, factory_def_id: Optional[int] = None,
                          user_orders: bool = False):
        if not self._accepts(unit_team):
            return

        entry = self.take_pending(unit_def_id)
        if entry is None:
            return

        # rally orders given by the factory, needed if a transport grabs the unit
        factory_orders = list(self.host.get_unit_commands(unit_id, self.config.command_lookahead))

        self.host.give_orders(unit_id, entry.orders)
        self.tracked[unit_id] = TrackedUnit(
            orders=list(entry.orders),
            factory_orders=factory_orders,
        )

    def unit_loaded(self, unit_id: int, unit_def_id: int, unit_team: int,
                    transport_id: int, transport_team: int):
        if not self._accepts(unit_team) or transport_team != self.team_id:
            return

        tracked = self.tracked.get(unit_id)
        # only fresh replacements still carrying factory rally orders
        if tracked is None or not tracked.factory_orders:
            return

        host = self.host
        factory_orders = tracked.factory_orders
        post_disembark = filter_post_disembark(
            host.get_unit_commands(unit_id, self.config.command_lookahead),
            factory_orders,
        )
        start = host.get_unit_position(transport_id)
        destination = find_last_move(factory_orders)

        # clear whatever the transport was doing (e.g. Transport AI orders)
        host.give_order_obj(transport_id, Order.stop())
        host.give_orders(transport_id, factory_orders)
        if destination is not None:
            host.give_order(transport_id, CMD.UNLOAD_UNITS, destination.params, QUEUED)
        if start is not None:
            host.give_order(transport_id, CMD.MOVE, start, QUEUED)

        self.transport_cache[unit_id] = TransportOrderCache(orders=post_disembark)
        tracked.factory_orders = None

    def unit_unloaded(self, unit_id: int, unit_def_id: int, unit_team: int,
                      transport_id: int, transport_team: int):
        if not self._accepts(unit_team):
            return

        cache = self.transport_cache.get(unit_id)
        if cache is None:
            return

        # without the STOP units tend to ignore FIGHT and PATROL after a drop-off
        self.host.give_order_obj(unit_id, Order.stop())
        self.host.give_orders(unit_id, cache.orders)
        del self.transport_cache[unit_id]

    # ------------------------------------------------------------------
    # Inspection
    # ------------------------------------------------------------------

    def snapshot(self) -> dict:
        return {
            "team_id": self.team_id,
            "tracked": {
                uid: {
                    "orders": [str(o) for o in t.orders],
                    "factory_orders": ([str(o) for o in t.factory_orders]
                                       if t.factory_orders is not None else None),
                }
                for uid, t in self.tracked.items()
            },
            "pending": {
                def_id: [
                    {"factory_id": e.factory_id, "orders": [str(o) for o in e.orders]}
                    for e in queue
                ]
                for def_id, queue in self.pending.items()
            },
            "transport_cache": {
                uid: [str(o) for o in c.orders]
                for uid, c in self.transport_cache.items()
            },
        }
