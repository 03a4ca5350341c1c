"""
BAR Unit AutoReplace - Order Helpers
======================================
Pure functions over order sequences.
"""

from typing import Iterable, List, Optional, Sequence

from bar_autoreplace.models import CMD, Order


def is_order_in(order: Order, orders: Iterable[Order]) -> bool:
    """True if an order with the same kind and parameters is in `orders`."""
    return any(order == other for other in orders)


def filter_post_disembark(live: Sequence[Order], factory_orders: Sequence[Order]) -> List[Order]:
    """Orders a unit should resume once a transport drops it off.

    Units picked up straight out of a factory can carry a WAIT from waiting on
    the transport and unfinished rally orders from the factory. Both are
    dropped so the unit neither stalls nor walks back to the factory.
    """
    return [
        order for order in live
        if order.cmd_id != CMD.WAIT and not is_order_in(order, factory_orders)
    ]


def find_last_move(orders: Sequence[Order]) -> Optional[Order]:
    for order in reversed(orders):
        if order.cmd_id == CMD.MOVE:
            return order
    return None


def queued(orders: Iterable[Order]) -> List[Order]:
    return [o.queued() for o in orders]
