"""Tests for pending factory orders, factory completion and replacement strategies."""

import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from bar_autoreplace.config import TrackerConfig
from bar_autoreplace.models import CMD, Order, PendingFactoryOrder, TrackedUnit
from bar_autoreplace.strategies import (
    AdoptSiblingStrategy, FactoryBuildStrategy, make_strategies,
)
from bar_autoreplace.tracker import ReplacementTracker

from world import PEEP, PLANT, FACTORY_ID

FIGHT = Order.make(CMD.FIGHT, (800, 0, 800))
PATROL = Order.make(CMD.PATROL, (50, 0, 50))
RALLY = Order.move(150, 0, 150)


def _build(host, tracker, unit_id, rally=(RALLY,)):
    """Roll a new PEEP out of the plant with the plant's rally orders."""
    host.spawn_unit(unit_id, PEEP, position=(0, 0, 0), commands=list(rally))
    tracker.unit_from_factory(unit_id, PEEP, 0, FACTORY_ID, PLANT)


# ---------------------------------------------------------------------------
# Pending queue
# ---------------------------------------------------------------------------

def test_take_pending_is_fifo_per_type(tracker):
    first = PendingFactoryOrder(PEEP, FACTORY_ID, [FIGHT])
    second = PendingFactoryOrder(PEEP, FACTORY_ID, [PATROL])
    other = PendingFactoryOrder(99, FACTORY_ID, [])
    tracker.queue_pending(first)
    tracker.queue_pending(other)
    tracker.queue_pending(second)

    assert tracker.take_pending(PEEP) is first
    assert tracker.take_pending(PEEP) is second
    assert tracker.take_pending(PEEP) is None
    assert list(tracker.pending) == [99]


def test_completion_consumes_exactly_one_entry(host, tracker):
    tracker.queue_pending(PendingFactoryOrder(PEEP, FACTORY_ID, [FIGHT]))
    tracker.queue_pending(PendingFactoryOrder(PEEP, FACTORY_ID, [PATROL]))

    _build(host, tracker, 200)
    assert tracker.tracked[200].orders == [FIGHT]
    assert len(tracker.pending[PEEP]) == 1

    _build(host, tracker, 201)
    assert tracker.tracked[201].orders == [PATROL]
    assert PEEP not in tracker.pending


# ---------------------------------------------------------------------------
# Factory completion
# ---------------------------------------------------------------------------

def test_completion_without_pending_does_nothing(host, tracker):
    _build(host, tracker, 200)
    assert tracker.tracked == {}
    assert host.order_log == []


def test_completion_records_factory_orders_and_issues_replacement(host, tracker):
    tracker.queue_pending(PendingFactoryOrder(PEEP, FACTORY_ID, [Order.move(5, 0, 5), FIGHT]))
    _build(host, tracker, 200)

    entry = tracker.tracked[200]
    assert entry.factory_orders == [RALLY]
    assert entry.orders == [Order.move(5, 0, 5), FIGHT]
    assert host.orders_for(200) == [Order.move(5, 0, 5), FIGHT]
    assert all(o.options.shift for o in host.orders_for(200))
    # replacement orders queue behind the rally point
    assert host.units[200].commands == [RALLY, Order.move(5, 0, 5), FIGHT]


def test_completion_overwrites_existing_entry(host, tracker):
    host.spawn_unit(200, PEEP, commands=[RALLY])
    tracker.tracked[200] = TrackedUnit(orders=[PATROL])
    tracker.queue_pending(PendingFactoryOrder(PEEP, FACTORY_ID, [FIGHT]))
    tracker.unit_from_factory(200, PEEP, 0, FACTORY_ID, PLANT)
    assert tracker.tracked[200].orders == [FIGHT]


def test_completion_other_team_ignored(host, tracker):
    tracker.queue_pending(PendingFactoryOrder(PEEP, FACTORY_ID, [FIGHT]))
    host.spawn_unit(200, PEEP, team=1)
    tracker.unit_from_factory(200, PEEP, 1, FACTORY_ID, PLANT)
    assert len(tracker.pending[PEEP]) == 1
    assert tracker.tracked == {}


# ---------------------------------------------------------------------------
# Strategies
# ---------------------------------------------------------------------------

def test_make_strategies_unknown_name():
    with pytest.raises(ValueError, match="Unknown strategy"):
        make_strategies(["adopt_sibling", "teleport"])


def test_make_strategies_keeps_order():
    strategies = make_strategies(["factory_build", "adopt_sibling"])
    assert isinstance(strategies[0], FactoryBuildStrategy)
    assert isinstance(strategies[1], AdoptSiblingStrategy)


def test_factory_build_queues_replacement(host):
    tracker = ReplacementTracker(host, 0, TrackerConfig(strategies=["factory_build"]))
    host.spawn_unit(100, PEEP, position=(5, 0, 5), commands=[FIGHT])
    tracker.tag([100])

    tracker.unit_destroyed(100, PEEP, 0)

    assert host.orders_for(FACTORY_ID) == [Order.build(PEEP)]
    assert host.build_queues[FACTORY_ID] == [PEEP]
    entry = tracker.pending[PEEP][0]
    assert entry.factory_id == FACTORY_ID
    assert entry.orders == [Order.move(5, 0, 5), FIGHT]
    assert 100 not in tracker.tracked


def test_factory_build_then_completion_round(host):
    tracker = ReplacementTracker(host, 0, TrackerConfig(strategies=["factory_build"]))
    host.spawn_unit(100, PEEP, position=(5, 0, 5), commands=[FIGHT])
    tracker.tag([100])
    tracker.unit_destroyed(100, PEEP, 0)
    host.remove_unit(100)

    _build(host, tracker, 200)
    assert tracker.tracked[200].orders == [Order.move(5, 0, 5), FIGHT]
    assert tracker.pending == {}


def test_factory_build_picks_last_capable_factory(host):
    host.spawn_unit(41, PLANT)
    tracker = ReplacementTracker(host, 0, TrackerConfig(strategies=["factory_build"]))
    host.spawn_unit(100, PEEP)
    tracker.tag([100])
    tracker.unit_destroyed(100, PEEP, 0)
    assert tracker.pending[PEEP][0].factory_id == 41


def test_factory_build_without_capable_factory(host):
    host.remove_unit(FACTORY_ID)
    tracker = ReplacementTracker(host, 0, TrackerConfig(strategies=["factory_build"]))
    host.spawn_unit(100, PEEP)
    tracker.tag([100])
    tracker.unit_destroyed(100, PEEP, 0)
    assert tracker.pending == {}
    assert host.order_log == []


def test_adopt_first_then_build(host):
    tracker = ReplacementTracker(
        host, 0, TrackerConfig(strategies=["adopt_sibling", "factory_build"]))
    host.spawn_unit(100, PEEP)
    host.spawn_unit(101, PEEP)
    tracker.tag([100])

    tracker.unit_destroyed(100, PEEP, 0)
    host.remove_unit(100)
    assert 101 in tracker.tracked
    assert tracker.pending == {}

    # 101 dies with no idle sibling left: falls through to the factory
    tracker.unit_destroyed(101, PEEP, 0)
    assert len(tracker.pending[PEEP]) == 1
