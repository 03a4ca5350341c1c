"""Tests for the simulated engine's queue semantics."""

import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from bar_autoreplace.models import CMD, Order, QUEUED, REPLACE

from world import PEEP, FACTORY_ID, TRANSPORT_ID


def test_shift_appends_and_plain_replaces(host):
    host.spawn_unit(100, PEEP, commands=[Order.move(1, 0, 1)])
    host.give_order(100, CMD.MOVE, (2, 0, 2), QUEUED)
    assert host.units[100].commands == [Order.move(1, 0, 1), Order.move(2, 0, 2)]
    host.give_order(100, CMD.PATROL, (3, 0, 3), REPLACE)
    assert host.units[100].commands == [Order.make(CMD.PATROL, (3, 0, 3))]


def test_stop_clears_queue(host):
    host.spawn_unit(100, PEEP, commands=[Order.move(1, 0, 1)])
    host.give_order(100, CMD.STOP, (), REPLACE)
    assert host.units[100].commands == []


def test_build_order_goes_to_build_queue(host):
    host.give_order_obj(FACTORY_ID, Order.build(PEEP))
    assert host.build_queues[FACTORY_ID] == [PEEP]
    assert host.units[FACTORY_ID].commands == []


def test_commands_limited_by_count(host):
    host.spawn_unit(100, PEEP, commands=[Order.move(i, 0, i) for i in range(30)])
    assert len(host.get_unit_commands(100, 20)) == 20


def test_unknown_unit_lookups(host):
    assert host.get_unit_def_id(999) is None
    assert host.get_unit_position(999) is None
    assert host.get_unit_commands(999, 20) == []
    assert host.unit_def_for(999) is None
    # orders to dead units are logged but go nowhere
    host.give_order(999, CMD.STOP, (), REPLACE)
    assert len(host.order_log) == 1


def test_carried_unit_reports_transport_position(host):
    host.spawn_unit(100, PEEP, position=(1, 0, 1))
    host.load_unit(100, TRANSPORT_ID)
    assert host.get_unit_position(100) == (300.0, 0.0, 300.0)
    host.unload_unit(100, (7, 0, 7))
    assert host.get_unit_position(100) == (7.0, 0.0, 7.0)


def test_spawn_duplicate_rejected(host):
    with pytest.raises(ValueError):
        host.spawn_unit(FACTORY_ID, PEEP)


def test_select_drops_missing_units(host):
    host.select([FACTORY_ID, 999])
    assert host.get_selected_units() == [FACTORY_ID]
