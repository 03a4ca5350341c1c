"""Shared test fixtures for the AutoReplace test suite."""

import sys
from pathlib import Path

import pytest

# Ensure sim/ is on the path so `bar_autoreplace` imports work
SIM_ROOT = Path(__file__).parent.parent
if str(SIM_ROOT) not in sys.path:
    sys.path.insert(0, str(SIM_ROOT))

from bar_autoreplace.models import UnitDef
from bar_autoreplace.simhost import SimulatedHost
from bar_autoreplace.tracker import ReplacementTracker

from world import ATLAS, FACTORY_ID, PEEP, PLANT, TRANSPORT_ID


@pytest.fixture
def host():
    """Simulated engine with a plant and a transport on team 0."""
    h = SimulatedHost()
    h.add_def(UnitDef(PEEP, "armpeep", "Peeper"))
    h.add_def(UnitDef(PLANT, "armap", "Aircraft Plant", is_factory=True, build_options=[PEEP]))
    h.add_def(UnitDef(ATLAS, "armatlas", "Atlas", is_transport=True))
    h.spawn_unit(FACTORY_ID, PLANT, team=0, position=(0, 0, 0))
    h.spawn_unit(TRANSPORT_ID, ATLAS, team=0, position=(300, 0, 300))
    return h


@pytest.fixture
def tracker(host):
    return ReplacementTracker(host, team_id=0)


@pytest.fixture
def scenarios_dir():
    return SIM_ROOT / "data" / "scenarios"
