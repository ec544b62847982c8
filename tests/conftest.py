"""Pytest fixtures for BaseRaid tests."""
import pytest
from pathlib import Path

from raid.core.catalog import AttackType
from raid.core.entities import Attacker, PathWaypoint
from raid.core.events import event_bus
from raid.core.world import BuildingsManager, DefenseManager

PROJECT_ROOT = Path(__file__).parent.parent

SMALL_MAP = 10


@pytest.fixture(autouse=True)
def clean_event_bus():
    """Every test starts with no subscribers and records what gets published."""
    event_bus.clear()
    event_bus.start_recording()
    yield event_bus
    event_bus.clear()


@pytest.fixture
def project_root():
    """Return the project root path."""
    return PROJECT_ROOT


@pytest.fixture
def data_dir():
    """Return the data directory path."""
    return PROJECT_ROOT / "data"


@pytest.fixture
def catalog():
    """A small attack-type catalog keyed by id."""
    return {
        1: AttackType(id=1, radius=1, damage=50, name="Pulse"),
        2: AttackType(id=2, radius=2, damage=30, name="Shockwave"),
        3: AttackType(id=3, radius=0, damage=25, name="Spark"),
    }


@pytest.fixture
def buildings():
    """An empty (all road) 10x10 map."""
    return BuildingsManager(SMALL_MAP)


@pytest.fixture
def defenses():
    return DefenseManager()


@pytest.fixture
def make_attacker():
    """Build an Attacker from (id, x, y) or (id, x, y, emp_type, emp_time) tuples."""
    def _make(attacker_id, steps, hp=100, speed=2):
        path = []
        for step in steps:
            if len(step) == 5:
                path_id, x, y, emp_type, emp_time = step
                path.append(PathWaypoint(path_id, x, y, is_emp=True, emp_type=emp_type, emp_time=emp_time))
            else:
                path_id, x, y = step
                path.append(PathWaypoint(path_id, x, y))
        return Attacker(attacker_id, path, hp=hp, speed=speed)
    return _make
