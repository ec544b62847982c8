"""BaseRaid Core - EMP simulation"""
from .catalog import AttackType, load_all
from .config import MAP_SIZE
from .entities import Attacker, AttackerPathStats, Defender, PathWaypoint
from .emp import Emp, EmpRegistry
from .errors import (
    SimulationError,
    DataAccessError,
    CatalogLookupError,
    AttackerNotFoundError,
    EmpDetailsError,
    UnknownPathError,
)
from .events import event_bus, EventBus
from .world import BuildingsManager, DefenseManager, load_scenario
