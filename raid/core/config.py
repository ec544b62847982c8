"""
BaseRaid Configuration
Contains simulation constants and file paths.
"""
from pathlib import Path

# Paths
PROJECT_ROOT = Path(__file__).parent.parent.parent
DATA_DIR = PROJECT_ROOT / "data"

ATTACK_TYPES_FILE = DATA_DIR / "attack_types.json"
MAP_FILE = DATA_DIR / "map.csv"
SCENARIO_FILE = DATA_DIR / "scenario.json"

# Grid
MAP_SIZE = 40  # Square grid, cells are [0, MAP_SIZE) on both axes
ROAD_ID = 0    # buildings_grid value for an unoccupied road cell

# Attackers
DEFAULT_ATTACKER_HEALTH = 100
DEFAULT_ATTACKER_SPEED = 2  # Waypoints per frame

# Simulation
MAX_MINUTES = 60
