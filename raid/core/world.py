"""
BaseRaid World - battlefield managers

Features:
- Building occupancy grid (indexed [x][y], 0 = road)
- Defenders keyed by grid cell
- Map (CSV) and scenario (JSON) loading
"""
import csv
import json
import logging
from pathlib import Path
from typing import Dict, List, Optional, Set, Tuple

from .config import MAP_SIZE, ROAD_ID
from .entities import Attacker, Defender, PathWaypoint
from .errors import DataAccessError
from .events import event_bus, DefenderDisabledEvent, EventBus

logger = logging.getLogger(__name__)


class BuildingsManager:
    """Owns the grid -> building id occupancy map."""

    def __init__(self, map_size: int = MAP_SIZE):
        self.map_size = map_size
        self.buildings_grid: List[List[int]] = [[ROAD_ID for _ in range(map_size)] for _ in range(map_size)]

    @classmethod
    def load_map(cls, map_file: Path, map_size: int = MAP_SIZE) -> "BuildingsManager":
        """Load occupancy from a CSV file, one row per y, one column per x.

        Cells hold building ids; empty cells and 0 are road. Missing rows and
        columns are road as well.
        """
        manager = cls(map_size)
        try:
            with open(map_file) as f:
                reader = csv.reader(f)
                for y, row in enumerate(reader):
                    for x, cell in enumerate(row):
                        cell = cell.strip()
                        if not cell or cell == str(ROAD_ID):
                            continue
                        if x >= map_size or y >= map_size:
                            raise ValueError(f"Building at ({x}, {y}) lies outside a {map_size}x{map_size} map")
                        manager.buildings_grid[x][y] = int(cell)
        except (OSError, ValueError) as err:
            raise DataAccessError(map_file, err) from err

        logger.info("Loaded map %s with %d buildings", map_file, len(manager.building_ids))
        return manager

    def place_building(self, building_id: int, x: int, y: int, width: int = 1, height: int = 1) -> None:
        """Mark a rectangular footprint as occupied by ``building_id``."""
        if building_id == ROAD_ID:
            raise ValueError(f"Building id {ROAD_ID} is reserved for road")
        for dx in range(width):
            for dy in range(height):
                if not self.in_bounds(x + dx, y + dy):
                    raise ValueError(f"Building {building_id} does not fit at ({x}, {y})")
                self.buildings_grid[x + dx][y + dy] = building_id

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.map_size and 0 <= y < self.map_size

    def building_at(self, x: int, y: int) -> int:
        """Building id at a cell, ROAD_ID for road or outside the map."""
        if self.in_bounds(x, y):
            return self.buildings_grid[x][y]
        return ROAD_ID

    @property
    def building_ids(self) -> Set[int]:
        return {cell for column in self.buildings_grid for cell in column if cell != ROAD_ID}


class DefenseManager:
    """Owns every defender, keyed by the cell it occupies."""

    def __init__(self, bus: Optional[EventBus] = None):
        self.defenders: Dict[Tuple[int, int], Defender] = {}
        self.bus = bus if bus is not None else event_bus

    def add_defender(self, defender: Defender) -> None:
        pos = (int(defender.x), int(defender.y))
        if pos in self.defenders:
            raise ValueError(f"Cell {pos} already holds defender {self.defenders[pos].id}")
        self.defenders[pos] = defender

    def get_defender(self, x: int, y: int) -> Optional[Defender]:
        return self.defenders.get((x, y))

    def get_damage(self, x: int, y: int) -> None:
        """EMP hit on a cell: disables the defender there, if any."""
        defender = self.defenders.get((x, y))
        if defender is None:
            return
        if defender.disable():
            self.bus.publish(DefenderDisabledEvent(defender_id=defender.id, pos=(x, y)))

    def live_defenders(self) -> List[Defender]:
        return [d for d in self.defenders.values() if d.alive]


def _optional_int(step: dict, key: str) -> Optional[int]:
    value = step.get(key)
    if value is None:
        return None
    if isinstance(value, bool):
        raise TypeError(f"{key} must be an integer, got {value!r}")
    return int(value)


def _read_waypoint(step: dict) -> PathWaypoint:
    """One path step from scenario JSON.

    ``is_emp`` must be a JSON boolean; ids, coordinates and the EMP fields go
    through int(), so "2" is read as 2 and "two" is rejected.
    """
    is_emp = step.get("is_emp", False)
    if not isinstance(is_emp, bool):
        raise TypeError(f"is_emp of path {step.get('id')} must be true or false, got {is_emp!r}")
    return PathWaypoint(
        id=int(step["id"]),
        x=int(step["x"]),
        y=int(step["y"]),
        is_emp=is_emp,
        emp_type=_optional_int(step, "emp_type"),
        emp_time=_optional_int(step, "emp_time"),
    )


def load_scenario(scenario_file: Path, bus: Optional[EventBus] = None) -> Tuple[Dict[int, Attacker], DefenseManager]:
    """Load attackers (with their paths) and defenders from scenario JSON.

    The returned DefenseManager publishes on ``bus`` (the global bus if None).
    """
    try:
        with open(scenario_file) as f:
            scenario = json.load(f)

        attackers: Dict[int, Attacker] = {}
        for attacker_data in scenario.get("attackers", []):
            path = [_read_waypoint(step) for step in attacker_data["path"]]
            kwargs = {k: attacker_data[k] for k in ("hp", "speed") if k in attacker_data}
            attacker = Attacker(int(attacker_data["id"]), path, **kwargs)
            attackers[attacker.id] = attacker

        defense_manager = DefenseManager(bus)
        for defender_data in scenario.get("defenders", []):
            pos = defender_data["pos"]
            defense_manager.add_defender(Defender(
                int(defender_data["id"]),
                (int(pos[0]), int(pos[1])),
                defender_type=defender_data.get("type", "turret"),
            ))
    except (OSError, ValueError, KeyError, TypeError) as err:
        raise DataAccessError(scenario_file, err) from err

    logger.info("Loaded scenario %s: %d attackers, %d defenders",
                scenario_file, len(attackers), len(defense_manager.defenders))
    return attackers, defense_manager
