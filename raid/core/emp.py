"""
EMP registry and per-minute resolution.

The registry is compiled once from every attacker's path: each waypoint
flagged as an EMP becomes one Emp, filed under the minute it is due. Each
simulated minute, ``simulate`` fires the planted EMPs due at that minute,
disabling defenders and damaging attackers inside the blast circle.
"""
import logging
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import Callable, Dict, FrozenSet, Iterable, Iterator, List, Mapping, Optional, Set, Tuple, Union

from .catalog import AttackType, index_by_id, load_all, lookup
from .config import ATTACK_TYPES_FILE, MAP_SIZE, ROAD_ID
from .entities import Attacker
from .errors import AttackerNotFoundError, EmpDetailsError
from .events import (
    event_bus,
    EventBus,
    AttackerDamagedEvent,
    AttackerDestroyedEvent,
    EmpSkippedEvent,
    EmpTriggeredEvent,
    StructuresAffectedEvent,
)

logger = logging.getLogger(__name__)

# Called with the EMP and the ids of every building inside its footprint
StructuresHook = Callable[["Emp", FrozenSet[int]], None]


@dataclass(frozen=True)
class Emp:
    """One scheduled EMP blast. Equal field values mean the same blast."""
    path_id: int
    x: int
    y: int
    radius: int
    damage: int
    attacker_id: int

    @property
    def pos(self) -> tuple:
        return (self.x, self.y)

    def cells(self, map_size: int = MAP_SIZE) -> Iterator[Tuple[int, int]]:
        """Grid cells inside the blast circle, clipped to the map.

        Yields in raster order, x then y. Corners of the bounding square that
        fall outside the circle are excluded.
        """
        radius_sq = self.radius * self.radius
        for x in range(max(0, self.x - self.radius), min(map_size, self.x + self.radius + 1)):
            dx_sq = (x - self.x) ** 2
            for y in range(max(0, self.y - self.radius), min(map_size, self.y + self.radius + 1)):
                if dx_sq + (y - self.y) ** 2 <= radius_sq:
                    yield (x, y)


class EmpRegistry:
    """Minute -> set of Emps, read-only once built."""

    def __init__(self, emps: Mapping[int, Iterable[Emp]], map_size: int = MAP_SIZE):
        self._emps: Mapping[int, FrozenSet[Emp]] = MappingProxyType(
            {minute: frozenset(bucket) for minute, bucket in emps.items()}
        )
        self.map_size = map_size

    @classmethod
    def build(cls, attack_types: Union[Iterable[AttackType], Mapping[int, AttackType]],
              attackers: Mapping[int, Attacker], map_size: int = MAP_SIZE) -> "EmpRegistry":
        """Compile every flagged waypoint of every attacker into Emps.

        Raises EmpDetailsError for a flagged waypoint without type or time, and
        CatalogLookupError for a type missing from the catalog. Nothing is
        built when either is raised.
        """
        catalog = index_by_id(attack_types)
        emps: Dict[int, Set[Emp]] = {}

        for attacker_id, attacker in attackers.items():
            for waypoint in attacker.path:
                if not waypoint.is_emp:
                    continue
                if waypoint.emp_type is None or waypoint.emp_time is None:
                    raise EmpDetailsError(waypoint.id)

                emp_type = lookup(catalog, waypoint.emp_type)
                emp = Emp(
                    path_id=waypoint.id,
                    x=waypoint.x,
                    y=waypoint.y,
                    radius=emp_type.radius,
                    damage=emp_type.damage,
                    attacker_id=attacker_id,
                )
                emps.setdefault(waypoint.emp_time, set()).add(emp)

        registry = cls(emps, map_size)
        logger.info("Built EMP registry: %d EMPs over %d minutes", len(registry), len(emps))
        return registry

    @classmethod
    def from_catalog_file(cls, attackers: Mapping[int, Attacker], path: Path = ATTACK_TYPES_FILE,
                          map_size: int = MAP_SIZE) -> "EmpRegistry":
        """Load the attack-type catalog from disk and build."""
        return cls.build(load_all(path), attackers, map_size)

    def events_at(self, minute: int) -> FrozenSet[Emp]:
        """Emps due at ``minute`` (empty if none)."""
        return self._emps.get(minute, frozenset())

    def minutes(self) -> List[int]:
        return sorted(self._emps)

    def __contains__(self, minute: int) -> bool:
        return minute in self._emps

    def __len__(self) -> int:
        return sum(len(bucket) for bucket in self._emps.values())

    def __iter__(self) -> Iterator[Tuple[int, FrozenSet[Emp]]]:
        for minute in self.minutes():
            yield minute, self._emps[minute]

    def simulate(self, minute: int, buildings_manager, defense_manager,
                 attackers: Mapping[int, Attacker],
                 on_structures_affected: Optional[StructuresHook] = None,
                 bus: Optional[EventBus] = None) -> None:
        """Fire every planted EMP due at ``minute``.

        ``buildings_manager``, ``defense_manager`` and ``attackers`` are only
        touched for the duration of this call. Raises AttackerNotFoundError if
        an EMP's attacker is missing from ``attackers``. Events go to ``bus``,
        the global bus when None; the registry itself holds no run state.
        """
        bus = bus if bus is not None else event_bus
        emps = self._emps.get(minute)
        if not emps:
            return

        # Sorted for reproducible logs
        for emp in sorted(emps, key=lambda e: (e.attacker_id, e.path_id)):
            attacker = attackers.get(emp.attacker_id)
            if attacker is None:
                raise AttackerNotFoundError(emp.attacker_id)

            if not attacker.is_planted(emp.path_id):
                logger.debug("Minute %d: EMP on path %d not planted yet", minute, emp.path_id)
                bus.publish(EmpSkippedEvent(minute=minute, attacker_id=emp.attacker_id, path_id=emp.path_id))
                continue

            cells = list(emp.cells(self.map_size))
            bus.publish(EmpTriggeredEvent(
                minute=minute,
                attacker_id=emp.attacker_id,
                path_id=emp.path_id,
                pos=emp.pos,
                radius=emp.radius,
                damage=emp.damage,
                cells=len(cells),
            ))
            affected_buildings = self._detonate(emp, cells, buildings_manager, defense_manager, attackers, bus)

            # Damage to robots inside (or heading to) a building is not modelled;
            # the building ids are handed on for whoever defines it.
            bus.publish(StructuresAffectedEvent(
                minute=minute,
                attacker_id=emp.attacker_id,
                path_id=emp.path_id,
                building_ids=affected_buildings,
            ))
            if on_structures_affected is not None:
                on_structures_affected(emp, affected_buildings)

    def _detonate(self, emp: Emp, cells: List[Tuple[int, int]], buildings_manager, defense_manager,
                  attackers: Mapping[int, Attacker], bus: EventBus) -> FrozenSet[int]:
        """Apply one EMP cell by cell. Returns the ids of buildings it covered."""
        affected_buildings: Set[int] = set()

        for x, y in cells:
            defense_manager.get_damage(x, y)

            for attacker in attackers.values():
                if attacker.alive:
                    self._hit_attacker(emp, attacker, x, y, bus)

            building_id = buildings_manager.buildings_grid[x][y]
            if building_id != ROAD_ID:
                affected_buildings.add(building_id)
            # TODO: damage robots standing on road cells once road occupancy is tracked

        logger.debug("EMP on path %d at %s covered buildings %s", emp.path_id, emp.pos, sorted(affected_buildings))
        return frozenset(affected_buildings)

    @staticmethod
    def _hit_attacker(emp: Emp, attacker: Attacker, x: int, y: int, bus: EventBus) -> None:
        """Damage the attacker at its most recent visit to (x, y) this frame."""
        trace = attacker.path_in_current_frame
        for position, stats in enumerate(reversed(trace)):
            if stats.attacker_path.x == x and stats.attacker_path.y == y:
                position_index = len(trace) - 1 - position
                attacker.get_damage(emp.damage, position_index)
                bus.publish(AttackerDamagedEvent(
                    attacker_id=attacker.id,
                    damage=emp.damage,
                    position_index=position_index,
                    health_remaining=attacker.hp,
                ))
                if not attacker.alive:
                    bus.publish(AttackerDestroyedEvent(attacker_id=attacker.id, pos=attacker.pos))
                break
