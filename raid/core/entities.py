"""
BaseRaid Entities

Attackers walk a precomputed path of grid waypoints, some of which carry an EMP.
Defenders sit on a single grid cell until an EMP knocks them out.
"""
from dataclasses import dataclass
from typing import List, Optional, Sequence, Set

from .config import DEFAULT_ATTACKER_HEALTH, DEFAULT_ATTACKER_SPEED
from .errors import UnknownPathError


@dataclass(frozen=True)
class PathWaypoint:
    """One step of an attacker's route, optionally an EMP trigger point."""
    id: int
    x: int
    y: int
    is_emp: bool = False
    emp_type: Optional[int] = None
    emp_time: Optional[int] = None  # Minute at which the EMP goes off

    @property
    def pos(self) -> tuple:
        return (self.x, self.y)


@dataclass
class AttackerPathStats:
    """A position an attacker occupied this frame, with its health there."""
    attacker_path: PathWaypoint
    attacker_health: int


class Entity:
    """Base class for everything on the battlefield."""

    def __init__(self, entity_id: int, pos: tuple, hp: int):
        self.id = entity_id
        self.x, self.y = pos
        self.hp = hp
        self.max_hp = hp
        self.alive = True

    def take_damage(self, amount: int) -> None:
        """Reduce HP by amount."""
        self.hp -= amount
        if self.hp <= 0:
            self.hp = 0
            self.alive = False

    @property
    def pos(self) -> tuple:
        return (self.x, self.y)

    @property
    def kind(self) -> str:
        return self.__class__.__name__


class Attacker(Entity):
    """A robot walking its path through the base, planting EMPs on the way.

    ``path_in_current_frame`` is stored oldest-first: the position the unit
    started the frame on, then every waypoint it stepped onto.
    """

    def __init__(self, entity_id: int, path: Sequence[PathWaypoint],
                 hp: int = DEFAULT_ATTACKER_HEALTH, speed: int = DEFAULT_ATTACKER_SPEED):
        if not path:
            raise ValueError(f"Attacker {entity_id} needs at least one waypoint")
        super().__init__(entity_id, path[0].pos, hp)
        self.speed = speed
        self.path: List[PathWaypoint] = list(path)
        self.path_index = 0
        self.path_in_current_frame: List[AttackerPathStats] = [AttackerPathStats(self.path[0], self.hp)]
        self._path_ids = {waypoint.id for waypoint in self.path}
        self._planted: Set[int] = set()
        self._reach(self.path[0])

    @property
    def current_waypoint(self) -> PathWaypoint:
        return self.path[self.path_index]

    @property
    def finished(self) -> bool:
        """True once the last waypoint has been reached."""
        return self.path_index >= len(self.path) - 1

    def _reach(self, waypoint: PathWaypoint) -> bool:
        """Arm the waypoint's EMP if it has one. Returns True if newly planted."""
        if waypoint.is_emp and waypoint.id not in self._planted:
            self._planted.add(waypoint.id)
            return True
        return False

    def advance(self) -> List[PathWaypoint]:
        """Move up to ``speed`` waypoints and start a new frame trace.

        Returns the EMP waypoints planted during this move.
        """
        if not self.alive:
            self.path_in_current_frame = []
            return []

        self.path_in_current_frame = [AttackerPathStats(self.current_waypoint, self.hp)]
        planted = []
        for _ in range(self.speed):
            if self.finished:
                break
            self.path_index += 1
            waypoint = self.current_waypoint
            self.x, self.y = waypoint.pos
            self.path_in_current_frame.append(AttackerPathStats(waypoint, self.hp))
            if self._reach(waypoint):
                planted.append(waypoint)
        return planted

    def is_planted(self, path_id: int) -> bool:
        """Whether the EMP on waypoint ``path_id`` has been armed."""
        if path_id not in self._path_ids:
            raise UnknownPathError(self.id, path_id)
        return path_id in self._planted

    def get_damage(self, damage: int, position: int) -> None:
        """Apply EMP damage from trace entry ``position`` onwards.

        Every later entry of the current frame loses health as well, and the
        unit's health becomes that of the newest entry.
        """
        trace = self.path_in_current_frame
        if not trace:
            self.take_damage(damage)
            return

        for stats in trace[position:]:
            stats.attacker_health = max(0, stats.attacker_health - damage)
        self.hp = trace[-1].attacker_health
        if self.hp <= 0:
            self.hp = 0
            self.alive = False


class Defender(Entity):
    """A static defence occupying one grid cell."""

    def __init__(self, entity_id: int, pos: tuple, hp: int = 1, defender_type: str = "turret"):
        super().__init__(entity_id, pos, hp)
        self.defender_type = defender_type

    def disable(self) -> bool:
        """Knock the defender out. Returns False if it already was."""
        if not self.alive:
            return False
        self.hp = 0
        self.alive = False
        return True
