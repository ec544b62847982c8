"""
BaseRaid Events

Event types published while a raid is simulated, and the bus that carries them.
"""
from dataclasses import dataclass
from collections import defaultdict
from typing import Any, Callable, DefaultDict, FrozenSet, List, Optional


# === Event Dataclasses ===

@dataclass
class EmpPlantedEvent:
    """Fired when an attacker reaches and arms an EMP waypoint."""
    attacker_id: int
    path_id: int
    pos: tuple


@dataclass
class EmpTriggeredEvent:
    """Fired when a planted EMP goes off."""
    minute: int
    attacker_id: int
    path_id: int
    pos: tuple
    radius: int
    damage: int
    cells: int  # Number of grid cells inside the blast


@dataclass
class EmpSkippedEvent:
    """Fired when an EMP is due but its carrier never armed it."""
    minute: int
    attacker_id: int
    path_id: int


@dataclass
class DefenderDisabledEvent:
    """Fired when an EMP knocks out a defender."""
    defender_id: int
    pos: tuple


@dataclass
class AttackerDamagedEvent:
    """Fired when an EMP hits an attacker unit."""
    attacker_id: int
    damage: int
    position_index: int  # Index into the attacker's current-frame trace
    health_remaining: int


@dataclass
class AttackerDestroyedEvent:
    """Fired when an attacker's health reaches zero."""
    attacker_id: int
    pos: tuple


@dataclass
class StructuresAffectedEvent:
    """Fired once per EMP with every building inside its footprint."""
    minute: int
    attacker_id: int
    path_id: int
    building_ids: FrozenSet[int]


@dataclass
class MinuteResolvedEvent:
    """Fired by the driver after a minute has been fully resolved."""
    minute: int
    live_attackers: int
    live_defenders: int


# === EventBus ===

class EventBus:
    """Routes raid events to the handlers registered for their exact type.

    Each BattleSimulation owns one, so handlers of one raid never see the
    events of another. Code that is not handed a bus uses ``event_bus``.
    """

    def __init__(self, name: str = "default"):
        self.name = name
        self._handlers: DefaultDict[type, List[Callable]] = defaultdict(list)
        self._history: Optional[List[Any]] = None  # None while not recording

    def subscribe(self, event_type: type, handler: Callable) -> None:
        self._handlers[event_type].append(handler)

    def unsubscribe(self, event_type: type, handler: Callable) -> None:
        if handler in self._handlers.get(event_type, ()):
            self._handlers[event_type].remove(handler)

    def publish(self, event: Any) -> None:
        if self._history is not None:
            self._history.append(event)
        # Copy: a handler may unsubscribe itself
        for handler in tuple(self._handlers.get(type(event), ())):
            handler(event)

    def clear(self) -> None:
        """Forget every handler and stop recording."""
        self._handlers.clear()
        self._history = None

    def start_recording(self) -> None:
        self._history = []

    def stop_recording(self) -> List[Any]:
        """Stop recording and hand back what was published meanwhile."""
        history, self._history = self._history or [], None
        return history

    def recorded(self, event_type: type) -> List[Any]:
        """Recorded events of one type; recording carries on."""
        return [e for e in self._history or () if isinstance(e, event_type)]


# Used wherever no bus is passed in
event_bus = EventBus("global")
