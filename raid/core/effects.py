"""
Event handlers that react to what the EMP core publishes.
"""
import logging
from collections import defaultdict
from typing import Dict, List, Optional, Set

from .events import (
    event_bus,
    EventBus,
    AttackerDamagedEvent,
    AttackerDestroyedEvent,
    DefenderDisabledEvent,
    EmpPlantedEvent,
    EmpSkippedEvent,
    EmpTriggeredEvent,
    MinuteResolvedEvent,
    StructuresAffectedEvent,
)

logger = logging.getLogger("raid.events")


class LoggerHandler:
    """Writes battlefield events to the ``raid.events`` logger."""

    def __init__(self, verbose: bool = False, bus: Optional[EventBus] = None):
        self.verbose = verbose
        self.bus = bus if bus is not None else event_bus
        self._subscriptions = [
            (EmpTriggeredEvent, self.on_trigger),
            (DefenderDisabledEvent, self.on_defender_disabled),
            (AttackerDestroyedEvent, self.on_attacker_destroyed),
        ]
        if verbose:
            self._subscriptions += [
                (EmpPlantedEvent, self.on_planted),
                (EmpSkippedEvent, self.on_skipped),
                (AttackerDamagedEvent, self.on_attacker_damaged),
                (MinuteResolvedEvent, self.on_minute),
            ]
        for event_type, handler in self._subscriptions:
            self.bus.subscribe(event_type, handler)

    def close(self) -> None:
        """Stop listening."""
        for event_type, handler in self._subscriptions:
            self.bus.unsubscribe(event_type, handler)

    def on_trigger(self, event: EmpTriggeredEvent) -> None:
        logger.info("[EMP] minute %d: attacker %d detonated path %d at (%d, %d), r=%d, %d cells",
                    event.minute, event.attacker_id, event.path_id,
                    event.pos[0], event.pos[1], event.radius, event.cells)

    def on_defender_disabled(self, event: DefenderDisabledEvent) -> None:
        logger.info("[DEFENSE] defender %d disabled at (%d, %d)", event.defender_id, event.pos[0], event.pos[1])

    def on_attacker_destroyed(self, event: AttackerDestroyedEvent) -> None:
        logger.info("[ATTACKER] attacker %d destroyed at (%d, %d)", event.attacker_id, event.pos[0], event.pos[1])

    def on_planted(self, event: EmpPlantedEvent) -> None:
        logger.debug("[EMP] attacker %d planted path %d", event.attacker_id, event.path_id)

    def on_skipped(self, event: EmpSkippedEvent) -> None:
        logger.debug("[EMP] minute %d: path %d of attacker %d not planted",
                     event.minute, event.path_id, event.attacker_id)

    def on_attacker_damaged(self, event: AttackerDamagedEvent) -> None:
        logger.debug("[ATTACKER] attacker %d took %d at trace index %d, %d left",
                     event.attacker_id, event.damage, event.position_index, event.health_remaining)

    def on_minute(self, event: MinuteResolvedEvent) -> None:
        logger.debug("[MINUTE] %d resolved: %d attackers, %d defenders standing",
                     event.minute, event.live_attackers, event.live_defenders)


class StructureDamageLog:
    """Collects the buildings each minute's EMPs covered.

    Follow-up effects on buildings are not defined yet; this keeps the record
    so a report (or a later damage rule) can consume it.
    """

    def __init__(self, bus: Optional[EventBus] = None):
        self.by_minute: Dict[int, Set[int]] = defaultdict(set)
        self.by_emp: Dict[int, Set[int]] = {}
        self.bus = bus if bus is not None else event_bus
        self.bus.subscribe(StructuresAffectedEvent, self.on_structures_affected)

    def close(self) -> None:
        self.bus.unsubscribe(StructuresAffectedEvent, self.on_structures_affected)

    def on_structures_affected(self, event: StructuresAffectedEvent) -> None:
        self.by_minute[event.minute].update(event.building_ids)
        self.by_emp[event.path_id] = set(event.building_ids)

    def affected(self) -> List[int]:
        """Every building hit so far, sorted."""
        return sorted(set().union(*self.by_minute.values())) if self.by_minute else []
