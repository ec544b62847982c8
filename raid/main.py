"""
BaseRaid - battle driver
========================

Owns the minute counter: every step moves the attackers one frame along their
paths, then fires the EMPs due at that minute.
"""
import logging
from pathlib import Path
from typing import Dict, Optional

from raid.core.catalog import load_all
from raid.core.config import ATTACK_TYPES_FILE, MAP_FILE, MAP_SIZE, MAX_MINUTES, SCENARIO_FILE
from raid.core.effects import LoggerHandler, StructureDamageLog
from raid.core.emp import EmpRegistry, StructuresHook
from raid.core.entities import Attacker
from raid.core.events import EventBus, EmpPlantedEvent, MinuteResolvedEvent
from raid.core.world import BuildingsManager, DefenseManager, load_scenario

logger = logging.getLogger(__name__)


class BattleSimulation:
    """One raid: battlefield state plus the EMP registry built for it."""

    FIRST_MINUTE = 1

    def __init__(self, verbose: bool = False, map_size: int = MAP_SIZE,
                 on_structures_affected: Optional[StructuresHook] = None,
                 bus: Optional[EventBus] = None):
        self.verbose = verbose
        # Own bus per raid unless the caller wants to share one
        self.bus = bus if bus is not None else EventBus("raid")
        self.map_size = map_size
        self.on_structures_affected = on_structures_affected
        self.minute = self.FIRST_MINUTE

        self.buildings: Optional[BuildingsManager] = None
        self.defenses: Optional[DefenseManager] = None
        self.attackers: Dict[int, Attacker] = {}
        self.emps: Optional[EmpRegistry] = None

        self.logger_handler: Optional[LoggerHandler] = None
        self.structure_log: Optional[StructureDamageLog] = None

    def setup(self, attack_types_file: Path = ATTACK_TYPES_FILE, map_file: Path = MAP_FILE,
              scenario_file: Path = SCENARIO_FILE) -> None:
        """Load catalog, map and scenario, then compile the EMP registry.

        Any SimulationError propagates and leaves the simulation unset.
        """
        attack_types = load_all(attack_types_file)
        buildings = BuildingsManager.load_map(map_file, self.map_size)
        attackers, defenses = load_scenario(scenario_file, self.bus)
        self.start(attack_types, buildings, defenses, attackers)

    def start(self, attack_types, buildings: BuildingsManager, defenses: DefenseManager,
              attackers: Dict[int, Attacker]) -> None:
        """Set up from already loaded state."""
        emps = EmpRegistry.build(attack_types, attackers, self.map_size)

        defenses.bus = self.bus
        self.buildings = buildings
        self.defenses = defenses
        self.attackers = attackers
        self.emps = emps
        self.minute = self.FIRST_MINUTE

        if self.logger_handler is None:
            self.logger_handler = LoggerHandler(verbose=self.verbose, bus=self.bus)
        if self.structure_log is None:
            self.structure_log = StructureDamageLog(self.bus)

    def step(self) -> int:
        """Advance one minute. Returns the minute that was resolved."""
        if self.emps is None:
            raise RuntimeError("BattleSimulation.setup() must run before step()")

        minute = self.minute
        for attacker in self.attackers.values():
            for waypoint in attacker.advance():
                self.bus.publish(EmpPlantedEvent(attacker_id=attacker.id, path_id=waypoint.id, pos=waypoint.pos))

        self.emps.simulate(minute, self.buildings, self.defenses, self.attackers,
                           on_structures_affected=self.on_structures_affected, bus=self.bus)

        self.bus.publish(MinuteResolvedEvent(
            minute=minute,
            live_attackers=len(self.live_attackers()),
            live_defenders=len(self.defenses.live_defenders()),
        ))
        self.minute += 1
        return minute

    def run(self, minutes: int = MAX_MINUTES) -> int:
        """Step until ``minutes`` have passed or the raid is over."""
        for _ in range(minutes):
            self.step()
            if self.is_over():
                break
        logger.info("Raid ended after minute %d", self.minute - 1)
        return self.minute - 1

    def live_attackers(self):
        return [a for a in self.attackers.values() if a.alive]

    def is_over(self) -> bool:
        """No attacker left standing, or every survivor at its path's end
        with no EMP still due."""
        survivors = self.live_attackers()
        if not survivors:
            return True
        pending = any(minute >= self.minute for minute in self.emps.minutes())
        return all(a.finished for a in survivors) and not pending

    def close(self) -> None:
        """Detach event handlers."""
        if self.logger_handler is not None:
            self.logger_handler.close()
            self.logger_handler = None
        if self.structure_log is not None:
            self.structure_log.close()
            self.structure_log = None
