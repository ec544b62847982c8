"""Test that all modules can be imported."""


def test_core_imports():
    """Core modules should import cleanly."""
    from raid.core.catalog import AttackType, load_all
    from raid.core.entities import Attacker, AttackerPathStats, Defender, PathWaypoint
    from raid.core.events import event_bus, EmpTriggeredEvent, StructuresAffectedEvent
    from raid.core.world import BuildingsManager, DefenseManager, load_scenario
    from raid.core.emp import Emp, EmpRegistry
    from raid.core.effects import LoggerHandler, StructureDamageLog


def test_core_package_exports():
    import raid.core
    for name in ("Emp", "EmpRegistry", "AttackType", "Attacker", "BuildingsManager",
                 "DefenseManager", "EmpDetailsError", "CatalogLookupError", "AttackerNotFoundError"):
        assert hasattr(raid.core, name), name


def test_main_import():
    """Driver module should import."""
    from raid.main import BattleSimulation
