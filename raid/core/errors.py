"""
BaseRaid Errors

Construction errors (malformed triggers, catalog misses) abort setup.
Consistency errors abort the current simulation step.
"""


class SimulationError(Exception):
    """Base class for all errors raised by the simulation core."""


class DataAccessError(SimulationError):
    """A data source (catalog, map, scenario) could not be read."""

    def __init__(self, source, error: Exception):
        self.source = str(source)
        self.error = error
        super().__init__(f"Failed to read {self.source}: {error}")


class CatalogLookupError(SimulationError, KeyError):
    """A key was missing from one of the lookup tables."""

    def __init__(self, key, table: str):
        self.key = key
        self.table = table
        super().__init__(f"Key {key!r} not found in {table}")

    def __str__(self) -> str:
        return f"Key {self.key!r} not found in {self.table}"


class AttackerNotFoundError(CatalogLookupError):
    """An EMP references an attacker missing from the live roster."""

    def __init__(self, attacker_id: int):
        self.attacker_id = attacker_id
        super().__init__(attacker_id, "attackers")


class EmpDetailsError(SimulationError):
    """A waypoint is flagged as an EMP but lacks its type or time."""

    def __init__(self, path_id: int):
        self.path_id = path_id
        super().__init__(f"EMP details missing for path {path_id}")


class UnknownPathError(SimulationError):
    """A path id does not belong to the attacker it was asked about."""

    def __init__(self, attacker_id: int, path_id: int):
        self.attacker_id = attacker_id
        self.path_id = path_id
        super().__init__(f"Path {path_id} is not part of attacker {attacker_id}'s path")
