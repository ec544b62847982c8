"""
Attack-type catalog.

Static lookup from EMP type id to blast radius and damage, loaded once per run.
"""
import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterable, List, Mapping, Union

from .config import ATTACK_TYPES_FILE
from .errors import CatalogLookupError, DataAccessError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AttackType:
    """One EMP weapon type."""
    id: int
    radius: int
    damage: int
    name: str = ""


def load_all(path: Path = ATTACK_TYPES_FILE) -> List[AttackType]:
    """Load every attack type from a JSON catalog file.

    The file holds ``{"attack_types": [{"id", "radius", "damage", "name"?}, ...]}``.
    Any read or parse failure is raised as DataAccessError.
    """
    try:
        with open(path) as f:
            data = json.load(f)
        attack_types = [
            AttackType(
                id=int(entry["id"]),
                radius=int(entry["radius"]),
                damage=int(entry["damage"]),
                name=entry.get("name", ""),
            )
            for entry in data["attack_types"]
        ]
    except (OSError, ValueError, KeyError, TypeError) as err:
        raise DataAccessError(path, err) from err

    logger.info("Loaded %d attack types from %s", len(attack_types), path)
    return attack_types


def index_by_id(attack_types: Union[Iterable[AttackType], Mapping[int, AttackType]]) -> Dict[int, AttackType]:
    """Key attack types by id. Mappings are copied as-is."""
    if isinstance(attack_types, Mapping):
        return dict(attack_types)
    return {attack_type.id: attack_type for attack_type in attack_types}


def lookup(attack_types: Mapping[int, AttackType], type_id: int) -> AttackType:
    """Resolve a type id, raising CatalogLookupError when it is unknown."""
    try:
        return attack_types[type_id]
    except KeyError:
        raise CatalogLookupError(type_id, "attack_types") from None
