"""Archetype and player data loaders."""

import json
from functools import lru_cache
from pathlib import Path
from typing import Optional

from ..models.archetype import Archetype
from ..models.player import PlayerProfile


# Get the data directory path
DATA_DIR = Path(__file__).parent.parent.parent.parent / "data"
ARCHETYPES_FILE = DATA_DIR / "archetypes.json"
PLAYER_FILE = DATA_DIR / "player.json"


def parse_archetypes(data: dict) -> list[Archetype]:
    """Parse and validate archetypes from JSON data.

    Args:
        data: Dictionary with an "archetypes" list.

    Returns:
        List of Archetype objects.

    Raises:
        pydantic.ValidationError: If any archetype is malformed.
        ValueError: If two archetypes share an id.
    """
    archetypes = [Archetype.model_validate(entry) for entry in data["archetypes"]]

    seen: set[str] = set()
    for archetype in archetypes:
        if archetype.id in seen:
            raise ValueError(f"Duplicate archetype id: {archetype.id}")
        seen.add(archetype.id)

    return archetypes


@lru_cache(maxsize=1)
def load_archetypes() -> list[Archetype]:
    """Load all archetypes from JSON file.

    Returns:
        List of Archetype objects, in file order.
    """
    with open(ARCHETYPES_FILE, "r", encoding="utf-8") as f:
        data = json.load(f)

    return parse_archetypes(data)


def get_archetype_by_id(archetype_id: str) -> Optional[Archetype]:
    """Get a specific archetype by ID.

    Args:
        archetype_id: The archetype's unique identifier.

    Returns:
        Archetype if found, None otherwise.
    """
    for archetype in load_archetypes():
        if archetype.id == archetype_id:
            return archetype
    return None


@lru_cache(maxsize=1)
def load_default_player() -> PlayerProfile:
    """Load the default player profile."""
    with open(PLAYER_FILE, "r", encoding="utf-8") as f:
        data = json.load(f)

    return PlayerProfile.model_validate(data)
