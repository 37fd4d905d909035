# Data Loaders
from .archetype_loader import (
    load_archetypes,
    get_archetype_by_id,
    load_default_player,
    parse_archetypes,
)

__all__ = [
    "load_archetypes",
    "get_archetype_by_id",
    "load_default_player",
    "parse_archetypes",
]
