# Data Models
from .archetype import Archetype
from .player import PlayerProfile, MeleeGear, RangedGear, MagicGear, Coords

__all__ = [
    "Archetype",
    "PlayerProfile",
    "MeleeGear",
    "RangedGear",
    "MagicGear",
    "Coords",
]
