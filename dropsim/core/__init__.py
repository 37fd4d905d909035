# Core modules
from .constants import (
    TICKS_PER_HOUR,
    REGEN_INTERVAL,
    INVENTORY_SIZE,
    DANGER_MARGIN,
    DEFAULT_FOOD_HEAL,
    LOOT_MODULUS,
    RING_OF_WEALTH_MODULUS,
    RING_OF_WEALTH,
    DEFAULT_TARGET_ITEM,
    MAX_TRIAL_TICKS,
)
from .inventory import Item, Inventory, Bank, InventoryInvariantError

__all__ = [
    # Constants
    "TICKS_PER_HOUR",
    "REGEN_INTERVAL",
    "INVENTORY_SIZE",
    "DANGER_MARGIN",
    "DEFAULT_FOOD_HEAL",
    "LOOT_MODULUS",
    "RING_OF_WEALTH_MODULUS",
    "RING_OF_WEALTH",
    "DEFAULT_TARGET_ITEM",
    "MAX_TRIAL_TICKS",
    # Inventory
    "Item",
    "Inventory",
    "Bank",
    "InventoryInvariantError",
]
