"""Loot tables and their resolution.

- Declarative weighted-range tables that can nest
- A single resolver for any table tree
- Exact outcome distributions for analysis
"""

from .table import (
    LootTable,
    LootRange,
    LootContext,
    LootTableError,
    ItemDrop,
    RegionalDrop,
    SubTable,
)
from .drop_tables import (
    RARE_TABLE,
    MEGARARE_TABLE,
    GEM_TABLE,
    LOOT_TABLES,
    build_registry,
    get_loot_table,
)
from .resolver import (
    NOTHING,
    resolve,
    resolve_draw,
    roll_drop_check,
    outcome_distribution,
    item_probability,
    kills_per_item,
)

__all__ = [
    # Tables
    "LootTable",
    "LootRange",
    "LootContext",
    "LootTableError",
    "ItemDrop",
    "RegionalDrop",
    "SubTable",
    "RARE_TABLE",
    "MEGARARE_TABLE",
    "GEM_TABLE",
    "LOOT_TABLES",
    "build_registry",
    "get_loot_table",
    # Resolver
    "NOTHING",
    "resolve",
    "resolve_draw",
    "roll_drop_check",
    "outcome_distribution",
    "item_probability",
    "kills_per_item",
]
