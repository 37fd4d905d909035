"""Drop table definitions.

Three tables:
- rare: the shared rare drop table, which can roll the other two
- megarare: the rare drop table's own rare roll
- gems: the gem table; a ring of wealth shrinks its modulus to 65
"""

from typing import Dict, Optional

from dropsim.core.constants import (
    LOOT_MODULUS,
    RING_OF_WEALTH_MODULUS,
    WILDERNESS_Z_THRESHOLD,
)
from dropsim.loot.table import (
    ItemDrop,
    LootRange,
    LootTable,
    LootTableError,
    RegionalDrop,
    SubTable,
)

RARE_TABLE_ID = "rare"
MEGARARE_TABLE_ID = "megarare"
GEM_TABLE_ID = "gems"


RARE_TABLE = LootTable(
    RARE_TABLE_ID,
    [
        LootRange(0, 3, ItemDrop("naturerune", 67)),
        LootRange(3, 5, ItemDrop("adamant_javelin", 20)),
        LootRange(5, 7, ItemDrop("deathrune", 45)),
        LootRange(7, 9, ItemDrop("lawrune", 45)),
        LootRange(9, 11, ItemDrop("rune_arrow", 42)),
        LootRange(11, 13, ItemDrop("steel_arrow", 150)),
        LootRange(13, 16, ItemDrop("rune_2h_sword", stackable=False)),
        LootRange(16, 19, ItemDrop("rune_battleaxe", stackable=False)),
        LootRange(19, 21, ItemDrop("rune_sq_shield", stackable=False)),
        LootRange(21, 22, ItemDrop("dragon_med_helm", stackable=False)),
        LootRange(22, 23, ItemDrop("rune_kiteshield", stackable=False)),
        LootRange(23, 44, ItemDrop("coins", 3000)),
        LootRange(44, 64, ItemDrop("half_key1", stackable=False)),
        LootRange(64, 84, ItemDrop("half_key2", stackable=False)),
        LootRange(84, 89, ItemDrop("runite_bar", stackable=False)),
        LootRange(89, 91, ItemDrop("dragonstone", stackable=False)),
        LootRange(91, 93, ItemDrop("cert_silver_ore", 100)),
        LootRange(93, 113, SubTable(GEM_TABLE_ID)),
        LootRange(113, 128, SubTable(MEGARARE_TABLE_ID)),
    ],
)

MEGARARE_TABLE = LootTable(
    MEGARARE_TABLE_ID,
    [
        LootRange(0, 8, ItemDrop("rune_spear", stackable=False)),
        LootRange(8, 12, ItemDrop("shield_left_half", stackable=False)),
        LootRange(12, 15, ItemDrop("dragon_spear", stackable=False)),
    ],
)

GEM_TABLE = LootTable(
    GEM_TABLE_ID,
    [
        LootRange(0, 32, ItemDrop("uncut_sapphire", stackable=False)),
        LootRange(32, 48, ItemDrop("uncut_emerald", stackable=False)),
        LootRange(48, 56, ItemDrop("uncut_ruby", stackable=False)),
        LootRange(56, 58, ItemDrop("uncut_diamond", stackable=False)),
        LootRange(58, 59, ItemDrop("rune_javelin", 5), members_only=True),
        LootRange(59, 60, ItemDrop("half_key1", stackable=False), members_only=True),
        LootRange(60, 61, ItemDrop("half_key2", stackable=False), members_only=True),
        LootRange(61, 62, SubTable(MEGARARE_TABLE_ID), members_only=True),
        LootRange(
            62,
            65,
            RegionalDrop(
                threshold=WILDERNESS_Z_THRESHOLD,
                north=ItemDrop("chaos_talisman", stackable=False),
                south=ItemDrop("nature_talisman", stackable=False),
            ),
            members_only=True,
        ),
    ],
    modulus=LOOT_MODULUS,
    boosted_modulus=RING_OF_WEALTH_MODULUS,
)


def build_registry(*tables: LootTable) -> Dict[str, LootTable]:
    """
    Index tables by id and check every sub-table reference resolves.

    Raises:
        LootTableError: On duplicate ids or dangling references.
    """
    registry: Dict[str, LootTable] = {}
    for table in tables:
        if table.table_id in registry:
            raise LootTableError(f"Duplicate loot table id: {table.table_id}")
        registry[table.table_id] = table

    for table in tables:
        for ref in table.sub_table_ids():
            if ref not in registry:
                raise LootTableError(f"{table.table_id}: unknown sub-table {ref!r}")
    return registry


LOOT_TABLES: Dict[str, LootTable] = build_registry(RARE_TABLE, MEGARARE_TABLE, GEM_TABLE)


def get_loot_table(table_id: str) -> Optional[LootTable]:
    return LOOT_TABLES.get(table_id)
