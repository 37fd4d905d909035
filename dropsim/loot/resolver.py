"""Loot Resolver.

One generic resolver walks any table tree. Each table visited costs one
draw from the random source. Members-only ranges give nothing to free
players; they never fall through to a neighbouring range.
"""

from collections import defaultdict
from fractions import Fraction
from typing import Dict, Mapping, Optional
import random

from dropsim.core.inventory import Item
from dropsim.loot.drop_tables import LOOT_TABLES
from dropsim.loot.table import (
    ItemDrop,
    LootContext,
    LootTable,
    Outcome,
    RegionalDrop,
    SubTable,
)

# Distribution key for "no reward"
NOTHING: Optional[str] = None


def roll_drop_check(chance: int, outof: int, rng: random.Random) -> bool:
    """Whether a kill rolls its loot table at all."""
    return rng.randrange(outof) < chance


def resolve(
    table: LootTable,
    context: LootContext,
    rng: random.Random,
    tables: Mapping[str, LootTable] = LOOT_TABLES,
) -> Optional[Item]:
    """
    Roll a table.

    Args:
        table: Table to roll.
        context: Membership, location and ring of wealth.
        rng: Random source.
        tables: Registry for sub-table references.

    Returns:
        The item won, or None.
    """
    draw = rng.randrange(table.modulus_for(context))
    return resolve_draw(table, draw, context, rng, tables)


def resolve_draw(
    table: LootTable,
    draw: int,
    context: LootContext,
    rng: random.Random,
    tables: Mapping[str, LootTable] = LOOT_TABLES,
) -> Optional[Item]:
    """Resolve an already-drawn value. Sub-tables still draw from rng."""
    entry = table.range_for(draw)
    if entry is None:
        return None
    if entry.members_only and not context.is_members:
        return None
    return _resolve_outcome(entry.outcome, context, rng, tables)


def _resolve_outcome(
    outcome: Outcome,
    context: LootContext,
    rng: random.Random,
    tables: Mapping[str, LootTable],
) -> Optional[Item]:
    if isinstance(outcome, ItemDrop):
        return outcome.to_item()
    if isinstance(outcome, RegionalDrop):
        return outcome.pick(context).to_item()
    if isinstance(outcome, SubTable):
        return resolve(tables[outcome.table_id], context, rng, tables)
    raise TypeError(f"Unknown loot outcome: {outcome!r}")


def outcome_distribution(
    table: LootTable,
    context: LootContext,
    tables: Mapping[str, LootTable] = LOOT_TABLES,
) -> Dict[Optional[str], Fraction]:
    """
    Exact probability of every item a table can give.

    Sub-table probabilities are multiplied through. The NOTHING key holds
    the mass of gaps, gated ranges and empty sub-table rolls. Values sum
    to exactly 1.
    """
    modulus = table.modulus_for(context)
    dist: Dict[Optional[str], Fraction] = defaultdict(Fraction)
    dist[NOTHING] += Fraction(modulus - table.covered, modulus)

    for entry in table.ranges:
        weight = Fraction(entry.width, modulus)
        outcome = entry.outcome

        if entry.members_only and not context.is_members:
            dist[NOTHING] += weight
        elif isinstance(outcome, ItemDrop):
            dist[outcome.name] += weight
        elif isinstance(outcome, RegionalDrop):
            dist[outcome.pick(context).name] += weight
        elif isinstance(outcome, SubTable):
            nested = outcome_distribution(tables[outcome.table_id], context, tables)
            for name, p in nested.items():
                dist[name] += weight * p

    return dict(dist)


def item_probability(
    table: LootTable,
    item_name: str,
    context: LootContext,
    tables: Mapping[str, LootTable] = LOOT_TABLES,
) -> Fraction:
    """Probability that one roll on the table gives the named item."""
    return outcome_distribution(table, context, tables).get(item_name, Fraction(0))


def kills_per_item(
    chance: int,
    outof: int,
    table: LootTable,
    item_name: str,
    context: LootContext,
    tables: Mapping[str, LootTable] = LOOT_TABLES,
) -> float:
    """Expected kills until the item drops; inf if it never can."""
    per_kill = Fraction(chance, outof) * item_probability(table, item_name, context, tables)
    if per_kill == 0:
        return float("inf")
    return float(1 / per_kill)
