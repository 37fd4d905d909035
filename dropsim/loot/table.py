"""Loot Table structures.

A loot table is a list of disjoint integer ranges over a modulus. A draw
in [0, modulus) lands in at most one range; draws that land in no range
give nothing. Each range yields an item, a location-dependent item, or
a roll on another table.

Holding a ring of wealth swaps the modulus for a smaller one on tables
that support it. Every range keeps its bounds, so all outcome
probabilities change at once.
"""

from dataclasses import dataclass
from typing import Optional, Sequence, Tuple, Union, TYPE_CHECKING

from dropsim.core.constants import LOOT_MODULUS, RING_OF_WEALTH
from dropsim.core.inventory import Item

if TYPE_CHECKING:
    from dropsim.combat.combat_unit import PlayerCombatant


class LootTableError(ValueError):
    """Malformed loot table definition."""


@dataclass(frozen=True)
class LootContext:
    """Facts about the player that change what a table gives."""

    is_members: bool = True
    coord_z: int = 0
    wealth_boosted: bool = False

    @classmethod
    def from_player(cls, player: "PlayerCombatant", is_members: bool) -> "LootContext":
        return cls(
            is_members=is_members,
            coord_z=player.coords.z,
            wealth_boosted=player.holds(RING_OF_WEALTH),
        )


@dataclass(frozen=True)
class ItemDrop:
    name: str
    quantity: int = 1
    stackable: bool = True

    def to_item(self) -> Item:
        return Item(self.name, self.quantity, self.stackable)


@dataclass(frozen=True)
class RegionalDrop:
    """Gives `north` when the player's z coordinate is above the threshold."""

    threshold: int
    north: ItemDrop
    south: ItemDrop

    def pick(self, context: LootContext) -> ItemDrop:
        return self.north if context.coord_z > self.threshold else self.south


@dataclass(frozen=True)
class SubTable:
    """Roll on another table, referenced by id."""

    table_id: str


Outcome = Union[ItemDrop, RegionalDrop, SubTable]


@dataclass(frozen=True)
class LootRange:
    """Half-open range [start, end) of draws mapping to one outcome."""

    start: int
    end: int
    outcome: Outcome
    members_only: bool = False

    @property
    def width(self) -> int:
        return self.end - self.start

    def covers(self, draw: int) -> bool:
        return self.start <= draw < self.end


class LootTable:
    """
    A weighted-range loot table.

    Usage:
        table = LootTable("gems", [
            LootRange(0, 32, ItemDrop("uncut_sapphire")),
            LootRange(32, 48, ItemDrop("uncut_emerald")),
        ])
        entry = table.range_for(17)
    """

    def __init__(
        self,
        table_id: str,
        ranges: Sequence[LootRange],
        modulus: int = LOOT_MODULUS,
        boosted_modulus: Optional[int] = None,
    ):
        """
        Build and validate a table.

        Args:
            table_id: Unique id, used by SubTable references.
            ranges: Outcome ranges; order does not matter.
            modulus: Draw modulus without a ring of wealth.
            boosted_modulus: Draw modulus with a ring of wealth, if the table
                responds to one.

        Raises:
            LootTableError: If a modulus is not positive or a range is empty,
                overlaps another, or falls outside the smallest modulus.
        """
        self.table_id = table_id
        self.modulus = modulus
        self.boosted_modulus = boosted_modulus
        self.ranges: Tuple[LootRange, ...] = tuple(sorted(ranges, key=lambda r: r.start))
        self._validate()

    def _validate(self) -> None:
        moduli = [self.modulus]
        if self.boosted_modulus is not None:
            moduli.append(self.boosted_modulus)
        if any(m <= 0 for m in moduli):
            raise LootTableError(f"{self.table_id}: modulus must be positive, got {moduli}")
        bound = min(moduli)

        previous: Optional[LootRange] = None
        for entry in self.ranges:
            if entry.start < 0 or entry.end <= entry.start:
                raise LootTableError(
                    f"{self.table_id}: invalid range [{entry.start}, {entry.end})"
                )
            if entry.end > bound:
                raise LootTableError(
                    f"{self.table_id}: range [{entry.start}, {entry.end}) exceeds modulus {bound}"
                )
            if previous is not None and entry.start < previous.end:
                raise LootTableError(
                    f"{self.table_id}: range [{entry.start}, {entry.end}) overlaps "
                    f"[{previous.start}, {previous.end})"
                )
            previous = entry

    def modulus_for(self, context: LootContext) -> int:
        if context.wealth_boosted and self.boosted_modulus is not None:
            return self.boosted_modulus
        return self.modulus

    def range_for(self, draw: int) -> Optional[LootRange]:
        """Range containing the draw, or None for a gap."""
        for entry in self.ranges:
            if entry.covers(draw):
                return entry
            if entry.start > draw:
                break
        return None

    @property
    def covered(self) -> int:
        """Number of draws that land in some range."""
        return sum(entry.width for entry in self.ranges)

    def sub_table_ids(self) -> Tuple[str, ...]:
        return tuple(
            entry.outcome.table_id
            for entry in self.ranges
            if isinstance(entry.outcome, SubTable)
        )

    def __repr__(self) -> str:
        return f"LootTable({self.table_id!r}, {len(self.ranges)} ranges, modulus={self.modulus})"
