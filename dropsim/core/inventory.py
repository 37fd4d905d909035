"""Inventory and Bank.

Tracks what the player is carrying between banking trips and where
it ends up afterwards. Slots follow the in-game rules:
- certificates always take one slot regardless of quantity
- stackable items take one slot per distinct name
- anything else takes one slot per unit
"""

from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional

from dropsim.core.constants import (
    BANK_QUANTITY_MODULUS,
    CERTIFICATE_PREFIX,
    INVENTORY_SIZE,
)


class InventoryInvariantError(RuntimeError):
    """Slot contents and the name index disagree. Always a logic bug."""


@dataclass
class Item:
    """An item stack."""

    name: str
    quantity: int = 1
    stackable: bool = True

    @property
    def is_certificate(self) -> bool:
        return self.name.startswith(CERTIFICATE_PREFIX)

    @property
    def slots_needed(self) -> int:
        """Slots this item takes when it is not merged into an existing stack."""
        if self.is_certificate or self.stackable:
            return 1
        return self.quantity


class Inventory:
    """
    Fixed-size player inventory.

    Usage:
        inventory = Inventory()
        if inventory.has_room_for(item):
            inventory.add_item(item)
        inventory.bank(bank)
    """

    def __init__(self, size: int = INVENTORY_SIZE):
        self.items: List[Optional[Item]] = [None] * size
        # name -> first slot holding that name
        self.indices: Dict[str, int] = {}

    def __iter__(self) -> Iterator[Item]:
        return (item for item in self.items if item is not None)

    def __len__(self) -> int:
        return sum(1 for _ in self)

    @property
    def size(self) -> int:
        return len(self.items)

    @property
    def free_slots(self) -> int:
        return sum(1 for item in self.items if item is None)

    def total_of(self, item_name: str) -> int:
        """Total quantity carried of an item."""
        return sum(item.quantity for item in self if item.name == item_name)

    def index_of(self, item_name: str) -> Optional[int]:
        return self.indices.get(item_name)

    def first_available(self) -> Optional[int]:
        for i, item in enumerate(self.items):
            if item is None:
                return i
        return None

    def can_loot(self) -> bool:
        return self.first_available() is not None

    def _stacks_onto_existing(self, item: Item) -> bool:
        return (item.is_certificate or item.stackable) and self.total_of(item.name) > 0

    def has_room_for(self, item: Item) -> bool:
        """Check if an item fits, either on an existing stack or in free slots."""
        if self._stacks_onto_existing(item):
            return True
        return self.free_slots >= item.slots_needed

    def add_item(self, item: Item) -> None:
        """
        Add an item to the inventory.

        Args:
            item: Item to add.

        Raises:
            ValueError: If there is no room for the item.
            InventoryInvariantError: If the name index is out of sync.
        """
        if self._stacks_onto_existing(item):
            idx = self.indices.get(item.name)
            if idx is None:
                raise InventoryInvariantError(
                    f"total of {item.name} is nonzero but the index has no record of it"
                )
            existing = self.items[idx]
            if existing is None or existing.name != item.name:
                raise InventoryInvariantError(
                    f"index points {item.name} at slot {idx} which holds {existing}"
                )
            existing.quantity += item.quantity
            return

        if self.free_slots < item.slots_needed:
            raise ValueError(f"No room for {item.quantity} x {item.name}")

        if item.slots_needed == 1:
            pieces = [Item(item.name, item.quantity, item.stackable)]
        else:
            pieces = [Item(item.name, 1, item.stackable) for _ in range(item.quantity)]

        for piece in pieces:
            slot = self.first_available()
            self.items[slot] = piece
            self.indices.setdefault(item.name, slot)

    def clear(self) -> None:
        self.items = [None] * len(self.items)
        self.indices.clear()

    def bank(self, bank: "Bank") -> None:
        """Deposit everything into the bank and empty the inventory."""
        for item in self:
            bank.store(item)
        self.clear()


@dataclass
class Bank:
    """Item totals, keyed by name."""

    lookup: Dict[str, int] = field(default_factory=dict)

    def store(self, item: Item) -> None:
        existing = self.lookup.get(item.name, 0)
        self.lookup[item.name] = (existing + item.quantity) % BANK_QUANTITY_MODULUS

    def total_of(self, item_name: str) -> int:
        return self.lookup.get(item_name, 0)
