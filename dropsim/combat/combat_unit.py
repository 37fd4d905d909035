"""Combat Units.

Combat stats and the two kinds of combatant (the player and an npc).
Both expose the same interface so the melee formula in attack.py can
treat attacker and defender symmetrically.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Optional, Union, TYPE_CHECKING

from dropsim.core.inventory import Inventory, Item

if TYPE_CHECKING:
    from dropsim.data.models.archetype import Archetype
    from dropsim.data.models.player import PlayerProfile


@dataclass
class CombatStats:
    """
    Levels and hitpoints.

    current_hp always stays within [0, max_hp].
    """

    str_level: int
    def_level: int
    att_level: int
    max_hp: int
    current_hp: int

    @property
    def is_dead(self) -> bool:
        return self.current_hp == 0

    def die(self) -> None:
        self.current_hp = 0

    def deduct_hp(self, amount: int) -> None:
        """Remove health, flooring at 0. Non-positive amounts do nothing."""
        if amount <= 0:
            return
        if amount > self.current_hp:
            self.die()
        else:
            self.current_hp -= amount

    def heal(self, amount: int) -> None:
        """Restore health, capped at max_hp."""
        if amount <= 0:
            return
        self.current_hp = min(self.current_hp + amount, self.max_hp)

    def heal_fully(self) -> None:
        self.current_hp = self.max_hp


@dataclass
class Coordinates:
    x: int = 0  # east/west
    y: int = 0  # vertical (dungeons)
    z: int = 0  # north/south


# =============================================================================
# LOADOUTS
# =============================================================================


@dataclass
class MeleeLoadout:
    """Melee gear bonuses for the player's chosen style."""

    str_bonus: int
    accuracy: int
    def_bonus: int  # defence against the style the npc attacks with
    rate: int  # ticks per attack


@dataclass
class RangedLoadout:
    ammo_str: int
    accuracy: int
    rate: int


@dataclass
class MagicLoadout:
    pass


Loadout = Union[MeleeLoadout, RangedLoadout, MagicLoadout]


# =============================================================================
# COMBATANTS
# =============================================================================


class Combatant(ABC):
    """
    Anything that can attack or be attacked.

    Subclasses provide gear bonuses and cadence; levels and health come
    from the shared CombatStats.
    """

    name: str
    stats: CombatStats

    @property
    @abstractmethod
    def attack_rate(self) -> int:
        """Ticks between attacks."""

    @property
    @abstractmethod
    def equipment_accuracy(self) -> int:
        ...

    @property
    @abstractmethod
    def equipment_strength(self) -> int:
        ...

    @property
    @abstractmethod
    def style_defense(self) -> int:
        """Defence bonus against the opponent's attack style."""

    @property
    @abstractmethod
    def is_npc(self) -> bool:
        ...

    @property
    def is_player(self) -> bool:
        return not self.is_npc

    @property
    def str_level(self) -> int:
        return self.stats.str_level

    @property
    def att_level(self) -> int:
        return self.stats.att_level

    @property
    def def_level(self) -> int:
        return self.stats.def_level

    @property
    def is_dead(self) -> bool:
        return self.stats.is_dead

    def deduct_hp(self, amount: int) -> None:
        self.stats.deduct_hp(amount)

    def __repr__(self) -> str:
        return f"{self.name} ({self.stats.current_hp}/{self.stats.max_hp} HP)"


@dataclass(repr=False)
class PlayerCombatant(Combatant):
    """The player. Only melee loadouts can fight."""

    name: str
    stats: CombatStats
    loadout: Loadout
    inventory: Inventory = field(default_factory=Inventory)
    coords: Coordinates = field(default_factory=Coordinates)

    @classmethod
    def from_profile(cls, profile: "PlayerProfile") -> "PlayerCombatant":
        """
        Create a fresh player from a profile.

        Every call returns independent stats and inventory, so one profile
        can seed any number of trials.
        """
        stats = CombatStats(
            str_level=profile.str_level,
            def_level=profile.def_level,
            att_level=profile.att_level,
            max_hp=profile.hp_level,
            current_hp=profile.hp_level,
        )
        inventory = Inventory()
        for name in profile.held_items:
            inventory.add_item(Item(name, 1))

        return cls(
            name=profile.name,
            stats=stats,
            loadout=profile.build_loadout(),
            inventory=inventory,
            coords=Coordinates(profile.coords.x, profile.coords.y, profile.coords.z),
        )

    def _melee(self) -> MeleeLoadout:
        if isinstance(self.loadout, MeleeLoadout):
            return self.loadout
        raise NotImplementedError(
            f"{type(self.loadout).__name__} combat is not supported yet"
        )

    @property
    def attack_rate(self) -> int:
        return self._melee().rate

    @property
    def equipment_accuracy(self) -> int:
        return self._melee().accuracy

    @property
    def equipment_strength(self) -> int:
        return self._melee().str_bonus

    @property
    def style_defense(self) -> int:
        return self._melee().def_bonus

    @property
    def is_npc(self) -> bool:
        return False

    def holds(self, item_name: str) -> bool:
        return self.inventory.total_of(item_name) > 0


@dataclass(repr=False)
class OpponentCombatant(Combatant):
    """An npc spawned from an archetype."""

    name: str
    stats: CombatStats
    rate: int
    accuracy: int
    strength: int
    style_def: int
    archetype_id: Optional[str] = None

    @classmethod
    def from_archetype(cls, archetype: "Archetype") -> "OpponentCombatant":
        """Spawn a fresh npc at full health."""
        return cls(
            name=archetype.name,
            stats=CombatStats(
                str_level=archetype.str_level,
                def_level=archetype.def_level,
                att_level=archetype.att_level,
                max_hp=archetype.hp_level,
                current_hp=archetype.hp_level,
            ),
            rate=archetype.attack_rate,
            accuracy=archetype.accuracy,
            strength=archetype.strength,
            style_def=archetype.style_defense,
            archetype_id=archetype.id,
        )

    @property
    def attack_rate(self) -> int:
        return self.rate

    @property
    def equipment_accuracy(self) -> int:
        return self.accuracy

    @property
    def equipment_strength(self) -> int:
        return self.strength

    @property
    def style_defense(self) -> int:
        return self.style_def

    @property
    def is_npc(self) -> bool:
        return True
