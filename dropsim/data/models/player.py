"""Player profile data model."""

from typing import List, Literal, Union

from pydantic import BaseModel, Field

from dropsim.combat.combat_unit import (
    Loadout,
    MagicLoadout,
    MeleeLoadout,
    RangedLoadout,
)
from dropsim.core.constants import DEFAULT_FOOD_HEAL, EQUIPMENT_BONUS_OFFSET


class MeleeGear(BaseModel):
    style: Literal["melee"] = "melee"
    str_bonus: int = Field(..., ge=-EQUIPMENT_BONUS_OFFSET)
    accuracy: int = Field(..., ge=-EQUIPMENT_BONUS_OFFSET)
    def_bonus: int = Field(..., ge=-EQUIPMENT_BONUS_OFFSET, description="Defence vs the npc's style")
    rate: int = Field(..., ge=1, description="Ticks per attack")


class RangedGear(BaseModel):
    style: Literal["ranged"] = "ranged"
    ammo_str: int = 0
    accuracy: int = 0
    rate: int = Field(default=4, ge=1)


class MagicGear(BaseModel):
    style: Literal["magic"] = "magic"


class Coords(BaseModel):
    x: int = 0
    y: int = 0
    z: int = 0


class PlayerProfile(BaseModel):
    """The player's levels, gear and circumstances."""

    name: str = "player"
    att_level: int = Field(..., ge=1)
    str_level: int = Field(..., ge=1)
    def_level: int = Field(..., ge=1)
    hp_level: int = Field(..., ge=1)

    gear: Union[MeleeGear, RangedGear, MagicGear] = Field(..., discriminator="style")
    coords: Coords = Field(default_factory=Coords)
    held_items: List[str] = Field(default_factory=list)
    is_members: bool = True
    food_heal: int = Field(default=DEFAULT_FOOD_HEAL, ge=0)

    def build_loadout(self) -> Loadout:
        gear = self.gear
        if isinstance(gear, MeleeGear):
            return MeleeLoadout(
                str_bonus=gear.str_bonus,
                accuracy=gear.accuracy,
                def_bonus=gear.def_bonus,
                rate=gear.rate,
            )
        if isinstance(gear, RangedGear):
            return RangedLoadout(ammo_str=gear.ammo_str, accuracy=gear.accuracy, rate=gear.rate)
        return MagicLoadout()

    def with_items(self, *names: str) -> "PlayerProfile":
        """Copy of the profile also holding the given items."""
        held = list(self.held_items)
        for name in names:
            if name not in held:
                held.append(name)
        return self.model_copy(update={"held_items": held})
