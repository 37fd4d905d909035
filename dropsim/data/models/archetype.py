"""Opponent archetype data model."""

from typing import Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from dropsim.loot.drop_tables import GEM_TABLE_ID, LOOT_TABLES


class Archetype(BaseModel):
    """An npc to farm, with its combat stats, drop rate and spawn timing."""

    id: str = Field(..., description="Unique identifier (lowercase, underscores)")
    name: str = Field(..., description="Display name")

    # Levels
    hp_level: int = Field(..., ge=1, description="Hitpoints")
    att_level: int = Field(..., ge=0)
    str_level: int = Field(..., ge=0)
    def_level: int = Field(..., ge=0)

    # Equipment bonuses
    accuracy: int = Field(default=0, ge=0, description="Attack bonus with its chosen style")
    strength: int = Field(default=0, ge=0, description="Strength bonus")
    style_defense: int = Field(default=0, ge=0, description="Defence against the player's style")
    attack_rate: int = Field(..., ge=1, description="Ticks between attacks")

    # Drops
    chance: int = Field(..., ge=0, description="Drop check numerator")
    outof: int = Field(..., ge=1, description="Drop check denominator")
    drop_table: str = Field(default=GEM_TABLE_ID, description="Loot table rolled on a drop")

    # Spawns and logistics
    available_npcs: int = Field(..., ge=1, description="Npcs available to fight at once")
    respawn_rate: int = Field(..., ge=0, description="Ticks between death and respawn")
    ticks_between_trips: int = Field(..., ge=0, description="Round trip to the bank in ticks")

    notes: Optional[str] = None

    model_config = {"frozen": True}

    @field_validator("drop_table")
    @classmethod
    def check_known_table(cls, value: str) -> str:
        if value not in LOOT_TABLES:
            raise ValueError(f"unknown loot table {value!r}")
        return value

    @model_validator(mode="after")
    def check_chance_within_outof(self) -> "Archetype":
        if self.chance > self.outof:
            raise ValueError(f"drop chance {self.chance}/{self.outof} exceeds 1")
        return self

    @property
    def drop_rate(self) -> float:
        return self.chance / self.outof
