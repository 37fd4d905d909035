"""
Simulation-related API schemas.
"""

from pydantic import BaseModel, Field, field_validator
from typing import Dict, List, Optional

from dropsim.data.models.player import MeleeGear, PlayerProfile


def _require_melee(player: Optional[PlayerProfile]) -> Optional[PlayerProfile]:
    # Only melee combat can be simulated
    if player is not None and not isinstance(player.gear, MeleeGear):
        raise ValueError(f"{player.gear.style} gear is not supported, use melee")
    return player


class SimulateRequest(BaseModel):
    """Simulation request for one archetype."""

    archetype_id: str
    trials: Optional[int] = Field(default=None, ge=1, description="Defaults to DEFAULT_TRIAL_COUNT")
    seed: Optional[int] = None
    player: Optional[PlayerProfile] = Field(default=None, description="Defaults to data/player.json")
    is_members: Optional[bool] = None
    target_item: Optional[str] = None
    parallel: bool = False

    @field_validator("player")
    @classmethod
    def check_melee_only(cls, player: Optional[PlayerProfile]) -> Optional[PlayerProfile]:
        return _require_melee(player)


class BatchSimulateRequest(BaseModel):
    """Simulation request for several archetypes (all when none given)."""

    archetype_ids: List[str] = Field(default_factory=list)
    trials: Optional[int] = Field(default=None, ge=1)
    seed: Optional[int] = None
    player: Optional[PlayerProfile] = None
    is_members: Optional[bool] = None
    target_item: Optional[str] = None

    @field_validator("player")
    @classmethod
    def check_melee_only(cls, player: Optional[PlayerProfile]) -> Optional[PlayerProfile]:
        return _require_melee(player)


class SimulationReportSchema(BaseModel):
    """Aggregated result for one archetype."""

    archetype_id: str
    archetype_name: str
    target_item: str
    trials: int
    successes: int
    failures: int
    timeouts: int
    success_rate: float
    avg_ticks: Optional[float]
    avg_hours: Optional[float]
    median_hours: Optional[float]
    p90_hours: Optional[float]
    avg_food_eaten: Optional[float]
    avg_banking_trips: Optional[float]
    avg_kills: Optional[float]
    kills_per_target: Optional[float] = Field(description="None when the item cannot drop")
    player_dps: float
    opponent_dps: float
    summary: str


class BatchReportSchema(BaseModel):
    reports: List[SimulationReportSchema]


class LootDistributionSchema(BaseModel):
    """Exact outcome probabilities of a loot table."""

    table_id: str
    modulus: int
    probabilities: Dict[str, float]
