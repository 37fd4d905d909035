"""
Static data API routes.
"""

from fastapi import APIRouter, HTTPException, Depends
from typing import List, Dict, Any

from ..schemas.simulation import LootDistributionSchema
from ..services.simulation_service import SimulationService
from ..dependencies import get_simulation_service

router = APIRouter()


# === Archetypes ===


@router.get("/archetypes")
async def get_all_archetypes(
    service: SimulationService = Depends(get_simulation_service),
) -> List[Dict[str, Any]]:
    """Get all archetypes."""
    return [a.model_dump() for a in service.list_archetypes()]


@router.get("/archetypes/{archetype_id}")
async def get_archetype(
    archetype_id: str,
    service: SimulationService = Depends(get_simulation_service),
) -> Dict[str, Any]:
    """Get specific archetype by ID."""
    try:
        return service.get_archetype(archetype_id).model_dump()
    except ValueError:
        raise HTTPException(status_code=404, detail="Archetype not found")


# === Loot ===


@router.get("/loot/{table_id}", response_model=LootDistributionSchema)
async def get_loot_distribution(
    table_id: str,
    is_members: bool = True,
    ring_of_wealth: bool = False,
    coord_z: int = 0,
    service: SimulationService = Depends(get_simulation_service),
):
    """Exact drop probabilities of a loot table for the given context."""
    try:
        return service.loot_distribution(table_id, is_members, ring_of_wealth, coord_z)
    except ValueError:
        raise HTTPException(status_code=404, detail="Loot table not found")
