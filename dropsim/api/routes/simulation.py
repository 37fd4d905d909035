"""
Drop simulation API routes.
"""

from fastapi import APIRouter, HTTPException, Depends
from typing import Optional

from ..config import settings
from ..schemas.simulation import (
    BatchReportSchema,
    BatchSimulateRequest,
    SimulateRequest,
    SimulationReportSchema,
)
from ..services.simulation_service import SimulationService
from ..dependencies import get_simulation_service

router = APIRouter()


def _check_trial_limit(
    service: SimulationService, trials: Optional[int], archetype_count: int
) -> None:
    total = service.resolve_trials(trials) * max(1, archetype_count)
    if total > settings.MAX_TRIAL_COUNT:
        raise HTTPException(
            status_code=422,
            detail=f"At most {settings.MAX_TRIAL_COUNT} trials per request",
        )


@router.post("/run", response_model=SimulationReportSchema)
def run_simulation(
    request: SimulateRequest,
    service: SimulationService = Depends(get_simulation_service),
):
    """
    Estimate time to the target drop for one archetype.

    Runs N trials and returns aggregate statistics.
    """
    _check_trial_limit(service, request.trials, 1)
    try:
        reports = service.simulate(
            [request.archetype_id],
            trials=request.trials,
            seed=request.seed,
            player=request.player,
            is_members=request.is_members,
            target_item=request.target_item,
            parallel=request.parallel,
        )
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return reports[0]


@router.post("/batch", response_model=BatchReportSchema)
def run_batch(
    request: BatchSimulateRequest,
    service: SimulationService = Depends(get_simulation_service),
):
    """Simulate several archetypes (all of them when none are named)."""
    count = len(request.archetype_ids) or len(service.list_archetypes())
    _check_trial_limit(service, request.trials, count)
    try:
        reports = service.simulate(
            request.archetype_ids,
            trials=request.trials,
            seed=request.seed,
            player=request.player,
            is_members=request.is_members,
            target_item=request.target_item,
        )
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return BatchReportSchema(reports=reports)
