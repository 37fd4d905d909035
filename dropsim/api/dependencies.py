"""
Dependency injection for API services.
"""

from functools import lru_cache

from .services.simulation_service import SimulationService


@lru_cache()
def get_simulation_service() -> SimulationService:
    """Get SimulationService singleton."""
    return SimulationService()
