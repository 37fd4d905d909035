"""
Drop simulation service.
"""

from typing import List, Optional

from ..config import settings
from ..schemas.simulation import (
    LootDistributionSchema,
    SimulationReportSchema,
)
from dropsim.combat.simulation import DropSimulator, SimulationResult, format_report
from dropsim.data.loaders import get_archetype_by_id, load_archetypes, load_default_player
from dropsim.data.models.archetype import Archetype
from dropsim.data.models.player import PlayerProfile
from dropsim.loot.drop_tables import get_loot_table
from dropsim.loot.resolver import outcome_distribution
from dropsim.loot.table import LootContext


class SimulationService:
    """Runs simulations and serves static data for the API."""

    def list_archetypes(self) -> List[Archetype]:
        return load_archetypes()

    def get_archetype(self, archetype_id: str) -> Archetype:
        archetype = get_archetype_by_id(archetype_id)
        if archetype is None:
            raise ValueError(f"Archetype not found: {archetype_id}")
        return archetype

    def resolve_trials(self, trials: Optional[int]) -> int:
        return trials if trials is not None else settings.DEFAULT_TRIAL_COUNT

    def simulate(
        self,
        archetype_ids: List[str],
        trials: Optional[int] = None,
        seed: Optional[int] = None,
        player: Optional[PlayerProfile] = None,
        is_members: Optional[bool] = None,
        target_item: Optional[str] = None,
        parallel: bool = False,
    ) -> List[SimulationReportSchema]:
        """
        Simulate one or more archetypes with a shared random stream.

        Args:
            archetype_ids: Archetypes to run, in order; all when empty.
            trials: Trials per archetype.
            seed: Random seed (falls back to DEFAULT_SEED).
            player: Player profile (falls back to the default player).
            is_members: Membership override (falls back to IS_MEMBERS).
            target_item: Item to farm (falls back to TARGET_ITEM).
            parallel: Run trials on a thread pool.

        Returns:
            One report per archetype.

        Raises:
            ValueError: If an archetype id is unknown.
        """
        if archetype_ids:
            archetypes = [self.get_archetype(a) for a in archetype_ids]
        else:
            archetypes = self.list_archetypes()

        simulator = DropSimulator(
            base_seed=seed if seed is not None else settings.DEFAULT_SEED,
            target_item=target_item or settings.TARGET_ITEM,
            is_members=settings.IS_MEMBERS if is_members is None else is_members,
            max_ticks=settings.API_MAX_TRIAL_TICKS,
        )
        profile = player or load_default_player()
        results = simulator.simulate_all(
            archetypes,
            profile,
            iterations=self.resolve_trials(trials),
            parallel=parallel,
        )
        return [self._to_schema(r) for r in results]

    def loot_distribution(
        self,
        table_id: str,
        is_members: bool = True,
        ring_of_wealth: bool = False,
        coord_z: int = 0,
    ) -> LootDistributionSchema:
        table = get_loot_table(table_id)
        if table is None:
            raise ValueError(f"Loot table not found: {table_id}")

        context = LootContext(
            is_members=is_members,
            coord_z=coord_z,
            wealth_boosted=ring_of_wealth,
        )
        dist = outcome_distribution(table, context)
        return LootDistributionSchema(
            table_id=table_id,
            modulus=table.modulus_for(context),
            probabilities={
                (name if name is not None else "nothing"): float(p)
                for name, p in dist.items()
            },
        )

    def _to_schema(self, result: SimulationResult) -> SimulationReportSchema:
        kills = result.kills_per_target
        return SimulationReportSchema(
            archetype_id=result.archetype_id,
            archetype_name=result.archetype_name,
            target_item=result.target_item,
            trials=result.iterations,
            successes=result.successes,
            failures=result.failures,
            timeouts=result.timeouts,
            success_rate=result.success_rate,
            avg_ticks=result.avg_ticks,
            avg_hours=result.avg_hours,
            median_hours=result.median_hours,
            p90_hours=result.p90_hours,
            avg_food_eaten=result.avg_food_eaten,
            avg_banking_trips=result.avg_banking_trips,
            avg_kills=result.avg_kills,
            kills_per_target=kills if kills != float("inf") else None,
            player_dps=result.player_dps,
            opponent_dps=result.opponent_dps,
            summary=format_report(result),
        )
