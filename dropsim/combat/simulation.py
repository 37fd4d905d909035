"""Monte Carlo Drop Simulation.

Runs many independent trials against an archetype to estimate how long
the target item takes to drop, and how much food that costs.
"""

from dataclasses import dataclass, field
from typing import Iterable, List, Optional, TYPE_CHECKING
from concurrent.futures import ThreadPoolExecutor
import logging
import random
import statistics

import numpy as np

from .attack import expected_damage_per_tick
from .trial_engine import TrialEngine, TrialOutcome, TrialStatus
from dropsim.core.constants import DEFAULT_TARGET_ITEM, MAX_TRIAL_TICKS, TICKS_PER_HOUR
from dropsim.loot.resolver import kills_per_item

if TYPE_CHECKING:
    from dropsim.data.models.archetype import Archetype
    from dropsim.data.models.player import PlayerProfile

logger = logging.getLogger(__name__)


@dataclass
class SimulationResult:
    """
    Result of a Monte Carlo drop simulation.

    Time and food averages only cover successful trials; deaths and
    abandoned trials are counted but never averaged in.
    """

    archetype_id: str
    archetype_name: str
    target_item: str

    # Sample size
    iterations: int
    successes: int
    failures: int
    timeouts: int

    # Time statistics (successful trials only)
    avg_ticks: Optional[float]
    avg_hours: Optional[float]
    median_hours: Optional[float]
    p90_hours: Optional[float]

    # Supplies (successful trials only)
    avg_food_eaten: Optional[float]
    avg_banking_trips: Optional[float]
    avg_kills: Optional[float]

    # Analytic cross-checks
    kills_per_target: float
    player_dps: float
    opponent_dps: float

    # Raw results for detailed analysis
    individual_results: List[TrialOutcome] = field(default_factory=list, repr=False)

    @property
    def success_rate(self) -> float:
        return self.successes / self.iterations if self.iterations > 0 else 0.0


class DropSimulator:
    """
    Monte Carlo drop simulator.

    Sequential runs share one random stream across all trials, so a
    seeded simulator is reproducible. Parallel runs give every trial its
    own stream, seeded from the simulator's stream; results are just as
    reproducible but differ from the sequential ones for the same seed.

    Usage:
        simulator = DropSimulator(base_seed=42)
        result = simulator.simulate(archetype, profile, iterations=10000)
        print(format_report(result))
    """

    def __init__(
        self,
        base_seed: Optional[int] = None,
        target_item: str = DEFAULT_TARGET_ITEM,
        is_members: Optional[bool] = None,
        max_ticks: int = MAX_TRIAL_TICKS,
    ):
        """
        Initialize simulator.

        Args:
            base_seed: Seed for reproducibility.
            target_item: Item whose drop counts as success.
            is_members: Membership override; defaults to the profile's flag.
            max_ticks: Per-trial tick limit.
        """
        self.base_seed = base_seed
        self.rng = random.Random(base_seed)
        self.target_item = target_item
        self.is_members = is_members
        self.max_ticks = max_ticks

    def _make_engine(
        self,
        archetype: "Archetype",
        profile: "PlayerProfile",
        rng: random.Random,
    ) -> TrialEngine:
        return TrialEngine(
            archetype,
            profile,
            rng=rng,
            target_item=self.target_item,
            is_members=self.is_members,
            max_ticks=self.max_ticks,
        )

    def simulate(
        self,
        archetype: "Archetype",
        profile: "PlayerProfile",
        iterations: int = 1000,
        parallel: bool = False,
        max_workers: int = 4,
    ) -> SimulationResult:
        """
        Run Monte Carlo simulation.

        Args:
            archetype: Npc to farm.
            profile: Player doing the farming.
            iterations: Number of trials.
            parallel: Whether to run trials in parallel.
            max_workers: Max parallel workers.

        Returns:
            SimulationResult with statistical analysis.
        """
        if iterations < 1:
            raise ValueError(f"iterations must be positive, got {iterations}")

        if parallel and iterations > 10:
            results = self._run_parallel(archetype, profile, iterations, max_workers)
        else:
            results = self._run_sequential(archetype, profile, iterations)

        result = self._analyze_results(archetype, profile, results)
        logger.info(
            "%s: %d/%d trials succeeded, avg %.2f hours",
            archetype.name,
            result.successes,
            iterations,
            result.avg_hours if result.avg_hours is not None else float("nan"),
        )
        return result

    def simulate_all(
        self,
        archetypes: Iterable["Archetype"],
        profile: "PlayerProfile",
        iterations: int = 1000,
        parallel: bool = False,
        max_workers: int = 4,
    ) -> List[SimulationResult]:
        """Simulate each archetype in turn, continuing the same random stream."""
        return [
            self.simulate(archetype, profile, iterations, parallel, max_workers)
            for archetype in archetypes
        ]

    def _run_sequential(
        self,
        archetype: "Archetype",
        profile: "PlayerProfile",
        iterations: int,
    ) -> List[TrialOutcome]:
        """Run trials sequentially on the simulator's random stream."""
        engine = self._make_engine(archetype, profile, self.rng)
        results = []

        for i in range(iterations):
            outcome = engine.run_trial()
            logger.debug("trial %d: %s after %d ticks", i, outcome.status.value, outcome.total_ticks)
            results.append(outcome)

        return results

    def _run_parallel(
        self,
        archetype: "Archetype",
        profile: "PlayerProfile",
        iterations: int,
        max_workers: int,
    ) -> List[TrialOutcome]:
        """Run trials in parallel, one independently seeded stream per trial."""
        # Seeds are drawn up front so no stream is shared between threads
        seeds = [self._get_iteration_seed() for _ in range(iterations)]

        def run_single(seed: int) -> TrialOutcome:
            engine = self._make_engine(archetype, profile, random.Random(seed))
            return engine.run_trial()

        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            return list(executor.map(run_single, seeds))

    def _get_iteration_seed(self) -> int:
        """
        Get the seed for an iteration.

        Drawn from the simulator's own stream, so each simulate() call gets
        fresh seeds and a seeded simulator still replays exactly.
        """
        return self.rng.randint(0, 2**31 - 1)

    def _analyze_results(
        self,
        archetype: "Archetype",
        profile: "PlayerProfile",
        results: List[TrialOutcome],
    ) -> SimulationResult:
        """Analyze trial outcomes."""
        successes = [r for r in results if r.succeeded]
        failures = sum(1 for r in results if r.status is TrialStatus.FAILED)
        timeouts = sum(1 for r in results if r.status is TrialStatus.TIMED_OUT)

        avg_ticks = avg_hours = median_hours = p90_hours = None
        avg_food = avg_trips = avg_kills = None
        if successes:
            ticks = np.array([r.total_ticks for r in successes], dtype=float)
            hours = ticks / TICKS_PER_HOUR
            avg_ticks = float(ticks.mean())
            avg_hours = avg_ticks / TICKS_PER_HOUR
            median_hours = float(np.median(hours))
            p90_hours = float(np.percentile(hours, 90))
            avg_food = statistics.mean(r.food_eaten for r in successes)
            avg_trips = statistics.mean(r.banking_trips for r in successes)
            avg_kills = statistics.mean(r.kills for r in successes)

        # A fresh engine gives the untouched player, npc and loot context
        sample = self._make_engine(archetype, profile, random.Random(0))
        kills_needed = kills_per_item(
            archetype.chance,
            archetype.outof,
            sample.loot_table,
            self.target_item,
            sample.context,
        )

        return SimulationResult(
            archetype_id=archetype.id,
            archetype_name=archetype.name,
            target_item=self.target_item,
            iterations=len(results),
            successes=len(successes),
            failures=failures,
            timeouts=timeouts,
            avg_ticks=avg_ticks,
            avg_hours=avg_hours,
            median_hours=median_hours,
            p90_hours=p90_hours,
            avg_food_eaten=avg_food,
            avg_banking_trips=avg_trips,
            avg_kills=avg_kills,
            kills_per_target=kills_needed,
            player_dps=expected_damage_per_tick(sample.player, sample.state.opponent),
            opponent_dps=expected_damage_per_tick(sample.state.opponent, sample.player),
            individual_results=results,
        )


def format_report(result: SimulationResult) -> str:
    """One-line human readable summary."""
    if result.avg_hours is None:
        return (
            f'"{result.archetype_name}" never dropped {result.target_item} '
            f"in {result.iterations} trials ({result.failures} deaths)"
        )
    return (
        f'"{result.archetype_name}" dropped in {result.avg_hours:.1f} hours, '
        f"{result.avg_food_eaten:.1f} food eaten"
    )


def quick_simulate(
    archetype: "Archetype",
    profile: "PlayerProfile",
    iterations: int = 100,
    seed: Optional[int] = None,
) -> Optional[float]:
    """
    Quick simulation helper returning average hours to the drop.

    Returns:
        Mean hours over successful trials, or None if none succeeded.
    """
    simulator = DropSimulator(base_seed=seed)
    return simulator.simulate(archetype, profile, iterations=iterations).avg_hours
