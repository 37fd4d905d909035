"""Trial Engine.

Simulates one attempt at farming an item, tick by tick:
- natural regeneration
- eating, and banking once the food runs out
- npc respawns
- player swing, then npc retaliation one tick later
- loot rolls on kills
A trial ends when the player dies or the target item drops.
"""

from collections import deque
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Deque, Dict, Mapping, Optional, TYPE_CHECKING
import logging
import random

from .attack import resolve_step
from .combat_unit import OpponentCombatant, PlayerCombatant
from dropsim.core.constants import (
    ATTACKER_PHASE,
    DANGER_MARGIN,
    DEFAULT_TARGET_ITEM,
    INVENTORY_SIZE,
    MAX_TRIAL_TICKS,
    REGEN_AMOUNT,
    REGEN_INTERVAL,
    RETALIATION_PHASE,
    TICKS_PER_HOUR,
)
from dropsim.core.inventory import Bank, Inventory, Item
from dropsim.loot.drop_tables import LOOT_TABLES
from dropsim.loot.resolver import resolve, roll_drop_check
from dropsim.loot.table import LootContext, LootTable

if TYPE_CHECKING:
    from dropsim.data.models.archetype import Archetype
    from dropsim.data.models.player import PlayerProfile

logger = logging.getLogger(__name__)


class TrialPhase(Enum):
    """What the player did on the last tick."""

    SETUP = auto()
    IDLE = auto()  # No npcs alive, waiting for a respawn
    ENGAGED = auto()  # Fighting
    FEEDING = auto()  # Ate this tick, fighting resumes the same tick
    SUCCESS = auto()
    FAILURE = auto()
    TIMED_OUT = auto()


class TrialStatus(Enum):
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    TIMED_OUT = "timed_out"


@dataclass
class TallyReport:
    """Running totals for a trial."""

    food_heal: int
    food_eaten: int = 0
    banking_trips: int = 0
    kills: int = 0
    ticks_between_trips: int = 0
    ticks_waiting_for_spawn: int = 0
    items_left_behind: int = 0

    def bank(self, ticks_till_return: int) -> None:
        self.banking_trips += 1
        self.ticks_between_trips += ticks_till_return

    def eat(self) -> None:
        self.food_eaten += 1

    def wait_for_spawn(self, ticks_till_spawn: int) -> None:
        self.ticks_waiting_for_spawn += ticks_till_spawn

    def to_ticks(self) -> int:
        """Time charged outside the tick counter."""
        return self.ticks_between_trips + self.ticks_waiting_for_spawn


@dataclass
class TrialState:
    """Mutable state of one trial."""

    opponent: OpponentCombatant
    live_npcs: int
    phase: TrialPhase = TrialPhase.SETUP
    current_tick: int = 0

    # Food eaten since the last bank trip
    food_in_trip: int = 0

    # Ticks at which dead npcs come back, oldest first
    respawns: Deque[int] = field(default_factory=deque)

    @property
    def next_respawn(self) -> Optional[int]:
        return self.respawns[0] if self.respawns else None


@dataclass(frozen=True)
class TrialOutcome:
    """Final result of one trial."""

    status: TrialStatus
    ticks: int  # Ticks simulated
    banking_ticks: int = 0
    waiting_ticks: int = 0
    food_eaten: int = 0
    banking_trips: int = 0
    kills: int = 0
    # Left out of the hash; equality still compares it
    loot: Dict[str, int] = field(default_factory=dict, hash=False)

    @property
    def succeeded(self) -> bool:
        return self.status is TrialStatus.SUCCEEDED

    @property
    def total_ticks(self) -> int:
        """Simulated ticks plus banking and respawn-wait time."""
        return self.ticks + self.banking_ticks + self.waiting_ticks

    @property
    def hours(self) -> float:
        return self.total_ticks / TICKS_PER_HOUR


class TrialEngine:
    """
    Runs trials against one archetype.

    Usage:
        engine = TrialEngine(archetype, profile, rng=random.Random(1))
        outcome = engine.run_trial()

    Or step-by-step:
        engine.reset()
        while engine.tick():
            pass
        outcome = engine.get_outcome()
    """

    def __init__(
        self,
        archetype: "Archetype",
        profile: "PlayerProfile",
        rng: Optional[random.Random] = None,
        target_item: str = DEFAULT_TARGET_ITEM,
        is_members: Optional[bool] = None,
        max_ticks: int = MAX_TRIAL_TICKS,
        inventory_size: int = INVENTORY_SIZE,
        tables: Mapping[str, LootTable] = LOOT_TABLES,
    ):
        """
        Initialize trial engine.

        Args:
            archetype: Npc to fight.
            profile: Player to fight with.
            rng: Random source, consumed across every trial this engine runs.
            target_item: Item whose drop ends a trial successfully.
            is_members: Membership override; defaults to the profile's flag.
            max_ticks: Ticks after which a trial is abandoned.
            inventory_size: Food carried per bank trip.
            tables: Loot table registry.
        """
        self.archetype = archetype
        self.profile = profile
        self.rng = rng or random.Random()
        self.target_item = target_item
        self.is_members = profile.is_members if is_members is None else is_members
        self.max_ticks = max_ticks
        self.inventory_size = inventory_size
        self.tables = tables
        self.loot_table = tables[archetype.drop_table]

        self._outcome: Optional[TrialOutcome] = None
        self.reset()

    def reset(self) -> None:
        """Start a fresh trial. The random source carries on."""
        self.player = PlayerCombatant.from_profile(self.profile)
        self.context = LootContext.from_player(self.player, self.is_members)
        self.state = TrialState(
            opponent=OpponentCombatant.from_archetype(self.archetype),
            live_npcs=self.archetype.available_npcs,
        )
        self.tally = TallyReport(food_heal=self.profile.food_heal)
        self.loot_bag = Inventory(self.inventory_size)
        self.bank = Bank()
        self._outcome = None

    def is_finished(self) -> bool:
        return self._outcome is not None

    def run_trial(self) -> TrialOutcome:
        """Reset, run to completion and return the outcome."""
        self.reset()
        while self.tick():
            pass
        return self.get_outcome()

    def get_outcome(self) -> TrialOutcome:
        if self._outcome is None:
            raise RuntimeError("Trial has not finished")
        return self._outcome

    def tick(self) -> bool:
        """
        Execute one tick.

        Returns:
            True if the trial is still running, False if finished.
        """
        if self.is_finished():
            return False

        state = self.state
        tick = state.current_tick

        if tick >= self.max_ticks:
            logger.warning(
                "Trial against %s abandoned after %d ticks", self.archetype.name, tick
            )
            self._finish(TrialStatus.TIMED_OUT, TrialPhase.TIMED_OUT, ticks=tick)
            return False

        self._regenerate(tick)
        fed = self._feed_if_in_danger()
        self._process_respawns(tick)

        if state.live_npcs == 0:
            state.phase = TrialPhase.IDLE
            state.current_tick += 1
            return True

        state.phase = TrialPhase.FEEDING if fed else TrialPhase.ENGAGED
        opponent = state.opponent
        resolve_step(tick, ATTACKER_PHASE, self.player, opponent, self.rng)
        # Takes the npc a tick to respond
        resolve_step(tick, RETALIATION_PHASE, opponent, self.player, self.rng)

        if self.player.is_dead:
            self._finish(TrialStatus.FAILED, TrialPhase.FAILURE)
            return False

        if opponent.is_dead:
            self._on_kill(tick)
            if self.is_finished():
                return False

        state.current_tick += 1
        return True

    @property
    def danger_threshold(self) -> int:
        return self.player.stats.max_hp - DANGER_MARGIN

    def _regenerate(self, tick: int) -> None:
        # Runs off the tick counter, so it drifts after bank trips
        if tick % REGEN_INTERVAL == 0:
            self.player.stats.heal(REGEN_AMOUNT)

    def _feed_if_in_danger(self) -> bool:
        """Eat one food if below the danger threshold; bank when out of food."""
        if self.player.stats.current_hp >= self.danger_threshold:
            return False

        self.player.stats.heal(self.tally.food_heal)
        self.tally.eat()
        self.state.food_in_trip += 1

        if self.state.food_in_trip >= self.inventory_size:
            self.state.food_in_trip = 0
            self._bank_trip()
        return True

    def _bank_trip(self) -> None:
        """
        Go to the bank and come back.

        The trip's time is charged to the tally; the tick counter does not
        move, so attack cadence phase is not resynchronised afterwards.
        """
        self.tally.bank(self.archetype.ticks_between_trips)
        self.loot_bag.bank(self.bank)
        self.player.stats.heal_fully()
        # Npc regenerates while we're gone
        if not self.state.opponent.is_dead:
            self.state.opponent.stats.heal_fully()
        logger.debug(
            "Bank trip %d at tick %d (+%d ticks)",
            self.tally.banking_trips,
            self.state.current_tick,
            self.archetype.ticks_between_trips,
        )

    def _process_respawns(self, tick: int) -> None:
        state = self.state
        while state.respawns and state.respawns[0] <= tick:
            state.respawns.popleft()
            state.live_npcs += 1
            if state.opponent.is_dead:
                state.opponent = OpponentCombatant.from_archetype(self.archetype)

    def _on_kill(self, tick: int) -> None:
        state = self.state
        archetype = self.archetype
        self.tally.kills += 1

        if roll_drop_check(archetype.chance, archetype.outof, self.rng):
            item = resolve(self.loot_table, self.context, self.rng, self.tables)
            if item is not None:
                if item.name == self.target_item:
                    self._finish(TrialStatus.SUCCEEDED, TrialPhase.SUCCESS)
                    return
                self._pick_up(item)

        state.live_npcs -= 1
        state.respawns.append(tick + archetype.respawn_rate)
        if state.live_npcs == 0:
            self.tally.wait_for_spawn(archetype.respawn_rate)
        else:
            # Move on to the next live npc
            state.opponent = OpponentCombatant.from_archetype(archetype)

    def _pick_up(self, item: Item) -> None:
        if self.loot_bag.has_room_for(item):
            self.loot_bag.add_item(item)
        else:
            self.tally.items_left_behind += 1

    def _collected_loot(self) -> Dict[str, int]:
        totals = dict(self.bank.lookup)
        for item in self.loot_bag:
            totals[item.name] = totals.get(item.name, 0) + item.quantity
        return totals

    def _finish(
        self, status: TrialStatus, phase: TrialPhase, ticks: Optional[int] = None
    ) -> None:
        self.state.phase = phase
        if ticks is None:
            # The current tick was played
            ticks = self.state.current_tick + 1
        tally = self.tally
        self._outcome = TrialOutcome(
            status=status,
            ticks=ticks,
            banking_ticks=tally.ticks_between_trips,
            waiting_ticks=tally.ticks_waiting_for_spawn,
            food_eaten=tally.food_eaten,
            banking_trips=tally.banking_trips,
            kills=tally.kills,
            loot=self._collected_loot(),
        )
