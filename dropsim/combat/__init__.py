"""Combat and trial simulation.

This module provides:
- Combat stats and combatants (player and npc)
- The melee hit/damage formula
- The per-trial state machine (fighting, eating, banking, respawns)
- Monte Carlo drop-time simulation
"""

# Combat Units
from .combat_unit import (
    CombatStats,
    Combatant,
    PlayerCombatant,
    OpponentCombatant,
    Coordinates,
    MeleeLoadout,
    RangedLoadout,
    MagicLoadout,
)

# Attack
from .attack import (
    AttackResult,
    resolve_step,
    max_hit,
    attack_roll,
    defence_roll,
    hit_chance,
    expected_damage_per_tick,
)

# Trial Engine
from .trial_engine import (
    TrialEngine,
    TrialState,
    TrialPhase,
    TrialStatus,
    TrialOutcome,
    TallyReport,
)

# Simulation
from .simulation import (
    DropSimulator,
    SimulationResult,
    format_report,
    quick_simulate,
)

__all__ = [
    # Combat Unit
    "CombatStats",
    "Combatant",
    "PlayerCombatant",
    "OpponentCombatant",
    "Coordinates",
    "MeleeLoadout",
    "RangedLoadout",
    "MagicLoadout",
    # Attack
    "AttackResult",
    "resolve_step",
    "max_hit",
    "attack_roll",
    "defence_roll",
    "hit_chance",
    "expected_damage_per_tick",
    # Trial Engine
    "TrialEngine",
    "TrialState",
    "TrialPhase",
    "TrialStatus",
    "TrialOutcome",
    "TallyReport",
    # Simulation
    "DropSimulator",
    "SimulationResult",
    "format_report",
    "quick_simulate",
]
