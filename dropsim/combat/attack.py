"""Melee Attack Formula.

Accuracy and max hit follow the standard melee formulas:
- max hit from effective strength and strength bonus
- attack roll vs defence roll decides hit chance
- damage is uniform in [1, max_hit] on a hit
No prayers, potions or set effects are modelled.
"""

from dataclasses import dataclass
import random

from dropsim.combat.combat_unit import Combatant
from dropsim.core.constants import (
    AGGRESSIVE_ACCURACY_BONUS,
    EFFECTIVE_LEVEL_BASE,
    EQUIPMENT_BONUS_OFFSET,
    MAX_HIT_DIVISOR,
    MAX_HIT_ROUNDING,
    NPC_DEFENCE_BONUS,
    NPC_STYLE_STRENGTH_BONUS,
    PLAYER_DEFENCE_BONUS,
    PLAYER_STYLE_STRENGTH_BONUS,
)


@dataclass
class AttackResult:
    """Result of one combat step for one attacker."""

    attempted: bool
    hit: bool = False
    damage: int = 0
    hit_chance: float = 0.0
    target_killed: bool = False


def effective_strength(attacker: Combatant) -> int:
    style_bonus = NPC_STYLE_STRENGTH_BONUS if attacker.is_npc else PLAYER_STYLE_STRENGTH_BONUS
    return attacker.str_level + style_bonus + EFFECTIVE_LEVEL_BASE


def max_hit(attacker: Combatant) -> int:
    """
    Maximum damage of one hit.

    Integer arithmetic throughout, floored once at the end. Never negative.
    """
    total = effective_strength(attacker) * (attacker.equipment_strength + EQUIPMENT_BONUS_OFFSET)
    total += MAX_HIT_ROUNDING
    return max(0, total // MAX_HIT_DIVISOR)


def attack_roll(attacker: Combatant, defender: Combatant) -> int:
    eff_att = attacker.att_level + EFFECTIVE_LEVEL_BASE
    if defender.is_npc:
        # Player is always on an aggressive style against npcs
        eff_att += AGGRESSIVE_ACCURACY_BONUS
    return eff_att * (attacker.equipment_accuracy + EQUIPMENT_BONUS_OFFSET)


def defence_roll(defender: Combatant) -> int:
    bonus = NPC_DEFENCE_BONUS if defender.is_npc else PLAYER_DEFENCE_BONUS
    return (defender.def_level + bonus) * (defender.style_defense + EQUIPMENT_BONUS_OFFSET)


def hit_chance(att_roll: int, def_roll: int) -> float:
    """
    Chance that an attack roll beats a defence roll.

    Both branches agree when the rolls are equal. Non-negative rolls
    always give a value in [0, 1].
    """
    if att_roll > def_roll:
        return 1.0 - (def_roll + 2.0) / (2.0 * (att_roll + 1.0))
    return att_roll / (2.0 * (def_roll + 1.0))


def roll_damage(max_damage: int, rng: random.Random) -> int:
    """Uniform damage in [1, max_damage]; a max hit of 0 always deals 0."""
    if max_damage <= 0:
        return 0
    return rng.randint(1, max_damage)


def attacks_on_tick(tick: int, phase_offset: int, attack_rate: int) -> bool:
    return tick % attack_rate == phase_offset


def resolve_step(
    tick: int,
    phase_offset: int,
    attacker: Combatant,
    defender: Combatant,
    rng: random.Random,
) -> AttackResult:
    """
    Resolve one attacker's action on one tick.

    The attacker only swings when tick % attack_rate == phase_offset,
    which lets a retaliation at phase 1 trail the swing at phase 0 by one
    tick whatever the two cadences are.

    Args:
        tick: Current tick.
        phase_offset: Tick within the attacker's cadence on which it swings.
        attacker: Attacking combatant.
        defender: Defending combatant (health may be reduced).
        rng: Random source; one float per swing plus one int per landed hit.

    Returns:
        AttackResult describing what happened.
    """
    if not attacks_on_tick(tick, phase_offset, attacker.attack_rate):
        return AttackResult(attempted=False)

    chance = hit_chance(attack_roll(attacker, defender), defence_roll(defender))
    if rng.random() >= chance:
        return AttackResult(attempted=True, hit_chance=chance)

    damage = roll_damage(max_hit(attacker), rng)
    defender.deduct_hp(damage)
    return AttackResult(
        attempted=True,
        hit=True,
        damage=damage,
        hit_chance=chance,
        target_killed=defender.is_dead,
    )


def expected_damage_per_tick(attacker: Combatant, defender: Combatant) -> float:
    """Average damage per tick, ignoring overkill."""
    chance = hit_chance(attack_roll(attacker, defender), defence_roll(defender))
    top = max_hit(attacker)
    avg_hit = (top + 1) / 2 if top > 0 else 0.0
    return chance * avg_hit / attacker.attack_rate
