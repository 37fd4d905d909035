"""Game constants for the drop-time simulation."""

from typing import Final

# =============================================================================
# TIME
# =============================================================================
# One game tick is 0.6 seconds, so an hour is 6000 ticks
TICKS_PER_HOUR: Final[int] = 6000

# Natural health regeneration: +1 hp every 100 ticks (one minute)
REGEN_INTERVAL: Final[int] = 100
REGEN_AMOUNT: Final[int] = 1

# Default upper bound on ticks in a single trial (~1000 hours of play)
MAX_TRIAL_TICKS: Final[int] = 6_000_000

# =============================================================================
# COMBAT
# =============================================================================
# Effective level constants from the melee formula
EFFECTIVE_LEVEL_BASE: Final[int] = 8
PLAYER_STYLE_STRENGTH_BONUS: Final[int] = 3  # aggressive style
NPC_STYLE_STRENGTH_BONUS: Final[int] = 1
AGGRESSIVE_ACCURACY_BONUS: Final[int] = 1  # applied only against npcs
NPC_DEFENCE_BONUS: Final[int] = 9
PLAYER_DEFENCE_BONUS: Final[int] = 8

EQUIPMENT_BONUS_OFFSET: Final[int] = 64
MAX_HIT_ROUNDING: Final[int] = 320
MAX_HIT_DIVISOR: Final[int] = 640

# Counter-attacks land one tick after the attacker's swing
ATTACKER_PHASE: Final[int] = 0
RETALIATION_PHASE: Final[int] = 1

# =============================================================================
# SUPPLIES
# =============================================================================
INVENTORY_SIZE: Final[int] = 28

# Eat when health drops below max_hp - DANGER_MARGIN
DANGER_MARGIN: Final[int] = 20

# Salmon heals 9
DEFAULT_FOOD_HEAL: Final[int] = 9

# =============================================================================
# LOOT
# =============================================================================
LOOT_MODULUS: Final[int] = 128
RING_OF_WEALTH_MODULUS: Final[int] = 65
RING_OF_WEALTH: Final[str] = "ring_of_wealth"

# Talisman swap happens north of the wilderness line
WILDERNESS_Z_THRESHOLD: Final[int] = 6400

DEFAULT_TARGET_ITEM: Final[str] = "nature_talisman"

CERTIFICATE_PREFIX: Final[str] = "cert_"

# Bank totals wrap like an unsigned 64-bit counter
BANK_QUANTITY_MODULUS: Final[int] = 2**64
