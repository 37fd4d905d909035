"""Shared fixtures for drop simulator tests."""

import random

import pytest

from dropsim.data.models.archetype import Archetype
from dropsim.data.models.player import MeleeGear, PlayerProfile


class ScriptedRandom(random.Random):
    """
    Random source with scripted behaviour.

    random() always lands a hit (or always misses with hit=False), randint
    always returns its upper bound, and randrange hands out the scripted
    draws before falling back to the seeded stream.
    """

    def __init__(self, draws=(), hit=True):
        super().__init__(0)
        self.draws = list(draws)
        self.hit = hit

    def random(self):
        return 0.0 if self.hit else 0.999999999

    def getrandbits(self, k):
        # Keeps integer draws on the seeded stream instead of random()
        return super().getrandbits(k)

    def randint(self, a, b):
        return b

    def randrange(self, start, stop=None, step=1):
        if self.draws:
            return self.draws.pop(0)
        return super().randrange(start, stop, step)


def build_archetype(**overrides) -> Archetype:
    """Weak npc that never drops anything."""
    fields = dict(
        id="dummy",
        name="training dummy",
        hp_level=1000,
        att_level=0,
        str_level=0,
        def_level=0,
        accuracy=0,
        strength=0,
        style_defense=0,
        attack_rate=4,
        chance=0,
        outof=1,
        available_npcs=1,
        respawn_rate=10,
        ticks_between_trips=50,
    )
    fields.update(overrides)
    return Archetype(**fields)


def build_profile(str_bonus: int = 30, **overrides) -> PlayerProfile:
    """The default player: max hit 10, hits on ticks divisible by 5."""
    fields = dict(
        att_level=60,
        str_level=60,
        def_level=40,
        hp_level=60,
        gear=MeleeGear(str_bonus=str_bonus, accuracy=69, def_bonus=103, rate=5),
    )
    fields.update(overrides)
    return PlayerProfile(**fields)


@pytest.fixture
def make_archetype():
    return build_archetype


@pytest.fixture
def make_profile():
    return build_profile


@pytest.fixture
def scripted_rng():
    return ScriptedRandom
