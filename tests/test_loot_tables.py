"""Tests for loot tables and the loot resolver."""

import random
from fractions import Fraction

import pytest

from dropsim.combat.combat_unit import PlayerCombatant
from dropsim.loot import (
    GEM_TABLE,
    LOOT_TABLES,
    MEGARARE_TABLE,
    NOTHING,
    RARE_TABLE,
    ItemDrop,
    LootContext,
    LootRange,
    LootTable,
    LootTableError,
    SubTable,
    build_registry,
    get_loot_table,
    item_probability,
    kills_per_item,
    outcome_distribution,
    resolve,
    resolve_draw,
    roll_drop_check,
)

MEMBERS = LootContext(is_members=True, coord_z=0)
FREE = LootContext(is_members=False, coord_z=0)
WILDERNESS = LootContext(is_members=True, coord_z=7000)
WEALTH = LootContext(is_members=True, coord_z=0, wealth_boosted=True)

ALL_CONTEXTS = [MEMBERS, FREE, WILDERNESS, WEALTH]


class TestTableStructure:
    """Tests for table definitions and validation."""

    @pytest.mark.parametrize("table", [RARE_TABLE, MEGARARE_TABLE, GEM_TABLE])
    def test_every_draw_hits_at_most_one_range(self, table):
        """Ranges never overlap for any draw."""
        for draw in range(table.modulus):
            hits = [entry for entry in table.ranges if entry.covers(draw)]
            assert len(hits) <= 1
            assert table.range_for(draw) == (hits[0] if hits else None)

    def test_registry_contents(self):
        """All three tables are registered by id."""
        assert set(LOOT_TABLES) == {"rare", "megarare", "gems"}
        assert get_loot_table("gems") is GEM_TABLE
        assert get_loot_table("missing") is None

    def test_gem_table_moduli(self):
        """Gem table shrinks to 65 with a ring of wealth."""
        assert GEM_TABLE.modulus_for(MEMBERS) == 128
        assert GEM_TABLE.modulus_for(WEALTH) == 65

    def test_other_tables_ignore_wealth(self):
        """Tables without a boosted modulus keep 128."""
        assert RARE_TABLE.modulus_for(WEALTH) == 128

    def test_ranges_sorted(self):
        """Ranges are stored in draw order whatever order they're given in."""
        table = LootTable("t", [
            LootRange(10, 20, ItemDrop("b")),
            LootRange(0, 5, ItemDrop("a")),
        ])
        assert [r.start for r in table.ranges] == [0, 10]
        assert table.covered == 15

    def test_overlap_rejected(self):
        """Overlapping ranges are an error."""
        with pytest.raises(LootTableError):
            LootTable("t", [
                LootRange(0, 10, ItemDrop("a")),
                LootRange(9, 12, ItemDrop("b")),
            ])

    def test_range_past_modulus_rejected(self):
        """A range must fit inside the modulus."""
        with pytest.raises(LootTableError):
            LootTable("t", [LootRange(120, 129, ItemDrop("a"))])

    def test_range_past_boosted_modulus_rejected(self):
        """A range must also fit inside the boosted modulus."""
        with pytest.raises(LootTableError):
            LootTable("t", [LootRange(60, 70, ItemDrop("a"))], boosted_modulus=65)

    def test_empty_range_rejected(self):
        """Empty ranges are an error."""
        with pytest.raises(LootTableError):
            LootTable("t", [LootRange(5, 5, ItemDrop("a"))])

    def test_non_positive_modulus_rejected(self):
        """Moduli must be positive."""
        with pytest.raises(LootTableError):
            LootTable("t", [], modulus=0)

    def test_table_error_is_value_error(self):
        """Table errors can be caught as ValueError."""
        assert issubclass(LootTableError, ValueError)

    def test_duplicate_table_id_rejected(self):
        """Registry ids must be unique."""
        with pytest.raises(LootTableError):
            build_registry(GEM_TABLE, GEM_TABLE)

    def test_dangling_reference_rejected(self):
        """Sub-table references must resolve."""
        orphan = LootTable("orphan", [LootRange(0, 1, SubTable("nowhere"))])
        with pytest.raises(LootTableError):
            build_registry(orphan)


class TestResolveDraw:
    """Tests for resolving individual draws."""

    def test_plain_item(self):
        """Draw 0 on the gem table is a sapphire."""
        item = resolve_draw(GEM_TABLE, 0, MEMBERS, random.Random(0))
        assert item.name == "uncut_sapphire"
        assert not item.stackable

    def test_gap_gives_nothing(self):
        """Draws past every range give nothing."""
        assert resolve_draw(GEM_TABLE, 100, MEMBERS, random.Random(0)) is NOTHING

    def test_same_draw_depends_on_context(self):
        """One raw draw yields different outcomes by membership and location."""
        rng = random.Random(0)
        assert resolve_draw(GEM_TABLE, 63, MEMBERS, rng).name == "nature_talisman"
        assert resolve_draw(GEM_TABLE, 63, WILDERNESS, rng).name == "chaos_talisman"
        assert resolve_draw(GEM_TABLE, 63, FREE, rng) is None

    def test_members_gate_does_not_fall_through(self):
        """Free players get nothing on members ranges, not the next range."""
        for draw in range(58, 65):
            assert resolve_draw(GEM_TABLE, draw, FREE, random.Random(0)) is None

    def test_free_ranges_open_to_everyone(self):
        """Non-gated ranges give the same item to free players."""
        assert resolve_draw(GEM_TABLE, 57, FREE, random.Random(0)).name == "uncut_diamond"

    def test_sub_table_costs_a_draw(self, scripted_rng):
        """Rolling into the gem table from the rare table draws again."""
        item = resolve_draw(RARE_TABLE, 95, MEMBERS, scripted_rng(draws=[63]))
        assert item.name == "nature_talisman"

    def test_nested_sub_tables(self, scripted_rng):
        """Gem table can roll the megarare table."""
        item = resolve_draw(RARE_TABLE, 100, MEMBERS, scripted_rng(draws=[61, 13]))
        assert item.name == "dragon_spear"

    def test_stack_quantities(self):
        """Stackable drops carry their quantity."""
        item = resolve_draw(RARE_TABLE, 30, MEMBERS, random.Random(0))
        assert item.name == "coins"
        assert item.quantity == 3000

    def test_resolve_uses_boosted_modulus(self):
        """resolve() draws below 65 with a ring of wealth."""

        class Recording(random.Random):
            def randrange(self, start, stop=None, step=1):
                calls.append(start)
                return super().randrange(start, stop, step)

        calls = []
        resolve(GEM_TABLE, WEALTH, Recording(3))
        assert calls[0] == 65

    def test_same_draw_depends_on_ring_of_wealth(self):
        """The top draw lands in the gap without the ring and on a talisman with it."""

        class TopOfRange(random.Random):
            def randrange(self, start, stop=None, step=1):
                return start - 1

        assert resolve(GEM_TABLE, MEMBERS, TopOfRange(0)) is None
        item = resolve(GEM_TABLE, WEALTH, TopOfRange(0))
        assert item.name == "nature_talisman"

    def test_gap_is_unreachable_with_ring_of_wealth(self):
        """Draws 65 and up exist only without the ring."""
        assert GEM_TABLE.modulus_for(MEMBERS) == 128
        assert GEM_TABLE.modulus_for(WEALTH) == 65
        assert resolve_draw(GEM_TABLE, 100, MEMBERS, random.Random(0)) is NOTHING


class TestDistribution:
    """Tests for exact outcome distributions."""

    @pytest.mark.parametrize("context", ALL_CONTEXTS)
    @pytest.mark.parametrize("table", [RARE_TABLE, MEGARARE_TABLE, GEM_TABLE])
    def test_sums_to_one(self, table, context):
        """Probabilities always sum to exactly 1."""
        assert sum(outcome_distribution(table, context).values()) == 1

    def test_nature_talisman_odds(self):
        """Three draws of 128, or of 65 with a ring of wealth."""
        assert item_probability(GEM_TABLE, "nature_talisman", MEMBERS) == Fraction(3, 128)
        assert item_probability(GEM_TABLE, "nature_talisman", WEALTH) == Fraction(3, 65)

    def test_wealth_rescales_every_item(self):
        """Holding the ring raises the odds of every item on the gem table."""
        plain = outcome_distribution(GEM_TABLE, MEMBERS)
        boosted = outcome_distribution(GEM_TABLE, WEALTH)
        for name, p in plain.items():
            if name is NOTHING:
                continue
            assert boosted[name] > p
        assert item_probability(GEM_TABLE, "uncut_sapphire", WEALTH) == Fraction(32, 65)

    def test_wealth_removes_gap(self):
        """With modulus 65 only an empty megarare roll gives nothing."""
        assert GEM_TABLE.covered == 65
        expected = Fraction(1, 65) * Fraction(113, 128)
        assert outcome_distribution(GEM_TABLE, WEALTH)[NOTHING] == expected

    def test_free_players_never_get_members_items(self):
        """Members ranges become nothing for free players."""
        dist = outcome_distribution(GEM_TABLE, FREE)
        assert "nature_talisman" not in dist
        assert "rune_javelin" not in dist
        assert dist[NOTHING] == Fraction(128 - 58, 128)

    def test_wilderness_swaps_talisman(self):
        """North of the threshold the talisman is a chaos talisman."""
        dist = outcome_distribution(GEM_TABLE, WILDERNESS)
        assert dist["chaos_talisman"] == Fraction(3, 128)
        assert "nature_talisman" not in dist

    def test_nested_probabilities_multiply(self):
        """Rare table reaches the talisman through the gem table."""
        expected = Fraction(20, 128) * Fraction(3, 128)
        assert item_probability(RARE_TABLE, "nature_talisman", MEMBERS) == expected

    def test_half_keys_from_both_paths(self):
        """Items on several paths accumulate."""
        expected = Fraction(20, 128) + Fraction(20, 128) * Fraction(1, 128)
        assert item_probability(RARE_TABLE, "half_key1", MEMBERS) == expected

    def test_matches_sampling(self):
        """Sampled frequencies agree with the exact distribution."""
        rng = random.Random(7)
        n = 20000
        hits = 0
        for _ in range(n):
            item = resolve(GEM_TABLE, MEMBERS, rng)
            if item is not None and item.name == "uncut_sapphire":
                hits += 1
        assert hits / n == pytest.approx(0.25, abs=0.015)


class TestDropCheck:
    """Tests for the per-kill drop check and expected kills."""

    def test_never(self):
        """Chance 0 never passes."""
        rng = random.Random(1)
        assert not any(roll_drop_check(0, 128, rng) for _ in range(500))

    def test_always(self):
        """Chance equal to outof always passes."""
        rng = random.Random(1)
        assert all(roll_drop_check(128, 128, rng) for _ in range(500))

    def test_kills_per_item(self):
        """Expected kills is the inverse of the per-kill probability."""
        kills = kills_per_item(1, 128, GEM_TABLE, "nature_talisman", MEMBERS)
        assert kills == pytest.approx(128 * 128 / 3)

    def test_kills_per_item_impossible(self):
        """Items that can't drop need infinitely many kills."""
        kills = kills_per_item(1, 128, GEM_TABLE, "nature_talisman", FREE)
        assert kills == float("inf")


class TestLootContext:
    """Tests for deriving loot context from a player."""

    def test_from_player(self, make_profile):
        """Location and ring of wealth come from the player."""
        profile = make_profile(coords={"x": 0, "y": 0, "z": 7000}).with_items("ring_of_wealth")
        ctx = LootContext.from_player(PlayerCombatant.from_profile(profile), is_members=False)
        assert ctx == LootContext(is_members=False, coord_z=7000, wealth_boosted=True)

    def test_without_ring(self, make_profile):
        """No ring, no boost."""
        ctx = LootContext.from_player(PlayerCombatant.from_profile(make_profile()), True)
        assert not ctx.wealth_boosted
