"""
Unit tests for proficiency tiers and the ProficiencyLedger.

Covers tier tables, lazy default tiers, progress accounting across tier
boundaries, and passive improvement from use.
"""
import pytest
from unittest.mock import Mock

from ironroll.combat.proficiency import ProficiencyLedger, ProficiencyRecord, Tier, TIER_PROFILES
from ironroll.core.data.ability_ids import ClassAbility, MonsterAbility, Spell
from ironroll.core.data.game_enums import Archetype
from tests.conftest import TestDataBuilder


class TestTierTable:
    """Test the per-tier numbers."""

    def test_every_tier_has_a_profile(self):
        assert set(TIER_PROFILES) == set(Tier)

    @pytest.mark.parametrize("tier,modifier,multiplier,fail_chance", [
        (Tier.UNTRAINED, -2, 0.50, 25),
        (Tier.POOR, -1, 0.70, 15),
        (Tier.AVERAGE, 0, 1.00, 10),
        (Tier.GOOD, 1, 1.15, 7),
        (Tier.SKILLED, 2, 1.30, 5),
        (Tier.EXPERT, 3, 1.45, 3),
        (Tier.SUPERB, 4, 1.60, 2),
        (Tier.MASTER, 5, 1.80, 1),
        (Tier.LEGENDARY, 7, 2.00, 0),
    ])
    def test_tier_numbers(self, tier, modifier, multiplier, fail_chance):
        assert tier.modifier == modifier
        assert tier.multiplier == pytest.approx(multiplier)
        assert tier.fail_chance == fail_chance

    def test_thresholds(self):
        thresholds = [tier.threshold for tier in Tier]
        assert thresholds == [1, 2, 3, 4, 5, 7, 10, 15, None]

    def test_improve_chances_shrink_with_mastery(self):
        chances = [tier.improve_chance for tier in Tier]
        assert chances == [15, 10, 7, 5, 3, 2, 1, 0, 0]

    def test_next_tier(self):
        assert Tier.UNTRAINED.next() is Tier.POOR
        assert Tier.MASTER.next() is Tier.LEGENDARY
        assert Tier.LEGENDARY.next() is Tier.LEGENDARY

    def test_monotonic_bonuses(self):
        """Higher tiers never have a worse modifier, multiplier or fail chance."""
        tiers = list(Tier)
        for lower, higher in zip(tiers, tiers[1:]):
            assert higher.modifier > lower.modifier
            assert higher.multiplier > lower.multiplier
            assert higher.fail_chance <= lower.fail_chance

    def test_display_names(self):
        assert Tier.LEGENDARY.display_name == "Legendary"
        assert Tier.UNTRAINED.display_name == "Untrained"


class TestDefaultTiers:
    """Test lazily computed default tiers."""

    def test_basic_attack_is_average_for_everyone(self, ledger):
        for archetype in Archetype:
            actor = TestDataBuilder.character(archetype=archetype)
            assert ledger.get_tier(actor, ClassAbility.BASIC_ATTACK) is Tier.AVERAGE

    def test_class_ability_for_own_class(self, ledger, hero):
        assert ledger.get_tier(hero, ClassAbility.POWER_STRIKE) is Tier.AVERAGE

    def test_class_ability_for_other_class(self, ledger, hero):
        assert ledger.get_tier(hero, ClassAbility.LAY_ON_HANDS) is Tier.UNTRAINED

    def test_spell_school(self, ledger):
        magician = TestDataBuilder.character("Mage", Archetype.MAGICIAN)
        assert ledger.get_tier(magician, Spell.MAGICIAN_FIREBALL) is Tier.AVERAGE
        assert ledger.get_tier(magician, Spell.CLERIC_HEAL) is Tier.UNTRAINED

    def test_monster_abilities_are_intrinsic_to_monsters(self, ledger, orc, hero):
        assert ledger.get_tier(orc, MonsterAbility.BACKSTAB) is Tier.AVERAGE
        assert ledger.get_tier(hero, MonsterAbility.BACKSTAB) is Tier.UNTRAINED

    def test_reading_does_not_create_records(self, ledger, hero):
        ledger.get_tier(hero, ClassAbility.POWER_STRIKE)
        ledger.get_progress(hero, ClassAbility.POWER_STRIKE)
        ledger.record(hero, ClassAbility.POWER_STRIKE)
        assert len(ledger) == 0

    def test_custom_intrinsic_predicate(self, hero):
        ledger = ProficiencyLedger(intrinsic=lambda actor, skill: True)
        assert ledger.get_tier(hero, Spell.SAGE_DEATH_KISS) is Tier.AVERAGE


class TestAddProgress:
    """Test progress accounting."""

    def test_non_positive_points_are_ignored(self, ledger, hero):
        assert ledger.add_progress(hero, ClassAbility.POWER_STRIKE, 0) is False
        assert ledger.add_progress(hero, ClassAbility.POWER_STRIKE, -3) is False
        assert len(ledger) == 0

    def test_partial_progress(self, ledger, hero):
        assert ledger.add_progress(hero, ClassAbility.POWER_STRIKE, 2) is False
        assert ledger.get_tier(hero, ClassAbility.POWER_STRIKE) is Tier.AVERAGE
        assert ledger.get_progress(hero, ClassAbility.POWER_STRIKE) == 2

    def test_level_up_resets_progress(self, ledger, hero):
        ledger.add_progress(hero, ClassAbility.POWER_STRIKE, 2)
        assert ledger.add_progress(hero, ClassAbility.POWER_STRIKE, 1) is True
        assert ledger.get_tier(hero, ClassAbility.POWER_STRIKE) is Tier.GOOD
        assert ledger.get_progress(hero, ClassAbility.POWER_STRIKE) == 0

    def test_single_tier_up_keeps_excess(self, ledger, hero):
        """An oversized deposit climbs one tier and banks the remainder."""
        assert ledger.add_progress(hero, ClassAbility.POWER_STRIKE, 10) is True
        assert ledger.get_tier(hero, ClassAbility.POWER_STRIKE) is Tier.GOOD
        assert ledger.get_progress(hero, ClassAbility.POWER_STRIKE) == 7

    def test_progress_conservation(self, ledger, hero):
        """Points spent one at a time are all accounted for by tiers and progress."""
        skill = ClassAbility.SHIELD_WALL
        deposited = 0
        for _ in range(20):
            ledger.add_progress(hero, skill, 1)
            deposited += 1

        tier = ledger.get_tier(hero, skill)
        consumed = sum(t.threshold for t in Tier if Tier.AVERAGE <= t < tier)
        assert consumed + ledger.get_progress(hero, skill) == deposited
        assert ledger.get_progress(hero, skill) < tier.threshold

    def test_tier_never_decreases(self, ledger, hero):
        skill = ClassAbility.BATTLE_CRY
        previous = ledger.get_tier(hero, skill)
        for _ in range(60):
            ledger.add_progress(hero, skill, 1)
            current = ledger.get_tier(hero, skill)
            assert current >= previous
            previous = current

    def test_legendary_admits_no_progress(self, ledger, hero):
        ledger.set_tier(hero, ClassAbility.POWER_STRIKE, Tier.LEGENDARY)
        assert ledger.add_progress(hero, ClassAbility.POWER_STRIKE, 5) is False
        assert ledger.get_progress(hero, ClassAbility.POWER_STRIKE) == 0

    def test_reaching_legendary_clears_progress(self, ledger, hero):
        ledger.set_tier(hero, ClassAbility.POWER_STRIKE, Tier.MASTER)
        assert ledger.add_progress(hero, ClassAbility.POWER_STRIKE, 20) is True
        assert ledger.get_tier(hero, ClassAbility.POWER_STRIKE) is Tier.LEGENDARY
        assert ledger.get_progress(hero, ClassAbility.POWER_STRIKE) == 0

    def test_records_are_per_actor(self, ledger):
        first = TestDataBuilder.character("First")
        second = TestDataBuilder.character("Second")
        ledger.add_progress(first, ClassAbility.POWER_STRIKE, 3)
        assert ledger.get_tier(first, ClassAbility.POWER_STRIKE) is Tier.GOOD
        assert ledger.get_tier(second, ClassAbility.POWER_STRIKE) is Tier.AVERAGE


class TestImproveFromUse:
    """Test the passive improvement roll."""

    def test_success_adds_one_point(self, ledger, hero):
        rng = Mock()
        rng.percent_check.return_value = True
        ledger.set_tier(hero, ClassAbility.POWER_STRIKE, Tier.UNTRAINED)

        assert ledger.try_improve_from_use(hero, ClassAbility.POWER_STRIKE, rng) is True
        rng.percent_check.assert_called_once_with(15)
        assert ledger.get_tier(hero, ClassAbility.POWER_STRIKE) is Tier.POOR

    def test_failed_roll_changes_nothing(self, ledger, hero):
        rng = Mock()
        rng.percent_check.return_value = False

        assert ledger.try_improve_from_use(hero, ClassAbility.POWER_STRIKE, rng) is False
        assert ledger.get_progress(hero, ClassAbility.POWER_STRIKE) == 0

    def test_progress_without_tier_up_returns_false(self, ledger, hero):
        rng = Mock()
        rng.percent_check.return_value = True

        assert ledger.try_improve_from_use(hero, ClassAbility.POWER_STRIKE, rng) is False
        assert ledger.get_progress(hero, ClassAbility.POWER_STRIKE) == 1

    @pytest.mark.parametrize("tier", [Tier.MASTER, Tier.LEGENDARY])
    def test_zero_chance_tiers_do_not_draw(self, ledger, hero, tier):
        rng = Mock()
        ledger.set_tier(hero, ClassAbility.POWER_STRIKE, tier)

        assert ledger.try_improve_from_use(hero, ClassAbility.POWER_STRIKE, rng) is False
        rng.percent_check.assert_not_called()


class TestLedgerBookkeeping:
    """Test snapshots and resets."""

    def test_record_is_a_copy(self, ledger, hero):
        ledger.add_progress(hero, ClassAbility.POWER_STRIKE, 1)
        snapshot = ledger.record(hero, ClassAbility.POWER_STRIKE)
        snapshot.progress = 99
        assert ledger.get_progress(hero, ClassAbility.POWER_STRIKE) == 1

    def test_points_needed(self):
        assert ProficiencyRecord(Tier.AVERAGE, 1).points_needed == 2
        assert ProficiencyRecord(Tier.LEGENDARY, 0).points_needed is None

    def test_skills_for(self, ledger, hero, orc):
        ledger.add_progress(hero, ClassAbility.POWER_STRIKE, 1)
        ledger.add_progress(hero, ClassAbility.SHIELD_WALL, 1)
        ledger.add_progress(orc, MonsterAbility.BACKSTAB, 1)

        skills = ledger.skills_for(hero)
        assert set(skills) == {ClassAbility.POWER_STRIKE, ClassAbility.SHIELD_WALL}

    def test_reset_actor(self, ledger, hero, orc):
        ledger.set_tier(hero, ClassAbility.POWER_STRIKE, Tier.EXPERT)
        ledger.add_progress(hero, ClassAbility.SHIELD_WALL, 1)
        ledger.add_progress(orc, MonsterAbility.BACKSTAB, 1)

        assert ledger.reset_actor(hero) == 2
        assert ledger.get_tier(hero, ClassAbility.POWER_STRIKE) is Tier.AVERAGE
        assert len(ledger) == 1
