"""
Unit tests for training points and deliberate training.
"""
import pytest

from ironroll.combat.proficiency import Tier
from ironroll.combat.training import (
    begin_new_cycle,
    grant_level_up_points,
    train_skill,
    trainable_skills,
    training_points_per_level,
)
from ironroll.core.data.ability_ids import ClassAbility, Spell
from ironroll.core.data.game_enums import Archetype
from ironroll.core.events import EventType
from tests.conftest import TestDataBuilder


class TestTrainingPoints:
    """Test the per-level point grant."""

    @pytest.mark.parametrize("archetype,expected", [
        (Archetype.WARRIOR, 3),
        (Archetype.PALADIN, 4),
        (Archetype.CLERIC, 5),
        (Archetype.SAGE, 6),
    ])
    def test_class_bonus(self, archetype, expected):
        actor = TestDataBuilder.character(archetype=archetype, intelligence=10, wisdom=10)
        assert training_points_per_level(actor) == expected

    def test_mental_stat_bonus(self):
        actor = TestDataBuilder.character(intelligence=25, wisdom=15)
        assert training_points_per_level(actor) == 3 + 1

    def test_grant_accumulates(self):
        actor = TestDataBuilder.character(intelligence=10, wisdom=10, training_points=2)
        assert grant_level_up_points(actor) == 3
        assert actor.training_points == 5


class TestTrainSkill:
    """Test spending a single point."""

    def test_spends_one_point(self, ledger):
        actor = TestDataBuilder.character(training_points=2)
        outcome = train_skill(actor, ClassAbility.POWER_STRIKE, ledger)

        assert outcome.trained is True
        assert outcome.leveled_up is False
        assert outcome.progress == 1
        assert outcome.points_needed == 2
        assert actor.training_points == 1
        assert "Progress: 1/3" in outcome.describe()

    def test_level_up(self, ledger):
        actor = TestDataBuilder.character(training_points=3)
        train_skill(actor, ClassAbility.POWER_STRIKE, ledger)
        train_skill(actor, ClassAbility.POWER_STRIKE, ledger)
        outcome = train_skill(actor, ClassAbility.POWER_STRIKE, ledger)

        assert outcome.leveled_up is True
        assert outcome.tier is Tier.GOOD
        assert outcome.describe() == "power_strike is now Good!"

    def test_no_points(self, ledger):
        actor = TestDataBuilder.character(training_points=0)
        outcome = train_skill(actor, ClassAbility.POWER_STRIKE, ledger)

        assert outcome.trained is False
        assert outcome.describe() == "You don't have any training points!"
        assert len(ledger) == 0

    def test_legendary_is_refused_without_spending(self, ledger):
        actor = TestDataBuilder.character(training_points=4)
        ledger.set_tier(actor, ClassAbility.POWER_STRIKE, Tier.LEGENDARY)

        outcome = train_skill(actor, ClassAbility.POWER_STRIKE, ledger)

        assert outcome.trained is False
        assert "already at Legendary" in outcome.reason
        assert actor.training_points == 4

    def test_events_published(self, ledger, event_manager):
        received = []
        event_manager.subscribe_all(received.append)
        actor = TestDataBuilder.character(training_points=1)
        ledger.add_progress(actor, ClassAbility.POWER_STRIKE, 2)

        train_skill(actor, ClassAbility.POWER_STRIKE, ledger, event_manager)
        event_manager.process_events()

        types = [event.event_type for event in received]
        assert types == [EventType.LOG_MESSAGE, EventType.PROFICIENCY_IMPROVED]
        assert received[0].category == "TRAINING"
        assert received[1].from_use is False
        assert received[1].new_tier is Tier.GOOD


class TestSkillLists:
    """Test trainable skills and cycle resets."""

    def test_warrior_skills(self, catalog):
        actor = TestDataBuilder.character(level=5)
        skills = trainable_skills(actor, catalog)
        assert skills[0] is ClassAbility.BASIC_ATTACK
        assert skills.count(ClassAbility.BASIC_ATTACK) == 1
        assert ClassAbility.POWER_STRIKE in skills
        assert ClassAbility.EXECUTE not in skills

    def test_casters_include_spells(self, catalog):
        actor = TestDataBuilder.character("Mage", Archetype.MAGICIAN, level=3)
        skills = trainable_skills(actor, catalog)
        assert Spell.MAGICIAN_MAGIC_MISSILE in skills
        assert Spell.MAGICIAN_FIREBALL not in skills

    def test_new_cycle_forgets_everything(self, ledger):
        actor = TestDataBuilder.character(training_points=3)
        for _ in range(3):
            train_skill(actor, ClassAbility.POWER_STRIKE, ledger)

        assert begin_new_cycle(actor, ledger) == 1
        assert ledger.get_tier(actor, ClassAbility.POWER_STRIKE) is Tier.AVERAGE
        assert ledger.get_progress(actor, ClassAbility.POWER_STRIKE) == 0
