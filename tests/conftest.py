"""
Shared fixtures for the ironroll test suite.

Provides combatant builders, a loaded catalog, a ledger and seeded random
sources for exercising the combat engine.
"""

import os
import sys

import pytest

# Add the project root to the Python path
project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, project_root)

from ironroll.combat.combat_resolver import CombatResolver
from ironroll.combat.effect_catalog import EffectCatalog
from ironroll.combat.effect_executor import EffectExecutor
from ironroll.combat.proficiency import ProficiencyLedger
from ironroll.combat.roll_resolver import RollResolver
from ironroll.core.config import CombatRules
from ironroll.core.data.data_structures import Combatant
from ironroll.core.data.game_enums import Archetype, MonsterFamily
from ironroll.core.events.event_manager import EventManager
from ironroll.core.rng import CombatRNG


class TestDataBuilder:
    """Builder for combatants used across tests."""

    @staticmethod
    def character(
        name: str = "Hero",
        archetype: Archetype = Archetype.WARRIOR,
        level: int = 10,
        **overrides
    ) -> Combatant:
        values = dict(
            combatant_id=name.lower().replace(" ", "_"),
            name=name,
            archetype=archetype,
            level=level,
            strength=16,
            dexterity=12,
            constitution=14,
            intelligence=12,
            wisdom=12,
            defence=5,
            weapon_power=10,
            armor_power=5,
            hp=100,
            max_hp=100,
            mana=100,
            max_mana=100,
            stamina=100,
            max_stamina=100,
        )
        values.update(overrides)
        return Combatant(**values)

    @staticmethod
    def monster(
        name: str = "Orc",
        family: MonsterFamily = MonsterFamily.HUMANOID,
        level: int = 8,
        **overrides
    ) -> Combatant:
        values = dict(
            combatant_id=name.lower().replace(" ", "_"),
            name=name,
            archetype=Archetype.MONSTER,
            level=level,
            strength=14,
            dexterity=10,
            defence=3,
            weapon_power=6,
            armor_power=2,
            hp=80,
            max_hp=80,
            family=family,
            monster_tier=1,
            is_automated=True,
        )
        values.update(overrides)
        return Combatant(**values)


@pytest.fixture
def event_manager():
    """Create an event manager for testing."""
    return EventManager()


@pytest.fixture
def rules():
    """Built-in combat rules."""
    return CombatRules()


@pytest.fixture
def rng():
    """Seeded random source."""
    return CombatRNG(seed=1234)


@pytest.fixture(scope="session")
def catalog():
    """Catalog loaded from the bundled YAML data."""
    return EffectCatalog.load()


@pytest.fixture
def ledger(catalog):
    """Fresh proficiency ledger."""
    return ProficiencyLedger(catalog)


@pytest.fixture
def roll_resolver(rules):
    return RollResolver(rules)


@pytest.fixture
def executor(roll_resolver):
    return EffectExecutor(roll_resolver)


@pytest.fixture
def combat_resolver(catalog, ledger, rules, event_manager):
    """Combat resolver wired to the real catalog and a fresh ledger."""
    return CombatResolver(catalog, ledger, event_manager=event_manager, rules=rules)


@pytest.fixture
def hero():
    return TestDataBuilder.character()


@pytest.fixture
def orc():
    return TestDataBuilder.monster()
