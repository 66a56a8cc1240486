"""
Unit tests for core data structures.

Tests MagnitudeRange, Combatant and the truncating division helper used
throughout the combat engine.
"""

import pytest
from ironroll.core.data.data_structures import Combatant, MagnitudeRange, StatusInfliction, truncating_div
from ironroll.core.data.game_enums import Archetype, StatusEffect


class TestMagnitudeRange:
    """Test MagnitudeRange functionality."""

    def test_range_creation(self):
        """Test basic range creation."""
        magnitude = MagnitudeRange(3, 9)
        assert magnitude.low == 3
        assert magnitude.high == 9

    def test_inverted_range_rejected(self):
        """Test that low above high is refused."""
        with pytest.raises(ValueError):
            MagnitudeRange(9, 3)

    @pytest.mark.parametrize("value,expected", [
        ([2, 5], MagnitudeRange(2, 5)),
        ((2, 5), MagnitudeRange(2, 5)),
        ({"min": 1, "max": 4}, MagnitudeRange(1, 4)),
        (7, MagnitudeRange(7, 7)),
    ])
    def test_from_value(self, value, expected):
        """Test the accepted YAML shapes."""
        assert MagnitudeRange.from_value(value) == expected

    def test_from_value_passthrough(self):
        magnitude = MagnitudeRange(1, 2)
        assert MagnitudeRange.from_value(magnitude) is magnitude

    def test_containment(self):
        magnitude = MagnitudeRange(5, 14)
        assert 5 in magnitude
        assert 14 in magnitude
        assert 15 not in magnitude

    def test_immutable(self):
        with pytest.raises(AttributeError):
            MagnitudeRange(1, 2).low = 0


class TestCombatant:
    """Test Combatant functionality."""

    def test_defaults(self):
        """Test a minimally specified combatant."""
        combatant = Combatant("c1", "Dummy")
        assert combatant.archetype is Archetype.WARRIOR
        assert combatant.level == 1
        assert combatant.is_alive
        assert combatant.statuses == {}

    def test_statuses_are_not_shared(self):
        first = Combatant("a", "A")
        second = Combatant("b", "B")
        first.add_status(StatusEffect.POISONED, 3)
        assert not second.has_status(StatusEffect.POISONED)

    def test_add_status_keeps_longer_duration(self):
        """Test that reapplying a status never shortens it."""
        combatant = Combatant("c1", "Dummy")
        combatant.add_status(StatusEffect.STUNNED, 3)
        combatant.add_status(StatusEffect.STUNNED, 1)
        assert combatant.statuses[StatusEffect.STUNNED] == 3
        combatant.add_status(StatusEffect.STUNNED, 5)
        assert combatant.statuses[StatusEffect.STUNNED] == 5

    def test_expired_status(self):
        combatant = Combatant("c1", "Dummy", statuses={StatusEffect.BLINDED: 0})
        assert not combatant.has_status(StatusEffect.BLINDED)

    def test_defeated(self):
        assert not Combatant("c1", "Dummy", hp=0).is_alive

    def test_repr(self):
        assert repr(Combatant("c1", "Dummy", hp=5, max_hp=20)) == "Combatant('c1', 'Dummy', hp=5/20)"

    def test_status_infliction_default_chance(self):
        assert StatusInfliction(StatusEffect.EVADING, 1).chance == 100


class TestTruncatingDiv:
    """Test division that rounds toward zero."""

    @pytest.mark.parametrize("numerator,denominator,expected", [
        (7, 2, 3),
        (-1, 2, 0),
        (-7, 2, -3),
        (7, -2, -3),
        (-7, -2, 3),
        (0, 5, 0),
    ])
    def test_truncation(self, numerator, denominator, expected):
        assert truncating_div(numerator, denominator) == expected
