"""Combatant and value structures shared across the combat engine.

Data Flow:
1. Combatant (caller-owned state) -> resolver inputs
2. RollOutcome / EffectResult (transient) -> applied back onto Combatant

The engine reads Combatant fields and only writes them through the
CombatResolver's application step, so the turn loop keeps ownership.
"""

from dataclasses import dataclass, field
from typing import Optional

from .game_enums import Archetype, MonsterFamily, StatusEffect


@dataclass(frozen=True)
class MagnitudeRange:
    """Inclusive integer range for damage, healing or other magnitudes."""
    low: int
    high: int

    def __post_init__(self):
        if self.low > self.high:
            raise ValueError(f"Inverted magnitude range: {self.low}-{self.high}")

    @classmethod
    def from_value(cls, value) -> "MagnitudeRange":
        """Build from ``[low, high]``, ``{"min": .., "max": ..}`` or a single int."""
        if isinstance(value, MagnitudeRange):
            return value
        if isinstance(value, int):
            return cls(value, value)
        if isinstance(value, dict):
            return cls(int(value["min"]), int(value["max"]))
        low, high = value
        return cls(int(low), int(high))

    def __contains__(self, item: int) -> bool:
        return self.low <= item <= self.high

    def __repr__(self) -> str:
        return f"MagnitudeRange({self.low}-{self.high})"


@dataclass(frozen=True)
class StatusInfliction:
    """A condition an ability may apply, with duration and percent chance."""
    effect: StatusEffect
    duration: int
    chance: int = 100


@dataclass
class Combatant:
    """Statistics of one participant in an encounter.

    Owned by the caller's turn loop. Both player-directed characters and
    automated monsters use this shape; monster-only fields are ignored for
    characters.
    """
    combatant_id: str
    name: str
    archetype: Archetype = Archetype.WARRIOR
    level: int = 1

    # Primary attributes
    strength: int = 10
    dexterity: int = 10
    constitution: int = 10
    intelligence: int = 10
    wisdom: int = 10

    # Equipment and defence
    defence: int = 0
    weapon_power: int = 0
    armor_power: int = 0

    # Resource pools
    hp: int = 20
    max_hp: int = 20
    mana: int = 0
    max_mana: int = 0
    stamina: int = 0
    max_stamina: int = 0
    training_points: int = 0

    # Active conditions, mapped to remaining rounds
    statuses: dict[StatusEffect, int] = field(default_factory=dict)

    # Temporary combat bonuses from buffs
    attack_bonus: int = 0
    defense_bonus: int = 0

    # Monster-only fields
    family: Optional[MonsterFamily] = None
    monster_tier: int = 1
    is_boss: bool = False
    is_automated: bool = False
    innate_abilities: tuple = ()  # MonsterAbility members granted beyond the family table

    @property
    def is_alive(self) -> bool:
        return self.hp > 0

    def has_status(self, effect: StatusEffect) -> bool:
        return self.statuses.get(effect, 0) > 0

    def add_status(self, effect: StatusEffect, duration: int) -> None:
        """Apply a condition, keeping the longer of old and new durations."""
        self.statuses[effect] = max(self.statuses.get(effect, 0), duration)

    def __repr__(self) -> str:
        return f"Combatant({self.combatant_id!r}, {self.name!r}, hp={self.hp}/{self.max_hp})"


def truncating_div(numerator: int, denominator: int) -> int:
    """Integer division that rounds toward zero.

    Attribute modifiers such as ``(STR - 10) / 2`` truncate rather than floor,
    so a strength of 9 gives 0 rather than -1.
    """
    quotient = abs(numerator) // abs(denominator)
    return quotient if (numerator >= 0) == (denominator > 0) else -quotient
