"""Data structures, enums and identifiers.

This package contains the shared vocabulary of the combat engine:
- game_enums.py: archetypes, families, status effects, effect kinds
- ability_ids.py: closed ability/spell identifier enums
- data_structures.py: Combatant and small value types
"""

from .game_enums import (
    Archetype,
    MonsterFamily,
    StatusEffect,
    EffectKind,
    ResourceType,
    Scaling,
    SpecialRule,
    SPELLCASTER_ARCHETYPES,
    ARCHETYPE_NAMES,
)
from .ability_ids import (
    AbilityId,
    MonsterAbility,
    ClassAbility,
    Spell,
)
from .data_structures import (
    Combatant,
    MagnitudeRange,
    StatusInfliction,
    truncating_div,
)

__all__ = [
    "Archetype",
    "MonsterFamily",
    "StatusEffect",
    "EffectKind",
    "ResourceType",
    "Scaling",
    "SpecialRule",
    "SPELLCASTER_ARCHETYPES",
    "ARCHETYPE_NAMES",
    "AbilityId",
    "MonsterAbility",
    "ClassAbility",
    "Spell",
    "Combatant",
    "MagnitudeRange",
    "StatusInfliction",
    "truncating_div",
]
