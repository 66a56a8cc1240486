"""Centralized combat enums and constants.

This module contains the core enums shared by the ledger, the resolver,
the catalog and the decision engine, providing a single source of truth.
"""

from enum import Enum, auto


class Archetype(Enum):
    """Character classes plus the catch-all monster archetype."""
    WARRIOR = auto()
    BARBARIAN = auto()
    PALADIN = auto()
    ASSASSIN = auto()
    RANGER = auto()
    JESTER = auto()
    BARD = auto()
    ALCHEMIST = auto()
    CLERIC = auto()
    MAGICIAN = auto()
    SAGE = auto()
    MONSTER = auto()


class MonsterFamily(Enum):
    """Monster families used for ability eligibility."""
    GOBLINOID = "goblinoid"
    UNDEAD = "undead"
    BEAST = "beast"
    REPTILIAN = "reptilian"
    DRAGON = "dragon"
    DEMON = "demon"
    ELEMENTAL = "elemental"
    HUMANOID = "humanoid"
    INSECT = "insect"
    GIANT = "giant"
    ARCANE = "arcane"
    GENERIC = "generic"


class StatusEffect(Enum):
    """Temporary conditions a combatant can carry."""
    # Damage over time
    POISONED = auto()
    BLEEDING = auto()
    BURNING = auto()
    FROZEN = auto()
    CURSED = auto()
    DISEASED = auto()

    # Control
    STUNNED = auto()
    SILENCED = auto()
    BLINDED = auto()
    FEARED = auto()
    CHARMED = auto()
    SLEEPING = auto()

    # Buffs
    DEFENDING = auto()
    RAGING = auto()
    HIDDEN = auto()
    EVADING = auto()
    INVISIBLE = auto()
    REGENERATING = auto()
    PROTECTED = auto()
    EMPOWERED = auto()

    # Debuffs
    WEAKENED = auto()
    VULNERABLE = auto()
    MARKED = auto()

    @property
    def prevents_spellcasting(self) -> bool:
        return self in (
            StatusEffect.SILENCED,
            StatusEffect.STUNNED,
            StatusEffect.SLEEPING,
        )


class EffectKind(Enum):
    """What an ability fundamentally does once it resolves."""
    DAMAGE = "damage"        # Direct damage against a target
    WEAPON = "weapon"        # Modifies the user's normal weapon attack
    DRAIN = "drain"          # Removes mana from the target
    HEAL = "heal"            # Restores the user's hitpoints
    BUFF = "buff"            # Raises the user's attack
    DEFENSE = "defense"      # Raises the user's defense
    DEBUFF = "debuff"        # Inflicts a condition on the target
    SUMMON = "summon"        # Brings reinforcements
    ESCAPE = "escape"        # Leaves the encounter
    UTILITY = "utility"      # Anything else self-targeted

    @property
    def is_self_targeted(self) -> bool:
        return self in (
            EffectKind.HEAL,
            EffectKind.BUFF,
            EffectKind.DEFENSE,
            EffectKind.SUMMON,
            EffectKind.ESCAPE,
            EffectKind.UTILITY,
        )


class ResourceType(Enum):
    """Pools an ability cost is paid from."""
    NONE = "none"
    MANA = "mana"
    STAMINA = "stamina"


class Scaling(Enum):
    """Formula used to grow a magnitude with the user's level and stats."""
    NONE = "none"
    BREATH = "breath"          # Monster breath weapons
    CLASS_ABILITY = "class"    # Player class abilities
    SPELL = "spell"            # Spell damage
    SPELL_HEAL = "spell_heal"  # Spell healing
    MONSTER_HEAL = "monster_heal"


class SpecialRule(Enum):
    """Ability-specific rules layered on top of the generic effect formula."""
    DEVOUR = "devour"            # Finishes targets under 20% HP, else x1.3
    SOUL_REAP = "soul_reap"      # 5% instant kill, else x1.5
    BERSERK = "berserk"          # x2 and one extra attack under 1/3 HP
    PHASE = "phase"              # 25% chance to avoid all damage
    EXECUTE = "execute"          # Double damage against targets under 30% HP
    ASSASSINATE = "assassinate"  # Finishes targets under 20% HP
    MANA_DRAIN = "mana_drain"    # Drains level * 5 + draw, capped at target mana
    EXPLOSION = "explosion"      # Deals half max HP when the user dies
    ARMOR_HARDEN = "armor_harden"  # Raises defense by half the user's level


SPELLCASTER_ARCHETYPES = frozenset({
    Archetype.CLERIC,
    Archetype.MAGICIAN,
    Archetype.SAGE,
})

ARCHETYPE_NAMES = {
    Archetype.WARRIOR: "Warrior",
    Archetype.BARBARIAN: "Barbarian",
    Archetype.PALADIN: "Paladin",
    Archetype.ASSASSIN: "Assassin",
    Archetype.RANGER: "Ranger",
    Archetype.JESTER: "Jester",
    Archetype.BARD: "Bard",
    Archetype.ALCHEMIST: "Alchemist",
    Archetype.CLERIC: "Cleric",
    Archetype.MAGICIAN: "Magician",
    Archetype.SAGE: "Sage",
    Archetype.MONSTER: "Monster",
}
