"""Closed enumerations of every ability, class skill and spell.

Identifiers are resolved against these enums when the catalog loads, so the
rest of the engine never handles free-form skill strings. ``AbilityId`` is
the tagged union of the three families.
"""

from enum import Enum
from typing import Union


class MonsterAbility(Enum):
    """Special abilities available to automated combatants."""
    # Attack modifiers
    MULTIATTACK = "multiattack"
    CRUSHING_BLOW = "crushing_blow"
    VENOMOUS_BITE = "venomous_bite"
    BLEEDING_WOUND = "bleeding_wound"
    FIRE_BREATH = "fire_breath"
    FROST_BREATH = "frost_breath"
    POISON_CLOUD = "poison_cloud"
    LIFE_DRAIN = "life_drain"
    MANA_DRAIN = "mana_drain"

    # Defensive
    REGENERATION = "regeneration"
    THORNS = "thorns"
    ARMOR_HARDEN = "armor_harden"
    VANISH = "vanish"
    PHASE = "phase"

    # Status
    PETRIFYING_GAZE = "petrifying_gaze"
    HORRIFYING_SCREAM = "horrifying_scream"
    BLINDING_FLASH = "blinding_flash"
    CURSE = "curse"
    SILENCE = "silence"
    ENFEEBLE = "enfeeble"

    # Special attacks
    DEVOUR = "devour"
    BERSERK = "berserk"
    SUMMON_MINIONS = "summon_minions"
    EXPLOSION = "explosion"
    SOUL_REAP = "soul_reap"
    BACKSTAB = "backstab"

    # Utility
    FLEE = "flee"
    CALL_FOR_HELP = "call_for_help"
    ENRAGE = "enrage"
    HEAL = "heal"


class ClassAbility(Enum):
    """Combat abilities for the non-casting classes, plus the basic attack."""
    BASIC_ATTACK = "basic_attack"

    POWER_STRIKE = "power_strike"
    SHIELD_WALL = "shield_wall"
    BATTLE_CRY = "battle_cry"
    EXECUTE = "execute"
    LAST_STAND = "last_stand"
    WHIRLWIND = "whirlwind"

    RAGE = "rage"
    RECKLESS_ATTACK = "reckless_attack"
    INTIMIDATE = "intimidate"
    BLOODLUST = "bloodlust"

    LAY_ON_HANDS = "lay_on_hands"
    DIVINE_SMITE = "divine_smite"
    AURA_OF_PROTECTION = "aura_of_protection"
    HOLY_AVENGER = "holy_avenger"

    BACKSTAB = "backstab"
    POISON_BLADE = "poison_blade"
    SHADOW_STEP = "shadow_step"
    DEATH_MARK = "death_mark"
    ASSASSINATE = "assassinate"

    PRECISE_SHOT = "precise_shot"
    HUNTERS_MARK = "hunters_mark"
    EVASIVE_ROLL = "evasive_roll"
    VOLLEY = "volley"
    NATURES_BLESSING = "natures_blessing"

    MOCK = "mock"
    INSPIRING_TUNE = "inspiring_tune"
    DISAPPEARING_ACT = "disappearing_act"
    CHARM = "charm"
    SONG_OF_REST = "song_of_rest"

    THROW_BOMB = "throw_bomb"
    HEALING_ELIXIR = "healing_elixir"
    ACID_SPLASH = "acid_splash"
    SMOKE_BOMB = "smoke_bomb"
    MUTAGEN = "mutagen"

    SECOND_WIND = "second_wind"
    FOCUS = "focus"


class Spell(Enum):
    """Spells, keyed ``<class>_spell_<level>`` like the training records."""
    CLERIC_CURE_LIGHT = "cleric_spell_1"
    CLERIC_ARMOR = "cleric_spell_2"
    CLERIC_BAPTIZE_MONSTER = "cleric_spell_3"
    CLERIC_CURE_CRITICAL = "cleric_spell_4"
    CLERIC_DISEASE = "cleric_spell_5"
    CLERIC_HOLY_EXPLOSION = "cleric_spell_6"
    CLERIC_INVISIBILITY = "cleric_spell_7"
    CLERIC_ANGEL = "cleric_spell_8"
    CLERIC_CALL_LIGHTNING = "cleric_spell_9"
    CLERIC_HEAL = "cleric_spell_10"
    CLERIC_DIVINATION = "cleric_spell_11"
    CLERIC_GODS_FINGER = "cleric_spell_12"

    MAGICIAN_MAGIC_MISSILE = "magician_spell_1"
    MAGICIAN_SHIELD = "magician_spell_2"
    MAGICIAN_SLEEP = "magician_spell_3"
    MAGICIAN_WEB = "magician_spell_4"
    MAGICIAN_HASTE = "magician_spell_5"
    MAGICIAN_POWER_HAT = "magician_spell_6"
    MAGICIAN_FIREBALL = "magician_spell_7"
    MAGICIAN_FEAR = "magician_spell_8"
    MAGICIAN_LIGHTNING_BOLT = "magician_spell_9"
    MAGICIAN_PRISMATIC_CAGE = "magician_spell_10"
    MAGICIAN_PILLAR_OF_FIRE = "magician_spell_11"
    MAGICIAN_POWER_WORD_KILL = "magician_spell_12"
    MAGICIAN_SUMMON_DEMON = "magician_spell_13"

    SAGE_FOG_OF_WAR = "sage_spell_1"
    SAGE_POISON = "sage_spell_2"
    SAGE_FREEZE = "sage_spell_3"
    SAGE_DUPLICATE = "sage_spell_4"
    SAGE_ROAST = "sage_spell_5"
    SAGE_HIT_SELF = "sage_spell_6"
    SAGE_ESCAPE = "sage_spell_7"
    SAGE_GIANT = "sage_spell_8"
    SAGE_STEAL = "sage_spell_9"
    SAGE_ENERGY_DRAIN = "sage_spell_10"
    SAGE_SUMMON_DEMON = "sage_spell_11"
    SAGE_DEATH_KISS = "sage_spell_12"

    @property
    def school(self) -> str:
        """Casting class prefix (``cleric``, ``magician`` or ``sage``)."""
        return self.value.split("_spell_")[0]

    @property
    def spell_level(self) -> int:
        return int(self.value.rsplit("_", 1)[1])


AbilityId = Union[MonsterAbility, ClassAbility, Spell]
