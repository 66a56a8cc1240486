"""
Roll resolution: d20 plus modifier against a difficulty.

This module owns the probabilistic core of combat. A resolution first passes
the tier's flat fumble gate, then rolls the die, and finally classifies the
margin into a degree of success that scales effect magnitudes.
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import TYPE_CHECKING, Optional

from ..core.config import CombatRules
from ..core.data.ability_ids import AbilityId, Spell
from ..core.data.data_structures import Combatant, truncating_div
from ..core.data.game_enums import Archetype, EffectKind, StatusEffect

if TYPE_CHECKING:
    from ..core.rng import CombatRNG
    from .effect_catalog import AbilityDefinition
    from .proficiency import Tier


FUMBLE_REASON = "Skill failure! You fumbled the ability."


class DegreeOfSuccess(Enum):
    """How well a roll succeeded."""
    MISS = auto()
    HIT = auto()
    SOLID_HIT = auto()
    DEVASTATING_HIT = auto()
    CRITICAL = auto()


@dataclass(frozen=True)
class RollOutcome:
    """One resolution attempt.

    A forced failure (fumble) has natural roll 0 and ``total == modifier``
    because the die was never rolled.
    """
    natural_roll: int
    modifier: int
    total: int
    difficulty: int
    success: bool
    degree: DegreeOfSuccess
    critical_success: bool = False
    critical_failure: bool = False
    forced_failure: bool = False
    reason: str = ""

    @property
    def margin(self) -> int:
        return self.total - self.difficulty

    def describe(self) -> str:
        if self.forced_failure:
            return self.reason
        return f"[Roll: {self.natural_roll} + {self.modifier} = {self.total} vs DC {self.difficulty}]"


class RollResolver:
    """Resolves rolls against difficulties using the configured die and margins."""

    def __init__(self, rules: Optional[CombatRules] = None):
        self.rules = rules or CombatRules()

    def roll(self, modifier: int, difficulty: int, rng: "CombatRNG") -> RollOutcome:
        """Roll the die without the fumble gate."""
        natural = rng.randint(1, self.rules.die_sides)
        total = natural + modifier
        success = total >= difficulty
        critical_success = natural == self.rules.die_sides
        critical_failure = natural == 1

        return RollOutcome(
            natural_roll=natural,
            modifier=modifier,
            total=total,
            difficulty=difficulty,
            success=success,
            degree=self.classify(success, critical_success, total - difficulty),
            critical_success=critical_success,
            critical_failure=critical_failure,
        )

    def resolve(
        self,
        modifier: int,
        difficulty: int,
        tier: "Tier",
        rng: "CombatRNG"
    ) -> RollOutcome:
        """Fumble gate, then roll.

        The gate draws one percent check against the tier's fail chance; on a
        fumble the die is not rolled at all.
        """
        if tier.fail_chance > 0 and rng.percent_check(tier.fail_chance):
            return self.forced_failure(modifier, difficulty)
        return self.roll(modifier, difficulty, rng)

    @staticmethod
    def forced_failure(modifier: int, difficulty: int) -> RollOutcome:
        return RollOutcome(
            natural_roll=0,
            modifier=modifier,
            total=modifier,
            difficulty=difficulty,
            success=False,
            degree=DegreeOfSuccess.MISS,
            forced_failure=True,
            reason=FUMBLE_REASON,
        )

    def classify(self, success: bool, critical_success: bool, margin: int) -> DegreeOfSuccess:
        if not success:
            return DegreeOfSuccess.MISS
        if critical_success:
            return DegreeOfSuccess.CRITICAL
        if margin >= self.rules.devastating_hit_margin:
            return DegreeOfSuccess.DEVASTATING_HIT
        if margin >= self.rules.solid_hit_margin:
            return DegreeOfSuccess.SOLID_HIT
        return DegreeOfSuccess.HIT

    def degree_multiplier(self, degree: DegreeOfSuccess) -> float:
        """Damage multiplier for a degree of success (0 on a miss)."""
        return {
            DegreeOfSuccess.MISS: 0.0,
            DegreeOfSuccess.HIT: self.rules.hit_multiplier,
            DegreeOfSuccess.SOLID_HIT: self.rules.solid_hit_multiplier,
            DegreeOfSuccess.DEVASTATING_HIT: self.rules.devastating_hit_multiplier,
            DegreeOfSuccess.CRITICAL: self.rules.critical_multiplier,
        }[degree]

    # Difficulties

    def defender_difficulty(self, defender: Combatant) -> int:
        """Difficulty to land a blow on a defender."""
        difficulty = (
            self.rules.defender_base_difficulty
            + truncating_div(defender.dexterity - 10, 2)
            + defender.armor_power // 15
            + defender.level // 10
        )
        if defender.has_status(StatusEffect.EVADING) or defender.has_status(StatusEffect.HIDDEN):
            difficulty += self.rules.evasion_bonus
        if defender.has_status(StatusEffect.INVISIBLE):
            difficulty += self.rules.invisibility_bonus
        return difficulty

    def ability_difficulty(self, target: Combatant) -> int:
        return self.rules.ability_base_difficulty + target.level // 5

    def spell_difficulty(self, spell: Spell) -> int:
        return self.rules.spell_base_difficulty + spell.spell_level


# Modifier composition

def _spell_stat_term(actor: Combatant) -> int:
    if actor.archetype is Archetype.MAGICIAN:
        return truncating_div(actor.intelligence - 10, 2)
    if actor.archetype is Archetype.CLERIC:
        return truncating_div(actor.wisdom - 10, 2)
    return truncating_div((actor.intelligence + actor.wisdom) // 2 - 10, 2)


def _physical_stat_term(actor: Combatant, definition: Optional["AbilityDefinition"]) -> int:
    kind = definition.kind if definition else None
    if kind in (EffectKind.DAMAGE, EffectKind.WEAPON):
        return truncating_div(actor.strength - 10, 2)
    if kind is EffectKind.DEFENSE:
        return truncating_div(actor.dexterity - 10, 2)
    return truncating_div((actor.strength + actor.dexterity) // 2 - 10, 2)


def ability_check_modifier(
    actor: Combatant,
    skill: AbilityId,
    tier: "Tier",
    definition: Optional["AbilityDefinition"] = None
) -> int:
    """Tier modifier + governing stat + level bonus for a skill check."""
    if isinstance(skill, Spell):
        stat_term = _spell_stat_term(actor)
    else:
        stat_term = _physical_stat_term(actor, definition)
    return tier.modifier + stat_term + actor.level // 10


def attack_modifier(actor: Combatant, tier: "Tier") -> int:
    """Modifier for a weapon attack by a character."""
    return (
        truncating_div(actor.strength - 10, 2)
        + tier.modifier
        + actor.level // 5
        + actor.weapon_power // 20
    )


def monster_attack_modifier(monster: Combatant) -> int:
    """Modifier for a monster's attack, from level and strength alone."""
    return monster.level // 3 + truncating_div(monster.strength - 10, 3)
