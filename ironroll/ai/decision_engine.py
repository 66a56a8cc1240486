"""Monster decision ladder.

This module picks which special ability, if any, an automated combatant
uses on its turn. The ladder is an ordered tuple of rules; each rule names
an ability, a percent chance and a precondition over the decision context.
The first rule whose ability is eligible, whose precondition holds and whose
chance roll passes wins.
"""

from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, Optional, Sequence

from ..core.config import CombatRules
from ..core.data.ability_ids import MonsterAbility
from ..core.data.data_structures import Combatant
from ..core.data.game_enums import StatusEffect

if TYPE_CHECKING:
    from ..core.rng import CombatRNG


@dataclass(frozen=True)
class DecisionContext:
    """Everything a ladder precondition may look at."""
    actor: Combatant
    target: Combatant
    round_number: int
    eligible: tuple
    rules: CombatRules

    @property
    def is_low_health(self) -> bool:
        return self.actor.hp < self.actor.max_hp // self.rules.low_health_divisor

    @property
    def is_very_low_health(self) -> bool:
        return self.actor.hp < self.actor.max_hp // self.rules.very_low_health_divisor

    @property
    def target_is_finishable(self) -> bool:
        return self.target.hp < self.target.max_hp // self.rules.finisher_health_divisor


Precondition = Callable[[DecisionContext], bool]


@dataclass(frozen=True)
class PriorityRule:
    """One rung of the ladder."""
    name: str
    ability: MonsterAbility
    chance: int
    precondition: Precondition
    priority: int = 0

    def applies(self, context: DecisionContext) -> bool:
        """Eligible and precondition holds; the chance roll is separate."""
        return self.ability in context.eligible and self.precondition(context)


class AbilityDecision:
    """Represents the ladder's choice for one turn."""

    def __init__(self, ability: Optional[MonsterAbility], rule_name: str, reasoning: str = ""):
        self.ability = ability  # None means a plain weapon attack
        self.rule_name = rule_name
        self.reasoning = reasoning

    @property
    def is_basic_attack(self) -> bool:
        return self.ability is None

    def __repr__(self) -> str:
        return f"AbilityDecision({self.ability}, rule={self.rule_name!r})"


def _always(context: DecisionContext) -> bool:
    return True


def _low_health(context: DecisionContext) -> bool:
    return context.is_low_health


def _very_low_health(context: DecisionContext) -> bool:
    return context.is_very_low_health


def _target_finishable(context: DecisionContext) -> bool:
    return context.target_is_finishable


def _first_round(context: DecisionContext) -> bool:
    return context.round_number == 1


def _early_rounds(context: DecisionContext) -> bool:
    return context.round_number <= 2


def _target_lacks(effect: StatusEffect) -> Precondition:
    def check(context: DecisionContext) -> bool:
        return not context.target.has_status(effect)
    check.__name__ = f"target_lacks_{effect.name.lower()}"
    return check


def _target_can_be_silenced(context: DecisionContext) -> bool:
    return not context.target.has_status(StatusEffect.SILENCED) and context.target.mana > 0


DEFAULT_LADDER: tuple[PriorityRule, ...] = (
    # 1: heal when hurt
    PriorityRule("heal_when_low", MonsterAbility.HEAL, 60, _low_health, 1),
    PriorityRule("regenerate_when_low", MonsterAbility.REGENERATION, 40, _low_health, 1),
    # 2: berserk when hurt
    PriorityRule("berserk_when_low", MonsterAbility.BERSERK, 100, _low_health, 2),
    # 3: cowards flee
    PriorityRule("flee_when_very_low", MonsterAbility.FLEE, 30, _very_low_health, 3),
    # 4: finish weakened prey
    PriorityRule("devour_weak_target", MonsterAbility.DEVOUR, 100, _target_finishable, 4),
    # 5: opening moves
    PriorityRule("opening_backstab", MonsterAbility.BACKSTAB, 70, _first_round, 5),
    PriorityRule("opening_scream", MonsterAbility.HORRIFYING_SCREAM, 50, _first_round, 5),
    # 6: reinforcements
    PriorityRule("summon_when_low", MonsterAbility.SUMMON_MINIONS, 40, _low_health, 6),
    PriorityRule("early_call_for_help", MonsterAbility.CALL_FOR_HELP, 25, _early_rounds, 6),
    # 7: crowd control
    PriorityRule("petrify", MonsterAbility.PETRIFYING_GAZE, 25, _target_lacks(StatusEffect.STUNNED), 7),
    PriorityRule("silence_caster", MonsterAbility.SILENCE, 35, _target_can_be_silenced, 7),
    PriorityRule("blind", MonsterAbility.BLINDING_FLASH, 30, _target_lacks(StatusEffect.BLINDED), 7),
    # 8: damage over time
    PriorityRule("poison", MonsterAbility.VENOMOUS_BITE, 40, _target_lacks(StatusEffect.POISONED), 8),
    PriorityRule("bleed", MonsterAbility.BLEEDING_WOUND, 35, _target_lacks(StatusEffect.BLEEDING), 8),
    PriorityRule("burn", MonsterAbility.FIRE_BREATH, 30, _target_lacks(StatusEffect.BURNING), 8),
)

OFFENSIVE_POOL: tuple[MonsterAbility, ...] = (
    MonsterAbility.CRUSHING_BLOW,
    MonsterAbility.LIFE_DRAIN,
    MonsterAbility.MANA_DRAIN,
    MonsterAbility.MULTIATTACK,
    MonsterAbility.SOUL_REAP,
    MonsterAbility.ENRAGE,
)


class DecisionEngine:
    """Stateless ladder evaluator for automated combatants.

    Usage:
        engine = DecisionEngine(rules)
        decision = engine.decide(monster, hero, round_number, eligible, rng)
        if decision.is_basic_attack: ...
    """

    def __init__(
        self,
        rules: Optional[CombatRules] = None,
        ladder: Sequence[PriorityRule] = DEFAULT_LADDER,
        offensive_pool: Sequence[MonsterAbility] = OFFENSIVE_POOL
    ):
        self.rules = rules or CombatRules()
        self.ladder = tuple(ladder)
        self.offensive_pool = tuple(offensive_pool)

    def decide(
        self,
        actor: Combatant,
        target: Combatant,
        round_number: int,
        eligible: Sequence[MonsterAbility],
        rng: "CombatRNG"
    ) -> AbilityDecision:
        """Pick an ability (or a plain attack) for this turn.

        Randomness is drawn only for rules that apply, so an ability the
        actor lacks never consumes a roll. A rule with chance 100 fires
        without drawing.
        """
        eligible = tuple(eligible)
        if not eligible:
            return AbilityDecision(None, "no_abilities", "No abilities available")

        context = DecisionContext(actor, target, round_number, eligible, self.rules)

        for rule in self.ladder:
            if not rule.applies(context):
                continue
            if rule.chance >= 100 or rng.percent_check(rule.chance):
                return AbilityDecision(rule.ability, rule.name, f"Priority {rule.priority}: {rule.name}")

        pool = [ability for ability in eligible if ability in self.offensive_pool]
        if pool and rng.percent_check(self.rules.offensive_pool_chance):
            ability = rng.choice(pool)
            return AbilityDecision(ability, "offensive_pool", f"Random offensive pick among {len(pool)}")

        if rng.percent_check(self.rules.no_ability_chance):
            return AbilityDecision(None, "basic_attack", "Plain weapon attack")

        ability = rng.choice(eligible)
        return AbilityDecision(ability, "random_ability", f"Random pick among {len(eligible)} abilities")
