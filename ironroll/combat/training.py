"""
Training-point economy around the proficiency ledger.

Characters earn training points on level up and spend them one at a time
to add progress to a skill. A new cycle wipes every record of an actor.
"""
from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

from ..core.data.ability_ids import AbilityId, ClassAbility
from ..core.data.data_structures import Combatant
from ..core.data.game_enums import Archetype, SPELLCASTER_ARCHETYPES
from ..core.events import LogMessage, ProficiencyImproved
from .proficiency import ProficiencyLedger, Tier

if TYPE_CHECKING:
    from ..core.events import EventManager
    from .effect_catalog import EffectCatalog


BASE_POINTS_PER_LEVEL = 3

CLASS_TRAINING_BONUS = {
    Archetype.SAGE: 3,
    Archetype.MAGICIAN: 2,
    Archetype.CLERIC: 2,
    Archetype.ALCHEMIST: 2,
    Archetype.BARD: 1,
    Archetype.RANGER: 1,
    Archetype.ASSASSIN: 1,
    Archetype.PALADIN: 1,
}


def training_points_per_level(actor: Combatant) -> int:
    """Points earned per level: base, class bonus and one per 40 INT + WIS."""
    class_bonus = CLASS_TRAINING_BONUS.get(actor.archetype, 0)
    stat_bonus = (actor.intelligence + actor.wisdom) // 40
    return BASE_POINTS_PER_LEVEL + class_bonus + stat_bonus


def grant_level_up_points(actor: Combatant) -> int:
    """Add one level's worth of training points and return the amount."""
    points = training_points_per_level(actor)
    actor.training_points += points
    return points


@dataclass(frozen=True)
class TrainingOutcome:
    """Result of spending (or failing to spend) one training point."""
    skill: AbilityId
    trained: bool
    tier: Tier
    progress: int
    points_needed: Optional[int]
    leveled_up: bool = False
    reason: str = ""

    def describe(self) -> str:
        if not self.trained:
            return self.reason
        if self.leveled_up:
            return f"{self.skill.value} is now {self.tier.display_name}!"
        return f"Training {self.skill.value}... Progress: {self.progress}/{self.tier.threshold}"


def train_skill(
    actor: Combatant,
    skill: AbilityId,
    ledger: ProficiencyLedger,
    event_manager: Optional["EventManager"] = None
) -> TrainingOutcome:
    """Spend one training point on a skill.

    Refused, with nothing spent, when the skill is already Legendary or the
    actor has no points left.
    """
    record = ledger.record(actor, skill)

    if record.tier.is_max:
        return TrainingOutcome(
            skill, False, record.tier, record.progress, None,
            reason=f"{skill.value} is already at Legendary level!"
        )
    if actor.training_points <= 0:
        return TrainingOutcome(
            skill, False, record.tier, record.progress, record.points_needed,
            reason="You don't have any training points!"
        )

    actor.training_points -= 1
    leveled_up = ledger.add_progress(actor, skill, 1)
    record = ledger.record(actor, skill)
    outcome = TrainingOutcome(
        skill, True, record.tier, record.progress, record.points_needed, leveled_up
    )

    if event_manager is not None:
        event_manager.publish(
            LogMessage(
                round_number=0,
                message=f"{actor.name}: {outcome.describe()}",
                category="TRAINING",
                level="INFO",
                source="Training"
            ),
            source="Training"
        )
        if leveled_up:
            event_manager.publish(
                ProficiencyImproved(
                    round_number=0,
                    combatant_id=actor.combatant_id,
                    skill=skill,
                    new_tier=record.tier,
                    from_use=False,
                ),
                source="Training"
            )
    return outcome


def trainable_skills(actor: Combatant, catalog: "EffectCatalog") -> list[AbilityId]:
    """Basic attack, reachable class abilities and, for casters, their spells."""
    skills: list[AbilityId] = [ClassAbility.BASIC_ATTACK]
    for definition in catalog.abilities_for_class(actor.archetype, actor.level):
        if definition.ability_id not in skills:
            skills.append(definition.ability_id)
    if actor.archetype in SPELLCASTER_ARCHETYPES:
        skills.extend(definition.ability_id for definition in catalog.spells_for(actor.archetype, actor.level))
    return skills


def begin_new_cycle(actor: Combatant, ledger: ProficiencyLedger) -> int:
    """Forget all of an actor's proficiency; returns the number of records cleared."""
    return ledger.reset_actor(actor)
