"""Combat resolution: proficiency, rolls, effects and orchestration."""

from .proficiency import ProficiencyLedger, ProficiencyRecord, Tier, TierProfile, TIER_PROFILES
from .roll_resolver import (
    DegreeOfSuccess,
    RollOutcome,
    RollResolver,
    ability_check_modifier,
    attack_modifier,
    monster_attack_modifier,
)
from .effect_catalog import AbilityDefinition, EffectCatalog, FamilyUnlock, parse_definition
from .effect_executor import EffectExecutor, EffectResult, NO_EFFECT, reduce_damage
from .combat_resolver import ActionResolution, CombatResolver
from .training import (
    TrainingOutcome,
    begin_new_cycle,
    grant_level_up_points,
    train_skill,
    trainable_skills,
    training_points_per_level,
)

__all__ = [
    "ProficiencyLedger",
    "ProficiencyRecord",
    "Tier",
    "TierProfile",
    "TIER_PROFILES",
    "DegreeOfSuccess",
    "RollOutcome",
    "RollResolver",
    "ability_check_modifier",
    "attack_modifier",
    "monster_attack_modifier",
    "AbilityDefinition",
    "EffectCatalog",
    "FamilyUnlock",
    "parse_definition",
    "EffectExecutor",
    "EffectResult",
    "NO_EFFECT",
    "reduce_damage",
    "ActionResolution",
    "CombatResolver",
    "TrainingOutcome",
    "begin_new_cycle",
    "grant_level_up_points",
    "train_skill",
    "trainable_skills",
    "training_points_per_level",
]
