"""
Proficiency tiers and the per-actor skill ledger.

Every (combatant, skill) pair has a tier from Untrained to Legendary and a
progress counter toward the next tier. Tiers feed the roll resolver (flat
modifier and fumble chance) and the effect executor (magnitude multiplier).
"""

from dataclasses import dataclass, replace
from enum import IntEnum
from typing import TYPE_CHECKING, Callable, Optional

from ..core.data.ability_ids import AbilityId, ClassAbility, MonsterAbility, Spell
from ..core.data.game_enums import Archetype, ARCHETYPE_NAMES

if TYPE_CHECKING:
    from ..core.data.data_structures import Combatant
    from ..core.rng import CombatRNG
    from .effect_catalog import EffectCatalog


class Tier(IntEnum):
    """Proficiency tiers, ordered from weakest to strongest."""
    UNTRAINED = 0
    POOR = 1
    AVERAGE = 2
    GOOD = 3
    SKILLED = 4
    EXPERT = 5
    SUPERB = 6
    MASTER = 7
    LEGENDARY = 8

    @property
    def profile(self) -> "TierProfile":
        return TIER_PROFILES[self]

    @property
    def display_name(self) -> str:
        return self.profile.display_name

    @property
    def modifier(self) -> int:
        return self.profile.modifier

    @property
    def multiplier(self) -> float:
        return self.profile.multiplier

    @property
    def fail_chance(self) -> int:
        return self.profile.fail_chance

    @property
    def threshold(self) -> Optional[int]:
        """Progress points needed to leave this tier (None at Legendary)."""
        return self.profile.points_to_advance

    @property
    def improve_chance(self) -> int:
        return self.profile.improve_chance

    @property
    def is_max(self) -> bool:
        return self is Tier.LEGENDARY

    def next(self) -> "Tier":
        """The tier above this one; Legendary returns itself."""
        if self.is_max:
            return self
        return Tier(self.value + 1)


@dataclass(frozen=True)
class TierProfile:
    """Numbers attached to one tier."""
    display_name: str
    modifier: int
    multiplier: float
    fail_chance: int
    points_to_advance: Optional[int]
    improve_chance: int


TIER_PROFILES: dict[Tier, TierProfile] = {
    Tier.UNTRAINED: TierProfile("Untrained", -2, 0.50, 25, 1, 15),
    Tier.POOR: TierProfile("Poor", -1, 0.70, 15, 2, 10),
    Tier.AVERAGE: TierProfile("Average", 0, 1.00, 10, 3, 7),
    Tier.GOOD: TierProfile("Good", 1, 1.15, 7, 4, 5),
    Tier.SKILLED: TierProfile("Skilled", 2, 1.30, 5, 5, 3),
    Tier.EXPERT: TierProfile("Expert", 3, 1.45, 3, 7, 2),
    Tier.SUPERB: TierProfile("Superb", 4, 1.60, 2, 10, 1),
    Tier.MASTER: TierProfile("Master", 5, 1.80, 1, 15, 0),
    Tier.LEGENDARY: TierProfile("Legendary", 7, 2.00, 0, None, 0),
}


@dataclass
class ProficiencyRecord:
    """One actor's standing in one skill."""
    tier: Tier = Tier.UNTRAINED
    progress: int = 0

    @property
    def points_needed(self) -> Optional[int]:
        """Points still missing before the next tier (None at Legendary)."""
        if self.tier.threshold is None:
            return None
        return max(0, self.tier.threshold - self.progress)


IntrinsicPredicate = Callable[["Combatant", AbilityId], bool]


class ProficiencyLedger:
    """Side table of proficiency records keyed by (combatant id, skill).

    Records are created lazily the first time a skill gains progress or is
    assigned a tier. Reading an unknown pair never creates a record and never
    raises: the default tier is Average for skills intrinsic to the actor's
    archetype and Untrained otherwise.

    Usage:
        ledger = ProficiencyLedger(catalog)
        tier = ledger.get_tier(hero, ClassAbility.POWER_STRIKE)
        leveled = ledger.add_progress(hero, ClassAbility.POWER_STRIKE, 1)
    """

    def __init__(
        self,
        catalog: Optional["EffectCatalog"] = None,
        intrinsic: Optional[IntrinsicPredicate] = None
    ):
        self.catalog = catalog
        self._intrinsic = intrinsic or self._default_intrinsic
        self._records: dict[tuple[str, AbilityId], ProficiencyRecord] = {}

    def _default_intrinsic(self, actor: "Combatant", skill: AbilityId) -> bool:
        """Basic attack for everyone, class skills for their classes, spells for their school."""
        if skill is ClassAbility.BASIC_ATTACK:
            return True
        if isinstance(skill, Spell):
            return ARCHETYPE_NAMES[actor.archetype].lower() == skill.school
        if isinstance(skill, MonsterAbility):
            return actor.archetype is Archetype.MONSTER
        if self.catalog is not None:
            definition = self.catalog.lookup(skill)
            if definition is not None:
                return actor.archetype in definition.eligible_archetypes
        return False

    def default_tier(self, actor: "Combatant", skill: AbilityId) -> Tier:
        return Tier.AVERAGE if self._intrinsic(actor, skill) else Tier.UNTRAINED

    def _key(self, actor: "Combatant", skill: AbilityId) -> tuple[str, AbilityId]:
        return (actor.combatant_id, skill)

    def _ensure_record(self, actor: "Combatant", skill: AbilityId) -> ProficiencyRecord:
        key = self._key(actor, skill)
        record = self._records.get(key)
        if record is None:
            record = ProficiencyRecord(tier=self.default_tier(actor, skill))
            self._records[key] = record
        return record

    def get_tier(self, actor: "Combatant", skill: AbilityId) -> Tier:
        """Stored tier, or the default for this actor and skill."""
        record = self._records.get(self._key(actor, skill))
        if record is None:
            return self.default_tier(actor, skill)
        return record.tier

    def get_progress(self, actor: "Combatant", skill: AbilityId) -> int:
        record = self._records.get(self._key(actor, skill))
        return record.progress if record else 0

    def record(self, actor: "Combatant", skill: AbilityId) -> ProficiencyRecord:
        """Snapshot copy of the record, defaults included."""
        record = self._records.get(self._key(actor, skill))
        if record is None:
            return ProficiencyRecord(tier=self.default_tier(actor, skill))
        return replace(record)

    def add_progress(self, actor: "Combatant", skill: AbilityId, points: int) -> bool:
        """Add progress points, advancing at most one tier.

        When progress reaches the current tier's threshold the tier goes up
        by exactly one and the threshold is subtracted. Any excess beyond that
        one threshold stays banked for the next call.

        Returns:
            True if the tier advanced during this call
        """
        if points <= 0:
            return False

        record = self._ensure_record(actor, skill)
        if record.tier.is_max:
            return False

        record.progress += points
        threshold = record.tier.threshold
        if record.progress < threshold:
            return False

        record.progress -= threshold
        record.tier = record.tier.next()
        if record.tier.is_max:
            # Legendary admits no further progress
            record.progress = 0
        return True

    def try_improve_from_use(self, actor: "Combatant", skill: AbilityId, rng: "CombatRNG") -> bool:
        """Roll the passive improvement chance for a skill that was just used.

        Tiers with a zero improvement chance (Master and Legendary) return
        False without drawing.
        """
        chance = self.get_tier(actor, skill).improve_chance
        if chance <= 0:
            return False
        if not rng.percent_check(chance):
            return False
        return self.add_progress(actor, skill, 1)

    def set_tier(self, actor: "Combatant", skill: AbilityId, tier: Tier) -> None:
        """Assign a tier directly, clearing progress."""
        record = self._ensure_record(actor, skill)
        record.tier = tier
        record.progress = 0

    def skills_for(self, actor: "Combatant") -> dict[AbilityId, ProficiencyRecord]:
        """Copies of every stored record belonging to an actor."""
        return {
            skill: replace(record)
            for (combatant_id, skill), record in self._records.items()
            if combatant_id == actor.combatant_id
        }

    def reset_actor(self, actor: "Combatant") -> int:
        """Forget every record of an actor (new cycle).

        Returns:
            Number of records removed
        """
        keys = [key for key in self._records if key[0] == actor.combatant_id]
        for key in keys:
            del self._records[key]
        return len(keys)

    def __len__(self) -> int:
        return len(self._records)
