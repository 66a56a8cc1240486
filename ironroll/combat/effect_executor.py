"""
Effect execution: turning a resolved roll into concrete numbers.

The executor reads an AbilityDefinition, the user's statistics, the
proficiency tier and the roll outcome, and produces an immutable
EffectResult. It never mutates combatants; the CombatResolver applies
results afterwards.
"""

from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

from ..core.data.ability_ids import AbilityId
from ..core.data.data_structures import Combatant, StatusInfliction
from ..core.data.game_enums import Archetype, EffectKind, Scaling, SpecialRule
from .roll_resolver import RollOutcome, RollResolver

if TYPE_CHECKING:
    from ..core.rng import CombatRNG
    from .effect_catalog import AbilityDefinition
    from .proficiency import Tier


@dataclass(frozen=True)
class EffectResult:
    """Concrete consequence of one ability use."""
    ability: Optional[AbilityId] = None
    direct_damage: int = 0
    healing: int = 0
    status: Optional[StatusInfliction] = None
    status_on_self: bool = False
    life_steal: int = 0
    mana_drain: int = 0
    attack_bonus: int = 0
    defense_bonus: int = 0
    bonus_duration: int = 0
    summon_count: int = 0
    flee: bool = False
    extra_attacks: int = 0
    skip_normal_attack: bool = False
    avoid_all_damage: bool = False
    reflect_percent: int = 0
    on_death_damage: int = 0
    multi_target: bool = False
    finisher: bool = False
    missed: bool = False


NO_EFFECT = EffectResult()


def reduce_damage(damage: int, reduction_percent: int) -> int:
    """Apply a percentage reduction without pushing positive damage below 1."""
    if damage <= 0:
        return 0
    reduced = damage - damage * reduction_percent // 100
    return max(1, reduced)


class EffectExecutor:
    """Computes EffectResults from definitions, stats, tiers and rolls."""

    def __init__(self, resolver: Optional[RollResolver] = None):
        self.resolver = resolver or RollResolver()

    # Basic attack

    def attack_power(self, attacker: Combatant, rng: "CombatRNG") -> int:
        """Raw attack power before the defender absorbs any of it."""
        power = attacker.strength + attacker.attack_bonus
        if attacker.archetype is Archetype.MONSTER:
            return power + attacker.weapon_power + rng.randint(0, 9)
        if attacker.weapon_power > 0:
            power += attacker.weapon_power + rng.randint(0, attacker.weapon_power)
        return power + rng.randint(1, 20)

    def defense_power(self, defender: Combatant, rng: "CombatRNG") -> int:
        """Absorption drawn from defence and armour."""
        defence = defender.defence + defender.defense_bonus
        absorbed = defence + rng.randint(0, max(1, defence // 8) - 1)
        if defender.armor_power > 0:
            absorbed += rng.randint(0, defender.armor_power)
        return absorbed

    def basic_attack_damage(self, attacker: Combatant, defender: Combatant, rng: "CombatRNG") -> int:
        """Weapon damage after absorption, never below 1."""
        return max(1, self.attack_power(attacker, rng) - self.defense_power(defender, rng))

    def execute_basic_attack(
        self,
        attacker: Combatant,
        defender: Combatant,
        outcome: RollOutcome,
        rng: "CombatRNG"
    ) -> EffectResult:
        if not outcome.success:
            return EffectResult(missed=True)
        base = self.basic_attack_damage(attacker, defender, rng)
        multiplier = self.resolver.degree_multiplier(outcome.degree)
        return EffectResult(direct_damage=max(1, int(base * multiplier)))

    # Abilities

    def execute(
        self,
        definition: Optional["AbilityDefinition"],
        user: Combatant,
        target: Optional[Combatant],
        tier: "Tier",
        rng: "CombatRNG",
        outcome: Optional[RollOutcome] = None
    ) -> EffectResult:
        """Compute the effect of an ability.

        Args:
            definition: Catalog entry, or None for an uncatalogued ability
            user: The combatant using the ability
            target: The opposing combatant, if any
            tier: The user's proficiency tier in the ability
            rng: Random source
            outcome: The roll, or None for abilities that skip the roll

        Returns:
            EffectResult; empty for None definitions, zero-effect on a miss
        """
        if definition is None:
            return NO_EFFECT

        if outcome is not None and not outcome.success:
            return EffectResult(
                ability=definition.ability_id,
                skip_normal_attack=definition.skip_normal_attack,
                missed=True,
            )

        degree_mult = self.resolver.degree_multiplier(outcome.degree) if outcome else 1.0
        kind = definition.kind
        values: dict = {
            "ability": definition.ability_id,
            "skip_normal_attack": definition.skip_normal_attack,
            "multi_target": definition.multi_target,
            "reflect_percent": definition.reflect_percent,
        }

        if definition.extra_attacks is not None:
            values["extra_attacks"] = rng.randint(definition.extra_attacks.low, definition.extra_attacks.high)
        if definition.summon_count is not None:
            values["summon_count"] = rng.randint(definition.summon_count.low, definition.summon_count.high)
        if definition.flee:
            values["flee"] = True

        if kind is EffectKind.WEAPON and target is not None:
            self._weapon_effect(definition, user, target, tier, degree_mult, rng, values)
        elif kind in (EffectKind.DAMAGE, EffectKind.DEBUFF) and definition.magnitude is not None:
            self._damage_effect(definition, user, target, tier, degree_mult, rng, values)
        elif kind is EffectKind.DRAIN and target is not None:
            self._drain_effect(definition, user, target, rng, values)
        elif kind is EffectKind.HEAL and definition.magnitude is not None:
            values["healing"] = self._scaled_heal(definition, definition.magnitude, user, tier, rng)

        if definition.healing is not None and kind is not EffectKind.HEAL:
            values["healing"] = self._scaled_heal(definition, definition.healing, user, tier, rng)

        if definition.attack_bonus or definition.defense_bonus:
            values["attack_bonus"] = self._scaled_bonus(definition, definition.attack_bonus, user, tier)
            values["defense_bonus"] = self._scaled_bonus(definition, definition.defense_bonus, user, tier)
            values["bonus_duration"] = definition.bonus_duration

        special = definition.special
        if special is SpecialRule.PHASE:
            values["avoid_all_damage"] = rng.percent_check(25)
        elif special is SpecialRule.EXPLOSION:
            values["on_death_damage"] = user.max_hp // 2
        elif special is SpecialRule.ARMOR_HARDEN:
            values["defense_bonus"] = user.level // 2
            values["bonus_duration"] = definition.bonus_duration

        status = self._roll_status(definition.status, rng)
        if status is not None:
            values["status"] = status
            values["status_on_self"] = definition.is_self_targeted

        return EffectResult(**values)

    def _roll_status(self, status: Optional[StatusInfliction], rng: "CombatRNG") -> Optional[StatusInfliction]:
        if status is None:
            return None
        if status.chance >= 100:
            return status
        return status if rng.percent_check(status.chance) else None

    def _weapon_effect(
        self,
        definition: "AbilityDefinition",
        user: Combatant,
        target: Combatant,
        tier: "Tier",
        degree_mult: float,
        rng: "CombatRNG",
        values: dict
    ) -> None:
        special = definition.special
        power = definition.power

        if special is SpecialRule.DEVOUR and target.hp < target.max_hp // 5:
            self._finish(target, values)
            return
        if special is SpecialRule.SOUL_REAP and rng.percent_check(5):
            self._finish(target, values)
            return
        if special is SpecialRule.BERSERK:
            if user.hp < user.max_hp // 3:
                values["extra_attacks"] = values.get("extra_attacks", 0) + 1
            else:
                power = 1.0

        base = self.basic_attack_damage(user, target, rng)
        damage = max(1, int(base * power * tier.multiplier * degree_mult))
        values["direct_damage"] = damage
        if definition.life_steal_percent:
            values["life_steal"] = min(damage, damage * definition.life_steal_percent // 100)

    def _damage_effect(
        self,
        definition: "AbilityDefinition",
        user: Combatant,
        target: Optional[Combatant],
        tier: "Tier",
        degree_mult: float,
        rng: "CombatRNG",
        values: dict
    ) -> None:
        special = definition.special
        if special is SpecialRule.ASSASSINATE and target is not None and target.hp < target.max_hp // 5:
            self._finish(target, values)
            return

        magnitude = definition.magnitude
        draw = rng.randint(magnitude.low, magnitude.high)
        scaled = self._scale_draw(definition, draw, user, rng)
        damage = int(scaled * tier.multiplier * degree_mult)

        if special is SpecialRule.EXECUTE and target is not None and target.hp * 10 < target.max_hp * 3:
            damage *= 2

        values["direct_damage"] = max(1, damage)
        if definition.life_steal_percent:
            values["life_steal"] = min(values["direct_damage"], values["direct_damage"] * definition.life_steal_percent // 100)

    def _drain_effect(
        self,
        definition: "AbilityDefinition",
        user: Combatant,
        target: Combatant,
        rng: "CombatRNG",
        values: dict
    ) -> None:
        magnitude = definition.magnitude
        draw = rng.randint(magnitude.low, magnitude.high) if magnitude else 0
        amount = user.level * 5 + draw
        values["mana_drain"] = max(0, min(target.mana, amount))

    @staticmethod
    def _finish(target: Combatant, values: dict) -> None:
        values["direct_damage"] = max(0, target.hp)
        values["finisher"] = True

    def _scale_draw(self, definition: "AbilityDefinition", draw: int, user: Combatant, rng: "CombatRNG") -> float:
        scaling = definition.scaling
        if scaling is Scaling.BREATH:
            return int((user.level * 3 + user.strength // 2) * definition.power) + draw
        if scaling is Scaling.CLASS_ABILITY:
            return draw * self._class_scale(definition, user) * rng.uniform(0.9, 1.1)
        if scaling is Scaling.SPELL:
            return draw * (1 + user.level * 0.03)
        if scaling is Scaling.SPELL_HEAL:
            return draw * (1 + user.level * 0.02)
        return draw * definition.power

    @staticmethod
    def _class_scale(definition: "AbilityDefinition", user: Combatant) -> float:
        level_scale = 1 + user.level * 0.02
        if definition.kind is EffectKind.DAMAGE:
            return level_scale * (1 + user.strength * 0.003)
        if definition.kind is EffectKind.HEAL:
            return level_scale * (1 + user.constitution * 0.003)
        if definition.kind is EffectKind.DEFENSE:
            return level_scale * (1 + user.constitution * 0.002)
        return level_scale

    def _scaled_heal(
        self,
        definition: "AbilityDefinition",
        magnitude,
        user: Combatant,
        tier: "Tier",
        rng: "CombatRNG"
    ) -> int:
        if definition.scaling is Scaling.MONSTER_HEAL:
            base = max(magnitude.low, user.max_hp // definition.max_hp_divisor)
            return int(base * tier.multiplier)
        draw = rng.randint(magnitude.low, magnitude.high)
        scaled = self._scale_draw(definition, draw, user, rng)
        return max(1, int(scaled * tier.multiplier))

    @staticmethod
    def _scaled_bonus(definition: "AbilityDefinition", base: int, user: Combatant, tier: "Tier") -> int:
        if not base:
            return 0
        if definition.scaling is Scaling.CLASS_ABILITY:
            return int(base * (1 + user.level * 0.02) * tier.multiplier)
        return int((base + int(user.level * definition.bonus_per_level)) * tier.multiplier)
