"""
Combat resolution: one action from choice to applied consequences.

This module sequences a single action. An automated combatant's ability is
picked by the decision engine; a player-directed actor names one. The
action is then checked for refusal, rolled, executed and applied back onto
the combatants, and the user's proficiency gets its passive improvement
roll. Every step is narrated through LogMessage events and reported through
domain events on the event manager.
"""
from dataclasses import replace
from typing import TYPE_CHECKING, Optional, Sequence

import numpy as np

from ..ai.decision_engine import AbilityDecision, DecisionEngine
from ..core.config import CombatRules
from ..core.data.ability_ids import AbilityId, ClassAbility, MonsterAbility
from ..core.data.data_structures import Combatant
from ..core.data.game_enums import Archetype, EffectKind, ResourceType, StatusEffect
from ..core.events import (
    AbilityChosen,
    ActionRefused,
    CombatantDefeated,
    EffectResolved,
    LogMessage,
    ProficiencyImproved,
    RollResolved,
)
from .effect_catalog import AbilityDefinition, EffectCatalog
from .effect_executor import EffectExecutor, EffectResult, reduce_damage
from .proficiency import ProficiencyLedger, Tier
from .roll_resolver import (
    RollOutcome,
    RollResolver,
    ability_check_modifier,
    attack_modifier,
    monster_attack_modifier,
)

if TYPE_CHECKING:
    from ..core.events import EventManager
    from ..core.rng import CombatRNG


class ActionResolution:
    """Result of one resolved action."""

    def __init__(self, actor: Combatant, ability: Optional[AbilityId] = None):
        self.actor = actor
        self.ability = ability  # None for a plain weapon attack
        self.decision: Optional[AbilityDecision] = None
        self.refused: bool = False
        self.reason: str = ""
        self.rolls: list[RollOutcome] = []
        self.effects: list[EffectResult] = []
        self.targets_hit: list[Combatant] = []
        self.damage_dealt: dict[str, int] = {}
        self.healing_done: int = 0
        self.mana_drained: dict[str, int] = {}
        self.statuses_inflicted: dict[str, list[StatusEffect]] = {}
        # Bonuses stay on the actor until the turn loop removes them after bonus_duration rounds
        self.attack_bonus_gained: int = 0
        self.defense_bonus_gained: int = 0
        self.bonus_duration: int = 0
        self.defeated_targets: list[str] = []
        self.cost_paid: int = 0
        self.improved: bool = False

    @property
    def succeeded(self) -> bool:
        return any(not effect.missed for effect in self.effects)

    @property
    def total_damage(self) -> int:
        return sum(self.damage_dealt.values())

    @property
    def flee(self) -> bool:
        return any(effect.flee for effect in self.effects)

    @property
    def summon_count(self) -> int:
        return sum(effect.summon_count for effect in self.effects)

    def __repr__(self) -> str:
        return (f"ActionResolution({self.actor.name!r}, {self.ability}, "
                f"refused={self.refused}, damage={self.total_damage})")


class CombatResolver:
    """Orchestrates decision, roll, effect and application for one action.

    Holds no encounter state of its own; the caller's turn loop owns the
    combatants and decides when to call.

    Usage:
        resolver = CombatResolver(catalog, ledger, event_manager=events)
        resolution = resolver.resolve_action(hero, Spell.MAGICIAN_FIREBALL, [orc], rng, 3)
        resolution = resolver.resolve_monster_turn(orc, hero, 3, rng)
    """

    def __init__(
        self,
        catalog: EffectCatalog,
        ledger: ProficiencyLedger,
        roll_resolver: Optional[RollResolver] = None,
        executor: Optional[EffectExecutor] = None,
        decision_engine: Optional[DecisionEngine] = None,
        event_manager: Optional["EventManager"] = None,
        rules: Optional[CombatRules] = None
    ):
        self.rules = rules or CombatRules()
        self.catalog = catalog
        self.ledger = ledger
        self.roll_resolver = roll_resolver or RollResolver(self.rules)
        self.executor = executor or EffectExecutor(self.roll_resolver)
        self.decision_engine = decision_engine or DecisionEngine(self.rules)
        self.event_manager = event_manager
        self._round_number = 0

    def _emit_log(self, message: str, category: str = "BATTLE", level: str = "INFO") -> None:
        """Emit a log message event."""
        self._publish(
            LogMessage(
                round_number=self._round_number,
                message=message,
                category=category,
                level=level,
                source="CombatResolver"
            )
        )

    def _publish(self, event) -> None:
        if self.event_manager is not None:
            self.event_manager.publish(event, source="CombatResolver")

    # Automated combatants

    def resolve_monster_turn(
        self,
        monster: Combatant,
        target: Combatant,
        round_number: int,
        rng: "CombatRNG"
    ) -> ActionResolution:
        """Pick and resolve an automated combatant's action for this round.

        Abilities that do not replace the normal attack are followed by a
        basic attack, and extra attacks are resolved as further basic attacks
        while the target stands.
        """
        self._round_number = round_number
        eligible = self.catalog.eligible_for(monster)
        decision = self.decision_engine.decide(monster, target, round_number, eligible, rng)
        self._emit_log(f"{monster.name} decides: {decision.reasoning or decision.rule_name}", "AI", "DEBUG")
        self._publish(AbilityChosen(
            round_number=round_number,
            combatant_id=monster.combatant_id,
            ability=decision.ability,
            rule_name=decision.rule_name,
        ))

        resolution = ActionResolution(monster, decision.ability)
        resolution.decision = decision

        definition = self.catalog.lookup(decision.ability) if decision.ability else None
        if definition is None:
            if decision.ability is not None:
                self._emit_log(f"{monster.name} tries an unknown ability: {decision.ability.value}", "WARNING", "WARNING")
            self._basic_attack(monster, target, resolution, rng)
            return resolution

        tier = self.ledger.get_tier(monster, decision.ability)
        outcome = None
        if not definition.is_self_targeted:
            outcome = self._record_roll(
                monster,
                decision.ability,
                self.roll_resolver.roll(
                    monster_attack_modifier(monster),
                    self.roll_resolver.defender_difficulty(target),
                    rng
                ),
                resolution
            )

        effect = self.executor.execute(definition, monster, target, tier, rng, outcome)
        self._announce_effect(monster, definition, effect)
        if definition.is_self_targeted:
            self._apply(monster, [(monster, _without_damage(effect))], resolution)
        else:
            self._apply(monster, [(target, effect)], resolution)

        if definition.kind is not EffectKind.WEAPON and not effect.skip_normal_attack and not effect.flee:
            self._basic_attack(monster, target, resolution, rng)

        self._extra_attacks(monster, target, effect.extra_attacks, resolution, rng)
        return resolution

    def _basic_attack(
        self,
        attacker: Combatant,
        defender: Combatant,
        resolution: ActionResolution,
        rng: "CombatRNG"
    ) -> EffectResult:
        if not defender.is_alive:
            return EffectResult(missed=True)

        if attacker.archetype is Archetype.MONSTER:
            modifier = monster_attack_modifier(attacker)
        else:
            modifier = attack_modifier(attacker, self.ledger.get_tier(attacker, ClassAbility.BASIC_ATTACK))

        outcome = self._record_roll(
            attacker,
            ClassAbility.BASIC_ATTACK,
            self.roll_resolver.roll(modifier, self.roll_resolver.defender_difficulty(defender), rng),
            resolution
        )
        effect = self.executor.execute_basic_attack(attacker, defender, outcome, rng)
        if effect.missed:
            self._emit_log(f"{attacker.name} misses {defender.name}.")
        self._apply(attacker, [(defender, effect)], resolution)
        return effect

    def _extra_attacks(
        self,
        attacker: Combatant,
        defender: Combatant,
        count: int,
        resolution: ActionResolution,
        rng: "CombatRNG"
    ) -> None:
        for _ in range(count):
            if not defender.is_alive:
                break
            self._emit_log(f"{attacker.name} attacks again!")
            self._basic_attack(attacker, defender, resolution, rng)

    # Player-directed actions

    def resolve_action(
        self,
        actor: Combatant,
        ability_id: Optional[AbilityId],
        targets: Sequence[Combatant],
        rng: "CombatRNG",
        round_number: int = 0
    ) -> ActionResolution:
        """Resolve an ability, spell or basic attack chosen by the caller.

        Refusals leave every combatant untouched and draw nothing from the
        random source. Mana and stamina are spent once the action passes its
        checks, even if the roll then fails.

        Args:
            actor: The combatant acting
            ability_id: Skill to use; None or an uncatalogued id does nothing
            targets: Opponents, primary target first
            rng: Random source
            round_number: Current round, for events

        Returns:
            ActionResolution describing what happened
        """
        self._round_number = round_number
        resolution = ActionResolution(actor, ability_id)

        definition = self.catalog.lookup(ability_id) if ability_id is not None else None
        if definition is None:
            resolution.reason = "No effect."
            self._emit_log(f"{actor.name} does nothing useful.", "BATTLE", "DEBUG")
            return resolution

        reason = self._refusal_reason(actor, definition, targets)
        if reason:
            return self._refuse(actor, ability_id, reason, resolution)

        self._pay_cost(actor, definition, resolution)
        self._emit_log(f"{actor.name} uses {definition.name}.")
        self._publish(AbilityChosen(
            round_number=round_number,
            combatant_id=actor.combatant_id,
            ability=ability_id,
            rule_name="player",
        ))

        tier = self.ledger.get_tier(actor, ability_id)
        living = [target for target in targets if target.is_alive]
        primary = living[0] if living else None
        outcome = self._player_roll(actor, definition, primary, tier, rng, resolution)

        if ability_id is ClassAbility.BASIC_ATTACK:
            effect = self.executor.execute_basic_attack(actor, primary, outcome, rng)
            hits = [(primary, effect)]
        elif definition.is_self_targeted:
            effect = self.executor.execute(definition, actor, primary, tier, rng, outcome)
            hits = [(actor, _without_damage(effect))]
        else:
            # Magnitude is computed once and shared by every target hit
            effect = self.executor.execute(definition, actor, primary, tier, rng, outcome)
            affected = living if definition.multi_target else [primary]
            hits = [(target, effect) for target in affected]

        self._announce_effect(actor, definition, effect)
        self._apply(actor, hits, resolution)

        if primary is not None:
            self._extra_attacks(actor, primary, effect.extra_attacks, resolution, rng)

        self._improve_from_use(actor, ability_id, rng, resolution)
        return resolution

    def _refusal_reason(
        self,
        actor: Combatant,
        definition: AbilityDefinition,
        targets: Sequence[Combatant]
    ) -> str:
        ability_id = definition.ability_id
        if isinstance(ability_id, MonsterAbility):
            if ability_id not in self.catalog.eligible_for(actor):
                return f"{actor.name} cannot use {definition.name}."
        elif actor.archetype not in definition.eligible_archetypes:
            return f"{actor.name} cannot use {definition.name}."

        if actor.level < definition.level_required:
            return f"{definition.name} requires level {definition.level_required}."

        if definition.is_spell and any(
            actor.has_status(effect) for effect in StatusEffect if effect.prevents_spellcasting
        ):
            return f"{actor.name} cannot cast spells right now."

        if definition.resource is ResourceType.MANA and actor.mana < definition.cost:
            return f"Not enough mana for {definition.name} ({actor.mana}/{definition.cost})."
        if definition.resource is ResourceType.STAMINA and actor.stamina < definition.cost:
            return f"Not enough stamina for {definition.name} ({actor.stamina}/{definition.cost})."

        if not definition.is_self_targeted and not any(target.is_alive for target in targets):
            return f"{definition.name} needs a target."
        return ""

    def _refuse(
        self,
        actor: Combatant,
        ability_id: AbilityId,
        reason: str,
        resolution: ActionResolution
    ) -> ActionResolution:
        resolution.refused = True
        resolution.reason = reason
        self._emit_log(reason, "BATTLE", "WARNING")
        self._publish(ActionRefused(
            round_number=self._round_number,
            combatant_id=actor.combatant_id,
            ability=ability_id,
            reason=reason,
        ))
        return resolution

    @staticmethod
    def _pay_cost(actor: Combatant, definition: AbilityDefinition, resolution: ActionResolution) -> None:
        if definition.resource is ResourceType.MANA:
            actor.mana -= definition.cost
        elif definition.resource is ResourceType.STAMINA:
            actor.stamina -= definition.cost
        else:
            return
        resolution.cost_paid = definition.cost

    def _player_roll(
        self,
        actor: Combatant,
        definition: AbilityDefinition,
        target: Optional[Combatant],
        tier: Tier,
        rng: "CombatRNG",
        resolution: ActionResolution
    ) -> Optional[RollOutcome]:
        """Roll for the action, or None when it lands without a roll.

        Attack rolls go straight to the die; spells and ability checks pass
        the tier's fumble gate first.
        """
        ability_id = definition.ability_id
        if definition.is_self_targeted:
            return None

        if isinstance(ability_id, MonsterAbility) or actor.archetype is Archetype.MONSTER:
            modifier = monster_attack_modifier(actor)
            outcome = self.roll_resolver.roll(modifier, self.roll_resolver.defender_difficulty(target), rng)
        elif definition.kind is EffectKind.WEAPON:
            modifier = attack_modifier(actor, tier)
            outcome = self.roll_resolver.roll(modifier, self.roll_resolver.defender_difficulty(target), rng)
        elif definition.is_spell:
            modifier = ability_check_modifier(actor, ability_id, tier, definition)
            outcome = self.roll_resolver.resolve(modifier, self.roll_resolver.spell_difficulty(ability_id), tier, rng)
        else:
            modifier = ability_check_modifier(actor, ability_id, tier, definition)
            outcome = self.roll_resolver.resolve(modifier, self.roll_resolver.ability_difficulty(target), tier, rng)

        return self._record_roll(actor, ability_id, outcome, resolution)

    def _record_roll(
        self,
        actor: Combatant,
        ability_id: AbilityId,
        outcome: RollOutcome,
        resolution: ActionResolution
    ) -> RollOutcome:
        resolution.rolls.append(outcome)
        self._publish(RollResolved(
            round_number=self._round_number,
            combatant_id=actor.combatant_id,
            ability=ability_id,
            outcome=outcome,
        ))
        if outcome.forced_failure:
            self._emit_log(f"{actor.name}: {outcome.reason}")
        elif outcome.critical_success:
            self._emit_log(f"{actor.name} rolls a critical! {outcome.describe()}")
        else:
            self._emit_log(f"{actor.name} {outcome.describe()}", "BATTLE", "DEBUG")
        return outcome

    def _announce_effect(self, actor: Combatant, definition: AbilityDefinition, effect: EffectResult) -> None:
        if effect.missed:
            self._emit_log(f"{actor.name}'s {definition.name} fails.")
            return
        if effect.finisher:
            self._emit_log(f"{actor.name}'s {definition.name} is a finishing blow!")
        if effect.flee:
            self._emit_log(f"{actor.name} attempts to flee!")
        if effect.summon_count:
            self._emit_log(f"{actor.name} calls {effect.summon_count} reinforcements!")
        if effect.avoid_all_damage:
            self._emit_log(f"{actor.name} phases out of reality.")

    # Application

    def _apply(
        self,
        actor: Combatant,
        hits: list[tuple[Combatant, EffectResult]],
        resolution: ActionResolution
    ) -> None:
        """Write effect results back onto the combatants using vectorized HP updates."""
        if not hits:
            return
        targets = [target for target, _ in hits]
        effects = [effect for _, effect in hits]
        # A multi-target effect is one result shared by every target
        distinct = list({id(effect): effect for effect in effects}.values())
        resolution.effects.extend(distinct)

        raw_damage = np.array([effect.direct_damage for effect in effects], dtype=np.int64)
        defending = np.array(
            [target.has_status(StatusEffect.DEFENDING) and not effect.finisher for target, effect in hits],
            dtype=bool
        )
        pct = self.rules.defending_reduction_percent
        reduced = np.array([reduce_damage(int(damage), pct) for damage in raw_damage], dtype=np.int64)
        damages = np.where(defending & (raw_damage > 0), reduced, raw_damage)

        current_hps = np.array([target.hp for target in targets], dtype=np.int64)
        new_hps = np.maximum(0, current_hps - damages)
        dealt = current_hps - new_hps
        defeated_mask = (new_hps <= 0) & (current_hps > 0)

        for idx in np.where(damages > 0)[0]:
            target = targets[idx]
            target.hp = int(new_hps[idx])
            if target not in resolution.targets_hit:
                resolution.targets_hit.append(target)
            resolution.damage_dealt[target.combatant_id] = (
                resolution.damage_dealt.get(target.combatant_id, 0) + int(dealt[idx])
            )
            self._emit_log(f"{actor.name} hits {target.name} for {int(dealt[idx])} damage.")

        # Life steal only returns what was actually taken
        life_steal = int(np.sum(np.minimum(
            np.array([effect.life_steal for effect in effects], dtype=np.int64), dealt
        )))
        healing = sum(effect.healing for effect in distinct) + life_steal
        if healing > 0:
            restored = max(0, min(healing, actor.max_hp - actor.hp))
            actor.hp += restored
            resolution.healing_done += restored
            self._emit_log(f"{actor.name} recovers {restored} HP.")

        for target, effect in hits:
            self._apply_to_target(actor, target, effect, resolution)
        for effect in distinct:
            self._apply_to_user(actor, effect, resolution)

        for target, effect in hits:
            self._publish(EffectResolved(
                round_number=self._round_number,
                combatant_id=actor.combatant_id,
                ability=resolution.ability,
                result=effect,
                target_ids=(target.combatant_id,),
            ))

        for idx in np.where(defeated_mask)[0]:
            target = targets[idx]
            resolution.defeated_targets.append(target.combatant_id)
            self._emit_log(f"{target.name} has been defeated!")
            self._publish(CombatantDefeated(
                round_number=self._round_number,
                combatant_id=target.combatant_id,
                name=target.name,
                defeated_by=actor.combatant_id,
            ))

    def _apply_to_target(
        self,
        actor: Combatant,
        target: Combatant,
        effect: EffectResult,
        resolution: ActionResolution
    ) -> None:
        if effect.mana_drain > 0:
            drained = min(target.mana, effect.mana_drain)
            target.mana -= drained
            actor.mana = min(actor.max_mana, actor.mana + drained)
            resolution.mana_drained[target.combatant_id] = (
                resolution.mana_drained.get(target.combatant_id, 0) + drained
            )
            self._emit_log(f"{actor.name} drains {drained} mana from {target.name}.")

        if effect.status is not None and not effect.status_on_self:
            self._inflict(target, effect, resolution)

    def _apply_to_user(self, actor: Combatant, effect: EffectResult, resolution: ActionResolution) -> None:
        if effect.status is not None and effect.status_on_self:
            self._inflict(actor, effect, resolution)

        if effect.attack_bonus:
            actor.attack_bonus += effect.attack_bonus
            resolution.attack_bonus_gained += effect.attack_bonus
            self._emit_log(f"{actor.name} gains {effect.attack_bonus:+d} attack.")
        if effect.defense_bonus:
            actor.defense_bonus += effect.defense_bonus
            resolution.defense_bonus_gained += effect.defense_bonus
            self._emit_log(f"{actor.name} gains {effect.defense_bonus:+d} defense.")
        if effect.attack_bonus or effect.defense_bonus:
            resolution.bonus_duration = max(resolution.bonus_duration, effect.bonus_duration)

    def _inflict(self, recipient: Combatant, effect: EffectResult, resolution: ActionResolution) -> None:
        if not recipient.is_alive:
            return
        recipient.add_status(effect.status.effect, effect.status.duration)
        resolution.statuses_inflicted.setdefault(recipient.combatant_id, []).append(effect.status.effect)
        self._emit_log(f"{recipient.name} is now {effect.status.effect.name.lower()}.")

    def _improve_from_use(
        self,
        actor: Combatant,
        ability_id: AbilityId,
        rng: "CombatRNG",
        resolution: ActionResolution
    ) -> None:
        if not self.ledger.try_improve_from_use(actor, ability_id, rng):
            return
        resolution.improved = True
        new_tier = self.ledger.get_tier(actor, ability_id)
        self._emit_log(f"{actor.name}'s {ability_id.value} improves to {new_tier.display_name}!", "TRAINING")
        self._publish(ProficiencyImproved(
            round_number=self._round_number,
            combatant_id=actor.combatant_id,
            skill=ability_id,
            new_tier=new_tier,
            from_use=True,
        ))


def _without_damage(effect: EffectResult) -> EffectResult:
    """Self-only effects never damage their user."""
    return replace(effect, direct_damage=0, life_steal=0, mana_drain=0)
