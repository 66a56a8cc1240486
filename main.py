#!/usr/bin/env python3
"""Seeded demo encounter: a warrior against a goblin pack leader."""

import argparse

from ironroll.ai import DecisionEngine
from ironroll.combat import CombatResolver, EffectCatalog, ProficiencyLedger
from ironroll.core.config import load_combat_rules
from ironroll.core.data import Archetype, ClassAbility, Combatant, MonsterAbility, MonsterFamily
from ironroll.core.events import EventManager, LogSaveRequested
from ironroll.core.rng import CombatRNG
from ironroll.managers import LogLevel, LogManager


def build_hero() -> Combatant:
    return Combatant(
        combatant_id="hero",
        name="Aldric",
        archetype=Archetype.WARRIOR,
        level=8,
        strength=18,
        dexterity=13,
        constitution=16,
        defence=6,
        weapon_power=12,
        armor_power=6,
        hp=120,
        max_hp=120,
        stamina=60,
        max_stamina=60,
    )


def build_monster() -> Combatant:
    return Combatant(
        combatant_id="goblin_chief",
        name="Goblin Chief",
        archetype=Archetype.MONSTER,
        level=7,
        strength=16,
        dexterity=14,
        defence=4,
        weapon_power=8,
        armor_power=3,
        hp=90,
        max_hp=90,
        family=MonsterFamily.GOBLINOID,
        monster_tier=3,
        is_automated=True,
        innate_abilities=(MonsterAbility.HEAL, MonsterAbility.FLEE),
    )


def track_bonuses(active: list, resolution, round_number: int) -> None:
    """Remember a timed bonus so it can be removed when it runs out."""
    if resolution.bonus_duration:
        active.append((
            resolution.actor,
            round_number + resolution.bonus_duration,
            resolution.attack_bonus_gained,
            resolution.defense_bonus_gained,
        ))


def expire_bonuses(active: list, round_number: int, log_manager: LogManager) -> None:
    for entry in list(active):
        combatant, expires, attack, defense = entry
        if round_number >= expires:
            combatant.attack_bonus -= attack
            combatant.defense_bonus -= defense
            active.remove(entry)
            log_manager.battle(f"{combatant.name}'s bonuses wear off.")


def run_encounter(seed: int, max_rounds: int, debug: bool, save_log: bool) -> None:
    rules = load_combat_rules()
    event_manager = EventManager()
    log_manager = LogManager(event_manager, default_level=LogLevel.DEBUG if debug else LogLevel.INFO)

    catalog = EffectCatalog.load()
    ledger = ProficiencyLedger(catalog)
    resolver = CombatResolver(
        catalog,
        ledger,
        decision_engine=DecisionEngine(rules),
        event_manager=event_manager,
        rules=rules,
    )
    rng = CombatRNG(seed)

    if debug:
        event_manager.subscribe_all(
            lambda event: log_manager.debug(f"event {event.event_type.name} (round {event.round_number})"),
            subscriber_name="main.trace",
        )

    hero = build_hero()
    monster = build_monster()
    log_manager.system(f"Encounter seed {seed}: {hero.name} vs {monster.name}")

    active_bonuses: list = []
    for round_number in range(1, max_rounds + 1):
        log_manager.battle(f"-- Round {round_number} --")
        expire_bonuses(active_bonuses, round_number, log_manager)

        skill = ClassAbility.POWER_STRIKE if hero.stamina >= 20 and round_number % 2 else ClassAbility.BASIC_ATTACK
        track_bonuses(active_bonuses, resolver.resolve_action(hero, skill, [monster], rng, round_number), round_number)
        event_manager.process_events()
        if not monster.is_alive:
            break

        resolution = resolver.resolve_monster_turn(monster, hero, round_number, rng)
        track_bonuses(active_bonuses, resolution, round_number)
        event_manager.process_events()
        if resolution.flee or not hero.is_alive:
            break

    log_manager.system(f"Final: {hero!r} {monster!r}")
    if save_log:
        event_manager.publish(LogSaveRequested(round_number=0), source="main")
        event_manager.process_events()

    for line in log_manager.get_formatted():
        print(line)


def main():
    parser = argparse.ArgumentParser(description="Run a seeded ironroll demo encounter")
    parser.add_argument("--seed", type=int, default=7, help="Random seed")
    parser.add_argument("--rounds", type=int, default=12, help="Maximum number of rounds")
    parser.add_argument("--debug", action="store_true", help="Show rolls and AI reasoning")
    parser.add_argument("--save-log", action="store_true", help="Write the combat log to logs/")
    args = parser.parse_args()

    try:
        run_encounter(args.seed, args.rounds, args.debug, args.save_log)
    except KeyboardInterrupt:
        print("\n\nEncounter interrupted by user")


if __name__ == "__main__":
    main()
