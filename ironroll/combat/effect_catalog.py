"""Ability catalog loaded from YAML.

This module defines how abilities, class skills and spells are described as
data. Definitions are loaded from ``assets/data/abilities/*.yaml`` once at
startup, validated against the closed identifier enums, and looked up by
``AbilityId`` afterwards. The monster family table decides which monster
abilities an automated combatant may use.
"""

import os
from dataclasses import dataclass
from fractions import Fraction
from typing import Any, Optional

import yaml

from ..core.data.ability_ids import AbilityId, ClassAbility, MonsterAbility, Spell
from ..core.data.data_structures import Combatant, MagnitudeRange, StatusInfliction
from ..core.data.game_enums import (
    Archetype,
    EffectKind,
    MonsterFamily,
    ResourceType,
    Scaling,
    SpecialRule,
    StatusEffect,
)


@dataclass(frozen=True)
class AbilityDefinition:
    """Static description of one ability, class skill or spell.

    ``magnitude`` is the damage range for offensive kinds and the healing
    range for HEAL. ``healing`` is a secondary heal carried by abilities that
    also do something else (Bloodlust, Power Hat).
    """
    ability_id: AbilityId
    name: str
    kind: EffectKind
    description: str = ""

    # Cost and eligibility
    cost: int = 0
    resource: ResourceType = ResourceType.NONE
    level_required: int = 1
    eligible_archetypes: frozenset = frozenset()

    # Magnitude
    magnitude: Optional[MagnitudeRange] = None
    healing: Optional[MagnitudeRange] = None
    scaling: Scaling = Scaling.NONE
    power: float = 1.0
    max_hp_divisor: int = 0
    multi_target: bool = False

    # Conditions
    status: Optional[StatusInfliction] = None

    # Bonuses
    attack_bonus: int = 0
    defense_bonus: int = 0
    bonus_per_level: Fraction = Fraction(0)
    bonus_duration: int = 0

    # Monster extras
    life_steal_percent: int = 0
    reflect_percent: int = 0
    extra_attacks: Optional[MagnitudeRange] = None
    summon_count: Optional[MagnitudeRange] = None
    flee: bool = False
    skip_normal_attack: bool = False
    special: Optional[SpecialRule] = None

    @property
    def is_self_targeted(self) -> bool:
        return self.kind.is_self_targeted

    @property
    def is_spell(self) -> bool:
        return isinstance(self.ability_id, Spell)


@dataclass(frozen=True)
class FamilyUnlock:
    """A monster ability granted to a family from a given tier."""
    ability: MonsterAbility
    min_tier: int = 1


_FAMILY_ENUMS: dict[str, type] = {
    "monster": MonsterAbility,
    "class": ClassAbility,
    "spell": Spell,
}

_ALLOWED_KEYS = frozenset({
    "name", "kind", "description", "cost", "resource", "level_required",
    "classes", "magnitude", "healing", "scaling", "power", "max_hp_divisor",
    "multi_target", "status", "attack_bonus", "defense_bonus",
    "bonus_per_level", "bonus_duration", "life_steal_percent",
    "reflect_percent", "extra_attacks", "summon_count", "flee",
    "skip_normal_attack", "special",
})

_STATUS_KEYS = frozenset({"effect", "duration", "chance"})

DEFAULT_ABILITY_FILES = ("monster_abilities.yaml", "class_abilities.yaml", "spells.yaml")
DEFAULT_FAMILY_FILE = "monster_families.yaml"


def _default_data_dir() -> str:
    # Project root is three levels up from this file
    current_dir = os.path.dirname(os.path.abspath(__file__))
    project_root = os.path.dirname(os.path.dirname(current_dir))
    return os.path.join(project_root, "assets", "data", "abilities")


def _read_yaml(path: str) -> dict[str, Any]:
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except FileNotFoundError:
        raise FileNotFoundError(f"Ability data file not found: {path}")
    if not isinstance(data, dict):
        raise ValueError(f"Ability data file {path} must contain a mapping")
    return data


def _parse_status(value: dict[str, Any]) -> StatusInfliction:
    unknown = set(value) - _STATUS_KEYS
    if unknown:
        raise KeyError(f"Unknown status keys: {sorted(unknown)}")
    effect = StatusEffect[str(value["effect"]).upper()]
    duration = int(value["duration"])
    chance = int(value.get("chance", 100))
    if duration < 0 or not 0 <= chance <= 100:
        raise ValueError(f"Invalid status infliction: {value}")
    return StatusInfliction(effect, duration, chance)


def parse_definition(ability_id: AbilityId, entry: dict[str, Any]) -> AbilityDefinition:
    """Build one definition from its YAML mapping.

    Raises:
        KeyError: On unknown keys, enum names or missing required fields
        ValueError: On negative costs, inverted ranges or bad values
    """
    unknown = set(entry) - _ALLOWED_KEYS
    if unknown:
        raise KeyError(f"Unknown keys for {ability_id.value}: {sorted(unknown)}")

    cost = int(entry.get("cost", 0))
    if cost < 0:
        raise ValueError(f"Negative cost for {ability_id.value}: {cost}")

    def optional_range(key: str) -> Optional[MagnitudeRange]:
        return MagnitudeRange.from_value(entry[key]) if key in entry else None

    special = entry.get("special")
    scaling = Scaling(entry.get("scaling", "none"))
    max_hp_divisor = int(entry.get("max_hp_divisor", 0))
    if scaling is Scaling.MONSTER_HEAL and max_hp_divisor <= 0:
        raise ValueError(f"monster_heal scaling needs a positive max_hp_divisor for {ability_id.value}")

    return AbilityDefinition(
        ability_id=ability_id,
        name=entry["name"],
        kind=EffectKind(entry["kind"]),
        description=entry.get("description", ""),
        cost=cost,
        resource=ResourceType(entry.get("resource", "none")),
        level_required=int(entry.get("level_required", 1)),
        eligible_archetypes=frozenset(Archetype[name.upper()] for name in entry.get("classes", [])),
        magnitude=optional_range("magnitude"),
        healing=optional_range("healing"),
        scaling=scaling,
        power=float(entry.get("power", 1.0)),
        max_hp_divisor=max_hp_divisor,
        multi_target=bool(entry.get("multi_target", False)),
        status=_parse_status(entry["status"]) if "status" in entry else None,
        attack_bonus=int(entry.get("attack_bonus", 0)),
        defense_bonus=int(entry.get("defense_bonus", 0)),
        bonus_per_level=Fraction(str(entry.get("bonus_per_level", 0))),
        bonus_duration=int(entry.get("bonus_duration", 0)),
        life_steal_percent=int(entry.get("life_steal_percent", 0)),
        reflect_percent=int(entry.get("reflect_percent", 0)),
        extra_attacks=optional_range("extra_attacks"),
        summon_count=optional_range("summon_count"),
        flee=bool(entry.get("flee", False)),
        skip_normal_attack=bool(entry.get("skip_normal_attack", False)),
        special=SpecialRule(special) if special else None,
    )


class EffectCatalog:
    """Read-only lookup of ability definitions and monster family unlocks.

    Usage:
        catalog = EffectCatalog.load()
        definition = catalog.lookup(MonsterAbility.FIRE_BREATH)
        eligible = catalog.abilities_for_monster(MonsterFamily.DRAGON, tier=2, is_boss=False)
    """

    def __init__(
        self,
        definitions: Optional[dict[AbilityId, AbilityDefinition]] = None,
        family_table: Optional[dict[MonsterFamily, list[FamilyUnlock]]] = None,
        boss_abilities: tuple = ()
    ):
        self._definitions: dict[AbilityId, AbilityDefinition] = dict(definitions or {})
        self._family_table: dict[MonsterFamily, list[FamilyUnlock]] = dict(family_table or {})
        self._boss_abilities: tuple = tuple(boss_abilities)

    @classmethod
    def load(cls, data_dir: Optional[str] = None) -> "EffectCatalog":
        """Load every ability file plus the family table from a directory.

        Raises:
            FileNotFoundError: If a data file is missing
            KeyError: If an entry has unknown keys or identifiers
            ValueError: If an entry has invalid values
        """
        data_dir = data_dir or _default_data_dir()
        definitions: dict[AbilityId, AbilityDefinition] = {}
        for filename in DEFAULT_ABILITY_FILES:
            definitions.update(cls._load_ability_file(os.path.join(data_dir, filename)))

        family_table, boss_abilities = cls._load_family_file(os.path.join(data_dir, DEFAULT_FAMILY_FILE))
        return cls(definitions, family_table, boss_abilities)

    @staticmethod
    def _load_ability_file(path: str) -> dict[AbilityId, AbilityDefinition]:
        data = _read_yaml(path)
        try:
            enum_cls = _FAMILY_ENUMS[data["family"]]
            entries = data["abilities"]
        except KeyError as e:
            raise KeyError(f"Invalid ability file structure in {path}: {e}")

        definitions: dict[AbilityId, AbilityDefinition] = {}
        for key, entry in entries.items():
            try:
                ability_id = enum_cls(key)
            except ValueError:
                raise KeyError(f"Unknown ability identifier in {path}: {key}")
            definitions[ability_id] = parse_definition(ability_id, entry or {})
        return definitions

    @staticmethod
    def _load_family_file(path: str) -> tuple[dict[MonsterFamily, list[FamilyUnlock]], tuple]:
        data = _read_yaml(path)
        try:
            families = data["families"]
            boss = tuple(MonsterAbility(name) for name in data.get("boss_abilities", []))
            table = {
                MonsterFamily(family): [
                    FamilyUnlock(MonsterAbility(unlock["ability"]), int(unlock.get("tier", 1)))
                    for unlock in unlocks or []
                ]
                for family, unlocks in families.items()
            }
        except KeyError as e:
            raise KeyError(f"Invalid family table structure in {path}: {e}")
        return table, boss

    def lookup(self, ability_id: AbilityId) -> Optional[AbilityDefinition]:
        """Definition for an id, or None when the catalog has no entry."""
        return self._definitions.get(ability_id)

    def __contains__(self, ability_id: AbilityId) -> bool:
        return ability_id in self._definitions

    def __len__(self) -> int:
        return len(self._definitions)

    def abilities_for_class(self, archetype: Archetype, level: Optional[int] = None) -> list[AbilityDefinition]:
        """Class abilities available to an archetype, ordered by level requirement.

        When ``level`` is given, abilities above it are left out.
        """
        matches = [
            definition for definition in self._definitions.values()
            if isinstance(definition.ability_id, ClassAbility)
            and archetype in definition.eligible_archetypes
            and (level is None or level >= definition.level_required)
        ]
        return sorted(matches, key=lambda d: d.level_required)

    def spells_for(self, archetype: Archetype, level: Optional[int] = None) -> list[AbilityDefinition]:
        """Spells of an archetype's school, ordered by spell level."""
        matches = [
            definition for definition in self._definitions.values()
            if definition.is_spell
            and archetype in definition.eligible_archetypes
            and (level is None or level >= definition.level_required)
        ]
        return sorted(matches, key=lambda d: d.ability_id.spell_level)

    def abilities_for_monster(
        self,
        family: Optional[MonsterFamily],
        tier: int,
        is_boss: bool = False
    ) -> list[MonsterAbility]:
        """Monster abilities a family unlocks by tier.

        Unknown or missing families use the generic table. Bosses always
        gain the boss abilities, without duplicates.
        """
        family = family or MonsterFamily.GENERIC
        unlocks = self._family_table.get(family, self._family_table.get(MonsterFamily.GENERIC, []))

        abilities: list[MonsterAbility] = []
        for unlock in unlocks:
            if tier >= unlock.min_tier and unlock.ability not in abilities:
                abilities.append(unlock.ability)

        if is_boss:
            for ability in self._boss_abilities:
                if ability not in abilities:
                    abilities.append(ability)
        return abilities

    def eligible_for(self, monster: Combatant) -> list[MonsterAbility]:
        """Family abilities plus a monster's innate ones."""
        abilities = self.abilities_for_monster(monster.family, monster.monster_tier, monster.is_boss)
        for ability in monster.innate_abilities:
            if ability not in abilities:
                abilities.append(ability)
        return abilities
