"""
Configuration loader for combat rules.

This module handles loading the tunable constants of the resolution engine
(die size, degree-of-success margins, decision fallbacks, difficulty bases)
from a YAML file, falling back to the built-in defaults.
"""
import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Optional

import yaml


@dataclass(frozen=True)
class CombatRules:
    """Tunable constants shared by the resolver, executor and decision engine."""

    # Dice
    die_sides: int = 20

    # Degree of success margins (total - difficulty)
    solid_hit_margin: int = 5
    devastating_hit_margin: int = 10

    # Degree of success damage multipliers
    hit_multiplier: float = 1.0
    solid_hit_multiplier: float = 1.25
    devastating_hit_multiplier: float = 1.5
    critical_multiplier: float = 2.0

    # Difficulty bases
    defender_base_difficulty: int = 10
    ability_base_difficulty: int = 10
    spell_base_difficulty: int = 8
    evasion_bonus: int = 10
    invisibility_bonus: int = 5

    # Decision engine thresholds and fallbacks
    low_health_divisor: int = 3
    very_low_health_divisor: int = 5
    finisher_health_divisor: int = 5
    offensive_pool_chance: int = 30
    no_ability_chance: int = 60

    # Damage reduction
    defending_reduction_percent: int = 50


class RulesConfigLoader:
    """Loads combat rule overrides from a YAML file."""

    def __init__(self, config_path: Optional[str] = None):
        self.config_path = config_path or "assets/config/combat_rules.yaml"
        self._config: dict[str, Any] = {}
        self._rules = CombatRules()

    @property
    def rules(self) -> CombatRules:
        return self._rules

    def _resolve_path(self) -> Path:
        if os.path.isabs(self.config_path):
            return Path(self.config_path)
        # Relative paths are relative to the project root
        project_root = Path(__file__).parent.parent.parent
        return project_root / self.config_path

    def load_config(self) -> bool:
        """
        Load rule overrides from the YAML file.

        Returns:
            bool: True if the file was found and parsed
        """
        config_file = self._resolve_path()
        if not config_file.exists():
            print(f"Warning: Combat rules file not found: {config_file}")
            self._rules = CombatRules()
            return False

        try:
            with open(config_file, "r", encoding="utf-8") as f:
                self._config = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            print(f"Error loading combat rules: {e}")
            self._rules = CombatRules()
            return False

        self._rules = self._parse_rules(self._config.get("rules", {}))
        return True

    @staticmethod
    def _parse_rules(section: dict[str, Any]) -> CombatRules:
        """Apply known keys over the defaults, rejecting unknown ones."""
        known = {f.name: f.type for f in fields(CombatRules)}
        overrides: dict[str, Any] = {}
        for key, value in section.items():
            if key not in known:
                raise KeyError(f"Unknown combat rule: {key}")
            default = getattr(CombatRules, key)
            overrides[key] = type(default)(value)

        rules = replace(CombatRules(), **overrides)
        if rules.die_sides < 2:
            raise ValueError(f"die_sides must be at least 2, got {rules.die_sides}")
        if rules.solid_hit_margin > rules.devastating_hit_margin:
            raise ValueError("solid_hit_margin cannot exceed devastating_hit_margin")
        return rules


def load_combat_rules(config_path: Optional[str] = None) -> CombatRules:
    """Load rules from YAML, or the defaults when the file is missing."""
    loader = RulesConfigLoader(config_path)
    loader.load_config()
    return loader.rules
