"""Decision making for automated combatants."""

from .decision_engine import (
    AbilityDecision,
    DecisionContext,
    DecisionEngine,
    PriorityRule,
    DEFAULT_LADDER,
    OFFENSIVE_POOL,
)

__all__ = [
    "AbilityDecision",
    "DecisionContext",
    "DecisionEngine",
    "PriorityRule",
    "DEFAULT_LADDER",
    "OFFENSIVE_POOL",
]
