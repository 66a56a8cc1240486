"""Combat events and log events.

This module defines the events the combat resolver publishes so that
narration, logging and bookkeeping can subscribe without the core depending
on them.

Event Design Principles:
- Events are immutable dataclasses
- All events carry the encounter round they happened in
- Events carry combatant ids and enum identifiers, not mutable objects
"""

from dataclasses import dataclass, field
from typing import Optional, TYPE_CHECKING
from abc import ABC
from enum import Enum, auto

if TYPE_CHECKING:
    from ..data.ability_ids import AbilityId
    from ...combat.roll_resolver import RollOutcome
    from ...combat.effect_executor import EffectResult
    from ...combat.proficiency import Tier


class EventType(Enum):
    """Types of events that subscribers can listen to."""
    # Resolution events
    ABILITY_CHOSEN = auto()
    ROLL_RESOLVED = auto()
    EFFECT_RESOLVED = auto()
    ACTION_REFUSED = auto()
    COMBATANT_DEFEATED = auto()

    # Progression events
    PROFICIENCY_IMPROVED = auto()

    # Logging events
    LOG_MESSAGE = auto()
    DEBUG_MESSAGE = auto()
    LOG_SAVE_REQUESTED = auto()


@dataclass(frozen=True)
class GameEvent(ABC):
    """Base class for all events."""
    round_number: int
    event_type: EventType = field(init=False)


@dataclass(frozen=True)
class AbilityChosen(GameEvent):
    """Event emitted when the decision engine picks an action."""
    combatant_id: str
    ability: Optional["AbilityId"]  # None means a basic attack
    rule_name: str

    def __post_init__(self):
        # Set event_type since dataclass frozen=True prevents normal assignment
        object.__setattr__(self, 'event_type', EventType.ABILITY_CHOSEN)


@dataclass(frozen=True)
class RollResolved(GameEvent):
    """Event emitted after a roll, forced failures included."""
    combatant_id: str
    ability: "AbilityId"
    outcome: "RollOutcome"

    def __post_init__(self):
        object.__setattr__(self, 'event_type', EventType.ROLL_RESOLVED)


@dataclass(frozen=True)
class EffectResolved(GameEvent):
    """Event emitted when an effect has been computed and applied."""
    combatant_id: str
    ability: Optional["AbilityId"]
    result: "EffectResult"
    target_ids: tuple[str, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, 'event_type', EventType.EFFECT_RESOLVED)


@dataclass(frozen=True)
class ActionRefused(GameEvent):
    """Event emitted when an action is refused before any roll."""
    combatant_id: str
    ability: Optional["AbilityId"]
    reason: str

    def __post_init__(self):
        object.__setattr__(self, 'event_type', EventType.ACTION_REFUSED)


@dataclass(frozen=True)
class CombatantDefeated(GameEvent):
    """Event emitted when a combatant's HP reaches zero."""
    combatant_id: str
    name: str
    defeated_by: Optional[str] = None

    def __post_init__(self):
        object.__setattr__(self, 'event_type', EventType.COMBATANT_DEFEATED)


@dataclass(frozen=True)
class ProficiencyImproved(GameEvent):
    """Event emitted when a skill advances a tier."""
    combatant_id: str
    skill: "AbilityId"
    new_tier: "Tier"
    from_use: bool = True

    def __post_init__(self):
        object.__setattr__(self, 'event_type', EventType.PROFICIENCY_IMPROVED)


@dataclass(frozen=True)
class LogMessage(GameEvent):
    """Event emitted when a log message is created."""
    message: str
    category: str
    level: str
    source: str

    def __post_init__(self):
        object.__setattr__(self, 'event_type', EventType.LOG_MESSAGE)


@dataclass(frozen=True)
class DebugMessage(GameEvent):
    """Event emitted for debug-specific messages."""
    message: str
    source: str
    context: Optional[dict] = None

    def __post_init__(self):
        object.__setattr__(self, 'event_type', EventType.DEBUG_MESSAGE)


@dataclass(frozen=True)
class LogSaveRequested(GameEvent):
    """Event emitted when the log should be written to a file."""

    def __post_init__(self):
        object.__setattr__(self, 'event_type', EventType.LOG_SAVE_REQUESTED)
