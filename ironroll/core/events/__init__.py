"""Event system for publisher-subscriber communication.

This package contains the event-driven plumbing of the combat engine:
- event_manager.py: Publisher-subscriber event routing
- events.py: Event definitions published by the resolver
"""

from .event_manager import EventManager
from .events import (
    GameEvent,
    EventType,
    AbilityChosen,
    RollResolved,
    EffectResolved,
    ActionRefused,
    CombatantDefeated,
    ProficiencyImproved,
    LogMessage,
    DebugMessage,
    LogSaveRequested,
)

__all__ = [
    "EventManager",
    "GameEvent",
    "EventType",
    "AbilityChosen",
    "RollResolved",
    "EffectResolved",
    "ActionRefused",
    "CombatantDefeated",
    "ProficiencyImproved",
    "LogMessage",
    "DebugMessage",
    "LogSaveRequested",
]
