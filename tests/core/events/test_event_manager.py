"""
Unit tests for the Event Manager system.

Tests the event bus that lets the combat resolver announce rolls, decisions
and effects to subscribers through the publisher-subscriber pattern.
"""

from unittest.mock import Mock

import pytest

from ironroll.core.data.ability_ids import MonsterAbility
from ironroll.core.events import (
    AbilityChosen,
    CombatantDefeated,
    DebugMessage,
    EventManager,
    EventType,
    LogMessage,
)
from ironroll.managers import LogCategory, LogManager


def log_event(round_number: int = 1, message: str = "test") -> LogMessage:
    return LogMessage(round_number=round_number, message=message, category="BATTLE", level="INFO", source="test")


class TestEvents:
    """Test event dataclasses."""

    def test_event_type_is_set(self):
        """Test that each event fills in its own type."""
        assert log_event().event_type is EventType.LOG_MESSAGE
        chosen = AbilityChosen(round_number=2, combatant_id="orc", ability=MonsterAbility.HEAL, rule_name="heal")
        assert chosen.event_type is EventType.ABILITY_CHOSEN

    def test_events_are_immutable(self):
        with pytest.raises(AttributeError):
            log_event().message = "changed"

    def test_defeated_defaults(self):
        event = CombatantDefeated(round_number=3, combatant_id="orc", name="Orc")
        assert event.defeated_by is None


class TestPublishing:
    """Test queueing and delivery."""

    def test_publish_queues_until_processed(self, event_manager):
        subscriber = Mock()
        event_manager.subscribe(EventType.LOG_MESSAGE, subscriber)

        event_manager.publish(log_event())
        subscriber.assert_not_called()

        assert event_manager.process_events() == 1
        subscriber.assert_called_once()

    def test_empty_queue(self, event_manager):
        assert event_manager.process_events() == 0

    def test_publication_order(self, event_manager):
        received = []
        event_manager.subscribe(EventType.LOG_MESSAGE, received.append)
        for index in range(3):
            event_manager.publish(log_event(message=str(index)))

        event_manager.process_events()

        assert [event.message for event in received] == ["0", "1", "2"]

    def test_type_filtering(self, event_manager):
        """Test that subscribers only receive their event type."""
        subscriber = Mock()
        event_manager.subscribe(EventType.COMBATANT_DEFEATED, subscriber)

        event_manager.publish(log_event())
        event_manager.process_events()

        subscriber.assert_not_called()

    def test_universal_subscriber_runs_after_typed(self, event_manager):
        order = []
        event_manager.subscribe_all(lambda event: order.append(("all", event.event_type)))
        event_manager.subscribe(EventType.LOG_MESSAGE, lambda event: order.append(("typed", event.event_type)))

        event_manager.publish(log_event())
        event_manager.publish(CombatantDefeated(round_number=1, combatant_id="orc", name="Orc"))
        event_manager.process_events()

        assert order == [
            ("typed", EventType.LOG_MESSAGE),
            ("all", EventType.LOG_MESSAGE),
            ("all", EventType.COMBATANT_DEFEATED),
        ]

    def test_events_published_while_processing_are_delivered(self, event_manager):
        received = []
        event_manager.subscribe(
            EventType.COMBATANT_DEFEATED,
            lambda event: event_manager.publish(log_event(message=f"{event.name} falls")),
        )
        event_manager.subscribe(EventType.LOG_MESSAGE, received.append)

        event_manager.publish(CombatantDefeated(round_number=2, combatant_id="orc", name="Orc"))

        assert event_manager.process_events() == 2
        assert [event.message for event in received] == ["Orc falls"]


class TestSubscriberFailures:
    """Test that a broken subscriber is contained."""

    def test_failing_subscriber_does_not_stop_others(self, event_manager):
        broken = Mock(side_effect=RuntimeError("boom"))
        healthy = Mock()
        event_manager.subscribe(EventType.LOG_MESSAGE, broken)
        event_manager.subscribe(EventType.LOG_MESSAGE, healthy)

        event_manager.publish(log_event())
        event_manager.process_events()

        healthy.assert_called_once()

    def test_failure_is_reported_as_debug_message(self, event_manager):
        reports = []
        event_manager.subscribe(EventType.DEBUG_MESSAGE, reports.append)
        event_manager.subscribe(
            EventType.LOG_MESSAGE, Mock(side_effect=RuntimeError("boom")), subscriber_name="narrator"
        )

        event_manager.publish(log_event(round_number=4), source="CombatResolver")
        event_manager.process_events()

        assert len(reports) == 1
        assert reports[0].round_number == 4
        assert reports[0].source == "EventManager"
        assert reports[0].message == "narrator failed on LogMessage from CombatResolver: boom"

    def test_failure_lands_in_the_combat_log(self, event_manager):
        log_manager = LogManager(event_manager)
        event_manager.subscribe(EventType.COMBATANT_DEFEATED, Mock(side_effect=ValueError("bad")))

        event_manager.publish(CombatantDefeated(round_number=1, combatant_id="orc", name="Orc"))
        event_manager.process_events()

        entry = log_manager.messages[-1]
        assert entry.category is LogCategory.DEBUG
        assert "failed on CombatantDefeated" in entry.text

    def test_failing_debug_handler_is_not_reported(self):
        manager = EventManager()
        broken = Mock(side_effect=RuntimeError("boom"))
        manager.subscribe(EventType.DEBUG_MESSAGE, broken)

        manager.publish(DebugMessage(round_number=1, message="ladder", source="AI"))

        assert manager.process_events() == 1
        broken.assert_called_once()
