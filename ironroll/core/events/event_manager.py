"""
Event bus for decoupled combat bookkeeping.

The combat resolver and the training functions publish events here; the log
manager and any caller-side narration subscribe. Publishing only queues:
nothing is delivered until the owner of the turn loop calls
``process_events``, so an action always finishes resolving before anyone
reacts to it.
"""

from collections import defaultdict, deque
from dataclasses import dataclass
from typing import Callable, Optional, TYPE_CHECKING

from .events import DebugMessage

if TYPE_CHECKING:
    from .events import GameEvent, EventType


EventSubscriber = Callable[["GameEvent"], None]


@dataclass
class QueuedEvent:
    """An event waiting for delivery, tagged with who published it."""
    event: "GameEvent"
    source: str = "unknown"


class EventManager:
    """Queues combat events and delivers them in publication order."""

    def __init__(self):
        self._subscribers: dict["EventType", list[tuple[EventSubscriber, str]]] = defaultdict(list)
        self._universal_subscribers: list[tuple[EventSubscriber, str]] = []
        self._event_queue: deque[QueuedEvent] = deque()

    def subscribe(
        self,
        event_type: "EventType",
        subscriber: EventSubscriber,
        subscriber_name: Optional[str] = None
    ) -> None:
        """Subscribe to events of a specific type.

        Args:
            event_type: The type of events to subscribe to
            subscriber: Callback function to handle events
            subscriber_name: Name reported if the callback raises
        """
        name = subscriber_name or getattr(subscriber, '__name__', 'anonymous')
        self._subscribers[event_type].append((subscriber, name))

    def subscribe_all(self, subscriber: EventSubscriber, subscriber_name: Optional[str] = None) -> None:
        """Subscribe to every event type, after the typed subscribers."""
        name = subscriber_name or getattr(subscriber, '__name__', 'anonymous')
        self._universal_subscribers.append((subscriber, name))

    def publish(self, event: "GameEvent", source: Optional[str] = None) -> None:
        """Queue an event for the next ``process_events`` call."""
        self._event_queue.append(QueuedEvent(event=event, source=source or "unknown"))

    def process_events(self) -> int:
        """Deliver queued events until the queue is empty.

        Events published by subscribers while processing are delivered in
        the same call, after everything queued before them.

        Returns:
            Number of events delivered
        """
        delivered = 0
        while self._event_queue:
            self._deliver(self._event_queue.popleft())
            delivered += 1
        return delivered

    def _deliver(self, queued: QueuedEvent) -> None:
        event = queued.event
        subscribers = list(self._subscribers.get(event.event_type, [])) + list(self._universal_subscribers)

        for subscriber, name in subscribers:
            try:
                subscriber(event)
            except Exception as e:
                # A failing debug handler would otherwise feed itself forever
                if isinstance(event, DebugMessage):
                    continue
                self.publish(
                    DebugMessage(
                        round_number=event.round_number,
                        message=f"{name} failed on {event.__class__.__name__} from {queued.source}: {e}",
                        source="EventManager",
                    ),
                    source="EventManager",
                )
