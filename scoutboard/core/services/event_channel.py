"""
Board event channel.

Typed "notify N listeners" channel for mutations and refresh requests.
Owned by the composition root and injected wherever events are published
or consumed.
"""

from collections.abc import Callable

from scoutboard.config import get_logger
from scoutboard.core.entities.event import BoardEvent, BoardEventType
from scoutboard.core.entities.pipeline import PipelineKind

logger = get_logger(__name__)

Listener = Callable[[BoardEvent], None]


class EventChannel:
    """Synchronous fan-out of board events to subscribed listeners."""

    def __init__(self) -> None:
        # None key receives every event type
        self._listeners: dict[BoardEventType | None, list[Listener]] = {}

    def subscribe(
        self,
        listener: Listener,
        event_type: BoardEventType | None = None,
    ) -> Callable[[], None]:
        """
        Register a listener.

        Args:
            listener: Called with each matching event.
            event_type: Only deliver this type; None delivers all.

        Returns:
            A callable that removes the listener again.
        """
        self._listeners.setdefault(event_type, []).append(listener)

        def unsubscribe() -> None:
            listeners = self._listeners.get(event_type, [])
            if listener in listeners:
                listeners.remove(listener)

        return unsubscribe

    def publish(self, event: BoardEvent) -> int:
        """
        Deliver an event to its listeners.

        A failing listener is logged and does not stop delivery to the
        others.

        Returns:
            Number of listeners that handled the event without error.
        """
        delivered = 0
        targets = list(self._listeners.get(event.type, [])) + list(
            self._listeners.get(None, [])
        )
        for listener in targets:
            try:
                listener(event)
                delivered += 1
            except Exception:
                logger.warning(
                    "event_listener_failed",
                    event_type=event.type.value,
                    item_id=event.item_id,
                    exc_info=True,
                )
        return delivered

    def request_refresh(self, kind: PipelineKind | None = None) -> int:
        """Ask listeners to reload a board (or every board when kind is None)."""
        return self.publish(BoardEvent(type=BoardEventType.REFRESH_REQUESTED, kind=kind))

    def listener_count(self) -> int:
        return sum(len(v) for v in self._listeners.values())


def log_board_event(event: BoardEvent) -> None:
    """Listener writing every board event to the activity log."""
    logger.info(
        "board_event",
        event_type=event.type.value,
        kind=event.kind.value if event.kind else None,
        item_id=event.item_id,
        **{f"payload_{k}": v for k, v in event.payload.items()},
    )
