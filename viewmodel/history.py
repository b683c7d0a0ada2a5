"""History screen state: events that already ended."""
import logging
from datetime import datetime
from typing import Callable, List

from processor.lifecycle import is_expired, utc_now
from processor.models import Event
from storage.base import EventsRepository
from viewmodel.state import ListState, StateReducer

logger = logging.getLogger(__name__)


def expired_events(events: List[Event], now: datetime) -> List[Event]:
    """Keep the expired events, most recent start first."""
    expired = [event for event in events if is_expired(event, now)]
    return sorted(expired, key=lambda event: event.date, reverse=True)


class HistoryReducer(StateReducer[ListState]):
    """Publishes the expired events of a repository."""

    def __init__(
        self,
        repository: EventsRepository,
        clock: Callable[[], datetime] = utc_now
    ):
        super().__init__(ListState())
        self.repository = repository
        self.clock = clock

    def refresh(self) -> None:
        """
        Fetch every event and publish the expired ones.

        On failure the published items are emptied and error_message
        describes the failure. Nothing is retried.
        """
        ticket = self._begin()

        try:
            events = self.repository.list()
            items = expired_events(events, self.clock())
        except Exception as e:
            logger.error(f"Error fetching expired events: {e}", exc_info=True)
            self._publish_if_latest(
                ticket,
                ListState(items=[], error_message=f"Failed to load history: {e}")
            )
            return

        self._publish_if_latest(ticket, ListState(items=items))
