"""Overview screen state: events in progress and events to come."""
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, List, Optional

from processor.lifecycle import EventLifecycle, classify, utc_now
from processor.models import Event
from storage.base import EventsRepository
from viewmodel.state import StateReducer

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OverviewState:
    """Ongoing and upcoming events, each sorted by start time."""
    ongoing: List[Event] = field(default_factory=list)
    upcoming: List[Event] = field(default_factory=list)
    error_message: Optional[str] = None
    is_loading: bool = False


class OverviewReducer(StateReducer[OverviewState]):
    """Publishes the ongoing and upcoming events of a repository."""

    def __init__(
        self,
        repository: EventsRepository,
        clock: Callable[[], datetime] = utc_now
    ):
        super().__init__(OverviewState())
        self.repository = repository
        self.clock = clock

    def refresh(self) -> None:
        ticket = self._begin()

        try:
            events = self.repository.list()
            now = self.clock()
            ongoing = []
            upcoming = []
            for event in sorted(events, key=lambda event: event.date):
                lifecycle = classify(event, now)
                if lifecycle is EventLifecycle.ONGOING:
                    ongoing.append(event)
                elif lifecycle is EventLifecycle.UPCOMING:
                    upcoming.append(event)
        except Exception as e:
            logger.error(f"Error fetching events: {e}", exc_info=True)
            self._publish_if_latest(
                ticket,
                OverviewState(error_message=f"Failed to load events: {e}")
            )
            return

        self._publish_if_latest(ticket, OverviewState(ongoing=ongoing, upcoming=upcoming))
