"""Event lifecycle classification."""
from datetime import datetime, timezone
from enum import Enum

from processor.models import Event


class EventLifecycle(Enum):
    """Temporal state of an event relative to the current time."""
    UPCOMING = "upcoming"
    ONGOING = "ongoing"
    EXPIRED = "expired"


def utc_now() -> datetime:
    """Default clock used by reducers and schedulers."""
    return datetime.now(timezone.utc)


def classify(event: Event, now: datetime) -> EventLifecycle:
    """
    Classify an event against the given instant.

    The event is ongoing over the half-open interval [date, date + duration),
    so the end instant itself already counts as expired and a zero-duration
    event is never ongoing.

    Args:
        event: Event to classify
        now: Timezone-aware current instant

    Returns:
        EventLifecycle of the event at ``now``

    Raises:
        ValueError: If ``now`` or the event date is a naive datetime
    """
    if now.tzinfo is None or event.date.tzinfo is None:
        raise ValueError("Lifecycle classification requires timezone-aware datetimes")

    if event.date > now:
        return EventLifecycle.UPCOMING
    if now < event.end:
        return EventLifecycle.ONGOING
    return EventLifecycle.EXPIRED


def is_upcoming(event: Event, now: datetime) -> bool:
    return classify(event, now) is EventLifecycle.UPCOMING


def is_ongoing(event: Event, now: datetime) -> bool:
    return classify(event, now) is EventLifecycle.ONGOING


def is_expired(event: Event, now: datetime) -> bool:
    return classify(event, now) is EventLifecycle.EXPIRED
