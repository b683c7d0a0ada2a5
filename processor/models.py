"""Data models for events and groups."""
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import Enum
from typing import List, Optional


class EventType(Enum):
    """Category of an event."""
    SPORTS = "SPORTS"
    ACTIVITY = "ACTIVITY"
    SOCIAL = "SOCIAL"

    def display_string(self) -> str:
        return self.name.capitalize()


class EventVisibility(Enum):
    """Who can see an event."""
    PUBLIC = "PUBLIC"
    PRIVATE = "PRIVATE"

    def display_string(self) -> str:
        return self.name.capitalize()


@dataclass(frozen=True)
class Location:
    """Named geographic point."""
    latitude: float
    longitude: float
    name: str


@dataclass(frozen=True)
class Event:
    """
    Activity that users can join.

    Events are replaced as whole records; use dataclasses.replace to derive
    an edited copy. The participant count is not checked against
    max_participants here, callers use is_full() before adding someone.
    """
    event_id: str
    type: EventType
    title: str
    description: str
    location: Optional[Location]
    date: datetime
    duration: int
    participants: List[str]
    max_participants: int
    visibility: EventVisibility
    owner_id: str

    def __post_init__(self) -> None:
        if self.duration < 0:
            raise ValueError("Event duration cannot be negative")
        if self.date.tzinfo is None:
            raise ValueError("Event date must be timezone-aware")

    @property
    def end(self) -> datetime:
        """Instant at which the event stops being ongoing."""
        return self.date + timedelta(minutes=self.duration)

    def is_full(self) -> bool:
        return len(self.participants) >= self.max_participants


@dataclass(frozen=True)
class Group:
    """Set of users organizing events together."""
    id: str
    name: str
    owner_id: str
    description: str = ""
    member_ids: List[str] = field(default_factory=list)
    category: EventType = EventType.ACTIVITY
    event_ids: List[str] = field(default_factory=list)
    photo_url: Optional[str] = None

    @property
    def members_count(self) -> int:
        return len(self.member_ids)


@dataclass
class SyncResult:
    """Result of a refresh of the local mirror."""
    fetched: int
    replaced: int
