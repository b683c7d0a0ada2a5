"""Published UI state and the base reducer guarding it."""
import itertools
import logging
import threading
from concurrent.futures import Executor, Future
from dataclasses import dataclass, field, replace
from typing import Callable, Generic, List, Optional, TypeVar

logger = logging.getLogger(__name__)

S = TypeVar('S')


@dataclass(frozen=True)
class ListState:
    """State of a screen showing a list of items."""
    items: List = field(default_factory=list)
    error_message: Optional[str] = None
    is_loading: bool = False


class StateReducer(Generic[S]):
    """
    Owner of a published state object.

    Each refresh takes a ticket from a monotonic counter. Only the holder of
    the most recent ticket may publish a result, so a slow refresh that was
    superseded by a later one is dropped instead of overwriting fresher data.
    """

    def __init__(self, initial_state: S):
        self._state = initial_state
        self._lock = threading.Lock()
        self._sequence = itertools.count(1)
        self._latest = 0
        self._subscribers: List[Callable[[S], None]] = []

    @property
    def state(self) -> S:
        with self._lock:
            return self._state

    def subscribe(self, callback: Callable[[S], None]) -> None:
        """Call ``callback`` with the new state after every publish."""
        with self._lock:
            self._subscribers.append(callback)

    def refresh(self) -> None:
        raise NotImplementedError

    def refresh_in(self, executor: Executor) -> Future:
        """Run refresh() on a background executor."""
        return executor.submit(self.refresh)

    def clear_error(self) -> None:
        """Reset the error message, leaving everything else unchanged."""
        self._update(lambda state: replace(state, error_message=None))

    def _begin(self) -> int:
        """Issue a ticket and mark the state as loading."""
        with self._lock:
            ticket = next(self._sequence)
            self._latest = ticket
            self._state = replace(self._state, is_loading=True)
            state = self._state
            subscribers = list(self._subscribers)
        self._notify(subscribers, state)
        return ticket

    def _publish_if_latest(self, ticket: int, state: S) -> bool:
        """
        Publish ``state`` if ``ticket`` is still the latest issued.

        Returns:
            True if the state was published
        """
        with self._lock:
            if ticket != self._latest:
                logger.debug(f"Dropping stale result {ticket}, latest is {self._latest}")
                return False
            self._state = state
            subscribers = list(self._subscribers)
        self._notify(subscribers, state)
        return True

    def _update(self, transform: Callable[[S], S]) -> None:
        with self._lock:
            self._state = transform(self._state)
            state = self._state
            subscribers = list(self._subscribers)
        self._notify(subscribers, state)

    def _notify(self, subscribers: List[Callable[[S], None]], state: S) -> None:
        for callback in subscribers:
            callback(state)
