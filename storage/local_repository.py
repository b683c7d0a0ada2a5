"""In-memory repositories used as the offline mirror of the remote store."""
import logging
import threading
from typing import Callable, Iterable, List, Optional

from processor.errors import NotFoundError
from processor.models import Event, Group
from storage.base import EventsRepository, GroupsRepository, Repository, T

logger = logging.getLogger(__name__)


class LocalRepository(Repository[T]):
    """
    Ordered in-memory collection of entities.

    Thread Safety:
        Every read and mutation runs under a single re-entrant lock, so a
        refresh swapping the collection can never interleave with add, edit
        or remove. Readers always get a copy of the list.
    """

    def __init__(self, key: Callable[[T], str]):
        """
        Initialize an empty collection.

        Args:
            key: Function returning the id of an entity
        """
        self._key = key
        self._items: List[T] = []
        self._counter = 0
        self._lock = threading.RLock()

    def new_id(self) -> str:
        with self._lock:
            entity_id = str(self._counter)
            self._counter += 1
            return entity_id

    def list(self) -> List[T]:
        with self._lock:
            return self._items.copy()

    def get(self, entity_id: str) -> Optional[T]:
        with self._lock:
            for item in self._items:
                if self._key(item) == entity_id:
                    return item
            return None

    def add(self, entity: T) -> None:
        with self._lock:
            self._items.append(entity)

    def edit(self, entity_id: str, new_value: T) -> None:
        with self._lock:
            index = self._index_of(entity_id)
            self._items[index] = new_value

    def remove(self, entity_id: str) -> None:
        with self._lock:
            index = self._index_of(entity_id)
            del self._items[index]

    def upsert(self, entity: T) -> None:
        """Replace the entity with the same id, or append it if absent."""
        with self._lock:
            entity_id = self._key(entity)
            for index, item in enumerate(self._items):
                if self._key(item) == entity_id:
                    self._items[index] = entity
                    return
            self._items.append(entity)

    def discard(self, entity_id: str) -> bool:
        """Remove the entity if present; return whether something was removed."""
        with self._lock:
            try:
                index = self._index_of(entity_id)
            except NotFoundError:
                return False
            del self._items[index]
            return True

    def replace_all(self, entities: Iterable[T]) -> int:
        """
        Atomically swap the whole collection for ``entities``.

        Args:
            entities: New contents, kept in the given order

        Returns:
            Number of entries that were discarded
        """
        new_items = list(entities)
        with self._lock:
            discarded = len(self._items)
            self._items = new_items
        logger.debug(
            f"Replaced {discarded} {self.collection} with {len(new_items)} entries"
        )
        return discarded

    def _index_of(self, entity_id: str) -> int:
        for index, item in enumerate(self._items):
            if self._key(item) == entity_id:
                return index
        raise NotFoundError(self.collection, entity_id)


class EventsRepositoryLocal(LocalRepository[Event], EventsRepository):
    """Local list of events (offline mode or tests)."""

    def __init__(self):
        super().__init__(key=lambda event: event.event_id)


class GroupsRepositoryLocal(LocalRepository[Group], GroupsRepository):
    """Local list of groups (offline mode or tests)."""

    def __init__(self):
        super().__init__(key=lambda group: group.id)

    def join(self, group_id: str, user_id: str) -> Group:
        with self._lock:
            return super().join(group_id, user_id)

    def leave(self, group_id: str, user_id: str) -> Group:
        with self._lock:
            return super().leave(group_id, user_id)
