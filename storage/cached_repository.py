"""Offline-first repository combining the remote store and a local mirror."""
import logging
from typing import Callable, List, Optional

from processor.errors import OfflineError
from processor.models import Event, Group
from storage.base import EventsRepository, GroupsRepository, Repository, T
from storage.local_repository import LocalRepository

logger = logging.getLogger(__name__)


class CachedRepository(Repository[T]):
    """
    Repository reading through a local mirror.

    Read strategy:
    1. If online, read the remote store and mirror the result locally
    2. If offline or the remote read fails, answer from the local mirror

    Write strategy:
    1. Require connectivity
    2. Write to the remote store
    3. Update the local mirror
    """

    def __init__(
        self,
        remote: Repository[T],
        local: LocalRepository[T],
        is_online: Callable[[], bool]
    ):
        """
        Args:
            remote: Authoritative repository
            local: Mirror used when the remote store is unreachable
            is_online: Connectivity probe
        """
        self.remote = remote
        self.local = local
        self.is_online = is_online

    def new_id(self) -> str:
        return self.remote.new_id()

    def list(self) -> List[T]:
        if self.is_online():
            try:
                entities = self.remote.list()
                self.local.replace_all(entities)
                return entities
            except Exception as e:
                logger.warning(
                    f"Failed to list remote {self.collection}, falling back to cache: {e}"
                )

        return self.local.list()

    def get(self, entity_id: str) -> Optional[T]:
        cached = self.local.get(entity_id)

        if not self.is_online():
            if cached is None:
                raise OfflineError(
                    f"Cannot fetch {entity_id} while offline and no cached version available"
                )
            return cached

        try:
            entity = self.remote.get(entity_id)
        except Exception:
            if cached is None:
                raise
            logger.warning(f"Failed to read {entity_id} remotely, using cached copy")
            return cached

        if entity is None:
            self.local.discard(entity_id)
        else:
            self.local.upsert(entity)
        return entity

    def add(self, entity: T) -> None:
        self._require_online()
        self.remote.add(entity)
        self.local.upsert(entity)

    def edit(self, entity_id: str, new_value: T) -> None:
        self._require_online()
        self.remote.edit(entity_id, new_value)
        self.local.discard(entity_id)
        self.local.upsert(new_value)

    def remove(self, entity_id: str) -> None:
        self._require_online()
        self.remote.remove(entity_id)
        self.local.discard(entity_id)

    def _require_online(self) -> None:
        if not self.is_online():
            raise OfflineError()


class EventsRepositoryCached(CachedRepository[Event], EventsRepository):
    """Events read offline-first."""


class GroupsRepositoryCached(CachedRepository[Group], GroupsRepository):
    """Groups read offline-first."""
