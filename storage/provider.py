"""Factory building the repositories consumers receive at construction."""
import logging
from contextlib import contextmanager
from typing import Callable, Dict, Iterator, Optional

from config import Settings
from storage.base import EventsRepository, GroupsRepository, Repository
from storage.cached_repository import EventsRepositoryCached, GroupsRepositoryCached
from storage.dynamodb_repository import EventsRepositoryDynamoDB, GroupsRepositoryDynamoDB
from storage.local_repository import EventsRepositoryLocal, GroupsRepositoryLocal

logger = logging.getLogger(__name__)


class RepositoryProvider:
    """
    Builds and memoizes repositories for one process.

    The provider is an ordinary object handed to whoever wires the
    application together. Tests swap implementations with override().
    """

    def __init__(
        self,
        settings: Settings,
        is_online: Optional[Callable[[], bool]] = None
    ):
        self.settings = settings
        self.is_online = is_online or (lambda: True)
        self._instances: Dict[str, Repository] = {}
        self._overrides: Dict[str, Repository] = {}

    def events(self, mode: str = 'remote') -> EventsRepository:
        """
        Return the events repository for ``mode``.

        Args:
            mode: One of 'remote', 'local' or 'cached'

        Raises:
            ValueError: If mode is unknown
        """
        return self._resolve('events', mode)

    def groups(self, mode: str = 'remote') -> GroupsRepository:
        """Return the groups repository for ``mode`` ('remote', 'local' or 'cached')."""
        return self._resolve('groups', mode)

    @contextmanager
    def override(
        self,
        events: Optional[EventsRepository] = None,
        groups: Optional[GroupsRepository] = None
    ) -> Iterator['RepositoryProvider']:
        """
        Temporarily serve the given repositories for every mode.

        Previous overrides are restored on exit.
        """
        previous = dict(self._overrides)
        if events is not None:
            self._overrides['events'] = events
        if groups is not None:
            self._overrides['groups'] = groups
        try:
            yield self
        finally:
            self._overrides = previous

    def _resolve(self, collection: str, mode: str) -> Repository:
        if collection in self._overrides:
            return self._overrides[collection]

        key = f"{collection}:{mode}"
        if key not in self._instances:
            self._instances[key] = self._build(collection, mode)
        return self._instances[key]

    def _build(self, collection: str, mode: str) -> Repository:
        logger.info(f"Building {mode} repository for {collection}")

        if mode == 'remote':
            if collection == 'events':
                return EventsRepositoryDynamoDB(
                    self.settings.events_table, region_name=self.settings.region_name
                )
            return GroupsRepositoryDynamoDB(
                self.settings.groups_table, region_name=self.settings.region_name
            )

        if mode == 'local':
            if collection == 'events':
                return EventsRepositoryLocal()
            return GroupsRepositoryLocal()

        if mode == 'cached':
            remote = self._resolve(collection, 'remote')
            local = self._resolve(collection, 'local')
            if collection == 'events':
                return EventsRepositoryCached(remote, local, self.is_online)
            return GroupsRepositoryCached(remote, local, self.is_online)

        raise ValueError(f"Unknown repository mode: {mode}")
