"""Repository interfaces shared by the remote and local stores."""
import dataclasses
from abc import ABC, abstractmethod
from typing import Generic, List, Optional, TypeVar

from processor.errors import MembershipError, NotFoundError
from processor.models import Event, Group

T = TypeVar('T')


class Repository(ABC, Generic[T]):
    """
    Capability shared by every store of entities keyed by a string id.

    Edits are full-record replacements; there is no partial update.
    """

    collection = 'entities'

    @abstractmethod
    def new_id(self) -> str:
        """Return a fresh identifier for an entity of this collection."""

    @abstractmethod
    def list(self) -> List[T]:
        """Return every entity in store order."""

    @abstractmethod
    def get(self, entity_id: str) -> Optional[T]:
        """Return the entity with the given id, or None if absent."""

    @abstractmethod
    def add(self, entity: T) -> None:
        """Store a new entity."""

    @abstractmethod
    def edit(self, entity_id: str, new_value: T) -> None:
        """Replace the entity stored under ``entity_id`` with ``new_value``."""

    @abstractmethod
    def remove(self, entity_id: str) -> None:
        """Delete the entity stored under ``entity_id``."""

    def require(self, entity_id: str) -> T:
        """
        Return the entity with the given id.

        Raises:
            NotFoundError: If no entity is stored under ``entity_id``
        """
        entity = self.get(entity_id)
        if entity is None:
            raise NotFoundError(self.collection, entity_id)
        return entity


class EventsRepository(Repository[Event]):
    """Store of Event records."""

    collection = 'events'

    def events_by_ids(self, event_ids: List[str]) -> List[Event]:
        """Return the events matching ``event_ids``, skipping unknown ids."""
        events = []
        for event_id in event_ids:
            event = self.get(event_id)
            if event is not None:
                events.append(event)
        return events


class GroupsRepository(Repository[Group]):
    """Store of Group records with membership helpers."""

    collection = 'groups'

    def join(self, group_id: str, user_id: str) -> Group:
        """
        Add a user to a group's members.

        Args:
            group_id: Group to join
            user_id: Joining user

        Returns:
            The updated Group

        Raises:
            NotFoundError: If the group does not exist
            MembershipError: If the user is already a member
        """
        group = self.require(group_id)
        if user_id in group.member_ids:
            raise MembershipError(group_id, user_id, 'is already a member of')

        updated = dataclasses.replace(group, member_ids=group.member_ids + [user_id])
        self.edit(group_id, updated)
        return updated

    def leave(self, group_id: str, user_id: str) -> Group:
        """
        Remove a user from a group's members.

        Args:
            group_id: Group to leave
            user_id: Leaving user

        Returns:
            The updated Group

        Raises:
            NotFoundError: If the group does not exist
            MembershipError: If the user is not a member
        """
        group = self.require(group_id)
        if user_id not in group.member_ids:
            raise MembershipError(group_id, user_id, 'is not a member of')

        updated = dataclasses.replace(
            group,
            member_ids=[member for member in group.member_ids if member != user_id]
        )
        self.edit(group_id, updated)
        return updated

    def common_groups(self, user_ids: List[str]) -> List[Group]:
        """Return the groups in which every one of ``user_ids`` is a member."""
        return [
            group for group in self.list()
            if all(user_id in group.member_ids for user_id in user_ids)
        ]
