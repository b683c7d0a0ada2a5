"""Group list screen state."""
import logging
from dataclasses import replace

from storage.base import GroupsRepository
from viewmodel.state import ListState, StateReducer

logger = logging.getLogger(__name__)


class GroupListReducer(StateReducer[ListState]):
    """Publishes the groups of a repository and handles leaving one."""

    def __init__(self, repository: GroupsRepository):
        super().__init__(ListState())
        self.repository = repository

    def refresh(self) -> None:
        ticket = self._begin()

        try:
            groups = self.repository.list()
        except Exception as e:
            logger.error(f"Error fetching groups: {e}", exc_info=True)
            self._publish_if_latest(
                ticket,
                ListState(items=[], error_message=f"Failed to load groups: {e}")
            )
            return

        self._publish_if_latest(ticket, ListState(items=groups))

    def leave_group(self, group_id: str, user_id: str) -> bool:
        """
        Remove ``user_id`` from the group, then reload the list.

        Returns:
            True if the user left the group
        """
        try:
            self.repository.leave(group_id, user_id)
        except Exception as e:
            logger.error(f"Error leaving group {group_id}: {e}", exc_info=True)
            message = f"Failed to leave group: {e}"
            self._update(lambda state: replace(state, error_message=message))
            return False

        self.refresh()
        return True
