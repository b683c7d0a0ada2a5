"""Refresh of the local mirror from the remote store."""
import logging

from processor.models import SyncResult
from storage.base import Repository
from storage.local_repository import LocalRepository

logger = logging.getLogger(__name__)


class RepositorySync:
    """Keeps a local repository as a point-in-time copy of a remote one."""

    def __init__(self, remote: Repository, local: LocalRepository):
        self.remote = remote
        self.local = local

    def refresh(self) -> SyncResult:
        """
        Replace the whole local collection with a fresh remote snapshot.

        No diffing is done: entries absent remotely disappear locally and
        the remote order is kept. If the remote read fails the local
        collection is left untouched and the error propagates.

        Returns:
            SyncResult with the number of entries fetched and replaced
        """
        logger.info(f"Refreshing local {self.local.collection} from remote")

        snapshot = self.remote.list()
        replaced = self.local.replace_all(snapshot)

        logger.info(
            f"Refresh complete: {len(snapshot)} fetched, {replaced} replaced",
            extra={'collection': self.local.collection}
        )
        return SyncResult(fetched=len(snapshot), replaced=replaced)
