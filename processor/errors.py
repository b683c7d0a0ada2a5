"""Domain errors raised by repositories."""
from dataclasses import dataclass
from enum import Enum


class ErrorCode(Enum):
    """Domain error codes."""

    NOT_FOUND = "NOT_FOUND"
    OFFLINE = "OFFLINE"
    MEMBERSHIP = "MEMBERSHIP"


@dataclass(frozen=True)
class DomainError(Exception):
    """Base domain error with code and user-safe message."""

    code: ErrorCode
    message: str

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"


class NotFoundError(DomainError):
    """Raised when an id is absent from a repository."""

    def __init__(self, collection: str, entity_id: str) -> None:
        super().__init__(
            code=ErrorCode.NOT_FOUND,
            message=f"{collection} entry not found ({entity_id})",
        )
        self.collection = collection
        self.entity_id = entity_id


class OfflineError(DomainError):
    """Raised when an operation needs the remote store while offline."""

    def __init__(self, message: str = "This operation requires an internet connection") -> None:
        super().__init__(code=ErrorCode.OFFLINE, message=message)


class MembershipError(DomainError):
    """Raised on joining a group twice or leaving a group one is not part of."""

    def __init__(self, group_id: str, user_id: str, reason: str) -> None:
        super().__init__(
            code=ErrorCode.MEMBERSHIP,
            message=f"User {user_id} {reason} group {group_id}",
        )
        self.group_id = group_id
        self.user_id = user_id
