"""Deep links into the app."""
from typing import Optional
from urllib.parse import quote, unquote, urlparse

EVENT_SCHEME = 'joinme'
EVENT_HOST = 'event'
INVITATION_BASE_URL = 'https://joinme.app'
INVITATION_PATH = 'invite'


def event_link(event_id: str) -> str:
    """Return the URI opening the event screen, e.g. joinme://event/abc."""
    return f"{EVENT_SCHEME}://{EVENT_HOST}/{quote(event_id, safe='')}"


def parse_event_link(uri: str) -> Optional[str]:
    """
    Extract the event id from an event deep link.

    Whether the id refers to an existing event is left to the screen
    that opens it.

    Args:
        uri: Link such as joinme://event/{id}

    Returns:
        The event id, or None if the link is not an event link
    """
    parsed = urlparse(uri)
    if parsed.scheme != EVENT_SCHEME or parsed.netloc != EVENT_HOST:
        return None

    segments = [segment for segment in parsed.path.split('/') if segment]
    if len(segments) != 1:
        return None
    return unquote(segments[0])


def invitation_link(token: str) -> str:
    return f"{INVITATION_BASE_URL}/{INVITATION_PATH}/{quote(token, safe='')}"


def parse_invitation_link(uri: str) -> Optional[str]:
    """Return the token of a link shaped like https://joinme.app/invite/{token}."""
    parsed = urlparse(uri)
    if not parsed.path:
        return None

    segments = [segment for segment in parsed.path.split('/') if segment]
    if len(segments) != 2 or segments[0] != INVITATION_PATH:
        return None
    return unquote(segments[1])
