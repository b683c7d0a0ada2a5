"""
AWS Lambda handler for the JoinMe event views and mirror refresh.

The local mirror lives in process memory and is built fresh for each
invocation, so the ``sync`` action persists nothing: it checks that both
remote collections can be mirrored and reports how many entries each
refresh fetched and replaced.
"""
import json
import logging
import time
from typing import Any, Dict

from config import load_settings
from processor.models import Event
from storage.provider import RepositoryProvider
from storage.sync import RepositorySync
from viewmodel.history import HistoryReducer
from viewmodel.overview import OverviewReducer


# Configure JSON logging
class JsonFormatter(logging.Formatter):
    """Custom JSON formatter for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON."""
        log_data = {
            'timestamp': self.formatTime(record),
            'level': record.levelname,
            'message': record.getMessage(),
            'logger': record.name
        }

        if record.exc_info:
            log_data['exception'] = self.formatException(record.exc_info)

        return json.dumps(log_data)


def setup_logging(log_level: str = 'INFO') -> None:
    """
    Configure logging with JSON formatter.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
    """
    root_logger = logging.getLogger()

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler()
    handler.setFormatter(JsonFormatter())
    root_logger.addHandler(handler)

    root_logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))


def serialize_event(event: Event) -> Dict[str, Any]:
    """Convert an Event to a JSON-compatible dict."""
    data = {
        'event_id': event.event_id,
        'type': event.type.value,
        'title': event.title,
        'description': event.description,
        'date': event.date.isoformat(),
        'duration': event.duration,
        'participants': list(event.participants),
        'max_participants': event.max_participants,
        'visibility': event.visibility.value,
        'owner_id': event.owner_id,
        'location': None
    }
    if event.location:
        data['location'] = {
            'latitude': event.location.latitude,
            'longitude': event.location.longitude,
            'name': event.location.name
        }
    return data


def _response(status_code: int, body: Dict[str, Any], start_time: float) -> Dict[str, Any]:
    body['duration_seconds'] = round(time.time() - start_time, 2)
    return {'statusCode': status_code, 'body': json.dumps(body)}


def _history(provider: RepositoryProvider, start_time: float) -> Dict[str, Any]:
    reducer = HistoryReducer(provider.events())
    reducer.refresh()
    state = reducer.state

    if state.error_message:
        return _response(500, {'message': state.error_message}, start_time)

    return _response(
        200,
        {
            'message': 'History loaded',
            'events': [serialize_event(event) for event in state.items]
        },
        start_time
    )


def _overview(provider: RepositoryProvider, start_time: float) -> Dict[str, Any]:
    reducer = OverviewReducer(provider.events())
    reducer.refresh()
    state = reducer.state

    if state.error_message:
        return _response(500, {'message': state.error_message}, start_time)

    return _response(
        200,
        {
            'message': 'Overview loaded',
            'ongoing': [serialize_event(event) for event in state.ongoing],
            'upcoming': [serialize_event(event) for event in state.upcoming]
        },
        start_time
    )


def _sync(provider: RepositoryProvider, start_time: float) -> Dict[str, Any]:
    """Mirror events then groups into this invocation's local stores and report counts."""
    logger = logging.getLogger(__name__)
    statistics = {}

    for collection in ('events', 'groups'):
        resolve = provider.events if collection == 'events' else provider.groups
        sync = RepositorySync(resolve('remote'), resolve('local'))
        try:
            result = sync.refresh()
        except Exception as e:
            logger.error(
                f"Failed to refresh local {collection}: {str(e)}",
                extra={'error_type': type(e).__name__},
                exc_info=True
            )
            return _response(
                500,
                {
                    'message': f'Failed to refresh {collection}',
                    'error': str(e),
                    'error_type': type(e).__name__,
                    'note': 'Previous local entries were kept'
                },
                start_time
            )
        statistics[collection] = {'fetched': result.fetched, 'replaced': result.replaced}

    return _response(
        200,
        {'message': 'Refresh completed successfully', 'statistics': statistics},
        start_time
    )


ACTIONS = {
    'history': _history,
    'overview': _overview,
    'sync': _sync
}


def lambda_handler(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    """
    Main Lambda handler function.

    Args:
        event: Invocation payload; ``action`` selects history (default),
            overview or sync
        context: Lambda context object

    Returns:
        Response dict with statusCode and JSON body
    """
    settings = load_settings()

    setup_logging(settings.log_level)
    logger = logging.getLogger(__name__)

    start_time = time.time()
    action = (event or {}).get('action', 'history')
    logger.info(
        f"Lambda execution started",
        extra={
            'action': action,
            'events_table': settings.events_table,
            'groups_table': settings.groups_table
        }
    )

    handler = ACTIONS.get(action)
    if handler is None:
        logger.warning(f"Unknown action: {action}")
        return _response(400, {'message': f'Unknown action: {action}'}, start_time)

    try:
        provider = RepositoryProvider(settings)
        response = handler(provider, start_time)
    except Exception as e:
        logger.error(
            f"Lambda execution failed: {str(e)}",
            extra={'error_type': type(e).__name__},
            exc_info=True
        )
        return _response(
            500,
            {
                'message': 'Request failed',
                'error': str(e),
                'error_type': type(e).__name__
            },
            start_time
        )

    logger.info(
        f"Lambda execution completed",
        extra={'action': action, 'status_code': response['statusCode']}
    )
    return response
