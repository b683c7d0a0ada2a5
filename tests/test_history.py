"""Unit tests for HistoryReducer."""
import threading
from concurrent.futures import ThreadPoolExecutor
from datetime import timedelta
from unittest.mock import Mock

import pytest

from storage.dynamodb_repository import EventsRepositoryDynamoDB
from storage.local_repository import EventsRepositoryLocal
from viewmodel.history import HistoryReducer, expired_events
from viewmodel.state import ListState


@pytest.fixture
def repository():
    return EventsRepositoryLocal()


@pytest.fixture
def reducer(repository, now):
    return HistoryReducer(repository, clock=lambda: now)


def test_initial_state(reducer):
    assert reducer.state == ListState(items=[], error_message=None, is_loading=False)


def test_keeps_only_expired(reducer, repository, make_event, now):
    repository.add(make_event(event_id='ended', start=now - timedelta(hours=3), duration=60))
    repository.add(make_event(event_id='ongoing', start=now - timedelta(minutes=30), duration=60))
    repository.add(make_event(event_id='upcoming', start=now + timedelta(hours=2), duration=60))

    reducer.refresh()

    state = reducer.state
    assert len(state.items) == 1
    assert state.items[0].event_id == 'ended'
    assert state.is_loading is False
    assert state.error_message is None


def test_sorted_most_recent_first(reducer, repository, make_event, now):
    repository.add(make_event(event_id='week', start=now - timedelta(days=7)))
    repository.add(make_event(event_id='day', start=now - timedelta(days=1)))

    reducer.refresh()

    assert [event.event_id for event in reducer.state.items] == ['day', 'week']


def test_failure_sets_error_and_empties_items(repository, make_event, now):
    failing = Mock()
    failing.list.side_effect = ConnectionError('Network error')
    reducer = HistoryReducer(failing, clock=lambda: now)

    reducer.refresh()

    state = reducer.state
    assert state.items == []
    assert state.is_loading is False
    assert state.error_message == 'Failed to load history: Network error'


def test_clear_error_keeps_items(repository, make_event, now):
    flaky = Mock()
    flaky.list.return_value = [make_event(event_id='old', start=now - timedelta(days=2))]
    reducer = HistoryReducer(flaky, clock=lambda: now)
    reducer.refresh()
    items = reducer.state.items

    reducer._update(lambda state: ListState(items=state.items, error_message='boom'))
    reducer.clear_error()

    assert reducer.state.error_message is None
    assert reducer.state.items == items


def test_loading_flag_published_first(reducer, repository, make_event, now):
    published = []
    reducer.subscribe(published.append)

    reducer.refresh()

    assert [state.is_loading for state in published] == [True, False]


def test_refresh_in_executor(reducer, repository, make_event, now):
    repository.add(make_event(event_id='ended', start=now - timedelta(days=1)))

    with ThreadPoolExecutor(max_workers=1) as executor:
        reducer.refresh_in(executor).result(timeout=5)

    assert [event.event_id for event in reducer.state.items] == ['ended']


def test_superseded_refresh_is_not_published(make_event, now):
    """A slow first refresh finishing after a second one must not win."""
    stale = [make_event(event_id='stale', start=now - timedelta(days=3))]
    fresh = [make_event(event_id='fresh', start=now - timedelta(days=1))]
    first_started = threading.Event()
    release_first = threading.Event()
    calls = []

    class SlowRepository:
        def list(self):
            calls.append(None)
            if len(calls) == 1:
                first_started.set()
                release_first.wait(timeout=5)
                return stale
            return fresh

    reducer = HistoryReducer(SlowRepository(), clock=lambda: now)

    first = threading.Thread(target=reducer.refresh)
    first.start()
    assert first_started.wait(timeout=5)

    reducer.refresh()
    release_first.set()
    first.join(timeout=5)

    assert [event.event_id for event in reducer.state.items] == ['fresh']
    assert reducer.state.is_loading is False


def test_expired_events_helper(make_event, now):
    events = [
        make_event(event_id='a', start=now - timedelta(days=2)),
        make_event(event_id='b', start=now + timedelta(days=2)),
        make_event(event_id='c', start=now - timedelta(hours=5))
    ]

    assert [event.event_id for event in expired_events(events, now)] == ['c', 'a']


def test_remote_row_without_offset_does_not_hide_others(dynamodb_tables, make_event, now):
    repository = EventsRepositoryDynamoDB('test-events', region_name='us-east-1')
    repository.add(make_event(event_id='ended', start=now - timedelta(days=1)))
    dynamodb_tables['events'].put_item(Item={
        'event_id': 'naive',
        'title': 'x',
        'owner_id': 'o',
        'date': '2025-03-10T10:00:00'
    })
    reducer = HistoryReducer(repository, clock=lambda: now)

    reducer.refresh()

    assert reducer.state.error_message is None
    assert [event.event_id for event in reducer.state.items] == ['ended']
