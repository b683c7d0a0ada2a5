"""Unit tests for the offline-first repository."""
from unittest.mock import Mock

import pytest

from processor.errors import OfflineError
from storage.cached_repository import EventsRepositoryCached
from storage.local_repository import EventsRepositoryLocal


class Connectivity:
    """Switchable connectivity probe."""

    def __init__(self, online=True):
        self.online = online

    def __call__(self):
        return self.online


@pytest.fixture
def connectivity():
    return Connectivity()


@pytest.fixture
def remote():
    return EventsRepositoryLocal()


@pytest.fixture
def local():
    return EventsRepositoryLocal()


@pytest.fixture
def cached(remote, local, connectivity):
    return EventsRepositoryCached(remote, local, connectivity)


class TestReads:
    """Read strategy."""

    def test_online_list_mirrors_remote(self, cached, remote, local, make_event):
        remote.add(make_event(event_id='a'))

        events = cached.list()

        assert [event.event_id for event in events] == ['a']
        assert local.list() == events

    def test_offline_list_uses_mirror(self, cached, remote, local, connectivity, make_event):
        local.add(make_event(event_id='cached'))
        remote.add(make_event(event_id='remote'))
        connectivity.online = False

        assert [event.event_id for event in cached.list()] == ['cached']

    def test_remote_failure_falls_back_to_mirror(self, local, connectivity, make_event):
        failing = Mock()
        failing.list.side_effect = ConnectionError('timeout')
        local.add(make_event(event_id='cached'))
        cached = EventsRepositoryCached(failing, local, connectivity)

        assert [event.event_id for event in cached.list()] == ['cached']

    def test_offline_get_without_copy_raises(self, cached, connectivity):
        connectivity.online = False

        with pytest.raises(OfflineError):
            cached.get('missing')

    def test_offline_get_with_copy(self, cached, local, connectivity, make_event):
        local.add(make_event(event_id='a'))
        connectivity.online = False

        assert cached.get('a').event_id == 'a'

    def test_online_get_refreshes_copy(self, cached, remote, local, make_event):
        local.add(make_event(event_id='a', title='Old'))
        remote.add(make_event(event_id='a', title='New'))

        assert cached.get('a').title == 'New'
        assert local.get('a').title == 'New'

    def test_remote_get_failure_uses_copy(self, local, connectivity, make_event):
        failing = Mock()
        failing.get.side_effect = ConnectionError('timeout')
        local.add(make_event(event_id='a'))
        cached = EventsRepositoryCached(failing, local, connectivity)

        assert cached.get('a').event_id == 'a'

    def test_remote_get_failure_without_copy_propagates(self, local, connectivity):
        failing = Mock()
        failing.get.side_effect = ConnectionError('timeout')
        cached = EventsRepositoryCached(failing, local, connectivity)

        with pytest.raises(ConnectionError):
            cached.get('a')


class TestWrites:
    """Write strategy."""

    def test_add_writes_remote_then_mirror(self, cached, remote, local, make_event):
        cached.add(make_event(event_id='a'))

        assert remote.get('a') is not None
        assert local.get('a') is not None

    def test_writes_require_connectivity(self, cached, remote, connectivity, make_event):
        connectivity.online = False

        with pytest.raises(OfflineError):
            cached.add(make_event(event_id='a'))
        with pytest.raises(OfflineError):
            cached.remove('a')

        assert remote.list() == []

    def test_edit_and_remove(self, cached, remote, local, make_event):
        cached.add(make_event(event_id='a', title='Old'))

        cached.edit('a', make_event(event_id='a', title='New'))
        assert local.get('a').title == 'New'
        assert remote.get('a').title == 'New'

        cached.remove('a')
        assert local.get('a') is None
        assert remote.get('a') is None

    def test_new_id_comes_from_remote(self, local, connectivity):
        remote = Mock()
        remote.new_id.return_value = 'remote-id'
        cached = EventsRepositoryCached(remote, local, connectivity)

        assert cached.new_id() == 'remote-id'
