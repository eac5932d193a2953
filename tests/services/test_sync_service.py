"""Tests for change event decoding, the mirror reducer and the sync service."""

from unittest.mock import Mock

import pytest

from cardmate.services.auth_service import Session
from cardmate.services.catalog_service import CatalogService
from cardmate.services.sync_service import CollectionMirror
from cardmate.services.sync_service import Deleted
from cardmate.services.sync_service import Inserted
from cardmate.services.sync_service import MirrorState
from cardmate.services.sync_service import SyncService
from cardmate.services.sync_service import Unknown
from cardmate.services.sync_service import Updated
from cardmate.services.sync_service import apply_remote_event
from cardmate.services.sync_service import parse_change
from cardmate.models.player import Player


@pytest.fixture
def state():
    return MirrorState(records=({'id': 'a', 'name': 'Alice'}, {'id': 'b', 'name': 'Bob'}))

def test_parse_change():
    assert parse_change({'eventType': 'INSERT', 'new': {'id': 'x'}, 'old': {}}) == Inserted({'id': 'x'})
    assert parse_change({'eventType': 'UPDATE', 'new': {'id': 'x'}, 'old': {'id': 'x'}}) == Updated({'id': 'x'}, {'id': 'x'})
    assert parse_change({'eventType': 'DELETE', 'new': {}, 'old': {'id': 'x'}}) == Deleted({'id': 'x'})
    assert isinstance(parse_change({'eventType': 'TRUNCATE'}), Unknown)
    assert isinstance(parse_change({'eventType': 'DELETE', 'old': {}}), Unknown)

def test_delete_removes_by_id(state):
    result = apply_remote_event(state, Deleted({'id': 'a'}))
    assert result.ids == ['b']
    assert not result.stale
    # Input state is not modified
    assert state.ids == ['a', 'b']

def test_delete_unknown_id_is_noop(state):
    assert apply_remote_event(state, Deleted({'id': 'zzz'})).records == state.records

def test_insert_appends_and_update_replaces(state):
    inserted = apply_remote_event(state, Inserted({'id': 'c', 'name': 'Carol'}))
    assert inserted.ids == ['a', 'b', 'c']

    updated = apply_remote_event(inserted, Updated({'id': 'a', 'name': 'Alicia'}))
    assert updated.ids == ['a', 'b', 'c']
    assert updated.records[0]['name'] == 'Alicia'

def test_unknown_or_id_less_event_marks_stale(state):
    assert apply_remote_event(state, Unknown({'eventType': '?'})).stale
    assert apply_remote_event(state, Updated({'name': 'no id'})).stale
    assert apply_remote_event(state, Deleted({'name': 'no id'})).stale

def test_mirror_refetches_when_stale(store):
    store.insert('players', {'id': 'p1', 'user_id': 'user-1', 'name': 'Alice'})
    mirror = CollectionMirror(store, 'players', Player.from_record)
    mirror.start('user-1')
    assert [p.name for p in mirror.items] == ['Alice']

    store.insert('players', {'id': 'p2', 'user_id': 'user-1', 'name': 'Bob'})
    mirror.state = MirrorState()
    mirror._on_change({'eventType': 'SOMETHING'})
    assert sorted(p.name for p in mirror.items) == ['Alice', 'Bob']
    assert not mirror.state.stale

def test_mirror_filters_by_owner(store):
    mirror = CollectionMirror(store, 'players', Player.from_record)
    mirror.start('user-1')
    store.insert('players', {'id': 'p9', 'user_id': 'someone-else', 'name': 'Eve'})
    assert mirror.items == []

def test_mirror_notifies_listeners(store):
    mirror = CollectionMirror(store, 'players', Player.from_record)
    listener = Mock()
    mirror.add_listener(listener)
    mirror.start('user-1')
    store.insert('players', {'id': 'p1', 'user_id': 'user-1', 'name': 'Alice'})
    assert listener.call_count == 2
    assert [p.name for p in listener.call_args[0][0]] == ['Alice']

def test_sync_follows_catalog_writes(store, session):
    sync = SyncService(store, session)
    catalog = CatalogService(store, session)

    player = catalog.add_player('Alice')
    course = catalog.add_course()
    assert [p.id for p in sync.players.items] == [player.id]
    assert [c.id for c in sync.courses.items] == [course.id]

    catalog.rename_player(player.id, 'Alicia')
    assert sync.players.get(player.id).name == 'Alicia'

    catalog.set_layout(course.id, 9)
    assert sync.courses.get(course.id).layout == 9

    catalog.remove_player(player.id)
    assert sync.players.items == []

def test_sync_starts_on_sign_in_and_clears_on_sign_out(store):
    store.insert('players', {'id': 'p1', 'user_id': 'user-1', 'name': 'Alice'})
    session = Session(store)
    sync = SyncService(store, session)
    assert sync.players.items == []
    assert store.subscription_count == 0

    session.sign_in('user-1')
    assert [p.name for p in sync.players.items] == ['Alice']
    assert store.subscription_count == 2

    session.sign_out()
    assert sync.players.items == []
    assert sync.courses.items == []
    assert store.subscription_count == 0

def test_sync_close_unsubscribes(store, session):
    sync = SyncService(store, session)
    assert store.subscription_count == 2
    sync.close()
    assert store.subscription_count == 0
    # Later identity changes are ignored
    session.sign_out()
    session.sign_in('user-2')
    assert store.subscription_count == 0
