"""Tests for the SQLite store backend."""

import pytest

from cardmate.exceptions import StoreConstraintError
from cardmate.exceptions import StoreError
from cardmate.store.sqlite_store import SqliteStore


@pytest.fixture
def events(store):
    received = []
    store.subscribe('players', received.append)
    return received

def test_insert_assigns_id_and_publishes(store, events):
    rows = store.insert('players', {'user_id': 'u1', 'name': 'Alice'})
    assert rows[0]['id']
    assert events == [{'table': 'players', 'eventType': 'INSERT', 'new': rows[0], 'old': {}}]

def test_json_and_bool_columns(store):
    store.insert('courses', {'id': 'c1', 'user_id': 'u1', 'name': 'Pines', 'layout': '9',
                             'holes': [{'number': 1, 'par': 3}]})
    assert store.select('courses')[0]['holes'] == [{'number': 1, 'par': 3}]

    scorecard = store.insert('scorecards', {'user_id': 'u1', 'course_id': 'c1', 'completed': True})[0]
    assert scorecard['completed'] is True
    assert scorecard['date']

def test_upsert_inserts_then_updates(store, events):
    store.upsert('players', {'id': 'p1', 'user_id': 'u1', 'name': 'Alice'})
    store.upsert('players', {'id': 'p1', 'user_id': 'u1', 'name': 'Alicia'})
    assert [e['eventType'] for e in events] == ['INSERT', 'UPDATE']
    assert events[1]['old']['name'] == 'Alice'
    assert events[1]['new']['name'] == 'Alicia'
    assert len(store.select('players')) == 1

def test_update_and_delete_with_filters(store, events):
    store.insert('players', [
        {'id': 'p1', 'user_id': 'u1', 'name': 'Alice'},
        {'id': 'p2', 'user_id': 'u2', 'name': 'Bob'},
    ])
    updated = store.update('players', {'name': 'Al'}, {'user_id': 'u1'})
    assert [r['id'] for r in updated] == ['p1']

    deleted = store.delete('players', {'id': 'p2'})
    assert deleted[0]['name'] == 'Bob'
    assert events[-1] == {'table': 'players', 'eventType': 'DELETE', 'new': {}, 'old': deleted[0]}
    assert [r['name'] for r in store.select('players')] == ['Al']

def test_subscription_filters(store):
    received = []
    store.subscribe('players', received.append, {'user_id': 'u1'})
    store.insert('players', {'id': 'p1', 'user_id': 'u2', 'name': 'Eve'})
    assert received == []
    store.insert('players', {'id': 'p2', 'user_id': 'u1', 'name': 'Alice'})
    assert len(received) == 1

def test_unsubscribe(store, events):
    subscription = store.subscribe('players', lambda p: None)
    assert store.subscription_count == 2
    subscription.unsubscribe()
    subscription.unsubscribe()
    assert store.subscription_count == 1

def test_select_order(store):
    store.insert('players', [
        {'id': 'p1', 'user_id': 'u1', 'name': 'Bob'},
        {'id': 'p2', 'user_id': 'u1', 'name': 'Alice'},
    ])
    assert [r['name'] for r in store.select('players', order_by='name')] == ['Alice', 'Bob']
    assert [r['name'] for r in store.select('players', order_by='name', descending=True)] == ['Bob', 'Alice']

def test_unknown_table_and_columns(store):
    with pytest.raises(StoreError):
        store.select('nope')
    with pytest.raises(StoreError):
        store.insert('players', {'id': 'p1', 'user_id': 'u1', 'name': 'A', 'colour': 'red'})
    with pytest.raises(StoreError):
        store.select('players', order_by='name; DROP TABLE players')

def test_constraint_violation_is_rolled_back(store, events):
    with pytest.raises(StoreConstraintError) as exc_info:
        store.insert('players', [
            {'id': 'p1', 'user_id': 'u1', 'name': 'Alice'},
            {'id': 'p1', 'user_id': 'u1', 'name': 'Again'},
        ])
    assert exc_info.value.details['table'] == 'players'
    assert store.select('players') == []
    assert events == []

def test_layout_check_constraint(store):
    with pytest.raises(StoreConstraintError):
        store.insert('courses', {'id': 'c1', 'user_id': 'u1', 'name': 'X', 'layout': '12'})

def test_file_database_persists(tmp_path):
    path = str(tmp_path / "data" / "cardmate.db")
    first = SqliteStore(path)
    first.insert('players', {'id': 'p1', 'user_id': 'u1', 'name': 'Alice'})
    first.close()

    second = SqliteStore(path)
    assert second.select('players')[0]['name'] == 'Alice'
    second.close()
