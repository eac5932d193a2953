"""Tests for player and course management."""

import pytest

from cardmate.exceptions import AuthError
from cardmate.exceptions import ValidationError
from cardmate.models.course import Course
from cardmate.services.auth_service import Session
from cardmate.services.catalog_service import CatalogService


@pytest.fixture
def catalog(store, session):
    return CatalogService(store, session)

def test_add_player_trims_name(catalog, store):
    player = catalog.add_player('  Alice ')
    assert player.name == 'Alice'
    assert player.user_id == 'user-1'
    assert store.select('players', {'id': player.id})[0]['name'] == 'Alice'

@pytest.mark.parametrize("name", ["", "   ", None])
def test_blank_names_rejected(catalog, store, name):
    with pytest.raises(ValidationError):
        catalog.add_player(name)
    assert store.select('players') == []

def test_rename_player(catalog):
    player = catalog.add_player('Alice')
    assert catalog.rename_player(player.id, 'Alicia').name == 'Alicia'
    with pytest.raises(ValidationError):
        catalog.rename_player(player.id, ' ')
    with pytest.raises(ValidationError):
        catalog.rename_player('missing', 'Bob')

def test_rename_other_users_player_not_found(catalog, store):
    other = CatalogService(store, Session(store, 'user-2'))
    player = other.add_player('Eve')
    with pytest.raises(ValidationError):
        catalog.rename_player(player.id, 'Mallory')

def test_add_default_course(catalog):
    course = catalog.add_course()
    assert course.name == 'New Course'
    assert course.layout == 18
    assert course.par_total == 54
    assert course.user_id == 'user-1'

def test_add_given_course(catalog, nine_hole_course):
    course = catalog.add_course(nine_hole_course)
    assert course.id == 'course-9'
    assert course.pars == nine_hole_course.pars

def test_add_course_rejects_blank_name(catalog):
    with pytest.raises(ValidationError):
        catalog.add_course(Course.new('  ', 9))

def test_course_edits(catalog):
    course = catalog.add_course()
    course = catalog.rename_course(course.id, 'Riverside')
    assert course.name == 'Riverside'

    course = catalog.update_hole(course.id, 5, par=0, distance=-10, notes='Mando left')
    hole = course.hole(5)
    assert (hole.par, hole.distance, hole.notes) == (1, 0, 'Mando left')

    course = catalog.set_layout(course.id, '9')
    assert course.layout == 9
    assert course.hole(5).notes == 'Mando left'

    with pytest.raises(ValidationError):
        catalog.set_layout(course.id, 12)

def test_remove_course_deletes_its_scorecards(catalog, store):
    course = catalog.add_course()
    other = catalog.add_course(Course.new('Pines', 9, user_id='user-1'))
    player = catalog.add_player('Alice')
    removed = store.insert('scorecards', {'user_id': 'user-1', 'course_id': course.id, 'total_score': 54})[0]
    kept = store.insert('scorecards', {'user_id': 'user-1', 'course_id': other.id, 'total_score': 27})[0]
    for scorecard in (removed, kept):
        store.insert('scorecard_players', {'scorecard_id': scorecard['id'], 'player_id': player.id})
    events = []
    for table in ('scorecard_players', 'scorecards', 'courses'):
        store.subscribe(table, lambda p, table=table: events.append((table, p['eventType'])))

    catalog.remove_course(course.id)

    assert events == [
        ('scorecard_players', 'DELETE'),
        ('scorecards', 'DELETE'),
        ('courses', 'DELETE'),
    ]
    assert [r['id'] for r in store.select('courses')] == [other.id]
    assert [r['id'] for r in store.select('scorecards')] == [kept['id']]
    assert [r['scorecard_id'] for r in store.select('scorecard_players')] == [kept['id']]

def test_requires_sign_in(store):
    with pytest.raises(AuthError):
        CatalogService(store, Session(store)).add_player('Alice')
