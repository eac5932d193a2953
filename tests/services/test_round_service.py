"""Tests for the in-memory round state."""

import pytest

from cardmate.exceptions import RoundStateError
from cardmate.models.course import Course
from cardmate.models.player import Player
from cardmate.scoring import ScoreType
from cardmate.services.round_service import RoundState


@pytest.fixture
def round_state(nine_hole_course, alice, bob):
    state = RoundState()
    state.select_course(nine_hole_course)
    state.add_player(alice)
    state.add_player(bob)
    return state

def test_add_player_starts_at_par(round_state, nine_hole_course):
    for active in round_state.players:
        assert active.scores == ()
        assert active.total == nine_hole_course.par_total == 30
        assert active.relative_to_par == 0

def test_add_player_requires_course(alice):
    with pytest.raises(RoundStateError):
        RoundState().add_player(alice)

def test_add_player_twice_is_noop(round_state, alice):
    round_state.add_player(alice)
    assert [p.id for p in round_state.players] == ['player-a', 'player-b']

def test_available_players(round_state, alice, bob):
    carol = Player('player-c', 'Carol')
    assert round_state.available_players([alice, bob, carol]) == [carol]

def test_set_score_recomputes_from_all_holes(round_state):
    round_state.set_score('player-a', 1, 2)
    round_state.set_score('player-a', 7, 7)
    alice = round_state.get_player('player-a')
    assert alice.scores[0] == 2
    assert alice.scores[6] == 7
    # -1 on hole 1, +2 on hole 7, every other hole counted as par
    assert alice.relative_to_par == 1
    assert alice.total == 31

    round_state.set_score('player-a', 7, 5)
    assert round_state.get_player('player-a').relative_to_par == -1

def test_set_score_clamps_negative(round_state):
    round_state.set_score('player-a', 2, -3)
    alice = round_state.get_player('player-a')
    assert alice.scores[1] == 0
    # 0 is the unset marker and counts as par
    assert alice.relative_to_par == 0

def test_set_score_unknown_player_is_noop(round_state):
    before = round_state.players
    round_state.set_score('nobody', 1, 4)
    assert round_state.players == before

def test_set_score_hole_out_of_range(round_state):
    with pytest.raises(RoundStateError):
        round_state.set_score('player-a', 10, 3)

def test_increment_and_decrement_start_from_par(round_state):
    round_state.increment_score('player-b')
    assert round_state.get_player('player-b').score_for(1) == 4
    assert round_state.score_type('player-b') == ScoreType.BOGEY

    round_state.decrement_score('player-b')
    round_state.decrement_score('player-b')
    assert round_state.get_player('player-b').score_for(1) == 2
    assert round_state.score_type('player-b') == ScoreType.BIRDIE

def test_decrement_clamps_at_zero(round_state):
    round_state.set_current_score('player-a', 1)
    round_state.decrement_score('player-a')
    round_state.decrement_score('player-a')
    assert round_state.get_player('player-a').score_for(1) >= 0

def test_hole_navigation_is_clamped(round_state):
    assert round_state.retreat_hole() == 1
    for _ in range(20):
        round_state.advance_hole()
    assert round_state.current_hole == 9
    assert round_state.is_last_hole
    assert round_state.current_hole_info.number == 9
    assert round_state.retreat_hole() == 8
    assert not round_state.is_last_hole

def test_relative_through_current(round_state):
    round_state.set_score('player-a', 1, 4)
    round_state.set_score('player-a', 3, 2)
    round_state.go_to_hole(2)
    assert round_state.relative_through_current('player-a') == 1
    round_state.go_to_hole(3)
    assert round_state.relative_through_current('player-a') == -1

def test_reset_round(round_state):
    round_state.set_score('player-a', 1, 5)
    round_state.advance_hole()
    round_state.reset_round()
    assert round_state.players == []
    assert round_state.current_hole == 1
    assert round_state.course is not None

def test_switching_course_clears_scores_and_keeps_roster(round_state):
    round_state.set_score('player-a', 4, 6)
    round_state.advance_hole()
    other = Course.new('Other', 18, course_id='course-18')

    round_state.select_course(other)

    assert [p.id for p in round_state.players] == ['player-a', 'player-b']
    assert all(p.scores == () for p in round_state.players)
    assert all(p.total == 54 and p.relative_to_par == 0 for p in round_state.players)
    assert round_state.current_hole == 1

def test_reselecting_edited_course_rescored(round_state, nine_hole_course):
    round_state.set_score('player-a', 1, 4)
    round_state.select_course(nine_hole_course.with_hole(1, par=4))
    alice = round_state.get_player('player-a')
    assert alice.scores[0] == 4
    assert alice.relative_to_par == 0

def test_reselecting_shortened_course_drops_back_nine(alice):
    course = Course.new('Long Meadow', 18, course_id='course-18')
    state = RoundState(course)
    state.add_player(alice)
    state.set_score('player-a', 2, 2)
    state.set_score('player-a', 15, 7)

    state.select_course(course.with_layout(9))

    active = state.get_player('player-a')
    assert active.scores == (None, 2) + (None,) * 7
    assert active.total == 26
    assert active.relative_to_par == -1

def test_round_totals_across_players(round_state):
    round_state.set_score('player-a', 1, 2)
    round_state.set_score('player-b', 1, 5)
    assert round_state.total_score == 30 + 29 + 2
    assert round_state.total_relative_to_par == 1
