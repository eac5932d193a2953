"""Tests for score classification and round totals."""

import pytest

from cardmate.models.player import ActivePlayer
from cardmate.models.player import Player
from cardmate.scoring import ScoreType
from cardmate.scoring import display_score_type
from cardmate.scoring import format_relative
from cardmate.scoring import get_score_type
from cardmate.scoring import round_totals
from cardmate.scoring import stroke_or_par


@pytest.mark.parametrize("score,par,expected", [
    (1, 3, ScoreType.ACE),
    (1, 5, ScoreType.ACE),
    (1, 2, ScoreType.ACE),
    (2, 5, ScoreType.EAGLE),
    (2, 4, ScoreType.EAGLE),
    (2, 3, ScoreType.BIRDIE),
    (3, 3, ScoreType.PAR),
    (4, 3, ScoreType.BOGEY),
    (5, 3, ScoreType.DOUBLE_BOGEY),
    (6, 3, ScoreType.TRIPLE_BOGEY_PLUS),
    (11, 3, ScoreType.TRIPLE_BOGEY_PLUS),
])
def test_get_score_type(score, par, expected):
    assert get_score_type(score, par) == expected

def test_ace_overrides_par_one():
    """A hole in one on a par 1 is still an ace, not a par."""
    assert get_score_type(1, 1) == ScoreType.ACE

def test_get_score_type_is_total():
    """Every integer pair maps to some type without raising."""
    for score in range(-3, 15):
        for par in range(1, 7):
            assert isinstance(get_score_type(score, par), ScoreType)

def test_score_type_labels():
    assert ScoreType.PAR.label == "Par"
    assert ScoreType.DOUBLE_BOGEY.label == "Double Bogey"
    assert ScoreType.TRIPLE_BOGEY_PLUS.label == "Triple Bogey +"

@pytest.mark.parametrize("score,expected", [(None, 4), (0, 4), (2, 2), (7, 7)])
def test_stroke_or_par(score, expected):
    assert stroke_or_par(score, 4) == expected

def test_display_score_type_for_unset_is_par():
    assert display_score_type(None, 4) == ScoreType.PAR
    assert display_score_type(0, 3) == ScoreType.PAR

def test_round_totals_example():
    """Pars 3, 3, 4 scored 3, 4, 5."""
    pars = [3, 3, 4]
    scores = [3, 4, 5]

    assert [get_score_type(s, p) for s, p in zip(scores, pars)] == [
        ScoreType.PAR, ScoreType.BOGEY, ScoreType.BOGEY
    ]
    totals = round_totals(scores, pars)
    assert totals.total == 12
    assert totals.relative_to_par == 2
    assert totals.par_total == 10

def test_new_player_totals_are_par():
    """A player with no scores totals the course par and is even."""
    active = ActivePlayer.build(Player('p1', 'Alice'), [], [3, 3, 4])
    assert active.total == 10
    assert active.relative_to_par == 0

def test_totals_are_recomputed_from_scratch():
    pars = [3, 3, 4, 5]
    scores = [2, None, 6, 0]
    assert round_totals(scores, pars) == round_totals(scores, pars)
    player = Player('p1', 'Alice')
    assert ActivePlayer.build(player, scores, pars) == ActivePlayer.build(player, scores, pars)
    assert scores == [2, None, 6, 0]

def test_round_totals_sparse_scores():
    totals = round_totals([None, 5], [3, 4, 3])
    assert totals.total == 3 + 5 + 3
    assert totals.relative_to_par == 1

def test_round_totals_through_hole():
    pars = [3, 3, 4, 5]
    scores = [2, 3, 6, 9]
    assert round_totals(scores, pars, through=1).relative_to_par == -1
    assert round_totals(scores, pars, through=3).relative_to_par == 1
    assert round_totals(scores, pars, through=3).total == 11
    # Out of range bounds are clamped
    assert round_totals(scores, pars, through=10) == round_totals(scores, pars)
    assert round_totals(scores, pars, through=0).total == 0

def test_relative_is_sum_of_differences():
    pars = [3, 4, 5, 3, 3]
    scores = [2, 4, 7, None, 1]
    totals = round_totals(scores, pars)
    expected = sum((s if s else p) - p for s, p in zip(scores, pars))
    assert totals.relative_to_par == expected
    assert totals.total == totals.par_total + expected

@pytest.mark.parametrize("value,expected", [(0, "E"), (3, "+3"), (-2, "-2")])
def test_format_relative(value, expected):
    assert format_relative(value) == expected
