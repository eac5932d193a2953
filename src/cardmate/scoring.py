"""
Score derivation for disc golf rounds.

Pure functions that classify a hole result against par and aggregate a
player's strokes over a round. An unset entry (``None``, or the ``0`` sentinel
left by the score controls) is scored as par: an unplayed hole counts as even.
"""

from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum


class ScoreType(Enum):
    """Classification of a single hole result."""
    ACE = "ace"
    EAGLE = "eagle"
    BIRDIE = "birdie"
    PAR = "par"
    BOGEY = "bogey"
    DOUBLE_BOGEY = "double-bogey"
    TRIPLE_BOGEY_PLUS = "triple-bogey-plus"

    @property
    def label(self) -> str:
        return self.value.replace("-", " ").title().replace("Plus", "+")

@dataclass(frozen=True)
class RoundTotals:
    """Aggregate strokes over a run of holes."""
    total: int
    relative_to_par: int
    par_total: int

def get_score_type(score: int, par: int) -> ScoreType:
    """Classify ``score`` on a hole of ``par``.

    A score of 1 is always an ace, whatever the par. Every integer input maps
    to exactly one type.
    """
    if score == 1:
        return ScoreType.ACE
    difference = score - par
    if difference <= -2:
        return ScoreType.EAGLE
    if difference == -1:
        return ScoreType.BIRDIE
    if difference == 0:
        return ScoreType.PAR
    if difference == 1:
        return ScoreType.BOGEY
    if difference == 2:
        return ScoreType.DOUBLE_BOGEY
    return ScoreType.TRIPLE_BOGEY_PLUS

def is_unset(score: int | None) -> bool:
    return score is None or score == 0

def stroke_or_par(score: int | None, par: int) -> int:
    """Recorded strokes, or par when the hole has no entry."""
    return par if is_unset(score) else score  # type: ignore[return-value]

def display_score_type(score: int | None, par: int) -> ScoreType:
    """Type shown for an entry; unset entries display as par."""
    return get_score_type(stroke_or_par(score, par), par)

def score_at(scores: Sequence[int | None], index: int) -> int | None:
    """Entry at a 0-based hole index of a sparse score list."""
    return scores[index] if 0 <= index < len(scores) else None

def round_totals(
    scores: Sequence[int | None],
    pars: Sequence[int],
    through: int | None = None
) -> RoundTotals:
    """Total strokes and relative-to-par over holes ``1..through``.

    Args:
        scores: Sparse per-hole strokes, 0-based by hole index
        pars: Par for each hole of the course
        through: Last hole (1-based) to include; defaults to every hole

    Returns:
        RoundTotals with unset holes counted as par
    """
    holes = len(pars) if through is None else max(0, min(through, len(pars)))
    total = 0
    par_total = 0
    for index in range(holes):
        par = pars[index]
        total += stroke_or_par(score_at(scores, index), par)
        par_total += par
    return RoundTotals(total=total, relative_to_par=total - par_total, par_total=par_total)

def format_relative(value: int) -> str:
    """Render a relative-to-par figure: ``E``, ``+n`` or ``-n``."""
    if value == 0:
        return "E"
    return f"+{value}" if value > 0 else str(value)
