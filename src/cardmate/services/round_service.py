"""
In-memory state of the round in progress.
"""

from collections.abc import Iterable

from cardmate.exceptions import RoundStateError
from cardmate.models.course import Course
from cardmate.models.course import Hole
from cardmate.models.player import ActivePlayer
from cardmate.models.player import Player
from cardmate.scoring import ScoreType
from cardmate.scoring import display_score_type
from cardmate.scoring import round_totals
from cardmate.scoring import stroke_or_par
from cardmate.utils.logging_utils import EnhancedLoggerMixin


class RoundState(EnhancedLoggerMixin):
    """Selected course, active roster and current hole pointer.

    Each active player's totals are rebuilt from the full score list on every
    mutation. The hole pointer stays within ``[1, course.hole_count]``.
    """

    def __init__(self, course: Course | None = None):
        super().__init__()
        self._course = course
        self._players: list[ActivePlayer] = []
        self._current_hole = 1

    @property
    def course(self) -> Course | None:
        return self._course

    @property
    def players(self) -> list[ActivePlayer]:
        return list(self._players)

    @property
    def current_hole(self) -> int:
        return self._current_hole

    @property
    def hole_count(self) -> int:
        return self._course.hole_count if self._course else 1

    @property
    def is_in_progress(self) -> bool:
        return bool(self._players)

    @property
    def is_last_hole(self) -> bool:
        """True on the final hole, where the next step is review."""
        return self._course is not None and self._current_hole == self.hole_count

    def _require_course(self) -> Course:
        if self._course is None:
            raise RoundStateError("Select a course before starting a round.")
        return self._course

    @property
    def current_hole_info(self) -> Hole:
        return self._require_course().hole(self._current_hole)

    def get_player(self, player_id: str) -> ActivePlayer | None:
        return next((p for p in self._players if p.id == player_id), None)

    def select_course(self, course: Course) -> None:
        """Switch the round to ``course``.

        The roster stays; entered scores are cleared since their hole
        indices would refer to another course. The pointer returns to hole 1.
        """
        switching = self._course is not None and self._course.id != course.id
        self._course = course
        if switching and any(p.scores for p in self._players):
            self.warning("Course changed mid-round, clearing scores", course_id=course.id)
            self._players = [ActivePlayer.build(p.player, [], course.pars) for p in self._players]
        else:
            # Same course, possibly edited: keep scores and recompute against its pars
            self._players = [p.rescored(course.pars) for p in self._players]
        if switching:
            self._current_hole = 1
        self._current_hole = min(self._current_hole, course.hole_count)

    def available_players(self, players: Iterable[Player]) -> list[Player]:
        """Roster candidates that are not yet in the round."""
        return [p for p in players if self.get_player(p.id) is None]

    def add_player(self, player: Player) -> ActivePlayer:
        """Add ``player`` with no scores: total is the course par, relative 0."""
        course = self._require_course()
        existing = self.get_player(player.id)
        if existing is not None:
            self.debug("Player already in round", player_id=player.id)
            return existing
        active = ActivePlayer.build(player, [], course.pars)
        self._players.append(active)
        self.debug("Player added to round", player_id=player.id, total=active.total)
        return active

    def remove_player(self, player_id: str) -> None:
        self._players = [p for p in self._players if p.id != player_id]

    def set_score(self, player_id: str, hole: int, value: int) -> None:
        """Record ``value`` (clamped to 0 or more) for ``player_id`` on ``hole``.

        Unknown players are ignored.
        """
        course = self._require_course()
        if not 1 <= hole <= course.hole_count:
            raise RoundStateError(f"Hole {hole} is outside 1..{course.hole_count}")
        for index, active in enumerate(self._players):
            if active.id == player_id:
                self._players[index] = active.with_score(hole, max(0, int(value)), course.pars)
                return
        self.debug("Score for player not in round ignored", player_id=player_id)

    def set_current_score(self, player_id: str, value: int) -> None:
        self.set_score(player_id, self._current_hole, value)

    def displayed_score(self, player_id: str, hole: int | None = None) -> int:
        """Score shown for a hole: the entry, or par when unset."""
        hole = hole or self._current_hole
        par = self._require_course().hole(hole).par
        active = self.get_player(player_id)
        return stroke_or_par(active.score_for(hole) if active else None, par)

    def increment_score(self, player_id: str) -> None:
        self.set_current_score(player_id, self.displayed_score(player_id) + 1)

    def decrement_score(self, player_id: str) -> None:
        self.set_current_score(player_id, max(0, self.displayed_score(player_id) - 1))

    def score_type(self, player_id: str, hole: int | None = None) -> ScoreType:
        hole = hole or self._current_hole
        par = self._require_course().hole(hole).par
        active = self.get_player(player_id)
        return display_score_type(active.score_for(hole) if active else None, par)

    def relative_through_current(self, player_id: str) -> int:
        """Relative-to-par over holes 1..current hole."""
        course = self._require_course()
        active = self.get_player(player_id)
        scores = active.scores if active else ()
        return round_totals(scores, course.pars, through=self._current_hole).relative_to_par

    def advance_hole(self) -> int:
        self._current_hole = min(self.hole_count, self._current_hole + 1)
        return self._current_hole

    def retreat_hole(self) -> int:
        self._current_hole = max(1, self._current_hole - 1)
        return self._current_hole

    def go_to_hole(self, hole: int) -> int:
        self._current_hole = max(1, min(self.hole_count, hole))
        return self._current_hole

    def reset_round(self) -> None:
        """Clear the roster and return to hole 1; persisted data is untouched."""
        self._players = []
        self._current_hole = 1
        self.debug("Round reset")

    @property
    def total_score(self) -> int:
        return sum(p.total for p in self._players)

    @property
    def total_relative_to_par(self) -> int:
        return sum(p.relative_to_par for p in self._players)
