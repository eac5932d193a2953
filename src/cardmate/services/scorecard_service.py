"""
Scorecard persistence: saving a finished round, history and deletion.
"""

from cardmate.error_codes import ErrorCode
from cardmate.exceptions import AuthError
from cardmate.exceptions import RoundStateError
from cardmate.exceptions import StoreError
from cardmate.exceptions import handle_errors
from cardmate.models.course import Course
from cardmate.models.player import Player
from cardmate.models.scorecard import Scorecard
from cardmate.models.scorecard import ScorecardPlayer
from cardmate.services.auth_service import Session
from cardmate.services.round_service import RoundState
from cardmate.store.base import RemoteStore
from cardmate.utils.logging_utils import EnhancedLoggerMixin
from cardmate.utils.logging_utils import log_execution


class ScorecardService(EnhancedLoggerMixin):
    """Writes completed rounds to the store and reads them back."""

    def __init__(self, store: RemoteStore, session: Session):
        super().__init__()
        self.store = store
        self.session = session

    def _require_profile(self) -> str:
        user_id = self.session.require_user()
        if not self.session.profile_exists():
            raise AuthError(
                "Profile not found. Please sign out and sign in again.",
                ErrorCode.PROFILE_MISSING,
                {"user_id": user_id}
            )
        return user_id

    @log_execution(level='INFO')
    def save_round(self, state: RoundState) -> Scorecard:
        """Persist the round in progress as a completed scorecard.

        The writes run in order: course, scorecard, players, scorecard
        players. They are not atomic; a failure part way leaves the earlier
        writes in place.

        Raises:
            AuthError: Signed out, or the profile row is missing
            RoundStateError: No course selected or no players in the round
            StoreError: A write failed
        """
        user_id = self._require_profile()
        course = state.course
        if course is None:
            raise RoundStateError("Select a course before saving.")
        active_players = state.players
        if not active_players:
            raise RoundStateError("Add at least one player before saving.")

        with handle_errors(StoreError, "scorecards", "save round"):
            self.store.upsert('courses', course.to_record(user_id))

            header = self.store.insert('scorecards', {
                'user_id': user_id,
                'course_id': course.id,
                'completed': True,
                'total_score': sum(p.total for p in active_players),
                'relative_to_par': sum(p.relative_to_par for p in active_players),
            })[0]
            scorecard_id = str(header['id'])

            self.store.upsert('players', [p.player.to_record(user_id) for p in active_players])

            rows = [ScorecardPlayer.from_active(p, scorecard_id) for p in active_players]
            stored = self.store.insert('scorecard_players', [row.to_record(scorecard_id) for row in rows])

        self.info("Scorecard saved", scorecard_id=scorecard_id, players=len(stored))
        names = {p.id: p.name for p in active_players}
        return Scorecard.from_record(
            header,
            [ScorecardPlayer.from_record(r, names.get(str(r['player_id']))) for r in stored],
            course.name,
        )

    def delete_scorecard(self, scorecard_id: str) -> None:
        """Delete a scorecard and its player rows, children first."""
        self.session.require_user()
        with handle_errors(StoreError, "scorecards", "delete scorecard"):
            self.store.delete('scorecard_players', {'scorecard_id': scorecard_id})
            self.store.delete('scorecards', {'id': scorecard_id})
        self.info("Scorecard deleted", scorecard_id=scorecard_id)

    def _assemble(self, header: dict, courses: dict[str, Course], players: dict[str, Player]) -> Scorecard:
        rows = self.store.select('scorecard_players', {'scorecard_id': header['id']})
        course = courses.get(header.get('course_id') or '')
        return Scorecard.from_record(
            header,
            [
                ScorecardPlayer.from_record(
                    row,
                    players[row['player_id']].name if row['player_id'] in players else None,
                )
                for row in rows
            ],
            course.name if course else None,
        )

    def _lookups(self, user_id: str) -> tuple[dict[str, Course], dict[str, Player]]:
        courses = {str(r['id']): Course.from_record(r) for r in self.store.select('courses', {'user_id': user_id})}
        players = {str(r['id']): Player.from_record(r) for r in self.store.select('players', {'user_id': user_id})}
        return courses, players

    def list_history(self) -> list[Scorecard]:
        """The owner's scorecards, newest first."""
        user_id = self.session.require_user()
        with handle_errors(StoreError, "scorecards", "list history"):
            headers = self.store.select('scorecards', {'user_id': user_id}, order_by='date', descending=True)
            courses, players = self._lookups(user_id)
            return [self._assemble(header, courses, players) for header in headers]

    def get_scorecard(self, scorecard_id: str) -> Scorecard | None:
        user_id = self.session.require_user()
        with handle_errors(StoreError, "scorecards", "get scorecard"):
            headers = self.store.select('scorecards', {'id': scorecard_id, 'user_id': user_id})
            if not headers:
                return None
            courses, players = self._lookups(user_id)
            return self._assemble(headers[0], courses, players)
