"""
Management of the owner's players and courses.
"""

import uuid

from cardmate.exceptions import StoreError
from cardmate.exceptions import ValidationError
from cardmate.exceptions import handle_errors
from cardmate.models.course import DEFAULT_COURSE_NAME
from cardmate.models.course import Course
from cardmate.models.player import Player
from cardmate.services.auth_service import Session
from cardmate.store.base import RemoteStore
from cardmate.utils.logging_utils import EnhancedLoggerMixin


def _require_name(name: str | None, what: str) -> str:
    cleaned = (name or '').strip()
    if not cleaned:
        raise ValidationError(f"{what} name cannot be empty.")
    return cleaned

class CatalogService(EnhancedLoggerMixin):
    """Create, edit and remove players and courses.

    Writes go straight to the store; the sync mirrors pick them up from the
    change events the store publishes.
    """

    def __init__(self, store: RemoteStore, session: Session):
        super().__init__()
        self.store = store
        self.session = session

    def _get_course(self, course_id: str) -> Course:
        user_id = self.session.require_user()
        rows = self.store.select('courses', {'id': course_id, 'user_id': user_id})
        if not rows:
            raise ValidationError(f"Course not found: {course_id}", {"course_id": course_id})
        return Course.from_record(rows[0])

    def _save_course(self, course: Course, operation: str) -> Course:
        user_id = self.session.require_user()
        with handle_errors(StoreError, "catalog", operation):
            row = self.store.upsert('courses', course.to_record(user_id))[0]
        return Course.from_record(row)

    # Players

    def add_player(self, name: str) -> Player:
        user_id = self.session.require_user()
        player = Player(id=str(uuid.uuid4()), name=_require_name(name, "Player"), user_id=user_id)
        with handle_errors(StoreError, "catalog", "add player"):
            row = self.store.insert('players', player.to_record())[0]
        self.info("Player added", player_id=player.id)
        return Player.from_record(row)

    def rename_player(self, player_id: str, name: str) -> Player:
        user_id = self.session.require_user()
        cleaned = _require_name(name, "Player")
        with handle_errors(StoreError, "catalog", "rename player"):
            rows = self.store.update('players', {'name': cleaned}, {'id': player_id, 'user_id': user_id})
        if not rows:
            raise ValidationError(f"Player not found: {player_id}", {"player_id": player_id})
        return Player.from_record(rows[0])

    def remove_player(self, player_id: str) -> None:
        user_id = self.session.require_user()
        with handle_errors(StoreError, "catalog", "remove player"):
            self.store.delete('players', {'id': player_id, 'user_id': user_id})
        self.info("Player removed", player_id=player_id)

    # Courses

    def add_course(self, course: Course | None = None) -> Course:
        """Store ``course``, or a new 18 hole "New Course" with default holes."""
        user_id = self.session.require_user()
        course = course or Course.new(DEFAULT_COURSE_NAME, 18, user_id=user_id)
        _require_name(course.name, "Course")
        with handle_errors(StoreError, "catalog", "add course"):
            row = self.store.insert('courses', course.to_record(user_id))[0]
        self.info("Course added", course_id=course.id, layout=course.layout)
        return Course.from_record(row)

    def rename_course(self, course_id: str, name: str) -> Course:
        course = self._get_course(course_id)
        return self._save_course(course.with_name(_require_name(name, "Course")), "rename course")

    def set_layout(self, course_id: str, layout: int | str) -> Course:
        """Switch layouts; holes are truncated or padded with defaults."""
        course = self._get_course(course_id)
        return self._save_course(course.with_layout(layout), "change layout")

    def update_hole(
        self,
        course_id: str,
        number: int,
        par: int | None = None,
        distance: int | None = None,
        notes: str | None = None
    ) -> Course:
        """Edit one hole; par is kept at 1 or more and distance at 0 or more."""
        course = self._get_course(course_id)
        return self._save_course(course.with_hole(number, par, distance, notes), "update hole")

    def remove_course(self, course_id: str) -> None:
        """Remove a course together with its scorecards, children first."""
        user_id = self.session.require_user()
        with handle_errors(StoreError, "catalog", "remove course"):
            scorecards = self.store.select('scorecards', {'course_id': course_id, 'user_id': user_id})
            for scorecard in scorecards:
                self.store.delete('scorecard_players', {'scorecard_id': scorecard['id']})
            if scorecards:
                self.store.delete('scorecards', {'course_id': course_id, 'user_id': user_id})
            self.store.delete('courses', {'id': course_id, 'user_id': user_id})
        self.info("Course removed", course_id=course_id, scorecards=len(scorecards))
