"""
Scorecard models: persisted snapshots of completed rounds.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from cardmate.models.player import ActivePlayer


def parse_timestamp(value: Any) -> datetime | None:
    """Parse an ISO timestamp from the store ('Z' suffix accepted)."""
    if value is None or isinstance(value, datetime):
        return value
    text = str(value)
    if text.endswith('Z'):
        text = text[:-1] + '+00:00'
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        return None

@dataclass(frozen=True)
class ScorecardPlayer:
    """One player's final result on a scorecard."""
    player_id: str
    scores: tuple[int | None, ...]
    total_score: int
    relative_to_par: int
    scorecard_id: str | None = None
    id: str | None = None
    player_name: str | None = None

    @classmethod
    def from_active(cls, active: ActivePlayer, scorecard_id: str | None = None) -> "ScorecardPlayer":
        return cls(
            player_id=active.id,
            scores=active.scores,
            total_score=active.total,
            relative_to_par=active.relative_to_par,
            scorecard_id=scorecard_id,
            player_name=active.name,
        )

    @classmethod
    def from_record(cls, record: dict[str, Any], player_name: str | None = None) -> "ScorecardPlayer":
        return cls(
            player_id=str(record['player_id']),
            scores=tuple(record.get('scores') or ()),
            total_score=int(record.get('total_score') or 0),
            relative_to_par=int(record.get('relative_to_par') or 0),
            scorecard_id=record.get('scorecard_id'),
            id=record.get('id'),
            player_name=player_name,
        )

    def to_record(self, scorecard_id: str) -> dict[str, Any]:
        """Row for the ``scorecard_players`` collection."""
        return {
            'scorecard_id': scorecard_id,
            'player_id': self.player_id,
            'scores': list(self.scores),
            'total_score': self.total_score,
            'relative_to_par': self.relative_to_par,
        }

@dataclass(frozen=True)
class Scorecard:
    """A completed round; immutable apart from whole-record deletion."""
    id: str
    user_id: str
    course_id: str | None
    date: datetime | None
    total_score: int
    relative_to_par: int
    completed: bool = True
    players: tuple[ScorecardPlayer, ...] = field(default_factory=tuple)
    course_name: str | None = None

    @classmethod
    def from_record(
        cls,
        record: dict[str, Any],
        players: list[ScorecardPlayer] | None = None,
        course_name: str | None = None
    ) -> "Scorecard":
        return cls(
            id=str(record['id']),
            user_id=record.get('user_id') or '',
            course_id=record.get('course_id'),
            date=parse_timestamp(record.get('date')),
            total_score=int(record.get('total_score') or 0),
            relative_to_par=int(record.get('relative_to_par') or 0),
            completed=bool(record.get('completed', True)),
            players=tuple(players or ()),
            course_name=course_name,
        )
