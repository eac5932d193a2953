from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from cardmate.scoring import round_totals
from cardmate.scoring import score_at


@dataclass(frozen=True)
class Player:
    """Disc golf player on the owner's roster."""
    id: str
    name: str
    user_id: str | None = None

    @classmethod
    def from_record(cls, data: dict[str, Any]) -> "Player":
        """Create Player instance from a ``players`` row."""
        return cls(
            id=str(data['id']),
            name=(data.get('name') or '').strip() or 'Unnamed',
            user_id=data.get('user_id'),
        )

    def to_record(self, user_id: str | None = None) -> dict[str, Any]:
        return {
            'id': self.id,
            'user_id': user_id or self.user_id,
            'name': self.name,
        }

@dataclass(frozen=True)
class ActivePlayer:
    """A player in the round in progress.

    ``total`` and ``relative_to_par`` are derived from ``scores`` and the course
    pars whenever an instance is built; use :meth:`build` or :meth:`with_score`
    rather than the constructor.
    """
    player: Player
    scores: tuple[int | None, ...]
    total: int
    relative_to_par: int

    @classmethod
    def build(cls, player: Player, scores: Sequence[int | None], pars: Sequence[int]) -> "ActivePlayer":
        totals = round_totals(scores, pars)
        return cls(
            player=player,
            scores=tuple(scores),
            total=totals.total,
            relative_to_par=totals.relative_to_par,
        )

    @property
    def id(self) -> str:
        return self.player.id

    @property
    def name(self) -> str:
        return self.player.name

    def score_for(self, hole: int) -> int | None:
        """Recorded entry for a 1-based hole, or None."""
        return score_at(self.scores, hole - 1)

    def with_score(self, hole: int, value: int, pars: Sequence[int]) -> "ActivePlayer":
        """Copy with ``hole`` set to ``value``, totals recomputed from scratch."""
        scores = list(self.scores)
        if len(scores) < hole:
            scores.extend([None] * (hole - len(scores)))
        scores[hole - 1] = value
        return ActivePlayer.build(self.player, scores, pars)

    def rescored(self, pars: Sequence[int]) -> "ActivePlayer":
        """Totals against ``pars``; entries past the last hole are dropped."""
        return ActivePlayer.build(self.player, self.scores[:len(pars)], pars)
