"""
Course and hole models.
"""

import uuid
from dataclasses import dataclass, field, replace
from typing import Any

from cardmate.exceptions import ValidationError

COURSE_LAYOUTS = (9, 18)
DEFAULT_PAR = 3
DEFAULT_DISTANCE = 300
DEFAULT_COURSE_NAME = "New Course"

def clamp_par(value: Any) -> int:
    """Par is at least 1; unparseable input becomes 1."""
    try:
        return max(1, int(value))
    except (TypeError, ValueError):
        return 1

def clamp_distance(value: Any) -> int:
    """Distance is at least 0; unparseable input becomes 0."""
    try:
        return max(0, int(value))
    except (TypeError, ValueError):
        return 0

def parse_layout(value: Any) -> int:
    """Parse a layout value ('9', 18, ...) into a hole count."""
    try:
        layout = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid course layout: {value!r}", {"supported": list(COURSE_LAYOUTS)}) from None
    if layout not in COURSE_LAYOUTS:
        raise ValidationError(f"Invalid course layout: {value!r}", {"supported": list(COURSE_LAYOUTS)})
    return layout

@dataclass(frozen=True)
class Hole:
    """A single hole; ``number`` is 1-indexed."""
    number: int
    par: int = DEFAULT_PAR
    distance: int = DEFAULT_DISTANCE
    notes: str = ""

    def __post_init__(self) -> None:
        object.__setattr__(self, 'par', clamp_par(self.par))
        object.__setattr__(self, 'distance', clamp_distance(self.distance))
        object.__setattr__(self, 'notes', self.notes or "")

    @classmethod
    def default(cls, number: int) -> "Hole":
        return cls(number=number)

    @classmethod
    def from_dict(cls, data: dict[str, Any], number: int) -> "Hole":
        return cls(
            number=int(data.get('number') or number),
            par=DEFAULT_PAR if data.get('par') is None else data['par'],
            distance=DEFAULT_DISTANCE if data.get('distance') is None else data['distance'],
            notes=data.get('notes') or "",
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            'number': self.number,
            'par': self.par,
            'distance': self.distance,
            'notes': self.notes,
        }

def resize_holes(holes: list[Hole], hole_count: int) -> list[Hole]:
    """Truncate or extend ``holes`` to ``hole_count`` entries.

    Existing holes keep their data by index; new slots get par 3, distance 300.
    """
    return [
        holes[index] if index < len(holes) else Hole.default(index + 1)
        for index in range(hole_count)
    ]

@dataclass(frozen=True)
class Course:
    """A course with a 9 or 18 hole layout."""
    id: str
    name: str
    layout: int = 18
    holes: tuple[Hole, ...] = field(default_factory=tuple)
    user_id: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, 'layout', parse_layout(self.layout))
        object.__setattr__(self, 'holes', tuple(self.holes))
        if len(self.holes) != self.layout:
            raise ValidationError(
                f"Course {self.name!r} has {len(self.holes)} holes for a {self.layout} hole layout",
                {"course_id": self.id}
            )

    @classmethod
    def new(
        cls,
        name: str = DEFAULT_COURSE_NAME,
        layout: int = 18,
        holes: list[Hole] | None = None,
        course_id: str | None = None,
        user_id: str | None = None
    ) -> "Course":
        """Create a course, filling missing holes with defaults."""
        layout = parse_layout(layout)
        return cls(
            id=course_id or str(uuid.uuid4()),
            name=name,
            layout=layout,
            holes=tuple(resize_holes(list(holes or []), layout)),
            user_id=user_id,
        )

    @property
    def hole_count(self) -> int:
        return self.layout

    @property
    def pars(self) -> list[int]:
        return [hole.par for hole in self.holes]

    @property
    def par_total(self) -> int:
        return sum(self.pars)

    def hole(self, number: int) -> Hole:
        """Hole by 1-based number."""
        if not 1 <= number <= self.hole_count:
            raise ValidationError(f"Hole {number} is outside 1..{self.hole_count}", {"course_id": self.id})
        return self.holes[number - 1]

    def with_layout(self, layout: int | str) -> "Course":
        """Copy of this course switched to another layout."""
        hole_count = parse_layout(layout)
        return replace(self, layout=hole_count, holes=tuple(resize_holes(list(self.holes), hole_count)))

    def with_hole(
        self,
        number: int,
        par: int | None = None,
        distance: int | None = None,
        notes: str | None = None
    ) -> "Course":
        """Copy of this course with one hole edited; values are clamped."""
        current = self.hole(number)
        updated = replace(
            current,
            par=current.par if par is None else par,
            distance=current.distance if distance is None else distance,
            notes=current.notes if notes is None else notes,
        )
        holes = list(self.holes)
        holes[number - 1] = updated
        return replace(self, holes=tuple(holes))

    def with_name(self, name: str) -> "Course":
        return replace(self, name=name)

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> "Course":
        """Build a course from a ``courses`` row, normalizing the holes list."""
        layout = parse_layout(record.get('layout') or 18)
        raw_holes = record.get('holes') or []
        holes = [Hole.from_dict(data, index + 1) for index, data in enumerate(raw_holes)]
        return cls(
            id=str(record['id']),
            name=record.get('name') or DEFAULT_COURSE_NAME,
            layout=layout,
            holes=tuple(resize_holes(holes, layout)),
            user_id=record.get('user_id'),
        )

    def to_record(self, user_id: str | None = None) -> dict[str, Any]:
        """Row for the ``courses`` collection."""
        return {
            'id': self.id,
            'user_id': user_id or self.user_id,
            'name': self.name,
            'layout': str(self.layout),
            'holes': [hole.to_dict() for hole in self.holes],
        }
