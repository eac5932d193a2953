"""
Disc Golf Course Review (DGCR) course lookup client.
"""

import uuid
from dataclasses import dataclass, field
from typing import Any

from cardmate.api.base_api import BaseAPI
from cardmate.config.types import DEFAULT_DGCR_URL
from cardmate.exceptions import APIError
from cardmate.exceptions import CourseLookupError
from cardmate.models.course import Course
from cardmate.models.course import Hole


def _to_int(value: Any, default: int = 0) -> int:
    try:
        return int(float(value))
    except (TypeError, ValueError):
        return default

@dataclass(frozen=True)
class DGCRHole:
    """Per-hole detail reported by DGCR."""
    hole_num: int
    length: float
    par: int

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "DGCRHole":
        try:
            length = float(data.get('length') or 0)
        except (TypeError, ValueError):
            length = 0.0
        return cls(
            hole_num=_to_int(data.get('hole_num')),
            length=length,
            par=_to_int(data.get('par'), 3),
        )

@dataclass(frozen=True)
class DGCRCourse:
    """Search result or detail record from DGCR."""
    course_id: str
    name: str
    holes: int
    rating: str = ""
    location: str = ""
    holes_data: list[DGCRHole] | None = field(default=None, compare=False)

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "DGCRCourse":
        """Create DGCRCourse instance from DGCR JSON."""
        holes_data = data.get('holes_data')
        return cls(
            course_id=str(data.get('course_id', '')),
            name=str(data.get('name') or 'Unknown course'),
            holes=_to_int(data.get('holes'), 18),
            rating=str(data.get('rating') or ''),
            location=str(data.get('location') or ''),
            holes_data=[DGCRHole.from_api(h) for h in holes_data] if holes_data else None,
        )

def to_course(details: DGCRCourse, user_id: str | None = None) -> Course:
    """Map a DGCR detail record to a new local course.

    A reported count of 9 gives a 9 hole layout, anything else 18. Per-hole
    data is used when present, otherwise par 3 / 300 placeholders are made
    for the reported count. The holes are then fitted to the layout.
    """
    layout = 9 if details.holes == 9 else 18
    if details.holes_data:
        holes = [
            Hole(number=h.hole_num or index + 1, par=h.par, distance=round(h.length))
            for index, h in enumerate(details.holes_data)
        ]
    else:
        holes = [Hole.default(index + 1) for index in range(max(details.holes, 0))]
    return Course.new(
        name=details.name,
        layout=layout,
        holes=holes,
        course_id=str(uuid.uuid4()),
        user_id=user_id,
    )

class DGCRClient(BaseAPI):
    """Read-only client for the DGCR course database."""

    # A failed lookup is reported to the user, who re-issues the search
    DEFAULT_RETRY_TOTAL = 0

    def __init__(self, api_key: str, base_url: str = DEFAULT_DGCR_URL):
        super().__init__(base_url)
        self.api_key = api_key
        self.set_log_context(service='dgcr')

    def search_courses(self, keyword: str) -> list[DGCRCourse]:
        """Search courses by name keyword."""
        keyword = keyword.strip()
        if not keyword:
            return []

        try:
            data = self._make_request(
                "GET",
                "course.php",
                params={'key': self.api_key, 'mode': 'name', 'keyword': keyword},
            )
        except APIError as e:
            self.error("Course search failed", keyword=keyword, error=str(e))
            raise CourseLookupError("Failed to search courses. Please try again.", {"keyword": keyword}) from e

        if not data:
            return []
        if not isinstance(data, list):
            raise CourseLookupError("Failed to search courses. Please try again.", {"keyword": keyword})
        results = [DGCRCourse.from_api(item) for item in data if isinstance(item, dict)]
        self.debug("Course search complete", keyword=keyword, results=len(results))
        return results

    def get_course_details(self, course_id: str) -> DGCRCourse:
        """Fetch a course with per-hole data when DGCR has it."""
        try:
            data = self._make_request(
                "GET",
                "course_details.php",
                params={'key': self.api_key, 'course_id': str(course_id)},
            )
        except APIError as e:
            self.error("Course details lookup failed", course_id=course_id, error=str(e))
            raise CourseLookupError("Failed to fetch course details. Please try again.", {"course_id": course_id}) from e

        if isinstance(data, list) and data:
            data = data[0]
        if not isinstance(data, dict):
            raise CourseLookupError("Failed to fetch course details. Please try again.", {"course_id": course_id})
        return DGCRCourse.from_api(data)

    def import_course(self, course_id: str, user_id: str | None = None) -> Course:
        """Fetch details and map them to a local course."""
        return to_course(self.get_course_details(course_id), user_id)
