"""Tests for the DGCR course lookup client."""

import pytest

from cardmate.api.dgcr import DGCRClient
from cardmate.api.dgcr import DGCRCourse
from cardmate.api.dgcr import DGCRHole
from cardmate.api.dgcr import to_course
from cardmate.config.types import DEFAULT_DGCR_URL
from cardmate.exceptions import CourseLookupError

SEARCH_URL = f"{DEFAULT_DGCR_URL}/course.php"
DETAILS_URL = f"{DEFAULT_DGCR_URL}/course_details.php"


@pytest.fixture
def client():
    return DGCRClient(api_key="test-key")

def test_search_courses(client, requests_mock):
    requests_mock.get(SEARCH_URL, json=[
        {'course_id': 101, 'name': 'Maple Hill', 'holes': '18', 'rating': '4.9', 'location': 'Leicester, MA'},
        {'course_id': '202', 'name': 'Pier Park', 'holes': 9},
    ])

    results = client.search_courses(" maple ")

    assert [r.course_id for r in results] == ['101', '202']
    assert results[0].holes == 18
    assert results[0].location == 'Leicester, MA'
    query = requests_mock.last_request.qs
    assert query['key'] == ['test-key']
    assert query['mode'] == ['name']
    assert query['keyword'] == ['maple']

def test_empty_keyword_makes_no_request(client, requests_mock):
    assert client.search_courses("   ") == []
    assert not requests_mock.called

def test_search_empty_result(client, requests_mock):
    requests_mock.get(SEARCH_URL, text="null")
    assert client.search_courses("nowhere") == []

@pytest.mark.parametrize("status_code", [404, 500, 503])
def test_search_failure_is_generic(client, requests_mock, status_code):
    requests_mock.get(SEARCH_URL, status_code=status_code, json={'error': 'boom'})
    with pytest.raises(CourseLookupError) as exc_info:
        client.search_courses("maple")
    assert exc_info.value.user_message == "Failed to search courses. Please try again."
    # No retry
    assert requests_mock.call_count == 1

def test_search_network_failure(client, requests_mock):
    import requests
    requests_mock.get(SEARCH_URL, exc=requests.exceptions.ConnectionError)
    with pytest.raises(CourseLookupError):
        client.search_courses("maple")

def test_get_course_details(client, requests_mock):
    requests_mock.get(DETAILS_URL, json={
        'course_id': '101',
        'name': 'Maple Hill',
        'holes': 18,
        'holes_data': [{'hole_num': '1', 'length': '312.6', 'par': '3'}],
    })
    details = client.get_course_details('101')
    assert details.holes_data == [DGCRHole(hole_num=1, length=312.6, par=3)]
    assert requests_mock.last_request.qs['course_id'] == ['101']

def test_get_course_details_failure(client, requests_mock):
    requests_mock.get(DETAILS_URL, status_code=500)
    with pytest.raises(CourseLookupError) as exc_info:
        client.get_course_details('101')
    assert exc_info.value.user_message == "Failed to fetch course details. Please try again."

def test_to_course_uses_hole_data():
    details = DGCRCourse(
        course_id='1',
        name='Pier Park',
        holes=9,
        holes_data=[DGCRHole(i + 1, 200.4 + i, 3 if i != 4 else 4) for i in range(9)],
    )
    course = to_course(details, user_id='user-1')
    assert course.layout == 9
    assert course.name == 'Pier Park'
    assert course.user_id == 'user-1'
    assert course.hole(1).distance == 200
    assert course.hole(5).par == 4
    assert course.par_total == 28

def test_to_course_placeholders():
    course = to_course(DGCRCourse(course_id='2', name='Woods', holes=9))
    assert course.layout == 9
    assert all(h.par == 3 and h.distance == 300 for h in course.holes)

@pytest.mark.parametrize("reported,layout", [(18, 18), (24, 18), (12, 18), (9, 9)])
def test_to_course_layout(reported, layout):
    course = to_course(DGCRCourse(course_id='3', name='Odd', holes=reported))
    assert course.layout == layout
    assert len(course.holes) == layout

def test_import_course(client, requests_mock):
    requests_mock.get(DETAILS_URL, json=[{'course_id': '7', 'name': 'Listed', 'holes': '9'}])
    course = client.import_course('7', user_id='user-1')
    assert course.name == 'Listed'
    assert course.layout == 9
