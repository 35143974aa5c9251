"""Tests for student check-in, the attendance dashboard and course rosters."""

from typing import Dict

from fastapi.testclient import TestClient

from speakup.models import Attendance, Course, Teacher


def _check_in(client: TestClient, course: Course, index: int, headers: Dict[str, str]):
    return client.post(
        "/api/attendance/",
        json={"class_date_id": str(course.class_dates[index].id), "course_id": str(course.id)},
        headers=headers,
    )


def test_check_in_is_idempotent(
    client: TestClient, db, course: Course, active_enrollment, student_headers: Dict[str, str]
) -> None:
    first = _check_in(client, course, 0, student_headers)
    assert first.status_code == 200
    assert first.json()["is_attended"] is True
    assert first.json()["date"] == course.class_dates[0].date.isoformat()

    second = _check_in(client, course, 0, student_headers)
    assert second.json()["id"] == first.json()["id"]
    assert db.query(Attendance).count() == 1


def test_check_in_wrong_course(
    client: TestClient, course: Course, student_headers: Dict[str, str]
) -> None:
    response = client.post(
        "/api/attendance/",
        json={"class_date_id": str(course.class_dates[0].id), "course_id": "00000000-0000-0000-0000-000000000000"},
        headers=student_headers,
    )
    assert response.status_code == 404


def test_my_attendance(
    client: TestClient, course: Course, active_enrollment, student_headers: Dict[str, str]
) -> None:
    _check_in(client, course, 1, student_headers)
    _check_in(client, course, 0, student_headers)

    response = client.get("/api/attendance/me", params={"course_id": str(course.id)}, headers=student_headers)
    dates = [row["date"] for row in response.json()]
    assert dates == [course.class_dates[0].date.isoformat(), course.class_dates[1].date.isoformat()]


def test_dashboard_counts_past_dates(
    client: TestClient, course: Course, active_enrollment, student_headers: Dict[str, str]
) -> None:
    """The future class date is not counted yet."""
    _check_in(client, course, 0, student_headers)

    response = client.get("/api/attendance/dashboard", params={"course_id": str(course.id)}, headers=student_headers)
    assert response.json() == {"total_class_dates": 2, "attended_class_dates": 1}


class TestRoster:
    """Tests for GET /api/attendance/courses/{course_id}."""

    def test_teacher_sees_own_course(
        self,
        client: TestClient,
        course: Course,
        active_enrollment,
        student_headers: Dict[str, str],
        teacher_headers: Dict[str, str],
    ) -> None:
        _check_in(client, course, 0, student_headers)

        response = client.get(f"/api/attendance/courses/{course.id}", headers=teacher_headers)
        assert response.status_code == 200
        data = response.json()
        assert len(data["class_dates"]) == 3

        student = data["students"][0]
        assert student["display_name"] == "홍길동"
        assert student["attendance"] == {
            str(course.class_dates[0].id): True,
            str(course.class_dates[1].id): False,
            str(course.class_dates[2].id): False,
        }

    def test_other_teacher_forbidden(
        self, client: TestClient, db, course: Course, make_user, headers_for
    ) -> None:
        other = make_user("other-teacher@example.com", role="TEACHER")
        db.add(Teacher(user_id=other.id, is_active=True))
        db.commit()

        response = client.get(f"/api/attendance/courses/{course.id}", headers=headers_for(other))
        assert response.status_code == 403

    def test_student_forbidden(
        self, client: TestClient, course: Course, student_headers: Dict[str, str]
    ) -> None:
        response = client.get(f"/api/attendance/courses/{course.id}", headers=student_headers)
        assert response.status_code == 403

    def test_admin_allowed(
        self, client: TestClient, course: Course, admin_headers: Dict[str, str]
    ) -> None:
        response = client.get(f"/api/attendance/courses/{course.id}", headers=admin_headers)
        assert response.status_code == 200
        assert response.json()["students"] == []
