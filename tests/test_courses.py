"""Tests for course status, class-date generation and course administration."""

from datetime import date, timedelta
from typing import Dict

import pytest
from fastapi.testclient import TestClient

from speakup.models import Attendance, Course, Teacher, User
from speakup.services.course_service import course_status, dates_from_weekdays, day_label


class TestCourseStatus:
    """Tests for course_status."""

    @pytest.mark.parametrize(
        "today,expected",
        [
            (date(2026, 10, 31), "waiting"),
            (date(2026, 11, 1), "in_progress"),
            (date(2026, 11, 30), "in_progress"),
            (date(2026, 12, 1), "completed"),
        ],
    )
    def test_by_date(self, today: date, expected: str) -> None:
        assert course_status(date(2026, 11, 1), date(2026, 11, 30), today) == expected

    def test_without_dates(self) -> None:
        assert course_status(None, None) == "waiting"


def test_dates_from_weekdays() -> None:
    """Mondays and Wednesdays over two weeks."""
    days = dates_from_weekdays(date(2026, 11, 2), date(2026, 11, 15), [0, 2])
    assert days == [date(2026, 11, 2), date(2026, 11, 4), date(2026, 11, 9), date(2026, 11, 11)]
    assert [day_label(d) for d in days] == ["mon", "wed", "mon", "wed"]


class TestCourseEndpoints:
    """Tests for /api/courses."""

    def test_create_generates_class_dates(
        self, client: TestClient, teacher: Teacher, admin_headers: Dict[str, str]
    ) -> None:
        response = client.post(
            "/api/courses/",
            json={
                "title": "Tour 100",
                "contents": "tour100",
                "teacher_id": str(teacher.id),
                "schedule_monday": True,
                "schedule_wednesday": True,
                "start_date": "2026-11-02",
                "end_date": "2026-11-15",
                "start_time": "19:00",
                "end_time": "19:25",
                "price": 50000,
            },
            headers=admin_headers,
        )
        assert response.status_code == 201
        data = response.json()
        assert [cd["date"] for cd in data["class_dates"]] == ["2026-11-02", "2026-11-04", "2026-11-09", "2026-11-11"]
        assert all(cd["start_time"] == "19:00" for cd in data["class_dates"])
        assert data["teacher_name"] == "Teacher Kim"

    def test_create_with_explicit_dates(
        self, client: TestClient, admin_headers: Dict[str, str]
    ) -> None:
        response = client.post(
            "/api/courses/",
            json={
                "title": "WH 100",
                "contents": "wh100",
                "start_time": "09:00",
                "end_time": "09:25",
                "class_dates": [{"date": "2026-11-03"}, {"date": "2026-11-05", "start_time": "20:00", "end_time": "20:25"}],
            },
            headers=admin_headers,
        )
        assert response.status_code == 201
        dates = response.json()["class_dates"]
        assert [(cd["day_of_week"], cd["start_time"]) for cd in dates] == [("tue", "09:00"), ("thu", "20:00")]

    def test_create_rejects_bad_contents(
        self, client: TestClient, admin_headers: Dict[str, str]
    ) -> None:
        response = client.post("/api/courses/", json={"title": "X", "contents": "zzz"}, headers=admin_headers)
        assert response.status_code == 422

    def test_create_rejects_inverted_range(
        self, client: TestClient, admin_headers: Dict[str, str]
    ) -> None:
        response = client.post(
            "/api/courses/",
            json={"title": "X", "start_date": "2026-11-10", "end_date": "2026-11-01"},
            headers=admin_headers,
        )
        assert response.status_code == 422

    def test_list_includes_status(
        self, client: TestClient, course: Course, admin_headers: Dict[str, str]
    ) -> None:
        response = client.get("/api/courses/", headers=admin_headers)
        assert response.status_code == 200
        assert response.json()[0]["status"] == "in_progress"

    def test_update_keeps_attended_dates(
        self,
        client: TestClient,
        db,
        course: Course,
        teacher: Teacher,
        student: User,
        active_enrollment,
        admin_headers: Dict[str, str],
    ) -> None:
        """Dropping a date someone attended leaves it in place."""
        attended, second, _ = course.class_dates
        db.add(Attendance(class_date_id=attended.id, course_id=course.id, user_id=student.id))
        db.commit()

        response = client.put(
            f"/api/courses/{course.id}",
            json={
                "title": "Basic 100 Plus",
                "teacher_id": str(teacher.id),
                "start_time": "10:00",
                "end_time": "10:25",
                "class_dates": [{"date": second.date.isoformat()}],
            },
            headers=admin_headers,
        )
        assert response.status_code == 200
        data = response.json()
        assert [cd["date"] for cd in data["class_dates"]] == [attended.date.isoformat(), second.date.isoformat()]

        db.refresh(active_enrollment)
        assert active_enrollment.course_title == "Basic 100 Plus"

    def test_update_without_dates_leaves_schedule(
        self, client: TestClient, course: Course, admin_headers: Dict[str, str]
    ) -> None:
        response = client.put(f"/api/courses/{course.id}", json={"title": "Renamed"}, headers=admin_headers)
        assert response.status_code == 200
        assert len(response.json()["class_dates"]) == 3

    def test_delete(self, client: TestClient, course: Course, admin_headers: Dict[str, str]) -> None:
        assert client.delete(f"/api/courses/{course.id}", headers=admin_headers).status_code == 204
        assert client.get(f"/api/courses/{course.id}", headers=admin_headers).status_code == 404

    def test_class_dates(self, client: TestClient, course: Course, student_headers: Dict[str, str]) -> None:
        response = client.get(f"/api/courses/{course.id}/class-dates", headers=student_headers)
        assert response.status_code == 200
        assert len(response.json()) == 3

    def test_members_hide_private_images(
        self,
        client: TestClient,
        db,
        student: User,
        active_enrollment,
        student_headers: Dict[str, str],
    ) -> None:
        student.image = "https://images.example.com/me.png"
        db.commit()

        response = client.get(f"/api/courses/{active_enrollment.course_id}/members", headers=student_headers)
        member = response.json()[0]
        assert member["display_name"] == "홍길동"
        assert member["profile_image"] is None

        student.is_image_public_open = True
        db.commit()

        response = client.get(f"/api/courses/{active_enrollment.course_id}/members", headers=student_headers)
        assert response.json()[0]["profile_image"] == "https://images.example.com/me.png"

    def test_unknown_course(self, client: TestClient, student_headers: Dict[str, str]) -> None:
        response = client.get("/api/courses/00000000-0000-0000-0000-000000000000", headers=student_headers)
        assert response.status_code == 404
