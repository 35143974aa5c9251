"""Tests for teacher schedule conflicts, availability and teacher management."""

from datetime import timedelta
from typing import Dict

import pytest
from fastapi.testclient import TestClient

from speakup.models import Course, Teacher, User
from speakup.services.schedule_service import (
    ScheduleService,
    boundary_overlap,
    intervals_overlap,
    time_to_minutes,
)


class TestTimeHelpers:
    """Tests for minute arithmetic and overlap predicates."""

    @pytest.mark.parametrize(
        "value,expected",
        [("00:00", 0), ("09:30", 570), ("23:59", 1439)],
    )
    def test_time_to_minutes(self, value: str, expected: int) -> None:
        assert time_to_minutes(value) == expected

    def test_time_to_minutes_invalid(self) -> None:
        with pytest.raises(ValueError):
            time_to_minutes("0930")

    def test_intervals_overlap(self) -> None:
        assert intervals_overlap(600, 630, 620, 650)
        assert intervals_overlap(600, 700, 620, 650)

    def test_touching_intervals_do_not_overlap(self) -> None:
        """A class ending at 10:25 does not clash with one starting at 10:25."""
        assert not intervals_overlap(625, 650, 600, 625)
        assert not intervals_overlap(570, 600, 600, 625)

    def test_boundary_overlap(self) -> None:
        assert boundary_overlap(610, 640, 600, 625)
        assert boundary_overlap(590, 610, 600, 625)
        assert boundary_overlap(590, 640, 600, 625)
        assert boundary_overlap(605, 615, 600, 625)
        assert not boundary_overlap(625, 650, 600, 625)


class TestSingleTeacherConflict:
    """Tests for ScheduleService.check_teacher_schedule_conflict."""

    def test_overlapping_class(self, db, course: Course, teacher: Teacher) -> None:
        result = ScheduleService(db).check_teacher_schedule_conflict(
            teacher.id, course.start_date, "10:20", "10:50"
        )
        assert result["has_conflict"] is True
        assert result["conflict_details"]["course_title"] == "Basic 100"
        assert result["conflict_details"]["time"] == "10:00 - 10:25"

    def test_back_to_back_class(self, db, course: Course, teacher: Teacher) -> None:
        result = ScheduleService(db).check_teacher_schedule_conflict(
            teacher.id, course.start_date, "10:25", "10:50"
        )
        assert result == {"has_conflict": False, "conflict_details": None}

    def test_other_date(self, db, course: Course, teacher: Teacher) -> None:
        result = ScheduleService(db).check_teacher_schedule_conflict(
            teacher.id, course.start_date + timedelta(days=1), "10:00", "10:25"
        )
        assert result["has_conflict"] is False

    def test_excluded_course(self, db, course: Course, teacher: Teacher) -> None:
        """Editing a course does not conflict with itself."""
        result = ScheduleService(db).check_teacher_schedule_conflict(
            teacher.id, course.start_date, "10:00", "10:25", exclude_course_id=course.id
        )
        assert result["has_conflict"] is False


class TestAllTeacherConflicts:
    """Tests for ScheduleService.find_teacher_conflicts."""

    def test_reports_course_once(self, db, course: Course, teacher: Teacher) -> None:
        """Two clashing dates in the same course give one entry."""
        dates = [course.start_date, course.start_date + timedelta(days=2)]
        conflicts = ScheduleService(db).find_teacher_conflicts(dates, "10:10", "10:40")

        assert list(conflicts) == [str(teacher.id)]
        assert len(conflicts[str(teacher.id)]) == 1
        assert conflicts[str(teacher.id)][0]["title"] == "Basic 100"

    def test_no_conflict_when_touching(self, db, course: Course) -> None:
        conflicts = ScheduleService(db).find_teacher_conflicts([course.start_date], "10:25", "11:00")
        assert conflicts == {}

    def test_current_course_skipped(self, db, course: Course) -> None:
        conflicts = ScheduleService(db).find_teacher_conflicts(
            [course.start_date], "10:00", "10:25", current_course_id=course.id
        )
        assert conflicts == {}

    def test_inactive_teacher_ignored(self, db, course: Course, teacher: Teacher) -> None:
        teacher.is_active = False
        db.commit()
        conflicts = ScheduleService(db).find_teacher_conflicts([course.start_date], "10:00", "10:25")
        assert conflicts == {}


class TestAvailability:
    """Tests for ScheduleService.teacher_availability."""

    def test_busy_teacher(self, db, course: Course, teacher: Teacher) -> None:
        slots = [{"date": course.start_date, "start_time": "10:00", "end_time": "10:30"}]
        result = ScheduleService(db).teacher_availability(slots)

        assert len(result) == 1
        assert result[0]["is_available"] is False
        assert result[0]["name"] == "김선생"
        clash = result[0]["conflicting_courses"][0]
        assert clash["course_title"] == "Basic 100"
        assert clash["conflicting_dates"] == [course.start_date.isoformat()]

    def test_current_teacher_always_available(self, db, course: Course, teacher: Teacher) -> None:
        slots = [{"date": course.start_date, "start_time": "10:00", "end_time": "10:30"}]
        result = ScheduleService(db).teacher_availability(slots, current_teacher_id=teacher.id)
        assert result[0]["is_available"] is True
        assert result[0]["conflicting_courses"] == []


class TestScheduleEndpoints:
    """Tests for the conflict endpoints under /api/teachers."""

    def test_schedule_conflict_requires_fields(
        self, client: TestClient, admin_headers: Dict[str, str]
    ) -> None:
        response = client.post(
            "/api/teachers/schedule-conflict",
            json={"start_time": "10:00", "end_time": "10:30"},
            headers=admin_headers,
        )
        assert response.status_code == 400

    def test_schedule_conflict(
        self, client: TestClient, course: Course, teacher: Teacher, admin_headers: Dict[str, str]
    ) -> None:
        response = client.post(
            "/api/teachers/schedule-conflict",
            json={
                "teacher_id": str(teacher.id),
                "date": course.start_date.isoformat(),
                "start_time": "10:15",
                "end_time": "10:45",
            },
            headers=admin_headers,
        )
        assert response.status_code == 200
        assert response.json()["has_conflict"] is True

    def test_bad_time_format(
        self, client: TestClient, teacher: Teacher, admin_headers: Dict[str, str]
    ) -> None:
        response = client.post(
            "/api/teachers/schedule-conflict",
            json={"teacher_id": str(teacher.id), "date": "2026-01-05", "start_time": "25:00", "end_time": "10:45"},
            headers=admin_headers,
        )
        assert response.status_code == 422

    def test_conflicts(
        self, client: TestClient, course: Course, teacher: Teacher, admin_headers: Dict[str, str]
    ) -> None:
        response = client.post(
            "/api/teachers/conflicts",
            json={"class_dates": [course.start_date.isoformat()], "start_time": "10:00", "end_time": "10:30"},
            headers=admin_headers,
        )
        assert response.status_code == 200
        assert str(teacher.id) in response.json()["conflicts"]

    def test_availability(
        self, client: TestClient, course: Course, admin_headers: Dict[str, str]
    ) -> None:
        response = client.post(
            "/api/teachers/availability",
            json={"class_dates": [{"date": course.start_date.isoformat(), "start_time": "11:00", "end_time": "11:30"}]},
            headers=admin_headers,
        )
        assert response.status_code == 200
        assert response.json()[0]["is_available"] is True

    def test_students_cannot_check(
        self, client: TestClient, student_headers: Dict[str, str]
    ) -> None:
        response = client.post(
            "/api/teachers/conflicts",
            json={"class_dates": [], "start_time": "10:00", "end_time": "10:30"},
            headers=student_headers,
        )
        assert response.status_code == 403


class TestTeacherManagement:
    """Tests for applications and admin management."""

    def test_approve_application(
        self, client: TestClient, db, make_user, admin_headers: Dict[str, str]
    ) -> None:
        """Approval creates an inactive teacher and promotes the user."""
        applicant = make_user("applicant@example.com", real_name="지원자", is_apply_for_teacher=True)

        listed = client.get("/api/teachers/applications", headers=admin_headers)
        assert [a["email"] for a in listed.json()] == ["applicant@example.com"]

        response = client.post(f"/api/teachers/applications/{applicant.id}/approve", headers=admin_headers)
        assert response.status_code == 201
        assert response.json()["is_active"] is False

        db.refresh(applicant)
        assert applicant.role == "TEACHER"
        assert applicant.is_apply_for_teacher is False

        again = client.post(f"/api/teachers/applications/{applicant.id}/approve", headers=admin_headers)
        assert again.status_code == 400

    def test_reject_application(
        self, client: TestClient, make_user, admin_headers: Dict[str, str]
    ) -> None:
        applicant = make_user("reject@example.com", is_apply_for_teacher=True)
        response = client.post(f"/api/teachers/applications/{applicant.id}/reject", headers=admin_headers)
        assert response.status_code == 200
        assert client.get("/api/teachers/applications", headers=admin_headers).json() == []

    def test_toggle_status(
        self, client: TestClient, teacher: Teacher, admin_headers: Dict[str, str]
    ) -> None:
        response = client.patch(f"/api/teachers/{teacher.id}/status", headers=admin_headers)
        assert response.status_code == 200
        assert response.json()["is_active"] is False

    def test_delete_teacher_demotes_user(
        self, client: TestClient, db, teacher: Teacher, admin_headers: Dict[str, str]
    ) -> None:
        user_id = teacher.user_id
        response = client.delete(f"/api/teachers/{teacher.id}", headers=admin_headers)
        assert response.status_code == 204
        assert db.get(User, user_id).role == "STUDENT"

    def test_teacher_attendance_toggle(
        self, client: TestClient, course: Course, teacher: Teacher, admin_headers: Dict[str, str]
    ) -> None:
        payload = {"course_id": str(course.id), "class_date": course.start_date.isoformat()}

        first = client.post(f"/api/teachers/{teacher.id}/attendance", json=payload, headers=admin_headers)
        assert first.json() == {"attended": True}

        listed = client.get(
            f"/api/teachers/{teacher.id}/attendance",
            params={"course_id": str(course.id)},
            headers=admin_headers,
        )
        assert len(listed.json()["attendance_data"]) == 1

        second = client.post(f"/api/teachers/{teacher.id}/attendance", json=payload, headers=admin_headers)
        assert second.json() == {"attended": False}

    def test_semi_admin_cannot_manage_teachers(
        self, client: TestClient, course: Course, teacher: Teacher, make_user, headers_for
    ) -> None:
        """Semi-admins may look up active teachers but nothing admin-only."""
        headers = headers_for(make_user("semi@example.com", role="SEMI_ADMIN"))
        params = {"course_id": str(course.id)}
        payload = {"course_id": str(course.id), "class_date": course.start_date.isoformat()}

        assert client.get("/api/teachers/", headers=headers).status_code == 403
        assert client.get(f"/api/teachers/{teacher.id}/schedule", headers=headers).status_code == 403
        assert client.get(f"/api/teachers/{teacher.id}/attendance", params=params, headers=headers).status_code == 403
        assert client.post(f"/api/teachers/{teacher.id}/attendance", json=payload, headers=headers).status_code == 403

        assert client.get("/api/teachers/active", headers=headers).status_code == 200

    def test_teacher_stats(
        self, client: TestClient, active_enrollment, teacher_headers: Dict[str, str]
    ) -> None:
        response = client.get("/api/teachers/me/stats", headers=teacher_headers)
        assert response.json() == {"course_count": 1, "student_count": 1}
