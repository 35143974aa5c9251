"""Tests for enrollment registration, bulk import and claiming."""

from typing import Dict

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError

from speakup.models import Course, Enrollment, EnrollmentStatus, User
from speakup.services.enrollment_service import EnrollmentService, strip_phone


def _failing_commit() -> None:
    raise OperationalError("COMMIT", {}, Exception("database is locked"))


def _pending(db, course: Course, name: str, phone: str) -> Enrollment:
    enrollment = Enrollment(
        course_id=course.id,
        course_title=course.title,
        student_name=name,
        student_phone=phone,
        status=EnrollmentStatus.PENDING.value,
    )
    db.add(enrollment)
    db.commit()
    db.refresh(enrollment)
    return enrollment


def test_strip_phone() -> None:
    assert strip_phone("010-1234 5678") == "01012345678"
    assert strip_phone(None) == ""


class TestBulkCreate:
    """Tests for EnrollmentService.bulk_create."""

    def test_mixed_rows(self, db, course: Course) -> None:
        """Valid rows are saved; invalid and duplicate rows are reported."""
        _pending(db, course, "기존학생", "01011112222")

        result = EnrollmentService(db).bulk_create(course, [
            {"name": "김 철수", "phone": "010-3333-4444"},
            {"name": "", "phone": "01055556666"},
            {"name": "이영희", "phone": "12345"},
            {"name": "중복", "phone": "010-1111-2222"},
            {"name": "박민수", "phone": "010-3333-4444"},
        ])

        assert result["success_count"] == 1
        assert result["successful"] == [{"name": "김철수", "phone": "01033334444"}]
        assert result["failed_count"] == 4
        reasons = [f["reason"] for f in result["failed"]]
        assert reasons == [
            "이름과 전화번호는 필수입니다.",
            "유효하지 않은 전화번호 형식입니다.",
            "이미 등록된 학생입니다.",
            "이미 등록된 학생입니다.",
        ]
        assert db.query(Enrollment).count() == 2

    def test_commit_failure_rolls_back(self, db, course: Course, monkeypatch) -> None:
        monkeypatch.setattr(db, "commit", _failing_commit)
        with pytest.raises(OperationalError):
            EnrollmentService(db).bulk_create(course, [{"name": "김철수", "phone": "010-3333-4444"}])
        monkeypatch.undo()

        assert db.query(Enrollment).count() == 0


class TestEnrollmentEndpoints:
    """Tests for /api/enrollments."""

    def test_create(self, client: TestClient, course: Course, admin_headers: Dict[str, str]) -> None:
        payload = {"course_id": str(course.id), "student_name": "김철수", "student_phone": "010-3333-4444"}

        response = client.post("/api/enrollments/", json=payload, headers=admin_headers)
        assert response.status_code == 201
        data = response.json()
        assert data["student_phone"] == "01033334444"
        assert data["status"] == "pending"
        assert data["student_id"] is None

        again = client.post("/api/enrollments/", json=payload, headers=admin_headers)
        assert again.status_code == 409

    def test_bulk_endpoint(self, client: TestClient, course: Course, admin_headers: Dict[str, str]) -> None:
        response = client.post(
            "/api/enrollments/bulk",
            json={"course_id": str(course.id), "students": [{"name": "김철수", "phone": "01033334444"}]},
            headers=admin_headers,
        )
        assert response.status_code == 200
        assert response.json()["success_count"] == 1

        listed = client.get("/api/enrollments/", params={"course_id": str(course.id)}, headers=admin_headers)
        assert len(listed.json()) == 1

    def test_count_active(
        self, client: TestClient, active_enrollment, admin_headers: Dict[str, str]
    ) -> None:
        response = client.get("/api/enrollments/count", headers=admin_headers)
        assert response.json() == {"count": 1}

    def test_mine_requires_profile(self, client: TestClient, make_user, headers_for) -> None:
        user = make_user("noprofile@example.com")
        response = client.get("/api/enrollments/mine", headers=headers_for(user))
        assert response.status_code == 200
        data = response.json()
        assert data["enrollments"] == []
        assert data["message"]

    def test_mine_lists_matching_pending(
        self, client: TestClient, db, course: Course, student_headers: Dict[str, str]
    ) -> None:
        _pending(db, course, "홍길동", "01012345678")
        _pending(db, course, "다른사람", "01099990000")

        response = client.get("/api/enrollments/mine", headers=student_headers)
        enrollments = response.json()["enrollments"]
        assert [e["student_name"] for e in enrollments] == ["홍길동"]


class TestActivate:
    """Tests for POST /api/enrollments/{id}/activate."""

    def test_activate_own(
        self, client: TestClient, db, course: Course, student: User, student_headers: Dict[str, str]
    ) -> None:
        enrollment = _pending(db, course, "홍길동", "01012345678")

        response = client.post(f"/api/enrollments/{enrollment.id}/activate", headers=student_headers)
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "active"
        assert data["student_id"] == str(student.id)

    def test_someone_elses(
        self, client: TestClient, db, course: Course, student_headers: Dict[str, str]
    ) -> None:
        enrollment = _pending(db, course, "다른사람", "01099990000")
        response = client.post(f"/api/enrollments/{enrollment.id}/activate", headers=student_headers)
        assert response.status_code == 403

    def test_not_pending(
        self, client: TestClient, db, course: Course, student_headers: Dict[str, str]
    ) -> None:
        enrollment = _pending(db, course, "홍길동", "01012345678")
        enrollment.status = EnrollmentStatus.DROPPED.value
        db.commit()

        response = client.post(f"/api/enrollments/{enrollment.id}/activate", headers=student_headers)
        assert response.status_code == 400

    def test_already_enrolled(
        self, client: TestClient, db, active_enrollment, student_headers: Dict[str, str]
    ) -> None:
        enrollment = _pending(db, active_enrollment.course, "홍길동", "01012345678")
        response = client.post(f"/api/enrollments/{enrollment.id}/activate", headers=student_headers)
        assert response.status_code == 409

    def test_missing(self, client: TestClient, student_headers: Dict[str, str]) -> None:
        response = client.post(
            "/api/enrollments/00000000-0000-0000-0000-000000000000/activate", headers=student_headers
        )
        assert response.status_code == 404

    def test_commit_failure(
        self, client: TestClient, db, course: Course, student_headers: Dict[str, str], monkeypatch
    ) -> None:
        """A failed commit answers 500 and leaves the row pending."""
        enrollment = _pending(db, course, "홍길동", "01012345678")

        monkeypatch.setattr(db, "commit", _failing_commit)
        response = client.post(f"/api/enrollments/{enrollment.id}/activate", headers=student_headers)
        monkeypatch.undo()

        assert response.status_code == 500
        db.refresh(enrollment)
        assert enrollment.status == EnrollmentStatus.PENDING.value
        assert enrollment.student_id is None
