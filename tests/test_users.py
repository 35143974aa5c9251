"""Tests for the caller's own profile endpoints."""

from typing import Dict

from fastapi.testclient import TestClient

from speakup.models import Course, User


def test_me(client: TestClient, student_headers: Dict[str, str]) -> None:
    response = client.get("/api/users/me", headers=student_headers)
    assert response.status_code == 200
    data = response.json()
    assert data["real_name"] == "홍길동"
    assert data["is_profile_complete"] is True


class TestProfileUpdate:
    """Tests for PUT /api/users/me."""

    def test_requires_name_and_phone(self, client: TestClient, student_headers: Dict[str, str]) -> None:
        response = client.put("/api/users/me", json={"real_name": "홍길동"}, headers=student_headers)
        assert response.status_code == 400

    def test_rejects_bad_phone(self, client: TestClient, student_headers: Dict[str, str]) -> None:
        response = client.put(
            "/api/users/me",
            json={"real_name": "홍길동", "phone": "01012345678"},
            headers=student_headers,
        )
        assert response.status_code == 400

    def test_phone_taken_by_another_user(
        self, client: TestClient, make_user, student_headers: Dict[str, str]
    ) -> None:
        make_user("other@example.com", real_name="다른사람", phone="010-5555-5555")
        response = client.put(
            "/api/users/me",
            json={"real_name": "홍길동", "phone": "010-5555-5555"},
            headers=student_headers,
        )
        assert response.status_code == 409

    def test_phone_shared_by_several_users(
        self, client: TestClient, make_user, student_headers: Dict[str, str]
    ) -> None:
        make_user("first@example.com", phone="010-7777-8888")
        make_user("second@example.com", phone="010-7777-8888")
        response = client.put(
            "/api/users/me",
            json={"real_name": "홍길동", "phone": "010-7777-8888"},
            headers=student_headers,
        )
        assert response.status_code == 409

    def test_updates_profile(self, client: TestClient, student_headers: Dict[str, str]) -> None:
        response = client.put(
            "/api/users/me",
            json={"real_name": " 홍길순 ", "phone": "010-2222-3333", "class_nickname": "Gil"},
            headers=student_headers,
        )
        assert response.status_code == 200
        data = response.json()
        assert data["real_name"] == "홍길순"
        assert data["phone"] == "010-2222-3333"
        assert data["class_nickname"] == "Gil"

    def test_zoom_link_is_teacher_only(self, client: TestClient, student_headers: Dict[str, str]) -> None:
        response = client.put(
            "/api/users/me",
            json={"real_name": "홍길동", "phone": "010-1234-5678", "zoom_invite_url": "https://zoom.us/j/1"},
            headers=student_headers,
        )
        assert response.status_code == 403

    def test_teacher_zoom_link_must_be_https(self, client: TestClient, teacher_headers: Dict[str, str]) -> None:
        response = client.put(
            "/api/users/me",
            json={"real_name": "김선생", "phone": "010-9999-8888", "zoom_invite_url": "http://zoom.us/j/1"},
            headers=teacher_headers,
        )
        assert response.status_code == 400

        response = client.put(
            "/api/users/me",
            json={"real_name": "김선생", "phone": "010-9999-8888", "zoom_invite_url": "https://zoom.us/j/1"},
            headers=teacher_headers,
        )
        assert response.status_code == 200
        assert response.json()["zoom_invite_url"] == "https://zoom.us/j/1"


def test_toggle_image_public(client: TestClient, student_headers: Dict[str, str]) -> None:
    """Each call flips image visibility."""
    first = client.post("/api/users/me/toggle-image-public", headers=student_headers)
    assert first.json()["is_image_public_open"] is True

    second = client.post("/api/users/me/toggle-image-public", headers=student_headers)
    assert second.json()["is_image_public_open"] is False


def test_cancel_teacher_application(client: TestClient, db, student: User, student_headers: Dict[str, str]) -> None:
    response = client.post("/api/users/me/cancel-teacher-application", headers=student_headers)
    assert response.status_code == 400

    student.is_apply_for_teacher = True
    db.commit()

    response = client.post("/api/users/me/cancel-teacher-application", headers=student_headers)
    assert response.status_code == 200
    assert response.json()["is_apply_for_teacher"] is False


def test_selected_course(client: TestClient, course: Course, student_headers: Dict[str, str]) -> None:
    """Selected course starts empty and is saved per user."""
    empty = client.get("/api/users/me/selected", headers=student_headers)
    assert empty.status_code == 200
    assert empty.json()["selected_course_id"] is None

    saved = client.put(
        "/api/users/me/selected",
        json={
            "selected_course_id": str(course.id),
            "selected_course_contents": course.contents,
            "selected_course_title": course.title,
        },
        headers=student_headers,
    )
    assert saved.status_code == 200

    again = client.get("/api/users/me/selected", headers=student_headers)
    assert again.json()["selected_course_id"] == str(course.id)
    assert again.json()["selected_course_title"] == "Basic 100"

    reset = client.post("/api/users/me/selected/reset", headers=student_headers)
    assert reset.json() == {"success": True}

    cleared = client.get("/api/users/me/selected", headers=student_headers).json()
    assert cleared["selected_course_id"] is None
    assert cleared["selected_course_title"] is None


def test_reset_without_selection(client: TestClient, student_headers: Dict[str, str]) -> None:
    response = client.post("/api/users/me/selected/reset", headers=student_headers)
    assert response.status_code == 200
    assert response.json() == {"success": True}


def test_select_unknown_course(client: TestClient, student_headers: Dict[str, str]) -> None:
    response = client.put(
        "/api/users/me/selected",
        json={"selected_course_id": "00000000-0000-0000-0000-000000000000"},
        headers=student_headers,
    )
    assert response.status_code == 404


class TestMyCourses:
    """Tests for GET /api/users/me/courses."""

    def test_student_sees_enrolled_course(
        self, client: TestClient, active_enrollment, student_headers: Dict[str, str]
    ) -> None:
        response = client.get("/api/users/me/courses", headers=student_headers)
        assert response.status_code == 200
        assert [c["title"] for c in response.json()] == ["Basic 100"]

    def test_student_without_enrollment(
        self, client: TestClient, course: Course, student_headers: Dict[str, str]
    ) -> None:
        response = client.get("/api/users/me/courses", headers=student_headers)
        assert response.json() == []

    def test_teacher_sees_taught_course(
        self, client: TestClient, course: Course, teacher_headers: Dict[str, str]
    ) -> None:
        response = client.get("/api/users/me/courses", headers=teacher_headers)
        assert [c["id"] for c in response.json()] == [str(course.id)]

    def test_admin_sees_created_course(
        self, client: TestClient, course: Course, admin_headers: Dict[str, str]
    ) -> None:
        response = client.get("/api/users/me/courses", headers=admin_headers)
        assert len(response.json()) == 1
