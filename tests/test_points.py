"""Tests for activity points, rates, ranking and team totals."""

from typing import Dict

import pytest
from fastapi.testclient import TestClient

from speakup.models import (
    Attendance,
    Course,
    Enrollment,
    EnrollmentStatus,
    NativeAudioAttempt,
    Recording,
    User,
    UserCoursePoints,
    YouTubeViewAttempt,
)
from speakup.services.points_service import POINT_WEIGHTS, PointsService, percentage, round_half_up


@pytest.fixture
def activity(db, course: Course, student: User, active_enrollment) -> None:
    """Two listens, one recording and one attended class: 2 + 20 + 50 points."""
    db.add(NativeAudioAttempt(user_id=student.id, course_id=course.id, sentence_no=1))
    db.add(NativeAudioAttempt(user_id=student.id, course_id=course.id, sentence_no=2))
    db.add(Recording(user_id=student.id, course_id=course.id, sentence_no=1, file_url="https://f/1.webm", attempt_count=1))
    db.add(Attendance(class_date_id=course.class_dates[0].id, course_id=course.id, user_id=student.id))
    db.commit()


def test_percentage() -> None:
    assert percentage(25, 100) == 25
    assert percentage(1, 3) == 33
    assert percentage(5, 0) == 0


@pytest.mark.parametrize("value, expected", [(0.5, 1), (1.5, 2), (2.5, 3), (2.4, 2), (83.3, 83), (0, 0)])
def test_round_half_up(value: float, expected: int) -> None:
    assert round_half_up(value) == expected


def test_weights() -> None:
    assert POINT_WEIGHTS["video_duration"] == 0.5
    assert POINT_WEIGHTS["recording_attempts"] == 20
    assert POINT_WEIGHTS["attendance"] == 50
    assert POINT_WEIGHTS["my_voice_open"] == 100


class TestPointsService:
    """Tests for PointsService."""

    def test_total(self, db, course: Course, student: User, activity) -> None:
        result = PointsService(db).calculate_user_activity_points(student.id, course.id)
        assert result["total_points"] == 72
        assert result["counts"]["audio_attempts"] == 2

    def test_video_seconds_are_half_points(self, db, course: Course, student: User) -> None:
        db.add(YouTubeViewAttempt(user_id=student.id, course_id=course.id, sentence_no=1, duration=30))
        db.commit()
        assert PointsService(db).calculate_user_activity_points(student.id, course.id)["total_points"] == 15

    def test_odd_video_seconds_round_up(self, db, course: Course, student: User) -> None:
        """Five seconds is 2.5 points: shown as 3, share taken from the unrounded 2.5."""
        db.add(YouTubeViewAttempt(user_id=student.id, course_id=course.id, sentence_no=1, duration=5))
        db.commit()

        service = PointsService(db)
        assert service.calculate_user_activity_points(student.id, course.id)["total_points"] == 3

        detail = service.points_detail(student.id, course.id)
        assert detail["total_points"] == 3
        assert detail["points"]["video_duration"] == 3
        assert detail["rates"]["video"] == 83

    def test_unattended_rows_do_not_count(self, db, course: Course, student: User) -> None:
        db.add(Attendance(class_date_id=course.class_dates[0].id, course_id=course.id, user_id=student.id, is_attended=False))
        db.commit()
        assert PointsService(db).activity_counts(student.id, course.id)["attendance"] == 0

    def test_recalculate_upserts(self, db, course: Course, student: User, activity) -> None:
        service = PointsService(db)
        first = service.recalculate(student.id, course.id)
        second = service.recalculate(student.id, course.id)
        assert first.id == second.id
        assert second.points == 72
        assert db.query(UserCoursePoints).count() == 1


class TestPointsEndpoints:
    """Tests for /api/points."""

    def test_zero_before_recalculation(
        self, client: TestClient, course: Course, student_headers: Dict[str, str]
    ) -> None:
        response = client.get("/api/points/", params={"course_id": str(course.id)}, headers=student_headers)
        assert response.json() == {"points": 0}

    def test_recalculate(
        self, client: TestClient, course: Course, activity, student_headers: Dict[str, str]
    ) -> None:
        response = client.post("/api/points/recalculate", json={"course_id": str(course.id)}, headers=student_headers)
        assert response.json() == {"points": 72}

        stored = client.get("/api/points/", params={"course_id": str(course.id)}, headers=student_headers)
        assert stored.json() == {"points": 72}

    def test_detail_rates(
        self, client: TestClient, course: Course, activity, student_headers: Dict[str, str]
    ) -> None:
        response = client.get("/api/points/detail", params={"course_id": str(course.id)}, headers=student_headers)
        assert response.status_code == 200
        data = response.json()
        assert data["total_points"] == 72
        assert data["points"]["attendance"] == 50
        assert data["rates"]["audio"] == 3
        assert data["rates"]["recording"] == 28
        assert data["rates"]["attendance"] == 69
        assert data["rates"]["video"] == 0

    def test_detail_requires_enrollment(
        self, client: TestClient, course: Course, student_headers: Dict[str, str]
    ) -> None:
        response = client.get("/api/points/detail", params={"course_id": str(course.id)}, headers=student_headers)
        assert response.status_code == 403

    def test_ranking_and_team(
        self,
        client: TestClient,
        db,
        course: Course,
        student: User,
        active_enrollment,
        make_user,
        student_headers: Dict[str, str],
    ) -> None:
        rival = make_user("rival@example.com", real_name="경쟁자", phone="010-4444-3333", class_nickname="Rival")
        db.add(Enrollment(
            course_id=course.id,
            course_title=course.title,
            student_id=rival.id,
            student_name="경쟁자",
            student_phone="01044443333",
            status=EnrollmentStatus.ACTIVE.value,
        ))
        db.add(UserCoursePoints(user_id=student.id, course_id=course.id, points=120))
        db.add(UserCoursePoints(user_id=rival.id, course_id=course.id, points=300))
        db.commit()

        params = {"course_id": str(course.id)}

        ranking = client.get("/api/points/ranking", params=params, headers=student_headers).json()
        assert [(r["rank"], r["display_name"], r["points"]) for r in ranking] == [
            (1, "Rival", 300),
            (2, "홍길동", 120),
        ]

        rank = client.get("/api/points/rank", params=params, headers=student_headers).json()
        assert rank == {"rank": 2, "points": 120, "total_students": 2}

        team = client.get("/api/points/team", params=params, headers=student_headers).json()
        assert team == {"total_team_points": 420, "student_count": 2}
