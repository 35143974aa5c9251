"""Tests for listening, recording, video and quiz trackers."""

from typing import Dict

import pytest
from fastapi.testclient import TestClient

from speakup.models import Course, MyVoiceOpenList, User, YouTubeViewAttempt


def test_native_audio_count(client: TestClient, course: Course, student_headers: Dict[str, str]) -> None:
    for no in (1, 1, 2):
        response = client.post(
            "/api/activity/native-audio",
            json={"course_id": str(course.id), "sentence_no": no},
            headers=student_headers,
        )
        assert response.status_code == 201

    total = client.get("/api/activity/native-audio/count", params={"course_id": str(course.id)}, headers=student_headers)
    assert total.json() == {"count": 3}

    one = client.get(
        "/api/activity/native-audio/count",
        params={"course_id": str(course.id), "sentence_no": 1},
        headers=student_headers,
    )
    assert one.json() == {"count": 2}


class TestRecordings:
    """Tests for /api/activity/recordings."""

    def test_rerecording_counts_attempts(
        self, client: TestClient, course: Course, student_headers: Dict[str, str]
    ) -> None:
        payload = {"course_id": str(course.id), "sentence_no": 4, "file_url": "https://files.example.com/a.webm"}
        first = client.post("/api/activity/recordings", json=payload, headers=student_headers)
        assert first.json()["attempt_count"] == 1

        payload["file_url"] = "https://files.example.com/b.webm"
        second = client.post("/api/activity/recordings", json=payload, headers=student_headers)
        assert second.json()["attempt_count"] == 2
        assert second.json()["file_url"] == "https://files.example.com/b.webm"

        total = client.get("/api/activity/recordings/total", params={"course_id": str(course.id)}, headers=student_headers)
        assert total.json() == {"count": 2}

    def test_rerecording_updates_open_voice(
        self, client: TestClient, db, course: Course, student: User, student_headers: Dict[str, str]
    ) -> None:
        voice = MyVoiceOpenList(
            user_id=student.id,
            course_id=course.id,
            sentence_no=4,
            my_voice_url="https://files.example.com/old.webm",
        )
        db.add(voice)
        db.commit()

        client.post(
            "/api/activity/recordings",
            json={"course_id": str(course.id), "sentence_no": 4, "file_url": "https://files.example.com/new.webm"},
            headers=student_headers,
        )

        db.refresh(voice)
        assert voice.my_voice_url == "https://files.example.com/new.webm"

    def test_missing_recording(self, client: TestClient, course: Course, student_headers: Dict[str, str]) -> None:
        response = client.get(
            "/api/activity/recordings",
            params={"course_id": str(course.id), "sentence_no": 9},
            headers=student_headers,
        )
        assert response.status_code == 404


class TestYouTubeViews:
    """Tests for /api/activity/youtube-view."""

    def _view(self, client: TestClient, course: Course, duration: int, headers: Dict[str, str]):
        return client.post(
            "/api/activity/youtube-view",
            json={"course_id": str(course.id), "sentence_no": 1, "duration": duration},
            headers=headers,
        )

    def test_short_views_ignored(
        self, client: TestClient, db, course: Course, student_headers: Dict[str, str]
    ) -> None:
        response = self._view(client, course, 2, student_headers)
        assert response.json() == {"recorded": False, "duration": 0}
        assert db.query(YouTubeViewAttempt).count() == 0

    def test_long_views_capped(
        self, client: TestClient, course: Course, student_headers: Dict[str, str]
    ) -> None:
        assert self._view(client, course, 3, student_headers).json() == {"recorded": True, "duration": 3}
        assert self._view(client, course, 600, student_headers).json() == {"recorded": True, "duration": 60}

        total = client.get("/api/activity/youtube-view/total", params={"course_id": str(course.id)}, headers=student_headers)
        assert total.json() == {"count": 63}


def test_quiz_attempts(client: TestClient, course: Course, student_headers: Dict[str, str]) -> None:
    """Attempts accumulate per sentence and kind."""
    for correct in (True, False, True):
        response = client.post(
            "/api/activity/quiz",
            json={"course_id": str(course.id), "sentence_no": 2, "is_correct": correct},
            headers=student_headers,
        )
    assert response.json() == {"sentence_no": 2, "kind": "speaking", "attempt_quiz": 3, "correct_count": 2}

    client.post(
        "/api/activity/quiz",
        json={"course_id": str(course.id), "sentence_no": 2, "kind": "listening", "is_correct": False},
        headers=student_headers,
    )

    stats = client.get("/api/activity/quiz/stats", params={"course_id": str(course.id)}, headers=student_headers)
    assert stats.json() == {"total_attempts": 4, "total_correct": 2}


@pytest.mark.parametrize(
    "path, payload",
    [
        ("/api/activity/native-audio", {"sentence_no": 1}),
        ("/api/activity/recordings", {"sentence_no": 1, "file_url": "https://files.example.com/a.webm"}),
        ("/api/activity/youtube-view", {"sentence_no": 1, "duration": 10}),
        ("/api/activity/quiz", {"sentence_no": 1, "is_correct": True}),
    ],
)
def test_unknown_course(client: TestClient, student_headers: Dict[str, str], path: str, payload: Dict) -> None:
    payload = {**payload, "course_id": "00000000-0000-0000-0000-000000000000"}
    response = client.post(path, json=payload, headers=student_headers)
    assert response.status_code == 404
