"""Tests for site configuration and the Perth tour inquiry form."""

from datetime import datetime, timedelta
from typing import Dict

import pytest
from fastapi.testclient import TestClient

from speakup.models import Configuration, PerthQuestion

PAYLOAD = {"site_name": "SpeakUp", "admin_email": "admin@example.com", "admin_id": "admin"}


def test_empty_before_first_save(client: TestClient) -> None:
    response = client.get("/api/site/configuration")
    assert response.status_code == 200
    assert response.json() == {}


def test_missing_fields(client: TestClient, admin_headers: Dict[str, str]) -> None:
    response = client.post(
        "/api/site/configuration",
        json={"site_name": "  ", "admin_email": "admin@example.com", "admin_id": "admin"},
        headers=admin_headers,
    )
    assert response.status_code == 400


def test_admin_only(client: TestClient, make_user, headers_for, student_headers: Dict[str, str]) -> None:
    assert client.post("/api/site/configuration", json=PAYLOAD, headers=student_headers).status_code == 403

    semi_admin = make_user("semi@example.com", role="SEMI_ADMIN")
    assert client.post("/api/site/configuration", json=PAYLOAD, headers=headers_for(semi_admin)).status_code == 403


def test_save_keeps_single_row(client: TestClient, db, admin_headers: Dict[str, str]) -> None:
    first = client.post("/api/site/configuration", json=PAYLOAD, headers=admin_headers)
    assert first.status_code == 200

    updated = client.post(
        "/api/site/configuration",
        json={**PAYLOAD, "site_name": "SpeakUp Academy"},
        headers=admin_headers,
    )
    assert updated.json()["site_name"] == "SpeakUp Academy"
    assert db.query(Configuration).count() == 1

    public = client.get("/api/site/configuration")
    assert public.json() == {"site_name": "SpeakUp Academy", "admin_email": "admin@example.com", "admin_id": "admin"}


class TestPerthQuestions:
    """Tests for /api/perth-questions."""

    def test_submit_without_login(self, client: TestClient) -> None:
        response = client.post(
            "/api/perth-questions/",
            json={"name": " 김민수 ", "phone": "010-1111-2222", "email": " ", "message": "8월 투어 일정이 궁금합니다."},
        )
        assert response.status_code == 201
        data = response.json()
        assert data["data"]["name"] == "김민수"
        assert data["data"]["email"] is None

    @pytest.mark.parametrize("missing", ["name", "phone", "message"])
    def test_required_fields(self, client: TestClient, missing: str) -> None:
        payload = {"name": "김민수", "phone": "010-1111-2222", "message": "문의"}
        payload[missing] = "  "
        assert client.post("/api/perth-questions/", json=payload).status_code == 400

    def test_list_is_admin_only(
        self, client: TestClient, student_headers: Dict[str, str], admin_headers: Dict[str, str]
    ) -> None:
        assert client.get("/api/perth-questions/", headers=student_headers).status_code == 403
        assert client.get("/api/perth-questions/", headers=admin_headers).status_code == 200

    def test_pagination(self, client: TestClient, db, admin_headers: Dict[str, str]) -> None:
        start = datetime(2026, 10, 1, 9, 0)
        for i in range(12):
            db.add(PerthQuestion(
                name=f"문의자{i}",
                phone="010-1111-2222",
                message=f"문의 {i}",
                created_at=start + timedelta(hours=i),
            ))
        db.commit()

        first = client.get("/api/perth-questions/", params={"limit": 5}, headers=admin_headers).json()
        assert first["pagination"] == {"page": 1, "limit": 5, "total": 12, "total_pages": 3}
        assert first["data"][0]["name"] == "문의자11"

        last = client.get("/api/perth-questions/", params={"page": 3, "limit": 5}, headers=admin_headers).json()
        assert [q["name"] for q in last["data"]] == ["문의자1", "문의자0"]
