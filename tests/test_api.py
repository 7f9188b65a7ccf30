"""Tests for API endpoints (no external API keys required)."""

from unittest.mock import patch

from fastapi.testclient import TestClient

from meeting_tasks.api.main import app

client = TestClient(app)

BULLETS = "- John to review PR #234\n- Sarah will update documentation"


def test_health():
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy"}


def test_extract_heuristic():
    response = client.post("/api/extract", json={"notes": BULLETS, "provider": "heuristic"})
    assert response.status_code == 200

    data = response.json()
    assert [t["assignee"] for t in data["tasks"]] == ["John", "Sarah"]
    assert all(t["priority"] in ("low", "medium", "high") for t in data["tasks"])
    assert data["metadata"]["path"] == "heuristic"
    assert data["metadata"]["transcript_length"] == len(BULLETS)
    assert data["metadata"]["processed_at"]


def test_extract_matches_roster():
    members = [
        {"id": "u1", "full_name": "John Smith", "email": "john@example.com"},
        {"id": "u2", "full_name": "Sarah Lee", "username": "slee"},
        {"id": "u3", "full_name": "Priya Nair"},
    ]
    response = client.post(
        "/api/extract",
        json={"notes": BULLETS, "provider": "heuristic", "members": members},
    )
    assert response.status_code == 200
    assert [t["matched_member_id"] for t in response.json()["tasks"]] == ["u1", "u2"]


def test_extract_without_roster_leaves_match_empty():
    response = client.post("/api/extract", json={"notes": BULLETS, "provider": "heuristic"})
    assert all(t["matched_member_id"] is None for t in response.json()["tasks"])


def test_extract_rejects_empty_notes():
    response = client.post("/api/extract", json={"notes": "   "})
    assert response.status_code == 400


def test_extract_rejects_oversized_notes():
    with patch("meeting_tasks.api.routes.extract.settings") as mock_settings:
        mock_settings.max_notes_length = 10
        response = client.post("/api/extract", json={"notes": "Review the pull request today"})
    assert response.status_code == 400
    assert "10" in response.json()["detail"]


def test_extract_requires_notes():
    response = client.post("/api/extract", json={})
    assert response.status_code == 422


def test_extract_rejects_unknown_provider():
    response = client.post("/api/extract", json={"notes": BULLETS, "provider": "mystery"})
    assert response.status_code == 422


def test_external_failure_falls_back():
    """A provider without credentials degrades to heuristics instead of erroring."""
    with patch("meeting_tasks.extraction.llm.settings") as mock_settings:
        mock_settings.anthropic_api_key = ""
        response = client.post("/api/extract", json={"notes": BULLETS, "provider": "anthropic"})
    assert response.status_code == 200
    assert response.json()["metadata"]["path"] == "heuristic-fallback"
