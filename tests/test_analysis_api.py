"""
Tests for the analysis API endpoint.
"""

import pytest
from fastapi.testclient import TestClient

from app.core.security import create_access_token


@pytest.fixture
def owned_attempt(make_user, make_test, make_attempt, physics_sections):
    user = make_user()
    test = make_test(sections=physics_sections)
    attempt = make_attempt(user, test, [(0, 0, True, 40), (0, 1, False, 200)])
    return user, attempt


class TestAnalysisEndpoint:
    """GET /api/v1/analysis/attempts/{attempt_id}"""

    def test_returns_analysis(self, client: TestClient, owned_attempt, auth_headers):
        user, attempt = owned_attempt

        response = client.get(f"/api/v1/analysis/attempts/{attempt.id}", headers=auth_headers(user))

        assert response.status_code == 200
        data = response.json()
        assert data["test_attempt_id"] == attempt.id
        assert data["cached"] is False
        analysis = data["analysis"]
        for key in (
            "overall_performance",
            "topic_analysis",
            "subject_analysis",
            "recommendations",
            "study_plan",
            "conceptual_insights",
            "time_management_analysis",
        ):
            assert key in analysis
        assert [t["topic"] for t in analysis["topic_analysis"]] == ["Mechanics", "Trigonometry"]
        assert analysis["exam_specific"]["exam_type"] == "JEE Main 2025"

    def test_second_request_is_cached(self, client: TestClient, owned_attempt, auth_headers):
        user, attempt = owned_attempt
        url = f"/api/v1/analysis/attempts/{attempt.id}"

        first = client.get(url, headers=auth_headers(user)).json()
        second = client.get(url, headers=auth_headers(user)).json()

        assert second["cached"] is True
        assert second["analysis_id"] == first["analysis_id"]
        assert second["analysis"] == first["analysis"]

    def test_other_users_attempt_is_forbidden(self, client: TestClient, owned_attempt, make_user, auth_headers):
        _, attempt = owned_attempt
        intruder = make_user()

        response = client.get(f"/api/v1/analysis/attempts/{attempt.id}", headers=auth_headers(intruder))

        assert response.status_code == 403

    def test_missing_attempt(self, client: TestClient, make_user, auth_headers):
        response = client.get("/api/v1/analysis/attempts/9999", headers=auth_headers(make_user()))
        assert response.status_code == 404

    def test_requires_token(self, client: TestClient, owned_attempt):
        _, attempt = owned_attempt
        response = client.get(f"/api/v1/analysis/attempts/{attempt.id}")
        assert response.status_code == 401

    def test_rejects_invalid_token(self, client: TestClient, owned_attempt):
        _, attempt = owned_attempt
        response = client.get(
            f"/api/v1/analysis/attempts/{attempt.id}",
            headers={"Authorization": "Bearer not-a-jwt"},
        )
        assert response.status_code == 401

    def test_rejects_token_for_unknown_user(self, client: TestClient, owned_attempt):
        _, attempt = owned_attempt
        token = create_access_token("4242")
        response = client.get(
            f"/api/v1/analysis/attempts/{attempt.id}",
            headers={"Authorization": f"Bearer {token}"},
        )
        assert response.status_code == 401

    def test_inactive_user(self, client: TestClient, make_user, auth_headers):
        user = make_user(is_active=False)
        response = client.get("/api/v1/analysis/attempts/1", headers=auth_headers(user))
        assert response.status_code == 400


class TestHealthEndpoints:

    def test_health(self, client: TestClient):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "healthy"}

    def test_root(self, client: TestClient):
        assert client.get("/").json()["status"] == "healthy"
