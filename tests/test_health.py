"""
Tests for health checks and the root endpoints
"""

from unittest.mock import patch


class TestHealth:

    def test_health(self, client):
        response = client.get("/health")

        body = response.json()
        assert response.status_code == 200
        assert body["status"] == "healthy"
        assert body["service"] == "openhub-ai-backend"

    def test_ready(self, client):
        with patch("src.api.health.settings") as mock_settings, \
                patch("src.api.health.check_git_availability", return_value=True):
            mock_settings.OPENROUTER_API_KEY = "key"
            mock_settings.GITHUB_CLIENT_ID = "id"
            mock_settings.GITHUB_CLIENT_SECRET = "secret"
            response = client.get("/health/ready")

        assert response.status_code == 200
        assert response.json()["ready"] is True

    def test_not_ready_without_llm_key(self, client):
        with patch("src.api.health.settings") as mock_settings, \
                patch("src.api.health.check_git_availability", return_value=True):
            mock_settings.OPENROUTER_API_KEY = ""
            mock_settings.GITHUB_CLIENT_ID = "id"
            mock_settings.GITHUB_CLIENT_SECRET = "secret"
            response = client.get("/health/ready")

        assert response.status_code == 503
        assert response.json()["checks"] == {"git": True, "llm_api_key": False, "github_oauth": True}


def test_root(client):
    assert client.get("/").json()["status"] == "running"


def test_connectivity(client):
    body = client.get("/test").json()

    assert body["message"] == "Backend is working!"
    assert body["timestamp"]
    assert body["aiStatus"].startswith("OpenRouter ")
