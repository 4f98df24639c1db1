"""
Integration tests for status and catalog endpoints.

WHAT: Test /api/v1/llm/status, /api/v1/health, /api/v1/sellers and /api/v1/providers
WHY: Ensure HTTP layer correctly integrates with provider and DB
HOW: Use TestClient with a mock provider and a patched database ping
"""

import pytest
from unittest.mock import patch

from cartai.main import app
from cartai.api.deps import get_llm_provider
from cartai.llm.openrouter import OpenRouterProvider
from tests.fixtures.mock_llm import MockLLMProvider

DB_UP = {"available": True, "url": "sqlite://", "error": None}
DB_DOWN = {"available": False, "url": "sqlite://", "error": "disk I/O error"}


@pytest.mark.integration
class TestLLMStatusEndpoint:
    """Test /api/v1/llm/status endpoint."""

    def test_llm_status_available(self, client):
        with patch("cartai.api.v1.endpoints.status.ping_database", return_value=DB_UP):
            response = client.get("/api/v1/llm/status")

        assert response.status_code == 200
        data = response.json()
        assert data["llm"]["available"] is True
        assert data["llm"]["models"] == ["mock-model"]
        assert data["database"]["available"] is True

    def test_llm_status_disabled_provider(self, client):
        app.dependency_overrides[get_llm_provider] = lambda: OpenRouterProvider(enabled=False)

        with patch("cartai.api.v1.endpoints.status.ping_database", return_value=DB_UP):
            response = client.get("/api/v1/llm/status")

        assert response.status_code == 200
        data = response.json()
        assert data["llm"]["available"] is False
        assert "disabled" in data["llm"]["error"]


@pytest.mark.integration
class TestHealthEndpoint:
    """Test /api/v1/health endpoint."""

    def test_health_all_up(self, client):
        with patch("cartai.api.v1.endpoints.status.ping_database", return_value=DB_UP):
            response = client.get("/api/v1/health")

        data = response.json()
        assert response.status_code == 200
        assert data["status"] == "healthy"
        assert data["components"]["llm"]["available"] is True
        assert data["components"]["database"]["available"] is True

    def test_health_degraded_without_llm(self, client):
        app.dependency_overrides[get_llm_provider] = lambda: MockLLMProvider(should_fail=True)

        with patch("cartai.api.v1.endpoints.status.ping_database", return_value=DB_UP):
            response = client.get("/api/v1/health")

        assert response.json()["status"] == "degraded"

    def test_health_degraded_with_disabled_provider(self, client):
        app.dependency_overrides[get_llm_provider] = lambda: OpenRouterProvider(enabled=False)

        with patch("cartai.api.v1.endpoints.status.ping_database", return_value=DB_UP):
            response = client.get("/api/v1/health")

        assert response.json()["status"] == "degraded"

    def test_health_unhealthy_without_database(self, client):
        with patch("cartai.api.v1.endpoints.status.ping_database", return_value=DB_DOWN):
            response = client.get("/api/v1/health")

        assert response.json()["status"] == "unhealthy"


@pytest.mark.integration
class TestCatalogEndpoints:

    def test_sellers(self, client):
        response = client.get("/api/v1/sellers")

        assert response.status_code == 200
        ids = [seller["seller_id"] for seller in response.json()]
        assert ids == ["seller_eco_premium", "seller_fast_trader", "seller_budget"]

    def test_providers(self, client):
        response = client.get("/api/v1/providers")

        assert response.status_code == 200
        variants = {variant["variant_id"]: variant for variant in response.json()}
        assert set(variants) == {"openrouter", "anthropic", "gemini"}
        assert variants["gemini"]["buyer_model"] == "openrouter/sherlock-think-alpha"

    def test_root(self, client):
        response = client.get("/")

        assert response.status_code == 200
        assert response.json()["status"] == "running"
