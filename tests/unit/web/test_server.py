from datetime import timedelta

import pytest

from eventcam.core.modules.event.models import EventStatus
from eventcam.utils import now
from tests.conftest import insert_event

SYNC_URL = "/api/internal/event-status-sync"


class TestHealth:
    def test_health_echoes_request_id(self, client):
        response = client.get("/api/health", headers={"X-Request-ID": "abc"})

        assert response.status_code == 200
        assert response.json() == {"ok": True, "service": "eventcam-api", "request_id": "abc"}
        assert response.headers["X-Request-ID"] == "abc"

    def test_request_id_generated(self, client):
        response = client.get("/api/health")

        assert response.headers["X-Request-ID"] == response.json()["request_id"]


class TestErrorEnvelope:
    def test_unknown_route(self, client):
        response = client.get("/api/nope")

        assert response.status_code == 404
        error = response.json()["error"]
        assert error["code"] == "NOT_FOUND"
        assert error["message"] == "Route GET /api/nope was not found"
        assert error["request_id"] == response.headers["X-Request-ID"]

    def test_body_validation(self, client):
        response = client.post("/api/lookup-event", json={})

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"
        assert response.json()["error"]["details"]["errors"]


class TestInternalSync:
    def test_wrong_key(self, client):
        response = client.post(SYNC_URL, headers={"X-Internal-Key": "guess"})

        assert response.status_code == 401

    def test_disabled_without_configured_key(self, client, config):
        config.internal_api_key = None

        assert client.post(SYNC_URL, headers={"X-Internal-Key": "internal-secret"}).status_code == 404

    @pytest.mark.asyncio
    async def test_runs_tick(self, client, database):
        start = now()
        await insert_event(database, status=EventStatus.DRAFT, event_date=start, end_date=start + timedelta(hours=2))

        response = client.post(SYNC_URL, headers={"X-Internal-Key": "internal-secret"})

        assert response.status_code == 200
        assert response.json()["activated"] == 1
        assert response.json()["closed"] == 0
