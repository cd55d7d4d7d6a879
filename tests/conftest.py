"""Shared pytest fixtures."""

from datetime import timedelta
from types import SimpleNamespace
from typing import Any

import httpx
import pytest

from eventcam.config import Config
from eventcam.core.core import Services
from eventcam.core.modules.event.models import Event, EventStatus
from eventcam.utils import now
from tests.fakes import FakeBroker, FakeDatabase

ORGANIZER_ID = "8d3c1f0e-3b0a-4c59-9a63-2f4f5b7a1e11"
OTHER_ORGANIZER_ID = "1a2b3c4d-0000-4000-8000-000000000002"

IDENTITY_USERS: dict[str, dict[str, Any]] = {
    "valid-bearer": {
        "id": ORGANIZER_ID,
        "email": "jane.doe@example.com",
        "user_metadata": {"full_name": "Jane Doe"},
    },
    "no-email-bearer": {"id": OTHER_ORGANIZER_ID, "user_metadata": {}},
}


def identity_provider(request: httpx.Request) -> httpx.Response:
    """Mimic the identity provider's /auth/v1/user endpoint."""
    if request.url.path != "/auth/v1/user" or request.headers.get("apikey") != "test-publishable-key":
        return httpx.Response(400, json={"message": "bad request"})
    token = request.headers.get("authorization", "").removeprefix("Bearer ")
    if token not in IDENTITY_USERS:
        return httpx.Response(401, json={"message": "invalid JWT"})
    return httpx.Response(200, json=IDENTITY_USERS[token])


@pytest.fixture
def config() -> Config:
    return Config(
        database_url="mongodb://localhost:27017/eventcam_test",
        host="127.0.0.1",
        port=3000,
        identity_provider_url="https://idp.test",
        identity_provider_key="test-publishable-key",
        storage_endpoint="https://storage.test",
        storage_access_key_id="test-access-key",
        storage_secret_access_key="test-secret-key",
        trusted_origins=["https://organizer.eventcam.test", "https://guest.eventcam.test"],
        internal_api_key="internal-secret",
        guest_max_uploads=3,
    )


@pytest.fixture
def database() -> FakeDatabase:
    return FakeDatabase()


@pytest.fixture
def storage() -> FakeBroker:
    return FakeBroker()


@pytest.fixture
def http_client() -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(identity_provider))


@pytest.fixture
def core(config: Config, database: FakeDatabase, storage: FakeBroker, http_client: httpx.AsyncClient) -> SimpleNamespace:
    """Core-shaped container wiring the real services to in-memory collaborators."""
    services = Services(database)  # type: ignore[arg-type]
    container = SimpleNamespace(
        config=config, database=database, storage=storage, http_client=http_client, services=services
    )
    services.set_core(container)  # type: ignore[arg-type]
    return container


@pytest.fixture
def services(core: SimpleNamespace) -> Services:
    return core.services


async def insert_event(database: FakeDatabase, **overrides: Any) -> Event:
    """Store an event, active and happening today unless overridden."""
    current = now()
    values: dict[str, Any] = {
        "slug": "summer-party",
        "name": "Summer Party",
        "organizer_id": ORGANIZER_ID,
        "event_date": current,
        "end_date": current + timedelta(hours=6),
        "status": EventStatus.ACTIVE,
    }
    values.update(overrides)
    event = Event(**values)
    await database.get_collection("events").insert_one(event.to_mongo())
    return event
