import pytest
from fastapi.testclient import TestClient

from eventcam.app import App
from eventcam.web.server import create_fastapi_app

TRUSTED_ORIGIN = "https://organizer.eventcam.test"
EVIL_ORIGIN = "https://evil.example"


@pytest.fixture
def client(config, core) -> TestClient:
    """HTTP client over the real routes, backed by the in-memory core."""
    app = App(config, core=core)  # type: ignore[arg-type]
    return TestClient(create_fastapi_app(app, config))


@pytest.fixture
def signed_in(client) -> str:
    """Exchange the test bearer token so the client carries the session cookie."""
    response = client.post("/api/organizer/auth/session", headers={"Authorization": "Bearer valid-bearer"})
    assert response.status_code == 200
    return response.json()["session_token"]
