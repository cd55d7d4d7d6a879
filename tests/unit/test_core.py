import pytest

from eventcam.core.core import SERVICE_SPECS, Service, Services


def test_every_service_registered(services):
    for attr_name, _, class_name in SERVICE_SPECS:
        assert type(getattr(services, attr_name)).__name__ == class_name


def test_service_without_core_fails_loudly(database):
    with pytest.raises(RuntimeError, match="before Core was attached"):
        _ = Service(database).core  # type: ignore[arg-type]


@pytest.mark.asyncio
async def test_stop_runs_in_reverse_order(database, monkeypatch):
    registry = Services(database)  # type: ignore[arg-type]
    stopped: list[str] = []
    for attr_name, _, _ in SERVICE_SPECS:

        async def on_stop(name: str = attr_name) -> None:
            stopped.append(name)

        monkeypatch.setattr(getattr(registry, attr_name), "on_stop", on_stop)

    await registry.stop_all()

    assert stopped == [name for name, _, _ in reversed(SERVICE_SPECS)]
