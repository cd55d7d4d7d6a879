from __future__ import annotations

import importlib
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, Any, cast
from urllib.parse import urlparse

import httpx
from pymongo import AsyncMongoClient
from pymongo.asynchronous.database import AsyncDatabase

from eventcam.config import Config
from eventcam.core.modules.storage.broker import CapabilityUrlBroker, create_storage_client

if TYPE_CHECKING:
    from eventcam.core.modules.access.service import AccessService
    from eventcam.core.modules.csrf.service import CsrfService
    from eventcam.core.modules.event.service import EventService
    from eventcam.core.modules.event_status.service import EventStatusService
    from eventcam.core.modules.guest.service import GuestService
    from eventcam.core.modules.identity.service import IdentityService
    from eventcam.core.modules.media.service import MediaService
    from eventcam.core.modules.organizer.service import OrganizerService
    from eventcam.core.modules.session.service import SessionService


# (attribute, module, class), in start order. Stop runs in reverse, so the
# scheduler is stopped before the collections it writes to.
SERVICE_SPECS: list[tuple[str, str, str]] = [
    ("identity", "eventcam.core.modules.identity.service", "IdentityService"),
    ("organizer", "eventcam.core.modules.organizer.service", "OrganizerService"),
    ("session", "eventcam.core.modules.session.service", "SessionService"),
    ("access", "eventcam.core.modules.access.service", "AccessService"),
    ("csrf", "eventcam.core.modules.csrf.service", "CsrfService"),
    ("event", "eventcam.core.modules.event.service", "EventService"),
    ("guest", "eventcam.core.modules.guest.service", "GuestService"),
    ("media", "eventcam.core.modules.media.service", "MediaService"),
    ("event_status", "eventcam.core.modules.event_status.service", "EventStatusService"),
]


class Service:
    """A unit of domain logic bound to the shared database and, once wired, to Core."""

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        self.database = database
        self._core: Core | None = None

    async def on_start(self) -> None:
        """Hook run once at startup (indexes, background tasks)."""

    async def on_stop(self) -> None:
        """Hook run once at shutdown."""

    @property
    def core(self) -> Core:
        if self._core is None:
            raise RuntimeError(f"{type(self).__name__} used before Core was attached")
        return self._core

    def set_core(self, core: Core) -> None:
        self._core = core


class Services:
    """All services of the process, instantiated from SERVICE_SPECS."""

    identity: IdentityService
    organizer: OrganizerService
    session: SessionService
    access: AccessService
    csrf: CsrfService
    event: EventService
    event_status: EventStatusService
    guest: GuestService
    media: MediaService

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        self._services: list[Service] = []
        for attr_name, module_path, class_name in SERVICE_SPECS:
            service_class = cast(type[Service], getattr(importlib.import_module(module_path), class_name))
            instance = service_class(database)
            setattr(self, attr_name, instance)
            self._services.append(instance)

    def set_core(self, core: Core) -> None:
        for service in self._services:
            service.set_core(core)

    async def start_all(self) -> None:
        for service in self._services:
            await service.on_start()

    async def stop_all(self) -> None:
        for service in reversed(self._services):
            await service.on_stop()


class Core:
    """Container providing config, database, shared clients and all service instances.

    The HTTP client and the storage broker are created once here and shared by
    every concurrent request.
    """

    config: Config
    mongo_client: AsyncMongoClient[dict[str, Any]]
    database: AsyncDatabase[dict[str, Any]]
    http_client: httpx.AsyncClient
    storage: CapabilityUrlBroker
    services: Services

    def __init__(self, config: Config) -> None:
        self.config = config
        self.mongo_client = AsyncMongoClient(config.database_url, uuidRepresentation="standard", tz_aware=True)
        self.database = self.mongo_client.get_database(urlparse(config.database_url).path[1:])
        self.http_client = httpx.AsyncClient(timeout=config.external_timeout_seconds)
        self.storage = CapabilityUrlBroker(create_storage_client(config), config.signed_url_ttl_seconds)
        self.services = Services(self.database)
        self.services.set_core(self)

    @asynccontextmanager
    async def lifespan(self) -> AsyncGenerator[None]:
        """Start services, yield while serving, then stop services and close clients."""
        await self.services.start_all()
        try:
            yield
        finally:
            await self.services.stop_all()
            await self.http_client.aclose()
            await self.mongo_client.aclose()
