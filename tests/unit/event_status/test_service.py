"""Tests for the status state machine applied to stored events."""

from datetime import timedelta

import pytest

from eventcam.core.modules.event.models import EventStatus
from eventcam.utils import now
from tests.conftest import insert_event


async def status_of(database, event):
    doc = await database.get_collection("events").find_one({"_id": event.id})
    return doc["status"]


class TestSyncOnce:
    @pytest.mark.asyncio
    async def test_event_lifecycle_across_boundaries(self, services, database):
        """Test that a same-day event opens early and closes after the late buffer."""
        start = now()
        event_time = start + timedelta(hours=12)
        event = await insert_event(database, status=EventStatus.DRAFT, event_date=event_time, end_date=event_time)

        result = await services.event_status.sync_once(start)
        assert (result.activated, result.closed) == (1, 0)
        assert await status_of(database, event) == EventStatus.ACTIVE

        last_open = event_time + timedelta(days=1, hours=13)
        result = await services.event_status.sync_once(last_open)
        assert (result.activated, result.closed) == (0, 0)
        assert await status_of(database, event) == EventStatus.ACTIVE

        result = await services.event_status.sync_once(last_open + timedelta(seconds=1))
        assert (result.activated, result.closed) == (0, 1)
        assert await status_of(database, event) == EventStatus.CLOSED

    @pytest.mark.asyncio
    async def test_draft_too_far_ahead_stays_draft(self, services, database):
        start = now()
        event_time = start + timedelta(hours=13, seconds=1)
        event = await insert_event(database, status=EventStatus.DRAFT, event_date=event_time, end_date=event_time)

        result = await services.event_status.sync_once(start)

        assert result.activated == 0
        assert await status_of(database, event) == EventStatus.DRAFT

    @pytest.mark.asyncio
    async def test_draft_past_its_window_closes_directly(self, services, database):
        long_ago = now() - timedelta(days=10)
        event = await insert_event(database, status=EventStatus.DRAFT, event_date=long_ago, end_date=long_ago)

        result = await services.event_status.sync_once()

        assert (result.activated, result.closed) == (0, 1)
        assert await status_of(database, event) == EventStatus.CLOSED

    @pytest.mark.asyncio
    async def test_closed_is_terminal(self, services, database):
        event = await insert_event(database, status=EventStatus.CLOSED)

        result = await services.event_status.sync_once()

        assert (result.activated, result.closed) == (0, 0)
        assert await status_of(database, event) == EventStatus.CLOSED

    @pytest.mark.asyncio
    async def test_repeated_tick_changes_nothing(self, services, database):
        start = now()
        await insert_event(database, slug="opening", status=EventStatus.DRAFT, event_date=start, end_date=start)
        past = start - timedelta(days=5)
        await insert_event(database, slug="finished", status=EventStatus.ACTIVE, event_date=past, end_date=past)

        first = await services.event_status.sync_once(start)
        second = await services.event_status.sync_once(start)

        assert (first.activated, first.closed) == (1, 1)
        assert (second.activated, second.closed) == (0, 0)

    @pytest.mark.asyncio
    async def test_result_reports_buffers(self, services, config):
        current = now()

        result = await services.event_status.sync_once(current)

        assert result.open_buffer_hours == config.event_open_early_hours
        assert result.close_buffer_hours == config.event_close_late_hours
        assert result.executed_at == current

    @pytest.mark.asyncio
    async def test_updated_at_stamped(self, services, database):
        start = now()
        event = await insert_event(database, status=EventStatus.DRAFT, event_date=start, end_date=start)

        await services.event_status.sync_once(start)

        doc = await database.get_collection("events").find_one({"_id": event.id})
        assert doc["updated_at"] == start


class TestSchedulerLifecycle:
    @pytest.mark.asyncio
    async def test_disabled_by_default(self, services):
        await services.event_status.on_start()

        assert not services.event_status.scheduler.running

    @pytest.mark.asyncio
    async def test_enabled_scheduler_starts_and_stops(self, services, config):
        config.enable_event_status_scheduler = True

        await services.event_status.on_start()
        assert services.event_status.scheduler.running

        await services.event_status.on_stop()
        assert not services.event_status.scheduler.running
