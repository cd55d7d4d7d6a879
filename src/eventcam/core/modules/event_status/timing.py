"""Wall-clock arithmetic for the event status state machine."""

from datetime import UTC, datetime, timedelta

from eventcam.core.modules.event_status.models import SyncWindow

MIN_DELAY_SECONDS = 1.0


def compute_sync_window(now: datetime, open_early_hours: int, close_late_hours: int) -> SyncWindow:
    """Build the thresholds for one tick.

    An event activates when now >= event_date - open_early and
    now <= end_date + 1 day + close_late. It closes when
    now > end_date + 1 day + close_late. Both rules are rewritten in terms of
    stored fields and share `close_cutoff`, so no event can match both.
    """
    if open_early_hours < 0 or close_late_hours < 0:
        raise ValueError("Event status buffers must not be negative")

    close_cutoff = now - timedelta(days=1) - timedelta(hours=close_late_hours)
    return SyncWindow(
        now=now,
        activate_from=now + timedelta(hours=open_early_hours),
        close_cutoff=close_cutoff,
    )


def next_half_day_boundary(anchor: datetime) -> datetime:
    """Next 00:00 or 12:00 UTC strictly after `anchor`."""
    anchor = anchor.astimezone(UTC)
    midnight = anchor.replace(hour=0, minute=0, second=0, microsecond=0)
    if anchor.hour < 12:
        return midnight + timedelta(hours=12)
    return midnight + timedelta(days=1)


def seconds_until_next_boundary(anchor: datetime) -> float:
    delay = (next_half_day_boundary(anchor) - anchor).total_seconds()
    return max(delay, MIN_DELAY_SECONDS)
