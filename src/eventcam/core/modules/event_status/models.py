from datetime import datetime

from pydantic import BaseModel


class SyncWindow(BaseModel):
    """Thresholds for one tick, all derived from a single `now`.

    activate: event_date <= activate_from and end_date >= close_cutoff
    close:    end_date < close_cutoff
    """

    now: datetime
    activate_from: datetime
    close_cutoff: datetime


class EventStatusSyncResult(BaseModel):
    activated: int
    closed: int
    open_buffer_hours: int
    close_buffer_hours: int
    executed_at: datetime
