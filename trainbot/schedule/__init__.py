"""Train schedule storage and lookup."""

from trainbot.schedule.models import DepartureResult, ScheduleDocument
from trainbot.schedule.store import ScheduleStore, ScheduleStoreError, ScheduleStoreMissingError

__all__ = [
    "DepartureResult",
    "ScheduleDocument",
    "ScheduleStore",
    "ScheduleStoreError",
    "ScheduleStoreMissingError",
]
