"""Shared fixtures: a small schedule database in a temporary directory."""

import pytest

from trainbot.schedule.loader import load_schedule
from trainbot.schedule.models import ScheduleDocument
from trainbot.schedule.store import ScheduleStore


def create_test_schedule() -> ScheduleDocument:
    """Create a test schedule with four stations and four trains."""
    return ScheduleDocument.model_validate({
        "stations": [
            {"name": "Central", "short_name": "CEN"},
            {"name": "Riverside", "short_name": "RIV"},
            {"name": "North", "short_name": "NOR"},
            {"name": "Airport", "short_name": None},
        ],
        "trains": [
            {
                "name": "Northern Express",
                "number": "103",
                "stops": [
                    {"station": "Central", "time": "07:18"},
                    {"station": "North", "time": "08:02"},
                ],
            },
            {
                "name": "Afternoon Local",
                "number": "117",
                "stops": [
                    {"station": "Central", "time": "14:32"},
                    {"station": "Riverside", "time": "14:50"},
                    {"station": "North", "time": "15:11"},
                ],
            },
            {
                "name": "Early Local",
                "number": "101",
                "stops": [
                    {"station": "Central", "time": "5:13"},
                    {"station": "North", "time": "5:52"},
                ],
            },
            {
                "name": "Evening Return",
                "number": "122",
                "stops": [
                    {"station": "North", "time": "17:40"},
                    {"station": "Riverside", "time": "18:01"},
                    {"station": "Central", "time": "18:20"},
                ],
            },
        ],
    })


@pytest.fixture
def schedule_db(tmp_path):
    """Path to a populated schedule database."""
    db_path = tmp_path / "trainbot.db"
    load_schedule(db_path, create_test_schedule())
    return db_path


@pytest.fixture
def store(schedule_db):
    """Opened schedule store, closed after the test."""
    store = ScheduleStore(schedule_db).open()
    yield store
    store.close()
