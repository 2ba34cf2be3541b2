"""
Build the schedule database from a JSON document.

Expected format:
    {
        "stations": [{"name": "Central", "short_name": "CEN"}],
        "trains": [
            {"name": "Northern Express", "number": "101",
             "stops": [{"station": "Central", "time": "7:18"}, ...]}
        ]
    }

Times are normalized to "HH:MM" on load.
"""

import json
import sqlite3
from pathlib import Path
from typing import Dict, Union

from trainbot.schedule.models import ScheduleDocument
from trainbot.utils.logger import get_logger

logger = get_logger()

SCHEMA = """
    CREATE TABLE IF NOT EXISTS trains (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        name TEXT NOT NULL,
        number TEXT
    );

    CREATE TABLE IF NOT EXISTS stations (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        name TEXT NOT NULL UNIQUE,
        short_name TEXT
    );

    CREATE TABLE IF NOT EXISTS times (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        train_id INTEGER NOT NULL REFERENCES trains(id),
        station_id INTEGER NOT NULL REFERENCES stations(id),
        time TEXT NOT NULL
    );

    CREATE INDEX IF NOT EXISTS idx_times_station ON times(station_id, time);
    CREATE INDEX IF NOT EXISTS idx_times_train ON times(train_id, time);

    CREATE TABLE IF NOT EXISTS info (
        name TEXT PRIMARY KEY,
        val TEXT
    );
"""


def create_schema(conn: sqlite3.Connection) -> None:
    """Create schedule tables if they do not exist."""
    conn.executescript(SCHEMA)


def load_schedule(db_path: Union[str, Path], schedule: ScheduleDocument) -> Dict[str, int]:
    """
    Write a schedule into the database, creating it if needed.

    Args:
        db_path: Path to the SQLite database file
        schedule: Parsed schedule document

    Returns:
        Dict with counts of inserted stations, trains and stops

    Raises:
        ValueError: If a stop references an unknown station
    """
    db_path = Path(db_path)
    db_path.parent.mkdir(parents=True, exist_ok=True)

    conn = sqlite3.connect(str(db_path))
    try:
        create_schema(conn)

        with conn:
            station_ids: Dict[str, int] = {}
            for station in schedule.stations:
                cursor = conn.execute(
                    "INSERT INTO stations(name, short_name) VALUES(?, ?)",
                    (station.name, station.short_name),
                )
                station_ids[station.name] = cursor.lastrowid
                if station.short_name:
                    station_ids.setdefault(station.short_name, cursor.lastrowid)

            stop_count = 0
            for train in schedule.trains:
                cursor = conn.execute(
                    "INSERT INTO trains(name, number) VALUES(?, ?)",
                    (train.name, train.number),
                )
                train_id = cursor.lastrowid

                for stop in train.stops:
                    station_id = station_ids.get(stop.station)
                    if station_id is None:
                        raise ValueError(
                            f"Train {train.name!r} stops at unknown station {stop.station!r}"
                        )
                    conn.execute(
                        "INSERT INTO times(train_id, station_id, time) VALUES(?, ?, ?)",
                        (train_id, station_id, stop.time),
                    )
                    stop_count += 1
    finally:
        conn.close()

    counts = {
        "stations": len(schedule.stations),
        "trains": len(schedule.trains),
        "stops": stop_count,
    }
    logger.info(f"Loaded schedule into {db_path}: {counts}")
    return counts


def load_schedule_file(json_path: Union[str, Path], db_path: Union[str, Path]) -> Dict[str, int]:
    """
    Load a schedule JSON file into the database.

    Args:
        json_path: Path to the schedule JSON file
        db_path: Path to the SQLite database file

    Returns:
        Dict with counts of inserted stations, trains and stops
    """
    with open(json_path, "r", encoding="utf-8") as f:
        data = json.load(f)

    schedule = ScheduleDocument.model_validate(data)
    return load_schedule(db_path, schedule)
