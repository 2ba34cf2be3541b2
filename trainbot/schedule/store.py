"""
SQLite schedule store.

Holds a single connection for the lifetime of the process and answers
"next departure" queries. All user supplied values are bound as query
parameters.

Schema:
    trains(id, name, number)
    stations(id, name, short_name)
    times(id, train_id, station_id, time)   -- time is "HH:MM"
    info(name, val)                          -- startup bookkeeping
"""

import sqlite3
from datetime import datetime
from pathlib import Path
from typing import Optional, Union

from trainbot.schedule.models import DepartureResult
from trainbot.utils.datetime_utils import parse_time_of_day
from trainbot.utils.logger import get_logger

logger = get_logger()


class ScheduleStoreError(Exception):
    """Exception raised when the schedule store cannot be queried."""
    pass


class ScheduleStoreMissingError(ScheduleStoreError):
    """Exception raised when the store file does not exist at startup."""
    pass


NEXT_DEPARTURE_QUERY = """
    SELECT
        tr.name   AS train_name,
        tr.number AS train_number,
        s1.name   AS origin,
        t1.time   AS departure_time,
        s2.name   AS destination,
        t2.time   AS arrival_time
    FROM times AS t1
    JOIN times AS t2
        ON t2.train_id = t1.train_id
       AND t1.time < t2.time
    JOIN trains AS tr ON tr.id = t1.train_id
    JOIN stations AS s1 ON s1.id = t1.station_id
    JOIN stations AS s2 ON s2.id = t2.station_id
    WHERE (s1.name = :origin OR s1.short_name = :origin)
      AND (s2.name = :destination OR s2.short_name = :destination)
      AND t1.time > :now
    ORDER BY t1.time ASC, tr.id ASC, t2.time ASC
    LIMIT 1
"""

LAST_RUN_KEY = "lastrun"


class ScheduleStore:
    """
    Read access to the train schedule database.

    The store is opened once at startup and closed at shutdown. It can
    also be used as a context manager.
    """

    def __init__(self, db_path: Union[str, Path]):
        """
        Initialize schedule store.

        Args:
            db_path: Path to the SQLite database file
        """
        self.db_path = Path(db_path)
        self._conn: Optional[sqlite3.Connection] = None

    def open(self) -> "ScheduleStore":
        """
        Open the database connection.

        Returns:
            The store itself, for chaining

        Raises:
            ScheduleStoreMissingError: If the database file does not exist
            ScheduleStoreError: If the database cannot be opened
        """
        if self._conn is not None:
            return self

        if not self.db_path.is_file():
            raise ScheduleStoreMissingError(
                f'Database path "{self.db_path}" does not exist or is not readable'
            )

        try:
            self._conn = sqlite3.connect(str(self.db_path))
        except sqlite3.Error as e:
            raise ScheduleStoreError(f"Failed to open {self.db_path}: {e}") from e

        self._conn.row_factory = sqlite3.Row
        logger.info(f"Schedule store opened: {self.db_path}")
        return self

    def close(self) -> None:
        """Close the database connection."""
        if self._conn is None:
            return

        self._conn.close()
        self._conn = None
        logger.info("Schedule store closed")

    @property
    def is_open(self) -> bool:
        return self._conn is not None

    def __enter__(self) -> "ScheduleStore":
        return self.open()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def _connection(self) -> sqlite3.Connection:
        if self._conn is None:
            raise ScheduleStoreError("Schedule store is not open")
        return self._conn

    def find_next_departure(
        self,
        origin: str,
        destination: Optional[str],
        now: str,
    ) -> Optional[DepartureResult]:
        """
        Find the earliest departure after now from origin to destination.

        Stations match by full name or short name, case-sensitively.

        Args:
            origin: Origin station name or short name
            destination: Destination station name or short name
            now: Time of day boundary as "HH:MM" (exclusive)

        Returns:
            DepartureResult or None if no train qualifies

        Raises:
            ScheduleStoreError: If the query cannot be executed or the
                matching row holds a time that is not "HH:MM"
        """
        params = {"origin": origin, "destination": destination, "now": now}

        try:
            row = self._connection().execute(NEXT_DEPARTURE_QUERY, params).fetchone()
        except sqlite3.Error as e:
            raise ScheduleStoreError(f"Schedule query failed: {e}") from e

        if row is None:
            logger.debug(f"No departure {origin} -> {destination} after {now}")
            return None

        # Unpadded or second-resolution times break string ordering
        for column in ("departure_time", "arrival_time"):
            value = row[column]
            if not isinstance(value, str) or parse_time_of_day(value) != value:
                raise ScheduleStoreError(
                    f"Invalid stored time {value!r} for train {row['train_name']!r} "
                    f"(expected HH:MM)"
                )

        return DepartureResult(
            train_name=row["train_name"],
            train_number=None if row["train_number"] is None else str(row["train_number"]),
            origin=row["origin"],
            departure_time=row["departure_time"],
            destination=row["destination"],
            arrival_time=row["arrival_time"],
        )

    def get_last_run(self) -> Optional[str]:
        """
        Get the timestamp of the previous start.

        Returns:
            ISO timestamp string or None if the bot never ran
        """
        try:
            row = self._connection().execute(
                "SELECT val FROM info WHERE name = ? LIMIT 1", (LAST_RUN_KEY,)
            ).fetchone()
        except sqlite3.Error as e:
            raise ScheduleStoreError(f"Failed to read last run: {e}") from e

        return row["val"] if row else None

    def record_run(self, timestamp: Optional[datetime] = None) -> bool:
        """
        Record the current start in the info table.

        Args:
            timestamp: Start time (default: now)

        Returns:
            True if this is the first run
        """
        if timestamp is None:
            timestamp = datetime.now()

        value = timestamp.isoformat()
        first_run = self.get_last_run() is None
        conn = self._connection()

        try:
            with conn:
                if first_run:
                    conn.execute(
                        "INSERT INTO info(name, val) VALUES(?, ?)", (LAST_RUN_KEY, value)
                    )
                else:
                    conn.execute(
                        "UPDATE info SET val = ? WHERE name = ?", (value, LAST_RUN_KEY)
                    )
        except sqlite3.Error as e:
            raise ScheduleStoreError(f"Failed to record run: {e}") from e

        logger.debug(f"Recorded run at {value} (first run: {first_run})")
        return first_run
