"""Pydantic models for the train schedule."""

from typing import List, Optional
from pydantic import BaseModel, Field, field_validator

from trainbot.utils.datetime_utils import parse_time_of_day


class StationRecord(BaseModel):
    """Station with its full name and short name alias."""

    name: str = Field(..., min_length=1, description="Full station name")
    short_name: Optional[str] = Field(None, description="Short name / alias (e.g. CRS code)")

    class Config:
        json_schema_extra = {
            "example": {
                "name": "Central",
                "short_name": "CEN"
            }
        }


class StopRecord(BaseModel):
    """One train calling at one station at a time of day."""

    station: str = Field(..., description="Station full name or short name")
    time: str = Field(..., description="Time of day, normalized to HH:MM")

    @field_validator("time")
    @classmethod
    def normalize_time(cls, value: str) -> str:
        """Normalize to zero-padded 24-hour HH:MM."""
        normalized = parse_time_of_day(value)
        if normalized is None:
            raise ValueError(f"Invalid time of day: {value!r}")
        return normalized


class TrainRecord(BaseModel):
    """Train with its ordered list of stops."""

    name: str = Field(..., description="Train name")
    number: Optional[str] = Field(None, description="Train number")
    stops: List[StopRecord] = Field(default_factory=list, description="Stops in calling order")

    class Config:
        json_schema_extra = {
            "example": {
                "name": "Northern Express",
                "number": "101",
                "stops": [
                    {"station": "Central", "time": "07:18"},
                    {"station": "NOR", "time": "08:02"}
                ]
            }
        }


class ScheduleDocument(BaseModel):
    """Complete schedule as loaded from a JSON file."""

    stations: List[StationRecord] = Field(default_factory=list)
    trains: List[TrainRecord] = Field(default_factory=list)


class DepartureResult(BaseModel):
    """Next matching departure between two stations."""

    train_name: str = Field(..., description="Train name")
    train_number: Optional[str] = Field(None, description="Train number")
    origin: str = Field(..., description="Origin station display name")
    departure_time: str = Field(..., description="Departure from origin (HH:MM)")
    destination: str = Field(..., description="Destination station display name")
    arrival_time: str = Field(..., description="Arrival at destination (HH:MM)")

    class Config:
        frozen = True
        json_schema_extra = {
            "example": {
                "train_name": "Northern Express",
                "train_number": "101",
                "origin": "Central",
                "departure_time": "07:18",
                "destination": "North",
                "arrival_time": "08:02"
            }
        }
