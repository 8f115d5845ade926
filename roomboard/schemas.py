"""Pydantic schemas for rooms, bookings and calendar views.

Wire and storage formats use camelCase field names (``roomId``,
``startTime``); Python code uses the snake_case attribute names.
"""
from __future__ import annotations

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class MeetingType(str, Enum):
    INTERNAL = "Internal"
    EXTERNAL = "External"


class Room(CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    id: int
    name: str
    has_tv: bool = False


class BookingFields(CamelModel):
    """Booking attributes as sent by clients. Every field may be absent."""

    room_id: Optional[int] = None
    date: Optional[str] = None
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    meeting_type: Optional[str] = None
    job_name: Optional[str] = None
    booker: Optional[str] = None
    people_count: Optional[int] = Field(None, ge=1)

    @field_validator("people_count", mode="before")
    @classmethod
    def _blank_people_count(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("job_name", "booker", mode="before")
    @classmethod
    def _strip_text(cls, value):
        if isinstance(value, str):
            return value.strip()
        return value


class BookingCreate(BookingFields):
    pass


class BookingPatch(BookingFields):
    """Partial update. Omitted fields keep their value; an explicit null
    ``peopleCount`` clears it."""


class Booking(CamelModel):
    id: int
    room_id: int
    room_name: str = ""
    date: str
    start_time: str
    end_time: str
    meeting_type: MeetingType
    job_name: str
    booker: str = ""
    people_count: Optional[int] = None


class Snapshot(CamelModel):
    last_id: int = 0
    bookings: List[Booking] = Field(default_factory=list)


class MoveRequest(CamelModel):
    date: str
    pixel_y: float = Field(allow_inf_nan=False)


class DeleteResult(BaseModel):
    success: bool = True


class GridConfig(CamelModel):
    start_hour: int
    end_hour: int
    slot_minutes: int
    slot_height_px: int
    snap_minutes: int


class PlacedBooking(CamelModel):
    booking: Booking
    top_px: float
    height_px: float
    compact: bool
    meta_text: str = ""


class DayColumn(CamelModel):
    date: str
    bookings: List[PlacedBooking] = Field(default_factory=list)


class WeekView(CamelModel):
    room_id: int
    week_start: str
    week_end: str
    label: str
    slot_labels: List[str]
    days: List[DayColumn]
