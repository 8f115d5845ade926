"""Geometry of the week calendar grid.

Rows are ``slot_minutes`` long and ``slot_height_px`` tall. Bookings are
edited and dragged on a finer ``snap_minutes`` grid (15 minutes against the
30-minute rows).
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date
from typing import Iterable, List, Optional, Tuple

from .config import Settings
from .schemas import Booking, DayColumn, GridConfig, PlacedBooking, WeekView
from .timeutils import minutes_to_time, time_to_minutes, week_dates, week_label


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


@dataclass(frozen=True)
class GridGeometry:
    start_hour: int = 7
    end_hour: int = 22
    slot_minutes: int = 30
    slot_height_px: int = 28
    snap_minutes: int = 15

    @classmethod
    def from_settings(cls, settings: Settings) -> "GridGeometry":
        return cls(
            start_hour=settings.start_hour,
            end_hour=settings.end_hour,
            slot_minutes=settings.slot_minutes,
            slot_height_px=settings.slot_height_px,
            snap_minutes=settings.snap_minutes,
        )

    @property
    def day_start_minutes(self) -> int:
        return self.start_hour * 60

    @property
    def day_end_minutes(self) -> int:
        return self.end_hour * 60

    @property
    def total_slots(self) -> int:
        return (self.day_end_minutes - self.day_start_minutes) // self.slot_minutes

    def config(self) -> GridConfig:
        return GridConfig(
            start_hour=self.start_hour,
            end_hour=self.end_hour,
            slot_minutes=self.slot_minutes,
            slot_height_px=self.slot_height_px,
            snap_minutes=self.snap_minutes,
        )

    def slot_labels(self) -> List[str]:
        return [
            minutes_to_time(self.day_start_minutes + index * self.slot_minutes)
            for index in range(self.total_slots)
        ]

    def offset_to_pixel_top(self, start_minutes: int) -> float:
        return ((start_minutes - self.day_start_minutes) / self.slot_minutes) * self.slot_height_px

    def duration_to_pixel_height(self, duration_minutes: int) -> float:
        return (duration_minutes / self.slot_minutes) * self.slot_height_px

    def pixel_y_to_snapped_start_minutes(
        self,
        pixel_y: float,
        day_start_minutes: Optional[int] = None,
        day_end_minutes: Optional[int] = None,
    ) -> int:
        """Map a drop position inside a day column to a start time in minutes.

        The result is rounded to the nearest snap step and never later than
        the last snap step before ``day_end_minutes``.
        """
        day_start = self.day_start_minutes if day_start_minutes is None else day_start_minutes
        day_end = self.day_end_minutes if day_end_minutes is None else day_end_minutes

        total_slots = (day_end - day_start) / self.slot_minutes
        max_y = total_slots * self.slot_height_px
        offset_y = min(max(pixel_y, 0), max_y)

        row_fraction = offset_y / self.slot_height_px
        steps_per_row = self.slot_minutes / self.snap_minutes
        steps = _round_half_up(row_fraction * steps_per_row)

        max_steps = (day_end - day_start) // self.snap_minutes - 1
        steps = min(steps, max_steps)
        return day_start + steps * self.snap_minutes

    def drag_move(self, start_time: str, end_time: str, pixel_y: float) -> Tuple[str, str]:
        """New (start, end) for a booking dropped at ``pixel_y``.

        The duration is kept, but the end is clamped to the end of the day,
        so a long booking dropped late in the day comes out shorter.
        """
        duration = time_to_minutes(end_time) - time_to_minutes(start_time)
        new_start = self.pixel_y_to_snapped_start_minutes(pixel_y)
        new_end = min(new_start + duration, self.day_end_minutes)
        return minutes_to_time(new_start), minutes_to_time(new_end)

    def place_booking(self, booking: Booking) -> PlacedBooking:
        start = time_to_minutes(booking.start_time)
        duration = time_to_minutes(booking.end_time) - start
        return PlacedBooking(
            booking=booking,
            top_px=self.offset_to_pixel_top(start),
            height_px=self.duration_to_pixel_height(duration),
            compact=duration <= self.slot_minutes,
            meta_text=booking_meta_text(booking, duration),
        )

    def build_week_view(self, day: date, room_id: int, bookings: Iterable[Booking]) -> WeekView:
        dates = week_dates(day)
        columns = {iso: DayColumn(date=iso) for iso in dates}
        for booking in bookings:
            if booking.room_id != room_id or booking.date not in columns:
                continue
            columns[booking.date].bookings.append(self.place_booking(booking))
        return WeekView(
            room_id=room_id,
            week_start=dates[0],
            week_end=dates[-1],
            label=week_label(day),
            slot_labels=self.slot_labels(),
            days=[columns[iso] for iso in dates],
        )


def booking_meta_text(booking: Booking, duration_minutes: int) -> str:
    """Secondary line shown under the job name of a calendar tag."""

    booker = (booking.booker or "").strip()
    people = f"{booking.people_count} ppl" if booking.people_count else ""
    time_range = f"{booking.start_time}–{booking.end_time}"

    if duration_minutes <= 30:
        parts: List[str] = []
    elif duration_minutes <= 60:
        parts = [booker, people]
    else:
        parts = [booker, time_range, people]
    return " • ".join(part for part in parts if part)
