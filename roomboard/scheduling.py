"""Booking commands and queries on top of a snapshot store.

Every command loads the snapshot, validates and writes it back while holding
the scheduler lock, so two commands can never both see a conflict-free room
and both write an overlapping booking.
"""
from __future__ import annotations

import logging
import math
import threading
from datetime import date
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union

from .errors import ConflictError, FormatError, NotFoundError, ValidationError
from .grid import GridGeometry
from .rooms import ROOMS, get_room
from .schemas import Booking, BookingCreate, BookingFields, BookingPatch, MeetingType, Room, Snapshot, WeekView
from .store import BookingStore
from .timeutils import minutes_to_time, parse_iso_date, time_to_minutes, week_dates

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("room_id", "date", "start_time", "end_time", "meeting_type", "job_name")


def is_overlapping(a_start: int, a_end: int, b_start: int, b_end: int) -> bool:
    """Half-open interval overlap: touching endpoints do not overlap."""

    return a_start < b_end and b_start < a_end


class BookingScheduler:
    def __init__(
        self,
        store: BookingStore,
        geometry: Optional[GridGeometry] = None,
        rooms: Iterable[Room] = ROOMS,
    ) -> None:
        self._store = store
        self._geometry = geometry or GridGeometry()
        self._rooms = tuple(rooms)
        self._lock = threading.Lock()

    @property
    def geometry(self) -> GridGeometry:
        return self._geometry

    # Queries

    def list_rooms(self) -> List[Room]:
        return list(self._rooms)

    def list_bookings(
        self,
        date: Optional[str] = None,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
    ) -> List[Booking]:
        """Bookings in an inclusive date range, on one date, or all of them."""

        bookings = self._snapshot().bookings
        if start_date and end_date:
            return [b for b in bookings if start_date <= b.date <= end_date]
        if date:
            return [b for b in bookings if b.date == date]
        return bookings

    def get_booking(self, booking_id: int) -> Booking:
        _, booking = _find(self._snapshot(), booking_id)
        return booking

    def week_view(self, day: Union[date, str], room_id: int) -> WeekView:
        if isinstance(day, str):
            try:
                day = parse_iso_date(day)
            except FormatError as exc:
                raise ValidationError("Date must be YYYY-MM-DD.") from exc
        if get_room(room_id, self._rooms) is None:
            raise ValidationError("Invalid room.")
        dates = week_dates(day)
        bookings = self.list_bookings(start_date=dates[0], end_date=dates[-1])
        return self._geometry.build_week_view(day, room_id, bookings)

    # Commands

    def create_booking(self, data: BookingCreate) -> Booking:
        with self._lock:
            snapshot = self._store.load()
            booking = self._build_booking(snapshot.last_id + 1, data.model_dump())
            self._ensure_available(snapshot.bookings, booking)

            snapshot.last_id = booking.id
            snapshot.bookings.append(booking)
            self._store.save(snapshot)

        logger.info(
            "Created booking %s: room %s on %s %s-%s",
            booking.id, booking.room_id, booking.date, booking.start_time, booking.end_time,
        )
        return booking

    def update_booking(self, booking_id: int, patch: BookingPatch) -> Booking:
        with self._lock:
            return self._update_locked(booking_id, patch)

    def move_booking(self, booking_id: int, new_date: str, pixel_y: float) -> Booking:
        """Drag-move: snap the drop position and keep the duration.

        Only date and times change; the end is clamped to the end of the day.
        """
        if not math.isfinite(pixel_y):
            raise ValidationError("Drop position must be a finite number.")
        with self._lock:
            _, existing = _find(self._store.load(), booking_id)
            start_time, end_time = self._geometry.drag_move(existing.start_time, existing.end_time, pixel_y)
            if (new_date, start_time, end_time) == (existing.date, existing.start_time, existing.end_time):
                return existing
            patch = BookingPatch(date=new_date, start_time=start_time, end_time=end_time)
            return self._update_locked(booking_id, patch)

    def delete_booking(self, booking_id: int) -> None:
        with self._lock:
            snapshot = self._store.load()
            index, _ = _find(snapshot, booking_id)
            del snapshot.bookings[index]
            self._store.save(snapshot)
        logger.info("Deleted booking %s", booking_id)

    # Internals

    def _snapshot(self) -> Snapshot:
        # Loading may create the store, so it shares the command lock.
        with self._lock:
            return self._store.load()

    def _update_locked(self, booking_id: int, patch: BookingPatch) -> Booking:
        snapshot = self._store.load()
        index, existing = _find(snapshot, booking_id)
        updated = self._build_booking(existing.id, _merge(existing, patch))
        self._ensure_available(snapshot.bookings, updated)
        if updated == existing:
            return existing

        snapshot.bookings[index] = updated
        self._store.save(snapshot)
        logger.info(
            "Updated booking %s: room %s on %s %s-%s",
            updated.id, updated.room_id, updated.date, updated.start_time, updated.end_time,
        )
        return updated

    def _build_booking(self, booking_id: int, values: Dict[str, Any]) -> Booking:
        if any(values.get(field) in (None, "", 0) for field in REQUIRED_FIELDS):
            raise ValidationError("Missing required fields.")

        room = get_room(values["room_id"], self._rooms)
        if room is None:
            raise ValidationError("Invalid room.")

        try:
            parse_iso_date(values["date"])
        except FormatError as exc:
            raise ValidationError("Date must be YYYY-MM-DD.") from exc

        start, end = self._parse_times(values["start_time"], values["end_time"])

        try:
            meeting_type = MeetingType(values["meeting_type"])
        except ValueError as exc:
            raise ValidationError("Meeting type must be Internal or External.") from exc

        if end <= start:
            raise ValidationError("End time must be after start time.")

        day_start, day_end = self._geometry.day_start_minutes, self._geometry.day_end_minutes
        if start < day_start or end > day_end:
            raise ValidationError(
                f"Time must be between {minutes_to_time(day_start)} and {minutes_to_time(day_end)}."
            )

        return Booking(
            id=booking_id,
            room_id=room.id,
            room_name=room.name,
            date=values["date"],
            start_time=values["start_time"],
            end_time=values["end_time"],
            meeting_type=meeting_type,
            job_name=values["job_name"],
            booker=values.get("booker") or "",
            people_count=values.get("people_count"),
        )

    def _parse_times(self, start_time: str, end_time: str) -> Tuple[int, int]:
        step = self._geometry.snap_minutes
        steps = ", ".join(f"{minute:02d}" for minute in range(0, 60, step))
        message = f"Time must be HH:MM in {step}-min steps ({steps})."
        try:
            start, end = time_to_minutes(start_time), time_to_minutes(end_time)
        except FormatError as exc:
            raise ValidationError(message) from exc
        for value, minutes in ((start_time, start), (end_time, end)):
            if minutes_to_time(minutes) != value or minutes % step:
                raise ValidationError(message)
        return start, end

    def _ensure_available(self, bookings: List[Booking], candidate: Booking) -> None:
        start = time_to_minutes(candidate.start_time)
        end = time_to_minutes(candidate.end_time)
        for other in bookings:
            if other.id == candidate.id or other.room_id != candidate.room_id or other.date != candidate.date:
                continue
            if is_overlapping(start, end, time_to_minutes(other.start_time), time_to_minutes(other.end_time)):
                logger.warning(
                    "Booking %s for room %s on %s %s-%s conflicts with booking %s",
                    candidate.id, candidate.room_id, candidate.date,
                    candidate.start_time, candidate.end_time, other.id,
                )
                raise ConflictError(other.start_time, other.end_time, booking_id=other.id)


def _find(snapshot: Snapshot, booking_id: int) -> Tuple[int, Booking]:
    for index, booking in enumerate(snapshot.bookings):
        if booking.id == booking_id:
            return index, booking
    raise NotFoundError("Booking not found.")


def _merge(existing: Booking, patch: BookingFields) -> Dict[str, Any]:
    """Apply a patch over a stored booking.

    Omitted, null or blank fields keep the stored value, except ``booker``
    (any sent value replaces it) and ``people_count`` (null clears it).
    """
    sent = patch.model_fields_set
    return {
        "room_id": patch.room_id if patch.room_id is not None else existing.room_id,
        "date": patch.date or existing.date,
        "start_time": patch.start_time or existing.start_time,
        "end_time": patch.end_time or existing.end_time,
        "meeting_type": patch.meeting_type or existing.meeting_type.value,
        "job_name": patch.job_name or existing.job_name,
        "booker": (patch.booker or "") if "booker" in sent else existing.booker,
        "people_count": patch.people_count if "people_count" in sent else existing.people_count,
    }
