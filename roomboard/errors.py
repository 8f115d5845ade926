"""Errors raised by the booking core."""
from __future__ import annotations

from typing import Optional


class BookingError(Exception):
    """Base class for domain/service errors."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class FormatError(BookingError):
    """A time or date string could not be parsed."""


class ValidationError(BookingError):
    """Input is missing, malformed or out of range."""


class ConflictError(BookingError):
    """The requested interval overlaps an existing booking in the same room."""

    def __init__(self, start_time: str, end_time: str, booking_id: Optional[int] = None) -> None:
        super().__init__(f"This room is already booked from {start_time} to {end_time}.")
        self.start_time = start_time
        self.end_time = end_time
        self.booking_id = booking_id


class NotFoundError(BookingError):
    pass


class StorageError(BookingError):
    """The booking snapshot could not be read or written."""
