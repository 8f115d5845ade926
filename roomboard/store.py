"""Persistence of the booking snapshot ``{lastId, bookings}``.

Stores read and write the whole snapshot at once. They do not lock; callers
that read-modify-write (the scheduler) serialize themselves.
"""
from __future__ import annotations

import json
import logging
import os
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Union

from pydantic import ValidationError as SchemaError
from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError

from .config import Settings
from .database import create_session_factory
from .errors import StorageError
from .models import BookingRow, StoreMeta
from .schemas import Booking, Snapshot

logger = logging.getLogger(__name__)


class BookingStore(ABC):
    @abstractmethod
    def load(self) -> Snapshot:
        """Return the persisted snapshot, creating an empty one if none exists."""

    @abstractmethod
    def save(self, snapshot: Snapshot) -> None:
        """Replace the persisted snapshot."""


class JsonFileBookingStore(BookingStore):
    """Snapshot kept in a single JSON file, replaced atomically on save."""

    def __init__(self, path: Union[str, Path]) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> Snapshot:
        if not self._path.exists():
            snapshot = Snapshot()
            self.save(snapshot)
            return snapshot
        try:
            raw = self._path.read_text(encoding="utf-8")
            return Snapshot.model_validate_json(raw)
        except OSError as exc:
            logger.error("Could not read bookings from %s: %s", self._path, exc)
            raise StorageError("Could not read bookings.") from exc
        except (SchemaError, UnicodeDecodeError) as exc:
            logger.error("Bookings file %s is corrupt: %s", self._path, exc)
            raise StorageError("Stored bookings are unreadable.") from exc

    def save(self, snapshot: Snapshot) -> None:
        payload = json.dumps(snapshot.model_dump(mode="json", by_alias=True), indent=2, ensure_ascii=False)
        tmp_name = None
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                "w",
                encoding="utf-8",
                dir=self._path.parent,
                prefix=f".{self._path.name}.",
                suffix=".tmp",
                delete=False,
            ) as tmp:
                tmp_name = tmp.name
                tmp.write(payload)
            os.replace(tmp_name, self._path)
        except OSError as exc:
            logger.error("Could not write bookings to %s: %s", self._path, exc)
            if tmp_name and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise StorageError("Could not save bookings.") from exc


class SqlBookingStore(BookingStore):
    """Snapshot kept in SQL tables; each save is a single transaction."""

    def __init__(self, database_url: str) -> None:
        try:
            self._session_factory = create_session_factory(database_url)
        except SQLAlchemyError as exc:
            logger.error("Could not open booking database: %s", exc)
            raise StorageError("Could not open booking database.") from exc

    def load(self) -> Snapshot:
        try:
            with self._session_factory() as session:
                meta = session.get(StoreMeta, 1)
                if meta is None:
                    snapshot = Snapshot()
                else:
                    rows = session.scalars(select(BookingRow).order_by(BookingRow.position)).all()
                    snapshot = Snapshot(last_id=meta.last_id, bookings=[_row_to_booking(row) for row in rows])
        except SQLAlchemyError as exc:
            logger.error("Could not read bookings from database: %s", exc)
            raise StorageError("Could not read bookings.") from exc

        if meta is None:
            self.save(snapshot)
        return snapshot

    def save(self, snapshot: Snapshot) -> None:
        try:
            with self._session_factory.begin() as session:
                session.execute(delete(BookingRow))
                session.add_all(
                    _booking_to_row(booking, position) for position, booking in enumerate(snapshot.bookings)
                )
                meta = session.get(StoreMeta, 1)
                if meta is None:
                    session.add(StoreMeta(id=1, last_id=snapshot.last_id))
                else:
                    meta.last_id = snapshot.last_id
        except SQLAlchemyError as exc:
            logger.error("Could not write bookings to database: %s", exc)
            raise StorageError("Could not save bookings.") from exc


def _row_to_booking(row: BookingRow) -> Booking:
    return Booking(
        id=row.id,
        room_id=row.room_id,
        room_name=row.room_name,
        date=row.date,
        start_time=row.start_time,
        end_time=row.end_time,
        meeting_type=row.meeting_type,
        job_name=row.job_name,
        booker=row.booker or "",
        people_count=row.people_count,
    )


def _booking_to_row(booking: Booking, position: int) -> BookingRow:
    return BookingRow(
        id=booking.id,
        position=position,
        room_id=booking.room_id,
        room_name=booking.room_name,
        date=booking.date,
        start_time=booking.start_time,
        end_time=booking.end_time,
        meeting_type=booking.meeting_type.value,
        job_name=booking.job_name,
        booker=booking.booker,
        people_count=booking.people_count,
    )


def build_store(settings: Settings) -> BookingStore:
    if settings.storage_backend == "sql":
        return SqlBookingStore(settings.database_url)
    return JsonFileBookingStore(settings.data_file)
