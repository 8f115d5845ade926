"""SQLAlchemy tables backing the SQL snapshot store."""
from __future__ import annotations

from typing import Optional

from sqlalchemy import Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from .database import Base


class BookingRow(Base):
    __tablename__ = "bookings"
    __table_args__ = (Index("ix_bookings_room_date", "room_id", "date"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)
    position: Mapped[int] = mapped_column(Integer, index=True)
    room_id: Mapped[int] = mapped_column(Integer)
    room_name: Mapped[str] = mapped_column(String(100), default="")
    date: Mapped[str] = mapped_column(String(10), index=True)
    start_time: Mapped[str] = mapped_column(String(5))
    end_time: Mapped[str] = mapped_column(String(5))
    meeting_type: Mapped[str] = mapped_column(String(20))
    job_name: Mapped[str] = mapped_column(String(255))
    booker: Mapped[str] = mapped_column(String(255), default="")
    people_count: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)


class StoreMeta(Base):
    __tablename__ = "store_meta"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    last_id: Mapped[int] = mapped_column(Integer, default=0)
