"""Unit tests for schema validation."""
import pytest
from pydantic import ValidationError

from roomboard.schemas import Booking, BookingCreate, BookingPatch, MeetingType, Room, Snapshot


class TestRoomSchema:
    """Test the room schema."""

    def test_room_serializes_camel_case(self):
        """Test rooms use camelCase on the wire."""
        room = Room(id=1, name="Labrador", has_tv=True)

        assert room.model_dump(by_alias=True) == {"id": 1, "name": "Labrador", "hasTv": True}

    def test_room_is_immutable(self):
        """Test rooms cannot be changed after creation."""
        room = Room(id=4, name="Shiba")

        with pytest.raises(ValidationError):
            room.name = "Akita"


class TestBookingCommandSchemas:
    """Test create and patch payloads."""

    def test_create_accepts_camel_case(self):
        """Test a client payload is parsed by alias."""
        booking = BookingCreate.model_validate(
            {
                "roomId": 2,
                "date": "2024-06-03",
                "startTime": "09:00",
                "endTime": "10:00",
                "meetingType": "External",
                "jobName": "Client call",
                "peopleCount": "3",
            }
        )

        assert booking.room_id == 2
        assert booking.start_time == "09:00"
        assert booking.people_count == 3

    def test_all_fields_optional(self):
        """Test missing fields are left for the scheduler to report."""
        booking = BookingCreate()

        assert booking.room_id is None
        assert booking.job_name is None

    def test_blank_people_count_is_none(self):
        """Test an empty people count means no count."""
        assert BookingCreate(people_count="").people_count is None
        assert BookingCreate(people_count="  ").people_count is None

    def test_people_count_must_be_positive(self):
        """Test zero or negative people counts are rejected."""
        with pytest.raises(ValidationError):
            BookingCreate(people_count=0)

        with pytest.raises(ValidationError):
            BookingCreate(people_count="many")

    def test_text_fields_are_stripped(self):
        """Test job name and booker are trimmed."""
        booking = BookingCreate(job_name="  Retro ", booker=" Mai ")

        assert booking.job_name == "Retro"
        assert booking.booker == "Mai"

    def test_patch_tracks_sent_fields(self):
        """Test omitted and explicit null fields can be told apart."""
        patch = BookingPatch.model_validate({"startTime": "10:00", "peopleCount": None})

        assert patch.model_fields_set == {"start_time", "people_count"}


class TestSnapshotSchema:
    """Test the persisted snapshot layout."""

    def test_empty_snapshot(self):
        """Test the default snapshot."""
        assert Snapshot().model_dump(by_alias=True) == {"lastId": 0, "bookings": []}

    def test_snapshot_round_trip_uses_stored_names(self):
        """Test bookings dump with camelCase keys and enum values."""
        booking = Booking(
            id=7,
            room_id=1,
            room_name="Labrador",
            date="2024-06-03",
            start_time="09:00",
            end_time="10:00",
            meeting_type=MeetingType.INTERNAL,
            job_name="Standup",
        )
        dumped = Snapshot(last_id=7, bookings=[booking]).model_dump(mode="json", by_alias=True)

        assert dumped["lastId"] == 7
        assert dumped["bookings"][0]["meetingType"] == "Internal"
        assert dumped["bookings"][0]["roomName"] == "Labrador"
        assert dumped["bookings"][0]["peopleCount"] is None
        assert Snapshot.model_validate(dumped).bookings[0] == booking
