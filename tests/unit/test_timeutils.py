"""Unit tests for time and date helpers."""
from datetime import date

import pytest

from roomboard.errors import FormatError
from roomboard.timeutils import (
    format_display_date,
    minutes_to_time,
    parse_iso_date,
    time_to_minutes,
    to_iso_date,
    week_dates,
    week_label,
    week_start,
)


class TestTimeConversion:
    """Test HH:MM <-> minutes."""

    def test_time_to_minutes(self):
        assert time_to_minutes("00:00") == 0
        assert time_to_minutes("07:00") == 420
        assert time_to_minutes("22:00") == 1320
        assert time_to_minutes("9:30") == 570

    @pytest.mark.parametrize("value", ["", "9", "09-30", "24:00", "12:60", "ab:cd", "09:5"])
    def test_malformed_time(self, value):
        with pytest.raises(FormatError):
            time_to_minutes(value)

    def test_minutes_to_time_pads(self):
        assert minutes_to_time(0) == "00:00"
        assert minutes_to_time(425) == "07:05"
        assert minutes_to_time(1425) == "23:45"

    def test_round_trip_on_quarter_hours(self):
        """Every 15-minute mark survives a round trip."""
        for minutes in range(0, 24 * 60, 15):
            label = minutes_to_time(minutes)
            assert minutes_to_time(time_to_minutes(label)) == label


class TestDates:
    """Test date formatting and week arithmetic."""

    def test_formatting(self):
        day = date(2024, 6, 3)

        assert to_iso_date(day) == "2024-06-03"
        assert format_display_date(day) == "03/06/2024"

    def test_parse_iso_date(self):
        assert parse_iso_date("2024-06-03") == date(2024, 6, 3)

    @pytest.mark.parametrize("value", ["2024-6-3", "03/06/2024", "2024-02-30", "", "tomorrow"])
    def test_parse_iso_date_rejects(self, value):
        with pytest.raises(FormatError):
            parse_iso_date(value)

    def test_week_starts_on_monday(self):
        assert week_start(date(2024, 6, 5)) == date(2024, 6, 3)
        assert week_start(date(2024, 6, 3)) == date(2024, 6, 3)
        assert week_start(date(2024, 6, 9)) == date(2024, 6, 3)

    def test_week_dates_cross_month(self):
        assert week_dates(date(2024, 7, 2)) == [
            "2024-07-01", "2024-07-02", "2024-07-03", "2024-07-04", "2024-07-05", "2024-07-06", "2024-07-07",
        ]
        assert week_dates(date(2024, 6, 1))[0] == "2024-05-27"

    def test_week_label(self):
        assert week_label(date(2024, 6, 9)) == "03/06/2024 – 09/06/2024"
