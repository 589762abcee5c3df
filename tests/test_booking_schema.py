"""Tests for booking request parsing."""

from datetime import date

import pytest
from pydantic import ValidationError

from conftest import make_booking
from space_booking.schemas.booking import BookingRequest
from space_booking.schemas.launch import ExternalLaunchRecord, LaunchFeedPayload


class TestBookingRequestDates:
    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("2049-12-25", date(2049, 12, 25)),
            ("2049-12-25T00:00:00Z", date(2049, 12, 25)),
            ("2049-12-25T23:30:00-05:00", date(2049, 12, 25)),
            ("2049-12-26T01:00:00+09:00", date(2049, 12, 26)),
            ("2049-12-25T10:00:00.250+00:00", date(2049, 12, 25)),
        ],
    )
    def test_launch_date_keeps_calendar_day_of_its_offset(self, raw: str, expected: date) -> None:
        assert make_booking(launch_date=raw).launch_date == expected

    def test_missing_dates_are_none(self) -> None:
        booking = BookingRequest(
            first_name="Ada",
            last_name="Lovelace",
            launchpad_id="pad-1",
            destination_id=1,
        )

        assert booking.launch_date is None
        assert booking.birthday is None

    def test_zero_timestamp_is_treated_as_missing(self) -> None:
        booking = make_booking(birthday="0001-01-01T00:00:00Z")

        assert booking.birthday is None

    @pytest.mark.parametrize("raw", ["25/12/2049", "2049-13-01", "2049-12-25Tnoon"])
    def test_malformed_dates_are_rejected(self, raw: str) -> None:
        with pytest.raises(ValidationError):
            make_booking(launch_date=raw)


class TestExternalLaunchRecord:
    def test_feed_field_names_are_mapped(self) -> None:
        records = LaunchFeedPayload.validate_python(
            [
                {
                    "launchpad": "pad-1",
                    "name": "Demo-2",
                    "date_local": "2020-05-30T15:22:00-04:00",
                    "id": "launch-1",
                    "flight_number": 94,
                }
            ]
        )

        assert records == [
            ExternalLaunchRecord(
                site_id="pad-1",
                name="Demo-2",
                timestamp_local="2020-05-30T15:22:00-04:00",
                record_id="launch-1",
            )
        ]

    def test_missing_fields_default_to_none(self) -> None:
        record = LaunchFeedPayload.validate_python([{}])[0]

        assert record.site_id is None
        assert record.timestamp_local is None
