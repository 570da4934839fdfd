"""Unit tests for free-form field parsing."""

from datetime import date

import pytest

from tourdesk.services.parsing import days_in_month, parse_booking_date, parse_guest_count


class TestParseGuestCount:
    """Test guest headcount parsing."""

    def test_sums_segments(self):
        assert parse_guest_count("2 Adults, 1 Child") == 3

    @pytest.mark.parametrize("guests", ["", None, "   ", ",,"])
    def test_missing_guests_counts_one(self, guests):
        assert parse_guest_count(guests) == 1

    def test_no_leading_integer_counts_one(self):
        assert parse_guest_count("VIP guest") == 1

    def test_segment_without_number_contributes_zero(self):
        assert parse_guest_count("4 Adults, infant in arms") == 4

    def test_only_first_word_of_segment_is_read(self):
        assert parse_guest_count("Adults 4, 3 Kids") == 3

    def test_leading_digits_of_a_word(self):
        assert parse_guest_count("10pax") == 10

    def test_large_group(self):
        assert parse_guest_count("10 Adults, 5 Adults, 2 Children") == 17

    def test_zero_total_counts_one(self):
        assert parse_guest_count("0 Adults") == 1

    def test_negative_total_counts_one(self):
        assert parse_guest_count("-3 Adults") == 1


class TestParseBookingDate:
    """Test booking date parsing."""

    def test_iso_date(self):
        assert parse_booking_date("2026-11-10") == date(2026, 11, 10)

    def test_datetime_prefix(self):
        assert parse_booking_date("2026-11-10T09:30:00Z") == date(2026, 11, 10)

    @pytest.mark.parametrize("value", [None, "", "next tuesday", "2026-13-01"])
    def test_malformed_is_none(self, value):
        assert parse_booking_date(value) is None


@pytest.mark.parametrize(
    "year,month,expected",
    [(2026, 1, 31), (2026, 2, 28), (2028, 2, 29), (2026, 4, 30)],
)
def test_days_in_month(year, month, expected):
    assert days_in_month(year, month) == expected
