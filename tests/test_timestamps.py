"""Unit tests for timestamp utilities."""

from datetime import date, datetime, timedelta, timezone

import pytest

from app.utils.timestamps import (
    compute_age,
    ensure_utc,
    format_timestamp,
    utc_now,
)


class TestUtcNow:
    """Tests for utc_now function."""

    def test_utc_now_returns_utc_datetime(self):
        """Test that utc_now returns a timezone-aware datetime in UTC."""
        now = utc_now()

        assert now.tzinfo == timezone.utc
        assert isinstance(now, datetime)

    def test_utc_now_is_recent(self):
        """Test that utc_now returns a recent timestamp."""
        before = datetime.now(timezone.utc)
        now = utc_now()
        after = datetime.now(timezone.utc)

        assert before <= now <= after


class TestEnsureUtc:
    """Tests for ensure_utc function."""

    def test_ensure_utc_with_none(self):
        """Test that None input returns None."""
        assert ensure_utc(None) is None

    def test_ensure_utc_with_naive_datetime(self):
        """Test that naive datetime is treated as UTC."""
        naive = datetime(2025, 11, 4, 12, 0, 0)
        result = ensure_utc(naive)

        assert result.tzinfo == timezone.utc
        assert result.year == 2025
        assert result.month == 11
        assert result.day == 4
        assert result.hour == 12

    def test_ensure_utc_with_utc_datetime(self):
        """Test that UTC datetime is unchanged."""
        utc_dt = datetime(2025, 11, 4, 12, 0, 0, tzinfo=timezone.utc)
        result = ensure_utc(utc_dt)

        assert result.tzinfo == timezone.utc
        assert result == utc_dt

    def test_ensure_utc_with_other_timezone(self):
        """Test that datetime with other timezone is converted to UTC."""
        # Create a datetime in EST (UTC-5)
        est = timezone(timedelta(hours=-5))
        est_dt = datetime(2025, 11, 4, 12, 0, 0, tzinfo=est)

        result = ensure_utc(est_dt)

        assert result.tzinfo == timezone.utc
        # 12:00 EST should be 17:00 UTC
        assert result.hour == 17


class TestFormatTimestamp:
    """Tests for format_timestamp function."""

    def test_format_timestamp_basic(self):
        """Test basic timestamp formatting."""
        dt = datetime(2025, 11, 4, 12, 30, 45, tzinfo=timezone.utc)
        result = format_timestamp(dt)

        assert result == "2025-11-04T12:30:45Z"

    def test_format_timestamp_with_microseconds(self):
        """Test timestamp formatting with microseconds."""
        dt = datetime(2025, 11, 4, 12, 30, 45, 123456, tzinfo=timezone.utc)
        result = format_timestamp(dt, include_microseconds=True)

        assert result == "2025-11-04T12:30:45.123456Z"

    def test_format_timestamp_converts_to_utc(self):
        """Test that non-UTC datetime is converted to UTC."""
        # Create a datetime in EST (UTC-5)
        est = timezone(timedelta(hours=-5))
        est_dt = datetime(2025, 11, 4, 12, 0, 0, tzinfo=est)

        result = format_timestamp(est_dt)

        # 12:00 EST should be 17:00 UTC
        assert result == "2025-11-04T17:00:00Z"

    def test_format_timestamp_with_naive_datetime(self):
        """Test formatting naive datetime (treated as UTC)."""
        naive = datetime(2025, 11, 4, 12, 0, 0)
        result = format_timestamp(naive)

        assert result == "2025-11-04T12:00:00Z"


class TestComputeAge:
    """Tests for compute_age function."""

    def test_compute_age_after_birthday(self):
        """Test age once this year's birthday has passed."""
        assert compute_age(date(2005, 3, 10), date(2026, 6, 1)) == 21

    def test_compute_age_before_birthday(self):
        """Test age the day before this year's birthday."""
        assert compute_age(date(2005, 3, 10), date(2026, 3, 9)) == 20

    def test_compute_age_on_birthday(self):
        """Test that the birthday itself counts as completed."""
        assert compute_age(date(2005, 3, 10), date(2026, 3, 10)) == 21

    def test_compute_age_with_datetime_uses_utc_date(self):
        """Test that a datetime is reduced to its UTC date."""
        # 23:30 on the 9th at UTC-5 is already the 10th in UTC
        est = timezone(timedelta(hours=-5))
        as_of = datetime(2026, 3, 9, 23, 30, tzinfo=est)

        assert compute_age(date(2005, 3, 10), as_of) == 21

    def test_compute_age_leap_day_birth(self):
        """Test a 29 February birth date in a non-leap year."""
        assert compute_age(date(2004, 2, 29), date(2026, 2, 28)) == 21
        assert compute_age(date(2004, 2, 29), date(2026, 3, 1)) == 22

    def test_compute_age_without_birth_date(self):
        """Test that a missing birth date yields None."""
        assert compute_age(None, date(2026, 1, 1)) is None

    def test_compute_age_future_birth_date(self):
        """Test that a birth date after the reference date yields None."""
        assert compute_age(date(2030, 1, 1), date(2026, 1, 1)) is None
