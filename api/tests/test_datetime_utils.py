"""Tests for datetime_utils module."""

from datetime import UTC, datetime


class TestNowUtc:
    """Tests for now_utc function."""

    def test_returns_datetime(self):
        """Returns a datetime object."""
        from league_api.utils.datetime_utils import now_utc

        result = now_utc()
        assert isinstance(result, datetime)

    def test_is_timezone_aware(self):
        """Returned datetime is timezone-aware."""
        from league_api.utils.datetime_utils import now_utc

        result = now_utc()
        assert result.tzinfo is not None
        assert result.tzinfo == UTC


class TestEpochMillis:
    """Tests for epoch_millis function."""

    def test_known_instant(self):
        """Aware datetimes convert exactly."""
        from league_api.utils.datetime_utils import epoch_millis

        assert epoch_millis(datetime(2026, 1, 22, 0, 0, 0, 123000, tzinfo=UTC)) == 1769040000123

    def test_naive_is_treated_as_utc(self):
        """Naive datetimes are read as UTC."""
        from league_api.utils.datetime_utils import epoch_millis

        naive = datetime(2026, 1, 22)
        assert epoch_millis(naive) == epoch_millis(naive.replace(tzinfo=UTC))

    def test_defaults_to_now(self):
        """Without an argument, returns the current time."""
        from league_api.utils.datetime_utils import epoch_millis, now_utc

        before = int(now_utc().timestamp() * 1000)
        result = epoch_millis()
        after = int(now_utc().timestamp() * 1000)
        assert before <= result <= after
