"""Tests for common.cli_helpers module."""

from datetime import date, datetime, timedelta, timezone

from common.cli_helpers import utc_today


class TestUtcToday:
    def test_utc_datetime(self) -> None:
        assert utc_today(datetime(2024, 3, 5, 23, 59, tzinfo=timezone.utc)) == date(2024, 3, 5)

    def test_ahead_of_utc_rolls_back(self) -> None:
        riyadh = timezone(timedelta(hours=3))
        assert utc_today(datetime(2024, 3, 6, 1, 0, tzinfo=riyadh)) == date(2024, 3, 5)

    def test_behind_utc_rolls_forward(self) -> None:
        new_york = timezone(timedelta(hours=-5))
        assert utc_today(datetime(2024, 3, 5, 22, 0, tzinfo=new_york)) == date(2024, 3, 6)

    def test_defaults_to_current_date(self) -> None:
        before = datetime.now(timezone.utc).date()
        result = utc_today()
        after = datetime.now(timezone.utc).date()
        assert before <= result <= after
