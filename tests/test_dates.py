# tests/test_dates.py
from datetime import date, datetime, timezone

import pytest

from exercise_tracker_api.app.core import dates
from exercise_tracker_api.app.core.exceptions import ValidationError


def test_display_date_matches_readable_form():
    assert dates.display_date("2024-01-05") == "Fri Jan 05 2024"
    assert dates.display_date("2024-03-01") == "Fri Mar 01 2024"
    assert dates.display_date("1999-12-31") == "Fri Dec 31 1999"


def test_normalize_keeps_iso_dates():
    assert dates.normalize_date("2024-03-01") == "2024-03-01"
    assert dates.normalize_date(" 2024-03-01 ") == "2024-03-01"


def test_normalize_takes_utc_day_of_aware_datetime():
    assert dates.normalize_date("2024-03-01T23:30:00-02:00") == "2024-03-02"
    assert dates.normalize_date("2024-03-01T10:00:00") == "2024-03-01"


def test_missing_date_defaults_to_utc_today():
    before = datetime.now(timezone.utc).date().isoformat()
    value = dates.normalize_date(None)
    after = datetime.now(timezone.utc).date().isoformat()
    assert value in {before, after}
    assert dates.normalize_date("   ") in {before, after, dates.today_utc()}


@pytest.mark.parametrize("value", ["not-a-date", "2024-13-01", "2024-02-30", "01/05/2024"])
def test_invalid_dates_are_rejected(value):
    with pytest.raises(ValidationError):
        dates.normalize_date(value)


def test_stored_form_sorts_like_dates():
    days = [date(2024, 1, 5), date(2023, 12, 31), date(2024, 11, 2), date(2024, 2, 10)]
    assert sorted(d.isoformat() for d in days) == [d.isoformat() for d in sorted(days)]
