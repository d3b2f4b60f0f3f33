from datetime import datetime, timedelta, timezone

from app.utils.dates import as_utc, format_date


def test_as_utc_normalizes_inputs():
    naive = datetime(2025, 3, 5, 14, 30)
    assert as_utc(naive) == datetime(2025, 3, 5, 14, 30, tzinfo=timezone.utc)

    lagos = timezone(timedelta(hours=1))
    assert as_utc(datetime(2025, 3, 5, 15, 30, tzinfo=lagos)) == datetime(2025, 3, 5, 14, 30, tzinfo=timezone.utc)

    assert as_utc("2025-03-05T14:30:00") == datetime(2025, 3, 5, 14, 30, tzinfo=timezone.utc)
    assert as_utc(None).tzinfo is not None


def test_format_date():
    value = datetime(2025, 3, 5, 14, 30, tzinfo=timezone.utc)
    assert format_date(value, "short") == "Mar 5, 2025"
    assert format_date(value) == "March 5, 2025 at 02:30 PM"
