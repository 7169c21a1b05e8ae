from datetime import datetime, timedelta, timezone

import pytest

from offmarket.utils.api import SERVER_ERROR, ApiError, api_error, api_ok, server_errors
from offmarket.utils.formatting import format_date, relative_time, thousands

NOW = datetime(2026, 3, 10, 9, 30, tzinfo=timezone.utc)


@pytest.mark.parametrize(
    "delta, expected",
    [
        (timedelta(seconds=30), "just now"),
        (timedelta(minutes=5), "5m ago"),
        (timedelta(hours=3, minutes=59), "3h ago"),
        (timedelta(days=2), "2d ago"),
        (timedelta(days=9), "1 Mar 2026"),
    ],
)
def test_relative_time(delta, expected):
    assert relative_time(NOW - delta, now=NOW) == expected


def test_relative_time_accepts_naive_and_iso_strings():
    assert relative_time(datetime(2026, 3, 10, 9, 0), now=NOW) == "30m ago"
    assert relative_time("2026-03-10T08:30:00+00:00", now=NOW) == "1h ago"


def test_format_date_has_no_padding():
    assert format_date(datetime(2026, 1, 5)) == "5 Jan 2026"


def test_thousands():
    assert thousands(1234567) == "1,234,567"


def test_envelopes():
    assert api_ok({"count": 1}).model_dump(exclude_unset=True) == {
        "success": True,
        "data": {"count": 1},
    }
    assert api_error("NOT_FOUND", "Notification not found") == {
        "success": False,
        "error": {"code": "NOT_FOUND", "message": "Notification not found"},
    }


def test_server_errors_passes_api_errors_through():
    with pytest.raises(ApiError) as info:
        with server_errors("Failed to delete notification"):
            raise ApiError(403, "FORBIDDEN", "Not authorized")
    assert info.value.status_code == 403


def test_server_errors_hides_internal_message(caplog):
    with pytest.raises(ApiError) as info:
        with server_errors("Failed to fetch notifications"):
            raise RuntimeError("relation does not exist")
    assert info.value.status_code == 500
    assert info.value.code == SERVER_ERROR
    assert info.value.message == "Failed to fetch notifications"
    assert "relation does not exist" in caplog.text
