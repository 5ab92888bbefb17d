"""Tests for connection display helpers."""

import datetime

from gsm.config import Connection
from gsm.connection_display import (
    format_key_preview,
    format_last_connected,
    format_tags_description,
    format_usage,
)

NOW = datetime.datetime(2024, 3, 15, 18, 30)


def test_key_preview_truncates_to_twenty_chars():
    assert format_key_preview("a" * 30) == "a" * 20 + "..."
    assert format_key_preview("short") == "short..."


def test_tags_description():
    assert format_tags_description(Connection(name="x", key="k", tags=["work", "eu"])) == "# work, eu"
    assert format_tags_description(Connection(name="x", key="k")) == ""


def test_usage():
    assert format_usage(Connection(name="x", key="k", usage=7)) == "7 times"


def test_never_connected():
    assert format_last_connected(None, NOW) == "Never"


def test_today_and_yesterday():
    assert format_last_connected(datetime.datetime(2024, 3, 15, 9, 5), NOW) == "Today, 09:05"
    assert format_last_connected(datetime.datetime(2024, 3, 14, 23, 59), NOW) == "Yesterday, 23:59"


def test_within_a_week_shows_weekday():
    # 11 March 2024 was a Monday
    assert format_last_connected(datetime.datetime(2024, 3, 11, 15, 4), NOW) == "Mon, 11 Mar 15:04"


def test_older_shows_full_date():
    assert format_last_connected(datetime.datetime(2006, 1, 2, 15, 4), NOW) == "2 Jan 2006"


def test_mixed_timezone_awareness_does_not_crash():
    aware = datetime.datetime(2024, 3, 15, 9, 5, tzinfo=datetime.timezone.utc)
    assert format_last_connected(aware, NOW) == "Today, 09:05"
