from __future__ import annotations

from datetime import date, datetime


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def session_minutes(check_in_time: datetime, check_out_time: datetime) -> int:
    """Whole minutes between check-in and check-out, rounded down.

    A session that lasted at least one second counts as one minute so a
    completed visit never reports zero. Clock skew never yields a negative value.
    """
    seconds = (check_out_time - check_in_time).total_seconds()
    if seconds < 1:
        return 0
    return max(int(seconds // 60), 1)


def session_hours(check_in_time: datetime, check_out_time: datetime) -> float:
    seconds = max((check_out_time - check_in_time).total_seconds(), 0.0)
    return seconds / 3600
