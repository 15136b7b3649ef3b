from __future__ import annotations
from datetime import date, datetime, time, timedelta, timezone
from typing import Tuple


def _today_utc() -> date:
    return datetime.now(timezone.utc).date()


def day_window_ms(day: date) -> Tuple[int, int]:
    """[00:00:00.000, 23:59:59.999] UTC of `day`, as epoch milliseconds."""
    start = datetime.combine(day, time.min, tzinfo=timezone.utc)
    start_ms = int(start.timestamp() * 1000)
    return start_ms, start_ms + 24 * 60 * 60 * 1000 - 1


def yesterday_window_ms() -> Tuple[int, int]:
    return day_window_ms(_today_utc() - timedelta(days=1))
