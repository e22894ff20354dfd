from __future__ import annotations

import dataclasses
import datetime as dt


@dataclasses.dataclass(frozen=True)
class DateRange:
    start: dt.date  # inclusive
    end: dt.date  # inclusive (whole day)

    @property
    def start_iso(self) -> str:
        return self.start.isoformat()

    @property
    def end_iso(self) -> str:
        return self.end.isoformat()

    @property
    def start_at(self) -> dt.datetime:
        return dt.datetime.combine(self.start, dt.time.min, tzinfo=dt.timezone.utc)

    @property
    def end_before(self) -> dt.datetime:
        return dt.datetime.combine(self.end + dt.timedelta(days=1), dt.time.min, tzinfo=dt.timezone.utc)

    def contains(self, at: dt.datetime) -> bool:
        return self.start_at <= at < self.end_before


def parse_date(value: str, *, flag: str) -> dt.date:
    s = (value or "").strip()
    try:
        return dt.date.fromisoformat(s)
    except ValueError:
        raise ValueError(f"Invalid {flag} format: {value!r} (use YYYY-MM-DD)") from None


def parse_date_range(start: str, end: str) -> DateRange:
    start_d = parse_date(start, flag="start-date")
    end_d = parse_date(end, flag="end-date")
    if start_d > end_d:
        raise ValueError("start-date must be before or equal to end-date")
    return DateRange(start=start_d, end=end_d)


def parse_timestamp(value: str) -> dt.datetime | None:
    """Parse a GitHub ISO-8601 timestamp (e.g. 2025-06-10T08:15:00Z)."""
    s = (value or "").strip()
    if not s:
        return None
    if s.endswith("Z"):
        s = s[:-1] + "+00:00"
    try:
        ts = dt.datetime.fromisoformat(s)
    except ValueError:
        return None
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=dt.timezone.utc)
    return ts
