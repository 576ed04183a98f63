"""Local calendar day helpers working in epoch milliseconds."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta


# Years outside this range cannot be converted to local epoch time everywhere.
MIN_YEAR = 2
MAX_YEAR = 9998


def to_millis(moment: datetime) -> int:
    """Convert a datetime to epoch milliseconds (naive values are local time)."""
    return int(moment.timestamp() * 1000)


def _midnight(day: date, reference: datetime) -> datetime:
    return datetime.combine(day, time.min, tzinfo=reference.tzinfo)


def start_of_day(now: datetime, offset_days: int = 0) -> int:
    """Return the first millisecond of the local day ``offset_days`` after ``now``."""
    day = now.date() + timedelta(days=offset_days)
    return to_millis(_midnight(day, now))


def end_of_day(now: datetime, offset_days: int = 0) -> int:
    """Return the last millisecond of the local day ``offset_days`` after ``now``."""
    return start_of_day(now, offset_days + 1) - 1


def add_days(now: datetime, days: int) -> int:
    """Return ``now`` shifted by whole days, in epoch milliseconds.

    Shifts past the supported calendar range clamp to the last representable
    local day instead of raising.
    """
    try:
        return to_millis(now + timedelta(days=days))
    except (OverflowError, ValueError, OSError):
        bound = date(MAX_YEAR, 12, 31) if days > 0 else date(MIN_YEAR, 1, 1)
        return to_millis(_midnight(bound, now))


@dataclass(frozen=True, slots=True)
class DateRef:
    """Date bound used by before/after predicates.

    Relative references (``today``, ``tomorrow``) are resolved against the
    evaluation clock so a compiled tree stays valid across midnight.
    """

    offset_days: int | None = None
    moment: datetime | None = None

    def resolve(self, now: datetime) -> int:
        """Resolve the reference to epoch milliseconds."""
        if self.moment is not None:
            return to_millis(self.moment)
        return start_of_day(now, self.offset_days or 0)


RELATIVE_DAYS = {"today": 0, "tomorrow": 1, "yesterday": -1}


def parse_date_ref(text: str) -> DateRef | None:
    """Parse ``today``, ``tomorrow``, ``yesterday`` or an ISO date/datetime.

    Supported absolute formats:
    - YYYY-MM-DD
    - YYYY-MM-DDThh:mm[:ss]
    - YYYY-MM-DD hh:mm[:ss]

    Returns:
        Parsed reference, or None when the text is not a date
    """
    value = text.strip().lower()
    if not value:
        return None
    if value in RELATIVE_DAYS:
        return DateRef(offset_days=RELATIVE_DAYS[value])

    for candidate in (value, value.replace(" ", "T")):
        try:
            moment = datetime.fromisoformat(candidate)
        except ValueError:
            continue
        if not MIN_YEAR <= moment.year <= MAX_YEAR:
            return None
        return DateRef(moment=moment)
    return None
