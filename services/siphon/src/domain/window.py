"""Query window resolution.

Absolute dates win; whichever bound is missing is derived from the other one
using the configured duration, and with neither bound the window ends now.
The window is never inverted by the defaults themselves.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

from src.core.errors import ConfigurationError
from src.domain.models import TimeWindow

SHORT_DATE_FORMAT = "%Y-%b-%d"  # 2016-Jan-18


def parse_date(value: str) -> datetime:
    """Parse ``2016-Jan-18`` or an ISO-8601 timestamp into an aware UTC datetime."""
    text = value.strip()
    try:
        parsed = datetime.strptime(text, SHORT_DATE_FORMAT)
    except ValueError:
        try:
            parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
        except ValueError:
            raise ConfigurationError(
                f"Unrecognised date {value!r}; expected YYYY-Mon-DD or ISO-8601"
            ) from None
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def resolve_window(
    start_date: str | None,
    end_date: str | None,
    duration_hours: float,
    period_seconds: int,
    now: datetime | None = None,
) -> TimeWindow:
    duration = timedelta(hours=duration_hours)
    start = parse_date(start_date) if start_date else None
    end = parse_date(end_date) if end_date else None

    if start is None and end is None:
        end = now or datetime.now(timezone.utc)
        start = end - duration
    elif start is None:
        start = end - duration
    elif end is None:
        end = start + duration

    return TimeWindow(start=start, end=end, period_seconds=period_seconds)
