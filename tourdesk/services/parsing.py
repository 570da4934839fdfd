"""Best-effort parsers for free-form booking fields."""

import calendar
import logging
import re
from datetime import date

logger = logging.getLogger(__name__)

_LEADING_INT = re.compile(r"^[+-]?\d+")


def parse_guest_count(guests: str | None) -> int:
    """
    Turn a free-form guest description into a headcount.

    ``"2 Adults, 1 Child"`` gives 3. Each comma-separated segment contributes
    the integer at the start of its first word, or 0 when there is none. A
    total below 1 becomes 1: a booking always occupies at least one unit.

    This is a heuristic, not a validator; it never raises.
    """
    total = 0
    if guests:
        for segment in guests.split(","):
            words = segment.split()
            if not words:
                continue
            match = _LEADING_INT.match(words[0])
            if match:
                total += int(match.group())

    if total <= 0:
        logger.debug(
            "Guest text gave no headcount, defaulting to 1",
            extra={"code": "PARSE_WARNING", "guests": guests}
        )
        return 1
    return total


def parse_booking_date(value: str | None) -> date | None:
    """Parse an ISO ``YYYY-MM-DD`` booking date, returning None when malformed."""
    if not value:
        return None
    try:
        return date.fromisoformat(value.strip()[:10])
    except ValueError:
        logger.debug(
            "Unparseable booking date",
            extra={"code": "PARSE_WARNING", "value": value}
        )
        return None


def days_in_month(year: int, month: int) -> int:
    """Number of days in ``month`` of ``year``."""
    return calendar.monthrange(year, month)[1]
