"""
Clock and date utilities.

Provides the current timestamp and calendar date in the configured timezone,
plus lenient parsing of user-supplied dates.
"""

from datetime import date, datetime

import pytz
from dateutil import parser


class Clock:
    """Source of the current time for "today"-relative computations."""

    def __init__(self, timezone_str: str = "UTC") -> None:
        """
        Initialize the clock.

        Args:
            timezone_str: Timezone string (e.g., "America/Santiago").
        """
        self.timezone = pytz.timezone(timezone_str)

    def now(self) -> datetime:
        """Current timezone-aware timestamp."""
        return datetime.now(pytz.utc).astimezone(self.timezone)

    def today(self) -> date:
        """Current calendar date in the clock's timezone."""
        return self.now().date()


def parse_date(date_str: str, clock: Clock | None = None) -> date:
    """
    Parse a user-supplied date string into a calendar date.

    Args:
        date_str: Date string (ISO or any format dateutil understands), or
            the literal "today".
        clock: Clock used to resolve "today".

    Returns:
        The parsed calendar date.

    Raises:
        ValueError: If the string cannot be parsed.
    """
    if date_str.strip().lower() == "today":
        return (clock or Clock()).today()

    try:
        return parser.parse(date_str).date()
    except (parser.ParserError, OverflowError) as e:
        raise ValueError(f"Invalid date: {date_str!r}") from e
