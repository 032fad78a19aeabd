import math
import re
from datetime import date

ISO_DATE_PATTERN = re.compile(r"^(\d{4})-(\d{2})-(\d{2})")
DATE_TIME_SEPARATOR = re.compile(r"[\s,T]")

MONTH_NAMES = (
    "janeiro",
    "fevereiro",
    "março",
    "abril",
    "maio",
    "junho",
    "julho",
    "agosto",
    "setembro",
    "outubro",
    "novembro",
    "dezembro",
)


class DateNormalizer:
    """Parses the date formats found in monitoring exports.

    ISO strings (``YYYY-MM-DD`` with an optional time suffix) are tried first because
    they are unambiguous. Anything with a slash is read as day/month/year, the
    Brazilian convention; month/day/year is never assumed.
    """

    @staticmethod
    def normalize(candidate: str | None) -> date | None:
        """Returns the calendar date in ``candidate``, or None when it holds no valid date."""
        if not candidate or not isinstance(candidate, str):
            return None
        text = candidate.strip()

        iso_match = ISO_DATE_PATTERN.match(text)
        if iso_match:
            year, month, day = (int(group) for group in iso_match.groups())
            return DateNormalizer._build(year, month, day)

        if "/" in text:
            # Time may follow after a space, a comma or "T".
            date_part = DATE_TIME_SEPARATOR.split(text, maxsplit=1)[0]
            parts = date_part.split("/")
            if len(parts) != 3:
                return None
            try:
                day, month, year = (int(part) for part in parts)
            except ValueError:
                return None
            if year <= 1900 or not 1 <= month <= 12 or not 1 <= day <= 31:
                return None
            return DateNormalizer._build(year, month, day)

        return None

    @staticmethod
    def _build(year: int, month: int, day: int) -> date | None:
        try:
            return date(year, month, day)
        except ValueError:
            # e.g. 31/02 or month 13
            return None

    @staticmethod
    def month_name(value: date) -> str:
        return MONTH_NAMES[value.month - 1]

    @staticmethod
    def week_number(value: date) -> int:
        """Week of year anchored on Jan 1: ceil((days since Jan 1 + weekday of Jan 1 + 1) / 7),
        with weekdays counted 0=Sunday..6=Saturday.
        """
        first_day = date(value.year, 1, 1)
        past_days = (value - first_day).days
        first_weekday = (first_day.weekday() + 1) % 7
        return math.ceil((past_days + first_weekday + 1) / 7)
