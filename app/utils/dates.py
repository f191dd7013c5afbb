import calendar
from datetime import date, datetime

from dateutil import parser
from django.utils import timezone


def parse_datetime(target: str | datetime, tzinfo=None):
    """Parse a string to a python datetime."""

    tzinfo = tzinfo or timezone.get_current_timezone()

    if isinstance(target, datetime) and target.tzinfo is None:
        return target.replace(tzinfo=tzinfo)
    elif isinstance(target, datetime):
        return target.astimezone(tzinfo)

    parsed = parser.parse(target)
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=tzinfo)

    return parsed.astimezone(tzinfo)


def parse_date(target: str | datetime | date, tzinfo=None, fail_silently=True):
    """
    Parse a string to a python date.
    Will return None if fail_silently is True and date is invalid.

    Date strings without a time part are returned as written,
    without being shifted by a timezone.
    """

    try:
        if isinstance(target, datetime):
            return parse_datetime(target, tzinfo=tzinfo).date()
        elif isinstance(target, date):
            return target

        parsed = parser.parse(target)
        if parsed.tzinfo is None:
            return parsed.date()

        return parse_datetime(parsed, tzinfo=tzinfo).date()
    except (parser.ParserError, TypeError, ValueError, OverflowError) as e:
        if not fail_silently:
            raise e

        return None


def get_month_range(year: int, month: int) -> tuple[date, date]:
    """First and last day of a month."""

    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last_day)


def parse_month(target: str) -> tuple[int, int]:
    """
    Parse a month string in the format ``YYYY-MM``.

    Raises ValueError if the string is invalid.
    """

    year, month = target.split("-", 1)
    year, month = int(year), int(month)

    if not 1 <= month <= 12:
        raise ValueError(f"Invalid month: {target}")

    return year, month

