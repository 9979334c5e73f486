"""Date and budget month parsing utilities."""

import re
from datetime import date, timedelta

from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta

from envelopes.domain.month import MonthKey

_MONTH_KEY_RE = re.compile(r"^\d{4}-\d{2}$")


def parse_date(date_str: str) -> date:
    """Parse a date string into a date object.

    Supports:
    - Absolute dates: "2024-01-15", "January 15, 2024", etc.
    - Relative dates: "today", "yesterday", "tomorrow"

    Raises:
        ValueError: If date string cannot be parsed
    """
    date_str = date_str.strip().lower()
    today = date.today()

    relative_dates = {
        "today": today,
        "yesterday": today - timedelta(days=1),
        "tomorrow": today + timedelta(days=1),
    }
    if date_str in relative_dates:
        return relative_dates[date_str]

    try:
        return date_parser.parse(date_str).date()
    except (ValueError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{date_str}': {e}")


def parse_month(month_str: str) -> MonthKey:
    """Parse a budget month.

    Accepts "YYYY-MM", "this month", "last month", "next month", or any
    date string ``parse_date`` understands (the month containing it).

    Raises:
        ValueError: If the string names no month
    """
    month_str = month_str.strip().lower()
    today = date.today()

    relative_months = {
        "this month": today,
        "last month": today - relativedelta(months=1),
        "next month": today + relativedelta(months=1),
    }
    if month_str in relative_months:
        return MonthKey.from_date(relative_months[month_str])

    if _MONTH_KEY_RE.match(month_str):
        return MonthKey.parse(month_str)

    return MonthKey.from_date(parse_date(month_str))
