"""Calendar month keys used as the time axis of the budget."""

import re
from dataclasses import dataclass
from datetime import date
from typing import Iterator, Union

from dateutil.relativedelta import relativedelta

from envelopes.domain.errors import ValidationError

_MONTH_PATTERN = re.compile(r"^(\d{4})-(\d{2})$")


@dataclass(frozen=True, order=True)
class MonthKey:
    """A year + month pair with a total order.

    The canonical string form is ``"YYYY-MM"``.
    """

    year: int
    month: int

    def __post_init__(self) -> None:
        if not 1 <= self.month <= 12:
            raise ValidationError(f"Invalid month number {self.month}")
        if not 1 <= self.year <= 9999:
            raise ValidationError(f"Invalid year {self.year}")

    @classmethod
    def parse(cls, value: str) -> "MonthKey":
        """Parse a canonical ``"YYYY-MM"`` string.

        Raises:
            ValidationError: If the string is not a valid month key
        """
        match = _MONTH_PATTERN.match(value.strip()) if isinstance(value, str) else None
        if match is None:
            raise ValidationError(f"Invalid month '{value}' (expected YYYY-MM)")
        return cls(int(match.group(1)), int(match.group(2)))

    @classmethod
    def from_date(cls, value: date) -> "MonthKey":
        """Return the month containing a date."""
        return cls(value.year, value.month)

    @classmethod
    def coerce(cls, value: Union["MonthKey", str, date]) -> "MonthKey":
        """Accept a MonthKey, a ``"YYYY-MM"`` string or a date."""
        if isinstance(value, MonthKey):
            return value
        if isinstance(value, date):
            return cls.from_date(value)
        return cls.parse(value)

    def __str__(self) -> str:
        return f"{self.year:04d}-{self.month:02d}"

    @property
    def first_day(self) -> date:
        return date(self.year, self.month, 1)

    @property
    def last_day(self) -> date:
        return self.first_day + relativedelta(months=1, days=-1)

    def shift(self, months: int) -> "MonthKey":
        """Return the month ``months`` away from this one (negative goes back)."""
        return MonthKey.from_date(self.first_day + relativedelta(months=months))

    def next(self) -> "MonthKey":
        return self.shift(1)

    def previous(self) -> "MonthKey":
        return self.shift(-1)

    def months_until(self, other: "MonthKey") -> int:
        """Number of months from this month to ``other`` (negative if earlier)."""
        return (other.year - self.year) * 12 + (other.month - self.month)

    def contains(self, value: date) -> bool:
        return value.year == self.year and value.month == self.month


def month_range(start: MonthKey, end: MonthKey) -> Iterator[MonthKey]:
    """Yield every month from ``start`` to ``end`` inclusive."""
    current = start
    while current <= end:
        yield current
        current = current.next()
