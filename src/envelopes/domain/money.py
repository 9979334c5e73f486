"""Integer money helpers.

All amounts inside the engine are whole cents held in plain ``int`` values.
Floats never cross this boundary: ``ensure_cents`` rejects them, and the
division helpers below are exact integer arithmetic with a fixed rounding
rule so repeated computations give identical results.
"""

from decimal import Decimal, ROUND_HALF_UP, InvalidOperation
from typing import NewType, Union

from envelopes.domain.errors import InvalidAmountError

# Money amounts are stored as cents (minor units) to avoid floating point errors
Money = NewType("Money", int)

CENTS_PER_UNIT = 100

# Amounts are stored in signed 64-bit columns
MIN_CENTS = -(2**63)
MAX_CENTS = 2**63 - 1


def ensure_cents(value: object, field: str = "amount") -> Money:
    """Validate that a value is an integer amount of cents.

    Args:
        value: Candidate amount
        field: Name used in the error message

    Returns:
        The value as Money

    Raises:
        InvalidAmountError: If the value is not an int (bools and floats are rejected)
            or does not fit in a signed 64-bit integer
    """
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidAmountError(
            f"{field} must be an integer number of cents, got {value!r}"
        )
    if not MIN_CENTS <= value <= MAX_CENTS:
        raise InvalidAmountError(f"{field} is out of range: {value}")
    return Money(value)


def to_cents(value: Union[Decimal, str, int]) -> Money:
    """Convert a major-unit amount (e.g. ``Decimal("12.345")``) to cents.

    Rounds half up at the cent boundary. Floats are refused because their
    binary representation makes the rounding unpredictable.

    Raises:
        InvalidAmountError: If the value cannot be interpreted
    """
    if isinstance(value, float):
        raise InvalidAmountError(f"Refusing to convert float {value!r} to cents")
    if isinstance(value, bool):
        raise InvalidAmountError(f"Invalid amount {value!r}")
    try:
        amount = Decimal(value)
    except (InvalidOperation, ValueError) as e:
        raise InvalidAmountError(f"Invalid amount {value!r}") from e
    if not amount.is_finite():
        raise InvalidAmountError(f"Invalid amount {value!r}")
    cents = (amount * CENTS_PER_UNIT).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    return ensure_cents(int(cents))


def format_cents(cents: int) -> str:
    """Format cents as a plain decimal string, e.g. ``-1234`` -> ``"-12.34"``."""
    sign = "-" if cents < 0 else ""
    units, rest = divmod(abs(cents), CENTS_PER_UNIT)
    return f"{sign}{units}.{rest:02d}"


def divide_round_half_up(amount: int, parts: int) -> Money:
    """Divide an amount into ``parts``, rounding half away from zero."""
    if parts <= 0:
        raise ValueError(f"Cannot divide into {parts} parts")
    quotient, remainder = divmod(abs(amount), parts)
    if remainder * 2 >= parts:
        quotient += 1
    return Money(quotient if amount >= 0 else -quotient)


def divide_ceil(amount: int, parts: int) -> Money:
    """Divide an amount into ``parts``, rounding toward positive infinity."""
    if parts <= 0:
        raise ValueError(f"Cannot divide into {parts} parts")
    return Money(-(-amount // parts))


def split_evenly(amount: int, parts: int) -> list[Money]:
    """Split an amount into ``parts`` installments that sum back to ``amount``.

    Every installment but the last is the share truncated toward zero; the
    last one absorbs the remainder, so no installment has the opposite sign
    of ``amount``.

    Example:
        >>> split_evenly(1000, 3)
        [333, 333, 334]
    """
    if parts <= 0:
        raise ValueError(f"Cannot divide into {parts} parts")
    share = abs(amount) // parts
    if amount < 0:
        share = -share
    installments = [share] * (parts - 1)
    installments.append(Money(amount - share * (parts - 1)))
    return installments
