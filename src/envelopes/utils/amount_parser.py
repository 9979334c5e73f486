"""Amount parsing utilities."""

import re
from decimal import Decimal, InvalidOperation

from envelopes.domain.money import Money, to_cents


def parse_amount(amount_str: str) -> Money:
    """Parse an amount string into integer cents.

    Handles various formats:
    - "123.45"
    - "$123.45"
    - "-123.45"
    - "-$123.45"
    - "1,234.56"
    - "(123.45)" (negative in parentheses)

    Sub-cent digits are rounded half up.

    Args:
        amount_str: Amount string

    Returns:
        Amount in cents

    Raises:
        ValueError: If amount string cannot be parsed
    """
    if not amount_str or not amount_str.strip():
        raise ValueError("Empty amount string")

    amount_str = amount_str.strip()

    is_negative = False
    if amount_str.startswith("(") and amount_str.endswith(")"):
        is_negative = True
        amount_str = amount_str[1:-1]

    amount_str = re.sub(r"[$€£¥]", "", amount_str)
    amount_str = amount_str.replace(",", "").strip()

    try:
        amount = Decimal(amount_str)
    except InvalidOperation as e:
        raise ValueError(f"Could not parse amount '{amount_str}'") from e
    if not amount.is_finite():
        raise ValueError(f"Could not parse amount '{amount_str}'")

    if is_negative:
        amount = -amount
    return to_cents(amount)
