"""Funding targets and category status classification."""

from dataclasses import replace
from typing import Optional

from envelopes.domain.entities import (
    BudgetStatus,
    RefillType,
    TargetDefinition,
    TargetProgress,
    TargetType,
)
from envelopes.domain.errors import InvalidAmountError, ValidationError
from envelopes.domain.money import divide_ceil, ensure_cents, split_evenly
from envelopes.domain.month import MonthKey


def validate_target(definition: TargetDefinition) -> TargetDefinition:
    """Check a target definition and normalize its enum and month fields.

    Args:
        definition: Target as supplied by the caller (string enum values and
            ``"YYYY-MM"`` target months are accepted)

    Returns:
        Normalized TargetDefinition

    Raises:
        InvalidAmountError: If the amount is not a positive integer
        ValidationError: If the type, refill type, day or target month is invalid
    """
    try:
        target_type = TargetType(definition.type)
        refill_type = RefillType(definition.refill_type)
    except ValueError as e:
        raise ValidationError(str(e)) from e

    amount = ensure_cents(definition.amount, "target amount")
    if amount <= 0:
        raise InvalidAmountError(f"Target amount must be positive, got {amount}")

    day = definition.day_of_month
    if day is not None and (isinstance(day, bool) or not isinstance(day, int) or not 1 <= day <= 31):
        raise ValidationError(f"Day of month must be between 1 and 31, got {day!r}")

    target_month = definition.target_month
    if target_type == TargetType.BY_DATE:
        if target_month is None:
            raise ValidationError("A target balance by date needs a target month")
        target_month = MonthKey.coerce(target_month)
    elif target_month is not None:
        raise ValidationError("A monthly target does not take a target month")

    return replace(
        definition,
        type=target_type,
        amount=amount,
        refill_type=refill_type,
        target_month=target_month,
    )


def _clamp_ratio(numerator: int, denominator: int) -> float:
    return min(1.0, max(0.0, numerator / denominator))


def months_remaining(month: MonthKey, target_month: MonthKey) -> int:
    """Months left to fund a by-date target, counting ``month`` itself.

    Once the target month has passed everything is due now, so the result
    never drops below 1.
    """
    return max(1, month.months_until(target_month) + 1)


def evaluate_target(
    definition: TargetDefinition,
    month: MonthKey,
    assigned: int,
    available: int,
    carry_in: int,
) -> TargetProgress:
    """Evaluate a target against a category's figures for one month.

    Args:
        definition: Validated target definition
        month: Month being evaluated
        assigned: Amount assigned to the category this month
        available: Category balance at the end of the month
        carry_in: Balance carried in from the previous month

    Returns:
        TargetProgress with the amount still needed this month and a progress
        ratio in [0, 1]
    """
    amount = definition.amount

    if definition.type == TargetType.MONTHLY:
        if definition.refill_type == RefillType.REFILL:
            # Leftover from last month counts toward the refill
            credit = max(0, carry_in)
            contribution = max(0, amount - credit)
            needed = max(0, amount - credit - assigned)
            progress = _clamp_ratio(amount - needed, amount)
        else:
            contribution = amount
            needed = max(0, amount - assigned)
            progress = _clamp_ratio(assigned, amount)
        return TargetProgress(
            type=definition.type,
            amount=amount,
            needed=needed,
            progress=progress,
            day_of_month=definition.day_of_month,
            refill_type=definition.refill_type,
            monthly_contribution=contribution,
        )

    remaining = max(0, amount - carry_in)
    contribution = divide_ceil(remaining, months_remaining(month, definition.target_month))
    return TargetProgress(
        type=definition.type,
        amount=amount,
        needed=max(0, contribution - assigned),
        progress=_clamp_ratio(available, amount),
        day_of_month=definition.day_of_month,
        refill_type=definition.refill_type,
        target_month=definition.target_month,
        monthly_contribution=contribution,
    )


def funding_schedule(
    definition: TargetDefinition, month: MonthKey, carry_in: int
) -> list[tuple[MonthKey, int]]:
    """Project the contributions that fully fund a target from ``month`` on.

    A by-date target spreads what is still missing evenly over the remaining
    months, with the rounding remainder in the final month. A monthly target
    yields a single installment for ``month``.
    """
    if definition.type == TargetType.MONTHLY:
        progress = evaluate_target(definition, month, 0, carry_in, carry_in)
        return [(month, progress.monthly_contribution or 0)]

    count = months_remaining(month, definition.target_month)
    remaining = max(0, definition.amount - carry_in)
    return [
        (month.shift(offset), installment)
        for offset, installment in enumerate(split_evenly(remaining, count))
    ]


def classify(
    available: int,
    had_outflow: bool,
    target: Optional[TargetProgress] = None,
) -> BudgetStatus:
    """Pick the presentation state of a category.

    Checked in this order: overspent, funded, underfunded, spent, available,
    empty. A negative balance is always overspent, whatever the target says.
    """
    if available < 0:
        return BudgetStatus.OVERSPENT
    if target is not None:
        return BudgetStatus.FUNDED if target.needed == 0 else BudgetStatus.UNDERFUNDED
    if available == 0 and had_outflow:
        return BudgetStatus.SPENT
    if available > 0:
        return BudgetStatus.AVAILABLE
    return BudgetStatus.EMPTY
