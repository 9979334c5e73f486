"""Moving assigned money between two categories.

A move only rewrites assignments within one month: what leaves one category
enters the other, so the total assigned and therefore Ready to Assign stay
unchanged.
"""

import logging
from dataclasses import dataclass

from envelopes.domain.assignments import AssignmentStore
from envelopes.domain.entities import MoveMode
from envelopes.domain.errors import InvalidAmountError, ValidationError
from envelopes.domain.money import ensure_cents
from envelopes.domain.month import MonthKey

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MovePlan:
    """The pair of assignment deltas that make up one move."""

    mode: MoveMode
    amount: int
    source_delta: int
    dest_delta: int


def validate_move(source_id: int, dest_id: int, amount: object) -> int:
    """Check the preconditions that do not need the store.

    Returns:
        The amount in cents

    Raises:
        InvalidAmountError: If amount is not a positive integer
        ValidationError: If source and destination are the same category
    """
    cents = ensure_cents(amount)
    if cents <= 0:
        raise InvalidAmountError(f"Amount to move must be positive, got {cents}")
    if source_id == dest_id:
        raise ValidationError("Source and destination category must differ")
    return cents


def plan_move(source_available: int, amount: int) -> MovePlan:
    """Choose the move mode from the source's balance.

    Surplus (source available >= 0): the source gives ``amount`` to the
    destination. Cover-overspend (source available < 0): the destination gives
    ``amount`` to the source to cover its deficit.
    """
    if source_available >= 0:
        return MovePlan(MoveMode.SURPLUS, amount, source_delta=-amount, dest_delta=amount)
    return MovePlan(MoveMode.COVER_OVERSPEND, amount, source_delta=amount, dest_delta=-amount)


class MoneyMover:
    """Applies a move plan to the assignment store.

    Callers wrap ``apply`` in a single ``Database.transaction()`` so both
    writes commit together or not at all.
    """

    def __init__(self, store: AssignmentStore):
        self.store = store

    def apply(self, plan: MovePlan, source_id: int, dest_id: int, month: MonthKey) -> None:
        self.store.delta(source_id, month, plan.source_delta)
        self.store.delta(dest_id, month, plan.dest_delta)
        logger.info(
            "Moved %s cents from category %s to %s in %s (%s)",
            plan.amount,
            source_id,
            dest_id,
            month,
            plan.mode.value,
            extra={"owner_id": self.store.owner_id},
        )
