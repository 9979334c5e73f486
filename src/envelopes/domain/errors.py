"""Shared domain error messages and error types."""


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling. All of them are recoverable
    and reported back to the caller.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class InvalidAmountError(ValidationError):
    """Amount is not a valid integer number of cents for the operation."""


class NotFoundError(DomainError):
    """Requested domain entity does not exist."""


class ConflictError(DomainError):
    """Domain conflict, such as uniqueness violations."""


class ConcurrentModificationError(ConflictError):
    """Optimistic concurrency check failed on an assignment write."""


class DependencyError(DomainError):
    """Operation blocked due to dependent domain data."""


class CrossOwnerOperationError(DomainError):
    """Operation touches entities belonging to a different budget owner."""


def owner_not_found(owner_id: int) -> str:
    """Return message for missing owner."""
    return f"Owner {owner_id} not found"


def account_not_found(account_id: int) -> str:
    """Return message for missing account."""
    return f"Account {account_id} not found"


def category_not_found(category_id: int) -> str:
    """Return message for missing category by ID."""
    return f"Category {category_id} not found"


def category_group_not_found(group_id: int) -> str:
    """Return message for missing category group by ID."""
    return f"Category group {group_id} not found"


def transaction_not_found(transaction_id: int) -> str:
    """Return message for missing transaction."""
    return f"Transaction {transaction_id} not found"


def category_owner_mismatch(category_id: int, owner_id: int) -> str:
    """Return message when a category belongs to someone else."""
    return f"Category {category_id} does not belong to owner {owner_id}"


def assignment_version_conflict(
    category_id: int, month: str, expected: int, actual: int
) -> str:
    """Return message for a failed compare-and-set on an assignment."""
    return (
        f"Assignment for category {category_id} in {month} was modified concurrently "
        f"(expected version {expected}, found {actual})"
    )


def category_delete_blocked(
    category_id: int, transaction_count: int, assignment_count: int
) -> str:
    """Return message when a category has dependent transactions or assignments."""
    parts = []
    if transaction_count > 0:
        parts.append(
            f"{transaction_count} transaction{'s' if transaction_count != 1 else ''}"
        )
    if assignment_count > 0:
        parts.append(
            f"{assignment_count} assignment{'s' if assignment_count != 1 else ''}"
        )
    return (
        f"Cannot delete category {category_id}: it has {', '.join(parts)}. "
        "Please recategorize transactions and move assigned money first."
    )


def group_delete_blocked(group_id: int, category_count: int) -> str:
    """Return message when a category group still has categories."""
    return (
        f"Cannot delete category group {group_id}: it has {category_count} "
        f"categor{'ies' if category_count != 1 else 'y'}. "
        "Please delete or move them first."
    )
