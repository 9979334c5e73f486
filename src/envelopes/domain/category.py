"""Category and category group domain service.

Deleting a category is blocked while any transaction points at it or any
month still holds a non-zero assignment for it.
"""

import logging
from typing import Optional

from envelopes.database.base import Database
from envelopes.domain.entities import Category as CategoryEntity, CategoryGroup as CategoryGroupEntity
from envelopes.domain.errors import (
    CrossOwnerOperationError,
    DependencyError,
    NotFoundError,
    ValidationError,
    category_delete_blocked,
    category_group_not_found,
    category_not_found,
    category_owner_mismatch,
    group_delete_blocked,
    owner_not_found,
)

logger = logging.getLogger(__name__)


def _clean_name(name: str) -> str:
    name = name.strip()
    if not name:
        raise ValidationError("Name must not be empty")
    return name


class CategoryService:
    """Service for managing categories and their groups."""

    def __init__(self, db: Database):
        """Initialize category service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_group(self, owner_id: int, name: str) -> int:
        """Create a category group at the end of the owner's list.

        Raises:
            NotFoundError: If the owner doesn't exist
            ValidationError: If the name is empty
        """
        if self.db.get_owner(owner_id) is None:
            raise NotFoundError(owner_not_found(owner_id))
        group_id = self.db.create_category_group(owner_id=owner_id, name=_clean_name(name))
        logger.info("Created category group %s (ID: %s)", name, group_id)
        return group_id

    def create_category(self, owner_id: int, group_id: int, name: str) -> int:
        """Create a category in a group.

        Args:
            owner_id: Budget owner
            group_id: Group the category belongs to
            name: Category name

        Returns:
            Category ID

        Raises:
            NotFoundError: If the group doesn't exist
            CrossOwnerOperationError: If the group belongs to another owner
        """
        group = self.require_group(group_id)
        if group.owner_id != owner_id:
            raise CrossOwnerOperationError(
                f"Category group {group_id} does not belong to owner {owner_id}"
            )
        category_id = self.db.create_category(
            owner_id=owner_id, group_id=group_id, name=_clean_name(name)
        )
        logger.info("Created category %s in group %s (ID: %s)", name, group_id, category_id)
        return category_id

    def get_category(self, category_id: int) -> Optional[CategoryEntity]:
        """Get category by ID.

        Args:
            category_id: Category ID

        Returns:
            Category entity or None if not found
        """
        return self.db.get_category(category_id)

    def require_category(self, category_id: int, owner_id: Optional[int] = None) -> CategoryEntity:
        """Get a category, optionally checking it belongs to ``owner_id``.

        Raises:
            NotFoundError: If the category doesn't exist
            CrossOwnerOperationError: If it belongs to another owner
        """
        category = self.db.get_category(category_id)
        if category is None:
            raise NotFoundError(category_not_found(category_id))
        if owner_id is not None and category.owner_id != owner_id:
            raise CrossOwnerOperationError(category_owner_mismatch(category_id, owner_id))
        return category

    def require_group(self, group_id: int) -> CategoryGroupEntity:
        """Get a category group or raise NotFoundError."""
        group = self.db.get_category_group(group_id)
        if group is None:
            raise NotFoundError(category_group_not_found(group_id))
        return group

    def list_groups(self, owner_id: int, include_hidden: bool = True) -> list[CategoryGroupEntity]:
        """List the owner's groups with their categories, in display order."""
        return self.db.list_category_groups(owner_id, include_hidden=include_hidden)

    def find_category(self, owner_id: int, name_or_id: str) -> Optional[CategoryEntity]:
        """Find an owner's category by ID, name, or "Group > Category" path."""
        groups = self.db.list_category_groups(owner_id)
        group_name = None
        name = name_or_id.strip()
        if ">" in name:
            group_name, name = (part.strip() for part in name.split(">", 1))

        for group in groups:
            if group_name is not None and group.name != group_name:
                continue
            for cat in group.categories:
                if cat.name == name or (name.isdigit() and cat.id == int(name)):
                    return cat
        return None

    def rename_category(self, category_id: int, name: str) -> None:
        """Rename a category."""
        self.require_category(category_id)
        self.db.update_category(category_id, name=_clean_name(name))

    def rename_group(self, group_id: int, name: str) -> None:
        """Rename a category group."""
        self.require_group(group_id)
        self.db.update_category_group(group_id, name=_clean_name(name))

    def set_category_hidden(self, category_id: int, hidden: bool) -> None:
        """Hide or show a category. Hidden categories still count toward Ready to Assign."""
        self.require_category(category_id)
        self.db.update_category(category_id, is_hidden=hidden)

    def set_group_hidden(self, group_id: int, hidden: bool) -> None:
        """Hide or show a category group."""
        self.require_group(group_id)
        self.db.update_category_group(group_id, is_hidden=hidden)

    def move_category(self, category_id: int, group_id: int) -> None:
        """Move a category to another group of the same owner."""
        category = self.require_category(category_id)
        group = self.require_group(group_id)
        if group.owner_id != category.owner_id:
            raise CrossOwnerOperationError(
                f"Category group {group_id} does not belong to owner {category.owner_id}"
            )
        self.db.update_category(category_id, group_id=group_id)

    def delete_category(self, category_id: int) -> None:
        """Delete a category that has no history.

        Raises:
            NotFoundError: If the category doesn't exist
            DependencyError: If transactions or non-zero assignments reference it
        """
        self.require_category(category_id)
        transaction_count = self.db.get_category_transaction_count(category_id)
        assignment_count = self.db.get_category_assignment_count(category_id)
        if transaction_count > 0 or assignment_count > 0:
            raise DependencyError(
                category_delete_blocked(category_id, transaction_count, assignment_count)
            )
        self.db.delete_category(category_id)
        logger.info("Deleted category %s", category_id)

    def delete_group(self, group_id: int) -> None:
        """Delete an empty category group.

        Raises:
            NotFoundError: If the group doesn't exist
            DependencyError: If the group still has categories
        """
        group = self.require_group(group_id)
        if group.categories:
            raise DependencyError(group_delete_blocked(group_id, len(group.categories)))
        self.db.delete_category_group(group_id)
        logger.info("Deleted category group %s", group_id)
