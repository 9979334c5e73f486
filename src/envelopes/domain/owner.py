"""Budget owner domain service."""

import logging
from typing import Optional

from envelopes.database.base import Database
from envelopes.domain.entities import Owner as OwnerEntity
from envelopes.domain.errors import ConflictError, NotFoundError, ValidationError, owner_not_found

logger = logging.getLogger(__name__)


class OwnerService:
    """Service for managing budget owners."""

    def __init__(self, db: Database):
        """Initialize owner service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_owner(self, name: str) -> int:
        """Create a budget owner.

        Args:
            name: Unique owner name

        Returns:
            Owner ID

        Raises:
            ValidationError: If the name is empty
            ConflictError: If an owner with this name already exists
        """
        name = name.strip()
        if not name:
            raise ValidationError("Owner name must not be empty")
        if self.db.get_owner_by_name(name) is not None:
            raise ConflictError(f"Owner with name '{name}' already exists")
        owner_id = self.db.create_owner(name)
        logger.info("Created owner %s (ID: %s)", name, owner_id)
        return owner_id

    def get_owner(self, owner_id: int) -> Optional[OwnerEntity]:
        """Get owner by ID."""
        return self.db.get_owner(owner_id)

    def require_owner(self, owner_id: int) -> OwnerEntity:
        """Get owner by ID or raise NotFoundError."""
        owner = self.db.get_owner(owner_id)
        if owner is None:
            raise NotFoundError(owner_not_found(owner_id))
        return owner

    def get_or_create_owner(self, name: str) -> OwnerEntity:
        """Return the owner with this name, creating it on first use."""
        owner = self.db.get_owner_by_name(name.strip())
        if owner is None:
            owner = self.require_owner(self.create_owner(name))
        return owner
