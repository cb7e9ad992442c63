from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, List, Optional

from ..models import Contact, LinkPrecedence


UNSET: Any = object()


class ContactRepository(ABC):
    """Storage contract for contact rows.

    Every call runs inside the transaction handle ``tx`` supplied by the
    caller; implementations never commit and never decide merges. Reads skip
    soft-deleted rows and return contacts ordered by ``created_at, id``.
    """

    @abstractmethod
    async def find_matching_contacts(
        self, tx: Any, email: str | None, phone_number: str | None
    ) -> List[Contact]:
        """Contacts whose email or phone equals one of the provided values."""

    @abstractmethod
    async def find_contacts_by_primary_id(self, tx: Any, primary_id: int) -> List[Contact]:
        """Contacts linked to ``primary_id``."""

    @abstractmethod
    async def find_contact_by_id(self, tx: Any, contact_id: int) -> Optional[Contact]:
        ...

    @abstractmethod
    async def create_contact(
        self,
        tx: Any,
        *,
        email: str | None,
        phone_number: str | None,
        link_precedence: LinkPrecedence,
        linked_id: int | None = None,
    ) -> Contact:
        """Insert a contact; the store assigns ``id`` and ``created_at``."""

    @abstractmethod
    async def update_contact(
        self,
        tx: Any,
        contact_id: int,
        *,
        linked_id: int | None = UNSET,
        link_precedence: LinkPrecedence = UNSET,
    ) -> Contact:
        """Partially update the link columns of one contact."""


__all__ = ["ContactRepository", "UNSET"]
