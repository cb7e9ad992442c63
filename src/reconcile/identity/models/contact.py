from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Mapping


class LinkPrecedence(str, Enum):
    PRIMARY = "primary"
    SECONDARY = "secondary"


@dataclass(frozen=True, slots=True)
class Contact:
    """One stored contact row.

    Secondaries point at their primary through ``linked_id``; a primary never
    carries one.
    """

    id: int
    email: str | None
    phone_number: str | None
    link_precedence: LinkPrecedence
    created_at: datetime
    linked_id: int | None = None
    updated_at: datetime | None = None
    deleted_at: datetime | None = None

    @property
    def is_primary(self) -> bool:
        return self.link_precedence is LinkPrecedence.PRIMARY

    @property
    def sort_key(self) -> tuple[datetime, int]:
        # created_at ties fall back to id so merges stay deterministic
        return (self.created_at, self.id)

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "Contact":
        return cls(
            id=row["id"],
            email=row.get("email"),
            phone_number=row.get("phone_number"),
            link_precedence=LinkPrecedence(row["link_precedence"]),
            created_at=row["created_at"],
            linked_id=row.get("linked_id"),
            updated_at=row.get("updated_at"),
            deleted_at=row.get("deleted_at"),
        )


__all__ = ["Contact", "LinkPrecedence"]
