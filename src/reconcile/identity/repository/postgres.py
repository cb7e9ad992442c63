from __future__ import annotations

from typing import Any, List, Optional

from psycopg import AsyncConnection
from psycopg.rows import dict_row

from ..errors import ContactNotFoundError
from ..models import Contact, LinkPrecedence
from .contacts import UNSET, ContactRepository


CONTACT_COLUMNS = (
    "id, email, phone_number, linked_id, link_precedence, created_at, updated_at, deleted_at"
)


class PostgresContactRepository(ContactRepository):
    """Postgres-backed contact store driven through a caller-owned connection."""

    async def find_matching_contacts(
        self, tx: AsyncConnection[Any], email: str | None, phone_number: str | None
    ) -> List[Contact]:
        conditions: List[str] = []
        params: List[object] = []
        if email:
            conditions.append("email = %s")
            params.append(email)
        if phone_number:
            conditions.append("phone_number = %s")
            params.append(phone_number)
        if not conditions:
            return []

        where = " OR ".join(conditions)
        query = f"""
            SELECT {CONTACT_COLUMNS}
            FROM contacts
            WHERE ({where})
              AND deleted_at IS NULL
            ORDER BY created_at, id
        """
        async with tx.cursor(row_factory=dict_row) as cur:
            await cur.execute(query, params)
            rows = await cur.fetchall()
        return [Contact.from_row(row) for row in rows]

    async def find_contacts_by_primary_id(
        self, tx: AsyncConnection[Any], primary_id: int
    ) -> List[Contact]:
        async with tx.cursor(row_factory=dict_row) as cur:
            await cur.execute(
                f"""
                SELECT {CONTACT_COLUMNS}
                FROM contacts
                WHERE linked_id = %s AND deleted_at IS NULL
                ORDER BY created_at, id
                """,
                (primary_id,),
            )
            rows = await cur.fetchall()
        return [Contact.from_row(row) for row in rows]

    async def find_contact_by_id(
        self, tx: AsyncConnection[Any], contact_id: int
    ) -> Optional[Contact]:
        async with tx.cursor(row_factory=dict_row) as cur:
            await cur.execute(
                f"SELECT {CONTACT_COLUMNS} FROM contacts WHERE id = %s",
                (contact_id,),
            )
            row = await cur.fetchone()
        return Contact.from_row(row) if row else None

    async def create_contact(
        self,
        tx: AsyncConnection[Any],
        *,
        email: str | None,
        phone_number: str | None,
        link_precedence: LinkPrecedence,
        linked_id: int | None = None,
    ) -> Contact:
        async with tx.cursor(row_factory=dict_row) as cur:
            await cur.execute(
                f"""
                INSERT INTO contacts (email, phone_number, linked_id, link_precedence)
                VALUES (%(email)s, %(phone_number)s, %(linked_id)s, %(link_precedence)s)
                RETURNING {CONTACT_COLUMNS}
                """,
                {
                    "email": email,
                    "phone_number": phone_number,
                    "linked_id": linked_id,
                    "link_precedence": link_precedence.value,
                },
            )
            row = await cur.fetchone()
        return Contact.from_row(row)

    async def update_contact(
        self,
        tx: AsyncConnection[Any],
        contact_id: int,
        *,
        linked_id: int | None = UNSET,
        link_precedence: LinkPrecedence = UNSET,
    ) -> Contact:
        assignments: List[str] = []
        params: dict[str, object] = {"id": contact_id}
        if linked_id is not UNSET:
            assignments.append("linked_id = %(linked_id)s")
            params["linked_id"] = linked_id
        if link_precedence is not UNSET:
            assignments.append("link_precedence = %(link_precedence)s")
            params["link_precedence"] = LinkPrecedence(link_precedence).value
        assignments.append("updated_at = clock_timestamp()")
        updates = ", ".join(assignments)

        async with tx.cursor(row_factory=dict_row) as cur:
            await cur.execute(
                f"""
                UPDATE contacts
                SET {updates}
                WHERE id = %(id)s
                RETURNING {CONTACT_COLUMNS}
                """,
                params,
            )
            row = await cur.fetchone()
        if row is None:
            raise ContactNotFoundError(contact_id)
        return Contact.from_row(row)


__all__ = ["PostgresContactRepository"]
