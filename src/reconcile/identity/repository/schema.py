from __future__ import annotations

from typing import Any

from psycopg import AsyncConnection


CONTACTS_DDL = (
    """
    CREATE TABLE IF NOT EXISTS contacts (
        id BIGSERIAL PRIMARY KEY,
        email TEXT,
        phone_number TEXT,
        linked_id BIGINT REFERENCES contacts (id),
        link_precedence TEXT NOT NULL,
        created_at TIMESTAMPTZ NOT NULL DEFAULT clock_timestamp(),
        updated_at TIMESTAMPTZ NOT NULL DEFAULT clock_timestamp(),
        deleted_at TIMESTAMPTZ,
        CONSTRAINT contacts_link_precedence_check
            CHECK (link_precedence IN ('primary', 'secondary')),
        CONSTRAINT contacts_identifier_required
            CHECK (email IS NOT NULL OR phone_number IS NOT NULL),
        CONSTRAINT contacts_linked_iff_secondary
            CHECK (
                (link_precedence = 'primary' AND linked_id IS NULL)
                OR (link_precedence = 'secondary' AND linked_id IS NOT NULL)
            )
    )
    """,
    "CREATE INDEX IF NOT EXISTS idx_contacts_email ON contacts (email) WHERE deleted_at IS NULL",
    "CREATE INDEX IF NOT EXISTS idx_contacts_phone_number ON contacts (phone_number) WHERE deleted_at IS NULL",
    "CREATE INDEX IF NOT EXISTS idx_contacts_linked_id ON contacts (linked_id) WHERE deleted_at IS NULL",
)


async def ensure_schema(conn: AsyncConnection[Any]) -> None:
    """Create the contacts table and its indexes if they don't exist."""
    async with conn.cursor() as cur:
        for statement in CONTACTS_DDL:
            await cur.execute(statement)


__all__ = ["CONTACTS_DDL", "ensure_schema"]
