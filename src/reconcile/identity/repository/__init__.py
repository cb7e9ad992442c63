from .contacts import UNSET, ContactRepository
from .postgres import PostgresContactRepository
from .schema import ensure_schema

__all__ = ["ContactRepository", "PostgresContactRepository", "UNSET", "ensure_schema"]
