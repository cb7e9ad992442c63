from __future__ import annotations

from typing import Any, List

from pydantic import BaseModel, ConfigDict, Field, field_validator

from reconcile.shared.normalization import normalize_email, normalize_phone


class IdentifyRequest(BaseModel):
    """Public contract accepted by ``POST /identify``.

    Email is trimmed and lower-cased, phone numbers may arrive as JSON numbers
    and are coerced to trimmed strings. Blank values count as absent.
    """

    model_config = ConfigDict(populate_by_name=True)

    email: str | None = None
    phone_number: str | None = Field(default=None, alias="phoneNumber")

    @field_validator("email", mode="before")
    @classmethod
    def _normalize_email(cls, value: Any) -> str | None:
        if value is not None and not isinstance(value, str):
            raise ValueError("email must be a string")
        return normalize_email(value)

    @field_validator("phone_number", mode="before")
    @classmethod
    def _normalize_phone(cls, value: Any) -> str | None:
        if isinstance(value, bool) or not (value is None or isinstance(value, (str, int))):
            raise ValueError("phoneNumber must be a string or number")
        return normalize_phone(value)

    def is_empty(self) -> bool:
        return not (self.email or self.phone_number)


class ContactSummary(BaseModel):
    """Consolidated view of one identity cluster."""

    model_config = ConfigDict(populate_by_name=True)

    primary_contact_id: int = Field(alias="primaryContactId")
    emails: List[str] = Field(default_factory=list)
    phone_numbers: List[str] = Field(default_factory=list, alias="phoneNumbers")
    secondary_contact_ids: List[int] = Field(default_factory=list, alias="secondaryContactIds")


class IdentifyResponse(BaseModel):
    contact: ContactSummary


class HealthStatus(BaseModel):
    status: str
    timestamp: str


__all__ = ["ContactSummary", "HealthStatus", "IdentifyRequest", "IdentifyResponse"]
