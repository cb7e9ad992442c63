from __future__ import annotations

from typing import Any

import phonenumbers


def _clean(value: Any) -> str | None:
    if value is None:
        return None
    cleaned = str(value).strip()
    return cleaned or None


def normalize_email(value: Any) -> str | None:
    """Trim and lower-case an email, returning ``None`` for blank input."""

    cleaned = _clean(value)
    if cleaned is None:
        return None
    return cleaned.lower()


def normalize_phone(value: Any, default_region: str | None = None) -> str | None:
    """Trim a phone number; canonicalise to E.164 when a region is configured.

    Numbers are matched verbatim unless ``default_region`` is set, in which case
    ``phonenumbers`` parses and validates them first.
    """

    cleaned = _clean(value)
    if cleaned is None:
        return None
    if not default_region:
        return cleaned
    try:
        parsed = phonenumbers.parse(cleaned, default_region)
    except phonenumbers.NumberParseException as exc:
        raise ValueError(f"Invalid phone number: {cleaned}") from exc
    if not phonenumbers.is_valid_number(parsed):
        raise ValueError(f"Invalid phone number: {cleaned}")
    return phonenumbers.format_number(parsed, phonenumbers.PhoneNumberFormat.E164)


__all__ = ["normalize_email", "normalize_phone"]
