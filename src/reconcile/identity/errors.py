from __future__ import annotations


class IdentityError(Exception):
    """Base class for identity reconciliation failures."""

    retryable = False


class IdentityRequestError(IdentityError):
    """User-actionable problem with the supplied identifiers."""

    def __init__(self, message: str, status_code: int = 400) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class MissingIdentifierError(IdentityRequestError):
    def __init__(self) -> None:
        super().__init__("At least one of email or phoneNumber must be provided")


class InvariantViolation(IdentityError):
    """The stored contact graph is in a state resolution never produces."""


class ContactNotFoundError(IdentityError):
    def __init__(self, contact_id: int) -> None:
        super().__init__(f"Contact {contact_id} not found")
        self.contact_id = contact_id


class RetryExhaustedError(IdentityError):
    """Concurrent writers kept conflicting until the attempt budget ran out."""

    retryable = True

    def __init__(self, attempts: int) -> None:
        super().__init__(f"identify gave up after {attempts} conflicting attempts")
        self.attempts = attempts


__all__ = [
    "ContactNotFoundError",
    "IdentityError",
    "IdentityRequestError",
    "InvariantViolation",
    "MissingIdentifierError",
    "RetryExhaustedError",
]
