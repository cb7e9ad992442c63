from .contact import Contact, LinkPrecedence
from .contracts import ContactSummary, HealthStatus, IdentifyRequest, IdentifyResponse

__all__ = [
    "Contact",
    "ContactSummary",
    "HealthStatus",
    "IdentifyRequest",
    "IdentifyResponse",
    "LinkPrecedence",
]
