from .identity import IdentityService
from .resolver import IdentityResolver

__all__ = ["IdentityResolver", "IdentityService"]
