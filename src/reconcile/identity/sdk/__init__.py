from .client import IdentityServiceClient

__all__ = ["IdentityServiceClient"]
