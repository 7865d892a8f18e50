"""Security utilities for authentication."""
from .identity_provider import AuthenticatedUser, IdentityProviderClient

__all__ = [
    "AuthenticatedUser",
    "IdentityProviderClient",
]
