"""
Credential provider backed by a JSON user file.
"""

from .provider import (
    AuthError,
    AuthProvider,
    AuthResource,
    User,
    UserNotFoundError,
    hash_password,
    verify_password,
)

__all__ = [
    "AuthProvider",
    "AuthResource",
    "User",
    "AuthError",
    "UserNotFoundError",
    "hash_password",
    "verify_password",
]
