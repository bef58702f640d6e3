"""Custom exceptions package."""

from .custom_exceptions import (
    BaseAPIException,
    # Account exceptions
    Unauthorized,
    InvalidCredentials,
    UsernameAlreadyExists,
    # Follow exceptions
    AlreadyFollowing,
    UpstreamServiceError,
    # Resource not found exceptions
    ResourceNotFound,
    # Validation exceptions
    ValidationError,
    InvalidOperation,
)

__all__ = [
    "BaseAPIException",
    "Unauthorized",
    "InvalidCredentials",
    "UsernameAlreadyExists",
    "AlreadyFollowing",
    "UpstreamServiceError",
    "ResourceNotFound",
    "ValidationError",
    "InvalidOperation",
]
