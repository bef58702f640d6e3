"""Custom exceptions for the application."""

from fastapi import HTTPException, status
from typing import Optional, Dict, Any


class BaseAPIException(HTTPException):
    """Base API exception carrying a structured error body."""

    def __init__(
        self,
        status_code: int,
        error_code: str,
        message: str,
        details: Optional[Dict[str, Any]] = None
    ):
        detail = {
            "error": {
                "code": error_code,
                "message": message
            }
        }
        if details:
            detail["error"]["details"] = details

        super().__init__(status_code=status_code, detail=detail)


# ============ Account Related Exceptions ============

class Unauthorized(BaseAPIException):
    """Missing or invalid credentials."""

    def __init__(self, message: str = "Invalid or expired token"):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            error_code="UNAUTHORIZED",
            message=message
        )


class InvalidCredentials(BaseAPIException):
    """Wrong account name or password."""

    def __init__(self, message: str = "Incorrect account name or password"):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            error_code="INVALID_CREDENTIALS",
            message=message
        )


class UsernameAlreadyExists(BaseAPIException):
    """Account name already taken."""

    def __init__(self, username: str, message: Optional[str] = None):
        if message is None:
            message = f"Account name '{username}' is already taken"
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            error_code="USERNAME_ALREADY_EXISTS",
            message=message,
            details={"username": username}
        )


# ============ Follow Related Exceptions ============

class AlreadyFollowing(BaseAPIException):
    """A "following" row already exists for this site."""

    def __init__(self, site_url: str, message: str = "Already following this site"):
        super().__init__(
            status_code=status.HTTP_409_CONFLICT,
            error_code="CONFLICT",
            message=message,
            details={"site_url": site_url}
        )


class UpstreamServiceError(BaseAPIException):
    """A remote site or external service call failed."""

    def __init__(self, service: str, message: Optional[str] = None):
        if message is None:
            message = f"Request to {service} failed"
        super().__init__(
            status_code=status.HTTP_502_BAD_GATEWAY,
            error_code="UPSTREAM_ERROR",
            message=message,
            details={"service": service}
        )


# ============ Resource Not Found Exceptions ============

class ResourceNotFound(BaseAPIException):
    """Resource does not exist or is not visible to the caller."""

    def __init__(self, resource_type: str, resource_id: Any, message: Optional[str] = None):
        if message is None:
            message = f"{resource_type} not found"
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            error_code="RESOURCE_NOT_FOUND",
            message=message,
            details={"resource_type": resource_type, "resource_id": str(resource_id)}
        )


# ============ Validation Exceptions ============

class ValidationError(BaseAPIException):
    """Validation error."""

    def __init__(self, field: str, message: str):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            error_code="VALIDATION_ERROR",
            message=message,
            details={"field": field}
        )


class InvalidOperation(BaseAPIException):
    """Invalid operation."""

    def __init__(self, message: str = "Invalid operation"):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            error_code="INVALID_OPERATION",
            message=message
        )
