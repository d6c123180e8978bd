"""
Team Chat API - Custom Exceptions
"""

from typing import Optional, Dict, Any
from fastapi import HTTPException, status


class TeamChatException(HTTPException):
    """Base exception for Team Chat API."""

    def __init__(
        self,
        status_code: int,
        detail: str,
        error_code: Optional[str] = None,
        extra: Optional[Dict[str, Any]] = None
    ):
        super().__init__(status_code=status_code, detail=detail)
        self.error_code = error_code
        self.extra = extra or {}


class UnauthorizedError(TeamChatException):
    """Missing identity, or identity lacks the required membership or role."""

    def __init__(self, detail: str = "Unauthorized"):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            error_code="UNAUTHORIZED"
        )


class NotFoundError(TeamChatException):
    """Resource not found."""

    def __init__(self, resource: str, identifier: str = None):
        detail = f"{resource} not found"
        if identifier:
            detail = f"{resource} '{identifier}' not found"
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=detail,
            error_code="NOT_FOUND"
        )


class InvalidJoinCodeError(TeamChatException):
    """Supplied join code does not match the workspace."""

    def __init__(self, detail: str = "Invalid join code"):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=detail,
            error_code="INVALID_CODE"
        )


class AlreadyMemberError(TeamChatException):
    """Join attempted by an existing member."""

    def __init__(self, detail: str = "Already a member of this workspace"):
        super().__init__(
            status_code=status.HTTP_409_CONFLICT,
            detail=detail,
            error_code="ALREADY_MEMBER"
        )


class ValidationError(TeamChatException):
    """Validation error."""

    def __init__(self, detail: str, field: str = None):
        super().__init__(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=detail,
            error_code="VALIDATION_ERROR",
            extra={"field": field} if field else {}
        )


class StoreError(TeamChatException):
    """Document store operation error."""

    def __init__(self, operation: str, detail: str = None):
        super().__init__(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=detail or f"Error calling {operation}",
            error_code="STORE_ERROR",
            extra={"operation": operation}
        )
