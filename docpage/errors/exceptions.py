"""Custom exceptions for error handling"""
from typing import Any, Optional

from fastapi import HTTPException, status


class BaseHTTPException(HTTPException):
    """Base exception class for all custom HTTP exceptions"""
    def __init__(self, detail: str = None, headers: dict = None, details: Optional[Any] = None):
        super().__init__(
            status_code=self.status_code,
            detail=detail or self.detail,
            headers=headers
        )
        # Extra payload rendered as "details" next to "error"
        self.details = details


class BadRequestException(BaseHTTPException):
    """400 Bad Request"""
    status_code = status.HTTP_400_BAD_REQUEST
    detail = "Bad request"


class UnauthorizedException(BaseHTTPException):
    """401 Unauthorized"""
    status_code = status.HTTP_401_UNAUTHORIZED
    detail = "Not authenticated"

    def __init__(self, detail: str = None, details: Optional[Any] = None):
        super().__init__(
            detail=detail,
            headers={"WWW-Authenticate": "Bearer"},
            details=details,
        )


class ForbiddenException(BaseHTTPException):
    """403 Forbidden"""
    status_code = status.HTTP_403_FORBIDDEN
    detail = "Forbidden: Insufficient permissions"


class NotFoundException(BaseHTTPException):
    """404 Not Found"""
    status_code = status.HTTP_404_NOT_FOUND
    detail = "Resource not found"


class TooManyRequestsException(BaseHTTPException):
    """429 Too Many Requests"""
    status_code = status.HTTP_429_TOO_MANY_REQUESTS
    detail = "Too many requests"


class InternalServerException(BaseHTTPException):
    """500 Internal Server Error"""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    detail = "Internal server error"


class DatabaseException(InternalServerException):
    """Database operation failed"""
    detail = "Database operation failed"


class UpstreamResponseException(InternalServerException):
    """Third-party API answered with something we cannot use"""
    detail = "Upstream service returned an invalid response"


# ── OTP verification ──────────────────────────────────────────────────────────

class OTPNotFoundException(BadRequestException):
    detail = "Code not found. Request a new code."


class OTPExpiredException(BadRequestException):
    detail = "Code expired. Request a new code."


class OTPAlreadyUsedException(BadRequestException):
    detail = "Code already used. Request a new code."


class OTPMismatchException(BadRequestException):
    detail = "Incorrect code. Try again."


# ── admin gate ────────────────────────────────────────────────────────────────

class MissingUserIdException(BadRequestException):
    detail = "userId is required"


class UserNotFoundException(UnauthorizedException):
    detail = "User not found"


class NotAdminException(ForbiddenException):
    detail = "Access denied"


# ── content generation ────────────────────────────────────────────────────────

class MalformedModelOutputException(UpstreamResponseException):
    detail = "Gemini response is not valid JSON"


# ── publish side effects ──────────────────────────────────────────────────────

class NotificationFailedException(InternalServerException):
    detail = "Failed to send notification email"


class StaticHtmlFailedException(InternalServerException):
    detail = "Failed to write static HTML"
