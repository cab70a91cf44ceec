"""Error handling module"""
from docpage.errors.exceptions import (
    BadRequestException,
    UnauthorizedException,
    ForbiddenException,
    NotFoundException,
    TooManyRequestsException,
    InternalServerException,
    DatabaseException,
    UpstreamResponseException,
    OTPNotFoundException,
    OTPExpiredException,
    OTPAlreadyUsedException,
    OTPMismatchException,
    MissingUserIdException,
    UserNotFoundException,
    NotAdminException,
    MalformedModelOutputException,
    NotificationFailedException,
    StaticHtmlFailedException,
)

__all__ = [
    "BadRequestException",
    "UnauthorizedException",
    "ForbiddenException",
    "NotFoundException",
    "TooManyRequestsException",
    "InternalServerException",
    "DatabaseException",
    "UpstreamResponseException",
    "OTPNotFoundException",
    "OTPExpiredException",
    "OTPAlreadyUsedException",
    "OTPMismatchException",
    "MissingUserIdException",
    "UserNotFoundException",
    "NotAdminException",
    "MalformedModelOutputException",
    "NotificationFailedException",
    "StaticHtmlFailedException",
]
