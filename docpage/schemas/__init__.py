"""Pydantic schemas for request/response validation"""
from docpage.schemas.auth_schemas import (
    SendOTPRequest,
    VerifyOTPRequest,
    AdminLoginRequest,
    AuthSession,
    SessionUser,
    AuthResult,
)
from docpage.schemas.landing_page_schemas import (
    AdminRequest,
    AdminUpdateStatusRequest,
    LandingPageIdRequest,
)
from docpage.schemas.domain_schemas import CheckDomainRequest, DomainAvailability
from docpage.schemas.content_schemas import GenerateContentRequest, Briefing

__all__ = [
    "SendOTPRequest",
    "VerifyOTPRequest",
    "AdminLoginRequest",
    "AuthSession",
    "SessionUser",
    "AuthResult",
    "AdminRequest",
    "AdminUpdateStatusRequest",
    "LandingPageIdRequest",
    "CheckDomainRequest",
    "DomainAvailability",
    "GenerateContentRequest",
    "Briefing",
]
