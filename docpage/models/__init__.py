"""Database models"""
from docpage.models.user import User, UserRole, AppRole
from docpage.models.session_token import MagicLinkToken, RefreshToken
from docpage.models.otp import OTPCode
from docpage.models.landing_page import LandingPage, LandingPageStatus
from docpage.models.publish_event import PublishEvent, PublishEventKind, PublishEventStatus

__all__ = [
    "User", "UserRole", "AppRole",
    "MagicLinkToken", "RefreshToken", "OTPCode",
    "LandingPage", "LandingPageStatus",
    "PublishEvent", "PublishEventKind", "PublishEventStatus",
]
