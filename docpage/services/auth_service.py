"""Passwordless sign-in (email OTP) and admin login"""
import asyncio
import hmac
import logging
import re
import secrets
from datetime import timedelta
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from docpage.core.config import settings
from docpage.errors.exceptions import (
    BadRequestException,
    InternalServerException,
    OTPAlreadyUsedException,
    OTPExpiredException,
    OTPMismatchException,
    OTPNotFoundException,
    TooManyRequestsException,
    UnauthorizedException,
)
from docpage.models.otp import OTPCode
from docpage.schemas.auth_schemas import (
    AdminLoginResponse,
    SendOTPResponse,
    VerifyOTPResponse,
)
from docpage.services import identity_service
from docpage.services.identity_service import as_utc, utcnow
from docpage.utils.email import send_otp_email

logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+")
CODE_PATTERN = re.compile(r"[0-9]{6}")
MAX_EMAIL_LENGTH = 255
MAX_NAME_LENGTH = 100


def normalize_email(email: Optional[str]) -> str:
    return (email or "").strip().lower()


def is_valid_email(email: str) -> bool:
    return bool(EMAIL_PATTERN.fullmatch(email)) and len(email) <= MAX_EMAIL_LENGTH


def sanitize_name(name: Optional[str], email: str) -> str:
    cleaned = re.sub(r"[<>\"']", "", (name or "").strip())[:MAX_NAME_LENGTH]
    return cleaned or email.split("@")[0]


def generate_otp() -> str:
    """Return a random 6-digit code that never starts with 0."""
    return str(100000 + secrets.randbelow(900000))


async def _slow_down(delay_ms: int) -> None:
    if delay_ms > 0:
        await asyncio.sleep(delay_ms / 1000)


# ── send-otp ──────────────────────────────────────────────────────────────────

def send_otp(db: Session, email: Optional[str], name: Optional[str]) -> SendOTPResponse:
    """
    Create (or replace) the single pending code for *email* and mail it.

    Raises BadRequestException for bad input, TooManyRequestsException inside
    the resend cooldown and InternalServerException if the email cannot be
    delivered (the stored code is removed in that case).
    """
    raw_email = normalize_email(email)
    if not raw_email:
        raise BadRequestException(detail="Email is required")
    if not is_valid_email(raw_email):
        raise BadRequestException(detail="Invalid email format")

    display_name = sanitize_name(name, raw_email)
    now = utcnow()

    otp_row = db.query(OTPCode).filter(OTPCode.email == raw_email).first()
    if otp_row is not None and otp_row.created_at is not None:
        elapsed = (now - as_utc(otp_row.created_at)).total_seconds()
        if elapsed < settings.OTP_RESEND_COOLDOWN_SECONDS:
            raise TooManyRequestsException(
                detail="A code was requested recently. Please wait before trying again."
            )

    code = generate_otp()
    expires_at = now + timedelta(minutes=settings.OTP_EXPIRE_MINUTES)

    if otp_row is None:
        otp_row = OTPCode(email=raw_email)
        db.add(otp_row)
    otp_row.code = code
    otp_row.name = display_name
    otp_row.expires_at = expires_at
    otp_row.verified = False
    otp_row.created_at = now
    db.commit()

    if not send_otp_email(to=raw_email, otp=code):
        logger.warning(f"[SendOTP] Email delivery failed for {raw_email}, discarding code")
        db.delete(otp_row)
        db.commit()
        raise InternalServerException(detail="Failed to send verification email")

    return SendOTPResponse(message="Verification code sent to your email.")


# ── verify-otp ────────────────────────────────────────────────────────────────

async def verify_otp(db: Session, email: Optional[str], code: Optional[str]) -> VerifyOTPResponse:
    """
    Check *code* against the stored record for *email*, then sign the user in.

    Failure paths (all HTTP 400):
      * empty fields / bad email format
      * malformed code          → delayed
      * no record               → delayed
      * expired / already used
      * wrong code              → delayed (longer)

    On success the record is marked verified, the identity found or created,
    a magic link generated and redeemed into a session, and the record
    deleted, all in a single commit. Any database failure rolls the whole
    thing back and leaves the code usable.
    """
    raw_email = normalize_email(email)
    raw_code = (code or "").strip()

    if not raw_email or not raw_code:
        raise BadRequestException(detail="Email and code are required")

    if not is_valid_email(raw_email):
        raise BadRequestException(detail="Invalid email format")

    if not CODE_PATTERN.fullmatch(raw_code):
        await _slow_down(settings.OTP_INVALID_FORMAT_DELAY_MS)
        raise BadRequestException(detail="Invalid code")

    otp_row = db.query(OTPCode).filter(OTPCode.email == raw_email).first()
    if otp_row is None:
        await _slow_down(settings.OTP_INVALID_FORMAT_DELAY_MS)
        raise OTPNotFoundException()

    if as_utc(otp_row.expires_at) < utcnow():
        raise OTPExpiredException()

    if otp_row.verified:
        raise OTPAlreadyUsedException()

    if not hmac.compare_digest(otp_row.code, raw_code):
        await _slow_down(settings.OTP_MISMATCH_DELAY_MS)
        raise OTPMismatchException()

    try:
        otp_row.verified = True

        user = identity_service.find_user_by_email(db, raw_email)
        if user is None:
            user = identity_service.create_user(
                db,
                email=raw_email,
                user_metadata={"name": otp_row.name or raw_email.split("@")[0]},
                email_confirm=True,
            )

        token = identity_service.generate_magic_link(db, raw_email)
        session = identity_service.redeem_magic_link(db, token)
        if session is None:
            logger.error(f"[VerifyOTP] Magic link redemption produced no session for {user.id}",
                         extra={"user_id": user.id})

        db.delete(otp_row)
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error(f"[VerifyOTP] Sign-in failed for {raw_email}: {exc}")
        raise InternalServerException(detail="Failed to create account")

    logger.info(f"[VerifyOTP] Code verified for user {user.id}")
    return VerifyOTPResponse(
        message="Code verified successfully!",
        user_id=user.id,
        session=session,
    )


# ── admin-login ───────────────────────────────────────────────────────────────

async def admin_login(db: Session, email: Optional[str], password: Optional[str]) -> AdminLoginResponse:
    """
    Sign in the configured administrator, creating the account and its admin
    role on first use.
    """
    if not settings.ADMIN_EMAIL or not settings.ADMIN_PASSWORD:
        logger.error("Admin credentials not configured (ADMIN_EMAIL / ADMIN_PASSWORD)")
        raise InternalServerException(detail="Admin login is not configured")

    input_email = normalize_email(email)
    input_password = (password or "").strip()

    if not EMAIL_PATTERN.fullmatch(input_email):
        raise BadRequestException(detail="Invalid email format")

    admin_email = normalize_email(settings.ADMIN_EMAIL)
    email_ok = hmac.compare_digest(input_email.encode("utf-8"), admin_email.encode("utf-8"))
    password_ok = hmac.compare_digest(input_password.encode("utf-8"), settings.ADMIN_PASSWORD.encode("utf-8"))
    if not (email_ok and password_ok):
        await _slow_down(settings.ADMIN_LOGIN_FAILURE_DELAY_MS)
        raise UnauthorizedException(detail="Invalid credentials")

    try:
        user = identity_service.ensure_admin_identity(db, input_email, input_password)
        if not identity_service.verify_password(input_password, user.hashed_password):
            db.rollback()
            raise InternalServerException(detail="Failed to authenticate admin")
        session = identity_service.create_session(db, user)
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error(f"[AdminLogin] Failed: {exc}")
        raise InternalServerException(detail="Failed to create admin session")

    logger.warning("Admin signed in", extra={"user_id": user.id})
    return AdminLoginResponse(session=session, user=session.user)
