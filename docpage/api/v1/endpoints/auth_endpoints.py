"""Sign-in endpoints: email OTP, admin login and caller identity"""
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
import logging

from docpage.core.dependencies import get_db
from docpage.middleware.auth import get_auth_result
from docpage.schemas.auth_schemas import (
    AdminLoginRequest,
    AdminLoginResponse,
    AuthResult,
    SendOTPRequest,
    SendOTPResponse,
    VerifyOTPRequest,
    VerifyOTPResponse,
)
from docpage.services import auth_service

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/send-otp", response_model=SendOTPResponse, status_code=status.HTTP_200_OK)
async def send_otp(body: SendOTPRequest, db: Session = Depends(get_db)):
    """
    ## Request a sign-in code

    **Role:** Public.

    Emails a 6-digit code valid for 10 minutes. A new request for the same
    email within 60 seconds is rejected with **429**. Requesting again after
    that replaces the previous code.

    | Field | Type   | Description                           |
    |-------|--------|---------------------------------------|
    | email | string | Where the code is sent                |
    | name  | string | Display name for new accounts (opt.)  |
    """
    return auth_service.send_otp(db, body.email, body.name)


@router.post("/verify-otp", response_model=VerifyOTPResponse, status_code=status.HTTP_200_OK)
async def verify_otp(body: VerifyOTPRequest, db: Session = Depends(get_db)):
    """
    ## Exchange a code for a session

    **Role:** Public.

    On success the account is created if needed and
    `{success, message, user_id, session}` is returned. Every failure is a
    **400** with `{error}`; malformed or wrong codes are answered slowly.
    """
    return await auth_service.verify_otp(db, body.email, body.code)


@router.post("/admin-login", response_model=AdminLoginResponse, status_code=status.HTTP_200_OK)
async def admin_login(body: AdminLoginRequest, db: Session = Depends(get_db)):
    """
    ## Administrator sign-in

    Checks the configured admin credentials and returns a session for the
    admin account. Wrong credentials → **401** after a short delay.
    """
    return await auth_service.admin_login(db, body.email, body.password)


@router.get("/auth-status", response_model=AuthResult)
async def auth_status(auth: AuthResult = Depends(get_auth_result)):
    """Identity of the caller, from the bearer header or the session cookie"""
    return auth
