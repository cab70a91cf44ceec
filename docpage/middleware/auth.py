"""Authentication middleware and dependencies"""
import json
import logging
import re
from typing import Mapping, Optional
from urllib.parse import unquote

from fastapi import Depends, Request
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from docpage.core.config import settings
from docpage.core.dependencies import get_db
from docpage.errors.exceptions import (
    MissingUserIdException,
    NotAdminException,
    UnauthorizedException,
    UserNotFoundException,
)
from docpage.models.user import User
from docpage.schemas.auth_schemas import AuthResult
from docpage.services.identity_service import decode_access_token, get_user_by_id, is_admin

logger = logging.getLogger(__name__)

oauth2_scheme = OAuth2PasswordBearer(tokenUrl=f"{settings.API_V1_STR}/admin-login", auto_error=False)

_SESSION_COOKIE = re.compile(r"^sb-.+-auth-token$")
_ACCESS_TOKEN_COOKIE = re.compile(r"^sb-.+-auth-token-access-token$")


def verify_admin(db: Session, user_id: Optional[str], token: Optional[str] = None) -> User:
    """
    Admin gate shared by every admin-only endpoint.

    1. userId missing                      → 400
    2. bearer token invalid / other user   → 401
    3. identity lookup fails               → 401
    4. no "admin" role row                 → 403
    """
    if not user_id:
        raise MissingUserIdException()

    if token:
        token_data = decode_access_token(token)
        if token_data is None or token_data.user_id != user_id:
            logger.warning(f"Admin gate: bearer token does not match userId {user_id}",
                           extra={"user_id": user_id})
            raise UnauthorizedException(detail="Invalid or mismatched credentials")
    elif settings.REQUIRE_BEARER_FOR_ADMIN:
        raise UnauthorizedException(detail="Bearer token required")

    user = get_user_by_id(db, user_id)
    if user is None:
        raise UserNotFoundException()

    if not is_admin(db, user.id):
        logger.warning("Admin gate: access denied", extra={"user_id": user.id})
        raise NotAdminException()

    return user


async def require_admin(
    request: Request,
    token: Optional[str] = Depends(oauth2_scheme),
    db: Session = Depends(get_db)
) -> User:
    """Dependency: read userId from the JSON body and apply the admin gate"""
    try:
        body = await request.json()
    except ValueError:
        body = {}
    user_id = body.get("userId") if isinstance(body, dict) else None
    return verify_admin(db, user_id, token)


# ── request-scoped identity ───────────────────────────────────────────────────

def _token_from_cookie_value(raw: str) -> Optional[str]:
    value = unquote(raw)
    try:
        data = json.loads(value)
    except ValueError:
        return value or None
    if isinstance(data, dict):
        return data.get("access_token") or data.get("accessToken")
    return None


def extract_access_token(authorization: Optional[str], cookies: Mapping[str, str]) -> Optional[str]:
    """
    Find an access token in, by priority:
      * ``Authorization: Bearer <token>``
      * ``sb-<ref>-auth-token-access-token`` cookie
      * ``sb-<ref>-auth-token`` cookie (JSON session or raw JWT)
    """
    if authorization:
        match = re.match(r"Bearer\s+(.+)", authorization.strip())
        if match:
            return match.group(1).strip()

    for name, value in cookies.items():
        if _ACCESS_TOKEN_COOKIE.match(name) and value:
            return unquote(value)

    for name, value in cookies.items():
        if _SESSION_COOKIE.match(name) and value:
            token = _token_from_cookie_value(value)
            if token:
                return token

    return None


def resolve_auth_result(db: Session, authorization: Optional[str], cookies: Mapping[str, str]) -> AuthResult:
    """Compute the caller's AuthResult. Never raises for bad credentials."""
    token = extract_access_token(authorization, cookies)
    if not token:
        return AuthResult()

    token_data = decode_access_token(token)
    if token_data is None or not token_data.user_id:
        return AuthResult()

    user = get_user_by_id(db, token_data.user_id)
    if user is None:
        return AuthResult()

    return AuthResult(user_id=user.id, is_admin=is_admin(db, user.id), is_authenticated=True)


def get_auth_result(request: Request, db: Session = Depends(get_db)) -> AuthResult:
    """Dependency wrapper around resolve_auth_result"""
    return resolve_auth_result(db, request.headers.get("Authorization"), request.cookies)
