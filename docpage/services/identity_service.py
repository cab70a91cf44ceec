"""Identity service: users, role grants, magic links and JWT sessions.

Functions here add/flush but never commit; the calling service owns the
transaction so multi-step flows (OTP verification, admin login) either land
completely or not at all.
"""
import hashlib
import logging
import secrets
from datetime import datetime, timedelta, timezone
from typing import List, Optional

from jose import JWTError, jwt
from passlib.context import CryptContext
from sqlalchemy.orm import Session

from docpage.core.config import settings
from docpage.models.session_token import MagicLinkToken, RefreshToken
from docpage.models.user import AppRole, User, UserRole
from docpage.schemas.auth_schemas import AuthSession, SessionUser, TokenData

logger = logging.getLogger(__name__)

pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=12
)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Treat naive datetimes read back from the database as UTC"""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _hash_token(token: str) -> str:
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


# ── passwords ─────────────────────────────────────────────────────────────────

def verify_password(plain_password: str, hashed_password: Optional[str]) -> bool:
    """Verify a plain password against a hashed password"""
    if not hashed_password:
        return False  # passwordless (OTP) users have no password
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


# ── users ─────────────────────────────────────────────────────────────────────

def get_user_by_id(db: Session, user_id: str) -> Optional[User]:
    """
    Get user by ID
    """
    return db.query(User).filter(User.id == user_id).first()


def list_users(db: Session) -> List[User]:
    return db.query(User).order_by(User.created_at.asc()).all()


def find_user_by_email(db: Session, email: str) -> Optional[User]:
    """Case-insensitive match across the full user list"""
    target = email.strip().lower()
    for user in list_users(db):
        if (user.email or "").lower() == target:
            return user
    return None


def create_user(
    db: Session,
    email: str,
    user_metadata: Optional[dict] = None,
    password: Optional[str] = None,
    email_confirm: bool = True,
) -> User:
    """
    Create a new identity. The email is stored lower-cased.
    """
    db_user = User(
        email=email.strip().lower(),
        hashed_password=get_password_hash(password) if password else None,
        full_name=(user_metadata or {}).get("name"),
        user_metadata=user_metadata or {},
        email_confirmed_at=utcnow() if email_confirm else None,
        created_at=utcnow(),
    )
    db.add(db_user)
    db.flush()
    logger.info(f"Identity created: user_id={db_user.id}")
    return db_user


# ── roles ─────────────────────────────────────────────────────────────────────

def has_role(db: Session, user_id: str, role: AppRole) -> bool:
    return (
        db.query(UserRole)
        .filter(UserRole.user_id == user_id, UserRole.role == role.value)
        .first()
        is not None
    )


def is_admin(db: Session, user_id: str) -> bool:
    return has_role(db, user_id, AppRole.ADMIN)


def grant_role(db: Session, user_id: str, role: AppRole) -> UserRole:
    existing = (
        db.query(UserRole)
        .filter(UserRole.user_id == user_id, UserRole.role == role.value)
        .first()
    )
    if existing:
        return existing
    grant = UserRole(user_id=user_id, role=role.value, created_at=utcnow())
    db.add(grant)
    db.flush()
    return grant


# ── tokens ────────────────────────────────────────────────────────────────────

def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """
    Create a JWT access token
    """
    to_encode = data.copy()
    if expires_delta:
        expire = utcnow() + expires_delta
    else:
        expire = utcnow() + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)

    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_access_token(token: str) -> Optional[TokenData]:
    """
    Decode and validate a JWT access token. Returns None for anything invalid.
    """
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError as e:
        logger.info(f"JWT decode error: {str(e)}")
        return None

    user_id = payload.get("sub")
    if not user_id:
        return None
    return TokenData(user_id=str(user_id), email=payload.get("email"))


def generate_magic_link(db: Session, email: str) -> str:
    """
    Issue a single-use sign-in token for the user owning *email*.

    Returns the plain token; only its hash is stored. Raises ValueError when
    no such user exists.
    """
    user = find_user_by_email(db, email)
    if user is None:
        raise ValueError(f"No user registered with email {email}")

    token = secrets.token_urlsafe(32)
    db.add(MagicLinkToken(
        user_id=user.id,
        token_hash=_hash_token(token),
        expires_at=utcnow() + timedelta(minutes=settings.MAGIC_LINK_EXPIRE_MINUTES),
        created_at=utcnow(),
    ))
    db.flush()
    return token


def redeem_magic_link(db: Session, token: str) -> Optional[AuthSession]:
    """
    Consume a magic-link token and mint a session. Returns None when the token
    is unknown, already used or expired.
    """
    link = (
        db.query(MagicLinkToken)
        .filter(MagicLinkToken.token_hash == _hash_token(token))
        .first()
    )
    if link is None or link.used_at is not None:
        return None
    if as_utc(link.expires_at) < utcnow():
        return None

    user = get_user_by_id(db, link.user_id)
    if user is None:
        return None

    link.used_at = utcnow()
    return create_session(db, user)


def create_session(db: Session, user: User) -> AuthSession:
    """Mint an access/refresh pair for *user* and record the sign-in"""
    expires_delta = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    access_token = create_access_token(
        data={"sub": user.id, "email": user.email, "role": "authenticated"},
        expires_delta=expires_delta,
    )

    refresh_token = secrets.token_urlsafe(32)
    db.add(RefreshToken(
        user_id=user.id,
        token_hash=_hash_token(refresh_token),
        expires_at=utcnow() + timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS),
        created_at=utcnow(),
    ))

    now = utcnow()
    user.last_sign_in_at = now
    db.flush()

    return AuthSession(
        access_token=access_token,
        refresh_token=refresh_token,
        expires_in=int(expires_delta.total_seconds()),
        expires_at=int((now + expires_delta).timestamp()),
        user=to_session_user(user),
    )


def to_session_user(user: User) -> SessionUser:
    return SessionUser(id=user.id, email=user.email, user_metadata=user.user_metadata or {})


# ── admin bootstrap ───────────────────────────────────────────────────────────

def ensure_admin_identity(db: Session, email: str, password: str) -> User:
    """
    Find or create the admin account for *email*, make sure its stored
    password matches *password*, and grant it the admin role.
    """
    user = find_user_by_email(db, email)
    if user is None:
        user = create_user(
            db,
            email=email,
            user_metadata={"name": "Administrador", "is_admin": True},
            password=password,
        )
    elif not verify_password(password, user.hashed_password):
        user.hashed_password = get_password_hash(password)

    grant_role(db, user.id, AppRole.ADMIN)
    return user
