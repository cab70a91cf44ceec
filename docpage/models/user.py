"""Identity models: users and their role grants"""
import uuid

from sqlalchemy import Column, DateTime, ForeignKey, Integer, JSON, String, UniqueConstraint
from sqlalchemy.sql import func
from enum import Enum
from docpage.db.base import Base


class AppRole(str, Enum):
    """Role names stored in user_roles.role"""
    ADMIN = "admin"
    USER = "user"


def _new_user_id() -> str:
    return str(uuid.uuid4())


class User(Base):
    """
    Identity record. Passwordless users (OTP sign-in) have no hashed_password;
    the bootstrap admin account has one for admin-login.
    """
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=_new_user_id)
    email = Column(String(255), unique=True, nullable=False, index=True)
    hashed_password = Column(String(255), nullable=True)
    full_name = Column(String(255), nullable=True)
    user_metadata = Column(JSON, nullable=False, default=dict)

    email_confirmed_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    last_sign_in_at = Column(DateTime(timezone=True), nullable=True)

    def __repr__(self):
        return f"<User(id={self.id!r}, email={self.email!r})>"


class UserRole(Base):
    """Role grant. Only role="admin" is ever checked."""
    __tablename__ = "user_roles"
    __table_args__ = (UniqueConstraint("user_id", "role", name="uq_user_roles_user_role"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    role = Column(String(50), nullable=False, default=AppRole.USER.value)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    def __repr__(self):
        return f"<UserRole(user_id={self.user_id!r}, role={self.role!r})>"
