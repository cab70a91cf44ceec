"""OTPCode: pending passwordless sign-in codes."""
from sqlalchemy import Boolean, Column, DateTime, Integer, String
from sqlalchemy.sql import func

from docpage.db.base import Base


class OTPCode(Base):
    """
    Holds a one-time 6-digit code emailed to a user.

    Lifecycle
    ---------
    1. send-otp   → row upserted (verified=False). One row per email.
    2. verify-otp → verified=True, identity found or created, session minted,
                    row deleted, all in one transaction.
    """

    __tablename__ = "otp_codes"

    id = Column(Integer, primary_key=True, autoincrement=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    code = Column(String(6), nullable=False)
    name = Column(String(100), nullable=True)

    expires_at = Column(DateTime(timezone=True), nullable=False)
    verified = Column(Boolean, default=False, nullable=False)
    created_at = Column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    def __repr__(self) -> str:
        return (
            f"<OTPCode(id={self.id}, email={self.email!r}, "
            f"expires_at={self.expires_at}, verified={self.verified})>"
        )
