"""Authentication and session schemas"""
from pydantic import BaseModel, Field
from typing import Any, Dict, Optional


class SendOTPRequest(BaseModel):
    """Body for send-otp. Fields are validated in the service so the error
    messages and status codes stay under our control."""
    email: Optional[str] = None
    name: Optional[str] = None


class VerifyOTPRequest(BaseModel):
    email: Optional[str] = None
    code: Optional[str] = None


class AdminLoginRequest(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None


class SessionUser(BaseModel):
    id: str
    email: str
    user_metadata: Dict[str, Any] = Field(default_factory=dict)


class AuthSession(BaseModel):
    """Access/refresh pair minted by redeeming a magic link"""
    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    expires_in: int
    expires_at: int
    user: SessionUser


class TokenData(BaseModel):
    """Token data schema for JWT payload"""
    user_id: Optional[str] = None
    email: Optional[str] = None


class SendOTPResponse(BaseModel):
    success: bool = True
    message: str


class VerifyOTPResponse(BaseModel):
    success: bool = True
    message: str
    user_id: str
    session: Optional[AuthSession] = None


class AdminLoginResponse(BaseModel):
    success: bool = True
    session: AuthSession
    user: SessionUser
    isAdmin: bool = True


class AuthResult(BaseModel):
    """Request-scoped identity, computed fresh per request and never stored"""
    user_id: Optional[str] = None
    is_admin: bool = False
    is_authenticated: bool = False
