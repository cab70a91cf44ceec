"""Landing page request/response schemas"""
from datetime import datetime
from pydantic import BaseModel
from typing import Any, Dict, List, Optional


class AdminRequest(BaseModel):
    """Any admin-gated body carries the caller's userId"""
    userId: Optional[str] = None


class AdminUpdateStatusRequest(AdminRequest):
    landingPageId: Optional[str] = None
    status: Optional[str] = None


class LandingPageIdRequest(BaseModel):
    landingPageId: Optional[str] = None


class AdminLandingPage(BaseModel):
    """Row of the admin listing"""
    id: str
    subdomain: str
    custom_domain: Optional[str] = None
    chosen_domain: Optional[str] = None
    cpf: Optional[str] = None
    status: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    published_at: Optional[datetime] = None
    user_id: Optional[str] = None
    briefing_data: Dict[str, Any] = {}
    user_email: Optional[str] = None
    display_domain: str
    has_custom_domain: bool = False
    whatsapp: Optional[str] = None


class AdminLandingPageList(BaseModel):
    data: List[AdminLandingPage]


class SuccessResponse(BaseModel):
    success: bool = True


class StaticHtmlResult(BaseModel):
    success: bool = True
    publicUrl: str
    subdomain: str


class BatchItemResult(BaseModel):
    landingPageId: str
    subdomain: str
    success: bool
    error: Optional[str] = None
