"""Domain availability schemas"""
from pydantic import BaseModel
from typing import Optional


class CheckDomainRequest(BaseModel):
    domain: Optional[str] = None


class DomainAvailability(BaseModel):
    """
    Outcome of a lookup. ``domain``/``fullDomain`` are omitted when the label
    never reached the registry or the registry answered unexpectedly.
    """
    available: bool
    domain: Optional[str] = None
    fullDomain: Optional[str] = None
    message: Optional[str] = None
    error: Optional[str] = None
    probable: bool = False
