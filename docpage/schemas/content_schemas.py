"""Content generation schemas"""
from enum import Enum
from pydantic import BaseModel, ConfigDict
from typing import Any, List, Optional


class GenerationType(str, Enum):
    GENERATE = "generate"
    REFINE = "refine"


class Briefing(BaseModel):
    """Wizard answers used to build the generation prompt"""
    model_config = ConfigDict(extra="allow")

    name: Optional[str] = None
    specialty: Optional[str] = None
    crm: Optional[str] = None
    crmState: Optional[str] = None
    targetAudience: Optional[str] = None
    mainServices: Optional[str] = None
    bio: Optional[str] = None
    tone: Optional[str] = None
    addresses: Optional[List[Any]] = None
    contactEmail: Optional[str] = None
    contactPhone: Optional[str] = None


class GenerateContentRequest(BaseModel):
    type: Optional[str] = None
    briefing: Optional[Briefing] = None
    instruction: Optional[str] = None
    currentContent: Optional[Any] = None
    currentDesign: Optional[Any] = None
    currentVisibility: Optional[Any] = None
