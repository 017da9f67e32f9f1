from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from models.domain import SweepStatus


class CredentialUpdate(BaseModel):
    api_key: str = Field(..., min_length=1, description="Gemini API key to store")


class CredentialStatus(BaseModel):
    configured: bool
    is_encrypted: Optional[bool] = None
    updated_at: Optional[datetime] = None


class SweepRequest(BaseModel):
    html: str = Field(..., description="Search-results page markup to sweep")


class SweepResponse(BaseModel):
    status: SweepStatus
    html: str
    brands: List[str] = Field(default_factory=list)
    decisions: Dict[str, Any] = Field(default_factory=dict)
    removed: List[str] = Field(default_factory=list)
    error: Optional[str] = None
