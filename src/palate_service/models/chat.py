"""Chat request/response models."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class ChatRequest(BaseModel):
    email: EmailStr
    user_query: str = Field(..., alias="userQuery")
    session_id: Optional[str] = Field(None, alias="sessionId")

    model_config = ConfigDict(populate_by_name=True)


class ChatResponse(BaseModel):
    response: str
    session_id: str
    context_used: int
    degraded: list[str] = Field(default_factory=list)  # names of enrichments that failed
    timestamp: datetime
