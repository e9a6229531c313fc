"""
Pydantic request/response models for the CaseCoach API.
"""

from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field, field_validator

from ..core.model import MAX_DURATION_MINUTES, MAX_MESSAGE_LENGTH, MIN_DURATION_MINUTES

Difficulty = Literal["beginner", "intermediate", "advanced"]
SessionStatus = Literal["active", "completed", "abandoned"]


def _strip(value: Any) -> Any:
    return value.strip() if isinstance(value, str) else value


# =============================================================================
# REQUEST MODELS
# =============================================================================

class CaseTemplateCreate(BaseModel):
    """Admin request to create a case template."""
    title: str = Field(..., min_length=1, max_length=100)
    description: str = Field(..., min_length=1, max_length=500)
    industry: str = Field(..., min_length=1, max_length=50)
    difficulty: Difficulty
    estimated_duration: int = Field(..., ge=MIN_DURATION_MINUTES, le=MAX_DURATION_MINUTES,
                                    description="Minutes")
    system_prompt: str = Field(..., min_length=1, max_length=2000)
    initial_message: str = Field(..., min_length=1, max_length=1000)
    tags: List[str] = Field(default_factory=list, max_length=10)
    is_active: bool = True

    @field_validator("title", "description", "industry", "system_prompt", "initial_message",
                     mode="before")
    @classmethod
    def strip_text(cls, v):
        return _strip(v)


class CaseTemplateUpdate(BaseModel):
    """Partial update of a case template; omitted fields are unchanged."""
    title: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = Field(None, min_length=1, max_length=500)
    industry: Optional[str] = Field(None, min_length=1, max_length=50)
    difficulty: Optional[Difficulty] = None
    estimated_duration: Optional[int] = Field(None, ge=MIN_DURATION_MINUTES, le=MAX_DURATION_MINUTES)
    system_prompt: Optional[str] = Field(None, min_length=1, max_length=2000)
    initial_message: Optional[str] = Field(None, min_length=1, max_length=1000)
    tags: Optional[List[str]] = Field(None, max_length=10)
    is_active: Optional[bool] = None

    @field_validator("title", "description", "industry", "system_prompt", "initial_message",
                     mode="before")
    @classmethod
    def strip_text(cls, v):
        return _strip(v)


class CreateSessionRequest(BaseModel):
    """Request to start a practice session on a case."""
    case_template_id: str = Field(..., min_length=1)


class UpdateSessionRequest(BaseModel):
    """Status change or manual score/feedback edit."""
    status: Optional[SessionStatus] = None
    feedback: Optional[str] = Field(None, max_length=2000)
    score: Optional[int] = Field(None, ge=0, le=100)


class CreateMessageRequest(BaseModel):
    """A user message for an active session."""
    session_id: str = Field(..., min_length=1)
    content: str = Field(..., min_length=1, max_length=MAX_MESSAGE_LENGTH)

    @field_validator("content", mode="before")
    @classmethod
    def strip_content(cls, v):
        return _strip(v)


# =============================================================================
# RESPONSE MODELS
# =============================================================================

class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    pages: int


class CaseTemplateData(BaseModel):
    id: str
    title: str
    description: str
    industry: str
    difficulty: str
    estimated_duration: int
    system_prompt: str
    initial_message: str
    tags: List[str]
    is_active: bool
    created_by: Optional[str] = None
    created_at: str
    updated_at: str


class SessionData(BaseModel):
    id: str
    user_id: str
    case_template_id: str
    status: str
    started_at: str
    completed_at: Optional[str] = None
    feedback: Optional[str] = None
    score: Optional[int] = None


class MessageData(BaseModel):
    id: str
    session_id: str
    role: str
    content: str
    timestamp: str
    metadata: Optional[Dict[str, Any]] = None


class CaseListResponse(BaseModel):
    cases: List[CaseTemplateData]
    pagination: Pagination


class SessionListResponse(BaseModel):
    sessions: List[SessionData]
    pagination: Pagination


class SessionDetailResponse(BaseModel):
    session: SessionData
    case_template: Optional[CaseTemplateData] = None
    messages: List[MessageData]
    summary: Dict[str, Any]


class ProgressData(BaseModel):
    engagement: float
    structure: float
    message_count: int
    average_message_length: float


class MessageExchangeResponse(BaseModel):
    """Both records created by one turn."""
    user_message: MessageData
    assistant_message: MessageData
    stage: str
    progress: ProgressData
    score: Optional[int] = None
    feedback: Optional[str] = None


class SessionProgressResponse(BaseModel):
    progress: ProgressData
    radar_chart: str


class ProgressResponse(BaseModel):
    stats: Dict[str, Any]
    score_trend_chart: str
