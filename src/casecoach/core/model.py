"""
Data model for CaseCoach.

Case templates, sessions and messages are the records the persistence
layer owns; ProgressMetrics and EngineOutput are transient values the
coaching engine produces for a single turn.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional


# =============================================================================
# ENUMERATIONS
# =============================================================================

DIFFICULTIES = ["beginner", "intermediate", "advanced"]

SESSION_ACTIVE = "active"
SESSION_COMPLETED = "completed"
SESSION_ABANDONED = "abandoned"
SESSION_STATUSES = [SESSION_ACTIVE, SESSION_COMPLETED, SESSION_ABANDONED]
TERMINAL_STATUSES = (SESSION_COMPLETED, SESSION_ABANDONED)

ROLE_USER = "user"
ROLE_ASSISTANT = "assistant"
ROLE_SYSTEM = "system"
MESSAGE_ROLES = [ROLE_USER, ROLE_ASSISTANT, ROLE_SYSTEM]

MAX_MESSAGE_LENGTH = 2000
MIN_DURATION_MINUTES = 5
MAX_DURATION_MINUTES = 180


def new_id() -> str:
    return uuid.uuid4().hex[:12]


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


# =============================================================================
# PERSISTED RECORDS
# =============================================================================

@dataclass
class CaseTemplate:
    """A case scenario users can practice. Read-only to the engine."""
    title: str
    description: str
    industry: str
    difficulty: str
    estimated_duration: int
    system_prompt: str
    initial_message: str
    tags: List[str] = field(default_factory=list)
    is_active: bool = True
    created_by: Optional[str] = None
    id: str = field(default_factory=new_id)
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "industry": self.industry,
            "difficulty": self.difficulty,
            "estimated_duration": self.estimated_duration,
            "system_prompt": self.system_prompt,
            "initial_message": self.initial_message,
            "tags": list(self.tags),
            "is_active": self.is_active,
            "created_by": self.created_by,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }


@dataclass
class Session:
    """One user's practice run on a case template."""
    user_id: str
    case_template_id: str
    status: str = SESSION_ACTIVE
    started_at: datetime = field(default_factory=utcnow)
    completed_at: Optional[datetime] = None
    feedback: Optional[str] = None
    score: Optional[int] = None
    id: str = field(default_factory=new_id)

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "case_template_id": self.case_template_id,
            "status": self.status,
            "started_at": self.started_at.isoformat(),
            "completed_at": self.completed_at.isoformat() if self.completed_at else None,
            "feedback": self.feedback,
            "score": self.score,
        }


@dataclass
class Message:
    """One conversation turn. Append-only."""
    session_id: str
    role: str
    content: str
    timestamp: datetime = field(default_factory=utcnow)
    metadata: Optional[Dict[str, Any]] = None
    id: str = field(default_factory=new_id)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "session_id": self.session_id,
            "role": self.role,
            "content": self.content,
            "timestamp": self.timestamp.isoformat(),
            "metadata": dict(self.metadata) if self.metadata else None,
        }


# =============================================================================
# ENGINE VALUES
# =============================================================================

@dataclass
class ProgressMetrics:
    """Engagement/structure snapshot of a user's messages."""
    engagement: float = 0.0
    structure: float = 0.0
    message_count: int = 0
    average_message_length: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "engagement": round(self.engagement, 2),
            "structure": round(self.structure, 2),
            "message_count": self.message_count,
            "average_message_length": round(self.average_message_length, 2),
        }


@dataclass
class EngineOutput:
    """Result of generating one coach reply."""
    content: str
    thinking: Optional[str] = None
    suggestions: Optional[List[str]] = None
    score: Optional[int] = None
    feedback: Optional[str] = None

    def metadata(self) -> Dict[str, Any]:
        """Metadata stored on the assistant message."""
        return {
            "thinking": self.thinking,
            "suggestions": list(self.suggestions) if self.suggestions is not None else None,
        }

    def to_dict(self) -> Dict[str, Any]:
        return {
            "content": self.content,
            "thinking": self.thinking,
            "suggestions": self.suggestions,
            "score": self.score,
            "feedback": self.feedback,
        }


@dataclass
class TurnResult:
    """Records produced by one user turn, ready for persistence."""
    user_message: Message
    assistant_message: Message
    stage: str
    progress: ProgressMetrics
    session_update: Optional[Dict[str, Any]] = None

    @property
    def scored(self) -> bool:
        return self.session_update is not None
