"""
REST API routes for CaseCoach.

Identity comes from the X-User-Id header and admin rights from
X-User-Role: admin; verifying those claims is left to the gateway in
front of this service. Every route is rate limited per client, and
POST /api/messages has its own tighter limit (see ratelimit.py).
"""

from __future__ import annotations

import logging
import math
import re
import time
from dataclasses import dataclass
from typing import Optional

import numpy as np
from fastapi import APIRouter, Depends, Header, HTTPException, Query, Request, Response

from ..config import Settings
from ..content.sample_cases import build_sample_cases
from ..core.engine import CoachingEngine
from ..core.errors import (
    EngineContractError,
    InvalidTransitionError,
    NotFoundError,
    SessionClosedError,
)
from ..core.lifecycle import session_summary
from ..core.model import CaseTemplate
from ..core.progress import assess_progress
from ..core.reporting import user_progress
from ..viz.charts import create_progress_radar, create_score_trend_chart
from .schemas import (
    CaseListResponse,
    CaseTemplateCreate,
    CaseTemplateData,
    CaseTemplateUpdate,
    CreateMessageRequest,
    CreateSessionRequest,
    Difficulty,
    MessageData,
    MessageExchangeResponse,
    Pagination,
    ProgressData,
    ProgressResponse,
    SessionData,
    SessionDetailResponse,
    SessionListResponse,
    SessionProgressResponse,
    SessionStatus,
    UpdateSessionRequest,
)
from .ratelimit import RateLimiter
from .store import SessionStore

logger = logging.getLogger(__name__)

# Globals (initialized lazily, replaced in tests)
session_store: Optional[SessionStore] = None
coaching_engine: Optional[CoachingEngine] = None
api_limiter: Optional[RateLimiter] = None
message_limiter: Optional[RateLimiter] = None

_UNSAFE_CHARS = re.compile(r"[<>\"'&]")


def get_store() -> SessionStore:
    global session_store
    if session_store is None:
        session_store = SessionStore()
        if Settings.from_env().seed_cases:
            for case in build_sample_cases():
                session_store.add_case(case)
    return session_store


def get_engine() -> CoachingEngine:
    global coaching_engine
    if coaching_engine is None:
        coaching_engine = CoachingEngine(rng=np.random.default_rng(Settings.from_env().seed))
    return coaching_engine


def sanitize_input(text: str) -> str:
    """Trim and drop characters that could be interpreted as markup."""
    return _UNSAFE_CHARS.sub("", text.strip())


@dataclass
class Identity:
    user_id: str
    is_admin: bool = False


def get_identity(
    x_user_id: Optional[str] = Header(None),
    x_user_role: Optional[str] = Header(None),
) -> Identity:
    if not x_user_id:
        raise HTTPException(401, "Authentication required")
    return Identity(user_id=x_user_id, is_admin=(x_user_role or "").lower() == "admin")


def require_admin(identity: Identity = Depends(get_identity)) -> Identity:
    if not identity.is_admin:
        raise HTTPException(403, "Admin access required")
    return identity


def get_api_limiter() -> RateLimiter:
    global api_limiter
    if api_limiter is None:
        settings = Settings.from_env()
        api_limiter = RateLimiter("api", settings.api_rate_limit, settings.rate_window)
    return api_limiter


def get_message_limiter() -> RateLimiter:
    global message_limiter
    if message_limiter is None:
        settings = Settings.from_env()
        message_limiter = RateLimiter("messages", settings.message_rate_limit, settings.rate_window)
    return message_limiter


def client_key(request: Request) -> str:
    """Rate-limit key: the caller's user id, else its remote address."""
    user_id = request.headers.get("x-user-id")
    if user_id:
        return f"user:{user_id}"
    return f"ip:{request.client.host if request.client else 'unknown'}"


def _enforce(limiter: RateLimiter, request: Request, response: Response) -> None:
    result = limiter.hit(client_key(request))
    if not result.allowed:
        raise HTTPException(429, "Too many requests", headers=result.headers())
    response.headers.update(result.headers())


def limit_api(request: Request, response: Response) -> None:
    _enforce(get_api_limiter(), request, response)


def limit_messages(request: Request, response: Response) -> None:
    _enforce(get_message_limiter(), request, response)


router = APIRouter(prefix="/api", dependencies=[Depends(limit_api)])


def _pagination(page: int, limit: int, total: int) -> Pagination:
    return Pagination(page=page, limit=limit, total=total, pages=math.ceil(total / limit))


@router.get("/status")
async def status():
    """Service health and catalogue size."""
    store = get_store()
    _, total = store.list_cases(active_only=False)
    return {"status": "ok", "case_templates": total}


# =============================================================================
# CASE TEMPLATES
# =============================================================================

@router.get("/cases", response_model=CaseListResponse)
async def list_cases(
    industry: Optional[str] = None,
    difficulty: Optional[Difficulty] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    identity: Identity = Depends(get_identity),
):
    """Active case templates, newest first."""
    cases, total = get_store().list_cases(industry, difficulty, True, page, limit)
    return CaseListResponse(
        cases=[CaseTemplateData(**c.to_dict()) for c in cases],
        pagination=_pagination(page, limit, total),
    )


@router.post("/cases", response_model=CaseTemplateData, status_code=201)
async def create_case(request: CaseTemplateCreate, identity: Identity = Depends(require_admin)):
    case = get_store().add_case(CaseTemplate(**request.model_dump(), created_by=identity.user_id))
    logger.info("Admin %s created case template %s", identity.user_id, case.id)
    return CaseTemplateData(**case.to_dict())


@router.get("/cases/{case_id}", response_model=CaseTemplateData)
async def get_case(case_id: str, identity: Identity = Depends(get_identity)):
    try:
        case = get_store().get_case(case_id)
    except NotFoundError as e:
        raise HTTPException(404, str(e))
    return CaseTemplateData(**case.to_dict())


@router.put("/cases/{case_id}", response_model=CaseTemplateData)
async def update_case(
    case_id: str, request: CaseTemplateUpdate, identity: Identity = Depends(require_admin)
):
    try:
        case = get_store().update_case(case_id, **request.model_dump(exclude_none=True))
    except NotFoundError as e:
        raise HTTPException(404, str(e))
    return CaseTemplateData(**case.to_dict())


@router.delete("/cases/{case_id}")
async def delete_case(case_id: str, identity: Identity = Depends(require_admin)):
    try:
        get_store().delete_case(case_id)
    except NotFoundError as e:
        raise HTTPException(404, str(e))
    return {"message": "Case template deleted successfully"}


# =============================================================================
# SESSIONS
# =============================================================================

@router.get("/sessions", response_model=SessionListResponse)
async def list_sessions(
    status: Optional[SessionStatus] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    identity: Identity = Depends(get_identity),
):
    sessions, total = get_store().list_sessions(identity.user_id, status, page, limit)
    return SessionListResponse(
        sessions=[SessionData(**s.to_dict()) for s in sessions],
        pagination=_pagination(page, limit, total),
    )


@router.post("/sessions", response_model=SessionData, status_code=201)
async def create_session(request: CreateSessionRequest, identity: Identity = Depends(get_identity)):
    """Start a session; the case's initial message is already in its history."""
    try:
        session = get_store().create_session(identity.user_id, request.case_template_id)
    except NotFoundError:
        raise HTTPException(404, "Case template not found or inactive")
    return SessionData(**session.to_dict())


@router.get("/sessions/{session_id}", response_model=SessionDetailResponse)
async def get_session(session_id: str, identity: Identity = Depends(get_identity)):
    store = get_store()
    try:
        session = store.get_session(session_id, identity.user_id)
        messages = store.get_messages(session_id)
    except NotFoundError:
        raise HTTPException(404, "Session not found")

    try:
        case_data = CaseTemplateData(**store.get_case(session.case_template_id).to_dict())
    except NotFoundError:
        case_data = None

    return SessionDetailResponse(
        session=SessionData(**session.to_dict()),
        case_template=case_data,
        messages=[MessageData(**m.to_dict()) for m in messages],
        summary=session_summary(session, messages),
    )


@router.get("/sessions/{session_id}/progress", response_model=SessionProgressResponse)
async def get_session_progress(session_id: str, identity: Identity = Depends(get_identity)):
    """Current progress metrics of a session and their radar chart."""
    store = get_store()
    try:
        session = store.get_session(session_id, identity.user_id)
        progress = assess_progress(store.get_messages(session.id))
    except NotFoundError:
        raise HTTPException(404, "Session not found")
    return SessionProgressResponse(
        progress=ProgressData(**progress.to_dict()),
        radar_chart=create_progress_radar(progress),
    )


@router.put("/sessions/{session_id}", response_model=SessionData)
async def update_session(
    session_id: str, request: UpdateSessionRequest, identity: Identity = Depends(get_identity)
):
    """Complete/abandon a session, or edit its score and feedback."""
    try:
        session = get_store().update_session(
            session_id, identity.user_id,
            status=request.status, score=request.score, feedback=request.feedback,
        )
    except NotFoundError:
        raise HTTPException(404, "Session not found")
    except InvalidTransitionError as e:
        raise HTTPException(409, str(e))
    return SessionData(**session.to_dict())


@router.delete("/sessions/{session_id}")
async def delete_session(session_id: str, identity: Identity = Depends(get_identity)):
    try:
        get_store().delete_session(session_id, identity.user_id)
    except NotFoundError:
        raise HTTPException(404, "Session not found")
    return {"message": "Session deleted successfully"}


# =============================================================================
# MESSAGES
# =============================================================================

@router.post(
    "/messages",
    response_model=MessageExchangeResponse,
    status_code=201,
    dependencies=[Depends(limit_messages)],
)
async def send_message(request: CreateMessageRequest, identity: Identity = Depends(get_identity)):
    """Record a user message, generate the coach reply and score the session on conclusion."""
    start = time.perf_counter()
    store = get_store()
    engine = get_engine()
    content = sanitize_input(request.content)

    try:
        with store.session_lock(request.session_id):
            session = store.get_session(request.session_id, identity.user_id)
            case = store.get_case(session.case_template_id)
            history = store.get_messages(session.id)
            turn = engine.process_turn(case, session, history, content)
            store.append_messages(turn.user_message, turn.assistant_message)
            if turn.session_update is not None:
                store.update_session(session.id, **turn.session_update)
    except (NotFoundError, SessionClosedError):
        raise HTTPException(404, "Session not found or inactive")
    except EngineContractError as e:
        raise HTTPException(400, f"Validation failed: {e}")

    logger.info(
        "Message exchange: user=%s session=%s stage=%s scored=%s (%.1f ms)",
        identity.user_id, session.id, turn.stage, turn.scored,
        (time.perf_counter() - start) * 1000,
    )

    update = turn.session_update or {}
    return MessageExchangeResponse(
        user_message=MessageData(**turn.user_message.to_dict()),
        assistant_message=MessageData(**turn.assistant_message.to_dict()),
        stage=turn.stage,
        progress=ProgressData(**turn.progress.to_dict()),
        score=update.get("score"),
        feedback=update.get("feedback"),
    )


# =============================================================================
# PROGRESS
# =============================================================================

@router.get("/progress", response_model=ProgressResponse)
async def get_progress(identity: Identity = Depends(get_identity)):
    """Statistics and score trend across the caller's sessions."""
    sessions = get_store().all_sessions(identity.user_id)
    return ProgressResponse(
        stats=user_progress(sessions),
        score_trend_chart=create_score_trend_chart(sessions),
    )
