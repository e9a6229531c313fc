"""
In-memory persistence for CaseCoach.

Stores case templates, sessions and messages keyed by id. Each session has
its own lock; the message route holds it for the whole turn so two
concurrent messages cannot both trigger scoring.
"""

from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from dataclasses import fields
from typing import Any, Dict, Iterator, List, Optional, Tuple

from ..core.errors import NotFoundError
from ..core.lifecycle import transition_session
from ..core.model import (
    ROLE_ASSISTANT,
    ROLE_SYSTEM,
    CaseTemplate,
    Message,
    Session,
    utcnow,
)

logger = logging.getLogger(__name__)

_CASE_FIELDS = {f.name for f in fields(CaseTemplate)} - {"id", "created_at", "updated_at"}


def _paginate(items: List[Any], page: int, limit: int) -> List[Any]:
    start = (page - 1) * limit
    return items[start:start + limit]


class SessionStore:
    """
    Holds every case template, session and message in memory.

    Lookups that fail raise NotFoundError; a session owned by another user
    is reported as not found.
    """

    def __init__(self):
        self._cases: Dict[str, CaseTemplate] = {}
        self._sessions: Dict[str, Session] = {}
        self._messages: Dict[str, List[Message]] = {}
        self._locks: Dict[str, threading.Lock] = {}
        self._guard = threading.Lock()

    # ------------------------------------------------------------------
    # Case templates
    # ------------------------------------------------------------------

    def add_case(self, case: CaseTemplate) -> CaseTemplate:
        self._cases[case.id] = case
        return case

    def get_case(self, case_id: str) -> CaseTemplate:
        case = self._cases.get(case_id)
        if case is None:
            raise NotFoundError("Case template", case_id)
        return case

    def list_cases(
        self,
        industry: Optional[str] = None,
        difficulty: Optional[str] = None,
        active_only: bool = True,
        page: int = 1,
        limit: int = 10,
    ) -> Tuple[List[CaseTemplate], int]:
        """Filtered templates, newest first, and the unpaginated total."""
        cases = [
            c for c in self._cases.values()
            if (not active_only or c.is_active)
            and (industry is None or c.industry == industry)
            and (difficulty is None or c.difficulty == difficulty)
        ]
        cases.sort(key=lambda c: c.created_at, reverse=True)
        return _paginate(cases, page, limit), len(cases)

    def update_case(self, case_id: str, **changes: Any) -> CaseTemplate:
        case = self.get_case(case_id)
        for key, value in changes.items():
            if key not in _CASE_FIELDS:
                raise ValueError(f"Unknown case template field: {key}")
            setattr(case, key, value)
        case.updated_at = utcnow()
        return case

    def delete_case(self, case_id: str) -> None:
        self.get_case(case_id)
        del self._cases[case_id]

    # ------------------------------------------------------------------
    # Sessions
    # ------------------------------------------------------------------

    def create_session(self, user_id: str, case_id: str) -> Session:
        """
        Start a session on an active template.

        The template's system prompt and initial message are written as the
        first two messages.
        """
        case = self.get_case(case_id)
        if not case.is_active:
            raise NotFoundError("Case template", case_id)

        session = Session(user_id=user_id, case_template_id=case.id)
        now = utcnow()
        with self._guard:
            self._sessions[session.id] = session
            self._messages[session.id] = [
                Message(session_id=session.id, role=ROLE_SYSTEM,
                        content=case.system_prompt, timestamp=now),
                Message(session_id=session.id, role=ROLE_ASSISTANT,
                        content=case.initial_message, timestamp=now),
            ]
            self._locks[session.id] = threading.Lock()
        logger.info("User %s started session %s on case %s", user_id, session.id, case.id)
        return session

    def get_session(self, session_id: str, user_id: Optional[str] = None) -> Session:
        session = self._sessions.get(session_id)
        if session is None or (user_id is not None and session.user_id != user_id):
            raise NotFoundError("Session", session_id)
        return session

    def list_sessions(
        self,
        user_id: str,
        status: Optional[str] = None,
        page: int = 1,
        limit: int = 10,
    ) -> Tuple[List[Session], int]:
        sessions = [
            s for s in self._sessions.values()
            if s.user_id == user_id and (status is None or s.status == status)
        ]
        sessions.sort(key=lambda s: s.started_at, reverse=True)
        return _paginate(sessions, page, limit), len(sessions)

    def all_sessions(self, user_id: str) -> List[Session]:
        return [s for s in self._sessions.values() if s.user_id == user_id]

    def update_session(
        self,
        session_id: str,
        user_id: Optional[str] = None,
        status: Optional[str] = None,
        score: Optional[int] = None,
        feedback: Optional[str] = None,
    ) -> Session:
        """Apply a status transition and/or an explicit score/feedback edit."""
        session = self.get_session(session_id, user_id)
        if status is not None:
            transition_session(session, status)
        if score is not None:
            session.score = score
        if feedback is not None:
            session.feedback = feedback
        return session

    def delete_session(self, session_id: str, user_id: Optional[str] = None) -> None:
        self.get_session(session_id, user_id)
        with self._guard:
            del self._sessions[session_id]
            self._messages.pop(session_id, None)
            self._locks.pop(session_id, None)

    @contextmanager
    def session_lock(self, session_id: str) -> Iterator[None]:
        """Serialize turns within one session."""
        with self._guard:
            lock = self._locks.get(session_id)
        if lock is None:
            raise NotFoundError("Session", session_id)
        with lock:
            yield

    # ------------------------------------------------------------------
    # Messages
    # ------------------------------------------------------------------

    def get_messages(self, session_id: str) -> List[Message]:
        """Messages of a session ordered by timestamp (insertion order on ties)."""
        if session_id not in self._messages:
            raise NotFoundError("Session", session_id)
        return sorted(self._messages[session_id], key=lambda m: m.timestamp)

    def append_messages(self, *messages: Message) -> None:
        for m in messages:
            if m.session_id not in self._messages:
                raise NotFoundError("Session", m.session_id)
            self._messages[m.session_id].append(m)
