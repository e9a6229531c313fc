"""
CoachingEngine: per-turn orchestrator for CaseCoach sessions.

For every user message:
    classify stage → assess progress → generate reply
    → (on conclusion) score + feedback → records for persistence

The engine holds no per-session state. Callers hand it an ordered snapshot
of the session history and persist what it returns; they must serialize
turns within a session so scoring cannot trigger twice on a race.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import List, Optional, Sequence, Tuple

import numpy as np

from .errors import EngineContractError, SessionClosedError
from .feedback import generate_session_feedback
from .generator import ResponseGenerator, Selector
from .model import (
    ROLE_ASSISTANT,
    ROLE_SYSTEM,
    ROLE_USER,
    CaseTemplate,
    EngineOutput,
    Message,
    ProgressMetrics,
    Session,
    TurnResult,
    utcnow,
)
from .progress import assess_progress
from .stages import classify_stage

logger = logging.getLogger(__name__)


def _check_aware(value: datetime, what: str) -> datetime:
    if not isinstance(value, datetime) or value.tzinfo is None or value.utcoffset() is None:
        raise EngineContractError(f"{what} must be a timezone-aware datetime, got {value!r}")
    return value


def _check_history(history: Sequence[Message]) -> List[Message]:
    if history is None or isinstance(history, (str, bytes)):
        raise EngineContractError("history must be a sequence of messages")
    messages = list(history)
    for m in messages:
        if not isinstance(m, Message):
            raise EngineContractError(f"history entries must be Message, got {type(m).__name__}")
        _check_aware(m.timestamp, f"timestamp of message {m.id}")
    for earlier, later in zip(messages, messages[1:]):
        if later.timestamp < earlier.timestamp:
            raise EngineContractError("history must be ordered by timestamp")
    return messages


def _check_content(content: str) -> str:
    if not isinstance(content, str) or not content.strip():
        raise EngineContractError("user message content must be a non-empty string")
    return content


class CoachingEngine:
    """
    Façade over the stage classifier, progress assessor, response generator,
    session scorer and feedback synthesizer.

    Usage:
        engine = CoachingEngine(rng=np.random.default_rng(0))
        output = engine.respond(template, history, "I'd start with revenue")
        turn = engine.process_turn(template, session, history, "...")
    """

    def __init__(
        self,
        rng: Optional[np.random.Generator] = None,
        selector: Optional[Selector] = None,
        generator: Optional[ResponseGenerator] = None,
    ):
        self.generator = generator or ResponseGenerator(rng=rng, selector=selector)

    # ------------------------------------------------------------------
    # Stateless entry point
    # ------------------------------------------------------------------

    def respond(
        self,
        case_template: CaseTemplate,
        history: Sequence[Message],
        user_message: str,
        allow_scoring: bool = True,
    ) -> EngineOutput:
        """
        Generate the coach reply to a new user message.

        Args:
            case_template: Template the session is based on
            history: Session messages ordered by timestamp, excluding the new one.
                System messages are dropped before any counting.
            user_message: Content of the new user message
            allow_scoring: When False the conclusion score is withheld
                (the session already has one)

        Returns:
            EngineOutput; score and feedback are set only on conclusion turns
        """
        output, _, _ = self._run(case_template, history, user_message, allow_scoring)
        return output

    def _run(
        self,
        case_template: CaseTemplate,
        history: Sequence[Message],
        user_message: str,
        allow_scoring: bool,
    ) -> Tuple[EngineOutput, str, ProgressMetrics]:
        if case_template is None:
            raise EngineContractError("case_template is required")
        messages = _check_history(history)
        content = _check_content(user_message)

        conversation = [m for m in messages if m.role != ROLE_SYSTEM]
        session_id = conversation[-1].session_id if conversation else ""
        conversation.append(Message(session_id=session_id, role=ROLE_USER, content=content))

        stage = classify_stage(len(conversation))
        progress = assess_progress(conversation, case_template)
        logger.debug(
            "Turn %d: stage=%s engagement=%.1f structure=%.1f",
            len(conversation), stage, progress.engagement, progress.structure,
        )

        output = self.generator.generate(case_template, stage, progress, content)

        if output.score is not None:
            if allow_scoring:
                output.feedback = generate_session_feedback(conversation, case_template, progress)
            else:
                output.score = None

        return output, stage, progress

    # ------------------------------------------------------------------
    # Session-aware turn
    # ------------------------------------------------------------------

    def process_turn(
        self,
        case_template: CaseTemplate,
        session: Session,
        history: Sequence[Message],
        content: str,
        now: Optional[datetime] = None,
    ) -> TurnResult:
        """
        Run one user turn against a session and build the records to persist.

        Raises:
            SessionClosedError: the session is completed or abandoned
            EngineContractError: template/session mismatch, malformed input
                or a naive timestamp
        """
        if session is None:
            raise EngineContractError("session is required")
        if session.is_terminal:
            raise SessionClosedError(session.id, session.status)
        if case_template is None:
            raise EngineContractError("case_template is required")
        if session.case_template_id != case_template.id:
            raise EngineContractError(
                f"Session {session.id} uses case template {session.case_template_id}, "
                f"not {case_template.id}"
            )
        messages = _check_history(history)
        for m in messages:
            if m.session_id != session.id:
                raise EngineContractError(f"Message {m.id} does not belong to session {session.id}")

        now = utcnow() if now is None else _check_aware(now, "now")
        output, stage, progress = self._run(
            case_template, messages, content, allow_scoring=session.score is None
        )

        user_record = Message(
            session_id=session.id, role=ROLE_USER, content=content, timestamp=now,
        )
        assistant_record = Message(
            session_id=session.id,
            role=ROLE_ASSISTANT,
            content=output.content,
            timestamp=max(utcnow(), now),
            metadata=output.metadata(),
        )

        session_update = None
        if output.score is not None:
            session_update = {"score": output.score, "feedback": output.feedback}
            logger.info("Session %s scored %d at stage %s", session.id, output.score, stage)

        return TurnResult(
            user_message=user_record,
            assistant_message=assistant_record,
            stage=stage,
            progress=progress,
            session_update=session_update,
        )
