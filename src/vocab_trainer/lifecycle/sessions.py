"""Study session lifecycle: active <-> paused, then completed (terminal)."""

from datetime import datetime

import structlog

from vocab_trainer.errors import ForbiddenError, InvalidStateError, NotFoundError
from vocab_trainer.models.session import SessionStatus, StudySession
from vocab_trainer.storage.database import Database
from vocab_trainer.validation import (
    CompleteStudySessionInput,
    StudySessionInput,
    UpdateStudySessionInput,
)

logger = structlog.get_logger()

# Allowed status changes through update(); completed has no way out
_TRANSITIONS: dict[SessionStatus, set[SessionStatus]] = {
    SessionStatus.ACTIVE: {SessionStatus.ACTIVE, SessionStatus.PAUSED, SessionStatus.COMPLETED},
    SessionStatus.PAUSED: {SessionStatus.PAUSED, SessionStatus.ACTIVE, SessionStatus.COMPLETED},
    SessionStatus.COMPLETED: set(),
}


def completion_accuracy(items_studied: int, correct_answers: int) -> float:
    if items_studied == 0:
        return 0.0
    return correct_answers / items_studied * 100


class StudySessionController:
    def __init__(self, db: Database):
        self.db = db

    def _owned(self, session_id: str, caller_id: str, action: str) -> StudySession:
        session = self.db.study_sessions.get(session_id)
        if session is None:
            raise NotFoundError("Study session not found")
        if session.user_id != caller_id:
            raise ForbiddenError(f"Not authorized to {action} this study session")
        return session

    def start(self, user_id: str, data: StudySessionInput) -> StudySession:
        for list_id in data.vocab_list_ids:
            if self.db.vocab_lists.get(list_id) is None:
                raise NotFoundError(f"Vocabulary list {list_id} not found")

        session = self.db.study_sessions.insert(
            StudySession(
                user_id=user_id,
                title=data.title,
                vocab_list_ids=data.vocab_list_ids,
                settings=data.settings,
            )
        )
        logger.info("session_started", session_id=session.id, user_id=user_id)
        return session

    def get(self, session_id: str, caller_id: str) -> StudySession:
        return self._owned(session_id, caller_id, "view")

    def list_for_user(self, user_id: str) -> list[StudySession]:
        """All of the user's sessions, newest first."""
        sessions = self.db.study_sessions.find(lambda s: s.user_id == user_id)
        return sorted(sessions, key=lambda s: s.start_time, reverse=True)

    def list_for_vocab_list(self, user_id: str, vocab_list_id: str) -> list[StudySession]:
        if self.db.vocab_lists.get(vocab_list_id) is None:
            raise NotFoundError("Vocabulary list not found")
        return [s for s in self.list_for_user(user_id) if vocab_list_id in s.vocab_list_ids]

    def get_active(self, user_id: str) -> StudySession | None:
        """Most recently started session that is not completed."""
        for session in self.list_for_user(user_id):
            if session.status != SessionStatus.COMPLETED:
                return session
        return None

    def update(self, session_id: str, caller_id: str, data: UpdateStudySessionInput) -> StudySession:
        session = self._owned(session_id, caller_id, "update")
        if session.status == SessionStatus.COMPLETED:
            raise InvalidStateError("Study session is already completed")

        changes: dict = {}
        if data.status is not None and data.status != session.status:
            if data.status not in _TRANSITIONS[session.status]:
                raise InvalidStateError(
                    f"Cannot move study session from {session.status} to {data.status}"
                )
            changes["status"] = data.status
            if data.status == SessionStatus.COMPLETED:
                now = datetime.now()
                changes["completed_at"] = now
                changes["end_time"] = data.end_time or now
        if data.end_time is not None:
            changes["end_time"] = data.end_time
        if data.items_studied is not None:
            changes["items_studied"] = data.items_studied
        if changes.get("status") == SessionStatus.COMPLETED and not session.duration:
            closed = session.model_copy(update={"end_time": changes["end_time"]})
            changes["duration"] = closed.elapsed_minutes

        stored = self.db.study_sessions.replace(session.model_copy(update=changes))
        logger.info(
            "session_updated",
            session_id=session_id,
            status=stored.status,
            fields=sorted(changes),
        )
        return stored

    def complete(
        self, session_id: str, caller_id: str, data: CompleteStudySessionInput
    ) -> StudySession:
        """Close a session and record its summary.

        Duration is kept if the session already has one; otherwise the given
        value is used, falling back to the minutes elapsed since start.

        Raises:
            NotFoundError: No such session.
            ForbiddenError: Caller does not own the session.
            InvalidStateError: The session is already completed. Nothing is
                written in that case.
        """
        session = self._owned(session_id, caller_id, "complete")
        if session.status == SessionStatus.COMPLETED:
            raise InvalidStateError("Study session is already completed")

        now = datetime.now()
        closed = session.model_copy(update={"end_time": now})
        duration = session.duration
        if not duration:
            duration = data.duration if data.duration is not None else closed.elapsed_minutes

        stored = self.db.study_sessions.replace(
            closed.model_copy(
                update={
                    "status": SessionStatus.COMPLETED,
                    "completed_at": now,
                    "duration": duration,
                    "items_studied_count": data.items_studied,
                    "correct_answers": data.correct_answers,
                    "accuracy": completion_accuracy(data.items_studied, data.correct_answers),
                }
            )
        )
        logger.info(
            "session_completed",
            session_id=session_id,
            duration=duration,
            accuracy=round(stored.accuracy, 1),
        )
        return stored

    def delete(self, session_id: str, caller_id: str) -> bool:
        self._owned(session_id, caller_id, "delete")
        deleted = self.db.study_sessions.delete(session_id)
        logger.info("session_deleted", session_id=session_id)
        return deleted
