"""Study session routes."""

from typing import Any

from fastapi import APIRouter, Body, Depends

from vocab_trainer.api.deps import get_current_user, get_session_controller
from vocab_trainer.lifecycle.sessions import StudySessionController
from vocab_trainer.models.session import StudySession
from vocab_trainer.models.user import User
from vocab_trainer.validation import (
    CompleteStudySessionInput,
    StudySessionInput,
    UpdateStudySessionInput,
    validate_input,
)

router = APIRouter(prefix="/api/study-sessions", tags=["study-sessions"])


@router.get("")
async def list_sessions(
    user: User = Depends(get_current_user),
    sessions: StudySessionController = Depends(get_session_controller),
) -> list[StudySession]:
    return sessions.list_for_user(user.id)


@router.get("/active")
async def active_session(
    user: User = Depends(get_current_user),
    sessions: StudySessionController = Depends(get_session_controller),
) -> StudySession | None:
    return sessions.get_active(user.id)


@router.get("/by-list/{vocab_list_id}")
async def sessions_for_list(
    vocab_list_id: str,
    user: User = Depends(get_current_user),
    sessions: StudySessionController = Depends(get_session_controller),
) -> list[StudySession]:
    return sessions.list_for_vocab_list(user.id, vocab_list_id)


@router.get("/{session_id}")
async def get_session(
    session_id: str,
    user: User = Depends(get_current_user),
    sessions: StudySessionController = Depends(get_session_controller),
) -> StudySession:
    return sessions.get(session_id, user.id)


@router.post("", status_code=201)
async def start_session(
    payload: dict[str, Any] = Body(...),
    user: User = Depends(get_current_user),
    sessions: StudySessionController = Depends(get_session_controller),
) -> StudySession:
    return sessions.start(user.id, validate_input(StudySessionInput, payload))


@router.patch("/{session_id}")
async def update_session(
    session_id: str,
    payload: dict[str, Any] = Body(...),
    user: User = Depends(get_current_user),
    sessions: StudySessionController = Depends(get_session_controller),
) -> StudySession:
    return sessions.update(session_id, user.id, validate_input(UpdateStudySessionInput, payload))


@router.post("/{session_id}/complete")
async def complete_session(
    session_id: str,
    payload: dict[str, Any] | None = Body(default=None),
    user: User = Depends(get_current_user),
    sessions: StudySessionController = Depends(get_session_controller),
) -> StudySession:
    return sessions.complete(
        session_id, user.id, validate_input(CompleteStudySessionInput, payload or {})
    )


@router.delete("/{session_id}")
async def delete_session(
    session_id: str,
    user: User = Depends(get_current_user),
    sessions: StudySessionController = Depends(get_session_controller),
) -> bool:
    return sessions.delete(session_id, user.id)
