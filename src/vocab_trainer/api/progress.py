"""Learning progress routes for the authenticated user."""

from typing import Any

from fastapi import APIRouter, Body, Depends

from vocab_trainer.api.deps import get_current_user, get_db, get_tracker
from vocab_trainer.errors import NotFoundError
from vocab_trainer.models.progress import MasteryStats, UserProgress, UserStats, VocabItemProgress
from vocab_trainer.models.user import User
from vocab_trainer.progress.tracker import ProgressTracker
from vocab_trainer.storage.database import Database
from vocab_trainer.validation import (
    ItemAttemptInput,
    ItemMasteryInput,
    StudyTimeInput,
    validate_input,
)

router = APIRouter(prefix="/api/progress", tags=["progress"])


def _require_item(db: Database, vocab_item_id: str) -> None:
    if db.vocab_items.get(vocab_item_id) is None:
        raise NotFoundError("Vocabulary item not found")


@router.get("")
async def get_progress(
    user: User = Depends(get_current_user),
    tracker: ProgressTracker = Depends(get_tracker),
) -> UserProgress:
    return await tracker.get_progress(user.id)


@router.get("/stats")
async def get_stats(
    user: User = Depends(get_current_user),
    tracker: ProgressTracker = Depends(get_tracker),
) -> UserStats:
    return await tracker.get_stats(user.id)


@router.get("/mastery")
async def get_mastery_stats(
    user: User = Depends(get_current_user),
    tracker: ProgressTracker = Depends(get_tracker),
) -> MasteryStats:
    return await tracker.get_mastery_stats(user.id)


@router.get("/due")
async def get_due_items(
    user: User = Depends(get_current_user),
    tracker: ProgressTracker = Depends(get_tracker),
) -> list[VocabItemProgress]:
    return await tracker.due_items(user.id)


@router.get("/items/{vocab_item_id}")
async def get_item_progress(
    vocab_item_id: str,
    user: User = Depends(get_current_user),
    db: Database = Depends(get_db),
    tracker: ProgressTracker = Depends(get_tracker),
) -> VocabItemProgress:
    _require_item(db, vocab_item_id)
    return await tracker.get_item_progress(user.id, vocab_item_id)


@router.post("/attempts")
async def record_attempt(
    payload: dict[str, Any] = Body(...),
    user: User = Depends(get_current_user),
    db: Database = Depends(get_db),
    tracker: ProgressTracker = Depends(get_tracker),
) -> UserProgress:
    data = validate_input(ItemAttemptInput, payload)
    _require_item(db, data.vocab_item_id)
    return await tracker.record_attempt(user.id, data.vocab_item_id, data.correct)


@router.post("/mastery")
async def set_item_mastery(
    payload: dict[str, Any] = Body(...),
    user: User = Depends(get_current_user),
    db: Database = Depends(get_db),
    tracker: ProgressTracker = Depends(get_tracker),
) -> VocabItemProgress:
    data = validate_input(ItemMasteryInput, payload)
    _require_item(db, data.vocab_item_id)
    return await tracker.set_item_mastery(user.id, data.vocab_item_id, data.mastery_level)


@router.post("/study-time")
async def log_study_session(
    payload: dict[str, Any] = Body(...),
    user: User = Depends(get_current_user),
    tracker: ProgressTracker = Depends(get_tracker),
) -> UserProgress:
    data = validate_input(StudyTimeInput, payload)
    return await tracker.log_study_session(user.id, data.minutes)


@router.put("/study-time")
async def update_total_study_time(
    payload: dict[str, Any] = Body(...),
    user: User = Depends(get_current_user),
    tracker: ProgressTracker = Depends(get_tracker),
) -> UserProgress:
    data = validate_input(StudyTimeInput, payload)
    return await tracker.update_total_study_time(user.id, data.minutes)


@router.delete("")
async def reset_progress(
    user: User = Depends(get_current_user),
    tracker: ProgressTracker = Depends(get_tracker),
) -> UserProgress:
    return await tracker.reset(user.id)
