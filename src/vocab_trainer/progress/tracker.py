"""Progress tracking service (one UserProgress aggregate per user)."""

import asyncio
import weakref
from collections.abc import Sequence
from datetime import datetime

import structlog

from vocab_trainer.errors import ConflictError, ValidationError
from vocab_trainer.models.progress import (
    MasteryStats,
    UserProgress,
    UserStats,
    VocabItemProgress,
)
from vocab_trainer.progress.mastery import (
    apply_attempt_to_progress,
    average_mastery,
    clamp_mastery,
    review_interval,
)
from vocab_trainer.progress.stats import compute_mastery_stats
from vocab_trainer.storage.documents import Collection

logger = structlog.get_logger()


class ProgressTracker:
    """Reads and updates users' progress aggregates.

    Each aggregate is stored under the user's id. Updates are
    read-modify-write: the per-user lock serialises writers inside this
    process, and the store's version check rejects a write that raced with
    another process.

    Args:
        collection: Collection holding UserProgress documents.
    """

    def __init__(self, collection: Collection[UserProgress]):
        self.collection = collection
        # Entries vanish once no coroutine holds or waits on the lock
        self._locks: weakref.WeakValueDictionary[str, asyncio.Lock] = weakref.WeakValueDictionary()

    def _lock_for(self, user_id: str) -> asyncio.Lock:
        lock = self._locks.get(user_id)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[user_id] = lock
        return lock

    def _get_or_create(self, user_id: str) -> UserProgress:
        progress = self.collection.get(user_id)
        if progress is not None:
            return progress
        try:
            progress = self.collection.insert(UserProgress(id=user_id, user_id=user_id))
            logger.info("progress_created", user_id=user_id)
            return progress
        except ConflictError:
            # Created by another process between our read and insert
            progress = self.collection.get(user_id)
            if progress is None:
                raise
            return progress

    async def get_progress(self, user_id: str) -> UserProgress:
        async with self._lock_for(user_id):
            return self._get_or_create(user_id)

    async def record_attempt(
        self,
        user_id: str,
        vocab_item_id: str,
        correct: bool,
        now: datetime | None = None,
    ) -> UserProgress:
        """Record one answer and persist the updated aggregate in a single write.

        Raises:
            NotFoundError: The aggregate disappeared before the write.
            ConflictError: Another writer stored a newer version first.
        """
        now = now or datetime.now()
        async with self._lock_for(user_id):
            progress = self._get_or_create(user_id)
            updated = apply_attempt_to_progress(progress, vocab_item_id, correct, now)
            stored = self.collection.replace(updated)

        item = stored.find_item(vocab_item_id)
        logger.info(
            "progress_recorded",
            user_id=user_id,
            vocab_item_id=vocab_item_id,
            correct=correct,
            mastery_level=item.mastery_level if item else None,
            average_mastery=stored.stats.average_mastery,
            streak_days=stored.stats.streak_days,
        )
        return stored

    async def get_item_progress(
        self, user_id: str, vocab_item_id: str, now: datetime | None = None
    ) -> VocabItemProgress:
        """Progress for one item; a zeroed record due now if never studied."""
        progress = self.collection.get(user_id)
        item = progress.find_item(vocab_item_id) if progress else None
        if item is None:
            return VocabItemProgress(
                vocab_item_id=vocab_item_id,
                next_review_due=now or datetime.now(),
            )
        return item

    async def get_stats(self, user_id: str) -> UserStats:
        progress = self.collection.get(user_id)
        return progress.stats if progress else UserStats()

    async def get_mastery_stats(self, user_id: str) -> MasteryStats:
        progress = self.collection.get(user_id)
        if progress is None:
            return MasteryStats()
        return compute_mastery_stats(progress.item_progress, progress.stats)

    async def due_items(self, user_id: str, now: datetime | None = None) -> list[VocabItemProgress]:
        """Items whose next review is due, soonest first."""
        now = now or datetime.now()
        progress = self.collection.get(user_id)
        if progress is None:
            return []
        due = [
            item for item in progress.item_progress
            if item.next_review_due is not None and item.next_review_due <= now
        ]
        return sorted(due, key=lambda item: item.next_review_due)

    async def log_study_session(self, user_id: str, minutes: int) -> UserProgress:
        """Add study minutes and count one more completed session."""
        if minutes < 0:
            raise ValidationError(
                "Study time must not be negative",
                errors=[{"path": "minutes", "message": "must be >= 0"}],
            )
        async with self._lock_for(user_id):
            progress = self._get_or_create(user_id)
            stats = progress.stats.model_copy(
                update={
                    "study_time_minutes": progress.stats.study_time_minutes + minutes,
                    "completed_tests": progress.stats.completed_tests + 1,
                }
            )
            stored = self.collection.replace(
                progress.model_copy(update={"stats": stats, "last_updated": datetime.now()})
            )
        logger.info("study_time_logged", user_id=user_id, minutes=minutes)
        return stored

    async def update_total_study_time(self, user_id: str, minutes: int) -> UserProgress:
        return await self.log_study_session(user_id, minutes)

    async def set_item_mastery(
        self, user_id: str, vocab_item_id: str, mastery_level: int
    ) -> VocabItemProgress:
        """Overwrite one item's mastery (clamped to 0-100) and reschedule its review."""
        now = datetime.now()
        mastery = clamp_mastery(mastery_level)
        next_review_due = now + review_interval(mastery, True)
        async with self._lock_for(user_id):
            progress = self._get_or_create(user_id)
            items = list(progress.item_progress)
            existing = progress.find_item(vocab_item_id)
            if existing is None:
                item = VocabItemProgress(
                    vocab_item_id=vocab_item_id,
                    mastery_level=mastery,
                    correct_attempts=1,
                    last_reviewed_at=now,
                    next_review_due=next_review_due,
                )
                items.append(item)
            else:
                item = existing.model_copy(
                    update={
                        "mastery_level": mastery,
                        "correct_attempts": existing.correct_attempts + 1,
                        "last_reviewed_at": now,
                        "next_review_due": next_review_due,
                    }
                )
                items[items.index(existing)] = item
            stats = progress.stats.model_copy(
                update={
                    "total_items_studied": len(items),
                    "average_mastery": average_mastery(items),
                }
            )
            self.collection.replace(
                progress.model_copy(
                    update={"item_progress": items, "stats": stats, "last_updated": now}
                )
            )
        logger.info(
            "item_mastery_set", user_id=user_id, vocab_item_id=vocab_item_id, mastery_level=mastery
        )
        return item

    async def record_test_scores(self, user_id: str, scores: Sequence[float]) -> UserProgress:
        """Set the average test score from all of the user's scored results."""
        average = round(sum(scores) / len(scores), 1) if scores else 0.0
        async with self._lock_for(user_id):
            progress = self._get_or_create(user_id)
            stats = progress.stats.model_copy(update={"average_test_score": average})
            return self.collection.replace(
                progress.model_copy(update={"stats": stats, "last_updated": datetime.now()})
            )

    async def reset(self, user_id: str) -> UserProgress:
        """Clear the aggregate back to its zero-value state."""
        async with self._lock_for(user_id):
            progress = self._get_or_create(user_id)
            cleared = UserProgress(
                id=progress.id,
                user_id=user_id,
                version=progress.version,
                created_at=progress.created_at,
            )
            stored = self.collection.replace(cleared)
        logger.info("progress_reset", user_id=user_id)
        return stored
