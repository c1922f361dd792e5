"""Spaced-repetition rules for item mastery and the aggregate user statistics.

Everything here is pure: functions take the current state and ``now`` and
return new model instances. Persistence lives in ``progress.tracker``.

Mastery moves in fixed steps (+10 on a correct answer, -5 on a miss) and is
clamped to 0-100. The next review after a correct answer is
``1 + mastery / 20`` days away, so the interval stretches from one day up to
six days as an item approaches full mastery; a miss always brings the item
back in twelve hours.
"""

import math
from collections.abc import Sequence
from datetime import datetime, timedelta

from vocab_trainer.models.progress import (
    MASTERY_MAX,
    MASTERY_MIN,
    UserProgress,
    UserStats,
    VocabItemProgress,
)

CORRECT_GAIN = 10
INCORRECT_PENALTY = 5
NEW_ITEM_CORRECT_MASTERY = 20
NEW_ITEM_INCORRECT_MASTERY = 0

NEW_ITEM_CORRECT_INTERVAL = timedelta(hours=24)
INCORRECT_INTERVAL = timedelta(hours=12)


def clamp_mastery(value: float) -> int:
    return int(max(MASTERY_MIN, min(MASTERY_MAX, value)))


def round_half_up(value: float) -> int:
    """Round .5 upwards (Python's round() rounds half to even)."""
    return math.floor(value + 0.5)


def review_interval(mastery_level: int, correct: bool) -> timedelta:
    """Delay until the next review of an item that was already being tracked."""
    if not correct:
        return INCORRECT_INTERVAL
    return timedelta(days=1 + mastery_level / 20)


def apply_attempt(
    item: VocabItemProgress | None,
    vocab_item_id: str,
    correct: bool,
    now: datetime,
) -> VocabItemProgress:
    """Return the item's progress after one answer.

    Args:
        item: Existing progress, or None for the first attempt on this item.
        vocab_item_id: Item being answered.
        correct: Whether the answer was right.
        now: Review time.
    """
    if item is None:
        return VocabItemProgress(
            vocab_item_id=vocab_item_id,
            mastery_level=NEW_ITEM_CORRECT_MASTERY if correct else NEW_ITEM_INCORRECT_MASTERY,
            correct_attempts=1 if correct else 0,
            incorrect_attempts=0 if correct else 1,
            last_reviewed_at=now,
            next_review_due=now + (NEW_ITEM_CORRECT_INTERVAL if correct else INCORRECT_INTERVAL),
        )

    if correct:
        mastery = clamp_mastery(item.mastery_level + CORRECT_GAIN)
        counters = {"correct_attempts": item.correct_attempts + 1}
    else:
        mastery = clamp_mastery(item.mastery_level - INCORRECT_PENALTY)
        counters = {"incorrect_attempts": item.incorrect_attempts + 1}

    return item.model_copy(
        update={
            **counters,
            "mastery_level": mastery,
            "last_reviewed_at": now,
            "next_review_due": now + review_interval(mastery, correct),
        }
    )


def average_mastery(items: Sequence[VocabItemProgress]) -> int:
    if not items:
        return 0
    return round_half_up(sum(item.mastery_level for item in items) / len(items))


def update_streak(streak_days: int, last_study_date: datetime | None, now: datetime) -> int:
    """Consecutive-day counter, compared by calendar day.

    Same day leaves the streak alone, the following day extends it, and any
    other gap (or a first-ever study event) starts over at 1.
    """
    if last_study_date is None:
        return 1
    elapsed_days = (now.date() - last_study_date.date()).days
    if elapsed_days == 0:
        return streak_days
    if elapsed_days == 1:
        return streak_days + 1
    return 1


def recompute_stats(
    stats: UserStats,
    items: Sequence[VocabItemProgress],
    correct: bool,
    now: datetime,
) -> UserStats:
    """Aggregate statistics after one attempt has been applied to ``items``."""
    update = {
        "total_items_studied": len(items),
        "average_mastery": average_mastery(items),
        "streak_days": update_streak(stats.streak_days, stats.last_study_date, now),
        "last_study_date": now,
    }
    if correct:
        update["total_correct_attempts"] = stats.total_correct_attempts + 1
    else:
        update["total_incorrect_attempts"] = stats.total_incorrect_attempts + 1
    return stats.model_copy(update=update)


def apply_attempt_to_progress(
    progress: UserProgress,
    vocab_item_id: str,
    correct: bool,
    now: datetime,
) -> UserProgress:
    """Apply one answer to the whole aggregate (item record + statistics)."""
    items = list(progress.item_progress)
    for index, item in enumerate(items):
        if item.vocab_item_id == vocab_item_id:
            items[index] = apply_attempt(item, vocab_item_id, correct, now)
            break
    else:
        items.append(apply_attempt(None, vocab_item_id, correct, now))

    return progress.model_copy(
        update={
            "item_progress": items,
            "stats": recompute_stats(progress.stats, items, correct, now),
            "last_updated": now,
        }
    )
