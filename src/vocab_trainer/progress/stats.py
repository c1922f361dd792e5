"""Read-only mastery statistics."""

from collections.abc import Sequence

from vocab_trainer.models.progress import MasteryStats, UserStats, VocabItemProgress
from vocab_trainer.progress.mastery import average_mastery

MASTERED_THRESHOLD = 90


def compute_mastery_stats(
    items: Sequence[VocabItemProgress],
    stats: UserStats | None = None,
) -> MasteryStats:
    """Summarise a user's item progress.

    Args:
        items: All of the user's item progress records.
        stats: The stored aggregate statistics, for the study-time and test
            counters that cannot be derived from the items.

    Returns:
        MasteryStats on the same 0-100 mastery scale as the items.
    """
    stats = stats or UserStats()
    return MasteryStats(
        mastered_items_count=sum(1 for item in items if item.mastery_level >= MASTERED_THRESHOLD),
        average_mastery=average_mastery(items),
        total_study_time=stats.study_time_minutes,
        sessions_completed=stats.completed_tests,
        average_test_score=stats.average_test_score,
    )
