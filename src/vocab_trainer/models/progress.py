"""Per-user learning progress models."""

from datetime import datetime

from pydantic import BaseModel, Field

from vocab_trainer.models.document import Document

MASTERY_MIN = 0
MASTERY_MAX = 100


class VocabItemProgress(BaseModel):
    """Spaced-repetition state for one vocabulary item."""

    vocab_item_id: str
    mastery_level: int = Field(default=0, ge=MASTERY_MIN, le=MASTERY_MAX)
    correct_attempts: int = Field(default=0, ge=0)
    incorrect_attempts: int = Field(default=0, ge=0)
    last_reviewed_at: datetime | None = None
    next_review_due: datetime | None = None

    @property
    def review_count(self) -> int:
        return self.correct_attempts + self.incorrect_attempts


class UserStats(BaseModel):
    total_items_studied: int = 0
    total_correct_attempts: int = 0
    total_incorrect_attempts: int = 0
    average_mastery: int = Field(default=0, ge=MASTERY_MIN, le=MASTERY_MAX)
    streak_days: int = 0
    last_study_date: datetime | None = None
    study_time_minutes: int = 0
    completed_tests: int = 0
    average_test_score: float = Field(default=0.0, ge=0, le=100)


class UserProgress(Document):
    """Aggregate root: one per user."""

    user_id: str
    item_progress: list[VocabItemProgress] = Field(default_factory=list)
    stats: UserStats = Field(default_factory=UserStats)
    achievements: list[str] = Field(default_factory=list)
    last_updated: datetime = Field(default_factory=datetime.now)

    def find_item(self, vocab_item_id: str) -> VocabItemProgress | None:
        for item in self.item_progress:
            if item.vocab_item_id == vocab_item_id:
                return item
        return None


class MasteryStats(BaseModel):
    """Read model produced by the statistics helper."""

    mastered_items_count: int = 0
    average_mastery: int = 0
    total_study_time: int = 0
    sessions_completed: int = 0
    average_test_score: float = 0.0
