"""Study session data models."""

from datetime import datetime
from enum import StrEnum

from pydantic import BaseModel, Field

from vocab_trainer.models.document import Document


class SessionStatus(StrEnum):
    """Study session lifecycle states. ``completed`` is terminal."""

    ACTIVE = "active"
    PAUSED = "paused"
    COMPLETED = "completed"


class StudyRecord(BaseModel):
    """Per-item record kept inside a session."""

    vocab_item_id: str
    correct_attempts: int = Field(default=0, ge=0)
    incorrect_attempts: int = Field(default=0, ge=0)
    last_reviewed_at: datetime = Field(default_factory=datetime.now)
    user_difficulty_rating: int | None = Field(default=None, ge=1, le=5)
    notes: str = ""


class StudySessionSettings(BaseModel):
    use_spaced_repetition: bool = True
    focus_on_difficult: bool = False
    study_both_languages: bool = True


class StudySession(Document):
    user_id: str
    title: str
    start_time: datetime = Field(default_factory=datetime.now)
    end_time: datetime | None = None
    duration: int = 0  # minutes
    vocab_list_ids: list[str] = Field(default_factory=list)
    items_studied: list[StudyRecord] = Field(default_factory=list)
    status: SessionStatus = SessionStatus.ACTIVE
    settings: StudySessionSettings = Field(default_factory=StudySessionSettings)
    completed_at: datetime | None = None
    items_studied_count: int = 0
    correct_answers: int = 0
    accuracy: float = 0.0

    @property
    def elapsed_minutes(self) -> int:
        """Minutes between start and end (or now while the session is open)."""
        end = self.end_time or datetime.now()
        return max(0, round((end - self.start_time).total_seconds() / 60))
