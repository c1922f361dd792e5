"""Input schemas and the validate-then-execute step.

Request payloads are parsed into one of the typed ``*Input`` models below
before any domain operation runs. A payload that does not fit raises
``ValidationError`` carrying one ``{"path", "message"}`` entry per problem.
"""

from datetime import datetime
from typing import Any, TypeVar

import pydantic
import structlog
from pydantic import BaseModel, EmailStr, Field, field_validator, model_validator

from vocab_trainer.errors import ValidationError
from vocab_trainer.models.session import SessionStatus, StudyRecord, StudySessionSettings
from vocab_trainer.models.test import TestQuestion, TestSettings, TestType
from vocab_trainer.models.user import NativeLanguage, UserPreferences
from vocab_trainer.models.vocab import ListLevel

logger = structlog.get_logger()

M = TypeVar("M", bound=BaseModel)

# Aliases accepted for list levels (abbreviations, numeric codes, synonyms)
_LEVEL_ALIASES: dict[str, ListLevel] = {
    "b": ListLevel.BEGINNER,
    "beg": ListLevel.BEGINNER,
    "1": ListLevel.BEGINNER,
    "easy": ListLevel.BEGINNER,
    "basic": ListLevel.BEGINNER,
    "entry": ListLevel.BEGINNER,
    "beginner": ListLevel.BEGINNER,
    "i": ListLevel.INTERMEDIATE,
    "int": ListLevel.INTERMEDIATE,
    "2": ListLevel.INTERMEDIATE,
    "medium": ListLevel.INTERMEDIATE,
    "mid": ListLevel.INTERMEDIATE,
    "moderate": ListLevel.INTERMEDIATE,
    "intermediate": ListLevel.INTERMEDIATE,
    "a": ListLevel.ADVANCED,
    "adv": ListLevel.ADVANCED,
    "3": ListLevel.ADVANCED,
    "hard": ListLevel.ADVANCED,
    "difficult": ListLevel.ADVANCED,
    "expert": ListLevel.ADVANCED,
    "advanced": ListLevel.ADVANCED,
}


def normalize_level(level: Any) -> ListLevel:
    """Map free-form level values onto beginner/intermediate/advanced.

    Empty or unrecognised values fall back to beginner.
    """
    if level is None or level == "":
        return ListLevel.BEGINNER
    if not isinstance(level, (str, int)) or isinstance(level, bool):
        logger.debug("unknown_level_value", level=repr(level))
        return ListLevel.BEGINNER
    key = str(level).strip().lower()
    normalized = _LEVEL_ALIASES.get(key)
    if normalized is None:
        logger.debug("unknown_level_value", level=key)
        return ListLevel.BEGINNER
    return normalized


def format_errors(exc: pydantic.ValidationError) -> list[dict[str, str]]:
    return [
        {"path": ".".join(str(part) for part in err["loc"]), "message": err["msg"]}
        for err in exc.errors()
    ]


def validate_input(schema: type[M], payload: Any) -> M:
    """Parse ``payload`` into ``schema`` or raise ValidationError."""
    if isinstance(payload, schema):
        return payload
    try:
        return schema.model_validate(payload)
    except pydantic.ValidationError as e:
        errors = format_errors(e)
        logger.info("input_validation_failed", schema=schema.__name__, errors=errors)
        raise ValidationError("Validation failed", errors=errors) from e


# Users


class RegisterUserInput(BaseModel):
    username: str = Field(min_length=3, max_length=30)
    email: EmailStr
    password: str = Field(min_length=8)
    native_language: NativeLanguage = NativeLanguage.EN
    preferences: UserPreferences = Field(default_factory=UserPreferences)

    @field_validator("email")
    @classmethod
    def _lower_email(cls, value: str) -> str:
        return value.strip().lower()


class LoginInput(BaseModel):
    email: EmailStr
    password: str

    @field_validator("email")
    @classmethod
    def _lower_email(cls, value: str) -> str:
        return value.strip().lower()


class UpdateUserInput(BaseModel):
    username: str | None = Field(default=None, min_length=3, max_length=30)
    email: EmailStr | None = None
    native_language: NativeLanguage | None = None
    preferences: UserPreferences | None = None

    @field_validator("email")
    @classmethod
    def _lower_email(cls, value: str | None) -> str | None:
        return value.strip().lower() if value else value

    @model_validator(mode="after")
    def _at_least_one(self) -> "UpdateUserInput":
        if not self.model_fields_set:
            raise ValueError("At least one field must be provided")
        return self


# Vocabulary


class VocabItemInput(BaseModel):
    term: str = Field(min_length=1)
    definition_en: str = Field(min_length=1)
    definition_zh: str = Field(min_length=1)
    example_sentence: str = Field(min_length=1)
    part_of_speech: str = Field(min_length=1)
    difficulty_rating: int = Field(ge=1, le=5)
    tags: list[str] = Field(default_factory=list)

    @field_validator("term", "definition_en", "definition_zh", "example_sentence", "part_of_speech")
    @classmethod
    def _strip(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be blank")
        return value


class VocabListInput(BaseModel):
    title: str = Field(min_length=1, max_length=100)
    description: str = ""
    level: ListLevel = ListLevel.INTERMEDIATE
    item_ids: list[str] = Field(default_factory=list)

    @field_validator("level", mode="before")
    @classmethod
    def _normalize_level(cls, value: Any) -> ListLevel:
        return normalize_level(value)


# Tests


class TestInput(BaseModel):
    __test__ = False

    title: str = Field(min_length=1)
    description: str = ""
    type: TestType = TestType.MULTIPLE_CHOICE
    questions: list[TestQuestion] = Field(default_factory=list)
    settings: TestSettings = Field(default_factory=TestSettings)
    vocab_list_id: str | None = None


class TestUpdateInput(BaseModel):
    __test__ = False

    title: str | None = Field(default=None, min_length=1)
    description: str | None = None
    type: TestType | None = None
    questions: list[TestQuestion] | None = Field(default=None, min_length=1)
    settings: TestSettings | None = None


class AnswerInput(BaseModel):
    question_index: int = Field(ge=0)
    user_answer: str | int
    time_spent: int | None = Field(default=None, ge=0)


class TestResultInput(BaseModel):
    __test__ = False

    test_id: str
    answers: list[AnswerInput] = Field(default_factory=list)
    completion_time: int = Field(default=0, ge=0)
    started_at: datetime | None = None


# Study sessions


class StudySessionInput(BaseModel):
    title: str = Field(min_length=1)
    vocab_list_ids: list[str] = Field(default_factory=list)
    settings: StudySessionSettings = Field(default_factory=StudySessionSettings)


class UpdateStudySessionInput(BaseModel):
    end_time: datetime | None = None
    status: SessionStatus | None = None
    items_studied: list[StudyRecord] | None = None


class CompleteStudySessionInput(BaseModel):
    duration: int | None = Field(default=None, ge=0)
    items_studied: int = Field(default=0, ge=0)
    correct_answers: int = Field(default=0, ge=0)

    @model_validator(mode="after")
    def _correct_within_studied(self) -> "CompleteStudySessionInput":
        if self.correct_answers > self.items_studied:
            raise ValueError("correct_answers cannot exceed items_studied")
        return self


# Progress


class ItemAttemptInput(BaseModel):
    vocab_item_id: str
    correct: bool


class StudyTimeInput(BaseModel):
    minutes: int = Field(ge=0)


class ItemMasteryInput(BaseModel):
    vocab_item_id: str
    mastery_level: int = Field(ge=0, le=100)

