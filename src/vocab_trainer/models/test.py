"""Vocabulary test models.

A test holds an ordered list of questions. Each question is one of three
variants, tagged by its ``type`` field, and validates its own shape.
"""

from datetime import datetime
from enum import StrEnum
from typing import Annotated, Literal

from pydantic import BaseModel, Field, model_validator

from vocab_trainer.models.document import Document


class TestType(StrEnum):
    __test__ = False

    MULTIPLE_CHOICE = "multipleChoice"
    MATCHING = "matching"
    FILL_IN_BLANKS = "fillInBlanks"


class _QuestionBase(BaseModel):
    vocab_item_id: str
    difficulty_rating: int = Field(default=3, ge=1, le=5)


class MultipleChoiceQuestion(_QuestionBase):
    type: Literal["multipleChoice"] = "multipleChoice"
    prompt: str = Field(min_length=1)
    options: list[str] = Field(min_length=1)
    correct_option_index: int

    @model_validator(mode="after")
    def _check_index(self) -> "MultipleChoiceQuestion":
        if not 0 <= self.correct_option_index < len(self.options):
            raise ValueError("correct_option_index must point into options")
        return self


class MatchingQuestion(_QuestionBase):
    type: Literal["matching"] = "matching"
    term: str = Field(min_length=1)
    options: list[str] = Field(min_length=1)
    correct_option_index: int

    @model_validator(mode="after")
    def _check_index(self) -> "MatchingQuestion":
        if not 0 <= self.correct_option_index < len(self.options):
            raise ValueError("correct_option_index must point into options")
        return self


class FillInBlanksQuestion(_QuestionBase):
    type: Literal["fillInBlanks"] = "fillInBlanks"
    sentence: str = Field(min_length=1)
    blank_index: int = Field(ge=0)
    correct_answer: str


TestQuestion = Annotated[
    MultipleChoiceQuestion | MatchingQuestion | FillInBlanksQuestion,
    Field(discriminator="type"),
]


class TestSettings(BaseModel):
    __test__ = False

    time_limit: int | None = None
    randomize_questions: bool = True
    randomize_options: bool = True
    show_feedback_after_each_question: bool = True


class Test(Document):
    __test__ = False

    title: str
    description: str = ""
    type: TestType = TestType.MULTIPLE_CHOICE
    questions: list[TestQuestion] = Field(default_factory=list)
    settings: TestSettings = Field(default_factory=TestSettings)
    creator_id: str
    vocab_list_id: str | None = None
    is_published: bool = False


def is_correct_answer(question: TestQuestion, answer: str | int) -> bool:
    """Grade one answer against its question."""
    match question:
        case MultipleChoiceQuestion() | MatchingQuestion():
            try:
                return int(answer) == question.correct_option_index
            except (TypeError, ValueError):
                return False
        case FillInBlanksQuestion():
            return str(answer).strip().lower() == question.correct_answer.strip().lower()
        case _:
            raise TypeError(f"Unknown question variant: {type(question).__name__}")


class QuestionResponse(BaseModel):
    question_index: int = Field(ge=0)
    user_answer: str | int
    is_correct: bool = False
    time_spent: int | None = None


class TestResult(Document):
    __test__ = False

    test_id: str
    user_id: str
    score: float = Field(default=0.0, ge=0, le=100)
    total_questions: int = 0
    correct_answers: int = 0
    completion_time: int = 0
    responses: list[QuestionResponse] = Field(default_factory=list)
    completed: bool = True
    started_at: datetime = Field(default_factory=datetime.now)
    completed_at: datetime | None = None
