"""Vocabulary item and list models."""

from enum import StrEnum

from pydantic import Field

from vocab_trainer.models.document import Document


class ListLevel(StrEnum):
    """Difficulty band of a vocabulary list."""

    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"


class VocabItem(Document):
    term: str
    definition_en: str
    definition_zh: str
    example_sentence: str
    part_of_speech: str
    difficulty_rating: int = Field(default=3, ge=1, le=5)
    tags: list[str] = Field(default_factory=list)
    creator_id: str


class VocabList(Document):
    title: str
    description: str = ""
    level: ListLevel = ListLevel.INTERMEDIATE
    item_ids: list[str] = Field(default_factory=list)
    creator_id: str
