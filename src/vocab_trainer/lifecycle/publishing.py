"""Test authoring and publishing.

A test is created unpublished. When it is built from a vocabulary list
without explicit questions, one multiple-choice question is generated per
list item. Publishing is one-way and requires at least one question.
"""

import random
from collections.abc import Sequence

import structlog

from vocab_trainer.errors import ForbiddenError, NotFoundError, ValidationError
from vocab_trainer.models.test import MultipleChoiceQuestion, Test, TestType
from vocab_trainer.models.vocab import VocabItem
from vocab_trainer.storage.database import Database
from vocab_trainer.validation import TestInput, TestUpdateInput

logger = structlog.get_logger()

DISTRACTOR_COUNT = 3


def generate_questions(
    items: Sequence[VocabItem], rng: random.Random
) -> list[MultipleChoiceQuestion]:
    """One definition question per item, distractors taken from the other items."""
    questions = []
    for item in items:
        pool = sorted({
            other.definition_en for other in items
            if other.id != item.id and other.definition_en != item.definition_en
        })
        distractors = rng.sample(pool, min(DISTRACTOR_COUNT, len(pool)))
        options = [item.definition_en, *distractors]
        rng.shuffle(options)
        questions.append(
            MultipleChoiceQuestion(
                vocab_item_id=item.id,
                difficulty_rating=item.difficulty_rating,
                prompt=f'What is the correct definition of "{item.term}"?',
                options=options,
                correct_option_index=options.index(item.definition_en),
            )
        )
    return questions


class TestController:
    """Create, edit, publish and query tests.

    Args:
        db: Document database.
        rng: Random source for option order; pass a seeded one for
            reproducible question generation.
    """

    __test__ = False

    def __init__(self, db: Database, rng: random.Random | None = None):
        self.db = db
        self.rng = rng or random.Random()

    def _require(self, test_id: str) -> Test:
        test = self.db.tests.get(test_id)
        if test is None:
            raise NotFoundError("Test not found")
        return test

    def _owned(self, test_id: str, caller_id: str, action: str) -> Test:
        test = self._require(test_id)
        if test.creator_id != caller_id:
            raise ForbiddenError(f"Not authorized to {action} this test")
        return test

    def create(self, creator_id: str, data: TestInput) -> Test:
        questions = list(data.questions)
        if data.vocab_list_id is not None:
            vocab_list = self.db.vocab_lists.get(data.vocab_list_id)
            if vocab_list is None:
                raise NotFoundError("Vocabulary list not found")
            if not questions:
                items = [
                    item for item in (self.db.vocab_items.get(i) for i in vocab_list.item_ids)
                    if item is not None
                ]
                questions = generate_questions(items, self.rng)

        if not questions:
            raise ValidationError(
                "Test must have at least one question",
                errors=[{"path": "questions", "message": "at least one question is required"}],
            )

        test = self.db.tests.insert(
            Test(
                title=data.title,
                description=data.description,
                type=data.type if data.questions else TestType.MULTIPLE_CHOICE,
                questions=questions,
                settings=data.settings,
                creator_id=creator_id,
                vocab_list_id=data.vocab_list_id,
            )
        )
        logger.info(
            "test_created",
            test_id=test.id,
            creator_id=creator_id,
            question_count=len(questions),
            generated=not data.questions,
        )
        return test

    def update(self, test_id: str, caller_id: str, data: TestUpdateInput) -> Test:
        test = self._owned(test_id, caller_id, "update")
        changes = {
            field: getattr(data, field)
            for field in data.model_fields_set
            if getattr(data, field) is not None
        }
        stored = self.db.tests.replace(test.model_copy(update=changes))
        logger.info("test_updated", test_id=test_id, fields=sorted(changes))
        return stored

    def delete(self, test_id: str, caller_id: str) -> bool:
        self._owned(test_id, caller_id, "delete")
        deleted = self.db.tests.delete(test_id)
        logger.info("test_deleted", test_id=test_id)
        return deleted

    def publish(self, test_id: str, caller_id: str) -> Test:
        """Make a test visible to everyone.

        Raises:
            NotFoundError: No such test.
            ForbiddenError: Caller did not create the test.
            ValidationError: The test has no questions; it stays unpublished.
        """
        test = self._owned(test_id, caller_id, "publish")
        if not test.questions:
            raise ValidationError(
                "Cannot publish a test with no questions",
                errors=[{"path": "questions", "message": "at least one question is required"}],
            )
        stored = self.db.tests.replace(test.model_copy(update={"is_published": True}))
        logger.info("test_published", test_id=test_id, question_count=len(test.questions))
        return stored

    def get(self, test_id: str) -> Test:
        return self._require(test_id)

    def list_all(self) -> list[Test]:
        return self.db.tests.find()

    def list_by_creator(self, creator_id: str) -> list[Test]:
        return self.db.tests.find(lambda t: t.creator_id == creator_id)

    def list_available(self, user_id: str) -> list[Test]:
        """Published tests plus the caller's own drafts."""
        return self.db.tests.find(lambda t: t.is_published or t.creator_id == user_id)
