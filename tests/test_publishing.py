"""Tests for test creation, question generation and publishing."""

import random

import pytest

from vocab_trainer.errors import ForbiddenError, NotFoundError, ValidationError
from vocab_trainer.lifecycle.publishing import TestController as Controller
from vocab_trainer.lifecycle.publishing import generate_questions
from vocab_trainer.models.test import FillInBlanksQuestion, MultipleChoiceQuestion, Test, TestType
from vocab_trainer.validation import TestInput as CreateInput
from vocab_trainer.validation import TestUpdateInput as UpdateInput


@pytest.fixture
def controller(db):
    return Controller(db, rng=random.Random(7))


@pytest.fixture
def words(make_item):
    return [
        make_item("apple", "a round fruit"),
        make_item("run", "to move quickly on foot"),
        make_item("blue", "the colour of the sky"),
        make_item("book", "a set of printed pages"),
        make_item("tree", "a tall woody plant"),
    ]


def _fill_in(answer="cat"):
    return FillInBlanksQuestion(vocab_item_id="v1", sentence="The ___ sat.", blank_index=1, correct_answer=answer)


class TestGenerateQuestions:
    def test_one_question_per_item(self, words):
        questions = generate_questions(words, random.Random(1))
        assert len(questions) == len(words)
        for item, question in zip(words, questions):
            assert isinstance(question, MultipleChoiceQuestion)
            assert question.vocab_item_id == item.id
            assert item.term in question.prompt
            assert len(question.options) == 4
            assert len(set(question.options)) == 4
            assert question.options[question.correct_option_index] == item.definition_en

    def test_seeded_rng_is_reproducible(self, words):
        first = generate_questions(words, random.Random(3))
        second = generate_questions(words, random.Random(3))
        assert first == second

    def test_single_item_has_no_distractors(self, words):
        [question] = generate_questions(words[:1], random.Random(0))
        assert question.options == [words[0].definition_en]
        assert question.correct_option_index == 0


class TestCreate:
    def test_generates_from_vocab_list(self, controller, words, make_list):
        vocab_list = make_list([w.id for w in words])
        test = controller.create("author", CreateInput(title="Quiz", vocab_list_id=vocab_list.id))
        assert len(test.questions) == 5
        assert test.type == TestType.MULTIPLE_CHOICE
        assert test.is_published is False

    def test_explicit_questions(self, controller):
        test = controller.create(
            "author",
            CreateInput(title="Blanks", type=TestType.FILL_IN_BLANKS, questions=[_fill_in()]),
        )
        assert test.type == TestType.FILL_IN_BLANKS
        assert isinstance(test.questions[0], FillInBlanksQuestion)

    def test_unknown_vocab_list(self, controller):
        with pytest.raises(NotFoundError):
            controller.create("author", CreateInput(title="Quiz", vocab_list_id="missing"))

    def test_no_questions_rejected(self, controller, db, make_list):
        empty = make_list([])
        with pytest.raises(ValidationError):
            controller.create("author", CreateInput(title="Quiz", vocab_list_id=empty.id))
        with pytest.raises(ValidationError):
            controller.create("author", CreateInput(title="Quiz"))
        assert db.tests.find() == []


class TestPublish:
    def test_publish(self, controller):
        test = controller.create("author", CreateInput(title="Q", questions=[_fill_in()]))
        published = controller.publish(test.id, "author")
        assert published.is_published is True

    def test_publish_without_questions(self, controller, db):
        draft = db.tests.insert(Test(title="Empty", creator_id="author"))
        with pytest.raises(ValidationError):
            controller.publish(draft.id, "author")
        assert db.tests.get(draft.id).is_published is False

    def test_publish_missing(self, controller):
        with pytest.raises(NotFoundError):
            controller.publish("missing", "author")

    def test_publish_by_other_user_forbidden(self, controller, db):
        draft = db.tests.insert(Test(title="Empty", creator_id="author"))
        with pytest.raises(ForbiddenError):
            controller.publish(draft.id, "someone-else")
        assert db.tests.get(draft.id).is_published is False


class TestEditing:
    def test_update_partial(self, controller):
        test = controller.create("author", CreateInput(title="Q", questions=[_fill_in()]))
        updated = controller.update(test.id, "author", UpdateInput(title="Renamed"))
        assert updated.title == "Renamed"
        assert updated.questions == test.questions

    def test_update_forbidden(self, controller):
        test = controller.create("author", CreateInput(title="Q", questions=[_fill_in()]))
        with pytest.raises(ForbiddenError):
            controller.update(test.id, "other", UpdateInput(title="Mine now"))

    def test_delete(self, controller):
        test = controller.create("author", CreateInput(title="Q", questions=[_fill_in()]))
        assert controller.delete(test.id, "author") is True
        with pytest.raises(NotFoundError):
            controller.get(test.id)

    def test_available_lists_published_and_own(self, controller):
        mine = controller.create("me", CreateInput(title="Draft", questions=[_fill_in()]))
        theirs = controller.create("them", CreateInput(title="Public", questions=[_fill_in()]))
        hidden = controller.create("them", CreateInput(title="Hidden", questions=[_fill_in()]))
        controller.publish(theirs.id, "them")

        available = {t.id for t in controller.list_available("me")}
        assert available == {mine.id, theirs.id}
        assert hidden.id not in available
        assert {t.id for t in controller.list_by_creator("them")} == {theirs.id, hidden.id}
        assert len(controller.list_all()) == 3
