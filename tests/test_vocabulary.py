"""Tests for vocabulary items, lists and level normalisation."""

import pytest

from vocab_trainer.errors import ConflictError, ForbiddenError, NotFoundError, ValidationError
from vocab_trainer.models.vocab import ListLevel
from vocab_trainer.services.vocabulary import VocabularyService
from vocab_trainer.validation import VocabItemInput, VocabListInput, normalize_level


@pytest.fixture
def vocab(db):
    return VocabularyService(db)


def _item_input(term, definition="meaning", difficulty_rating=3, **kwargs):
    return VocabItemInput(
        term=term,
        definition_en=definition,
        definition_zh="意思",
        example_sentence=f"Use {term} here.",
        part_of_speech="noun",
        difficulty_rating=difficulty_rating,
        **kwargs,
    )


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("b", ListLevel.BEGINNER),
        ("Easy", ListLevel.BEGINNER),
        (1, ListLevel.BEGINNER),
        ("INT", ListLevel.INTERMEDIATE),
        ("moderate", ListLevel.INTERMEDIATE),
        ("2", ListLevel.INTERMEDIATE),
        (" adv ", ListLevel.ADVANCED),
        ("expert", ListLevel.ADVANCED),
        (3, ListLevel.ADVANCED),
        ("", ListLevel.BEGINNER),
        (None, ListLevel.BEGINNER),
        ("elite", ListLevel.BEGINNER),
    ],
)
def test_normalize_level(raw, expected):
    assert normalize_level(raw) == expected


class TestItems:
    def test_search_is_case_insensitive(self, vocab):
        vocab.create_item("u1", _item_input("Apple", "a red fruit"))
        vocab.create_item("u1", _item_input("Run", "move fast"))
        assert [i.term for i in vocab.search_items("FRUIT")] == ["Apple"]
        assert [i.term for i in vocab.search_items("意思")] != []
        assert vocab.search_items("   ") == []

    def test_by_tags_any_match(self, vocab):
        vocab.create_item("u1", _item_input("apple", tags=["food", "a1"]))
        vocab.create_item("u1", _item_input("run", tags=["verb"]))
        assert [i.term for i in vocab.items_by_tags(["Food", "other"])] == ["apple"]

    def test_by_difficulty(self, vocab):
        vocab.create_item("u1", _item_input("easy", difficulty_rating=1))
        vocab.create_item("u1", _item_input("hard", difficulty_rating=5))
        assert [i.term for i in vocab.items_by_difficulty(5)] == ["hard"]
        with pytest.raises(ValidationError):
            vocab.items_by_difficulty(6)

    def test_update_and_delete_creator_only(self, vocab):
        item = vocab.create_item("u1", _item_input("apple"))
        with pytest.raises(ForbiddenError):
            vocab.update_item(item.id, "u2", _item_input("pear"))
        updated = vocab.update_item(item.id, "u1", _item_input("pear"))
        assert updated.term == "pear"
        assert updated.creator_id == "u1"
        with pytest.raises(ForbiddenError):
            vocab.delete_item(item.id, "u2")
        assert vocab.delete_item(item.id, "u1") is True
        with pytest.raises(NotFoundError):
            vocab.get_item(item.id)


class TestLists:
    def test_create_requires_existing_items(self, vocab):
        with pytest.raises(ValidationError) as exc_info:
            vocab.create_list("u1", VocabListInput(title="L", item_ids=["ghost"]))
        assert exc_info.value.errors[0]["path"] == "item_ids"

    def test_create_normalises_level(self, vocab):
        item = vocab.create_item("u1", _item_input("apple"))
        vocab_list = vocab.create_list(
            "u1", VocabListInput.model_validate({"title": "L", "level": "hard", "item_ids": [item.id]})
        )
        assert vocab_list.level == ListLevel.ADVANCED
        assert vocab.list_items_of(vocab_list.id)[0].id == item.id
        assert vocab.lists_by_user("u1") == [vocab_list]

    def test_add_and_remove_items(self, vocab):
        apple = vocab.create_item("u1", _item_input("apple"))
        pear = vocab.create_item("u1", _item_input("pear"))
        vocab_list = vocab.create_list("u1", VocabListInput(title="Fruit", item_ids=[apple.id]))

        vocab_list = vocab.add_item(vocab_list.id, pear.id, "u1")
        assert vocab_list.item_ids == [apple.id, pear.id]
        with pytest.raises(ConflictError):
            vocab.add_item(vocab_list.id, pear.id, "u1")

        vocab_list = vocab.remove_item(vocab_list.id, apple.id, "u1")
        assert vocab_list.item_ids == [pear.id]
        with pytest.raises(ValidationError):
            vocab.remove_item(vocab_list.id, apple.id, "u1")

    def test_mutations_creator_only(self, vocab):
        vocab_list = vocab.create_list("u1", VocabListInput(title="Mine"))
        with pytest.raises(ForbiddenError):
            vocab.update_list(vocab_list.id, "u2", VocabListInput(title="Theirs"))
        with pytest.raises(ForbiddenError):
            vocab.delete_list(vocab_list.id, "u2")
        assert vocab.delete_list(vocab_list.id, "u1") is True
