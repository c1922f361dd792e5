"""Shared fixtures."""

import pytest

from vocab_trainer.models.vocab import VocabItem, VocabList
from vocab_trainer.storage.database import Database


@pytest.fixture
def db(tmp_path):
    return Database(tmp_path / "db")


@pytest.fixture
def make_item(db):
    def _make(term: str, definition: str, creator_id: str = "author", **kwargs) -> VocabItem:
        item = VocabItem(
            term=term,
            definition_en=definition,
            definition_zh=f"{term}-zh",
            example_sentence=f"An example with {term}.",
            part_of_speech="noun",
            creator_id=creator_id,
            **kwargs,
        )
        return db.vocab_items.insert(item)

    return _make


@pytest.fixture
def make_list(db):
    def _make(item_ids: list[str], creator_id: str = "author", title: str = "Basics") -> VocabList:
        return db.vocab_lists.insert(
            VocabList(title=title, item_ids=item_ids, creator_id=creator_id)
        )

    return _make
