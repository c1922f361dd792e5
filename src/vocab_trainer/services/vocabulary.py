"""Vocabulary items and lists."""

from collections.abc import Iterable

import structlog

from vocab_trainer.errors import ConflictError, ForbiddenError, NotFoundError, ValidationError
from vocab_trainer.models.vocab import VocabItem, VocabList
from vocab_trainer.storage.database import Database
from vocab_trainer.validation import VocabItemInput, VocabListInput

logger = structlog.get_logger()


class VocabularyService:
    def __init__(self, db: Database):
        self.db = db

    # Items

    def list_items(self) -> list[VocabItem]:
        return self.db.vocab_items.find()

    def get_item(self, item_id: str) -> VocabItem:
        item = self.db.vocab_items.get(item_id)
        if item is None:
            raise NotFoundError("Vocabulary item not found")
        return item

    def search_items(self, query: str) -> list[VocabItem]:
        """Case-insensitive substring match on the term and both definitions."""
        needle = query.strip().lower()
        if not needle:
            return []
        return self.db.vocab_items.find(
            lambda item: any(
                needle in text.lower()
                for text in (item.term, item.definition_en, item.definition_zh)
            )
        )

    def items_by_tags(self, tags: Iterable[str]) -> list[VocabItem]:
        wanted = {tag.strip().lower() for tag in tags if tag.strip()}
        return self.db.vocab_items.find(
            lambda item: any(tag.lower() in wanted for tag in item.tags)
        )

    def items_by_difficulty(self, difficulty: int) -> list[VocabItem]:
        if not 1 <= difficulty <= 5:
            raise ValidationError(
                "Difficulty must be between 1 and 5",
                errors=[{"path": "difficulty", "message": "must be between 1 and 5"}],
            )
        return self.db.vocab_items.find(lambda item: item.difficulty_rating == difficulty)

    def create_item(self, creator_id: str, data: VocabItemInput) -> VocabItem:
        item = self.db.vocab_items.insert(VocabItem(**data.model_dump(), creator_id=creator_id))
        logger.info("vocab_item_created", item_id=item.id, term=item.term)
        return item

    def _owned_item(self, item_id: str, caller_id: str, action: str) -> VocabItem:
        item = self.get_item(item_id)
        if item.creator_id != caller_id:
            raise ForbiddenError(f"Not authorized to {action} this vocabulary item")
        return item

    def update_item(self, item_id: str, caller_id: str, data: VocabItemInput) -> VocabItem:
        item = self._owned_item(item_id, caller_id, "update")
        stored = self.db.vocab_items.replace(item.model_copy(update=data.model_dump()))
        logger.info("vocab_item_updated", item_id=item_id)
        return stored

    def delete_item(self, item_id: str, caller_id: str) -> bool:
        self._owned_item(item_id, caller_id, "delete")
        return self.db.vocab_items.delete(item_id)

    # Lists

    def list_lists(self) -> list[VocabList]:
        return self.db.vocab_lists.find()

    def get_list(self, list_id: str) -> VocabList:
        vocab_list = self.db.vocab_lists.get(list_id)
        if vocab_list is None:
            raise NotFoundError("Vocabulary list not found")
        return vocab_list

    def lists_by_user(self, user_id: str) -> list[VocabList]:
        return self.db.vocab_lists.find(lambda vl: vl.creator_id == user_id)

    def list_items_of(self, list_id: str) -> list[VocabItem]:
        """Items of a list in list order; ids whose item was deleted are skipped."""
        vocab_list = self.get_list(list_id)
        items = (self.db.vocab_items.get(item_id) for item_id in vocab_list.item_ids)
        return [item for item in items if item is not None]

    def _check_items_exist(self, item_ids: Iterable[str]) -> None:
        missing = [item_id for item_id in item_ids if self.db.vocab_items.get(item_id) is None]
        if missing:
            raise ValidationError(
                "Some vocabulary items do not exist",
                errors=[{"path": "item_ids", "message": f"unknown item {item_id}"} for item_id in missing],
            )

    def create_list(self, creator_id: str, data: VocabListInput) -> VocabList:
        self._check_items_exist(data.item_ids)
        vocab_list = self.db.vocab_lists.insert(
            VocabList(
                title=data.title,
                description=data.description,
                level=data.level,
                item_ids=list(dict.fromkeys(data.item_ids)),
                creator_id=creator_id,
            )
        )
        logger.info("vocab_list_created", list_id=vocab_list.id, level=vocab_list.level)
        return vocab_list

    def _owned_list(self, list_id: str, caller_id: str, action: str) -> VocabList:
        vocab_list = self.get_list(list_id)
        if vocab_list.creator_id != caller_id:
            raise ForbiddenError(f"Not authorized to {action} this vocabulary list")
        return vocab_list

    def update_list(self, list_id: str, caller_id: str, data: VocabListInput) -> VocabList:
        vocab_list = self._owned_list(list_id, caller_id, "update")
        self._check_items_exist(data.item_ids)
        changes = data.model_dump()
        changes["item_ids"] = list(dict.fromkeys(data.item_ids))
        stored = self.db.vocab_lists.replace(vocab_list.model_copy(update=changes))
        logger.info("vocab_list_updated", list_id=list_id)
        return stored

    def delete_list(self, list_id: str, caller_id: str) -> bool:
        self._owned_list(list_id, caller_id, "delete")
        return self.db.vocab_lists.delete(list_id)

    def add_item(self, list_id: str, item_id: str, caller_id: str) -> VocabList:
        vocab_list = self._owned_list(list_id, caller_id, "modify")
        self.get_item(item_id)
        if item_id in vocab_list.item_ids:
            raise ConflictError("Item already exists in this list")
        return self.db.vocab_lists.replace(
            vocab_list.model_copy(update={"item_ids": [*vocab_list.item_ids, item_id]})
        )

    def remove_item(self, list_id: str, item_id: str, caller_id: str) -> VocabList:
        vocab_list = self._owned_list(list_id, caller_id, "modify")
        if item_id not in vocab_list.item_ids:
            raise ValidationError(
                "Item is not in this list",
                errors=[{"path": "item_id", "message": "not in list"}],
            )
        remaining = [i for i in vocab_list.item_ids if i != item_id]
        return self.db.vocab_lists.replace(vocab_list.model_copy(update={"item_ids": remaining}))
