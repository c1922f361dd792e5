"""Vocabulary item and list routes."""

from typing import Any

from fastapi import APIRouter, Body, Depends, Query

from vocab_trainer.api.deps import get_current_user, get_vocabulary_service
from vocab_trainer.models.user import User
from vocab_trainer.models.vocab import VocabItem, VocabList
from vocab_trainer.services.vocabulary import VocabularyService
from vocab_trainer.validation import VocabItemInput, VocabListInput, validate_input

items_router = APIRouter(prefix="/api/vocab-items", tags=["vocabulary"])
lists_router = APIRouter(prefix="/api/vocab-lists", tags=["vocabulary"])


@items_router.get("")
async def list_items(
    _: User = Depends(get_current_user),
    vocab: VocabularyService = Depends(get_vocabulary_service),
) -> list[VocabItem]:
    return vocab.list_items()


@items_router.get("/search")
async def search_items(
    q: str = Query(...),
    _: User = Depends(get_current_user),
    vocab: VocabularyService = Depends(get_vocabulary_service),
) -> list[VocabItem]:
    return vocab.search_items(q)


@items_router.get("/by-tags")
async def items_by_tags(
    tags: list[str] = Query(...),
    _: User = Depends(get_current_user),
    vocab: VocabularyService = Depends(get_vocabulary_service),
) -> list[VocabItem]:
    return vocab.items_by_tags(tags)


@items_router.get("/by-difficulty/{difficulty}")
async def items_by_difficulty(
    difficulty: int,
    _: User = Depends(get_current_user),
    vocab: VocabularyService = Depends(get_vocabulary_service),
) -> list[VocabItem]:
    return vocab.items_by_difficulty(difficulty)


@items_router.get("/{item_id}")
async def get_item(
    item_id: str,
    _: User = Depends(get_current_user),
    vocab: VocabularyService = Depends(get_vocabulary_service),
) -> VocabItem:
    return vocab.get_item(item_id)


@items_router.post("", status_code=201)
async def create_item(
    payload: dict[str, Any] = Body(...),
    user: User = Depends(get_current_user),
    vocab: VocabularyService = Depends(get_vocabulary_service),
) -> VocabItem:
    return vocab.create_item(user.id, validate_input(VocabItemInput, payload))


@items_router.put("/{item_id}")
async def update_item(
    item_id: str,
    payload: dict[str, Any] = Body(...),
    user: User = Depends(get_current_user),
    vocab: VocabularyService = Depends(get_vocabulary_service),
) -> VocabItem:
    return vocab.update_item(item_id, user.id, validate_input(VocabItemInput, payload))


@items_router.delete("/{item_id}")
async def delete_item(
    item_id: str,
    user: User = Depends(get_current_user),
    vocab: VocabularyService = Depends(get_vocabulary_service),
) -> bool:
    return vocab.delete_item(item_id, user.id)


@lists_router.get("")
async def list_lists(
    _: User = Depends(get_current_user),
    vocab: VocabularyService = Depends(get_vocabulary_service),
) -> list[VocabList]:
    return vocab.list_lists()


@lists_router.get("/mine")
async def my_lists(
    user: User = Depends(get_current_user),
    vocab: VocabularyService = Depends(get_vocabulary_service),
) -> list[VocabList]:
    return vocab.lists_by_user(user.id)


@lists_router.get("/{list_id}")
async def get_list(
    list_id: str,
    _: User = Depends(get_current_user),
    vocab: VocabularyService = Depends(get_vocabulary_service),
) -> VocabList:
    return vocab.get_list(list_id)


@lists_router.get("/{list_id}/items")
async def get_list_items(
    list_id: str,
    _: User = Depends(get_current_user),
    vocab: VocabularyService = Depends(get_vocabulary_service),
) -> list[VocabItem]:
    return vocab.list_items_of(list_id)


@lists_router.post("", status_code=201)
async def create_list(
    payload: dict[str, Any] = Body(...),
    user: User = Depends(get_current_user),
    vocab: VocabularyService = Depends(get_vocabulary_service),
) -> VocabList:
    return vocab.create_list(user.id, validate_input(VocabListInput, payload))


@lists_router.put("/{list_id}")
async def update_list(
    list_id: str,
    payload: dict[str, Any] = Body(...),
    user: User = Depends(get_current_user),
    vocab: VocabularyService = Depends(get_vocabulary_service),
) -> VocabList:
    return vocab.update_list(list_id, user.id, validate_input(VocabListInput, payload))


@lists_router.delete("/{list_id}")
async def delete_list(
    list_id: str,
    user: User = Depends(get_current_user),
    vocab: VocabularyService = Depends(get_vocabulary_service),
) -> bool:
    return vocab.delete_list(list_id, user.id)


@lists_router.post("/{list_id}/items/{item_id}")
async def add_item_to_list(
    list_id: str,
    item_id: str,
    user: User = Depends(get_current_user),
    vocab: VocabularyService = Depends(get_vocabulary_service),
) -> VocabList:
    return vocab.add_item(list_id, item_id, user.id)


@lists_router.delete("/{list_id}/items/{item_id}")
async def remove_item_from_list(
    list_id: str,
    item_id: str,
    user: User = Depends(get_current_user),
    vocab: VocabularyService = Depends(get_vocabulary_service),
) -> VocabList:
    return vocab.remove_item(list_id, item_id, user.id)
