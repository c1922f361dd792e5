"""Tests for the progress tracker against a temporary document store."""

import asyncio
import gc
from datetime import datetime, timedelta

import pytest

from vocab_trainer.errors import ConflictError, NotFoundError, ValidationError
from vocab_trainer.progress.tracker import ProgressTracker


@pytest.fixture
def tracker(db):
    return ProgressTracker(db.user_progress)


async def test_get_progress_creates_empty_aggregate(tracker, db):
    progress = await tracker.get_progress("u1")
    assert progress.id == "u1"
    assert progress.item_progress == []
    assert progress.stats.average_mastery == 0
    assert db.user_progress.get("u1") is not None


async def test_record_attempt_persists(tracker, db):
    now = datetime(2026, 3, 2, 10, 0)
    await tracker.record_attempt("u1", "v1", True, now=now)
    stored = await tracker.record_attempt("u1", "v1", True, now=now + timedelta(days=1))

    reloaded = db.user_progress.get("u1")
    assert reloaded.version == stored.version
    item = reloaded.find_item("v1")
    assert item.mastery_level == 30
    assert reloaded.stats.streak_days == 2
    assert reloaded.stats.total_correct_attempts == 2


async def test_concurrent_attempts_are_serialised(tracker, db):
    await asyncio.gather(*(tracker.record_attempt("u1", f"v{i}", True) for i in range(5)))
    progress = db.user_progress.get("u1")
    assert len(progress.item_progress) == 5
    assert progress.stats.total_correct_attempts == 5
    assert progress.stats.average_mastery == 20


async def test_stale_write_is_rejected(tracker, db):
    await tracker.record_attempt("u1", "v1", True)
    stale = db.user_progress.get("u1")
    await tracker.record_attempt("u1", "v1", False)

    with pytest.raises(ConflictError):
        db.user_progress.replace(stale)


async def test_record_attempt_after_aggregate_deleted(tracker, db, monkeypatch):
    await tracker.get_progress("u1")
    original_get = db.user_progress.get

    def get_then_delete(doc_id):
        doc = original_get(doc_id)
        db.user_progress.delete(doc_id)
        return doc

    monkeypatch.setattr(db.user_progress, "get", get_then_delete)
    with pytest.raises(NotFoundError):
        await tracker.record_attempt("u1", "v1", True)


async def test_item_progress_defaults_for_unknown_item(tracker):
    now = datetime(2026, 3, 2, 10, 0)
    item = await tracker.get_item_progress("u1", "missing", now=now)
    assert item.mastery_level == 0
    assert item.review_count == 0
    assert item.next_review_due == now


async def test_due_items_sorted(tracker):
    base = datetime(2026, 3, 1, 8, 0)
    await tracker.record_attempt("u1", "late", True, now=base)
    await tracker.record_attempt("u1", "early", False, now=base + timedelta(hours=1))
    await tracker.record_attempt("u1", "future", True, now=base + timedelta(days=5))

    due = await tracker.due_items("u1", now=base + timedelta(days=2))
    assert [item.vocab_item_id for item in due] == ["early", "late"]


async def test_log_study_session(tracker):
    await tracker.log_study_session("u1", 15)
    progress = await tracker.update_total_study_time("u1", 10)
    assert progress.stats.study_time_minutes == 25
    assert progress.stats.completed_tests == 2


async def test_log_study_session_rejects_negative(tracker):
    with pytest.raises(ValidationError):
        await tracker.log_study_session("u1", -1)


async def test_set_item_mastery_keeps_average_consistent(tracker):
    await tracker.record_attempt("u1", "v1", True)
    item = await tracker.set_item_mastery("u1", "v2", 150)
    assert item.mastery_level == 100

    stats = await tracker.get_stats("u1")
    assert stats.total_items_studied == 2
    assert stats.average_mastery == 60


async def test_set_item_mastery_reschedules_review(tracker):
    await tracker.record_attempt("u1", "v1", True, now=datetime.now() - timedelta(days=3))

    item = await tracker.set_item_mastery("u1", "v1", 50)
    assert item.next_review_due >= item.last_reviewed_at
    assert item.next_review_due - item.last_reviewed_at == timedelta(days=3.5)
    assert await tracker.due_items("u1") == []

    new_item = await tracker.set_item_mastery("u1", "v2", 0)
    assert new_item.next_review_due is not None
    assert new_item.next_review_due > new_item.last_reviewed_at

    stored = await tracker.get_item_progress("u1", "v1")
    assert stored.next_review_due == item.next_review_due


async def test_locks_released_after_use(tracker):
    await asyncio.gather(*(tracker.record_attempt(f"u{i}", "v1", True) for i in range(3)))
    await tracker.set_item_mastery("u1", "v1", 40)
    gc.collect()
    assert len(tracker._locks) == 0


async def test_waiters_share_one_lock(tracker):
    lock = tracker._lock_for("u1")
    async with lock:
        assert tracker._lock_for("u1") is lock
        pending = asyncio.ensure_future(tracker.record_attempt("u1", "v1", True))
        await asyncio.sleep(0)
        assert not pending.done()
    progress = await pending
    assert progress.find_item("v1") is not None


async def test_record_test_scores(tracker):
    progress = await tracker.record_test_scores("u1", [50.0, 75.0, 100.0])
    assert progress.stats.average_test_score == 75.0
    progress = await tracker.record_test_scores("u1", [])
    assert progress.stats.average_test_score == 0.0


async def test_mastery_stats(tracker):
    await tracker.set_item_mastery("u1", "v1", 95)
    await tracker.set_item_mastery("u1", "v2", 40)
    await tracker.log_study_session("u1", 30)

    stats = await tracker.get_mastery_stats("u1")
    assert stats.mastered_items_count == 1
    assert stats.average_mastery == 68
    assert stats.total_study_time == 30
    assert stats.sessions_completed == 1


async def test_mastery_stats_without_progress(tracker):
    stats = await tracker.get_mastery_stats("nobody")
    assert stats.mastered_items_count == 0
    assert stats.average_mastery == 0


async def test_reset(tracker):
    await tracker.record_attempt("u1", "v1", True)
    await tracker.log_study_session("u1", 20)
    progress = await tracker.reset("u1")
    assert progress.item_progress == []
    assert progress.stats.study_time_minutes == 0
    assert progress.stats.streak_days == 0
