"""Tests for the study session lifecycle."""

from datetime import datetime, timedelta

import pytest

from vocab_trainer.errors import ForbiddenError, InvalidStateError, NotFoundError
from vocab_trainer.lifecycle.sessions import StudySessionController
from vocab_trainer.models.session import SessionStatus, StudyRecord
from vocab_trainer.validation import (
    CompleteStudySessionInput,
    StudySessionInput,
    UpdateStudySessionInput,
)


@pytest.fixture
def controller(db):
    return StudySessionController(db)


@pytest.fixture
def session(controller):
    return controller.start("u1", StudySessionInput(title="Morning review"))


class TestStart:
    def test_starts_active(self, session):
        assert session.status == SessionStatus.ACTIVE
        assert session.user_id == "u1"
        assert session.completed_at is None

    def test_unknown_vocab_list(self, controller):
        with pytest.raises(NotFoundError):
            controller.start("u1", StudySessionInput(title="x", vocab_list_ids=["missing"]))

    def test_known_vocab_list(self, controller, make_list):
        vocab_list = make_list([])
        session = controller.start(
            "u1", StudySessionInput(title="x", vocab_list_ids=[vocab_list.id])
        )
        assert controller.list_for_vocab_list("u1", vocab_list.id) == [session]


class TestComplete:
    def test_complete_sets_summary(self, controller, session):
        done = controller.complete(
            session.id,
            "u1",
            CompleteStudySessionInput(duration=12, items_studied=8, correct_answers=6),
        )
        assert done.status == SessionStatus.COMPLETED
        assert done.duration == 12
        assert done.accuracy == 75.0
        assert done.completed_at is not None
        assert done.end_time == done.completed_at

    def test_zero_items_gives_zero_accuracy(self, controller, session):
        done = controller.complete(session.id, "u1", CompleteStudySessionInput())
        assert done.accuracy == 0
        assert done.items_studied_count == 0

    def test_duration_derived_from_elapsed_time(self, controller, db, session):
        started = session.model_copy(update={"start_time": datetime.now() - timedelta(minutes=30)})
        db.study_sessions.replace(started)
        done = controller.complete(session.id, "u1", CompleteStudySessionInput())
        assert done.duration in (29, 30, 31)

    def test_existing_duration_kept(self, controller, db, session):
        db.study_sessions.replace(session.model_copy(update={"duration": 7}))
        done = controller.complete(session.id, "u1", CompleteStudySessionInput(duration=40))
        assert done.duration == 7

    def test_complete_twice_fails_and_leaves_state(self, controller, db, session):
        done = controller.complete(
            session.id, "u1", CompleteStudySessionInput(items_studied=4, correct_answers=1)
        )
        with pytest.raises(InvalidStateError):
            controller.complete(
                session.id, "u1", CompleteStudySessionInput(items_studied=9, correct_answers=9)
            )
        assert db.study_sessions.get(session.id) == done

    def test_other_user_forbidden(self, controller, session):
        with pytest.raises(ForbiddenError):
            controller.complete(session.id, "intruder", CompleteStudySessionInput())

    def test_missing_session(self, controller):
        with pytest.raises(NotFoundError):
            controller.complete("missing", "u1", CompleteStudySessionInput())


class TestUpdate:
    def test_pause_and_resume(self, controller, session):
        paused = controller.update(
            session.id, "u1", UpdateStudySessionInput(status=SessionStatus.PAUSED)
        )
        assert paused.status == SessionStatus.PAUSED
        assert controller.get_active("u1").id == session.id

        resumed = controller.update(
            session.id, "u1", UpdateStudySessionInput(status=SessionStatus.ACTIVE)
        )
        assert resumed.status == SessionStatus.ACTIVE

    def test_replace_items_studied(self, controller, session):
        records = [StudyRecord(vocab_item_id="v1", correct_attempts=2)]
        updated = controller.update(session.id, "u1", UpdateStudySessionInput(items_studied=records))
        assert updated.items_studied[0].vocab_item_id == "v1"

    def test_complete_through_update_sets_duration(self, controller, db, session):
        started = session.model_copy(update={"start_time": datetime.now() - timedelta(minutes=30)})
        db.study_sessions.replace(started)
        done = controller.update(
            session.id, "u1", UpdateStudySessionInput(status=SessionStatus.COMPLETED)
        )
        assert done.status == SessionStatus.COMPLETED
        assert done.completed_at is not None
        assert done.duration in (29, 30, 31)

    def test_complete_through_update_keeps_existing_duration(self, controller, db, session):
        db.study_sessions.replace(session.model_copy(update={"duration": 7}))
        done = controller.update(
            session.id, "u1", UpdateStudySessionInput(status=SessionStatus.COMPLETED)
        )
        assert done.duration == 7

    def test_no_transition_out_of_completed(self, controller, session):
        controller.complete(session.id, "u1", CompleteStudySessionInput())
        with pytest.raises(InvalidStateError):
            controller.update(
                session.id, "u1", UpdateStudySessionInput(status=SessionStatus.ACTIVE)
            )
        assert controller.get_active("u1") is None


class TestQueries:
    def test_list_newest_first(self, controller, db):
        first = controller.start("u1", StudySessionInput(title="one"))
        db.study_sessions.replace(
            first.model_copy(update={"start_time": datetime.now() - timedelta(hours=1)})
        )
        second = controller.start("u1", StudySessionInput(title="two"))
        controller.start("u2", StudySessionInput(title="other"))

        assert [s.id for s in controller.list_for_user("u1")] == [second.id, first.id]

    def test_get_checks_owner(self, controller, session):
        assert controller.get(session.id, "u1").id == session.id
        with pytest.raises(ForbiddenError):
            controller.get(session.id, "u2")

    def test_delete(self, controller, session):
        assert controller.delete(session.id, "u1") is True
        with pytest.raises(NotFoundError):
            controller.get(session.id, "u1")
