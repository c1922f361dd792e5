"""Test submission, grading and result access."""

from datetime import datetime

import structlog

from vocab_trainer.errors import ForbiddenError, NotFoundError
from vocab_trainer.models.test import QuestionResponse, Test, TestResult, is_correct_answer
from vocab_trainer.models.user import User
from vocab_trainer.progress.tracker import ProgressTracker
from vocab_trainer.storage.database import Database
from vocab_trainer.validation import AnswerInput, TestResultInput

logger = structlog.get_logger()


def grade_answers(test: Test, answers: list[AnswerInput]) -> list[QuestionResponse]:
    """Grade answers by question index.

    Answers pointing past the last question, and repeated answers to a
    question already graded, are dropped.
    """
    responses = []
    seen: set[int] = set()
    for answer in answers:
        if answer.question_index >= len(test.questions) or answer.question_index in seen:
            continue
        seen.add(answer.question_index)
        question = test.questions[answer.question_index]
        responses.append(
            QuestionResponse(
                question_index=answer.question_index,
                user_answer=answer.user_answer,
                is_correct=is_correct_answer(question, answer.user_answer),
                time_spent=answer.time_spent,
            )
        )
    return responses


def score_percent(correct: int, total: int) -> float:
    return correct / total * 100 if total else 0.0


class ResultService:
    def __init__(self, db: Database, tracker: ProgressTracker):
        self.db = db
        self.tracker = tracker

    async def submit(self, user_id: str, data: TestResultInput) -> TestResult:
        test = self.db.tests.get(data.test_id)
        if test is None:
            raise NotFoundError("Test not found")

        responses = grade_answers(test, data.answers)
        correct = sum(1 for r in responses if r.is_correct)
        total = len(test.questions)
        now = datetime.now()

        result = self.db.test_results.insert(
            TestResult(
                test_id=test.id,
                user_id=user_id,
                score=score_percent(correct, total),
                total_questions=total,
                correct_answers=correct,
                completion_time=data.completion_time,
                responses=responses,
                started_at=data.started_at or now,
                completed_at=now,
            )
        )
        scores = [r.score for r in self.list_for_user(user_id)]
        await self.tracker.record_test_scores(user_id, scores)
        logger.info(
            "test_result_submitted",
            result_id=result.id,
            test_id=test.id,
            user_id=user_id,
            score=round(result.score, 1),
        )
        return result

    def _require(self, result_id: str) -> TestResult:
        result = self.db.test_results.get(result_id)
        if result is None:
            raise NotFoundError("Test result not found")
        return result

    def get(self, result_id: str, caller: User) -> TestResult:
        result = self._require(result_id)
        if result.user_id != caller.id and not caller.is_admin:
            raise ForbiddenError("Not authorized to view this test result")
        return result

    def list_for_user(self, user_id: str) -> list[TestResult]:
        results = self.db.test_results.find(lambda r: r.user_id == user_id)
        return sorted(results, key=lambda r: r.completed_at or r.created_at, reverse=True)

    def list_for_test(self, test_id: str, caller: User) -> list[TestResult]:
        """All results for the test creator or an admin; otherwise only the caller's own."""
        test = self.db.tests.get(test_id)
        if test is None:
            raise NotFoundError("Test not found")
        if test.creator_id == caller.id or caller.is_admin:
            return self.db.test_results.find(lambda r: r.test_id == test_id)
        return self.db.test_results.find(lambda r: r.test_id == test_id and r.user_id == caller.id)

    async def delete(self, result_id: str, caller: User) -> bool:
        result = self._require(result_id)
        if result.user_id != caller.id and not caller.is_admin:
            raise ForbiddenError("Not authorized to delete this test result")
        deleted = self.db.test_results.delete(result_id)
        scores = [r.score for r in self.list_for_user(result.user_id)]
        await self.tracker.record_test_scores(result.user_id, scores)
        logger.info("test_result_deleted", result_id=result_id)
        return deleted
