"""Test and test result routes."""

from typing import Any

from fastapi import APIRouter, Body, Depends

from vocab_trainer.api.deps import get_current_user, get_result_service, get_test_controller
from vocab_trainer.lifecycle.publishing import TestController
from vocab_trainer.models.test import Test, TestResult
from vocab_trainer.models.user import User
from vocab_trainer.services.results import ResultService
from vocab_trainer.validation import TestInput, TestResultInput, TestUpdateInput, validate_input

router = APIRouter(prefix="/api/tests", tags=["tests"])
results_router = APIRouter(prefix="/api/test-results", tags=["tests"])


@router.get("")
async def list_tests(
    _: User = Depends(get_current_user),
    tests: TestController = Depends(get_test_controller),
) -> list[Test]:
    return tests.list_all()


@router.get("/mine")
async def my_tests(
    user: User = Depends(get_current_user),
    tests: TestController = Depends(get_test_controller),
) -> list[Test]:
    return tests.list_by_creator(user.id)


@router.get("/available")
async def available_tests(
    user: User = Depends(get_current_user),
    tests: TestController = Depends(get_test_controller),
) -> list[Test]:
    return tests.list_available(user.id)


@router.get("/{test_id}")
async def get_test(
    test_id: str,
    _: User = Depends(get_current_user),
    tests: TestController = Depends(get_test_controller),
) -> Test:
    return tests.get(test_id)


@router.post("", status_code=201)
async def create_test(
    payload: dict[str, Any] = Body(...),
    user: User = Depends(get_current_user),
    tests: TestController = Depends(get_test_controller),
) -> Test:
    return tests.create(user.id, validate_input(TestInput, payload))


@router.patch("/{test_id}")
async def update_test(
    test_id: str,
    payload: dict[str, Any] = Body(...),
    user: User = Depends(get_current_user),
    tests: TestController = Depends(get_test_controller),
) -> Test:
    return tests.update(test_id, user.id, validate_input(TestUpdateInput, payload))


@router.delete("/{test_id}")
async def delete_test(
    test_id: str,
    user: User = Depends(get_current_user),
    tests: TestController = Depends(get_test_controller),
) -> bool:
    return tests.delete(test_id, user.id)


@router.post("/{test_id}/publish")
async def publish_test(
    test_id: str,
    user: User = Depends(get_current_user),
    tests: TestController = Depends(get_test_controller),
) -> Test:
    return tests.publish(test_id, user.id)


@router.get("/{test_id}/results")
async def results_for_test(
    test_id: str,
    user: User = Depends(get_current_user),
    results: ResultService = Depends(get_result_service),
) -> list[TestResult]:
    return results.list_for_test(test_id, user)


@results_router.get("")
async def my_results(
    user: User = Depends(get_current_user),
    results: ResultService = Depends(get_result_service),
) -> list[TestResult]:
    return results.list_for_user(user.id)


@results_router.get("/{result_id}")
async def get_result(
    result_id: str,
    user: User = Depends(get_current_user),
    results: ResultService = Depends(get_result_service),
) -> TestResult:
    return results.get(result_id, user)


@results_router.post("", status_code=201)
async def submit_result(
    payload: dict[str, Any] = Body(...),
    user: User = Depends(get_current_user),
    results: ResultService = Depends(get_result_service),
) -> TestResult:
    return await results.submit(user.id, validate_input(TestResultInput, payload))


@results_router.delete("/{result_id}")
async def delete_result(
    result_id: str,
    user: User = Depends(get_current_user),
    results: ResultService = Depends(get_result_service),
) -> bool:
    return await results.delete(result_id, user)
