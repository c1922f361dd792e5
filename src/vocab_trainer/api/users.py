"""Registration, login and user profile routes."""

from typing import Any

from fastapi import APIRouter, Body, Depends

from vocab_trainer.api.deps import get_current_user, get_user_service
from vocab_trainer.models.user import AuthPayload, PublicUser, User
from vocab_trainer.services.users import UserService
from vocab_trainer.validation import LoginInput, RegisterUserInput, UpdateUserInput, validate_input

auth_router = APIRouter(prefix="/api/auth", tags=["auth"])
router = APIRouter(prefix="/api/users", tags=["users"])


@auth_router.post("/register", status_code=201)
async def register(
    payload: dict[str, Any] = Body(...),
    users: UserService = Depends(get_user_service),
) -> AuthPayload:
    return users.register(validate_input(RegisterUserInput, payload))


@auth_router.post("/login")
async def login(
    payload: dict[str, Any] = Body(...),
    users: UserService = Depends(get_user_service),
) -> AuthPayload:
    return users.login(validate_input(LoginInput, payload))


@auth_router.get("/me")
async def me(user: User = Depends(get_current_user)) -> PublicUser:
    return user.public()


@router.get("/{user_id}")
async def get_user(
    user_id: str,
    _: User = Depends(get_current_user),
    users: UserService = Depends(get_user_service),
) -> PublicUser:
    return users.get(user_id)


@router.patch("/me")
async def update_me(
    payload: dict[str, Any] = Body(...),
    user: User = Depends(get_current_user),
    users: UserService = Depends(get_user_service),
) -> PublicUser:
    return users.update(user.id, validate_input(UpdateUserInput, payload))
