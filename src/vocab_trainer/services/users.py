"""User accounts: registration, login and profile updates."""

import structlog

from vocab_trainer.auth import create_access_token, hash_password, verify_password
from vocab_trainer.errors import AuthenticationError, ConflictError, NotFoundError
from vocab_trainer.models.user import AuthPayload, PublicUser, User
from vocab_trainer.storage.database import Database
from vocab_trainer.validation import LoginInput, RegisterUserInput, UpdateUserInput

logger = structlog.get_logger()


class UserService:
    def __init__(self, db: Database):
        self.db = db

    def _check_unique(self, email: str | None, username: str | None, exclude_id: str | None = None) -> None:
        def clashes(user: User) -> bool:
            if user.id == exclude_id:
                return False
            return user.email == email or user.username == username

        if self.db.users.find_one(clashes) is not None:
            raise ConflictError("User with this email or username already exists")

    def register(self, data: RegisterUserInput) -> AuthPayload:
        self._check_unique(data.email, data.username)
        user = self.db.users.insert(
            User(
                username=data.username,
                email=data.email,
                password_hash=hash_password(data.password),
                native_language=data.native_language,
                preferences=data.preferences,
            )
        )
        logger.info("user_registered", user_id=user.id)
        return AuthPayload(token=create_access_token(user.id), user=user.public())

    def login(self, data: LoginInput) -> AuthPayload:
        user = self.db.users.find_one(lambda u: u.email == data.email)
        if user is None or not verify_password(data.password, user.password_hash):
            logger.info("login_failed")
            raise AuthenticationError("Invalid email or password")
        logger.info("user_logged_in", user_id=user.id)
        return AuthPayload(token=create_access_token(user.id), user=user.public())

    def get_user(self, user_id: str) -> User:
        user = self.db.users.get(user_id)
        if user is None:
            raise NotFoundError("User not found")
        return user

    def get(self, user_id: str) -> PublicUser:
        return self.get_user(user_id).public()

    def update(self, user_id: str, data: UpdateUserInput) -> PublicUser:
        user = self.get_user(user_id)
        changes = data.model_dump(exclude_unset=True, exclude_none=True)
        if "email" in changes or "username" in changes:
            self._check_unique(changes.get("email"), changes.get("username"), exclude_id=user_id)
        if "preferences" in changes:
            changes["preferences"] = data.preferences
        stored = self.db.users.replace(user.model_copy(update=changes))
        logger.info("user_updated", user_id=user_id, fields=sorted(changes))
        return stored.public()
