"""FastAPI dependencies: database, services and the authenticated user."""

import functools

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from vocab_trainer.auth import decode_access_token
from vocab_trainer.errors import AuthenticationError
from vocab_trainer.lifecycle.publishing import TestController
from vocab_trainer.lifecycle.sessions import StudySessionController
from vocab_trainer.models.user import User
from vocab_trainer.progress.tracker import ProgressTracker
from vocab_trainer.services.results import ResultService
from vocab_trainer.services.users import UserService
from vocab_trainer.services.vocabulary import VocabularyService
from vocab_trainer.storage.database import Database, get_database

bearer_scheme = HTTPBearer(auto_error=False)


def get_db() -> Database:
    return get_database()


@functools.lru_cache
def _tracker_for(db: Database) -> ProgressTracker:
    # One tracker per database so the per-user locks are shared by all requests
    return ProgressTracker(db.user_progress)


def get_tracker(db: Database = Depends(get_db)) -> ProgressTracker:
    return _tracker_for(db)


def get_user_service(db: Database = Depends(get_db)) -> UserService:
    return UserService(db)


def get_vocabulary_service(db: Database = Depends(get_db)) -> VocabularyService:
    return VocabularyService(db)


def get_test_controller(db: Database = Depends(get_db)) -> TestController:
    return TestController(db)


def get_session_controller(db: Database = Depends(get_db)) -> StudySessionController:
    return StudySessionController(db)


def get_result_service(
    db: Database = Depends(get_db),
    tracker: ProgressTracker = Depends(get_tracker),
) -> ResultService:
    return ResultService(db, tracker)


def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    db: Database = Depends(get_db),
) -> User:
    """Resolve ``Authorization: Bearer <token>`` to a stored user."""
    if credentials is None:
        raise AuthenticationError("Not authenticated")
    user_id = decode_access_token(credentials.credentials)
    if user_id is None:
        raise AuthenticationError("Invalid or expired token")
    user = db.users.get(user_id)
    if user is None:
        raise AuthenticationError("User no longer exists")
    return user
