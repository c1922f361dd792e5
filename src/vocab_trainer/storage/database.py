"""Collections used by the application."""

import functools
import os
from pathlib import Path

from vocab_trainer.config import get_settings
from vocab_trainer.models.progress import UserProgress
from vocab_trainer.models.session import StudySession
from vocab_trainer.models.test import Test, TestResult
from vocab_trainer.models.user import User
from vocab_trainer.models.vocab import VocabItem, VocabList
from vocab_trainer.storage.documents import Collection


class Database:
    """All document collections rooted at one directory."""

    def __init__(self, root: Path):
        self.root = root
        self.users = Collection(root, "users", User)
        self.vocab_items = Collection(root, "vocab_items", VocabItem)
        self.vocab_lists = Collection(root, "vocab_lists", VocabList)
        self.tests = Collection(root, "tests", Test)
        self.test_results = Collection(root, "test_results", TestResult)
        self.study_sessions = Collection(root, "study_sessions", StudySession)
        self.user_progress = Collection(root, "user_progress", UserProgress)

    @property
    def is_writable(self) -> bool:
        return self.root.is_dir() and os.access(self.root, os.W_OK)


@functools.lru_cache
def get_database() -> Database:
    """Get the database singleton for the configured data directory."""
    return Database(get_settings().documents_dir)
