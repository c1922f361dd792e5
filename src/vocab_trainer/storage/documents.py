"""JSON document collections (one file per document, fcntl.flock + atomic write).

Writes take an exclusive lock on the collection and replace the document file
atomically. ``replace`` is a compare-and-swap on ``Document.version``: the
caller passes the document as it read it, and the write is rejected if
somebody else stored a newer version in the meantime.
"""

import fcntl
import json
import os
import re
import tempfile
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Generic, TypeVar

import structlog

from vocab_trainer.errors import ConflictError, NotFoundError
from vocab_trainer.models.document import Document

logger = structlog.get_logger()

D = TypeVar("D", bound=Document)

_SAFE_ID = re.compile(r"^[A-Za-z0-9_-]{1,64}$")


class Collection(Generic[D]):
    """A directory of JSON documents of one model type.

    Args:
        root: Directory holding all collections.
        name: Collection (sub-directory) name.
        model: Pydantic model class stored in this collection.
    """

    def __init__(self, root: Path, name: str, model: type[D]):
        self.name = name
        self.model = model
        self.path = root / name
        self.path.mkdir(parents=True, exist_ok=True)
        self._lock_path = self.path / ".lock"

    @contextmanager
    def _locked(self, exclusive: bool = True) -> Iterator[None]:
        with open(self._lock_path, "a") as lock_file:
            fcntl.flock(lock_file, fcntl.LOCK_EX if exclusive else fcntl.LOCK_SH)
            try:
                yield
            finally:
                fcntl.flock(lock_file, fcntl.LOCK_UN)

    def _doc_path(self, doc_id: str) -> Path | None:
        if not _SAFE_ID.match(doc_id):
            return None
        return self.path / f"{doc_id}.json"

    def _read(self, path: Path) -> D:
        return self.model.model_validate(json.loads(path.read_text(encoding="utf-8")))

    def _write(self, doc: D) -> None:
        path = self._doc_path(doc.id)
        if path is None:
            raise ValueError(f"Invalid document id: {doc.id!r}")
        with tempfile.NamedTemporaryFile(
            "w", dir=self.path, delete=False, suffix=".tmp", encoding="utf-8"
        ) as tmp:
            try:
                json.dump(doc.model_dump(mode="json"), tmp)
            except BaseException:
                tmp.close()
                os.unlink(tmp.name)
                raise
        os.replace(tmp.name, path)

    def get(self, doc_id: str) -> D | None:
        path = self._doc_path(doc_id)
        if path is None:
            return None
        with self._locked(exclusive=False):
            if not path.exists():
                return None
            return self._read(path)

    def find(self, predicate: Callable[[D], bool] | None = None) -> list[D]:
        """Return every document matching ``predicate`` (all when None)."""
        with self._locked(exclusive=False):
            docs = [self._read(path) for path in sorted(self.path.glob("*.json"))]
        if predicate is None:
            return docs
        return [doc for doc in docs if predicate(doc)]

    def find_one(self, predicate: Callable[[D], bool]) -> D | None:
        for doc in self.find(predicate):
            return doc
        return None

    def insert(self, doc: D) -> D:
        path = self._doc_path(doc.id)
        if path is None:
            raise ValueError(f"Invalid document id: {doc.id!r}")
        with self._locked():
            if path.exists():
                raise ConflictError(f"{self.name} document {doc.id} already exists")
            self._write(doc)
        logger.debug("document_inserted", collection=self.name, doc_id=doc.id)
        return doc

    def replace(self, doc: D) -> D:
        """Store ``doc`` if the stored version still equals ``doc.version``.

        Returns:
            The stored document with its version bumped.

        Raises:
            NotFoundError: The document no longer exists.
            ConflictError: The stored version moved on since ``doc`` was read.
        """
        path = self._doc_path(doc.id)
        with self._locked():
            if path is None or not path.exists():
                raise NotFoundError(f"{self.name} document {doc.id} not found")
            current = self._read(path)
            if current.version != doc.version:
                logger.warning(
                    "document_version_conflict",
                    collection=self.name,
                    doc_id=doc.id,
                    expected=doc.version,
                    actual=current.version,
                )
                raise ConflictError(f"{self.name} document {doc.id} was modified concurrently")
            stored = doc.model_copy(
                update={"version": doc.version + 1, "updated_at": datetime.now()}
            )
            self._write(stored)
        return stored

    def delete(self, doc_id: str) -> bool:
        path = self._doc_path(doc_id)
        if path is None:
            return False
        with self._locked():
            if not path.exists():
                return False
            path.unlink()
        logger.debug("document_deleted", collection=self.name, doc_id=doc_id)
        return True
