"""Base model for persisted documents."""

import uuid
from datetime import datetime

from pydantic import BaseModel, Field


def new_id() -> str:
    return str(uuid.uuid4())


class Document(BaseModel):
    """A stored document.

    ``version`` starts at 1 and is bumped by the store on every successful
    write; writers pass the version they read to detect lost updates.
    """

    id: str = Field(default_factory=new_id)
    version: int = 1
    created_at: datetime = Field(default_factory=datetime.now)
    updated_at: datetime = Field(default_factory=datetime.now)
