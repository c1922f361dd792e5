"""Health check and router registry."""

import time
from datetime import datetime

import structlog
from fastapi import APIRouter, Depends

from vocab_trainer.api import progress, sessions, tests, users, vocab
from vocab_trainer.api.deps import get_db
from vocab_trainer.config import get_settings
from vocab_trainer.storage.database import Database

logger = structlog.get_logger()
router = APIRouter()

_started_at = time.monotonic()


@router.get("/health")
async def health_check(db: Database = Depends(get_db)) -> dict:
    """Health check endpoint."""
    storage = "connected" if db.is_writable else "disconnected"
    if storage != "connected":
        logger.warning("health_storage_unavailable", root=str(db.root))
    return {
        "status": "ok",
        "uptime": round(time.monotonic() - _started_at, 1),
        "timestamp": datetime.now().isoformat(),
        "storage": storage,
        "environment": get_settings().env,
    }


api_routers = [
    router,
    users.auth_router,
    users.router,
    vocab.items_router,
    vocab.lists_router,
    tests.router,
    tests.results_router,
    sessions.router,
    progress.router,
]
