"""FastAPI application entry point."""

import logging

import structlog
import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from vocab_trainer.api.routes import api_routers
from vocab_trainer.config import get_settings
from vocab_trainer.errors import VocabTrainerError

settings = get_settings()

if settings.is_production:
    # Production: JSON format for machine parsing
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(logging.INFO),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )
else:
    # Development: console format for human readability
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(logging.DEBUG),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )

logger = structlog.get_logger()

app = FastAPI(title="Vocab Trainer", version="0.1.0")
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
for api_router in api_routers:
    app.include_router(api_router)


@app.exception_handler(VocabTrainerError)
async def domain_error_handler(request: Request, exc: VocabTrainerError) -> JSONResponse:
    """Translate domain errors into ``{"error", "message", "details"?}`` responses."""
    log = logger.warning if exc.status_code < 500 else logger.error
    log(
        "request_failed",
        path=request.url.path,
        method=request.method,
        code=exc.code,
        message=exc.message,
    )
    return JSONResponse(exc.to_dict(), status_code=exc.status_code)


def main() -> None:
    """Run the application."""
    uvicorn.run(
        "vocab_trainer.main:app",
        host=settings.host,
        port=settings.port,
        reload=False,
        log_level="info",
    )


if __name__ == "__main__":
    main()
