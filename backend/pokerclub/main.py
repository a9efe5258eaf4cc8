from __future__ import annotations

import logging
import sys

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .api import (
    admin_router,
    cashier_router,
    dinner_router,
    live_game_router,
    players_router,
    ranking_router,
    report_router,
    sessions_router,
)
from .core.config import settings
from .core.db import engine
from .core.exceptions import (
    LedgerError,
    NotFoundError,
    PersistenceError,
    PreconditionError,
    ReferentialIntegrityError,
    ValidationError,
)
from .core.migrations import run_migrations
from .models.db import Base


def configure_logging() -> None:
    """Configure structured logging for the application."""
    logging.basicConfig(
        level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )

    # Set specific log levels for third-party libraries
    logging.getLogger("uvicorn").setLevel(logging.INFO)
    logging.getLogger("sqlalchemy").setLevel(logging.WARNING)


logger = logging.getLogger(__name__)
configure_logging()

_STATUS_BY_ERROR: list[tuple[type[LedgerError], int]] = [
    (ValidationError, 422),
    (PreconditionError, 409),
    (ReferentialIntegrityError, 409),
    (NotFoundError, 404),
    (PersistenceError, 503),
]


def _status_for(exc: LedgerError) -> int:
    for cls, code in _STATUS_BY_ERROR:
        if isinstance(exc, cls):
            return code
    return 400


def create_app() -> FastAPI:
    app = FastAPI(title="Poker Club Ledger", version="1.0.0")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_list(),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["Content-Disposition"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        """Log incoming requests."""
        logger.info(f"Request: {request.method} {request.url.path}")
        response = await call_next(request)
        logger.info(f"Response: {request.method} {request.url.path} - Status: {response.status_code}")
        return response

    @app.exception_handler(LedgerError)
    async def ledger_error_handler(request: Request, exc: LedgerError):
        status_code = _status_for(exc)
        if status_code >= 500:
            logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
        else:
            logger.warning(f"{request.method} {request.url.path} refused: {exc.code.value}")
        return JSONResponse(status_code=status_code, content={"detail": exc.message, "code": exc.code.value})

    app.include_router(players_router)
    app.include_router(admin_router)
    app.include_router(live_game_router)
    app.include_router(sessions_router)
    app.include_router(cashier_router)
    app.include_router(ranking_router)
    app.include_router(dinner_router)
    app.include_router(report_router)

    @app.get("/")
    def root():
        return {"ok": True, "service": "poker-club-ledger", "docs": "/docs"}

    @app.get("/health")
    def health():
        return {"status": "ok"}

    @app.on_event("startup")
    def startup():
        logger.info("Starting application...")
        if settings.RUN_MIGRATIONS:
            run_migrations()
        else:
            Base.metadata.create_all(bind=engine)
            logger.info("Database tables created/verified")
        logger.info("Application startup complete")

    return app


app = create_app()
