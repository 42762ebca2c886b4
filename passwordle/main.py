"""FastAPI application entry point.

Run: uvicorn passwordle.main:app --host 0.0.0.0 --port 8000
"""
import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from passwordle import __version__
from passwordle.api.api import api_router
from passwordle.core.config import settings
from passwordle.core.exceptions import AppException
from passwordle.services.session_manager import SessionManager
from passwordle.services.word_source import create_word_source
from passwordle.storage import create_backend

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

# How often expired sessions are purged from stores that need it
_PURGE_INTERVAL_SECONDS = 600


def create_app(session_manager: Optional[SessionManager] = None) -> FastAPI:
    """Build the application.

    When session_manager is given it is used as-is; otherwise one is built
    from settings at startup.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan: startup and shutdown logic."""
        background_tasks: list[asyncio.Task] = []
        _startup(app, background_tasks, session_manager)
        yield
        await _shutdown(app, background_tasks)

    app = FastAPI(
        title="Passwordle API",
        description="Word-guessing game with server-side sessions",
        version=__version__,
        debug=settings.DEBUG,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=False,
        allow_methods=["GET", "POST", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Accept", "Origin", "X-Requested-With"],
    )

    app.include_router(api_router)

    @app.exception_handler(AppException)
    async def app_exception_handler(request: Request, exc: AppException):
        """Convert AppException subclasses to structured JSON responses."""
        if exc.http_status >= 500:
            logger.error(f"{exc.code} on {request.method} {request.url.path}: {exc.message}")
        return JSONResponse(
            status_code=exc.http_status,
            content=exc.to_dict(),
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        """Catch-all handler to prevent stack trace leaking in production."""
        logger.error(f"Unhandled exception on {request.method} {request.url.path}: {exc}", exc_info=True)
        return JSONResponse(
            status_code=500,
            content={
                "error": "INTERNAL_ERROR",
                "message": "An unexpected error occurred." if not settings.DEBUG else str(exc),
                "retryable": False,
                "details": {},
            },
        )

    @app.get("/")
    def root():
        """Root endpoint."""
        return {
            "status": "ok",
            "message": "Passwordle API is running",
            "version": __version__,
        }

    @app.get("/health")
    def health_check(request: Request):
        """Health check endpoint, includes session store connectivity."""
        store_ok = request.app.state.session_manager.store.ping()
        return JSONResponse(
            status_code=200 if store_ok else 503,
            content={"status": "healthy" if store_ok else "degraded", "store": store_ok},
        )

    return app


def _startup(
    app: FastAPI,
    background_tasks: list[asyncio.Task],
    session_manager: Optional[SessionManager],
) -> None:
    """Build the session manager and start housekeeping tasks."""
    logger.info("Passwordle API starting up...")

    if session_manager is None:
        settings.log_summary()
        store = create_backend(settings)
        word_source = create_word_source(settings)
        session_manager = SessionManager.from_settings(settings, store, word_source)
    app.state.session_manager = session_manager

    if hasattr(session_manager.store, "purge_expired"):
        task = asyncio.create_task(_periodic_session_purge(session_manager.store))
        background_tasks.append(task)
        logger.info("Session purge task started")


async def _periodic_session_purge(store) -> None:
    """Background task to periodically drop expired sessions.

    Redis expires keys on its own; this keeps the in-memory store bounded.
    """
    while True:
        try:
            await asyncio.sleep(_PURGE_INTERVAL_SECONDS)
            purged = store.purge_expired()
            if purged > 0:
                logger.info(
                    f"Session purge: {purged} expired session(s) removed. "
                    f"Active sessions: {store.count()}"
                )
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.error(f"Error in session purge task: {e}")
            await asyncio.sleep(60)


async def _shutdown(app: FastAPI, background_tasks: list[asyncio.Task]) -> None:
    """Cancel housekeeping and close the session store."""
    logger.info("Passwordle API shutting down...")

    if background_tasks:
        for task in background_tasks:
            task.cancel()
        await asyncio.gather(*background_tasks, return_exceptions=True)
        logger.info("Background tasks cancelled")

    manager = getattr(app.state, "session_manager", None)
    if manager is not None and hasattr(manager.store, "close"):
        try:
            manager.store.close()
        except Exception as e:
            logger.warning(f"Error closing session store: {e}")

    logger.info("Shutdown complete")


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("passwordle.main:app", host=settings.HOST, port=settings.PORT)
