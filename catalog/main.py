# catalog/main.py
from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from starlette.concurrency import run_in_threadpool

from catalog.core.config import Settings, get_settings
from catalog.core.errors import register_exception_handlers
from catalog.core.logging_config import configure_logging
from catalog.core.security import TokenService
from catalog.database import Database
from catalog.services.auth_service import AuthService

# Routers
from catalog.routers.auth import router as auth_router
from catalog.routers.products import router as products_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Startup:
      - Connect to the database (bounded retries) and create tables.
        If the database stays unreachable the error propagates and the
        process exits.

    Shutdown:
      - Dispose the connection pool.
    """
    db: Database = app.state.db
    logger.info("Startup: connecting to database...")
    try:
        await run_in_threadpool(db.connect)
        logger.info("Startup: DB connection OK, tables verified.")
    except Exception:
        logger.exception("Startup: DB connection FAILED")
        raise
    yield
    db.disconnect()
    logger.info("Shutdown: DB connection closed.")


def create_app(settings: Settings | None = None) -> FastAPI:
    """
    Build the API.

    Collaborators (database handle, token service, auth service) are
    created here and attached to `app.state`, so tests can pass their
    own Settings.
    """
    settings = settings or get_settings()
    configure_logging(settings.LOG_LEVEL)

    app = FastAPI(
        title=settings.PROJECT_NAME,
        version="0.1.0",
        lifespan=lifespan,
    )

    tokens = TokenService.from_settings(settings)
    app.state.settings = settings
    app.state.db = Database.from_settings(settings)
    app.state.tokens = tokens
    app.state.auth = AuthService(tokens, settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origin_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app, debug=settings.DEBUG)

    app.include_router(auth_router, prefix=settings.API_PREFIX)
    app.include_router(products_router, prefix=settings.API_PREFIX)

    @app.get("/")
    def root():
        """Service banner."""
        return {"success": True, "message": "API is running", "service": "catalog-api"}

    @app.get("/health", tags=["health"])
    def health_check() -> dict[str, bool]:
        """Health check endpoint."""
        return {"ok": True}

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("catalog.main:app", host="0.0.0.0", port=8000)
