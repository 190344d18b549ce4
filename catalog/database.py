# catalog/database.py
import logging
import time
from collections.abc import Iterator
from contextlib import contextmanager

from fastapi import Request
from sqlalchemy import text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import OperationalError
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, Session, create_engine

from catalog.core.config import Settings

logger = logging.getLogger(__name__)


def _with_sslmode(db_url: str) -> str:
    """Append sslmode=require to a Postgres URL if it is not already present."""
    if "sslmode=" in db_url:
        return db_url
    return db_url + ("&" if "?" in db_url else "?") + "sslmode=require"


class Database:
    """
    Owns the SQLAlchemy engine for one application instance.

    Lifecycle:
      - connect():    create the engine, verify connectivity (with bounded
                      retries) and create tables.
      - session():    context manager yielding a Session.
      - disconnect(): dispose the connection pool.

    The app factory stores one instance on `app.state.db`; routes get
    sessions through the `get_session` dependency below.
    """

    def __init__(
        self,
        url: str,
        *,
        require_ssl: bool = False,
        pool_size: int = 5,
        max_overflow: int = 10,
        connect_retries: int = 5,
        retry_delay: float = 2.0,
        echo: bool = False,
    ):
        self.url = url
        self.require_ssl = require_ssl
        self.pool_size = pool_size
        self.max_overflow = max_overflow
        self.connect_retries = max(1, connect_retries)
        self.retry_delay = retry_delay
        self.echo = echo
        self._engine: Engine | None = None

    @classmethod
    def from_settings(cls, settings: Settings) -> "Database":
        return cls(
            settings.DATABASE_URL,
            require_ssl=settings.DB_REQUIRE_SSL,
            pool_size=settings.DB_POOL_SIZE,
            max_overflow=settings.DB_MAX_OVERFLOW,
            connect_retries=settings.DB_CONNECT_RETRIES,
            retry_delay=settings.DB_CONNECT_RETRY_DELAY,
            echo=settings.DEBUG,
        )

    @property
    def engine(self) -> Engine:
        if self._engine is None:
            raise RuntimeError("Database not connected. Call connect() first.")
        return self._engine

    def _create_engine(self) -> Engine:
        if self.url.startswith("sqlite"):
            # SQLite: share one connection for in-memory databases so every
            # session (and the threadpool running sync routes) sees the same data.
            kwargs: dict = {"connect_args": {"check_same_thread": False}}
            if ":memory:" in self.url or self.url in {"sqlite://", "sqlite:///"}:
                kwargs["poolclass"] = StaticPool
            return create_engine(self.url, echo=self.echo, **kwargs)

        db_url = _with_sslmode(self.url) if self.require_ssl else self.url
        return create_engine(
            db_url,
            echo=self.echo,
            pool_pre_ping=True,
            pool_size=self.pool_size,
            max_overflow=self.max_overflow,
        )

    def connect(self) -> None:
        """
        Create the engine, ping the database and create missing tables.

        Raises the last OperationalError once all retries are used up.
        """
        if self._engine is not None:
            return

        engine = self._create_engine()
        for attempt in range(1, self.connect_retries + 1):
            try:
                with engine.connect() as conn:
                    conn.execute(text("SELECT 1"))
                break
            except OperationalError:
                if attempt == self.connect_retries:
                    engine.dispose()
                    logger.error("Database unreachable after %d attempts", attempt)
                    raise
                logger.warning(
                    "Database connection attempt %d/%d failed, retrying in %.1fs",
                    attempt,
                    self.connect_retries,
                    self.retry_delay,
                )
                time.sleep(self.retry_delay)

        # Import models so SQLModel metadata is populated before create_all()
        from catalog.models import product as _product_models  # noqa: F401

        SQLModel.metadata.create_all(engine)
        self._engine = engine

    def disconnect(self) -> None:
        if self._engine is not None:
            self._engine.dispose()
            self._engine = None

    @contextmanager
    def session(self) -> Iterator[Session]:
        with Session(self.engine) as session:
            yield session


def get_session(request: Request) -> Iterator[Session]:
    """
    FastAPI dependency that yields a SQLModel Session.

    Usage:

        from fastapi import Depends

        @router.get("/example")
        def example_endpoint(session: Session = Depends(get_session)):
            ...
    """
    db: Database = request.app.state.db
    with db.session() as session:
        yield session
