"""
Store wiring: engine, connection pool, session factory.

Business components never import the engine; they receive a Session in
their constructor. Routers get one per request through `get_db`.
"""
import logging
from contextlib import contextmanager

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.exc import DisconnectionError, OperationalError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from app.config import Settings, get_settings
from app.errors import TransientStoreError

logger = logging.getLogger(__name__)

Base = declarative_base()


def _enable_sqlite_foreign_keys(engine: Engine) -> None:
    @event.listens_for(engine, "connect")
    def _set_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def create_db_engine(settings: Settings) -> Engine:
    """
    Build an engine whose pool bounds concurrent store access.

    Requests beyond pool_size + max_overflow wait up to pool_timeout seconds
    for a connection; after that SQLAlchemy raises TimeoutError, which
    store_errors() reports as a transient failure.
    """
    url = make_url(settings.database_url)
    kwargs = {"echo": settings.debug}

    if url.get_backend_name() == "sqlite":
        kwargs["connect_args"] = {
            "check_same_thread": False,
            "timeout": settings.db_connect_timeout,
        }
        in_memory = url.database in (None, "", ":memory:")
        if in_memory:
            # every session must see the same in-memory database
            kwargs["poolclass"] = StaticPool
    else:
        in_memory = False
        kwargs["connect_args"] = {"connect_timeout": int(settings.db_connect_timeout)}
        kwargs["pool_pre_ping"] = True

    if not in_memory:
        kwargs.update(
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_timeout=settings.db_pool_timeout,
        )

    engine = create_engine(settings.database_url, **kwargs)
    if url.get_backend_name() == "sqlite":
        _enable_sqlite_foreign_keys(engine)

    logger.info("Database engine created for %s", url.render_as_string(hide_password=True))
    return engine


def init_db(bind: Engine) -> None:
    """Create any missing tables. Importing app.models registers them on Base."""
    from app import models  # noqa: F401

    Base.metadata.create_all(bind=bind)


engine = create_db_engine(get_settings())
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def store_errors(operation: str):
    """Translate connection-level store failures into TransientStoreError."""
    try:
        yield
    except (OperationalError, PoolTimeoutError, DisconnectionError) as e:
        logger.warning("Store unavailable during %s: %s", operation, e)
        raise TransientStoreError() from e
