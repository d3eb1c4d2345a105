import logging
from typing import Any, Optional

from fastapi import Request
from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker, Session

logger = logging.getLogger(__name__)

# Create Base class for models
Base = declarative_base()


class Database:
    """
    Owns the SQLAlchemy engine and session factory for one application instance.

    Created in the FastAPI lifespan and stored on ``app.state.database``;
    endpoints reach it through the ``get_db`` dependency instead of a
    module-level engine.
    """

    def __init__(self, url: str, **engine_kwargs: Any):
        self.url = url

        if url.startswith("sqlite"):
            engine_kwargs.setdefault("connect_args", {"check_same_thread": False})
        else:
            engine_kwargs.setdefault("pool_pre_ping", True)  # Verify connections before using them
            engine_kwargs.setdefault("pool_size", 10)
            engine_kwargs.setdefault("max_overflow", 20)

        self.engine = create_engine(url, **engine_kwargs)
        self.SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)

    def session(self) -> Session:
        return self.SessionLocal()

    def create_tables(self) -> None:
        """
        Create all tables registered on ``Base``.

        Production schemas are managed by Alembic ("alembic upgrade head");
        this is used for local SQLite development and tests.
        """
        from jobboard.models import job, application  # noqa: F401  Import models to register them
        Base.metadata.create_all(bind=self.engine)

    def drop_tables(self) -> None:
        Base.metadata.drop_all(bind=self.engine)

    def dispose(self) -> None:
        self.engine.dispose()
        logger.info("Database engine disposed")


def get_database(request: Request) -> Database:
    database: Optional[Database] = getattr(request.app.state, "database", None)
    if database is None:
        raise RuntimeError("Database has not been initialized for this application")
    return database


def get_db(request: Request):
    """
    Dependency function to get database session.
    Used in FastAPI endpoints with Depends(get_db)
    """
    db = get_database(request).session()
    try:
        yield db
    finally:
        db.close()
