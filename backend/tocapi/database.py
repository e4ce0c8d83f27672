"""Database connection and session management."""
from contextlib import contextmanager
from typing import Any, Dict, Iterator

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import NullPool, StaticPool

Base = declarative_base()


def engine_options(database_url: str, environment: str) -> Dict[str, Any]:
    """Pick engine pooling options for the given database URL."""
    if database_url.startswith("sqlite"):
        # Single shared connection so in-memory databases survive across sessions
        return {"poolclass": StaticPool, "connect_args": {"check_same_thread": False}}

    if environment not in ("development", "production"):
        return {"poolclass": NullPool}

    echo = environment == "development"
    # Use NullPool for serverless deployments (recommended by Supabase)
    # This works with Supabase pooler (port 6543)
    if "pooler.supabase.com" in database_url or database_url.endswith(":6543"):
        return {"poolclass": NullPool, "echo": echo}

    # Direct connection for stationary servers
    return {"pool_size": 20, "max_overflow": 10, "echo": echo}


class Database:
    """Owns the SQLAlchemy engine and hands out sessions."""

    def __init__(self, database_url: str, environment: str = "development", **engine_kwargs: Any):
        if not database_url:
            raise ValueError("DATABASE_URL is required for Database")
        options = engine_options(database_url, environment)
        options.update(engine_kwargs)
        self.engine = create_engine(database_url, **options)
        self.SessionLocal = sessionmaker(
            autocommit=False, autoflush=False, expire_on_commit=False, bind=self.engine
        )

    @contextmanager
    def session(self) -> Iterator[Session]:
        """Yield a database session and close it afterwards."""
        db = self.SessionLocal()
        try:
            yield db
        finally:
            db.close()

    def create_all(self) -> None:
        """Create tables (in production, use migrations)."""
        # Register models on Base.metadata
        import tocapi.models  # noqa: F401

        Base.metadata.create_all(bind=self.engine)

    def close(self) -> None:
        self.engine.dispose()
