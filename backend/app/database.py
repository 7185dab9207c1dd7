"""Database connection and session management."""
from sqlalchemy import create_engine, event
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import NullPool, StaticPool
from app.config import settings


def _is_sqlite(url: str) -> bool:
    return url.startswith("sqlite")


if _is_sqlite(settings.database_url):
    # Single-file deployments and tests
    sqlite_options = {"connect_args": {"check_same_thread": False}}
    if ":memory:" in settings.database_url:
        sqlite_options["poolclass"] = StaticPool
    engine = create_engine(settings.database_url, **sqlite_options)

    @event.listens_for(engine, "connect")
    def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

elif "pooler.supabase.com" in settings.database_url or settings.database_url.endswith(":6543"):
    # Pooler connections manage their own pool
    engine = create_engine(
        settings.database_url,
        poolclass=NullPool,
        echo=settings.environment == "development",
    )
else:
    engine = create_engine(
        settings.database_url,
        pool_size=20,
        max_overflow=10,
        pool_pre_ping=True,
        echo=settings.environment == "development",
    )

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()


def get_db():
    """Dependency for getting database session."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db() -> None:
    """Create all tables registered on the declarative base."""
    import app.models  # noqa: F401  (registers models on Base.metadata)

    Base.metadata.create_all(bind=engine)
