from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from earthwise.config import settings

# Pool sizing only applies to server databases; SQLite uses a single-file pool
_pool_kwargs = (
    {"connect_args": {"check_same_thread": False}}
    if "sqlite" in settings.DATABASE_URL
    else {"pool_size": settings.DB_POOL_SIZE, "max_overflow": settings.DB_MAX_OVERFLOW}
)

# Create SQLAlchemy engine
engine = create_engine(
    settings.DATABASE_URL,
    pool_pre_ping=True,  # Verify connections before using
    echo=settings.DEBUG,  # Log SQL queries in debug mode
    **_pool_kwargs,
)

# Create session factory
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db() -> Session:
    """
    FastAPI dependency for database sessions.

    Yields a database session and ensures it's closed after use.

    Usage:
        @app.get("/items")
        def get_items(db: Session = Depends(get_db)):
            return db.query(Item).all()
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db() -> None:
    """Create all tables that don't exist yet (development convenience)."""
    from earthwise.models.base import Base
    import earthwise.models.user  # noqa: F401
    import earthwise.models.notification  # noqa: F401
    import earthwise.models.report  # noqa: F401
    import earthwise.models.transaction  # noqa: F401

    Base.metadata.create_all(bind=engine)
