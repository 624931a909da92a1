import logging
from contextlib import contextmanager

from sqlalchemy import create_engine, text
from sqlalchemy.orm import Session, sessionmaker

from maintrack.core.config import settings

logger = logging.getLogger(__name__)

DATABASE_URL = settings.DATABASE_URL

if not DATABASE_URL:
    raise ValueError("DATABASE_URL not found!")


def _engine_kwargs(url: str) -> dict:
    if url.startswith("sqlite"):
        # SQLite multi-thread access from the threadpool
        return {"connect_args": {"check_same_thread": False}}
    return {
        "connect_args": {"connect_timeout": 10},
        "pool_pre_ping": True,
        "pool_size": settings.DATABASE_POOL_SIZE,
        "max_overflow": settings.DATABASE_MAX_OVERFLOW,
        "pool_recycle": settings.DATABASE_POOL_RECYCLE,
        "pool_timeout": 30,
    }


engine = create_engine(DATABASE_URL, echo=settings.DATABASE_ECHO, **_engine_kwargs(DATABASE_URL))

SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine
)


def get_db():
    """Dependency for getting database session."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def test_connection() -> bool:
    """Test database connection - NON-BLOCKING."""
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1")).fetchone()
        safe_url = DATABASE_URL.split("@")[-1]
        logger.info(f"[OK] Database connected: {safe_url}")
        return True
    except Exception as e:
        logger.warning(f"[WARN] Database connection failed (continuing): {e}")
        return False


def init_db() -> bool:
    """Create tables directly when migrations are not used."""
    try:
        # Import all models so they're registered with Base
        import maintrack.models  # noqa: F401
        from maintrack.db.base import Base

        Base.metadata.create_all(bind=engine)
        logger.info("[OK] Database tables initialized!")
        return True
    except Exception as e:
        logger.warning(f"[WARN] Database init warning: {e}")
        return False


def close_db_connection():
    """Close database connections."""
    engine.dispose()
    logger.info("[OK] Database connections closed")


@contextmanager
def transaction(db: Session):
    """Commit the block's writes as one unit, or roll all of them back."""
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
