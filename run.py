import logging

import uvicorn

from maintrack.core.config import settings

logger = logging.getLogger("maintrack.run")


def run_migrations():
    """Run Alembic migrations."""
    try:
        from alembic.config import Config
        from alembic import command

        alembic_cfg = Config("alembic.ini")
        logger.info("[STARTUP] Running database migrations...")
        command.upgrade(alembic_cfg, "head")
        logger.info("[STARTUP] Migrations complete!")
        return True
    except Exception as e:
        logger.warning(f"[WARN] Migration failed: {e}")
        return False


def init_database():
    """Initialize database tables directly (fallback)."""
    from maintrack.database import init_db
    logger.info("[STARTUP] Initializing database tables...")
    init_db()


if __name__ == "__main__":
    logging.basicConfig(level=settings.LOG_LEVEL.upper())

    if settings.RUN_MIGRATIONS and not run_migrations():
        logger.warning("[WARN] Falling back to direct table creation...")
        init_database()

    logger.info(f"[STARTUP] Server binding to host={settings.HOST} port={settings.PORT}")
    uvicorn.run(
        "maintrack.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.RELOAD,
        log_level=settings.LOG_LEVEL.lower(),
        workers=1,
        lifespan="auto",
    )
