# bookstore/main.py
import uvicorn

from bookstore.api import create_app
from bookstore.data.database import Base, engine
from bookstore.utils.logging import get_logger

# rejestracja wszystkich modeli w Base.metadata przed create_all
import bookstore.data.models  # noqa: F401

logger = get_logger(__name__)


def init_db() -> None:
    logger.info(f"Creating tables: {sorted(Base.metadata.tables)}")
    try:
        Base.metadata.create_all(bind=engine)
    except Exception:
        logger.exception("Failed to create database tables")
        raise
    logger.info("Database tables ready")


init_db()

app = create_app()

if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=8000)
