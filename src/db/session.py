import logging
from typing import Generator

from fastapi import HTTPException
from sqlalchemy.orm import Session

from src.db.database import SessionLocal

logger = logging.getLogger(__name__)


def get_db() -> Generator[Session, None, None]:
    """
    FastAPI dependency to provide a database session.

    Rolls back on error and always closes the session. HTTPExceptions raised
    by the endpoint are expected outcomes and are not logged.
    """
    db = SessionLocal()
    try:
        yield db
    except HTTPException as e:
        logger.debug(f"Rolling back database session for HTTP {e.status_code} response")
        db.rollback()
        raise
    except Exception:
        logger.error("Rolling back database session after error", exc_info=True)
        db.rollback()
        raise
    finally:
        db.close()
