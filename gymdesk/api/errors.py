import logging
from contextlib import contextmanager
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from gymdesk.errors import GymDeskError

logger = logging.getLogger(__name__)

@contextmanager
def handle_errors(operation: str, session: Optional[Session] = None):
    """Map rule violations to their status codes and store failures to a generic 500.

    Store failures are logged and rolled back; nothing is retried.
    """
    try:
        yield
    except GymDeskError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    except SQLAlchemyError:
        logger.exception("Store failure during '%s'", operation)
        if session is not None:
            session.rollback()
        raise HTTPException(status_code=500, detail=f"Failed to {operation}. Please try again.")
