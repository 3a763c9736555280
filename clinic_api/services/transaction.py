import logging
from contextlib import contextmanager

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from clinic_api.core.errors import PersistenceError

logger = logging.getLogger(__name__)


@contextmanager
def transaction(db: Session):
    """Commit everything done inside the block, or roll all of it back."""
    try:
        yield db
    except Exception:
        db.rollback()
        raise

    try:
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception('Commit failed')
        raise PersistenceError() from exc
