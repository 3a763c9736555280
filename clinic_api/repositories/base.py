"""Shared plumbing for the data access layer.

Repositories take the session they work on at construction and never commit:
the service that owns the unit of work decides when to commit or roll back.
Every SQLAlchemy failure is logged here, once, and re-raised as a
``PersistenceError`` so callers only ever see the clinic error taxonomy.
"""

import functools
import logging

from fastapi import status
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from clinic_api.core.errors import PersistenceError

logger = logging.getLogger(__name__)


class ConstraintViolationError(PersistenceError):
    """A write was rejected by a uniqueness or foreign key constraint."""

    status_code = status.HTTP_409_CONFLICT
    default_detail = "The record conflicts with an existing one."


def persistence_boundary(method):
    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        try:
            return method(self, *args, **kwargs)
        except IntegrityError as exc:
            logger.warning('%s.%s rejected by constraint: %s', type(self).__name__, method.__name__, exc.orig)
            raise ConstraintViolationError() from exc
        except SQLAlchemyError as exc:
            logger.exception('%s.%s failed', type(self).__name__, method.__name__)
            raise PersistenceError() from exc

    return wrapper


class Repository:
    def __init__(self, db: Session):
        self.db = db

    @persistence_boundary
    def refresh(self, instance):
        self.db.refresh(instance)
        return instance
