import logging
from functools import wraps

from fastapi import HTTPException
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

logger = logging.getLogger(__name__)


class DBException(Exception):
    def __init__(self, message: str, status_code: int = 400):
        self.message = message
        self.status_code = status_code
        super().__init__(message)


def _rollback(args):
    # Service methods are bound to a class holding the request session
    db = getattr(args[0], "db", None) if args else None
    if db is not None:
        db.rollback()


def db_exception(func):
    @wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except IntegrityError as e:
            _rollback(args)
            logger.warning(f"Integrity error in {func.__name__}: {e.orig}")
            raise DBException("Duplicate entry: already exists", 409)
        except SQLAlchemyError as e:
            _rollback(args)
            logger.error(f"Database error in {func.__name__}: {e}")
            raise DBException("Database error occurred", 500)

    return wrapper


class FieldValidationError(HTTPException):
    """
    400 "Validation failed" carrying field-level errors, raised by services for
    checks that need the database (unknown department, taken email, ...).
    """

    def __init__(self, field: str, message: str):
        super().__init__(status_code=400, detail="Validation failed")
        self.errors = [{"field": field, "message": message}]
