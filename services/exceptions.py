"""
services/exceptions.py

Error taxonomy shared by the service layer. The handlers in
middlewares/error_handler.py turn these into HTTP responses.

- InvalidInput         -> 400  (rejected before any DB call)
- NotFoundError        -> 404  (mutation on an unknown id)
- ConflictError        -> 409  (write clashes with stored marks)
- UpstreamUnavailable  -> 503  (DB failure on a hard-fail step)
"""

import logging
from contextlib import contextmanager

from sqlalchemy.exc import SQLAlchemyError

logger = logging.getLogger(__name__)


class PortalError(Exception):
    status_code = 500
    code = "INTERNAL_ERROR"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidInput(PortalError):
    status_code = 400
    code = "INVALID_INPUT"


class NotFoundError(PortalError):
    status_code = 404
    code = "NOT_FOUND"


class ConflictError(PortalError):
    status_code = 409
    code = "CONFLICT"


class UpstreamUnavailable(PortalError):
    status_code = 503
    code = "UPSTREAM_UNAVAILABLE"


@contextmanager
def hard_fail(db, step: str):
    """Run a DB step whose failure must reach the caller as UpstreamUnavailable."""
    try:
        yield
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"[{step}] database error: {e}")
        raise UpstreamUnavailable(f"Failed to {step}") from e
