from __future__ import annotations

import logging
from functools import wraps

logger = logging.getLogger(__name__)


class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid (bad id, bad date, unknown employee)."""


class ClockActionError(ValidationError):
    """Raised when a clock in/out request cannot be honoured."""


class NotFoundError(DomainError):
    """Raised when a referenced employee, entry or pay period does not exist."""


class LifecycleError(DomainError):
    """Raised when a pay period transition is not allowed. Never retried."""


class OperationError(DomainError):
    """Wraps an unexpected failure with the name of the operation that hit it."""


def wraps_errors(operation: str):
    """Re-raise anything that is not a DomainError as ``OperationError``."""

    def decorator(func):
        @wraps(func)
        def wrapper(*args, **kwargs):
            try:
                return func(*args, **kwargs)
            except DomainError:
                raise
            except Exception as err:
                logger.exception("%s() failed", operation)
                raise OperationError(f"Error in {operation}(): {err}") from err

        return wrapper

    return decorator
