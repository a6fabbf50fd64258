"""
Error taxonomy and boundary handling for the reporting engine.

Reporting pages prefer "no data" over hard failures, so every public engine
operation is wrapped with `degrade_on_store_error`: database failures are
classified, logged with traceback, and replaced by a well-defined empty
result. Anything that is not a database failure still propagates.

Taxonomy:
- StoreUnavailable: connection or transport failure talking to the database.
- QueryFailure: the database rejected or failed the query.
- ValidationIgnored: an out-of-whitelist request parameter; callers turn it
  into a no-op, it never reaches the user.
- ParseFailure: a malformed serialized sub-document on a single record.
"""

from __future__ import annotations

import functools
import logging
from typing import Callable, TypeVar

from django.db import DatabaseError, InterfaceError, OperationalError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class EngineError(Exception):
    """Base class for engine errors."""


class StoreUnavailable(EngineError):
    """The relational store could not be reached."""


class QueryFailure(EngineError):
    """The relational store failed to execute a query."""


class ValidationIgnored(EngineError):
    """
    A request parameter fell outside its whitelist.

    Raised by parameter resolvers and caught by the operation that asked,
    which then behaves as if the parameter had not been supplied.
    """

    def __init__(self, parameter: str, value: object):
        self.parameter = parameter
        self.value = value
        super().__init__(f"Ignoring unsupported {parameter}={value!r}")


class ParseFailure(EngineError):
    """A serialized field could not be parsed."""


def classify_database_error(exc: DatabaseError) -> EngineError:
    """
    Map a Django database exception onto the engine taxonomy.

    Args:
        exc: Exception raised by the Django database layer.

    Returns:
        StoreUnavailable for connection-level failures, QueryFailure otherwise.
        The original exception is chained as __cause__.
    """
    if isinstance(exc, (OperationalError, InterfaceError)):
        error: EngineError = StoreUnavailable(str(exc))
    else:
        error = QueryFailure(str(exc))
    error.__cause__ = exc
    return error


def degrade_on_store_error(
    fallback: Callable[[], T], operation: str | None = None
) -> Callable[[Callable[..., T]], Callable[..., T]]:
    """
    Decorator that turns database failures into a fallback result.

    Args:
        fallback: Zero-argument callable producing the empty result to return.
        operation: Label used in log messages (defaults to the function name).

    Example:
        >>> @degrade_on_store_error(list, "fetching portfolio dates")
        ... def get_portfolio_dates(vehicle_id):
        ...     ...
    """

    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        label = operation or func.__name__

        @functools.wraps(func)
        def wrapper(*args, **kwargs) -> T:
            try:
                return func(*args, **kwargs)
            except DatabaseError as exc:
                error = classify_database_error(exc)
                logger.error(
                    f"Error {label}: {type(error).__name__}: {error}",
                    exc_info=True,
                )
                return fallback()

        return wrapper

    return decorator
