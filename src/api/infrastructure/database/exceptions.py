"""Database-level error classification shared by infrastructure adapters."""

from __future__ import annotations

from sqlalchemy.exc import InterfaceError, OperationalError

# Failures of the connection itself rather than of the statement. Adapters
# re-raise these untouched so callers can tell "database unreachable" apart
# from "this statement is wrong".
CONNECTIVITY_ERRORS: tuple[type[BaseException], ...] = (
    OperationalError,
    InterfaceError,
    ConnectionError,
    TimeoutError,
)


def is_connectivity_error(error: BaseException) -> bool:
    """Tell whether an error means the database could not be reached."""
    return isinstance(error, CONNECTIVITY_ERRORS)
