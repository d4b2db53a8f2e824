"""Database infrastructure - shared connection primitives."""

from infrastructure.database.exceptions import (
    CONNECTIVITY_ERRORS,
    is_connectivity_error,
)

__all__ = [
    "CONNECTIVITY_ERRORS",
    "is_connectivity_error",
]
