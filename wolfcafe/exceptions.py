"""Custom exception hierarchy for the WolfCafe items application.

This module defines a structured exception hierarchy so the grid, the save
workflow and the persistence layer can signal failures precisely.
"""
from __future__ import annotations

from typing import Optional, Sequence


class WolfCafeError(Exception):
    """Base exception for all WolfCafe application errors."""

    pass


# Validation-related exceptions
class ValidationError(WolfCafeError):
    """Base exception for validation errors."""

    pass


class RowValidationError(ValidationError):
    """Raised when a grid row fails a column rule at save time."""

    def __init__(
        self,
        row_number: int,
        message: Optional[str] = None,
        *,
        columns: Sequence[int] = (),
    ) -> None:
        self.row_number = row_number
        self.columns = tuple(columns)
        super().__init__(
            message or f"Row {row_number} has invalid data. Fix errors before saving."
        )


# Grid state exceptions
class GridStateError(WolfCafeError):
    """Raised when a grid operation is requested on a row that cannot accept it."""

    pass


# Repository/backend exceptions
class RepositoryError(WolfCafeError):
    """Raised when listing, creating or updating items fails."""

    def __init__(self, message: str, detail: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        self.detail = detail


class ItemNotFoundError(RepositoryError):
    """Raised when an update targets an identity the store does not know."""

    pass


# Database-related exceptions
class DatabaseError(WolfCafeError):
    """Base exception for database-related errors."""

    pass


class DatabaseConnectionError(DatabaseError):
    """Raised when database connection fails."""

    pass


class DatabaseMigrationError(DatabaseError):
    """Raised when database migration fails."""

    pass


# Configuration exceptions
class ConfigurationError(WolfCafeError):
    """Raised when configuration is invalid."""

    pass
