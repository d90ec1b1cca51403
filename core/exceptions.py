"""Application-wide exception classes."""

from __future__ import annotations

from typing import Iterable


class ApplicationError(Exception):
    """Base exception for all application errors."""
    pass


class DatabaseError(ApplicationError):
    """Base exception for database-related errors."""
    pass


class RepositoryError(DatabaseError):
    """Raised when repository operation fails."""
    pass


class ValidationError(ApplicationError):
    """Raised when data validation fails."""
    pass


class NumbersUnavailableError(ValidationError):
    """Raised when requested raffle numbers are already taken."""

    def __init__(self, numbers: Iterable[str]) -> None:
        self.numbers = sorted(numbers)
        super().__init__(f"Numbers no longer available: {', '.join(self.numbers)}")


class NotFoundError(ApplicationError):
    """Raised when the requested entity does not exist."""
    pass


class OrderNotFoundError(NotFoundError):
    """Raised when operating on a nonexistent order."""

    def __init__(self, order_id: str) -> None:
        self.order_id = order_id
        super().__init__(f"Order not found: {order_id}")
