"""Core application components."""

from core.logger import setup_logger, get_logger
from core.constants import (
    OrderStatus,
    NumberStatus,
    DatabaseDefaults,
    RaffleDefaults,
    OrderDefaults,
    BackupDefaults,
    NotificationDefaults,
)
from core.exceptions import (
    ApplicationError,
    DatabaseError,
    RepositoryError,
    ValidationError,
    NumbersUnavailableError,
    NotFoundError,
    OrderNotFoundError,
)

__all__ = [
    # Logging
    'setup_logger',
    'get_logger',
    # Constants
    'OrderStatus',
    'NumberStatus',
    'DatabaseDefaults',
    'RaffleDefaults',
    'OrderDefaults',
    'BackupDefaults',
    'NotificationDefaults',
    # Exceptions
    'ApplicationError',
    'DatabaseError',
    'RepositoryError',
    'ValidationError',
    'NumbersUnavailableError',
    'NotFoundError',
    'OrderNotFoundError',
]
