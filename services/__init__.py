"""Services package."""

from .backup_service import BackupService
from .notification_service import NotificationService
from .order_service import OrderService, generate_order_id
from .settings_service import SettingsService
from .stats_service import StatsService

__all__ = [
    "BackupService",
    "NotificationService",
    "OrderService",
    "generate_order_id",
    "SettingsService",
    "StatsService",
]
