"""Alertas de stock bajo y caducidad para el inventario de UniAsia."""
from stock_alerts.config import Settings, load_settings
from stock_alerts.errors import (
    DeliveryError,
    DirectoryError,
    InvalidInput,
    InventoryError,
    StockAlertError,
    Unauthorized,
)
from stock_alerts.models import (
    ExpiringItem,
    LowStockItem,
    NotificationEvent,
    NotifyResult,
    Outcome,
    StockReading,
    SweepReport,
)
from stock_alerts.notifier import AdminNotifier
from stock_alerts.service import StockAlertService
from stock_alerts.threshold import ThresholdMonitor, should_notify

__all__ = [
    'AdminNotifier',
    'DeliveryError',
    'DirectoryError',
    'ExpiringItem',
    'InvalidInput',
    'InventoryError',
    'LowStockItem',
    'NotificationEvent',
    'NotifyResult',
    'Outcome',
    'Settings',
    'StockAlertError',
    'StockAlertService',
    'StockReading',
    'SweepReport',
    'ThresholdMonitor',
    'Unauthorized',
    'load_settings',
    'should_notify',
]
