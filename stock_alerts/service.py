import logging
from datetime import date, timedelta
from typing import Iterable, List, Optional

import boto3

from stock_alerts.activity_log import ActivityLog
from stock_alerts.config import Settings
from stock_alerts.directory import AdminDirectory
from stock_alerts.errors import NOT_CROSSED
from stock_alerts.inventory import InventoryStore
from stock_alerts.mailer import SesMailer
from stock_alerts.models import NotificationEvent, NotifyResult, Outcome, StockReading, SweepReport
from stock_alerts.notifier import AdminNotifier
from stock_alerts.threshold import ThresholdMonitor

logger = logging.getLogger(__name__)


class StockAlertService:
    """Decidir, resolver destinatarios, enviar e informar."""

    def __init__(self, monitor: ThresholdMonitor, notifier: AdminNotifier,
                 inventory: Optional[InventoryStore] = None):
        self.monitor = monitor
        self.notifier = notifier
        self.inventory = inventory

    @classmethod
    def from_settings(cls, settings: Settings, session=None) -> 'StockAlertService':
        session = session or boto3.Session(region_name=settings.region)
        ddb = session.resource('dynamodb')
        activity_log = None
        if settings.activity_log_table:
            activity_log = ActivityLog(ddb.Table(settings.activity_log_table))
        notifier = AdminNotifier(
            directory=AdminDirectory(ddb.Table(settings.accounts_table)),
            mailer=SesMailer(session.client('ses'), settings.sender),
            fallback_recipients=settings.fallback_recipients,
            activity_log=activity_log,
        )
        return cls(
            monitor=ThresholdMonitor(settings.threshold),
            notifier=notifier,
            inventory=InventoryStore(ddb.Table(settings.inventory_table)),
        )

    @property
    def threshold(self) -> int:
        return self.monitor.threshold

    def process(self, reading: StockReading) -> NotifyResult:
        if not self.monitor.should_notify(reading.current_quantity, reading.previous_quantity):
            logger.debug('Sin cruce de umbral: %s (%s -> %s)', reading.product_name,
                         reading.previous_quantity, reading.current_quantity)
            event = NotificationEvent(reading.product_name, reading.current_quantity)
            return NotifyResult(ok=True, reason=NOT_CROSSED, event=event)
        logger.info('Stock bajo: %s sku=%s cantidad=%d (previa=%s, umbral=%d)',
                    reading.product_name, reading.sku, reading.current_quantity,
                    reading.previous_quantity, self.threshold)
        return self.notifier.notify_low_stock(
            reading.product_name,
            reading.current_quantity,
            sku=reading.sku,
            threshold=self.threshold,
            level=reading.level,
        )

    def process_many(self, readings: Iterable[StockReading]) -> List[NotifyResult]:
        return [self.process(reading) for reading in readings]

    def sweep_low_stock(self) -> SweepReport:
        items = self._inventory().low_stock(self.threshold)
        logger.info('Barrido de stock bajo: %d elementos', len(items))
        return SweepReport(len(items), self.notifier.notify_low_stock_batch(items))

    def sweep_expiring(self, days: int, today: Optional[date] = None) -> SweepReport:
        start = today or date.today()
        items = self._inventory().expiring_between(start, start + timedelta(days=days))
        logger.info('Barrido de caducidad (%d días): %d elementos', days, len(items))
        return SweepReport(len(items), self.notifier.notify_expiring(items, days))

    def _inventory(self) -> InventoryStore:
        if self.inventory is None:
            raise RuntimeError('StockAlertService creado sin InventoryStore')
        return self.inventory


def was_sent(result: NotifyResult) -> bool:
    return result.outcome is Outcome.SENT
