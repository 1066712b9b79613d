"""Avisos por email a los administradores.

Flujo de cada operación: resolver destinatarios, componer el mensaje, un
único envío para todos y devolver un ``NotifyResult``. Los fallos de envío se
devuelven como resultado y nunca se propagan a quien dispara la alerta.
"""
import html
import logging
from typing import List, Optional, Sequence

from stock_alerts.directory import clean_emails
from stock_alerts.errors import (
    DELIVERY_FAILED,
    NO_RECIPIENTS,
    NOTHING_TO_SEND,
    DeliveryError,
    DirectoryError,
)
from stock_alerts.models import ExpiringItem, LowStockItem, NotificationEvent, NotifyResult, Outcome

logger = logging.getLogger(__name__)

FOOTER = '— UniAsia System'


def _plural(count: int) -> str:
    return '' if count == 1 else 's'


def format_date(value) -> str:
    return f'{value:%b} {value.day}, {value.year}'


class AdminNotifier:

    def __init__(self, directory, mailer, fallback_recipients: Sequence[str] = (),
                 activity_log=None):
        self.directory = directory
        self.mailer = mailer
        self.fallback_recipients = tuple(fallback_recipients)
        self.activity_log = activity_log

    def resolve_recipients(self) -> List[str]:
        try:
            emails = self.directory.list_admin_emails()
        except DirectoryError as e:
            # Sin directorio seguimos con la lista estática
            logger.error('Directorio no disponible: %s', e)
            emails = []
        emails = clean_emails(emails)
        if emails:
            return emails
        fallback = clean_emails(self.fallback_recipients)
        if fallback:
            logger.info('Directorio vacío; usando %d destinatarios de respaldo', len(fallback))
        return fallback

    # ------------------------------------------------------------------
    # Operaciones públicas
    # ------------------------------------------------------------------
    def notify_low_stock(self, product_name: str, quantity: int, sku: str = '',
                         threshold: Optional[int] = None, level: str = '') -> NotifyResult:
        name = product_name or sku or 'Unknown product'
        subject = f'Low Stock Alert: {name}'
        lines = [
            f'The item {name} is running low.',
            f'Remaining quantity: {quantity}',
        ]
        if sku:
            lines.insert(1, f'SKU: {sku}')
        if level:
            lines.append(f'Stock level: {level}')
        if threshold is not None:
            lines.append(f'Low stock threshold: {threshold}')
        lines.append('Please check the inventory dashboard for details.')
        html_body = (
            '<h2>Low Stock Notification</h2>'
            f'<p>The item <strong>{html.escape(name)}</strong> is running low.</p>'
            + (f'<p>SKU: {html.escape(sku)}</p>' if sku else '')
            + f'<p>Remaining quantity: <strong>{quantity}</strong></p>'
            + (f'<p>Stock level: {html.escape(level)}</p>' if level else '')
            + '<p>Please check the inventory dashboard for details.</p>'
        )
        event = NotificationEvent(product_name=name, quantity=quantity)
        return self._deliver('low_stock_alert', event, subject, '\n'.join(lines), html_body)

    def notify_low_stock_batch(self, items: Sequence[LowStockItem]) -> NotifyResult:
        if not items:
            return self._nothing_to_send()
        count = len(items)
        subject = f'Low Stock Alert: {count} item{_plural(count)}'
        lines = [f'• {item.name} (SKU {item.sku or "—"}) — qty {item.quantity}' for item in items]
        text = (f'The following {count} item{_plural(count)} are low on stock:\n\n'
                + '\n'.join(lines) + f'\n\n{FOOTER}')
        html_body = (
            f'<p>The following <b>{count}</b> item{_plural(count)} are low on stock:</p>'
            '<ul>' + ''.join(f'<li>{html.escape(line[2:])}</li>' for line in lines) + '</ul>'
            f'<p>{FOOTER}</p>'
        )
        event = NotificationEvent(product_name=', '.join(item.name for item in items),
                                  quantity=sum(item.quantity for item in items))
        return self._deliver('low_stock_batch_alert', event, subject, text, html_body)

    def notify_expiring(self, items: Sequence[ExpiringItem], days: int) -> NotifyResult:
        if not items:
            return self._nothing_to_send()
        count = len(items)
        subject = f'Expiring Items (Next {days} Days): {count} item{_plural(count)}'
        lines = []
        for item in items:
            category = ' / '.join(part for part in (item.category, item.subcategory) if part)
            label = f'{item.name} ({category})' if category else item.name
            lines.append(f'• {label} — qty {item.quantity} — exp {format_date(item.expiration_date)}')
        text = (f'The following {count} item{_plural(count)} are expiring within {days} days:\n\n'
                + '\n'.join(lines) + f'\n\n{FOOTER}')
        html_body = (
            f'<p>The following <b>{count}</b> item{_plural(count)} are expiring within {days} days:</p>'
            '<ul>' + ''.join(f'<li>{html.escape(line[2:])}</li>' for line in lines) + '</ul>'
            f'<p>{FOOTER}</p>'
        )
        event = NotificationEvent(product_name=', '.join(item.name for item in items),
                                  quantity=sum(item.quantity for item in items))
        return self._deliver('expiry_alert', event, subject, text, html_body)

    # ------------------------------------------------------------------
    # Internos
    # ------------------------------------------------------------------
    def _deliver(self, action: str, event: NotificationEvent, subject: str,
                 text: str, html_body: str) -> NotifyResult:
        recipients = self.resolve_recipients()
        if not recipients:
            logger.error('Sin destinatarios para %s (%s)', action, event.product_name)
            event.outcome = Outcome.FAILED
            result = NotifyResult(ok=False, reason=NO_RECIPIENTS, event=event)
            self._audit(action, event, result)
            return result

        event.recipients = recipients
        try:
            self.mailer.send(subject, text, recipients, html=html_body)
        except DeliveryError as e:
            logger.error('Fallo enviando %s a %d destinatarios: %s', action, len(recipients), e)
            event.outcome = Outcome.FAILED
            result = NotifyResult(ok=False, reason=DELIVERY_FAILED, detail=str(e), event=event)
        else:
            logger.info('%s enviado a %d destinatarios: %s', action, len(recipients), event.product_name)
            event.outcome = Outcome.SENT
            result = NotifyResult(ok=True, sent_count=len(recipients), event=event)
        self._audit(action, event, result)
        return result

    def _nothing_to_send(self) -> NotifyResult:
        # Se resuelven igualmente para informar cuántos administradores hay
        event = NotificationEvent(product_name='', quantity=0, recipients=self.resolve_recipients())
        return NotifyResult(ok=True, reason=NOTHING_TO_SEND, event=event)

    def _audit(self, action: str, event: NotificationEvent, result: NotifyResult):
        if self.activity_log is None:
            return
        details = event.to_dict()
        details.update(result.to_dict())
        self.activity_log.record(action, details)
