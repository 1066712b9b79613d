from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import List, Optional


class Outcome(str, Enum):
    SENT = 'Sent'
    SKIPPED = 'Skipped'
    FAILED = 'Failed'


@dataclass(frozen=True)
class StockReading:
    """Lectura de stock de un producto; previous_quantity None = desconocida."""
    product_id: str
    product_name: str
    current_quantity: int
    previous_quantity: Optional[int] = None
    sku: str = ''
    level: str = ''


@dataclass(frozen=True)
class LowStockItem:
    sku: str
    name: str
    quantity: int


@dataclass(frozen=True)
class ExpiringItem:
    name: str
    quantity: int
    expiration_date: date
    category: str = ''
    subcategory: str = ''


@dataclass
class NotificationEvent:
    product_name: str
    quantity: int
    recipients: List[str] = field(default_factory=list)
    outcome: Outcome = Outcome.SKIPPED

    def to_dict(self):
        return {
            'productName': self.product_name,
            'quantity': self.quantity,
            'recipients': list(self.recipients),
            'outcome': self.outcome.value,
        }


@dataclass
class NotifyResult:
    ok: bool
    sent_count: int = 0
    reason: Optional[str] = None
    detail: Optional[str] = None
    event: Optional[NotificationEvent] = None

    @property
    def outcome(self) -> Outcome:
        if self.event is not None:
            return self.event.outcome
        if not self.ok:
            return Outcome.FAILED
        return Outcome.SENT if self.sent_count else Outcome.SKIPPED

    def to_dict(self):
        body = {'ok': self.ok, 'sentCount': self.sent_count}
        if self.reason:
            body['reason'] = self.reason
        if self.detail:
            body['detail'] = self.detail
        return body


@dataclass
class SweepReport:
    """Resultado de un barrido programado sobre el inventario."""
    count: int
    result: NotifyResult

    @property
    def admins(self) -> int:
        return len(self.result.event.recipients) if self.result.event else 0
