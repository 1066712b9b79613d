import logging
from datetime import date, timedelta
from typing import List

from boto3.dynamodb.conditions import Attr
from botocore.exceptions import BotoCoreError, ClientError

from stock_alerts.adapters import item_to_expiring, item_to_low_stock
from stock_alerts.directory import scan_all
from stock_alerts.errors import InvalidInput, InventoryError
from stock_alerts.models import ExpiringItem, LowStockItem

logger = logging.getLogger(__name__)


class InventoryStore:
    """Consultas de solo lectura sobre la tabla Inventory."""

    def __init__(self, table):
        self.table = table

    def _scan(self, condition) -> List[dict]:
        try:
            return scan_all(self.table, FilterExpression=condition)
        except (ClientError, BotoCoreError) as e:
            raise InventoryError(f'Error al acceder a DynamoDB: {e}') from e

    def low_stock(self, threshold: int) -> List[LowStockItem]:
        items = []
        for raw in self._scan(Attr('Quantity').lte(threshold)):
            try:
                items.append(item_to_low_stock(raw))
            except InvalidInput as e:
                logger.warning('Elemento de inventario omitido (%s): %s', raw.get('Sku'), e)
        items.sort(key=lambda item: (item.quantity, item.name))
        return items

    def expiring_between(self, start: date, end: date) -> List[ExpiringItem]:
        # ExpirationDate se guarda como fecha ISO (YYYY-MM-DD o con hora)
        condition = (Attr('ExpirationDate').gte(start.isoformat())
                     & Attr('ExpirationDate').lt((end + timedelta(days=1)).isoformat()))
        items = []
        for raw in self._scan(condition):
            try:
                items.append(item_to_expiring(raw))
            except InvalidInput as e:
                logger.warning('Elemento de inventario omitido (%s): %s', raw.get('Sku'), e)
        items = [item for item in items if start <= item.expiration_date <= end]
        items.sort(key=lambda item: item.expiration_date)
        return items
