"""Normalización de las distintas formas de entrada a ``StockReading``.

Un adaptador por forma: webhook de base de datos, registro de DynamoDB
Streams, aviso directo y elementos de la tabla de inventario.
"""
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Mapping, Optional

from boto3.dynamodb.types import TypeDeserializer

from stock_alerts.errors import InvalidInput
from stock_alerts.models import ExpiringItem, LowStockItem, StockReading

_deserializer = TypeDeserializer()

STREAM_EVENTS = ('INSERT', 'MODIFY')


def _first(record: Mapping[str, Any], *names):
    for name in names:
        value = record.get(name)
        if value is not None:
            return value
    return None


def to_quantity(value, field: str = 'quantity') -> int:
    """Convierte a entero >= 0; acepta int, Decimal, float entero o texto numérico."""
    if value is None or isinstance(value, bool):
        raise InvalidInput(f'{field} ausente o inválido: {value!r}')
    if isinstance(value, int):
        number = value
    else:
        try:
            dec = Decimal(str(value).strip())
        except (InvalidOperation, ValueError):
            raise InvalidInput(f'{field} no es numérico: {value!r}')
        if not dec.is_finite() or dec != dec.to_integral_value():
            raise InvalidInput(f'{field} debe ser un entero: {value!r}')
        number = int(dec)
    if number < 0:
        raise InvalidInput(f'{field} no puede ser negativo: {number}')
    return number


def _optional_quantity(record: Optional[Mapping[str, Any]], *names) -> Optional[int]:
    if not record:
        return None
    value = _first(record, *names)
    if value is None:
        return None
    return to_quantity(value, 'previous_quantity')


def from_webhook_payload(payload: Mapping[str, Any]) -> Optional[StockReading]:
    """Payload de webhook de base de datos: {type, table, record|new, old_record|old}.

    Devuelve None si el payload no trae fila nueva.
    """
    if not isinstance(payload, Mapping):
        raise InvalidInput('El payload debe ser un objeto JSON')
    new_rec = _first(payload, 'record', 'new')
    old_rec = _first(payload, 'old_record', 'old')
    if not new_rec:
        return None
    if not isinstance(new_rec, Mapping) or (old_rec is not None and not isinstance(old_rec, Mapping)):
        raise InvalidInput('record/old_record deben ser objetos')

    sku = str(new_rec.get('sku') or '')
    return StockReading(
        product_id=str(_first(new_rec, 'id', 'sku') or ''),
        product_name=str(_first(new_rec, 'product_name', 'name', 'title') or ''),
        current_quantity=to_quantity(_first(new_rec, 'quantity', 'qty')),
        previous_quantity=_optional_quantity(old_rec, 'quantity', 'qty'),
        sku=sku,
    )


def deserialize_image(image: Mapping[str, Any]) -> dict:
    return {key: _deserializer.deserialize(value) for key, value in image.items()}


def from_stream_record(record: Mapping[str, Any]) -> Optional[StockReading]:
    """Registro de DynamoDB Streams; solo INSERT y MODIFY producen lectura."""
    if record.get('eventName') not in STREAM_EVENTS:
        return None
    ddb = record.get('dynamodb') or {}
    new_image = ddb.get('NewImage')
    if not new_image:
        raise InvalidInput('Registro de stream sin NewImage')
    try:
        new_item = deserialize_image(new_image)
        old_item = deserialize_image(ddb['OldImage']) if ddb.get('OldImage') else None
    except (TypeError, AttributeError, ValueError) as e:
        raise InvalidInput(f'Formato inesperado en stream: {e}') from e
    return item_to_reading(new_item, old_item)


def item_to_reading(item: Mapping[str, Any], old_item: Optional[Mapping[str, Any]] = None) -> StockReading:
    """Elemento de la tabla Inventory (atributos Sku, ProductName, Quantity)."""
    sku = str(item.get('Sku') or '')
    return StockReading(
        product_id=str(item.get('Id') or sku),
        product_name=str(item.get('ProductName') or ''),
        current_quantity=to_quantity(item.get('Quantity')),
        previous_quantity=_optional_quantity(old_item, 'Quantity'),
        sku=sku,
    )


def from_report(body: Mapping[str, Any]) -> StockReading:
    """Aviso directo: {productName, quantity, previousQuantity?, sku?, productId?, level?}."""
    if not isinstance(body, Mapping):
        raise InvalidInput('El cuerpo debe ser un objeto JSON')
    product_name = body.get('productName')
    if not product_name or body.get('quantity') is None:
        raise InvalidInput('Missing productName or quantity')
    sku = str(body.get('sku') or '')
    return StockReading(
        product_id=str(body.get('productId') or sku),
        product_name=str(product_name),
        current_quantity=to_quantity(body['quantity']),
        previous_quantity=_optional_quantity(body, 'previousQuantity'),
        sku=sku,
        level=str(body.get('level') or ''),
    )


def item_to_low_stock(item: Mapping[str, Any]) -> LowStockItem:
    return LowStockItem(
        sku=str(item.get('Sku') or ''),
        name=str(item.get('ProductName') or ''),
        quantity=to_quantity(item.get('Quantity', 0)),
    )


def parse_date(value) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value)[:10])
    except ValueError:
        raise InvalidInput(f'Fecha de caducidad inválida: {value!r}')


def item_to_expiring(item: Mapping[str, Any]) -> ExpiringItem:
    return ExpiringItem(
        name=str(item.get('ProductName') or ''),
        quantity=to_quantity(item.get('Quantity', 0)),
        expiration_date=parse_date(item.get('ExpirationDate')),
        category=str(item.get('Category') or ''),
        subcategory=str(item.get('Subcategory') or ''),
    )
