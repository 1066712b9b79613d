"""Detección del cruce del umbral de stock bajo.

Regla única para todos los puntos de entrada:

* con cantidad previa conocida solo se notifica el cruce descendente
  (``previa > umbral`` y ``actual <= umbral``), así un producto que ya está
  bajo no genera una alerta por cada movimiento;
* sin cantidad previa se notifica si ``actual <= umbral``.
"""
from typing import Optional

from stock_alerts.config import DEFAULT_THRESHOLD
from stock_alerts.errors import InvalidInput


def _check_quantity(name: str, value) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidInput(f'{name} debe ser un entero, recibido {value!r}')
    if value < 0:
        raise InvalidInput(f'{name} no puede ser negativo, recibido {value}')
    return value


class ThresholdMonitor:

    def __init__(self, threshold: int = DEFAULT_THRESHOLD):
        self.threshold = _check_quantity('threshold', threshold)

    def is_low(self, quantity: int) -> bool:
        return _check_quantity('quantity', quantity) <= self.threshold

    def should_notify(self, current_quantity: int, previous_quantity: Optional[int] = None) -> bool:
        current = _check_quantity('current_quantity', current_quantity)
        if previous_quantity is None:
            return current <= self.threshold
        previous = _check_quantity('previous_quantity', previous_quantity)
        return previous > self.threshold and current <= self.threshold


def should_notify(current_quantity: int, previous_quantity: Optional[int] = None,
                  threshold: int = DEFAULT_THRESHOLD) -> bool:
    return ThresholdMonitor(threshold).should_notify(current_quantity, previous_quantity)
