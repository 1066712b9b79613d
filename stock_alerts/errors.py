"""Excepciones y códigos de resultado de las alertas de stock."""

NO_RECIPIENTS = 'NoRecipients'
DELIVERY_FAILED = 'DeliveryFailed'
NOTHING_TO_SEND = 'NothingToSend'
NOT_CROSSED = 'BelowThresholdNotCrossed'


class StockAlertError(Exception):
    """Base de todos los errores del paquete."""


class InvalidInput(StockAlertError):
    """Cantidad o producto ausente o con formato incorrecto."""


class Unauthorized(StockAlertError):
    """Secreto compartido ausente o incorrecto en una llamada entrante."""


class DirectoryError(StockAlertError):
    """Fallo consultando el directorio de administradores."""


class DeliveryError(StockAlertError):
    """El proveedor de email devolvió un error."""


class InventoryError(StockAlertError):
    """Fallo leyendo la tabla de inventario."""
