import logging

from stock_alerts.adapters import from_webhook_payload
from stock_alerts.errors import InvalidInput, Unauthorized
from stock_alerts.http import parse_json_body, require_secret, response
from stock_alerts.runtime import configure_logging, get_service, get_settings

configure_logging()
logger = logging.getLogger(__name__)


def lambda_handler(event, context):
    """POST /webhooks/low-stock: webhook de cambios en la tabla de inventario.

    El resultado de la notificación nunca cambia el código HTTP: un email
    fallido no debe hacer que el emisor del webhook reintente el cambio.
    """
    try:
        require_secret(event, get_settings().webhook_secret)
    except Unauthorized:
        logger.warning('Webhook rechazado: secreto ausente o incorrecto')
        return response(401, {'ok': False, 'error': 'Unauthorized'})

    try:
        reading = from_webhook_payload(parse_json_body(event))
        if reading is None:
            return response(200, {'ok': True, 'note': 'No record in payload'})
        result = get_service().process(reading)
        return response(200, {'ok': True, 'notification': result.to_dict()})
    except InvalidInput as e:
        return response(400, {'ok': False, 'error': str(e)})
    except Exception as e:
        logger.exception('Error procesando webhook de stock bajo')
        return response(500, {'ok': False, 'error': str(e) or 'Unhandled error'})
