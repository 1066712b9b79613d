import logging

from stock_alerts.adapters import from_report
from stock_alerts.errors import InvalidInput, Unauthorized
from stock_alerts.http import parse_json_body, require_secret, response
from stock_alerts.runtime import configure_logging, get_service, get_settings

configure_logging()
logger = logging.getLogger(__name__)


def lambda_handler(event, context):
    """POST /alerts/low-stock con {productName, quantity, previousQuantity?, sku?}."""
    try:
        require_secret(event, get_settings().webhook_secret)
    except Unauthorized:
        return response(401, {'ok': False, 'error': 'Unauthorized'})

    try:
        reading = from_report(parse_json_body(event))
        result = get_service().process(reading)
        return response(200, result.to_dict())
    except InvalidInput as e:
        return response(400, {'ok': False, 'error': str(e)})
    except Exception as e:
        logger.exception('Error procesando aviso de stock bajo')
        return response(500, {'ok': False, 'error': str(e) or 'Unknown error'})
