import logging

from stock_alerts.errors import InventoryError
from stock_alerts.http import response
from stock_alerts.runtime import configure_logging, get_service, get_settings

configure_logging()
logger = logging.getLogger(__name__)


def lambda_handler(event, context):
    """Productos que caducan en los próximos EXPIRY_LOOKAHEAD_DAYS días (inclusive)."""
    is_http = 'requestContext' in (event or {})
    try:
        report = get_service().sweep_expiring(get_settings().expiry_days)
    except InventoryError as e:
        logger.error('[expiry] error: %s', e)
        body = {'ok': False, 'error': str(e)}
        return response(500, body) if is_http else body

    body = {
        # ok refleja la consulta; el envío se informa en emailed
        'ok': True,
        'count': report.count,
        'admins': report.admins,
        'emailed': report.result.sent_count > 0,
    }
    if report.result.reason:
        body['reason'] = report.result.reason
    return response(200, body) if is_http else body
