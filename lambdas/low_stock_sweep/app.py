import logging

from stock_alerts.errors import InventoryError
from stock_alerts.http import response
from stock_alerts.runtime import configure_logging, get_service

configure_logging()
logger = logging.getLogger(__name__)


def run_sweep():
    report = get_service().sweep_low_stock()
    body = {'ok': report.result.ok, 'sent': report.result.sent_count, 'count': report.count}
    if report.result.reason:
        body['reason'] = report.result.reason
    return body


def lambda_handler(event, context):
    # EventBridge (programado) o GET/POST /alerts/low-stock/run
    is_http = 'requestContext' in (event or {})
    try:
        body = run_sweep()
        status = 200
    except InventoryError as e:
        logger.error('Barrido de stock bajo fallido: %s', e)
        body = {'ok': False, 'error': str(e)}
        status = 500
    return response(status, body) if is_http else body
