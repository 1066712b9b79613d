import logging

from stock_alerts.adapters import from_stream_record
from stock_alerts.errors import InvalidInput
from stock_alerts.runtime import configure_logging, get_service
from stock_alerts.service import was_sent

configure_logging()
logger = logging.getLogger(__name__)


def lambda_handler(event, context):
    # Evento desde DynamoDB Streams (NEW_AND_OLD_IMAGES)
    service = get_service()
    processed = 0
    notified = 0
    for record in event.get('Records', []):
        try:
            reading = from_stream_record(record)
        except InvalidInput as e:
            logger.warning('Formato inesperado en stream (%s): %s', record.get('eventID'), e)
            continue
        if reading is None:
            continue
        processed += 1
        result = service.process(reading)
        if was_sent(result):
            notified += 1
        elif not result.ok:
            logger.warning('Notificación no enviada para %s: %s', reading.product_name, result.reason)
    return {'status': 'ok', 'processed': processed, 'notified': notified}
