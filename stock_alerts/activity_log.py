import logging
import uuid
from datetime import datetime, timezone

from botocore.exceptions import BotoCoreError, ClientError

logger = logging.getLogger(__name__)


class ActivityLog:
    """Registro de auditoría en DynamoDB. Sus fallos nunca rompen la operación."""

    def __init__(self, table, actor='system'):
        self.table = table
        self.actor = actor

    def record(self, action, details):
        item = {
            'Id': str(uuid.uuid4()),
            'CreatedAt': datetime.now(timezone.utc).isoformat(),
            'UserEmail': self.actor,
            'UserRole': 'system',
            'Action': action,
            'Details': details,
        }
        try:
            self.table.put_item(Item=item)
        except (ClientError, BotoCoreError) as e:
            logger.warning('No se pudo registrar la actividad %s: %s', action, e)
            return False
        return True
