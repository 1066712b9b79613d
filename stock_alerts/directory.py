import logging

from boto3.dynamodb.conditions import Attr
from botocore.exceptions import BotoCoreError, ClientError

from stock_alerts.errors import DirectoryError

logger = logging.getLogger(__name__)

ADMIN_ROLE = 'admin'


def scan_all(table, **kwargs):
    """Scan paginado de una tabla DynamoDB (sigue LastEvaluatedKey)."""
    items = []
    while True:
        resp = table.scan(**kwargs)
        items.extend(resp.get('Items', []))
        last_key = resp.get('LastEvaluatedKey')
        if not last_key:
            return items
        kwargs['ExclusiveStartKey'] = last_key


def clean_emails(emails):
    """Quita vacíos y duplicados (sin distinguir mayúsculas), conservando el orden."""
    seen = set()
    result = []
    for email in emails:
        if not isinstance(email, str):
            continue
        email = email.strip()
        if not email or email.lower() in seen:
            continue
        seen.add(email.lower())
        result.append(email)
    return result


class AdminDirectory:
    """Cuentas con Role = admin en la tabla de cuentas."""

    def __init__(self, table):
        self.table = table

    def list_admin_emails(self):
        try:
            items = scan_all(
                self.table,
                FilterExpression=Attr('Role').eq(ADMIN_ROLE),
                ProjectionExpression='Email',
            )
        except (ClientError, BotoCoreError) as e:
            raise DirectoryError(f'Error consultando {self.table.name}: {e}') from e
        emails = clean_emails(item.get('Email') for item in items)
        logger.info('Directorio: %d administradores encontrados', len(emails))
        return emails
