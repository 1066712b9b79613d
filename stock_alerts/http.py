"""Utilidades para handlers detrás de API Gateway HTTP API (payload v2)."""
import base64
import hmac
import json
from decimal import Decimal

from stock_alerts.errors import InvalidInput, Unauthorized

SECRET_HEADER = 'x-webhook-secret'


# Helper para convertir Decimal a tipos JSON serializables
class DecimalEncoder(json.JSONEncoder):
    def default(self, obj):
        if isinstance(obj, Decimal):
            return int(obj) if obj % 1 == 0 else float(obj)
        return super(DecimalEncoder, self).default(obj)


def response(status, body):
    return {
        'statusCode': status,
        'headers': {
            'Content-Type': 'application/json',
            'Access-Control-Allow-Origin': '*'
        },
        'body': json.dumps(body, cls=DecimalEncoder)
    }


def get_header(event, name):
    headers = event.get('headers') or {}
    name = name.lower()
    for key, value in headers.items():
        if key.lower() == name:
            return value
    return None


def require_secret(event, expected):
    """Lanza Unauthorized si falta el secreto configurado o no coincide."""
    provided = get_header(event, SECRET_HEADER)
    if not expected or not provided:
        raise Unauthorized('Unauthorized')
    if not hmac.compare_digest(provided.encode('utf-8'), expected.encode('utf-8')):
        raise Unauthorized('Unauthorized')


def parse_json_body(event):
    raw = event.get('body')
    if raw is None or raw == '':
        return {}
    try:
        if event.get('isBase64Encoded'):
            raw = base64.b64decode(raw, validate=True).decode('utf-8')
        return json.loads(raw)
    except (ValueError, UnicodeDecodeError) as e:
        raise InvalidInput(f'JSON inválido: {e}') from e
