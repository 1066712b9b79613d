import os
from dataclasses import dataclass
from typing import Mapping, Optional, Tuple

from stock_alerts.errors import InvalidInput

DEFAULT_THRESHOLD = 5
DEFAULT_SENDER = 'UniAsia <no-reply@uniasia.shop>'
DEFAULT_EXPIRY_DAYS = 30


def _int_env(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(name)
    if raw is None or raw.strip() == '':
        return default
    try:
        value = int(raw)
    except ValueError:
        raise InvalidInput(f'{name} debe ser un entero, recibido {raw!r}')
    if value < 0:
        raise InvalidInput(f'{name} no puede ser negativo, recibido {value}')
    return value


def parse_email_list(raw: Optional[str]) -> Tuple[str, ...]:
    """Convierte 'a@x.com, b@x.com' en una tupla sin entradas vacías."""
    if not raw:
        return ()
    return tuple(part.strip() for part in raw.split(',') if part.strip())


@dataclass(frozen=True)
class Settings:
    threshold: int = DEFAULT_THRESHOLD
    fallback_recipients: Tuple[str, ...] = ()
    webhook_secret: str = ''
    accounts_table: str = 'Accounts'
    inventory_table: str = 'Inventory'
    activity_log_table: str = ''
    sender: str = DEFAULT_SENDER
    expiry_days: int = DEFAULT_EXPIRY_DAYS
    region: Optional[str] = None


def load_settings(env: Optional[Mapping[str, str]] = None) -> Settings:
    """Lee la configuración del entorno del proceso (o de ``env`` en tests)."""
    env = os.environ if env is None else env
    return Settings(
        threshold=_int_env(env, 'LOW_STOCK_THRESHOLD', DEFAULT_THRESHOLD),
        fallback_recipients=parse_email_list(env.get('ADMIN_FALLBACK_EMAILS')),
        webhook_secret=env.get('LOW_STOCK_WEBHOOK_SECRET', ''),
        accounts_table=env.get('ACCOUNTS_TABLE', 'Accounts'),
        inventory_table=env.get('DDB_TABLE', 'Inventory'),
        activity_log_table=env.get('ACTIVITY_LOG_TABLE', ''),
        sender=env.get('MAIL_FROM') or DEFAULT_SENDER,
        expiry_days=_int_env(env, 'EXPIRY_LOOKAHEAD_DAYS', DEFAULT_EXPIRY_DAYS),
        region=env.get('AWS_REGION') or env.get('REGION') or None,
    )
