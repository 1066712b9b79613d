"""Estado por contenedor Lambda: configuración, logging y servicio."""
import logging
import os
from functools import lru_cache

from stock_alerts.config import load_settings
from stock_alerts.service import StockAlertService


def configure_logging():
    # Lambda ya instala un handler en el root logger; solo fijamos el nivel
    level = os.environ.get('LOG_LEVEL', 'INFO').upper()
    root = logging.getLogger()
    root.setLevel(level)
    if not root.handlers:
        logging.basicConfig(level=level)


@lru_cache()
def get_settings():
    return load_settings()


@lru_cache()
def get_service():
    return StockAlertService.from_settings(get_settings())
