"""
Configuración centralizada del agregador de ingresos.
Carga variables de entorno (.env local) con valores por defecto.
"""

import logging
import os
from pathlib import Path

from dotenv import load_dotenv

# Carga .env desde la raíz del proyecto (solo local)
PROJECT_ROOT = Path(__file__).resolve().parent.parent
load_dotenv(PROJECT_ROOT / ".env")


def _get_setting(key: str, default: str = None) -> str | None:
    """Busca config en os.environ (.env local)."""
    return os.getenv(key, default)


def _get_bool(key: str, default: bool = False) -> bool:
    value = _get_setting(key)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "si", "sí")


def _get_int(key: str, default: int) -> int:
    try:
        return int(_get_setting(key, str(default)))
    except (TypeError, ValueError):
        return default


# ─── Cache ───

CACHE_TTL = _get_int("CONDO_FINANCE_CACHE_TTL", 300)  # 5 minutos

# ─── Normalización ───

AMOUNTS_IN_CENTS = _get_bool("CONDO_FINANCE_AMOUNTS_IN_CENTS", False)
UNKNOWN_LABEL = "Desconocido"
UNIDENTIFIED_CONCEPT = "Pago no identificado"
NO_ACCOUNT = "N/A"
DEFAULT_ACCOUNT_NAME = "Sin nombre"

# ─── Reportes ───

TOP_DEBTORS = _get_int("CONDO_FINANCE_TOP_DEBTORS", 10)
CURRENCY_SYMBOL = _get_setting("CONDO_FINANCE_CURRENCY_SYMBOL", "$")

MONTH_KEYS = [f"{i:02d}" for i in range(1, 13)]

MONTH_NAMES_ES = {
    "01": "Enero", "02": "Febrero", "03": "Marzo", "04": "Abril",
    "05": "Mayo", "06": "Junio", "07": "Julio", "08": "Agosto",
    "09": "Septiembre", "10": "Octubre", "11": "Noviembre", "12": "Diciembre",
}

# ─── Logging ───

LOG_LEVEL = _get_setting("CONDO_FINANCE_LOG_LEVEL", "INFO")


def configure_logging(level: str = None) -> None:
    """Configura logging raíz para scripts; la librería nunca lo llama."""
    logging.basicConfig(
        level=(level or LOG_LEVEL).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
