"""
Utilidades de formato para montos y porcentajes de reportes.
"""

from condo_finance.config import CURRENCY_SYMBOL, MONTH_NAMES_ES


def format_currency(value: float, symbol: str = CURRENCY_SYMBOL) -> str:
    """Formatea un número como moneda ($1,234.50 / -$1,234.50)."""
    if value >= 0:
        return f"{symbol}{value:,.2f}"
    return f"-{symbol}{abs(value):,.2f}"


def format_percent(value: float, decimals: int = 2) -> str:
    """Formatea un número como porcentaje (ej: 23.50%)."""
    return f"{value:.{decimals}f}%"


def month_name(month: str) -> str:
    """Nombre del mes en español ("03" -> "Marzo"); llaves desconocidas se devuelven tal cual."""
    return MONTH_NAMES_ES.get(month, month)


def format_large_value(value: float, symbol: str = CURRENCY_SYMBOL) -> str:
    """Abrevia montos grandes para ejes de gráficas ($1.5k, $2.0M)."""
    if value >= 1_000_000:
        return f"{symbol}{value / 1_000_000:.1f}M"
    if value >= 1_000:
        return f"{symbol}{value / 1_000:.1f}k"
    return f"{symbol}{value:g}"
