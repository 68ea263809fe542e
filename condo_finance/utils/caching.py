"""
Utilidades de caché para el agregador.
Evita recalcular la estadística mensual cuando los insumos no cambian.
"""

from typing import Optional

import streamlit as st

from condo_finance.config import CACHE_TTL
from condo_finance.models.financial_models import (
    FinancialAccountInfo,
    MonthlyStat,
    PaymentRecord,
)
from condo_finance.services.aggregation_service import aggregate_by_month


def cached(ttl: int = CACHE_TTL):
    """Decorador wrapper en torno de st.cache_data para uso fuera de Streamlit."""
    return st.cache_data(ttl=ttl, show_spinner=False)


@cached()
def _monthly_stats(
    records: tuple[PaymentRecord, ...],
    year: Optional[str],
    accounts: tuple[tuple[str, FinancialAccountInfo], ...],
) -> list[MonthlyStat]:
    return aggregate_by_month(records, year=year, accounts=dict(accounts) or None)


def memoized_monthly_stats(
    records: list[PaymentRecord],
    year: Optional[str] = None,
    accounts: Optional[dict[str, FinancialAccountInfo]] = None,
) -> list[MonthlyStat]:
    """
    aggregate_by_month memoizado por contenido (registros, año, cuentas)
    durante CACHE_TTL.
    """
    account_items = tuple(sorted((accounts or {}).items()))
    return _monthly_stats(tuple(records), year, account_items)


def clear_all_caches():
    """Limpia todos los caches de Streamlit."""
    st.cache_data.clear()
