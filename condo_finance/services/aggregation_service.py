"""
Servicio de Agregación de ingresos.

Responsabilidades:
- Estadística mensual (12 meses, siempre completos)
- Agregación por concepto, cuenta financiera y unidad
- Agrupación de registros para reportes detallados

Todas las sumas de abonado pasan por reconciliation_service.reconciled_paid,
así el total de cualquier dimensión coincide con el total mensual.
"""

import logging
import re
from datetime import date
from typing import Callable, Iterable, Optional

from condo_finance.config import MONTH_KEYS, NO_ACCOUNT, UNKNOWN_LABEL
from condo_finance.models.financial_models import (
    DimensionStat,
    FinancialAccountInfo,
    MonthlyStat,
    PaymentRecord,
)
from condo_finance.services.reconciliation_service import reconcile

LOGGER = logging.getLogger(__name__)

KeyFn = Callable[[PaymentRecord], Optional[str]]


def _validate_year(year: Optional[str]) -> Optional[str]:
    if year is None:
        return None
    year = str(year)
    if not re.fullmatch(r"\d{4}", year):
        raise ValueError(f"year must be a 4-digit string, got {year!r}")
    return year


def compliance_rates(paid_count: int, charge_count: int) -> tuple[float, float]:
    """(cumplimiento, morosidad) en %; sin cargos el cumplimiento es 0."""
    compliance = (paid_count / charge_count * 100) if charge_count > 0 else 0.0
    return compliance, 100.0 - compliance


# ─── Acumulador ───

class _Totals:
    """Sumas monetarias y conteo de cargos de un grupo de registros."""

    def __init__(self):
        self.paid = 0.0
        self.pending = 0.0
        self.saldo = 0.0
        self.credit_used = 0.0
        self.charges = 0.0
        self.reconciled_paid = 0.0
        self.unidentified_payments = 0.0
        self.charge_count = 0
        self.paid_count = 0

    def add(self, record: PaymentRecord) -> None:
        if record.unidentified:
            # Fuera de la agregación canónica hasta que se aplique a un cargo
            self.unidentified_payments += record.amount_paid
            return
        self.paid += record.amount_paid
        if not record.paid:
            self.pending += record.amount_pending
        self.saldo += record.credit_balance
        self.credit_used += record.credit_used
        self.charges += record.reference_amount
        self.reconciled_paid += reconcile(record).reconciled_paid
        self.charge_count += 1
        if record.paid:
            self.paid_count += 1

    @property
    def rates(self) -> tuple[float, float]:
        return compliance_rates(self.paid_count, self.charge_count)


# ─── Mensual ───

def aggregate_by_month(
    records: Iterable[PaymentRecord],
    year: Optional[str] = None,
    accounts: Optional[dict[str, FinancialAccountInfo]] = None,
) -> list[MonthlyStat]:
    """
    Agrega registros por mes calendario.

    Args:
        records: Registros normalizados
        year: Año del reporte (solo se valida; ver elapsed_months)
        accounts: Cuentas financieras; su saldo inicial va al mes de creación

    Returns:
        Exactamente 12 MonthlyStat, de "01" a "12", con ceros donde no hay datos
    """
    _validate_year(year)
    buckets = {m: _Totals() for m in MONTH_KEYS}

    for record in records:
        bucket = buckets.get(record.month)
        if bucket is None:
            LOGGER.debug("Record %s has invalid month %r", record.id, record.month)
            continue
        bucket.add(record)

    initial_balances = {m: 0.0 for m in MONTH_KEYS}
    for account in (accounts or {}).values():
        month = account.creation_month if account.creation_month in MONTH_KEYS else "01"
        initial_balances[month] += account.initial_balance

    stats = []
    for m in MONTH_KEYS:
        b = buckets[m]
        compliance, delinquency = b.rates
        stats.append(MonthlyStat(
            month=m,
            paid=round(b.paid, 2),
            pending=round(b.pending, 2),
            saldo=round(b.saldo, 2),
            compliance_rate=round(compliance, 2),
            delinquency_rate=round(delinquency, 2),
            credit_used=round(b.credit_used, 2),
            charges=round(b.charges, 2),
            unidentified_payments=round(b.unidentified_payments, 2),
            initial_balance=round(initial_balances[m], 2),
            reconciled_paid=round(b.reconciled_paid, 2),
            charge_count=b.charge_count,
            paid_count=b.paid_count,
        ))
    return stats


def elapsed_months(
    stats: list[MonthlyStat],
    year: Optional[str],
    today: Optional[date] = None,
) -> list[MonthlyStat]:
    """
    Meses ya transcurridos del año.

    Para el año en curso excluye los meses posteriores al actual, para no
    comparar contra periodos que aún no ocurren.
    """
    year = _validate_year(year)
    today = today or date.today()
    if year != str(today.year):
        return list(stats)
    return [s for s in stats if int(s.month) <= today.month]


# ─── Dimensiones ───

def group_records(
    records: Iterable[PaymentRecord],
    key_fn: KeyFn,
) -> dict[str, list[PaymentRecord]]:
    """Agrupa registros por llave preservando el orden de aparición."""
    if not callable(key_fn):
        raise TypeError("key_fn must be callable")
    groups: dict[str, list[PaymentRecord]] = {}
    for record in records:
        key = key_fn(record) or UNKNOWN_LABEL
        groups.setdefault(str(key), []).append(record)
    return groups


def aggregate_by_dimension(
    records: Iterable[PaymentRecord],
    key_fn: KeyFn,
) -> dict[str, DimensionStat]:
    """Agrega registros por una llave arbitraria (concepto, cuenta, unidad...)."""
    results = {}
    for key, group in group_records(records, key_fn).items():
        totals = _Totals()
        for record in group:
            totals.add(record)
        compliance, delinquency = totals.rates
        results[key] = DimensionStat(
            key=key,
            paid=round(totals.paid, 2),
            pending=round(totals.pending, 2),
            saldo=round(totals.saldo, 2),
            compliance_rate=round(compliance, 2),
            delinquency_rate=round(delinquency, 2),
            credit_used=round(totals.credit_used, 2),
            charges=round(totals.charges, 2),
            reconciled_paid=round(totals.reconciled_paid, 2),
            outstanding_balance=round(totals.charges - totals.reconciled_paid, 2),
            unidentified_payments=round(totals.unidentified_payments, 2),
            charge_count=totals.charge_count,
            paid_count=totals.paid_count,
        )
    return results


def aggregate_by_concept(records: Iterable[PaymentRecord]) -> dict[str, DimensionStat]:
    return aggregate_by_dimension(records, lambda r: r.concept)


def aggregate_by_account(records: Iterable[PaymentRecord]) -> dict[str, DimensionStat]:
    """Por cuenta financiera; los registros sin cuenta ("N/A") se omiten."""
    return aggregate_by_dimension(
        (r for r in records if r.financial_account_id != NO_ACCOUNT),
        lambda r: r.financial_account_id,
    )


def aggregate_by_unit(records: Iterable[PaymentRecord]) -> dict[str, DimensionStat]:
    return aggregate_by_dimension(records, lambda r: r.number_condominium)


# ─── Detalle concepto x mes ───

def concept_monthly_breakdown(
    records: Iterable[PaymentRecord],
) -> dict[str, list[MonthlyStat]]:
    """12 MonthlyStat por cada concepto (tabla "Ingresos por concepto")."""
    return {
        concept: aggregate_by_month(group)
        for concept, group in group_records(records, lambda r: r.concept).items()
    }
