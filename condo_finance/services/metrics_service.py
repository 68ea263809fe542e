"""
Servicio de Métricas de ingresos.

Responsabilidades:
- Resumen anual (tarjetas, PDF y Excel)
- Crecimiento contra el mes anterior
- Morosidad por condómino
- Resumen por cuenta financiera
- Datos del reporte individual de una unidad
"""

import logging
from datetime import date
from typing import Iterable, Optional

from condo_finance.config import TOP_DEBTORS, UNKNOWN_LABEL
from condo_finance.models.financial_models import (
    AccountSummary,
    DebtorSummary,
    FinancialAccountInfo,
    GrowthMetric,
    IncomeSummary,
    MonthlyStat,
    MorositySummary,
    PaymentRecord,
    ReportContext,
    UnitReport,
)
from condo_finance.services.aggregation_service import (
    aggregate_by_concept,
    aggregate_by_month,
    compliance_rates,
    elapsed_months,
)
from condo_finance.services.reconciliation_service import (
    check_ledger,
    reconcile_totals,
)

LOGGER = logging.getLogger(__name__)


def _best_and_worst(totals: Iterable[tuple[str, float]]) -> tuple[tuple[str, float], tuple[str, float]]:
    """Mayor total y menor total positivo; ("N/A", 0) si no hay ingresos."""
    positive = [(k, v) for k, v in totals if v > 0]
    if not positive:
        return ("N/A", 0.0), ("N/A", 0.0)
    ordered = sorted(positive, key=lambda kv: kv[1], reverse=True)
    return ordered[0], ordered[-1]


# ─── Resumen anual ───

def summarize_income(
    records: Iterable[PaymentRecord],
    context: ReportContext,
    accounts: Optional[dict[str, FinancialAccountInfo]] = None,
    today: Optional[date] = None,
) -> IncomeSummary:
    """
    Calcula los totales del año.

    total_income = abonado conciliado + saldos iniciales de las cuentas
    outstanding_balance = cargos - abonado conciliado
    """
    records = list(records)
    canonical = [r for r in records if not r.unidentified]
    monthly = aggregate_by_month(records, year=context.year, accounts=accounts)
    totals = reconcile_totals(canonical)
    check_ledger(canonical)

    initial_balance = sum(a.initial_balance for a in (accounts or {}).values())
    total_charges = sum(r.reference_amount for r in canonical)
    total_pending = sum(r.amount_pending for r in canonical if not r.paid)
    total_credit = sum(r.credit_balance for r in canonical)
    paid_count = sum(1 for r in canonical if r.paid)
    compliance, delinquency = compliance_rates(paid_count, len(canonical))

    best_month, worst_month = _best_and_worst(
        (s.month, s.reconciled_paid) for s in elapsed_months(monthly, context.year, today)
    )
    best_concept, worst_concept = _best_and_worst(
        (k, s.reconciled_paid) for k, s in aggregate_by_concept(canonical).items()
    )

    LOGGER.debug(
        "Income summary for %s/%s: %d records",
        context.condominium_id, context.year, len(records),
    )

    return IncomeSummary(
        context=context,
        total_income=round(totals.reconciled_paid + initial_balance, 2),
        total_pending=round(total_pending, 2),
        total_credit=round(total_credit, 2),
        total_charges=round(total_charges, 2),
        reconciled_paid=round(totals.reconciled_paid, 2),
        outstanding_balance=round(totals.outstanding_balance, 2),
        initial_balance=round(initial_balance, 2),
        compliance_rate=round(compliance, 2),
        delinquency_rate=round(delinquency, 2),
        monthly_average=round(totals.reconciled_paid / 12, 2),
        best_month=best_month,
        worst_month=worst_month,
        best_concept=best_concept,
        worst_concept=worst_concept,
        monthly=monthly,
    )


# ─── Crecimiento ───

def compute_growth(
    stats: list[MonthlyStat],
    year: Optional[str],
    today: Optional[date] = None,
) -> list[GrowthMetric]:
    """
    Compara el último mes contra el anterior.

    Usa los dos últimos meses transcurridos con actividad; si no hay dos,
    los dos últimos meses transcurridos.
    """
    months = elapsed_months(sorted(stats, key=lambda s: int(s.month)), year, today)
    if len(months) < 2:
        return []

    active = [s for s in months if s.has_activity]
    source = active if len(active) >= 2 else months
    previous, current = source[-2], source[-1]

    return [
        GrowthMetric("Monto Abonado", current.reconciled_paid, previous.reconciled_paid),
        GrowthMetric("Cargos", current.charges, previous.charges),
        GrowthMetric(
            "Saldo",
            current.charges - current.reconciled_paid,
            previous.charges - previous.reconciled_paid,
        ),
    ]


# ─── Morosidad ───

def calculate_morosity(
    records: Iterable[PaymentRecord],
    top_n: int = TOP_DEBTORS,
) -> MorositySummary:
    """Suma el adeudo pendiente por unidad y ordena a los mayores deudores."""
    pending_by_unit: dict[str, float] = {}
    for record in records:
        if record.unidentified:
            continue
        key = record.number_condominium or UNKNOWN_LABEL
        pending = 0.0 if record.paid else record.amount_pending
        pending_by_unit[key] = pending_by_unit.get(key, 0.0) + pending

    ranking = sorted(
        (DebtorSummary(unit, round(amount, 2)) for unit, amount in pending_by_unit.items()),
        key=lambda d: d.amount,
        reverse=True,
    )
    debtors = [d for d in ranking if d.amount > 0]
    total_pending = sum(d.amount for d in debtors)

    return MorositySummary(
        top_debtors=debtors[:top_n],
        total_pending=round(total_pending, 2),
        debtors_count=len(debtors),
        max_debtor=debtors[0] if debtors else DebtorSummary("N/A"),
        average_debt=round(total_pending / len(debtors), 2) if debtors else 0.0,
    )


# ─── Cuenta financiera ───

def summarize_account(
    records: Iterable[PaymentRecord],
    account: FinancialAccountInfo,
) -> AccountSummary:
    """Tarjetas de una cuenta; mismo abonado conciliado que aggregate_by_account."""
    own = [r for r in records if r.financial_account_id == account.id and not r.unidentified]
    total_payments = sum(r.amount_paid for r in own)
    total_credit_used = sum(r.credit_used for r in own)
    total_credit_balance = sum(r.credit_balance for r in own)
    net_income = reconcile_totals(own).reconciled_paid

    return AccountSummary(
        account=account,
        total_payments=round(total_payments, 2),
        total_credit_used=round(total_credit_used, 2),
        total_credit_balance=round(total_credit_balance, 2),
        period_net_income=round(net_income, 2),
        total_income=round(net_income + account.initial_balance, 2),
    )


# ─── Reporte individual ───

def prepare_unit_report(
    records: Iterable[PaymentRecord],
    number_condominium: str,
    year: str,
) -> UnitReport:
    """Registros de una unidad por "YYYY-MM" y por concepto, sin duplicados."""
    report = UnitReport(number_condominium=number_condominium)
    seen_by_month: dict[str, set] = {}
    seen_by_concept: dict[tuple[str, str], set] = {}

    for record in records:
        if record.number_condominium != number_condominium or not record.month:
            continue
        key = f"{year}-{record.month}"

        seen = seen_by_month.setdefault(key, set())
        if record.id not in seen:
            seen.add(record.id)
            report.detailed.setdefault(key, []).append(record)

        if not record.concept:
            continue
        seen = seen_by_concept.setdefault((record.concept, key), set())
        if record.id not in seen:
            seen.add(record.id)
            report.detailed_by_concept.setdefault(record.concept, {}).setdefault(key, []).append(record)

    return report
