"""
Servicio de Reportes.

Convierte agregados en filas de tabla (encabezado + filas + "Total") con
montos y porcentajes formateados, listas para tablas, PDF o Excel.

Las filas "Total" se recalculan desde los registros crudos con una sola
agregación, nunca sumando textos ya redondeados.
"""

from dataclasses import asdict
from typing import Callable, Iterable, Optional

import pandas as pd

from condo_finance.config import MONTH_KEYS
from condo_finance.models.financial_models import (
    DimensionStat,
    FinancialAccountInfo,
    IncomeSummary,
    MonthlyStat,
    MorositySummary,
    PaymentRecord,
)
from condo_finance.services.aggregation_service import (
    aggregate_by_dimension,
    aggregate_by_month,
)
from condo_finance.utils.formatting import format_currency, format_percent, month_name

MONTHLY_HEADERS = [
    "Mes",
    "Monto Abonado",
    "Cargos",
    "Saldo",
    "Pagos no identificados",
    "% Cumplimiento",
    "% Morosidad",
]

CONCEPT_HEADERS = [
    "Mes",
    "Monto Abonado",
    "Monto Pendiente",
    "Saldo a favor",
    "% Cumplimiento",
    "% Morosidad",
]

DIMENSION_HEADERS = [
    "Monto Abonado",
    "Cargos",
    "Saldo",
    "Monto Pendiente",
    "% Cumplimiento",
    "% Morosidad",
]

MOROSITY_HEADERS = ["Condómino", "Monto Pendiente"]

TOTAL_LABEL = "Total"


def _grand_total(records: list[PaymentRecord]) -> DimensionStat:
    """Una sola agregación sobre todos los registros."""
    totals = aggregate_by_dimension(records, lambda _: TOTAL_LABEL)
    return totals.get(TOTAL_LABEL, DimensionStat(key=TOTAL_LABEL))


def _monthly_row(label: str, stat: MonthlyStat | DimensionStat) -> list[str]:
    return [
        label,
        format_currency(stat.reconciled_paid),
        format_currency(stat.charges),
        format_currency(stat.charges - stat.reconciled_paid),
        format_currency(stat.unidentified_payments),
        format_percent(stat.compliance_rate),
        format_percent(stat.delinquency_rate),
    ]


def _concept_row(label: str, stat: MonthlyStat | DimensionStat) -> list[str]:
    return [
        label,
        format_currency(stat.reconciled_paid),
        format_currency(stat.pending),
        format_currency(stat.saldo - stat.credit_used),
        format_percent(stat.compliance_rate),
        format_percent(stat.delinquency_rate),
    ]


# ─── Reporte general ───

def monthly_report_rows(
    records: Iterable[PaymentRecord],
    year: Optional[str] = None,
    accounts: Optional[dict[str, FinancialAccountInfo]] = None,
) -> list[list[str]]:
    """Tabla "Reporte General de Ingresos": 12 meses + Total."""
    records = list(records)
    stats = aggregate_by_month(records, year=year, accounts=accounts)
    rows = [list(MONTHLY_HEADERS)]
    rows.extend(_monthly_row(month_name(s.month), s) for s in stats)
    rows.append(_monthly_row(TOTAL_LABEL, _grand_total(records)))
    return rows


def concept_report_rows(
    records: Iterable[PaymentRecord],
    concept: str,
) -> list[list[str]]:
    """Tabla "Reporte por Concepto" de un concepto: 12 meses + Total."""
    own = [r for r in records if r.concept == concept]
    stats = aggregate_by_month(own)
    rows = [list(CONCEPT_HEADERS)]
    rows.extend(_concept_row(month_name(s.month), s) for s in stats)
    rows.append(_concept_row(TOTAL_LABEL, _grand_total(own)))
    return rows


def dimension_report_rows(
    records: Iterable[PaymentRecord],
    key_fn: Callable[[PaymentRecord], Optional[str]],
    label: str,
) -> list[list[str]]:
    """Una fila por grupo (ordenadas por llave) + Total."""
    records = list(records)
    groups = aggregate_by_dimension(records, key_fn)
    rows = [[label] + DIMENSION_HEADERS]
    for key in sorted(groups):
        rows.append(_dimension_row(key, groups[key]))
    rows.append(_dimension_row(TOTAL_LABEL, _grand_total(records)))
    return rows


def _dimension_row(label: str, stat: DimensionStat) -> list[str]:
    return [
        label,
        format_currency(stat.reconciled_paid),
        format_currency(stat.charges),
        format_currency(stat.outstanding_balance),
        format_currency(stat.pending),
        format_percent(stat.compliance_rate),
        format_percent(stat.delinquency_rate),
    ]


# ─── Morosidad ───

def morosity_report_rows(summary: MorositySummary) -> list[list[str]]:
    """Top de deudores; el Total es el adeudo de todos los deudores, no solo del top."""
    rows = [list(MOROSITY_HEADERS)]
    rows.extend(
        [f"#{d.number_condominium}", format_currency(d.amount)]
        for d in summary.top_debtors
    )
    rows.append([TOTAL_LABEL, format_currency(summary.total_pending)])
    return rows


# ─── Información general ───

def general_info_rows(summary: IncomeSummary) -> list[list[str]]:
    """Bloque "Información General" del reporte anual."""
    best_month, _ = summary.best_month
    worst_month, _ = summary.worst_month
    return [
        ["Información General"],
        ["Año", summary.context.year],
        ["Total Ingresos", format_currency(summary.total_income)],
        ["Saldo", format_currency(summary.outstanding_balance)],
        ["Total pendiente", format_currency(summary.total_pending)],
        ["Total saldo a favor", format_currency(summary.total_credit)],
        ["Mes con mayor ingresos", month_name(best_month)],
        ["Mes con menor ingresos", month_name(worst_month)],
        ["% Cumplimiento", format_percent(summary.compliance_rate)],
        ["% Morosidad", format_percent(summary.delinquency_rate)],
    ]


# ─── DataFrames ───

def to_dataframe(rows: list[list[str]]) -> pd.DataFrame:
    """Convierte filas (la primera es el encabezado) en DataFrame."""
    if not rows:
        return pd.DataFrame()
    return pd.DataFrame(rows[1:], columns=rows[0])


def monthly_stats_frame(stats: list[MonthlyStat]) -> pd.DataFrame:
    """Estadística mensual numérica (sin formato) para gráficas."""
    df = pd.DataFrame([asdict(s) for s in stats])
    if df.empty:
        df = pd.DataFrame({"month": MONTH_KEYS})
    df["month_label"] = df["month"].map(month_name)
    return df
