"""
Modelos de datos financieros.
Dataclasses tipadas para registros normalizados y resultados de agregación.
"""

from dataclasses import dataclass, field
from typing import Optional


# ─── Registro canónico ───

@dataclass(frozen=True)
class PaymentRecord:
    """Cargo de una unidad con sus pagos acumulados (en pesos)."""
    id: str
    number_condominium: str
    month: str  # "01".."12"
    concept: str
    reference_amount: float = 0.0
    amount_paid: float = 0.0
    amount_pending: float = 0.0
    credit_balance: float = 0.0
    credit_used: float = 0.0
    paid: bool = False
    financial_account_id: str = "N/A"
    payment_date: str = ""
    payment_type: Optional[str] = None
    user_id: Optional[str] = None
    unidentified: bool = False


# ─── Conciliación ───

@dataclass(frozen=True)
class Reconciliation:
    """Monto abonado con crédito y saldo pendiente resultante."""
    reconciled_paid: float = 0.0
    outstanding_balance: float = 0.0


# ─── Cuentas financieras ───

@dataclass(frozen=True)
class FinancialAccountInfo:
    """Metadatos de una cuenta receptora."""
    id: str
    name: str = "Sin nombre"
    initial_balance: float = 0.0
    creation_month: str = "01"


# ─── Contexto ───

@dataclass(frozen=True)
class ReportContext:
    """Cliente, condominio y año sobre los que se calcula un reporte."""
    client_id: str
    condominium_id: str
    year: str


# ─── Estadística mensual ───

@dataclass
class MonthlyStat:
    """Línea mensual de ingresos (siempre hay 12, de enero a diciembre)."""
    month: str
    paid: float = 0.0
    pending: float = 0.0
    saldo: float = 0.0
    compliance_rate: float = 0.0
    delinquency_rate: float = 0.0
    credit_used: float = 0.0
    charges: float = 0.0
    unidentified_payments: float = 0.0
    initial_balance: float = 0.0
    reconciled_paid: float = 0.0
    charge_count: int = 0
    paid_count: int = 0

    @property
    def has_activity(self) -> bool:
        return any((
            self.paid, self.charges, self.pending, self.saldo,
            self.unidentified_payments, self.credit_used,
        ))


# ─── Estadística por dimensión ───

@dataclass
class DimensionStat:
    """Misma familia de sumas que MonthlyStat, agrupada por otra llave."""
    key: str
    paid: float = 0.0
    pending: float = 0.0
    saldo: float = 0.0
    compliance_rate: float = 0.0
    delinquency_rate: float = 0.0
    credit_used: float = 0.0
    charges: float = 0.0
    reconciled_paid: float = 0.0
    outstanding_balance: float = 0.0
    unidentified_payments: float = 0.0
    charge_count: int = 0
    paid_count: int = 0


# ─── Crecimiento ───

@dataclass
class GrowthMetric:
    """Comparación de un indicador contra el mes anterior."""
    title: str
    current: float = 0.0
    previous: float = 0.0

    @property
    def change_percent(self) -> float:
        if self.previous == 0:
            return 0.0
        return (self.current - self.previous) / abs(self.previous) * 100


# ─── Resumen anual ───

@dataclass
class IncomeSummary:
    """Totales del año usados por tarjetas, PDF y Excel."""
    context: ReportContext
    total_income: float = 0.0
    total_pending: float = 0.0
    total_credit: float = 0.0
    total_charges: float = 0.0
    reconciled_paid: float = 0.0
    outstanding_balance: float = 0.0
    initial_balance: float = 0.0
    compliance_rate: float = 0.0
    delinquency_rate: float = 0.0
    monthly_average: float = 0.0
    best_month: tuple[str, float] = ("N/A", 0.0)
    worst_month: tuple[str, float] = ("N/A", 0.0)
    best_concept: tuple[str, float] = ("N/A", 0.0)
    worst_concept: tuple[str, float] = ("N/A", 0.0)
    monthly: list[MonthlyStat] = field(default_factory=list)


# ─── Morosidad ───

@dataclass
class DebtorSummary:
    """Adeudo acumulado de una unidad."""
    number_condominium: str
    amount: float = 0.0


@dataclass
class MorositySummary:
    """Indicadores de morosidad por condómino."""
    top_debtors: list[DebtorSummary] = field(default_factory=list)
    total_pending: float = 0.0
    debtors_count: int = 0
    max_debtor: DebtorSummary = field(default_factory=lambda: DebtorSummary("N/A"))
    average_debt: float = 0.0


# ─── Cuenta financiera ───

@dataclass
class AccountSummary:
    """Tarjetas de resumen de una cuenta financiera."""
    account: FinancialAccountInfo
    total_payments: float = 0.0
    total_credit_used: float = 0.0
    total_credit_balance: float = 0.0
    period_net_income: float = 0.0
    total_income: float = 0.0


# ─── Reporte individual ───

@dataclass
class UnitReport:
    """Registros de una unidad por "YYYY-MM" y por concepto."""
    number_condominium: str
    detailed: dict[str, list[PaymentRecord]] = field(default_factory=dict)
    detailed_by_concept: dict[str, dict[str, list[PaymentRecord]]] = field(default_factory=dict)
