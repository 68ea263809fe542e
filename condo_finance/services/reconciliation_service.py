"""
Servicio de Conciliación de crédito.

Calcula el monto abonado considerando saldo a favor generado y crédito
utilizado. Todos los agregadores y reportes usan estas funciones.

Fórmula:
- abonado = pagado + max(saldo_a_favor, 0) - crédito_usado
- saldo pendiente = cargo de referencia - abonado
"""

import logging
from typing import Iterable

from condo_finance.models.financial_models import PaymentRecord, Reconciliation

LOGGER = logging.getLogger(__name__)


def reconciled_paid(amount_paid: float, credit_balance: float, credit_used: float) -> float:
    """Monto abonado con crédito; un saldo a favor negativo nunca resta."""
    return amount_paid + max(credit_balance, 0.0) - credit_used


def reconcile(record: PaymentRecord) -> Reconciliation:
    """Concilia un registro individual."""
    paid = reconciled_paid(record.amount_paid, record.credit_balance, record.credit_used)
    return Reconciliation(
        reconciled_paid=paid,
        outstanding_balance=record.reference_amount - paid,
    )


def reconcile_totals(records: Iterable[PaymentRecord]) -> Reconciliation:
    """
    Concilia un conjunto de registros.

    El abonado total es la suma de los abonados por registro, de modo que
    cualquier agrupación de los mismos registros suma lo mismo.
    """
    total_paid = 0.0
    total_charges = 0.0
    for record in records:
        total_paid += reconcile(record).reconciled_paid
        total_charges += record.reference_amount
    return Reconciliation(
        reconciled_paid=total_paid,
        outstanding_balance=total_charges - total_paid,
    )


def check_ledger(records: Iterable[PaymentRecord]) -> bool:
    """Reporta (sin corregir) un libro cuyo abonado agregado es negativo."""
    totals = reconcile_totals(records)
    if totals.reconciled_paid < 0:
        LOGGER.warning(
            "Negative reconciled income %.2f: credit used exceeds recorded surplus",
            totals.reconciled_paid,
        )
        return False
    return True
