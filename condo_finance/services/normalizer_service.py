"""
Servicio de Normalización de registros.

Responsabilidades:
- Convertir cargos crudos (con sus pagos) en PaymentRecord
- Normalizar pagos no identificados
- Normalizar metadatos de cuentas financieras

Ninguna función lanza excepciones por filas malformadas: los valores no
numéricos valen 0 y las filas sin mes resoluble se excluyen.
"""

import logging
import math
from datetime import date, datetime
from typing import Iterable, Optional

from condo_finance.config import (
    AMOUNTS_IN_CENTS,
    DEFAULT_ACCOUNT_NAME,
    MONTH_KEYS,
    NO_ACCOUNT,
    UNIDENTIFIED_CONCEPT,
    UNKNOWN_LABEL,
)
from condo_finance.models.financial_models import FinancialAccountInfo, PaymentRecord

LOGGER = logging.getLogger(__name__)

AMOUNT_FIELDS = ("amountPaid", "amountPending", "creditBalance", "creditUsed")


# ─── Coerción ───

def _to_amount(value: object, in_cents: bool = False) -> float:
    """Convierte a float; ausente o no numérico vale 0."""
    if value is None or isinstance(value, bool):
        return 0.0
    try:
        amount = float(value)
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(amount):
        return 0.0
    return amount / 100 if in_cents else amount


def _month_from_date(value: object) -> Optional[str]:
    """Extrae "MM" de una fecha tipo "YYYY-MM-DD..."."""
    if isinstance(value, date):
        return f"{value.month:02d}"
    if not isinstance(value, str) or len(value) < 7:
        return None
    month = value[5:7]
    return month if month in MONTH_KEYS else None


def _year_from_date(value: object) -> Optional[str]:
    if isinstance(value, date):
        return str(value.year)
    if isinstance(value, str) and len(value) >= 4:
        return value[:4]
    return None


def _coerce_date(value: object) -> Optional[date]:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return datetime.fromisoformat(value.replace("Z", "+00:00")).date()
        except ValueError:
            return None
    return None


def format_payment_date(value: object) -> str:
    """Formatea una fecha de pago como "dd/mm/aaaa"; texto no parseable se devuelve tal cual."""
    if value is None or value == "":
        return ""
    parsed = _coerce_date(value)
    if parsed is None:
        return str(value)
    return parsed.strftime("%d/%m/%Y")


def _concept_label(value: object) -> str:
    if isinstance(value, (list, tuple)):
        value = ", ".join(str(v) for v in value if v)
    return str(value) if value else UNKNOWN_LABEL


# ─── Cargos ───

def _sum_payments(raw: dict, in_cents: bool) -> dict:
    """Acumula los sub-registros de pago de un cargo."""
    payments = raw.get("payments")
    if not isinstance(payments, list):
        totals = {f: _to_amount(raw.get(f), in_cents) for f in AMOUNT_FIELDS}
        totals["financialAccountId"] = raw.get("financialAccountId") or ""
        totals["paymentDate"] = raw.get("paymentDate")
        return totals

    totals = {f: 0.0 for f in AMOUNT_FIELDS}
    totals["financialAccountId"] = ""
    totals["paymentDate"] = None
    for payment in payments:
        if not isinstance(payment, dict):
            continue
        for f in AMOUNT_FIELDS:
            totals[f] += _to_amount(payment.get(f), in_cents)
        if not totals["financialAccountId"] and payment.get("financialAccountId"):
            totals["financialAccountId"] = payment["financialAccountId"]
        if payment.get("paymentDate"):
            totals["paymentDate"] = payment["paymentDate"]
    return totals


def _month_key(value: object) -> Optional[str]:
    """Mes explícito ("03" o 3) como llave "MM"."""
    if isinstance(value, int) and not isinstance(value, bool):
        value = f"{value:02d}"
    return value if value in MONTH_KEYS else None


def _resolve_month(raw: dict, year: Optional[str]) -> Optional[str]:
    start_at = raw.get("startAt")
    if start_at:
        if year and _year_from_date(start_at) != str(year):
            return None
        return _month_from_date(start_at)
    # Sin fecha no hay forma de filtrar por año
    if year:
        return None
    return _month_key(raw.get("month"))


def _pending_amount(raw: dict, paid: bool, amount_paid: float,
                    pending_from_payments: float, reference: float,
                    in_cents: bool) -> float:
    if paid:
        if pending_from_payments > 0:
            LOGGER.debug(
                "Charge %s is paid; discarding stale pending %.2f",
                raw.get("id"), pending_from_payments,
            )
        return 0.0
    if raw.get("payments") is None and "amountPending" in raw:
        pending = pending_from_payments
    elif "amount" in raw:
        pending = _to_amount(raw.get("amount"), in_cents)
    else:
        pending = reference - amount_paid
    return max(pending, 0.0)


def normalize_record(
    raw: dict,
    year: Optional[str] = None,
    amounts_in_cents: bool = AMOUNTS_IN_CENTS,
) -> Optional[PaymentRecord]:
    """Normaliza un cargo crudo; devuelve None si no tiene mes resoluble."""
    if not isinstance(raw, dict):
        LOGGER.debug("Skipping non-mapping record %r", raw)
        return None

    month = _resolve_month(raw, year)
    if month is None:
        LOGGER.debug("Skipping record %s without month for year %s", raw.get("id"), year)
        return None

    totals = _sum_payments(raw, amounts_in_cents)
    paid = raw.get("paid") is True
    amount_paid = totals["amountPaid"]
    reference = _to_amount(raw.get("referenceAmount"), amounts_in_cents)
    pending = _pending_amount(
        raw, paid, amount_paid, totals["amountPending"], reference, amounts_in_cents,
    )

    return PaymentRecord(
        id=str(raw.get("id", "")),
        number_condominium=str(raw.get("numberCondominium") or UNKNOWN_LABEL),
        month=month,
        concept=_concept_label(raw.get("concept")),
        reference_amount=round(reference, 2),
        amount_paid=round(amount_paid, 2),
        amount_pending=round(pending, 2),
        credit_balance=round(totals["creditBalance"], 2),
        credit_used=round(totals["creditUsed"], 2),
        paid=paid,
        financial_account_id=totals["financialAccountId"] or NO_ACCOUNT,
        payment_date=format_payment_date(totals["paymentDate"]),
        payment_type=raw.get("paymentType"),
        user_id=raw.get("userId"),
    )


def normalize(
    raw_records: Iterable[dict],
    year: Optional[str] = None,
    amounts_in_cents: bool = AMOUNTS_IN_CENTS,
) -> list[PaymentRecord]:
    """
    Convierte documentos crudos de cargos en PaymentRecord.

    Args:
        raw_records: Cargos tal como llegan de la base de datos
        year: Año "YYYY"; se descartan los cargos sin startAt o de otro año
        amounts_in_cents: Si los montos vienen en centavos

    Returns:
        Registros canónicos, en el mismo orden de entrada
    """
    records = []
    skipped = 0
    for raw in raw_records or []:
        record = normalize_record(raw, year=year, amounts_in_cents=amounts_in_cents)
        if record is None:
            skipped += 1
            continue
        records.append(record)
    if skipped:
        LOGGER.debug("Normalized %d records, excluded %d", len(records), skipped)
    return records


# ─── Pagos no identificados ───

def normalize_unidentified(
    raw_payments: Iterable[dict],
    year: Optional[str] = None,
    amounts_in_cents: bool = AMOUNTS_IN_CENTS,
) -> list[PaymentRecord]:
    """Normaliza pagos recibidos sin cargo ni unidad asociada."""
    records = []
    for raw in raw_payments or []:
        if not isinstance(raw, dict):
            continue
        payment_date = _coerce_date(raw.get("paymentDate"))
        if payment_date is None:
            continue
        if year and str(payment_date.year) != str(year):
            continue

        explicit = raw.get("month")
        if explicit in (None, ""):
            month = f"{payment_date.month:02d}"
        else:
            month = _month_key(explicit)
        if month is None:
            continue

        records.append(PaymentRecord(
            id=str(raw.get("id", "")),
            number_condominium=str(raw.get("numberCondominium") or NO_ACCOUNT),
            month=month,
            concept=UNIDENTIFIED_CONCEPT,
            reference_amount=round(_to_amount(raw.get("referenceAmount"), amounts_in_cents), 2),
            amount_paid=round(_to_amount(raw.get("amountPaid"), amounts_in_cents), 2),
            amount_pending=round(max(_to_amount(raw.get("amountPending"), amounts_in_cents), 0.0), 2),
            credit_balance=round(_to_amount(raw.get("creditBalance"), amounts_in_cents), 2),
            credit_used=round(_to_amount(raw.get("creditUsed"), amounts_in_cents), 2),
            paid=False,
            financial_account_id=raw.get("financialAccountId") or NO_ACCOUNT,
            payment_date=payment_date.strftime("%d/%m/%Y"),
            payment_type=raw.get("paymentType"),
            unidentified=True,
        ))
    return records


# ─── Cuentas financieras ───

def normalize_accounts(
    raw_accounts: Iterable[dict],
    amounts_in_cents: bool = AMOUNTS_IN_CENTS,
) -> dict[str, FinancialAccountInfo]:
    """Indexa cuentas financieras por id con saldo inicial y mes de creación."""
    accounts = {}
    for raw in raw_accounts or []:
        if not isinstance(raw, dict) or not raw.get("id"):
            continue
        created = _coerce_date(raw.get("createdAt"))
        accounts[raw["id"]] = FinancialAccountInfo(
            id=raw["id"],
            name=raw.get("name") or DEFAULT_ACCOUNT_NAME,
            initial_balance=_to_amount(raw.get("initialBalance"), amounts_in_cents),
            creation_month=f"{created.month:02d}" if created else "01",
        )
    return accounts
