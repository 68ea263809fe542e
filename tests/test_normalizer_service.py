from datetime import datetime

import pytest

from condo_finance.services.normalizer_service import (
    format_payment_date,
    normalize,
    normalize_accounts,
    normalize_unidentified,
)


def _charge(**overrides):
    defaults = {
        "id": "c1",
        "numberCondominium": "101",
        "startAt": "2024-03-01 00:00",
        "concept": "Cuota de mantenimiento",
        "referenceAmount": 1000,
        "amount": 0,
        "paid": True,
        "payments": [
            {"amountPaid": 1000, "financialAccountId": "acc-1", "paymentDate": "2024-03-05"},
        ],
    }
    defaults.update(overrides)
    return defaults


def test_normalize_derives_month_and_sums_payments():
    raw = _charge(
        paid=False,
        amount=300,
        payments=[
            {"amountPaid": 400, "creditBalance": 0, "paymentDate": "2024-03-02"},
            {"amountPaid": "300", "creditUsed": 20, "financialAccountId": "acc-9", "paymentDate": "2024-03-20"},
        ],
    )
    [record] = normalize([raw], year="2024")
    assert record.month == "03"
    assert record.amount_paid == pytest.approx(700)
    assert record.amount_pending == pytest.approx(300)
    assert record.credit_used == pytest.approx(20)
    assert record.financial_account_id == "acc-9"
    assert record.payment_date == "20/03/2024"
    assert record.paid is False


def test_normalize_drops_other_years_and_unresolvable_months():
    rows = [
        _charge(id="ok"),
        _charge(id="other-year", startAt="2023-03-01"),
        _charge(id="bad-date", startAt="2024"),
        _charge(id="bad-month", startAt="2024-13-01"),
        "not-a-dict",
    ]
    records = normalize(rows, year="2024")
    assert [r.id for r in records] == ["ok"]


def test_normalize_coerces_non_numeric_to_zero():
    raw = {
        "id": "x",
        "month": "05",
        "amountPaid": "abc",
        "amountPending": None,
        "creditBalance": float("nan"),
        "referenceAmount": "",
    }
    [record] = normalize([raw])
    assert record.amount_paid == 0
    assert record.amount_pending == 0
    assert record.credit_balance == 0
    assert record.reference_amount == 0


def test_thousands_separator_is_not_numeric():
    [record] = normalize([{"id": "x", "month": "05", "amountPaid": "1,234", "referenceAmount": "250.5"}])
    assert record.amount_paid == 0
    assert record.reference_amount == pytest.approx(250.5)


def test_explicit_month_accepted_only_without_year():
    raw = {"id": "x", "month": 3, "referenceAmount": 100, "paid": False}
    assert normalize([raw], year="2024") == []
    [record] = normalize([raw])
    assert record.month == "03"
    assert record.amount_pending == pytest.approx(100)


def test_normalize_paid_is_strictly_true():
    records = normalize([
        _charge(id="a", paid="true"),
        _charge(id="b", paid=1),
        _charge(id="c"),
    ])
    assert [r.paid for r in records] == [False, False, True]


def test_paid_charge_discards_stale_pending():
    raw = _charge(payments=[{"amountPaid": 900, "amountPending": 100}])
    [record] = normalize([raw])
    assert record.paid is True
    assert record.amount_pending == 0


def test_pending_never_negative():
    rows = [
        {"id": "a", "month": "01", "paid": False, "amountPending": -50},
        {"id": "b", "month": "01", "paid": False, "referenceAmount": 100, "amountPaid": 150, "payments": []},
    ]
    assert all(r.amount_pending >= 0 for r in normalize(rows))


def test_unpaid_without_amount_uses_reference_minus_paid():
    raw = _charge(paid=False, payments=[{"amountPaid": 250}])
    del raw["amount"]
    [record] = normalize([raw])
    assert record.amount_pending == pytest.approx(750)


def test_normalize_amounts_in_cents_and_defaults():
    raw = {
        "id": "c",
        "startAt": "2024-07-01",
        "concept": ["Agua", "Gas"],
        "referenceAmount": 150050,
        "paid": False,
        "amount": 150050,
    }
    [record] = normalize([raw], amounts_in_cents=True)
    assert record.reference_amount == pytest.approx(1500.50)
    assert record.amount_pending == pytest.approx(1500.50)
    assert record.concept == "Agua, Gas"
    assert record.financial_account_id == "N/A"
    assert record.number_condominium == "Desconocido"


def test_normalize_missing_concept_defaults():
    [record] = normalize([_charge(concept=None)])
    assert record.concept == "Desconocido"


def test_normalize_unidentified_filters_year_and_flags_records():
    rows = [
        {"id": "u1", "paymentDate": "2024-02-10", "amountPaid": 500},
        {"id": "u2", "paymentDate": datetime(2023, 2, 10), "amountPaid": 500},
        {"id": "u3", "paymentDate": None, "amountPaid": 500},
        {"id": "u4", "paymentDate": "2024-06-01", "month": "05", "amountPaid": 100},
    ]
    records = normalize_unidentified(rows, year="2024")
    assert [r.id for r in records] == ["u1", "u4"]
    assert records[0].month == "02"
    assert records[1].month == "05"
    assert all(r.unidentified and not r.paid for r in records)
    assert records[0].concept == "Pago no identificado"


def test_normalize_unidentified_pads_integer_month():
    rows = [
        {"id": "u1", "paymentDate": "2024-04-02", "month": 3, "amountPaid": 80},
        {"id": "u2", "paymentDate": "2024-04-02", "month": "13", "amountPaid": 80},
    ]
    records = normalize_unidentified(rows, year="2024")
    assert [(r.id, r.month) for r in records] == [("u1", "03")]


def test_normalize_accounts():
    accounts = normalize_accounts([
        {"id": "acc-1", "name": "Banco", "initialBalance": 25000, "createdAt": "2024-04-15T10:00:00Z"},
        {"id": "acc-2", "initialBalance": None},
        {"name": "sin id"},
    ], amounts_in_cents=True)
    assert set(accounts) == {"acc-1", "acc-2"}
    assert accounts["acc-1"].initial_balance == pytest.approx(250)
    assert accounts["acc-1"].creation_month == "04"
    assert accounts["acc-2"].name == "Sin nombre"
    assert accounts["acc-2"].creation_month == "01"


def test_format_payment_date():
    assert format_payment_date(datetime(2024, 1, 9, 12, 30)) == "09/01/2024"
    assert format_payment_date("2024-01-09") == "09/01/2024"
    assert format_payment_date("ayer") == "ayer"
    assert format_payment_date(None) == ""
