import pytest

from condo_finance.models.financial_models import (
    FinancialAccountInfo,
    PaymentRecord,
    ReportContext,
)


def make_record(**overrides) -> PaymentRecord:
    defaults = {
        "id": "charge-1",
        "number_condominium": "101",
        "month": "01",
        "concept": "Cuota de mantenimiento",
        "reference_amount": 1000.0,
        "amount_paid": 1000.0,
        "amount_pending": 0.0,
        "credit_balance": 0.0,
        "credit_used": 0.0,
        "paid": True,
        "financial_account_id": "acc-1",
    }
    defaults.update(overrides)
    return PaymentRecord(**defaults)


@pytest.fixture
def record_factory():
    return make_record


@pytest.fixture
def ledger():
    """Libro pequeño con varios meses, conceptos, cuentas y unidades."""
    return [
        make_record(id="c1", month="01", amount_paid=1000, reference_amount=1000),
        make_record(
            id="c2", month="01", number_condominium="102", paid=False,
            amount_paid=200, amount_pending=800, reference_amount=1000,
        ),
        make_record(
            id="c3", month="02", concept="Cuota extraordinaria",
            amount_paid=500, reference_amount=450, credit_balance=50,
            financial_account_id="acc-2",
        ),
        make_record(
            id="c4", month="03", number_condominium="102",
            amount_paid=180, reference_amount=200, credit_used=20,
        ),
        make_record(
            id="c5", month="03", number_condominium="103", paid=False,
            concept="Cuota extraordinaria", amount_paid=0, amount_pending=300,
            reference_amount=300, credit_balance=-5, financial_account_id="acc-2",
        ),
    ]


@pytest.fixture
def accounts():
    return {
        "acc-1": FinancialAccountInfo(id="acc-1", name="Banco", initial_balance=250.0, creation_month="01"),
        "acc-2": FinancialAccountInfo(id="acc-2", name="Caja", initial_balance=100.0, creation_month="03"),
    }


@pytest.fixture
def context():
    return ReportContext(client_id="client-1", condominium_id="condo-1", year="2024")
