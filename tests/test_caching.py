import pytest

from condo_finance.services.aggregation_service import aggregate_by_month
from condo_finance.utils.caching import clear_all_caches, memoized_monthly_stats


@pytest.fixture(autouse=True)
def _fresh_cache():
    clear_all_caches()
    yield
    clear_all_caches()


def test_memoized_matches_direct_aggregation(ledger):
    assert memoized_monthly_stats(ledger, "2024") == aggregate_by_month(ledger, year="2024")


def test_repeated_call_returns_same_stats(ledger):
    first = memoized_monthly_stats(ledger, "2024")
    second = memoized_monthly_stats(ledger, "2024")
    assert first == second


def test_new_records_of_same_length_are_recomputed(record_factory):
    for amount in range(50):
        records = [record_factory(amount_paid=amount)]
        assert memoized_monthly_stats(records, "2024")[0].paid == amount


def test_equal_content_in_new_list_hits_same_result(ledger):
    first = memoized_monthly_stats(ledger, "2024")
    assert memoized_monthly_stats(list(ledger), "2024") == first


def test_accounts_feed_initial_balance(ledger, accounts):
    stats = memoized_monthly_stats(ledger, "2024", accounts=accounts)
    assert stats[0].initial_balance == pytest.approx(250)
    assert stats[2].initial_balance == pytest.approx(100)
    assert memoized_monthly_stats(ledger, "2024")[0].initial_balance == 0
