from __future__ import annotations

import pytest

from bankdq.config import QualityConfig
from bankdq.domain.errors import SchemaMismatchError
from bankdq.domain.relation import Relation
from bankdq.reconciliation.period import monthly_totals, period_over_period


def _monthly(make_transactions, totals):
    return make_transactions(
        [
            (month, 1, f"2024-{month:02d}-15T12:00:00", amount, "Deposit")
            for month, amount in enumerate(totals, 1)
        ]
    )


def test_variance_percentages_against_previous_month(make_transactions, config):
    comparisons = period_over_period(_monthly(make_transactions, [100, 150, 90]), config)

    chronological = sorted(comparisons, key=lambda c: c.partition_key)
    assert [c.partition_key for c in chronological] == ["2024-02", "2024-03"]
    assert [c.variance_percentage for c in chronological] == [
        pytest.approx(50.0),
        pytest.approx(-40.0),
    ]
    assert [c.variance for c in chronological] == [50.0, -60.0]
    assert {c.status for c in comparisons} == {"Significant Change"}


def test_output_is_newest_first(make_transactions, config):
    comparisons = period_over_period(_monthly(make_transactions, [100, 150, 90]), config)

    assert [c.month_name for c in comparisons] == ["March", "February"]
    assert comparisons[0].expected_value == 150.0
    assert comparisons[0].observed_value == 90.0


def test_first_month_has_no_comparison(make_transactions, config):
    assert period_over_period(_monthly(make_transactions, [100]), config) == []


def test_small_change_is_normal(make_transactions, config):
    comparisons = period_over_period(_monthly(make_transactions, [100, 105]), config)
    assert comparisons[0].status == "Normal"


def test_threshold_is_configurable(make_transactions):
    relation = _monthly(make_transactions, [100, 130])

    assert period_over_period(relation, QualityConfig())[0].status == "Significant Change"
    lenient = QualityConfig(variance_threshold_pct=50)
    assert period_over_period(relation, lenient)[0].status == "Normal"


def test_zero_previous_total_has_undefined_percentage(make_transactions, config):
    comparisons = period_over_period(_monthly(make_transactions, [0.0, 50.0]), config)

    assert comparisons[0].variance_percentage is None
    assert comparisons[0].variance == 50.0
    assert comparisons[0].status == "Normal"


def test_zero_to_zero_is_normal(make_transactions, config):
    comparisons = period_over_period(_monthly(make_transactions, [0.0, 0.0]), config)
    assert comparisons[0].status == "Normal"


def test_monthly_counts_and_averages(make_transactions, transactions, config):
    comparisons = period_over_period(transactions, config)
    march, february = comparisons

    assert march.partition_key == "2024-03"
    assert march.transaction_count == 2
    assert march.total_amount == pytest.approx(2_000_020.0)
    assert march.avg_amount == pytest.approx(1_000_010.0)
    assert march.previous_count == 2
    assert march.count_variance == 0
    assert february.variance == pytest.approx(70.0 - 150.0)


def test_gap_months_compare_with_previous_month_that_has_data(make_transactions, config):
    relation = make_transactions(
        [
            (1, 1, "2024-01-10T00:00:00", 100.0, "Deposit"),
            (2, 1, "2024-04-10T00:00:00", 100.0, "Deposit"),
        ]
    )

    comparisons = period_over_period(relation, config)

    assert len(comparisons) == 1
    assert (comparisons[0].partition_key, comparisons[0].variance) == ("2024-04", 0.0)


def test_undated_rows_are_skipped(make_transactions):
    relation = make_transactions(
        [(1, 1, None, 5.0, "Deposit"), (2, 1, "2024-01-01T00:00:00", 10.0, "Deposit")]
    )
    totals = monthly_totals(relation)
    assert [(t.year, t.month, t.transaction_count) for t in totals] == [(2024, 1, 1)]


def test_missing_date_column_raises():
    relation = Relation.from_rows("transactions", [{"amount": 1.0}])
    with pytest.raises(SchemaMismatchError):
        period_over_period(relation)
