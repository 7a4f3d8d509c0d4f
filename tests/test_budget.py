import datetime as dt

import pytest

from pfcore.domain.models import BudgetEnvelope, BudgetPeriod, CashflowTransaction, Direction
from pfcore.services.budget import (
    category_outflow_since,
    enrich_budget_envelope,
    enrich_budget_envelopes,
    period_start,
)

START = dt.date(2025, 5, 1)


def _envelope(target: int, category: str = "food", period: BudgetPeriod = BudgetPeriod.MONTHLY) -> BudgetEnvelope:
    return BudgetEnvelope("b1", "u1", "Food", category, period, target)


def _txn(txn_id, amount, category, direction, day):
    return CashflowTransaction(txn_id, "u1", "txn", amount, category, direction, day)


def test_overspend_gives_negative_remaining_and_positive_variance():
    actuals = enrich_budget_envelope(_envelope(50000), START, 60000)
    assert actuals.remaining_cents == -10000
    assert actuals.variance_percent == 0.2
    assert actuals.period_start == START


def test_no_spend_is_fully_under_budget():
    actuals = enrich_budget_envelope(_envelope(50000), START, 0)
    assert actuals.remaining_cents == 50000
    assert actuals.variance_percent == -1.0


def test_zero_target_has_no_variance():
    actuals = enrich_budget_envelope(_envelope(0), START, 1200)
    assert actuals.variance_percent is None
    assert actuals.remaining_cents == -1200


@pytest.mark.parametrize(
    "period, expected",
    [
        (BudgetPeriod.WEEKLY, dt.date(2025, 5, 12)),
        (BudgetPeriod.MONTHLY, dt.date(2025, 5, 1)),
        (BudgetPeriod.QUARTERLY, dt.date(2025, 4, 1)),
        (BudgetPeriod.YEARLY, dt.date(2025, 1, 1)),
    ],
)
def test_period_start(period, expected):
    assert period_start(period, dt.date(2025, 5, 15)) == expected


def test_period_start_accepts_plain_strings():
    assert period_start("quarterly", dt.date(2025, 12, 31)) == dt.date(2025, 10, 1)


def test_only_category_outflows_since_start_are_counted():
    txns = [
        _txn("t1", 1000, "food", Direction.OUTFLOW, dt.date(2025, 5, 2)),
        _txn("t2", 2000, "food", Direction.OUTFLOW, dt.date(2025, 4, 30)),
        _txn("t3", 4000, "food", Direction.INFLOW, dt.date(2025, 5, 3)),
        _txn("t4", 8000, "fun", Direction.OUTFLOW, dt.date(2025, 5, 3)),
        _txn("t5", 500, "food", Direction.OUTFLOW, dt.date(2025, 5, 1)),
    ]
    assert category_outflow_since(txns, "food", START) == 1500


def test_spend_after_today_is_not_counted():
    txns = [
        _txn("t1", 1000, "food", Direction.OUTFLOW, dt.date(2025, 5, 10)),
        _txn("t2", 2000, "food", Direction.OUTFLOW, dt.date(2025, 5, 20)),
    ]
    assert category_outflow_since(txns, "food", START, until=dt.date(2025, 5, 10)) == 1000
    enriched = enrich_budget_envelopes([_envelope(5000)], txns, dt.date(2025, 5, 15))
    assert enriched[0].actual_spent_cents == 1000


def test_enrich_budget_envelopes_keeps_input_order():
    envelopes = [_envelope(10000, "fun"), _envelope(3000, "food")]
    txns = [
        _txn("t1", 2500, "food", Direction.OUTFLOW, dt.date(2025, 5, 10)),
        _txn("t2", 4000, "fun", Direction.OUTFLOW, dt.date(2025, 5, 11)),
    ]
    enriched = enrich_budget_envelopes(envelopes, txns, dt.date(2025, 5, 15))
    assert [a.envelope.category for a in enriched] == ["fun", "food"]
    assert [a.actual_spent_cents for a in enriched] == [4000, 2500]
    assert enriched[0].variance_percent == -0.6
    assert enriched[1].variance_percent == -0.17
