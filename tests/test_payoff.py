import datetime as dt
import math

import pytest

from pfcore.domain.errors import ValidationError
from pfcore.domain.models import Liability, PaymentKind, PayoffStrategy
from pfcore.services.payoff import (
    MAX_MONTHS,
    SCHEDULE_LIMIT,
    compare_strategies,
    order_liabilities,
    simulate_debt_payoff,
    validate_payoff_request,
)

NOW = dt.datetime(2025, 3, 1)


def _debt(debt_id: str, balance: int, apr=None, minimum=None) -> Liability:
    return Liability(debt_id, "u1", debt_id.upper(), "loan", balance, NOW, apr_percent=apr, minimum_payment_cents=minimum)


def test_snowball_orders_by_smallest_balance():
    debts = [_debt("a", 500), _debt("b", 200), _debt("c", 800)]
    ordered = order_liabilities(debts, PayoffStrategy.SNOWBALL)
    assert [d.balance_cents for d in ordered] == [200, 500, 800]


def test_avalanche_orders_by_highest_apr_with_null_as_zero():
    debts = [_debt("a", 100, apr=5), _debt("b", 100, apr=20), _debt("c", 100, apr=12), _debt("d", 100)]
    ordered = order_liabilities(debts, PayoffStrategy.AVALANCHE)
    assert [d.id for d in ordered] == ["b", "c", "a", "d"]


def test_custom_order_puts_unlisted_last_in_input_order():
    debts = [_debt("a", 1), _debt("b", 2), _debt("c", 3), _debt("d", 4)]
    ordered = order_liabilities(debts, PayoffStrategy.CUSTOM, ["c", "a"])
    assert [d.id for d in ordered] == ["c", "a", "b", "d"]


def test_custom_order_without_ids_keeps_input_order():
    debts = [_debt("b", 2), _debt("a", 1)]
    assert [d.id for d in order_liabilities(debts, PayoffStrategy.CUSTOM)] == ["b", "a"]


def test_no_liabilities_returns_empty_result():
    result = simulate_debt_payoff([], "snowball", 10000)
    assert result.months_to_payoff == 0
    assert result.total_debt_cents == 0
    assert result.total_interest_paid_cents == 0
    assert result.total_paid_cents == 0
    assert result.schedule == []
    assert result.debts == []


def test_interest_free_debt_pays_off_with_extra_payments():
    result = simulate_debt_payoff([_debt("a", 10000)], "avalanche", 2500)
    assert result.months_to_payoff == 4
    assert result.total_interest_paid_cents == 0
    assert result.total_paid_cents == 10000
    assert not result.hit_iteration_cap
    extras = [p for month in result.schedule for p in month.payments if p.kind is PaymentKind.EXTRA]
    assert [p.payment_cents for p in extras] == [2500, 2500, 2500, 2500]
    assert result.schedule[-1].remaining_balances[0].balance_cents == 0


def test_interest_accrues_before_payment():
    result = simulate_debt_payoff([_debt("a", 100000, apr=12)], "avalanche", 101000)
    assert result.months_to_payoff == 1
    assert result.total_interest_paid_cents == 1000
    assert result.total_paid_cents == 101000


def test_minimums_first_then_extra_to_strategy_target():
    debts = [_debt("big", 5000, minimum=200), _debt("small", 1000, minimum=100)]
    result = simulate_debt_payoff(debts, "snowball", 500)
    first = result.schedule[0]
    assert [(p.debt_id, p.payment_cents, p.kind) for p in first.payments] == [
        ("small", 100, PaymentKind.MINIMUM),
        ("big", 200, PaymentKind.MINIMUM),
        ("small", 200, PaymentKind.EXTRA),
    ]
    balances = {b.debt_id: b.balance_cents for b in first.remaining_balances}
    assert balances == {"small": 700, "big": 4800}
    assert [d.id for d in result.debts] == ["small", "big"]


def test_budget_below_minimums_is_spent_in_priority_order():
    debts = [_debt("a", 1000, minimum=300), _debt("b", 1000, minimum=300)]
    result = simulate_debt_payoff(debts, "custom", 400, ["b", "a"])
    first = result.schedule[0]
    assert [(p.debt_id, p.payment_cents) for p in first.payments] == [("b", 300), ("a", 100)]


def test_runaway_interest_stops_at_iteration_cap():
    result = simulate_debt_payoff([_debt("a", 100000, apr=500, minimum=50)], "avalanche", 100)
    assert result.months_to_payoff == MAX_MONTHS
    assert result.hit_iteration_cap
    assert len(result.schedule) == SCHEDULE_LIMIT
    assert result.schedule[-1].month == SCHEDULE_LIMIT


def test_extreme_apr_saturates_instead_of_overflowing():
    result = simulate_debt_payoff([_debt("a", 100000, apr=5000, minimum=50)], "avalanche", 100)
    assert result.months_to_payoff == MAX_MONTHS
    assert result.hit_iteration_cap
    assert isinstance(result.total_interest_paid_cents, int)
    assert math.isfinite(float(result.total_paid_cents))
    assert result.total_paid_cents >= result.total_interest_paid_cents > 0
    assert all(math.isfinite(float(b.balance_cents)) for b in result.schedule[-1].remaining_balances)


def test_schedule_is_truncated_but_simulation_completes():
    result = simulate_debt_payoff([_debt("a", 100000)], "snowball", 1000)
    assert result.months_to_payoff == 100
    assert len(result.schedule) == SCHEDULE_LIMIT
    assert not result.hit_iteration_cap


def test_inputs_are_not_modified():
    debts = [_debt("a", 10000, apr=18, minimum=500)]
    result = simulate_debt_payoff(debts, "snowball", 3000)
    assert debts[0].balance_cents == 10000
    assert result.debts[0].balance_cents == 10000
    assert result.total_debt_cents == 10000


def test_invalid_request_reports_every_violation():
    with pytest.raises(ValidationError) as exc_info:
        simulate_debt_payoff([_debt("a", 100)], "tsunami", 0, ["a", 7, "a"])
    fields = [issue.field for issue in exc_info.value.issues]
    assert fields == ["strategy", "monthly_payment_cents", "custom_order[1]", "custom_order[2]"]
    assert exc_info.value.to_dict()["error"] == "Validation failed"


@pytest.mark.parametrize("payment", [-1, 0, 12.5, True, None])
def test_non_positive_or_non_integer_payment_is_rejected(payment):
    with pytest.raises(ValidationError):
        simulate_debt_payoff([_debt("a", 100)], "snowball", payment)


def test_valid_request_returns_parsed_strategy():
    assert validate_payoff_request("custom", 100, ["a"]) is PayoffStrategy.CUSTOM
    assert validate_payoff_request(PayoffStrategy.SNOWBALL, 1) is PayoffStrategy.SNOWBALL


def test_custom_order_must_be_a_list():
    with pytest.raises(ValidationError):
        simulate_debt_payoff([_debt("a", 100)], "custom", 100, "a,b")


def test_compare_strategies_runs_each_strategy():
    debts = [_debt("low", 300000, apr=4, minimum=3000), _debt("high", 100000, apr=24, minimum=2000)]
    results = compare_strategies(debts, 20000)
    assert set(results) == {PayoffStrategy.SNOWBALL, PayoffStrategy.AVALANCHE}
    assert results[PayoffStrategy.AVALANCHE].debts[0].id == "high"
    assert (
        results[PayoffStrategy.AVALANCHE].total_interest_paid_cents
        <= results[PayoffStrategy.SNOWBALL].total_interest_paid_cents
    )
