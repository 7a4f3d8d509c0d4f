import datetime as dt

from pfcore.domain.models import CashflowTransaction, Direction
from pfcore.services.runway import CRITICAL_ALERT, HORIZON_MONTHS, monthly_net_flows, project_runway

AS_OF = dt.date(2025, 3, 15)


def _txn(txn_id, amount, direction, day):
    return CashflowTransaction(txn_id, "u1", "txn", amount, "misc", direction, day)


def _burning(monthly_net_loss: int):
    return [
        _txn("i1", 200000, Direction.INFLOW, dt.date(2025, 1, 5)),
        _txn("o1", 200000 + monthly_net_loss, Direction.OUTFLOW, dt.date(2025, 1, 20)),
        _txn("i2", 200000, Direction.INFLOW, dt.date(2025, 2, 5)),
        _txn("o2", 200000 + monthly_net_loss, Direction.OUTFLOW, dt.date(2025, 2, 20)),
    ]


def test_monthly_net_flows_groups_by_calendar_month():
    flows = monthly_net_flows(_burning(50000))
    assert list(flows.values) == [-50000.0, -50000.0]
    assert monthly_net_flows([]).empty


def test_burning_runway_projects_until_cash_runs_out():
    result = project_runway(300000, _burning(100000), AS_OF)
    assert result.avg_monthly_net_cents == -100000
    assert result.avg_monthly_burn_cents == 100000
    assert result.runway_months == 3.0
    assert [p.balance_cents for p in result.projections] == [200000, 100000, 0]
    assert [p.label for p in result.projections] == ["2025-04", "2025-05", "2025-06"]
    assert result.runway_date == "2025-06"
    assert not result.is_healthy
    assert result.alert is None


def test_short_runway_raises_critical_alert():
    result = project_runway(150000, _burning(100000), AS_OF)
    assert result.runway_months == 1.5
    assert result.alert == CRITICAL_ALERT
    assert result.runway_date == "2025-04"
    assert result.projections[-1].balance_cents == 0


def test_burning_with_no_cash_is_unhealthy():
    result = project_runway(-20000, _burning(50000), AS_OF)
    assert result.runway_months is None
    assert result.runway_date is None
    assert not result.is_healthy
    assert result.alert == CRITICAL_ALERT
    assert [p.balance_cents for p in result.projections] == [0]


def test_positive_flow_has_no_runway_and_full_horizon():
    txns = [_txn("i1", 100000, Direction.INFLOW, dt.date(2025, 2, 1))]
    result = project_runway(50000, txns, AS_OF)
    assert result.runway_months is None
    assert result.runway_date is None
    assert result.is_healthy
    assert result.avg_monthly_burn_cents == 0
    assert len(result.projections) == HORIZON_MONTHS
    assert result.projections[-1].label == "2027-03"


def test_no_history_is_flat_and_healthy():
    result = project_runway(50000, [], AS_OF)
    assert result.avg_monthly_net_cents == 0
    assert all(p.balance_cents == 50000 for p in result.projections)
    assert result.is_healthy
