from __future__ import annotations

import datetime as dt
from typing import Iterable, Optional, Sequence

from pfcore.domain.models import (
    Asset,
    CashflowTransaction,
    CashSnapshot,
    Direction,
    FinanceAggregate,
    FinanceSummary,
    FinanceTotals,
    Liability,
)
from pfcore.domain.money import round_cents, round_half_up
from pfcore.log import get_logger
from pfcore.services.windows import CASHFLOW_WINDOW_DAYS

log = get_logger(__name__)


def liquid_assets_cents(assets: Iterable[Asset]) -> int:
    return sum(a.value_cents for a in assets if a.is_liquid)


def latest_snapshot(snapshots: Iterable[CashSnapshot], as_of: Optional[dt.date] = None) -> Optional[CashSnapshot]:
    """Most recent snapshot, ignoring any taken after `as_of`."""
    latest: Optional[CashSnapshot] = None
    for snap in snapshots:
        if as_of is not None and snap.timestamp.date() > as_of:
            continue
        if latest is None or snap.timestamp > latest.timestamp:
            latest = snap
    return latest


def aggregate(
    assets: Sequence[Asset],
    liabilities: Sequence[Liability],
    window_transactions: Sequence[CashflowTransaction],
    snapshot: Optional[CashSnapshot] = None,
) -> FinanceAggregate:
    """
    Net worth, runway and debt ratios from current holdings and the trailing
    cashflow window.

    `window_transactions` must already be limited to the last
    CASHFLOW_WINDOW_DAYS days. A snapshot, when given, overrides the computed
    liquid cash.
    """
    assets_cents = sum(a.value_cents for a in assets)
    liquid_cents = liquid_assets_cents(assets)
    liabilities_cents = sum(debt.balance_cents for debt in liabilities)

    inflow_cents = sum(t.amount_cents for t in window_transactions if t.direction is Direction.INFLOW)
    outflow_cents = sum(t.amount_cents for t in window_transactions if t.direction is Direction.OUTFLOW)

    avg_daily_burn = outflow_cents / CASHFLOW_WINDOW_DAYS
    monthly_burn_cents = round_cents(avg_daily_burn * 30)

    cash_on_hand_cents = snapshot.cash_on_hand_cents if snapshot is not None else liquid_cents

    runway_months = None
    if avg_daily_burn > 0:
        runway_months = round_half_up(cash_on_hand_cents / avg_daily_burn / 30, 1)

    debt_service_cents = sum(debt.effective_minimum for debt in liabilities)
    dscr = round_half_up(inflow_cents / debt_service_cents, 2) if debt_service_cents > 0 else None

    debt_utilization = round_half_up(liabilities_cents / assets_cents, 2) if assets_cents > 0 else None

    summary = FinanceSummary(
        net_worth_cents=assets_cents - liabilities_cents,
        liquid_net_cents=liquid_cents - liabilities_cents,
        cash_on_hand_cents=cash_on_hand_cents,
        runway_months=runway_months,
        dscr=dscr,
        debt_utilization=debt_utilization,
    )
    totals = FinanceTotals(
        assets_cents=assets_cents,
        liquid_assets_cents=liquid_cents,
        liabilities_cents=liabilities_cents,
        inflow_cents=inflow_cents,
        outflow_cents=outflow_cents,
        monthly_burn_cents=monthly_burn_cents,
        window_days=CASHFLOW_WINDOW_DAYS,
    )
    log.debug(
        "finance.aggregated",
        assets=len(assets),
        liabilities=len(liabilities),
        transactions=len(window_transactions),
        snapshot=snapshot is not None,
    )
    return FinanceAggregate(summary=summary, totals=totals)
