from __future__ import annotations

import datetime as dt
import math
from typing import List, Optional, Sequence

import pandas as pd

from pfcore.domain.models import CashflowTransaction, RunwayPoint, RunwayProjection
from pfcore.domain.money import round_cents, round_half_up
from pfcore.log import get_logger

log = get_logger(__name__)

LOOKBACK_MONTHS = 6
HORIZON_MONTHS = 24
HEALTHY_RUNWAY_MONTHS = 6
CRITICAL_RUNWAY_MONTHS = 3
CRITICAL_ALERT = "Critical: Less than 3 months runway"


def monthly_net_flows(transactions: Sequence[CashflowTransaction]) -> pd.Series:
    """Signed net cents per calendar month, oldest first."""
    if not transactions:
        return pd.Series(dtype=float)
    df = pd.DataFrame(
        {"date": [t.date for t in transactions], "amount": [t.signed_cents for t in transactions]}
    )
    df["month"] = pd.to_datetime(df["date"]).dt.to_period("M")
    return df.groupby("month")["amount"].sum().astype(float)


def project_runway(
    current_liquid_cents: int,
    trailing_transactions: Sequence[CashflowTransaction],
    as_of: dt.date,
) -> RunwayProjection:
    """
    Months of liquid cash left at the average monthly net flow of the
    trailing LOOKBACK_MONTHS.

    Only a negative average counts as burning; a flat or positive average
    has no runway figure and is always healthy.
    """
    flows = monthly_net_flows(trailing_transactions)
    avg_net = float(flows.mean()) if not flows.empty else 0.0

    raw_runway: Optional[float] = current_liquid_cents / abs(avg_net) if avg_net < 0 else None

    projections: List[RunwayPoint] = []
    start = pd.Period(as_of, freq="M")
    balance = float(current_liquid_cents)
    for i in range(HORIZON_MONTHS):
        balance += avg_net
        projections.append(
            RunwayPoint(
                month=i + 1,
                balance_cents=round_cents(max(0.0, balance)),
                label=(start + i + 1).strftime("%Y-%m"),
            )
        )
        if balance <= 0:
            break

    runway_date = None
    if raw_runway is not None and raw_runway > 0:
        idx = math.floor(raw_runway) - 1
        if 0 <= idx < len(projections):
            runway_date = projections[idx].label

    burning = raw_runway is not None
    # with no cash left while burning there is no runway figure, only the alert
    has_runway = burning and raw_runway > 0
    result = RunwayProjection(
        current_liquid_cents=current_liquid_cents,
        avg_monthly_net_cents=round_cents(avg_net),
        avg_monthly_burn_cents=round_cents(abs(avg_net)) if avg_net < 0 else 0,
        runway_months=round_half_up(raw_runway, 1) if has_runway else None,
        runway_date=runway_date,
        projections=projections,
        is_healthy=not burning or raw_runway > HEALTHY_RUNWAY_MONTHS,
        alert=CRITICAL_ALERT if burning and raw_runway < CRITICAL_RUNWAY_MONTHS else None,
    )
    log.debug("runway.projected", months=len(projections), burning=burning)
    return result
