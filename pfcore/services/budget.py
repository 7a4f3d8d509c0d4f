from __future__ import annotations

import datetime as dt
from typing import Iterable, List, Optional, Sequence

from pfcore.domain.models import BudgetActuals, BudgetEnvelope, BudgetPeriod, CashflowTransaction, Direction
from pfcore.domain.money import round_half_up
from pfcore.log import get_logger

log = get_logger(__name__)


def period_start(period: BudgetPeriod, today: dt.date) -> dt.date:
    """First day of the envelope's current period; weeks start on Monday."""
    period = BudgetPeriod(period)
    if period is BudgetPeriod.WEEKLY:
        return today - dt.timedelta(days=today.weekday())
    if period is BudgetPeriod.MONTHLY:
        return dt.date(today.year, today.month, 1)
    if period is BudgetPeriod.QUARTERLY:
        return dt.date(today.year, (today.month - 1) // 3 * 3 + 1, 1)
    return dt.date(today.year, 1, 1)


def category_outflow_since(
    transactions: Iterable[CashflowTransaction],
    category: str,
    since: dt.date,
    until: Optional[dt.date] = None,
) -> int:
    return sum(
        t.amount_cents
        for t in transactions
        if t.direction is Direction.OUTFLOW
        and t.category == category
        and t.date >= since
        and (until is None or t.date <= until)
    )


def enrich_budget_envelope(envelope: BudgetEnvelope, start: dt.date, category_outflow_cents: int) -> BudgetActuals:
    """
    Period-to-date spend against the envelope target.

    variance_percent is a fraction: -1.0 means nothing spent, 0.2 means 20%
    over. It is None when the target is zero.
    """
    target = envelope.target_cents
    variance = round_half_up((category_outflow_cents - target) / target, 2) if target > 0 else None
    return BudgetActuals(
        envelope=envelope,
        period_start=start,
        actual_spent_cents=category_outflow_cents,
        remaining_cents=target - category_outflow_cents,
        variance_percent=variance,
    )


def enrich_budget_envelopes(
    envelopes: Sequence[BudgetEnvelope],
    transactions: Sequence[CashflowTransaction],
    today: dt.date,
) -> List[BudgetActuals]:
    enriched = []
    for envelope in envelopes:
        start = period_start(envelope.period, today)
        spent = category_outflow_since(transactions, envelope.category, start, until=today)
        enriched.append(enrich_budget_envelope(envelope, start, spent))
    log.debug("budget.enriched", envelopes=len(enriched), today=today.isoformat())
    return enriched
