from __future__ import annotations

import datetime as dt
from typing import Iterable, List, Optional

import pandas as pd

from pfcore.domain.models import CashflowTransaction

CASHFLOW_WINDOW_DAYS = 30


def cashflow_window_start(as_of: dt.date, days: int = CASHFLOW_WINDOW_DAYS) -> dt.date:
    return as_of - dt.timedelta(days=days)


def history_window_start(as_of: dt.date, months: int) -> dt.date:
    """Same day-of-month `months` calendar months back, clamped to month end."""
    return (pd.Timestamp(as_of) - pd.DateOffset(months=months)).date()


def transactions_since(
    transactions: Iterable[CashflowTransaction], since: dt.date, until: Optional[dt.date] = None
) -> List[CashflowTransaction]:
    """Transactions dated within [since, until]; open-ended when `until` is None."""
    return [t for t in transactions if t.date >= since and (until is None or t.date <= until)]
