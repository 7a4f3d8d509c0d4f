from __future__ import annotations

import dataclasses
import json
from pathlib import Path
from typing import Any, Dict, List, Optional

from pfcore.domain.models import PayoffStrategy
from pfcore.services import sensitivity


@dataclasses.dataclass(frozen=True)
class PayoffRequest:
    strategy: Any = PayoffStrategy.AVALANCHE.value
    monthly_payment_cents: Any = None
    custom_order: Optional[List[Any]] = None


@dataclasses.dataclass(frozen=True)
class SensitivityRequest:
    income_change_percent: Any = 0
    expense_change_percent: Any = 0
    time_horizon_months: Any = sensitivity.DEFAULT_HORIZON_MONTHS


def load_payoff_request(path: str | Path) -> PayoffRequest:
    # values are passed through untouched; the simulator validates them
    data = _read_json(path)
    return PayoffRequest(
        strategy=data.get("strategy", PayoffStrategy.AVALANCHE.value),
        monthly_payment_cents=data.get("monthly_payment_cents"),
        custom_order=data.get("custom_order"),
    )


def load_sensitivity_request(path: str | Path) -> SensitivityRequest:
    data = _read_json(path)
    return SensitivityRequest(
        income_change_percent=data.get("income_change_percent", 0),
        expense_change_percent=data.get("expense_change_percent", 0),
        time_horizon_months=data.get("time_horizon_months", sensitivity.DEFAULT_HORIZON_MONTHS),
    )


def _read_json(path: str | Path) -> Dict[str, Any]:
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)
