from __future__ import annotations

import dataclasses
import datetime as dt
import enum
from typing import List, Optional


class Direction(str, enum.Enum):
    INFLOW = "inflow"
    OUTFLOW = "outflow"


class BudgetPeriod(str, enum.Enum):
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    YEARLY = "yearly"


class PayoffStrategy(str, enum.Enum):
    SNOWBALL = "snowball"  # smallest balance first
    AVALANCHE = "avalanche"  # highest APR first
    CUSTOM = "custom"


class PaymentKind(str, enum.Enum):
    MINIMUM = "minimum"
    EXTRA = "extra"


# ---------------------------------------------------------------------------
# Ledger records (owned by the host's record store, read-only here)
# ---------------------------------------------------------------------------


@dataclasses.dataclass(frozen=True)
class Asset:
    id: str
    owner: str
    name: str
    category: str
    value_cents: int
    is_liquid: bool
    last_updated: dt.datetime
    note: Optional[str] = None


@dataclasses.dataclass(frozen=True)
class Liability:
    id: str
    owner: str
    name: str
    category: str
    balance_cents: int
    last_updated: dt.datetime
    apr_percent: Optional[float] = None
    minimum_payment_cents: Optional[int] = None
    note: Optional[str] = None

    @property
    def effective_apr(self) -> float:
        return self.apr_percent if self.apr_percent is not None else 0.0

    @property
    def effective_minimum(self) -> int:
        return self.minimum_payment_cents if self.minimum_payment_cents is not None else 0


@dataclasses.dataclass(frozen=True)
class CashflowTransaction:
    id: str
    owner: str
    description: str
    amount_cents: int  # always >= 0, sign lives in direction
    category: str
    direction: Direction
    date: dt.date
    note: Optional[str] = None

    @property
    def signed_cents(self) -> int:
        return self.amount_cents if self.direction is Direction.INFLOW else -self.amount_cents


@dataclasses.dataclass(frozen=True)
class CashSnapshot:
    owner: str
    cash_on_hand_cents: int
    timestamp: dt.datetime


@dataclasses.dataclass(frozen=True)
class BudgetEnvelope:
    id: str
    owner: str
    name: str
    category: str
    period: BudgetPeriod
    target_cents: int
    note: Optional[str] = None


# ---------------------------------------------------------------------------
# Derived results
# ---------------------------------------------------------------------------


@dataclasses.dataclass(frozen=True)
class FinanceSummary:
    net_worth_cents: int
    liquid_net_cents: int
    cash_on_hand_cents: int
    runway_months: Optional[float]
    dscr: Optional[float]
    debt_utilization: Optional[float]


@dataclasses.dataclass(frozen=True)
class FinanceTotals:
    assets_cents: int
    liquid_assets_cents: int
    liabilities_cents: int
    inflow_cents: int
    outflow_cents: int
    monthly_burn_cents: int
    window_days: int


@dataclasses.dataclass(frozen=True)
class FinanceAggregate:
    summary: FinanceSummary
    totals: FinanceTotals


@dataclasses.dataclass(frozen=True)
class PaymentEntry:
    debt_id: str
    name: str
    payment_cents: int
    kind: PaymentKind


@dataclasses.dataclass(frozen=True)
class BalanceEntry:
    debt_id: str
    name: str
    balance_cents: int


@dataclasses.dataclass(frozen=True)
class PayoffMonth:
    month: int
    payments: List[PaymentEntry]
    remaining_balances: List[BalanceEntry]


@dataclasses.dataclass(frozen=True)
class PayoffDebt:
    id: str
    name: str
    balance_cents: int
    apr_percent: Optional[float]


@dataclasses.dataclass(frozen=True)
class DebtPayoffResult:
    strategy: PayoffStrategy
    total_debt_cents: int
    monthly_payment_cents: int
    months_to_payoff: int
    total_interest_paid_cents: int
    total_paid_cents: int
    schedule: List[PayoffMonth]
    debts: List[PayoffDebt]
    hit_iteration_cap: bool = False


@dataclasses.dataclass(frozen=True)
class SensitivityBaseline:
    monthly_income_cents: int
    monthly_expenses_cents: int
    monthly_net_cents: int


@dataclasses.dataclass(frozen=True)
class SensitivityScenario:
    income_change_percent: float
    expense_change_percent: float
    monthly_income_cents: int
    monthly_expenses_cents: int
    monthly_net_cents: int


@dataclasses.dataclass(frozen=True)
class SensitivityImpact:
    monthly_cents: int
    annual_cents: int
    percent_change: Optional[float]


@dataclasses.dataclass(frozen=True)
class ProjectionPoint:
    month: int
    balance_cents: int
    income_cents: int
    expenses_cents: int
    net_cents: int
    alert: Optional[str] = None


@dataclasses.dataclass(frozen=True)
class SensitivityResult:
    baseline: SensitivityBaseline
    scenario: SensitivityScenario
    impact: SensitivityImpact
    projections: List[ProjectionPoint]
    insights: List[str]

    @property
    def zero_crossing(self) -> Optional[ProjectionPoint]:
        for point in self.projections:
            if point.alert is not None:
                return point
        return None


@dataclasses.dataclass(frozen=True)
class BudgetActuals:
    envelope: BudgetEnvelope
    period_start: dt.date
    actual_spent_cents: int
    remaining_cents: int
    variance_percent: Optional[float]


@dataclasses.dataclass(frozen=True)
class RunwayPoint:
    month: int
    balance_cents: int
    label: str  # YYYY-MM


@dataclasses.dataclass(frozen=True)
class RunwayProjection:
    current_liquid_cents: int
    avg_monthly_net_cents: int
    avg_monthly_burn_cents: int
    runway_months: Optional[float]
    runway_date: Optional[str]
    projections: List[RunwayPoint]
    is_healthy: bool
    alert: Optional[str] = None
