from __future__ import annotations

from typing import Any, List, Sequence

from pfcore.domain.errors import ConstraintViolation, ValidationError
from pfcore.domain.models import (
    CashflowTransaction,
    Direction,
    ProjectionPoint,
    SensitivityBaseline,
    SensitivityImpact,
    SensitivityResult,
    SensitivityScenario,
)
from pfcore.domain.money import round_cents, round_half_up
from pfcore.log import get_logger
from pfcore.services.validation import check_int, check_positive_int, check_range

log = get_logger(__name__)

HISTORY_MONTHS = 3
DEFAULT_HORIZON_MONTHS = 12
MIN_CHANGE_PERCENT = -100
MAX_CHANGE_PERCENT = 500
ZERO_BALANCE_ALERT = "Balance reaches zero"


def validate_sensitivity_request(
    current_liquid_cents: Any,
    income_change_percent: Any,
    expense_change_percent: Any,
    time_horizon_months: Any,
) -> None:
    issues: List[ConstraintViolation] = []
    check_int("current_liquid_cents", current_liquid_cents, issues)
    check_range("income_change_percent", income_change_percent, issues, MIN_CHANGE_PERCENT, MAX_CHANGE_PERCENT)
    check_range("expense_change_percent", expense_change_percent, issues, MIN_CHANGE_PERCENT, MAX_CHANGE_PERCENT)
    check_positive_int("time_horizon_months", time_horizon_months, issues)
    if issues:
        log.info("sensitivity.rejected", issues=len(issues))
        raise ValidationError(issues)


def _fmt_pct(value: float) -> str:
    return f"{abs(value):g}"


def _insights(
    baseline_net: float,
    scenario_net: float,
    projections: Sequence[ProjectionPoint],
    income_change: float,
    expense_change: float,
) -> List[str]:
    insights = []
    if scenario_net < 0 and baseline_net >= 0:
        insights.append("Warning: This scenario would result in negative cash flow")

    for point in projections:
        if point.alert is not None:
            insights.append(f"Balance would reach zero in {point.month + 1} months")
            break

    if income_change < -20:
        insights.append(
            f"Significant income reduction of {_fmt_pct(income_change)}% would require substantial expense cuts"
        )
    if expense_change < -20:
        insights.append(f"Reducing expenses by {_fmt_pct(expense_change)}% could significantly improve financial health")
    if scenario_net > baseline_net * 2:
        insights.append("This scenario would dramatically improve your financial position")
    return insights


def project_sensitivity(
    current_liquid_cents: int,
    trailing_transactions: Sequence[CashflowTransaction],
    income_change_percent: float,
    expense_change_percent: float,
    time_horizon_months: int = DEFAULT_HORIZON_MONTHS,
) -> SensitivityResult:
    """
    What-if projection of liquid cash under shifted income and expenses.

    Baseline averages come from `trailing_transactions`, which must cover the
    last HISTORY_MONTHS months. The walk stops at the first month whose
    closing balance is at or below zero; that entry carries the alert.
    """
    validate_sensitivity_request(
        current_liquid_cents, income_change_percent, expense_change_percent, time_horizon_months
    )

    total_inflow = sum(t.amount_cents for t in trailing_transactions if t.direction is Direction.INFLOW)
    total_outflow = sum(t.amount_cents for t in trailing_transactions if t.direction is Direction.OUTFLOW)
    avg_income = total_inflow / HISTORY_MONTHS
    avg_expenses = total_outflow / HISTORY_MONTHS

    scenario_income = avg_income * (1 + income_change_percent / 100)
    scenario_expenses = avg_expenses * (1 + expense_change_percent / 100)
    scenario_net = scenario_income - scenario_expenses

    projections: List[ProjectionPoint] = []
    balance = float(current_liquid_cents)
    for month in range(time_horizon_months + 1):
        opening = balance
        balance += scenario_net
        crossed = balance <= 0
        projections.append(
            ProjectionPoint(
                month=month,
                balance_cents=round_cents(opening),
                income_cents=round_cents(scenario_income),
                expenses_cents=round_cents(scenario_expenses),
                net_cents=round_cents(scenario_net),
                alert=ZERO_BALANCE_ALERT if crossed else None,
            )
        )
        if crossed:
            break

    baseline_net = avg_income - avg_expenses
    impact = scenario_net - baseline_net
    impact_percent = round_half_up(impact / baseline_net * 100, 1) if baseline_net != 0 else None

    result = SensitivityResult(
        baseline=SensitivityBaseline(
            monthly_income_cents=round_cents(avg_income),
            monthly_expenses_cents=round_cents(avg_expenses),
            monthly_net_cents=round_cents(baseline_net),
        ),
        scenario=SensitivityScenario(
            income_change_percent=income_change_percent,
            expense_change_percent=expense_change_percent,
            monthly_income_cents=round_cents(scenario_income),
            monthly_expenses_cents=round_cents(scenario_expenses),
            monthly_net_cents=round_cents(scenario_net),
        ),
        impact=SensitivityImpact(
            monthly_cents=round_cents(impact),
            annual_cents=round_cents(impact * 12),
            percent_change=impact_percent,
        ),
        projections=projections,
        insights=_insights(baseline_net, scenario_net, projections, income_change_percent, expense_change_percent),
    )
    log.debug(
        "sensitivity.projected",
        months=len(projections),
        zero_crossing=result.zero_crossing is not None,
        insights=len(result.insights),
    )
    return result
