from __future__ import annotations

import dataclasses
from typing import Any, Dict, List, Optional, Sequence, Tuple

from pfcore.domain.errors import ConstraintViolation, ValidationError
from pfcore.domain.models import (
    BalanceEntry,
    DebtPayoffResult,
    Liability,
    PaymentEntry,
    PaymentKind,
    PayoffDebt,
    PayoffMonth,
    PayoffStrategy,
)
from pfcore.domain.money import round_cents
from pfcore.log import get_logger
from pfcore.services.validation import check_positive_int

log = get_logger(__name__)

MAX_MONTHS = 600  # 50 years
SCHEDULE_LIMIT = 60
BALANCE_CEILING = 1e300


@dataclasses.dataclass(frozen=True)
class _WorkingDebt:
    id: str
    name: str
    balance: float
    apr: float
    min_payment: float


def validate_payoff_request(
    strategy: Any,
    monthly_payment_cents: Any,
    custom_order: Optional[Sequence[Any]] = None,
) -> PayoffStrategy:
    issues: List[ConstraintViolation] = []
    try:
        PayoffStrategy(strategy)
    except ValueError:
        choices = ", ".join(s.value for s in PayoffStrategy)
        issues.append(ConstraintViolation("strategy", "enum", f"expected one of {choices}, got {strategy!r}"))

    check_positive_int("monthly_payment_cents", monthly_payment_cents, issues)

    if custom_order is not None:
        if isinstance(custom_order, (str, bytes)) or not isinstance(custom_order, (list, tuple)):
            issues.append(ConstraintViolation("custom_order", "array", "expected a list of liability ids"))
        else:
            seen = set()
            for idx, debt_id in enumerate(custom_order):
                if not isinstance(debt_id, str):
                    issues.append(
                        ConstraintViolation(f"custom_order[{idx}]", "string", f"expected a string id, got {debt_id!r}")
                    )
                elif debt_id in seen:
                    issues.append(ConstraintViolation(f"custom_order[{idx}]", "unique", f"duplicate id {debt_id!r}"))
                else:
                    seen.add(debt_id)

    if issues:
        log.info("debt_payoff.rejected", issues=len(issues))
        raise ValidationError(issues)
    return PayoffStrategy(strategy)


def order_liabilities(
    liabilities: Sequence[Liability],
    strategy: PayoffStrategy,
    custom_order: Optional[Sequence[str]] = None,
) -> List[Liability]:
    """Stable sort of liabilities into payoff priority."""
    if strategy is PayoffStrategy.SNOWBALL:
        return sorted(liabilities, key=lambda debt: debt.balance_cents)
    if strategy is PayoffStrategy.AVALANCHE:
        return sorted(liabilities, key=lambda debt: -debt.effective_apr)

    positions = {debt_id: idx for idx, debt_id in enumerate(custom_order or [])}

    # unlisted ids rank after every listed one, keeping their input order
    def rank(liability: Liability) -> Tuple[int, int]:
        pos = positions.get(liability.id)
        return (0, pos) if pos is not None else (1, 0)

    return sorted(liabilities, key=rank)


def _accrue_interest(debts: List[_WorkingDebt]) -> Tuple[List[_WorkingDebt], float]:
    accrued = 0.0
    out = []
    for debt in debts:
        if debt.balance > 0:
            interest = debt.balance * debt.apr / 100 / 12
            # runaway balances saturate so 600 months of totals stay finite
            if debt.balance + interest > BALANCE_CEILING:
                interest = BALANCE_CEILING - debt.balance
            accrued += interest
            debt = dataclasses.replace(debt, balance=debt.balance + interest)
        out.append(debt)
    return out, accrued


def _pay_minimums(
    debts: List[_WorkingDebt], budget: float
) -> Tuple[List[_WorkingDebt], float, List[PaymentEntry]]:
    out = []
    payments = []
    for debt in debts:
        if debt.balance > 0:
            pay = min(debt.min_payment, debt.balance, budget)
            budget -= pay
            debt = dataclasses.replace(debt, balance=debt.balance - pay)
            payments.append(PaymentEntry(debt.id, debt.name, round_cents(pay), PaymentKind.MINIMUM))
        out.append(debt)
    return out, budget, payments


def _pay_extra(debts: List[_WorkingDebt], budget: float) -> Tuple[List[_WorkingDebt], List[PaymentEntry]]:
    for idx, debt in enumerate(debts):
        if debt.balance > 0:
            pay = min(budget, debt.balance)
            out = list(debts)
            out[idx] = dataclasses.replace(debt, balance=debt.balance - pay)
            return out, [PaymentEntry(debt.id, debt.name, round_cents(pay), PaymentKind.EXTRA)]
    return debts, []


def simulate_debt_payoff(
    liabilities: Sequence[Liability],
    strategy: Any,
    monthly_payment_cents: Any,
    custom_order: Optional[Sequence[Any]] = None,
) -> DebtPayoffResult:
    """
    Month-by-month amortization of every liability under one repayment
    strategy and a fixed monthly budget.

    Each month: interest accrues on every open balance, minimums are paid in
    priority order out of the budget, and whatever is left goes to the first
    open debt in priority order. Runs until everything is paid or MAX_MONTHS
    iterations have elapsed; hitting the cap is not an error.
    """
    parsed = validate_payoff_request(strategy, monthly_payment_cents, custom_order)

    ordered = order_liabilities(liabilities, parsed, custom_order)
    total_debt_cents = sum(debt.balance_cents for debt in liabilities)
    debts_out = [PayoffDebt(debt.id, debt.name, debt.balance_cents, debt.apr_percent) for debt in ordered]

    if not ordered:
        return DebtPayoffResult(
            strategy=parsed,
            total_debt_cents=0,
            monthly_payment_cents=monthly_payment_cents,
            months_to_payoff=0,
            total_interest_paid_cents=0,
            total_paid_cents=0,
            schedule=[],
            debts=[],
        )

    working = [
        _WorkingDebt(
            id=debt.id,
            name=debt.name,
            balance=float(debt.balance_cents),
            apr=debt.effective_apr,
            min_payment=float(debt.effective_minimum),
        )
        for debt in ordered
    ]

    schedule: List[PayoffMonth] = []
    total_interest = 0.0
    month = 0
    while any(d.balance > 0 for d in working) and month < MAX_MONTHS:
        month += 1
        working, accrued = _accrue_interest(working)
        total_interest += accrued

        working, remaining, payments = _pay_minimums(working, float(monthly_payment_cents))
        if remaining > 0:
            working, extra = _pay_extra(working, remaining)
            payments.extend(extra)

        if len(schedule) < SCHEDULE_LIMIT:
            balances = [BalanceEntry(d.id, d.name, round_cents(max(0.0, d.balance))) for d in working]
            schedule.append(PayoffMonth(month=month, payments=payments, remaining_balances=balances))

    capped = any(d.balance > 0 for d in working)
    if capped:
        log.warning("debt_payoff.iteration_cap_hit", months=month, strategy=parsed.value)

    total_interest_cents = round_cents(total_interest)
    result = DebtPayoffResult(
        strategy=parsed,
        total_debt_cents=total_debt_cents,
        monthly_payment_cents=monthly_payment_cents,
        months_to_payoff=month,
        total_interest_paid_cents=total_interest_cents,
        total_paid_cents=round_cents(total_debt_cents + total_interest),
        schedule=schedule,
        debts=debts_out,
        hit_iteration_cap=capped,
    )
    log.debug(
        "debt_payoff.simulated",
        strategy=parsed.value,
        debts=len(ordered),
        months=month,
        interest_cents=total_interest_cents,
    )
    return result


def compare_strategies(
    liabilities: Sequence[Liability],
    monthly_payment_cents: int,
    custom_order: Optional[Sequence[str]] = None,
) -> Dict[PayoffStrategy, DebtPayoffResult]:
    """Run every strategy against the same budget (custom only if an order is given)."""
    strategies = [PayoffStrategy.SNOWBALL, PayoffStrategy.AVALANCHE]
    if custom_order is not None:
        strategies.append(PayoffStrategy.CUSTOM)
    return {s: simulate_debt_payoff(liabilities, s, monthly_payment_cents, custom_order) for s in strategies}
