from pfcore.domain.errors import ConstraintViolation, LedgerError, ValidationError  # noqa: F401
from pfcore.domain.models import (  # noqa: F401
    Asset,
    BalanceEntry,
    BudgetActuals,
    BudgetEnvelope,
    BudgetPeriod,
    CashflowTransaction,
    CashSnapshot,
    DebtPayoffResult,
    Direction,
    FinanceAggregate,
    FinanceSummary,
    FinanceTotals,
    Liability,
    PaymentEntry,
    PaymentKind,
    PayoffDebt,
    PayoffMonth,
    PayoffStrategy,
    ProjectionPoint,
    RunwayPoint,
    RunwayProjection,
    SensitivityBaseline,
    SensitivityImpact,
    SensitivityResult,
    SensitivityScenario,
)

__all__ = [
    "Asset",
    "BalanceEntry",
    "BudgetActuals",
    "BudgetEnvelope",
    "BudgetPeriod",
    "CashflowTransaction",
    "CashSnapshot",
    "ConstraintViolation",
    "DebtPayoffResult",
    "Direction",
    "FinanceAggregate",
    "FinanceSummary",
    "FinanceTotals",
    "LedgerError",
    "Liability",
    "PaymentEntry",
    "PaymentKind",
    "PayoffDebt",
    "PayoffMonth",
    "PayoffStrategy",
    "ProjectionPoint",
    "RunwayPoint",
    "RunwayProjection",
    "SensitivityBaseline",
    "SensitivityImpact",
    "SensitivityResult",
    "SensitivityScenario",
    "ValidationError",
]
