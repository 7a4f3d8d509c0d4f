from pfcore.services.aggregation import aggregate  # noqa: F401
from pfcore.services.budget import enrich_budget_envelope, enrich_budget_envelopes  # noqa: F401
from pfcore.services.payoff import compare_strategies, simulate_debt_payoff  # noqa: F401
from pfcore.services.runway import project_runway  # noqa: F401
from pfcore.services.sensitivity import project_sensitivity  # noqa: F401

__all__ = [
    "aggregate",
    "simulate_debt_payoff",
    "compare_strategies",
    "project_sensitivity",
    "enrich_budget_envelope",
    "enrich_budget_envelopes",
    "project_runway",
]
