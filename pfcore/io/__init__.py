from pfcore.io.ledger import LedgerRecords, load_records  # noqa: F401
from pfcore.io.config import load_payoff_request, load_sensitivity_request  # noqa: F401
from pfcore.io.serialize import dumps, to_payload  # noqa: F401

__all__ = [
    "LedgerRecords",
    "load_records",
    "load_payoff_request",
    "load_sensitivity_request",
    "dumps",
    "to_payload",
]
