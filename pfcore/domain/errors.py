from __future__ import annotations

import dataclasses
from typing import Dict, List, Sequence


@dataclasses.dataclass(frozen=True)
class ConstraintViolation:
    field: str
    constraint: str
    message: str


class ValidationError(ValueError):
    """Raised before any computation when request inputs break a rule."""

    def __init__(self, issues: Sequence[ConstraintViolation]):
        self.issues: List[ConstraintViolation] = list(issues)
        super().__init__("; ".join(f"{i.field}: {i.message}" for i in self.issues))

    def to_dict(self) -> Dict[str, object]:
        return {
            "error": "Validation failed",
            "issues": [dataclasses.asdict(issue) for issue in self.issues],
        }


class LedgerError(ValueError):
    """A ledger file is readable but its contents are malformed."""
