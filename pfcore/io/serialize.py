from __future__ import annotations

import dataclasses
import datetime as dt
import enum
import json
from typing import Any


def to_payload(value: Any) -> Any:
    """JSON-ready copy of a result: dataclasses to dicts, enums to values, dates to ISO."""
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {f.name: to_payload(getattr(value, f.name)) for f in dataclasses.fields(value)}
    if isinstance(value, enum.Enum):
        return value.value
    if isinstance(value, (dt.date, dt.datetime)):
        return value.isoformat()
    if isinstance(value, dict):
        return {to_payload(k): to_payload(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_payload(v) for v in value]
    return value


def dumps(value: Any, indent: int = 2) -> str:
    return json.dumps(to_payload(value), indent=indent, sort_keys=True)
