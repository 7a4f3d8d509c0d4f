from __future__ import annotations

import dataclasses
from pathlib import Path
from typing import Any, Callable, List, Optional, Set, TypeVar

import pandas as pd

from pfcore.domain.errors import LedgerError
from pfcore.domain.models import (
    Asset,
    BudgetEnvelope,
    BudgetPeriod,
    CashflowTransaction,
    CashSnapshot,
    Direction,
    Liability,
)

ASSET_COLUMNS = {"id", "owner", "name", "category", "value_cents", "is_liquid", "last_updated"}
LIABILITY_COLUMNS = {"id", "owner", "name", "category", "balance_cents", "last_updated"}
TRANSACTION_COLUMNS = {"id", "owner", "description", "amount_cents", "category", "direction", "date"}
SNAPSHOT_COLUMNS = {"owner", "cash_on_hand_cents", "timestamp"}
BUDGET_COLUMNS = {"id", "owner", "name", "category", "period", "target_cents"}

_TRUE = {"true", "1", "yes", "y", "t"}

T = TypeVar("T")


@dataclasses.dataclass
class LedgerRecords:
    assets: List[Asset]
    liabilities: List[Liability]
    transactions: List[CashflowTransaction]
    snapshots: List[CashSnapshot]
    budgets: List[BudgetEnvelope]


def _read(csv_path: str | Path, required: Set[str]) -> pd.DataFrame:
    path = Path(csv_path)
    if not path.exists():
        raise FileNotFoundError(path)

    df = pd.read_csv(path)
    missing = required - set(df.columns)
    if missing:
        raise LedgerError(f"Missing columns in {path.name}: {sorted(missing)}")
    for column in ("id", "owner"):
        if column in df.columns:
            df[column] = df[column].astype(str)
    return df


def _opt(row: pd.Series, column: str) -> Optional[Any]:
    if column not in row.index or pd.isna(row[column]):
        return None
    return row[column]


def _opt_str(row: pd.Series, column: str) -> Optional[str]:
    value = _opt(row, column)
    return None if value is None else str(value)


def _bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in _TRUE
    if pd.isna(value):
        return False
    return bool(value)


def _cents(row: pd.Series, column: str, path_label: str) -> int:
    value = row[column]
    if pd.isna(value):
        raise LedgerError(f"{path_label}: {column} is empty")
    try:
        return int(value)
    except ValueError as exc:
        raise LedgerError(f"{path_label}: {column} is not a whole number of cents: {value!r}") from exc


def _enum(enum_cls: Callable[[str], T], value: Any, path_label: str) -> T:
    try:
        return enum_cls(str(value).strip().lower())
    except ValueError as exc:
        raise LedgerError(f"{path_label}: unexpected value {value!r}") from exc


def load_assets(csv_path: str | Path) -> List[Asset]:
    df = _read(csv_path, ASSET_COLUMNS)
    df["last_updated"] = pd.to_datetime(df["last_updated"])
    assets: List[Asset] = []
    for _, row in df.iterrows():
        assets.append(
            Asset(
                id=str(row["id"]),
                owner=str(row["owner"]),
                name=str(row["name"]),
                category=str(row["category"]),
                value_cents=_cents(row, "value_cents", f"asset {row['id']}"),
                is_liquid=_bool(row["is_liquid"]),
                last_updated=row["last_updated"].to_pydatetime(),
                note=_opt_str(row, "note"),
            )
        )
    return assets


def load_liabilities(csv_path: str | Path) -> List[Liability]:
    df = _read(csv_path, LIABILITY_COLUMNS)
    df["last_updated"] = pd.to_datetime(df["last_updated"])
    liabilities: List[Liability] = []
    for _, row in df.iterrows():
        apr = _opt(row, "apr_percent")
        minimum = _opt(row, "minimum_payment_cents")
        liabilities.append(
            Liability(
                id=str(row["id"]),
                owner=str(row["owner"]),
                name=str(row["name"]),
                category=str(row["category"]),
                balance_cents=_cents(row, "balance_cents", f"liability {row['id']}"),
                last_updated=row["last_updated"].to_pydatetime(),
                apr_percent=None if apr is None else float(apr),
                minimum_payment_cents=None if minimum is None else int(minimum),
                note=_opt_str(row, "note"),
            )
        )
    return liabilities


def load_transactions(csv_path: str | Path) -> List[CashflowTransaction]:
    df = _read(csv_path, TRANSACTION_COLUMNS)
    df["date"] = pd.to_datetime(df["date"]).dt.date
    transactions: List[CashflowTransaction] = []
    for _, row in df.iterrows():
        amount = _cents(row, "amount_cents", f"transaction {row['id']}")
        if amount < 0:
            raise LedgerError(f"transaction {row['id']}: amount_cents must be >= 0, sign goes in direction")
        transactions.append(
            CashflowTransaction(
                id=str(row["id"]),
                owner=str(row["owner"]),
                description=str(row["description"]),
                amount_cents=amount,
                category=str(row["category"]),
                direction=_enum(Direction, row["direction"], f"transaction {row['id']} direction"),
                date=row["date"],
                note=_opt_str(row, "note"),
            )
        )
    return transactions


def load_snapshots(csv_path: str | Path) -> List[CashSnapshot]:
    df = _read(csv_path, SNAPSHOT_COLUMNS)
    df["timestamp"] = pd.to_datetime(df["timestamp"])
    return [
        CashSnapshot(
            owner=str(row["owner"]),
            cash_on_hand_cents=_cents(row, "cash_on_hand_cents", f"snapshot of {row['owner']}"),
            timestamp=row["timestamp"].to_pydatetime(),
        )
        for _, row in df.iterrows()
    ]


def load_budgets(csv_path: str | Path) -> List[BudgetEnvelope]:
    df = _read(csv_path, BUDGET_COLUMNS)
    return [
        BudgetEnvelope(
            id=str(row["id"]),
            owner=str(row["owner"]),
            name=str(row["name"]),
            category=str(row["category"]),
            period=_enum(BudgetPeriod, row["period"], f"budget {row['id']} period"),
            target_cents=_cents(row, "target_cents", f"budget {row['id']}"),
            note=_opt_str(row, "note"),
        )
        for _, row in df.iterrows()
    ]


def _optional(path: Path, loader: Callable[[Path], List[T]]) -> List[T]:
    return loader(path) if path.exists() else []


def load_records(data_dir: str | Path, owner: Optional[str] = None) -> LedgerRecords:
    """
    Load every ledger file under `data_dir`; missing files are empty.

    Files: assets.csv, liabilities.csv, transactions.csv, snapshots.csv,
    budgets.csv. With `owner`, only that owner's rows are kept.
    """
    root = Path(data_dir)
    if not root.is_dir():
        raise FileNotFoundError(root)

    records = LedgerRecords(
        assets=_optional(root / "assets.csv", load_assets),
        liabilities=_optional(root / "liabilities.csv", load_liabilities),
        transactions=_optional(root / "transactions.csv", load_transactions),
        snapshots=_optional(root / "snapshots.csv", load_snapshots),
        budgets=_optional(root / "budgets.csv", load_budgets),
    )
    if owner is None:
        return records
    return LedgerRecords(
        assets=[r for r in records.assets if r.owner == owner],
        liabilities=[r for r in records.liabilities if r.owner == owner],
        transactions=[r for r in records.transactions if r.owner == owner],
        snapshots=[r for r in records.snapshots if r.owner == owner],
        budgets=[r for r in records.budgets if r.owner == owner],
    )
