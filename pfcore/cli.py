from __future__ import annotations

import datetime as dt
from pathlib import Path
from typing import Any, Optional

import typer
from rich.console import Console
from rich.table import Table

from pfcore.domain.errors import ValidationError
from pfcore.domain.models import DebtPayoffResult, FinanceAggregate
from pfcore.io import config as config_io
from pfcore.io import ledger as ledger_io
from pfcore.io.serialize import dumps
from pfcore.log import configure_logging
from pfcore.services import aggregation, budget, payoff, runway, sensitivity
from pfcore.services import windows

app = typer.Typer(help="Personal finance analytics: summaries, debt payoff, sensitivity, budgets, runway.")

DATA_DIR_HELP = "Directory with assets.csv, liabilities.csv, transactions.csv, snapshots.csv, budgets.csv"


@app.callback()
def main(
    log_level: Optional[str] = typer.Option(None, help="Log level (defaults to PFCORE_LOG_LEVEL or WARNING)"),
    log_json: Optional[bool] = typer.Option(None, "--log-json/--no-log-json", help="Emit JSON log lines"),
):
    configure_logging(level=log_level, json=log_json)


def _as_of(value: Optional[dt.datetime]) -> dt.date:
    return value.date() if value is not None else dt.date.today()


def _emit(payload: Any, out: Optional[Path], label: str) -> None:
    text = dumps(payload)
    if out:
        out.parent.mkdir(parents=True, exist_ok=True)
        out.write_text(text + "\n", encoding="utf-8")
        typer.echo(f"{label} written to {out}")
    else:
        typer.echo(text)


def _reject(exc: ValidationError) -> None:
    err = Console(stderr=True)
    err.print("[bold red]Validation failed[/bold red]")
    for issue in exc.issues:
        err.print(f"  [red]{issue.field}[/red] ({issue.constraint}): {issue.message}")
    raise typer.Exit(code=2)


def _fmt_cents(cents: Optional[int]) -> str:
    return "-" if cents is None else f"{cents / 100:,.2f}"


def _print_summary(result: FinanceAggregate) -> None:
    table = Table(title="Finance summary", show_header=False)
    s, t = result.summary, result.totals
    table.add_row("Net worth", _fmt_cents(s.net_worth_cents))
    table.add_row("Liquid net", _fmt_cents(s.liquid_net_cents))
    table.add_row("Cash on hand", _fmt_cents(s.cash_on_hand_cents))
    table.add_row("Runway (months)", "-" if s.runway_months is None else f"{s.runway_months:.1f}")
    table.add_row("DSCR", "-" if s.dscr is None else f"{s.dscr:.2f}")
    table.add_row("Debt utilization", "-" if s.debt_utilization is None else f"{s.debt_utilization:.0%}")
    table.add_row(f"Inflow ({t.window_days}d)", _fmt_cents(t.inflow_cents))
    table.add_row(f"Outflow ({t.window_days}d)", _fmt_cents(t.outflow_cents))
    table.add_row("Monthly burn", _fmt_cents(t.monthly_burn_cents))
    Console().print(table)


def _print_payoff(result: DebtPayoffResult) -> None:
    console = Console()
    table = Table(title=f"Payoff order ({result.strategy.value})")
    table.add_column("#", justify="right")
    table.add_column("Debt")
    table.add_column("Balance", justify="right")
    table.add_column("APR", justify="right")
    for idx, debt in enumerate(result.debts, start=1):
        apr = "-" if debt.apr_percent is None else f"{debt.apr_percent:.2f}%"
        table.add_row(str(idx), debt.name, _fmt_cents(debt.balance_cents), apr)
    console.print(table)
    months = f"{result.months_to_payoff} months"
    if result.hit_iteration_cap:
        months = f"[yellow]not paid off after {months}[/yellow]"
    console.print(f"Debt free in: [bold]{months}[/bold]")
    console.print(f"Interest paid: [bold]{_fmt_cents(result.total_interest_paid_cents)}[/bold]")
    console.print(f"Total paid: [bold]{_fmt_cents(result.total_paid_cents)}[/bold]")


@app.command()
def summary(
    data_dir: Path = typer.Option(..., help=DATA_DIR_HELP),
    owner: Optional[str] = typer.Option(None, help="Only use records of this owner"),
    as_of: Optional[dt.datetime] = typer.Option(None, formats=["%Y-%m-%d"], help="Evaluation date (default today)"),
    pretty: bool = typer.Option(False, help="Print a table instead of JSON"),
    out: Optional[Path] = typer.Option(None, help="Output path for summary JSON"),
):
    """Net worth, runway, DSCR and debt utilization."""
    day = _as_of(as_of)
    records = ledger_io.load_records(data_dir, owner=owner)
    since = windows.cashflow_window_start(day)
    result = aggregation.aggregate(
        records.assets,
        records.liabilities,
        windows.transactions_since(records.transactions, since, until=day),
        aggregation.latest_snapshot(records.snapshots, as_of=day),
    )
    if pretty and not out:
        _print_summary(result)
        return
    _emit(result, out, "Summary")


@app.command(name="payoff")
def payoff_command(
    data_dir: Path = typer.Option(..., help=DATA_DIR_HELP),
    owner: Optional[str] = typer.Option(None, help="Only use records of this owner"),
    strategy: str = typer.Option("avalanche", help="snowball|avalanche|custom"),
    monthly_payment: Optional[int] = typer.Option(None, help="Monthly payment budget in cents"),
    custom_order: Optional[str] = typer.Option(None, help="Comma-separated liability ids for custom strategy"),
    request: Optional[Path] = typer.Option(None, help="Payoff request JSON (overrides the options above)"),
    compare: bool = typer.Option(False, help="Run every strategy against the same budget"),
    pretty: bool = typer.Option(False, help="Print a table instead of JSON"),
    out: Optional[Path] = typer.Option(None, help="Output path for payoff JSON"),
):
    """Simulate month-by-month debt payoff."""
    if request:
        req = config_io.load_payoff_request(request)
    else:
        order = [part.strip() for part in custom_order.split(",") if part.strip()] if custom_order else None
        req = config_io.PayoffRequest(strategy=strategy, monthly_payment_cents=monthly_payment, custom_order=order)

    records = ledger_io.load_records(data_dir, owner=owner)
    try:
        if compare:
            result = payoff.compare_strategies(records.liabilities, req.monthly_payment_cents, req.custom_order)
        else:
            result = payoff.simulate_debt_payoff(
                records.liabilities, req.strategy, req.monthly_payment_cents, req.custom_order
            )
    except ValidationError as exc:
        _reject(exc)
        return

    if pretty and not out:
        for item in result.values() if compare else [result]:
            _print_payoff(item)
        return
    _emit(result, out, "Payoff simulation")


@app.command(name="sensitivity")
def sensitivity_command(
    data_dir: Path = typer.Option(..., help=DATA_DIR_HELP),
    owner: Optional[str] = typer.Option(None, help="Only use records of this owner"),
    as_of: Optional[dt.datetime] = typer.Option(None, formats=["%Y-%m-%d"], help="Evaluation date (default today)"),
    income_change: float = typer.Option(0.0, help="Income change in percent (-100..500)"),
    expense_change: float = typer.Option(0.0, help="Expense change in percent (-100..500)"),
    months: int = typer.Option(sensitivity.DEFAULT_HORIZON_MONTHS, help="Projection horizon in months"),
    request: Optional[Path] = typer.Option(None, help="Sensitivity request JSON (overrides the options above)"),
    out: Optional[Path] = typer.Option(None, help="Output path for sensitivity JSON"),
):
    """Project liquid cash under shifted income and expenses."""
    if request:
        req = config_io.load_sensitivity_request(request)
    else:
        req = config_io.SensitivityRequest(
            income_change_percent=income_change,
            expense_change_percent=expense_change,
            time_horizon_months=months,
        )

    day = _as_of(as_of)
    records = ledger_io.load_records(data_dir, owner=owner)
    since = windows.history_window_start(day, sensitivity.HISTORY_MONTHS)
    try:
        result = sensitivity.project_sensitivity(
            aggregation.liquid_assets_cents(records.assets),
            windows.transactions_since(records.transactions, since, until=day),
            req.income_change_percent,
            req.expense_change_percent,
            req.time_horizon_months,
        )
    except ValidationError as exc:
        _reject(exc)
        return
    _emit(result, out, "Sensitivity projection")


@app.command()
def budgets(
    data_dir: Path = typer.Option(..., help=DATA_DIR_HELP),
    owner: Optional[str] = typer.Option(None, help="Only use records of this owner"),
    as_of: Optional[dt.datetime] = typer.Option(None, formats=["%Y-%m-%d"], help="Evaluation date (default today)"),
    out: Optional[Path] = typer.Option(None, help="Output path for budget JSON"),
):
    """Period-to-date spend and variance for every budget envelope."""
    records = ledger_io.load_records(data_dir, owner=owner)
    result = budget.enrich_budget_envelopes(records.budgets, records.transactions, _as_of(as_of))
    _emit(result, out, "Budget actuals")


@app.command(name="runway")
def runway_command(
    data_dir: Path = typer.Option(..., help=DATA_DIR_HELP),
    owner: Optional[str] = typer.Option(None, help="Only use records of this owner"),
    as_of: Optional[dt.datetime] = typer.Option(None, formats=["%Y-%m-%d"], help="Evaluation date (default today)"),
    out: Optional[Path] = typer.Option(None, help="Output path for runway JSON"),
):
    """Runway at the trailing six-month average net flow."""
    day = _as_of(as_of)
    records = ledger_io.load_records(data_dir, owner=owner)
    since = windows.history_window_start(day, runway.LOOKBACK_MONTHS)
    result = runway.project_runway(
        aggregation.liquid_assets_cents(records.assets),
        windows.transactions_since(records.transactions, since, until=day),
        day,
    )
    _emit(result, out, "Runway projection")


if __name__ == "__main__":
    app()
