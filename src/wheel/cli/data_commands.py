"""Database setup and bulk import commands."""

import json
from pathlib import Path
from typing import Any, Optional

import click
from pydantic import ValidationError

from src.server.models.fund_transaction import FundTransactionCreate
from src.server.models.stock import StockCreate
from src.server.models.trade import TradeImportItem
from src.server.services.account_service import AccountService
from src.server.services.import_service import ImportService
from src.wheel.exceptions import ValidationFailed
from src.wheel.importer import ImportResult

from .utils import get_session, print_error, print_json, print_success, print_warning, wants_json


@click.command("init-db")
@click.pass_context
def init_db(ctx: click.Context) -> None:
    """Create the database tables and default settings."""
    # Tables are created when the group opens the database.
    print_success(f"Database ready at {ctx.obj.db_path}")


@click.command("add-account")
@click.argument("name")
@click.pass_context
def add_account(ctx: click.Context, name: str) -> None:
    """Create an account to import into."""
    try:
        account = AccountService(get_session(ctx)).create_account({"name": name})
    except ValidationFailed as e:
        print_error("; ".join(e.errors))
        raise SystemExit(1)
    print_success(f"Created account {account.id}: {account.name}")


def _load_batches(path: Path) -> dict[str, list[dict[str, Any]]]:
    """
    Read an export file into payload lists.

    The file holds either a bare list of trades or an object with any of
    ``trades``, ``fundTransactions`` and ``stocks``.
    """
    raw = json.loads(path.read_text())
    if isinstance(raw, list):
        raw = {"trades": raw}
    if not isinstance(raw, dict):
        raise click.BadParameter("expected a JSON list or object", param_hint="FILE")

    def parse(key: str, model) -> list[dict[str, Any]]:
        return [
            model.model_validate(item).model_dump(exclude_unset=True)
            for item in raw.get(key) or []
        ]

    return {
        "trades": parse("trades", TradeImportItem),
        "fund_transactions": parse("fundTransactions", FundTransactionCreate),
        "stocks": parse("stocks", StockCreate),
    }


def _report(label: str, result: ImportResult, verbose: bool) -> None:
    click.echo(
        f"{label}: {result.imported} imported, {result.skipped} skipped, "
        f"{len(result.failed)} failed of {result.total}"
    )
    for row in result.failed:
        print_warning(f"row {row['index']}: {'; '.join(row['errors'])}")
    for row in result.unresolved + result.unlinked:
        print_warning(f"row {row['index']}: {row['reason']}")
    if verbose and result.skipped:
        click.echo(f"  {result.skipped} row(s) matched existing data")


@click.command("import-trades")
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--account-id", type=int, default=None, help="Assign every row to this account")
@click.pass_context
def import_trades(ctx: click.Context, file: Path, account_id: Optional[int]) -> None:
    """
    Import trades, fund transactions and stocks from a JSON export.

    Trades are written parents-first and duplicates are skipped.
    """
    try:
        batches = _load_batches(file)
    except (json.JSONDecodeError, ValidationError) as e:
        print_error(f"Could not read {file}: {e}")
        raise SystemExit(1)

    service = ImportService(get_session(ctx))
    results = {
        "trades": service.import_trades(batches["trades"], account_id=account_id),
        "fundTransactions": service.import_fund_transactions(
            batches["fund_transactions"], account_id=account_id
        ),
        "stocks": service.import_stocks(batches["stocks"], account_id=account_id),
    }

    if wants_json(ctx):
        print_json(
            {
                key: {
                    "imported": r.imported,
                    "skipped": r.skipped,
                    "failed": r.failed,
                    "unresolved": r.unresolved,
                    "unlinked": r.unlinked,
                    "total": r.total,
                }
                for key, r in results.items()
            }
        )
        return

    _report("Trades", results["trades"], ctx.obj.verbose)
    if results["fundTransactions"].total:
        _report("Fund transactions", results["fundTransactions"], ctx.obj.verbose)
    if results["stocks"].total:
        _report("Stocks", results["stocks"], ctx.obj.verbose)
