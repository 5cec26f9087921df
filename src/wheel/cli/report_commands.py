"""Read-only report commands: statistics, chains and portfolio totals."""

from datetime import datetime
from typing import Optional

import click

from src.server.models.portfolio import MonthlyRowResponse, PortfolioStatsResponse
from src.server.models.stats import ChainResponse, TradeStatsResponse
from src.server.services.chain_service import CHAIN_STATUSES, ChainService
from src.server.services.portfolio_service import PortfolioService
from src.server.services.stats_service import StatsService
from src.wheel.exceptions import ValidationFailed
from src.wheel.money import format_dollars

from .utils import (
    get_session,
    print_chain,
    print_error,
    print_json,
    print_monthly,
    print_stats,
    wants_json,
)

account_option = click.option(
    "--account-id", type=int, default=None, help="Limit to one account"
)


@click.command()
@account_option
@click.pass_context
def stats(ctx: click.Context, account_id: Optional[int]) -> None:
    """Show trade statistics."""
    result = StatsService(get_session(ctx)).trade_statistics(account_id=account_id)
    if wants_json(ctx):
        print_json(TradeStatsResponse.from_stats(result).model_dump(by_alias=True))
        return
    print_stats(result, verbose=ctx.obj.verbose)


@click.command()
@account_option
@click.option("--ticker", "-t", default=None, help="Only chains touching this ticker")
@click.option(
    "--status",
    type=click.Choice(CHAIN_STATUSES),
    default="all",
    help="Filter by resolution",
)
@click.pass_context
def chains(
    ctx: click.Context, account_id: Optional[int], ticker: Optional[str], status: str
) -> None:
    """List roll chains."""
    found = ChainService(get_session(ctx)).list_chains(
        account_id=account_id, ticker=ticker, status=status
    )
    if wants_json(ctx):
        print_json([ChainResponse.from_chain(c).model_dump(by_alias=True) for c in found])
        return
    if not found:
        click.echo("No chains found.")
        return
    for chain in found:
        print_chain(chain, verbose=ctx.obj.verbose)


@click.command()
@account_option
@click.option("--start", type=click.DateTime(formats=["%Y-%m-%d"]), default=None)
@click.option("--end", type=click.DateTime(formats=["%Y-%m-%d"]), default=None)
@click.option("--monthly", is_flag=True, help="Show the month-by-month breakdown")
@click.pass_context
def portfolio(
    ctx: click.Context,
    account_id: Optional[int],
    start: Optional[datetime],
    end: Optional[datetime],
    monthly: bool,
) -> None:
    """Show portfolio totals for a date range."""
    service = PortfolioService(get_session(ctx))
    start_day = start.date() if start else None
    end_day = end.date() if end else None

    try:
        result = service.stats(account_id=account_id, start=start_day, end=end_day)
        rows = service.monthly(account_id=account_id, start=start_day, end=end_day) if monthly else []
    except ValidationFailed as e:
        print_error("; ".join(e.errors))
        raise SystemExit(1)

    if wants_json(ctx):
        data = PortfolioStatsResponse.from_stats(result).model_dump(by_alias=True)
        if monthly:
            data["monthly"] = [MonthlyRowResponse.from_row(r).model_dump(by_alias=True) for r in rows]
        print_json(data)
        return

    summary = result.summary
    click.echo()
    click.secho("=== Portfolio ===", bold=True)
    click.echo(f"Net Deposited:    {format_dollars(summary.cash.net_deposited)}")
    click.echo(f"Cash Balance:     {format_dollars(summary.cash.cash_balance)}")
    click.echo(f"Options P/L:      {format_dollars(summary.options_pnl)}")
    click.echo(f"Stock Gains:      {format_dollars(summary.stock_gains)}")
    click.echo(f"Income:           {format_dollars(summary.cash.income)}")
    click.echo(f"Total P/L:        {format_dollars(summary.total_pnl)}")
    click.echo(f"Rate of Return:   {summary.rate_of_return:.2f}%")
    click.echo(f"Unrealized:       {format_dollars(result.unrealized.total)}")
    if result.unrealized.missing_tickers:
        click.echo(f"No price for:     {', '.join(result.unrealized.missing_tickers)}")

    if monthly:
        click.echo()
        print_monthly(rows)
