"""
CLI utility functions for the wheel tracker.

This module provides helpers for output formatting and context access.
"""

import json
from typing import Any

import click

from ..aggregation import MonthlyRow, TradeStatistics
from ..models import Chain
from ..money import format_dollars


def get_session(ctx: click.Context):
    """Get the database session from context."""
    return ctx.obj.session


def wants_json(ctx: click.Context) -> bool:
    return ctx.obj.json


def print_error(message: str) -> None:
    """Print error message to stderr."""
    click.secho(f"Error: {message}", fg="red", err=True)


def print_success(message: str) -> None:
    """Print success message."""
    click.secho(message, fg="green")


def print_warning(message: str) -> None:
    """Print warning message."""
    click.secho(f"Warning: {message}", fg="yellow")


def print_json(data: Any) -> None:
    click.echo(json.dumps(data, indent=2, default=str))


def print_stats(stats: TradeStatistics, verbose: bool = False) -> None:
    """Print trade statistics in a formatted way."""
    click.echo()
    click.secho("=== Trade Statistics ===", bold=True)
    click.echo(f"Total P/L:        {format_dollars(stats.total_pnl)}")
    click.echo(f"Premium:          {format_dollars(stats.total_premium_collected)}")
    click.echo(f"Trades:           {stats.total_trades} ({stats.open_trades_count} open)")
    click.echo(f"Capital at Risk:  {format_dollars(stats.capital_at_risk)}")
    click.echo(
        f"Win Rate:         {stats.win_rate:.1f}% "
        f"({stats.winning_chains}/{stats.resolved_chains} chains)"
    )
    click.echo(f"Avg ROI:          {stats.avg_roi:.2f}%")
    if stats.best_ticker:
        ticker, pnl = stats.best_ticker
        click.echo(f"Best Ticker:      {ticker} ({format_dollars(pnl)})")
    click.echo(f"Capital G/L:      {format_dollars(stats.realized_capital_gl)}")
    click.echo(f"P/L incl. Stock:  {format_dollars(stats.total_pnl_with_capital_gains)}")

    if verbose and stats.monthly_pnl:
        click.echo()
        click.secho("Monthly P/L:", bold=True)
        for month, pnl in stats.monthly_pnl.items():
            click.echo(f"  {month}  {format_dollars(pnl):>14}")


def print_chain(chain: Chain, verbose: bool = False) -> None:
    """Print one roll chain on a line, with its trades when verbose."""
    state = "WIN" if chain.winning else ("LOSS" if chain.resolved else "ACTIVE")
    click.echo(
        f"#{chain.root_id:<5} {'/'.join(chain.tickers):<10} {len(chain.trades)} trade(s)  "
        f"P/L {format_dollars(chain.pnl):>12}  ROI {chain.roi:6.2f}%  "
        f"{chain.final_status.value:<8} [{state}]"
    )
    if verbose:
        for trade in chain.trades:
            click.echo(
                f"    {trade.id:<5} {trade.type.value} {format_dollars(trade.strike)} "
                f"x{trade.quantity} {trade.opened_date} -> {trade.expiration_date} "
                f"{trade.status.value}"
            )


def print_monthly(rows: list[MonthlyRow]) -> None:
    click.echo(f"{'Month':<8} {'Options':>14} {'Stocks':>14} {'Income':>14}")
    for row in rows:
        click.echo(
            f"{row.month:<8} {format_dollars(row.options):>14} "
            f"{format_dollars(row.stocks):>14} {format_dollars(row.income):>14}"
        )
