"""
Click CLI implementation for the wheel tracker.

Commands work directly against the SQLite database through the same
services the API uses.
"""

import logging
from dataclasses import dataclass
from pathlib import Path

import click
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from src.server.config import settings
from src.server.database.session import create_tables

from .data_commands import add_account, import_trades, init_db
from .report_commands import chains, portfolio, stats

logger = logging.getLogger(__name__)


@dataclass
class CLIContext:
    """Context object passed to all CLI commands.

    Attributes:
        db_path: SQLite database file
        session: Open database session
        verbose: Verbose output enabled
        json: JSON output enabled
    """

    db_path: Path
    session: Session
    verbose: bool
    json: bool


@click.group()
@click.option(
    "--db",
    default=settings.database_path,
    help="Database file path",
    envvar="WHEEL_TRACKER_DATABASE_PATH",
)
@click.option("--verbose", "-v", is_flag=True, help="Verbose output")
@click.option("--json", "output_json", is_flag=True, help="JSON output (where supported)")
@click.pass_context
def cli(ctx: click.Context, db: str, verbose: bool, output_json: bool) -> None:
    """
    Wheel Tracker - Record option trades and track wheel performance.

    Trades, roll chains, assigned shares and cash flows live in one
    SQLite database shared with the API server.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    db_path = Path(db).expanduser()
    db_path.parent.mkdir(parents=True, exist_ok=True)
    engine = create_engine(f"sqlite:///{db_path}", connect_args={"check_same_thread": False})
    create_tables(engine)
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()

    def close() -> None:
        session.close()
        engine.dispose()

    ctx.call_on_close(close)
    ctx.obj = CLIContext(db_path=db_path, session=session, verbose=verbose, json=output_json)
    if verbose:
        click.echo(f"Database: {db_path}", err=True)


# Register data commands
cli.add_command(init_db)
cli.add_command(add_account)
cli.add_command(import_trades)

# Register report commands
cli.add_command(stats)
cli.add_command(chains)
cli.add_command(portfolio)


def main() -> None:
    """Main entry point for the CLI."""
    cli()


__all__ = ["cli", "main", "CLIContext"]
