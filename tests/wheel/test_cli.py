"""Tests for wheel tracker CLI commands."""

import json
import os
import tempfile

import pytest
from click.testing import CliRunner

from src.wheel.cli import cli


@pytest.fixture
def temp_db() -> str:
    """Create a temporary database file."""
    fd, path = tempfile.mkstemp(suffix=".db")
    os.close(fd)
    yield path
    if os.path.exists(path):
        os.unlink(path)


@pytest.fixture
def runner() -> CliRunner:
    """Create a CLI test runner."""
    return CliRunner()


@pytest.fixture
def export_file(tmp_path) -> str:
    """An export with a rolled chain (child listed first) and cash flows."""
    data = {
        "trades": [
            {
                "id": 2,
                "parentTradeId": 1,
                "ticker": "AAPL",
                "type": "CSP",
                "strike": 215,
                "entryPrice": 2.4,
                "openedDate": "2025-01-17",
                "expirationDate": "2025-01-31",
                "status": "Expired",
                "closedDate": "2025-01-31",
            },
            {
                "id": 1,
                "ticker": "AAPL",
                "type": "CSP",
                "strike": 220,
                "entryPrice": 2.8,
                "closePrice": 1.1,
                "openedDate": "2025-01-06",
                "expirationDate": "2025-01-17",
                "status": "Rolled",
                "closedDate": "2025-01-17",
            },
        ],
        "fundTransactions": [
            {"type": "deposit", "amount": 10000, "date": "2025-01-02"},
            {"type": "dividend", "amount": 12.5, "date": "2025-01-15"},
        ],
    }
    path = tmp_path / "export.json"
    path.write_text(json.dumps(data))
    return str(path)


def import_with_account(runner: CliRunner, temp_db: str, export_file: str):
    runner.invoke(cli, ["--db", temp_db, "add-account", "Brokerage"])
    return runner.invoke(
        cli, ["--db", temp_db, "import-trades", export_file, "--account-id", "1"]
    )


class TestInitCommand:
    """Tests for 'init-db' and 'add-account'."""

    def test_init_db(self, runner: CliRunner, temp_db: str) -> None:
        result = runner.invoke(cli, ["--db", temp_db, "init-db"])

        assert result.exit_code == 0
        assert "Database ready" in result.output

    def test_add_account(self, runner: CliRunner, temp_db: str) -> None:
        result = runner.invoke(cli, ["--db", temp_db, "add-account", "IRA"])

        assert result.exit_code == 0
        assert "Created account 1: IRA" in result.output

    def test_add_account_blank_name(self, runner: CliRunner, temp_db: str) -> None:
        result = runner.invoke(cli, ["--db", temp_db, "add-account", "  "])

        assert result.exit_code == 1
        assert "name must be a non-empty string" in result.output


class TestImportCommand:
    """Tests for 'import-trades'."""

    def test_import_reports_counts(
        self, runner: CliRunner, temp_db: str, export_file: str
    ) -> None:
        result = import_with_account(runner, temp_db, export_file)

        assert result.exit_code == 0, result.output
        assert "Trades: 2 imported, 0 skipped, 0 failed of 2" in result.output
        assert "Fund transactions: 2 imported" in result.output

    def test_reimport_skips(self, runner: CliRunner, temp_db: str, export_file: str) -> None:
        import_with_account(runner, temp_db, export_file)

        result = runner.invoke(
            cli,
            ["--db", temp_db, "--json", "import-trades", export_file, "--account-id", "1"],
        )

        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["trades"]["imported"] == 0
        assert data["trades"]["skipped"] == 2

    def test_bare_list_without_account(self, runner: CliRunner, temp_db: str, tmp_path) -> None:
        path = tmp_path / "trades.json"
        path.write_text(
            json.dumps(
                [
                    {
                        "ticker": "MSFT",
                        "type": "CSP",
                        "strike": 400,
                        "entryPrice": 3,
                        "openedDate": "2025-01-06",
                        "expirationDate": "2025-01-17",
                    }
                ]
            )
        )

        result = runner.invoke(cli, ["--db", temp_db, "import-trades", str(path)])

        assert result.exit_code == 0
        assert "Trades: 1 imported" in result.output

    def test_unreadable_file(self, runner: CliRunner, temp_db: str, tmp_path) -> None:
        path = tmp_path / "broken.json"
        path.write_text("{not json")

        result = runner.invoke(cli, ["--db", temp_db, "import-trades", str(path)])

        assert result.exit_code == 1
        assert "Could not read" in result.output


class TestReportCommands:
    """Tests for 'stats', 'chains' and 'portfolio'."""

    def test_stats_json(self, runner: CliRunner, temp_db: str, export_file: str) -> None:
        import_with_account(runner, temp_db, export_file)

        result = runner.invoke(cli, ["--db", temp_db, "--json", "stats"])

        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["totalPnL"] == 410.0
        assert data["winRate"] == 100.0
        assert data["totalRolled"] == 1

    def test_stats_text(self, runner: CliRunner, temp_db: str, export_file: str) -> None:
        import_with_account(runner, temp_db, export_file)

        result = runner.invoke(cli, ["--db", temp_db, "stats"])

        assert result.exit_code == 0
        assert "Total P/L:        $410.00" in result.output

    def test_chains(self, runner: CliRunner, temp_db: str, export_file: str) -> None:
        import_with_account(runner, temp_db, export_file)

        result = runner.invoke(cli, ["--db", temp_db, "-v", "chains"])

        assert result.exit_code == 0
        assert "2 trade(s)" in result.output
        assert "[WIN]" in result.output

    def test_chains_empty(self, runner: CliRunner, temp_db: str) -> None:
        result = runner.invoke(cli, ["--db", temp_db, "chains", "--status", "open"])

        assert result.exit_code == 0
        assert "No chains found." in result.output

    def test_portfolio_monthly(self, runner: CliRunner, temp_db: str, export_file: str) -> None:
        import_with_account(runner, temp_db, export_file)

        result = runner.invoke(cli, ["--db", temp_db, "--json", "portfolio", "--monthly"])

        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["netDeposited"] == 10000.0
        assert data["totalPnL"] == 422.5
        assert data["monthly"] == [
            {"month": "2025-01", "options": 410.0, "stocks": 0.0, "income": 12.5}
        ]

    def test_portfolio_bad_window(self, runner: CliRunner, temp_db: str) -> None:
        result = runner.invoke(
            cli, ["--db", temp_db, "portfolio", "--start", "2025-03-01", "--end", "2025-01-01"]
        )

        assert result.exit_code == 1
        assert "end_date must be on or after start_date" in result.output
