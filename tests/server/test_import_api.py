"""Tests for bulk import of trades, fund transactions and stocks."""

from fastapi import status
from fastapi.testclient import TestClient

from src.server.database.models.fund_transaction import FundTransaction
from src.server.database.models.position import Position
from src.server.database.models.stock import Stock
from src.server.database.models.trade import Trade


def trade_item(**overrides) -> dict:
    item = {
        "ticker": "AAPL",
        "type": "CSP",
        "strike": 220.0,
        "quantity": 1,
        "entryPrice": 2.8,
        "openedDate": "2025-01-06",
        "expirationDate": "2025-01-17",
    }
    item.update(overrides)
    return item


class TestTradeImport:
    """Tests for POST /api/v1/trades/import."""

    def test_child_listed_before_parent(self, client: TestClient, test_db) -> None:
        """Parents are written first and children point at their new ids."""
        batch = [
            trade_item(
                id=11,
                parentTradeId=10,
                strike=215.0,
                entryPrice=2.4,
                openedDate="2025-01-17",
                expirationDate="2025-01-31",
            ),
            trade_item(
                id=10, status="Rolled", closePrice=1.1, closedDate="2025-01-17"
            ),
        ]

        response = client.post("/api/v1/trades/import", json={"trades": batch})

        assert response.status_code == status.HTTP_200_OK
        result = response.json()["data"]
        assert result["imported"] == 2
        assert result["skipped"] == 0
        assert result["failed"] == []
        assert result["unresolved"] == []
        assert result["total"] == 2

        parent = test_db.query(Trade).filter(Trade.status == "Rolled").one()
        child = test_db.query(Trade).filter(Trade.status == "Open").one()
        assert child.parent_trade_id == parent.id

    def test_reimport_skips_duplicates(self, client: TestClient, test_db) -> None:
        batch = [trade_item(id=1), trade_item(id=2, ticker="MSFT")]
        client.post("/api/v1/trades/import", json={"trades": batch})

        result = client.post("/api/v1/trades/import", json={"trades": batch}).json()["data"]

        assert result["imported"] == 0
        assert result["skipped"] == 2
        assert test_db.query(Trade).count() == 2

    def test_duplicate_within_batch(self, client: TestClient, test_db) -> None:
        batch = [trade_item(id=1), trade_item(id=2)]

        result = client.post("/api/v1/trades/import", json={"trades": batch}).json()["data"]

        assert result["imported"] == 1
        assert result["skipped"] == 1
        assert test_db.query(Trade).count() == 1

    def test_invalid_row_blocks_its_children(self, client: TestClient, test_db) -> None:
        batch = [
            trade_item(id=1, strike=-1),
            trade_item(id=2, parentTradeId=1, openedDate="2025-01-17", expirationDate="2025-01-31"),
            trade_item(id=3, ticker="MSFT"),
        ]

        result = client.post("/api/v1/trades/import", json={"trades": batch}).json()["data"]

        assert result["imported"] == 1
        assert [row["index"] for row in result["failed"]] == [0]
        assert "strike must be a positive number" in result["failed"][0]["errors"]
        assert len(result["unresolved"]) == 1
        assert result["unresolved"][0]["id"] == 2
        assert result["unresolved"][0]["parentTradeId"] == 1
        assert test_db.query(Trade).count() == 1

    def test_parent_may_already_exist(self, client: TestClient, test_db, csp_payload) -> None:
        existing = client.post("/api/v1/trades", json=csp_payload()).json()["data"]
        batch = [
            trade_item(
                id=50,
                parentTradeId=existing["id"],
                openedDate="2025-01-17",
                expirationDate="2025-01-31",
            )
        ]

        result = client.post("/api/v1/trades/import", json={"trades": batch}).json()["data"]

        assert result["imported"] == 1
        child = test_db.query(Trade).filter(Trade.id != existing["id"]).one()
        assert child.parent_trade_id == existing["id"]

    def test_assignments_replayed_after_insert(self, client: TestClient, test_db) -> None:
        """An assigned CC in the batch closes the lot its assigned CSP opened."""
        batch = [
            trade_item(
                id=2,
                parentTradeId=1,
                type="CC",
                strike=231.0,
                entryPrice=1.5,
                openedDate="2025-01-21",
                expirationDate="2025-02-21",
                status="Assigned",
                closedDate="2025-02-21",
            ),
            trade_item(id=1, status="Assigned", closedDate="2025-01-17"),
        ]

        result = client.post("/api/v1/trades/import", json={"trades": batch}).json()["data"]

        assert result["imported"] == 2
        position = test_db.query(Position).one()
        assert position.cost_basis == 21720
        assert position.capital_gain_loss == 138000

    def test_second_call_under_one_put_imported_unlinked(
        self, client: TestClient, test_db
    ) -> None:
        """Two calls exported under the same assigned put both land; the later loses its link."""
        call = dict(
            parentTradeId=1,
            type="CC",
            strike=231.0,
            entryPrice=1.5,
            openedDate="2025-01-21",
            expirationDate="2025-02-21",
        )
        batch = [
            trade_item(id=1, quantity=2, status="Assigned", closedDate="2025-01-17"),
            trade_item(id=2, **call),
            trade_item(id=3, **{**call, "strike": 235.0}),
        ]

        result = client.post("/api/v1/trades/import", json={"trades": batch}).json()["data"]

        assert result["imported"] == 3
        assert result["failed"] == []
        assert [row["index"] for row in result["unlinked"]] == [2]
        assert result["unlinked"][0]["parentTradeId"] == 1

        put = test_db.query(Trade).filter(Trade.type == "CSP").one()
        first_call = test_db.query(Trade).filter(Trade.strike == 23100).one()
        second_call = test_db.query(Trade).filter(Trade.strike == 23500).one()
        assert first_call.parent_trade_id == put.id
        assert second_call.parent_trade_id is None

    def test_account_forced_on_every_row(self, client: TestClient, test_db, account) -> None:
        batch = [trade_item(id=1), trade_item(id=2, ticker="MSFT")]

        client.post(
            "/api/v1/trades/import", json={"trades": batch, "accountId": account.id}
        )

        assert {t.account_id for t in test_db.query(Trade).all()} == {account.id}


class TestFlatImports:
    """Tests for fund transaction and stock imports."""

    def test_fund_transactions_import(self, client: TestClient, test_db, account) -> None:
        response = client.post(
            "/api/v1/fund-transactions/import",
            json={
                "accountId": account.id,
                "transactions": [
                    {"type": "deposit", "amount": 10000, "date": "2025-01-02"},
                    {"type": "bonus", "amount": 5, "date": "2025-01-03"},
                    {"type": "fee", "amount": 1.25, "date": "2025-01-04"},
                ],
            },
        )

        result = response.json()["data"]
        assert result["imported"] == 2
        assert [row["index"] for row in result["failed"]] == [1]
        assert sorted(t.amount for t in test_db.query(FundTransaction).all()) == [125, 1000000]

    def test_stocks_import(self, client: TestClient, test_db, account) -> None:
        response = client.post(
            "/api/v1/stocks/import",
            json={
                "accountId": account.id,
                "stocks": [
                    {"ticker": "vti", "shares": 10, "costBasis": 250, "acquiredDate": "2025-02-03"},
                    {"ticker": "VTI", "shares": 0, "costBasis": 250, "acquiredDate": "2025-02-03"},
                ],
            },
        )

        result = response.json()["data"]
        assert result["imported"] == 1
        assert len(result["failed"]) == 1
        stock = test_db.query(Stock).one()
        assert stock.ticker == "VTI"
        assert stock.cost_basis == 25000
