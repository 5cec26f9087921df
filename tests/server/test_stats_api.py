"""Tests for roll chains and trade statistics endpoints."""

import pytest
from fastapi import status
from fastapi.testclient import TestClient


@pytest.fixture
def rolled_chain(client: TestClient, csp_payload) -> list[dict]:
    """Three-trade chain: rolled twice, then expired."""
    root = client.post("/api/v1/trades", json=csp_payload()).json()["data"]
    first = client.post(
        "/api/v1/trades/roll",
        json={
            "originalTradeId": root["id"],
            "closePrice": 1.1,
            "newTrade": {
                "strike": 215.0,
                "entryPrice": 2.4,
                "openedDate": "2025-01-17",
                "expirationDate": "2025-01-31",
            },
        },
    ).json()["data"]["newTrade"]
    second = client.post(
        "/api/v1/trades/roll",
        json={
            "originalTradeId": first["id"],
            "closePrice": 1.0,
            "newTrade": {
                "strike": 210.0,
                "entryPrice": 2.0,
                "openedDate": "2025-01-31",
                "expirationDate": "2025-02-14",
            },
        },
    ).json()["data"]["newTrade"]
    client.put(
        f"/api/v1/trades/{second['id']}",
        json={"status": "Expired", "closedDate": "2025-02-14"},
    )
    return [root, first, second]


class TestChains:
    """Tests for /api/v1/chains."""

    def test_three_trade_chain(self, client: TestClient, rolled_chain) -> None:
        chains = client.get("/api/v1/chains").json()["data"]

        assert len(chains) == 1
        chain = chains[0]
        assert chain["rootId"] == rolled_chain[0]["id"]
        assert chain["tradeIds"] == [t["id"] for t in rolled_chain]
        assert chain["pnl"] == 510.0
        assert chain["collateral"] == 64500.0
        assert chain["roi"] == pytest.approx(510 / 64500 * 100)
        assert chain["finalStatus"] == "Expired"
        assert chain["resolved"] is True
        assert chain["winning"] is True

    def test_chain_for_any_member(self, client: TestClient, rolled_chain) -> None:
        middle = rolled_chain[1]["id"]

        response = client.get(f"/api/v1/chains/{middle}")

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["data"]["rootId"] == rolled_chain[0]["id"]

    def test_chain_status_filter(self, client: TestClient, rolled_chain, csp_payload) -> None:
        client.post("/api/v1/trades", json=csp_payload(ticker="MSFT"))

        open_chains = client.get("/api/v1/chains", params={"status": "open"}).json()["data"]
        resolved = client.get("/api/v1/chains", params={"status": "resolved"}).json()["data"]

        assert [c["ticker"] for c in open_chains] == ["MSFT"]
        assert [c["ticker"] for c in resolved] == ["AAPL"]

    def test_chain_for_missing_trade(self, client: TestClient) -> None:
        assert client.get("/api/v1/chains/99").status_code == status.HTTP_404_NOT_FOUND


class TestStats:
    """Tests for GET /api/v1/stats."""

    def test_empty_stats(self, client: TestClient) -> None:
        data = client.get("/api/v1/stats").json()["data"]

        assert data["totalPnL"] == 0
        assert data["totalTrades"] == 0
        assert data["winRate"] == 0
        assert data["avgRoi"] == 0
        assert data["bestTicker"] is None

    def test_win_rate_over_resolved_chains(self, client: TestClient, csp_payload) -> None:
        """Two of three resolved chains made money."""
        client.post(
            "/api/v1/trades", json=csp_payload(status="Expired", closedDate="2025-01-17")
        )
        client.post(
            "/api/v1/trades",
            json=csp_payload(
                ticker="MSFT",
                entryPrice=1.0,
                closePrice=1.4,
                status="Closed",
                closedDate="2025-01-10",
            ),
        )
        client.post(
            "/api/v1/trades",
            json=csp_payload(ticker="NVDA", status="Expired", closedDate="2025-01-17"),
        )
        client.post("/api/v1/trades", json=csp_payload(ticker="AMD"))

        data = client.get("/api/v1/stats").json()["data"]

        assert data["totalChains"] == 4
        assert data["resolvedChains"] == 3
        assert data["winningChains"] == 2
        assert data["winRate"] == pytest.approx(66.67, abs=0.01)
        assert data["totalTrades"] == 4
        assert data["openTradesCount"] == 1
        assert data["totalExpired"] == 2
        assert data["capitalAtRisk"] == 22000.0
        assert data["totalPnL"] == 280 - 40 + 280 + 280
        assert data["monthlyStats"] == {"2025-01": 520.0}

    def test_rolled_trades_count_in_total_only(
        self, client: TestClient, rolled_chain
    ) -> None:
        data = client.get("/api/v1/stats").json()["data"]

        assert data["totalRolled"] == 2
        assert data["totalPnL"] == 510.0
        assert data["monthlyStats"] == {"2025-02": 200.0}
        assert data["bestTicker"] == {"ticker": "AAPL", "pnl": 510.0}
