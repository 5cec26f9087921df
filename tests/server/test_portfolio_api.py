"""Tests for portfolio totals and the monthly breakdown."""

import pytest
from fastapi import status
from fastapi.testclient import TestClient

from src.server.repositories.price_cache import PriceCacheRepository


@pytest.fixture
def march_activity(client: TestClient, account, csp_payload) -> None:
    """A losing close, a dividend and a fee in March plus a January deposit."""
    client.post(
        "/api/v1/fund-transactions",
        json={"accountId": account.id, "type": "deposit", "amount": 10000, "date": "2025-01-02"},
    )
    client.post(
        "/api/v1/trades",
        json=csp_payload(
            accountId=account.id,
            entryPrice=1.0,
            closePrice=1.4,
            openedDate="2025-03-03",
            expirationDate="2025-03-21",
            status="Closed",
            closedDate="2025-03-14",
        ),
    )
    client.post(
        "/api/v1/fund-transactions",
        json={"accountId": account.id, "type": "dividend", "amount": 120, "date": "2025-03-10"},
    )
    client.post(
        "/api/v1/fund-transactions",
        json={"accountId": account.id, "type": "fee", "amount": 20, "date": "2025-03-28"},
    )


class TestPortfolioStats:
    """Tests for GET /api/v1/portfolio/stats."""

    def test_empty_portfolio(self, client: TestClient) -> None:
        data = client.get("/api/v1/portfolio/stats").json()["data"]

        assert data["netDeposited"] == 0
        assert data["totalPnL"] == 0
        assert data["rateOfReturn"] == 0
        assert data["unpricedTickers"] == []

    def test_totals(self, client: TestClient, march_activity) -> None:
        data = client.get("/api/v1/portfolio/stats").json()["data"]

        assert data["netDeposited"] == 10000.0
        assert data["cashBalance"] == 10100.0
        assert data["optionsPnL"] == -40.0
        assert data["dividends"] == 120.0
        assert data["fees"] == 20.0
        assert data["totalPnL"] == 60.0
        assert data["rateOfReturn"] == pytest.approx(0.6)
        assert data["closedTradesCount"] == 1

    def test_date_window(self, client: TestClient, march_activity) -> None:
        data = client.get(
            "/api/v1/portfolio/stats",
            params={"startDate": "2025-03-01", "endDate": "2025-03-20"},
        ).json()["data"]

        assert data["netDeposited"] == 0
        assert data["optionsPnL"] == -40.0
        assert data["dividends"] == 120.0
        assert data["fees"] == 0

    def test_reversed_window_rejected(self, client: TestClient) -> None:
        response = client.get(
            "/api/v1/portfolio/stats",
            params={"startDate": "2025-03-20", "endDate": "2025-03-01"},
        )
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_unrealized_gains_from_cached_prices(
        self, client: TestClient, test_db, account
    ) -> None:
        client.post(
            "/api/v1/stocks",
            json={
                "accountId": account.id,
                "ticker": "VTI",
                "shares": 10,
                "costBasis": 250,
                "acquiredDate": "2025-02-03",
            },
        )
        client.post(
            "/api/v1/positions",
            json={"ticker": "AAPL", "shares": 100, "costBasis": 217.2, "acquiredDate": "2025-01-17"},
        )
        PriceCacheRepository(test_db).upsert("VTI", 26000, None, None, None)
        test_db.commit()

        data = client.get("/api/v1/portfolio/stats").json()["data"]

        assert data["unrealizedGains"] == 100.0
        assert data["unpricedTickers"] == ["AAPL"]


class TestMonthly:
    """Tests for GET /api/v1/portfolio/monthly."""

    def test_monthly_rows(self, client: TestClient, march_activity) -> None:
        rows = client.get("/api/v1/portfolio/monthly").json()["data"]

        assert rows == [
            {"month": "2025-03", "options": -40.0, "stocks": 0.0, "income": 100.0}
        ]
