"""Pytest fixtures for FastAPI server tests.

This module provides test fixtures for database sessions, test clients,
a stubbed live price source and common seed data.
"""

from typing import Generator
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from src.server.api.v1.prices import get_price_source
from src.server.database.models.account import Account
from src.server.database.session import Base, create_tables, get_db
from src.server.main import app
from src.server.services.price_service import StockPriceSource
from src.wheel.exceptions import ExternalUnavailableError


@pytest.fixture(scope="function")
def test_db() -> Generator[Session, None, None]:
    """Create a test database session.

    Creates an in-memory SQLite database (tables plus default settings)
    that is destroyed after each test function completes.

    Yields:
        SQLAlchemy session for testing
    """
    # Use poolclass to keep connection alive
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    create_tables(engine)

    TestingSessionLocal = sessionmaker(
        autocommit=False,
        autoflush=False,
        bind=engine,
    )

    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def price_source() -> MagicMock:
    """Live price source stub; every fetch fails unless a test says otherwise."""
    source = MagicMock(spec=StockPriceSource)
    source.fetch.side_effect = ExternalUnavailableError("offline")
    return source


@pytest.fixture(scope="function")
def client(test_db: Session, price_source: MagicMock) -> Generator[TestClient, None, None]:
    """Create a test client with test database.

    The client is not entered as a context manager so the startup hook
    never touches the configured database file.

    Example:
        >>> def test_endpoint(client):
        >>>     response = client.get("/api/v1/trades")
        >>>     assert response.status_code == 200
    """

    def override_get_db():
        """Override database dependency with test database."""
        # Return the same session for all requests in a test
        yield test_db

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_price_source] = lambda: price_source

    yield TestClient(app)

    test_db.rollback()
    app.dependency_overrides.clear()


@pytest.fixture
def account(test_db: Session) -> Account:
    """A stored account to own test rows."""
    account = Account(name="Brokerage")
    test_db.add(account)
    test_db.commit()
    return account


@pytest.fixture
def csp_payload():
    """Factory for a valid CSP request body (camelCase, dollars)."""

    def build(**overrides) -> dict:
        payload = {
            "ticker": "AAPL",
            "type": "CSP",
            "strike": 220.0,
            "quantity": 1,
            "entryPrice": 2.8,
            "openedDate": "2025-01-06",
            "expirationDate": "2025-01-17",
        }
        payload.update(overrides)
        return payload

    return build
