"""
Share price lookups with a last-known-good cache.

The live source is stockprices.dev: the stocks endpoint is tried first and
the ETF endpoint second. Every successful quote is cached in cents; the
cache is served whenever live prices are switched off or the source fails.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional

import requests
from sqlalchemy.orm import Session

from src.server.config import settings
from src.server.database.models.price_cache import PriceCache
from src.server.database.session import atomic
from src.server.repositories.price_cache import PriceCacheRepository
from src.server.repositories.setting import SettingRepository
from src.wheel.exceptions import ExternalUnavailableError, NotFoundError, ValidationFailed
from src.wheel.money import to_cents

logger = logging.getLogger(__name__)

ENDPOINTS = ("stocks", "etfs")


@dataclass
class SourceQuote:
    """Quote as reported by the live source, in dollars."""

    ticker: str
    price: float
    change: Optional[float]
    change_percent: Optional[float]
    name: Optional[str]


@dataclass
class Quote:
    """Quote served to callers, in cents.

    Attributes:
        live: True when fetched just now, False when served from cache
        cached_at: When the cached quote was fetched (cache hits only)
    """

    ticker: str
    price: int
    change: Optional[int]
    change_percent: Optional[float]
    name: Optional[str]
    live: bool
    cached_at: Optional[datetime] = None

    @classmethod
    def from_cache(cls, row: PriceCache) -> "Quote":
        return cls(
            ticker=row.ticker,
            price=row.price,
            change=row.change,
            change_percent=row.change_percent,
            name=row.name,
            live=False,
            cached_at=row.updated_at,
        )

    @property
    def source(self) -> str:
        return "live" if self.live else "cache"


class StockPriceSource:
    """HTTP client for the stockprices.dev quote API."""

    def __init__(self, base_url: Optional[str] = None, timeout: Optional[float] = None):
        self.base_url = (base_url or settings.price_source_url).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.price_timeout
        self.session = requests.Session()
        self.session.headers.update({"Accept": "application/json"})

    def fetch(self, ticker: str) -> SourceQuote:
        """
        Fetch the current quote for a ticker.

        Raises:
            ExternalUnavailableError: If neither endpoint returns a usable quote
        """
        ticker = ticker.upper()
        last_error = None
        for endpoint in ENDPOINTS:
            url = f"{self.base_url}/{endpoint}/{ticker}"
            try:
                response = self.session.get(url, timeout=self.timeout)
            except requests.exceptions.Timeout as e:
                raise ExternalUnavailableError(
                    f"Price request timed out after {self.timeout}s for {ticker}"
                ) from e
            except requests.exceptions.RequestException as e:
                raise ExternalUnavailableError(f"Price request failed for {ticker}: {e}") from e

            if not response.ok:
                last_error = f"HTTP {response.status_code} from {endpoint}"
                continue

            try:
                return self._parse(ticker, response.json())
            except (ValueError, KeyError, TypeError) as e:
                raise ExternalUnavailableError(f"Invalid price response for {ticker}: {e}") from e

        raise ExternalUnavailableError(f"No price for {ticker} ({last_error})")

    @staticmethod
    def _parse(ticker: str, payload: dict[str, Any]) -> SourceQuote:
        price = payload["Price"]
        if price is None:
            raise ValueError("missing Price")
        return SourceQuote(
            ticker=ticker,
            price=float(price),
            change=payload.get("ChangeAmount"),
            change_percent=payload.get("ChangePercentage"),
            name=payload.get("Name"),
        )

    def close(self) -> None:
        self.session.close()


class PriceService:
    """
    Serves quotes from the live source, falling back to the cache.

    Attributes:
        db: SQLAlchemy database session
        source: Live quote source
    """

    def __init__(self, db: Session, source: Optional[StockPriceSource] = None):
        self.db = db
        self.source = source or StockPriceSource()
        self.cache_repo = PriceCacheRepository(db)
        self.setting_repo = SettingRepository(db)

    def live_enabled(self) -> bool:
        return self.setting_repo.get_bool("live_prices_enabled", default=True)

    def get_price(self, ticker: str) -> Quote:
        """
        Get the latest quote for one ticker.

        Raises:
            NotFoundError: If no live quote could be fetched and none is cached
        """
        ticker = ticker.strip().upper()
        if self.live_enabled():
            quote = self._try_fetch(ticker)
            if quote is not None:
                return self._store(quote)

        cached = self.cache_repo.get(ticker)
        if cached is None:
            raise NotFoundError("Price", ticker)
        return Quote.from_cache(cached)

    def get_prices(self, tickers: list[str]) -> dict[str, Quote]:
        """
        Get quotes for up to the batch limit of unique tickers.

        Tickers with neither a live nor a cached quote are left out.

        Raises:
            ValidationFailed: If no tickers are given
        """
        if not tickers:
            raise ValidationFailed(["tickers must be a non-empty list"])
        unique = list(dict.fromkeys(t.strip().upper() for t in tickers[: settings.price_batch_limit]))

        fetched: dict[str, SourceQuote] = {}
        if self.live_enabled():
            with ThreadPoolExecutor(max_workers=min(len(unique), 8)) as executor:
                for ticker, quote in zip(unique, executor.map(self._try_fetch, unique)):
                    if quote is not None:
                        fetched[ticker] = quote

        results: dict[str, Quote] = {}
        cached = self.cache_repo.get_many([t for t in unique if t not in fetched])
        for ticker in unique:
            if ticker in fetched:
                results[ticker] = self._store(fetched[ticker])
            elif ticker in cached:
                results[ticker] = Quote.from_cache(cached[ticker])
        return results

    def _try_fetch(self, ticker: str) -> Optional[SourceQuote]:
        try:
            return self.source.fetch(ticker)
        except ExternalUnavailableError as e:
            logger.warning(f"Live price unavailable for {ticker}, using cache: {e}")
            return None

    def _store(self, quote: SourceQuote) -> Quote:
        price = to_cents(quote.price)
        change = to_cents(quote.change)
        with atomic(self.db):
            self.cache_repo.upsert(quote.ticker, price, change, quote.change_percent, quote.name)
        return Quote(
            ticker=quote.ticker,
            price=price,
            change=change,
            change_percent=quote.change_percent,
            name=quote.name,
            live=True,
        )
