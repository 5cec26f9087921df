"""Read-side service for roll chains."""

import logging
from typing import Optional

from sqlalchemy.orm import Session

from src.server.repositories.trade import TradeRepository
from src.wheel.chains import build_chains, find_chain
from src.wheel.exceptions import NotFoundError, ValidationFailed
from src.wheel.models import Chain

logger = logging.getLogger(__name__)

CHAIN_STATUSES = ("all", "open", "resolved")


class ChainService:
    """Rebuilds roll chains from the stored trades on every call."""

    def __init__(self, db: Session):
        self.db = db
        self.trade_repo = TradeRepository(db)

    def list_chains(
        self,
        account_id: Optional[int] = None,
        ticker: Optional[str] = None,
        status: Optional[str] = None,
    ) -> list[Chain]:
        """
        List chains, optionally narrowed to a ticker or resolution state.

        The ticker filter keeps whole chains that touch the ticker, so a
        chain rolled across symbols is never cut in half.

        Args:
            account_id: Owning account
            ticker: Ticker appearing anywhere in the chain
            status: "all", "open" (last trade Open or Rolled) or "resolved"
        """
        if status is not None and status not in CHAIN_STATUSES:
            raise ValidationFailed([f"status must be one of: {', '.join(CHAIN_STATUSES)}"])

        trades = [t.to_record() for t in self.trade_repo.list_all(account_id=account_id)]
        chains = build_chains(trades)
        if ticker:
            chains = [c for c in chains if ticker.strip().upper() in c.tickers]
        if status == "open":
            chains = [c for c in chains if not c.resolved]
        elif status == "resolved":
            chains = [c for c in chains if c.resolved]
        return chains

    def get_chain(self, trade_id: int) -> Chain:
        """Chain containing the given trade."""
        trade = self.trade_repo.get(trade_id)
        if trade is None:
            raise NotFoundError("Trade", trade_id)
        chain = find_chain(self.list_chains(account_id=trade.account_id), trade_id)
        if chain is None:
            raise NotFoundError("Chain", trade_id)
        return chain
