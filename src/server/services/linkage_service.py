"""Position side effects of option assignments.

Creates, closes, reopens and deletes share positions in response to
trade lifecycle events. Every method runs inside the caller's
transaction and only flushes.
"""

import logging
from datetime import date
from typing import Optional

from sqlalchemy.orm import Session

from src.server.database.models.position import Position
from src.server.database.models.trade import Trade
from src.server.repositories.position import PositionRepository
from src.server.repositories.trade import TradeRepository
from src.wheel.linkage import (
    assignment_cost_basis,
    assignment_shares,
    capital_gain,
    select_fifo,
)
from src.wheel.money import format_dollars
from src.wheel.state import AssignmentEffect, TradeStatus, assignment_effect

logger = logging.getLogger(__name__)


class PositionLinkageService:
    """Keeps share positions consistent with assigned trades.

    Attributes:
        db: SQLAlchemy database session
        position_repo: Repository for positions
        trade_repo: Repository for trades
    """

    def __init__(self, db: Session):
        self.db = db
        self.position_repo = PositionRepository(db)
        self.trade_repo = TradeRepository(db)

    def apply_assignment(self, trade: Trade) -> Optional[Position]:
        """Run the side effect of a trade becoming Assigned.

        Args:
            trade: Trade that was just assigned

        Returns:
            Position opened (CSP) or closed (CC); None when a CC found
            nothing to close
        """
        effect = assignment_effect(trade.type)
        if effect is AssignmentEffect.OPEN_POSITION:
            return self.assign_csp(trade)
        if effect is AssignmentEffect.CLOSE_POSITION:
            return self.assign_cc(trade)
        raise ValueError(f"Unhandled assignment effect: {effect!r}")

    def assign_csp(self, trade: Trade) -> Position:
        """Open a position for shares put to us.

        The premium lowers the basis: strike minus entry price per share.
        """
        shares = assignment_shares(trade.quantity)
        cost_basis = assignment_cost_basis(trade.strike, trade.entry_price)
        position = self.position_repo.create(
            ticker=trade.ticker,
            shares=shares,
            cost_basis=cost_basis,
            acquired_date=trade.closed_date or date.today(),
            acquired_from_trade_id=trade.id,
            account_id=trade.account_id,
        )
        logger.info(
            f"Position opened: {shares} shares of {trade.ticker} at "
            f"{format_dollars(cost_basis)} from trade {trade.id}"
        )
        return position

    def assign_cc(self, trade: Trade) -> Optional[Position]:
        """Close the oldest open position for shares called away.

        Returns:
            The closed position, or None when no position is open
        """
        candidates = self.position_repo.open_for_ticker(trade.ticker, trade.account_id)
        position = select_fifo(candidates)
        if position is None:
            logger.warning(
                f"CC trade {trade.id} assigned but no open {trade.ticker} position to close"
            )
            return None

        gain = capital_gain(trade.strike, position.cost_basis, position.shares)
        self.position_repo.update(
            position,
            {
                "sold_date": trade.closed_date or date.today(),
                "sale_price": trade.strike,
                "sold_via_trade_id": trade.id,
                "capital_gain_loss": gain,
            },
        )
        logger.info(
            f"Position closed: {position.shares} shares of {trade.ticker} at "
            f"{format_dollars(trade.strike)} (G/L {format_dollars(gain)}) via trade {trade.id}"
        )
        return position

    def reverse_assignment(self, trade_id: int) -> tuple[int, int]:
        """Undo every position effect a trade caused.

        Positions the trade acquired are deleted; positions it sold are
        reopened.

        Returns:
            Tuple of (positions deleted, positions reopened)
        """
        acquired = self.position_repo.acquired_from(trade_id)
        for position in acquired:
            self.position_repo.delete(position)

        sold = self.position_repo.sold_via(trade_id)
        for position in sold:
            self.position_repo.update(
                position,
                {
                    "sold_date": None,
                    "sale_price": None,
                    "sold_via_trade_id": None,
                    "capital_gain_loss": None,
                },
            )

        if acquired or sold:
            logger.info(
                f"Reversed assignment of trade {trade_id}: "
                f"{len(acquired)} deleted, {len(sold)} reopened"
            )
        return len(acquired), len(sold)

    def auto_link_parent(self, ticker: str, account_id: Optional[int]) -> Optional[int]:
        """Find the chain a new covered call on held shares continues.

        Looks for the oldest open position of the ticker that came from a
        CSP assignment and returns the last trade of that CSP's chain, so
        the call extends the chain without giving any trade a second child.
        A chain that already ends in an Open call is left alone: that call
        is still live and may yet be rolled.

        Returns:
            Trade id to use as parent, or None when nothing qualifies
        """
        candidates = [
            p
            for p in self.position_repo.open_for_ticker(ticker, account_id)
            if p.acquired_from_trade_id is not None
        ]
        position = select_fifo(candidates)
        if position is None:
            return None

        tail_id = position.acquired_from_trade_id
        seen = {tail_id}
        children = self.trade_repo.children_of(tail_id)
        while children and children[0].id not in seen:
            tail_id = children[0].id
            seen.add(tail_id)
            children = self.trade_repo.children_of(tail_id)

        tail = self.trade_repo.get(tail_id)
        if tail is not None and tail.status == TradeStatus.OPEN.value:
            logger.info(
                f"Not auto-linking new {ticker} CC: chain of trade "
                f"{position.acquired_from_trade_id} ends in open trade {tail_id}"
            )
            return None

        logger.info(f"Auto-linking new {ticker} CC to trade {tail_id}")
        return tail_id
