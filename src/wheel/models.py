"""Domain records for trades, share lots and cash flows.

These plain dataclasses are what the chain and aggregation algorithms work
on. Money fields are integer cents; dates are ``datetime.date``.
"""

from dataclasses import dataclass, field
from datetime import date
from typing import Optional

from .money import SHARES_PER_CONTRACT, contract_value, option_pnl
from .state import FundTransactionType, TradeStatus, TradeType, is_resolved


@dataclass
class TradeRecord:
    """
    One option sale.

    Tracks the contract terms, premium received and the cost to close,
    plus the parent link used to rebuild roll chains.
    """

    id: int
    ticker: str
    type: TradeType
    strike: int
    entry_price: int
    opened_date: date
    expiration_date: date
    quantity: int = 1
    close_price: int = 0
    status: TradeStatus = TradeStatus.OPEN
    closed_date: Optional[date] = None
    parent_trade_id: Optional[int] = None
    delta: Optional[float] = None
    notes: Optional[str] = None
    account_id: Optional[int] = None

    @property
    def pnl(self) -> int:
        """Premium received minus cost to close, in cents."""
        return option_pnl(self.entry_price, self.close_price, self.quantity)

    @property
    def premium(self) -> int:
        """Gross premium received, in cents."""
        return contract_value(self.entry_price, self.quantity)

    @property
    def collateral(self) -> int:
        """Strike notional backing the contracts, in cents."""
        return contract_value(self.strike, self.quantity)

    @property
    def shares_equivalent(self) -> int:
        """Number of shares represented by this trade."""
        return self.quantity * SHARES_PER_CONTRACT

    @property
    def is_open(self) -> bool:
        return self.status == TradeStatus.OPEN

    @property
    def pnl_date(self) -> date:
        """Date the P/L is booked under: close date, else open date."""
        return self.closed_date or self.opened_date


@dataclass
class ShareLot:
    """
    A lot of shares, either from a CSP assignment or entered by hand.

    Used for both assignment positions and manual stock lots; the origin
    fields stay None for manual lots.
    """

    id: int
    ticker: str
    shares: int
    cost_basis: int  # per share
    acquired_date: date
    sold_date: Optional[date] = None
    sale_price: Optional[int] = None  # per share
    capital_gain_loss: Optional[int] = None
    acquired_from_trade_id: Optional[int] = None
    sold_via_trade_id: Optional[int] = None
    account_id: Optional[int] = None

    @property
    def is_open(self) -> bool:
        return self.sold_date is None


@dataclass
class FundTransactionRecord:
    """A cash-flow journal entry. Amount is a positive magnitude."""

    id: int
    type: FundTransactionType
    amount: int
    date: date
    description: Optional[str] = None
    account_id: Optional[int] = None


@dataclass
class Chain:
    """
    A roll chain: root trade followed by each successive roll.

    Derived on demand and never persisted.
    """

    trades: list[TradeRecord] = field(default_factory=list)
    pnl: int = 0
    collateral: int = 0

    @property
    def root(self) -> TradeRecord:
        return self.trades[0]

    @property
    def last(self) -> TradeRecord:
        return self.trades[-1]

    @property
    def root_id(self) -> int:
        return self.root.id

    @property
    def ticker(self) -> str:
        return self.root.ticker

    @property
    def tickers(self) -> list[str]:
        """Distinct tickers across the chain, in first-seen order."""
        return list(dict.fromkeys(t.ticker for t in self.trades))

    @property
    def final_status(self) -> TradeStatus:
        """Status of the last trade in the chain."""
        return self.last.status

    @property
    def resolved(self) -> bool:
        return is_resolved(self.final_status)

    @property
    def winning(self) -> bool:
        return self.resolved and self.pnl > 0

    @property
    def roi(self) -> float:
        """Chain P/L as a percentage of total collateral (0 when none)."""
        if self.collateral <= 0:
            return 0.0
        return self.pnl / self.collateral * 100

    @property
    def trade_ids(self) -> list[int]:
        return [t.id for t in self.trades]


@dataclass
class ChainStats:
    """Win/loss summary over a set of chains."""

    total_chains: int = 0
    resolved_chains: int = 0
    winning_chains: int = 0

    @property
    def win_rate(self) -> float:
        """Winning chains as a percentage of resolved chains."""
        if self.resolved_chains == 0:
            return 0.0
        return self.winning_chains / self.resolved_chains * 100
