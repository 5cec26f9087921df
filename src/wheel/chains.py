"""
Roll chain reconstruction.

Trades form singly-linked lists through ``parent_trade_id`` (child points
to parent). Chains are rebuilt from the flat trade set on every call: a
forward map from parent id to child is derived, then each root is walked
until the chain ends. Nothing here is cached or persisted.
"""

import logging
from collections import defaultdict
from collections.abc import Iterable
from typing import Optional

from .exceptions import ChainIntegrityError
from .models import Chain, ChainStats, TradeRecord

logger = logging.getLogger(__name__)


def _child_map(
    trades: list[TradeRecord], strict: bool
) -> dict[int, TradeRecord]:
    """
    Map each parent id to the one child that continues its chain.

    A parent should have at most one child. When it has more, the child
    with the lowest id is followed and the others surface as orphans.
    """
    children: dict[int, list[TradeRecord]] = defaultdict(list)
    for trade in trades:
        if trade.parent_trade_id is not None:
            children[trade.parent_trade_id].append(trade)

    forward = {}
    for parent_id, kids in children.items():
        if len(kids) > 1:
            ids = sorted(k.id for k in kids)
            if strict:
                raise ChainIntegrityError(
                    f"Trade {parent_id} has {len(kids)} children: {ids}"
                )
            logger.warning(
                f"Trade {parent_id} has multiple children {ids}; following {ids[0]}"
            )
        forward[parent_id] = min(kids, key=lambda t: t.id)
    return forward


def _make_chain(trades: list[TradeRecord]) -> Chain:
    return Chain(
        trades=trades,
        pnl=sum(t.pnl for t in trades),
        collateral=sum(t.collateral for t in trades),
    )


def build_chains(trades: Iterable[TradeRecord], strict: bool = False) -> list[Chain]:
    """
    Rebuild roll chains from a flat set of trades.

    Each trade with no parent starts a chain, which is extended child by
    child until no child exists or an already visited trade comes up
    again (a cycle stops the walk). Trades no root reaches are returned
    as single-trade chains after the rooted ones.

    Args:
        trades: Trades to chain, possibly pre-filtered
        strict: Raise instead of tolerating malformed links

    Returns:
        Chains ordered by root id, then orphans by id

    Raises:
        ChainIntegrityError: In strict mode, when a parent has several
            children or a walk runs into a cycle.
    """
    ordered = sorted(trades, key=lambda t: t.id)
    forward = _child_map(ordered, strict)

    visited: set[int] = set()
    chains: list[Chain] = []

    for root in ordered:
        if root.parent_trade_id is not None:
            continue

        walk = []
        current: Optional[TradeRecord] = root
        while current is not None:
            walk.append(current)
            visited.add(current.id)
            child = forward.get(current.id)
            if child is not None and child.id in visited:
                if strict:
                    raise ChainIntegrityError(
                        f"Cycle detected at trade {child.id} in chain rooted at {root.id}"
                    )
                logger.warning(f"Cycle detected at trade {child.id}; chain {root.id} truncated")
                child = None
            current = child

        chains.append(_make_chain(walk))

    for trade in ordered:
        if trade.id not in visited:
            visited.add(trade.id)
            chains.append(_make_chain([trade]))

    return chains


def chain_win_rate(chains: Iterable[Chain]) -> ChainStats:
    """Count total, resolved and winning chains (win rate is zero-safe)."""
    stats = ChainStats()
    for chain in chains:
        stats.total_chains += 1
        if chain.resolved:
            stats.resolved_chains += 1
            if chain.winning:
                stats.winning_chains += 1
    return stats


def find_chain(chains: Iterable[Chain], trade_id: int) -> Optional[Chain]:
    """Return the chain containing a trade, or None."""
    for chain in chains:
        if trade_id in chain.trade_ids:
            return chain
    return None
