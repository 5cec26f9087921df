"""
Dependency-ordered bulk import of trades.

Imported trades reference their parents by the ids they had in the
source system. Parents must be written first so children can point at
the newly assigned ids, whatever order the batch arrived in.
"""

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from typing import Any, Optional

logger = logging.getLogger(__name__)

DEDUP_FIELDS = (
    "ticker",
    "type",
    "strike",
    "quantity",
    "entry_price",
    "opened_date",
    "expiration_date",
    "account_id",
)


@dataclass
class ImportResult:
    """Outcome of a bulk import.

    Attributes:
        imported: Rows written
        skipped: Rows matching an existing trade (not written)
        failed: Rows rejected by validation, with their reasons
        unresolved: Rows whose parent never became available
        unlinked: Rows written without their parent link because that parent
            already had a successor
        total: Rows received
    """

    imported: int = 0
    skipped: int = 0
    failed: list[dict[str, Any]] = field(default_factory=list)
    unresolved: list[dict[str, Any]] = field(default_factory=list)
    unlinked: list[dict[str, Any]] = field(default_factory=list)
    total: int = 0


def dedup_key(trade: Any) -> tuple:
    """Identity of a trade for duplicate detection (cents and dates)."""
    if isinstance(trade, dict):
        return tuple(trade.get(name) for name in DEDUP_FIELDS)
    return tuple(getattr(trade, name) for name in DEDUP_FIELDS)


def insert_in_dependency_order(
    items: Iterable[dict],
    insert: Callable[[dict, Optional[int]], Optional[int]],
    parent_exists: Callable[[int], bool],
    blocked_ids: Iterable[int] = (),
    id_key: str = "id",
    parent_key: str = "parent_trade_id",
) -> tuple[dict[int, int], list[dict]]:
    """
    Insert items parents-first by fixed-point iteration.

    Each pass inserts every pending item whose parent is either absent,
    already inserted in this batch, or a pre-existing row that the batch
    does not itself redefine. Passes repeat until one makes no progress.

    Args:
        items: Items in arrival order, keyed by source ids
        insert: Writes one item given its resolved parent id and returns
            the id it is stored under, or None if it was rejected
        parent_exists: Whether a parent id refers to an existing row
        blocked_ids: Source ids present in the batch that will never be
            inserted (e.g. rejected rows); their children stay pending
        id_key: Key holding an item's source id
        parent_key: Key holding an item's source parent id

    Returns:
        Tuple of (source id -> stored id, items left unresolved)
    """
    pending = list(items)
    batch_ids = {item[id_key] for item in pending if item.get(id_key) is not None}
    batch_ids.update(blocked_ids)
    id_map: dict[int, int] = {}

    passes = 0
    while pending:
        passes += 1
        remaining = []
        for item in pending:
            parent = item.get(parent_key)
            if parent is None:
                resolved_parent = None
            elif parent in id_map:
                resolved_parent = id_map[parent]
            elif parent not in batch_ids and parent_exists(parent):
                resolved_parent = parent
            else:
                remaining.append(item)
                continue

            stored_id = insert(item, resolved_parent)
            if stored_id is not None and item.get(id_key) is not None:
                id_map[item[id_key]] = stored_id

        if len(remaining) == len(pending):
            break
        pending = remaining

    logger.debug(f"Dependency-ordered insert finished in {passes} passes")
    for item in pending:
        logger.warning(
            f"Unresolved import row {item.get(id_key)}: parent {item.get(parent_key)} unavailable"
        )
    return id_map, pending
