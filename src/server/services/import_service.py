"""
Bulk import of trades, fund transactions and stocks.

A trade batch carries the ids trades had in the exporting system. Rows
are validated one by one, written parents-first and deduplicated against
what is already stored; assignment side effects are replayed once every
row is in place. The whole batch is one transaction.
"""

import logging
from typing import Any, Callable, Optional

from sqlalchemy.orm import Session

from src.server.database.models.trade import Trade
from src.server.database.session import atomic
from src.server.repositories.trade import TradeRepository
from src.server.services.fund_service import FundTransactionService
from src.server.services.stock_service import StockService
from src.server.services.trade_service import TradeService
from src.wheel.exceptions import ValidationFailed
from src.wheel.importer import DEDUP_FIELDS, ImportResult, insert_in_dependency_order
from src.wheel.state import TradeStatus
from src.wheel.validation import validate_trade

logger = logging.getLogger(__name__)


def _assignment_order(trade: Trade) -> tuple:
    return (trade.closed_date or trade.opened_date, trade.id)


class ImportService:
    """Imports batches exported from another tracker or a CSV file.

    Attributes:
        db: SQLAlchemy database session
        trade_service: Used to insert trades and replay assignments
    """

    def __init__(self, db: Session):
        self.db = db
        self.trade_repo = TradeRepository(db)
        self.trade_service = TradeService(db)
        self.fund_service = FundTransactionService(db)
        self.stock_service = StockService(db)

    def import_trades(
        self, items: list[dict[str, Any]], account_id: Optional[int] = None
    ) -> ImportResult:
        """
        Import trades in dependency order.

        Args:
            items: Trade payloads (dollars, YYYY-MM-DD dates) that may carry
                their source ``id`` and a ``parent_trade_id`` pointing at
                another source id or an existing trade
            account_id: Account every imported trade is assigned to

        Returns:
            ImportResult; rows that fail validation are reported in
            ``failed``, rows whose parent never resolves in ``unresolved``
            and rows whose parent already has a successor, imported without
            the link, in ``unlinked``
        """
        result = ImportResult(total=len(items))
        valid: list[dict[str, Any]] = []
        blocked: set[int] = set()

        for index, item in enumerate(items):
            data = dict(item)
            if account_id is not None:
                data["account_id"] = account_id
            errors = validate_trade(data)
            if errors:
                result.failed.append({"index": index, "id": data.get("id"), "errors": errors})
                if data.get("id") is not None:
                    blocked.add(data["id"])
                continue
            data["_index"] = index
            valid.append(data)

        inserted: list[Trade] = []

        def insert(data: dict[str, Any], parent_id: Optional[int]) -> Optional[int]:
            columns = self.trade_service.trade_columns(data)
            columns["parent_trade_id"] = parent_id

            existing = self.trade_repo.find_duplicate(
                {name: columns.get(name) for name in DEDUP_FIELDS}
            )
            if existing is not None:
                result.skipped += 1
                logger.info(f"Skipped duplicate of trade {existing.id} (source id {data.get('id')})")
                return existing.id

            if parent_id is not None and self.trade_repo.children_of(parent_id):
                result.unlinked.append(
                    {
                        "index": data["_index"],
                        "id": data.get("id"),
                        "parentTradeId": data.get("parent_trade_id"),
                        "reason": f"trade {parent_id} already has a successor",
                    }
                )
                logger.warning(
                    f"Import row {data['_index']} written without parent: "
                    f"trade {parent_id} already has a successor"
                )
                columns["parent_trade_id"] = None

            try:
                trade = self.trade_service.insert_trade(
                    columns, auto_link=False, apply_assignment=False
                )
            except ValidationFailed as e:
                result.failed.append(
                    {"index": data["_index"], "id": data.get("id"), "errors": e.errors}
                )
                logger.warning(f"Rejected import row {data['_index']}: {e}")
                return None

            result.imported += 1
            inserted.append(trade)
            return trade.id

        with atomic(self.db):
            _, pending = insert_in_dependency_order(
                valid, insert, parent_exists=self.trade_repo.exists, blocked_ids=blocked
            )

            assigned = [t for t in inserted if t.status == TradeStatus.ASSIGNED.value]
            for trade in sorted(assigned, key=_assignment_order):
                self.trade_service.linkage.apply_assignment(trade)

        result.unresolved = [
            {
                "index": data["_index"],
                "id": data.get("id"),
                "parentTradeId": data.get("parent_trade_id"),
                "reason": f"parent trade {data.get('parent_trade_id')} not available",
            }
            for data in pending
        ]
        result.failed.sort(key=lambda row: row["index"])

        logger.info(
            f"Trade import: {result.imported} imported, {result.skipped} skipped, "
            f"{len(result.failed)} failed, {len(result.unresolved)} unresolved, "
            f"{len(result.unlinked)} unlinked of {result.total}"
        )
        return result

    def import_fund_transactions(
        self, items: list[dict[str, Any]], account_id: Optional[int] = None
    ) -> ImportResult:
        """Import cash-flow entries; invalid rows are reported and skipped."""
        return self._import_flat(
            items,
            account_id,
            self.fund_service.validate,
            self.fund_service.insert_transaction,
            "fund transaction",
        )

    def import_stocks(
        self, items: list[dict[str, Any]], account_id: Optional[int] = None
    ) -> ImportResult:
        """Import stock lots; invalid rows are reported and skipped."""
        return self._import_flat(
            items,
            account_id,
            self.stock_service.validate,
            self.stock_service.insert_stock,
            "stock",
        )

    def _import_flat(
        self,
        items: list[dict[str, Any]],
        account_id: Optional[int],
        validate: Callable[[dict[str, Any]], list[str]],
        insert: Callable[[dict[str, Any]], Any],
        label: str,
    ) -> ImportResult:
        result = ImportResult(total=len(items))
        with atomic(self.db):
            for index, item in enumerate(items):
                data = dict(item)
                if account_id is not None:
                    data["account_id"] = account_id
                errors = validate(data)
                if errors:
                    result.failed.append({"index": index, "errors": errors})
                    continue
                insert(data)
                result.imported += 1

        if result.failed:
            logger.warning(f"{len(result.failed)} {label} rows rejected during import")
        logger.info(f"Imported {result.imported} of {result.total} {label} rows")
        return result
