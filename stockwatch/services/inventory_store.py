"""Persistent CRUD over inventory records.

Every public call opens its own session, runs one statement in its own
transaction and closes the session again. Nothing here spans two writes:
``adjust_quantity`` reads the current quantity and writes the new one as two
separate calls, so two callers adjusting the same item at the same moment can
lose one of the adjustments (last writer wins).
"""
from __future__ import annotations

import logging
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Callable, NamedTuple, Optional

from sqlalchemy import case, delete, func, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from stockwatch.core.errors import NegativeQuantityRejected, NotFound, StorageError
from stockwatch.core.records import InventoryRecord
from stockwatch.models.inventory import InventoryItem

logger = logging.getLogger(__name__)


class InventoryStats(NamedTuple):
    total: int
    low: int
    critical: int


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class InventoryStore:
    def __init__(self, session_factory: Callable[[], Session]):
        self._session_factory = session_factory
        self.last_modified: Optional[datetime] = None

    @contextmanager
    def _session(self, action: str):
        db = self._session_factory()
        try:
            yield db
            db.commit()
        except SQLAlchemyError as exc:
            db.rollback()
            logger.error("Inventory %s failed: %s", action, exc)
            raise StorageError("Inventory {} failed: {}".format(action, exc)) from exc
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

    def _touch(self) -> None:
        self.last_modified = _utc_now()

    # ======================== writes ========================

    def create(self, record: InventoryRecord) -> int:
        """Insert ``record`` and return its new id; any id it carries is ignored."""
        with self._session("create") as db:
            row = InventoryItem(**record.mutable_fields())
            db.add(row)
            db.flush()
            item_id = row.id
        self._touch()
        logger.debug("Inventory item added with id %s", item_id)
        return item_id

    def update(self, record: InventoryRecord) -> int:
        """Replace every mutable field of the row ``record.id`` points at.

        Returns the number of rows affected; 0 means the id does not exist.
        """
        stmt = (
            update(InventoryItem)
            .where(InventoryItem.id == record.id)
            .values(**record.mutable_fields(), updated_at=_utc_now())
            .execution_options(synchronize_session=False)
        )
        with self._session("update") as db:
            rows = db.execute(stmt).rowcount
        if rows:
            self._touch()
        logger.debug("Updated inventory item %s, rows affected: %s", record.id, rows)
        return rows

    def update_quantity(self, item_id: int, new_quantity: int) -> int:
        if new_quantity < 0:
            raise NegativeQuantityRejected(item_id, new_quantity)
        stmt = (
            update(InventoryItem)
            .where(InventoryItem.id == item_id)
            .values(quantity=new_quantity, updated_at=_utc_now())
            .execution_options(synchronize_session=False)
        )
        with self._session("quantity update") as db:
            rows = db.execute(stmt).rowcount
        if rows:
            self._touch()
        logger.debug("Updated quantity for item %s to %s, rows affected: %s", item_id, new_quantity, rows)
        return rows

    def adjust_quantity(self, item_id: int, delta: int) -> InventoryRecord:
        current = self.get(item_id)
        adjusted = current.adjusted(delta)
        if not self.update_quantity(item_id, adjusted.quantity):
            # Deleted between the read and the write.
            raise NotFound(item_id)
        return adjusted

    def delete(self, item_id: int) -> int:
        stmt = (
            delete(InventoryItem)
            .where(InventoryItem.id == item_id)
            .execution_options(synchronize_session=False)
        )
        with self._session("delete") as db:
            rows = db.execute(stmt).rowcount
        if rows:
            self._touch()
        logger.debug("Deleted inventory item %s, rows affected: %s", item_id, rows)
        return rows

    # ======================== reads ========================

    def get(self, item_id: int) -> InventoryRecord:
        with self._session("lookup") as db:
            row = db.get(InventoryItem, item_id)
            if row is None:
                raise NotFound(item_id)
            return InventoryRecord.from_row(row)

    def find(self, item_id: int) -> Optional[InventoryRecord]:
        try:
            return self.get(item_id)
        except NotFound:
            return None

    def list(self) -> list[InventoryRecord]:
        stmt = select(InventoryItem).order_by(InventoryItem.name, InventoryItem.id)
        with self._session("listing") as db:
            rows = db.execute(stmt).scalars().all()
            records = [InventoryRecord.from_row(row) for row in rows]
        logger.debug("Retrieved %d inventory items", len(records))
        return records

    def list_low_stock(self) -> list[InventoryRecord]:
        stmt = (
            select(InventoryItem)
            .where(InventoryItem.quantity <= InventoryItem.low_stock_threshold)
            .order_by(InventoryItem.quantity, InventoryItem.id)
        )
        with self._session("low-stock listing") as db:
            rows = db.execute(stmt).scalars().all()
            records = [InventoryRecord.from_row(row) for row in rows]
        logger.debug("Found %d low stock items", len(records))
        return records

    def stats(self) -> InventoryStats:
        quantity = InventoryItem.quantity
        threshold = InventoryItem.low_stock_threshold
        stmt = select(
            func.count(InventoryItem.id),
            func.coalesce(
                func.sum(case(((quantity > 0) & (quantity <= threshold), 1), else_=0)),
                0,
            ),
            func.coalesce(func.sum(case((quantity == 0, 1), else_=0)), 0),
        ).select_from(InventoryItem)
        with self._session("stats") as db:
            total, low, critical = db.execute(stmt).one()
        stats = InventoryStats(int(total), int(low), int(critical))
        logger.debug("Inventory stats - total: %s, low: %s, critical: %s", *stats)
        return stats


__all__ = ["InventoryStats", "InventoryStore"]
