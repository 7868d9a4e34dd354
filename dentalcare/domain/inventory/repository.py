"""Inventory repository - Database operations for stock items and their log"""

from typing import Optional

from sqlalchemy.orm import Session

from ...models import InventoryItem, InventoryLog


class InventoryRepository:
    """Repository for inventory database operations"""

    @staticmethod
    def create_item(db: Session, **item_data) -> InventoryItem:
        item = InventoryItem(**item_data)
        db.add(item)
        db.flush()
        return item

    @staticmethod
    def get_item_by_id(db: Session, item_id: int) -> Optional[InventoryItem]:
        return db.query(InventoryItem).filter(InventoryItem.id == item_id).first()

    @staticmethod
    def get_item_for_update(db: Session, item_id: int) -> Optional[InventoryItem]:
        """Row-locked read so concurrent quantity changes serialize"""
        return db.query(InventoryItem).filter(InventoryItem.id == item_id).with_for_update().first()

    @staticmethod
    def get_items(db: Session, category: Optional[str] = None) -> list[InventoryItem]:
        query = db.query(InventoryItem)
        if category:
            query = query.filter(InventoryItem.category == category)
        return query.order_by(InventoryItem.created_at.desc(), InventoryItem.id.desc()).all()

    @staticmethod
    def get_low_stock_items(db: Session) -> list[InventoryItem]:
        return (
            db.query(InventoryItem)
            .filter(InventoryItem.status == "low_stock")
            .order_by(InventoryItem.name.asc())
            .all()
        )

    @staticmethod
    def add_log(db: Session, **log_data) -> InventoryLog:
        """Append a log entry (no commit)"""
        log = InventoryLog(**log_data)
        db.add(log)
        return log

    @staticmethod
    def get_logs(db: Session, item_id: int) -> list[InventoryLog]:
        return (
            db.query(InventoryLog)
            .filter(InventoryLog.item_id == item_id)
            .order_by(InventoryLog.created_at.desc(), InventoryLog.id.desc())
            .all()
        )
