"""Inventory service - Business logic for clinic stock"""

import logging
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...auth import AuthContext
from ...models import InventoryItem, InventoryLog
from ..notifications.service import notify
from .repository import InventoryRepository
from .schemas import InventoryItemCreate, QuantityUpdate
from .stock import apply_quantity_change, stock_status

logger = logging.getLogger(__name__)


class InventoryService:
    """Service layer for inventory business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = InventoryRepository()

    def _notify_low_stock(self, item: InventoryItem, user_id: int) -> None:
        notify(
            self.db,
            user_id,
            "low_stock",
            "Low Stock Alert",
            f"{item.name} is running low ({item.quantity} left, minimum {item.min_quantity})",
        )

    def create_item(self, data: InventoryItemCreate, auth: AuthContext) -> InventoryItem:
        auth.require_doctor("Only doctors can manage inventory")

        item = self.repo.create_item(
            self.db,
            name=data.name,
            category=data.category,
            description=data.description,
            quantity=data.quantity,
            min_quantity=data.minQuantity,
            unit_price=data.unitPrice,
            supplier=data.supplier,
            expiry_date=data.expiryDate,
            batch_number=data.batchNumber,
            status=stock_status(data.quantity, data.minQuantity),
        )
        self.repo.add_log(
            self.db,
            item_id=item.id,
            user_id=auth.user_id,
            operation="set",
            quantity_change=data.quantity,
            previous_quantity=0,
            new_quantity=data.quantity,
            reason="Initial stock",
        )
        if item.status == "low_stock":
            self._notify_low_stock(item, auth.user_id)

        self.db.commit()
        self.db.refresh(item)

        logger.info(f"📦 Inventory item {item.id} ({item.name}) added by doctor {auth.user_id}")
        return item

    def get_items(self, auth: AuthContext, category: Optional[str] = None) -> list[InventoryItem]:
        if not auth.is_doctor:
            return []
        return self.repo.get_items(self.db, category)

    def get_low_stock_items(self, auth: AuthContext) -> list[InventoryItem]:
        if not auth.is_doctor:
            return []
        return self.repo.get_low_stock_items(self.db)

    def update_quantity(self, item_id: int, data: QuantityUpdate, auth: AuthContext) -> InventoryItem:
        """Apply add/subtract/set, recompute status and append a log entry"""
        auth.require_doctor("Only doctors can manage inventory")

        item = self.repo.get_item_for_update(self.db, item_id)
        if not item:
            raise HTTPException(status_code=404, detail="Item not found")

        previous_quantity = item.quantity
        previous_status = item.status
        item.quantity = apply_quantity_change(previous_quantity, data.operation, data.quantity)
        item.status = stock_status(item.quantity, item.min_quantity)

        self.repo.add_log(
            self.db,
            item_id=item.id,
            user_id=auth.user_id,
            operation=data.operation,
            quantity_change=data.quantity,
            previous_quantity=previous_quantity,
            new_quantity=item.quantity,
            reason=data.reason,
        )
        if item.status == "low_stock" and previous_status != "low_stock":
            self._notify_low_stock(item, auth.user_id)

        self.db.commit()
        self.db.refresh(item)

        logger.info(
            f"📦 Item {item.id} {data.operation} {data.quantity}: {previous_quantity} → {item.quantity} ({item.status})"
        )
        return item

    def get_logs(self, item_id: int, auth: AuthContext) -> list[InventoryLog]:
        auth.require_doctor("Only doctors can manage inventory")
        if not self.repo.get_item_by_id(self.db, item_id):
            raise HTTPException(status_code=404, detail="Item not found")
        return self.repo.get_logs(self.db, item_id)
