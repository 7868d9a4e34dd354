"""Inventory router - FastAPI endpoints for clinic stock"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import AuthContext, get_auth_context
from ...database import get_db
from ...models import InventoryItem
from .schemas import (
    InventoryCategory,
    InventoryItemCreate,
    InventoryItemResponse,
    InventoryLogResponse,
    QuantityUpdate,
)
from .service import InventoryService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/inventory", tags=["Inventory"])


def get_inventory_service(db: Session = Depends(get_db)) -> InventoryService:
    """Dependency injection for InventoryService"""
    return InventoryService(db)


def to_response(item: InventoryItem) -> InventoryItemResponse:
    return InventoryItemResponse(
        id=item.id,
        name=item.name,
        category=item.category,
        description=item.description,
        quantity=item.quantity,
        minQuantity=item.min_quantity,
        unitPrice=item.unit_price,
        supplier=item.supplier,
        expiryDate=item.expiry_date,
        batchNumber=item.batch_number,
        status=item.status,
        createdAt=item.created_at,
        updatedAt=item.updated_at,
    )


@router.post("", response_model=InventoryItemResponse, status_code=201)
async def add_inventory_item(
    data: InventoryItemCreate,
    auth: AuthContext = Depends(get_auth_context),
    service: InventoryService = Depends(get_inventory_service),
):
    return to_response(service.create_item(data, auth))


@router.get("", response_model=list[InventoryItemResponse])
async def get_inventory_items(
    category: Optional[InventoryCategory] = Query(None),
    auth: AuthContext = Depends(get_auth_context),
    service: InventoryService = Depends(get_inventory_service),
):
    return [to_response(item) for item in service.get_items(auth, category)]


@router.get("/low-stock", response_model=list[InventoryItemResponse])
async def get_low_stock_items(
    auth: AuthContext = Depends(get_auth_context),
    service: InventoryService = Depends(get_inventory_service),
):
    return [to_response(item) for item in service.get_low_stock_items(auth)]


@router.patch("/{item_id}/quantity", response_model=InventoryItemResponse)
async def update_inventory_quantity(
    item_id: int,
    data: QuantityUpdate,
    auth: AuthContext = Depends(get_auth_context),
    service: InventoryService = Depends(get_inventory_service),
):
    return to_response(service.update_quantity(item_id, data, auth))


@router.get("/{item_id}/logs", response_model=list[InventoryLogResponse])
async def get_inventory_logs(
    item_id: int,
    auth: AuthContext = Depends(get_auth_context),
    service: InventoryService = Depends(get_inventory_service),
):
    return [
        InventoryLogResponse(
            id=log.id,
            itemId=log.item_id,
            userId=log.user_id,
            operation=log.operation,
            quantityChange=log.quantity_change,
            previousQuantity=log.previous_quantity,
            newQuantity=log.new_quantity,
            reason=log.reason,
            createdAt=log.created_at,
        )
        for log in service.get_logs(item_id, auth)
    ]
