"""Inventory domain schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator

from ...shared.validators import validate_iso_date

InventoryCategory = Literal["instruments", "materials", "medications", "supplies", "equipment"]
InventoryOperation = Literal["add", "subtract", "set"]


class InventoryItemCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    category: InventoryCategory
    description: Optional[str] = None
    quantity: int = Field(ge=0)
    minQuantity: int = Field(ge=0)
    unitPrice: float = Field(ge=0)
    supplier: Optional[str] = None
    expiryDate: Optional[str] = None
    batchNumber: Optional[str] = None

    @field_validator("expiryDate")
    @classmethod
    def validate_expiry_date(cls, v):
        return validate_iso_date(v)


class QuantityUpdate(BaseModel):
    quantity: int = Field(ge=0)
    operation: InventoryOperation
    reason: Optional[str] = None


class InventoryItemResponse(BaseModel):
    id: int
    name: str
    category: str
    description: Optional[str] = None
    quantity: int
    minQuantity: int
    unitPrice: float
    supplier: Optional[str] = None
    expiryDate: Optional[str] = None
    batchNumber: Optional[str] = None
    status: str
    createdAt: Optional[datetime] = None
    updatedAt: Optional[datetime] = None


class InventoryLogResponse(BaseModel):
    id: int
    itemId: int
    userId: int
    operation: str
    quantityChange: int
    previousQuantity: int
    newQuantity: int
    reason: Optional[str] = None
    createdAt: Optional[datetime] = None
