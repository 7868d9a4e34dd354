"""Billing domain schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator

from ...shared.validators import validate_iso_date
from ..profiles.schemas import ProfileResponse

InvoiceStatus = Literal["pending", "paid", "overdue", "cancelled"]


class InvoiceItem(BaseModel):
    description: str = Field(min_length=1)
    quantity: float = Field(gt=0)
    unitPrice: float = Field(ge=0)
    total: Optional[float] = Field(default=None, ge=0)


class InvoiceCreate(BaseModel):
    """Invoice input; omitted totals are computed from the line items"""

    patientId: int
    appointmentId: Optional[int] = None
    items: list[InvoiceItem] = Field(min_length=1)
    subtotal: Optional[float] = Field(default=None, ge=0)
    tax: float = Field(default=0, ge=0)
    discount: float = Field(default=0, ge=0)
    total: Optional[float] = None
    dueDate: str
    notes: Optional[str] = None

    @field_validator("dueDate")
    @classmethod
    def validate_due_date(cls, v):
        return validate_iso_date(v)


class InvoiceStatusUpdate(BaseModel):
    status: InvoiceStatus
    paymentMethod: Optional[str] = None
    paymentDate: Optional[str] = None

    @field_validator("paymentDate")
    @classmethod
    def validate_payment_date(cls, v):
        return validate_iso_date(v)


class InvoiceResponse(BaseModel):
    id: int
    invoiceNumber: str
    patientId: int
    doctorId: int
    appointmentId: Optional[int] = None
    items: list[dict]
    subtotal: float
    tax: float
    discount: float
    total: float
    status: str
    issueDate: str
    dueDate: str
    paymentMethod: Optional[str] = None
    paymentDate: Optional[str] = None
    notes: Optional[str] = None
    createdAt: Optional[datetime] = None
    updatedAt: Optional[datetime] = None


class InvoiceWithUserResponse(InvoiceResponse):
    otherUser: Optional[ProfileResponse] = None
