# duedesk/models/customers.py

import re
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, field_validator

from duedesk.core.payments import PaymentStatus, PaymentType

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def _require_number(value: Any) -> Any:
    # JSON strings and booleans would otherwise coerce to Decimal
    if isinstance(value, (str, bool)):
        raise ValueError("Amounts must be numbers")
    return value


class CustomerIn(BaseModel):
    """Body for creating a customer; amounts default to zero."""

    name: str = Field(..., min_length=1)
    contact_number: str = Field(..., min_length=1)
    email: str = Field(..., min_length=1)
    amount_to_pay: Decimal = Field(Decimal("0"), ge=0, decimal_places=2)
    amount_paid: Decimal = Field(Decimal("0"), ge=0, decimal_places=2)

    @field_validator("email")
    @classmethod
    def check_email(cls, value: str) -> str:
        if not EMAIL_RE.match(value):
            raise ValueError("Please provide a valid email address")
        return value

    @field_validator("amount_to_pay", "amount_paid", mode="before")
    @classmethod
    def check_amounts_are_numbers(cls, value: Any) -> Any:
        return _require_number(value)


class CustomerUpdateIn(CustomerIn):
    # full update: both amounts must be sent
    amount_to_pay: Decimal = Field(..., ge=0, decimal_places=2)
    amount_paid: Decimal = Field(..., ge=0, decimal_places=2)


class PaymentIn(BaseModel):
    payment_amount: Decimal = Field(..., gt=0, decimal_places=2)
    payment_type: PaymentType = PaymentType.ADD

    @field_validator("payment_amount", mode="before")
    @classmethod
    def check_amount_is_number(cls, value: Any) -> Any:
        return _require_number(value)


class CustomerOut(BaseModel):
    id: int
    name: str
    contact_number: str
    email: str
    amount_to_pay: Decimal
    amount_paid: Decimal
    created_at: datetime
    updated_at: datetime
    amount_remaining: Decimal
    overpayment: Decimal
    payment_status: PaymentStatus
    payment_percentage: Decimal

    class Config:
        from_attributes = True


class CollectionSummaryOut(BaseModel):
    total_customers: int
    total_amount_to_pay: Decimal
    total_amount_paid: Decimal
    total_amount_remaining: Decimal
    total_overpayment: Decimal
    status_counts: Dict[str, int]
    collection_efficiency: Decimal


class PaginationOut(BaseModel):
    offset: int
    limit: int
    total: int


class CustomerResponse(BaseModel):
    success: bool = True
    data: CustomerOut
    message: Optional[str] = None


class CustomerListResponse(BaseModel):
    success: bool = True
    data: List[CustomerOut]
    summary: CollectionSummaryOut
    pagination: PaginationOut


class CustomerDeletedResponse(BaseModel):
    success: bool = True
    message: str
    deleted_customer: CustomerOut
