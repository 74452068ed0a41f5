# duedesk/api/customers.py

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Path, Query

from duedesk.core.payments import (
    PaymentStatus,
    PaymentType,
    apply_payment,
    derive_payment_view,
    round_money,
)
from duedesk.core.summary import CollectionSummary, summarize
from duedesk.db.store import CustomerRecord, CustomerStore, get_store
from duedesk.models.customers import (
    CollectionSummaryOut,
    CustomerDeletedResponse,
    CustomerIn,
    CustomerListResponse,
    CustomerOut,
    CustomerResponse,
    CustomerUpdateIn,
    PaginationOut,
    PaymentIn,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/customers", tags=["customers"])

# ids are stored as signed 64-bit INTEGER
MAX_CUSTOMER_ID = 2**63 - 1


def record_to_customer(record: CustomerRecord) -> CustomerOut:
    view = derive_payment_view(record.amount_to_pay, record.amount_paid)
    return CustomerOut(
        id=record.id,
        name=record.name,
        contact_number=record.contact_number,
        email=record.email,
        amount_to_pay=record.amount_to_pay,
        amount_paid=record.amount_paid,
        created_at=record.created_at,
        updated_at=record.updated_at,
        amount_remaining=round_money(view.amount_remaining),
        overpayment=round_money(view.overpayment),
        payment_status=view.payment_status,
        payment_percentage=round_money(view.payment_percentage),
    )


def summary_fields(summary: CollectionSummary) -> dict:
    return {
        "total_customers": summary.total_customers,
        "total_amount_to_pay": summary.total_amount_to_pay,
        "total_amount_paid": summary.total_amount_paid,
        "total_amount_remaining": summary.total_amount_remaining,
        "total_overpayment": summary.total_overpayment,
        "status_counts": {
            status.value: n for status, n in summary.status_counts.items()
        },
        "collection_efficiency": summary.collection_efficiency,
    }


@router.get("", response_model=CustomerListResponse)
def list_customers(
    status: Optional[PaymentStatus] = Query(
        default=None,
        description="Not Paid | Partially Paid | Paid | Overpaid",
    ),
    sort_by: str = Query(
        default="name",
        description="name | email | amount_to_pay | amount_paid | created_at | updated_at",
    ),
    order: str = Query(default="asc", description="asc | desc"),
    limit: Optional[int] = Query(default=None, ge=1),
    offset: int = Query(0, ge=0),
    store: CustomerStore = Depends(get_store),
) -> CustomerListResponse:
    """
    Return customers with derived payment fields, a summary of the returned
    page and pagination info.
    """
    if status is None:
        total = store.count()
        records = store.list_all(sort_by, order, limit=limit, offset=offset)
    else:
        # status is derived, so filtering happens after loading
        matching = [
            r
            for r in store.list_all(sort_by, order)
            if derive_payment_view(r.amount_to_pay, r.amount_paid).payment_status
            is status
        ]
        total = len(matching)
        end = offset + limit if limit is not None else None
        records = matching[offset:end]

    items: List[CustomerOut] = [record_to_customer(r) for r in records]
    summary = summarize(records)

    return CustomerListResponse(
        data=items,
        summary=CollectionSummaryOut(**summary_fields(summary)),
        pagination=PaginationOut(
            offset=offset,
            limit=limit if limit is not None else total,
            total=total,
        ),
    )


@router.get("/{customer_id}", response_model=CustomerResponse)
def get_customer(
    customer_id: int = Path(..., ge=1, le=MAX_CUSTOMER_ID),
    store: CustomerStore = Depends(get_store),
) -> CustomerResponse:
    record = store.get_by_id(customer_id)
    return CustomerResponse(data=record_to_customer(record))


@router.post("", response_model=CustomerResponse, status_code=201)
def create_customer(
    payload: CustomerIn,
    store: CustomerStore = Depends(get_store),
) -> CustomerResponse:
    record = store.insert(
        name=payload.name,
        contact_number=payload.contact_number,
        email=payload.email,
        amount_to_pay=payload.amount_to_pay,
        amount_paid=payload.amount_paid,
    )
    return CustomerResponse(
        data=record_to_customer(record),
        message="Customer created successfully",
    )


@router.put("/{customer_id}", response_model=CustomerResponse)
def update_customer(
    payload: CustomerUpdateIn,
    customer_id: int = Path(..., ge=1, le=MAX_CUSTOMER_ID),
    store: CustomerStore = Depends(get_store),
) -> CustomerResponse:
    record = store.update(customer_id, payload.model_dump())
    return CustomerResponse(
        data=record_to_customer(record),
        message="Customer updated successfully",
    )


@router.patch("/{customer_id}/payment", response_model=CustomerResponse)
def record_payment(
    payload: PaymentIn,
    customer_id: int = Path(..., ge=1, le=MAX_CUSTOMER_ID),
    store: CustomerStore = Depends(get_store),
) -> CustomerResponse:
    """
    Add to ("add") or overwrite ("set") the amount paid. Overpayment is
    accepted.
    """
    current = store.get_by_id(customer_id)
    new_amount_paid = apply_payment(
        current.amount_paid, payload.payment_amount, payload.payment_type
    )
    record = store.set_amount_paid(customer_id, new_amount_paid)

    logger.info(
        "Payment %s of %s recorded for customer id=%s",
        payload.payment_type.value,
        payload.payment_amount,
        customer_id,
    )

    verb = "added" if payload.payment_type is PaymentType.ADD else "updated"
    return CustomerResponse(
        data=record_to_customer(record),
        message=f"Payment {verb} successfully",
    )


@router.delete("/{customer_id}", response_model=CustomerDeletedResponse)
def delete_customer(
    customer_id: int = Path(..., ge=1, le=MAX_CUSTOMER_ID),
    store: CustomerStore = Depends(get_store),
) -> CustomerDeletedResponse:
    record = store.delete(customer_id)
    return CustomerDeletedResponse(
        message="Customer deleted successfully",
        deleted_customer=record_to_customer(record),
    )
