# duedesk/core/summary.py

from dataclasses import dataclass
from decimal import Decimal
from typing import Dict, Iterable, List, Sequence

from duedesk.core.payments import (
    ZERO,
    PaymentStatus,
    derive_payment_view,
    round_money,
    to_decimal,
)


@dataclass(frozen=True)
class CollectionSummary:
    total_customers: int
    total_amount_to_pay: Decimal
    total_amount_paid: Decimal
    total_amount_remaining: Decimal
    total_overpayment: Decimal
    status_counts: Dict[PaymentStatus, int]
    collection_efficiency: Decimal


def summarize(records: Iterable) -> CollectionSummary:
    """
    Fold derived payment values over records exposing amount_to_pay and
    amount_paid. Sums stay at full precision until the result is built.
    """
    count = 0
    to_pay_sum = ZERO
    paid_sum = ZERO
    remaining_sum = ZERO
    overpayment_sum = ZERO
    percentage_sum = ZERO
    status_counts = {status: 0 for status in PaymentStatus}

    for record in records:
        to_pay = to_decimal(record.amount_to_pay)
        paid = to_decimal(record.amount_paid)
        view = derive_payment_view(to_pay, paid)

        count += 1
        to_pay_sum += to_pay
        paid_sum += paid
        remaining_sum += view.amount_remaining
        overpayment_sum += view.overpayment
        percentage_sum += view.payment_percentage
        status_counts[view.payment_status] += 1

    efficiency = percentage_sum / count if count else ZERO

    return CollectionSummary(
        total_customers=count,
        total_amount_to_pay=round_money(to_pay_sum),
        total_amount_paid=round_money(paid_sum),
        total_amount_remaining=round_money(remaining_sum),
        total_overpayment=round_money(overpayment_sum),
        status_counts=status_counts,
        collection_efficiency=round_money(efficiency),
    )


def recent_customers(records: Sequence, limit: int = 5) -> List:
    """Newest records first; equal timestamps fall back to the higher id."""
    ordered = sorted(records, key=lambda r: (r.created_at, r.id), reverse=True)
    return ordered[:limit]


def overdue_customers(records: Iterable) -> List:
    # nothing paid yet on a non-zero balance
    return [
        r
        for r in records
        if to_decimal(r.amount_to_pay) > ZERO
        and derive_payment_view(r.amount_to_pay, r.amount_paid).payment_status
        is PaymentStatus.NOT_PAID
    ]
