# duedesk/core/payments.py
"""
Payment status derivation and the payment-mutation rule.

Everything here is pure: amounts in, derived amounts out. The store and
the API layer call into this module, never the other way round.
"""

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from typing import Union

from duedesk.errors import ValidationError

ZERO = Decimal("0")
HUNDRED = Decimal("100")
CENTS = Decimal("0.01")

Amount = Union[Decimal, int, float, str]


class PaymentStatus(str, Enum):
    NOT_PAID = "Not Paid"
    PARTIALLY_PAID = "Partially Paid"
    PAID = "Paid"
    OVERPAID = "Overpaid"


class PaymentType(str, Enum):
    ADD = "add"
    SET = "set"


@dataclass(frozen=True)
class PaymentView:
    amount_remaining: Decimal
    overpayment: Decimal
    payment_status: PaymentStatus
    payment_percentage: Decimal


def to_decimal(value: Amount) -> Decimal:
    if isinstance(value, Decimal):
        return value
    # via str so a float 0.1 becomes Decimal("0.1")
    return Decimal(str(value))


def round_money(value: Decimal) -> Decimal:
    return value.quantize(CENTS, rounding=ROUND_HALF_UP)


def payment_status(amount_to_pay: Amount, amount_paid: Amount) -> PaymentStatus:
    to_pay = to_decimal(amount_to_pay)
    paid = to_decimal(amount_paid)

    if paid == ZERO:
        return PaymentStatus.NOT_PAID
    if paid < to_pay:
        return PaymentStatus.PARTIALLY_PAID
    if paid == to_pay:
        return PaymentStatus.PAID
    return PaymentStatus.OVERPAID


def payment_percentage(amount_to_pay: Amount, amount_paid: Amount) -> Decimal:
    to_pay = to_decimal(amount_to_pay)
    if to_pay == ZERO:
        return ZERO
    return min(HUNDRED, to_decimal(amount_paid) / to_pay * HUNDRED)


def derive_payment_view(amount_to_pay: Amount, amount_paid: Amount) -> PaymentView:
    """
    Compute remaining balance, overpayment, status and percent paid.

    Inputs are expected to be non-negative; the result is unrounded so
    callers that aggregate keep full precision.
    """
    to_pay = to_decimal(amount_to_pay)
    paid = to_decimal(amount_paid)

    return PaymentView(
        amount_remaining=max(ZERO, to_pay - paid),
        overpayment=max(ZERO, paid - to_pay),
        payment_status=payment_status(to_pay, paid),
        payment_percentage=payment_percentage(to_pay, paid),
    )


def apply_payment(
    current_amount_paid: Amount,
    payment_amount: Amount,
    payment_type: Union[PaymentType, str] = PaymentType.ADD,
) -> Decimal:
    """Return the new amount_paid after an "add" or "set" payment."""
    amount = to_decimal(payment_amount)
    if not amount.is_finite() or amount <= ZERO:
        raise ValidationError("Payment amount must be a positive number")

    try:
        kind = PaymentType(payment_type)
    except ValueError:
        raise ValidationError("Payment type must be 'add' or 'set'")

    if kind is PaymentType.SET:
        return amount
    return to_decimal(current_amount_paid) + amount
