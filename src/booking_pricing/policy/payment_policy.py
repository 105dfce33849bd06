"""
Payment Policy - Picks the payment method for complimentary bookings.

A complimentary booking with a tip still needs a real payment method to
collect the tip; one without a tip needs none.
"""
from dataclasses import dataclass
from typing import Any, Optional

from ..engine.constants import PaymentMethod, PaymentStatus
from ..engine.pricing_engine import coerce_amount


@dataclass(frozen=True)
class PaymentMethodDecision:
    """Payment method to use and an optional note for the operator."""
    method: str
    changed: bool = False
    note: Optional[str] = None


def resolve_payment_method(payment_status: str, tip_amount: Any, current_method: str) -> PaymentMethodDecision:
    """
    Resolve the payment method for a booking form.

    Waterfall:
    1. Complimentary with a tip, currently "comp" -> credit card for the tip
    2. Complimentary without a tip, currently anything else -> "comp"
    3. Otherwise keep the operator's choice
    """
    is_complimentary = payment_status == PaymentStatus.COMPLIMENTARY.value
    has_tip = coerce_amount(tip_amount) > 0

    if is_complimentary:
        if has_tip:
            if current_method == PaymentMethod.COMP.value:
                return PaymentMethodDecision(
                    method=PaymentMethod.CREDIT_CARD.value,
                    changed=True,
                    note="Payment method changed to Credit Card for tip processing",
                )
        elif current_method != PaymentMethod.COMP.value:
            return PaymentMethodDecision(
                method=PaymentMethod.COMP.value,
                changed=True,
                note="Payment method set to Complimentary",
            )

    return PaymentMethodDecision(method=current_method)


def requires_card_processing(payment_method: str, final_price: float) -> bool:
    """Only credit card payments with something to collect go to the card processor."""
    return payment_method == PaymentMethod.CREDIT_CARD.value and final_price > 0
