"""
Data models for the pricing engine.

Catalog entries and results are frozen dataclasses; requests are plain
dataclasses built per call.
"""
from dataclasses import dataclass, field
from typing import Any, Optional, Union


@dataclass(frozen=True)
class SessionCatalogEntry:
    """A bookable session type."""
    key: str
    duration_minutes: int
    app_price: float
    web_price: float
    title: str
    description: str = ""
    features: tuple[str, ...] = ()
    popular: bool = False
    premium: bool = False
    badge: str = ""

    def price_for(self, channel: str) -> float:
        """Price charged in the given sales channel ("web" or "app")."""
        return self.app_price if channel == 'app' else self.web_price


@dataclass(frozen=True)
class AddonCatalogEntry:
    """An optional supplementary service attachable to some session types."""
    id: str
    name: str
    price: float
    duration_adjustment_minutes: int = 0
    available_for: tuple[str, ...] = ()
    description: str = ""
    category: str = ""


@dataclass
class BookingPricingRequest:
    """A pricing request built from the booking form."""
    service_type: str = ""
    selected_addons: list[str] = field(default_factory=list)
    tip_amount: Any = 0  # raw form input, coerced during pricing
    is_comp_booking: bool = False
    payment_status: str = ""
    payment_method: str = "credit_card"

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> 'BookingPricingRequest':
        """Build a request from a camelCase or snake_case booking payload."""
        data = data or {}

        def pick(snake: str, camel: str, default):
            if snake in data and data[snake] is not None:
                return data[snake]
            if camel in data and data[camel] is not None:
                return data[camel]
            return default

        addons = pick('selected_addons', 'selectedAddons', [])
        if isinstance(addons, str):
            addons = [addons]
        elif not isinstance(addons, (list, tuple, set, frozenset)):
            addons = []

        return cls(
            service_type=str(pick('service_type', 'serviceType', '')),
            selected_addons=[str(a) for a in addons],
            tip_amount=pick('tip_amount', 'tipAmount', 0),
            is_comp_booking=bool(pick('is_comp_booking', 'isCompBooking', False)),
            payment_status=str(pick('payment_status', 'paymentStatus', '')),
            payment_method=str(pick('payment_method', 'paymentMethod', 'credit_card')),
        )


@dataclass(frozen=True)
class BookingPricingResult:
    """Complete result of a booking pricing calculation."""
    service_price: float
    addons_total: float
    total_price: float  # service + add-ons, regardless of comp status
    tip_amount: float
    final_price: float  # amount to collect now
    business_value: float  # reported value, always equals total_price
    is_comp_booking: bool
    duration_adjustment: int
    warnings: tuple[str, ...] = ()

    def to_legacy_dict(self) -> dict:
        """Convert to the camelCase shape the booking frontend consumes."""
        return {
            "servicePrice": self.service_price,
            "addonsTotal": self.addons_total,
            "totalPrice": self.total_price,
            "tipAmount": self.tip_amount,
            "finalPrice": self.final_price,
            "businessValue": self.business_value,
            "isCompBooking": self.is_comp_booking,
            "durationAdjustment": self.duration_adjustment,
        }


@dataclass(frozen=True)
class Priced:
    """Strict-mode outcome: every key was known."""
    result: BookingPricingResult


@dataclass(frozen=True)
class UnknownKey:
    """Strict-mode outcome: a session type or add-on id is not in the catalog."""
    key: str
    kind: str  # "session" or "addon"


StrictOutcome = Union[Priced, UnknownKey]
