"""
Pricing Engine - Booking price resolution over an immutable catalog.

Resolution order for a booking:
1. Session price for the active channel (0 for unknown session types)
2. Add-on total (unknown ids add 0, duplicates are each charged)
3. Total = session + add-ons (the business value)
4. Tip coerced from raw form input
5. Final price = tip only for complimentary bookings, total + tip otherwise
"""
import logging
import math
import re
from typing import Any, Iterable, Optional

from ..config.settings import get_settings, Settings, PRICE_CHANNELS
from .catalog import Catalog, load_catalog
from .constants import PaymentStatus
from .models import (
    AddonCatalogEntry,
    BookingPricingRequest,
    BookingPricingResult,
    Priced,
    StrictOutcome,
    UnknownKey,
)

logger = logging.getLogger(__name__)

# Leading decimal number, as accepted by a browser's parseFloat
_LEADING_NUMBER = re.compile(r'^[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?')


def parse_amount(value: Any) -> Optional[float]:
    """
    Parse raw form input into a currency amount, or None if it has none.

    Strings use their leading numeric prefix ("12.50abc" -> 12.5).
    Booleans, NaN and infinities are not amounts.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        try:
            amount = float(value)
        except OverflowError:
            return None
    else:
        match = _LEADING_NUMBER.match(str(value).strip())
        if not match:
            return None
        amount = float(match.group(0))
    if math.isnan(amount) or math.isinf(amount):
        return None
    return amount


def coerce_amount(value: Any) -> float:
    """Parse an amount, falling back to 0."""
    amount = parse_amount(value)
    return 0.0 if amount is None else amount


def format_price(price: float) -> str:
    """Render a price the way the booking frontend does (145, 25.5)."""
    if float(price).is_integer():
        return str(int(price))
    return str(price)


def _addon_ids(selected_addons: Any) -> list[str]:
    if not selected_addons:
        return []
    if isinstance(selected_addons, str):
        return [selected_addons]
    if not isinstance(selected_addons, Iterable):
        return []
    return [str(addon_id) for addon_id in selected_addons]


class PricingEngine:
    """
    Booking pricing engine bound to one catalog and one price channel.

    The catalog reference is swapped whole by ``reload``; every public
    operation reads it once so a concurrent reload is never seen half-applied.
    """

    def __init__(
        self,
        catalog: Optional[Catalog] = None,
        price_channel: Optional[str] = None,
        settings: Optional[Settings] = None,
    ):
        """Initialize engine with a catalog (loaded from settings if omitted)."""
        self.settings = settings or get_settings()
        channel = price_channel or self.settings.price_channel
        if channel not in PRICE_CHANNELS:
            raise ValueError(
                f"Unknown price channel '{channel}'. Expected one of: {', '.join(PRICE_CHANNELS)}"
            )
        self.price_channel = channel
        self._catalog = catalog if catalog is not None else load_catalog(self.settings)

    @property
    def catalog(self) -> Catalog:
        return self._catalog

    def reload(self, catalog: Optional[Catalog] = None) -> Catalog:
        """Replace the catalog, re-reading the configured CSVs if none is given."""
        new_catalog = catalog if catalog is not None else load_catalog(self.settings)
        previous = self._catalog
        self._catalog = new_catalog
        logger.info("Catalog reloaded: %s -> %s", previous.fingerprint, new_catalog.fingerprint)
        return new_catalog

    # Catalog lookups

    def get_session_price(self, session_key: str) -> float:
        """Price for a session type in the active channel, 0 if unknown."""
        return self._session_price(self._catalog, session_key)

    def get_available_addons(self, session_type: str) -> list[AddonCatalogEntry]:
        """Add-ons that may be attached to a session type, in catalog order."""
        return [
            addon for addon in self._catalog.addons.values()
            if session_type in addon.available_for
        ]

    def calculate_addon_total(self, selected_addons: Iterable[str]) -> float:
        """Sum add-on prices. Unknown ids add 0; repeated ids are charged each time."""
        return self._addon_total(self._catalog, _addon_ids(selected_addons))

    def calculate_duration_adjustment(self, selected_addons: Iterable[str]) -> int:
        """Extra minutes contributed by the selected add-ons."""
        return self._duration_adjustment(self._catalog, _addon_ids(selected_addons))

    def is_addon_available(self, addon_id: str, session_type: str) -> bool:
        addon = self._catalog.addons.get(addon_id) if isinstance(addon_id, str) else None
        return addon is not None and session_type in addon.available_for

    def get_session_options(self) -> list[dict]:
        """Session dropdown options with channel pricing."""
        options = []
        for key, session in self._catalog.sessions.items():
            price = session.price_for(self.price_channel)
            options.append({
                "value": key,
                "label": f"{session.title} - ${format_price(price)}",
                "price": price,
                "duration": session.duration_minutes,
            })
        return options

    # Booking pricing

    def calculate_booking_pricing(self, request: BookingPricingRequest) -> BookingPricingResult:
        """
        Calculate the full price breakdown for a booking.

        Never raises: unknown keys price at 0 and unusable tips become 0.
        The result's warnings list what was degraded.
        """
        return self._price(self._catalog, request)

    def calculate_booking_pricing_strict(self, request: BookingPricingRequest) -> StrictOutcome:
        """
        Price a booking, rejecting unknown keys instead of pricing them at 0.

        Returns UnknownKey for the first unknown session type or add-on id,
        otherwise Priced wrapping the normal result.
        """
        catalog = self._catalog
        service_type = str(request.service_type or '')
        if service_type not in catalog.sessions:
            return UnknownKey(key=service_type, kind="session")
        for addon_id in _addon_ids(request.selected_addons):
            if addon_id not in catalog.addons:
                return UnknownKey(key=addon_id, kind="addon")
        return Priced(result=self._price(catalog, request))

    def calculate_booking_pricing_from_dict(self, booking_data: Optional[dict]) -> dict:
        """Price a raw booking payload and return the legacy camelCase dict."""
        request = BookingPricingRequest.from_dict(booking_data)
        return self.calculate_booking_pricing(request).to_legacy_dict()

    # Internals take the catalog explicitly so one call sees one catalog

    def _price(self, catalog: Catalog, request: BookingPricingRequest) -> BookingPricingResult:
        service_type = str(request.service_type or '')
        selected = _addon_ids(request.selected_addons)
        warnings = []

        if service_type not in catalog.sessions:
            warnings.append(f"Unknown service type '{service_type}' priced at 0")
        for addon_id in selected:
            if addon_id not in catalog.addons:
                warnings.append(f"Unknown add-on '{addon_id}' priced at 0")

        service_price = self._session_price(catalog, service_type)
        addons_total = self._addon_total(catalog, selected)
        total_price = service_price + addons_total

        tip = parse_amount(request.tip_amount)
        if tip is None:
            if request.tip_amount not in (None, ''):
                warnings.append(f"Tip amount {request.tip_amount!r} is not a number, using 0")
            tip = 0.0

        is_complimentary = bool(request.is_comp_booking) or (
            request.payment_status == PaymentStatus.COMPLIMENTARY.value
        )

        if is_complimentary:
            final_price = tip
        else:
            final_price = total_price + tip

        for warning in warnings:
            logger.warning(warning)

        return BookingPricingResult(
            service_price=service_price,
            addons_total=addons_total,
            total_price=total_price,
            tip_amount=tip,
            final_price=final_price,
            business_value=total_price,
            is_comp_booking=is_complimentary,
            duration_adjustment=self._duration_adjustment(catalog, selected),
            warnings=tuple(warnings),
        )

    def _session_price(self, catalog: Catalog, session_key: str) -> float:
        session = catalog.sessions.get(session_key) if isinstance(session_key, str) else None
        return session.price_for(self.price_channel) if session else 0.0

    @staticmethod
    def _addon_total(catalog: Catalog, selected_addons: list[str]) -> float:
        total = 0.0
        for addon_id in selected_addons:
            addon = catalog.addons.get(addon_id)
            total += addon.price if addon else 0
        return total

    @staticmethod
    def _duration_adjustment(catalog: Catalog, selected_addons: list[str]) -> int:
        total = 0
        for addon_id in selected_addons:
            addon = catalog.addons.get(addon_id)
            total += addon.duration_adjustment_minutes if addon else 0
        return total
