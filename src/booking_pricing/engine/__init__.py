"""Engine subpackage - catalog and booking pricing logic."""
from .pricing_engine import PricingEngine
from .catalog import Catalog, CatalogError, load_catalog
from .models import BookingPricingRequest, BookingPricingResult, Priced, UnknownKey

__all__ = [
    'PricingEngine',
    'Catalog',
    'CatalogError',
    'load_catalog',
    'BookingPricingRequest',
    'BookingPricingResult',
    'Priced',
    'UnknownKey',
]
