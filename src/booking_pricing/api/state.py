"""
Shared engine instance for the API process.
"""
from typing import Optional

from ..engine import PricingEngine

_engine: Optional[PricingEngine] = None


def get_engine() -> PricingEngine:
    """Get the process-wide engine, loading the configured catalog on first use."""
    global _engine
    if _engine is None:
        _engine = PricingEngine()
    return _engine
