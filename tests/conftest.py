import os
import sys

import pytest

# Add src to path for internal imports
src_path = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), 'src')
if src_path not in sys.path:
    sys.path.insert(0, src_path)

from booking_pricing.config.settings import Settings
from booking_pricing.engine import Catalog, PricingEngine


@pytest.fixture(scope="session")
def settings():
    """Settings for the bundled reference catalog, ignoring the environment."""
    return Settings.load(environ={})


@pytest.fixture(scope="session")
def catalog(settings):
    return Catalog.from_csv(settings.sessions_csv, settings.addons_csv)


@pytest.fixture(scope="function")
def engine(catalog, settings):
    return PricingEngine(catalog=catalog, settings=settings)
