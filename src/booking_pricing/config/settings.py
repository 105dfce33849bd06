"""
Centralized settings and path configuration for the booking pricing engine.
"""
import os
from pathlib import Path
from dataclasses import dataclass
from typing import Optional


PRICE_CHANNELS = ('web', 'app')


def get_package_root() -> Path:
    """Get the booking_pricing package directory."""
    return Path(__file__).resolve().parent.parent


def _env_flag(value: Optional[str]) -> bool:
    return str(value).strip().lower() in ('1', 'true', 'yes', 'on')


@dataclass
class Settings:
    """Application settings with sensible defaults."""

    # Package paths
    package_root: Path

    # Catalog source files
    sessions_csv: Path
    addons_csv: Path

    # Which per-channel price getSessionPrice reads ("web" or "app")
    price_channel: str = 'web'

    # Reject unknown session/add-on keys at the API boundary
    strict_mode: bool = False

    log_level: str = 'INFO'

    @classmethod
    def load(cls, package_root: Optional[Path] = None, environ: Optional[dict] = None) -> 'Settings':
        """Load settings from the bundled data directory and environment overrides."""
        root = package_root or get_package_root()
        env = os.environ if environ is None else environ

        data_dir = root / 'data'
        sessions_csv = Path(env.get('BOOKING_PRICING_SESSIONS_CSV') or data_dir / 'sessions.csv')
        addons_csv = Path(env.get('BOOKING_PRICING_ADDONS_CSV') or data_dir / 'addons.csv')

        channel = str(env.get('BOOKING_PRICING_CHANNEL', 'web')).strip().lower()
        if channel not in PRICE_CHANNELS:
            raise ValueError(
                f"Unknown price channel '{channel}'. Expected one of: {', '.join(PRICE_CHANNELS)}"
            )

        return cls(
            package_root=root,
            sessions_csv=sessions_csv,
            addons_csv=addons_csv,
            price_channel=channel,
            strict_mode=_env_flag(env.get('BOOKING_PRICING_STRICT', 'false')),
            log_level=str(env.get('BOOKING_PRICING_LOG_LEVEL', 'INFO')).upper(),
        )


# Default settings instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get the global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings.load()
    return _settings
