"""
Catalog - Immutable session and add-on catalog.

Loaded once at startup from the bundled CSV files, configured CSV paths,
or the pricing API payload. A Catalog is never mutated after construction;
reloading means building a new one.
"""
import hashlib
import json
import logging
from dataclasses import asdict
from pathlib import Path
from types import MappingProxyType
from typing import Iterable, Mapping, Optional

import pandas as pd

from ..config.settings import get_settings, Settings
from .models import SessionCatalogEntry, AddonCatalogEntry

logger = logging.getLogger(__name__)

LIST_SEPARATOR = '|'


class CatalogError(ValueError):
    """Raised when catalog data violates a catalog invariant."""
    pass


def _is_missing(value) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return isinstance(value, float) and pd.isna(value)


def _split_list(value) -> tuple[str, ...]:
    if _is_missing(value):
        return ()
    if isinstance(value, (list, tuple)):
        return tuple(str(v).strip() for v in value if str(v).strip())
    return tuple(part.strip() for part in str(value).split(LIST_SEPARATOR) if part.strip())


def _as_bool(value) -> bool:
    if _is_missing(value):
        return False
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in ('1', 'true', 'yes')


def _as_text(value) -> str:
    if _is_missing(value):
        return ""
    return str(value).strip()


class Catalog:
    """
    Read-only catalog of sessions and add-ons.

    Declaration order is preserved for both collections; lookups are by key.
    """

    def __init__(
        self,
        sessions: Iterable[SessionCatalogEntry],
        addons: Iterable[AddonCatalogEntry],
    ):
        session_map = {}
        for session in sessions:
            if session.key in session_map:
                raise CatalogError(f"Duplicate session key '{session.key}'")
            if session.duration_minutes <= 0:
                raise CatalogError(f"Session '{session.key}' must have a positive duration")
            if session.app_price < 0 or session.web_price < 0:
                raise CatalogError(f"Session '{session.key}' has a negative price")
            session_map[session.key] = session

        addon_map = {}
        for addon in addons:
            if addon.id in addon_map:
                raise CatalogError(f"Duplicate add-on id '{addon.id}'")
            if addon.price < 0:
                raise CatalogError(f"Add-on '{addon.id}' has a negative price")
            if not addon.available_for:
                raise CatalogError(f"Add-on '{addon.id}' is not available for any session")
            unknown = [key for key in addon.available_for if key not in session_map]
            if unknown:
                raise CatalogError(
                    f"Add-on '{addon.id}' references unknown sessions: {', '.join(unknown)}"
                )
            addon_map[addon.id] = addon

        self._sessions = MappingProxyType(session_map)
        self._addons = MappingProxyType(addon_map)
        self._fingerprint = self._compute_fingerprint()

    @property
    def sessions(self) -> Mapping[str, SessionCatalogEntry]:
        return self._sessions

    @property
    def addons(self) -> Mapping[str, AddonCatalogEntry]:
        return self._addons

    @property
    def fingerprint(self) -> str:
        """Short SHA256 of the catalog content."""
        return self._fingerprint

    def _compute_fingerprint(self) -> str:
        payload = {
            "sessions": [asdict(s) for s in self._sessions.values()],
            "addons": [asdict(a) for a in self._addons.values()],
        }
        raw = json.dumps(payload, sort_keys=True).encode('utf-8')
        return hashlib.sha256(raw).hexdigest()[:12]

    def __repr__(self) -> str:
        return (
            f"Catalog(sessions={len(self._sessions)}, addons={len(self._addons)}, "
            f"fingerprint={self._fingerprint})"
        )

    # Loaders

    @classmethod
    def from_dataframes(cls, sessions_df: pd.DataFrame, addons_df: pd.DataFrame) -> 'Catalog':
        """Build a catalog from session and add-on DataFrames."""
        missing = {'key', 'duration', 'web_price', 'title'} - set(sessions_df.columns)
        if missing:
            raise CatalogError(f"Sessions data missing columns: {', '.join(sorted(missing))}")
        missing = {'id', 'price', 'available_for'} - set(addons_df.columns)
        if missing:
            raise CatalogError(f"Add-ons data missing columns: {', '.join(sorted(missing))}")

        sessions = []
        for _, row in sessions_df.iterrows():
            web_price = float(row['web_price'])
            app_price = row.get('app_price')
            sessions.append(SessionCatalogEntry(
                key=_as_text(row['key']),
                duration_minutes=int(float(row['duration'])),
                app_price=web_price if _is_missing(app_price) else float(app_price),
                web_price=web_price,
                title=_as_text(row['title']),
                description=_as_text(row.get('description')),
                features=_split_list(row.get('features')),
                popular=_as_bool(row.get('popular', False)),
                premium=_as_bool(row.get('premium', False)),
                badge=_as_text(row.get('badge')),
            ))

        addons = []
        for _, row in addons_df.iterrows():
            duration = row.get('duration_adjustment', 0)
            addon_id = _as_text(row['id'])
            addons.append(AddonCatalogEntry(
                id=addon_id,
                name=_as_text(row.get('name')) or addon_id,
                price=float(row['price']),
                duration_adjustment_minutes=0 if _is_missing(duration) else int(float(duration)),
                available_for=_split_list(row['available_for']),
                description=_as_text(row.get('description')),
                category=_as_text(row.get('category')),
            ))

        return cls(sessions, addons)

    @classmethod
    def from_csv(cls, sessions_csv: Path, addons_csv: Path) -> 'Catalog':
        """Load a catalog from session and add-on CSV files."""
        for path in (sessions_csv, addons_csv):
            if not path.exists():
                raise FileNotFoundError(f"Catalog file not found at {path}.")

        sessions_df = pd.read_csv(sessions_csv, dtype=str, keep_default_na=False)
        addons_df = pd.read_csv(addons_csv, dtype=str, keep_default_na=False)
        catalog = cls.from_dataframes(sessions_df, addons_df)
        logger.info("Loaded catalog from %s and %s: %r", sessions_csv, addons_csv, catalog)
        return catalog

    @classmethod
    def from_api_payload(cls, sessions_data: dict, addons_data: list) -> 'Catalog':
        """
        Build a catalog from the pricing API response bodies.

        The API exposes a single ``price`` per session, used for both channels.
        """
        sessions = []
        for key, session in sessions_data.items():
            price = float(session.get('price', 0))
            sessions.append(SessionCatalogEntry(
                key=str(key),
                duration_minutes=int(session.get('duration', 0)),
                app_price=price,
                web_price=price,
                title=str(session.get('name') or session.get('title') or key),
                description=str(session.get('description') or ''),
                features=tuple(session.get('features') or ()),
                popular=bool(session.get('popular', False)),
                premium=bool(session.get('premium', False)),
                badge=str(session.get('badge') or ''),
            ))

        addons = []
        for addon in addons_data:
            addons.append(AddonCatalogEntry(
                id=str(addon['id']),
                name=str(addon.get('name') or addon['id']),
                price=float(addon.get('price', 0)),
                duration_adjustment_minutes=int(addon.get('duration_adjustment') or 0),
                available_for=tuple(addon.get('available_for') or ()),
                description=str(addon.get('description') or ''),
                category=str(addon.get('category') or ''),
            ))

        return cls(sessions, addons)


def load_catalog(settings: Optional[Settings] = None) -> Catalog:
    """Load the catalog configured in settings (bundled CSVs by default)."""
    settings = settings or get_settings()
    return Catalog.from_csv(settings.sessions_csv, settings.addons_csv)
