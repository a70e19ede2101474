# app/crud/app_settings.py
"""
The app_settings row is the only source of truth for keys and webhook URLs.

Reads go through a process-wide cache that every write invalidates. If the
database cannot be read, the last cached copy is served; if nothing was ever
cached, the configuration defaults are used.
"""
import logging
import threading
from typing import Any, Dict, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.config import settings
from app.models.app_settings import DEFAULT_SETTINGS_ID, KEY_FIELDS, WEBHOOK_FIELDS, AppSettings

logger = logging.getLogger(__name__)

SETTINGS_FIELDS = KEY_FIELDS + WEBHOOK_FIELDS

# "last_good" survives invalidation; it is what a failed read serves
_cache: Dict[str, Any] = {"values": None, "last_good": None}
_lock = threading.Lock()


def _seed_values() -> Dict[str, Optional[str]]:
    """Defaults taken from the environment, used once when the row is created."""
    seed = {f: None for f in SETTINGS_FIELDS}
    seed.update(
        apollo_api_key=settings.APOLLO_API_KEY,
        apify_api_key=settings.APIFY_API_KEY,
        email_finder_webhook=settings.EMAIL_FINDER_WEBHOOK,
        linkedin_enrichment_webhook=settings.LINKEDIN_ENRICHMENT_WEBHOOK,
        company_enrichment_webhook=settings.COMPANY_ENRICHMENT_WEBHOOK,
        profile_research_webhook=settings.PROFILE_RESEARCH_WEBHOOK,
        crm_export_webhook=settings.CRM_EXPORT_WEBHOOK,
    )
    return {k: (v.strip() or None) if isinstance(v, str) else v for k, v in seed.items()}


def _row_values(row: AppSettings) -> Dict[str, Optional[str]]:
    return {f: getattr(row, f) for f in SETTINGS_FIELDS}


def invalidate_cache() -> None:
    with _lock:
        _cache["values"] = None


def clear_cache() -> None:
    with _lock:
        _cache["values"] = None
        _cache["last_good"] = None


def get_or_create(db: Session) -> AppSettings:
    row = db.get(AppSettings, DEFAULT_SETTINGS_ID)
    if row is None:
        row = AppSettings(id=DEFAULT_SETTINGS_ID, **_seed_values())
        db.add(row)
        db.commit()
        db.refresh(row)
        logger.info("Created default app_settings row")
    return row


def get_values(db: Session) -> Dict[str, Optional[str]]:
    """Cached settings as a plain dict."""
    with _lock:
        cached = _cache["values"]
    if cached is not None:
        return dict(cached)

    try:
        values = _row_values(get_or_create(db))
    except SQLAlchemyError as exc:
        db.rollback()
        with _lock:
            last_good = _cache["last_good"]
        if last_good is not None:
            logger.warning("Could not read app_settings, serving last cached copy: %s", exc)
            return dict(last_good)
        logger.warning("Could not read app_settings, using configuration defaults: %s", exc)
        return _seed_values()

    with _lock:
        _cache["values"] = values
        _cache["last_good"] = values
    return dict(values)


def get_value(db: Session, field: str) -> Optional[str]:
    value = get_values(db).get(field)
    if isinstance(value, str):
        value = value.strip()
    return value or None


def update(db: Session, values: Dict[str, Any]) -> AppSettings:
    row = get_or_create(db)
    for k, v in values.items():
        if k in SETTINGS_FIELDS:
            if isinstance(v, str):
                v = v.strip() or None
            setattr(row, k, v)  # None clears a field
    db.commit()
    db.refresh(row)
    invalidate_cache()
    with _lock:
        _cache["last_good"] = _row_values(row)
    return row
