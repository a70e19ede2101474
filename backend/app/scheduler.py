# backend/app/scheduler.py
import logging
from datetime import datetime, timedelta
from typing import Optional

from apscheduler.schedulers.background import BackgroundScheduler
from sqlalchemy.exc import SQLAlchemyError

from app.core.config import settings
from app.crud import contacts as contacts_crud
from app.db.session import SessionLocal
from app.services.enrichment import MissingInformation, enrich_contact
from app.services.webhooks.errors import WebhookError

logger = logging.getLogger(__name__)

scheduler = BackgroundScheduler(timezone="UTC")


def _enrich_contact_job(contact_id: str) -> dict:
    """
    Fire-and-forget LinkedIn enrichment for a freshly saved contact.
    Runs in the scheduler thread with its own session; failures are only logged.
    """
    with SessionLocal() as db:
        contact = contacts_crud.get(db, contact_id)
        if contact is None:
            return {"contact_id": contact_id, "updated": 0}
        try:
            updates = enrich_contact(db, contact)
            db.commit()
        except (WebhookError, MissingInformation, SQLAlchemyError) as exc:
            db.rollback()
            logger.warning("Delayed enrichment for contact %s failed: %s", contact_id, exc)
            return {"contact_id": contact_id, "updated": 0, "error": str(exc)}
        logger.info("Delayed enrichment for contact %s updated %d field(s)", contact_id, len(updates))
        return {"contact_id": contact_id, "updated": len(updates)}


def schedule_contact_enrichment(contact_id: str, delay: Optional[int] = None) -> bool:
    """Queue enrichment `delay` seconds from now. Returns False when disabled or the scheduler is down."""
    if not settings.ENRICH_ON_SAVE:
        return False
    if not scheduler.running:
        logger.debug("Scheduler not running; skipping delayed enrichment for %s", contact_id)
        return False
    delay = settings.ENRICH_AFTER_SAVE_DELAY if delay is None else delay
    scheduler.add_job(
        _enrich_contact_job,
        "date",
        run_date=datetime.utcnow() + timedelta(seconds=delay),
        args=[contact_id],
        id=f"enrich-{contact_id}",
        replace_existing=True,
        misfire_grace_time=60,
    )
    return True


def start_scheduler() -> None:
    if scheduler.running:
        return
    try:
        scheduler.start()
    except Exception:
        # the API keeps serving without delayed enrichment
        logger.exception("Background scheduler failed to start")


def stop_scheduler() -> None:
    if scheduler.running:
        scheduler.shutdown(wait=False)
