# app/api/errors.py
import logging

from fastapi import HTTPException

from app.crud.contacts import MissingCompany
from app.services.enrichment import MissingInformation
from app.services.generation import UnknownGenerator
from app.services.leads.apify import ApifyError
from app.services.leads.save import LeadSaveError
from app.services.outreach import TemplateNotFound
from app.services.webhooks.errors import WebhookError, WebhookNotConfigured

logger = logging.getLogger(__name__)


def to_http(exc: Exception) -> HTTPException:
    """Map a service exception onto the status code the API reports."""
    if isinstance(exc, WebhookNotConfigured):
        return HTTPException(status_code=400, detail=str(exc))
    if isinstance(exc, (TemplateNotFound, LookupError)):
        return HTTPException(status_code=404, detail=str(exc).strip("'\""))
    if isinstance(exc, (MissingCompany, MissingInformation, UnknownGenerator, LeadSaveError)):
        return HTTPException(status_code=422, detail=str(exc))
    if isinstance(exc, ApifyError):
        code = 400 if "not configured" in str(exc) else 502
        return HTTPException(status_code=code, detail=str(exc))
    if isinstance(exc, WebhookError):
        logger.warning("Upstream failure: %s", exc)
        return HTTPException(status_code=502, detail=str(exc))
    raise exc
