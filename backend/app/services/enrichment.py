# backend/app/services/enrichment.py
"""
Company, email and LinkedIn enrichment.

Each function calls one configured webhook, merges what comes back into the
stored rows and returns a small summary for the API. Callers commit.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from app.core.config import settings
from app.crud import app_settings as settings_crud
from app.crud import contacts as contacts_crud
from app.crud import insights as insights_crud
from app.crud.companies import domain_from_website
from app.crud.interactions import log_interaction
from app.models.company import Company
from app.models.contact import Contact
from app.schemas.insights import (
    AwardsInsight,
    ContentAudit,
    ContentAuditInsight,
    JobPosting,
    JobPostingsInsight,
)
from app.services import demo
from app.services.linkedin import extract_profile_updates
from app.services.scraper.website import scan_website
from app.services.webhooks.client import post_json
from app.services.webhooks.errors import WebhookError, WebhookNotConfigured

logger = logging.getLogger(__name__)


class MissingInformation(ValueError):
    """The record lacks a field the webhook needs (LinkedIn URL, names...)."""


@dataclass
class CompanyEnrichment:
    similar_companies: List[Dict[str, Any]] = field(default_factory=list)
    contacts_created: List[Contact] = field(default_factory=list)
    employees_found: int = 0
    source: str = "webhook"
    notice: Optional[str] = None


def _webhook(db: Session, name: str) -> str:
    url = settings_crud.get_value(db, name)
    if not url:
        raise WebhookNotConfigured(name)
    return url


def _split_name(full_name: str) -> tuple[str, str]:
    first, _, rest = full_name.strip().partition(" ")
    return first, rest.strip()


# -----------------------------------------------------------------------------
# Company
# -----------------------------------------------------------------------------
def parse_company_response(data: Any) -> Dict[str, List[Dict[str, Any]]]:
    if isinstance(data, list):
        data = data[0] if data else {}
    if not isinstance(data, dict):
        return {"similar_companies": [], "employees": []}
    profile = data.get("profile") if isinstance(data.get("profile"), dict) else {}

    similar = data.get("similar_companies")
    if not isinstance(similar, list):
        similar = profile.get("similarCompanies") if isinstance(profile.get("similarCompanies"), list) else []

    employees = data.get("employees")
    if not isinstance(employees, list):
        employees = profile.get("employees") if isinstance(profile.get("employees"), list) else []

    return {
        "similar_companies": [s for s in similar if isinstance(s, dict)],
        "employees": [
            {
                "name": e.get("employee_name") or e.get("name") or "",
                "title": e.get("employee_position") or e.get("title") or "",
                "linkedinUrl": e.get("employee_profile_url") or e.get("linkedinUrl") or "",
                "photo": e.get("employee_photo") or "",
            }
            for e in employees
            if isinstance(e, dict)
        ],
    }


def create_contacts_from_employees(db: Session, company: Company, employees: List[Dict[str, Any]]) -> List[Contact]:
    """New contacts for employees not already on file (same LinkedIn URL, or same name at this company)."""
    created: List[Contact] = []
    today = datetime.utcnow().strftime("%Y-%m-%d")
    for emp in employees:
        full_name = (emp.get("name") or "").strip()
        if not full_name:
            continue
        first, last = _split_name(full_name)
        linkedin = (emp.get("linkedinUrl") or "").strip() or None

        if contacts_crud.find_existing(
            db, company_id=company.id, first_name=first, last_name=last, linkedin_url=linkedin
        ):
            logger.debug("Contact already exists: %s", full_name)
            continue

        contact = contacts_crud.create(db, {
            "first_name": first,
            "last_name": last,
            "position": emp.get("title") or None,
            "company_id": company.id,
            "linkedin_url": linkedin,
            "photo_url": emp.get("photo") or None,
            "source": "company_enrichment",
            "notes": f"Added automatically from LinkedIn data enrichment on {today}",
        })
        log_interaction(db, contact_id=contact.id, type_="CREATED", meta={"source": "company_enrichment"})
        created.append(contact)
    return created


def enrich_company(db: Session, company: Company) -> CompanyEnrichment:
    if not company.linkedin_url:
        raise MissingInformation("Company has no LinkedIn URL")

    result = CompanyEnrichment()
    try:
        url = _webhook(db, "company_enrichment_webhook")
        data = post_json(
            url, {"linkedinUrl": company.linkedin_url}, timeout=settings.ENRICHMENT_TIMEOUT
        )
        parsed = parse_company_response(data)
    except WebhookError as exc:
        if not settings.ENRICHMENT_DEMO_FALLBACK:
            raise
        logger.warning("Company enrichment for %s failed, using sample data: %s", company.id, exc)
        parsed = {"similar_companies": demo.SIMILAR_COMPANIES, "employees": demo.EMPLOYEES}
        result.source = "demo"
        result.notice = f"Enrichment failed ({exc}); showing sample data."

    result.similar_companies = parsed["similar_companies"]
    result.employees_found = len(parsed["employees"])
    result.contacts_created = create_contacts_from_employees(db, company, parsed["employees"])
    logger.info(
        "Company %s enriched: %d similar, %d new contact(s)",
        company.id, len(result.similar_companies), len(result.contacts_created),
    )
    return result


# -----------------------------------------------------------------------------
# Email finder
# -----------------------------------------------------------------------------
def find_email(db: Session, contact: Contact) -> Optional[str]:
    """Return the email found (also stored on the contact), or None."""
    company = db.get(Company, contact.company_id)
    if not (contact.first_name and contact.last_name and company and company.name):
        raise MissingInformation("Contact first name, last name and company name are required")

    url = _webhook(db, "email_finder_webhook")
    data = post_json(url, {
        "firstName": contact.first_name,
        "lastName": contact.last_name,
        "companyName": company.name,
        "companyDomain": domain_from_website(company.website) or "",
        "linkedinUrl": contact.linkedin_url or "",
    }, timeout=settings.WEBHOOK_TIMEOUT)
    if isinstance(data, list):
        data = data[0] if data else {}

    email = data.get("email") if isinstance(data, dict) else None
    if not isinstance(email, str) or "@" not in email:
        logger.info("No email found for contact %s", contact.id)
        return None

    contacts_crud.update(db, contact, {"email": email})
    log_interaction(db, contact_id=contact.id, type_="EMAIL_FOUND", meta={"email": contact.email})
    return contact.email


# -----------------------------------------------------------------------------
# Contact LinkedIn profile
# -----------------------------------------------------------------------------
def enrich_contact(db: Session, contact: Contact) -> Dict[str, Any]:
    """
    Pull the LinkedIn profile and store whatever fields it carries.
    Returns the updated column values; empty when the profile had nothing usable.
    """
    if not contact.linkedin_url:
        raise MissingInformation("Contact has no LinkedIn URL")

    url = _webhook(db, "linkedin_enrichment_webhook")
    data = post_json(
        url, {"linkedinUrl": contact.linkedin_url, "type": "person"}, timeout=settings.ENRICHMENT_TIMEOUT
    )
    updates = extract_profile_updates(data)
    if not updates:
        logger.info("No profile data returned for contact %s", contact.id)
        return {}

    updates["last_enriched"] = datetime.utcnow()
    contacts_crud.update(db, contact, updates)
    log_interaction(db, contact_id=contact.id, type_="ENRICHED", meta={"fields": sorted(updates)})
    return updates


# -----------------------------------------------------------------------------
# Website scan
# -----------------------------------------------------------------------------
class WebsiteUnavailable(WebhookError):
    pass


def scan_company_website(db: Session, company: Company, url: Optional[str] = None) -> Dict[str, Any]:
    """Scan the company site and store topics, career links and award mentions as insights."""
    target = url or company.website
    if not target:
        raise MissingInformation("Company has no website")

    scan = scan_website(target)
    if scan is None:
        raise WebsiteUnavailable(f"Could not fetch {target}", url=target)

    if scan["key_topics"]:
        insights_crud.apply_insight(db, company.id, ContentAuditInsight(
            content_audit=ContentAudit(key_topics=scan["key_topics"]),
        ))
    if scan["job_postings"]:
        insights_crud.apply_insight(db, company.id, JobPostingsInsight(
            job_postings=[JobPosting(**j) for j in scan["job_postings"]],
        ))
    if scan["awards"]:
        insights_crud.apply_insight(db, company.id, AwardsInsight(awards=scan["awards"]))
    if scan.get("description") and not company.description:
        company.description = scan["description"]
        db.flush()
    return scan
