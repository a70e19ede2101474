# backend/app/services/leads/save.py
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.crud import app_settings as settings_crud
from app.crud import contacts as contacts_crud
from app.crud import lists as lists_crud
from app.crud import search as search_crud
from app.crud.companies import upsert_company
from app.services.leads.apify import ApifyClient
from app.services.leads.transform import archive_identifier, transform_search_results

logger = logging.getLogger(__name__)


class LeadSaveError(Exception):
    """A lead could not be turned into a company (and contact)."""


@dataclass
class SaveReport:
    saved: int = 0
    companies_created: int = 0
    contacts_created: int = 0
    failed: List[Dict[str, str]] = field(default_factory=list)
    # contacts with a LinkedIn URL, candidates for delayed enrichment
    new_contact_ids: List[str] = field(default_factory=list)


def _s(v: Any) -> Optional[str]:
    if v is None:
        return None
    v = str(v).strip()
    return v or None


def _dict(v: Any) -> Dict[str, Any]:
    return v if isinstance(v, dict) else {}


def _int(v: Any) -> Optional[int]:
    if isinstance(v, bool):
        return None
    if isinstance(v, int):
        return v
    if isinstance(v, str) and v.strip().isdigit():
        return int(v.strip())
    return None


def company_values(lead: Dict[str, Any], user_id: Optional[str] = None) -> Dict[str, Any]:
    """Company columns from the raw scraper record, falling back to the lead's flat fields."""
    raw = _dict(lead.get("raw_data"))
    org = _dict(raw.get("organization"))
    nested_company = _dict(raw.get("company"))

    name = (
        _s(raw.get("organization_name"))
        or _s(org.get("name"))
        or _s(nested_company.get("name"))
        or _s(lead.get("company") if lead.get("type") == "person" else lead.get("name"))
    )
    if not name or name == "Unknown":
        name = None

    return {
        "name": name,
        "website": _s(org.get("website_url")) or _s(nested_company.get("website")) or _s(lead.get("website")),
        "industry": _s(org.get("industry")) or _s(lead.get("industry")),
        "size": _s(org.get("size")) or _s(nested_company.get("size")),
        "estimated_num_employees": _int(org.get("estimated_num_employees")),
        "location": _s(raw.get("present_raw_address")) or _s(lead.get("location")),
        "description": _s(org.get("short_description")) or _s(org.get("description")) or _s(lead.get("description")),
        "phone": _s(raw.get("phone")) or _s(_dict(org.get("primary_phone")).get("number")),
        "city": _s(raw.get("city")) or _s(org.get("city")),
        "state": _s(raw.get("state")) or _s(org.get("state")),
        "country": _s(raw.get("country")) or _s(org.get("country")),
        "linkedin_url": _s(org.get("linkedin_url")) or (
            _s(lead.get("linkedin_url")) if lead.get("type") == "company" else None
        ),
        "facebook_url": _s(org.get("facebook_url")),
        "twitter_url": _s(org.get("twitter_url")),
        "logo_url": _s(org.get("logo_url")),
        "founded_year": _int(org.get("founded_year")),
        "keywords": org.get("keywords") if isinstance(org.get("keywords"), list) and org["keywords"] else None,
        "user_id": user_id,
    }


def contact_values(lead: Dict[str, Any], company_id: str) -> Dict[str, Any]:
    raw = _dict(lead.get("raw_data"))
    nested = _dict(raw.get("contact"))

    first = _s(raw.get("first_name")) or _s(nested.get("firstName"))
    last = _s(raw.get("last_name")) or _s(nested.get("lastName"))
    if not first and lead.get("name"):
        first, _, rest = str(lead["name"]).strip().partition(" ")
        last = last or _s(rest)

    return {
        "first_name": first,
        "last_name": last,
        "position": _s(raw.get("title")) or _s(nested.get("title")) or _s(lead.get("title")),
        "email": _s(raw.get("email")) or _s(lead.get("email")),
        "email_status": _s(raw.get("email_status")),
        "phone": _s(raw.get("sanitized_phone")) or _s(raw.get("phone")) or _s(lead.get("phone")),
        "linkedin_url": _s(raw.get("linkedin_url")) or _s(nested.get("linkedin_url")) or _s(lead.get("linkedin_url")),
        "seniority": _s(raw.get("seniority")),
        "photo_url": _s(raw.get("photo_url")),
        "city": _s(raw.get("city")),
        "country": _s(raw.get("country")),
        "external_id": _s(raw.get("id")),
        "company_id": company_id,
        "source": "lead_search",
        "notes": f"Imported from lead search on {datetime.utcnow():%Y-%m-%d}",
    }


def save_lead(db: Session, lead: Dict[str, Any], list_id: Optional[str], user_id: Optional[str]) -> SaveReport:
    """Company first, then the contact pointing at its persisted id, then list membership."""
    report = SaveReport()
    if not isinstance(lead, dict):
        raise LeadSaveError("Lead is not an object")
    values = company_values(lead, user_id)
    if not values["name"]:
        raise LeadSaveError("Lead has no company name")

    company, created = upsert_company(db, values)
    if created:
        report.companies_created += 1

    if lead.get("type") == "person":
        data = contact_values(lead, company.id)
        existing = contacts_crud.find_existing(
            db,
            company_id=company.id,
            first_name=data.get("first_name") or "",
            last_name=data.get("last_name") or "",
            linkedin_url=data.get("linkedin_url"),
            email=data.get("email"),
        )
        if existing is None:
            contact = contacts_crud.create(db, data)
            report.contacts_created += 1
            if contact.linkedin_url:
                report.new_contact_ids.append(contact.id)

    if list_id:
        lists_crud.add_company(db, list_id, company.id)
    return report


def save_selected_leads(
    db: Session,
    leads: List[Dict[str, Any]],
    *,
    list_id: Optional[str] = None,
    user_id: Optional[str] = None,
) -> SaveReport:
    """Each lead commits on its own; one bad lead is reported and the rest carry on."""
    if list_id and lists_crud.get(db, list_id) is None:
        raise LeadSaveError(f"List '{list_id}' does not exist")

    report = SaveReport()
    for lead in leads:
        label = (lead.get("name") or lead.get("id") if isinstance(lead, dict) else None) or "lead"
        try:
            one = save_lead(db, lead, list_id, user_id)
            db.commit()
            report.saved += 1
            report.companies_created += one.companies_created
            report.contacts_created += one.contacts_created
            report.new_contact_ids.extend(one.new_contact_ids)
        except (LeadSaveError, ValueError, TypeError, AttributeError, SQLAlchemyError) as exc:
            db.rollback()
            logger.warning("Could not save lead %s: %s", label, exc)
            report.failed.append({"lead": str(label), "error": str(exc)})
    logger.info("Saved %d lead(s), %d failed", report.saved, len(report.failed))
    return report


def run_lead_search(
    db: Session,
    params: Dict[str, Any],
    *,
    user_id: Optional[str] = None,
    client: Optional[ApifyClient] = None,
) -> Dict[str, Any]:
    """Record the search, run it on Apify, normalize and archive the results."""
    if client is None:
        client = ApifyClient(settings_crud.get_value(db, "apify_api_key") or "")

    history = search_crud.create_history(
        db,
        search_params=params,
        user_id=user_id,
        search_type=params.get("search_type") or "people",
        person_titles=params.get("person_titles") or [],
    )
    db.commit()

    raw = client.search(params)
    results = transform_search_results(raw)

    search_crud.set_result_count(db, history, len(results))
    archived = search_crud.archive_results(
        db, history.id, ((archive_identifier(r), r) for r in results)
    )
    db.commit()
    logger.info("Lead search %s: %d result(s), %d newly archived", history.id, len(results), archived)
    return {"search_id": history.id, "results": results, "archived": archived}
