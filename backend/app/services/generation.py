# backend/app/services/generation.py
"""
AI-backed text generation through the configured n8n webhooks.

Every generator goes through the GET -> POST retry policy. When the webhook is
not configured or all attempts fail, sample content is stored instead and the
result carries a notice saying so.
"""
from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional

from sqlalchemy.orm import Session

from app.crud import app_settings as settings_crud
from app.crud import insights as insights_crud
from app.crud.companies import update as update_company
from app.models.company import Company
from app.models.contact import Contact
from app.schemas.insights import (
    AwardsInsight,
    ContentAudit,
    ContentAuditInsight,
    FacebookAdsInsight,
    IdealClientInsight,
    JobPosting,
    JobPostingsInsight,
    ResearchInsight,
)
from app.services import demo
from app.services.webhooks.client import Attempt, call_with_fallback
from app.services.webhooks.normalizer import parse_json

logger = logging.getLogger(__name__)

RESEARCH_TYPES = ("competitive", "market", "growth", "tech")

# channel -> (webhook field, company column)
OUTREACH_CHANNELS = {
    "call": ("call_script_webhook", "call_script"),
    "email": ("email_script_webhook", "email_script"),
    "text": ("text_script_webhook", "text_script"),
    "social": ("social_dm_webhook", "social_dm_script"),
}

INSIGHT_WEBHOOKS = {
    "awards": "awards_webhook",
    "job_postings": "jobs_webhook",
    "content_audit": "content_webhook",
    "facebook_ads": "facebook_ads_webhook",
    "tech_stack": "tech_stack_webhook",
}

_BULLET = re.compile(r"^\s*(?:[-*•]|\d+[.)])\s*")


class UnknownGenerator(ValueError):
    pass


@dataclass
class GenerationResult:
    content: str
    source: str = "webhook"          # "webhook" or "demo"
    notice: Optional[str] = None
    body: str = ""
    attempts: List[Attempt] = field(default_factory=list)

    @property
    def is_demo(self) -> bool:
        return self.source == "demo"


def _configured(db: Session, *fields: str) -> Optional[str]:
    for f in fields:
        url = settings_crud.get_value(db, f)
        if url:
            return url
    return None


def generate(
    db: Session,
    webhook_fields: tuple[str, ...],
    payload: Dict[str, Any],
    fallback: Callable[[], str],
    label: str,
) -> GenerationResult:
    url = _configured(db, *webhook_fields)
    if not url:
        logger.info("%s: webhook %s not configured, using sample content", label, webhook_fields[0])
        return GenerationResult(
            content=fallback(),
            source="demo",
            notice=f"Webhook for {label} is not configured. Showing sample content.",
        )

    outcome = call_with_fallback(url, payload)
    if outcome.ok:
        return GenerationResult(content=outcome.content, body=outcome.body, attempts=outcome.attempts)

    logger.warning("%s: webhook failed after %d attempt(s): %s", label, len(outcome.attempts), outcome.last_error)
    return GenerationResult(
        content=fallback(),
        source="demo",
        notice=f"Could not generate {label} ({outcome.last_error}). Showing sample content.",
        attempts=outcome.attempts,
    )


def company_payload(company: Company, action: str, **extra) -> Dict[str, Any]:
    payload = {
        "companyId": company.id,
        "companyName": company.name,
        "industry": company.industry,
        "website": company.website,
        "description": company.description,
        "location": company.location,
        "linkedinUrl": company.linkedin_url,
        "action": action,
    }
    payload.update(extra)
    return payload


def _company_dict(company: Company) -> Dict[str, Any]:
    return {"name": company.name, "industry": company.industry, "location": company.location}


def _json_body(result: GenerationResult) -> Any:
    """Decoded response when the webhook answered with JSON (first list item unwrapped)."""
    if result.is_demo:
        return None
    ok, data = parse_json(result.body)
    if not ok:
        ok, data = parse_json(result.content)
    if not ok:
        return None
    if isinstance(data, list) and len(data) == 1 and isinstance(data[0], dict):
        return data[0]
    return data


def _lines(text: str) -> List[str]:
    out = []
    for line in (text or "").splitlines():
        line = _BULLET.sub("", line).strip()
        if line:
            out.append(line)
    return out


# -----------------------------------------------------------------------------
# Research & outreach
# -----------------------------------------------------------------------------
def research_company(db: Session, company: Company, research_type: str) -> GenerationResult:
    if research_type not in RESEARCH_TYPES:
        raise UnknownGenerator(f"Unknown research type '{research_type}'")
    result = generate(
        db,
        (f"{research_type}_research_webhook", "company_research_webhook"),
        company_payload(company, "generateResearch", researchType=research_type),
        lambda: demo.research(research_type, _company_dict(company)),
        f"{demo.RESEARCH_TITLES[research_type]} research",
    )
    update_company(db, company, {"research_notes": result.content})
    return result


def generate_outreach(
    db: Session,
    company: Company,
    channel: str,
    *,
    contact: Optional[Contact] = None,
    context: str = "",
) -> GenerationResult:
    if channel not in OUTREACH_CHANNELS:
        raise UnknownGenerator(f"Unknown outreach channel '{channel}'")
    webhook_field, column = OUTREACH_CHANNELS[channel]
    extra: Dict[str, Any] = {"channel": channel, "additionalContext": context}
    if contact is not None:
        extra.update(
            contactId=contact.id,
            contactName=" ".join(p for p in (contact.first_name, contact.last_name) if p),
            contactTitle=contact.position,
        )
    result = generate(
        db,
        (webhook_field, "outreach_webhook"),
        company_payload(company, "generateOutreach", **extra),
        lambda: demo.outreach(channel, _company_dict(company), contact.first_name if contact else ""),
        f"{demo.CHANNEL_TITLES[channel].lower()} outreach",
    )
    update_company(db, company, {column: result.content})
    return result


def profile_research(db: Session, contact: Contact) -> GenerationResult:
    company = db.get(Company, contact.company_id)
    full_name = " ".join(p for p in (contact.first_name, contact.last_name) if p)
    payload = {
        "contactId": contact.id,
        "name": full_name,
        "firstName": contact.first_name,
        "lastName": contact.last_name,
        "title": contact.position,
        "linkedinUrl": contact.linkedin_url,
        "companyName": company.name if company else None,
        "companyWebsite": company.website if company else None,
        "action": "profileResearch",
    }
    result = generate(
        db,
        ("profile_research_webhook",),
        payload,
        lambda: demo.profile_research(full_name, company.name if company else ""),
        "profile research",
    )
    insights_crud.apply_insight(db, contact.company_id, ResearchInsight(profile_research=result.content))
    return result


def ideal_customer(db: Session, company: Company) -> GenerationResult:
    result = generate(
        db,
        ("ideal_customer_webhook",),
        company_payload(company, "idealCustomerAnalysis"),
        lambda: demo.ideal_customer(_company_dict(company)),
        "ideal customer analysis",
    )
    data = _json_body(result)
    flag = None
    approach = None
    if isinstance(data, dict):
        for key in ("ideal_client", "idealClient", "isIdealClient", "is_ideal_client"):
            if isinstance(data.get(key), bool):
                flag = data[key]
                break
        approach = data.get("suggested_approach") or data.get("suggestedApproach")

    row = insights_crud.get_or_create(db, company.id)
    if flag is None and row.ideal_client is None:
        values = {"ideal_customer_analysis": result.content}
        if isinstance(approach, str):
            values["suggested_approach"] = approach
        insights_crud.set_fields(db, company.id, values)
    else:
        insights_crud.apply_insight(db, company.id, IdealClientInsight(
            ideal_client=flag if flag is not None else bool(row.ideal_client),
            ideal_customer_analysis=result.content,
            suggested_approach=approach if isinstance(approach, str) else None,
        ))
    return result


# -----------------------------------------------------------------------------
# Insight generators
# -----------------------------------------------------------------------------
def _awards_from(result: GenerationResult) -> List[str]:
    data = _json_body(result)
    if isinstance(data, dict):
        data = data.get("awards") or data.get("recentAwards")
    if isinstance(data, list):
        return [a if isinstance(a, str) else (a.get("name") or a.get("title") or str(a)) for a in data if a]
    return _lines(result.content)


def _jobs_from(result: GenerationResult) -> List[JobPosting]:
    data = _json_body(result)
    if isinstance(data, dict):
        data = data.get("job_postings") or data.get("jobPostings") or data.get("jobs")
    if isinstance(data, list):
        jobs = []
        for j in data:
            if isinstance(j, str):
                jobs.append(JobPosting(title=j))
            elif isinstance(j, dict) and (j.get("title") or j.get("job_title")):
                jobs.append(JobPosting(
                    title=j.get("title") or j.get("job_title"),
                    description=j.get("description"),
                    location=j.get("location"),
                    posted_date=j.get("posted_date") or j.get("postedDate"),
                    url=j.get("url") or j.get("link"),
                ))
        return jobs
    return [JobPosting(title=line) for line in _lines(result.content)]


def _audit_from(result: GenerationResult) -> ContentAudit:
    data = _json_body(result)
    if isinstance(data, dict):
        audit = data.get("content_audit") or data.get("contentAudit") or data
        if isinstance(audit, dict) and any(
            k in audit for k in ("key_topics", "keyTopics", "recent_content", "content_gaps")
        ):
            return ContentAudit(
                key_topics=audit.get("key_topics") or audit.get("keyTopics") or [],
                recent_content=audit.get("recent_content") or audit.get("recentContent") or [],
                content_gaps=audit.get("content_gaps") or audit.get("contentGaps") or [],
            )
    return ContentAudit(content=result.content)


def _ads_from(result: GenerationResult) -> FacebookAdsInsight:
    data = _json_body(result)
    if isinstance(data, dict):
        for key in ("running_facebook_ads", "runningFacebookAds", "isRunningAds", "running_ads"):
            if isinstance(data.get(key), bool):
                details = data.get("ad_details") or data.get("adDetails") or ""
                return FacebookAdsInsight(running_facebook_ads=data[key], ad_details=str(details))
    return FacebookAdsInsight(running_facebook_ads=False, ad_details=result.content)


def generate_insight(db: Session, company: Company, kind: str) -> GenerationResult:
    if kind not in INSIGHT_WEBHOOKS:
        raise UnknownGenerator(f"Unknown insight type '{kind}'")

    def fallback() -> str:
        return json.dumps(demo.insight(kind, _company_dict(company)))

    result = generate(
        db,
        (INSIGHT_WEBHOOKS[kind],),
        company_payload(company, f"generate_{kind}"),
        fallback,
        kind.replace("_", " "),
    )
    # sample payloads are JSON too; parse them the same way
    if result.is_demo:
        result.body = result.content

    parse_source = GenerationResult(content=result.content, body=result.body)
    if kind == "awards":
        insights_crud.apply_insight(db, company.id, AwardsInsight(awards=_awards_from(parse_source)))
    elif kind == "job_postings":
        insights_crud.apply_insight(db, company.id, JobPostingsInsight(job_postings=_jobs_from(parse_source)))
    elif kind == "content_audit":
        insights_crud.apply_insight(db, company.id, ContentAuditInsight(content_audit=_audit_from(parse_source)))
    elif kind == "facebook_ads":
        insights_crud.apply_insight(db, company.id, _ads_from(parse_source))
    else:
        data = _json_body(parse_source)
        stack = data if data is not None else {"summary": result.content}
        now = datetime.utcnow()
        insights_crud.set_fields(db, company.id, {"tech_stack_data": stack, "tech_stack_last_updated": now})
        company.tech_stack_data = stack
        company.tech_stack_last_updated = now
        db.flush()
    return result
