# backend/app/services/outreach.py
from __future__ import annotations

import logging
import re
from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from app.crud import app_settings as settings_crud
from app.crud import contacts as contacts_crud
from app.crud import insights as insights_crud
from app.crud.interactions import log_interaction
from app.models.company import Company
from app.models.contact import Contact
from app.services.webhooks.client import post_json
from app.services.webhooks.errors import WebhookNotConfigured

logger = logging.getLogger(__name__)

_PLACEHOLDER = re.compile(r"\{\{\s*(\w+)\s*\}\}")

EMAIL_TEMPLATES: List[Dict[str, Any]] = [
    {
        "id": "1",
        "name": "Initial Outreach",
        "subject": "Helping {{company}} achieve growth objectives",
        "body": (
            "Hi {{firstName}},\n\n"
            "I noticed that {{company}} recently {{recentActivity}}. Congratulations!\n\n"
            "Based on your focus on {{keyTopics}}, I thought you might be interested in how our platform "
            "could help you {{benefitStatement}}.\n\n"
            "Would you be available for a quick 15-minute call this week to discuss how we might help "
            "{{company}} with {{painPoint}}?\n\n"
            "Best regards,\nYour Name"
        ),
        "variables": ["firstName", "company", "recentActivity", "keyTopics", "benefitStatement", "painPoint"],
    },
    {
        "id": "2",
        "name": "Follow-up Email",
        "subject": "Following up on {{company}}'s {{specificNeed}}",
        "body": (
            "Hi {{firstName}},\n\n"
            "I wanted to follow up on my previous email regarding how we could help {{company}} with "
            "{{specificNeed}}.\n\n"
            "I thought you might be interested in this case study about how we helped a similar {{industry}} "
            "company increase their efficiency by 30%: [Case Study Link]\n\n"
            "If you'd like to discuss how we could achieve similar results for {{company}}, I'm available "
            "for a call this week.\n\n"
            "Best regards,\nYour Name"
        ),
        "variables": ["firstName", "company", "specificNeed", "industry"],
    },
    {
        "id": "3",
        "name": "Job Posting Response",
        "subject": "Regarding your {{jobTitle}} opening at {{company}}",
        "body": (
            "Hi {{firstName}},\n\n"
            "I noticed that {{company}} is currently hiring for a {{jobTitle}} position, which suggests you "
            "might be scaling your {{department}} team.\n\n"
            "Many companies we work with find that our platform helps new team members onboard faster and "
            "become productive more quickly, especially in the {{department}} department.\n\n"
            "Would you be interested in a brief demo to see how we could help your growing team?\n\n"
            "Best regards,\nYour Name"
        ),
        "variables": ["firstName", "company", "jobTitle", "department"],
    },
]


class TemplateNotFound(LookupError):
    pass


def get_template(template_id: str) -> Dict[str, Any]:
    for t in EMAIL_TEMPLATES:
        if t["id"] == template_id:
            return t
    raise TemplateNotFound(f"Email template '{template_id}' not found")


def fill(text: str, variables: Dict[str, Any]) -> str:
    """Replace {{name}} placeholders; unknown names are left as they are."""
    def repl(m: re.Match) -> str:
        value = variables.get(m.group(1))
        return m.group(0) if value is None else str(value)
    return _PLACEHOLDER.sub(repl, text)


def template_variables(contact: Contact, company: Optional[Company], custom: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    variables: Dict[str, Any] = {
        "firstName": contact.first_name or "",
        "lastName": contact.last_name or "",
        "company": company.name if company else "",
        "industry": (company.industry if company else "") or "",
    }
    variables.update({k: v for k, v in (custom or {}).items() if v is not None})
    return variables


def render_template(
    template_id: str, contact: Contact, company: Optional[Company], custom: Optional[Dict[str, Any]] = None
) -> Dict[str, str]:
    tpl = get_template(template_id)
    variables = template_variables(contact, company, custom)
    return {"subject": fill(tpl["subject"], variables), "body": fill(tpl["body"], variables)}


def send_email(
    db: Session, contact: Contact, template_id: str, custom: Optional[Dict[str, Any]] = None
) -> Dict[str, str]:
    """
    Render and record an outbound email on the contact. Delivery itself is
    handled outside this service; the send is logged as an interaction.
    """
    company = db.get(Company, contact.company_id)
    rendered = render_template(template_id, contact, company, custom)
    contacts_crud.append_note(
        contact, f"Email sent on {datetime.utcnow():%Y-%m-%d}:\nSubject: {rendered['subject']}"
    )
    log_interaction(
        db,
        contact_id=contact.id,
        type_="EMAIL_SENT",
        meta={"template_id": template_id, "subject": rendered["subject"], "to": contact.email},
    )
    db.flush()
    logger.info("Email '%s' recorded for contact %s", rendered["subject"], contact.id)
    return rendered


# -----------------------------------------------------------------------------
# Call script
# -----------------------------------------------------------------------------
def build_call_script(contact: Contact, company: Company, insight) -> str:
    first = contact.first_name or ""
    name = " ".join(p for p in (contact.first_name, contact.last_name) if p)
    title = contact.position or "contact"

    script = f"Call Script for {name}, {title} at {company.name}\n\n"
    script += f"Introduction: \"Hello {first}, this is [Your Name] from [Your Company]. How are you today?\"\n\n"

    if insight is not None:
        if insight.awards:
            script += (
                f"Congratulate on recent achievement: \"I noticed that {company.name} recently received "
                f"{insight.awards[0]}. Congratulations on that achievement!\"\n\n"
            )
        if insight.job_postings:
            job_title = (insight.job_postings[0] or {}).get("title") or ""
            area = "marketing" if "Marketing" in job_title else "team"
            script += (
                f"Reference hiring: \"I see you're currently hiring for {job_title}. "
                f"It looks like you're expanding your {area}.\"\n\n"
            )
        topics = (insight.content_audit or {}).get("key_topics") or []
        if topics:
            script += (
                f"Reference content focus: \"I noticed from your website that {company.name} is focused on "
                f"{', '.join(topics)}. That's actually why I'm calling...\"\n\n"
            )
        if insight.suggested_approach:
            script += f"Value proposition: \"{insight.suggested_approach}\"\n\n"

    script += (
        f"Ask for meeting: \"I'd love to schedule a brief 15-minute call to discuss how we might be able to help "
        f"{company.name}. Would you have time this week for a quick conversation?\"\n\n"
    )
    script += "Handle objections:\n"
    script += "- If busy: \"I understand you're busy. When would be a better time to have this conversation?\"\n"
    script += (
        "- If not interested: \"May I ask what solutions you're currently using for "
        "[problem your product solves]?\"\n\n"
    )
    script += (
        f"Close: \"Thank you for your time, {first}. I'll [follow-up action] and look forward to "
        "speaking with you soon.\"\n\n"
    )
    return script


def generate_call_script(db: Session, contact: Contact) -> str:
    """Build the script from stored insights and append it to the contact's notes."""
    company = db.get(Company, contact.company_id)
    if company is None:
        raise LookupError("Company information not available.")
    insight = insights_crud.get_for_company(db, company.id)
    script = build_call_script(contact, company, insight)
    contacts_crud.append_note(contact, f"Call Script Generated on {datetime.utcnow():%Y-%m-%d}:\n{script}")
    log_interaction(db, contact_id=contact.id, type_="CALL_SCRIPT", meta={"company_id": company.id})
    db.flush()
    return script


# -----------------------------------------------------------------------------
# CRM export
# -----------------------------------------------------------------------------
def build_exports(
    db: Session, company_ids: List[str], contact_ids: Optional[Dict[str, List[str]]] = None
) -> List[Dict[str, Any]]:
    """One entry per company; without an explicit choice, its first contact is exported."""
    exports = []
    chosen = contact_ids or {}
    for cid in company_ids:
        company = db.get(Company, cid)
        if company is None:
            raise LookupError(f"Company '{cid}' not found")
        ids = chosen.get(cid)
        if ids is None:
            people = contacts_crud.list_for_company(db, cid)
            ids = [people[0].id] if people else []
        exports.append({"company_id": company.id, "company_name": company.name, "contact_ids": list(ids)})
    return exports


def export_to_crm(
    db: Session,
    company_ids: List[str],
    *,
    user_email: Optional[str] = None,
    contact_ids: Optional[Dict[str, List[str]]] = None,
) -> Dict[str, Any]:
    url = settings_crud.get_value(db, "crm_export_webhook")
    if not url:
        raise WebhookNotConfigured("crm_export_webhook")
    exports = build_exports(db, company_ids, contact_ids)
    response = post_json(url, {"exports": exports, "user_email": user_email})
    logger.info("Exported %d compan(ies) to CRM", len(exports))
    return {"exports": exports, "response": response}
