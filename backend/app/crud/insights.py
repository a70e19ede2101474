# app/crud/insights.py
from datetime import datetime
from typing import Any, Dict, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.models.insight import CompanyInsight
from app.schemas.insights import (
    AwardsInsight,
    ContentAuditInsight,
    FacebookAdsInsight,
    IdealClientInsight,
    JobPostingsInsight,
    ResearchInsight,
)


def get_for_company(db: Session, company_id: str) -> Optional[CompanyInsight]:
    return db.execute(
        select(CompanyInsight).where(CompanyInsight.company_id == company_id)
    ).scalar_one_or_none()


def get_or_create(db: Session, company_id: str) -> CompanyInsight:
    row = get_for_company(db, company_id)
    if row is None:
        row = CompanyInsight(company_id=company_id)
        db.add(row)
        db.flush()
    return row


def apply_insight(db: Session, company_id: str, insight) -> CompanyInsight:
    """Write one tagged insight variant onto the company's insights row."""
    row = get_or_create(db, company_id)

    if isinstance(insight, AwardsInsight):
        row.awards = list(insight.awards)
    elif isinstance(insight, JobPostingsInsight):
        row.job_postings = [p.model_dump() for p in insight.job_postings]
    elif isinstance(insight, ContentAuditInsight):
        row.content_audit = insight.content_audit.model_dump(exclude_none=True)
    elif isinstance(insight, IdealClientInsight):
        row.ideal_client = insight.ideal_client
        if insight.suggested_approach is not None:
            row.suggested_approach = insight.suggested_approach
        if insight.approach_notes is not None:
            row.approach_notes = insight.approach_notes
        if insight.ideal_customer_analysis is not None:
            row.ideal_customer_analysis = insight.ideal_customer_analysis
    elif isinstance(insight, FacebookAdsInsight):
        row.running_facebook_ads = insight.running_facebook_ads
        row.ad_details = insight.ad_details or ""
    elif isinstance(insight, ResearchInsight):
        if insight.profile_research is not None:
            row.profile_research = insight.profile_research
        if insight.notes is not None:
            row.notes = insight.notes
    else:
        raise TypeError(f"Unsupported insight type: {type(insight).__name__}")

    row.updated_at = datetime.utcnow()
    db.flush()
    return row


def set_fields(db: Session, company_id: str, values: Dict[str, Any]) -> CompanyInsight:
    """Direct column writes for generator outputs that are plain text."""
    row = get_or_create(db, company_id)
    for k, v in values.items():
        if hasattr(CompanyInsight, k) and k not in ("id", "company_id", "created_at"):
            setattr(row, k, v)
    row.updated_at = datetime.utcnow()
    db.flush()
    return row
