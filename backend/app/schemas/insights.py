# backend/app/schemas/insights.py
from __future__ import annotations

from datetime import datetime
from typing import Annotated, Any, List, Literal, Optional, Union

from pydantic import BaseModel, Field


class JobPosting(BaseModel):
    title: str
    description: Optional[str] = None
    location: Optional[str] = None
    posted_date: Optional[str] = None
    url: Optional[str] = None


class ContentAudit(BaseModel):
    key_topics: List[str] = []
    recent_content: List[str] = []
    content_gaps: List[str] = []
    # set when the generator answered with text/HTML instead of structured JSON
    content: Optional[str] = None


# ---------- tagged union: one variant per insight type ----------
class AwardsInsight(BaseModel):
    kind: Literal["awards"] = "awards"
    awards: List[str] = []


class JobPostingsInsight(BaseModel):
    kind: Literal["job_postings"] = "job_postings"
    job_postings: List[JobPosting] = []


class ContentAuditInsight(BaseModel):
    kind: Literal["content_audit"] = "content_audit"
    content_audit: ContentAudit


class IdealClientInsight(BaseModel):
    kind: Literal["ideal_client"] = "ideal_client"
    ideal_client: bool
    suggested_approach: Optional[str] = None
    approach_notes: Optional[str] = None
    ideal_customer_analysis: Optional[str] = None


class FacebookAdsInsight(BaseModel):
    kind: Literal["facebook_ads"] = "facebook_ads"
    running_facebook_ads: bool
    ad_details: Optional[str] = None


class ResearchInsight(BaseModel):
    kind: Literal["research"] = "research"
    profile_research: Optional[str] = None
    notes: Optional[str] = None


InsightUpdate = Annotated[
    Union[
        AwardsInsight,
        JobPostingsInsight,
        ContentAuditInsight,
        IdealClientInsight,
        FacebookAdsInsight,
        ResearchInsight,
    ],
    Field(discriminator="kind"),
]


class InsightUpdateRequest(BaseModel):
    insight: InsightUpdate


# ---------- OUT MODEL ----------
class CompanyInsightsOut(BaseModel):
    company_id: str
    awards: Optional[List[str]] = None
    job_postings: Optional[List[JobPosting]] = None
    content_audit: Optional[ContentAudit] = None
    ideal_client: Optional[bool] = None
    suggested_approach: Optional[str] = None
    approach_notes: Optional[str] = None
    ideal_customer_analysis: Optional[str] = None
    running_facebook_ads: Optional[bool] = None
    ad_details: Optional[str] = None
    profile_research: Optional[str] = None
    tech_stack_data: Optional[Any] = None
    tech_stack_last_updated: Optional[datetime] = None
    notes: Optional[str] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
