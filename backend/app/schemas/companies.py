from datetime import datetime
from typing import Any, List, Optional

from pydantic import BaseModel, Field


# ---------- OUT MODELS ----------
class CompanyOut(BaseModel):
    id: str
    name: str
    website: Optional[str] = None
    primary_domain: Optional[str] = None
    industry: Optional[str] = None
    industry_vertical: Optional[str] = None
    size: Optional[str] = None
    description: Optional[str] = None
    founded_year: Optional[int] = None
    estimated_num_employees: Optional[int] = None
    annual_revenue: Optional[float] = None
    annual_revenue_printed: Optional[str] = None
    location: Optional[str] = None
    raw_address: Optional[str] = None
    street: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip: Optional[str] = None
    country: Optional[str] = None
    phone: Optional[str] = None
    linkedin_url: Optional[str] = None
    facebook_url: Optional[str] = None
    twitter_url: Optional[str] = None
    logo_url: Optional[str] = None
    keywords: Optional[List[str]] = None
    tags: Optional[List[str]] = None
    technology_names: Optional[List[str]] = None
    tech_stack_data: Optional[Any] = None
    tech_stack_last_updated: Optional[datetime] = None
    call_script: Optional[str] = None
    email_script: Optional[str] = None
    text_script: Optional[str] = None
    social_dm_script: Optional[str] = None
    research_notes: Optional[str] = None
    user_id: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class CompanyList(BaseModel):
    items: List[CompanyOut]
    page: int
    limit: int
    total: int


class CompanyFacets(BaseModel):
    industries: List[str]


# ---------- IN MODELS ----------
class CompanyBase(BaseModel):
    website: Optional[str] = None
    industry: Optional[str] = None
    industry_vertical: Optional[str] = None
    size: Optional[str] = None
    description: Optional[str] = None
    founded_year: Optional[int] = None
    estimated_num_employees: Optional[int] = None
    location: Optional[str] = None
    street: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip: Optional[str] = None
    country: Optional[str] = None
    phone: Optional[str] = None
    linkedin_url: Optional[str] = Field(default=None, alias="linkedinUrl")
    facebook_url: Optional[str] = Field(default=None, alias="facebookUrl")
    twitter_url: Optional[str] = Field(default=None, alias="twitterUrl")
    keywords: Optional[List[str]] = None
    tags: Optional[List[str]] = None
    call_script: Optional[str] = None
    email_script: Optional[str] = None
    text_script: Optional[str] = None
    social_dm_script: Optional[str] = None
    research_notes: Optional[str] = None
    user_id: Optional[str] = None

    class Config:
        populate_by_name = True
        extra = "ignore"


class CompanyCreate(CompanyBase):
    name: str


class CompanyUpdate(CompanyBase):
    name: Optional[str] = None


class CompanyCreateResponse(BaseModel):
    created: bool
    company: CompanyOut


# ---------- generation / enrichment ----------
class GenerationOut(BaseModel):
    content: str
    source: str
    notice: Optional[str] = None
    attempts: List[str] = []


class OutreachRequest(BaseModel):
    contact_id: Optional[str] = Field(default=None, alias="contactId")
    context: str = ""

    class Config:
        populate_by_name = True


class SimilarCompany(BaseModel):
    name: Optional[str] = None
    industry: Optional[str] = None
    location: Optional[str] = None
    linkedinUrl: Optional[str] = None

    class Config:
        extra = "allow"


class CompanyEnrichmentOut(BaseModel):
    similar_companies: List[SimilarCompany]
    employees_found: int
    contacts_created: int
    source: str
    notice: Optional[str] = None


class WebsiteScanRequest(BaseModel):
    url: Optional[str] = None


class WebsiteScanOut(BaseModel):
    url: str
    title: Optional[str] = None
    description: Optional[str] = None
    key_topics: List[str] = []
    job_postings: List[dict] = []
    awards: List[str] = []
    career_page: Optional[str] = None
