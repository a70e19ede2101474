from datetime import datetime
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field

class ContactOut(BaseModel):
    id: str
    first_name: str
    last_name: Optional[str] = None
    email: Optional[str] = None
    email_status: Optional[str] = None
    phone: Optional[str] = None
    mobile_phone: Optional[str] = None
    position: Optional[str] = None
    seniority: Optional[str] = None
    notes: Optional[str] = None
    company_id: str
    linkedin_url: Optional[str] = None
    facebook_url: Optional[str] = None
    twitter_url: Optional[str] = None
    photo_url: Optional[str] = None
    headline: Optional[str] = None
    about: Optional[str] = None
    linkedin_bio: Optional[str] = None
    linkedin_skills: Optional[List[str]] = None
    linkedin_education: Optional[List[Any]] = None
    linkedin_experience: Optional[List[Any]] = None
    linkedin_posts: Optional[List[Dict[str, Any]]] = None
    job_history: Optional[List[Any]] = None
    job_start_date: Optional[str] = None
    languages: Optional[List[str]] = None
    address: Optional[str] = None
    city: Optional[str] = None
    country: Optional[str] = None
    last_enriched: Optional[datetime] = None
    source: Optional[str] = None
    is_active: bool = True
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True  # pydantic v2 compat via FastAPI wrapper

class ContactList(BaseModel):
    items: List[ContactOut]
    page: int
    limit: int
    total: int

class ContactsFacets(BaseModel):
    titles: List[str]
    total_contacts: int

class InteractionOut(BaseModel):
    id: str
    type: str
    meta: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


# request bodies may use camelCase keys
class ContactBase(BaseModel):
    last_name: Optional[str] = Field(default=None, alias="lastName")
    email: Optional[str] = None
    phone: Optional[str] = None
    mobile_phone: Optional[str] = Field(default=None, alias="mobilePhone")
    position: Optional[str] = Field(default=None, alias="title")
    seniority: Optional[str] = None
    notes: Optional[str] = None
    linkedin_url: Optional[str] = Field(default=None, alias="linkedinUrl")
    facebook_url: Optional[str] = Field(default=None, alias="facebookUrl")
    twitter_url: Optional[str] = Field(default=None, alias="twitterUrl")

    class Config:
        populate_by_name = True
        extra = "ignore"

class ContactCreate(ContactBase):
    first_name: str = Field(alias="firstName")
    company_id: str = Field(alias="companyId")

class ContactUpdate(ContactBase):
    first_name: Optional[str] = Field(default=None, alias="firstName")
    company_id: Optional[str] = Field(default=None, alias="companyId")


class ContactCreateResponse(BaseModel):
    created: bool
    contact: ContactOut
    enrichment_scheduled: bool = False

class EmailFinderOut(BaseModel):
    found: bool
    email: Optional[str] = None

class ContactEnrichmentOut(BaseModel):
    found: bool
    updated_fields: List[str]
    contact: ContactOut
