from datetime import datetime
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field


class SearchResult(BaseModel):
    id: str
    type: Literal["person", "company"]
    name: str
    title: Optional[str] = None
    company: Optional[str] = None
    industry: Optional[str] = None
    location: Optional[str] = None
    website: Optional[str] = None
    linkedin_url: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    description: Optional[str] = None
    selected: bool = False
    archived: bool = False
    raw_data: Any = None


class LeadSearchRequest(BaseModel):
    keywords: List[str] = []
    location: Optional[str] = None
    organization_locations: List[str] = Field(default=[], alias="organizationLocations")
    person_titles: List[str] = Field(default=[], alias="personTitles")
    seniorities: List[str] = []
    departments: List[str] = []
    email_status: List[str] = Field(default=[], alias="emailStatus")
    employee_ranges: List[str] = Field(default=[], alias="employeeRanges")
    keyword_fields: List[str] = Field(default=[], alias="keywordFields")
    limit: int = Field(default=20, ge=1, le=500, alias="resultCount")
    user_id: Optional[str] = None

    class Config:
        populate_by_name = True


class LeadSearchResponse(BaseModel):
    search_id: str
    results: List[SearchResult]
    archived: int


class TransformRequest(BaseModel):
    records: Any


class SaveLeadsRequest(BaseModel):
    leads: List[SearchResult]
    list_id: Optional[str] = Field(default=None, alias="listId")
    user_id: Optional[str] = None

    class Config:
        populate_by_name = True


class SaveLeadsResponse(BaseModel):
    saved: int
    companies_created: int
    contacts_created: int
    failed: List[Dict[str, str]]
    enrichment_scheduled: int = 0


class SearchHistoryOut(BaseModel):
    id: str
    search_type: str
    search_params: Dict[str, Any]
    person_titles: Optional[List[str]] = None
    result_count: int
    search_date: Optional[datetime] = None

    class Config:
        from_attributes = True
