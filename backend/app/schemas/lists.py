from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from app.schemas.companies import CompanyOut


class ListCreate(BaseModel):
    name: str = Field(min_length=1)
    description: Optional[str] = None
    user_id: Optional[str] = None


class ListOut(BaseModel):
    id: str
    name: str
    description: Optional[str] = None
    user_id: Optional[str] = None
    company_count: int = 0
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ListCompanies(BaseModel):
    list_id: str
    items: List[CompanyOut]


class ListMembership(BaseModel):
    company_id: str
