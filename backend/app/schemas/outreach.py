from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class EmailTemplateOut(BaseModel):
    id: str
    name: str
    subject: str
    body: str
    variables: List[str]


class RenderRequest(BaseModel):
    contact_id: str = Field(alias="contactId")
    template_id: str = Field(alias="templateId")
    variables: Dict[str, str] = {}

    class Config:
        populate_by_name = True


class RenderedEmail(BaseModel):
    subject: str
    body: str


class CallScriptOut(BaseModel):
    contact_id: str
    script: str


class CrmExportRequest(BaseModel):
    company_ids: List[str] = Field(alias="companyIds", min_length=1)
    user_email: Optional[str] = Field(default=None, alias="userEmail")
    # company_id -> chosen contact ids; default is each company's first contact
    contact_ids: Optional[Dict[str, List[str]]] = Field(default=None, alias="contactIds")

    class Config:
        populate_by_name = True


class CrmExportOut(BaseModel):
    exports: List[Dict[str, Any]]
    response: Any = None
