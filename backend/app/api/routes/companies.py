# app/api/routes/companies.py
import logging
from typing import Optional

from fastapi import APIRouter, Body, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from app.api.errors import to_http
from app.crud import companies as crud
from app.crud import contacts as contacts_crud
from app.crud import insights as insights_crud
from app.db.session import get_db
from app.models.company import Company
from app.scheduler import schedule_contact_enrichment
from app.schemas.companies import (
    CompanyCreate,
    CompanyCreateResponse,
    CompanyEnrichmentOut,
    CompanyFacets,
    CompanyList,
    CompanyOut,
    CompanyUpdate,
    GenerationOut,
    OutreachRequest,
    WebsiteScanOut,
    WebsiteScanRequest,
)
from app.schemas.contacts import ContactOut
from app.schemas.insights import CompanyInsightsOut, InsightUpdateRequest
from app.services import enrichment, generation
from app.services.webhooks.errors import WebhookError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/companies", tags=["companies"])


def _company_or_404(db: Session, id: str) -> Company:
    obj = crud.get(db, id)
    if not obj:
        raise HTTPException(status_code=404, detail="Company not found")
    return obj


def _generation_out(result: generation.GenerationResult) -> dict:
    return {
        "content": result.content,
        "source": result.source,
        "notice": result.notice,
        "attempts": [f"{a.verb} {'ok' if a.ok else (a.error or 'failed')}" for a in result.attempts],
    }


def _insights_out(db: Session, company_id: str) -> CompanyInsightsOut:
    row = insights_crud.get_for_company(db, company_id)
    if row is None:
        return CompanyInsightsOut(company_id=company_id)
    return CompanyInsightsOut.model_validate(row)


# GET /api/companies/list
@router.get("/list", response_model=CompanyList)
def list_companies(
    search: str = Query(""),
    industry: str = Query(""),
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=1000),
    db: Session = Depends(get_db),
):
    items, total = crud.list_companies(
        db, page=page, limit=limit, search=search.strip(), industry=industry.strip()
    )
    return {"items": items, "page": page, "limit": limit, "total": total}


# GET /api/companies/facets
@router.get("/facets", response_model=CompanyFacets)
def companies_facets(db: Session = Depends(get_db)):
    return {"industries": crud.list_unique_industries(db)}


# POST /api/companies (409 if a company with this domain or name exists)
@router.post("", response_model=CompanyCreateResponse, status_code=status.HTTP_201_CREATED)
def create_company(payload: CompanyCreate, db: Session = Depends(get_db)):
    name = payload.name.strip()
    if not name:
        raise HTTPException(status_code=400, detail="Company name is required")

    domain = crud.domain_from_website(payload.website)
    if (domain and crud.find_by_domain(db, domain)) or crud.find_by_name(db, name):
        raise HTTPException(status_code=409, detail="A company with this name or website already exists")

    obj = crud.create(db, {**payload.model_dump(exclude_none=True), "name": name})
    db.commit()
    db.refresh(obj)
    logger.info("Company %s created", obj.id)
    return {"created": True, "company": CompanyOut.model_validate(obj)}


# GET /api/companies/{id}
@router.get("/{id}", response_model=CompanyOut)
def get_company(id: str, db: Session = Depends(get_db)):
    return _company_or_404(db, id)


# PATCH /api/companies/{id}
@router.patch("/{id}", response_model=CompanyOut)
def update_company(id: str, payload: CompanyUpdate, db: Session = Depends(get_db)):
    obj = _company_or_404(db, id)
    values = payload.model_dump(exclude_unset=True)
    if "name" in values and not (values["name"] or "").strip():
        raise HTTPException(status_code=400, detail="Company name cannot be empty")
    crud.update(db, obj, values)
    db.commit()
    db.refresh(obj)
    return obj


# GET /api/companies/{id}/contacts
@router.get("/{id}/contacts", response_model=list[ContactOut])
def company_contacts(id: str, db: Session = Depends(get_db)):
    _company_or_404(db, id)
    return contacts_crud.list_for_company(db, id)


# ---------- insights ----------
@router.get("/{id}/insights", response_model=CompanyInsightsOut)
def get_insights(id: str, db: Session = Depends(get_db)):
    _company_or_404(db, id)
    return _insights_out(db, id)


@router.put("/{id}/insights", response_model=CompanyInsightsOut)
def put_insight(id: str, payload: InsightUpdateRequest, db: Session = Depends(get_db)):
    _company_or_404(db, id)
    insights_crud.apply_insight(db, id, payload.insight)
    db.commit()
    return _insights_out(db, id)


@router.post("/{id}/insights/{kind}/generate", response_model=GenerationOut)
def generate_insight(id: str, kind: str, db: Session = Depends(get_db)):
    company = _company_or_404(db, id)
    try:
        if kind == "ideal_customer":
            result = generation.ideal_customer(db, company)
        else:
            result = generation.generate_insight(db, company, kind)
    except generation.UnknownGenerator as exc:
        raise to_http(exc) from exc
    db.commit()
    return _generation_out(result)


# ---------- research & outreach ----------
@router.post("/{id}/research/{research_type}", response_model=GenerationOut)
def generate_research(id: str, research_type: str, db: Session = Depends(get_db)):
    company = _company_or_404(db, id)
    try:
        result = generation.research_company(db, company, research_type)
    except generation.UnknownGenerator as exc:
        raise to_http(exc) from exc
    db.commit()
    return _generation_out(result)


@router.post("/{id}/outreach/{channel}", response_model=GenerationOut)
def generate_outreach(
    id: str,
    channel: str,
    payload: Optional[OutreachRequest] = Body(default=None),
    db: Session = Depends(get_db),
):
    company = _company_or_404(db, id)
    payload = payload or OutreachRequest()
    contact = None
    if payload.contact_id:
        contact = contacts_crud.get(db, payload.contact_id)
        if contact is None or contact.company_id != company.id:
            raise HTTPException(status_code=404, detail="Contact not found for this company")
    try:
        result = generation.generate_outreach(db, company, channel, contact=contact, context=payload.context)
    except generation.UnknownGenerator as exc:
        raise to_http(exc) from exc
    db.commit()
    return _generation_out(result)


# ---------- enrichment ----------
@router.post("/{id}/enrich", response_model=CompanyEnrichmentOut)
def enrich_company(id: str, db: Session = Depends(get_db)):
    company = _company_or_404(db, id)
    try:
        result = enrichment.enrich_company(db, company)
    except (enrichment.MissingInformation, WebhookError) as exc:
        db.rollback()
        raise to_http(exc) from exc
    db.commit()
    for contact in result.contacts_created:
        if contact.linkedin_url:
            schedule_contact_enrichment(contact.id)
    return {
        "similar_companies": result.similar_companies,
        "employees_found": result.employees_found,
        "contacts_created": len(result.contacts_created),
        "source": result.source,
        "notice": result.notice,
    }


@router.post("/{id}/scan", response_model=WebsiteScanOut)
def scan_website(id: str, payload: Optional[WebsiteScanRequest] = Body(default=None), db: Session = Depends(get_db)):
    company = _company_or_404(db, id)
    try:
        scan = enrichment.scan_company_website(db, company, (payload.url if payload else None))
    except (enrichment.MissingInformation, WebhookError) as exc:
        db.rollback()
        raise to_http(exc) from exc
    db.commit()
    return scan
