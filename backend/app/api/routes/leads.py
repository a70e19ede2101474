# app/api/routes/leads.py
import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from app.api.errors import to_http
from app.crud import search as search_crud
from app.db.session import get_db
from app.scheduler import schedule_contact_enrichment
from app.schemas.leads import (
    LeadSearchRequest,
    LeadSearchResponse,
    SaveLeadsRequest,
    SaveLeadsResponse,
    SearchHistoryOut,
    SearchResult,
    TransformRequest,
)
from app.services.leads.apify import ApifyError
from app.services.leads.save import LeadSaveError, run_lead_search, save_selected_leads
from app.services.leads.transform import transform_search_results

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/leads", tags=["leads"])


# POST /api/leads/search
@router.post("/search", response_model=LeadSearchResponse)
def search_leads(payload: LeadSearchRequest, db: Session = Depends(get_db)):
    params = payload.model_dump(exclude={"user_id"})
    try:
        return run_lead_search(db, params, user_id=payload.user_id)
    except ApifyError as exc:
        logger.warning("Lead search failed: %s", exc)
        raise to_http(exc) from exc


# POST /api/leads/transform (normalize scraper output posted by n8n or the UI)
@router.post("/transform", response_model=list[SearchResult])
def transform_leads(payload: TransformRequest):
    return transform_search_results(payload.records)


# POST /api/leads/save
@router.post("/save", response_model=SaveLeadsResponse)
def save_leads(payload: SaveLeadsRequest, db: Session = Depends(get_db)):
    if not payload.leads:
        raise HTTPException(status_code=400, detail="No leads selected")
    leads = [lead.model_dump() for lead in payload.leads]
    try:
        report = save_selected_leads(db, leads, list_id=payload.list_id, user_id=payload.user_id)
    except LeadSaveError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc

    scheduled = sum(1 for cid in report.new_contact_ids if schedule_contact_enrichment(cid))
    return {
        "saved": report.saved,
        "companies_created": report.companies_created,
        "contacts_created": report.contacts_created,
        "failed": report.failed,
        "enrichment_scheduled": scheduled,
    }


# GET /api/leads/history
@router.get("/history", response_model=list[SearchHistoryOut])
def search_history(
    user_id: Optional[str] = Query(None),
    limit: int = Query(50, ge=1, le=500),
    db: Session = Depends(get_db),
):
    return search_crud.list_history(db, user_id=user_id, limit=limit)
