# app/api/routes/contacts.py
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from app.api.errors import to_http
from app.crud import contacts as crud
from app.crud.interactions import list_for_contact, log_interaction
from app.db.session import get_db
from app.models.contact import Contact
from app.scheduler import schedule_contact_enrichment
from app.schemas.companies import GenerationOut
from app.schemas.contacts import (
    ContactCreate,
    ContactCreateResponse,
    ContactEnrichmentOut,
    ContactList,
    ContactOut,
    ContactsFacets,
    ContactUpdate,
    EmailFinderOut,
    InteractionOut,
)
from app.services import enrichment, generation
from app.services.webhooks.errors import WebhookError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/contacts", tags=["contacts"])


def _contact_or_404(db: Session, id: str) -> Contact:
    obj = crud.get(db, id)
    if not obj:
        raise HTTPException(status_code=404, detail="Contact not found")
    return obj


@router.get("/list", response_model=ContactList)
def list_contacts(
    search: str = Query("", alias="search"),
    company_id: str = Query("", alias="companyId"),
    title_csv: str = Query("", alias="title"),
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=1000),
    ts: Optional[int] = Query(None, alias="ts"),  # cache-buster accepted, ignored
    db: Session = Depends(get_db),
):
    titles: List[str] = [t.strip() for t in title_csv.split(",") if t.strip()] if title_csv else []
    items, total = crud.get_contacts(
        db,
        page=page,
        limit=limit,
        search=search.strip().lower(),
        company_id=company_id.strip(),
        titles=titles,
    )
    return {"items": items, "page": page, "limit": limit, "total": total}


@router.get("/facets", response_model=ContactsFacets)
def contacts_facets(db: Session = Depends(get_db)):
    return {"titles": crud.list_titles(db, max_items=250), "total_contacts": crud.count_contacts(db)}


@router.get("/{id}", response_model=ContactOut)
def get_contact(id: str, db: Session = Depends(get_db)):
    return _contact_or_404(db, id)


# soft delete; the row stays for interaction history
@router.delete("/{id}")
def delete_contact(id: str, db: Session = Depends(get_db)):
    obj = _contact_or_404(db, id)
    crud.soft_delete(db, obj)
    log_interaction(db, contact_id=id, type_="DELETED", meta={"reason": "deleted_via_ui"})
    db.commit()
    return {"ok": True, "id": id, "soft_deleted": True}


# company must exist; 409 when the email is already used at that company
@router.post("", response_model=ContactCreateResponse, status_code=status.HTTP_201_CREATED)
def create_contact(payload: ContactCreate, db: Session = Depends(get_db)):
    values = payload.model_dump(exclude_none=True)
    email = (payload.email or "").strip().lower()
    if email:
        if "@" not in email:
            raise HTTPException(status_code=400, detail="Valid email required")
        if crud.find_existing(db, company_id=payload.company_id, email=email):
            raise HTTPException(status_code=409, detail="A contact with this email already exists")

    try:
        obj = crud.create(db, {**values, "source": "manual"})
    except crud.MissingCompany as exc:
        raise to_http(exc) from exc
    log_interaction(db, contact_id=obj.id, type_="CREATED", meta={"reason": "created_manual"})
    db.commit()
    db.refresh(obj)

    scheduled = bool(obj.linkedin_url) and schedule_contact_enrichment(obj.id)
    return {"created": True, "contact": ContactOut.model_validate(obj), "enrichment_scheduled": scheduled}


# only fields present in the body are written
@router.patch("/{id}", response_model=ContactOut)
def update_contact(id: str, payload: ContactUpdate, db: Session = Depends(get_db)):
    obj = _contact_or_404(db, id)
    values = payload.model_dump(exclude_unset=True)
    if "first_name" in values and not (values["first_name"] or "").strip():
        raise HTTPException(status_code=400, detail="First name cannot be empty")
    try:
        crud.update(db, obj, values)
    except crud.MissingCompany as exc:
        db.rollback()
        raise to_http(exc) from exc
    log_interaction(db, contact_id=id, type_="UPDATED", meta={"fields": sorted(values)})
    db.commit()
    db.refresh(obj)
    return obj


@router.get("/{id}/interactions", response_model=list[InteractionOut])
def contact_interactions(id: str, db: Session = Depends(get_db)):
    _contact_or_404(db, id)
    return list_for_contact(db, id)


# ---------- enrichment ----------
@router.post("/{id}/find-email", response_model=EmailFinderOut)
def find_email(id: str, db: Session = Depends(get_db)):
    obj = _contact_or_404(db, id)
    try:
        email = enrichment.find_email(db, obj)
    except (enrichment.MissingInformation, WebhookError) as exc:
        db.rollback()
        raise to_http(exc) from exc
    db.commit()
    return {"found": email is not None, "email": email}


@router.post("/{id}/enrich", response_model=ContactEnrichmentOut)
def enrich_contact(id: str, db: Session = Depends(get_db)):
    obj = _contact_or_404(db, id)
    try:
        updates = enrichment.enrich_contact(db, obj)
    except (enrichment.MissingInformation, WebhookError) as exc:
        db.rollback()
        raise to_http(exc) from exc
    db.commit()
    db.refresh(obj)
    return {
        "found": bool(updates),
        "updated_fields": sorted(k for k in updates if k != "last_enriched"),
        "contact": ContactOut.model_validate(obj),
    }


@router.post("/{id}/profile-research", response_model=GenerationOut)
def profile_research(id: str, db: Session = Depends(get_db)):
    obj = _contact_or_404(db, id)
    result = generation.profile_research(db, obj)
    db.commit()
    return {
        "content": result.content,
        "source": result.source,
        "notice": result.notice,
        "attempts": [f"{a.verb} {'ok' if a.ok else (a.error or 'failed')}" for a in result.attempts],
    }
