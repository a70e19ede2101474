# app/api/routes/outreach.py
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.api.errors import to_http
from app.crud import contacts as contacts_crud
from app.db.session import get_db
from app.models.company import Company
from app.schemas.outreach import (
    CallScriptOut,
    CrmExportOut,
    CrmExportRequest,
    EmailTemplateOut,
    RenderedEmail,
    RenderRequest,
)
from app.services import outreach
from app.services.webhooks.errors import WebhookError

router = APIRouter(prefix="/outreach", tags=["outreach"])


def _contact_or_404(db: Session, contact_id: str):
    obj = contacts_crud.get(db, contact_id)
    if not obj:
        raise HTTPException(status_code=404, detail="Contact not found")
    return obj


@router.get("/templates", response_model=list[EmailTemplateOut])
def list_templates():
    return outreach.EMAIL_TEMPLATES


@router.post("/render", response_model=RenderedEmail)
def render_email(payload: RenderRequest, db: Session = Depends(get_db)):
    contact = _contact_or_404(db, payload.contact_id)
    company = db.get(Company, contact.company_id)
    try:
        return outreach.render_template(payload.template_id, contact, company, payload.variables)
    except outreach.TemplateNotFound as exc:
        raise to_http(exc) from exc


@router.post("/send-email", response_model=RenderedEmail)
def send_email(payload: RenderRequest, db: Session = Depends(get_db)):
    contact = _contact_or_404(db, payload.contact_id)
    try:
        rendered = outreach.send_email(db, contact, payload.template_id, payload.variables)
    except outreach.TemplateNotFound as exc:
        raise to_http(exc) from exc
    db.commit()
    return rendered


@router.post("/call-script/{contact_id}", response_model=CallScriptOut)
def call_script(contact_id: str, db: Session = Depends(get_db)):
    contact = _contact_or_404(db, contact_id)
    try:
        script = outreach.generate_call_script(db, contact)
    except LookupError as exc:
        raise to_http(exc) from exc
    db.commit()
    return {"contact_id": contact_id, "script": script}


@router.post("/crm-export", response_model=CrmExportOut)
def crm_export(payload: CrmExportRequest, db: Session = Depends(get_db)):
    try:
        return outreach.export_to_crm(
            db, payload.company_ids, user_email=payload.user_email, contact_ids=payload.contact_ids
        )
    except (LookupError, WebhookError) as exc:
        raise to_http(exc) from exc
