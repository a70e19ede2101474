# app/crud/contacts.py
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import and_, func, or_, select
from sqlalchemy.orm import Session

from app.models.company import Company
from app.models.contact import Contact

EDITABLE = {
    "first_name", "last_name", "email", "email_status", "phone", "mobile_phone", "position",
    "seniority", "notes", "company_id", "linkedin_url", "facebook_url", "twitter_url",
    "photo_url", "external_id", "headline", "about", "linkedin_bio", "linkedin_skills",
    "linkedin_education", "linkedin_experience", "linkedin_posts", "job_history",
    "job_start_date", "languages", "address", "city", "country", "last_enriched", "source",
}


class MissingCompany(ValueError):
    """Raised when a contact would reference a company that does not exist."""


def _now() -> datetime:
    return datetime.utcnow()


def keep_digits_plus(s: str | None) -> str | None:
    if not s:
        return None
    out = []
    for ch in str(s):
        o = ord(ch)
        if (48 <= o <= 57) or ch in "+ -()":
            out.append(ch)
    res = "".join(out).strip()
    return res or None


def _live():
    return [
        or_(Contact.is_active == True, Contact.is_active.is_(None)),  # noqa: E712
        Contact.deleted_at.is_(None),
    ]


def get(db: Session, contact_id: str) -> Optional[Contact]:
    obj = db.get(Contact, contact_id)
    if obj is None or obj.deleted_at is not None:
        return None
    return obj


def create(db: Session, values: Dict[str, Any]) -> Contact:
    """Insert a contact. The company it points at must already exist."""
    company_id = values.get("company_id")
    if not company_id or db.get(Company, company_id) is None:
        raise MissingCompany(f"Company '{company_id}' does not exist")

    data = {k: v for k, v in values.items() if k in EDITABLE}
    if "phone" in data:
        data["phone"] = keep_digits_plus(data["phone"])
    if data.get("email"):
        data["email"] = data["email"].strip().lower()
    data["first_name"] = (data.get("first_name") or "").strip() or "Unknown"

    obj = Contact(is_active=True, **data)
    db.add(obj)
    db.flush()
    return obj


def update(db: Session, obj: Contact, values: Dict[str, Any]) -> Contact:
    if "company_id" in values and values["company_id"] != obj.company_id:
        if not values["company_id"] or db.get(Company, values["company_id"]) is None:
            raise MissingCompany(f"Company '{values['company_id']}' does not exist")
    for k, v in values.items():
        if k not in EDITABLE:
            continue
        if k == "phone":
            v = keep_digits_plus(v)
        elif k == "email" and v:
            v = v.strip().lower()
        setattr(obj, k, v)
    obj.updated_at = _now()
    db.flush()
    return obj


def soft_delete(db: Session, obj: Contact) -> Contact:
    now = _now()
    obj.is_active = False
    obj.deleted_at = now
    obj.updated_at = now
    db.flush()
    return obj


def find_existing(
    db: Session,
    *,
    company_id: str,
    first_name: str = "",
    last_name: str = "",
    linkedin_url: Optional[str] = None,
    email: Optional[str] = None,
) -> Optional[Contact]:
    """Match by LinkedIn URL, by email, or by first+last name within the company."""
    ors = []
    if linkedin_url:
        ors.append(Contact.linkedin_url == linkedin_url)
    if email:
        ors.append(and_(Contact.company_id == company_id, func.lower(Contact.email) == email.strip().lower()))
    if first_name:
        ors.append(and_(
            Contact.company_id == company_id,
            func.lower(Contact.first_name) == first_name.strip().lower(),
            func.lower(func.coalesce(Contact.last_name, "")) == (last_name or "").strip().lower(),
        ))
    if not ors:
        return None
    return db.execute(
        select(Contact).where(and_(or_(*ors), *_live())).limit(1)
    ).scalar_one_or_none()


def count_contacts(db: Session) -> int:
    return db.execute(
        select(func.count()).select_from(Contact).where(*_live())
    ).scalar_one()


def get_contacts(
    db: Session,
    *,
    page: int,
    limit: int,
    search: str = "",
    company_id: str = "",
    titles: List[str] | None = None,
) -> Tuple[List[Contact], int]:
    titles = titles or []
    where = _live()

    if search:
        like = f"%{search.lower()}%"
        where.append(or_(
            func.lower(Contact.first_name).like(like),
            func.lower(Contact.last_name).like(like),
            func.lower(Contact.email).like(like),
            func.lower(Contact.position).like(like),
        ))

    if company_id:
        where.append(Contact.company_id == company_id)

    if titles:
        ors = [func.lower(Contact.position).like(f"%{t.lower()}%") for t in titles]
        where.append(or_(*ors))

    stmt = select(Contact).where(and_(*where))
    total = db.execute(select(func.count()).select_from(stmt.subquery())).scalar_one()

    rows = db.execute(
        stmt.order_by(func.coalesce(Contact.updated_at, Contact.created_at).desc())
            .offset((page - 1) * limit)
            .limit(limit)
    ).scalars().all()

    return rows, total


def list_for_company(db: Session, company_id: str) -> List[Contact]:
    return db.execute(
        select(Contact).where(Contact.company_id == company_id, *_live()).order_by(Contact.created_at)
    ).scalars().all()


def list_titles(db: Session, max_items: int = 250) -> list[str]:
    rows = db.execute(
        select(func.trim(Contact.position)).where(
            func.trim(Contact.position).isnot(None),
            func.trim(Contact.position) != "",
            *_live(),
        ).distinct().order_by(func.trim(Contact.position)).limit(max_items)
    ).all()
    return [r[0] for r in rows]


def append_note(obj: Contact, text: str) -> None:
    obj.notes = f"{obj.notes}\n\n{text}" if obj.notes else text
    obj.updated_at = _now()
