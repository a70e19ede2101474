# app/crud/companies.py
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple
from urllib.parse import urlparse

from sqlalchemy import and_, func, or_, select
from sqlalchemy.orm import Session

from app.models.company import Company

# columns a caller may write directly
EDITABLE = {
    "name", "website", "primary_domain", "industry", "industry_vertical", "size", "description",
    "founded_year", "estimated_num_employees", "annual_revenue", "annual_revenue_printed",
    "location", "raw_address", "street", "city", "state", "zip", "country", "phone",
    "linkedin_url", "facebook_url", "twitter_url", "logo_url",
    "keywords", "tags", "technology_names",
    "call_script", "email_script", "text_script", "social_dm_script", "research_notes",
    "external_id", "user_id",
}


def domain_from_website(website: Optional[str]) -> Optional[str]:
    """'https://www.acme.com/about' -> 'acme.com'."""
    if not website:
        return None
    raw = website.strip()
    if "://" not in raw:
        raw = f"https://{raw}"
    host = (urlparse(raw).hostname or "").lower()
    if host.startswith("www."):
        host = host[4:]
    return host or None


def get(db: Session, company_id: str) -> Optional[Company]:
    return db.get(Company, company_id)


def find_by_name(db: Session, name: str) -> Optional[Company]:
    return db.execute(
        select(Company)
        .where(func.lower(Company.name) == func.lower(name.strip()))
        .order_by(Company.created_at.desc())
        .limit(1)
    ).scalar_one_or_none()


def find_by_domain(db: Session, domain: str) -> Optional[Company]:
    return db.execute(
        select(Company).where(Company.primary_domain == domain.lower()).limit(1)
    ).scalar_one_or_none()


def create(db: Session, values: Dict[str, Any]) -> Company:
    data = {k: v for k, v in values.items() if k in EDITABLE}
    if not data.get("primary_domain"):
        data["primary_domain"] = domain_from_website(data.get("website"))
    obj = Company(**data)
    db.add(obj)
    db.flush()
    return obj


def update(db: Session, obj: Company, values: Dict[str, Any]) -> Company:
    for k, v in values.items():
        if k in EDITABLE:
            setattr(obj, k, v)
    if "website" in values and not values.get("primary_domain"):
        obj.primary_domain = domain_from_website(obj.website) or obj.primary_domain
    obj.updated_at = datetime.utcnow()
    db.flush()
    return obj


def upsert_company(db: Session, values: Dict[str, Any]) -> Tuple[Company, bool]:
    """
    Return (company, created). Prefer domain match; fall back to name.
    Empty fields on an existing row are filled in, populated ones are left alone.
    """
    name = (values.get("name") or "").strip()
    domain = values.get("primary_domain") or domain_from_website(values.get("website"))

    existing = None
    if domain:
        existing = find_by_domain(db, domain)
    if existing is None and name:
        existing = find_by_name(db, name)

    if existing is not None:
        for k, v in values.items():
            if k in EDITABLE and v not in (None, "", []) and not getattr(existing, k):
                setattr(existing, k, v)
        if domain and not existing.primary_domain:
            existing.primary_domain = domain
        db.flush()
        return existing, False

    if not name:
        raise ValueError("Company name is required")
    return create(db, {**values, "name": name, "primary_domain": domain}), True


def list_companies(
    db: Session, *, page: int = 1, limit: int = 50, search: str = "", industry: str = ""
) -> Tuple[List[Company], int]:
    where = []
    if search:
        like = f"%{search.lower()}%"
        where.append(or_(
            func.lower(Company.name).like(like),
            func.lower(Company.industry).like(like),
            func.lower(Company.location).like(like),
            func.lower(Company.primary_domain).like(like),
        ))
    if industry:
        where.append(func.lower(Company.industry).like(f"%{industry.lower()}%"))

    stmt = select(Company)
    if where:
        stmt = stmt.where(and_(*where))

    total = db.execute(select(func.count()).select_from(stmt.subquery())).scalar_one()
    rows = db.execute(
        stmt.order_by(Company.created_at.desc(), Company.name)
            .offset((page - 1) * limit)
            .limit(limit)
    ).scalars().all()
    return rows, total


def list_unique_industries(db: Session, max_items: int = 250) -> list[str]:
    rows = db.execute(
        select(Company.industry)
        .where(Company.industry.isnot(None), Company.industry != "")
        .distinct()
        .order_by(Company.industry)
        .limit(max_items)
    ).all()
    return [r[0] for r in rows]
