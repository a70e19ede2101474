# app/crud/lists.py
from typing import List, Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from app.models.company import Company
from app.models.lead_list import LeadList, ListCompany


def get(db: Session, list_id: str) -> Optional[LeadList]:
    return db.get(LeadList, list_id)


def create(db: Session, *, name: str, description: Optional[str] = None, user_id: Optional[str] = None) -> LeadList:
    row = LeadList(name=name.strip(), description=description, user_id=user_id)
    db.add(row)
    db.flush()
    return row


def list_all(db: Session, user_id: Optional[str] = None) -> List[LeadList]:
    stmt = select(LeadList).order_by(LeadList.created_at.desc())
    if user_id:
        stmt = stmt.where(LeadList.user_id == user_id)
    return db.execute(stmt).scalars().all()


def company_counts(db: Session) -> dict[str, int]:
    rows = db.execute(
        select(ListCompany.list_id, func.count()).group_by(ListCompany.list_id)
    ).all()
    return {r[0]: r[1] for r in rows}


def add_company(db: Session, list_id: str, company_id: str) -> bool:
    """Return True when a new membership row was written."""
    exists = db.execute(
        select(ListCompany).where(ListCompany.list_id == list_id, ListCompany.company_id == company_id)
    ).scalar_one_or_none()
    if exists:
        return False
    db.add(ListCompany(list_id=list_id, company_id=company_id))
    db.flush()
    return True


def remove_company(db: Session, list_id: str, company_id: str) -> bool:
    row = db.execute(
        select(ListCompany).where(ListCompany.list_id == list_id, ListCompany.company_id == company_id)
    ).scalar_one_or_none()
    if not row:
        return False
    db.delete(row)
    db.flush()
    return True


def companies_in_list(db: Session, list_id: str) -> List[Company]:
    return db.execute(
        select(Company)
        .join(ListCompany, ListCompany.company_id == Company.id)
        .where(ListCompany.list_id == list_id)
        .order_by(ListCompany.added_at.desc(), Company.name)
    ).scalars().all()
