# app/api/routes/lists.py
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from app.crud import companies as companies_crud
from app.crud import lists as crud
from app.db.session import get_db
from app.schemas.lists import ListCompanies, ListCreate, ListMembership, ListOut

router = APIRouter(prefix="/lists", tags=["lists"])


def _list_or_404(db: Session, list_id: str):
    row = crud.get(db, list_id)
    if not row:
        raise HTTPException(status_code=404, detail="List not found")
    return row


@router.get("", response_model=list[ListOut])
def list_lists(user_id: Optional[str] = Query(None), db: Session = Depends(get_db)):
    counts = crud.company_counts(db)
    return [
        ListOut(
            id=r.id,
            name=r.name,
            description=r.description,
            user_id=r.user_id,
            company_count=counts.get(r.id, 0),
            created_at=r.created_at,
        )
        for r in crud.list_all(db, user_id)
    ]


@router.post("", response_model=ListOut, status_code=status.HTTP_201_CREATED)
def create_list(payload: ListCreate, db: Session = Depends(get_db)):
    if not payload.name.strip():
        raise HTTPException(status_code=400, detail="List name is required")
    row = crud.create(db, name=payload.name, description=payload.description, user_id=payload.user_id)
    db.commit()
    db.refresh(row)
    return row


@router.get("/{list_id}/companies", response_model=ListCompanies)
def list_companies(list_id: str, db: Session = Depends(get_db)):
    _list_or_404(db, list_id)
    return {"list_id": list_id, "items": crud.companies_in_list(db, list_id)}


@router.post("/{list_id}/companies", response_model=dict)
def add_company(list_id: str, payload: ListMembership, db: Session = Depends(get_db)):
    _list_or_404(db, list_id)
    if not companies_crud.get(db, payload.company_id):
        raise HTTPException(status_code=404, detail="Company not found")
    added = crud.add_company(db, list_id, payload.company_id)
    db.commit()
    return {"status": "ok", "added": added}


@router.delete("/{list_id}/companies/{company_id}", response_model=dict)
def remove_company(list_id: str, company_id: str, db: Session = Depends(get_db)):
    _list_or_404(db, list_id)
    if not crud.remove_company(db, list_id, company_id):
        raise HTTPException(status_code=404, detail="Company is not in this list")
    db.commit()
    return {"status": "ok", "company_id": company_id}
