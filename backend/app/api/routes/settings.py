# app/api/routes/settings.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.crud import app_settings as crud
from app.db.session import get_db
from app.schemas.settings import SettingsOut, SettingsUpdate

router = APIRouter(prefix="/settings", tags=["settings"])


@router.get("", response_model=SettingsOut)
def get_settings(db: Session = Depends(get_db)):
    return crud.get_or_create(db)


# PUT /api/settings: only the fields sent are written; null clears a field
@router.put("", response_model=SettingsOut)
def update_settings(payload: SettingsUpdate, db: Session = Depends(get_db)):
    return crud.update(db, payload.model_dump(exclude_unset=True))
