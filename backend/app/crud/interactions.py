# app/crud/interactions.py
import json
from typing import List

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.models.interaction import Interaction


def log_interaction(db: Session, *, contact_id: str, type_: str, meta: dict | None = None) -> None:
    evt = Interaction(contact_id=contact_id, type=type_, meta=json.dumps(meta or {}, default=str))
    db.add(evt)


def list_for_contact(db: Session, contact_id: str, limit: int = 100) -> List[Interaction]:
    return db.execute(
        select(Interaction)
        .where(Interaction.contact_id == contact_id)
        .order_by(Interaction.created_at.desc())
        .limit(limit)
    ).scalars().all()
