# app/models/interaction.py
from sqlalchemy import Column, DateTime, ForeignKey, String, Text
from sqlalchemy.sql import func

from app.models.base import Base, _uuid


class Interaction(Base):
    __tablename__ = "interactions"

    id = Column(String, primary_key=True, default=_uuid)
    contact_id = Column(String, ForeignKey("contacts.id"), index=True, nullable=False)
    type = Column(String, nullable=False)  # e.g. 'CREATED', 'ENRICHED', 'EMAIL_SENT'
    meta = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
