# app/models/lead_list.py
from sqlalchemy import Column, DateTime, ForeignKey, String, Text, UniqueConstraint
from sqlalchemy.sql import func

from app.models.base import Base, _uuid


class LeadList(Base):
    __tablename__ = "lists"

    id = Column(String, primary_key=True, default=_uuid)
    name = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    user_id = Column(String, nullable=True, index=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=True)


class ListCompany(Base):
    __tablename__ = "list_companies"

    id = Column(String, primary_key=True, default=_uuid)
    list_id = Column(String, ForeignKey("lists.id"), index=True, nullable=False)
    company_id = Column(String, ForeignKey("companies.id"), index=True, nullable=False)
    added_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=True)

    __table_args__ = (UniqueConstraint("list_id", "company_id", name="uq_list_company"),)
