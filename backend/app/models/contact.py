# app/models/contact.py
from sqlalchemy import JSON, Boolean, Column, DateTime, ForeignKey, String, Text
from sqlalchemy.sql import func

from app.models.base import Base, _uuid


class Contact(Base):
    __tablename__ = "contacts"

    id = Column(String, primary_key=True, default=_uuid)
    first_name = Column(String, nullable=False)
    last_name = Column(String, nullable=True)
    email = Column(String, nullable=True, index=True)
    email_status = Column(String, nullable=True)
    phone = Column(String, nullable=True)
    mobile_phone = Column(String, nullable=True)
    position = Column(String, nullable=True)
    seniority = Column(String, nullable=True)
    notes = Column(Text, nullable=True)

    company_id = Column(String, ForeignKey("companies.id"), index=True, nullable=False)

    linkedin_url = Column(Text, nullable=True, index=True)
    facebook_url = Column(Text, nullable=True)
    twitter_url = Column(Text, nullable=True)
    photo_url = Column(Text, nullable=True)
    external_id = Column(String, nullable=True)

    # LinkedIn-derived, filled by enrichment
    headline = Column(String, nullable=True)
    about = Column(Text, nullable=True)
    linkedin_bio = Column(Text, nullable=True)
    linkedin_skills = Column(JSON, nullable=True)
    linkedin_education = Column(JSON, nullable=True)
    linkedin_experience = Column(JSON, nullable=True)
    linkedin_posts = Column(JSON, nullable=True)
    job_history = Column(JSON, nullable=True)
    job_start_date = Column(String, nullable=True)
    languages = Column(JSON, nullable=True)
    address = Column(Text, nullable=True)
    city = Column(String, nullable=True)
    country = Column(String, nullable=True)
    last_enriched = Column(DateTime(timezone=True), nullable=True)

    source = Column(String, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=True)
    deleted_at = Column(DateTime(timezone=True), nullable=True)
