# app/models/insight.py
from sqlalchemy import JSON, Boolean, Column, DateTime, ForeignKey, String, Text
from sqlalchemy.sql import func

from app.models.base import Base, _uuid


class CompanyInsight(Base):
    __tablename__ = "company_insights"

    id = Column(String, primary_key=True, default=_uuid)
    company_id = Column(String, ForeignKey("companies.id"), unique=True, index=True, nullable=False)

    awards = Column(JSON, nullable=True)          # list[str]
    job_postings = Column(JSON, nullable=True)    # list[{title, description, location, posted_date, url}]
    content_audit = Column(JSON, nullable=True)   # {key_topics, recent_content, content_gaps} or {content}

    ideal_client = Column(Boolean, nullable=True)
    suggested_approach = Column(Text, nullable=True)
    approach_notes = Column(Text, nullable=True)
    ideal_customer_analysis = Column(Text, nullable=True)

    running_facebook_ads = Column(Boolean, nullable=True)
    ad_details = Column(Text, nullable=True)

    profile_research = Column(Text, nullable=True)
    tech_stack_data = Column(JSON, nullable=True)
    tech_stack_last_updated = Column(DateTime(timezone=True), nullable=True)
    notes = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=True)
