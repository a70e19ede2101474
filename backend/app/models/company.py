# app/models/company.py
from sqlalchemy import JSON, Column, DateTime, Float, Integer, String, Text
from sqlalchemy.sql import func

from app.models.base import Base, _uuid


class Company(Base):
    __tablename__ = "companies"

    id = Column(String, primary_key=True, default=_uuid)
    name = Column(String, nullable=False, index=True)
    website = Column(String, nullable=True)
    primary_domain = Column(String, nullable=True, index=True)

    industry = Column(String, nullable=True)
    industry_vertical = Column(String, nullable=True)
    size = Column(String, nullable=True)
    description = Column(Text, nullable=True)
    founded_year = Column(Integer, nullable=True)
    estimated_num_employees = Column(Integer, nullable=True)
    annual_revenue = Column(Float, nullable=True)
    annual_revenue_printed = Column(String, nullable=True)

    # address parts
    location = Column(String, nullable=True)
    raw_address = Column(Text, nullable=True)
    street = Column(String, nullable=True)
    city = Column(String, nullable=True)
    state = Column(String, nullable=True)
    zip = Column(String, nullable=True)
    country = Column(String, nullable=True)
    phone = Column(String, nullable=True)

    # social
    linkedin_url = Column(Text, nullable=True)
    facebook_url = Column(Text, nullable=True)
    twitter_url = Column(Text, nullable=True)
    logo_url = Column(Text, nullable=True)

    keywords = Column(JSON, nullable=True)
    tags = Column(JSON, nullable=True)
    technology_names = Column(JSON, nullable=True)
    tech_stack_data = Column(JSON, nullable=True)
    tech_stack_last_updated = Column(DateTime(timezone=True), nullable=True)

    # outreach scripts / free text
    call_script = Column(Text, nullable=True)
    email_script = Column(Text, nullable=True)
    text_script = Column(Text, nullable=True)
    social_dm_script = Column(Text, nullable=True)
    research_notes = Column(Text, nullable=True)

    external_id = Column(String, nullable=True)
    user_id = Column(String, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=True)
