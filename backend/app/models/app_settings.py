# app/models/app_settings.py
from sqlalchemy import Column, DateTime, String, Text
from sqlalchemy.sql import func

from app.models.base import Base

DEFAULT_SETTINGS_ID = "default"

# Webhook columns, in the order the settings screen lists them
WEBHOOK_FIELDS = (
    "email_finder_webhook",
    "linkedin_enrichment_webhook",
    "company_enrichment_webhook",
    "profile_research_webhook",
    "ideal_customer_webhook",
    "company_research_webhook",
    "competitive_research_webhook",
    "market_research_webhook",
    "growth_research_webhook",
    "tech_research_webhook",
    "awards_webhook",
    "jobs_webhook",
    "content_webhook",
    "facebook_ads_webhook",
    "tech_stack_webhook",
    "outreach_webhook",
    "call_script_webhook",
    "email_script_webhook",
    "text_script_webhook",
    "social_dm_webhook",
    "crm_export_webhook",
    "lead_search_webhook",
)

KEY_FIELDS = ("apollo_api_key", "apify_api_key", "lead_provider")


class AppSettings(Base):
    """Singleton row (id='default') holding API keys and webhook URLs."""

    __tablename__ = "app_settings"

    id = Column(String, primary_key=True, default=DEFAULT_SETTINGS_ID)

    apollo_api_key = Column(Text, nullable=True)
    apify_api_key = Column(Text, nullable=True)
    lead_provider = Column(String, nullable=True)

    email_finder_webhook = Column(Text, nullable=True)
    linkedin_enrichment_webhook = Column(Text, nullable=True)
    company_enrichment_webhook = Column(Text, nullable=True)
    profile_research_webhook = Column(Text, nullable=True)
    ideal_customer_webhook = Column(Text, nullable=True)
    company_research_webhook = Column(Text, nullable=True)
    competitive_research_webhook = Column(Text, nullable=True)
    market_research_webhook = Column(Text, nullable=True)
    growth_research_webhook = Column(Text, nullable=True)
    tech_research_webhook = Column(Text, nullable=True)
    awards_webhook = Column(Text, nullable=True)
    jobs_webhook = Column(Text, nullable=True)
    content_webhook = Column(Text, nullable=True)
    facebook_ads_webhook = Column(Text, nullable=True)
    tech_stack_webhook = Column(Text, nullable=True)
    outreach_webhook = Column(Text, nullable=True)
    call_script_webhook = Column(Text, nullable=True)
    email_script_webhook = Column(Text, nullable=True)
    text_script_webhook = Column(Text, nullable=True)
    social_dm_webhook = Column(Text, nullable=True)
    crm_export_webhook = Column(Text, nullable=True)
    lead_search_webhook = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=True)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=True)
