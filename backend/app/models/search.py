# app/models/search.py
from sqlalchemy import JSON, Boolean, Column, DateTime, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.sql import func

from app.models.base import Base, _uuid


class SearchHistory(Base):
    __tablename__ = "search_history"

    id = Column(String, primary_key=True, default=_uuid)
    user_id = Column(String, nullable=True, index=True)
    search_type = Column(String, nullable=False, default="people")
    search_params = Column(JSON, nullable=False)
    person_titles = Column(JSON, nullable=True)
    result_count = Column(Integer, nullable=False, default=0)
    search_date = Column(DateTime(timezone=True), server_default=func.now(), nullable=True)


class SearchResultArchive(Base):
    __tablename__ = "search_results_archive"

    id = Column(String, primary_key=True, default=_uuid)
    search_id = Column(String, ForeignKey("search_history.id"), index=True, nullable=True)
    result_data = Column(JSON, nullable=False)
    unique_identifier = Column(String, nullable=False)
    added_to_list = Column(Boolean, nullable=True, default=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=True)

    __table_args__ = (UniqueConstraint("unique_identifier", name="uq_archive_unique_identifier"),)
