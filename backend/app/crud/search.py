# app/crud/search.py
from typing import Any, Dict, Iterable, List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.models.search import SearchHistory, SearchResultArchive


def create_history(
    db: Session,
    *,
    search_params: Dict[str, Any],
    user_id: Optional[str] = None,
    search_type: str = "people",
    person_titles: Optional[List[str]] = None,
) -> SearchHistory:
    row = SearchHistory(
        user_id=user_id,
        search_type=search_type,
        search_params=search_params,
        person_titles=person_titles or [],
        result_count=0,
    )
    db.add(row)
    db.flush()
    return row


def set_result_count(db: Session, history: SearchHistory, count: int) -> None:
    history.result_count = count
    db.flush()


def list_history(db: Session, user_id: Optional[str] = None, limit: int = 50) -> List[SearchHistory]:
    stmt = select(SearchHistory).order_by(SearchHistory.search_date.desc()).limit(limit)
    if user_id:
        stmt = stmt.where(SearchHistory.user_id == user_id)
    return db.execute(stmt).scalars().all()


def archive_results(db: Session, search_id: str, entries: Iterable[tuple[str, Dict[str, Any]]]) -> int:
    """
    Insert (unique_identifier, result_data) pairs, skipping identifiers already archived.
    Returns the number of rows written.
    """
    entries = list(entries)
    if not entries:
        return 0
    wanted = {uid for uid, _ in entries}
    existing = set(
        db.execute(
            select(SearchResultArchive.unique_identifier).where(SearchResultArchive.unique_identifier.in_(wanted))
        ).scalars().all()
    )
    written = 0
    for uid, data in entries:
        if uid in existing:
            continue
        existing.add(uid)
        db.add(SearchResultArchive(search_id=search_id, unique_identifier=uid, result_data=data))
        written += 1
    db.flush()
    return written


def archived_for_search(db: Session, search_id: str) -> List[SearchResultArchive]:
    return db.execute(
        select(SearchResultArchive).where(SearchResultArchive.search_id == search_id)
    ).scalars().all()
