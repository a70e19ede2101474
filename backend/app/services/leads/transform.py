# backend/app/services/leads/transform.py
"""
Flatten scraper output (Apollo via Apify, n8n lead-search flows) into SearchResult dicts.

Records arrive as a list, a single record, a wrapper dict holding the list
under `contacts`/`people`/`items`/`results`, or as organization records that
carry their own nested `contacts`. Field names differ between sources, so each
output field is coalesced from a fixed list of candidates. Nested values may be
missing or null anywhere.
"""
from __future__ import annotations

import time
from typing import Any, Dict, Iterable, List, Optional, Tuple

WRAPPER_KEYS = ("contacts", "people", "items", "results")
PERSON_KEYS = ("first_name", "last_name", "firstName", "lastName", "title", "headline", "email", "linkedin_url")
NORMALIZED_KEYS = ("id", "type", "raw_data")


def _get(obj: Any, path: str) -> Any:
    """Dotted lookup that tolerates None / non-dict intermediates."""
    cur = obj
    for part in path.split("."):
        if not isinstance(cur, dict):
            return None
        cur = cur.get(part)
    return cur


def _first(obj: Dict[str, Any], *paths: str) -> str:
    for p in paths:
        v = _get(obj, p)
        if v is None:
            continue
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            v = str(v)
        if isinstance(v, str) and v.strip():
            return v.strip()
    return ""


def _joined(obj: Dict[str, Any], *paths: str, sep: str = " ") -> str:
    parts = [_first(obj, p) for p in paths]
    return sep.join(p for p in parts if p)


def is_normalized(item: Any) -> bool:
    return (
        isinstance(item, dict)
        and all(k in item for k in NORMALIZED_KEYS)
        and item.get("type") in ("person", "company")
    )


def _unwrap(raw: Any) -> List[Any]:
    if raw is None:
        return []
    if isinstance(raw, dict):
        for key in WRAPPER_KEYS:
            if isinstance(raw.get(key), list) and not is_normalized(raw):
                # a wrapper only when it carries nothing person-like of its own
                if not any(raw.get(k) for k in PERSON_KEYS):
                    return raw[key]
        return [raw]
    if isinstance(raw, list):
        return raw
    return []


def _flatten(records: Iterable[Any]) -> List[Tuple[int, int, Dict[str, Any]]]:
    """(outer_index, inner_index, record). Organization records with a nested contacts list expand."""
    out: List[Tuple[int, int, Dict[str, Any]]] = []
    for i, rec in enumerate(records):
        if not isinstance(rec, dict):
            continue
        nested = rec.get("contacts")
        if isinstance(nested, list) and nested and not is_normalized(rec):
            parent = {k: v for k, v in rec.items() if k != "contacts"}
            for j, child in enumerate(nested):
                if not isinstance(child, dict):
                    continue
                merged = dict(child)
                # contacts nested under an organization inherit it
                if not merged.get("organization") and parent:
                    merged["organization"] = parent.get("organization") or parent
                out.append((i, j, merged))
            continue
        out.append((i, 0, rec))
    return out


def _person_name(rec: Dict[str, Any]) -> str:
    return (
        _first(rec, "name", "full_name", "fullName")
        or _joined(rec, "first_name", "last_name")
        or _joined(rec, "firstName", "lastName")
        or _joined(rec, "contact.firstName", "contact.lastName")
        or _joined(rec, "contact.first_name", "contact.last_name")
    )


def _location(rec: Dict[str, Any]) -> str:
    return (
        _first(rec, "location", "present_raw_address", "formatted_address")
        or _joined(rec, "city", "state", "country", sep=", ")
        or _first(rec, "organization_location", "organization.raw_address")
        or _joined(rec, "organization.city", "organization.state", "organization.country", sep=", ")
        or _first(rec, "company.location")
    )


def _is_person(rec: Dict[str, Any]) -> bool:
    if any(rec.get(k) for k in PERSON_KEYS):
        return True
    # {contact: {...}, company: {...}} pairs from the Apify people search
    return isinstance(rec.get("contact"), dict)


def normalize_record(rec: Dict[str, Any], outer: int, inner: int, stamp: int) -> Dict[str, Any]:
    is_person = _is_person(rec)
    company = _first(
        rec, "company", "company.name", "organization_name", "organization.name", "company_name", "companyName"
    )

    result: Dict[str, Any] = {
        "id": f"{outer}-{inner}-{stamp}",
        "type": "person" if is_person else "company",
        "name": "",
        "title": _first(rec, "title", "headline", "position", "contact.title"),
        "company": company,
        "industry": _first(rec, "industry", "organization.industry", "organization_industry", "company.industry"),
        "location": _location(rec),
        "website": _first(
            rec, "website", "organization.website_url", "organization_website", "website_url", "company.website"
        ),
        "linkedin_url": _first(
            rec, "linkedin_url", "linkedinUrl", "contact.linkedin_url",
            "organization.linkedin_url", "company.linkedin_url",
        ),
        "email": _first(rec, "email", "work_email", "contact.email"),
        "phone": _first(
            rec, "phone", "sanitized_phone", "contact.phone",
            "organization.phone", "organization.primary_phone.number",
        ),
        "description": _first(
            rec, "description", "organization.short_description", "organization.description",
            "organization_description", "company.description",
        ),
        "selected": False,
        "archived": False,
        "raw_data": rec,
    }

    if is_person:
        result["name"] = _person_name(rec) or "Unknown"
        result["company"] = company or "Unknown"
    else:
        result["name"] = company or _first(rec, "name") or "Unknown"
        result["company"] = result["name"]
    return result


def transform_search_results(raw: Any, *, now_ms: Optional[int] = None) -> List[Dict[str, Any]]:
    """Normalize raw scraper output; already-normalized entries pass through as-is."""
    stamp = now_ms if now_ms is not None else int(time.time() * 1000)
    out: List[Dict[str, Any]] = []
    records = _unwrap(raw)
    passthrough = [r for r in records if is_normalized(r)]
    if passthrough and len(passthrough) == len(records):
        return [dict(r) for r in records]

    for outer, inner, rec in _flatten(records):
        if is_normalized(rec):
            out.append(dict(rec))
            continue
        out.append(normalize_record(rec, outer, inner, stamp))
    return out


def archive_identifier(result: Dict[str, Any]) -> str:
    """Stable key used to skip duplicate archive rows: company-first-last-title for people."""
    raw = result.get("raw_data") or {}
    if result.get("type") == "person":
        first = _first(raw, "first_name", "firstName", "contact.firstName")
        last = _first(raw, "last_name", "lastName", "contact.lastName")
        if not (first or last):
            first = result.get("name") or ""
        return f"{result.get('company') or ''}-{first}-{last}-{result.get('title') or ''}"
    return f"company-{result.get('name') or ''}-{result.get('website') or ''}"
