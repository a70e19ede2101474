# backend/app/services/linkedin.py
"""
Turn a LinkedIn profile payload (whatever shape the enrichment flow returns)
into contact column values.
"""
from __future__ import annotations

import uuid
from datetime import datetime
from typing import Any, Dict, List, Optional


def _text(v: Any) -> Optional[str]:
    if isinstance(v, str) and v.strip():
        return v.strip()
    return None


def _dict(v: Any) -> Dict[str, Any]:
    return v if isinstance(v, dict) else {}


def _first_text(d: Dict[str, Any], *keys: str) -> Optional[str]:
    for k in keys:
        v = _text(d.get(k))
        if v:
            return v
    return None


def unwrap_profile(data: Any) -> Optional[Dict[str, Any]]:
    """Responses may be a one-element array, or keep the profile under `profile`."""
    if isinstance(data, list):
        data = data[0] if data else None
    if not isinstance(data, dict):
        return None
    if isinstance(data.get("profile"), dict) and not data.get("headline"):
        merged = dict(data["profile"])
        merged.update({k: v for k, v in data.items() if k != "profile"})
        return merged
    return data


def _date_range(start: Any, end: Any) -> str:
    start = _text(start) or ""
    end = _text(end) or "Present"
    if not start:
        return ""
    return f"{start} - {end}"


def format_education(items: Any) -> List[str]:
    out: List[str] = []
    for e in items or []:
        if isinstance(e, str):
            if e.strip():
                out.append(e.strip())
            continue
        if not isinstance(e, dict):
            continue
        school = _first_text(e, "school_name", "schoolName", "title", "school")
        degree = _first_text(e, "degree", "degreeName", "subtitle")
        study = _first_text(e, "field_of_study", "fieldOfStudy")
        head = " ".join(p for p in (degree, study) if p)
        line = f"{head} at {school}" if head and school else (head or school or "")
        start = e.get("start_date") or e.get("startDate") or _dict(e.get("timePeriod")).get("start")
        end = e.get("end_date") or e.get("endDate")
        if _text(start):
            line += f" ({_text(start)}-{_text(end) or 'Present'})"
        elif _text(e.get("caption")):
            line += f" ({e['caption'].strip()})"
        if line:
            out.append(line)
    return out


def format_experience(items: Any) -> List[str]:
    out: List[str] = []
    for x in items or []:
        if isinstance(x, str):
            if x.strip():
                out.append(x.strip())
            continue
        if not isinstance(x, dict):
            continue

        # grouped roles at one company: {title: company, subComponents: [{title, caption}]}
        subs = x.get("subComponents")
        if isinstance(subs, list) and subs and _text(x.get("title")):
            company = x["title"].strip()
            for s in subs:
                if not isinstance(s, dict):
                    continue
                role = _first_text(s, "title", "role", "position")
                if not role:
                    continue
                line = f"{role} at {company}"
                if _text(s.get("caption")):
                    line += f" ({s['caption'].strip()})"
                out.append(line)
            continue

        role = _first_text(x, "title", "role", "position", "job_title")
        company = _first_text(x, "company", "organization", "company_name", "subtitle")
        if not role and not company:
            continue
        line = role or ""
        if company:
            line = f"{line} at {company}" if line else company
        dates = _date_range(x.get("start_date") or x.get("startDate"), x.get("end_date") or x.get("endDate"))
        caption = _text(x.get("caption"))
        if dates:
            line += f" ({dates})"
        elif caption:
            line += f" ({caption})"
        out.append(line)
    return out


def format_posts(profile: Dict[str, Any]) -> List[Dict[str, Any]]:
    now = datetime.utcnow().isoformat()
    stats = _dict(profile.get("profile_stats"))

    if _text(profile.get("profile_post_text")):
        return [{
            "id": f"post-{uuid.uuid4().hex[:9]}",
            "content": profile["profile_post_text"].strip(),
            "timestamp": _dict(profile.get("profile_posted_at")).get("date") or now,
            "likes": stats.get("total_reactions") or 0,
            "comments": stats.get("comments") or 0,
            "url": None,
        }]

    posts = profile.get("posts")
    if not isinstance(posts, list):
        return []
    out = []
    for p in posts:
        if not isinstance(p, dict):
            continue
        p_stats = _dict(p.get("profile_stats"))
        out.append({
            "id": p.get("id") or f"post-{uuid.uuid4().hex[:9]}",
            "content": p.get("content") or p.get("text") or p.get("profile_post_text") or "",
            "timestamp": p.get("timestamp") or p.get("date") or _dict(p.get("profile_posted_at")).get("date") or now,
            "likes": p.get("likes") or p_stats.get("total_reactions") or 0,
            "comments": p.get("comments") or p_stats.get("comments") or 0,
            "url": p.get("url"),
        })
    return out


def _split_location(loc: str) -> Dict[str, str]:
    if "," in loc:
        parts = [p.strip() for p in loc.split(",") if p.strip()]
        if len(parts) >= 2:
            return {"city": parts[0], "country": parts[-1]}
    return {"city": loc.strip()}


def extract_profile_updates(data: Any) -> Dict[str, Any]:
    """
    Contact columns found in a profile payload. Empty dict when the payload
    carries nothing usable.
    """
    profile = unwrap_profile(data)
    if not profile:
        return {}

    updates: Dict[str, Any] = {}

    mobile = _first_text(profile, "mobileNumber", "mobilePhone", "mobile_phone")
    if mobile:
        updates["mobile_phone"] = mobile

    headline = _first_text(profile, "headline", "position", "jobTitle")
    if headline:
        updates["headline"] = headline
        updates["position"] = _first_text(profile, "jobTitle", "position") or headline

    bio = _first_text(profile, "bio", "summary", "about")
    if bio:
        updates["linkedin_bio"] = bio
        updates["about"] = _first_text(profile, "about", "bio", "summary")

    location = _first_text(profile, "location", "addressWithoutCountry")
    if location:
        updates["address"] = _first_text(profile, "addressWithoutCountry", "location")
        updates.update(_split_location(location))
    if _text(profile.get("city")):
        updates["city"] = profile["city"].strip()
    country = _first_text(profile, "country", "addressCountryOnly")
    if country:
        updates["country"] = country

    start = _text(profile.get("jobStartDate")) or _text(_dict(profile.get("current_job")).get("start_date"))
    if start:
        updates["job_start_date"] = start

    if isinstance(profile.get("languages"), list) and profile["languages"]:
        updates["languages"] = [
            (l.get("name") or l.get("title") or "") if isinstance(l, dict) else str(l)
            for l in profile["languages"]
        ]

    skills = profile.get("skills")
    if isinstance(skills, list) and skills:
        updates["linkedin_skills"] = [
            (s.get("name") or s.get("title") or "") if isinstance(s, dict) else str(s) for s in skills
        ]
    elif _text(profile.get("topSkillsByEndorsements")):
        updates["linkedin_skills"] = [s.strip() for s in profile["topSkillsByEndorsements"].split(",") if s.strip()]

    education = profile.get("educations") or profile.get("education")
    if isinstance(education, list) and education:
        formatted = format_education(education)
        if formatted:
            updates["linkedin_education"] = formatted

    experience = profile.get("job_history") or profile.get("experiences") or profile.get("experience")
    if isinstance(experience, list) and experience:
        formatted = format_experience(experience)
        if formatted:
            updates["linkedin_experience"] = formatted
            updates["job_history"] = formatted

    posts = format_posts(profile)
    if posts:
        updates["linkedin_posts"] = posts

    return updates
