from __future__ import annotations

from datetime import date
from typing import Dict, List, Optional
from urllib.parse import urljoin, urlparse
import logging
import re

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry
from bs4 import BeautifulSoup
from dateutil import parser as dateparse

from app.core.config import settings

logger = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# Config
# -----------------------------------------------------------------------------
DEFAULT_HEADERS = {
    "User-Agent": settings.USER_AGENT,
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.9",
    "Cache-Control": "no-cache",
    "Pragma": "no-cache",
}

CONNECT_TIMEOUT = settings.SCAN_CONNECT_TIMEOUT
READ_TIMEOUT = settings.SCAN_READ_TIMEOUT

# -----------------------------------------------------------------------------
# Keywords
#  - career links: href or anchor text mentions one of these
#  - awards: sentence mentions one of these
# -----------------------------------------------------------------------------
CAREER_KEYWORDS = ["career", "careers", "jobs", "join-us", "join us", "we're hiring", "we are hiring", "vacancies", "openings"]
AWARD_KEYWORDS = ["award", "awarded", "winner", "won ", "recognized as", "recognised as", "named best", "top 100", "certified"]

SKIP_HEADINGS = {"menu", "navigation", "search", "footer", "contact us", "cookie policy", "cookies"}

MAX_TOPICS = 12
MAX_AWARDS = 8
MAX_JOBS = 20

# -----------------------------------------------------------------------------
# HTTP session with retries/backoff
# -----------------------------------------------------------------------------
_session = requests.Session()
_retry = Retry(
    total=3,
    connect=3,
    read=3,
    backoff_factor=0.6,  # 0.6, 1.2, 1.8...
    status_forcelist=[429, 500, 502, 503, 504],
    allowed_methods=frozenset(["GET"]),
    raise_on_status=False,
)
_adapter = HTTPAdapter(max_retries=_retry)
_session.mount("https://", _adapter)
_session.mount("http://", _adapter)


def normalize_url(url: str) -> str:
    url = (url or "").strip()
    if url and "://" not in url:
        url = f"https://{url}"
    return url


def _get_html(url: str) -> Optional[str]:
    """
    Fetch URL with retries and timeouts. On failure, return None (don't raise).
    """
    try:
        resp = _session.get(url, headers=DEFAULT_HEADERS, timeout=(CONNECT_TIMEOUT, READ_TIMEOUT))
        if resp.status_code != 200:
            logger.info("Website scan: %s answered %s", url, resp.status_code)
            return None
        return resp.text
    except requests.exceptions.RequestException as exc:
        logger.warning("Website scan: could not fetch %s: %s", url, exc)
        return None

# -----------------------------------------------------------------------------
# Helpers
# -----------------------------------------------------------------------------
def _parse_date(text: str) -> Optional[date]:
    if not text:
        return None
    try:
        dt = dateparse.parse(text, fuzzy=True)
        return dt.date()
    except (ValueError, OverflowError):
        return None


def _nearby_date(node) -> Optional[date]:
    # climb a few ancestors and sniff time/small/span tags for a date-ish string
    hops = 0
    cur = node
    while cur is not None and hops < 3:
        t = cur.find("time") if hasattr(cur, "find") else None
        if t:
            d = _parse_date(t.get("datetime") or t.get_text(" ", strip=True))
            if d:
                return d
        cur = cur.parent
        hops += 1
    return None


def _clean(text: str) -> str:
    return re.sub(r"\s+", " ", text or "").strip()


def _same_site(url: str, base: str) -> bool:
    host = (urlparse(url).hostname or "").lower().removeprefix("www.")
    base_host = (urlparse(base).hostname or "").lower().removeprefix("www.")
    return bool(host) and host == base_host

# -----------------------------------------------------------------------------
# Extraction
# -----------------------------------------------------------------------------
def extract_topics(soup: BeautifulSoup) -> List[str]:
    """h1-h3 headings, de-duplicated, in page order."""
    seen: Dict[str, str] = {}
    for h in soup.find_all(["h1", "h2", "h3"]):
        text = _clean(h.get_text(" ", strip=True))
        key = text.lower()
        if len(text) < 4 or len(text) > 120 or key in SKIP_HEADINGS or key in seen:
            continue
        seen[key] = text
        if len(seen) >= MAX_TOPICS:
            break
    return list(seen.values())


def extract_job_links(soup: BeautifulSoup, base_url: str) -> List[dict]:
    """
    Career / job links on the page as:
      { "title": str, "url": str, "posted_date": str|None }
    """
    picked: Dict[str, dict] = {}
    for a in soup.find_all("a", href=True):
        href = a["href"].strip()
        text = _clean(a.get_text(" ", strip=True))
        hay = f"{href} {text}".lower()
        if not any(k in hay for k in CAREER_KEYWORDS):
            continue
        url_abs = urljoin(base_url, href)
        if not url_abs.startswith("http"):
            continue
        title = text or "Careers"
        pub = _nearby_date(a)
        prev = picked.get(url_abs)
        if prev is None or len(title) > len(prev["title"]):
            picked[url_abs] = {
                "title": title,
                "url": url_abs,
                "posted_date": pub.isoformat() if pub else None,
            }
        if len(picked) >= MAX_JOBS:
            break
    return list(picked.values())


def extract_awards(soup: BeautifulSoup) -> List[str]:
    found: List[str] = []
    for node in soup.find_all(["p", "li", "h2", "h3", "h4", "span"]):
        text = _clean(node.get_text(" ", strip=True))
        if len(text) < 12 or len(text) > 240:
            continue
        low = text.lower()
        if any(k in low for k in AWARD_KEYWORDS) and text not in found:
            found.append(text)
        if len(found) >= MAX_AWARDS:
            break
    return found


def extract_description(soup: BeautifulSoup) -> Optional[str]:
    meta = soup.find("meta", attrs={"name": "description"}) or soup.find("meta", attrs={"property": "og:description"})
    if meta and meta.get("content"):
        return _clean(meta["content"])
    return None

# -----------------------------------------------------------------------------
# Scan
# -----------------------------------------------------------------------------
def scan_html(html: str, base_url: str) -> dict:
    soup = BeautifulSoup(html, "html.parser")
    title = _clean(soup.title.get_text()) if soup.title else None
    jobs = extract_job_links(soup, base_url)
    return {
        "url": base_url,
        "title": title,
        "description": extract_description(soup),
        "key_topics": extract_topics(soup),
        "job_postings": jobs,
        "awards": extract_awards(soup),
        "career_page": next((j["url"] for j in jobs if _same_site(j["url"], base_url)), None),
    }


def scan_website(url: str) -> Optional[dict]:
    """
    Fetch a company homepage and pull out headings, career links and award mentions.
    Returns None when the page could not be fetched.
    """
    url = normalize_url(url)
    if not url:
        return None
    html = _get_html(url)
    if not html:
        return None
    result = scan_html(html, url)
    logger.info(
        "Website scan %s: %d topic(s), %d job link(s), %d award mention(s)",
        url, len(result["key_topics"]), len(result["job_postings"]), len(result["awards"]),
    )
    return result
