# backend/app/services/leads/apify.py
"""
Apollo people search through the Apify scraper actor.

A run is started with the Apollo search URL, its status is polled until it
settles, then the dataset items are fetched.
"""
from __future__ import annotations

import logging
import time
from typing import Any, Callable, Dict, Iterable, List, Optional
from urllib.parse import quote

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from app.core.config import settings

logger = logging.getLogger(__name__)

APOLLO_PEOPLE_URL = "https://app.apollo.io/#/people"

TERMINAL_FAILURES = {"FAILED", "ABORTED", "TIMED-OUT"}


class ApifyError(Exception):
    """Run could not be started, ended badly, or never finished."""

    def __init__(self, message: str, *, status: Optional[str] = None):
        super().__init__(message)
        self.status = status


# -----------------------------------------------------------------------------
# HTTP session with retries/backoff (polling GETs only)
# -----------------------------------------------------------------------------
def _build_session() -> requests.Session:
    session = requests.Session()
    retry = Retry(
        total=3,
        connect=3,
        read=3,
        backoff_factor=0.6,
        status_forcelist=[429, 500, 502, 503, 504],
        allowed_methods=frozenset(["GET"]),
        raise_on_status=False,
    )
    adapter = HTTPAdapter(max_retries=retry)
    session.mount("https://", adapter)
    session.mount("http://", adapter)
    return session


_session = _build_session()


# -----------------------------------------------------------------------------
# Apollo URL
# -----------------------------------------------------------------------------
def _as_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value] if value.strip() else []
    return [str(v) for v in value if v not in (None, "")]


def build_apollo_url(params: Dict[str, Any]) -> str:
    """Apollo's web search URL; the actor scrapes whatever this page would list."""
    parts: List[str] = ["page=1", "sortByField=%5Bnone%5D", "sortAscending=false"]

    def add(name: str, values: Iterable[str]) -> None:
        for v in values:
            parts.append(f"{name}[]={quote(v, safe='')}")

    add("personTitles", _as_list(params.get("person_titles") or params.get("personTitles")))
    add("personLocations", _as_list(params.get("location")))
    add("organizationLocations", _as_list(params.get("organization_locations") or params.get("organizationLocations")))
    add("personSeniorities", _as_list(params.get("seniorities")))
    add("personDepartmentOrSubdepartments", _as_list(params.get("departments")))
    add("contactEmailStatusV2", _as_list(params.get("email_status") or params.get("emailStatus")))
    add("organizationNumEmployeesRanges", _as_list(params.get("employee_ranges") or params.get("employeeRanges")))

    keywords = _as_list(params.get("keywords"))
    if keywords:
        fields = _as_list(params.get("keyword_fields") or params.get("keywordFields")) or ["tags", "name"]
        add("includedOrganizationKeywordFields", fields)
        add("qOrganizationKeywordTags", keywords)

    return f"{APOLLO_PEOPLE_URL}?{'&'.join(parts)}"


# -----------------------------------------------------------------------------
# Client
# -----------------------------------------------------------------------------
class ApifyClient:
    def __init__(
        self,
        api_key: str,
        *,
        actor_id: Optional[str] = None,
        base_url: Optional[str] = None,
        poll_interval: Optional[float] = None,
        max_polls: Optional[int] = None,
        sleep: Callable[[float], None] = time.sleep,
        session: Optional[requests.Session] = None,
    ):
        if not api_key:
            raise ApifyError("Apify API key is not configured")
        self.api_key = api_key
        self.actor_id = actor_id or settings.APIFY_ACTOR_ID
        self.base_url = (base_url or settings.APIFY_BASE).rstrip("/")
        self.poll_interval = settings.APIFY_POLL_INTERVAL if poll_interval is None else poll_interval
        self.max_polls = max_polls or settings.APIFY_MAX_POLLS
        self._sleep = sleep
        self._session = session or _session

    def _params(self, **extra) -> Dict[str, Any]:
        return {"token": self.api_key, **extra}

    def _json(self, resp: requests.Response, what: str) -> Any:
        if not resp.ok:
            raise ApifyError(f"{what} failed with status {resp.status_code}: {resp.text[:300]}")
        try:
            return resp.json()
        except ValueError as exc:
            raise ApifyError(f"{what} returned invalid JSON") from exc

    def start_run(self, search_url: str, limit: int) -> Dict[str, Any]:
        url = f"{self.base_url}/acts/{self.actor_id}/runs"
        body = {"url": search_url, "totalRecords": limit, "getPersonalEmails": True, "getWorkEmails": True}
        try:
            resp = self._session.post(url, params=self._params(), json=body, timeout=30)
        except requests.exceptions.RequestException as exc:
            raise ApifyError(f"Could not start Apify run: {exc}") from exc
        data = (self._json(resp, "Starting Apify run") or {}).get("data") or {}
        if not data.get("id"):
            raise ApifyError("Apify did not return a run id")
        logger.info("Apify run %s started", data["id"])
        return data

    def wait_for_run(self, run_id: str) -> Dict[str, Any]:
        """Poll every poll_interval seconds, at most max_polls times."""
        url = f"{self.base_url}/actor-runs/{run_id}"
        for poll in range(1, self.max_polls + 1):
            self._sleep(self.poll_interval)
            try:
                resp = self._session.get(url, params=self._params(), timeout=30)
            except requests.exceptions.RequestException as exc:
                logger.warning("Apify poll %d/%d for run %s failed: %s", poll, self.max_polls, run_id, exc)
                continue
            run = (self._json(resp, "Checking Apify run") or {}).get("data") or {}
            status = run.get("status")
            logger.debug("Apify run %s status %s (poll %d/%d)", run_id, status, poll, self.max_polls)
            if status == "SUCCEEDED":
                return run
            if status in TERMINAL_FAILURES:
                raise ApifyError(f"Apify run {status.lower()}", status=status)
        raise ApifyError(
            f"Apify run did not finish after {self.max_polls} checks", status="TIMEOUT"
        )

    def fetch_items(self, dataset_id: str, limit: Optional[int] = None) -> List[Dict[str, Any]]:
        url = f"{self.base_url}/datasets/{dataset_id}/items"
        extra = {"clean": "true", "format": "json"}
        if limit:
            extra["limit"] = limit
        try:
            resp = self._session.get(url, params=self._params(**extra), timeout=60)
        except requests.exceptions.RequestException as exc:
            raise ApifyError(f"Could not fetch Apify dataset: {exc}") from exc
        items = self._json(resp, "Fetching Apify dataset")
        return items if isinstance(items, list) else []

    def search(self, params: Dict[str, Any]) -> List[Dict[str, Any]]:
        limit = int(params.get("limit") or settings.APIFY_DEFAULT_LIMIT)
        search_url = build_apollo_url(params)
        logger.info("Apify search: %s (limit %d)", search_url, limit)

        run = self.start_run(search_url, limit)
        finished = self.wait_for_run(run["id"])
        dataset_id = finished.get("defaultDatasetId") or run.get("defaultDatasetId")
        if not dataset_id:
            raise ApifyError("Apify run has no dataset")
        items = self.fetch_items(dataset_id, limit)
        logger.info("Apify run %s returned %d item(s)", run["id"], len(items))
        return items
