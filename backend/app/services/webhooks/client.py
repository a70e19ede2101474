# backend/app/services/webhooks/client.py
from __future__ import annotations

import enum
import json
import logging
import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

import requests

from app.core.config import settings
from app.services.webhooks.errors import NoUsableContent, WebhookError
from app.services.webhooks.normalizer import extract_content

logger = logging.getLogger(__name__)

DEFAULT_HEADERS = {
    "User-Agent": settings.USER_AGENT,
    "Accept": "application/json, text/plain, text/html",
}

# Plain session: webhook retries are governed by RetryPolicy below, not by urllib3.
_session = requests.Session()


# -----------------------------------------------------------------------------
# Retry policy: ATTEMPT -> SUCCESS | RETRY | EXHAUSTED
# -----------------------------------------------------------------------------
class CallState(str, enum.Enum):
    ATTEMPT = "attempt"
    SUCCESS = "success"
    RETRY = "retry"
    EXHAUSTED = "exhausted"


@dataclass(frozen=True)
class RetryPolicy:
    verbs: Sequence[str] = ("GET", "POST")
    max_attempts: Optional[int] = None   # defaults to one attempt per verb
    backoff_seconds: float = 0.0         # sleep backoff * attempt_number before a retry
    timeout: float = 15.0

    @property
    def attempts(self) -> int:
        return self.max_attempts or len(self.verbs)

    def verb_for(self, attempt_index: int) -> str:
        return self.verbs[attempt_index % len(self.verbs)].upper()


def default_policy() -> RetryPolicy:
    return RetryPolicy(
        backoff_seconds=settings.WEBHOOK_BACKOFF_SECONDS,
        timeout=settings.WEBHOOK_TIMEOUT,
    )


@dataclass
class Attempt:
    verb: str
    ok: bool
    status_code: Optional[int] = None
    error: Optional[str] = None


@dataclass
class CallOutcome:
    state: CallState
    content: str = ""
    body: str = ""  # raw text of the successful response
    attempts: List[Attempt] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.state is CallState.SUCCESS

    @property
    def last_error(self) -> Optional[str]:
        return self.attempts[-1].error if self.attempts else None


# -----------------------------------------------------------------------------
# Low level
# -----------------------------------------------------------------------------
def _query_params(payload: Dict[str, Any]) -> Dict[str, str]:
    """Flatten a JSON payload into query-string values."""
    out: Dict[str, str] = {}
    for k, v in (payload or {}).items():
        if v is None:
            continue
        if isinstance(v, (dict, list)):
            out[k] = json.dumps(v)
        elif isinstance(v, bool):
            out[k] = "true" if v else "false"
        else:
            out[k] = str(v)
    return out


def send(verb: str, url: str, payload: Dict[str, Any], *, timeout: float) -> requests.Response:
    """One HTTP request. GET carries the payload in the query string, POST as a JSON body."""
    verb = verb.upper()
    if verb == "GET":
        return _session.request("GET", url, params=_query_params(payload), headers=DEFAULT_HEADERS, timeout=timeout)
    return _session.request(verb, url, json=payload, headers=DEFAULT_HEADERS, timeout=timeout)


def decode_body(resp: requests.Response) -> Any:
    """JSON when the body parses, else the text."""
    try:
        return resp.json()
    except ValueError:
        return resp.text


def post_json(url: str, payload: Dict[str, Any], *, timeout: Optional[float] = None) -> Any:
    """
    Single POST used by the enrichment webhooks.
    Raises WebhookError on network failure or non-2xx.
    """
    timeout = timeout or settings.ENRICHMENT_TIMEOUT
    try:
        resp = send("POST", url, payload, timeout=timeout)
    except requests.exceptions.Timeout as exc:
        raise WebhookError(f"Request timed out after {timeout:.0f}s", url=url) from exc
    except requests.exceptions.RequestException as exc:
        raise WebhookError(f"Could not connect to webhook: {exc}", url=url) from exc

    if not resp.ok:
        raise WebhookError(f"Failed with status: {resp.status_code}", status_code=resp.status_code, url=url)
    return decode_body(resp)


# -----------------------------------------------------------------------------
# GET -> POST fallback
# -----------------------------------------------------------------------------
def call_with_fallback(
    url: str,
    payload: Dict[str, Any],
    policy: Optional[RetryPolicy] = None,
) -> CallOutcome:
    """
    Walk the policy's verbs until one returns usable content.

    Never raises for upstream problems; the outcome's state says what happened.
    """
    policy = policy or default_policy()
    outcome = CallOutcome(state=CallState.ATTEMPT)
    index = 0

    while True:
        if outcome.state is CallState.ATTEMPT:
            verb = policy.verb_for(index)
            attempt = Attempt(verb=verb, ok=False)
            outcome.attempts.append(attempt)
            try:
                resp = send(verb, url, payload, timeout=policy.timeout)
                attempt.status_code = resp.status_code
                if not resp.ok:
                    raise WebhookError(f"HTTP {resp.status_code}", status_code=resp.status_code, url=url)
                content = extract_content(resp.text, resp.headers.get("content-type"))
                if not content.strip():
                    raise NoUsableContent("No usable data in response", url=url)
                attempt.ok = True
                outcome.content = content
                outcome.body = resp.text
                outcome.state = CallState.SUCCESS
            except (requests.exceptions.RequestException, WebhookError) as exc:
                attempt.error = str(exc)
                logger.warning("Webhook %s %s failed (attempt %d/%d): %s", verb, url, index + 1, policy.attempts, exc)
                outcome.state = CallState.RETRY if index + 1 < policy.attempts else CallState.EXHAUSTED

        elif outcome.state is CallState.RETRY:
            index += 1
            if policy.backoff_seconds > 0:
                time.sleep(policy.backoff_seconds * index)
            outcome.state = CallState.ATTEMPT

        else:
            if outcome.state is CallState.EXHAUSTED:
                logger.warning("Webhook %s exhausted after %d attempt(s)", url, len(outcome.attempts))
            return outcome
