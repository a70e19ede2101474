# backend/app/services/webhooks/normalizer.py
"""
Pull a usable block of text out of whatever an automation webhook sends back.

n8n flows answer with JSON of no fixed shape, with bare text, or with HTML.
`extract_content` applies one precedence order to all of them:

  1. empty body                        -> ""
  2. JSON string                       -> the string
  3. JSON object (or first list item)  -> first string field from CONTENT_FIELDS
                                          longer than MIN_CONTENT_LENGTH,
                                          then the same search one level down
  4. not JSON                          -> the raw body, unchanged
  5. JSON with nothing usable          -> json.dumps of the whole value
"""
from __future__ import annotations

import json
from typing import Any, Iterable, Optional

CONTENT_FIELDS = (
    "content",
    "research",
    "profile_research",
    "output",
    "text",
    "result",
    "response",
    "message",
    "analysis",
    "summary",
    "data",
    "body",
)

MIN_CONTENT_LENGTH = 10


def _lower_keys(obj: dict) -> dict:
    out = {}
    for k, v in obj.items():
        lk = str(k).lower()
        if lk not in out:
            out[lk] = v
    return out


def _usable(value: Any, min_length: int) -> bool:
    return isinstance(value, str) and len(value.strip()) > min_length


def find_content_field(
    obj: Any,
    fields: Iterable[str] = CONTENT_FIELDS,
    min_length: int = MIN_CONTENT_LENGTH,
) -> Optional[str]:
    """Search a decoded JSON value for the first recognised text field."""
    if isinstance(obj, list):
        obj = obj[0] if obj else None
    if not isinstance(obj, dict):
        return None

    fields = [f.lower() for f in fields]
    keyed = _lower_keys(obj)

    for name in fields:
        if _usable(keyed.get(name), min_length):
            return keyed[name]

    # one level down, e.g. {"message": {"content": "..."}} or {"data": [{"output": "..."}]}
    for name in fields:
        nested = keyed.get(name)
        if isinstance(nested, list):
            nested = nested[0] if nested else None
        if not isinstance(nested, dict):
            continue
        inner = _lower_keys(nested)
        for inner_name in fields:
            if _usable(inner.get(inner_name), min_length):
                return inner[inner_name]
    return None


def parse_json(body: str | bytes | None) -> tuple[bool, Any]:
    """Return (ok, value). ok is False when the body is not JSON."""
    if body is None:
        return False, None
    if isinstance(body, bytes):
        body = body.decode("utf-8", errors="replace")
    try:
        return True, json.loads(body)
    except (TypeError, ValueError):
        return False, None


def extract_content(body: str | bytes | None, content_type: Optional[str] = None) -> str:
    if body is None:
        return ""
    if isinstance(body, bytes):
        body = body.decode("utf-8", errors="replace")
    if not body.strip():
        return ""
    if content_type and "html" in content_type.lower():
        return body

    ok, data = parse_json(body)
    if not ok:
        # text/plain or text/html: the body is the content
        return body

    if isinstance(data, str):
        return data
    if isinstance(data, list) and data and isinstance(data[0], str):
        return data[0]

    found = find_content_field(data)
    if found is not None:
        return found

    if data is None or data == {} or data == []:
        return ""
    return json.dumps(data, ensure_ascii=False)


def extract_content_from_value(data: Any) -> str:
    """Same precedence as extract_content, for an already-decoded value."""
    if data is None:
        return ""
    if isinstance(data, str):
        return extract_content(data)
    return extract_content(json.dumps(data))
