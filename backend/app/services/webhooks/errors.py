# backend/app/services/webhooks/errors.py
from typing import Optional


class WebhookError(Exception):
    """A webhook could not produce a usable answer."""

    def __init__(self, message: str, *, status_code: Optional[int] = None, url: Optional[str] = None):
        super().__init__(message)
        self.status_code = status_code
        self.url = url


class WebhookNotConfigured(WebhookError):
    def __init__(self, name: str):
        super().__init__(f"Webhook '{name}' is not configured")
        self.name = name


class NoUsableContent(WebhookError):
    pass
