import json
import os

# Must be set before anything under app/ is imported: settings and the engine are built at import time.
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["ENRICH_ON_SAVE"] = "false"
os.environ["WEBHOOK_BACKOFF_SECONDS"] = "0"
for _seed in (
    "APOLLO_API_KEY",
    "APIFY_API_KEY",
    "EMAIL_FINDER_WEBHOOK",
    "LINKEDIN_ENRICHMENT_WEBHOOK",
    "COMPANY_ENRICHMENT_WEBHOOK",
    "PROFILE_RESEARCH_WEBHOOK",
    "CRM_EXPORT_WEBHOOK",
):
    os.environ[_seed] = ""

import pytest
import requests
from fastapi.testclient import TestClient

from app.crud import app_settings as settings_crud
from app.db.base import create_all, drop_all
from app.db.session import SessionLocal, engine
from app.main import app
from app.services.webhooks import client as webhook_client


@pytest.fixture(autouse=True)
def _fresh_db():
    """Empty schema and a cold settings cache for every test."""
    drop_all(engine)
    create_all(engine)
    settings_crud.clear_cache()
    yield
    settings_crud.clear_cache()


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client():
    # no context manager: startup hooks (scheduler) stay off
    return TestClient(app)


def http_response(body="", status=200, content_type="application/json"):
    """A real requests.Response with the given body."""
    resp = requests.Response()
    resp.status_code = status
    if not isinstance(body, (str, bytes)):
        body = json.dumps(body)
    resp._content = body.encode("utf-8") if isinstance(body, str) else body
    resp.encoding = "utf-8"
    resp.headers["content-type"] = content_type
    return resp


@pytest.fixture
def make_response():
    return http_response


@pytest.fixture
def webhook_http(mocker):
    """Patch the webhook session; set .side_effect or .return_value on the result."""
    return mocker.patch.object(webhook_client._session, "request")


@pytest.fixture
def configure(db):
    """Write app settings (webhook URLs, keys) through the settings store."""
    def _configure(**values):
        return settings_crud.update(db, values)
    return _configure


@pytest.fixture
def company(db):
    from app.crud import companies as companies_crud

    obj = companies_crud.create(db, {
        "name": "Acme Landscaping",
        "website": "https://www.acme-landscaping.com",
        "industry": "Landscaping",
        "location": "Austin, TX",
        "linkedin_url": "https://www.linkedin.com/company/acme-landscaping",
    })
    db.commit()
    return obj


@pytest.fixture
def contact(db, company):
    from app.crud import contacts as contacts_crud

    obj = contacts_crud.create(db, {
        "first_name": "Jane",
        "last_name": "Doe",
        "position": "Marketing Director",
        "email": "jane@acme-landscaping.com",
        "company_id": company.id,
        "linkedin_url": "https://www.linkedin.com/in/janedoe",
    })
    db.commit()
    return obj
