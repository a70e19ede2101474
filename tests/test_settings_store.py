"""
Tests for the app settings store: one database row, cached per process,
invalidated on every write.
"""

import pytest
from sqlalchemy.exc import OperationalError

from app.crud import app_settings as crud
from app.models.app_settings import DEFAULT_SETTINGS_ID


class TestSettingsStore:
    """Test the cached settings store."""

    def test_row_created_on_first_read(self, db):
        row = crud.get_or_create(db)
        assert row.id == DEFAULT_SETTINGS_ID
        assert crud.get_or_create(db).id == row.id

    def test_update_is_visible_immediately(self, db):
        assert crud.get_value(db, "awards_webhook") is None

        crud.update(db, {"awards_webhook": "  https://n8n.example.com/awards  "})

        assert crud.get_value(db, "awards_webhook") == "https://n8n.example.com/awards"

    def test_reads_are_cached(self, db, mocker):
        crud.get_values(db)
        spy = mocker.spy(crud, "get_or_create")

        crud.get_values(db)
        crud.get_value(db, "jobs_webhook")

        assert spy.call_count == 0

    def test_empty_string_clears(self, db):
        crud.update(db, {"jobs_webhook": "https://n8n.example.com/jobs"})
        crud.update(db, {"jobs_webhook": ""})
        assert crud.get_value(db, "jobs_webhook") is None

    def test_unknown_fields_ignored(self, db):
        row = crud.update(db, {"not_a_setting": "x", "lead_provider": "apify"})
        assert row.lead_provider == "apify"
        assert not hasattr(row, "not_a_setting")

    def test_database_error_falls_back_to_defaults(self, db, mocker):
        mocker.patch.object(crud, "get_or_create", side_effect=OperationalError("SELECT", {}, Exception("down")))

        values = crud.get_values(db)

        assert set(values) == set(crud.SETTINGS_FIELDS)
        assert values["awards_webhook"] is None

    def test_database_error_serves_last_cached_copy(self, db, mocker):
        crud.update(db, {"awards_webhook": "https://hooks.example.com/awards"})
        assert crud.get_value(db, "awards_webhook") == "https://hooks.example.com/awards"
        crud.update(db, {"jobs_webhook": "https://hooks.example.com/jobs"})
        mocker.patch.object(crud, "get_or_create", side_effect=OperationalError("SELECT", {}, Exception("down")))

        assert crud.get_value(db, "awards_webhook") == "https://hooks.example.com/awards"
        assert crud.get_value(db, "jobs_webhook") == "https://hooks.example.com/jobs"


@pytest.mark.integration
class TestSettingsApi:
    """Test GET/PUT /api/settings."""

    def test_get_defaults(self, client):
        resp = client.get("/api/settings")
        assert resp.status_code == 200
        body = resp.json()
        assert body["id"] == DEFAULT_SETTINGS_ID
        assert body["crm_export_webhook"] is None

    def test_put_only_touches_sent_fields(self, client):
        client.put("/api/settings", json={"awards_webhook": "https://a", "jobs_webhook": "https://j"})
        resp = client.put("/api/settings", json={"awards_webhook": None})

        body = resp.json()
        assert body["awards_webhook"] is None
        assert body["jobs_webhook"] == "https://j"

    def test_put_invalidates_cache(self, client, db):
        assert crud.get_value(db, "content_webhook") is None

        client.put("/api/settings", json={"content_webhook": "https://c"})
        db.expire_all()

        assert crud.get_value(db, "content_webhook") == "https://c"
