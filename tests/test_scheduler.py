"""
Tests for delayed contact enrichment.
"""

from unittest.mock import Mock

import pytest
from fastapi.testclient import TestClient

from app import scheduler
from app.core.config import settings
from app.main import app


class TestScheduleContactEnrichment:
    """Test queueing enrichment jobs."""

    def test_disabled_by_setting(self, monkeypatch):
        monkeypatch.setattr(settings, "ENRICH_ON_SAVE", False)
        assert scheduler.schedule_contact_enrichment("c1") is False

    def test_scheduler_not_running(self, monkeypatch):
        monkeypatch.setattr(settings, "ENRICH_ON_SAVE", True)
        assert not scheduler.scheduler.running
        assert scheduler.schedule_contact_enrichment("c1") is False

    def test_job_added_with_delay(self, monkeypatch):
        fake = Mock(running=True)
        monkeypatch.setattr(settings, "ENRICH_ON_SAVE", True)
        monkeypatch.setattr(scheduler, "scheduler", fake)

        assert scheduler.schedule_contact_enrichment("c1", delay=5) is True

        args, kwargs = fake.add_job.call_args
        assert args[1] == "date"
        assert kwargs["args"] == ["c1"]
        assert kwargs["id"] == "enrich-c1"


class TestEnrichContactJob:
    """Test the job body."""

    def test_missing_contact(self):
        assert scheduler._enrich_contact_job("missing") == {"contact_id": "missing", "updated": 0}

    def test_failure_is_reported_not_raised(self, contact):
        out = scheduler._enrich_contact_job(contact.id)
        assert out["updated"] == 0
        assert "not configured" in out["error"]

    def test_success(self, contact, configure, webhook_http, make_response):
        configure(linkedin_enrichment_webhook="https://n8n.example.com/linkedin")
        webhook_http.return_value = make_response({"headline": "CMO", "about": "Brand builder at Acme."})

        out = scheduler._enrich_contact_job(contact.id)

        assert out["contact_id"] == contact.id
        assert out["updated"] >= 3


@pytest.mark.integration
class TestAppLifespan:
    """Test scheduler start/stop with the app."""

    def test_scheduler_runs_while_app_is_up(self):
        with TestClient(app) as client:
            assert scheduler.scheduler.running
            assert client.get("/health").json()["ok"] is True
        assert not scheduler.scheduler.running

    def test_start_is_idempotent(self, monkeypatch):
        fake = Mock(running=True)
        monkeypatch.setattr(scheduler, "scheduler", fake)

        scheduler.start_scheduler()

        fake.start.assert_not_called()
