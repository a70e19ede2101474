"""
Tests for email templates, call scripts and CRM export.
"""

import pytest

from app.crud import contacts as contacts_crud
from app.crud import insights as insights_crud
from app.crud.interactions import list_for_contact
from app.schemas.insights import AwardsInsight, JobPosting, JobPostingsInsight
from app.services import outreach
from app.services.webhooks.errors import WebhookNotConfigured


@pytest.mark.unit
class TestFill:
    """Test placeholder substitution."""

    def test_known_and_unknown_placeholders(self):
        assert outreach.fill("Hi {{firstName}}, {{ company }} {{missing}}", {"firstName": "Jane", "company": "Acme"}) == (
            "Hi Jane, Acme {{missing}}"
        )

    def test_unknown_template(self):
        with pytest.raises(outreach.TemplateNotFound):
            outreach.get_template("99")


class TestTemplates:
    """Test rendering and recording emails."""

    def test_render_uses_contact_and_company(self, db, company, contact):
        rendered = outreach.render_template("2", contact, company, {"specificNeed": "crew scheduling"})

        assert rendered["subject"] == "Following up on Acme Landscaping's crew scheduling"
        assert rendered["body"].startswith("Hi Jane,")
        assert "similar Landscaping company" in rendered["body"]

    def test_send_email_records_note_and_interaction(self, db, contact):
        rendered = outreach.send_email(db, contact, "1")
        db.commit()

        assert contact.notes.startswith("Email sent on ")
        assert f"Subject: {rendered['subject']}" in contact.notes
        assert [i.type for i in list_for_contact(db, contact.id)] == ["EMAIL_SENT"]

    def test_send_email_appends_to_existing_notes(self, db, contact):
        contact.notes = "Met at the trade show."
        outreach.send_email(db, contact, "3", {"jobTitle": "Foreman", "department": "operations"})

        assert contact.notes.startswith("Met at the trade show.\n\nEmail sent on ")
        assert "Regarding your Foreman opening at Acme Landscaping" in contact.notes


class TestCallScript:
    """Test call script generation from stored insights."""

    def test_script_without_insights(self, db, company, contact):
        script = outreach.generate_call_script(db, contact)

        assert script.startswith("Call Script for Jane Doe, Marketing Director at Acme Landscaping")
        assert "Congratulate" not in script
        assert "Call Script Generated on" in contact.notes

    def test_script_uses_insights(self, db, company, contact):
        insights_crud.apply_insight(db, company.id, AwardsInsight(awards=["Best of Austin 2023"]))
        insights_crud.apply_insight(
            db, company.id, JobPostingsInsight(job_postings=[JobPosting(title="Marketing Coordinator")])
        )
        insights_crud.set_fields(db, company.id, {"suggested_approach": "Lead with seasonal promotions."})

        script = outreach.generate_call_script(db, contact)

        assert "recently received Best of Austin 2023" in script
        assert "hiring for Marketing Coordinator" in script
        assert "expanding your marketing" in script
        assert 'Value proposition: "Lead with seasonal promotions."' in script


class TestCrmExport:
    """Test building and posting CRM exports."""

    def test_default_is_first_contact(self, db, company, contact):
        exports = outreach.build_exports(db, [company.id])
        assert exports == [{"company_id": company.id, "company_name": "Acme Landscaping", "contact_ids": [contact.id]}]

    def test_explicit_contacts(self, db, company, contact):
        other = contacts_crud.create(db, {"first_name": "Ray", "company_id": company.id})
        exports = outreach.build_exports(db, [company.id], {company.id: [other.id]})
        assert exports[0]["contact_ids"] == [other.id]

    def test_unknown_company(self, db):
        with pytest.raises(LookupError):
            outreach.build_exports(db, ["missing"])

    def test_posts_exports(self, db, company, contact, configure, webhook_http, make_response):
        configure(crm_export_webhook="https://n8n.example.com/crm")
        webhook_http.return_value = make_response({"status": "queued"})

        out = outreach.export_to_crm(db, [company.id], user_email="rep@example.com")

        assert out["response"] == {"status": "queued"}
        sent = webhook_http.call_args.kwargs["json"]
        assert sent["user_email"] == "rep@example.com"
        assert sent["exports"][0]["company_id"] == company.id

    def test_not_configured(self, db, company):
        with pytest.raises(WebhookNotConfigured):
            outreach.export_to_crm(db, [company.id])
