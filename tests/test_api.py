"""
API tests: routes, status codes and request/response shapes.
"""

from unittest.mock import patch

import pytest

from app.services.leads.apify import ApifyError


def _create_company(client, **extra):
    body = {"name": "Acme Landscaping", "website": "https://acme.com", "industry": "Landscaping", **extra}
    resp = client.post("/api/companies", json=body)
    assert resp.status_code == 201, resp.text
    return resp.json()["company"]


def _create_contact(client, company_id, **extra):
    body = {"firstName": "Jane", "lastName": "Doe", "companyId": company_id, "title": "Owner", **extra}
    resp = client.post("/api/contacts", json=body)
    assert resp.status_code == 201, resp.text
    return resp.json()["contact"]


@pytest.mark.integration
class TestHealth:
    def test_health(self, client):
        resp = client.get("/health")
        assert resp.status_code == 200
        assert resp.json()["ok"] is True


@pytest.mark.integration
class TestCompaniesApi:
    """Test company routes."""

    def test_create_and_get(self, client):
        company = _create_company(client, linkedinUrl="https://linkedin.com/company/acme")

        assert company["primary_domain"] == "acme.com"
        assert company["linkedin_url"] == "https://linkedin.com/company/acme"
        resp = client.get(f"/api/companies/{company['id']}")
        assert resp.json()["name"] == "Acme Landscaping"

    def test_duplicate_company(self, client):
        _create_company(client)
        resp = client.post("/api/companies", json={"name": "Other", "website": "www.acme.com/about"})
        assert resp.status_code == 409

    def test_blank_name(self, client):
        assert client.post("/api/companies", json={"name": "  "}).status_code == 400

    def test_list_and_facets(self, client):
        _create_company(client)
        _create_company(client, name="Bolt Ltd", website="bolt.io", industry="Energy")

        listed = client.get("/api/companies/list", params={"search": "bolt"}).json()
        assert listed["total"] == 1
        assert listed["items"][0]["name"] == "Bolt Ltd"
        assert client.get("/api/companies/facets").json()["industries"] == ["Energy", "Landscaping"]

    def test_patch(self, client):
        company = _create_company(client)
        resp = client.patch(f"/api/companies/{company['id']}", json={"description": "Lawns"})
        assert resp.json()["description"] == "Lawns"

    def test_missing_company(self, client):
        assert client.get("/api/companies/nope").status_code == 404
        assert client.post("/api/companies/nope/research/market").status_code == 404

    def test_research_falls_back_to_sample(self, client):
        company = _create_company(client)

        resp = client.post(f"/api/companies/{company['id']}/research/growth")

        body = resp.json()
        assert resp.status_code == 200
        assert body["source"] == "demo"
        assert "not configured" in body["notice"]
        stored = client.get(f"/api/companies/{company['id']}").json()
        assert stored["research_notes"] == body["content"]

    def test_unknown_research_type(self, client):
        company = _create_company(client)
        assert client.post(f"/api/companies/{company['id']}/research/astrology").status_code == 422

    def test_outreach_for_contact_of_other_company(self, client):
        company = _create_company(client)
        other = _create_company(client, name="Bolt Ltd", website="bolt.io")
        contact = _create_contact(client, other["id"])

        resp = client.post(f"/api/companies/{company['id']}/outreach/email", json={"contactId": contact["id"]})
        assert resp.status_code == 404

    def test_outreach_without_body(self, client):
        company = _create_company(client)
        resp = client.post(f"/api/companies/{company['id']}/outreach/call")
        assert resp.status_code == 200
        assert resp.json()["source"] == "demo"

    def test_enrich_requires_linkedin(self, client):
        company = _create_company(client)
        assert client.post(f"/api/companies/{company['id']}/enrich").status_code == 422

    def test_enrich_with_sample_data(self, client):
        company = _create_company(client, linkedinUrl="https://linkedin.com/company/acme")

        resp = client.post(f"/api/companies/{company['id']}/enrich")

        body = resp.json()
        assert body["source"] == "demo"
        assert body["contacts_created"] == 3
        contacts = client.get(f"/api/companies/{company['id']}/contacts").json()
        assert len(contacts) == 3


@pytest.mark.integration
class TestInsightsApi:
    """Test the tagged insight update."""

    def test_put_each_variant(self, client):
        company = _create_company(client)
        url = f"/api/companies/{company['id']}/insights"

        client.put(url, json={"insight": {"kind": "awards", "awards": ["Best of Austin"]}})
        client.put(url, json={"insight": {"kind": "job_postings", "job_postings": [{"title": "Foreman"}]}})
        client.put(url, json={"insight": {"kind": "ideal_client", "ideal_client": True, "suggested_approach": "Call"}})
        resp = client.put(url, json={"insight": {"kind": "facebook_ads", "running_facebook_ads": False}})

        body = resp.json()
        assert body["awards"] == ["Best of Austin"]
        assert body["job_postings"][0]["title"] == "Foreman"
        assert body["ideal_client"] is True
        assert body["suggested_approach"] == "Call"
        assert body["running_facebook_ads"] is False
        assert body["ad_details"] == ""

    def test_unknown_kind_rejected(self, client):
        company = _create_company(client)
        resp = client.put(
            f"/api/companies/{company['id']}/insights", json={"insight": {"kind": "weather", "sunny": True}}
        )
        assert resp.status_code == 422

    def test_variant_fields_validated(self, client):
        company = _create_company(client)
        resp = client.put(
            f"/api/companies/{company['id']}/insights", json={"insight": {"kind": "ideal_client"}}
        )
        assert resp.status_code == 422

    def test_empty_insights(self, client):
        company = _create_company(client)
        body = client.get(f"/api/companies/{company['id']}/insights").json()
        assert body["company_id"] == company["id"]
        assert body["awards"] is None

    def test_generate(self, client):
        company = _create_company(client)

        resp = client.post(f"/api/companies/{company['id']}/insights/content_audit/generate")

        assert resp.status_code == 200
        insights = client.get(f"/api/companies/{company['id']}/insights").json()
        assert insights["content_audit"]["key_topics"]

    def test_generate_unknown(self, client):
        company = _create_company(client)
        assert client.post(f"/api/companies/{company['id']}/insights/nope/generate").status_code == 422


@pytest.mark.integration
class TestContactsApi:
    """Test contact routes."""

    def test_create_requires_existing_company(self, client):
        resp = client.post("/api/contacts", json={"firstName": "Jane", "companyId": "missing"})
        assert resp.status_code == 422

    def test_create_and_list(self, client):
        company = _create_company(client)
        contact = _create_contact(client, company["id"], email="Jane@Acme.com")

        assert contact["position"] == "Owner"
        assert contact["email"] == "jane@acme.com"
        listed = client.get("/api/contacts/list", params={"companyId": company["id"]}).json()
        assert listed["total"] == 1
        assert client.get("/api/contacts/facets").json() == {"titles": ["Owner"], "total_contacts": 1}

    def test_duplicate_email(self, client):
        company = _create_company(client)
        _create_contact(client, company["id"], email="jane@acme.com")
        resp = client.post(
            "/api/contacts", json={"firstName": "J", "companyId": company["id"], "email": "JANE@acme.com"}
        )
        assert resp.status_code == 409

    def test_patch_and_interactions(self, client):
        company = _create_company(client)
        contact = _create_contact(client, company["id"])

        resp = client.patch(f"/api/contacts/{contact['id']}", json={"title": "CEO", "phone": "tel: +1 (512) 555"})
        assert resp.json()["position"] == "CEO"
        assert resp.json()["phone"] == "+1 (512) 555"

        types = [i["type"] for i in client.get(f"/api/contacts/{contact['id']}/interactions").json()]
        assert sorted(types) == ["CREATED", "UPDATED"]

    def test_patch_empty_first_name(self, client):
        company = _create_company(client)
        contact = _create_contact(client, company["id"])
        assert client.patch(f"/api/contacts/{contact['id']}", json={"firstName": " "}).status_code == 400

    def test_soft_delete(self, client):
        company = _create_company(client)
        contact = _create_contact(client, company["id"])

        assert client.delete(f"/api/contacts/{contact['id']}").json()["soft_deleted"] is True
        assert client.get(f"/api/contacts/{contact['id']}").status_code == 404
        assert client.get("/api/contacts/list").json()["total"] == 0

    def test_find_email_not_configured(self, client):
        company = _create_company(client)
        contact = _create_contact(client, company["id"])
        assert client.post(f"/api/contacts/{contact['id']}/find-email").status_code == 400

    def test_profile_research_sample(self, client):
        company = _create_company(client)
        contact = _create_contact(client, company["id"])

        body = client.post(f"/api/contacts/{contact['id']}/profile-research").json()

        assert body["source"] == "demo"
        assert "Jane Doe" in body["content"]


@pytest.mark.integration
class TestListsApi:
    """Test saved lists."""

    def test_list_lifecycle(self, client):
        company = _create_company(client)
        lst = client.post("/api/lists", json={"name": "Austin"}).json()

        added = client.post(f"/api/lists/{lst['id']}/companies", json={"company_id": company["id"]}).json()
        again = client.post(f"/api/lists/{lst['id']}/companies", json={"company_id": company["id"]}).json()
        assert added["added"] is True
        assert again["added"] is False

        assert client.get("/api/lists").json()[0]["company_count"] == 1
        items = client.get(f"/api/lists/{lst['id']}/companies").json()["items"]
        assert [c["id"] for c in items] == [company["id"]]

        assert client.delete(f"/api/lists/{lst['id']}/companies/{company['id']}").status_code == 200
        assert client.delete(f"/api/lists/{lst['id']}/companies/{company['id']}").status_code == 404

    def test_missing_list(self, client):
        assert client.get("/api/lists/nope/companies").status_code == 404


@pytest.mark.integration
class TestLeadsApi:
    """Test lead search, transform and save routes."""

    def test_transform(self, client):
        resp = client.post(
            "/api/leads/transform",
            json={"records": {"people": [{"first_name": "Jane", "last_name": "Doe", "organization_name": "Acme"}]}},
        )
        result = resp.json()[0]
        assert result["name"] == "Jane Doe"
        assert result["company"] == "Acme"
        assert result["id"]

    def test_save(self, client):
        leads = client.post(
            "/api/leads/transform",
            json={"records": [
                {"first_name": "Jane", "last_name": "Doe", "organization_name": "Acme"},
                {"first_name": "Nobody"},
            ]},
        ).json()

        body = client.post("/api/leads/save", json={"leads": leads}).json()

        assert body["saved"] == 1
        assert body["contacts_created"] == 1
        assert len(body["failed"]) == 1
        assert body["enrichment_scheduled"] == 0

    def test_save_nothing(self, client):
        assert client.post("/api/leads/save", json={"leads": []}).status_code == 400

    def test_save_to_missing_list(self, client):
        leads = client.post("/api/leads/transform", json={"records": [{"company_name": "Bolt"}]}).json()
        resp = client.post("/api/leads/save", json={"leads": leads, "listId": "missing"})
        assert resp.status_code == 404

    def test_search_without_key(self, client):
        resp = client.post("/api/leads/search", json={"personTitles": ["Owner"]})
        assert resp.status_code == 400

    def test_search_upstream_failure(self, client):
        with patch("app.api.routes.leads.run_lead_search", side_effect=ApifyError("Apify run failed", status="FAILED")):
            resp = client.post("/api/leads/search", json={})
        assert resp.status_code == 502

    def test_search_history(self, client):
        client.post("/api/leads/search", json={"personTitles": ["Owner"]})
        assert client.get("/api/leads/history").json() == []


@pytest.mark.integration
class TestOutreachApi:
    """Test outreach routes."""

    def test_templates(self, client):
        names = [t["name"] for t in client.get("/api/outreach/templates").json()]
        assert names == ["Initial Outreach", "Follow-up Email", "Job Posting Response"]

    def test_render_and_send(self, client):
        company = _create_company(client)
        contact = _create_contact(client, company["id"])
        payload = {"contactId": contact["id"], "templateId": "3", "variables": {"jobTitle": "Foreman"}}

        rendered = client.post("/api/outreach/render", json=payload).json()
        assert rendered["subject"] == "Regarding your Foreman opening at Acme Landscaping"

        client.post("/api/outreach/send-email", json=payload)
        stored = client.get(f"/api/contacts/{contact['id']}").json()
        assert "Email sent on" in stored["notes"]

    def test_unknown_template(self, client):
        company = _create_company(client)
        contact = _create_contact(client, company["id"])
        resp = client.post("/api/outreach/render", json={"contactId": contact["id"], "templateId": "42"})
        assert resp.status_code == 404

    def test_call_script(self, client):
        company = _create_company(client)
        contact = _create_contact(client, company["id"])
        body = client.post(f"/api/outreach/call-script/{contact['id']}").json()
        assert body["script"].startswith("Call Script for Jane Doe, Owner at Acme Landscaping")

    def test_crm_export_validation(self, client):
        assert client.post("/api/outreach/crm-export", json={"companyIds": []}).status_code == 422

    def test_crm_export_not_configured(self, client):
        company = _create_company(client)
        resp = client.post("/api/outreach/crm-export", json={"companyIds": [company["id"]]})
        assert resp.status_code == 400
