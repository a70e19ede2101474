"""
Tests for webhook-backed generation: research, outreach, insights and the
sample-content fallback.
"""

import json

import pytest

from app.crud import insights as insights_crud
from app.services import generation


class TestGenerate:
    """Test the shared generate() path."""

    def test_missing_webhook_uses_sample_content(self, db, company, webhook_http):
        result = generation.research_company(db, company, "market")

        assert result.is_demo
        assert "not configured" in result.notice
        assert "Market Challenges" in result.content
        assert company.research_notes == result.content
        webhook_http.assert_not_called()

    def test_get_then_post_failure_gives_notice(self, db, company, configure, webhook_http, make_response):
        configure(market_research_webhook="https://n8n.example.com/market")
        webhook_http.side_effect = [make_response("", status=500), make_response("", status=500)]

        result = generation.research_company(db, company, "market")

        assert webhook_http.call_count == 2
        assert [c.args[0] for c in webhook_http.call_args_list] == ["GET", "POST"]
        assert webhook_http.call_args_list[1].kwargs["json"]["companyName"] == "Acme Landscaping"
        assert result.is_demo
        assert result.notice.startswith("Could not generate")
        assert len(result.attempts) == 2

    def test_falls_back_to_shared_research_webhook(self, db, company, configure, webhook_http, make_response):
        configure(company_research_webhook="https://n8n.example.com/research")
        webhook_http.return_value = make_response({"research": "Live competitive research text"})

        result = generation.research_company(db, company, "competitive")

        assert result.source == "webhook"
        assert result.content == "Live competitive research text"
        assert webhook_http.call_args.args[1] == "https://n8n.example.com/research"
        assert company.research_notes == "Live competitive research text"

    def test_unknown_research_type(self, db, company):
        with pytest.raises(generation.UnknownGenerator):
            generation.research_company(db, company, "astrology")


class TestOutreach:
    """Test outreach script generation."""

    def test_script_stored_on_channel_column(self, db, company, contact, configure, webhook_http, make_response):
        configure(email_script_webhook="https://n8n.example.com/email")
        webhook_http.return_value = make_response("Hi Jane, a short outreach email.", content_type="text/plain")

        result = generation.generate_outreach(db, company, "email", contact=contact, context="met at expo")

        assert company.email_script == "Hi Jane, a short outreach email."
        params = webhook_http.call_args.kwargs["params"]
        assert params["contactName"] == "Jane Doe"
        assert params["additionalContext"] == "met at expo"
        assert not result.is_demo

    def test_sample_script_greets_contact(self, db, company, contact):
        result = generation.generate_outreach(db, company, "text", contact=contact)
        assert result.content.startswith("Hi Jane,")
        assert company.text_script == result.content

    def test_unknown_channel(self, db, company):
        with pytest.raises(generation.UnknownGenerator):
            generation.generate_outreach(db, company, "fax")


class TestInsights:
    """Test insight generators and how they parse answers."""

    def test_awards_from_json(self, db, company, configure, webhook_http, make_response):
        configure(awards_webhook="https://n8n.example.com/awards")
        webhook_http.return_value = make_response({"awards": ["Best of Austin 2023", {"name": "Green Award"}]})

        generation.generate_insight(db, company, "awards")

        row = insights_crud.get_for_company(db, company.id)
        assert row.awards == ["Best of Austin 2023", "Green Award"]

    def test_job_postings_from_text_lines(self, db, company, configure, webhook_http, make_response):
        configure(jobs_webhook="https://n8n.example.com/jobs")
        webhook_http.return_value = make_response("- Crew Lead\n- Office Manager\n", content_type="text/plain")

        generation.generate_insight(db, company, "job_postings")

        row = insights_crud.get_for_company(db, company.id)
        assert [j["title"] for j in row.job_postings] == ["Crew Lead", "Office Manager"]

    def test_content_audit_html_kept_as_content(self, db, company, configure, webhook_http, make_response):
        configure(content_webhook="https://n8n.example.com/content")
        html = "<h2>Content audit</h2><p>Blog is active.</p>"
        webhook_http.return_value = make_response(html, content_type="text/html")

        generation.generate_insight(db, company, "content_audit")

        row = insights_crud.get_for_company(db, company.id)
        assert row.content_audit == {"key_topics": [], "recent_content": [], "content_gaps": [], "content": html}

    def test_facebook_ads_flag(self, db, company, configure, webhook_http, make_response):
        configure(facebook_ads_webhook="https://n8n.example.com/ads")
        webhook_http.return_value = make_response([{"isRunningAds": True, "adDetails": "Two spring campaigns"}])

        generation.generate_insight(db, company, "facebook_ads")

        row = insights_crud.get_for_company(db, company.id)
        assert row.running_facebook_ads is True
        assert row.ad_details == "Two spring campaigns"

    @pytest.mark.parametrize("kind", ["awards", "job_postings", "content_audit", "facebook_ads", "tech_stack"])
    def test_sample_insights_are_stored(self, db, company, kind):
        result = generation.generate_insight(db, company, kind)

        assert result.is_demo
        json.loads(result.content)
        assert insights_crud.get_for_company(db, company.id) is not None

    def test_tech_stack_on_company(self, db, company, configure, webhook_http, make_response):
        configure(tech_stack_webhook="https://n8n.example.com/stack")
        webhook_http.return_value = make_response({"frameworks": ["WordPress"], "analytics": ["GA4"]})

        generation.generate_insight(db, company, "tech_stack")

        assert company.tech_stack_data == {"frameworks": ["WordPress"], "analytics": ["GA4"]}
        assert company.tech_stack_last_updated is not None

    def test_unknown_insight(self, db, company):
        with pytest.raises(generation.UnknownGenerator):
            generation.generate_insight(db, company, "horoscope")


class TestIdealCustomer:
    """Test ideal customer analysis."""

    def test_flag_and_approach_from_json(self, db, company, configure, webhook_http, make_response):
        configure(ideal_customer_webhook="https://n8n.example.com/icp")
        webhook_http.return_value = make_response(
            {"idealClient": True, "suggestedApproach": "Lead with maintenance contracts", "analysis": "Strong fit overall"}
        )

        generation.ideal_customer(db, company)

        row = insights_crud.get_for_company(db, company.id)
        assert row.ideal_client is True
        assert row.suggested_approach == "Lead with maintenance contracts"
        assert row.ideal_customer_analysis == "Strong fit overall"

    def test_text_answer_leaves_flag_unset(self, db, company, configure, webhook_http, make_response):
        configure(ideal_customer_webhook="https://n8n.example.com/icp")
        webhook_http.return_value = make_response("Acme looks like a reasonable fit.", content_type="text/plain")

        generation.ideal_customer(db, company)

        row = insights_crud.get_for_company(db, company.id)
        assert row.ideal_client is None
        assert row.ideal_customer_analysis == "Acme looks like a reasonable fit."


def test_profile_research_stored_on_insights(db, contact, configure, webhook_http, make_response):
    configure(profile_research_webhook="https://n8n.example.com/profile")
    webhook_http.return_value = make_response({"profile_research": "Jane has led marketing for 8 years."})

    result = generation.profile_research(db, contact)

    assert result.content == "Jane has led marketing for 8 years."
    row = insights_crud.get_for_company(db, contact.company_id)
    assert row.profile_research == result.content
    assert webhook_http.call_args.kwargs["params"]["companyName"] == "Acme Landscaping"
