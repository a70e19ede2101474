"""
Tests for LinkedIn profile payload extraction.
"""

import pytest

from app.services.linkedin import (
    extract_profile_updates,
    format_education,
    format_experience,
    unwrap_profile,
)


@pytest.mark.unit
class TestExtractProfileUpdates:
    """Test profile -> contact column mapping."""

    def test_array_wrapped_profile(self):
        data = [{
            "headline": "Marketing Director at Acme",
            "jobTitle": "Marketing Director",
            "about": "Growing brands for ten years.",
            "location": "Austin, Texas, United States",
            "mobileNumber": "+1 512 555 0101",
            "skills": [{"title": "SEO"}, "Branding"],
            "languages": [{"name": "English"}, "Spanish"],
        }]

        updates = extract_profile_updates(data)

        assert updates["headline"] == "Marketing Director at Acme"
        assert updates["position"] == "Marketing Director"
        assert updates["about"] == "Growing brands for ten years."
        assert updates["linkedin_bio"] == "Growing brands for ten years."
        assert updates["city"] == "Austin"
        assert updates["country"] == "United States"
        assert updates["mobile_phone"] == "+1 512 555 0101"
        assert updates["linkedin_skills"] == ["SEO", "Branding"]
        assert updates["languages"] == ["English", "Spanish"]

    def test_nested_profile_key(self):
        updates = extract_profile_updates({"profile": {"headline": "Owner"}, "city": "Dallas"})
        assert updates["headline"] == "Owner"
        assert updates["city"] == "Dallas"

    def test_skills_from_endorsement_string(self):
        updates = extract_profile_updates({"topSkillsByEndorsements": "SEO, PPC ,  "})
        assert updates["linkedin_skills"] == ["SEO", "PPC"]

    def test_single_post(self):
        updates = extract_profile_updates({
            "profile_post_text": "We just opened a new office!",
            "profile_stats": {"total_reactions": 12, "comments": 3},
        })
        post = updates["linkedin_posts"][0]
        assert post["content"] == "We just opened a new office!"
        assert post["likes"] == 12
        assert post["comments"] == 3

    @pytest.mark.parametrize("data", [None, [], {}, "text", [{}]])
    def test_nothing_usable(self, data):
        assert extract_profile_updates(data) == {}


@pytest.mark.unit
class TestFormatting:
    """Test education and experience formatting."""

    def test_education(self):
        lines = format_education([
            {"school_name": "UT Austin", "degree": "BBA", "field_of_study": "Marketing", "start_date": "2008", "end_date": "2012"},
            {"title": "Austin CC", "caption": "2006 - 2008"},
            "Self taught",
        ])
        assert lines == ["BBA Marketing at UT Austin (2008-2012)", "Austin CC (2006 - 2008)", "Self taught"]

    def test_experience(self):
        lines = format_experience([
            {"title": "Director", "company": "Acme", "start_date": "2020"},
            {"title": "Bolt Ltd", "subComponents": [{"title": "Manager", "caption": "2015 - 2019"}, {"title": ""}]},
            {"caption": "nothing else"},
        ])
        assert lines == ["Director at Acme (2020 - Present)", "Manager at Bolt Ltd (2015 - 2019)"]

    def test_unwrap_profile(self):
        assert unwrap_profile([]) is None
        assert unwrap_profile("x") is None
        assert unwrap_profile([{"headline": "h"}]) == {"headline": "h"}


@pytest.mark.unit
class TestMalformedNestedValues:
    """Nested fields of the wrong type are skipped, never fatal."""

    def test_string_posted_at_and_stats(self):
        updates = extract_profile_updates({
            "headline": "CEO",
            "profile_post_text": "Hello world post",
            "profile_posted_at": "2024-05-01",
            "profile_stats": "12 reactions",
        })
        post = updates["linkedin_posts"][0]
        assert post["content"] == "Hello world post"
        assert post["likes"] == 0
        assert post["comments"] == 0
        assert post["timestamp"]

    def test_string_current_job(self):
        updates = extract_profile_updates({"headline": "CEO", "current_job": "Acme"})
        assert updates["headline"] == "CEO"
        assert "job_start_date" not in updates

    @pytest.mark.parametrize("value", [None, "", "2019", ["2019"], 7])
    def test_current_job_without_dict(self, value):
        assert "job_start_date" not in extract_profile_updates({"headline": "CEO", "current_job": value})

    def test_string_time_period(self):
        lines = format_education([{"school_name": "UT Austin", "timePeriod": "2008 - 2012"}])
        assert lines == ["UT Austin"]

    def test_post_list_with_bad_nested_values(self):
        updates = extract_profile_updates({
            "headline": "CEO",
            "posts": [{"text": "Launch day", "profile_stats": ["x"], "profile_posted_at": None}, "junk"],
        })
        assert len(updates["linkedin_posts"]) == 1
        assert updates["linkedin_posts"][0]["content"] == "Launch day"
        assert updates["linkedin_posts"][0]["likes"] == 0
