# backend/app/services/demo.py
"""Placeholder content served when a webhook is missing or every attempt failed."""
from typing import Any, Dict, List

RESEARCH_TITLES = {
    "competitive": "Competitive Analysis",
    "market": "Market Challenges",
    "growth": "Growth Opportunities",
    "tech": "Technology Stack",
}

CHANNEL_TITLES = {
    "call": "Call Script",
    "email": "Email",
    "text": "Text Message",
    "social": "Social DM",
}

SIMILAR_COMPANIES: List[Dict[str, str]] = [
    {
        "name": "Green Gardens Landscaping",
        "industry": "Landscaping",
        "location": "San Francisco, CA",
        "linkedinUrl": "http://www.linkedin.com/company/green-gardens",
    },
    {
        "name": "Pacific Lawn Care",
        "industry": "Landscaping & Gardening",
        "location": "Seattle, WA",
        "linkedinUrl": "http://www.linkedin.com/company/pacific-lawn",
    },
    {
        "name": "Urban Forestry Inc",
        "industry": "Landscaping & Urban Planning",
        "location": "Portland, OR",
        "linkedinUrl": "http://www.linkedin.com/company/urban-forestry",
    },
]

EMPLOYEES: List[Dict[str, str]] = [
    {"name": "John Smith", "title": "Landscape Designer", "linkedinUrl": "http://linkedin.com/in/johnsmith"},
    {"name": "Sarah Johnson", "title": "Operations Manager", "linkedinUrl": "http://linkedin.com/in/sarahjohnson"},
    {"name": "Mike Peters", "title": "Senior Gardener", "linkedinUrl": "http://linkedin.com/in/mikepeters"},
]


def research(kind: str, company: Dict[str, Any]) -> str:
    name = company.get("name") or "This company"
    industry = company.get("industry") or "its industry"
    title = RESEARCH_TITLES.get(kind, kind.title())
    return (
        f"{title} for {name} (sample)\n\n"
        f"- {name} operates in {industry}; verify positioning against the top three local competitors.\n"
        f"- Review recent announcements, hiring and website changes for buying signals.\n"
        f"- Configure the {title.lower()} webhook in Settings to replace this sample with live research."
    )


def outreach(channel: str, company: Dict[str, Any], contact_name: str = "") -> str:
    name = company.get("name") or "your company"
    greeting = f"Hi {contact_name}," if contact_name else "Hi there,"
    if channel == "call":
        return (
            f"Introduction: \"Hello, this is [Your Name] from [Your Company]. I'm calling about {name}.\"\n\n"
            f"Value proposition: \"We help teams like {name} win more business with less manual work.\"\n\n"
            "Ask for meeting: \"Would you have 15 minutes this week for a quick conversation?\""
        )
    if channel == "text":
        return f"{greeting} quick note from [Your Name] at [Your Company]. Could we help {name}? Open to a 10-min chat?"
    if channel == "social":
        return (
            f"{greeting} I came across {name} and liked what you're building. "
            "I work with similar teams on growth; would you be open to connecting?"
        )
    return (
        f"Subject: Helping {name} grow\n\n{greeting}\n\n"
        f"I've been following {name} and think there's a fit with what we do. "
        "Would you be open to a short call this week?\n\nBest regards,\nYour Name"
    )


def profile_research(full_name: str, company_name: str = "") -> str:
    at = f" at {company_name}" if company_name else ""
    return (
        f"Profile research for {full_name}{at} (sample)\n\n"
        "- Background: review their LinkedIn experience and recent posts.\n"
        "- Talking points: company growth, current priorities, shared connections.\n"
        "- Configure the profile research webhook in Settings for live results."
    )


def ideal_customer(company: Dict[str, Any]) -> str:
    name = company.get("name") or "This company"
    return (
        f"{name} (sample analysis): size, industry and location look like a reasonable fit. "
        "Confirm budget and current tooling on a discovery call."
    )


def insight(kind: str, company: Dict[str, Any]) -> Any:
    """Sample payloads in the shape each insight column stores."""
    name = company.get("name") or "The company"
    if kind == "awards":
        return [f"{name} - Regional Business Excellence Award (sample)"]
    if kind == "job_postings":
        return [{"title": "Marketing Manager", "description": "Sample posting", "location": company.get("location") or ""}]
    if kind == "content_audit":
        return {
            "key_topics": ["Customer success", "Product updates"],
            "recent_content": [],
            "content_gaps": ["Case studies", "Pricing guidance"],
        }
    if kind == "facebook_ads":
        return {"running_facebook_ads": False, "ad_details": "No ad activity found (sample)."}
    if kind == "tech_stack":
        return {"technologies": ["Google Analytics", "WordPress"], "source": "sample"}
    return f"{name}: no data (sample)."
