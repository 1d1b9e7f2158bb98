"""Demo data for local development.

Everything goes through the domain services so seeded rows obey the same
validation and ownership rules as API writes.
"""
from __future__ import annotations

from datetime import timedelta
from typing import Dict

from sqlalchemy import delete
from sqlalchemy.orm import Session

from core.db import Base
from core.logging_config import get_logger
from core.models import AssignmentStatus
from core.utils import utcnow
from domain.ads import AdService
from domain.assignments import AssignmentService
from domain.auth import AuthService
from domain.leads import LeadService
from domain.marketing import MarketingService
from domain.profiles import ProfileService
from domain.projects import ProjectService

LOGGER = get_logger(__name__)

DEMO_PASSWORD = "password123"

CP_USERS = [
    {
        "email": "rahul.sharma@example.com",
        "full_name": "Rahul Sharma",
        "company_name": "Sharma Realty",
        "phone": "9876543210",
        "city": "Mumbai",
    },
    {
        "email": "priya.patel@example.com",
        "full_name": "Priya Patel",
        "company_name": "Patel Properties",
        "phone": "9123456789",
        "city": "Pune",
    },
]

DEVELOPER_USERS = [
    {
        "email": "developer@lodhagroup.com",
        "company_name": "Lodha Group",
        "contact_person": "Abhishek Lodha",
        "phone": "9999888877",
        "city": "Mumbai",
        "gst_number": "27AABCL1234F1Z5",
        "rera_number": "P51700012345",
    },
    {
        "email": "developer@godrej.com",
        "company_name": "Godrej Properties",
        "contact_person": "Pirojsha Godrej",
        "phone": "9988776655",
        "city": "Pune",
        "gst_number": "27AABCG5678H1Z3",
        "rera_number": "P52900067890",
    },
]


def reset_all(session: Session) -> None:
    """Delete every row, children first."""
    for table in reversed(Base.metadata.sorted_tables):
        session.execute(delete(table))
    session.flush()
    LOGGER.warning("All tables emptied")


def seed_demo_data(session: Session) -> Dict[str, int]:
    """
    Create the demo CPs, developers, projects, leads, ads and counters.

    Skips everything when the first demo account already exists.
    """
    auth = AuthService(session)
    if auth.get_user_by_email(CP_USERS[0]["email"]) is not None:
        LOGGER.info("Demo data already present - skipping")
        return {"users": 0, "projects": 0, "leads": 0, "ads": 0}

    cps = [
        auth.register({**data, "role": "cp", "password": DEMO_PASSWORD})
        for data in CP_USERS
    ]
    developers = [
        auth.register({
            **data,
            "role": "developer",
            "password": DEMO_PASSWORD,
            "is_rera_registered": True,
        })
        for data in DEVELOPER_USERS
    ]
    for developer in developers:
        developer.full_name = developer.company_name
    cp1, cp2 = cps
    lodha, godrej = developers

    projects = ProjectService(session)
    park_side = projects.create_project(lodha, {
        "name": "Lodha Park Side",
        "description": "Luxurious 2 & 3 BHK apartments in Worli with sea-facing views.",
        "city": "Mumbai",
        "location": "Worli",
        "price_min": 35000000,
        "price_max": 70000000,
        "project_type": "residential",
        "status": "under_construction",
        "is_active": True,
    })
    horizon = projects.create_project(godrej, {
        "name": "Godrej Horizon",
        "description": "Premium residences in Undri with world-class amenities.",
        "city": "Pune",
        "location": "Undri",
        "price_min": 8500000,
        "price_max": 15000000,
        "project_type": "residential",
        "status": "under_construction",
        "is_active": True,
    })

    assignments = AssignmentService(session)
    approved = AssignmentStatus.APPROVED.value
    assignments.assign(lodha, park_side.id, cp_id=cp1.id, status=approved)
    assignments.assign(godrej, horizon.id, cp_id=cp1.id, status=approved)
    assignments.assign(godrej, horizon.id, cp_id=cp2.id, status=approved)

    leads = LeadService(session)
    lead_rows = [
        (cp1, park_side, "Vikram Mehta", "9112233445", "vikram@email.com", "Mumbai", "4 Cr", "meta_ads", "new", "Interested in sea-facing unit"),
        (cp1, park_side, "Ananya Singh", "9223344556", None, "Mumbai", "5 Cr", "referral", "contacted", "Follow up scheduled for next week"),
        (cp1, horizon, "Rajesh Kumar", "9334455667", "rajesh.k@email.com", "Pune", "1.2 Cr", "betterside", "site_visit", "Site visit completed, very positive"),
        (cp2, horizon, "Sneha Desai", "9445566778", "sneha.d@email.com", "Pune", "1 Cr", "organic", "new", None),
        (cp2, horizon, "Amit Joshi", "9556677889", None, "Pune", "90 L", "meta_ads", "negotiation", "Negotiating on payment plan"),
        (cp2, horizon, "Pooja Sharma", "9667788990", "pooja.s@email.com", "Mumbai", "1.3 Cr", "referral", "converted", "Booking done!"),
    ]
    for cp, project, name, phone, email, city, budget, source, status, notes in lead_rows:
        leads.create_lead(cp, {
            "project_id": project.id,
            "customer_name": name,
            "customer_phone": phone,
            "customer_email": email,
            "customer_city": city,
            "budget": budget,
            "source": source,
            "status": status,
            "notes": notes,
        })

    ads = AdService(session)
    now = utcnow()
    ad_rows = [
        (cp1, park_side, "Lead Generation Campaign", "Target HNIs in Mumbai", 50000, "active", "facebook", now, now + timedelta(days=30)),
        (cp1, horizon, "Awareness Campaign", "Brand awareness in Pune", 25000, "pending", "instagram", now, now + timedelta(days=14)),
        (cp2, horizon, "Site Visit Campaign", "Drive site visits for Godrej Horizon", 75000, "active", "all", now, now + timedelta(days=45)),
        (cp2, horizon, "Lead Gen - Phase 2", "Second phase lead generation", 35000, "completed", "google", now - timedelta(days=30), now),
    ]
    for cp, project, title, description, budget, status, platform, start, end in ad_rows:
        ads.create_ad(cp, {
            "project_id": project.id,
            "title": title,
            "description": description,
            "budget": budget,
            "status": status,
            "platform": platform,
            "start_date": start,
            "end_date": end,
        })

    profiles = ProfileService(session)
    for cp in cps:
        profiles.update_profile(cp, {})

    marketing = MarketingService(session)
    marketing.increment(cp1.id, park_side.id, creatives=15, edms=8)
    marketing.increment(cp1.id, horizon.id, creatives=10, edms=5)
    marketing.increment(cp2.id, horizon.id, creatives=12, edms=6)

    session.flush()
    LOGGER.info("Demo data seeded")
    return {
        "users": len(cps) + len(developers),
        "projects": 2,
        "leads": len(lead_rows),
        "ads": len(ad_rows),
    }


def demo_accounts() -> Dict[str, str]:
    """Login emails of the seeded accounts, keyed by label."""
    return {
        "CP 1": CP_USERS[0]["email"],
        "CP 2": CP_USERS[1]["email"],
        "Developer 1": DEVELOPER_USERS[0]["email"],
        "Developer 2": DEVELOPER_USERS[1]["email"],
    }


__all__ = ["DEMO_PASSWORD", "demo_accounts", "reset_all", "seed_demo_data"]
