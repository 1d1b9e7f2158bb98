"""Tests for the CP and developer dashboards and the CP profile."""
from __future__ import annotations

from datetime import timedelta

from conftest import ADMIN_HEADERS
from core.models import Lead
from core.utils import utcnow
from domain.dashboard import DashboardService
from domain.leads import LeadService
from domain.projects import ProjectService


def _campaign(**overrides):
    payload = {
        "title": "Campaign",
        "budget": 10000,
        "startDate": "2026-01-01T00:00:00Z",
        "endDate": "2026-02-01T00:00:00Z",
    }
    payload.update(overrides)
    return payload


class TestCpDashboard:
    def test_empty_dashboard(self, cp):
        resp = cp.client.get("/api/cp/dashboard")
        assert resp.status_code == 200
        assert resp.json() == {"todaysLeads": 0, "totalLeads": 0, "activeProjects": 0, "activeAds": 0}

    def test_counts(self, cp, other_cp, project, lead_payload, db_session):
        old = cp.client.post("/api/cp/leads", json=lead_payload(customerName="Old")).json()
        cp.client.post("/api/cp/leads", json=lead_payload(customerName="New"))
        other_cp.client.post("/api/cp/leads", json=lead_payload())
        db_session.get(Lead, old["id"]).created_at = utcnow() - timedelta(days=2)
        db_session.flush()

        cp.client.post("/api/cp-projects", json={"projectId": project["id"]})
        cp.client.post("/api/ads", json=_campaign(status="active"))
        cp.client.post("/api/ads", json=_campaign(status="paused"))

        stats = cp.client.get("/api/cp/dashboard").json()
        assert stats == {"todaysLeads": 1, "totalLeads": 2, "activeProjects": 1, "activeAds": 1}

    def test_active_projects_counts_pending_assignments(self, cp, developer, project):
        pending = cp.client.post("/api/cp-projects", json={"projectId": project["id"]}).json()
        assert cp.client.get("/api/cp/dashboard").json()["activeProjects"] == 1

        developer.client.put(f"/api/cp-projects/{pending['id']}/status", json={"status": "rejected"})
        assert cp.client.get("/api/cp/dashboard").json()["activeProjects"] == 1


class TestDeveloperDashboard:
    def test_counts(self, developer, other_developer, cp, other_cp, project, lead_payload):
        inactive = developer.client.post("/api/projects", json={
            "name": "Old Tower",
            "location": "Parel",
            "city": "Mumbai",
            "projectType": "commercial",
            "status": "completed",
            "isActive": False,
        }).json()

        converted = cp.client.post("/api/cp/leads", json=lead_payload()).json()
        cp.client.put(f"/api/cp/leads/{converted['id']}", json={"status": "converted"})
        cp.client.post("/api/cp/leads", json=lead_payload(customerName="Second"))

        developer.client.post("/api/cp-projects", json={
            "projectId": project["id"], "cpId": cp.id, "status": "approved",
        })
        other_cp.client.post("/api/cp-projects", json={"projectId": inactive["id"]})

        developer.client.post("/api/ads", json=_campaign(status="active"))
        other_developer.client.post("/api/ads", json=_campaign(status="active"))

        stats = developer.client.get("/api/developer/dashboard").json()
        assert stats == {
            "totalProjects": 2,
            "activeProjects": 1,
            "totalLeads": 2,
            "convertedLeads": 1,
            "approvedPartners": 1,
            "pendingPartners": 1,
            "activeAds": 1,
        }

    def test_empty_developer(self, other_developer):
        stats = other_developer.client.get("/api/developer/dashboard").json()
        assert set(stats.values()) == {0}


class TestTodayBoundary:
    def test_lead_before_local_midnight_is_not_today(self, db_session, cp_user, developer_user):
        project = ProjectService(db_session).create_project(developer_user, {
            "name": "Boundary Heights",
            "location": "Kothrud",
            "city": "Pune",
            "project_type": "residential",
            "status": "pre_launch",
        })
        lead = LeadService(db_session).create_lead(cp_user, {
            "project_id": project.id,
            "customer_name": "Late Night",
            "customer_phone": "9876501234",
        })

        now = utcnow()
        lead.created_at = now - timedelta(days=1, minutes=1)
        db_session.flush()

        stats = DashboardService(db_session).cp_stats(cp_user, now=now)
        assert stats["totalLeads"] == 1
        assert stats["todaysLeads"] == 0


class TestProfile:
    def test_falls_back_to_user_row(self, cp):
        resp = cp.client.get("/api/cp/profile")
        assert resp.status_code == 200
        profile = resp.json()
        assert profile["id"] is None
        assert profile["userId"] == cp.id
        assert profile["fullName"] == "Rahul Sharma"
        assert profile["companyName"] == "Sharma Realty"
        assert profile["phone"] == "9876543210"
        assert profile["email"] == "rahul@example.com"

    def test_first_update_creates_profile(self, cp):
        resp = cp.client.put("/api/cp/profile", json={"city": "Thane"})
        assert resp.status_code == 200
        profile = resp.json()
        assert profile["id"] is not None
        assert profile["city"] == "Thane"
        assert profile["fullName"] == "Rahul Sharma"

        again = cp.client.get("/api/cp/profile").json()
        assert again["id"] == profile["id"]
        assert again["city"] == "Thane"

    def test_later_update_changes_only_given_fields(self, cp):
        cp.client.put("/api/cp/profile", json={"city": "Thane"})
        profile = cp.client.put("/api/cp/profile", json={"companyName": "Sharma Estates"}).json()
        assert profile["companyName"] == "Sharma Estates"
        assert profile["city"] == "Thane"

    def test_phone_must_be_ten_digits(self, cp):
        resp = cp.client.put("/api/cp/profile", json={"phone": "12345"})
        assert resp.status_code == 400
        assert "phone" in resp.json()["fields"]

    def test_unknown_field_rejected(self, cp):
        assert cp.client.put("/api/cp/profile", json={"email": "x@y.com"}).status_code == 400

    def test_developer_has_no_cp_profile(self, developer):
        assert developer.client.get("/api/cp/profile").status_code == 403


class TestHealth:
    def test_root_health(self, client):
        assert client.get("/health").json() == {"status": "ok", "service": "betterside"}

    def test_detailed_health(self, client):
        body = client.get("/api/health/detailed").json()
        assert body["status"] == "healthy"
        assert body["checks"]["database"]["connected"] is True
        assert body["checks"]["admin_feed"]["configured"] is True
        assert body["environment"]

    def test_admin_headers_do_not_grant_session(self, client):
        assert client.get("/api/auth/me", headers=ADMIN_HEADERS).status_code == 401
