"""Tests for lead creation, status changes, soft delete and CP listing."""
from __future__ import annotations

from datetime import timedelta

import pytest

from core.models import Lead
from core.utils import utcnow


class TestCreateLead:
    def test_short_phone_rejected(self, cp, lead_payload):
        resp = cp.client.post("/api/cp/leads", json=lead_payload(customerPhone="98765"))
        assert resp.status_code == 400
        body = resp.json()
        assert body["code"] == "VALIDATION_ERROR"
        assert "customerPhone" in body["fields"]

    def test_valid_lead_starts_new(self, cp, developer, project, lead_payload):
        resp = cp.client.post("/api/cp/leads", json=lead_payload(customerPhone="9876543210"))
        assert resp.status_code == 201
        lead = resp.json()
        assert lead["status"] == "new"
        assert lead["cpId"] == cp.id
        assert lead["developerId"] == developer.id
        assert lead["projectId"] == project["id"]

    def test_project_required(self, cp, lead_payload):
        payload = lead_payload()
        del payload["projectId"]
        resp = cp.client.post("/api/cp/leads", json=payload)
        assert resp.status_code == 400
        assert "projectId" in resp.json()["fields"]

    def test_unknown_project(self, cp, lead_payload):
        resp = cp.client.post("/api/cp/leads", json=lead_payload(projectId="missing"))
        assert resp.status_code == 404

    def test_mismatched_developer_rejected(self, cp, other_developer, lead_payload):
        resp = cp.client.post("/api/cp/leads", json=lead_payload(developerId=other_developer.id))
        assert resp.status_code == 400
        assert "developerId" in resp.json()["fields"]

    def test_bad_email_rejected(self, cp, lead_payload):
        resp = cp.client.post("/api/cp/leads", json=lead_payload(customerEmail="not-an-email"))
        assert resp.status_code == 400
        assert "customerEmail" in resp.json()["fields"]

    def test_empty_email_becomes_null(self, cp, lead_payload):
        resp = cp.client.post("/api/cp/leads", json=lead_payload(customerEmail=""))
        assert resp.status_code == 201
        assert resp.json()["customerEmail"] is None

    def test_numeric_budget_stored_as_text(self, cp, lead_payload):
        resp = cp.client.post("/api/cp/leads", json=lead_payload(budget=7500000))
        assert resp.json()["budget"] == "7500000"

    def test_developer_cannot_create(self, developer, lead_payload):
        resp = developer.client.post("/api/leads", json=lead_payload())
        assert resp.status_code == 403


class TestLeadStatus:
    @pytest.fixture
    def lead(self, cp, lead_payload):
        return cp.client.post("/api/cp/leads", json=lead_payload()).json()

    def test_any_status_to_any_status(self, cp, lead):
        for status in ("converted", "new", "lost", "contacted", "site_visit", "negotiation"):
            resp = cp.client.put(f"/api/cp/leads/{lead['id']}", json={"status": status})
            assert resp.status_code == 200
            assert resp.json()["status"] == status

    def test_invalid_status(self, cp, lead):
        resp = cp.client.put(f"/api/cp/leads/{lead['id']}", json={"status": "won"})
        assert resp.status_code == 400

    def test_partial_update_keeps_other_fields(self, cp, lead):
        resp = cp.client.put(f"/api/leads/{lead['id']}", json={"notes": "Called twice"})
        assert resp.status_code == 200
        assert resp.json()["notes"] == "Called twice"
        assert resp.json()["customerName"] == "Vikram Mehta"

    def test_null_name_ignored(self, cp, lead):
        resp = cp.client.put(f"/api/cp/leads/{lead['id']}", json={"customerName": None})
        assert resp.status_code == 200
        assert resp.json()["customerName"] == "Vikram Mehta"

    def test_soft_delete_marks_lost(self, cp, lead, db_session):
        resp = cp.client.delete(f"/api/cp/leads/{lead['id']}")
        assert resp.status_code == 204

        stored = db_session.get(Lead, lead["id"])
        assert stored is not None
        assert stored.status == "lost"
        assert cp.client.get(f"/api/cp/leads/{lead['id']}").json()["status"] == "lost"

    def test_lost_lead_can_be_reopened(self, cp, lead):
        cp.client.delete(f"/api/cp/leads/{lead['id']}")
        resp = cp.client.put(f"/api/cp/leads/{lead['id']}", json={"status": "contacted"})
        assert resp.json()["status"] == "contacted"


class TestLeadOwnership:
    @pytest.fixture
    def lead(self, cp, lead_payload):
        return cp.client.post("/api/cp/leads", json=lead_payload()).json()

    def test_other_cp_forbidden(self, other_cp, lead):
        assert other_cp.client.get(f"/api/cp/leads/{lead['id']}").status_code == 403
        assert other_cp.client.get(f"/api/leads/{lead['id']}").status_code == 403
        resp = other_cp.client.put(f"/api/cp/leads/{lead['id']}", json={"status": "lost"})
        assert resp.status_code == 403
        assert other_cp.client.delete(f"/api/cp/leads/{lead['id']}").status_code == 403

    def test_developer_reads_but_cannot_update(self, developer, lead):
        resp = developer.client.get(f"/api/leads/{lead['id']}")
        assert resp.status_code == 200

        resp = developer.client.put(f"/api/leads/{lead['id']}", json={"status": "converted"})
        assert resp.status_code == 403
        assert resp.json()["code"] == "FORBIDDEN"

    def test_other_developer_cannot_read(self, other_developer, lead):
        assert other_developer.client.get(f"/api/leads/{lead['id']}").status_code == 403

    def test_role_scoped_list(self, cp, other_cp, developer, other_developer, lead):
        assert [row["id"] for row in cp.client.get("/api/leads").json()] == [lead["id"]]
        assert [row["id"] for row in developer.client.get("/api/leads").json()] == [lead["id"]]
        assert other_cp.client.get("/api/leads").json() == []
        assert other_developer.client.get("/api/leads").json() == []

    def test_buyer_cannot_list(self, buyer):
        assert buyer.client.get("/api/leads").status_code == 403

    def test_missing_lead(self, cp):
        assert cp.client.get("/api/cp/leads/nope").status_code == 404


class TestCpLeadListing:
    def test_pagination_meta(self, cp, lead_payload):
        for i in range(5):
            cp.client.post("/api/cp/leads", json=lead_payload(customerName=f"Customer {i}"))

        first = cp.client.get("/api/cp/leads", params={"page": 1, "limit": 2}).json()
        last = cp.client.get("/api/cp/leads", params={"page": 3, "limit": 2}).json()

        assert first["meta"] == {"page": 1, "limit": 2, "total": 5}
        assert len(first["data"]) == 2
        assert len(last["data"]) == 1
        assert last["meta"]["total"] == 5

    def test_pages_do_not_overlap(self, cp, lead_payload):
        for i in range(4):
            cp.client.post("/api/cp/leads", json=lead_payload(customerName=f"Customer {i}"))

        seen = []
        for page in (1, 2):
            data = cp.client.get("/api/cp/leads", params={"page": page, "limit": 2}).json()["data"]
            seen.extend(row["id"] for row in data)
        assert len(set(seen)) == 4

    def test_limit_bounds(self, cp):
        assert cp.client.get("/api/cp/leads", params={"limit": 101}).status_code == 400
        assert cp.client.get("/api/cp/leads", params={"page": 0}).status_code == 400

    def test_status_filter(self, cp, lead_payload):
        first = cp.client.post("/api/cp/leads", json=lead_payload()).json()
        cp.client.post("/api/cp/leads", json=lead_payload(customerName="Other"))
        cp.client.put(f"/api/cp/leads/{first['id']}", json={"status": "converted"})

        body = cp.client.get("/api/cp/leads", params={"status": "converted"}).json()
        assert body["meta"]["total"] == 1
        assert body["data"][0]["id"] == first["id"]

    def test_today_filter(self, cp, lead_payload, db_session):
        old = cp.client.post("/api/cp/leads", json=lead_payload(customerName="Old")).json()
        cp.client.post("/api/cp/leads", json=lead_payload(customerName="Fresh"))

        db_session.get(Lead, old["id"]).created_at = utcnow() - timedelta(days=3)
        db_session.flush()

        body = cp.client.get("/api/cp/leads", params={"date": "today"}).json()
        assert [row["customerName"] for row in body["data"]] == ["Fresh"]
        assert body["meta"]["total"] == 1

    def test_other_cps_leads_excluded(self, cp, other_cp, lead_payload):
        other_cp.client.post("/api/cp/leads", json=lead_payload())
        assert cp.client.get("/api/cp/leads").json()["meta"]["total"] == 0
