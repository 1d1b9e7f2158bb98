"""Tests for the HTTP client used by the dashboard."""
from __future__ import annotations

import httpx
import pytest

from client import ApiError, BetterSideClient, validate_lead_form

from conftest import ADMIN_TOKEN, cp_payload, developer_payload


@pytest.fixture
def api(client_factory):
    def _make(admin_token=None) -> BetterSideClient:
        return BetterSideClient(http=client_factory(), admin_token=admin_token)

    return _make


class TestLeadForm:
    def test_valid_form(self):
        assert validate_lead_form({
            "projectId": "p1",
            "customerName": "Vikram",
            "customerPhone": "9876543210",
        }) == {}

    def test_invalid_form(self):
        errors = validate_lead_form({"customerName": "  ", "customerPhone": "98765", "customerEmail": "bad"})
        assert set(errors) == {"projectId", "customerName", "customerPhone", "customerEmail"}


class TestApiError:
    def test_from_error_body(self):
        response = httpx.Response(
            400, json={"error": "Validation failed", "code": "VALIDATION_ERROR", "fields": {"a": "b"}}
        )
        err = ApiError.from_response(response)
        assert (err.status_code, err.code, err.fields) == (400, "VALIDATION_ERROR", {"a": "b"})

    def test_from_non_json_body(self):
        err = ApiError.from_response(httpx.Response(502, text="Bad gateway"))
        assert err.code == "SERVER_ERROR"
        assert err.status_code == 502


class TestClientFlows:
    def test_health(self, api):
        assert api().health() is True

    def test_cp_lead_flow(self, api):
        dev = api()
        dev.register(developer_payload())
        project = dev.create_project({
            "name": "Lodha Park Side",
            "location": "Worli",
            "city": "Mumbai",
            "projectType": "residential",
            "status": "under_construction",
        })

        cp = api()
        user = cp.register(cp_payload())
        assert cp.me()["id"] == user["id"]

        lead = cp.create_lead({
            "projectId": project["id"],
            "customerName": "Vikram Mehta",
            "customerPhone": "9112233445",
        })
        assert lead["status"] == "new"

        page = cp.list_cp_leads(limit=10)
        assert page["meta"]["total"] == 1

        cp.delete_lead(lead["id"])
        assert cp.list_cp_leads(status="lost")["meta"]["total"] == 1

        cp.logout()
        with pytest.raises(ApiError) as exc_info:
            cp.me()
        assert exc_info.value.status_code == 401

    def test_validation_error_surfaces_fields(self, api):
        cp = api()
        cp.register(cp_payload())
        with pytest.raises(ApiError) as exc_info:
            cp.create_lead({"projectId": "x", "customerName": "A", "customerPhone": "98765"})
        assert exc_info.value.code == "VALIDATION_ERROR"
        assert "customerPhone" in exc_info.value.fields

    def test_operator_calls_use_bearer_token(self, api):
        cp = api()
        user = cp.register(cp_payload())

        with pytest.raises(ApiError) as exc_info:
            api().increment_marketing(user["id"], creatives=1)
        assert exc_info.value.status_code == 403

        counter = api(admin_token=ADMIN_TOKEN).increment_marketing(user["id"], creatives=4, edms=1)
        assert counter["creativesShared"] == 4
        assert cp.marketing_summary()["creatives_shared"] == 4

    def test_assignment_and_partner_flow(self, api):
        dev = api()
        dev.register(developer_payload())
        project = dev.create_project({
            "name": "Godrej Horizon",
            "location": "Undri",
            "city": "Pune",
            "projectType": "residential",
            "status": "pre_launch",
        })

        cp = api()
        cp.register(cp_payload())
        pending = cp.request_project(project["id"])
        assert pending["status"] == "pending"

        approved = dev.set_assignment_status(pending["id"], "approved")
        assert approved["status"] == "approved"
        assert [p["status"] for p in dev.developer_partners(status="approved")] == ["approved"]
        assert cp.cp_projects()[0]["project"]["name"] == "Godrej Horizon"
        assert dev.developer_dashboard()["approvedPartners"] == 1
        assert dev.developer_marketing()["perProject"][0]["projectName"] == "Godrej Horizon"

        ad = cp.request_ads(project["id"], "site_visits", budget_inr=20000, duration_days=14)
        assert [row["id"] for row in cp.list_ad_requests()] == [ad["id"]]
        assert cp.cancel_ad_request(ad["id"])["status"] == "cancelled"
