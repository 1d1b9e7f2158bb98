"""Typed HTTP client for the BetterSide API.

Used by the Streamlit panels and by scripts. The underlying ``httpx.Client``
keeps the session cookie between calls. Any non-2xx response raises
``ApiError`` carrying the server's ``code`` and per-field messages.
"""
from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional

import httpx

from core import validators as v


class ApiError(Exception):
    """Error body returned by the API."""

    def __init__(
        self,
        status_code: int,
        code: str,
        message: str,
        fields: Optional[Dict[str, str]] = None,
    ) -> None:
        super().__init__(f"{status_code} {code}: {message}")
        self.status_code = status_code
        self.code = code
        self.message = message
        self.fields = fields or {}

    @classmethod
    def from_response(cls, response: httpx.Response) -> "ApiError":
        try:
            body = response.json()
        except ValueError:
            body = {}
        if not isinstance(body, dict):
            body = {}
        return cls(
            status_code=response.status_code,
            code=body.get("code") or "SERVER_ERROR",
            message=body.get("error") or response.reason_phrase or "Request failed",
            fields=body.get("fields"),
        )


def validate_lead_form(values: Mapping[str, Any]) -> Dict[str, str]:
    """Client-side check of a lead form before it is sent. Empty dict means OK."""
    errors: Dict[str, str] = {}
    if not values.get("projectId"):
        errors["projectId"] = "Please select a project"
    if not (values.get("customerName") or "").strip():
        errors["customerName"] = "Customer name is required"
    if not v.is_phone(values.get("customerPhone")):
        errors["customerPhone"] = "Phone must be 10 digits"
    email = values.get("customerEmail")
    if email and not v.is_email(email):
        errors["customerEmail"] = "Please enter a valid email address"
    return errors


def _compact(payload: Mapping[str, Any]) -> Dict[str, Any]:
    return {key: val for key, val in payload.items() if val is not None}


class BetterSideClient:
    """
    Thin wrapper over the REST API.

    Args:
        base_url: API root, e.g. ``http://localhost:8000``.
        admin_token: bearer token for operator endpoints.
        http: an existing ``httpx.Client`` (FastAPI's TestClient works too).
    """

    def __init__(
        self,
        base_url: str = "http://localhost:8000",
        admin_token: Optional[str] = None,
        timeout: float = 30.0,
        http: Optional[httpx.Client] = None,
    ) -> None:
        self.admin_token = admin_token
        self._owns_http = http is None
        self.http = http or httpx.Client(base_url=base_url, timeout=timeout)

    def close(self) -> None:
        if self._owns_http:
            self.http.close()

    def __enter__(self) -> "BetterSideClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------

    def _request(
        self,
        method: str,
        path: str,
        json: Optional[Any] = None,
        params: Optional[Dict[str, Any]] = None,
        admin: bool = False,
    ) -> Any:
        headers = {}
        if admin and self.admin_token:
            headers["Authorization"] = f"Bearer {self.admin_token}"

        response = self.http.request(
            method,
            path,
            json=json,
            params=_compact(params) if params else None,
            headers=headers or None,
        )
        if response.is_error:
            raise ApiError.from_response(response)
        if response.status_code == 204 or not response.content:
            return None
        return response.json()

    # ------------------------------------------------------------------
    # Health and auth
    # ------------------------------------------------------------------

    def health(self) -> bool:
        try:
            self._request("GET", "/health")
        except (ApiError, httpx.HTTPError):
            return False
        return True

    def register(self, payload: Mapping[str, Any]) -> Dict[str, Any]:
        return self._request("POST", "/api/auth/register", json=dict(payload))

    def login(self, email: str, password: str) -> Dict[str, Any]:
        return self._request("POST", "/api/auth/login", json={"email": email, "password": password})

    def me(self) -> Dict[str, Any]:
        return self._request("GET", "/api/auth/me")

    def logout(self) -> None:
        self._request("POST", "/api/auth/logout")

    # ------------------------------------------------------------------
    # Projects
    # ------------------------------------------------------------------

    def list_projects(self) -> List[Dict[str, Any]]:
        return self._request("GET", "/api/projects")

    def get_project(self, project_id: str) -> Dict[str, Any]:
        return self._request("GET", f"/api/projects/{project_id}")

    def create_project(self, payload: Mapping[str, Any]) -> Dict[str, Any]:
        return self._request("POST", "/api/projects", json=dict(payload))

    def update_project(self, project_id: str, changes: Mapping[str, Any]) -> Dict[str, Any]:
        return self._request("PUT", f"/api/projects/{project_id}", json=dict(changes))

    def delete_project(self, project_id: str) -> None:
        self._request("DELETE", f"/api/projects/{project_id}")

    # ------------------------------------------------------------------
    # Leads
    # ------------------------------------------------------------------

    def list_leads(self) -> List[Dict[str, Any]]:
        return self._request("GET", "/api/leads")

    def get_lead(self, lead_id: str) -> Dict[str, Any]:
        return self._request("GET", f"/api/leads/{lead_id}")

    def list_cp_leads(
        self,
        page: int = 1,
        limit: int = 20,
        project_id: Optional[str] = None,
        status: Optional[str] = None,
        today_only: bool = False,
    ) -> Dict[str, Any]:
        """One page of the CP's leads: ``{"data": [...], "meta": {...}}``."""
        params = {
            "page": page,
            "limit": limit,
            "project_id": project_id,
            "status": status,
            "date": "today" if today_only else None,
        }
        return self._request("GET", "/api/cp/leads", params=params)

    def create_lead(self, payload: Mapping[str, Any]) -> Dict[str, Any]:
        return self._request("POST", "/api/cp/leads", json=dict(payload))

    def update_lead(self, lead_id: str, changes: Mapping[str, Any]) -> Dict[str, Any]:
        return self._request("PUT", f"/api/cp/leads/{lead_id}", json=dict(changes))

    def delete_lead(self, lead_id: str) -> None:
        """Soft delete; the lead becomes ``lost``."""
        self._request("DELETE", f"/api/cp/leads/{lead_id}")

    # ------------------------------------------------------------------
    # Ads
    # ------------------------------------------------------------------

    def list_ads(self) -> List[Dict[str, Any]]:
        return self._request("GET", "/api/ads")

    def create_ad(self, payload: Mapping[str, Any]) -> Dict[str, Any]:
        return self._request("POST", "/api/ads", json=dict(payload))

    def update_ad(self, ad_id: str, changes: Mapping[str, Any]) -> Dict[str, Any]:
        return self._request("PUT", f"/api/ads/{ad_id}", json=dict(changes))

    def list_ad_requests(self) -> List[Dict[str, Any]]:
        return self._request("GET", "/api/cp/ads-requests")["data"]

    def request_ads(
        self,
        project_id: str,
        objective: str,
        budget_inr: int,
        duration_days: int,
        notes: Optional[str] = None,
    ) -> Dict[str, Any]:
        payload = {
            "projectId": project_id,
            "objective": objective,
            "budgetInr": budget_inr,
            "durationDays": duration_days,
            "notes": notes,
        }
        return self._request("POST", "/api/cp/ads-requests", json=_compact(payload))

    def cancel_ad_request(self, ad_id: str) -> Dict[str, Any]:
        return self._request("PUT", f"/api/cp/ads-requests/{ad_id}", json={"status": "cancelled"})

    def set_ad_performance(self, ad_id: str, **metrics: Optional[int]) -> Dict[str, Any]:
        """Operator call; needs ``admin_token``. Keys: impressions, clicks, leads, spentAmount."""
        return self._request(
            "PUT", f"/api/admin/ads/{ad_id}/performance", json=_compact(metrics), admin=True
        )

    # ------------------------------------------------------------------
    # Assignments and users
    # ------------------------------------------------------------------

    def list_assignments(self, project_id: Optional[str] = None) -> List[Dict[str, Any]]:
        return self._request("GET", "/api/cp-projects", params={"projectId": project_id})

    def request_project(self, project_id: str) -> Dict[str, Any]:
        return self._request("POST", "/api/cp-projects", json={"projectId": project_id})

    def assign_cp(
        self,
        project_id: str,
        cp_id: str,
        status: str = "approved",
        commission_percent: Optional[float] = None,
    ) -> Dict[str, Any]:
        payload = {
            "projectId": project_id,
            "cpId": cp_id,
            "status": status,
            "commissionPercent": commission_percent,
        }
        return self._request("POST", "/api/cp-projects", json=_compact(payload))

    def set_assignment_status(self, assignment_id: str, status: str) -> Dict[str, Any]:
        return self._request("PUT", f"/api/cp-projects/{assignment_id}/status", json={"status": status})

    def list_channel_partners(self) -> List[Dict[str, Any]]:
        return self._request("GET", "/api/users/cps")

    # ------------------------------------------------------------------
    # CP panel
    # ------------------------------------------------------------------

    def cp_dashboard(self) -> Dict[str, int]:
        return self._request("GET", "/api/cp/dashboard")

    def cp_projects(self) -> List[Dict[str, Any]]:
        return self._request("GET", "/api/cp/projects")

    def get_profile(self) -> Dict[str, Any]:
        return self._request("GET", "/api/cp/profile")

    def update_profile(self, changes: Mapping[str, Any]) -> Dict[str, Any]:
        return self._request("PUT", "/api/cp/profile", json=dict(changes))

    def marketing_summary(self) -> Dict[str, Any]:
        return self._request("GET", "/api/cp/marketing")

    def request_marketing(
        self, request_type: str, project_id: Optional[str] = None, notes: Optional[str] = None
    ) -> Dict[str, Any]:
        payload = {"type": request_type, "projectId": project_id, "notes": notes}
        return self._request("POST", "/api/cp/marketing/request", json=_compact(payload))

    def list_marketing_requests(self) -> List[Dict[str, Any]]:
        return self._request("GET", "/api/cp/marketing/requests")["data"]

    def increment_marketing(
        self, cp_id: str, project_id: Optional[str] = None, creatives: int = 0, edms: int = 0
    ) -> Dict[str, Any]:
        """Operator call; needs ``admin_token``."""
        payload = {"cp_id": cp_id, "project_id": project_id, "creatives": creatives, "edms": edms}
        return self._request(
            "POST", "/api/cp/marketing/increment", json=_compact(payload), admin=True
        )

    # ------------------------------------------------------------------
    # Developer panel
    # ------------------------------------------------------------------

    def developer_dashboard(self) -> Dict[str, int]:
        return self._request("GET", "/api/developer/dashboard")

    def developer_partners(self, status: Optional[str] = None) -> List[Dict[str, Any]]:
        return self._request("GET", "/api/developer/partners", params={"status": status})

    def developer_marketing(self) -> Dict[str, Any]:
        return self._request("GET", "/api/developer/marketing")
