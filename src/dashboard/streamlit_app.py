"""Streamlit panels for BetterSide channel partners and developers.

Requires: API server running at API_BASE_URL (default http://localhost:8000)
Start API: cd src && python cli.py server
Start Dashboard: cd src && streamlit run dashboard/streamlit_app.py
"""
from __future__ import annotations

import os
import sys

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from datetime import date, datetime, time, timezone
from typing import Any, Callable, Dict, List, Optional

import httpx
import pandas as pd
import streamlit as st

from client.api import ApiError, BetterSideClient, validate_lead_form

# Configuration
API_BASE_URL = os.environ.get("API_BASE_URL", "http://localhost:8000")

LEAD_STATUSES = ["new", "contacted", "site_visit", "negotiation", "converted", "lost"]
LEAD_SOURCES = ["meta_ads", "organic", "betterside", "referral", "other"]
AD_STATUSES = ["draft", "pending", "active", "paused", "completed", "cancelled"]
AD_PLATFORMS = ["all", "facebook", "instagram", "google"]
AD_OBJECTIVES = ["lead_generation", "awareness", "site_visits"]
PROJECT_TYPES = ["residential", "commercial", "villa", "plot"]
PROJECT_STATUSES = ["pre_launch", "under_construction", "ready_to_move", "completed"]

st.set_page_config(
    page_title="BetterSide",
    page_icon="🏢",
    layout="wide",
    initial_sidebar_state="expanded",
)


# =============================================================================
# API Helper Functions
# =============================================================================


def get_client() -> BetterSideClient:
    """One client per browser session; its cookie jar holds the login."""
    if "client" not in st.session_state:
        st.session_state.client = BetterSideClient(base_url=API_BASE_URL)
    return st.session_state.client


def call(fn: Callable[..., Any], *args: Any, **kwargs: Any) -> Any:
    """Run a client call, rendering API and connection errors inline."""
    try:
        return fn(*args, **kwargs)
    except ApiError as e:
        if e.status_code == 401:
            st.session_state.pop("user", None)
        st.error(f"{e.code}: {e.message}")
        for field, message in e.fields.items():
            st.caption(f"• {field}: {message}")
        return None
    except httpx.ConnectError:
        st.error(f"❌ Cannot connect to API at {API_BASE_URL}. Is the server running?")
        st.info("💡 Start the API server with: `cd src && python cli.py server`")
        return None


def attempt(fn: Callable[..., Any], *args: Any, **kwargs: Any) -> bool:
    """Like ``call`` for endpoints that return no body: True when the request went through."""
    return call(lambda: fn(*args, **kwargs) or True) is True


def frame(rows: List[Dict[str, Any]], columns: List[str]) -> pd.DataFrame:
    df = pd.DataFrame(rows)
    if df.empty:
        return df
    return df[[c for c in columns if c in df.columns]]


def as_utc(day: date) -> str:
    return datetime.combine(day, time.min, tzinfo=timezone.utc).isoformat()


def project_options(projects: List[Dict[str, Any]]) -> Dict[str, str]:
    return {p["name"]: p["id"] for p in projects}


# =============================================================================
# Sidebar
# =============================================================================


def render_sidebar() -> None:
    with st.sidebar:
        st.title("🏢 BetterSide")
        st.caption("Channel partner & developer panels")
        st.divider()

        if get_client().health():
            st.success("✅ API Online")
        else:
            st.error("❌ API Offline")
            st.caption(f"Expected at: {API_BASE_URL}")

        user = st.session_state.get("user")
        if user:
            st.divider()
            # Display only; every request is re-checked on the server.
            st.write(f"**{user['fullName']}**")
            st.caption(f"{user['email']} · {user['role']}")
            if st.button("Log out"):
                call(get_client().logout)
                st.session_state.pop("user", None)
                st.rerun()


# =============================================================================
# Login / Registration
# =============================================================================


def render_auth() -> None:
    st.header("Welcome to BetterSide")
    login_tab, register_tab = st.tabs(["Log in", "Register"])

    with login_tab:
        with st.form("login_form"):
            email = st.text_input("Email")
            password = st.text_input("Password", type="password")
            if st.form_submit_button("Log in"):
                user = call(get_client().login, email, password)
                if user:
                    st.session_state.user = user
                    st.rerun()

    with register_tab:
        role = st.radio("I am a", ["buyer", "cp", "developer"], horizontal=True)
        with st.form("register_form"):
            payload: Dict[str, Any] = {"role": role}
            if role == "developer":
                payload["companyName"] = st.text_input("Developer/Group Name")
                payload["contactPerson"] = st.text_input("Contact Person Name")
                payload["gstNumber"] = st.text_input("GST Number")
                payload["isReraRegistered"] = st.checkbox("RERA registered")
                payload["reraNumber"] = st.text_input("RERA Number")
                payload["docLink"] = st.text_input("Document link (optional)") or None
            else:
                payload["fullName"] = st.text_input("Full Name")
                if role == "cp":
                    payload["companyName"] = st.text_input("Company Name")
                else:
                    payload["budget"] = st.text_input("Budget (INR, optional)") or None
            payload["email"] = st.text_input("Email", key="reg_email")
            payload["phone"] = st.text_input("Mobile (10 digits)")
            payload["city"] = st.text_input("City")
            payload["password"] = st.text_input("Password", type="password", key="reg_password")

            if st.form_submit_button("Create account"):
                user = call(get_client().register, payload)
                if user:
                    st.session_state.user = user
                    st.rerun()


# =============================================================================
# CP Panel
# =============================================================================


def render_cp_dashboard() -> None:
    st.header("📊 Dashboard")
    stats = call(get_client().cp_dashboard)
    if stats:
        col1, col2, col3, col4 = st.columns(4)
        col1.metric("Today's Leads", stats["todaysLeads"])
        col2.metric("Total Leads", stats["totalLeads"])
        col3.metric("Projects", stats["activeProjects"])
        col4.metric("Active Ads", stats["activeAds"])


def render_cp_leads(projects: Dict[str, str]) -> None:
    st.header("📋 Leads")
    client = get_client()

    col1, col2, col3, col4 = st.columns(4)
    with col1:
        project_name = st.selectbox("Project", ["All"] + list(projects), key="lead_project_filter")
    with col2:
        status = st.selectbox("Status", ["All"] + LEAD_STATUSES, key="lead_status_filter")
    with col3:
        today_only = st.checkbox("Today only", key="lead_today")
    with col4:
        limit = st.number_input("Per page", min_value=1, max_value=100, value=20)

    page = st.number_input("Page", min_value=1, value=1, step=1)
    result = call(
        client.list_cp_leads,
        page=int(page),
        limit=int(limit),
        project_id=projects.get(project_name),
        status=None if status == "All" else status,
        today_only=today_only,
    )
    if result:
        meta = result["meta"]
        st.caption(f"{meta['total']} leads · page {meta['page']}")
        st.dataframe(
            frame(result["data"], ["id", "customerName", "customerPhone", "customerCity",
                                   "budget", "status", "source", "createdAt"]),
            use_container_width=True,
            hide_index=True,
        )

    st.subheader("➕ New Lead")
    with st.form("new_lead_form", clear_on_submit=True):
        values: Dict[str, Any] = {
            "projectId": projects.get(st.selectbox("Project *", list(projects) or ["-"])),
            "customerName": st.text_input("Customer Name *"),
            "customerPhone": st.text_input("Phone (10 digits) *"),
            "customerEmail": st.text_input("Email") or None,
            "customerCity": st.text_input("City") or None,
            "budget": st.text_input("Budget") or None,
            "source": st.selectbox("Source", LEAD_SOURCES),
            "notes": st.text_area("Notes") or None,
        }
        if st.form_submit_button("Save lead"):
            errors = validate_lead_form(values)
            if errors:
                for field, message in errors.items():
                    st.error(f"{field}: {message}")
            elif call(client.create_lead, values):
                st.success("Lead created")

    st.subheader("✏️ Update / Delete")
    lead_id = st.text_input("Lead ID")
    col1, col2 = st.columns(2)
    with col1:
        new_status = st.selectbox("New status", LEAD_STATUSES, key="lead_new_status")
        if st.button("Update status") and lead_id:
            if call(client.update_lead, lead_id, {"status": new_status}):
                st.success("Lead updated")
    with col2:
        if st.button("Mark lost (delete)") and lead_id:
            if attempt(client.delete_lead, lead_id):
                st.success("Lead marked lost")


def render_cp_ads(projects: Dict[str, str]) -> None:
    st.header("📣 Ads")
    client = get_client()

    ads = call(client.list_ad_requests) or []
    st.dataframe(
        frame(ads, ["id", "title", "status", "platform", "budget", "spentAmount",
                    "impressions", "clicks", "leads", "startDate", "endDate"]),
        use_container_width=True,
        hide_index=True,
    )

    st.subheader("🚀 Run Ads")
    with st.form("ads_request_form", clear_on_submit=True):
        project_name = st.selectbox("Project", list(projects) or ["-"])
        objective = st.selectbox("Objective", AD_OBJECTIVES)
        budget = st.number_input("Budget (INR)", min_value=1, value=25000, step=1000)
        duration = st.number_input("Duration (days)", min_value=1, value=14)
        notes = st.text_area("Notes") or None
        if st.form_submit_button("Submit request") and projects.get(project_name):
            if call(client.request_ads, projects[project_name], objective, int(budget), int(duration), notes):
                st.success("Request submitted")

    cancel_id = st.selectbox("Cancel a request", ["-"] + [a["id"] for a in ads if a["status"] != "cancelled"])
    if st.button("Cancel request") and cancel_id != "-":
        if call(client.cancel_ad_request, cancel_id):
            st.success("Request cancelled")


def render_cp_marketing(projects: Dict[str, str]) -> None:
    st.header("🎨 Marketing")
    client = get_client()

    summary = call(client.marketing_summary)
    if summary:
        col1, col2 = st.columns(2)
        col1.metric("Creatives Shared", summary["creatives_shared"])
        col2.metric("EDMs Shared", summary["edms_shared"])
        if summary["per_project"]:
            df = pd.DataFrame(summary["per_project"]).set_index("projectTitle")
            st.bar_chart(df[["creativesShared", "edmsShared"]])

    st.subheader("Request collateral")
    with st.form("marketing_request_form", clear_on_submit=True):
        request_type = st.radio("Type", ["creative", "edm"], horizontal=True)
        project_name = st.selectbox("Project", ["Any"] + list(projects))
        notes = st.text_area("Notes") or None
        if st.form_submit_button("Send request"):
            if call(client.request_marketing, request_type, projects.get(project_name), notes):
                st.success("Request sent")

    requests = call(client.list_marketing_requests) or []
    st.dataframe(
        frame(requests, ["id", "requestType", "status", "notes", "createdAt"]),
        use_container_width=True,
        hide_index=True,
    )


def render_cp_profile() -> None:
    st.header("👤 Profile")
    client = get_client()
    profile = call(client.get_profile)
    if not profile:
        return

    with st.form("profile_form"):
        changes = {
            "fullName": st.text_input("Full Name", value=profile.get("fullName") or ""),
            "companyName": st.text_input("Company", value=profile.get("companyName") or ""),
            "phone": st.text_input("Phone", value=profile.get("phone") or ""),
            "city": st.text_input("City", value=profile.get("city") or ""),
        }
        st.caption(f"Email: {profile.get('email')}")
        if st.form_submit_button("Save profile"):
            if call(client.update_profile, changes):
                st.success("Profile saved")


def render_cp_projects() -> None:
    st.header("🏗️ My Projects")
    client = get_client()
    assignments = call(client.cp_projects) or []
    rows = [
        {
            "project": a["project"]["name"] if a.get("project") else a["projectId"],
            "city": (a.get("project") or {}).get("city"),
            "status": a["status"],
            "commission": a.get("commissionPercent"),
        }
        for a in assignments
    ]
    st.dataframe(pd.DataFrame(rows), use_container_width=True, hide_index=True)

    st.subheader("Request access")
    assigned = {a["projectId"] for a in assignments}
    available = {p["name"]: p["id"] for p in (call(client.list_projects) or []) if p["id"] not in assigned}
    choice = st.selectbox("Project", ["-"] + list(available))
    if st.button("Request") and choice != "-":
        if call(client.request_project, available[choice]):
            st.success("Request sent to the developer")


def render_cp_panel() -> None:
    projects = project_options(call(get_client().list_projects) or [])
    tabs = st.tabs(["📊 Dashboard", "📋 Leads", "📣 Ads", "🎨 Marketing", "👤 Profile", "🏗️ Projects"])
    with tabs[0]:
        render_cp_dashboard()
    with tabs[1]:
        render_cp_leads(projects)
    with tabs[2]:
        render_cp_ads(projects)
    with tabs[3]:
        render_cp_marketing(projects)
    with tabs[4]:
        render_cp_profile()
    with tabs[5]:
        render_cp_projects()


# =============================================================================
# Developer Panel
# =============================================================================


def render_developer_dashboard() -> None:
    st.header("📊 Dashboard")
    stats = call(get_client().developer_dashboard)
    if stats:
        col1, col2, col3, col4 = st.columns(4)
        col1.metric("Projects", stats["totalProjects"], f"{stats['activeProjects']} active")
        col2.metric("Leads", stats["totalLeads"], f"{stats['convertedLeads']} converted")
        col3.metric("Partners", stats["approvedPartners"], f"{stats['pendingPartners']} pending")
        col4.metric("Active Ads", stats["activeAds"])

    leads = call(get_client().list_leads) or []
    if leads:
        st.subheader("Lead pipeline")
        counts = pd.DataFrame(leads)["status"].value_counts().reindex(LEAD_STATUSES, fill_value=0)
        st.bar_chart(counts)


def render_developer_projects() -> None:
    st.header("🏗️ Projects")
    client = get_client()
    projects = call(client.list_projects) or []
    st.dataframe(
        frame(projects, ["id", "name", "city", "location", "projectType", "status",
                         "priceMin", "priceMax", "isActive"]),
        use_container_width=True,
        hide_index=True,
    )

    st.subheader("➕ New Project")
    with st.form("new_project_form", clear_on_submit=True):
        payload = {
            "name": st.text_input("Name *"),
            "location": st.text_input("Location *"),
            "city": st.text_input("City *"),
            "projectType": st.selectbox("Type", PROJECT_TYPES),
            "status": st.selectbox("Status", PROJECT_STATUSES),
            "priceMin": int(st.number_input("Price min", min_value=0, step=100000)) or None,
            "priceMax": int(st.number_input("Price max", min_value=0, step=100000)) or None,
            "reraNumber": st.text_input("RERA number") or None,
            "description": st.text_area("Description") or None,
        }
        if st.form_submit_button("Create project"):
            if call(client.create_project, payload):
                st.success("Project created")

    st.subheader("✏️ Activate / deactivate")
    options = project_options(projects)
    choice = st.selectbox("Project", ["-"] + list(options), key="toggle_project")
    active = st.checkbox("Active", value=True)
    if st.button("Save") and choice != "-":
        if call(client.update_project, options[choice], {"isActive": active}):
            st.success("Project updated")


def render_developer_partners() -> None:
    st.header("🤝 Partners")
    client = get_client()

    status = st.selectbox("Show", ["all", "pending", "approved", "rejected"])
    partners = call(client.developer_partners, None if status == "all" else status) or []
    rows = [
        {
            "assignment": p["id"],
            "partner": p["cp"]["fullName"],
            "company": p["cp"].get("companyName"),
            "phone": p["cp"]["phone"],
            "project": p["projectName"],
            "status": p["status"],
            "leads": p["totalLeads"],
            "ran ads": "Yes" if p["hasRunAds"] else "No",
            "creatives": p["creativesShared"],
            "EDMs": p["edmsShared"],
        }
        for p in partners
    ]
    st.dataframe(pd.DataFrame(rows), use_container_width=True, hide_index=True)

    pending = [p for p in partners if p["status"] == "pending"]
    if pending:
        st.subheader("Pending approvals")
        for p in pending:
            col1, col2, col3 = st.columns([3, 1, 1])
            col1.write(f"{p['cp']['fullName']} → {p['projectName']}")
            if col2.button("Approve", key=f"approve_{p['id']}"):
                if attempt(client.set_assignment_status, p["id"], "approved"):
                    st.rerun()
            if col3.button("Reject", key=f"reject_{p['id']}"):
                if attempt(client.set_assignment_status, p["id"], "rejected"):
                    st.rerun()

    st.subheader("Invite a partner")
    cps = {f"{c['fullName']} ({c['email']})": c["id"] for c in (call(client.list_channel_partners) or [])}
    projects = project_options(call(client.list_projects) or [])
    with st.form("assign_form", clear_on_submit=True):
        cp_label = st.selectbox("Channel partner", list(cps) or ["-"])
        project_name = st.selectbox("Project", list(projects) or ["-"])
        commission = st.number_input("Commission %", min_value=0.0, max_value=100.0, value=2.0)
        if st.form_submit_button("Assign") and cps.get(cp_label) and projects.get(project_name):
            if call(client.assign_cp, projects[project_name], cps[cp_label], "approved", commission):
                st.success("Partner assigned")


def render_developer_marketing() -> None:
    st.header("🎨 Marketing")
    summary = call(get_client().developer_marketing)
    if not summary:
        return

    col1, col2 = st.columns(2)
    col1.metric("Creatives Shared", summary["creativesShared"])
    col2.metric("EDMs Sent", f"{summary['edmsShared']:,}")

    df = frame(summary["perProject"], ["projectName", "creativesShared", "edmsShared"])
    if df.empty:
        st.info("No projects yet")
    else:
        st.dataframe(df, use_container_width=True, hide_index=True)


def render_developer_ads() -> None:
    st.header("📣 Ads")
    client = get_client()
    ads = call(client.list_ads) or []
    st.dataframe(
        frame(ads, ["id", "title", "status", "platform", "budget", "spentAmount",
                    "impressions", "clicks", "leads"]),
        use_container_width=True,
        hide_index=True,
    )

    projects = project_options(call(client.list_projects) or [])
    with st.form("developer_ad_form", clear_on_submit=True):
        project_name = st.selectbox("Project", list(projects) or ["-"])
        title = st.text_input("Title *")
        budget = st.number_input("Budget (INR)", min_value=0, value=50000, step=1000)
        start = st.date_input("Start", value=date.today())
        end = st.date_input("End", value=date.today())
        platform = st.selectbox("Platform", AD_PLATFORMS)
        if st.form_submit_button("Create campaign"):
            payload = {
                "projectId": projects.get(project_name),
                "title": title,
                "budget": int(budget),
                "startDate": as_utc(start),
                "endDate": as_utc(end),
                "platform": platform,
            }
            if call(client.create_ad, payload):
                st.success("Campaign created")

    options = {f"{a['title']} ({a['status']})": a["id"] for a in ads}
    choice = st.selectbox("Change status", ["-"] + list(options))
    new_status = st.selectbox("Status", AD_STATUSES, key="dev_ad_status")
    if st.button("Apply") and choice != "-":
        if call(client.update_ad, options[choice], {"status": new_status}):
            st.success("Campaign updated")


def render_developer_panel() -> None:
    tabs = st.tabs(["📊 Dashboard", "🏗️ Projects", "🤝 Partners", "🎨 Marketing", "📣 Ads"])
    with tabs[0]:
        render_developer_dashboard()
    with tabs[1]:
        render_developer_projects()
    with tabs[2]:
        render_developer_partners()
    with tabs[3]:
        render_developer_marketing()
    with tabs[4]:
        render_developer_ads()


# =============================================================================
# Main Application
# =============================================================================


def main() -> None:
    """Main application entry point."""
    render_sidebar()

    user: Optional[Dict[str, Any]] = st.session_state.get("user")
    if not user:
        render_auth()
        return

    if user["role"] == "cp":
        render_cp_panel()
    elif user["role"] == "developer":
        render_developer_panel()
    else:
        st.header(f"Welcome, {user['fullName']}")
        st.info("Buyer accounts can browse projects.")
        projects = call(get_client().list_projects) or []
        st.dataframe(
            frame(projects, ["name", "city", "location", "projectType", "status", "priceMin", "priceMax"]),
            use_container_width=True,
            hide_index=True,
        )


if __name__ == "__main__":
    main()
