"""Tests for project CRUD and visibility."""
from __future__ import annotations


class TestProjectVisibility:
    def test_developer_sees_only_own_projects(self, developer, other_developer, project):
        other = other_developer.client.post("/api/projects", json={
            "name": "Godrej Horizon",
            "location": "Undri",
            "city": "Pune",
            "projectType": "residential",
            "status": "pre_launch",
        })
        assert other.status_code == 201

        mine = developer.client.get("/api/projects").json()
        assert [p["id"] for p in mine] == [project["id"]]

    def test_cp_and_buyer_see_active_projects(self, cp, buyer, developer, project):
        developer.client.post("/api/projects", json={
            "name": "Hidden Tower",
            "location": "Andheri",
            "city": "Mumbai",
            "projectType": "commercial",
            "status": "completed",
            "isActive": False,
        })
        for actor in (cp, buyer):
            names = [p["name"] for p in actor.client.get("/api/projects").json()]
            assert names == ["Lodha Park Side"]

    def test_get_project_by_id(self, cp, project):
        resp = cp.client.get(f"/api/projects/{project['id']}")
        assert resp.status_code == 200
        assert resp.json()["developerId"] == project["developerId"]

    def test_missing_project(self, cp):
        resp = cp.client.get("/api/projects/does-not-exist")
        assert resp.status_code == 404
        assert resp.json()["code"] == "NOT_FOUND"


class TestProjectWrites:
    def test_create_sets_owner_from_session(self, developer):
        resp = developer.client.post("/api/projects", json={
            "name": "Owned Elsewhere",
            "location": "Baner",
            "city": "Pune",
            "projectType": "villa",
            "status": "ready_to_move",
            "developerId": "someone-else",
        })
        assert resp.status_code == 201
        assert resp.json()["developerId"] == developer.id
        assert resp.json()["isActive"] is True

    def test_cp_cannot_create(self, cp):
        resp = cp.client.post("/api/projects", json={
            "name": "Nope",
            "location": "Worli",
            "city": "Mumbai",
            "projectType": "residential",
            "status": "pre_launch",
        })
        assert resp.status_code == 403

    def test_invalid_project_type(self, developer):
        resp = developer.client.post("/api/projects", json={
            "name": "Bad Type",
            "location": "Worli",
            "city": "Mumbai",
            "projectType": "castle",
            "status": "pre_launch",
        })
        assert resp.status_code == 400
        assert "projectType" in resp.json()["fields"]

    def test_update_own_project(self, developer, project):
        resp = developer.client.put(
            f"/api/projects/{project['id']}", json={"availableUnits": 12, "isActive": False}
        )
        assert resp.status_code == 200
        assert resp.json()["availableUnits"] == 12
        assert resp.json()["isActive"] is False

    def test_explicit_null_leaves_required_field(self, developer, project):
        resp = developer.client.put(
            f"/api/projects/{project['id']}", json={"name": None, "description": None}
        )
        assert resp.status_code == 200
        assert resp.json()["name"] == "Lodha Park Side"
        assert resp.json()["description"] is None

    def test_unknown_field_rejected(self, developer, project):
        resp = developer.client.put(f"/api/projects/{project['id']}", json={"developerId": "x"})
        assert resp.status_code == 400
        assert resp.json()["code"] == "VALIDATION_ERROR"

    def test_other_developer_cannot_update(self, other_developer, project):
        resp = other_developer.client.put(f"/api/projects/{project['id']}", json={"name": "Mine now"})
        assert resp.status_code == 404

    def test_delete_unused_project(self, developer, project):
        resp = developer.client.delete(f"/api/projects/{project['id']}")
        assert resp.status_code == 204
        assert developer.client.get(f"/api/projects/{project['id']}").status_code == 404

    def test_delete_with_leads_conflicts(self, developer, cp, project, lead_payload):
        assert cp.client.post("/api/cp/leads", json=lead_payload()).status_code == 201

        resp = developer.client.delete(f"/api/projects/{project['id']}")
        assert resp.status_code == 409
        assert resp.json()["code"] == "CONFLICT"
