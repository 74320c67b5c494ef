# type: ignore
"""
Tests for the Resource Management Service — HTTP surface.
Run: pytest test_main.py -v
"""
from datetime import datetime, timedelta, timezone

import jwt
import pytest
from fastapi.testclient import TestClient

from conftest import TEST_SECRET, make_settings
from main import create_app


# ── Helpers ──────────────────────────────────────────────────────────────
def signup(client, name, email, role, password="pw1", **extra):
    body = {
        "userName": name,
        "userEmail": email,
        "userPassword": password,
        "userRole": role,
        **extra,
    }
    resp = client.post("/v1/signup", json=body)
    assert resp.status_code == 201, resp.text
    return resp.json()["userId"]


def login(client, email, password="pw1"):
    resp = client.post("/v1/login", json={"userEmail": email, "password": password})
    assert resp.status_code == 200, resp.text
    return resp.json()["token"]


def auth(token):
    return {"Authorization": f"Bearer {token}"}


def register_and_login(client, name, email, role, **extra):
    user_id = signup(client, name, email, role, **extra)
    return user_id, auth(login(client, email))


def create_project(client, headers, name="P1", **extra):
    body = {"projectName": name, "startDate": "2025-01-01", "endDate": "2025-06-30", **extra}
    resp = client.post("/v1/auth/projects", json=body, headers=headers)
    assert resp.status_code == 201, resp.text
    return resp.json()["project"]


@pytest.fixture
def ann(client):
    return register_and_login(client, "Ann", "ann@x.com", "Manager")


@pytest.fixture
def bob(client):
    return register_and_login(client, "Bob", "bob@x.com", "Manager")


@pytest.fixture
def eve(client):
    return register_and_login(
        client, "Eve", "eve@x.com", "Engineer",
        userSkills=["python", "react"], userSeniority="Senior", maxCapacity=100,
    )


@pytest.fixture
def dan(client):
    return register_and_login(
        client, "Dan", "dan@x.com", "Engineer", userSeniority="Junior", maxCapacity=50,
    )


# ═══════════════════════════════════════════════════════════════════════════
# HEALTH & METRICS
# ═══════════════════════════════════════════════════════════════════════════
class TestHealth:
    def test_health_ok(self, client):
        r = client.get("/health")
        assert r.status_code == 200
        assert r.json()["status"] == "ok"
        assert r.json()["service"] == "resource-management"

    def test_readiness_ok(self, client):
        r = client.get("/health/ready")
        assert r.status_code == 200
        assert r.json()["database"] == "connected"

    def test_metrics_endpoint(self, client):
        client.post("/v1/login", json={"userEmail": "nobody@x.com", "password": "x"})
        r = client.get("/metrics")
        assert r.status_code == 200
        assert "resource_requests_total" in r.text
        assert "resource_logins_total" in r.text

    def test_request_id_propagated(self, client):
        r = client.get("/health", headers={"X-Request-ID": "my-req-42"})
        assert r.headers["X-Request-ID"] == "my-req-42"

    def test_request_id_generated(self, client):
        r = client.get("/health")
        assert len(r.headers.get("X-Request-ID", "")) > 0


# ═══════════════════════════════════════════════════════════════════════════
# SIGNUP / LOGIN
# ═══════════════════════════════════════════════════════════════════════════
class TestSignup:
    def test_signup_success(self, client):
        r = client.post("/v1/signup", json={
            "userName": "Ann", "userEmail": "ann@x.com",
            "userPassword": "pw1", "userRole": "Manager",
        })
        assert r.status_code == 201
        assert r.json()["message"] == "User registered successfully"
        assert r.json()["userId"]

    def test_signup_missing_fields(self, client):
        r = client.post("/v1/signup", json={"userName": "Ann", "userEmail": "ann@x.com"})
        assert r.status_code == 400
        assert r.json()["message"] == "Required fields missing"

    def test_signup_blank_name_rejected(self, client):
        r = client.post("/v1/signup", json={
            "userName": "   ", "userEmail": "ann@x.com",
            "userPassword": "pw1", "userRole": "Manager",
        })
        assert r.status_code == 400

    def test_signup_duplicate_email(self, client):
        signup(client, "Ann", "ann@x.com", "Manager")
        r = client.post("/v1/signup", json={
            "userName": "Ann 2", "userEmail": "ANN@x.com",
            "userPassword": "pw2", "userRole": "Engineer",
        })
        assert r.status_code == 400
        assert r.json()["message"] == "User already exists"

    def test_signup_invalid_role(self, client):
        r = client.post("/v1/signup", json={
            "userName": "Ann", "userEmail": "ann@x.com",
            "userPassword": "pw1", "userRole": "Admin",
        })
        assert r.status_code == 400
        assert r.json()["message"] == "Invalid request body"

    def test_signup_invalid_seniority(self, client):
        r = client.post("/v1/signup", json={
            "userName": "Eve", "userEmail": "eve@x.com", "userPassword": "pw1",
            "userRole": "Engineer", "userSeniority": "Principal",
        })
        assert r.status_code == 400

    @pytest.mark.parametrize("bad", ["x@@y.com", "a b@c.com", "a@b", "@x.com"])
    def test_signup_malformed_email(self, client, bad):
        r = client.post("/v1/signup", json={
            "userName": "Ann", "userEmail": bad,
            "userPassword": "pw1", "userRole": "Manager",
        })
        assert r.status_code == 400
        assert r.json()["errors"][0]["field"] == "userEmail"

    def test_signup_invalid_email(self, client):
        r = client.post("/v1/signup", json={
            "userName": "Ann", "userEmail": "not-an-email",
            "userPassword": "pw1", "userRole": "Manager",
        })
        assert r.status_code == 400


class TestLogin:
    def test_login_success(self, client):
        user_id = signup(client, "Ann", "ann@x.com", "Manager")
        r = client.post("/v1/login", json={"userEmail": "ann@x.com", "password": "pw1"})
        assert r.status_code == 200
        assert r.json()["message"] == "Login successful"
        claims = jwt.decode(r.json()["token"], TEST_SECRET, algorithms=["HS256"])
        assert claims["id"] == user_id
        assert claims["email"] == "ann@x.com"
        assert claims["userRole"] == "Manager"
        assert claims["exp"] - claims["iat"] == 24 * 3600

    def test_login_email_case_insensitive(self, client):
        signup(client, "Ann", "ann@x.com", "Manager")
        r = client.post("/v1/login", json={"userEmail": "  Ann@X.com ", "password": "pw1"})
        assert r.status_code == 200

    def test_login_unknown_user(self, client):
        r = client.post("/v1/login", json={"userEmail": "ghost@x.com", "password": "pw1"})
        assert r.status_code == 404
        assert r.json()["message"] == "User not found"

    def test_login_wrong_password(self, client):
        signup(client, "Ann", "ann@x.com", "Manager")
        r = client.post("/v1/login", json={"userEmail": "ann@x.com", "password": "pw2"})
        assert r.status_code == 401
        assert r.json()["message"] == "Invalid credentials"

    def test_login_missing_password(self, client):
        r = client.post("/v1/login", json={"userEmail": "ann@x.com"})
        assert r.status_code == 400


# ═══════════════════════════════════════════════════════════════════════════
# TOKEN VERIFICATION & PROFILE
# ═══════════════════════════════════════════════════════════════════════════
class TestToken:
    def test_missing_token(self, client):
        r = client.get("/v1/auth/me")
        assert r.status_code == 401
        assert r.json()["message"] == "No Token Provided!"

    def test_garbage_token(self, client):
        r = client.get("/v1/auth/me", headers=auth("not.a.jwt"))
        assert r.status_code == 403
        assert r.json()["message"] == "Invalid Token!"

    def test_expired_token(self, client, ann):
        user_id, _ = ann
        past = datetime.now(timezone.utc) - timedelta(hours=25)
        token = jwt.encode(
            {"id": user_id, "email": "ann@x.com", "userRole": "Manager",
             "iat": past, "exp": past + timedelta(hours=24)},
            TEST_SECRET, algorithm="HS256",
        )
        r = client.get("/v1/auth/me", headers=auth(token))
        assert r.status_code == 403

    def test_token_signed_with_other_secret(self, client, ann):
        user_id, _ = ann
        token = jwt.encode(
            {"id": user_id, "email": "ann@x.com", "userRole": "Manager",
             "exp": datetime.now(timezone.utc) + timedelta(hours=1)},
            "someone-else", algorithm="HS256",
        )
        r = client.get("/v1/auth/me", headers=auth(token))
        assert r.status_code == 403


class TestProfile:
    def test_me_excludes_password(self, client, eve):
        user_id, headers = eve
        r = client.get("/v1/auth/me", headers=headers)
        assert r.status_code == 200
        data = r.json()
        assert data["id"] == user_id
        assert data["userName"] == "Eve"
        assert data["userRole"] == "Engineer"
        assert data["userSkills"] == ["python", "react"]
        assert data["userSeniority"] == "Senior"
        assert data["maxCapacity"] == 100
        assert "userPassword" not in data
        assert "password_hash" not in data

    def test_update_me(self, client, eve):
        _, headers = eve
        r = client.post("/v1/auth/update/me", json={
            "userName": "Eve Smith", "userSkills": ["go"], "userDepartment": "Platform",
        }, headers=headers)
        assert r.status_code == 200
        assert r.json()["message"] == "User updated successfully"
        user = r.json()["user"]
        assert user["userName"] == "Eve Smith"
        assert user["userSkills"] == ["go"]
        assert user["userDepartment"] == "Platform"
        assert user["userSeniority"] == "Senior"

    def test_update_me_invalid_seniority(self, client, eve):
        _, headers = eve
        r = client.post("/v1/auth/update/me", json={"userSeniority": "Guru"}, headers=headers)
        assert r.status_code == 400

    def test_update_me_invalid_role(self, client, eve):
        _, headers = eve
        r = client.post("/v1/auth/update/me", json={"userRole": "Admin"}, headers=headers)
        assert r.status_code == 400

    def test_update_me_password_is_rehashed(self, client, eve):
        _, headers = eve
        r = client.post("/v1/auth/update/me", json={"userPassword": "new-pw"}, headers=headers)
        assert r.status_code == 200
        assert client.post("/v1/login", json={"userEmail": "eve@x.com", "password": "pw1"}).status_code == 401
        assert client.post("/v1/login", json={"userEmail": "eve@x.com", "password": "new-pw"}).status_code == 200

    def test_update_me_email_taken(self, client, eve, dan):
        _, headers = eve
        r = client.post("/v1/auth/update/me", json={"userEmail": "dan@x.com"}, headers=headers)
        assert r.status_code == 400

    def test_update_me_null_clears_department(self, client, eve):
        _, headers = eve
        client.post("/v1/auth/update/me", json={"userDepartment": "Platform"}, headers=headers)
        r = client.post("/v1/auth/update/me", json={"userDepartment": None}, headers=headers)
        assert r.status_code == 200
        user = r.json()["user"]
        assert user["userDepartment"] is None
        assert user["userSeniority"] == "Senior"

    def test_update_me_null_name_rejected(self, client, eve):
        _, headers = eve
        r = client.post("/v1/auth/update/me", json={"userName": None}, headers=headers)
        assert r.status_code == 400
        assert r.json()["message"] == "userName cannot be null"

    def test_update_me_malformed_email(self, client, eve):
        _, headers = eve
        r = client.post("/v1/auth/update/me", json={"userEmail": "x@@y.com"}, headers=headers)
        assert r.status_code == 400

    def test_owner_cannot_switch_to_engineer(self, client, ann):
        _, headers = ann
        create_project(client, headers)
        r = client.post("/v1/auth/update/me", json={"userRole": "Engineer"}, headers=headers)
        assert r.status_code == 400
        assert r.json()["message"] == "Cannot change role while managing projects"
        assert client.get("/v1/auth/me", headers=headers).json()["userRole"] == "Manager"

    def test_member_cannot_switch_to_manager(self, client, ann, eve):
        _, ann_headers = ann
        eve_id, eve_headers = eve
        create_project(client, ann_headers, assignedEngineers=[eve_id])
        r = client.post("/v1/auth/update/me", json={"userRole": "Manager"}, headers=eve_headers)
        assert r.status_code == 400
        assert client.get("/v1/auth/me", headers=eve_headers).json()["userRole"] == "Engineer"

    def test_update_me_empty_patch(self, client, eve):
        _, headers = eve
        r = client.post("/v1/auth/update/me", json={}, headers=headers)
        assert r.status_code == 200
        assert r.json()["user"]["userName"] == "Eve"


class TestEngineers:
    def test_manager_lists_engineers(self, client, ann, eve, dan):
        _, headers = ann
        r = client.get("/v1/auth/engineers", headers=headers)
        assert r.status_code == 200
        names = sorted(u["userName"] for u in r.json())
        assert names == ["Dan", "Eve"]
        assert all(u["userRole"] == "Engineer" for u in r.json())
        assert all("userPassword" not in u for u in r.json())

    def test_engineer_cannot_list_engineers(self, client, eve):
        _, headers = eve
        r = client.get("/v1/auth/engineers", headers=headers)
        assert r.status_code == 403


# ═══════════════════════════════════════════════════════════════════════════
# PROJECTS
# ═══════════════════════════════════════════════════════════════════════════
class TestCreateProject:
    def test_signup_login_create_scenario(self, client):
        ann_id = signup(client, "Ann", "ann@x.com", "Manager")
        token = login(client, "ann@x.com", "pw1")
        r = client.post("/v1/auth/projects", json={
            "projectName": "P1", "startDate": "2025-01-01", "endDate": "2025-03-01",
        }, headers=auth(token))
        assert r.status_code == 201
        assert r.json()["message"] == "Project created successfully"
        project = r.json()["project"]
        assert project["managerId"] == ann_id
        assert project["projectStatus"] == "Planning"
        assert project["assignedEngineers"] == []
        assert project["requiredSkills"] == []

    def test_engineer_cannot_create(self, client, eve):
        _, headers = eve
        r = client.post("/v1/auth/projects", json={
            "projectName": "P1", "startDate": "2025-01-01", "endDate": "2025-03-01",
        }, headers=headers)
        assert r.status_code == 403
        assert r.json()["message"] == "Only managers can create projects"

    def test_missing_name(self, client, ann):
        _, headers = ann
        r = client.post("/v1/auth/projects", json={
            "startDate": "2025-01-01", "endDate": "2025-03-01",
        }, headers=headers)
        assert r.status_code == 400
        assert r.json()["message"] == "Required fields missing"

    def test_end_before_start(self, client, ann):
        _, headers = ann
        r = client.post("/v1/auth/projects", json={
            "projectName": "P1", "startDate": "2025-03-01", "endDate": "2025-01-01",
        }, headers=headers)
        assert r.status_code == 400

    def test_invalid_status(self, client, ann):
        _, headers = ann
        r = client.post("/v1/auth/projects", json={
            "projectName": "P1", "startDate": "2025-01-01", "endDate": "2025-03-01",
            "projectStatus": "Archived",
        }, headers=headers)
        assert r.status_code == 400

    def test_managerid_in_body_is_ignored(self, client, ann, bob):
        ann_id, headers = ann
        bob_id, _ = bob
        project = create_project(client, headers, managerId=bob_id)
        assert project["managerId"] == ann_id

    def test_create_with_engineers(self, client, ann, eve, dan):
        _, headers = ann
        eve_id, _ = eve
        dan_id, _ = dan
        project = create_project(
            client, headers, assignedEngineers=[dan_id, eve_id],
            requiredSkills=["python", "sql"], teamSize=3, projectStatus="Active",
        )
        assert project["assignedEngineers"] == [dan_id, eve_id]
        assert project["requiredSkills"] == ["python", "sql"]
        assert project["teamSize"] == 3
        assert project["projectStatus"] == "Active"

    def test_create_with_manager_as_engineer_rejected(self, client, ann, bob):
        _, headers = ann
        bob_id, _ = bob
        r = client.post("/v1/auth/projects", json={
            "projectName": "P1", "startDate": "2025-01-01", "endDate": "2025-03-01",
            "assignedEngineers": [bob_id],
        }, headers=headers)
        assert r.status_code == 400

    def test_create_with_unknown_engineer_rejected(self, client, ann):
        _, headers = ann
        r = client.post("/v1/auth/projects", json={
            "projectName": "P1", "startDate": "2025-01-01", "endDate": "2025-03-01",
            "assignedEngineers": ["does-not-exist"],
        }, headers=headers)
        assert r.status_code == 400


class TestListAndGetProjects:
    def test_manager_sees_only_own(self, client, ann, bob):
        _, ann_headers = ann
        _, bob_headers = bob
        create_project(client, ann_headers, "Ann-1")
        create_project(client, ann_headers, "Ann-2")
        create_project(client, bob_headers, "Bob-1")
        r = client.get("/v1/auth/projects", headers=ann_headers)
        assert r.status_code == 200
        assert [p["projectName"] for p in r.json()] == ["Ann-1", "Ann-2"]

    def test_list_includes_manager_identity(self, client, ann):
        ann_id, headers = ann
        create_project(client, headers)
        manager = client.get("/v1/auth/projects", headers=headers).json()[0]["manager"]
        assert manager == {"id": ann_id, "userName": "Ann", "userEmail": "ann@x.com"}

    def test_engineer_sees_exactly_member_projects(self, client, ann, bob, eve, dan):
        _, ann_headers = ann
        _, bob_headers = bob
        eve_id, eve_headers = eve
        dan_id, _ = dan
        create_project(client, ann_headers, "With-Eve", assignedEngineers=[eve_id])
        create_project(client, ann_headers, "Dan-only", assignedEngineers=[dan_id])
        create_project(client, bob_headers, "Bob-with-Eve", assignedEngineers=[dan_id, eve_id])
        r = client.get("/v1/auth/projects", headers=eve_headers)
        assert r.status_code == 200
        assert sorted(p["projectName"] for p in r.json()) == ["Bob-with-Eve", "With-Eve"]

    def test_get_by_owner_and_member(self, client, ann, eve):
        _, ann_headers = ann
        eve_id, eve_headers = eve
        project = create_project(client, ann_headers, assignedEngineers=[eve_id])
        assert client.get(f"/v1/auth/projects/{project['id']}", headers=ann_headers).status_code == 200
        assert client.get(f"/v1/auth/projects/{project['id']}", headers=eve_headers).status_code == 200

    def test_get_is_repeatable(self, client, ann):
        _, headers = ann
        project = create_project(client, headers)
        first = client.get(f"/v1/auth/projects/{project['id']}", headers=headers).json()
        second = client.get(f"/v1/auth/projects/{project['id']}", headers=headers).json()
        assert first == second

    def test_get_foreign_and_missing_look_the_same(self, client, ann, bob, eve):
        _, ann_headers = ann
        _, bob_headers = bob
        _, eve_headers = eve
        project = create_project(client, ann_headers)
        foreign = client.get(f"/v1/auth/projects/{project['id']}", headers=bob_headers)
        outsider = client.get(f"/v1/auth/projects/{project['id']}", headers=eve_headers)
        missing = client.get("/v1/auth/projects/nope", headers=ann_headers)
        for r in (foreign, outsider, missing):
            assert r.status_code == 404
            assert r.json() == {"message": "Project not found or unauthorized"}


class TestUpdateDeleteProject:
    def test_owner_updates(self, client, ann):
        _, headers = ann
        project = create_project(client, headers)
        r = client.post(f"/v1/auth/update/projects/{project['id']}", json={
            "projectStatus": "Active", "projectDescription": "Kick-off done",
        }, headers=headers)
        assert r.status_code == 200
        assert r.json()["message"] == "Project updated successfully"
        updated = r.json()["project"]
        assert updated["projectStatus"] == "Active"
        assert updated["projectDescription"] == "Kick-off done"
        assert updated["projectName"] == "P1"

    def test_update_rejects_bad_status(self, client, ann):
        _, headers = ann
        project = create_project(client, headers)
        r = client.post(f"/v1/auth/update/projects/{project['id']}",
                        json={"projectStatus": "Done"}, headers=headers)
        assert r.status_code == 400

    def test_update_end_before_existing_start(self, client, ann):
        _, headers = ann
        project = create_project(client, headers)
        r = client.post(f"/v1/auth/update/projects/{project['id']}",
                        json={"endDate": "2024-01-01"}, headers=headers)
        assert r.status_code == 400

    def test_update_replaces_members(self, client, ann, eve, dan):
        _, headers = ann
        eve_id, _ = eve
        dan_id, _ = dan
        project = create_project(client, headers, assignedEngineers=[eve_id])
        r = client.post(f"/v1/auth/update/projects/{project['id']}",
                        json={"assignedEngineers": [dan_id]}, headers=headers)
        assert r.status_code == 200
        assert r.json()["project"]["assignedEngineers"] == [dan_id]

    def test_update_null_clears_description(self, client, ann):
        _, headers = ann
        project = create_project(client, headers, projectDescription="Draft", teamSize=3)
        r = client.post(f"/v1/auth/update/projects/{project['id']}",
                        json={"projectDescription": None}, headers=headers)
        assert r.status_code == 200
        updated = r.json()["project"]
        assert updated["projectDescription"] is None
        assert updated["teamSize"] == 3

    def test_update_null_name_rejected(self, client, ann):
        _, headers = ann
        project = create_project(client, headers)
        r = client.post(f"/v1/auth/update/projects/{project['id']}",
                        json={"projectName": None}, headers=headers)
        assert r.status_code == 400

    def test_datetime_bounds_accepted(self, client, ann):
        _, headers = ann
        project = create_project(client, headers, startDate="2025-01-01T08:00:00Z",
                                 endDate="2025-01-01T17:30:00Z")
        assert project["startDate"] == "2025-01-01T08:00:00Z"
        assert project["endDate"] == "2025-01-01T17:30:00Z"

    def test_unparseable_date_rejected(self, client, ann):
        _, headers = ann
        r = client.post("/v1/auth/projects", json={
            "projectName": "P1", "startDate": "next tuesday", "endDate": "2025-03-01",
        }, headers=headers)
        assert r.status_code == 400
        assert r.json()["message"] == "Invalid request body"

    def test_other_manager_cannot_update(self, client, ann, bob):
        _, ann_headers = ann
        _, bob_headers = bob
        project = create_project(client, ann_headers)
        r = client.post(f"/v1/auth/update/projects/{project['id']}",
                        json={"projectName": "Hijack"}, headers=bob_headers)
        assert r.status_code == 404
        assert r.json()["message"] == "Project not found or unauthorized"
        still = client.get(f"/v1/auth/projects/{project['id']}", headers=ann_headers).json()
        assert still["projectName"] == "P1"

    def test_engineer_cannot_update(self, client, ann, eve):
        _, ann_headers = ann
        eve_id, eve_headers = eve
        project = create_project(client, ann_headers, assignedEngineers=[eve_id])
        r = client.post(f"/v1/auth/update/projects/{project['id']}",
                        json={"projectName": "Mine"}, headers=eve_headers)
        assert r.status_code == 403
        assert r.json()["message"] == "Only managers can update projects"

    def test_owner_deletes(self, client, ann):
        _, headers = ann
        project = create_project(client, headers)
        r = client.delete(f"/v1/auth/delete/projects/{project['id']}", headers=headers)
        assert r.status_code == 200
        assert r.json()["message"] == "Project deleted successfully"
        assert client.get(f"/v1/auth/projects/{project['id']}", headers=headers).status_code == 404

    def test_other_manager_cannot_delete(self, client, ann, bob):
        _, ann_headers = ann
        _, bob_headers = bob
        project = create_project(client, ann_headers)
        r = client.delete(f"/v1/auth/delete/projects/{project['id']}", headers=bob_headers)
        assert r.status_code == 404
        assert client.get(f"/v1/auth/projects/{project['id']}", headers=ann_headers).status_code == 200

    def test_engineer_cannot_delete(self, client, ann, eve):
        _, ann_headers = ann
        _, eve_headers = eve
        project = create_project(client, ann_headers)
        r = client.delete(f"/v1/auth/delete/projects/{project['id']}", headers=eve_headers)
        assert r.status_code == 403
        assert r.json()["message"] == "Only managers can delete projects"

    def test_delete_missing(self, client, ann):
        _, headers = ann
        r = client.delete("/v1/auth/delete/projects/nope", headers=headers)
        assert r.status_code == 404


# ═══════════════════════════════════════════════════════════════════════════
# TASKS
# ═══════════════════════════════════════════════════════════════════════════
def assign(client, headers, engineer_id, project_id, allocation=50, **extra):
    return client.post("/v1/auth/tasks", json={
        "engineerId": engineer_id, "projectId": project_id,
        "allocationPercentage": allocation,
        "startDate": "2025-01-01", "endDate": "2025-02-01", **extra,
    }, headers=headers)


class TestAssignTask:
    def test_assign_auto_enrolls_engineer(self, client, ann, eve):
        _, headers = ann
        eve_id, _ = eve
        project = create_project(client, headers)
        assert eve_id not in project["assignedEngineers"]

        r = assign(client, headers, eve_id, project["id"])
        assert r.status_code == 201
        assert r.json()["message"] == "Task assigned successfully"
        task = r.json()["task"]
        assert task["engineerId"] == eve_id
        assert task["projectId"] == project["id"]
        assert task["allocationPercentage"] == 50

        after = client.get(f"/v1/auth/projects/{project['id']}", headers=headers).json()
        assert after["assignedEngineers"] == [eve_id]

    def test_existing_member_not_duplicated(self, client, ann, eve):
        _, headers = ann
        eve_id, _ = eve
        project = create_project(client, headers, assignedEngineers=[eve_id])
        assert assign(client, headers, eve_id, project["id"], 30).status_code == 201
        assert assign(client, headers, eve_id, project["id"], 20).status_code == 201
        after = client.get(f"/v1/auth/projects/{project['id']}", headers=headers).json()
        assert after["assignedEngineers"] == [eve_id]

    def test_enrolled_engineer_can_now_see_project(self, client, ann, eve):
        _, headers = ann
        eve_id, eve_headers = eve
        project = create_project(client, headers)
        assign(client, headers, eve_id, project["id"])
        r = client.get(f"/v1/auth/projects/{project['id']}", headers=eve_headers)
        assert r.status_code == 200

    def test_engineer_cannot_assign(self, client, ann, eve):
        _, ann_headers = ann
        eve_id, eve_headers = eve
        project = create_project(client, ann_headers)
        r = assign(client, eve_headers, eve_id, project["id"])
        assert r.status_code == 403
        assert r.json()["message"] == "Only managers can assign tasks"

    def test_cannot_assign_on_foreign_project(self, client, ann, bob, eve):
        _, ann_headers = ann
        _, bob_headers = bob
        eve_id, _ = eve
        project = create_project(client, ann_headers)
        r = assign(client, bob_headers, eve_id, project["id"])
        assert r.status_code == 404
        after = client.get(f"/v1/auth/projects/{project['id']}", headers=ann_headers).json()
        assert after["assignedEngineers"] == []

    def test_assignee_must_be_engineer(self, client, ann, bob):
        _, headers = ann
        bob_id, _ = bob
        project = create_project(client, headers)
        r = assign(client, headers, bob_id, project["id"])
        assert r.status_code == 400

    def test_allocation_out_of_range(self, client, ann, eve):
        _, headers = ann
        eve_id, _ = eve
        project = create_project(client, headers)
        assert assign(client, headers, eve_id, project["id"], 150).status_code == 400
        assert assign(client, headers, eve_id, project["id"], -5).status_code == 400

    def test_missing_fields(self, client, ann):
        _, headers = ann
        r = client.post("/v1/auth/tasks", json={"allocationPercentage": 10}, headers=headers)
        assert r.status_code == 400
        assert r.json()["message"] == "Required fields missing"

    def test_allocation_not_capped_by_capacity(self, client, ann, dan):
        _, headers = ann
        dan_id, _ = dan  # maxCapacity 50
        project = create_project(client, headers)
        assert assign(client, headers, dan_id, project["id"], 80).status_code == 201
        assert assign(client, headers, dan_id, project["id"], 80).status_code == 201

    def test_strict_policy_rejects_non_member(self, engine):
        app = create_app(engine=engine, config=make_settings(AUTO_ENROLL_ON_ASSIGN=False))
        with TestClient(app) as strict:
            _, headers = register_and_login(strict, "Ann", "ann@x.com", "Manager")
            eve_id, _ = register_and_login(strict, "Eve", "eve@x.com", "Engineer")
            project = create_project(strict, headers)
            r = assign(strict, headers, eve_id, project["id"])
            assert r.status_code == 400
            assert r.json()["message"] == "Engineer is not assigned to this project"

            member_project = create_project(strict, headers, "P2", assignedEngineers=[eve_id])
            assert assign(strict, headers, eve_id, member_project["id"]).status_code == 201


class TestListTasks:
    def test_engineer_sees_own_tasks_with_project(self, client, ann, eve, dan):
        _, headers = ann
        eve_id, eve_headers = eve
        dan_id, _ = dan
        project = create_project(client, headers, "Apollo")
        assign(client, headers, eve_id, project["id"], 40)
        assign(client, headers, dan_id, project["id"], 60)

        r = client.get("/v1/auth/tasks", headers=eve_headers)
        assert r.status_code == 200
        tasks = r.json()
        assert len(tasks) == 1
        assert tasks[0]["engineerId"] == eve_id
        assert tasks[0]["project"] == {
            "id": project["id"], "projectName": "Apollo", "projectStatus": "Planning",
        }

    def test_manager_sees_tasks_across_owned_projects(self, client, ann, bob, eve, dan):
        _, ann_headers = ann
        _, bob_headers = bob
        eve_id, _ = eve
        dan_id, _ = dan
        p1 = create_project(client, ann_headers, "A1")
        p2 = create_project(client, ann_headers, "A2")
        p3 = create_project(client, bob_headers, "B1")
        assign(client, ann_headers, eve_id, p1["id"], 40)
        assign(client, ann_headers, dan_id, p2["id"], 30)
        assign(client, bob_headers, eve_id, p3["id"], 20)

        tasks = client.get("/v1/auth/tasks", headers=ann_headers).json()
        assert sorted(t["project"]["projectName"] for t in tasks) == ["A1", "A2"]
        by_engineer = {t["engineerId"]: t["engineer"] for t in tasks}
        assert by_engineer[eve_id]["userName"] == "Eve"
        assert by_engineer[eve_id]["maxCapacity"] == 100
        assert by_engineer[dan_id]["maxCapacity"] == 50

    def test_manager_without_projects_gets_empty_list(self, client, bob):
        _, headers = bob
        r = client.get("/v1/auth/tasks", headers=headers)
        assert r.status_code == 200
        assert r.json() == []

    def test_project_tasks_include_engineer(self, client, ann, eve):
        _, headers = ann
        eve_id, _ = eve
        project = create_project(client, headers)
        assign(client, headers, eve_id, project["id"])
        r = client.get(f"/v1/auth/projects/{project['id']}/tasks", headers=headers)
        assert r.status_code == 200
        tasks = r.json()
        assert len(tasks) == 1
        assert tasks[0]["engineer"]["userName"] == "Eve"
        assert tasks[0]["engineer"]["userEmail"] == "eve@x.com"

    def test_project_tasks_foreign_project(self, client, ann, bob):
        _, ann_headers = ann
        _, bob_headers = bob
        project = create_project(client, ann_headers)
        r = client.get(f"/v1/auth/projects/{project['id']}/tasks", headers=bob_headers)
        assert r.status_code == 404

    def test_project_tasks_engineer_forbidden(self, client, ann, eve):
        _, ann_headers = ann
        eve_id, eve_headers = eve
        project = create_project(client, ann_headers, assignedEngineers=[eve_id])
        r = client.get(f"/v1/auth/projects/{project['id']}/tasks", headers=eve_headers)
        assert r.status_code == 403
        assert r.json()["message"] == "Only managers can view project tasks"

    def test_delete_project_removes_its_tasks(self, client, ann, eve):
        _, headers = ann
        eve_id, eve_headers = eve
        project = create_project(client, headers)
        assign(client, headers, eve_id, project["id"])
        client.delete(f"/v1/auth/delete/projects/{project['id']}", headers=headers)
        assert client.get("/v1/auth/tasks", headers=eve_headers).json() == []
        assert client.get("/v1/auth/projects", headers=eve_headers).json() == []
