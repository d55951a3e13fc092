"""
Test suite for user endpoints.

Tests cover:
- Admin-only listing and creation
- Same-user-or-admin access to a user's record
- Applying to jobs
"""

import pytest

from jobly.core.security import create_access_token, decode_token


@pytest.fixture
def u2_headers():
    """Auth headers for a user who is neither u1 nor an admin"""
    return {"Authorization": f"Bearer {create_access_token('u2', False)}"}


NEW_USER = {
    "username": "u-new",
    "firstName": "First-new",
    "lastName": "Last-new",
    "password": "password-new",
    "email": "new@example.com",
    "isAdmin": False,
}


class TestUserCreation:
    """Tests for POST /users"""

    def test_create_as_admin(self, client, admin_headers):
        response = client.post("/api/v1/users/", json=NEW_USER, headers=admin_headers)

        assert response.status_code == 201
        data = response.json()
        assert data["user"] == {
            "username": "u-new",
            "firstName": "First-new",
            "lastName": "Last-new",
            "email": "new@example.com",
            "isAdmin": False,
        }
        assert decode_token(data["token"])["sub"] == "u-new"

    def test_create_admin_as_admin(self, client, admin_headers):
        response = client.post("/api/v1/users/", json=dict(NEW_USER, isAdmin=True), headers=admin_headers)

        assert response.status_code == 201
        assert response.json()["user"]["isAdmin"] is True
        assert decode_token(response.json()["token"])["is_admin"] is True

    def test_create_as_non_admin(self, client, u1_headers):
        response = client.post("/api/v1/users/", json=NEW_USER, headers=u1_headers)

        assert response.status_code == 403

    def test_create_invalid_email(self, client, admin_headers):
        response = client.post("/api/v1/users/", json=dict(NEW_USER, email="not-an-email"), headers=admin_headers)

        assert response.status_code == 422


class TestUserListing:
    """Tests for GET /users"""

    def test_list_as_admin(self, client, admin_headers):
        response = client.get("/api/v1/users/", headers=admin_headers)

        assert response.status_code == 200
        users = response.json()["users"]
        assert [u["username"] for u in users] == ["admin", "u1"]
        assert users[0]["isAdmin"] is True
        assert users[1]["jobs"] == []

    def test_list_as_non_admin(self, client, u1_headers):
        response = client.get("/api/v1/users/", headers=u1_headers)

        assert response.status_code == 403

    def test_list_anonymous(self, client):
        response = client.get("/api/v1/users/")

        assert response.status_code == 401


class TestUserRecord:
    """Tests for GET/PATCH/DELETE /users/{username}"""

    def test_get_self(self, client, u1_headers):
        response = client.get("/api/v1/users/u1", headers=u1_headers)

        assert response.status_code == 200
        assert response.json()["user"] == {
            "username": "u1",
            "firstName": "U1F",
            "lastName": "U1L",
            "email": "user1@example.com",
            "isAdmin": False,
            "jobs": [],
        }

    def test_get_as_admin(self, client, admin_headers):
        response = client.get("/api/v1/users/u1", headers=admin_headers)

        assert response.status_code == 200

    def test_get_other_user(self, client, u2_headers):
        response = client.get("/api/v1/users/u1", headers=u2_headers)

        assert response.status_code == 403

    def test_get_not_found(self, client, admin_headers):
        response = client.get("/api/v1/users/nope", headers=admin_headers)

        assert response.status_code == 404
        assert response.json()["detail"] == "No user: nope"

    def test_update_self(self, client, u1_headers):
        response = client.patch("/api/v1/users/u1", json={"firstName": "New"}, headers=u1_headers)

        assert response.status_code == 200
        assert response.json()["user"]["firstName"] == "New"
        assert response.json()["user"]["lastName"] == "U1L"

    def test_update_password(self, client, u1_headers):
        response = client.patch("/api/v1/users/u1", json={"password": "new-password"}, headers=u1_headers)
        assert response.status_code == 200

        login = client.post("/api/v1/auth/token", json={"username": "u1", "password": "new-password"})
        assert login.status_code == 200

    def test_update_cannot_grant_admin(self, client, u1_headers):
        response = client.patch("/api/v1/users/u1", json={"isAdmin": True}, headers=u1_headers)

        assert response.status_code == 422

    def test_update_empty_body(self, client, u1_headers):
        response = client.patch("/api/v1/users/u1", json={}, headers=u1_headers)

        assert response.status_code == 400
        assert response.json()["detail"] == "No data"

    @pytest.mark.parametrize("field", ["firstName", "lastName", "email", "password"])
    def test_update_null_field(self, client, u1_headers, field):
        response = client.patch("/api/v1/users/u1", json={field: None}, headers=u1_headers)

        assert response.status_code == 400
        assert response.json()["detail"] == f"'{field}' cannot be null"

    def test_update_other_user(self, client, u2_headers):
        response = client.patch("/api/v1/users/u1", json={"firstName": "X"}, headers=u2_headers)

        assert response.status_code == 403

    def test_delete_self(self, client, u1_headers, admin_headers):
        response = client.delete("/api/v1/users/u1", headers=u1_headers)

        assert response.status_code == 200
        assert response.json() == {"deleted": "u1"}
        assert client.get("/api/v1/users/u1", headers=admin_headers).status_code == 404

    def test_delete_other_user(self, client, u2_headers):
        response = client.delete("/api/v1/users/u1", headers=u2_headers)

        assert response.status_code == 403


class TestApplications:
    """Tests for POST /users/{username}/jobs/{id}"""

    def test_apply(self, client, u1_headers, job_ids):
        job_id = job_ids["Software Engineer II"]

        response = client.post(f"/api/v1/users/u1/jobs/{job_id}", headers=u1_headers)

        assert response.status_code == 200
        assert response.json() == {"applied": job_id}
        user = client.get("/api/v1/users/u1", headers=u1_headers).json()["user"]
        assert user["jobs"] == [job_id]

    def test_apply_twice(self, client, u1_headers, job_ids):
        job_id = job_ids["Software Engineer II"]
        client.post(f"/api/v1/users/u1/jobs/{job_id}", headers=u1_headers)

        response = client.post(f"/api/v1/users/u1/jobs/{job_id}", headers=u1_headers)

        assert response.status_code == 400
        assert response.json()["detail"] == "Can't apply to the same job twice"

    def test_apply_unknown_job(self, client, u1_headers):
        response = client.post("/api/v1/users/u1/jobs/0", headers=u1_headers)

        assert response.status_code == 400
        assert response.json()["detail"] == "No job with id of: 0"

    def test_apply_non_numeric_job(self, client, u1_headers):
        response = client.post("/api/v1/users/u1/jobs/abc", headers=u1_headers)

        assert response.status_code == 422

    def test_apply_for_other_user(self, client, u2_headers, job_ids):
        response = client.post(f"/api/v1/users/u1/jobs/{job_ids['Intern']}", headers=u2_headers)

        assert response.status_code == 403

    def test_admin_applies_for_user(self, client, admin_headers, job_ids):
        response = client.post(f"/api/v1/users/u1/jobs/{job_ids['Intern']}", headers=admin_headers)

        assert response.status_code == 200
