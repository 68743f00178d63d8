"""
Tests for bearer authentication, module permissions and the audit trail.
"""

from backend.app.auth.jwt import create_access_token
from inventory_core.config import get_settings
from inventory_core.models import Audit, User

API = "/api/v1"


class TestAuthentication:
    def test_missing_token(self, test_app_client):
        client, _ = test_app_client
        resp = client.post(f"{API}/countries/list", json={})
        assert resp.status_code == 401
        assert resp.json()["detail"] == "Not authenticated"
        assert resp.headers["WWW-Authenticate"] == "Bearer"

    def test_invalid_token(self, test_app_client):
        client, _ = test_app_client
        resp = client.post(
            f"{API}/countries/list", json={}, headers={"Authorization": "Bearer not-a-jwt"}
        )
        assert resp.status_code == 401
        assert resp.json()["detail"] == "Invalid authentication credentials"

    def test_token_without_numeric_subject(self, test_app_client):
        client, _ = test_app_client
        token = create_access_token({"sub": "admin"})
        resp = client.post(f"{API}/countries/list", json={}, headers={"Authorization": f"Bearer {token}"})
        assert resp.status_code == 401

    def test_unknown_user(self, test_app_client):
        client, _ = test_app_client
        token = create_access_token({"sub": "404"})
        resp = client.post(f"{API}/countries/list", json={}, headers={"Authorization": f"Bearer {token}"})
        assert resp.status_code == 401
        assert resp.json()["detail"] == "User not found"

    def test_inactive_user(self, test_app_client, user_headers):
        client, _ = test_app_client
        headers = user_headers("inventory_countries", active=False)
        resp = client.post(f"{API}/countries/list", json={}, headers=headers)
        assert resp.status_code == 401
        assert resp.json()["detail"] == "User not found"


class TestModulePermissions:
    def test_user_without_module_is_forbidden(self, test_app_client, user_headers):
        client, _ = test_app_client
        headers = user_headers("inventory_buses")
        resp = client.post(f"{API}/countries/list", json={}, headers=headers)
        assert resp.status_code == 403
        assert resp.json() == {"detail": "Access denied: insufficient permissions", "status_code": 403}

    def test_module_grants_access(self, test_app_client, user_headers):
        client, _ = test_app_client
        headers = user_headers("inventory_countries")

        resp = client.post(f"{API}/countries/", json={"name": "Mexico", "code": "MX"}, headers=headers)
        assert resp.status_code == 201
        assert client.post(f"{API}/countries/list", json={}, headers=headers).status_code == 200

    def test_related_module_may_list_but_not_page(self, test_app_client, user_headers):
        client, _ = test_app_client
        headers = user_headers("inventory_states")

        assert client.post(f"{API}/countries/list/all", json={}, headers=headers).status_code == 200
        assert client.post(f"{API}/countries/list", json={}, headers=headers).status_code == 403
        assert client.post(
            f"{API}/countries/", json={"name": "Mexico", "code": "MX"}, headers=headers
        ).status_code == 403

    def test_inactive_role_grants_nothing(self, test_app_client, user_headers):
        client, session_factory = test_app_client
        headers = user_headers("inventory_countries")

        session = session_factory()
        user = session.query(User).filter(User.username == "user-1").one()
        user.roles[0].active = False
        session.commit()
        session.close()

        assert client.post(f"{API}/countries/list", json={}, headers=headers).status_code == 403

    def test_audits_are_admin_only(self, authorized_client, user_headers):
        client, admin_headers, _ = authorized_client
        headers = user_headers("inventory_countries", "users_users", "users_roles")

        assert client.post(f"{API}/audits/list", json={}, headers=headers).status_code == 403
        assert client.post(f"{API}/audits/list", json={}, headers=admin_headers).status_code == 200

    def test_admin_bypasses_modules(self, authorized_client):
        client, headers, _ = authorized_client
        resp = client.post(f"{API}/drivers/list", json={}, headers=headers)
        assert resp.status_code == 200


class TestAudit:
    def test_successful_call_is_audited(self, authorized_client):
        client, headers, session_factory = authorized_client

        client.post(f"{API}/countries/", json={"name": "Mexico", "code": "MX"}, headers=headers)

        session = session_factory()
        audits = session.query(Audit).all()
        assert len(audits) == 1
        assert audits[0].endpoint == "inventory:createCountry"
        assert audits[0].method == "POST"
        assert audits[0].path == "/api/v1/countries/"
        assert audits[0].payload == {"name": "Mexico", "code": "MX"}
        session.close()

    def test_failed_call_is_not_audited(self, authorized_client):
        client, headers, session_factory = authorized_client

        resp = client.get(f"{API}/countries/12", headers=headers)
        assert resp.status_code == 404

        session = session_factory()
        assert session.query(Audit).count() == 0
        session.close()

    def test_forbidden_call_is_not_audited(self, test_app_client, user_headers):
        client, session_factory = test_app_client
        headers = user_headers("inventory_buses")

        client.post(f"{API}/countries/list", json={}, headers=headers)

        session = session_factory()
        assert session.query(Audit).count() == 0
        session.close()

    def test_audits_listed_newest_first(self, authorized_client):
        client, headers, _ = authorized_client
        client.post(f"{API}/countries/", json={"name": "Mexico", "code": "MX"}, headers=headers)
        client.post(f"{API}/countries/list", json={}, headers=headers)

        resp = client.post(f"{API}/audits/list", json={"pageSize": 10}, headers=headers)
        assert resp.status_code == 200
        endpoints = [a["endpoint"] for a in resp.json()["data"]]
        assert endpoints[:2] == ["inventory:listCountriesPaginated", "inventory:createCountry"]

    def test_disabled_audit(self, authorized_client, monkeypatch):
        client, headers, session_factory = authorized_client
        monkeypatch.setattr(get_settings(), "audit_enabled", False)

        client.post(f"{API}/countries/list", json={}, headers=headers)

        session = session_factory()
        assert session.query(Audit).count() == 0
        session.close()
