import pytest
from fastapi import HTTPException
from fastapi.testclient import TestClient

from admin_panel.main import app
from admin_panel.modules.auth.schemas import LoginRequest
from admin_panel.modules.auth.service import AuthService, SessionUserCache, clear_auth_cache

pytestmark = pytest.mark.screens


class TestSessionGate:

    def test_no_session_shows_login_without_table_calls(self, client, fake_supabase):
        response = client.get("/")
        assert response.status_code == 200
        assert 'id="login-form"' in response.text
        assert fake_supabase.calls == []

    def test_protected_screen_redirects_to_gate(self, client, fake_supabase):
        response = client.get("/tips", follow_redirects=False)
        assert response.status_code == 303
        assert response.headers["location"] == "/"
        assert fake_supabase.calls == []

    def test_failed_sign_in_keeps_form_with_backend_text(self, client, admin):
        response = client.post("/login", data={"email": admin["email"], "password": "wrong"})
        assert response.status_code == 401
        assert 'id="login-form"' in response.text
        assert "Invalid login credentials" in response.text
        assert 'value="boss@truescan.app"' in response.text

    def test_invalid_email_is_rejected_before_backend(self, client, fake_supabase):
        response = client.post("/login", data={"email": "not-an-email", "password": "x"})
        assert response.status_code == 422
        assert "Enter a valid email and password." in response.text

    def test_sign_in_shows_dashboard(self, client, admin):
        response = client.post("/login", data={"email": admin["email"], "password": admin["password"]})
        assert response.status_code == 200
        assert 'id="total-steps"' in response.text
        assert 'id="login-form"' not in response.text

    def test_non_admin_account_refused(self, client, fake_supabase):
        fake_supabase.auth.add_account("walker@example.com", "pass1234")
        response = client.post(
            "/login", data={"email": "walker@example.com", "password": "pass1234"}, follow_redirects=False,
        )
        assert response.status_code == 403
        assert "does not have admin access" in response.text
        walker = fake_supabase.auth.accounts["walker@example.com"][1]
        assert fake_supabase.auth.sign_outs == [(walker.id, "local")]
        assert 'id="login-form"' in client.get("/").text

    def test_logout_returns_to_gate(self, logged_in, fake_supabase, admin):
        response = logged_in.post("/logout", follow_redirects=False)
        assert response.status_code == 303
        assert fake_supabase.auth.sign_outs == [(admin["id"], "local")]
        assert not [u for u in fake_supabase.auth.refresh_tokens.values() if u.id == admin["id"]]
        assert 'id="login-form"' in logged_in.get("/").text

    def test_logout_leaves_other_admins_signed_in(self, client, fake_supabase, admin):
        second = fake_supabase.auth.add_account("second@truescan.app", "pass5678")
        fake_supabase.seed("admin_users", {
            "id": second.id, "email": second.email, "role": "admin", "is_active": True,
        })
        other_browser = TestClient(app)
        client.post("/login", data={"email": admin["email"], "password": admin["password"]}, follow_redirects=False)
        other_browser.post("/login", data={"email": second.email, "password": "pass5678"}, follow_redirects=False)

        client.post("/logout", follow_redirects=False)
        fake_supabase.auth.expire_access(second.id)
        clear_auth_cache()

        assert 'id="total-steps"' in other_browser.get("/").text
        assert 'id="login-form"' in client.get("/").text
        assert fake_supabase.auth.sign_outs == [(admin["id"], "local")]

    def test_expired_token_is_refreshed(self, logged_in, fake_supabase):
        fake_supabase.auth.tokens.clear()
        clear_auth_cache()
        response = logged_in.get("/")
        assert 'id="total-steps"' in response.text

    def test_revoked_session_falls_back_to_gate(self, logged_in, fake_supabase):
        fake_supabase.auth.tokens.clear()
        fake_supabase.auth.refresh_tokens.clear()
        clear_auth_cache()
        assert 'id="login-form"' in logged_in.get("/").text


class TestAuthService:

    def test_current_user_is_cached(self, fake_supabase, admin):
        clear_auth_cache()
        service = AuthService(fake_supabase)
        tokens = service.login(LoginRequest(email=admin["email"], password=admin["password"]))
        first = service.get_current_user(tokens.access_token)
        fake_supabase.auth.tokens.clear()
        assert service.get_current_user(tokens.access_token) == first
        clear_auth_cache()

    def test_logout_drops_cached_user(self, fake_supabase, admin):
        clear_auth_cache()
        service = AuthService(fake_supabase)
        tokens = service.login(LoginRequest(email=admin["email"], password=admin["password"]))
        service.get_current_user(tokens.access_token)
        service.logout(tokens.access_token)
        fake_supabase.auth.tokens.clear()
        with pytest.raises(HTTPException):
            service.get_current_user(tokens.access_token)


@pytest.mark.unit
class TestSessionUserCache:

    def test_full_cache_evicts_oldest(self):
        cache = SessionUserCache(ttl_seconds=60, max_size=2)
        for token in ("a", "b", "c"):
            cache.put(token, {"id": token})
        assert cache.get("a") is None
        assert cache.get("b") == {"id": "b"}
        assert cache.get("c") == {"id": "c"}

    def test_expired_entries_make_room(self, monkeypatch):
        clock = [100.0]
        monkeypatch.setattr("admin_panel.modules.auth.service.time.monotonic", lambda: clock[0])
        cache = SessionUserCache(ttl_seconds=10, max_size=2)
        cache.put("a", {"id": "a"})
        cache.put("b", {"id": "b"})
        clock[0] = 200.0
        cache.put("c", {"id": "c"})
        assert cache.get("c") == {"id": "c"}
        assert len(cache._entries) == 1

    def test_keeps_working_after_many_sessions(self):
        cache = SessionUserCache(ttl_seconds=60, max_size=500)
        for i in range(1200):
            cache.put(f"token-{i}", {"id": i})
        assert cache.get("token-1199") == {"id": 1199}
