"""Test configuration loading and the API error envelope."""
from __future__ import annotations

import pytest
from fastapi.testclient import TestClient
from pydantic import ValidationError as SettingsError

from api.app import create_app
from core.config import PROJECT_ROOT, Settings, _resolve_database_url, get_settings
from core.exceptions import ConfigurationError, ConflictError, ValidationError


class TestSettings:
    def test_settings_load(self):
        settings = get_settings()
        assert settings.log_level in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        assert settings.session_cookie_name
        assert settings.default_page_size <= settings.max_page_size

    def test_cookie_defaults(self):
        settings = Settings()
        assert settings.session_cookie_samesite in {"lax", "strict", "none"}
        assert settings.session_cookie_name == "betterside_sid"

    def test_samesite_none_requires_secure(self):
        with pytest.raises(SettingsError):
            Settings(SESSION_COOKIE_SAMESITE="none", SESSION_COOKIE_SECURE=False)
        settings = Settings(SESSION_COOKIE_SAMESITE="None", SESSION_COOKIE_SECURE=True)
        assert settings.session_cookie_samesite == "none"

    def test_invalid_log_level(self):
        with pytest.raises(SettingsError):
            Settings(LOG_LEVEL="chatty")

    def test_log_level_normalized(self):
        assert Settings(LOG_LEVEL="debug").log_level == "DEBUG"

    def test_allowed_origins_parsed(self):
        settings = Settings(ALLOWED_ORIGINS=" http://a.test , ,http://b.test")
        assert settings.get_allowed_origins() == ["http://a.test", "http://b.test"]

    def test_admin_feed_disabled_without_token(self):
        assert Settings(ADMIN_TOKEN="").is_admin_enabled() is False
        assert Settings(ADMIN_TOKEN="t0ken").is_admin_enabled() is True

    def test_clamp_page_size(self):
        settings = Settings(DEFAULT_PAGE_SIZE=20, MAX_PAGE_SIZE=100)
        assert settings.clamp_page_size(None) == 20
        assert settings.clamp_page_size(0) == 20
        assert settings.clamp_page_size(5) == 5
        assert settings.clamp_page_size(500) == 100

    def test_relative_sqlite_url_is_anchored(self):
        resolved = _resolve_database_url("sqlite:///./data/app.db")
        assert resolved == f"sqlite:///{(PROJECT_ROOT / 'data/app.db').as_posix()}"
        assert _resolve_database_url("sqlite:///:memory:") == "sqlite:///:memory:"
        assert _resolve_database_url("postgresql://u:p@db/app") == "postgresql://u:p@db/app"


class TestErrorEnvelope:
    @pytest.fixture
    def failing_client(self):
        app = create_app()

        @app.get("/boom")
        def boom():
            raise RuntimeError("secret internals")

        @app.get("/misconfigured")
        def misconfigured():
            raise ConfigurationError("DATABASE_URL points nowhere")

        @app.get("/conflict")
        def conflict():
            raise ConflictError("Already there")

        @app.get("/invalid")
        def invalid():
            raise ValidationError.from_fields({"name": "Required"})

        return TestClient(app, raise_server_exceptions=False)

    def test_unhandled_exception_is_generic_500(self, failing_client):
        resp = failing_client.get("/boom")
        assert resp.status_code == 500
        assert resp.json() == {"error": "Internal server error", "code": "SERVER_ERROR"}

    def test_server_side_app_error_hides_message(self, failing_client):
        resp = failing_client.get("/misconfigured")
        assert resp.status_code == 500
        assert "DATABASE_URL" not in resp.text

    def test_client_errors_keep_message(self, failing_client):
        resp = failing_client.get("/conflict")
        assert resp.status_code == 409
        assert resp.json() == {"error": "Already there", "code": "CONFLICT"}

    def test_validation_error_lists_fields(self, failing_client):
        body = failing_client.get("/invalid").json()
        assert body["code"] == "VALIDATION_ERROR"
        assert body["fields"] == {"name": "Required"}
        assert body["error"] == "Validation failed: name: Required"

    def test_unknown_route(self, failing_client):
        resp = failing_client.get("/api/nowhere")
        assert resp.status_code == 404
        assert resp.json()["code"] == "NOT_FOUND"

    def test_wrong_method(self, failing_client):
        resp = failing_client.delete("/health")
        assert resp.status_code == 405
        assert resp.json()["code"] == "METHOD_NOT_ALLOWED"

    def test_malformed_json_body(self, failing_client):
        resp = failing_client.post(
            "/api/auth/login", content="{not json", headers={"Content-Type": "application/json"}
        )
        assert resp.status_code == 400
        assert resp.json()["code"] == "VALIDATION_ERROR"
