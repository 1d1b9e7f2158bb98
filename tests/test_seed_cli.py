"""Tests for demo seeding and the command line."""
from __future__ import annotations

from contextlib import contextmanager
from datetime import timedelta

import pytest
from sqlalchemy import func, select
from typer.testing import CliRunner

from core.models import Ad, CpProfile, Lead, MarketingCounter, Project, User
from core.utils import utcnow
from domain.ads import AdService
from domain.seed import DEMO_PASSWORD, demo_accounts, reset_all, seed_demo_data


class TestSeed:
    def _count(self, session, model):
        return session.scalar(select(func.count()).select_from(model))

    def test_seed_creates_demo_data(self, db_session):
        counts = seed_demo_data(db_session)
        assert counts == {"users": 4, "projects": 2, "leads": 6, "ads": 4}

        assert self._count(db_session, User) == 4
        assert self._count(db_session, Project) == 2
        assert self._count(db_session, Lead) == 6
        assert self._count(db_session, Ad) == 4
        assert self._count(db_session, CpProfile) == 2
        assert self._count(db_session, MarketingCounter) == 3

    def test_seed_is_idempotent(self, db_session):
        seed_demo_data(db_session)
        assert seed_demo_data(db_session) == {"users": 0, "projects": 0, "leads": 0, "ads": 0}
        assert self._count(db_session, User) == 4

    def test_reset_then_reseed(self, db_session):
        seed_demo_data(db_session)
        reset_all(db_session)
        assert self._count(db_session, User) == 0
        assert seed_demo_data(db_session)["users"] == 4

    def test_demo_accounts_can_log_in(self, db_session, client):
        seed_demo_data(db_session)
        for email in demo_accounts().values():
            resp = client.post("/api/auth/login", json={"email": email, "password": DEMO_PASSWORD})
            assert resp.status_code == 200, email

    def test_seeded_developer_dashboard(self, db_session, client):
        seed_demo_data(db_session)
        client.post("/api/auth/login", json={
            "email": demo_accounts()["Developer 2"], "password": DEMO_PASSWORD,
        })
        stats = client.get("/api/developer/dashboard").json()
        assert stats["totalLeads"] == 4
        assert stats["convertedLeads"] == 1
        assert stats["approvedPartners"] == 2


class TestCli:
    @pytest.fixture(autouse=True)
    def quiet_logging(self, monkeypatch):
        import cli

        monkeypatch.setattr(cli, "setup_logging", lambda **kwargs: None)

    @pytest.fixture
    def cli_session(self, monkeypatch, db_session):
        import cli

        @contextmanager
        def test_session():
            yield db_session

        monkeypatch.setattr(cli, "get_session", test_session)
        return db_session

    def test_info(self):
        from cli import app

        result = CliRunner().invoke(app, ["info"])
        assert result.exit_code == 0
        assert "BetterSide Configuration" in result.output
        assert "Admin Feed Enabled: True" in result.output

    def test_marketing_increment_rejects_unknown_cp(self, cli_session):
        import cli

        result = CliRunner().invoke(cli.app, ["marketing", "increment", "nobody", "--creatives", "2"])
        assert result.exit_code == 1
        assert "NOT_FOUND" in result.output

    def test_marketing_increment(self, cli_session, cp_user):
        import cli

        result = CliRunner().invoke(
            cli.app, ["marketing", "increment", cp_user.id, "--creatives", "2", "--edms", "1"]
        )
        assert result.exit_code == 0, result.output
        assert "creatives=2 edms=1" in result.output

    def test_ads_set_performance(self, cli_session, cp_user):
        import cli

        ad = AdService(cli_session).create_ad(cp_user, {
            "title": "Weekend Site Visits",
            "budget": 30000,
            "start_date": utcnow(),
            "end_date": utcnow() + timedelta(days=10),
        })
        result = CliRunner().invoke(
            cli.app, ["ads", "set-performance", ad.id, "--impressions", "1200", "--clicks", "45"]
        )
        assert result.exit_code == 0, result.output
        assert "impressions=1200 clicks=45 leads=0 spent=0" in result.output
        assert (ad.impressions, ad.clicks) == (1200, 45)

    def test_ads_set_performance_unknown_ad(self, cli_session):
        import cli

        result = CliRunner().invoke(cli.app, ["ads", "set-performance", "missing", "--clicks", "1"])
        assert result.exit_code == 1
        assert "NOT_FOUND" in result.output
