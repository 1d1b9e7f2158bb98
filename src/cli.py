#!/usr/bin/env python3
"""Command Line Interface for the BetterSide platform.

Usage:
    cd src
    python cli.py server                          # Start API server
    python cli.py init-db                         # Create tables
    python cli.py seed                            # Load demo accounts and data
    python cli.py marketing increment CP_ID --creatives 2
    python cli.py ads set-performance AD_ID --impressions 1000
    python cli.py info                            # Show configuration
"""
from __future__ import annotations

import sys
from typing import Optional

import typer
import uvicorn

from core.config import get_settings
from core.db import get_session
from core.exceptions import BetterSideError
from core.logging_config import get_logger, setup_logging

LOGGER = get_logger(__name__)
SETTINGS = get_settings()

app = typer.Typer(help="BetterSide platform CLI")
marketing_app = typer.Typer(help="Marketing counter commands")
ads_app = typer.Typer(help="Ad campaign commands")
app.add_typer(marketing_app, name="marketing")
app.add_typer(ads_app, name="ads")


@app.callback()
def main_callback(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose output"),
) -> None:
    """BetterSide - channel partner and developer panels."""
    log_level = "DEBUG" if verbose else SETTINGS.log_level
    setup_logging(level=log_level, json_format=SETTINGS.log_format == "json")


def _fail(exc: BetterSideError) -> None:
    typer.secho(f"✗ {exc.code}: {exc.message}", fg="red")
    raise typer.Exit(1)


# =============================================================================
# Database Commands
# =============================================================================


@app.command("init-db")
def init_database() -> None:
    """Create any missing tables."""
    from core.db import init_db

    result = init_db()
    if result["status"] == "error":
        typer.secho(f"✗ init-db failed: {result.get('error')}", fg="red")
        raise typer.Exit(1)

    created = result["tables_created"]
    typer.secho(f"✓ Database ready ({len(created)} tables created)", fg="green")
    for warning in result["warnings"]:
        typer.secho(f"  ! {warning}", fg="yellow")


@app.command("seed")
def seed(
    reset: bool = typer.Option(False, "--reset", help="Empty every table first"),
) -> None:
    """Load the demo CPs, developers, projects, leads, ads and counters."""
    from core.db import init_db
    from domain.seed import DEMO_PASSWORD, demo_accounts, reset_all, seed_demo_data

    init_db()
    try:
        with get_session() as session:
            if reset:
                reset_all(session)
            counts = seed_demo_data(session)
    except BetterSideError as exc:
        _fail(exc)

    if not counts["users"]:
        typer.echo("Demo data already present; use --reset to reload it.")
        return

    typer.secho(
        f"✓ Seeded {counts['users']} users, {counts['projects']} projects, "
        f"{counts['leads']} leads, {counts['ads']} ads",
        fg="green",
    )
    typer.echo("Demo credentials:")
    for label, email in demo_accounts().items():
        typer.echo(f"  {label}: {email} / {DEMO_PASSWORD}")


# =============================================================================
# Operator Commands
# =============================================================================


@marketing_app.command("increment")
def marketing_increment(
    cp_id: str = typer.Argument(..., help="Channel partner user id"),
    project_id: Optional[str] = typer.Option(None, "--project-id", help="Scope the counter to a project"),
    creatives: int = typer.Option(0, "--creatives", min=0, help="Creatives shared"),
    edms: int = typer.Option(0, "--edms", min=0, help="EDMs shared"),
) -> None:
    """Add to a CP's marketing counters."""
    from domain.marketing import MarketingService

    try:
        with get_session() as session:
            counter = MarketingService(session).increment(
                cp_id, project_id, creatives=creatives, edms=edms
            )
            totals = (counter.creatives_shared, counter.edms_shared)
    except BetterSideError as exc:
        _fail(exc)

    typer.secho(f"✓ Counters now: creatives={totals[0]} edms={totals[1]}", fg="green")


@ads_app.command("set-performance")
def ads_set_performance(
    ad_id: str = typer.Argument(..., help="Ad id"),
    impressions: Optional[int] = typer.Option(None, min=0),
    clicks: Optional[int] = typer.Option(None, min=0),
    leads: Optional[int] = typer.Option(None, min=0),
    spent: Optional[int] = typer.Option(None, "--spent", min=0, help="Amount spent (INR)"),
) -> None:
    """Record externally measured campaign performance."""
    from domain.ads import AdService

    try:
        with get_session() as session:
            ad = AdService(session).set_performance(
                ad_id, impressions=impressions, clicks=clicks, leads=leads, spent_amount=spent
            )
            summary = (
                f"impressions={ad.impressions} clicks={ad.clicks} "
                f"leads={ad.leads} spent={ad.spent_amount}"
            )
    except BetterSideError as exc:
        _fail(exc)

    typer.secho(f"✓ {ad_id}: {summary}", fg="green")


# =============================================================================
# Server Commands
# =============================================================================


@app.command("server")
def run_server(
    host: str = typer.Option(SETTINGS.api_host, help="Host to bind to"),
    port: int = typer.Option(SETTINGS.api_port, help="Port to bind to"),
    reload: bool = typer.Option(False, help="Enable auto-reload for development"),
) -> None:
    """Start the API server."""
    typer.echo(f"Starting API server on {host}:{port}...")
    uvicorn.run("api.app:app", host=host, port=port, reload=reload)


@app.command("dashboard")
def run_dashboard(
    port: int = typer.Option(8501, help="Port for Streamlit dashboard"),
) -> None:
    """Start the Streamlit panels."""
    import subprocess

    typer.echo(f"Starting Streamlit dashboard on port {port}...")
    subprocess.run([
        sys.executable, "-m", "streamlit", "run",
        "dashboard/streamlit_app.py",
        "--server.port", str(port),
        "--server.address", "0.0.0.0",
    ])


# =============================================================================
# Utility Commands
# =============================================================================


@app.command("info")
def show_info() -> None:
    """Show application configuration info."""
    typer.echo("BetterSide Configuration:")
    typer.echo(f"  Environment: {SETTINGS.environment}")
    typer.echo(f"  Database: {SETTINGS.database_url}")
    typer.echo(f"  Log Level: {SETTINGS.log_level} ({SETTINGS.log_format})")
    typer.echo(f"  Session Cookie: {SETTINGS.session_cookie_name} "
               f"(secure={SETTINGS.session_cookie_secure}, samesite={SETTINGS.session_cookie_samesite})")
    typer.echo(f"  Allowed Origins: {', '.join(SETTINGS.get_allowed_origins()) or '-'}")
    typer.echo(f"  Page Size: {SETTINGS.default_page_size} (max {SETTINGS.max_page_size})")
    typer.echo(f"  Admin Feed Enabled: {SETTINGS.is_admin_enabled()}")
    typer.echo(f"  API Base URL: {SETTINGS.api_base_url}")


if __name__ == "__main__":
    app()
