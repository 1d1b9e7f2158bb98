"""API route modules."""
from __future__ import annotations

from . import (
    admin,
    ads,
    auth,
    cp_panel,
    cp_projects,
    developer_panel,
    health,
    leads,
    projects,
    users,
)

__all__ = [
    "admin",
    "ads",
    "auth",
    "cp_panel",
    "cp_projects",
    "developer_panel",
    "health",
    "leads",
    "projects",
    "users",
]
