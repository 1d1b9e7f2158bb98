"""Domain layer for BetterSide business logic.

Routes, the CLI and the seed script all go through these services; none of
them touch the ORM session directly for writes.
"""
from __future__ import annotations

from .ads import AdService
from .assignments import AssignmentService
from .auth import AuthService, validate_registration
from .dashboard import DashboardService
from .leads import LeadPage, LeadService
from .marketing import MarketingService
from .profiles import ProfileService
from .projects import ProjectService

__all__ = [
    "AdService",
    "AssignmentService",
    "AuthService",
    "validate_registration",
    "DashboardService",
    "LeadPage",
    "LeadService",
    "MarketingService",
    "ProfileService",
    "ProjectService",
]
