"""Core module exports."""
from __future__ import annotations

from core.config import Settings, get_settings, reload_settings
from core.db import Base, SessionLocal, get_session, init_db
from core.exceptions import (
    BetterSideError,
    ValidationError,
    UnauthorizedError,
    ForbiddenError,
    NotFoundError,
    ConflictError,
    ConfigurationError,
)
from core.logging_config import (
    setup_logging,
    get_logger,
    get_context_logger,
    JSONFormatter,
    ContextLogger,
)
from core.models import (
    User,
    UserSession,
    Project,
    CpProjectMap,
    Lead,
    Ad,
    CpProfile,
    MarketingCounter,
    MarketingRequest,
)

__all__ = [
    # Config
    "Settings",
    "get_settings",
    "reload_settings",
    # Database
    "Base",
    "SessionLocal",
    "get_session",
    "init_db",
    # Models
    "User",
    "UserSession",
    "Project",
    "CpProjectMap",
    "Lead",
    "Ad",
    "CpProfile",
    "MarketingCounter",
    "MarketingRequest",
    # Exceptions
    "BetterSideError",
    "ValidationError",
    "UnauthorizedError",
    "ForbiddenError",
    "NotFoundError",
    "ConflictError",
    "ConfigurationError",
    # Logging
    "setup_logging",
    "get_logger",
    "get_context_logger",
    "JSONFormatter",
    "ContextLogger",
]
