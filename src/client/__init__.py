"""HTTP client for the BetterSide API."""
from __future__ import annotations

from .api import ApiError, BetterSideClient, validate_lead_form

__all__ = ["ApiError", "BetterSideClient", "validate_lead_form"]
