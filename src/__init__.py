"""Top-level package for the BetterSide application."""
from __future__ import annotations

__version__ = "1.0.0"

__all__ = [
    "api",
    "client",
    "core",
    "dashboard",
    "domain",
]
