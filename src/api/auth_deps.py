"""Authentication dependencies for FastAPI routes.

Browser principals are resolved from the session cookie on every request;
the role stored on the user row is the only role that counts. The operator
feed authenticates with a static bearer token instead.
"""
from __future__ import annotations

from typing import Optional

from fastapi import Depends, Request
from fastapi.security import APIKeyCookie, HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from api.deps import get_db
from core.auth import admin_token_matches
from core.config import get_settings
from core.exceptions import ForbiddenError, UnauthorizedError
from core.logging_config import get_context_logger
from core.models import User, UserRole
from domain.auth import AuthService

SETTINGS = get_settings()

session_cookie = APIKeyCookie(name=SETTINGS.session_cookie_name, auto_error=False)
admin_bearer = HTTPBearer(auto_error=False)


def get_current_user(
    request: Request,
    token: Optional[str] = Depends(session_cookie),
    db: Session = Depends(get_db),
) -> User:
    """Return the user bound to the session cookie. Raises 401 otherwise."""
    user = AuthService(db).resolve_session(token)
    if user is None:
        raise UnauthorizedError()
    request.state.user_id = user.id
    return user


def _require_role(user: User, role: UserRole, label: str) -> User:
    if user.role != role.value:
        get_context_logger(__name__, user_id=user.id, role=user.role).warning(
            f"{label} role required"
        )
        raise ForbiddenError(f"Access denied. {label} role required")
    return user


def require_cp(current_user: User = Depends(get_current_user)) -> User:
    return _require_role(current_user, UserRole.CP, "CP")


def require_developer(current_user: User = Depends(get_current_user)) -> User:
    return _require_role(current_user, UserRole.DEVELOPER, "Developer")


def require_admin(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(admin_bearer),
) -> None:
    """
    Check the operator bearer token.

    With ADMIN_TOKEN unset every call is refused.
    """
    presented = credentials.credentials if credentials else None
    if not admin_token_matches(presented, get_settings().admin_token):
        raise ForbiddenError("Admin access required")
