"""Authentication routes: register, login, current user, logout."""
from __future__ import annotations

from typing import Annotated, Any, Dict, Optional

from fastapi import APIRouter, Depends, Response, status
from pydantic import BaseModel, BeforeValidator
from sqlalchemy.orm import Session

from api.auth_deps import get_current_user, session_cookie
from api.deps import get_db
from api.schemas import ApiModel, UserOut
from core.config import get_settings
from core.logging_config import get_logger
from core.models import User
from domain.auth import AuthService

router = APIRouter()
LOGGER = get_logger(__name__)
SETTINGS = get_settings()


# =============================================================================
# Request Models
# =============================================================================


def _as_text(value: Any) -> Any:
    if value is None or isinstance(value, str):
        return value
    return str(value)


# Numbers and other scalars arrive as text and are judged by the domain rules.
LaxText = Annotated[Optional[str], BeforeValidator(_as_text)]


class RegisterRequest(ApiModel):
    """
    Registration request body.

    Everything is optional here so the domain validator can report every
    violation at once instead of stopping at the first missing field.
    """

    role: LaxText = None
    full_name: LaxText = None
    email: LaxText = None
    phone: LaxText = None
    city: LaxText = None
    password: LaxText = None
    company_name: LaxText = None
    contact_person: LaxText = None
    gst_number: LaxText = None
    rera_number: LaxText = None
    is_rera_registered: Optional[bool] = False
    doc_link: LaxText = None
    budget: LaxText = None


class LoginRequest(BaseModel):
    email: str
    password: str


# =============================================================================
# Helpers
# =============================================================================


def _set_session_cookie(response: Response, raw_token: str) -> None:
    response.set_cookie(
        key=SETTINGS.session_cookie_name,
        value=raw_token,
        httponly=True,
        secure=SETTINGS.session_cookie_secure,
        samesite=SETTINGS.session_cookie_samesite,
        path="/",
    )


# =============================================================================
# Routes
# =============================================================================


@router.post("/register", response_model=UserOut, status_code=status.HTTP_201_CREATED)
def register(
    body: RegisterRequest,
    response: Response,
    db: Session = Depends(get_db),
) -> User:
    """Create an account and sign it in."""
    service = AuthService(db)
    user = service.register(body.model_dump())
    _set_session_cookie(response, service.start_session(user))
    return user


@router.post("/login", response_model=UserOut)
def login(
    body: LoginRequest,
    response: Response,
    db: Session = Depends(get_db),
) -> User:
    """
    Check credentials and start a session.

    Unknown email and wrong password produce the same 401.
    """
    service = AuthService(db)
    user = service.authenticate(body.email, body.password)
    _set_session_cookie(response, service.start_session(user))
    LOGGER.info(f"User logged in: {user.id}")
    return user


@router.get("/me", response_model=UserOut)
def get_me(current_user: User = Depends(get_current_user)) -> User:
    return current_user


@router.post("/logout")
def logout(
    response: Response,
    token: Optional[str] = Depends(session_cookie),
    db: Session = Depends(get_db),
) -> Dict[str, str]:
    """Revoke the session row and clear the cookie."""
    AuthService(db).end_session(token)
    response.delete_cookie(SETTINGS.session_cookie_name, path="/")
    return {"message": "Logged out successfully"}
