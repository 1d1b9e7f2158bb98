"""Account domain service: registration, login and server-side sessions."""
from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from core import validators as v
from core.auth import create_session_token, hash_password, hash_session_token, verify_password
from core.exceptions import ConflictError, ForbiddenError, UnauthorizedError, ValidationError
from core.logging_config import get_logger
from core.models import User, UserRole, UserSession
from core.utils import utcnow

LOGGER = get_logger(__name__)

# Deliberately identical for unknown email and wrong password.
INVALID_CREDENTIALS = "Invalid email or password"

# Columns a registration payload may populate.
REGISTRATION_FIELDS = (
    "full_name",
    "email",
    "phone",
    "city",
    "role",
    "company_name",
    "contact_person",
    "gst_number",
    "rera_number",
    "is_rera_registered",
    "doc_link",
    "budget",
)


def _clean(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def validate_registration(data: Mapping[str, Any]) -> Dict[str, str]:
    """
    Check a registration payload and return every violation.

    Keys of the returned dict are the API (camelCase) field names. An empty
    dict means the payload is valid.
    """
    errors: Dict[str, str] = {}
    role = _clean(data.get("role"))
    full_name = _clean(data.get("full_name"))
    company_name = _clean(data.get("company_name"))
    contact_person = _clean(data.get("contact_person"))

    if role not in {r.value for r in UserRole}:
        errors["role"] = "Role must be one of: buyer, cp, developer."

    if role == UserRole.DEVELOPER.value:
        if not v.has_min_length(company_name, 3):
            errors["companyName"] = "Developer/Group Name must be at least 3 characters."
        if not v.has_min_length(contact_person, 3):
            errors["contactPerson"] = "Contact Person Name must be at least 3 characters."
    else:
        if not v.has_min_length(full_name, 3):
            errors["fullName"] = "Name must be at least 3 characters."

    if role == UserRole.CP.value and not v.has_min_length(company_name, 2):
        errors["companyName"] = "Company Name must be at least 2 characters."

    if not v.is_mobile(_clean(data.get("phone"))):
        errors["phone"] = "Please enter a valid 10-digit mobile number."

    if not v.is_email(_clean(data.get("email"))):
        errors["email"] = "Please enter a valid email address."

    if not v.is_city(_clean(data.get("city"))):
        errors["city"] = "Please enter a valid city name (letters only, min 3 chars)."

    password = data.get("password") or ""
    if len(password) < v.MIN_PASSWORD_LENGTH:
        errors["password"] = f"Password must be at least {v.MIN_PASSWORD_LENGTH} characters."

    budget = _clean(data.get("budget"))
    if role == UserRole.BUYER.value and budget is not None and not v.is_non_negative_number(budget):
        errors["budget"] = "Please enter a valid budget amount."

    if role == UserRole.DEVELOPER.value:
        if not v.is_gst(_clean(data.get("gst_number"))):
            errors["gstNumber"] = "GST number must be 15 characters (letters and numbers only)."
        if data.get("is_rera_registered") and not v.is_rera(_clean(data.get("rera_number"))):
            errors["reraNumber"] = "RERA number format looks invalid. Please check and enter full RERA ID."

    doc_link = _clean(data.get("doc_link"))
    if doc_link is not None and not v.is_http_url(doc_link):
        errors["docLink"] = "Please enter a valid URL (starting with http:// or https://)"

    return errors


class AuthService:
    """Registration, credential checks and session lifecycle."""

    def __init__(self, session: Session) -> None:
        self.session = session

    # ------------------------------------------------------------------
    # Users
    # ------------------------------------------------------------------

    def get_user_by_email(self, email: str) -> Optional[User]:
        normalized = (email or "").strip().lower()
        return self.session.scalar(select(User).where(User.email == normalized))

    def list_users_by_role(self, role: str) -> List[User]:
        stmt = select(User).where(User.role == role).order_by(User.created_at.desc())
        return list(self.session.scalars(stmt))

    def register(self, data: Mapping[str, Any]) -> User:
        """
        Validate and create a user.

        Raises:
            ValidationError: listing every invalid field. Nothing is written.
            ConflictError: if the email is already registered.
        """
        errors = validate_registration(data)
        if errors:
            raise ValidationError.from_fields(errors)

        email = _clean(data["email"]).lower()
        if self.get_user_by_email(email) is not None:
            raise ConflictError("Email already registered")

        values = {name: _clean(data.get(name)) for name in REGISTRATION_FIELDS}
        values["email"] = email
        values["is_rera_registered"] = bool(data.get("is_rera_registered"))
        if values["role"] == UserRole.DEVELOPER.value and not values["full_name"]:
            values["full_name"] = values["contact_person"]

        user = User(hashed_password=hash_password(data["password"]), **values)
        self.session.add(user)
        self.session.flush()

        LOGGER.info(f"User registered: {user.id} ({user.role})")
        return user

    def authenticate(self, email: str, password: str) -> User:
        """
        Check credentials.

        Unknown email and wrong password raise the same error so the
        response cannot be used to probe which accounts exist.
        """
        user = self.get_user_by_email(email)
        if user is None or not verify_password(password, user.hashed_password):
            LOGGER.warning("Failed login attempt")
            raise UnauthorizedError(INVALID_CREDENTIALS)

        if not user.is_active:
            raise ForbiddenError("Account is deactivated")

        return user

    # ------------------------------------------------------------------
    # Sessions
    # ------------------------------------------------------------------

    def start_session(self, user: User) -> str:
        """Bind a new server-side session to the user; returns the raw cookie token."""
        raw_token, token_hash = create_session_token()
        self.session.add(UserSession(user_id=user.id, token_hash=token_hash))
        self.session.flush()
        LOGGER.info(f"Session started for user {user.id}")
        return raw_token

    def resolve_session(self, raw_token: Optional[str]) -> Optional[User]:
        """Return the active user bound to a cookie token, or None."""
        if not raw_token:
            return None

        stored = self.session.scalar(
            select(UserSession).where(
                UserSession.token_hash == hash_session_token(raw_token),
                UserSession.revoked.is_(False),
            )
        )
        if stored is None:
            return None

        user = self.session.get(User, stored.user_id)
        if user is None or not user.is_active:
            return None

        stored.last_seen_at = utcnow()
        return user

    def end_session(self, raw_token: Optional[str]) -> bool:
        """Revoke a session. Returns False when the token was unknown."""
        if not raw_token:
            return False

        stored = self.session.scalar(
            select(UserSession).where(UserSession.token_hash == hash_session_token(raw_token))
        )
        if stored is None:
            return False

        stored.revoked = True
        self.session.flush()
        LOGGER.info(f"Session ended for user {stored.user_id}")
        return True
