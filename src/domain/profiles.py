"""CP display profile with fallback to the user row."""
from __future__ import annotations

from typing import Any, Dict, Mapping

from sqlalchemy import select
from sqlalchemy.orm import Session

from core import validators as v
from core.exceptions import ValidationError
from core.logging_config import get_logger
from core.models import CpProfile, User

LOGGER = get_logger(__name__)

PROFILE_FIELDS = ("full_name", "company_name", "phone", "city", "extra_json")


class ProfileService:
    def __init__(self, session: Session) -> None:
        self.session = session

    def _stored(self, user_id: str):
        return self.session.scalar(select(CpProfile).where(CpProfile.user_id == user_id))

    def get_profile(self, cp: User) -> Dict[str, Any]:
        """Return the stored profile, or the user's own fields when none exists."""
        profile = self._stored(cp.id)
        if profile is None:
            return {
                "id": None,
                "user_id": cp.id,
                "full_name": cp.full_name or "",
                "company_name": cp.company_name or "",
                "phone": cp.phone or "",
                "city": cp.city or "",
                "extra_json": None,
                "email": cp.email,
            }

        data = {name: getattr(profile, name) for name in PROFILE_FIELDS}
        data.update(id=profile.id, user_id=cp.id, email=cp.email)
        return data

    def update_profile(self, cp: User, values: Mapping[str, Any]) -> CpProfile:
        """
        Write the profile, creating it on first use.

        Fields missing on creation are copied from the user row.
        """
        phone = values.get("phone")
        if phone is not None and not v.is_phone(phone):
            raise ValidationError.from_fields({"phone": "Phone must be 10 digits"})

        profile = self._stored(cp.id)
        if profile is not None:
            for name in PROFILE_FIELDS:
                if values.get(name) is not None:
                    setattr(profile, name, values[name])
            self.session.flush()
            return profile

        profile = CpProfile(
            user_id=cp.id,
            full_name=values.get("full_name") or cp.full_name or "",
            company_name=values.get("company_name") or cp.company_name or "",
            phone=values.get("phone") or cp.phone or "",
            city=values.get("city") or cp.city or "",
            extra_json=values.get("extra_json"),
        )
        self.session.add(profile)
        self.session.flush()
        LOGGER.info(f"Profile created for CP {cp.id}")
        return profile
