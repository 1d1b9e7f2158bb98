"""User directory routes."""
from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from api.auth_deps import require_developer
from api.deps import get_db
from api.schemas import CpSummary
from core.models import User, UserRole
from domain.auth import AuthService

router = APIRouter()


@router.get("/cps", response_model=List[CpSummary])
def list_channel_partners(
    developer: User = Depends(require_developer),
    db: Session = Depends(get_db),
) -> List[User]:
    """Channel partners a developer can assign to projects."""
    return AuthService(db).list_users_by_role(UserRole.CP.value)
