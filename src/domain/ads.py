"""Ad campaign domain service."""
from __future__ import annotations

from typing import Any, Dict, List, Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from core.exceptions import ForbiddenError, NotFoundError, ValidationError
from core.logging_config import get_context_logger, get_logger
from core.models import Ad, AdPlatform, AdStatus, Project, User, UserRole
from core.utils import days_from_now, ensure_aware, utcnow

LOGGER = get_logger(__name__)

UPDATABLE_FIELDS = {"title", "description", "budget", "start_date", "end_date", "status", "platform"}
# NOT NULL columns; an explicit null in an update leaves them unchanged.
REQUIRED_FIELDS = UPDATABLE_FIELDS - {"description"}

# Fields fed by the external ad platform, never by owners.
PERFORMANCE_FIELDS = ("impressions", "clicks", "leads", "spent_amount")


class AdService:
    """Ad CRUD for CPs and developers, plus the operator performance feed."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def _require(self, ad_id: str, label: str = "Ad") -> Ad:
        ad = self.session.get(Ad, ad_id)
        if ad is None:
            raise NotFoundError(f"{label} not found")
        return ad

    def _owns(self, user: User, ad: Ad) -> bool:
        if user.role == UserRole.CP.value:
            return ad.cp_id == user.id
        if user.role == UserRole.DEVELOPER.value:
            return ad.developer_id == user.id
        return False

    def get_visible(self, ad_id: str, user: User, label: str = "Ad") -> Ad:
        ad = self._require(ad_id, label)
        if not self._owns(user, ad):
            get_context_logger(__name__, user_id=user.id, role=user.role).warning(
                f"Ad access denied: {ad.id}"
            )
            raise ForbiddenError("Access denied")
        return ad

    def list_for_user(self, user: User) -> List[Ad]:
        if user.role == UserRole.CP.value:
            column = Ad.cp_id
        elif user.role == UserRole.DEVELOPER.value:
            column = Ad.developer_id
        else:
            raise ForbiddenError("Access denied")

        stmt = select(Ad).where(column == user.id).order_by(Ad.created_at.desc(), Ad.id)
        return list(self.session.scalars(stmt))

    def create_ad(self, user: User, values: Dict[str, Any]) -> Ad:
        """Create a campaign owned by the caller (CP or developer, never both)."""
        owner: Dict[str, Optional[str]] = {"cp_id": None, "developer_id": None}
        if user.role == UserRole.CP.value:
            owner["cp_id"] = user.id
        elif user.role == UserRole.DEVELOPER.value:
            owner["developer_id"] = user.id
        else:
            raise ForbiddenError("Access denied")

        project_id = values.get("project_id")
        if project_id and self.session.get(Project, project_id) is None:
            raise NotFoundError("Project not found")

        self._check_dates(values.get("start_date"), values.get("end_date"))

        ad = Ad(
            project_id=project_id,
            title=values["title"],
            description=values.get("description"),
            budget=values["budget"],
            start_date=values["start_date"],
            end_date=values["end_date"],
            status=values.get("status") or AdStatus.DRAFT.value,
            platform=values.get("platform") or AdPlatform.ALL.value,
            **owner,
        )
        self.session.add(ad)
        self.session.flush()
        LOGGER.info(f"Ad {ad.id} created by {user.role} {user.id}")
        return ad

    def update_ad(self, ad_id: str, user: User, values: Dict[str, Any]) -> Ad:
        """
        Partial update by the owner.

        Channel partners can only cancel; every other status change is the
        developer's (or the operator's) call.
        """
        ad = self.get_visible(ad_id, user)

        status = values.get("status")
        if (
            status is not None
            and user.role == UserRole.CP.value
            and status != AdStatus.CANCELLED.value
        ):
            raise ValidationError.from_fields({"status": "Channel partners can only cancel a campaign"})

        self._check_dates(values.get("start_date", ad.start_date), values.get("end_date", ad.end_date))

        for key, val in values.items():
            if key not in UPDATABLE_FIELDS or (val is None and key in REQUIRED_FIELDS):
                continue
            setattr(ad, key, val)
        self.session.flush()
        return ad

    # ------------------------------------------------------------------
    # CP "run ads" requests
    # ------------------------------------------------------------------

    def create_request(
        self,
        cp: User,
        project_id: str,
        objective: str,
        budget_inr: int,
        duration_days: int,
        notes: Optional[str] = None,
    ) -> Ad:
        """Turn a CP's run-ads request into a pending campaign for the project."""
        if self.session.get(Project, project_id) is None:
            raise NotFoundError("Project not found")

        start = utcnow()
        ad = Ad(
            cp_id=cp.id,
            project_id=project_id,
            title=f"{objective} Campaign",
            description=notes or "",
            budget=budget_inr,
            status=AdStatus.PENDING.value,
            platform=AdPlatform.ALL.value,
            start_date=start,
            end_date=days_from_now(duration_days, start),
        )
        self.session.add(ad)
        self.session.flush()
        LOGGER.info(f"Ad request {ad.id} submitted by CP {cp.id}")
        return ad

    def update_request(
        self,
        ad_id: str,
        cp: User,
        status: Optional[str] = None,
        description: Optional[str] = None,
    ) -> Ad:
        """A CP may cancel a request or edit its notes; nothing else."""
        ad = self._require(ad_id, "Ad request")
        if ad.cp_id != cp.id:
            raise ForbiddenError("Access denied")

        if status is not None:
            if status != AdStatus.CANCELLED.value:
                raise ValidationError.from_fields({"status": "Only 'cancelled' can be requested"})
            ad.status = AdStatus.CANCELLED.value
        if description is not None:
            ad.description = description

        self.session.flush()
        return ad

    # ------------------------------------------------------------------
    # Operator feed
    # ------------------------------------------------------------------

    def set_performance(self, ad_id: str, **metrics: Optional[int]) -> Ad:
        """Overwrite externally measured counters. ``None`` leaves a field unchanged."""
        ad = self._require(ad_id)
        for name in PERFORMANCE_FIELDS:
            value = metrics.get(name)
            if value is None:
                continue
            if value < 0:
                raise ValidationError.from_fields({name: "Must be zero or greater"})
            setattr(ad, name, value)
        self.session.flush()
        LOGGER.info(f"Performance updated for ad {ad.id}")
        return ad

    def count_active_for_cp(self, cp_id: str) -> int:
        stmt = (
            select(func.count())
            .select_from(Ad)
            .where(Ad.cp_id == cp_id, Ad.status == AdStatus.ACTIVE.value)
        )
        return self.session.scalar(stmt) or 0

    def count_active_for_developer(self, developer_id: str) -> int:
        stmt = (
            select(func.count())
            .select_from(Ad)
            .where(Ad.developer_id == developer_id, Ad.status == AdStatus.ACTIVE.value)
        )
        return self.session.scalar(stmt) or 0

    @staticmethod
    def _check_dates(start, end) -> None:
        start, end = ensure_aware(start), ensure_aware(end)
        if start is not None and end is not None and end < start:
            raise ValidationError.from_fields({"endDate": "End date must not be before start date"})
