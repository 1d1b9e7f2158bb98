"""SQLAlchemy ORM models for the BetterSide platform."""
from __future__ import annotations

import enum
from datetime import datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy import (
    Boolean,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from core.db import Base
from core.utils import generate_id, utcnow


# =============================================================================
# Enums
# =============================================================================


class UserRole(str, enum.Enum):
    """User roles. Fixed at registration."""
    BUYER = "buyer"
    CP = "cp"                  # Channel partner
    DEVELOPER = "developer"


class ProjectType(str, enum.Enum):
    RESIDENTIAL = "residential"
    COMMERCIAL = "commercial"
    VILLA = "villa"
    PLOT = "plot"


class ProjectStatus(str, enum.Enum):
    PRE_LAUNCH = "pre_launch"
    UNDER_CONSTRUCTION = "under_construction"
    READY_TO_MOVE = "ready_to_move"
    COMPLETED = "completed"


class AssignmentStatus(str, enum.Enum):
    """CP-project association approval states."""
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class LeadStatus(str, enum.Enum):
    """Lead states. Any state may move to any other; none is terminal."""
    NEW = "new"
    CONTACTED = "contacted"
    SITE_VISIT = "site_visit"
    NEGOTIATION = "negotiation"
    CONVERTED = "converted"
    LOST = "lost"


class LeadSource(str, enum.Enum):
    META_ADS = "meta_ads"
    ORGANIC = "organic"
    BETTERSIDE = "betterside"
    REFERRAL = "referral"
    OTHER = "other"


class AdStatus(str, enum.Enum):
    DRAFT = "draft"
    PENDING = "pending"
    ACTIVE = "active"
    PAUSED = "paused"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class AdPlatform(str, enum.Enum):
    FACEBOOK = "facebook"
    INSTAGRAM = "instagram"
    GOOGLE = "google"
    ALL = "all"


class AdObjective(str, enum.Enum):
    """Objectives offered by the CP "run ads" request."""
    LEAD_GENERATION = "lead_generation"
    AWARENESS = "awareness"
    SITE_VISITS = "site_visits"


class MarketingRequestType(str, enum.Enum):
    CREATIVE = "creative"
    EDM = "edm"


class MarketingRequestStatus(str, enum.Enum):
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


# =============================================================================
# User Model
# =============================================================================


class User(Base):
    """
    A registered account: home buyer, channel partner or developer.

    Role-specific attributes are nullable columns on the same row.
    """
    __tablename__ = "user"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_id)
    full_name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    phone: Mapped[str] = mapped_column(String(20), nullable=False)
    city: Mapped[str] = mapped_column(String(100), nullable=False)
    role: Mapped[str] = mapped_column(String(20), nullable=False, index=True)
    hashed_password: Mapped[str] = mapped_column(String(255), nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    # Channel partner / developer
    company_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    # Developer
    contact_person: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    gst_number: Mapped[Optional[str]] = mapped_column(String(15), nullable=True)
    rera_number: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    is_rera_registered: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    doc_link: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # Buyer
    budget: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False
    )

    sessions: Mapped[list["UserSession"]] = relationship(
        "UserSession", back_populates="user", cascade="all, delete-orphan"
    )
    cp_profile: Mapped[Optional["CpProfile"]] = relationship(
        "CpProfile", back_populates="user", uselist=False
    )


class UserSession(Base):
    """
    Server-side session bound to a user.

    The cookie carries the raw token; only its SHA-256 hash is stored.
    """
    __tablename__ = "user_session"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_id)
    user_id: Mapped[str] = mapped_column(ForeignKey("user.id"), nullable=False, index=True)
    token_hash: Mapped[str] = mapped_column(String(64), unique=True, nullable=False, index=True)
    revoked: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)
    last_seen_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)

    user: Mapped["User"] = relationship("User", back_populates="sessions")


# =============================================================================
# Project Model
# =============================================================================


class Project(Base):
    """A developer's real-estate project."""
    __tablename__ = "project"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_id)
    developer_id: Mapped[str] = mapped_column(ForeignKey("user.id"), nullable=False, index=True)

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    location: Mapped[str] = mapped_column(String(255), nullable=False)
    city: Mapped[str] = mapped_column(String(100), nullable=False)
    project_type: Mapped[str] = mapped_column(String(20), nullable=False)
    status: Mapped[str] = mapped_column(String(30), nullable=False)

    price_min: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    price_max: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    rera_number: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    total_units: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    available_units: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    amenities: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    image_url: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    brochure_url: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False
    )

    assignments: Mapped[list["CpProjectMap"]] = relationship(
        "CpProjectMap", back_populates="project", cascade="all, delete-orphan"
    )


# =============================================================================
# CP-Project Mapping
# =============================================================================


class CpProjectMap(Base):
    """Which channel partner works on which project, and whether it is approved."""
    __tablename__ = "cp_project_map"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_id)
    cp_id: Mapped[str] = mapped_column(ForeignKey("user.id"), nullable=False, index=True)
    project_id: Mapped[str] = mapped_column(ForeignKey("project.id"), nullable=False, index=True)
    status: Mapped[str] = mapped_column(
        String(20), default=AssignmentStatus.PENDING.value, nullable=False
    )
    commission_percent: Mapped[Optional[Decimal]] = mapped_column(Numeric(5, 2), nullable=True)
    assigned_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)

    project: Mapped["Project"] = relationship("Project", back_populates="assignments")
    cp: Mapped["User"] = relationship("User")

    __table_args__ = (
        UniqueConstraint("cp_id", "project_id", name="uq_cp_project_map_cp_project"),
    )


# =============================================================================
# Lead Model
# =============================================================================


class Lead(Base):
    """
    A customer lead registered by a channel partner against a project.

    ``developer_id`` is denormalized from the project for developer queries.
    Deleting a lead moves it to ``lost``; rows are never removed.
    """
    __tablename__ = "lead"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_id)
    cp_id: Mapped[str] = mapped_column(ForeignKey("user.id"), nullable=False, index=True)
    project_id: Mapped[str] = mapped_column(ForeignKey("project.id"), nullable=False, index=True)
    developer_id: Mapped[str] = mapped_column(ForeignKey("user.id"), nullable=False, index=True)

    customer_name: Mapped[str] = mapped_column(String(255), nullable=False)
    customer_phone: Mapped[str] = mapped_column(String(20), nullable=False)
    customer_email: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    customer_city: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    budget: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    status: Mapped[str] = mapped_column(
        String(20), default=LeadStatus.NEW.value, nullable=False, index=True
    )
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    source: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False, index=True
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False
    )

    __table_args__ = (
        Index("ix_lead_cp_created", "cp_id", "created_at"),
    )


# =============================================================================
# Ad Model
# =============================================================================


class Ad(Base):
    """
    An advertising campaign (or a CP's request for one).

    Performance counters are written only by an external operator.
    """
    __tablename__ = "ad"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_id)
    cp_id: Mapped[Optional[str]] = mapped_column(ForeignKey("user.id"), nullable=True, index=True)
    project_id: Mapped[Optional[str]] = mapped_column(ForeignKey("project.id"), nullable=True, index=True)
    developer_id: Mapped[Optional[str]] = mapped_column(ForeignKey("user.id"), nullable=True, index=True)

    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    budget: Mapped[int] = mapped_column(Integer, nullable=False)
    spent_amount: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    start_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    end_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    status: Mapped[str] = mapped_column(String(20), default=AdStatus.DRAFT.value, nullable=False)
    platform: Mapped[str] = mapped_column(String(20), default=AdPlatform.ALL.value, nullable=False)

    impressions: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    clicks: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    leads: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False
    )


# =============================================================================
# CP Profile Model
# =============================================================================


class CpProfile(Base):
    """Optional display profile for a channel partner; falls back to the user row."""
    __tablename__ = "cp_profile"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_id)
    user_id: Mapped[str] = mapped_column(ForeignKey("user.id"), unique=True, nullable=False)
    full_name: Mapped[str] = mapped_column(String(255), nullable=False)
    company_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    phone: Mapped[str] = mapped_column(String(20), nullable=False)
    city: Mapped[str] = mapped_column(String(100), nullable=False)
    extra_json: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False
    )

    user: Mapped["User"] = relationship("User", back_populates="cp_profile")


# =============================================================================
# Marketing Models
# =============================================================================

# scope_key for counters that are not tied to a project
GLOBAL_SCOPE = "*"


class MarketingCounter(Base):
    """
    Running totals of creatives and EDMs shared with a CP, optionally per project.

    ``scope_key`` mirrors ``project_id`` (or GLOBAL_SCOPE) so that the
    (cp, project) pair is a NOT NULL unique key usable as an upsert target.
    """
    __tablename__ = "marketing_counter"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_id)
    cp_id: Mapped[str] = mapped_column(ForeignKey("user.id"), nullable=False, index=True)
    project_id: Mapped[Optional[str]] = mapped_column(ForeignKey("project.id"), nullable=True)
    scope_key: Mapped[str] = mapped_column(String(36), nullable=False)
    creatives_shared: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    edms_shared: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    last_updated: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)

    __table_args__ = (
        UniqueConstraint("cp_id", "scope_key", name="uq_marketing_counter_cp_scope"),
    )


class MarketingRequest(Base):
    """A CP's request for a creative or an EDM."""
    __tablename__ = "marketing_request"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_id)
    cp_id: Mapped[str] = mapped_column(ForeignKey("user.id"), nullable=False, index=True)
    project_id: Mapped[Optional[str]] = mapped_column(ForeignKey("project.id"), nullable=True)
    request_type: Mapped[str] = mapped_column(String(20), nullable=False)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(
        String(20), default=MarketingRequestStatus.PENDING.value, nullable=False
    )

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False
    )


__all__ = [
    "Base",
    "UserRole",
    "ProjectType",
    "ProjectStatus",
    "AssignmentStatus",
    "LeadStatus",
    "LeadSource",
    "AdStatus",
    "AdPlatform",
    "AdObjective",
    "MarketingRequestType",
    "MarketingRequestStatus",
    "GLOBAL_SCOPE",
    "User",
    "UserSession",
    "Project",
    "CpProjectMap",
    "Lead",
    "Ad",
    "CpProfile",
    "MarketingCounter",
    "MarketingRequest",
]
