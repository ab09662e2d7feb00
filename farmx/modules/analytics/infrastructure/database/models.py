# 📄 File: farmx/modules/analytics/infrastructure/database/models.py
#
# 🧭 Purpose (Layman Explanation):
# Defines how farms, their ponds and the device scans taken in each pond are stored.
#
# 🧪 Purpose (Technical Summary):
# SQLAlchemy ORM models for farms, ponds and scan_results. Device payloads (metrics,
# disease prediction, raw data) are JSON columns; scans are indexed by (pond_id, timestamp)
# for the windowed analytics queries.
#
# 🔗 Dependencies:
# - SQLAlchemy ORM
# - farmx.shared.config.database (declarative base)
#
# 🔄 Connected Modules / Calls From:
# - analytics_repository_impl.py
# - migrations (schema generation), tests (seeding scans)

from uuid import uuid4

from sqlalchemy import (
    JSON,
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    Float,
    ForeignKey,
    Index,
    String,
    Text,
    func,
)

from farmx.shared.config.database import DatabaseBase, utcnow


class FarmModel(DatabaseBase):
    """SQLAlchemy model for farms."""
    __tablename__ = "farms"

    farm_id = Column(String(36), primary_key=True, default=lambda: str(uuid4()))
    owner_id = Column(
        String(36),
        ForeignKey("users.user_id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    name = Column(String(200), nullable=False)
    location = Column(String(255), nullable=True)
    status = Column(String(20), nullable=False, default="active")
    is_active = Column(Boolean, nullable=False, default=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        onupdate=utcnow,
        server_default=func.now()
    )


class PondModel(DatabaseBase):
    """SQLAlchemy model for ponds."""
    __tablename__ = "ponds"
    __table_args__ = (
        CheckConstraint("status IN ('active', 'inactive', 'maintenance')", name="status"),
    )

    pond_id = Column(String(36), primary_key=True, default=lambda: str(uuid4()))
    farm_id = Column(
        String(36),
        ForeignKey("farms.farm_id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    name = Column(String(200), nullable=False)
    area = Column(Float, nullable=True)
    status = Column(String(20), nullable=False, default="active")
    is_active = Column(Boolean, nullable=False, default=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        onupdate=utcnow,
        server_default=func.now()
    )


class ScanResultModel(DatabaseBase):
    """SQLAlchemy model for device scan results."""
    __tablename__ = "scan_results"
    __table_args__ = (
        Index("ix_scan_results_pond_timestamp", "pond_id", "timestamp"),
    )

    scan_id = Column(String(36), primary_key=True, default=lambda: str(uuid4()))
    pond_id = Column(String(36), ForeignKey("ponds.pond_id", ondelete="SET NULL"), nullable=True)
    device_id = Column(String(100), nullable=True)
    timestamp = Column(DateTime(timezone=True), nullable=False, default=utcnow, comment="Scan time (UTC)")
    health_score = Column(Float, nullable=True, comment="0 to 100")
    metrics = Column(JSON, nullable=False, default=dict, comment="Ragged metric map")
    disease_prediction = Column(JSON, nullable=True)
    raw_data = Column(JSON, nullable=True)
    image_url = Column(Text, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True, index=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, server_default=func.now())
