# 📄 File: farmx/modules/subscriptions/infrastructure/database/models.py
#
# 🧭 Purpose (Layman Explanation):
# Defines how memberships and their payments are stored in the database.
#
# 🧪 Purpose (Technical Summary):
# SQLAlchemy ORM models for subscriptions (one row per user, enforced by a unique
# user_id) and subscription_payments (append-only ledger ordered by insertion id).
#
# 🔗 Dependencies:
# - SQLAlchemy ORM
# - farmx.shared.config.database (declarative base)
#
# 🔄 Connected Modules / Calls From:
# - subscription_repository_impl.py
# - migrations (schema generation)

from uuid import uuid4

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    func,
)
from sqlalchemy.orm import relationship

from farmx.shared.config.database import DatabaseBase, utcnow


class SubscriptionModel(DatabaseBase):
    """
    SQLAlchemy model for user subscriptions.

    The unique constraint on user_id is what makes lazy creation race-safe.
    """
    __tablename__ = "subscriptions"
    __table_args__ = (
        CheckConstraint("plan IN ('free', 'premium', 'enterprise')", name="plan"),
        CheckConstraint("status IN ('active', 'cancelled', 'expired', 'pending')", name="status"),
    )

    subscription_id = Column(String(36), primary_key=True, default=lambda: str(uuid4()))
    user_id = Column(
        String(36),
        ForeignKey("users.user_id", ondelete="CASCADE"),
        unique=True,
        nullable=False,
        comment="One subscription per user"
    )

    plan = Column(String(20), nullable=False, default="free")
    status = Column(String(20), nullable=False, default="active")
    start_date = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    end_date = Column(DateTime(timezone=True), nullable=True)
    auto_renew = Column(Boolean, nullable=False, default=True)
    price = Column(Numeric(12, 2), nullable=False, default=0)
    currency = Column(String(3), nullable=False, default="USD")

    is_active = Column(Boolean, nullable=False, default=True)
    version = Column(Integer, nullable=False, default=1, comment="Optimistic concurrency counter")

    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        onupdate=utcnow,
        server_default=func.now()
    )

    payments = relationship(
        "SubscriptionPaymentModel",
        back_populates="subscription",
        cascade="all, delete-orphan",
        order_by="SubscriptionPaymentModel.id",
        lazy="selectin",
    )

    def __repr__(self) -> str:
        return f"<SubscriptionModel(user_id={self.user_id}, plan={self.plan}, status={self.status})>"


class SubscriptionPaymentModel(DatabaseBase):
    """Payment ledger entry. Rows are inserted, never updated."""
    __tablename__ = "subscription_payments"

    id = Column(Integer, primary_key=True, autoincrement=True)
    subscription_id = Column(
        String(36),
        ForeignKey("subscriptions.subscription_id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    paid_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    amount = Column(Numeric(12, 2), nullable=False)
    transaction_id = Column(String(64), unique=True, nullable=False)
    status = Column(String(20), nullable=False, default="success")

    subscription = relationship("SubscriptionModel", back_populates="payments")
