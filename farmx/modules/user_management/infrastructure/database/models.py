# 📄 File: farmx/modules/user_management/infrastructure/database/models.py
#
# 🧭 Purpose (Layman Explanation):
# Defines how user accounts are stored in the database, including their cart,
# the products they own and the version counter that stops two updates clashing.
#
# 🧪 Purpose (Technical Summary):
# SQLAlchemy ORM model for the users table. Cart lines, owned products and fulfilled
# order ids are embedded JSON documents owned by the row.
#
# 🔗 Dependencies:
# - SQLAlchemy ORM
# - farmx.shared.config.database (declarative base)
#
# 🔄 Connected Modules / Calls From:
# - user_repository_impl.py (CRUD and versioned updates)
# - migrations (schema generation)

from uuid import uuid4

from sqlalchemy import JSON, Boolean, CheckConstraint, Column, DateTime, Integer, String, func

from farmx.shared.config.database import DatabaseBase, utcnow


class UserModel(DatabaseBase):
    """
    SQLAlchemy model for user accounts.

    Every cart or ownership write goes through a
    ``WHERE version = :expected`` update, see UserRepositoryImpl.
    """
    __tablename__ = "users"
    __table_args__ = (
        CheckConstraint("role IN ('user', 'admin', 'expert')", name="role"),
    )

    user_id = Column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid4()),
        comment="Unique identifier for each user"
    )
    username = Column(String(100), nullable=False, comment="Display username")
    email = Column(
        String(255),
        unique=True,
        nullable=False,
        index=True,
        comment="User's email address"
    )
    role = Column(String(20), nullable=False, default="user", comment="user/admin/expert")

    cart_items = Column(
        JSON,
        nullable=False,
        default=list,
        comment="Embedded cart lines [{product_id, qty}]"
    )
    owned_products = Column(
        JSON,
        nullable=False,
        default=list,
        comment="Owned product ids, one entry per purchased unit"
    )
    fulfilled_orders = Column(
        JSON,
        nullable=False,
        default=list,
        comment="Order ids whose ownership transfer has been applied"
    )

    subscription_id = Column(String(36), nullable=True, comment="Current subscription")
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

    def __repr__(self) -> str:
        return f"<UserModel(user_id={self.user_id}, email={self.email}, version={self.version})>"
