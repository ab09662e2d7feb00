# 📄 File: farmx/modules/storefront/infrastructure/database/models.py
#
# 🧭 Purpose (Layman Explanation):
# Defines how products and orders are stored in the database, including the price
# each order line was bought at.
#
# 🧪 Purpose (Technical Summary):
# SQLAlchemy ORM models for products, orders and order_items. Order lines carry the
# price snapshot; orders carry the unique checkout key and the saga flag.
#
# 🔗 Dependencies:
# - SQLAlchemy ORM
# - farmx.shared.config.database (declarative base)
#
# 🔄 Connected Modules / Calls From:
# - product_repository_impl.py, order_repository_impl.py
# - migrations (schema generation), tests (seeding products)

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
    Text,
    func,
)
from sqlalchemy.orm import relationship

from farmx.shared.config.database import DatabaseBase, utcnow


class ProductModel(DatabaseBase):
    """SQLAlchemy model for storefront products."""
    __tablename__ = "products"
    __table_args__ = (
        CheckConstraint("price >= 0", name="price_non_negative"),
    )

    product_id = Column(String(36), primary_key=True, default=lambda: str(uuid4()))
    name = Column(String(200), nullable=False)
    sku = Column(String(100), unique=True, nullable=True)
    description = Column(Text, nullable=True)
    price = Column(Numeric(12, 2), nullable=False, comment="Current unit price")
    currency = Column(String(3), nullable=False, default="USD")
    is_active = Column(Boolean, nullable=False, default=True, index=True)
    in_stock = Column(Boolean, nullable=True, comment="Optional stock flag")

    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        onupdate=utcnow,
        server_default=func.now()
    )

    def __repr__(self) -> str:
        return f"<ProductModel(product_id={self.product_id}, name={self.name}, price={self.price})>"


class OrderModel(DatabaseBase):
    """
    SQLAlchemy model for orders.

    checkout_key is unique so that two checkouts of the same cart version
    cannot both produce an order.
    """
    __tablename__ = "orders"
    __table_args__ = (
        CheckConstraint("status IN ('pending', 'completed', 'cancelled')", name="status"),
        CheckConstraint("total >= 0", name="total_non_negative"),
    )

    order_id = Column(String(36), primary_key=True, default=lambda: str(uuid4()))
    user_id = Column(
        String(36),
        ForeignKey("users.user_id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    total = Column(Numeric(12, 2), nullable=False, comment="Frozen at creation")
    currency = Column(String(3), nullable=False, default="USD")
    status = Column(String(20), nullable=False, default="pending", index=True)
    is_active = Column(Boolean, nullable=False, default=True)

    checkout_key = Column(
        String(80),
        unique=True,
        nullable=True,
        comment="user_id:cart_version for cart checkouts"
    )
    ownership_transferred = Column(
        Boolean,
        nullable=False,
        default=False,
        comment="Fulfillment step applied to the user"
    )

    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        onupdate=utcnow,
        server_default=func.now()
    )

    items = relationship(
        "OrderItemModel",
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="OrderItemModel.position",
        lazy="selectin",
    )

    def __repr__(self) -> str:
        return f"<OrderModel(order_id={self.order_id}, status={self.status}, total={self.total})>"


class OrderItemModel(DatabaseBase):
    """Order line with price snapshot."""
    __tablename__ = "order_items"
    __table_args__ = (
        CheckConstraint("qty >= 1", name="qty_positive"),
        CheckConstraint("price_at_purchase >= 0", name="price_non_negative"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    order_id = Column(
        String(36),
        ForeignKey("orders.order_id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    position = Column(Integer, nullable=False, default=0)
    product_id = Column(String(36), ForeignKey("products.product_id"), nullable=False)
    qty = Column(Integer, nullable=False)
    price_at_purchase = Column(Numeric(12, 2), nullable=False)

    order = relationship("OrderModel", back_populates="items")
