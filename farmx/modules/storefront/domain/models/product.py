# 📄 File: farmx/modules/storefront/domain/models/product.py
# 🧭 Purpose (Layman Explanation):
# Describes something the farm store sells (sensors, kits, treatments), its price and
# whether it can currently be bought.
# 🧪 Purpose (Technical Summary):
# Product domain model. Prices are Decimals; orders snapshot the price at purchase time.
# 🔗 Dependencies:
# pydantic, decimal, datetime
# 🔄 Connected Modules / Calls From:
# product_repository_impl.py, cart_service.py, checkout_service.py, order_service.py

from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field


class Product(BaseModel):
    """Product available in the storefront."""

    product_id: str
    name: str
    sku: Optional[str] = None
    description: Optional[str] = None
    price: Decimal = Field(ge=0)
    currency: str = "USD"
    is_active: bool = True
    in_stock: Optional[bool] = None

    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
