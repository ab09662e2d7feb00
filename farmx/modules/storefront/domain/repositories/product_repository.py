# 📄 File: farmx/modules/storefront/domain/repositories/product_repository.py
# 🧭 Purpose (Layman Explanation):
# Lists the ways the store can look up products and their current prices.
# 🧪 Purpose (Technical Summary):
# Abstract repository interface for Product reads used by the cart and checkout.
# 🔗 Dependencies:
# - abc (Abstract Base Classes)
# - Product domain model
# 🔄 Connected Modules / Calls From:
# - Cart, checkout and order services
# - Repository Implementation (concrete implementation)

from abc import ABC, abstractmethod
from typing import Dict, Iterable, Optional

from farmx.modules.storefront.domain.models.product import Product


class ProductRepository(ABC):
    """Abstract repository interface for product data access."""

    @abstractmethod
    async def get_by_id(self, product_id: str) -> Optional[Product]:
        """Get product by ID, including inactive ones."""
        pass

    @abstractmethod
    async def get_many(self, product_ids: Iterable[str]) -> Dict[str, Product]:
        """Get products keyed by id; missing ids are simply absent."""
        pass
