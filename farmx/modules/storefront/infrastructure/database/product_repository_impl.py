# 📄 File: farmx/modules/storefront/infrastructure/database/product_repository_impl.py
# 🧭 Purpose (Layman Explanation):
# Fetches products and their current prices from the database.
# 🧪 Purpose (Technical Summary):
# SQLAlchemy implementation of ProductRepository; always re-reads rows so checkout
# sees the latest active flag and price.
# 🔗 Dependencies:
# SQLAlchemy, farmx.shared.infrastructure.database.session
# 🔄 Connected Modules / Calls From:
# Cart, checkout and order services

import logging
from typing import Dict, Iterable, Optional

from fastapi import Depends
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from farmx.modules.storefront.domain.models.product import Product
from farmx.modules.storefront.domain.repositories.product_repository import ProductRepository
from farmx.modules.storefront.infrastructure.database.models import ProductModel
from farmx.shared.infrastructure.database.session import get_db_session

logger = logging.getLogger(__name__)


class ProductRepositoryImpl(ProductRepository):
    """SQLAlchemy implementation of product repository."""

    def __init__(self, session: AsyncSession = Depends(get_db_session)):
        self.session = session

    async def get_by_id(self, product_id: str) -> Optional[Product]:
        query = (
            select(ProductModel)
            .where(ProductModel.product_id == product_id)
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(query)
        model = result.scalar_one_or_none()
        return self._to_domain(model) if model else None

    async def get_many(self, product_ids: Iterable[str]) -> Dict[str, Product]:
        ids = list(dict.fromkeys(product_ids))
        if not ids:
            return {}
        query = (
            select(ProductModel)
            .where(ProductModel.product_id.in_(ids))
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(query)
        return {model.product_id: self._to_domain(model) for model in result.scalars().all()}

    @staticmethod
    def _to_domain(model: ProductModel) -> Product:
        return Product(
            product_id=model.product_id,
            name=model.name,
            sku=model.sku,
            description=model.description,
            price=model.price,
            currency=model.currency,
            is_active=model.is_active,
            in_stock=model.in_stock,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )
