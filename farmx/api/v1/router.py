# 📄 File: farmx/api/v1/router.py
# 🧭 Purpose (Layman Explanation):
# The traffic director for version 1 of the API: sends cart requests to the cart code,
# order requests to the order code, and so on.
# 🧪 Purpose (Technical Summary):
# Aggregates every module router under its prefix and tag; mounted at /api/v1 by main.
# 🔗 Dependencies:
# FastAPI, farmx.api.v1.health, module presentation routers
# 🔄 Connected Modules / Calls From:
# farmx.main

import logging

from fastapi import APIRouter

from farmx.api.v1.health import health_router
from farmx.modules.analytics.presentation.api.v1.analytics import analytics_router
from farmx.modules.analytics.presentation.api.v1.ponds import ponds_router
from farmx.modules.storefront.presentation.api.v1.cart import cart_router
from farmx.modules.storefront.presentation.api.v1.orders import orders_router
from farmx.modules.subscriptions.presentation.api.v1.subscriptions import subscriptions_router

logger = logging.getLogger(__name__)

ROUTE_PREFIXES = {
    "cart": "/cart",
    "orders": "/orders",
    "subscriptions": "/subscriptions",
    "analytics": "/analytics",
    "ponds": "/ponds",
}

# Create main API v1 router
api_v1_router = APIRouter()

# Include health check router (no prefix - direct access)
api_v1_router.include_router(health_router, tags=["Health Check"])

api_v1_router.include_router(cart_router, prefix=ROUTE_PREFIXES["cart"], tags=["Cart"])
api_v1_router.include_router(orders_router, prefix=ROUTE_PREFIXES["orders"], tags=["Orders"])
api_v1_router.include_router(
    subscriptions_router,
    prefix=ROUTE_PREFIXES["subscriptions"],
    tags=["Subscriptions"]
)
api_v1_router.include_router(analytics_router, prefix=ROUTE_PREFIXES["analytics"], tags=["Analytics"])
api_v1_router.include_router(ponds_router, prefix=ROUTE_PREFIXES["ponds"], tags=["Ponds"])

logger.debug(f"API v1 router configured with modules: {', '.join(ROUTE_PREFIXES)}")
