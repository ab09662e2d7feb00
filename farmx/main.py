# 📄 File: farmx/main.py
#
# 🧭 Purpose (Layman Explanation):
# The main control center that starts up the FarmX backend, plugs the shop, subscription
# and pond analytics parts together, and makes sure everything is ready before requests arrive.
#
# 🧪 Purpose (Technical Summary):
# FastAPI application factory and entry point: lifespan (logging, database engine, session
# factory), middleware stack, slowapi limiter, exception handlers, repository bindings
# (abstract repository -> SQLAlchemy implementation) and router registration.
#
# 🔗 Dependencies:
# - FastAPI framework, slowapi, uvicorn
# - farmx.shared.config.settings
# - farmx.shared.infrastructure.database.connection / session
# - All module routers through farmx.api.v1.router
#
# 🔄 Connected Modules / Calls From:
# - uvicorn server startup
# - Docker container entry point
# - tests/conftest.py (application under test)

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

import uvicorn
from fastapi import FastAPI, Response
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from slowapi.errors import RateLimitExceeded

from farmx.api.middleware.authentication import AuthenticationMiddleware
from farmx.api.middleware.error_handling import (
    ErrorHandlingMiddleware,
    farmx_exception_handler,
    rate_limit_exceeded_handler,
    validation_exception_handler,
)
from farmx.api.middleware.logging import RequestLoggingMiddleware
from farmx.api.middleware.rate_limiting import limiter
from farmx.api.v1.router import api_v1_router
from farmx.modules.analytics.domain.repositories.analytics_repository import AnalyticsRepository
from farmx.modules.analytics.infrastructure.database.analytics_repository_impl import AnalyticsRepositoryImpl
from farmx.modules.storefront.domain.repositories.order_repository import OrderRepository
from farmx.modules.storefront.domain.repositories.product_repository import ProductRepository
from farmx.modules.storefront.infrastructure.database.order_repository_impl import OrderRepositoryImpl
from farmx.modules.storefront.infrastructure.database.product_repository_impl import ProductRepositoryImpl
from farmx.modules.subscriptions.domain.repositories.subscription_repository import SubscriptionRepository
from farmx.modules.subscriptions.infrastructure.database.subscription_repository_impl import (
    SubscriptionRepositoryImpl,
)
from farmx.modules.user_management.domain.repositories.user_repository import UserRepository
from farmx.modules.user_management.infrastructure.database.user_repository_impl import UserRepositoryImpl
from farmx.shared.config.settings import get_settings
from farmx.shared.core.exceptions import FarmXException
from farmx.shared.infrastructure.database.connection import close_database, init_database
from farmx.shared.infrastructure.database.session import initialize_sessions, session_manager
from farmx.shared.utils.logging import log_shutdown_event, log_startup_event, setup_logging

# Get application settings
settings = get_settings()

logger = logging.getLogger(__name__)

# Abstract repository -> SQLAlchemy implementation used for every request
REPOSITORY_BINDINGS = {
    UserRepository: UserRepositoryImpl,
    ProductRepository: ProductRepositoryImpl,
    OrderRepository: OrderRepositoryImpl,
    SubscriptionRepository: SubscriptionRepositoryImpl,
    AnalyticsRepository: AnalyticsRepositoryImpl,
}


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan context manager.

    Opens the database engine and session factory on startup and
    releases them on shutdown.
    """
    setup_logging()
    log_startup_event("farmx-api", settings.APP_VERSION, extra={"environment": settings.ENVIRONMENT})

    try:
        await init_database()
        logger.info("✅ Database connection initialized")

        await initialize_sessions()
        logger.info("✅ Session manager initialized")

    except Exception as e:
        logger.error(f"❌ Startup failed: {e}")
        raise

    try:
        yield  # Application is running

    finally:
        log_shutdown_event("farmx-api")
        session_manager.reset()
        await close_database()
        logger.info("✅ Database connections closed")


def create_application() -> FastAPI:
    """
    Application factory function.

    Creates and configures the FastAPI application with all necessary
    middleware, routers, and settings based on the current environment.

    Returns:
        FastAPI: Configured FastAPI application instance
    """
    app = FastAPI(
        title=settings.APP_NAME,
        description=settings.APP_DESCRIPTION,
        version=settings.APP_VERSION,
        docs_url="/docs" if not settings.is_production else None,
        redoc_url="/redoc" if not settings.is_production else None,
        openapi_url="/openapi.json" if not settings.is_production else None,
        lifespan=lifespan,
        debug=settings.DEBUG,
    )

    # =========================================================================
    # MIDDLEWARE CONFIGURATION (last added runs first)
    # =========================================================================

    app.add_middleware(AuthenticationMiddleware)
    app.add_middleware(ErrorHandlingMiddleware)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=settings.CORS_ALLOW_CREDENTIALS,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID", "X-Response-Time", "Retry-After"],
    )

    app.state.limiter = limiter

    # =========================================================================
    # EXCEPTION HANDLERS
    # =========================================================================

    app.add_exception_handler(FarmXException, farmx_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)

    # Whenever a service asks for a repository blueprint, hand it the SQLAlchemy one.
    for abstract, implementation in REPOSITORY_BINDINGS.items():
        app.dependency_overrides[abstract] = implementation

    # =========================================================================
    # ROUTER REGISTRATION
    # =========================================================================

    app.include_router(api_v1_router, prefix="/api/v1")

    @app.get("/", include_in_schema=False)
    async def root() -> dict:
        """Root endpoint with API information."""
        return {
            "name": settings.APP_NAME,
            "version": settings.APP_VERSION,
            "description": settings.APP_DESCRIPTION,
            "health_check": "/api/v1/health",
            "api_base": "/api/v1",
        }

    @app.get("/favicon.ico", include_in_schema=False)
    async def favicon():
        return Response(status_code=204)

    return app


# Create the FastAPI application
app = create_application()


def main():
    """
    Run the application with uvicorn (python -m farmx.main).
    """
    uvicorn.run(
        "farmx.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.RELOAD and settings.is_development,
        log_level=settings.LOG_LEVEL.lower(),
        workers=1 if settings.RELOAD else settings.WORKERS,
    )


if __name__ == "__main__":
    main()
