# 📄 File: farmx/api/v1/health.py
# 🧭 Purpose (Layman Explanation):
# A quick checkup endpoint that says whether the FarmX API and its database are working.
# 🧪 Purpose (Technical Summary):
# Liveness plus database connectivity check for load balancers and monitoring.
# Answers 200 when healthy and 503 when the database check fails.
# 🔗 Dependencies:
# FastAPI, farmx.shared.infrastructure.database.connection, farmx.shared.config.settings
# 🔄 Connected Modules / Calls From:
# farmx.api.v1.router, monitoring systems, load balancers

import logging
from datetime import datetime, timezone

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from farmx.shared.config.settings import get_settings
from farmx.shared.infrastructure.database.connection import database_health_check

logger = logging.getLogger(__name__)

# Create router for health endpoints
health_router = APIRouter()

# Application start time for uptime calculation
_app_start_time = datetime.now(timezone.utc)


@health_router.get("/health",
                   summary="Health Check",
                   description="Service liveness and database connectivity")
async def health_check() -> JSONResponse:
    settings = get_settings()
    database = await database_health_check()
    healthy = database["status"] == "healthy"
    if not healthy:
        logger.error(f"Health check failed: database {database.get('error')}")

    return JSONResponse(
        status_code=200 if healthy else 503,
        content={
            "status": "healthy" if healthy else "unhealthy",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "service": "farmx-api",
            "version": settings.APP_VERSION,
            "environment": settings.ENVIRONMENT,
            "uptime_seconds": round((datetime.now(timezone.utc) - _app_start_time).total_seconds(), 1),
            "components": {"database": database},
        }
    )
