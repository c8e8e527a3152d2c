"""API v1 router aggregation.

Includes all endpoint modules with consistent prefix and tags. All routes
use dependencies from visita.api.v1.dependencies (no manual repo/service construction).
"""

from fastapi import APIRouter

from visita.api.v1.endpoints import audit_log, churches, health

api_router = APIRouter()

api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(churches.router, prefix="/churches", tags=["churches"])
api_router.include_router(audit_log.router, prefix="/audit-log", tags=["audit-log"])
