"""API v1 router aggregating all endpoints."""

from fastapi import APIRouter

from github_plugin.api.v1 import health, scope_configs

api_router = APIRouter()

# Health check
api_router.include_router(
    health.router,
    prefix="/health",
    tags=["health"],
)

# Scope configurations
api_router.include_router(
    scope_configs.router,
    tags=["scope-configs"],
)
