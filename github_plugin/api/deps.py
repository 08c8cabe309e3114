"""FastAPI dependency injection utilities."""

from typing import Annotated
from uuid import UUID

from fastapi import Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession

from github_plugin.db.session import get_db
from github_plugin.services.scope_config import ScopeConfigService

__all__ = ["get_db", "get_actor_id", "get_scope_config_service"]


async def get_actor_id(
    x_actor_id: Annotated[UUID | None, Header()] = None,
) -> str | None:
    """Operator id forwarded by the gateway, recorded in audit fields."""
    return str(x_actor_id) if x_actor_id is not None else None


async def get_scope_config_service(
    session: Annotated[AsyncSession, Depends(get_db)],
) -> ScopeConfigService:
    """Scope configuration service bound to the request session."""
    return ScopeConfigService(session)
