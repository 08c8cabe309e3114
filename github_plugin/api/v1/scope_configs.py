"""Scope configuration API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status

from github_plugin.api.deps import get_actor_id, get_scope_config_service
from github_plugin.core.exceptions import (
    ConnectionReferenceError,
    ScopeConfigNotFoundError,
    ScopeConfigValidationError,
)
from github_plugin.loader import DEFAULT_SCOPE_CONFIG
from github_plugin.schemas.scope_config import (
    ScopeConfigRead,
    ScopeConfigWrite,
    ScopeSummary,
)
from github_plugin.services.scope_config import ScopeConfigService

router = APIRouter()

ServiceDep = Annotated[ScopeConfigService, Depends(get_scope_config_service)]
ActorDep = Annotated[str | None, Depends(get_actor_id)]


def _http_error(exc: Exception) -> HTTPException:
    """Translate a scope config error into an HTTP error."""
    if isinstance(exc, ScopeConfigValidationError):
        return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=exc.to_dict())
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))


@router.get("/scope-configs/defaults")
async def get_default_scope_config() -> dict:
    """Return the suggested rule set for a new GitHub scope configuration."""
    return DEFAULT_SCOPE_CONFIG


@router.post(
    "/connections/{connection_id}/scope-configs",
    response_model=ScopeConfigRead,
    status_code=status.HTTP_201_CREATED,
)
async def create_scope_config(
    connection_id: int,
    request: ScopeConfigWrite,
    service: ServiceDep,
    actor_id: ActorDep,
) -> ScopeConfigRead:
    """Create a scope configuration for a connection."""
    try:
        scope_config = await service.create(connection_id, request.to_values(), actor_id)
    except (ScopeConfigValidationError, ConnectionReferenceError) as e:
        raise _http_error(e)
    return ScopeConfigRead.model_validate(scope_config)


@router.get(
    "/connections/{connection_id}/scope-configs",
    response_model=list[ScopeConfigRead],
)
async def list_scope_configs(
    connection_id: int,
    service: ServiceDep,
) -> list[ScopeConfigRead]:
    """List the scope configurations of a connection."""
    try:
        scope_configs = await service.list_for_connection(connection_id)
    except ConnectionReferenceError as e:
        raise _http_error(e)
    return [ScopeConfigRead.model_validate(sc) for sc in scope_configs]


@router.get(
    "/connections/{connection_id}/scope-configs/by-name/{name:path}",
    response_model=ScopeConfigRead,
)
async def get_scope_config_by_name(
    connection_id: int,
    name: str,
    service: ServiceDep,
) -> ScopeConfigRead:
    """Get a scope configuration by name."""
    try:
        scope_config = await service.get_by_name(connection_id, name)
    except ScopeConfigNotFoundError as e:
        raise _http_error(e)
    return ScopeConfigRead.model_validate(scope_config)


@router.get(
    "/connections/{connection_id}/scope-configs/{scope_config_id}",
    response_model=ScopeConfigRead,
)
async def get_scope_config(
    connection_id: int,
    scope_config_id: str,
    service: ServiceDep,
) -> ScopeConfigRead:
    """Get a scope configuration by id."""
    try:
        scope_config = await service.get(connection_id, scope_config_id)
    except ScopeConfigNotFoundError as e:
        raise _http_error(e)
    return ScopeConfigRead.model_validate(scope_config)


@router.put(
    "/connections/{connection_id}/scope-configs/{scope_config_id}",
    response_model=ScopeConfigRead,
)
async def replace_scope_config(
    connection_id: int,
    scope_config_id: str,
    request: ScopeConfigWrite,
    service: ServiceDep,
    actor_id: ActorDep,
) -> ScopeConfigRead:
    """Replace a scope configuration; omitted fields become unset."""
    try:
        scope_config = await service.replace(
            connection_id, scope_config_id, request.to_values(), actor_id
        )
    except (ScopeConfigValidationError, ScopeConfigNotFoundError) as e:
        raise _http_error(e)
    return ScopeConfigRead.model_validate(scope_config)


@router.delete(
    "/connections/{connection_id}/scope-configs/{scope_config_id}",
    response_model=ScopeConfigRead,
)
async def delete_scope_config(
    connection_id: int,
    scope_config_id: str,
    service: ServiceDep,
    actor_id: ActorDep,
) -> ScopeConfigRead:
    """Delete a scope configuration; repositories using it are detached."""
    try:
        scope_config = await service.delete(connection_id, scope_config_id, actor_id)
    except ScopeConfigNotFoundError as e:
        raise _http_error(e)
    return ScopeConfigRead.model_validate(scope_config)


@router.get(
    "/connections/{connection_id}/scope-configs/{scope_config_id}/scopes",
    response_model=list[ScopeSummary],
)
async def list_scopes_using_scope_config(
    connection_id: int,
    scope_config_id: str,
    service: ServiceDep,
) -> list[ScopeSummary]:
    """List repositories that use a scope configuration."""
    try:
        repos = await service.scopes_using(connection_id, scope_config_id)
    except ScopeConfigNotFoundError as e:
        raise _http_error(e)
    return [ScopeSummary.model_validate(repo) for repo in repos]
