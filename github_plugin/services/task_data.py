"""Scope configuration loading at transformation job start."""

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from github_plugin.core.exceptions import (
    ConnectionReferenceError,
    ScopeConfigNotFoundError,
    ScopeNotFoundError,
)
from github_plugin.models.connection import GithubConnection
from github_plugin.models.repo import GithubRepo
from github_plugin.models.scope_config import GithubScopeConfig
from github_plugin.rules.classification import ClassificationRules
from github_plugin.schemas.scope_config import GithubTaskOptions
from github_plugin.utils.snapshot import freeze

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GithubTaskData:
    """Everything a transformation run needs, fixed for the run's lifetime."""

    options: GithubTaskOptions
    repo_full_name: Optional[str]
    scope_config: Mapping[str, Any]
    rules: ClassificationRules


async def _get_repo(session: AsyncSession, options: GithubTaskOptions) -> Optional[GithubRepo]:
    if options.github_id is None:
        return None
    result = await session.execute(
        select(GithubRepo).where(
            GithubRepo.connection_id == options.connection_id,
            GithubRepo.github_id == options.github_id,
        )
    )
    repo = result.scalar_one_or_none()
    if repo is None:
        raise ScopeNotFoundError(
            f"Repository not found: {options.github_id} (connection {options.connection_id})"
        )
    return repo


async def _get_scope_config(
    session: AsyncSession, connection_id: int, scope_config_id: str
) -> GithubScopeConfig:
    result = await session.execute(
        select(GithubScopeConfig).where(
            GithubScopeConfig.id == scope_config_id,
            GithubScopeConfig.connection_id == connection_id,
        )
    )
    scope_config = result.scalar_one_or_none()
    if scope_config is None:
        raise ScopeConfigNotFoundError(
            f"Scope config not found: {scope_config_id} (connection {connection_id})"
        )
    return scope_config


async def load_scope_config(
    session: AsyncSession,
    options: GithubTaskOptions,
    repo: Optional[GithubRepo] = None,
) -> GithubScopeConfig:
    """Resolve the scope configuration a job runs with.

    Resolution order: inline ``scopeConfig`` option, explicit
    ``scopeConfigId`` option, the repository's own configuration, and
    finally an empty configuration with every rule unset. The empty
    configuration is only used when no configuration is referenced at all.

    Raises:
        ScopeConfigNotFoundError: If a referenced configuration doesn't exist
        ScopeConfigValidationError: If an inline configuration is invalid
    """
    if options.scope_config is not None:
        scope_config = options.scope_config.to_entity(connection_id=options.connection_id)
        scope_config.validate()
        return scope_config

    scope_config_id = options.scope_config_id
    if scope_config_id is None and repo is not None:
        scope_config_id = repo.scope_config_id

    if scope_config_id is not None:
        return await _get_scope_config(session, options.connection_id, scope_config_id)

    logger.info(
        f"No scope config for connection {options.connection_id} "
        f"repo {options.github_id}, all classification rules unset"
    )
    return GithubScopeConfig(connection_id=options.connection_id, name="", entities=[])


async def prepare_task_data(
    session: AsyncSession,
    options: GithubTaskOptions | Mapping[str, Any],
) -> GithubTaskData:
    """Load and compile the scope configuration for one transformation run.

    Args:
        session: Database session
        options: Task options, either bound or as raw camelCase mapping

    Returns:
        Immutable task data; later edits to the stored configuration
        do not affect it

    Raises:
        ConnectionReferenceError: If the connection doesn't exist
        ScopeNotFoundError: If ``githubId`` names no repository of the connection
        ScopeConfigNotFoundError: If a referenced configuration doesn't exist
    """
    if not isinstance(options, GithubTaskOptions):
        options = GithubTaskOptions.model_validate(options)

    if await session.get(GithubConnection, options.connection_id) is None:
        raise ConnectionReferenceError(options.connection_id)

    repo = await _get_repo(session, options)
    scope_config = await load_scope_config(session, options, repo)

    repo_full_name = repo.full_name if repo is not None else options.name
    rules = ClassificationRules.from_scope_config(scope_config, repo_full_name)

    logger.info(
        f"Prepared GitHub task data (connection={options.connection_id}, "
        f"repo={repo_full_name}, scope_config={scope_config.id}, "
        f"rules={len(rules.patterns)})"
    )
    return GithubTaskData(
        options=options,
        repo_full_name=repo_full_name,
        scope_config=freeze(scope_config.to_dict()),
        rules=rules,
    )
