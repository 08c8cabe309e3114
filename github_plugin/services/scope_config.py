"""Scope configuration service.

Writes are validated in full before anything reaches the session, so an
invalid configuration is never flushed and never visible to readers.
"""

import logging
from collections.abc import Mapping
from typing import Any, Optional

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from github_plugin.core.exceptions import (
    ConnectionReferenceError,
    ScopeConfigNotFoundError,
    ScopeConfigValidationError,
)
from github_plugin.core.logging import audit_logger
from github_plugin.models.connection import GithubConnection
from github_plugin.models.repo import GithubRepo
from github_plugin.models.scope_config import GithubScopeConfig

logger = logging.getLogger(__name__)


class ScopeConfigService:
    """Service for creating, replacing and deleting scope configurations."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def _require_connection(self, connection_id: int) -> GithubConnection:
        connection = await self.session.get(GithubConnection, connection_id)
        if connection is None:
            raise ConnectionReferenceError(connection_id)
        return connection

    async def _ensure_unique_name(
        self,
        connection_id: int,
        name: str,
        exclude_id: Optional[str] = None,
    ) -> None:
        query = select(GithubScopeConfig.id).where(
            GithubScopeConfig.connection_id == connection_id,
            GithubScopeConfig.name == name,
        )
        if exclude_id is not None:
            query = query.where(GithubScopeConfig.id != exclude_id)

        result = await self.session.execute(query.limit(1))
        if result.scalar_one_or_none() is not None:
            raise ScopeConfigValidationError(
                "name",
                f"scope config named '{name}' already exists for connection {connection_id}",
            )

    async def _commit(self, connection_id: int, name: str) -> None:
        try:
            await self.session.commit()
        except IntegrityError as e:
            await self.session.rollback()
            logger.warning(f"Scope config write rejected by storage: {e.orig}")
            # The owning connection was deleted between our check and commit
            result = await self.session.execute(
                select(GithubConnection.id).where(GithubConnection.id == connection_id)
            )
            if result.scalar_one_or_none() is None:
                raise ConnectionReferenceError(connection_id) from e
            # Otherwise a concurrent writer took the name
            raise ScopeConfigValidationError(
                "name",
                f"scope config named '{name}' already exists for connection {connection_id}",
            ) from e

    async def create(
        self,
        connection_id: int,
        values: Mapping[str, Any],
        actor_id: Optional[str] = None,
    ) -> GithubScopeConfig:
        """Create a scope configuration for a connection.

        Args:
            connection_id: Owning connection
            values: Configurable fields keyed by attribute name
            actor_id: Operator making the change

        Returns:
            The persisted scope configuration

        Raises:
            ConnectionReferenceError: If the connection does not exist
            ScopeConfigValidationError: If a field is invalid or the name is taken
        """
        await self._require_connection(connection_id)

        scope_config = GithubScopeConfig(
            connection_id=connection_id,
            created_by=actor_id,
        )
        scope_config.apply(values)
        scope_config.validate()
        await self._ensure_unique_name(connection_id, scope_config.name)

        self.session.add(scope_config)
        await self._commit(connection_id, scope_config.name)
        await self.session.refresh(scope_config)

        audit_logger.log(
            action="scope_config.created",
            actor_id=actor_id,
            entity_type="github_scope_config",
            entity_id=scope_config.id,
            metadata={"connection_id": connection_id, "name": scope_config.name},
        )
        return scope_config

    async def get(self, connection_id: int, scope_config_id: str) -> GithubScopeConfig:
        """Get a scope configuration by id within a connection."""
        result = await self.session.execute(
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

    async def get_by_name(self, connection_id: int, name: str) -> GithubScopeConfig:
        """Get a scope configuration by its name within a connection."""
        result = await self.session.execute(
            select(GithubScopeConfig).where(
                GithubScopeConfig.connection_id == connection_id,
                GithubScopeConfig.name == name,
            )
        )
        scope_config = result.scalar_one_or_none()

        if scope_config is None:
            raise ScopeConfigNotFoundError(
                f"Scope config not found: '{name}' (connection {connection_id})"
            )
        return scope_config

    async def list_for_connection(self, connection_id: int) -> list[GithubScopeConfig]:
        """List the scope configurations of a connection ordered by name."""
        await self._require_connection(connection_id)

        result = await self.session.execute(
            select(GithubScopeConfig)
            .where(GithubScopeConfig.connection_id == connection_id)
            .order_by(GithubScopeConfig.name)
        )
        return list(result.scalars().all())

    async def replace(
        self,
        connection_id: int,
        scope_config_id: str,
        values: Mapping[str, Any],
        actor_id: Optional[str] = None,
    ) -> GithubScopeConfig:
        """Replace every configurable field of a scope configuration.

        The replacement is validated on a detached copy first; the stored
        row is only touched once the new values are known to be valid.
        """
        scope_config = await self.get(connection_id, scope_config_id)

        candidate = GithubScopeConfig(connection_id=connection_id)
        candidate.apply(values)
        candidate.validate()
        if candidate.name != scope_config.name:
            await self._ensure_unique_name(
                connection_id, candidate.name, exclude_id=scope_config.id
            )

        scope_config.apply(values)
        scope_config.updated_by = actor_id
        await self._commit(connection_id, scope_config.name)
        await self.session.refresh(scope_config)

        audit_logger.log(
            action="scope_config.replaced",
            actor_id=actor_id,
            entity_type="github_scope_config",
            entity_id=scope_config.id,
            metadata={"connection_id": connection_id, "name": scope_config.name},
        )
        return scope_config

    async def delete(
        self,
        connection_id: int,
        scope_config_id: str,
        actor_id: Optional[str] = None,
    ) -> GithubScopeConfig:
        """Delete a scope configuration, detaching the repositories using it."""
        scope_config = await self.get(connection_id, scope_config_id)

        await self.session.execute(
            update(GithubRepo)
            .where(
                GithubRepo.connection_id == connection_id,
                GithubRepo.scope_config_id == scope_config_id,
            )
            .values(scope_config_id=None)
        )
        await self.session.delete(scope_config)
        await self.session.commit()

        audit_logger.log(
            action="scope_config.deleted",
            actor_id=actor_id,
            entity_type="github_scope_config",
            entity_id=scope_config_id,
            metadata={"connection_id": connection_id, "name": scope_config.name},
        )
        return scope_config

    async def scopes_using(
        self, connection_id: int, scope_config_id: str
    ) -> list[GithubRepo]:
        """List repositories that use a scope configuration."""
        await self.get(connection_id, scope_config_id)

        result = await self.session.execute(
            select(GithubRepo)
            .where(
                GithubRepo.connection_id == connection_id,
                GithubRepo.scope_config_id == scope_config_id,
            )
            .order_by(GithubRepo.full_name)
        )
        return list(result.scalars().all())
