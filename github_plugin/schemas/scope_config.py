"""Pydantic schemas for scope configuration operations.

Every schema is addressed with lower camel case keys (``prType``,
``issueTypeBug``...) on the wire and when bound from task options or files.
Common and GitHub-specific fields share one flat namespace.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from github_plugin.models.scope_config import CONFIGURABLE_FIELDS, GithubScopeConfig


class ScopeConfigBase(BaseModel):
    """Configurable fields shared by the write and binding schemas.

    Values are only shape-checked here; pattern compilation, name and
    refdiff rules are enforced by ``GithubScopeConfig.validate`` so that
    the caller gets a field-scoped error.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    name: str = ""
    entities: list[str] | None = None
    pr_type: str | None = None
    pr_component: str | None = None
    pr_body_close_pattern: str | None = None
    issue_severity: str | None = None
    issue_priority: str | None = None
    issue_component: str | None = None
    issue_type_bug: str | None = None
    issue_type_incident: str | None = None
    issue_type_requirement: str | None = None
    deployment_pattern: str | None = None
    production_pattern: str | None = None
    env_name_pattern: str | None = None
    refdiff: Any = None

    def to_values(self) -> dict[str, Any]:
        """Return configurable values keyed by model attribute name."""
        return {field: getattr(self, field) for field in CONFIGURABLE_FIELDS}


class ScopeConfigWrite(ScopeConfigBase):
    """Schema for creating or fully replacing a scope configuration.

    The owning connection comes from the request path; fields left out
    are stored as unset.
    """

    connection_id: int | None = None


class ScopeConfigBinding(ScopeConfigBase):
    """Scope configuration bound from task options or a configuration file."""

    id: str | None = None
    connection_id: int | None = None

    def to_entity(self, connection_id: int | None = None) -> GithubScopeConfig:
        """Build a transient (never persisted) entity from the bound values."""
        scope_config = GithubScopeConfig(
            connection_id=connection_id if connection_id is not None else self.connection_id,
        )
        scope_config.apply(self.to_values())
        if self.id is not None:
            scope_config.id = self.id
        return scope_config


class ScopeConfigRead(BaseModel):
    """Schema for reading a scope configuration."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )

    id: str
    connection_id: int
    name: str
    entities: list[str] = Field(default_factory=list)
    pr_type: str | None = None
    pr_component: str | None = None
    pr_body_close_pattern: str | None = None
    issue_severity: str | None = None
    issue_priority: str | None = None
    issue_component: str | None = None
    issue_type_bug: str | None = None
    issue_type_incident: str | None = None
    issue_type_requirement: str | None = None
    deployment_pattern: str | None = None
    production_pattern: str | None = None
    env_name_pattern: str | None = None
    refdiff: dict[str, Any] | None = None
    created_at: datetime
    updated_at: datetime | None = None
    created_by: str | None = None
    updated_by: str | None = None


class GithubTaskOptions(BaseModel):
    """Options a transformation job is started with."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    connection_id: int
    github_id: int | None = None
    name: str | None = None
    scope_config_id: str | None = None
    scope_config: ScopeConfigBinding | None = None


class ScopeSummary(BaseModel):
    """Repository using a scope configuration."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )

    connection_id: int
    github_id: int
    name: str
    full_name: str
