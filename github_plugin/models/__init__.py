"""Database models for the GitHub connector."""

from github_plugin.models.common import (
    DOMAIN_TYPES,
    ScopeConfigMixin,
    ToolLayerScopeConfig,
    connection_id_of,
    scope_config_tables,
)
from github_plugin.models.connection import GithubConnection
from github_plugin.models.repo import GithubRepo
from github_plugin.models.scope_config import (
    CONFIGURABLE_FIELDS,
    PATTERN_FIELDS,
    GithubScopeConfig,
)

__all__ = [
    # Shared
    "DOMAIN_TYPES",
    "ScopeConfigMixin",
    "ToolLayerScopeConfig",
    "connection_id_of",
    "scope_config_tables",
    # Connection & scopes
    "GithubConnection",
    "GithubRepo",
    # Scope configuration
    "GithubScopeConfig",
    "PATTERN_FIELDS",
    "CONFIGURABLE_FIELDS",
]
