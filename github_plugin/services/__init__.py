"""Business logic services."""

from github_plugin.services.scope_config import ScopeConfigService
from github_plugin.services.task_data import (
    GithubTaskData,
    load_scope_config,
    prepare_task_data,
)

__all__ = [
    "ScopeConfigService",
    "GithubTaskData",
    "load_scope_config",
    "prepare_task_data",
]
