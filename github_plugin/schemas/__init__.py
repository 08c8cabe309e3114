"""Pydantic schemas for request/response validation."""

from github_plugin.schemas.scope_config import (
    GithubTaskOptions,
    ScopeConfigBinding,
    ScopeConfigRead,
    ScopeConfigWrite,
    ScopeSummary,
)

__all__ = [
    "ScopeConfigWrite",
    "ScopeConfigRead",
    "ScopeConfigBinding",
    "GithubTaskOptions",
    "ScopeSummary",
]
