"""GitHub scope configuration model.

A scope configuration is a named set of classification rules owned by one
connection. Transformation jobs read it once at start-up and use the
patterns to map GitHub labels, PR bodies and workflow runs onto the
normalised domain model.
"""

import json
import re
from collections.abc import Mapping
from typing import Any

from sqlalchemy import String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from github_plugin.core.config import settings
from github_plugin.core.exceptions import ScopeConfigValidationError
from github_plugin.db.base import AuditMixin, Base, JSONDocument, TimestampMixin
from github_plugin.models.common import DOMAIN_TYPES, ScopeConfigMixin

# Pattern attributes in the order they are validated and reported
PATTERN_FIELDS = (
    "pr_type",
    "pr_component",
    "pr_body_close_pattern",
    "issue_severity",
    "issue_priority",
    "issue_component",
    "issue_type_bug",
    "issue_type_incident",
    "issue_type_requirement",
    "deployment_pattern",
    "production_pattern",
    "env_name_pattern",
)

# Width of the name and pattern columns
COLUMN_LENGTH = 255

CONFIGURABLE_FIELDS = ("name", "entities", *PATTERN_FIELDS, "refdiff")


class GithubScopeConfig(Base, ScopeConfigMixin, TimestampMixin, AuditMixin):
    """Classification rules for GitHub repositories of one connection."""

    __tablename__ = "_tool_github_scope_configs"
    __table_args__ = (
        UniqueConstraint(
            "connection_id",
            "name",
            name="uq__tool_github_scope_configs_connection_id_name",
        ),
    )

    # Pull requests
    pr_type: Mapped[str | None] = mapped_column(String(COLUMN_LENGTH), nullable=True)
    pr_component: Mapped[str | None] = mapped_column(String(COLUMN_LENGTH), nullable=True)
    pr_body_close_pattern: Mapped[str | None] = mapped_column(String(COLUMN_LENGTH), nullable=True)

    # Issues
    issue_severity: Mapped[str | None] = mapped_column(String(COLUMN_LENGTH), nullable=True)
    issue_priority: Mapped[str | None] = mapped_column(String(COLUMN_LENGTH), nullable=True)
    issue_component: Mapped[str | None] = mapped_column(String(COLUMN_LENGTH), nullable=True)
    issue_type_bug: Mapped[str | None] = mapped_column(String(COLUMN_LENGTH), nullable=True)
    issue_type_incident: Mapped[str | None] = mapped_column(String(COLUMN_LENGTH), nullable=True)
    issue_type_requirement: Mapped[str | None] = mapped_column(String(COLUMN_LENGTH), nullable=True)

    # Deployments
    deployment_pattern: Mapped[str | None] = mapped_column(String(COLUMN_LENGTH), nullable=True)
    production_pattern: Mapped[str | None] = mapped_column(String(COLUMN_LENGTH), nullable=True)
    env_name_pattern: Mapped[str | None] = mapped_column(String(COLUMN_LENGTH), nullable=True)

    # Options for ref diff calculation, e.g. {"tagsPattern": ..., "tagsLimit": 10}
    refdiff: Mapped[dict | None] = mapped_column(
        JSONDocument,
        nullable=True,
    )

    def get_connection_id(self) -> int:
        """Return the owning connection id."""
        return self.connection_id

    @classmethod
    def storage_name(cls) -> str:
        """Return the table this configuration is stored in."""
        return cls.__tablename__

    def validation_errors(self) -> list[tuple[str, str]]:
        """Collect every (field, reason) violation of this configuration."""
        errors: list[tuple[str, str]] = []
        max_length = min(settings.pattern_max_length, COLUMN_LENGTH)

        if not self.name or not self.name.strip():
            errors.append(("name", "name is required"))
        elif len(self.name) > COLUMN_LENGTH:
            errors.append(("name", f"name must be at most {COLUMN_LENGTH} characters"))

        for domain_type in self.entities or []:
            if domain_type not in DOMAIN_TYPES:
                errors.append(("entities", f"unknown domain type: {domain_type}"))
                break

        for field in PATTERN_FIELDS:
            pattern = getattr(self, field)
            if pattern is None:
                continue
            if not isinstance(pattern, str):
                errors.append((field, "pattern must be a string"))
                continue
            if len(pattern) > max_length:
                errors.append(
                    (field, f"pattern must be at most {max_length} characters")
                )
                continue
            try:
                re.compile(pattern)
            except re.error as e:
                errors.append((field, f"invalid regular expression: {e}"))

        if self.refdiff is not None:
            reason = _document_error(self.refdiff)
            if reason:
                errors.append(("refdiff", reason))

        return errors

    def validate(self) -> None:
        """Raise ScopeConfigValidationError naming the first offending field."""
        errors = self.validation_errors()
        if errors:
            field, reason = errors[0]
            raise ScopeConfigValidationError(field, reason, errors)

    def apply(self, values: Mapping[str, Any]) -> None:
        """Replace every configurable field; missing keys become unset."""
        for field in CONFIGURABLE_FIELDS:
            value = values.get(field)
            if field == "entities" and value is None:
                value = []
            setattr(self, field, value)

    def to_dict(self) -> dict[str, Any]:
        """Snapshot of the configurable fields keyed by attribute name."""
        return {field: getattr(self, field) for field in CONFIGURABLE_FIELDS}

    def __repr__(self) -> str:
        return f"<GithubScopeConfig {self.connection_id}:{self.name}>"


def _document_error(document: Any, path: str = "refdiff") -> str | None:
    """Return why a refdiff document is malformed, or None if it is fine."""
    if not isinstance(document, Mapping):
        return f"{path} must be a key-value document"

    stack = [(path, document)]
    while stack:
        current_path, node = stack.pop()
        if isinstance(node, Mapping):
            for key, value in node.items():
                if not isinstance(key, str):
                    return f"{current_path} has a non-string key: {key!r}"
                stack.append((f"{current_path}.{key}", value))
        elif isinstance(node, list):
            stack.extend((f"{current_path}[{i}]", v) for i, v in enumerate(node))

    try:
        json.dumps(document, allow_nan=False)
    except (TypeError, ValueError) as e:
        return f"{path} is not a valid JSON document: {e}"
    return None
