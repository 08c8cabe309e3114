"""Compiled classification rules for one transformation run.

Rules are compiled once from a scope configuration and never reloaded, so
every record of a run is classified against the same snapshot. A pattern
that is not configured yields ``None`` from its helper: the caller keeps
its own default instead of treating the gap as an error.
"""

import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Optional

from github_plugin.models.scope_config import PATTERN_FIELDS, GithubScopeConfig
from github_plugin.utils.snapshot import freeze, thaw

ISSUE_TYPE_BUG = "BUG"
ISSUE_TYPE_INCIDENT = "INCIDENT"
ISSUE_TYPE_REQUIREMENT = "REQUIREMENT"

_ISSUE_TYPE_FIELDS = (
    ("issue_type_bug", ISSUE_TYPE_BUG),
    ("issue_type_incident", ISSUE_TYPE_INCIDENT),
    ("issue_type_requirement", ISSUE_TYPE_REQUIREMENT),
)

# Bare "#123"; "owner/repo#123" points at another repository
_LOCAL_ISSUE_REF = r"(?<![\w/])#(\d+)"


def issue_reference_regex(repo_full_name: Optional[str] = None) -> re.Pattern:
    """Regex for issue references that belong to the given repository.

    Without a repository only bare "#N" references count.
    """
    if not repo_full_name:
        return re.compile(_LOCAL_ISSUE_REF)
    url = rf"github\.com/{re.escape(repo_full_name)}/issues/(\d+)"
    return re.compile(rf"{_LOCAL_ISSUE_REF}|{url}", re.IGNORECASE)


@dataclass(frozen=True)
class ClassificationRules:
    """Read-only rule set a transformer applies to raw GitHub records."""

    patterns: Mapping[str, re.Pattern] = field(default_factory=dict)
    refdiff_document: Optional[Mapping[str, Any]] = None
    scope_config_id: Optional[str] = None
    issue_reference: re.Pattern = field(default_factory=issue_reference_regex)

    @classmethod
    def from_scope_config(
        cls,
        scope_config: GithubScopeConfig,
        repo_full_name: Optional[str] = None,
    ) -> "ClassificationRules":
        """Compile the configured patterns of a scope configuration.

        Args:
            scope_config: Configuration to compile
            repo_full_name: "owner/repo"; replaces a ``%s`` placeholder in
                the PR body close pattern

        Returns:
            Compiled rules
        """
        compiled: dict[str, re.Pattern] = {}
        for name in PATTERN_FIELDS:
            pattern = getattr(scope_config, name)
            if not pattern:
                continue
            if name == "pr_body_close_pattern" and repo_full_name and "%s" in pattern:
                pattern = pattern.replace("%s", re.escape(repo_full_name), 1)
            compiled[name] = re.compile(pattern)

        refdiff = freeze(scope_config.refdiff) if scope_config.refdiff is not None else None
        return cls(
            patterns=MappingProxyType(compiled),
            refdiff_document=refdiff,
            scope_config_id=scope_config.id,
            issue_reference=issue_reference_regex(repo_full_name),
        )

    @property
    def refdiff(self) -> Optional[dict[str, Any]]:
        """A fresh, mutable copy of the refdiff document."""
        if self.refdiff_document is None:
            return None
        return thaw(self.refdiff_document)

    def has_rule(self, name: str) -> bool:
        """Check whether a pattern is configured."""
        return name in self.patterns

    def _first_label(self, name: str, labels: Iterable[str]) -> Optional[str]:
        regex = self.patterns.get(name)
        if regex is None:
            return None
        for label in labels:
            if regex.search(label):
                return label
        return None

    def _first_value(self, name: str, labels: Iterable[str]) -> Optional[str]:
        regex = self.patterns.get(name)
        if regex is None:
            return None
        for label in labels:
            match = regex.search(label)
            if match:
                return match.group(1) if regex.groups else label
        return None

    # Issues

    def issue_severity(self, labels: Iterable[str]) -> Optional[str]:
        """Return the first label matching the severity pattern."""
        return self._first_label("issue_severity", labels)

    def issue_priority(self, labels: Iterable[str]) -> Optional[str]:
        """Return the first label matching the priority pattern."""
        return self._first_label("issue_priority", labels)

    def issue_component(self, labels: Iterable[str]) -> Optional[str]:
        """Return the first label matching the component pattern."""
        return self._first_label("issue_component", labels)

    def issue_types(self, labels: Iterable[str]) -> Optional[frozenset[str]]:
        """Return every standard issue type whose pattern matches a label.

        Each type is evaluated on its own, so one issue can be both a bug
        and an incident; choosing between them is up to the caller. Returns
        None when no issue type pattern is configured at all.
        """
        configured = [
            (self.patterns[name], issue_type)
            for name, issue_type in _ISSUE_TYPE_FIELDS
            if name in self.patterns
        ]
        if not configured:
            return None

        labels = list(labels)
        return frozenset(
            issue_type
            for regex, issue_type in configured
            if any(regex.search(label) for label in labels)
        )

    # Pull requests

    def pr_type(self, labels: Iterable[str]) -> Optional[str]:
        """Return the PR type from the first matching label.

        The first capture group is used when the pattern has one.
        """
        return self._first_value("pr_type", labels)

    def pr_component(self, labels: Iterable[str]) -> Optional[str]:
        """Return the PR component from the first matching label."""
        return self._first_value("pr_component", labels)

    def closing_issue_numbers(self, body: str) -> Optional[list[int]]:
        """Return issue numbers a PR body closes, in order of appearance.

        Only references to this run's repository are returned, even when the
        close pattern itself spans references to other repositories.
        """
        regex = self.patterns.get("pr_body_close_pattern")
        if regex is None:
            return None

        numbers: list[int] = []
        for match in regex.finditer(body or ""):
            for reference in self.issue_reference.finditer(match.group(0)):
                number = int(next(g for g in reference.groups() if g is not None))
                if number not in numbers:
                    numbers.append(number)
        return numbers

    # Deployments

    def is_deployment(self, name: str) -> Optional[bool]:
        """Check whether a CI/CD run or job name denotes a deployment."""
        regex = self.patterns.get("deployment_pattern")
        if regex is None:
            return None
        return regex.search(name) is not None

    def is_production(self, name: str) -> Optional[bool]:
        """Check whether a CI/CD run or environment name targets production."""
        regex = self.patterns.get("production_pattern")
        if regex is None:
            return None
        return regex.search(name) is not None

    def environment_name(self, name: str) -> Optional[str]:
        """Derive an environment name; first capture group if any, else the match."""
        regex = self.patterns.get("env_name_pattern")
        if regex is None:
            return None
        match = regex.search(name)
        if match is None:
            return None
        return match.group(1) if regex.groups else match.group(0)
