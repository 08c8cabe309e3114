"""Classification rules compiled from scope configurations."""

from github_plugin.rules.classification import (
    ISSUE_TYPE_BUG,
    ISSUE_TYPE_INCIDENT,
    ISSUE_TYPE_REQUIREMENT,
    ClassificationRules,
)

__all__ = [
    "ClassificationRules",
    "ISSUE_TYPE_BUG",
    "ISSUE_TYPE_INCIDENT",
    "ISSUE_TYPE_REQUIREMENT",
]
