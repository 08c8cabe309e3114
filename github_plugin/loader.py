"""Scope configuration loading from YAML files."""

from pathlib import Path
from typing import Any

import yaml

from github_plugin.core.exceptions import ScopeConfigValidationError
from github_plugin.schemas.scope_config import ScopeConfigBinding

# Suggested starting point for a new configuration. It is offered to
# operators to copy and is never applied to a stored configuration.
DEFAULT_SCOPE_CONFIG: dict[str, Any] = {
    "name": "default",
    "entities": ["CODE", "TICKET", "CODEREVIEW", "CROSS", "CICD"],
    "prType": "type/(.*)$",
    "prComponent": "component/(.*)$",
    "prBodyClosePattern": (
        "(?mi)(fix|close|resolve|fixes|closes|resolves|fixed|closed|resolved)"
        "[\\s]*.*(((and )?(#|https://github.com/%s/issues/)\\d+[ ]*)+)"
    ),
    "issueSeverity": "severity/(.*)$",
    "issuePriority": "^(highest|high|medium|low|p0|p1|p2|p3)$",
    "issueComponent": "component/(.*)$",
    "issueTypeBug": "^(bug|failure|error)$",
    "issueTypeIncident": "",
    "issueTypeRequirement": "^(feat|feature|proposal|requirement)$",
    "deploymentPattern": "(deploy|push-image)",
    "productionPattern": "prod(.*)",
    "envNamePattern": "(?i)prod(.*)",
    "refdiff": {
        "tagsPattern": "",
        "tagsLimit": 10,
        "tagsOrder": "reverse semver",
    },
}


def load_scope_config_file(path: str | Path) -> ScopeConfigBinding:
    """Bind a scope configuration from a YAML (or JSON) file.

    Args:
        path: File whose top-level document uses camelCase keys

    Returns:
        Bound, not yet validated, scope configuration

    Raises:
        FileNotFoundError: If the file doesn't exist
        yaml.YAMLError: If the file is not valid YAML
        ScopeConfigValidationError: If the document is not a mapping
    """
    filepath = Path(path)

    if not filepath.exists():
        raise FileNotFoundError(f"Scope config file not found: {filepath}")

    document = yaml.safe_load(filepath.read_text(encoding="utf-8"))
    if not isinstance(document, dict):
        raise ScopeConfigValidationError(
            "scopeConfig", f"{filepath.name} must contain a key-value document"
        )

    return ScopeConfigBinding.model_validate(document)
