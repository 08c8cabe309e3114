"""Tests for the GitHub scope configuration entity."""

import pytest

from github_plugin.core.config import settings
from github_plugin.core.exceptions import ScopeConfigValidationError
from github_plugin.models import (
    PATTERN_FIELDS,
    GithubScopeConfig,
    ToolLayerScopeConfig,
    connection_id_of,
    scope_config_tables,
)


def make_config(**values) -> GithubScopeConfig:
    scope_config = GithubScopeConfig(connection_id=values.pop("connection_id", 7))
    scope_config.apply({"name": "default", **values})
    return scope_config


class TestCapability:
    """Tests for the tool-layer scope config capability."""

    def test_get_connection_id(self) -> None:
        """The owning connection id is exposed without side effects."""
        scope_config = make_config(connection_id=42)

        assert scope_config.get_connection_id() == 42
        assert scope_config.get_connection_id() == 42

    def test_storage_name_is_static(self) -> None:
        """Storage name resolves from the class and from instances."""
        assert GithubScopeConfig.storage_name() == "_tool_github_scope_configs"
        assert make_config().storage_name() == GithubScopeConfig.__tablename__

    def test_satisfies_protocol(self) -> None:
        """Generic code can treat the config as a ToolLayerScopeConfig."""
        scope_config = make_config(connection_id=3)

        assert isinstance(scope_config, ToolLayerScopeConfig)
        assert connection_id_of(scope_config) == 3
        assert scope_config_tables(GithubScopeConfig) == ["_tool_github_scope_configs"]


class TestValidation:
    """Tests for write-time validation."""

    def test_all_patterns_absent_is_valid(self) -> None:
        """A configuration without any pattern validates."""
        scope_config = make_config()

        scope_config.validate()
        assert all(getattr(scope_config, f) is None for f in PATTERN_FIELDS)
        assert scope_config.refdiff is None

    def test_empty_name_names_name_field(self) -> None:
        """An empty name fails with a ValidationError on field 'name'."""
        scope_config = make_config(name="")

        with pytest.raises(ScopeConfigValidationError) as exc_info:
            scope_config.validate()

        assert exc_info.value.field == "name"

    def test_blank_name_rejected(self) -> None:
        """Whitespace-only names are rejected."""
        with pytest.raises(ScopeConfigValidationError) as exc_info:
            make_config(name="   ").validate()

        assert exc_info.value.field == "name"

    @pytest.mark.parametrize("field", PATTERN_FIELDS)
    def test_unbalanced_group_rejected_in_any_pattern(self, field: str) -> None:
        """An unbalanced group in any pattern field fails validation."""
        scope_config = make_config(**{field: "(bug|defect"})

        with pytest.raises(ScopeConfigValidationError) as exc_info:
            scope_config.validate()

        assert exc_info.value.field == field
        assert "invalid regular expression" in exc_info.value.reason

    def test_pattern_longer_than_column_rejected(self) -> None:
        """Patterns must fit the bounded storage column."""
        scope_config = make_config(issue_priority="a" * 256)

        with pytest.raises(ScopeConfigValidationError) as exc_info:
            scope_config.validate()

        assert exc_info.value.field == "issue_priority"

    def test_length_setting_capped_at_column_width(self, monkeypatch) -> None:
        """A larger configured bound still rejects what the column can't hold."""
        monkeypatch.setattr(settings, "pattern_max_length", 1000)
        scope_config = make_config(issue_priority="a" * 256)

        with pytest.raises(ScopeConfigValidationError) as exc_info:
            scope_config.validate()

        assert exc_info.value.field == "issue_priority"

    def test_first_violation_reported_and_all_collected(self) -> None:
        """The error names the first field and carries every violation."""
        scope_config = make_config(
            name="",
            pr_type="[",
            deployment_pattern="(",
        )

        with pytest.raises(ScopeConfigValidationError) as exc_info:
            scope_config.validate()

        error = exc_info.value
        assert error.field == "name"
        assert [field for field, _ in error.violations] == [
            "name",
            "pr_type",
            "deployment_pattern",
        ]
        assert error.to_dict()["violations"][1]["field"] == "pr_type"

    def test_refdiff_must_be_mapping(self) -> None:
        """A refdiff that is not a key-value document is malformed."""
        with pytest.raises(ScopeConfigValidationError) as exc_info:
            make_config(refdiff=["tagsLimit", 10]).validate()

        assert exc_info.value.field == "refdiff"

    def test_refdiff_nested_non_string_key_rejected(self) -> None:
        """Nested keys must be strings to survive JSON storage unchanged."""
        with pytest.raises(ScopeConfigValidationError) as exc_info:
            make_config(refdiff={"tags": {1: "v1.0"}}).validate()

        assert exc_info.value.field == "refdiff"

    def test_refdiff_unserialisable_value_rejected(self) -> None:
        """Values that are not JSON are rejected."""
        with pytest.raises(ScopeConfigValidationError) as exc_info:
            make_config(refdiff={"tagsLimit": float("nan")}).validate()

        assert exc_info.value.field == "refdiff"

    def test_nested_refdiff_is_valid(self) -> None:
        """Nested documents with connector-defined keys are accepted."""
        make_config(
            refdiff={
                "tagsPattern": "v\\d+\\.\\d+",
                "tagsLimit": 10,
                "ranges": [{"old": "v1.0", "new": "v1.1"}],
            }
        ).validate()

    def test_unknown_entity_rejected(self) -> None:
        """Entities must be known domain types."""
        with pytest.raises(ScopeConfigValidationError) as exc_info:
            make_config(entities=["CODE", "WIKI"]).validate()

        assert exc_info.value.field == "entities"


class TestApply:
    """Tests for full-replacement semantics."""

    def test_apply_unsets_missing_fields(self) -> None:
        """Fields absent from the new values become unset."""
        scope_config = make_config(pr_type="type/(.*)$", refdiff={"tagsLimit": 5})

        scope_config.apply({"name": "renamed"})

        assert scope_config.name == "renamed"
        assert scope_config.pr_type is None
        assert scope_config.refdiff is None
        assert scope_config.entities == []

    def test_applies_to_all_domains_when_entities_empty(self) -> None:
        """No entities means every domain type."""
        assert make_config().applies_to("TICKET")
        assert make_config(entities=["CICD"]).applies_to("CICD")
        assert not make_config(entities=["CICD"]).applies_to("TICKET")
