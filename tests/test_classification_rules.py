"""Tests for compiled classification rules."""

from github_plugin.loader import DEFAULT_SCOPE_CONFIG
from github_plugin.models import GithubScopeConfig
from github_plugin.rules import (
    ISSUE_TYPE_BUG,
    ISSUE_TYPE_INCIDENT,
    ISSUE_TYPE_REQUIREMENT,
    ClassificationRules,
)
from github_plugin.schemas import ScopeConfigBinding


def compile_rules(repo_full_name: str | None = None, **values) -> ClassificationRules:
    scope_config = GithubScopeConfig(connection_id=1)
    scope_config.apply({"name": "test", **values})
    return ClassificationRules.from_scope_config(scope_config, repo_full_name)


class TestUnsetRules:
    """Unset patterns fall back to the caller's default."""

    def test_every_helper_returns_none(self) -> None:
        """No configured pattern means no classification, not an error."""
        rules = compile_rules()

        assert rules.issue_severity(["severity/high"]) is None
        assert rules.issue_priority(["high"]) is None
        assert rules.issue_component(["component/api"]) is None
        assert rules.issue_types(["bug"]) is None
        assert rules.pr_type(["type/feature"]) is None
        assert rules.pr_component(["component/api"]) is None
        assert rules.closing_issue_numbers("fixes #1") is None
        assert rules.is_deployment("deploy") is None
        assert rules.is_production("prod") is None
        assert rules.environment_name("prod-eu") is None

    def test_empty_string_counts_as_unset(self) -> None:
        """An empty pattern is treated like an absent one."""
        rules = compile_rules(issue_type_incident="")

        assert not rules.has_rule("issue_type_incident")


class TestIssueRules:
    """Tests for issue label classification."""

    def test_first_matching_label_wins(self) -> None:
        """Severity uses the first matching label."""
        rules = compile_rules(issue_severity="^severity/(.*)$")

        labels = ["good first issue", "severity/critical", "severity/minor"]
        assert rules.issue_severity(labels) == "severity/critical"

    def test_no_match_returns_none(self) -> None:
        """A configured pattern that matches nothing gives None."""
        rules = compile_rules(issue_priority="^(high|low)$")

        assert rules.issue_priority(["medium"]) is None

    def test_issue_types_evaluated_independently(self) -> None:
        """A label set can match more than one standard type."""
        rules = compile_rules(
            issue_type_bug="bug|defect",
            issue_type_incident="incident|outage",
            issue_type_requirement="^feature$",
        )

        assert rules.issue_types(["defect", "outage"]) == frozenset(
            {ISSUE_TYPE_BUG, ISSUE_TYPE_INCIDENT}
        )
        assert rules.issue_types(["feature"]) == frozenset({ISSUE_TYPE_REQUIREMENT})
        assert rules.issue_types(["question"]) == frozenset()

    def test_issue_types_accept_generators(self) -> None:
        """Labels can be any iterable, consumed once."""
        rules = compile_rules(issue_type_bug="bug", issue_type_incident="bug")

        labels = (label for label in ["bug"])
        assert rules.issue_types(labels) == frozenset({ISSUE_TYPE_BUG, ISSUE_TYPE_INCIDENT})


class TestPullRequestRules:
    """Tests for pull request classification."""

    def test_pr_type_uses_capture_group(self) -> None:
        """The first capture group becomes the PR type."""
        rules = compile_rules(pr_type="type/(.*)$")

        assert rules.pr_type(["size/L", "type/bugfix"]) == "bugfix"

    def test_pr_component_without_group_uses_label(self) -> None:
        """Without a group the whole label is the value."""
        rules = compile_rules(pr_component="^api$")

        assert rules.pr_component(["ui", "api"]) == "api"

    def test_closing_issue_numbers(self) -> None:
        """Issue numbers referenced by closing keywords are extracted."""
        rules = compile_rules(pr_body_close_pattern="(?mi)(fix|close|resolve)(e?s|d)?\\s+#\\d+")

        body = "Fixes #12\nSome text about #99\ncloses #7 and fixes #12"
        assert rules.closing_issue_numbers(body) == [12, 7]

    def test_close_pattern_placeholder_uses_repo_name(self) -> None:
        """A %s placeholder is replaced by the escaped repository name."""
        rules = compile_rules(
            repo_full_name="apache/incubator-devlake",
            pr_body_close_pattern="(?i)closes https://github.com/%s/issues/\\d+",
        )

        body = (
            "closes https://github.com/apache/incubator-devlake/issues/42\n"
            "closes https://github.com/other/repo/issues/43"
        )
        assert rules.closing_issue_numbers(body) == [42]

    def test_default_close_pattern_compiles_with_repo(self) -> None:
        """The suggested close pattern works once bound to a repository."""
        binding = ScopeConfigBinding.model_validate(DEFAULT_SCOPE_CONFIG)
        scope_config = binding.to_entity(connection_id=1)
        scope_config.validate()

        rules = ClassificationRules.from_scope_config(scope_config, "apache/incubator-devlake")

        assert rules.closing_issue_numbers("This PR fixes #3") == [3]

    def test_default_close_pattern_ignores_other_repositories(self) -> None:
        """Issue URLs of other repositories are not closed by this PR."""
        binding = ScopeConfigBinding.model_validate(DEFAULT_SCOPE_CONFIG)
        rules = ClassificationRules.from_scope_config(
            binding.to_entity(connection_id=1), "apache/incubator-devlake"
        )

        body = "fixes https://github.com/other/repo/issues/9 and #3"
        assert rules.closing_issue_numbers(body) == [3]

    def test_cross_repository_shorthand_ignored(self) -> None:
        """"owner/repo#N" references point elsewhere."""
        rules = compile_rules(pr_body_close_pattern="(?i)fixes .*")

        assert rules.closing_issue_numbers("fixes other/repo#9 and #4") == [4]


class TestDeploymentRules:
    """Tests for CI/CD classification."""

    def test_deployment_and_production(self) -> None:
        """Deployment and production patterns are searched in names."""
        rules = compile_rules(deployment_pattern="deploy.*", production_pattern="prod")

        assert rules.is_deployment("ci/deploy-web") is True
        assert rules.is_deployment("unit-tests") is False
        assert rules.is_production("deploy-prod") is True
        assert rules.is_production("deploy-staging") is False

    def test_environment_name(self) -> None:
        """Environment names come from the first group, else the match."""
        grouped = compile_rules(env_name_pattern="deploy-(\\w+)")
        plain = compile_rules(env_name_pattern="staging|production")

        assert grouped.environment_name("deploy-staging") == "staging"
        assert plain.environment_name("release to production") == "production"
        assert plain.environment_name("lint") is None


class TestSnapshot:
    """Rules do not follow later edits of the configuration."""

    def test_rules_and_refdiff_are_detached(self) -> None:
        """Mutating the configuration after compiling has no effect."""
        scope_config = GithubScopeConfig(connection_id=1)
        scope_config.apply(
            {"name": "test", "issue_type_bug": "bug", "refdiff": {"tags": {"limit": 10}}}
        )
        rules = ClassificationRules.from_scope_config(scope_config)

        scope_config.issue_type_bug = "defect"
        scope_config.refdiff["tags"]["limit"] = 1

        assert rules.issue_types(["bug"]) == frozenset({ISSUE_TYPE_BUG})
        assert rules.refdiff == {"tags": {"limit": 10}}

    def test_refdiff_copies_do_not_change_snapshot(self) -> None:
        """Each read of refdiff is a fresh copy of the compiled document."""
        rules = compile_rules(refdiff={"tagsLimit": 10, "tags": ["v1.0"]})

        refdiff = rules.refdiff
        refdiff["tagsLimit"] = 1
        refdiff["tags"].append("v2.0")

        assert rules.refdiff == {"tagsLimit": 10, "tags": ["v1.0"]}
        assert rules.refdiff is not rules.refdiff
