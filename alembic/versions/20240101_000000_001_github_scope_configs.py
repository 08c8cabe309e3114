"""GitHub connections, repositories and scope configurations.

Revision ID: 001
Revises:
Create Date: 2024-01-01 00:00:00.000000

"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create GitHub tool-layer tables."""

    op.create_table(
        "_tool_github_connections",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("endpoint", sa.String(255), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id", name="pk__tool_github_connections"),
        sa.UniqueConstraint("name", name="uq__tool_github_connections_name"),
    )

    # Pattern columns are bounded text; refdiff is a schemaless document
    op.create_table(
        "_tool_github_scope_configs",
        sa.Column("id", postgresql.UUID(as_uuid=False), nullable=False),
        sa.Column("connection_id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("entities", postgresql.JSONB(), nullable=False),
        sa.Column("pr_type", sa.String(255), nullable=True),
        sa.Column("pr_component", sa.String(255), nullable=True),
        sa.Column("pr_body_close_pattern", sa.String(255), nullable=True),
        sa.Column("issue_severity", sa.String(255), nullable=True),
        sa.Column("issue_priority", sa.String(255), nullable=True),
        sa.Column("issue_component", sa.String(255), nullable=True),
        sa.Column("issue_type_bug", sa.String(255), nullable=True),
        sa.Column("issue_type_incident", sa.String(255), nullable=True),
        sa.Column("issue_type_requirement", sa.String(255), nullable=True),
        sa.Column("deployment_pattern", sa.String(255), nullable=True),
        sa.Column("production_pattern", sa.String(255), nullable=True),
        sa.Column("env_name_pattern", sa.String(255), nullable=True),
        sa.Column("refdiff", postgresql.JSONB(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_by", postgresql.UUID(as_uuid=False), nullable=True),
        sa.Column("updated_by", postgresql.UUID(as_uuid=False), nullable=True),
        sa.PrimaryKeyConstraint("id", name="pk__tool_github_scope_configs"),
        sa.ForeignKeyConstraint(
            ["connection_id"],
            ["_tool_github_connections.id"],
            name="fk__tool_github_scope_configs_connection_id__tool_github_connections",
            ondelete="CASCADE",
        ),
        sa.UniqueConstraint(
            "connection_id",
            "name",
            name="uq__tool_github_scope_configs_connection_id_name",
        ),
    )
    op.create_index(
        "ix__tool_github_scope_configs_connection_id",
        "_tool_github_scope_configs",
        ["connection_id"],
    )

    op.create_table(
        "_tool_github_repos",
        sa.Column("connection_id", sa.Integer(), nullable=False),
        sa.Column("github_id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("full_name", sa.String(255), nullable=False),
        sa.Column("scope_config_id", postgresql.UUID(as_uuid=False), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("connection_id", "github_id", name="pk__tool_github_repos"),
        sa.ForeignKeyConstraint(
            ["connection_id"],
            ["_tool_github_connections.id"],
            name="fk__tool_github_repos_connection_id__tool_github_connections",
            ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(
            ["scope_config_id"],
            ["_tool_github_scope_configs.id"],
            name="fk__tool_github_repos_scope_config_id__tool_github_scope_configs",
            ondelete="SET NULL",
        ),
    )
    op.create_index(
        "ix__tool_github_repos_scope_config_id",
        "_tool_github_repos",
        ["scope_config_id"],
    )


def downgrade() -> None:
    """Drop GitHub tool-layer tables."""
    op.drop_index("ix__tool_github_repos_scope_config_id", table_name="_tool_github_repos")
    op.drop_table("_tool_github_repos")
    op.drop_index(
        "ix__tool_github_scope_configs_connection_id",
        table_name="_tool_github_scope_configs",
    )
    op.drop_table("_tool_github_scope_configs")
    op.drop_table("_tool_github_connections")
