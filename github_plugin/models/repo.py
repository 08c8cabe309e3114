"""GitHub repository scope model."""

from sqlalchemy import ForeignKey, Integer, String
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from github_plugin.db.base import BaseNoId, TimestampMixin


class GithubRepo(BaseNoId, TimestampMixin):
    """One repository collected through a connection.

    A repository uses at most one scope configuration; deleting the
    configuration leaves the repository without one.
    """

    __tablename__ = "_tool_github_repos"

    connection_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("_tool_github_connections.id", ondelete="CASCADE"),
        primary_key=True,
    )
    github_id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=False,
    )
    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )
    full_name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )
    scope_config_id: Mapped[str | None] = mapped_column(
        UUID(as_uuid=False),
        ForeignKey("_tool_github_scope_configs.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    def __repr__(self) -> str:
        return f"<GithubRepo {self.connection_id}:{self.github_id} {self.full_name}>"
