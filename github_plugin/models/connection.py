"""GitHub connection model.

Only the identity of a connection matters here; credentials and endpoint
management belong to the connection subsystem.
"""

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from github_plugin.db.base import BaseNoId, TimestampMixin


class GithubConnection(BaseNoId, TimestampMixin):
    """A credentialed GitHub instance covering one or more repositories."""

    __tablename__ = "_tool_github_connections"

    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
    )
    name: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
        unique=True,
    )
    endpoint: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        default="https://api.github.com/",
    )

    def __repr__(self) -> str:
        return f"<GithubConnection {self.id} {self.name}>"
