"""Fields and capability shared by every connector's scope configuration."""

from typing import Protocol, runtime_checkable

from sqlalchemy import ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from github_plugin.db.base import JSONDocument

# Domain layers a scope configuration can apply to
DOMAIN_TYPE_CODE = "CODE"
DOMAIN_TYPE_TICKET = "TICKET"
DOMAIN_TYPE_CODE_REVIEW = "CODEREVIEW"
DOMAIN_TYPE_CROSS = "CROSS"
DOMAIN_TYPE_CICD = "CICD"
DOMAIN_TYPE_CODE_QUALITY = "CODEQUALITY"

DOMAIN_TYPES = (
    DOMAIN_TYPE_CODE,
    DOMAIN_TYPE_TICKET,
    DOMAIN_TYPE_CODE_REVIEW,
    DOMAIN_TYPE_CROSS,
    DOMAIN_TYPE_CICD,
    DOMAIN_TYPE_CODE_QUALITY,
)


@runtime_checkable
class ToolLayerScopeConfig(Protocol):
    """Capability every connector scope configuration provides.

    Generic configuration code works against this protocol only and never
    needs to know connector-specific fields.
    """

    def get_connection_id(self) -> int: ...

    @classmethod
    def storage_name(cls) -> str: ...


class ScopeConfigMixin:
    """Columns common to all connectors' scope configurations."""

    connection_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("_tool_github_connections.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )
    # Empty list means every domain type
    entities: Mapped[list] = mapped_column(
        JSONDocument,
        nullable=False,
        default=lambda: [],
    )

    def applies_to(self, domain_type: str) -> bool:
        """Check whether this configuration covers the given domain type."""
        return not self.entities or domain_type in self.entities


def connection_id_of(scope_config: ToolLayerScopeConfig) -> int:
    """Return the owning connection id of any connector's scope configuration."""
    return scope_config.get_connection_id()


def scope_config_tables(*config_types: type[ToolLayerScopeConfig]) -> list[str]:
    """Resolve storage names for scope configuration types."""
    return [config_type.storage_name() for config_type in config_types]
