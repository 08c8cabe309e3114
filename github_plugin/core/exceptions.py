"""Errors raised while writing or loading scope configurations.

All of them describe caller or input defects, so none are retried.
"""


class ScopeConfigError(Exception):
    """Base class for scope configuration errors."""
    pass


class ScopeConfigValidationError(ScopeConfigError):
    """Raised when a scope configuration fails validation.

    ``field`` and ``reason`` describe the first violation; ``violations``
    holds every violation found, in field order.
    """

    def __init__(
        self,
        field: str,
        reason: str,
        violations: list[tuple[str, str]] | None = None,
    ) -> None:
        self.field = field
        self.reason = reason
        self.violations = violations or [(field, reason)]
        super().__init__(f"{field}: {reason}")

    def to_dict(self) -> dict:
        return {
            "field": self.field,
            "reason": self.reason,
            "violations": [
                {"field": field, "reason": reason}
                for field, reason in self.violations
            ],
        }


class ConnectionReferenceError(ScopeConfigError):
    """Raised when a connection id does not resolve to an existing connection."""

    def __init__(self, connection_id: int) -> None:
        self.connection_id = connection_id
        super().__init__(f"Connection not found: {connection_id}")


class ScopeConfigNotFoundError(ScopeConfigError):
    """Raised when a scope configuration id or name does not exist."""
    pass


class ScopeNotFoundError(ScopeConfigError):
    """Raised when a job addresses a repository scope that does not exist."""
    pass
