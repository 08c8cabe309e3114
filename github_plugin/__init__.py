"""GitHub connector plugin: scope configuration for issue, PR and deployment classification."""

__version__ = "0.1.0"
