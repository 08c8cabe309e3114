"""Utility functions."""

from github_plugin.utils.snapshot import freeze, thaw

__all__ = ["freeze", "thaw"]
