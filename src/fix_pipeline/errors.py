from __future__ import annotations


class VersioningError(Exception):
    """Base class for fatal version resolution failures."""


class ConfigError(VersioningError):
    """A required file is missing or a config file is malformed."""


class ConsistencyError(VersioningError):
    """Version marker files or the hide-RC override disagree."""
