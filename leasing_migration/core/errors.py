"""Failure types that abort a migration run."""


class MigrationError(Exception):
    """Base class for fatal migration failures."""

    error_code = "MIGRATION_ERROR"


class ConfigError(MigrationError):
    """Raised when required configuration or credentials are absent."""

    error_code = "CONFIG_ERROR"


class SourceReadError(MigrationError):
    """Raised when an input file cannot be read."""

    error_code = "SOURCE_READ_ERROR"
