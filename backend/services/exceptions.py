"""Exceptions raised by the sprint metrics service."""


class SprintMetricsError(Exception):
    """Base exception for sprint metrics errors."""


class ConfigurationError(SprintMetricsError):
    """Raised for invalid or missing configuration and selection parameters."""


class FetchFailure(SprintMetricsError):
    """Raised when Jira data cannot be fetched or is not usable."""


class BoardNotFound(FetchFailure):
    """Raised when a board name does not match any board."""


class NoActiveSprint(SprintMetricsError):
    """Raised when a board has no active sprint of its own."""
