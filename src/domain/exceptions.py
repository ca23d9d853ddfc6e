"""
domain.exceptions - Custom exception hierarchy for the contact assistant.

All domain-level errors inherit from DomainError so callers can catch
broad or specific exceptions as needed. Every error carries a stable,
machine-readable ``kind`` that adapters put in their failure envelopes.
"""


class DomainError(Exception):
    """Base exception for all domain-level errors."""

    kind: str = "internal_error"


class ValidationError(DomainError):
    """Raised when required caller input is missing or malformed."""

    kind = "validation_error"


class ConflictError(DomainError):
    """Raised when a write violates the store's email uniqueness."""

    kind = "conflict"


class UnknownToolError(DomainError):
    """Raised when the model requests a tool that is not registered."""

    kind = "unknown_tool"


class UpstreamServiceError(DomainError):
    """Raised when the language-model service fails, times out, or replies garbage."""

    kind = "upstream_error"


class NotFoundError(DomainError):
    """Raised when an update/delete target does not exist."""

    kind = "not_found"


class ConfigurationError(DomainError):
    """Raised at startup when required configuration is missing or invalid."""

    kind = "configuration_error"


class RepositoryError(DomainError):
    """Raised when a database operation fails."""

    kind = "repository_error"
