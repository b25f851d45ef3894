class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or a precondition is not met."""


class ConflictError(DomainError):
    """Raised when a slot already has an open entry (or lost it mid-update)."""


class AuthorizationError(DomainError):
    """Raised when the shared correction PIN does not match."""


class ConsistencyError(DomainError):
    """Raised when the store holds more than one open entry for a slot."""

    def __init__(self, message: str, entry_ids=()):
        super().__init__(message)
        self.entry_ids = tuple(entry_ids)


class TransportError(DomainError):
    """Raised when a store read/write fails."""
