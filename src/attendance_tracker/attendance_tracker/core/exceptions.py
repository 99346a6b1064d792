class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class AuthenticationError(DomainError):
    """Raised when login credentials are invalid."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""


class StorageUnavailable(DomainError):
    """Raised when a record collection cannot be read or written."""


class InvalidWindow(ValidationError):
    """Raised for an unknown report window or missing custom bounds."""


class InvalidAction(ValidationError):
    """Raised when an attendance action is not sign-in or sign-out."""


class UnknownAnalyticsKind(ValidationError):
    """Raised for an unsupported analytics request."""


class InvalidRecord(DomainError):
    """A stored record that cannot take part in aggregation.

    Never fatal: aggregation skips the record and reports the exclusion.
    """

    def __init__(self, message: str, record_id=None):
        super().__init__(message)
        self.record_id = record_id
