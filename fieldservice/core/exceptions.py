"""
Domain Exceptions Module

Errors raised by the workflow services before any write reaches the store.
Each carries the HTTP status it is rendered with by the handlers registered
in ``fieldservice.main``.
"""


class FieldServiceError(Exception):
    """Base class for every error the API reports to callers."""
    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationFailed(FieldServiceError):
    """Missing required field, bad value or unresolved reference."""
    status_code = 400


class IllegalTransition(ValidationFailed):
    """A status change that the transition table does not allow."""
    status_code = 409

    def __init__(self, kind: str, current: str, proposed: str):
        super().__init__(f"Illegal {kind} status transition: {current} -> {proposed}")
        self.kind = kind
        self.current = current
        self.proposed = proposed


class QuoteLocked(FieldServiceError):
    """Line items of a sent, decided or converted quote cannot change."""
    status_code = 409


class ConversionRejected(FieldServiceError):
    """Quote is not approved, or was already converted to a job."""
    status_code = 409


class RecordNotFound(FieldServiceError):
    status_code = 404

    def __init__(self, entity: str):
        super().__init__(f"{entity} not found")
        self.entity = entity


class StoreError(FieldServiceError):
    """The database rejected or failed a write; the session was rolled back."""
    status_code = 503
