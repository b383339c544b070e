# core/errors.py
"""Error taxonomy for the lending domain.

Every failure a caller can act on is a ``LendingError`` subclass carrying a
stable ``code`` and the HTTP status the API answers with.
"""


class LendingError(Exception):
    status_code = 500
    code = "internal_error"

    def __init__(self, message: str, code: str | None = None):
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code


class ValidationError(LendingError):
    """Missing or malformed input, caught before any write."""
    status_code = 400
    code = "invalid_request"


class SelfBorrowError(ValidationError):
    code = "self_borrow"


class AuthenticationRequired(LendingError):
    status_code = 401
    code = "not_authenticated"


class ForbiddenError(LendingError):
    status_code = 403
    code = "forbidden"


class NotFoundError(LendingError):
    status_code = 404
    code = "not_found"


class DuplicateRequestError(LendingError):
    """The requester already has a request for this book."""
    status_code = 409
    code = "already_requested"


class RequestAlreadyResolvedError(LendingError):
    status_code = 409
    code = "already_resolved"


class ProfileSetupError(LendingError):
    status_code = 500
    code = "profile_setup_failed"


class StorageError(LendingError):
    """Any other storage failure. Retryable by the caller, never retried here."""
    status_code = 503
    code = "storage_unavailable"
