"""
Base Domain Errors

Domain errors are plain exceptions raised by domain and service code.
They carry the HTTP status and error code the API layer reports, so the
domain never imports the web framework.
"""

from typing import Optional


class DomainError(Exception):
    """Base class for expected, client-facing business rule failures."""

    status_code = 400
    error_code = 'DOMAIN_ERROR'
    default_message = 'Request could not be processed.'
    # Messages of errors that must not leak internal detail are replaced
    # by default_message in API responses.
    expose_message = True

    def __init__(self, message: Optional[str] = None, *, status_code: Optional[int] = None):
        self.message = message or self.default_message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.message)

    @property
    def public_message(self) -> str:
        return self.message if self.expose_message else self.default_message


class BusinessValidationError(DomainError):
    """Input is well-formed but violates a business rule (dates, amounts, durations)."""

    status_code = 400
    error_code = 'VALIDATION_ERROR'
    default_message = 'Validation error.'


class NotFoundError(DomainError):
    """Unknown record; never reveals which lookup failed."""

    status_code = 404
    error_code = 'NOT_FOUND'
    default_message = 'Not found'
    expose_message = False


class NotAuthorizedError(DomainError):
    """Ownership or role guard failure; never reveals why."""

    status_code = 403
    error_code = 'FORBIDDEN'
    default_message = 'Forbidden'
    expose_message = False
