"""
Error Taxonomy for the News Admin

Every failure the admin pipeline can report is one of these exceptions.
Each carries a user-displayable message and the HTTP status the remote
procedure surface answers with.
"""


class AdminNewsError(Exception):
    """Base class for errors that may be shown to the admin user."""

    status_code = 400
    default_message = "Request could not be completed"

    def __init__(self, message=None):
        self.message = message or self.default_message
        super().__init__(self.message)


class UnauthenticatedError(AdminNewsError):
    """No caller could be resolved from the request."""

    status_code = 401
    default_message = "Not authenticated"


class ForbiddenError(AdminNewsError):
    """The caller is known but does not hold the admin role."""

    status_code = 403
    default_message = "Access denied. Administrator role required"


class ValidationFailedError(AdminNewsError):
    """Input failed schema validation (first failing rule only)."""

    status_code = 400
    default_message = "Invalid data"


class InvalidNameError(ValidationFailedError):
    """A display name normalizes to an empty slug."""

    default_message = "Name must contain at least one letter or digit"


class NotFoundError(AdminNewsError):
    status_code = 404
    default_message = "Record not found"


class BusinessRuleViolation(AdminNewsError):
    status_code = 409
    default_message = "Operation not allowed"


class SlugConflictError(AdminNewsError):
    """Two writers claimed the same slug; the caller may retry."""

    status_code = 409
    default_message = "Another record was saved with the same name at the same time. Please try again"
    retryable = True


class StorageFault(AdminNewsError):
    """Opaque infrastructure failure. The message is always generic."""

    status_code = 500
    default_message = "Unexpected storage error"


class InvalidDialogTransition(Exception):
    """Raised by the dialog reducer for transitions outside its table."""
