"""Service-level exceptions, mapped to HTTP responses by the routes."""


class AuthorizationError(Exception):
    """Moderation action attempted without a valid session."""


class AuthenticationError(Exception):
    """Sign-in rejected."""


class RowNotFoundError(LookupError):
    """No row of the given kind has the given id."""


class InvalidTransitionError(ValueError):
    """Requested status change is not allowed."""


class SubmissionValidationError(ValueError):
    """Submission form is missing a required field."""


class StoreWriteError(Exception):
    """Database rejected a write. The message is the raw store error."""


class StorageError(Exception):
    """Object storage rejected an upload or delete."""


class FieldNotEditableError(ValueError):
    """Edit touched a field that moderators cannot change this way."""
