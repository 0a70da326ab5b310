"""Error taxonomy shared by services, crud helpers and routers."""


class GymDeskError(Exception):
    """Base class for rule violations surfaced to the caller."""

    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationFailed(GymDeskError):
    """Malformed or incomplete input; nothing was written."""


class DuplicateRecord(ValidationFailed):
    """A unique field (phone, member id, plan per trainee) is already taken."""

    status_code = 409


class PreconditionFailed(GymDeskError):
    """The operation is not allowed in the current state (e.g. a non-today date)."""


class NotFound(GymDeskError):
    status_code = 404
