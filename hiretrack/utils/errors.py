"""
Typed errors raised by the service layer.

Each error carries the HTTP status it maps to; the handlers registered in
``hiretrack.main`` turn them into ``{"detail": ...}`` responses.
"""


class HireTrackError(Exception):
    status_code = 500

    def __init__(self, message: str, **extra):
        super().__init__(message)
        self.message = message
        self.extra = extra


class ValidationError(HireTrackError):
    status_code = 400


class AuthenticationError(HireTrackError):
    status_code = 401


class ForbiddenError(HireTrackError):
    status_code = 403


class NotFoundError(HireTrackError):
    status_code = 404


class ConflictError(HireTrackError):
    status_code = 409


class InvalidTransitionError(ConflictError):
    """A status change that the entity's transition table does not allow."""

    def __init__(self, entity: str, current: str, target: str):
        super().__init__(
            f"Cannot move {entity} from '{current}' to '{target}'",
            entity=entity,
            current=current,
            target=target,
        )
        self.entity = entity
        self.current = current
        self.target = target


class RequestTimeoutError(HireTrackError):
    """The request ran past its deadline; its writes are not committed."""

    status_code = 504
