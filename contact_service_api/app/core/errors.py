"""
Exception hierarchy of the contact service.

Every error raised by the services carries the user-visible outcome and
the HTTP status it maps to, so the API layer can render any of them
through a single exception handler (see ``main.create_app``).  Resolution
failures (unknown login, unknown group) are kept distinct from storage
failures; the latter always abort the operation.
"""

from fastapi import status

from contact_service_api.app.schemas.outcome import Outcome


class ContactServiceError(Exception):
    """Base class for all errors reported to API callers."""

    outcome: Outcome = Outcome.ERROR
    status_code: int = status.HTTP_400_BAD_REQUEST

    def __init__(self, detail: str = "") -> None:
        super().__init__(detail or self.__class__.__name__)
        self.detail = detail or self.__class__.__name__


class UnknownAgentError(ContactServiceError):
    """A login name or agent id does not resolve."""

    outcome = Outcome.UNKNOWN_AGENT
    status_code = status.HTTP_404_NOT_FOUND


class GroupNotFoundError(ContactServiceError):
    """No group is registered under the requested name."""

    outcome = Outcome.NOT_FOUND
    status_code = status.HTTP_404_NOT_FOUND


class AlreadyExistsError(ContactServiceError):
    """A group name is already taken."""

    outcome = Outcome.ALREADY
    status_code = status.HTTP_409_CONFLICT


class ForbiddenError(ContactServiceError):
    """The caller may not read or modify the record."""

    outcome = Outcome.FORBIDDEN
    status_code = status.HTTP_403_FORBIDDEN


class AccessDeniedError(ForbiddenError):
    """Raised by a group handle that was not unlocked by one of its members."""


class StorageFailure(ContactServiceError):
    """The directory store could not complete a read or write."""

    outcome = Outcome.ERROR
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE


class AuthorizationError(StorageFailure):
    """The store rejected a write by an identity that does not own the record."""


class RecordExistsError(StorageFailure):
    """A conditional create hit a key that already exists."""


class VersionConflictError(StorageFailure):
    """A write was based on a record version that is no longer current."""


class CommitConflictError(StorageFailure):
    """A fetch-modify-store cycle kept losing version races."""


class ProfileServiceError(ContactServiceError):
    """The user information service failed or answered with an unexpected payload."""

    outcome = Outcome.ERROR
    status_code = status.HTTP_502_BAD_GATEWAY


class ProfileServiceUnavailable(ProfileServiceError):
    """No user information service is configured."""

    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
