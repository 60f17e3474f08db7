"""Domain exceptions."""

from typing import Any


class DomainException(Exception):
    """Base exception for all domain exceptions."""

    # Hey future me, we store message as an attribute so handlers can read it without
    # parsing str(exception). Don't raise this directly - use a subclass so callers
    # can catch precisely.
    def __init__(self, message: str, *args: Any) -> None:
        super().__init__(message, *args)
        self.message = message


class ValidationException(DomainException):
    """Raised when input fails validation (e.g. missing search title).

    HTTP Status: 400
    """

    pass


class ExternalServiceError(DomainException):
    """An external service (MusicBrainz, CAA, artwork host) failed.

    Enrichment code catches this and degrades to heuristics - it must never
    reach the user as a hard failure.
    """

    def __init__(
        self,
        service_name: str,
        message: str,
        status_code: int | None = None,
    ) -> None:
        super().__init__(f"{service_name}: {message}")
        self.service_name = service_name
        self.status_code = status_code


class PlaybackError(DomainException):
    """The playback engine could not load or control a track."""

    def __init__(self, uri: str, message: str) -> None:
        super().__init__(f"Cannot play {uri or '<no uri>'}: {message}")
        self.uri = uri


class PermissionDeniedError(DomainException):
    """Access to device media was denied.

    Surfaces as a gate state on the library, never as a pipeline error.
    """

    pass


__all__ = [
    "DomainException",
    "ExternalServiceError",
    "PermissionDeniedError",
    "PlaybackError",
    "ValidationException",
]
