"""Custom exception hierarchy for homerun."""

from __future__ import annotations


class HomeRunError(Exception):
    """Base exception for all homerun errors."""


class HomeRunConfigError(HomeRunError):
    """Invalid or missing configuration."""


class HomeRunStorageError(HomeRunError):
    """Key-value storage backend failure (read or write)."""


class HomeRunTransportError(HomeRunError):
    """HTTP-level failure (network, non-200, invalid JSON)."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        url: str = "",
    ) -> None:
        self.status_code = status_code
        self.url = url
        super().__init__(message)


class HomeRunApiError(HomeRunError):
    """Upstream service answered with an application-level error."""

    def __init__(
        self,
        message: str,
        *,
        status: str = "",
        endpoint: str = "",
    ) -> None:
        self.status = status
        self.endpoint = endpoint
        super().__init__(message)


class GeocodeError(HomeRunApiError):
    """The geocoding service returned no candidate or failed.

    A failed geocode never clears a previously resolved coordinate.
    """


class RouteError(HomeRunApiError):
    """The routing service returned no route or failed."""


class PreconditionError(HomeRunError):
    """A user-facing precondition is not met.

    Raised before any state change or side effect happens, so callers can
    surface the message directly.
    """


class MissingAddressError(PreconditionError):
    """Home or work address is empty."""


class MissingCoordinateError(PreconditionError):
    """No resolved work coordinate; save the addresses first."""


class LocationUnsupportedError(PreconditionError):
    """No location provider is available on this device."""
