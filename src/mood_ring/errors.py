from __future__ import annotations


class CatalogError(Exception):
    """Base class for failures talking to the Spotify catalog."""


class NetworkError(CatalogError):
    """The request never produced an HTTP response (DNS, connect, timeout)."""


class ApiError(CatalogError):
    """Spotify answered with a non-2xx status or a payload we could not read."""

    def __init__(self, message: str, status: int | None = None) -> None:
        super().__init__(message)
        self.status = status


class StartupTokenError(CatalogError):
    """The client-credentials exchange failed while starting a session."""


class ArtistNotFoundError(LookupError):
    pass


class EmptySearchError(ValueError):
    pass


class SessionStateError(RuntimeError):
    pass


class SearchInProgressError(SessionStateError):
    pass


class EmptyFeatureSetError(ValueError):
    pass
