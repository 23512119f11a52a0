"""Error types raised by the client."""


class GPhotosError(Exception):
    """Base class for client failures."""


class AuthenticationError(GPhotosError):
    """Login or anti-forgery token derivation failed."""


class TransportError(GPhotosError):
    """A request failed at the network level or returned a mandatory non-2xx."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class ParseError(GPhotosError):
    """A response body did not have the expected prefix, JSON, or key shape."""


class UploadError(GPhotosError):
    """The resumable upload handshake did not reach the finalized state."""

    def __init__(self, message: str, state: str | None = None) -> None:
        super().__init__(message)
        self.state = state
