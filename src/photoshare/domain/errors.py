"""Error taxonomy for the photoshare client."""


class PhotoshareError(Exception):
    """Base class for errors raised by the client layer."""


class ValidationError(PhotoshareError):
    """A required precondition is missing; no request was issued."""


class TransportError(PhotoshareError):
    """The request failed in transit or the response could not be parsed."""


class UploadError(PhotoshareError):
    """The server answered outside the upload success contract."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class DecodeError(PhotoshareError):
    """A captured file is not a well-formed base64 data URL."""


class SchemaError(PhotoshareError):
    """An API payload does not match the expected entity shape."""
