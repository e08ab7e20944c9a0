"""Domain models for staged uploads."""

from dataclasses import dataclass


@dataclass(frozen=True)
class PreviewHandle:
    """Opaque reference to a rendered preview of captured bytes."""

    url: str


@dataclass
class UploadSession:
    """Holds the image currently staged for submission."""

    data: bytes | None = None
    mime_type: str | None = None
    filename: str = "upload"

    @property
    def has_image(self) -> bool:
        return self.data is not None

    def stage(self, data: bytes, mime_type: str, filename: str) -> None:
        """Replace the staged image."""
        self.data = data
        self.mime_type = mime_type
        self.filename = filename

    def clear(self) -> None:
        self.data = None
        self.mime_type = None
        self.filename = "upload"
