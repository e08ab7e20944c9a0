"""User-facing messages and the notifier that shows them."""

import logging
from dataclasses import dataclass, field
from typing import Protocol

from photoshare.domain.errors import (
    DecodeError,
    PhotoshareError,
    SchemaError,
    TransportError,
    UploadError,
    ValidationError,
)

logger = logging.getLogger(__name__)

NOT_SIGNED_IN = "You must be signed in to post."
NO_IMAGE_SELECTED = "Choose an image before posting."
UPLOAD_FAILED = "Upload failed. Please try again."
UPLOAD_TRANSPORT_FAILED = "An error occurred while uploading. Please try again."
UNREADABLE_IMAGE = "The selected file could not be read as an image."
COMMENT_FAILED = "Your comment could not be posted. Please try again."


class Notifier(Protocol):
    """Interface for surfacing messages to the user."""

    def alert(self, message: str) -> None:
        """Show a blocking message to the user."""


@dataclass
class LoggingNotifier(Notifier):
    """Notifier that writes alerts to the log."""

    def alert(self, message: str) -> None:
        logger.warning("alert: %s", message)


@dataclass
class RecordingNotifier(Notifier):
    """Notifier that keeps every alert, for headless sessions and tests."""

    messages: list[str] = field(default_factory=list)

    def alert(self, message: str) -> None:
        self.messages.append(message)


def upload_error_message(error: PhotoshareError) -> str:
    """Map an upload-path error to the message shown to the user."""
    if isinstance(error, ValidationError):
        return str(error) or NOT_SIGNED_IN
    if isinstance(error, DecodeError):
        return UNREADABLE_IMAGE
    if isinstance(error, UploadError | SchemaError):
        return UPLOAD_FAILED
    if isinstance(error, TransportError):
        return UPLOAD_TRANSPORT_FAILED
    return UPLOAD_FAILED
