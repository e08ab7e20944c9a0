"""Image capture for the upload modal."""

import asyncio
import logging
import mimetypes
from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol
from uuid import uuid4

from photoshare.domain.uploads import PreviewHandle, UploadSession
from photoshare.services.data_urls import (
    decode_data_url,
    detect_mime_type,
    encode_data_url,
)
from photoshare.services.lifetime import LifetimeScope, caller_cancelled

logger = logging.getLogger(__name__)

DEFAULT_MIME_TYPE = "application/octet-stream"


@dataclass(frozen=True)
class SelectedFile:
    """A file picked by the user."""

    path: Path

    @property
    def name(self) -> str:
        return self.path.name


class FileReader(Protocol):
    """Interface for reading a selected file as a data URL."""

    async def read_as_data_url(self, file: SelectedFile) -> str:
        """Read the file and return `data:<mime>;base64,<payload>`."""


@dataclass
class DiskFileReader(FileReader):
    """Reads files from the local filesystem off the event loop."""

    async def read_as_data_url(self, file: SelectedFile) -> str:
        data = await asyncio.to_thread(file.path.read_bytes)
        mime_type = (
            detect_mime_type(data)
            or mimetypes.guess_type(file.path.name)[0]
            or DEFAULT_MIME_TYPE
        )
        return encode_data_url(data, mime_type)


@dataclass
class PreviewRegistry:
    """Issues preview handles for captured bytes and revokes them."""

    _previews: dict[str, tuple[bytes, str]] = field(default_factory=dict)

    def issue(self, data: bytes, mime_type: str) -> PreviewHandle:
        handle = PreviewHandle(url=f"blob:{uuid4()}")
        self._previews[handle.url] = (data, mime_type)
        return handle

    def revoke(self, handle: PreviewHandle) -> None:
        self._previews.pop(handle.url, None)

    def resolve(self, handle: PreviewHandle) -> tuple[bytes, str] | None:
        return self._previews.get(handle.url)

    @property
    def active_count(self) -> int:
        return len(self._previews)


class ImageCaptureComponent:
    """Turns a selected file into staged upload bytes and a preview.

    Only one read is in flight at a time. Selecting another file cancels the
    pending read, and a read that finishes after being superseded is dropped.
    """

    def __init__(
        self,
        reader: FileReader,
        previews: PreviewRegistry | None = None,
        session: UploadSession | None = None,
    ) -> None:
        self.reader = reader
        self.previews = previews or PreviewRegistry()
        self.session = session or UploadSession()
        self.preview: PreviewHandle | None = None
        self._scope = LifetimeScope("image-capture")
        self._pending: asyncio.Task[str] | None = None
        self._generation = 0

    async def select_file(self, file: SelectedFile | None) -> None:
        """Read, decode and stage the selected file.

        Raises DecodeError when the file cannot be decoded; the staged
        session is left untouched in that case.
        """
        if file is None:
            return
        if self._pending is not None and not self._pending.done():
            logger.debug("Cancelling stale read for a newer selection")
            self._pending.cancel()
        self._generation += 1
        generation = self._generation
        task = self._scope.spawn(self.reader.read_as_data_url(file))
        self._pending = task
        try:
            data_url = await task
        except asyncio.CancelledError:
            if self._is_stale(generation) and not caller_cancelled():
                return
            raise
        finally:
            if self._pending is task:
                self._pending = None
        if self._is_stale(generation):
            return

        data, mime_type = decode_data_url(data_url)
        self.session.stage(data, mime_type, file.name)
        self._replace_preview(self.previews.issue(data, mime_type))
        logger.info("Captured %s (%s, %d bytes)", file.name, mime_type, len(data))

    async def destroy(self) -> None:
        """Drop the staged image, cancel reads and release the preview."""
        await self._scope.close()
        self._pending = None
        self._replace_preview(None)
        self.session.clear()

    def _is_stale(self, generation: int) -> bool:
        return generation != self._generation or self._scope.closed

    def _replace_preview(self, handle: PreviewHandle | None) -> None:
        if self.preview is not None:
            self.previews.revoke(self.preview)
        self.preview = handle
