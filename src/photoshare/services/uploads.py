"""Photo upload submission and the upload modal lifecycle."""

import asyncio
import enum
import logging
from collections.abc import Callable
from dataclasses import dataclass

from photoshare.adapters.auth_session import AuthSession, Unsubscribe
from photoshare.adapters.photos_client import PhotosClient
from photoshare.domain.errors import (
    DecodeError,
    PhotoshareError,
    UploadError,
    ValidationError,
)
from photoshare.domain.models import Photo, User, parse_photo
from photoshare.domain.uploads import UploadSession
from photoshare.services.image_capture import ImageCaptureComponent, SelectedFile
from photoshare.services.lifetime import LifetimeScope, ScopeClosedError
from photoshare.services.messages import (
    NO_IMAGE_SELECTED,
    NOT_SIGNED_IN,
    Notifier,
    upload_error_message,
)

logger = logging.getLogger(__name__)

PhotoListener = Callable[[Photo], None]


@dataclass
class UploadSubmitter:
    """Validates an upload and sends it to the photos endpoint."""

    client: PhotosClient

    async def submit(self, session: UploadSession, user: User | None) -> Photo:
        """Upload the staged image on behalf of the user.

        Raises ValidationError before any request when the user or the image
        is missing, UploadError when the server answers outside the success
        contract, and TransportError when the request itself fails.
        """
        if user is None or not user.uid:
            raise ValidationError(NOT_SIGNED_IN)
        if session.data is None:
            raise ValidationError(NO_IMAGE_SELECTED)

        response = await self.client.upload_photo(
            image=session.data,
            mime_type=session.mime_type or "application/octet-stream",
            filename=session.filename,
            user_id=user.uid,
        )
        payload = response.payload
        if not response.ok:
            raise UploadError(
                f"Upload rejected with status {response.status_code}",
                status_code=response.status_code,
            )
        if not isinstance(payload, dict) or not payload.get("photo"):
            raise UploadError(
                "Upload response has no photo", status_code=response.status_code
            )
        photo = parse_photo(payload["photo"])
        logger.info("Uploaded photo %s for user %s", photo.id, user.uid)
        return photo


class ModalState(enum.Enum):
    OPEN = "open"
    CLOSING = "closing"
    CLOSED = "closed"


class UploadModal:
    """Upload dialog: identity gate, image capture, submit and close.

    The session lives only while the modal is open. Failures are reported
    through the notifier and leave the modal open with the session intact so
    the user can retry by hand.
    """

    def __init__(  # noqa: PLR0913
        self,
        auth_session: AuthSession,
        capture: ImageCaptureComponent,
        submitter: UploadSubmitter,
        notifier: Notifier,
        on_close: Callable[[], None],
        on_uploaded: PhotoListener,
        close_delay: float = 0.3,
    ) -> None:
        self.auth_session = auth_session
        self.capture = capture
        self.submitter = submitter
        self.notifier = notifier
        self.on_close = on_close
        self.on_uploaded = on_uploaded
        self.close_delay = close_delay
        self.state = ModalState.OPEN
        self.user: User | None = None
        self.submitting = False
        self._uploaded: Photo | None = None
        self._unsubscribe: Unsubscribe | None = None
        self._scope = LifetimeScope("upload-modal")

    @property
    def session(self) -> UploadSession:
        return self.capture.session

    def mount(self) -> None:
        """Subscribe to identity changes."""
        if self._unsubscribe is None:
            self._unsubscribe = self.auth_session.subscribe(self._on_identity)

    def unmount(self) -> None:
        """Cancel the identity subscription."""
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    def _on_identity(self, user: User | None) -> None:
        self.user = user

    async def select_file(self, file: SelectedFile | None) -> None:
        """Stage a file, alerting instead of raising when it cannot be decoded."""
        if self.state is not ModalState.OPEN:
            return
        try:
            await self.capture.select_file(file)
        except DecodeError as exc:
            logger.warning("Rejected selected file: %s", exc)
            self.notifier.alert(upload_error_message(exc))

    async def post(self) -> Photo | None:
        """Submit the staged image and close the modal on success.

        A post made while another one is in flight is ignored.
        """
        if self.state is not ModalState.OPEN or self.submitting:
            return None
        self.submitting = True
        try:
            photo = await self._scope.run(
                self.submitter.submit(self.session, self.user)
            )
        except ScopeClosedError:
            logger.debug("Upload finished after the modal closed")
            return None
        except PhotoshareError as exc:
            logger.warning("Upload failed: %s", exc)
            self.notifier.alert(upload_error_message(exc))
            return None
        finally:
            self.submitting = False
        self._uploaded = photo
        await self.close()
        return photo

    async def close(self) -> None:
        """Play the exit transition, then close.

        The close callback always fires, even if the transition is cancelled,
        followed by the upload callback when an upload succeeded.
        """
        if self.state is not ModalState.OPEN:
            return
        self.state = ModalState.CLOSING
        try:
            if self.close_delay > 0:
                await asyncio.sleep(self.close_delay)
        finally:
            self.state = ModalState.CLOSED
            self.unmount()
            await self._scope.close()
            await self.capture.destroy()
            self.on_close()
            if self._uploaded is not None:
                self.on_uploaded(self._uploaded)
