"""Dependency container wiring for the client."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field

from photoshare.adapters.auth_session import AuthSession, InMemoryAuthSession
from photoshare.adapters.photos_client import HttpxPhotosClient, PhotosClient
from photoshare.adapters.viewport import WindowViewport
from photoshare.app_logging import configure_logging
from photoshare.config import Settings, normalize_base_url
from photoshare.domain.models import Photo
from photoshare.services.comments import CommentFeedCoordinator
from photoshare.services.detail_view import PhotoDetailPage
from photoshare.services.image_capture import (
    DiskFileReader,
    FileReader,
    ImageCaptureComponent,
    PreviewRegistry,
)
from photoshare.services.layout import ResponsiveLayoutCalculator, Viewport
from photoshare.services.messages import LoggingNotifier, Notifier
from photoshare.services.photo_detail import PhotoDetailLoader
from photoshare.services.uploads import PhotoListener, UploadModal, UploadSubmitter


@dataclass
class AppContainer:
    """Holds client-wide dependencies and builds per-visit components."""

    settings: Settings
    photos_client: PhotosClient
    auth_session: AuthSession
    viewport: Viewport
    notifier: Notifier
    file_reader: FileReader
    close_resources: Callable[[], Awaitable[None]]
    previews: PreviewRegistry = field(default_factory=PreviewRegistry)

    def open_upload_modal(
        self, on_close: Callable[[], None], on_uploaded: PhotoListener
    ) -> UploadModal:
        """Create and mount an upload modal with a fresh session."""
        modal = UploadModal(
            auth_session=self.auth_session,
            capture=ImageCaptureComponent(self.file_reader, previews=self.previews),
            submitter=UploadSubmitter(self.photos_client),
            notifier=self.notifier,
            on_close=on_close,
            on_uploaded=on_uploaded,
            close_delay=self.settings.modal_close_delay,
        )
        modal.mount()
        return modal

    def photo_detail_page(self, initial_photo: Photo | None = None) -> PhotoDetailPage:
        """Create the components for one visit to a photo's page."""
        return PhotoDetailPage(
            auth_session=self.auth_session,
            loader=PhotoDetailLoader(self.photos_client, initial_photo=initial_photo),
            feed=CommentFeedCoordinator(self.photos_client),
            layout=ResponsiveLayoutCalculator(
                self.viewport, box_height=self.settings.image_box_height
            ),
            notifier=self.notifier,
        )


def build_container(
    settings: Settings | None = None,
    auth_session: AuthSession | None = None,
    viewport: Viewport | None = None,
) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    configure_logging(resolved_settings.log_level)
    photos_client = HttpxPhotosClient.create(
        base_url=normalize_base_url(resolved_settings.api_base_url),
        timeout=resolved_settings.request_timeout,
    )

    async def close_resources() -> None:
        await photos_client.close()

    return AppContainer(
        settings=resolved_settings,
        photos_client=photos_client,
        auth_session=auth_session or InMemoryAuthSession(),
        viewport=viewport or WindowViewport(),
        notifier=LoggingNotifier(),
        file_reader=DiskFileReader(),
        close_resources=close_resources,
    )
