"""Photo detail page: loader, comment thread and layout wired together."""

import logging
from datetime import datetime

from photoshare.adapters.auth_session import AuthSession
from photoshare.domain.errors import PhotoshareError, ValidationError
from photoshare.domain.models import Comment, Photo, User
from photoshare.services.comments import CommentFeedCoordinator, FeedEntry
from photoshare.services.layout import ResponsiveLayoutCalculator
from photoshare.services.messages import COMMENT_FAILED, Notifier
from photoshare.services.photo_detail import PhotoDetailLoader

logger = logging.getLogger(__name__)

LOADING_TEXT = "Loading..."
DEFAULT_AVATAR_URL = "/images/default-avatar.png"
ANONYMOUS = "Anonymous"


class PhotoDetailPage:
    """Composes the detail page components for one page visit."""

    def __init__(  # noqa: PLR0913
        self,
        auth_session: AuthSession,
        loader: PhotoDetailLoader,
        feed: CommentFeedCoordinator,
        layout: ResponsiveLayoutCalculator,
        notifier: Notifier,
    ) -> None:
        self.auth_session = auth_session
        self.loader = loader
        self.feed = feed
        self.layout = layout
        self.notifier = notifier
        self.loader.on_resolved(self._photo_resolved)

    async def mount(self, photo_id: str | None = None) -> None:
        self.layout.mount()
        await self.loader.mount(photo_id)

    async def unmount(self) -> None:
        self.layout.unmount()
        await self.loader.close()
        await self.feed.close()

    async def _photo_resolved(self, photo: Photo) -> None:
        self.layout.set_photo(photo)
        await self.feed.photo_resolved(photo)

    def edit_draft(self, text: str) -> None:
        self.feed.draft = text

    async def post_comment(self, text: str | None = None) -> Comment | None:
        """Post the draft as the signed-in user, alerting on failure.

        The draft is cleared once the server accepts the comment.
        """
        photo = self.loader.photo
        if photo is None:
            return None
        content = self.feed.draft if text is None else text
        try:
            return await self.feed.submit(content, photo, self.auth_session.current())
        except ValidationError as exc:
            self.notifier.alert(str(exc))
        except PhotoshareError as exc:
            logger.warning("Comment post failed for %s: %s", photo.id, exc)
            self.notifier.alert(COMMENT_FAILED)
        return None

    def render(self) -> list[str]:
        """Render the page as plain text lines."""
        photo = self.loader.photo
        if photo is None:
            return [LOADING_TEXT]
        box = self.layout.image_box()
        lines = [
            f"{author_name(photo.user, LOADING_TEXT)} ({avatar_url(photo.user)})",
            *photo_metadata_lines(photo),
            f"Image: {photo.file_url} [{box.width_percent:.0f}% x {box.height}px]",
        ]
        if photo.created_at is not None:
            lines.append(f"Posted: {photo.created_at.isoformat(sep=' ')}")
        lines.extend(comment_line(entry) for entry in self.feed.entries)
        return lines


def author_name(user: User | None, fallback: str = ANONYMOUS) -> str:
    if user is None or not user.display_name:
        return fallback
    return user.display_name


def avatar_url(user: User | None) -> str:
    if user is None or not user.avatar_url:
        return DEFAULT_AVATAR_URL
    return user.avatar_url


def photo_metadata_lines(photo: Photo) -> list[str]:
    """Camera metadata shown beside the photo."""
    return [
        f"Camera: {_or_dash(photo.camera_model)}",
        f"ISO: {_or_dash(photo.iso)}",
        f"F-number: {_or_dash(photo.f_value)}",
        f"Shutter speed: {_or_dash(photo.shutter_speed)}",
        f"Taken: {_format_date(photo.taken_at)}",
    ]


def comment_line(entry: FeedEntry) -> str:
    line = f"{author_name(entry.author)}: {entry.content}"
    if entry.comment is None:
        return f"{line} (sending)"
    return line


def _or_dash(value: str | None) -> str:
    return value if value else "-"


def _format_date(value: datetime | None) -> str:
    if value is None:
        return "-"
    return f"{value.year}/{value.month}/{value.day}"
