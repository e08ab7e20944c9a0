"""Comment thread state for the photo detail page."""

import enum
import logging
from dataclasses import dataclass

from photoshare.adapters.photos_client import PhotosClient
from photoshare.domain.errors import PhotoshareError, ValidationError
from photoshare.domain.models import Comment, Photo, User, parse_comment, parse_comments
from photoshare.services.lifetime import LifetimeScope, ScopeClosedError
from photoshare.services.messages import NOT_SIGNED_IN

logger = logging.getLogger(__name__)


class EntryStatus(enum.Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"


@dataclass
class FeedEntry:
    """A comment as displayed: fetched, or posted locally and awaiting the server."""

    content: str
    author: User | None
    status: EntryStatus
    comment: Comment | None = None


class CommentFeedCoordinator:
    """Holds the comment list for the resolved photo.

    The list is replaced wholesale on every fetch and only appended to in
    between. Posted comments are not reconciled against the server until the
    next fetch.
    """

    def __init__(self, client: PhotosClient) -> None:
        self.client = client
        self.entries: list[FeedEntry] = []
        self.photo_id: str | None = None
        self.draft = ""
        self._scope = LifetimeScope("comment-feed")

    @property
    def comments(self) -> list[Comment]:
        """Confirmed comments in display order."""
        return [
            entry.comment
            for entry in self.entries
            if entry.status is EntryStatus.CONFIRMED and entry.comment is not None
        ]

    async def photo_resolved(self, photo: Photo) -> None:
        """Fetch the thread for a newly resolved photo and replace the list."""
        if photo.id != self.photo_id:
            self.entries = []
        self.photo_id = photo.id
        try:
            raw = await self._scope.run(self.client.list_comments(photo.id))
            comments = parse_comments(raw)
        except ScopeClosedError:
            return
        except PhotoshareError as exc:
            logger.warning("Failed to load comments for %s: %s", photo.id, exc)
            return
        if photo.id != self.photo_id:
            logger.debug("Dropping comments for superseded photo %s", photo.id)
            return
        self.entries = [
            FeedEntry(
                content=comment.content,
                author=comment.user,
                status=EntryStatus.CONFIRMED,
                comment=comment,
            )
            for comment in comments
        ]

    async def submit(
        self, text: str, photo: Photo, user: User | None
    ) -> Comment | None:
        """Post a comment and append it to the local thread.

        Raises ValidationError without a request when the user has no ID
        token. A failed post rolls back the pending entry and re-raises.
        """
        if user is None or not user.id_token:
            raise ValidationError(NOT_SIGNED_IN)
        entry = FeedEntry(content=text, author=user, status=EntryStatus.PENDING)
        self.entries.append(entry)
        try:
            raw = await self._scope.run(
                self.client.post_comment(photo.id, text, user.id_token)
            )
            comment = parse_comment(raw)
        except ScopeClosedError:
            return None
        except PhotoshareError:
            self.entries = [item for item in self.entries if item is not entry]
            raise
        entry.comment = comment
        entry.content = comment.content
        entry.status = EntryStatus.CONFIRMED
        self.draft = ""
        return comment

    async def close(self) -> None:
        """Unmount: cancel in-flight fetches and posts."""
        await self._scope.close()
