"""Photo resolution for the detail page."""

import enum
import logging
from collections.abc import Awaitable, Callable

from photoshare.adapters.photos_client import PhotosClient
from photoshare.domain.errors import SchemaError, TransportError
from photoshare.domain.models import Photo, parse_photo
from photoshare.services.lifetime import LifetimeScope, ScopeClosedError

logger = logging.getLogger(__name__)

ResolvedListener = Callable[[Photo], Awaitable[None] | None]


class LoaderState(enum.Enum):
    UNINITIALIZED = "uninitialized"
    LOADING = "loading"
    LOADED = "loaded"
    NOT_FOUND = "not_found"


class PhotoDetailLoader:
    """Resolves the page's photo from an initial value or by id."""

    def __init__(
        self, client: PhotosClient, initial_photo: Photo | None = None
    ) -> None:
        self.client = client
        self.initial_photo = initial_photo
        self.photo: Photo | None = initial_photo
        self.state = LoaderState.LOADED if initial_photo else LoaderState.UNINITIALIZED
        self.photo_id: str | None = initial_photo.id if initial_photo else None
        self._listeners: list[ResolvedListener] = []
        self._scope = LifetimeScope("photo-detail")

    @property
    def is_placeholder(self) -> bool:
        """True whenever no photo is held; loading and not-found look the same."""
        return self.photo is None

    def on_resolved(self, listener: ResolvedListener) -> None:
        self._listeners.append(listener)

    async def mount(self, photo_id: str | None = None) -> None:
        """Publish the initial photo, or start loading the routed one."""
        if self.photo is not None:
            await self._notify(self.photo)
            return
        await self.route_changed(photo_id)

    async def route_changed(self, photo_id: str | None) -> None:
        """Restart resolution for a new route identifier."""
        if not photo_id:
            return
        if (
            self.initial_photo is not None
            and self.initial_photo.id == photo_id
            and self.photo is self.initial_photo
        ):
            self.photo_id = photo_id
            await self._notify(self.initial_photo)
            return
        self.photo_id = photo_id
        self.photo = None
        self.state = LoaderState.UNINITIALIZED
        await self._load(photo_id)

    async def _load(self, photo_id: str) -> None:
        self.state = LoaderState.LOADING
        try:
            raw = await self._scope.run(self.client.get_photo(photo_id))
            photo = parse_photo(raw) if raw is not None else None
        except ScopeClosedError:
            return
        except (TransportError, SchemaError) as exc:
            logger.warning("Failed to load photo %s: %s", photo_id, exc)
            photo = None
        if photo_id != self.photo_id:
            logger.debug("Dropping photo %s for a superseded route", photo_id)
            return
        if photo is None:
            self.state = LoaderState.NOT_FOUND
            return
        self.photo = photo
        self.state = LoaderState.LOADED
        await self._notify(photo)

    async def _notify(self, photo: Photo) -> None:
        for listener in list(self._listeners):
            result = listener(photo)
            if result is not None:
                await result

    async def close(self) -> None:
        """Unmount: cancel the in-flight fetch."""
        await self._scope.close()
