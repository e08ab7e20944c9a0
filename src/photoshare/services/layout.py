"""Viewport-driven sizing for the photo detail page."""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Protocol

from photoshare.domain.models import Photo

logger = logging.getLogger(__name__)

ResizeListener = Callable[[int], None]


class Viewport(Protocol):
    """Interface for the window hosting the page."""

    @property
    def width(self) -> int:
        """Current viewport width in pixels."""

    def add_resize_listener(self, listener: ResizeListener) -> None:
        """Register a resize listener."""

    def remove_resize_listener(self, listener: ResizeListener) -> None:
        """Deregister a resize listener."""


@dataclass(frozen=True)
class ImageBox:
    """Rendered box for the photo: width as a percentage, fixed pixel height."""

    width_percent: float
    height: int


class ResponsiveLayoutCalculator:
    """Tracks the viewport width while mounted."""

    def __init__(self, viewport: Viewport, box_height: int = 300) -> None:
        self.viewport = viewport
        self.box_height = box_height
        self.display_width = 0
        self.photo: Photo | None = None
        self._listener: ResizeListener | None = None

    @property
    def mounted(self) -> bool:
        return self._listener is not None

    def mount(self) -> None:
        """Register the resize listener and apply the current width."""
        if self._listener is not None:
            return
        self._listener = self._on_resize
        self.viewport.add_resize_listener(self._listener)
        self._on_resize(self.viewport.width)

    def unmount(self) -> None:
        if self._listener is None:
            return
        self.viewport.remove_resize_listener(self._listener)
        self._listener = None

    def set_photo(self, photo: Photo | None) -> None:
        """Dependency change: re-register the listener for the new photo."""
        self.photo = photo
        if self.mounted:
            self.unmount()
            self.mount()

    def _on_resize(self, width: int) -> None:
        self.display_width = width

    def image_box(self) -> ImageBox:
        ratio = self.photo.aspect_ratio if self.photo else 1.0
        return ImageBox(width_percent=100 * ratio, height=self.box_height)
