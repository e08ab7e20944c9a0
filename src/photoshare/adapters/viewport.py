"""In-process viewport adapter."""

from dataclasses import dataclass, field

from photoshare.services.layout import ResizeListener, Viewport


@dataclass
class WindowViewport(Viewport):
    """Viewport whose width is driven by the host through `resize`."""

    initial_width: int = 1024
    _listeners: list[ResizeListener] = field(default_factory=list)

    def __post_init__(self) -> None:
        self._width = self.initial_width

    @property
    def width(self) -> int:
        return self._width

    def add_resize_listener(self, listener: ResizeListener) -> None:
        self._listeners.append(listener)

    def remove_resize_listener(self, listener: ResizeListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    def resize(self, width: int) -> None:
        """Set the width and dispatch a resize event."""
        self._width = width
        for listener in list(self._listeners):
            listener(width)
