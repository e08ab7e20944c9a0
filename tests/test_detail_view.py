"""Tests for the photo detail page."""

import asyncio

from photoshare.adapters.auth_session import InMemoryAuthSession
from photoshare.adapters.viewport import WindowViewport
from photoshare.domain.errors import TransportError
from photoshare.domain.models import Photo, User, parse_photo
from photoshare.services import messages
from photoshare.services.comments import CommentFeedCoordinator
from photoshare.services.detail_view import (
    DEFAULT_AVATAR_URL,
    LOADING_TEXT,
    PhotoDetailPage,
    photo_metadata_lines,
)
from photoshare.services.layout import ResponsiveLayoutCalculator
from photoshare.services.messages import RecordingNotifier
from photoshare.services.photo_detail import PhotoDetailLoader
from tests.conftest import FakePhotosClient, comment_payload, photo_payload


def _page(
    client: FakePhotosClient,
    auth_session: InMemoryAuthSession,
    initial_photo: Photo | None = None,
) -> tuple[PhotoDetailPage, WindowViewport, RecordingNotifier]:
    viewport = WindowViewport(initial_width=1280)
    notifier = RecordingNotifier()
    page = PhotoDetailPage(
        auth_session=auth_session,
        loader=PhotoDetailLoader(client, initial_photo=initial_photo),
        feed=CommentFeedCoordinator(client),
        layout=ResponsiveLayoutCalculator(viewport),
        notifier=notifier,
    )
    return page, viewport, notifier


def test_page_renders_placeholder_until_loaded(
    photos_client: FakePhotosClient, auth_session: InMemoryAuthSession
) -> None:
    page, _, _ = _page(photos_client, auth_session)

    asyncio.run(page.mount("missing"))

    assert page.render() == [LOADING_TEXT]


def test_page_loads_photo_and_comments(
    photos_client: FakePhotosClient, auth_session: InMemoryAuthSession
) -> None:
    photos_client.photos["p1"] = photo_payload()
    photos_client.comments["p1"] = [comment_payload("c1", "lovely light")]
    page, viewport, _ = _page(photos_client, auth_session)

    asyncio.run(page.mount("p1"))
    lines = page.render()

    assert lines[0] == f"Aki ({DEFAULT_AVATAR_URL})"
    assert "Camera: X100V" in lines
    assert "Taken: 2023/5/1" in lines
    assert "Image: https://cdn.test/p1.png [75% x 300px]" in lines
    assert lines[-1] == "Ren: lovely light"
    assert page.layout.display_width == 1280
    viewport.resize(640)
    assert page.layout.display_width == 640


def test_page_with_initial_photo_fetches_only_comments(
    photos_client: FakePhotosClient, auth_session: InMemoryAuthSession
) -> None:
    page, _, _ = _page(photos_client, auth_session, parse_photo(photo_payload()))

    asyncio.run(page.mount("p1"))

    assert photos_client.fetched_photos == []
    assert photos_client.fetched_comments == ["p1"]


def test_post_comment_appends_for_signed_in_user(
    photos_client: FakePhotosClient, auth_session: InMemoryAuthSession
) -> None:
    page, _, notifier = _page(photos_client, auth_session, parse_photo(photo_payload()))

    async def scenario() -> None:
        await page.mount("p1")
        await page.post_comment("hello")

    asyncio.run(scenario())

    assert page.render()[-1] == "Aki: hello"
    assert notifier.messages == []


def test_post_comment_signed_out_alerts(photos_client: FakePhotosClient) -> None:
    page, _, notifier = _page(
        photos_client, InMemoryAuthSession(), parse_photo(photo_payload())
    )

    async def scenario() -> None:
        await page.mount("p1")
        assert await page.post_comment("hello") is None

    asyncio.run(scenario())

    assert notifier.messages == [messages.NOT_SIGNED_IN]
    assert photos_client.posted == []


def test_post_comment_failure_alerts(
    photos_client: FakePhotosClient, auth_session: InMemoryAuthSession
) -> None:
    photos_client.post_error = TransportError("down")
    page, _, notifier = _page(photos_client, auth_session, parse_photo(photo_payload()))

    async def scenario() -> None:
        await page.mount("p1")
        await page.post_comment("hello")

    asyncio.run(scenario())

    assert notifier.messages == [messages.COMMENT_FAILED]
    assert page.feed.entries == []


def test_unmount_releases_viewport_listener(
    photos_client: FakePhotosClient, auth_session: InMemoryAuthSession
) -> None:
    page, viewport, _ = _page(photos_client, auth_session, parse_photo(photo_payload()))

    async def scenario() -> None:
        await page.mount("p1")
        await page.unmount()

    asyncio.run(scenario())

    assert viewport.listener_count == 0


def test_metadata_lines_show_dash_for_missing_values() -> None:
    photo = Photo(id="p1", file_url="https://cdn.test/p1.png", user=User(uid="u1"))

    assert photo_metadata_lines(photo) == [
        "Camera: -",
        "ISO: -",
        "F-number: -",
        "Shutter speed: -",
        "Taken: -",
    ]


def test_post_comment_sends_draft_and_clears_it(
    photos_client: FakePhotosClient, auth_session: InMemoryAuthSession
) -> None:
    page, _, _ = _page(photos_client, auth_session, parse_photo(photo_payload()))

    async def scenario() -> None:
        await page.mount("p1")
        page.edit_draft("from the textarea")
        await page.post_comment()

    asyncio.run(scenario())

    assert photos_client.posted == [("p1", "from the textarea", "token-1")]
    assert page.feed.draft == ""
    assert page.render()[-1] == "Aki: from the textarea"


def test_failed_post_keeps_draft_for_retry(
    photos_client: FakePhotosClient, auth_session: InMemoryAuthSession
) -> None:
    photos_client.post_error = TransportError("down")
    page, _, notifier = _page(photos_client, auth_session, parse_photo(photo_payload()))

    async def scenario() -> None:
        await page.mount("p1")
        page.edit_draft("try again")
        await page.post_comment()

    asyncio.run(scenario())

    assert page.feed.draft == "try again"
    assert notifier.messages == [messages.COMMENT_FAILED]
