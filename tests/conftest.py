"""Shared test fixtures."""

import asyncio
from dataclasses import dataclass, field
from pathlib import Path

import pytest

from photoshare.adapters.auth_session import InMemoryAuthSession
from photoshare.adapters.photos_client import ApiResponse, PhotosClient
from photoshare.config import Settings
from photoshare.domain.models import User
from photoshare.services.data_urls import encode_data_url
from photoshare.services.image_capture import FileReader, SelectedFile

PNG_BYTES = b"\x89PNG\r\n\x1a\n\x00\x01"


def photo_payload(photo_id: str = "p1", **overrides: object) -> dict[str, object]:
    payload: dict[str, object] = {
        "id": photo_id,
        "file_url": f"https://cdn.test/{photo_id}.png",
        "width": 400,
        "height": 300,
        "camera_model": "X100V",
        "iso": 200,
        "f_value": 2.8,
        "shutter_speed": "1/250",
        "taken_at": "2023-05-01T10:00:00Z",
        "created_at": "2023-05-02T12:30:00Z",
        "user": {"uid": "u1", "display_name": "Aki", "avatar_url": None},
    }
    payload.update(overrides)
    return payload


def comment_payload(comment_id: str, content: str) -> dict[str, object]:
    return {
        "id": comment_id,
        "content": content,
        "user": {"uid": "u2", "display_name": "Ren"},
        "created_at": "2023-05-03T08:00:00Z",
    }


@dataclass
class FakePhotosClient(PhotosClient):
    """Fake photos client that records calls and returns canned data."""

    upload_response: ApiResponse = field(
        default_factory=lambda: ApiResponse(201, {"photo": photo_payload()})
    )
    photos: dict[str, dict[str, object]] = field(default_factory=dict)
    comments: dict[str, list[object]] = field(default_factory=dict)
    upload_error: Exception | None = None
    post_error: Exception | None = None
    gate: asyncio.Event | None = None
    uploads: list[dict[str, object]] = field(default_factory=list)
    posted: list[tuple[str, str, str]] = field(default_factory=list)
    fetched_photos: list[str] = field(default_factory=list)
    fetched_comments: list[str] = field(default_factory=list)
    _next_comment: int = 0

    async def _wait(self) -> None:
        if self.gate is not None:
            await self.gate.wait()

    async def upload_photo(
        self, image: bytes, mime_type: str, filename: str, user_id: str
    ) -> ApiResponse:
        self.uploads.append(
            {
                "image": image,
                "mime_type": mime_type,
                "filename": filename,
                "user_id": user_id,
            }
        )
        await self._wait()
        if self.upload_error is not None:
            raise self.upload_error
        return self.upload_response

    async def get_photo(self, photo_id: str) -> dict[str, object] | None:
        self.fetched_photos.append(photo_id)
        await self._wait()
        return self.photos.get(photo_id)

    async def list_comments(self, photo_id: str) -> list[object]:
        self.fetched_comments.append(photo_id)
        await self._wait()
        return list(self.comments.get(photo_id, []))

    async def post_comment(
        self, photo_id: str, content: str, id_token: str
    ) -> dict[str, object]:
        self.posted.append((photo_id, content, id_token))
        await self._wait()
        if self.post_error is not None:
            raise self.post_error
        self._next_comment += 1
        return {
            "id": f"new-{self._next_comment}",
            "content": content,
            "user": {"uid": "u1", "display_name": "Aki"},
            "created_at": "2023-05-04T09:00:00Z",
        }


@dataclass
class FakeFileReader(FileReader):
    """File reader serving data URLs from memory, optionally held on a gate."""

    data_urls: dict[str, str] = field(default_factory=dict)
    gates: dict[str, asyncio.Event] = field(default_factory=dict)
    reads: list[str] = field(default_factory=list)

    def add(self, name: str, data: bytes, mime_type: str = "image/png") -> SelectedFile:
        self.data_urls[name] = encode_data_url(data, mime_type)
        return selected(name)

    async def read_as_data_url(self, file: SelectedFile) -> str:
        self.reads.append(file.name)
        gate = self.gates.get(file.name)
        if gate is not None:
            await gate.wait()
        return self.data_urls[file.name]


def selected(name: str) -> SelectedFile:
    return SelectedFile(path=Path("/tmp") / name)


@pytest.fixture
def settings() -> Settings:
    return Settings(api_base_url="https://api.test/", modal_close_delay=0)


@pytest.fixture
def signed_in_user() -> User:
    return User(uid="u1", display_name="Aki", id_token="token-1")


@pytest.fixture
def auth_session(signed_in_user: User) -> InMemoryAuthSession:
    return InMemoryAuthSession(user=signed_in_user)


@pytest.fixture
def photos_client() -> FakePhotosClient:
    return FakePhotosClient()


@pytest.fixture
def file_reader() -> FakeFileReader:
    return FakeFileReader()
