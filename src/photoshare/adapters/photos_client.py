"""Photos API client."""

import json
import logging
from dataclasses import dataclass
from typing import Protocol

import httpx

from photoshare.domain.errors import TransportError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ApiResponse:
    """Status code and decoded JSON body of an API call."""

    status_code: int
    payload: object

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300


class PhotosClient(Protocol):
    """Interface for the photo and comment endpoints."""

    async def upload_photo(
        self, image: bytes, mime_type: str, filename: str, user_id: str
    ) -> ApiResponse:
        """Upload an image as multipart form data."""

    async def get_photo(self, photo_id: str) -> dict[str, object] | None:
        """Return a raw photo record, or None when it does not exist."""

    async def list_comments(self, photo_id: str) -> list[object]:
        """Return the raw comment list for a photo."""

    async def post_comment(
        self, photo_id: str, content: str, id_token: str
    ) -> dict[str, object]:
        """Create a comment and return the raw record."""


@dataclass
class HttpxPhotosClient(PhotosClient):
    """Photos client implemented with httpx."""

    base_url: str
    http_client: httpx.AsyncClient
    timeout: float | None = None

    @classmethod
    def create(cls, base_url: str, timeout: float | None = None) -> "HttpxPhotosClient":
        """Create a photos client with a managed httpx session."""
        return cls(base_url=base_url, http_client=httpx.AsyncClient(), timeout=timeout)

    def _url(self, path: str) -> str:
        return f"{self.base_url}/api/v1{path}"

    async def _send(self, method: str, path: str, **kwargs: object) -> httpx.Response:
        try:
            return await self.http_client.request(
                method, self._url(path), timeout=self.timeout, **kwargs
            )
        except httpx.HTTPError as exc:
            logger.warning("%s %s failed: %s", method, path, exc)
            raise TransportError(f"{method} {path} failed") from exc

    async def upload_photo(
        self, image: bytes, mime_type: str, filename: str, user_id: str
    ) -> ApiResponse:
        """Upload an image via POST /photos."""
        response = await self._send(
            "POST",
            "/photos",
            files={"image": (filename, image, mime_type)},
            data={"user_id": user_id},
        )
        try:
            payload = _decode_json(response)
        except TransportError:
            if response.is_success:
                raise
            payload = None
        return ApiResponse(status_code=response.status_code, payload=payload)

    async def get_photo(self, photo_id: str) -> dict[str, object] | None:
        """Fetch a photo via GET /photos/{id}."""
        response = await self._send("GET", f"/photos/{photo_id}")
        if response.status_code == httpx.codes.NOT_FOUND:
            return None
        _raise_for_status(response)
        payload = _decode_json(response)
        if payload is None:
            return None
        if not isinstance(payload, dict):
            raise TransportError("Photo response is not an object")
        return payload

    async def list_comments(self, photo_id: str) -> list[object]:
        """Fetch comments via GET /photos/{id}/comments."""
        response = await self._send("GET", f"/photos/{photo_id}/comments")
        _raise_for_status(response)
        payload = _decode_json(response)
        if not isinstance(payload, list):
            raise TransportError("Comment response is not a list")
        return payload

    async def post_comment(
        self, photo_id: str, content: str, id_token: str
    ) -> dict[str, object]:
        """Create a comment via POST /photos/{id}/comments."""
        response = await self._send(
            "POST",
            f"/photos/{photo_id}/comments",
            json={"content": content},
            headers={"Authorization": f"Bearer {id_token}"},
        )
        _raise_for_status(response)
        payload = _decode_json(response)
        if not isinstance(payload, dict):
            raise TransportError("Comment response is not an object")
        return payload

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()


def _raise_for_status(response: httpx.Response) -> None:
    try:
        response.raise_for_status()
    except httpx.HTTPStatusError as exc:
        raise TransportError(
            f"Unexpected status {response.status_code} from {response.request.url.path}"
        ) from exc


def _decode_json(response: httpx.Response) -> object:
    if not response.content:
        return None
    try:
        return response.json()
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise TransportError("Response body is not valid JSON") from exc
