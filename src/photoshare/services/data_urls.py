"""Base64 data URL encoding for captured images."""

import base64
import binascii
import re

from photoshare.domain.errors import DecodeError

_HEADER_PATTERN = re.compile(r"^data:(?P<mime>[^;,][^,]*?);base64$")


def encode_data_url(data: bytes, mime_type: str) -> str:
    """Encode bytes as a self-describing base64 data URL."""
    encoded = base64.b64encode(data).decode("ascii")
    return f"data:{mime_type};base64,{encoded}"


def decode_data_url(data_url: str) -> tuple[bytes, str]:
    """Decode a data URL into raw bytes and its MIME type.

    The MIME type keeps any parameters, so "text/plain;charset=utf-8" comes
    back as written. Raises DecodeError when the header does not name a MIME
    type or the payload is not valid base64.
    """
    header, separator, payload = data_url.partition(",")
    if not separator:
        raise DecodeError("Data URL has no payload separator")
    match = _HEADER_PATTERN.match(header)
    if match is None:
        raise DecodeError(f"Unrecognized data URL header: {header[:40]!r}")
    try:
        data = base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise DecodeError("Data URL payload is not valid base64") from exc
    return data, match.group("mime")


def detect_mime_type(data: bytes) -> str | None:
    """Infer an image MIME type from file signatures."""
    if data.startswith(b"\xff\xd8\xff"):
        return "image/jpeg"
    if data.startswith(b"\x89PNG\r\n\x1a\n"):
        return "image/png"
    if data[:4] == b"RIFF" and data[8:12] == b"WEBP":
        return "image/webp"
    if data[:6] in {b"GIF87a", b"GIF89a"}:
        return "image/gif"
    return None
