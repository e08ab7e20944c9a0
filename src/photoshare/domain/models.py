"""Entity models exchanged with the photos API."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from photoshare.domain.errors import SchemaError


class _Entity(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        coerce_numbers_to_str=True,
    )


class User(_Entity):
    """A signed-in user or the author of a photo or comment."""

    uid: str | None = None
    display_name: str | None = None
    avatar_url: str | None = None
    id_token: str | None = Field(default=None, alias="idToken")


class Photo(_Entity):
    """An uploaded image with its camera metadata."""

    id: str
    file_url: str
    width: int | None = None
    height: int | None = None
    camera_model: str | None = None
    iso: str | None = None
    f_value: str | None = None
    shutter_speed: str | None = None
    taken_at: datetime | None = None
    created_at: datetime | None = None
    user: User | None = None

    @property
    def aspect_ratio(self) -> float:
        """Height over width, or 1.0 when either dimension is missing."""
        if not self.width or not self.height:
            return 1.0
        return self.height / self.width


class Comment(_Entity):
    """A text entry attached to a photo."""

    id: str
    content: str
    user: User | None = None
    created_at: datetime | None = None


def parse_photo(payload: object) -> Photo:
    """Validate a photo payload at the API boundary."""
    try:
        return Photo.model_validate(payload)
    except PydanticValidationError as exc:
        raise SchemaError(
            f"Invalid photo payload: {exc.error_count()} error(s)"
        ) from exc


def parse_comment(payload: object) -> Comment:
    """Validate a single comment payload."""
    try:
        return Comment.model_validate(payload)
    except PydanticValidationError as exc:
        raise SchemaError(
            f"Invalid comment payload: {exc.error_count()} error(s)"
        ) from exc


def parse_comments(payload: object) -> list[Comment]:
    """Validate an ordered list of comment payloads."""
    if not isinstance(payload, list):
        raise SchemaError("Expected a list of comments")
    return [parse_comment(item) for item in payload]
