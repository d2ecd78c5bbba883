"""Turn an uploaded file or a pasted base64 string into image bytes plus a media type."""

from __future__ import annotations

import base64
import binascii
import re
from dataclasses import dataclass

from snapsolve.core.errors import EmptyInputError, InvalidImageEncodingError

DEFAULT_MEDIA_TYPE = "image/png"
_DATA_URL_MARKER = "data:image"
_WHITESPACE = re.compile(r"\s+")


@dataclass(frozen=True)
class NormalizedImage:
    data: bytes
    media_type: str

    @property
    def size(self) -> int:
        return len(self.data)


def _declared_media_type(value: str | None) -> str:
    mime = (value or "").split(";", 1)[0].strip().lower()
    if mime.startswith("image/") and len(mime) > len("image/"):
        return mime
    return DEFAULT_MEDIA_TYPE


def normalize_upload(payload: bytes | None, content_type: str | None = None) -> NormalizedImage:
    if not payload:
        raise EmptyInputError("Please select an image to upload")
    return NormalizedImage(data=bytes(payload), media_type=_declared_media_type(content_type))


def normalize_base64(value: str | None) -> NormalizedImage:
    raw = (value or "").strip()
    if not raw:
        raise EmptyInputError("No image data provided")

    media_type = DEFAULT_MEDIA_TYPE
    if raw.startswith(_DATA_URL_MARKER):
        header, sep, raw = raw.partition(",")
        if not sep:
            raise InvalidImageEncodingError("Malformed data URL: expected ',' before the image data")
        media_type = _declared_media_type(header.removeprefix("data:"))

    encoded = _WHITESPACE.sub("", raw)
    if not encoded:
        raise EmptyInputError("No image data provided")

    padding = -len(encoded) % 4
    try:
        data = base64.b64decode(encoded + "=" * padding, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise InvalidImageEncodingError(f"Image data is not valid base64: {exc}") from exc

    if not data:
        raise EmptyInputError("No image data provided")
    return NormalizedImage(data=data, media_type=media_type)
