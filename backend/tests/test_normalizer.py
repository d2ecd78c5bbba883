import base64

import pytest

from snapsolve.core.errors import EmptyInputError, InvalidImageEncodingError
from snapsolve.pipeline.normalizer import DEFAULT_MEDIA_TYPE, normalize_base64, normalize_upload

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 32


def test_upload_keeps_bytes_and_declared_type():
    image = normalize_upload(PNG_BYTES, "image/jpeg")

    assert image.data == PNG_BYTES
    assert image.media_type == "image/jpeg"
    assert image.size == len(PNG_BYTES)


def test_upload_falls_back_to_png_for_non_image_type():
    assert normalize_upload(PNG_BYTES, "application/octet-stream").media_type == DEFAULT_MEDIA_TYPE
    assert normalize_upload(PNG_BYTES, None).media_type == DEFAULT_MEDIA_TYPE


@pytest.mark.parametrize("payload", [b"", None])
def test_upload_rejects_empty_payload(payload):
    with pytest.raises(EmptyInputError):
        normalize_upload(payload, "image/png")


def test_base64_with_data_url_prefix():
    encoded = base64.b64encode(PNG_BYTES).decode("ascii")

    image = normalize_base64(f"data:image/jpeg;base64,{encoded}")

    assert image.data == PNG_BYTES
    assert image.media_type == "image/jpeg"


def test_base64_without_prefix_defaults_to_png():
    encoded = base64.b64encode(PNG_BYTES).decode("ascii")

    image = normalize_base64(encoded)

    assert image.data == PNG_BYTES
    assert image.media_type == "image/png"


def test_base64_tolerates_line_breaks_and_missing_padding():
    encoded = base64.b64encode(b"hello").decode("ascii")
    assert encoded.endswith("=")

    image = normalize_base64("  " + encoded[:4] + "\n" + encoded[4:].rstrip("=") + "\n")

    assert image.data == b"hello"


def test_base64_normalization_is_idempotent():
    first = normalize_base64("data:image/png;base64," + base64.b64encode(PNG_BYTES).decode("ascii"))
    second = normalize_base64(base64.b64encode(first.data).decode("ascii"))

    assert second == first


@pytest.mark.parametrize("value", [None, "", "   ", "data:image/png;base64,"])
def test_base64_rejects_empty_input(value):
    with pytest.raises(EmptyInputError):
        normalize_base64(value)


def test_data_url_without_comma_is_malformed():
    with pytest.raises(InvalidImageEncodingError, match="Malformed data URL"):
        normalize_base64("data:image/png;base64")


def test_base64_rejects_garbage():
    with pytest.raises(InvalidImageEncodingError):
        normalize_base64("this is not base64!!")
