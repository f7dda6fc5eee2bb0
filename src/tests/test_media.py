import base64
from pathlib import Path

import pytest

from src.errors import MediaReadError, UnsupportedMediaError
from src.media.files import (
    decode_media,
    encode_media,
    guess_mime_type,
    read_media_file,
    strip_data_url_prefix,
    to_data_url,
    validate_mime_type,
)

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 16


@pytest.mark.parametrize("mime", ["image/png", "image/jpeg", "image/jpg", "application/pdf"])
def test_supported_mime_types(mime: str) -> None:
    assert validate_mime_type(mime) == mime


@pytest.mark.parametrize("mime", ["image/gif", "text/plain", "", None])
def test_unsupported_mime_types(mime) -> None:
    with pytest.raises(UnsupportedMediaError):
        validate_mime_type(mime)


def test_guess_mime_type() -> None:
    assert guess_mime_type("Bai_1.JPG") == "image/jpeg"
    assert guess_mime_type("de.pdf") == "application/pdf"
    assert guess_mime_type("anh.gif") == "image/gif"


def test_strip_data_url_prefix() -> None:
    assert strip_data_url_prefix("data:image/png;base64,AAA") == "AAA"
    assert strip_data_url_prefix("AAA") == "AAA"


def test_encode_media() -> None:
    media = encode_media(PNG_BYTES, "image/png", filename="bai.png")

    assert media.mime_type == "image/png"
    assert base64.b64decode(media.base64_data) == PNG_BYTES
    assert media.data_url == to_data_url(PNG_BYTES, "image/png")
    assert decode_media(media) == PNG_BYTES


def test_encode_media_normalizes_jpg() -> None:
    assert encode_media(b"jpeg", "image/jpg").mime_type == "image/jpeg"


def test_encode_media_rejects_gif_before_reading() -> None:
    with pytest.raises(UnsupportedMediaError):
        encode_media(b"GIF89a", "image/gif")


def test_encode_media_rejects_empty_and_oversize() -> None:
    with pytest.raises(MediaReadError):
        encode_media(b"", "image/png")
    with pytest.raises(MediaReadError):
        encode_media(b"x" * 11, "image/png", max_bytes=10)


def test_read_media_file(tmp_path: Path) -> None:
    p = tmp_path / "bai.png"
    p.write_bytes(PNG_BYTES)

    media = read_media_file(p)
    assert media.filename == "bai.png"
    assert decode_media(media) == PNG_BYTES


def test_read_missing_file(tmp_path: Path) -> None:
    with pytest.raises(MediaReadError):
        read_media_file(tmp_path / "missing.png")
