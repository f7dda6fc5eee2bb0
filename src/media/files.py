from __future__ import annotations

import base64
import binascii
import mimetypes
from pathlib import Path
from typing import Optional

from src.errors import MediaReadError, UnsupportedMediaError
from src.schemas import MediaPayload


SUPPORTED_MIME_TYPES = frozenset({"image/png", "image/jpeg", "image/jpg", "application/pdf"})

_EXTENSION_MIME = {
    ".png": "image/png",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".pdf": "application/pdf",
}

DEFAULT_MAX_BYTES = 10 * 1024 * 1024


def guess_mime_type(filename: str) -> Optional[str]:
    ext = Path(filename).suffix.lower()
    if ext in _EXTENSION_MIME:
        return _EXTENSION_MIME[ext]
    mime, _ = mimetypes.guess_type(filename)
    return mime


def validate_mime_type(mime_type: Optional[str]) -> str:
    mime = (mime_type or "").strip().lower()
    if mime not in SUPPORTED_MIME_TYPES:
        raise UnsupportedMediaError(f"Unsupported file type: {mime_type!r}")
    return mime


def to_data_url(data: bytes, mime_type: str) -> str:
    b64 = base64.b64encode(data).decode("utf-8")
    return f"data:{mime_type};base64,{b64}"


def strip_data_url_prefix(data_url: str) -> str:
    # "data:<mime>;base64,<payload>" -> "<payload>"
    _, sep, payload = data_url.partition(",")
    return payload if sep else data_url


def decode_media(media: MediaPayload) -> bytes:
    try:
        return base64.b64decode(media.base64_data, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise MediaReadError("Media payload is not valid base64") from exc


def encode_media(
    data: bytes,
    mime_type: Optional[str],
    filename: Optional[str] = None,
    *,
    max_bytes: int = DEFAULT_MAX_BYTES,
) -> MediaPayload:
    """Validate an upload and turn it into the base64 payload sent to the model."""
    mime = validate_mime_type(mime_type)
    if mime == "image/jpg":
        mime = "image/jpeg"

    if not data:
        raise MediaReadError("Uploaded file is empty")
    if len(data) > max_bytes:
        raise MediaReadError(f"Uploaded file is {len(data)} bytes, limit is {max_bytes}")

    return MediaPayload(
        mime_type=mime,
        base64_data=strip_data_url_prefix(to_data_url(data, mime)),
        filename=filename,
    )


def read_media_file(path: Path | str, *, max_bytes: int = DEFAULT_MAX_BYTES) -> MediaPayload:
    p = Path(path)
    mime = guess_mime_type(p.name)
    validate_mime_type(mime)

    try:
        data = p.read_bytes()
    except OSError as exc:
        raise MediaReadError(f"Could not read {p}") from exc

    return encode_media(data, mime, filename=p.name, max_bytes=max_bytes)


def render_pdf_preview(data: bytes, *, zoom: float = 1.5, page_number: int = 0) -> bytes:
    """Rasterise one PDF page to PNG bytes for the preview panel."""
    import fitz  # type: ignore

    try:
        with fitz.open(stream=data, filetype="pdf") as doc:
            if doc.page_count == 0:
                raise MediaReadError("PDF has no pages")
            page = doc.load_page(min(page_number, doc.page_count - 1))
            pix = page.get_pixmap(matrix=fitz.Matrix(zoom, zoom))
            return pix.tobytes("png")
    except MediaReadError:
        raise
    except Exception as exc:
        raise MediaReadError("Could not render PDF preview") from exc
