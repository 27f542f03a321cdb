from __future__ import annotations
from PIL import Image, UnidentifiedImageError
import io

EXT_FOR_MIME = {"image/jpeg": "jpg", "image/png": "png", "image/gif": "gif", "image/webp": "webp"}
_MIME_FOR_FORMAT = {"JPEG": "image/jpeg", "PNG": "image/png", "GIF": "image/gif", "WEBP": "image/webp"}
ALLOWED_MIME = set(EXT_FOR_MIME)

def sniff_mime(data: bytes) -> str | None:
    # Detect by content, the client-declared type is ignored
    try:
        with Image.open(io.BytesIO(data)) as img:
            return _MIME_FOR_FORMAT.get(img.format or "")
    except (UnidentifiedImageError, OSError, ValueError):
        return None

def ext_for_mime(mime: str) -> str:
    return EXT_FOR_MIME.get(mime, "bin")
