from __future__ import annotations

import base64
import binascii
import re
from typing import Tuple

# Formato PIL -> mime aceptado en el formulario
ACCEPTED_IMAGE_FORMATS = {
    "JPEG": "image/jpeg",
    "PNG": "image/png",
    "WEBP": "image/webp",
}

_DATA_URL_RE = re.compile(r"^data:(?P<mime>image/[a-zA-Z0-9.+-]+);base64,(?P<data>.*)$", re.DOTALL)


def to_data_url(raw: bytes, mime: str) -> str:
    return f"data:{mime};base64,{base64.b64encode(raw).decode('ascii')}"


def decode_data_url(data_url: str) -> Tuple[str, bytes]:
    """
    'data:image/png;base64,....' -> ('image/png', bytes).
    Lanza ValueError si no es un data URL de imagen en base64.
    """
    m = _DATA_URL_RE.match(data_url or "")
    if not m:
        raise ValueError("Not an image data URL.")
    try:
        raw = base64.b64decode(m.group("data"), validate=False)
    except (binascii.Error, ValueError) as exc:
        raise ValueError("Invalid base64 payload in data URL.") from exc
    return m.group("mime").lower(), raw


def is_image_data_url(value) -> bool:
    return isinstance(value, str) and value.startswith("data:image/")
