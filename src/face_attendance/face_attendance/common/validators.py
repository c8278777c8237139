from __future__ import annotations

import base64
import binascii
import re
from typing import Optional, Union

from ..core.exceptions import ValidationError

_DATA_URL_PREFIX = re.compile(r"^data:image/[\w.+-]+;base64,\s*", re.IGNORECASE)


def require_non_empty(value: Optional[str], field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value.strip()


def require_min_length(value: Optional[str], field_name: str, min_len: int) -> str:
    if value is None or len(value) < min_len:
        raise ValidationError(f"{field_name} must be at least {min_len} characters")
    return value


def decode_image_payload(payload: Union[str, bytes, None]) -> Optional[bytes]:
    """Turn a raw upload or a (data-URL) base64 string into image bytes."""
    if payload is None:
        return None
    if isinstance(payload, bytes):
        return payload or None

    text = _DATA_URL_PREFIX.sub("", payload.strip())
    if not text:
        return None
    try:
        return base64.b64decode(text, validate=True)
    except (binascii.Error, ValueError):
        raise ValidationError("Image must be base64 encoded")


def require_image(image: Optional[bytes], action: str) -> bytes:
    if not image:
        raise ValidationError(f"Image capture is required for {action}")
    return image
