import base64
import binascii
import re
from typing import Optional, Tuple

DATA_URL_PAT = re.compile(r"^data:(?P<mime>[\w/+.-]+);base64,(?P<data>.+)$", re.DOTALL)

EXTENSIONS = {
    "image/jpeg": "jpg",
    "image/jpg": "jpg",
    "image/png": "png",
    "image/webp": "webp",
    "application/pdf": "pdf",
}


def is_remote_url(value: str) -> bool:
    """True for images that are already stored and only referenced by URL."""
    return bool(value) and value.startswith(("http://", "https://", "memory://"))


def decode_data_url(value: str) -> Tuple[bytes, str]:
    """
    Decode a base64 data URL as produced by the selfie camera and file pickers.

    Args:
        value (str): data URL, e.g. "data:image/jpeg;base64,/9j/4AAQ...".

    Returns:
        tuple: (raw bytes, mime type).

    Raises:
        ValueError: If the value is not a base64 data URL.
    """
    match = DATA_URL_PAT.match(value or "")
    if not match:
        raise ValueError("Image must be a base64 data URL")
    try:
        content = base64.b64decode(match.group("data"), validate=True)
    except (binascii.Error, ValueError) as exc:
        raise ValueError(f"Invalid base64 image data: {exc}") from exc
    return content, match.group("mime")


def extension_for(mime_type: str) -> Optional[str]:
    return EXTENSIONS.get(mime_type.lower())
