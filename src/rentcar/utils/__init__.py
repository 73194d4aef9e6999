# File utilities
from .file_utils import (
    is_remote_url,
    decode_data_url,
    extension_for,
)

__all__ = [
    "is_remote_url",
    "decode_data_url",
    "extension_for",
]
