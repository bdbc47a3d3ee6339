import base64
import binascii
import datetime
from io import BytesIO
from typing import Optional, Tuple

from PIL import Image, UnidentifiedImageError

from .request_builder import DATA_URI_PREFIX


def decode_data_uri(data_uri: str) -> Tuple[Optional[Image.Image], Optional[bytes]]:
    """
    data:image/jpeg;base64,... -> (PIL Image, raw bytes).
    Returns (None, None) when the payload is not a readable image.
    """
    if not data_uri.startswith(DATA_URI_PREFIX):
        return None, None
    try:
        raw = base64.b64decode(data_uri[len(DATA_URI_PREFIX):], validate=True)
        img = Image.open(BytesIO(raw))
        img.load()
        return img.convert("RGB"), raw
    except (binascii.Error, UnidentifiedImageError, OSError):
        return None, None


def mask_api_key(api_key: str) -> str:
    if len(api_key) <= 8:
        return "*" * len(api_key)
    return f"{api_key[:4]}{'*' * (len(api_key) - 8)}{api_key[-4:]}"


def get_timestamp() -> str:
    return datetime.datetime.now().strftime("%Y%m%d_%H%M%S")
