"""Load input images from disk and save generated images back to it"""
from pathlib import Path
from typing import Union

from getimg.exceptions import ImageFileError
from getimg.utils.codec import encode
from getimg.utils.logging_config import get_logger

logger = get_logger(__name__)


def load_and_encode_image(image_path: Union[str, Path]) -> str:
    """
    Read an image file and return its contents as base64 text.

    The bytes are not inspected; format checks are left to the service.
    """
    path = Path(image_path)
    try:
        data = path.read_bytes()
    except FileNotFoundError as e:
        raise ImageFileError("Image file not found", str(path)) from e
    except OSError as e:
        raise ImageFileError(f"Could not read image file ({e.strerror})", str(path)) from e

    logger.debug(f"Loaded {len(data)} bytes from {path}")
    return encode(data)


def save_image(image_data: bytes, filename: Union[str, Path]) -> Path:
    """Write generated image bytes to filename and return the written path."""
    path = Path(filename)
    try:
        path.write_bytes(image_data)
    except OSError as e:
        raise ImageFileError(f"Could not write image file ({e.strerror})", str(path)) from e

    logger.debug(f"Wrote {len(image_data)} bytes to {path}")
    return path
