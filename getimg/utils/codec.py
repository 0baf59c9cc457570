"""Base64 transport encoding for image bytes"""
import base64
import binascii

from getimg.exceptions import DecodeError


def encode(data: bytes) -> str:
    """Encode raw bytes as standard, padded base64 text."""
    return base64.b64encode(data).decode("ascii")


def decode(text: str) -> bytes:
    """
    Decode base64 text back into raw bytes.

    Decoding is strict: characters outside the base64 alphabet or a bad
    padding length raise DecodeError instead of yielding partial output.
    Non-zero trailing bits in the last quantum are tolerated, so "QR=="
    decodes to b"A" just like "QQ==".
    """
    try:
        return base64.b64decode(text, validate=True)
    except (binascii.Error, ValueError) as e:
        raise DecodeError(f"Invalid base64 data: {e}") from e
