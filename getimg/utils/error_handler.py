"""
Error reporting utilities for the GetImg command-line tool.
"""

import re
from typing import Iterable, Optional

from getimg.exceptions import (
    AuthError,
    DecodeError,
    GetImgError,
    ImageFileError,
    ServiceError,
    TransportError,
)


def sanitize_error_message(error_message: Optional[str], secrets: Iterable[str] = ()) -> str:
    """
    Remove credentials from an error message.

    Args:
        error_message: Raw error message
        secrets: Literal values (such as the API key) to redact

    Returns:
        Sanitized error message
    """
    if not error_message:
        return "An error occurred"

    sanitized = error_message

    for secret in secrets:
        if secret:
            sanitized = sanitized.replace(secret, "[KEY]")

    # Bearer tokens echoed back by proxies or the service
    sanitized = re.sub(r'Bearer\s+[^\s"\']+', 'Bearer [KEY]', sanitized)

    return sanitized


def get_user_hint(error: Exception) -> Optional[str]:
    """
    Get a short suggestion for the user based on the error type.

    Args:
        error: The exception that ended the command

    Returns:
        Hint text, or None when there is nothing useful to add
    """
    if isinstance(error, AuthError):
        return "Check your API key (--api-key or GETIMG_API_KEY)."
    if isinstance(error, TransportError):
        return "Could not reach the GetImg API. Check your network connection."
    if isinstance(error, ImageFileError):
        return "Check that the file path exists and is accessible."
    if isinstance(error, DecodeError):
        return "The service sent a reply that could not be decoded."
    return None


def describe_error(error: Exception, secrets: Iterable[str] = ()) -> str:
    """
    Build the one-line diagnostic printed when a command fails.

    Service errors keep their status and body verbatim, minus credentials.

    Args:
        error: The exception to describe
        secrets: Literal values to redact from the message

    Returns:
        Diagnostic string
    """
    if isinstance(error, ServiceError):
        label = "Authentication failed" if isinstance(error, AuthError) else "Service error"
        detail = f"{label}: {error}"
    elif isinstance(error, GetImgError):
        detail = f"{type(error).__name__}: {error.message}"
    else:
        detail = f"{type(error).__name__}: {error}"

    detail = sanitize_error_message(detail, secrets)

    hint = get_user_hint(error)
    if hint:
        detail = f"{detail} {hint}"

    return detail
