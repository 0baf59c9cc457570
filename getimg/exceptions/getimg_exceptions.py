"""Custom exceptions for the GetImg API"""
from typing import Optional


class GetImgError(Exception):
    """Base exception for GetImg API errors"""
    def __init__(self, message: str, status_code: Optional[int] = None):
        self.message = message
        self.status_code = status_code
        super().__init__(self.message)


class TransportError(GetImgError):
    """Exception for connection, DNS and timeout failures"""
    pass


class ServiceError(GetImgError):
    """Exception for non-success replies from the service.

    The status code and raw response body are kept verbatim so callers can
    inspect what the service actually said.
    """
    def __init__(self, message: str, status_code: Optional[int] = None, body: str = ""):
        self.body = body
        super().__init__(message, status_code)

    def __str__(self):
        return f"{self.message} (HTTP {self.status_code}): {self.body}"


class AuthError(ServiceError):
    """Exception for rejected or missing API keys (401/403)"""
    pass


class DecodeError(GetImgError):
    """Exception for malformed JSON bodies or base64 image data"""
    pass


class ImageFileError(GetImgError):
    """Exception for local image read/write failures"""
    def __init__(self, message: str, path: str):
        self.path = path
        super().__init__(f"{message}: {path}")
