from .getimg_exceptions import (
    GetImgError,
    TransportError,
    ServiceError,
    AuthError,
    DecodeError,
    ImageFileError,
)

__all__ = [
    'GetImgError',
    'TransportError',
    'ServiceError',
    'AuthError',
    'DecodeError',
    'ImageFileError',
]
